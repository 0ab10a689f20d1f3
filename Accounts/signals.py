from django.db.models.signals import post_save
from django.dispatch import receiver
from .models import User, EmployeeProfile, CustomerProfile


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    """
    Automatically create the profile that matches the user's type.
    """
    if not created:
        return

    if instance.user_type == User.EMPLOYEE:
        EmployeeProfile.objects.get_or_create(user=instance)
    elif instance.user_type == User.CUSTOMER:
        CustomerProfile.objects.get_or_create(user=instance)
