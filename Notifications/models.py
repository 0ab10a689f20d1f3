from django.db import models
from django.conf import settings


class Notification(models.Model):
    """
    In-app record of a message sent to a user. Written before any
    channel delivery is attempted, so it exists even if every channel fails.
    """
    TYPE_CHOICES = [
        ("email", "Email"),
        ("sms", "SMS"),
        ("system", "System"),
    ]

    # null when the recipient no longer exists; recipient_id keeps who it was meant for
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="notifications",
        null=True,
        blank=True,
    )
    recipient_id = models.CharField(max_length=64)
    application = models.ForeignKey(
        "Applications.VisaApplication",
        on_delete=models.CASCADE,
        related_name="notifications",
        null=True,
        blank=True,
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default="system")
    title = models.CharField(max_length=255)
    message = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Notification to {self.user.email if self.user_id else self.recipient_id}: {self.title}"
