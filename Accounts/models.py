import uuid
import secrets
from django.db import models
from django.contrib.auth.models import AbstractBaseUser
from django.contrib.auth.models import PermissionsMixin
from django.contrib.auth.models import BaseUserManager
from django.utils.translation import gettext_lazy as _
from django.utils import timezone


class BaseModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        abstract = True


class MyUserManager(BaseUserManager):
    """
    A custom user manager to deal with emails as unique identifiers for auth
    instead of usernames. The default that's used is "UserManager"
    """
    def create_user(self, email, password, **extra_fields):
        """
        Creates and saves a User with the given email and password.
        """
        if not email:
            raise ValueError('The Email must be set')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save()
        return user

    def create_superuser(self, email, password, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('user_type', User.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Portal user. One table for customers, employees and admins;
    ``user_type`` decides what the API lets them do.
    """
    CUSTOMER = "customer"
    EMPLOYEE = "employee"
    ADMIN = "admin"

    USER_TYPES = [
        (CUSTOMER, "Customer"),
        (EMPLOYEE, "Employee"),
        (ADMIN, "Admin"),
    ]

    STATUS_CHOICES = [
        ("active", "Active"),
        ("inactive", "Inactive"),
        ("suspended", "Suspended"),
    ]

    user_type = models.CharField(max_length=20, choices=USER_TYPES, default=CUSTOMER)
    email = models.EmailField(unique=True)
    first_name = models.CharField(max_length=30)
    last_name = models.CharField(max_length=30)
    phone = models.CharField(max_length=20, blank=True, null=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default="active",
        help_text=_(
            'Inactive and suspended users cannot log in. '
            'Change this instead of deleting accounts.'
        ),
    )
    is_staff = models.BooleanField(
        _('staff status'),
        default=False,
        help_text=_('Designates whether the user can log into the admin site.'),
    )
    date_joined = models.DateTimeField(default=timezone.now)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']
    objects = MyUserManager()

    def __str__(self):
        return f"{self.email} ({self.user_type})"

    @property
    def is_active(self):
        return self.status == "active"

    @property
    def get_full_name(self):
        '''
        Returns the first_name plus the last_name, with a space in between.
        '''
        full_name = '%s %s' % (self.first_name, self.last_name)
        return full_name.strip()

    def get_short_name(self):
        return self.email

    @property
    def is_customer(self):
        return self.user_type == self.CUSTOMER

    @property
    def is_employee(self):
        return self.user_type == self.EMPLOYEE

    @property
    def is_admin(self):
        return self.user_type == self.ADMIN

    @property
    def is_backoffice(self):
        return self.user_type in (self.EMPLOYEE, self.ADMIN)


def default_employee_id():
    return f"EMP-{secrets.token_hex(3).upper()}"


class EmployeeProfile(models.Model):
    """
    Employee-specific data. ``workload`` counts applications currently
    assigned and drives least-busy auto-assignment.
    """
    ROLE_CHOICES = [
        ("Junior Processor", "Junior Processor"),
        ("Processor", "Processor"),
        ("Senior Processor", "Senior Processor"),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="employee_profile")
    employee_id = models.CharField(max_length=20, unique=True, default=default_employee_id)
    role = models.CharField(max_length=30, choices=ROLE_CHOICES, default="Processor")
    department = models.CharField(max_length=100, blank=True, null=True)
    hire_date = models.DateField(blank=True, null=True)
    workload = models.IntegerField(default=0)
    created_on = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.employee_id} - {self.user.get_full_name} ({self.role})"


class CustomerProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="customer_profile")
    date_of_birth = models.DateField(blank=True, null=True)
    nationality = models.CharField(max_length=100, blank=True)
    passport_number = models.CharField(max_length=50, blank=True)
    address = models.TextField(blank=True, null=True)
    city = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    created_on = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.last_name} ({self.passport_number or 'no passport'})"

    class Meta:
        indexes = [models.Index(fields=["passport_number", "user"])]
