from django.db import models
from django.conf import settings
from Accounts.models import BaseModel
import secrets
from django.utils import timezone


def default_application_number():
    date = timezone.now().strftime("%Y%m%d")
    token = secrets.token_hex(4).upper()  # 8 hex chars
    return f"APP-{date}-{token}"


class Country(BaseModel):
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=10, unique=True)
    flag_emoji = models.CharField(max_length=16, blank=True)
    processing_time_min = models.PositiveIntegerField(default=15)
    processing_time_max = models.PositiveIntegerField(default=30)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "countries"

    def __str__(self):
        return self.name


class VisaType(BaseModel):
    country = models.ForeignKey(Country, on_delete=models.CASCADE, related_name="visa_types")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    fee = models.DecimalField(max_digits=10, decimal_places=2)
    processing_time_days = models.PositiveIntegerField(default=30)

    class Meta:
        ordering = ["country__name", "name"]

    def __str__(self):
        return f"{self.name} ({self.country.name})"


class VisaApplication(BaseModel):
    STATUS_CHOICES = [
        ("draft", "Draft"),
        ("submitted", "Submitted"),
        ("under_review", "Under Review"),
        ("approved", "Approved"),
        ("rejected", "Rejected"),
        ("resent", "Sent Back for Changes"),
    ]

    PRIORITY_CHOICES = [
        ("low", "Low"),
        ("normal", "Normal"),
        ("high", "High"),
    ]

    application_number = models.CharField(max_length=50, unique=True, default=default_application_number)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="visa_applications",
    )
    country = models.ForeignKey(Country, on_delete=models.PROTECT, related_name="applications")
    visa_type = models.ForeignKey(VisaType, on_delete=models.PROTECT, related_name="applications")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="draft")
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default="normal")
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_applications",
    )

    # travel details
    purpose_of_visit = models.CharField(max_length=255, blank=True)
    intended_arrival_date = models.DateField(blank=True, null=True)
    intended_departure_date = models.DateField(blank=True, null=True)
    form_data = models.JSONField(blank=True, null=True)  # anything else the form collects

    submitted_at = models.DateTimeField(blank=True, null=True)
    reviewed_at = models.DateTimeField(blank=True, null=True)
    approved_at = models.DateTimeField(blank=True, null=True)
    rejection_reason = models.TextField(blank=True, null=True)
    resend_reason = models.TextField(blank=True, null=True)

    def __str__(self):
        return f"{self.application_number} ({self.country}, {self.visa_type.name})"

    class Meta:
        indexes = [models.Index(fields=["application_number", "status"])]
        ordering = ["-created_at"]


class ApplicationStatusHistory(models.Model):
    """Append-only audit trail; one row per status transition."""

    application = models.ForeignKey(VisaApplication, on_delete=models.CASCADE, related_name="status_history")
    old_status = models.CharField(max_length=20, blank=True, null=True)
    new_status = models.CharField(max_length=20)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="status_changes",
    )
    comments = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name_plural = "application status history"

    def __str__(self):
        return f"{self.application.application_number}: {self.old_status} -> {self.new_status}"
