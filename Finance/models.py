from django.db import models
from Accounts.models import BaseModel
from Applications.models import VisaApplication


class PaymentOrder(BaseModel):
    STATUS_CHOICES = [
        ("created", "Created"),
        ("paid", "Paid"),
        ("failed", "Failed"),
        ("cancelled", "Cancelled"),
    ]

    application = models.ForeignKey(VisaApplication, on_delete=models.CASCADE, related_name="payment_orders")
    external_order_id = models.CharField(max_length=100, unique=True)
    external_payment_id = models.CharField(max_length=100, blank=True, null=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, default="INR")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="created")
    verified_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.external_order_id} - {self.amount} {self.currency} ({self.status})"
