from django.contrib import admin
from .models import PaymentOrder

@admin.register(PaymentOrder)
class PaymentOrderAdmin(admin.ModelAdmin):
    list_display = ("external_order_id", "application", "amount", "currency", "status", "verified_at")
    search_fields = ("external_order_id", "external_payment_id", "application__application_number")
    list_filter = ("status", "currency")
