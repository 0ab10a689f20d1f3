from rest_framework import serializers
from .models import PaymentOrder


class PaymentOrderSerializer(serializers.ModelSerializer):
    application_number = serializers.CharField(source="application.application_number", read_only=True)
    customer_name = serializers.CharField(source="application.customer.get_full_name", read_only=True)
    visa_type = serializers.CharField(source="application.visa_type.name", read_only=True)
    country = serializers.CharField(source="application.country.name", read_only=True)

    class Meta:
        model = PaymentOrder
        fields = [
            "id",
            "application",
            "application_number",
            "customer_name",
            "visa_type",
            "country",
            "external_order_id",
            "external_payment_id",
            "amount",
            "currency",
            "status",
            "verified_at",
            "created_at",
        ]
        read_only_fields = fields


class VerifyPaymentSerializer(serializers.Serializer):
    external_payment_id = serializers.CharField(max_length=100)
    signature = serializers.CharField(max_length=256)
    external_order_id = serializers.CharField(max_length=100, required=False, allow_blank=True)
