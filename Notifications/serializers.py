from rest_framework import serializers
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    application_number = serializers.CharField(
        source="application.application_number", read_only=True, default=None
    )

    class Meta:
        model = Notification
        fields = [
            "id", "type", "title", "message", "application",
            "application_number", "is_read", "created_at",
        ]
        read_only_fields = fields
