from rest_framework import serializers
from .models import SystemSetting


class SystemSettingSerializer(serializers.ModelSerializer):
    updated_by = serializers.CharField(source="updated_by.email", read_only=True, default=None)

    class Meta:
        model = SystemSetting
        fields = ["id", "key", "value", "description", "updated_by", "updated_at"]
        read_only_fields = ["id", "updated_by", "updated_at"]
        # upserts by key, so skip the unique validator
        extra_kwargs = {"key": {"validators": []}}
