from rest_framework import serializers
from django.contrib.auth import get_user_model
from Accounts.serializers import UserSerializer
from . import state_machine as fsm
from .models import Country, VisaType, VisaApplication, ApplicationStatusHistory
from .services import BULK_ACTIONS


User = get_user_model()


class CountrySerializer(serializers.ModelSerializer):
    class Meta:
        model = Country
        fields = [
            "id", "name", "code", "flag_emoji",
            "processing_time_min", "processing_time_max",
        ]


class VisaTypeSerializer(serializers.ModelSerializer):
    country_name = serializers.CharField(source="country.name", read_only=True)

    class Meta:
        model = VisaType
        fields = [
            "id", "country", "country_name", "name",
            "description", "fee", "processing_time_days",
        ]


class VisaApplicationSerializer(serializers.ModelSerializer):
    """List/detail representation used by every role."""
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    country_name = serializers.CharField(source="country.name", read_only=True)
    visa_type_name = serializers.CharField(source="visa_type.name", read_only=True)
    fee = serializers.DecimalField(source="visa_type.fee", max_digits=10, decimal_places=2, read_only=True)
    customer = UserSerializer(read_only=True)
    assigned_to_name = serializers.SerializerMethodField()
    allowed_actions = serializers.SerializerMethodField()

    class Meta:
        model = VisaApplication
        fields = [
            "id",
            "application_number",
            "customer",
            "country",
            "country_name",
            "visa_type",
            "visa_type_name",
            "fee",
            "status",
            "status_display",
            "priority",
            "assigned_to",
            "assigned_to_name",
            "purpose_of_visit",
            "intended_arrival_date",
            "intended_departure_date",
            "form_data",
            "submitted_at",
            "reviewed_at",
            "approved_at",
            "rejection_reason",
            "resend_reason",
            "allowed_actions",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_assigned_to_name(self, obj):
        return obj.assigned_to.get_full_name if obj.assigned_to_id else None

    def get_allowed_actions(self, obj):
        return fsm.allowed_actions(obj.status)


class VisaApplicationCreateSerializer(serializers.Serializer):
    """
    Payload for a new application. ``personal_info`` (optional) updates
    the customer's profile in the same request.
    """
    country = serializers.PrimaryKeyRelatedField(queryset=Country.objects.all())
    visa_type = serializers.PrimaryKeyRelatedField(queryset=VisaType.objects.select_related("country"))
    purpose_of_visit = serializers.CharField(max_length=255, required=False, allow_blank=True)
    intended_arrival_date = serializers.DateField(required=False, allow_null=True)
    intended_departure_date = serializers.DateField(required=False, allow_null=True)
    form_data = serializers.JSONField(required=False, allow_null=True)
    personal_info = serializers.DictField(required=False)

    PROFILE_FIELDS = ("date_of_birth", "nationality", "passport_number", "address", "city", "postal_code")

    def validate(self, attrs):
        arrival = attrs.get("intended_arrival_date")
        departure = attrs.get("intended_departure_date")
        if arrival and departure and departure < arrival:
            raise serializers.ValidationError(
                {"intended_departure_date": "Departure date cannot be before arrival date"}
            )
        return attrs

    def validate_personal_info(self, value):
        # ignore keys that aren't profile fields
        return {k: v for k, v in value.items() if k in self.PROFILE_FIELDS}

    def split(self):
        """Return (country, visa_type, application details, profile details)."""
        data = dict(self.validated_data)
        country = data.pop("country")
        visa_type = data.pop("visa_type")
        profile = data.pop("personal_info", None)
        return country, visa_type, data, profile


class StatusHistorySerializer(serializers.ModelSerializer):
    changed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = ApplicationStatusHistory
        fields = ["id", "old_status", "new_status", "changed_by", "changed_by_name", "comments", "created_at"]

    def get_changed_by_name(self, obj):
        return obj.changed_by.get_full_name if obj.changed_by_id else "System"


class SubmitSerializer(serializers.Serializer):
    comments = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()
    comments = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AssignSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()


class BulkActionSerializer(serializers.Serializer):
    application_ids = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    action = serializers.ChoiceField(choices=BULK_ACTIONS)
    comments = serializers.CharField(required=False, allow_blank=True, allow_null=True)
