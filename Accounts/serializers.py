from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.db import transaction
from .models import EmployeeProfile

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "phone",
            "user_type",
            "status",
            "full_name",
        ]
        read_only_fields = ["id", "user_type", "status", "full_name"]


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Used when a customer signs up from the public site."""

    password = serializers.CharField(write_only=True, min_length=8)
    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "password",
            "first_name",
            "last_name",
            "phone",
            "user_type",
            "full_name",
        ]
        read_only_fields = ["id", "user_type", "full_name"]

    def create(self, validated_data):
        password = validated_data.pop("password")
        # Public sign-up can only ever produce customers
        validated_data["user_type"] = User.CUSTOMER
        return User.objects.create_user(password=password, **validated_data)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class EmployeeSerializer(serializers.ModelSerializer):
    """
    Admin-facing employee record: User + EmployeeProfile in one payload.
    """
    password = serializers.CharField(write_only=True, min_length=8)
    full_name = serializers.CharField(source="get_full_name", read_only=True)
    employee_id = serializers.CharField(source="employee_profile.employee_id", read_only=True)
    role = serializers.ChoiceField(
        choices=EmployeeProfile.ROLE_CHOICES, source="employee_profile.role", default="Processor"
    )
    department = serializers.CharField(
        source="employee_profile.department", required=False, allow_blank=True, allow_null=True
    )
    workload = serializers.IntegerField(source="employee_profile.workload", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "password",
            "first_name",
            "last_name",
            "phone",
            "status",
            "full_name",
            "employee_id",
            "role",
            "department",
            "workload",
        ]
        read_only_fields = ["id", "status", "full_name", "employee_id", "workload"]

    @transaction.atomic
    def create(self, validated_data):
        profile_data = validated_data.pop("employee_profile", {})
        password = validated_data.pop("password")
        validated_data["user_type"] = User.EMPLOYEE

        # post_save creates the EmployeeProfile; fill it in afterwards
        user = User.objects.create_user(password=password, **validated_data)
        profile = user.employee_profile
        for field, value in profile_data.items():
            setattr(profile, field, value)
        profile.save()
        return user
