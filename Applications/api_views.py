import logging
from rest_framework import generics, status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.contrib.auth import get_user_model
from Accounts.permissions import IsBackOffice, IsCustomer
from .exceptions import ApplicationNotFound, NotPermitted
from .models import Country, VisaType, VisaApplication
from .serializers import (
    CountrySerializer,
    VisaTypeSerializer,
    VisaApplicationSerializer,
    VisaApplicationCreateSerializer,
    StatusHistorySerializer,
    SubmitSerializer,
    StatusUpdateSerializer,
    AssignSerializer,
    BulkActionSerializer,
)
from . import services

User = get_user_model()

logger = logging.getLogger(__name__)


def visible_applications(user):
    """
    Customers see their own applications, employees what is assigned to
    them or still unassigned, admins everything.
    """
    qs = VisaApplication.objects.select_related("customer", "country", "visa_type", "assigned_to")
    if user.is_admin:
        return qs
    if user.is_employee:
        return qs.filter(Q(assigned_to=user) | Q(assigned_to__isnull=True)).exclude(status="draft")
    return qs.filter(customer=user)


def get_application_for(user, pk):
    """Fetch an application the user may see; 404 otherwise."""
    try:
        return visible_applications(user).get(pk=pk)
    except (VisaApplication.DoesNotExist, ValidationError):
        raise ApplicationNotFound()


class CountryListAPIView(generics.ListAPIView):
    serializer_class = CountrySerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return Country.objects.filter(is_active=True)


class VisaTypeListAPIView(generics.ListAPIView):
    serializer_class = VisaTypeSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return VisaType.objects.filter(
            country_id=self.kwargs["country_id"], country__is_active=True, is_active=True
        ).select_related("country")


class VisaApplicationListCreateAPIView(generics.ListAPIView):
    """
    GET: applications visible to the caller, filterable by ?status= and ?priority=.
    POST: a customer starts a new draft application.
    """
    serializer_class = VisaApplicationSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = visible_applications(self.request.user)

        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)

        priority = self.request.query_params.get("priority")
        if priority:
            qs = qs.filter(priority=priority)

        return qs

    def post(self, request, *args, **kwargs):
        if not request.user.is_customer:
            raise NotPermitted("Only customers can create applications")

        serializer = VisaApplicationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        country, visa_type, details, profile = serializer.split()

        application = services.create_application(
            request.user, country, visa_type, details=details, profile=profile
        )
        return Response(
            {
                "message": "Application created successfully",
                "application": VisaApplicationSerializer(application).data,
            },
            status=status.HTTP_201_CREATED,
        )


class VisaApplicationDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        application = get_application_for(request.user, pk)
        return Response(VisaApplicationSerializer(application).data)


class ApplicationHistoryAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        application = get_application_for(request.user, pk)
        history = application.status_history.select_related("changed_by")
        return Response(StatusHistorySerializer(history, many=True).data)


class SubmitApplicationAPIView(APIView):
    """Submit without payment (free visa types, or gateway switched off)."""
    permission_classes = [IsAuthenticated, IsCustomer]

    def post(self, request, pk):
        application = get_application_for(request.user, pk)
        serializer = SubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = services.submit_application(
            application,
            request.user,
            comments=serializer.validated_data.get("comments") or "Application submitted",
        )
        return Response({
            "message": "Application submitted successfully",
            "application": VisaApplicationSerializer(application).data,
        })


class ApplicationStatusAPIView(APIView):
    permission_classes = [IsAuthenticated, IsBackOffice]

    def post(self, request, pk):
        application = get_application_for(request.user, pk)
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = services.update_application_status(
            application,
            request.user,
            serializer.validated_data["status"],
            comments=serializer.validated_data.get("comments"),
        )
        return Response({
            "message": "Application status updated successfully",
            "application": VisaApplicationSerializer(application).data,
        })


class AssignApplicationAPIView(APIView):
    permission_classes = [IsAuthenticated, IsBackOffice]

    def post(self, request, pk):
        application = get_application_for(request.user, pk)
        serializer = AssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = services.assign_application(
            application, request.user, serializer.validated_data["employee_id"]
        )
        return Response({
            "message": "Application assigned successfully",
            "application": VisaApplicationSerializer(application).data,
        })


class BulkActionAPIView(APIView):
    permission_classes = [IsAuthenticated, IsBackOffice]

    def post(self, request):
        serializer = BulkActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.bulk_action(
            request.user,
            serializer.validated_data["application_ids"],
            serializer.validated_data["action"],
            comments=serializer.validated_data.get("comments"),
            queryset=visible_applications(request.user),
        )
        return Response(result)
