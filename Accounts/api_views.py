import logging
from rest_framework import generics, status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.contrib.auth import authenticate, get_user_model
from rest_framework_simplejwt.tokens import RefreshToken
from .serializers import (
    UserSerializer,
    UserRegistrationSerializer,
    LoginSerializer,
    EmployeeSerializer,
)
from .permissions import IsAdmin, IsBackOffice
from Notifications import whatsapp
from Notifications.dispatcher import notify

User = get_user_model()

logger = logging.getLogger(__name__)


def token_response(user, http_status=status.HTTP_200_OK):
    refresh = RefreshToken.for_user(user)
    return Response({
        "refresh": str(refresh),
        "access": str(refresh.access_token),
        "user": UserSerializer(user).data,
    }, status=http_status)


class RegisterCustomerAPIView(generics.CreateAPIView):
    """
    Public registration for new customers
    """
    serializer_class = UserRegistrationSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered customer %s", user.email)

        notify(
            user.id,
            "email",
            "Welcome to VisaPortal",
            "Your account has been created successfully. You can now start a visa application.",
            whatsapp_text=whatsapp.welcome(user.get_full_name),
        )

        return token_response(user, http_status=status.HTTP_201_CREATED)


class LoginAPIView(generics.GenericAPIView):
    """
    JWT login endpoint
    """
    serializer_class = LoginSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request,
            username=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )
        if not user:
            return Response({"error": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)

        return token_response(user)


class CurrentUserView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class EmployeeListCreateAPIView(generics.ListCreateAPIView):
    """
    GET: employees and admins can list employees (for assignment pickers).
    POST: admins create employee accounts.
    """
    serializer_class = EmployeeSerializer

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated(), IsBackOffice()]

    def get_queryset(self):
        qs = (
            User.objects
            .filter(user_type=User.EMPLOYEE)
            .select_related("employee_profile")
            .order_by("first_name", "last_name")
        )
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs
