import logging
from rest_framework import generics, status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from Accounts.permissions import IsAdmin
from Notifications.config import NotificationSettings
from .models import SystemSetting
from .serializers import SystemSettingSerializer

logger = logging.getLogger(__name__)


class SystemSettingListAPIView(generics.ListAPIView):
    """
    GET: paginated settings, ordered by key.
    POST: upsert one setting by key.
    """
    queryset = SystemSetting.objects.select_related("updated_by").all()
    serializer_class = SystemSettingSerializer
    permission_classes = [IsAuthenticated, IsAdmin]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        key = serializer.validated_data["key"]
        setting, created = SystemSetting.objects.update_or_create(
            key=key,
            defaults={
                "value": serializer.validated_data.get("value", ""),
                "description": serializer.validated_data.get("description"),
                "updated_by": request.user,
            },
        )
        logger.info("Setting %s %s by %s", key, "created" if created else "updated", request.user.email)

        return Response(
            {"message": "Setting updated successfully", "setting": self.get_serializer(setting).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class SystemSettingDeleteAPIView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def delete(self, request, key):
        setting = get_object_or_404(SystemSetting, key=key)
        setting.delete()
        logger.info("Setting %s deleted by %s", key, request.user.email)
        return Response({"message": "Setting deleted successfully"})


class NotificationSettingsAPIView(APIView):
    """Effective on/off state of each notification channel."""
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        return Response(NotificationSettings.load().as_dict())
