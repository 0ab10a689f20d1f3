from django.urls import path
from .api_views import *


app_name = "Admin"


urlpatterns = [
    path("settings/", SystemSettingListAPIView.as_view(), name="setting-list"),
    path("settings/<str:key>/", SystemSettingDeleteAPIView.as_view(), name="setting-delete"),
    path("notification-settings/", NotificationSettingsAPIView.as_view(), name="notification-settings"),
]
