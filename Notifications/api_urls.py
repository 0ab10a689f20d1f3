from django.urls import path
from .api_views import NotificationListAPIView, NotificationMarkReadAPIView


app_name = "Notifications"


urlpatterns = [
    path("notifications/", NotificationListAPIView.as_view(), name="notification-list"),
    path("notifications/<int:pk>/read/", NotificationMarkReadAPIView.as_view(), name="notification-read"),
]
