"""
URL configuration for the visaportal project.

Everything except the Django admin lives under /api/.
"""
from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path('admin/', admin.site.urls),
    path("api/", include("Accounts.api_urls")),
    path("api/", include("Applications.api_urls")),
    path("api/", include("Finance.api_urls")),
    path("api/", include("Notifications.api_urls")),
    path("api/admin/", include("Admin.api_urls")),
]
