from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("user", "application", "type", "title", "is_read", "created_at")
    search_fields = ("user__email", "recipient_id", "title", "message")
    list_filter = ("type", "is_read", "created_at")
