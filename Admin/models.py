from django.db import models
from django.conf import settings


class SystemSetting(models.Model):
    """
    Admin-editable key/value store.

    Notification channel switches live here as
    ``notifications_<channel>_enabled`` = "true" / "false".
    """
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default="")
    description = models.TextField(blank=True, null=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="updated_settings",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return f"{self.key} = {self.value}"
