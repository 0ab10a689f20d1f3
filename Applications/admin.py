from django.contrib import admin
from .models import Country, VisaType, VisaApplication, ApplicationStatusHistory


@admin.register(Country)
class CountryAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "processing_time_min", "processing_time_max", "is_active")
    search_fields = ("name", "code")
    list_filter = ("is_active",)


@admin.register(VisaType)
class VisaTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "country", "fee", "processing_time_days", "is_active")
    search_fields = ("name", "country__name")
    list_filter = ("country", "is_active")


class StatusHistoryInline(admin.TabularInline):
    model = ApplicationStatusHistory
    extra = 0
    readonly_fields = ("old_status", "new_status", "changed_by", "comments", "created_at")
    can_delete = False


@admin.register(VisaApplication)
class VisaApplicationAdmin(admin.ModelAdmin):
    list_display = ("application_number", "customer", "country", "visa_type", "assigned_to", "status", "priority", "submitted_at")
    search_fields = ("application_number", "customer__email", "customer__last_name")
    list_filter = ("status", "priority", "country")
    # status only moves through the API so history stays complete
    readonly_fields = ("status", "submitted_at", "reviewed_at", "approved_at")
    inlines = [StatusHistoryInline]
