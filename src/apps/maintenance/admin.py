from django.contrib import admin

from core.admin import BaseModelAdmin
from maintenance.models import MaintenanceRecord, MaintenanceTaskType


@admin.register(MaintenanceRecord)
class MaintenanceRecordAdmin(BaseModelAdmin):
    list_display = (
        "id",
        "bike",
        "status",
        "reported_date",
        "resolved_date",
    )
    list_filter = ("status",)
    search_fields = ("bike__ref_no", "description", "workshop_notes")
    list_select_related = ("bike",)
    ordering = ("-reported_date", "-id")


@admin.register(MaintenanceTaskType)
class MaintenanceTaskTypeAdmin(BaseModelAdmin):
    list_display = ("id", "name", "created_at")
    search_fields = ("name",)
