from django.contrib import admin

from bike.models import Bike
from core.admin import BaseModelAdmin


@admin.register(Bike)
class BikeAdmin(BaseModelAdmin):
    list_display = ("id", "ref_no", "brand", "model", "size", "status", "entry_date")
    search_fields = ("ref_no", "brand", "model")
    list_filter = ("status", "size", "brand")
    ordering = ("-created_at",)
