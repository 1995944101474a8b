from django.contrib import admin

from booking.models import Booking
from core.admin import BaseModelAdmin


@admin.register(Booking)
class BookingAdmin(BaseModelAdmin):
    list_display = ("id", "booking_number", "bike", "start_date", "end_date")
    search_fields = ("booking_number", "bike__ref_no", "notes")
    list_filter = ("bike__brand", "bike__size")
    list_select_related = ("bike",)
    ordering = ("start_date", "id")
