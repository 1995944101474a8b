from django_filters import rest_framework as filters
from rest_framework.exceptions import ValidationError

from booking.models import Booking
from booking.services import BookingService
from core.utils.constants import BikeSize


class BookingFilterSet(filters.FilterSet):
    booking_number = filters.CharFilter()
    brand = filters.CharFilter()
    model = filters.CharFilter()
    size = filters.ChoiceFilter(choices=BikeSize.choices)
    date_from = filters.DateFilter()
    date_to = filters.DateFilter()

    class Meta:
        model = Booking
        fields = (
            "booking_number",
            "brand",
            "model",
            "size",
            "date_from",
            "date_to",
        )

    def filter_queryset(self, queryset):
        data = self.form.cleaned_data
        date_from = data.get("date_from")
        date_to = data.get("date_to")
        if date_from and date_to and date_from > date_to:
            raise ValidationError(
                {"date_to": "date_to must be greater than or equal to date_from."}
            )

        return BookingService.filter_bookings(
            queryset=queryset,
            booking_number=data.get("booking_number"),
            brand=data.get("brand"),
            model=data.get("model"),
            size=data.get("size"),
            date_from=date_from,
            date_to=date_to,
        )
