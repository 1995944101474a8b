from django.urls import path

from api.v1.booking.views import (
    BookingCalendarAPIView,
    BookingsOnDateAPIView,
    BookingViewSet,
    RangeSelectionAPIView,
)

app_name = "booking"

booking_list = BookingViewSet.as_view({"get": "list"})
booking_detail = BookingViewSet.as_view(
    {
        "get": "retrieve",
        "put": "update",
        "patch": "partial_update",
        "delete": "destroy",
    }
)

urlpatterns = [
    path("", booking_list, name="booking-list"),
    path("<int:pk>/", booking_detail, name="booking-detail"),
    path("on-date/", BookingsOnDateAPIView.as_view(), name="booking-on-date"),
    path("calendar/", BookingCalendarAPIView.as_view(), name="booking-calendar"),
    path(
        "range-selection/",
        RangeSelectionAPIView.as_view(),
        name="booking-range-selection",
    ),
]
