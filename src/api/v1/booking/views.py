from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from api.v1.booking.filters import BookingFilterSet
from api.v1.booking.serializers import (
    BookedDatesQuerySerializer,
    BookingSerializer,
    BookingsOnDateQuerySerializer,
    CalendarCellSerializer,
    MonthQuerySerializer,
    RangeSelectionResultSerializer,
    RangeSelectionSerializer,
)
from bike.models import Bike
from booking.models import Booking
from booking.services import BookingService, DateRangeSelection
from booking.services_calendar import BookingCalendarService
from core.api.views import BaseAPIView, BaseModelViewSet, ListAPIView


@extend_schema(
    tags=["Bookings"],
    summary="Bookings CRUD",
    description=(
        "Lists bookings earliest first, filtered by booking number, the booked "
        "bike's brand, model and size, and a date_from/date_to window. Edits keep "
        "the bike and reject ranges that overlap another booking of the same bike."
    ),
)
class BookingViewSet(BaseModelViewSet):
    serializer_class = BookingSerializer
    queryset = Booking.domain.get_queryset()
    filter_backends = (DjangoFilterBackend,)
    filterset_class = BookingFilterSet
    http_method_names = ["get", "put", "patch", "delete", "head", "options"]

    def perform_destroy(self, instance):
        BookingService.delete_booking(instance)


@extend_schema(
    tags=["Bookings"],
    summary="Bike bookings",
    description=(
        "Lists one bike's bookings earliest first, or books the bike for an "
        "inclusive date range that must not overlap its other bookings."
    ),
)
class BikeBookingListCreateAPIView(ListAPIView):
    serializer_class = BookingSerializer

    def get_bike(self) -> Bike:
        if not hasattr(self, "_bike"):
            self._bike = get_object_or_404(Bike.objects.all(), pk=self.kwargs["bike_id"])
        return self._bike

    def get_queryset(self):
        return Booking.domain.schedule_for_bike(self.get_bike().id)

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if "bike_id" in self.kwargs:
            context["bike"] = self.get_bike()
        return context

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Bookings"],
    summary="Booked dates of a bike",
    description=(
        "Returns the days of the month grid (42 days starting on a Sunday) already "
        "booked for the bike. exclude_booking leaves out the booking being edited."
    ),
    parameters=[BookedDatesQuerySerializer],
)
class BikeBookedDatesAPIView(BaseAPIView):
    serializer_class = BookedDatesQuerySerializer

    def get(self, request, *args, **kwargs):
        bike = get_object_or_404(Bike.objects.all(), pk=kwargs["bike_id"])
        serializer = self.get_serializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        month_start = BookingCalendarService.parse_month(
            serializer.validated_data.get("month")
        )
        booked = BookingService.booked_dates(
            bike=bike,
            days=BookingCalendarService.grid_days(month_start),
            exclude_booking_id=serializer.validated_data.get("exclude_booking"),
        )
        return Response(
            {
                "month": month_start.strftime("%Y-%m"),
                "dates": [day.isoformat() for day in booked],
            },
            status=status.HTTP_200_OK,
        )


@extend_schema(
    tags=["Bookings"],
    summary="Bookings on a date",
    description="Returns every booking whose inclusive range contains the date.",
    parameters=[BookingsOnDateQuerySerializer],
)
class BookingsOnDateAPIView(BaseAPIView):
    serializer_class = BookingSerializer

    def get(self, request, *args, **kwargs):
        query = BookingsOnDateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        bookings = BookingService.bookings_on(query.validated_data["date"])
        serializer = self.get_serializer(bookings, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)


@extend_schema(
    tags=["Bookings"],
    summary="Booking calendar",
    description=(
        "Returns the 42-day grid for a YYYY-MM month with the number of bookings "
        "per day and a per-model summary. The booking list filters also apply."
    ),
    parameters=[MonthQuerySerializer],
)
class BookingCalendarAPIView(BaseAPIView):
    serializer_class = CalendarCellSerializer

    def get(self, request, *args, **kwargs):
        query = MonthQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        month_start = BookingCalendarService.parse_month(query.validated_data.get("month"))

        filterset = BookingFilterSet(
            data=request.query_params,
            queryset=Booking.domain.get_queryset(),
            request=request,
        )
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)

        cells = BookingCalendarService.month_grid(
            month_start=month_start,
            queryset=filterset.qs,
        )
        return Response(
            {
                "month": month_start.strftime("%Y-%m"),
                "days": self.get_serializer(cells, many=True).data,
            },
            status=status.HTTP_200_OK,
        )


@extend_schema(
    tags=["Bookings"],
    summary="Apply a date range picker click",
    description=(
        "Applies one click to the current (start, end) selection. With a bike, "
        "days already booked for it are blocked and leave the selection unchanged."
    ),
    request=RangeSelectionSerializer,
    responses=RangeSelectionResultSerializer,
)
class RangeSelectionAPIView(BaseAPIView):
    serializer_class = RangeSelectionSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        bike = None
        if data.get("bike"):
            bike = get_object_or_404(Bike.objects.all(), pk=data["bike"])

        selection, blocked = BookingService.select_range(
            selection=DateRangeSelection(start=data.get("start"), end=data.get("end")),
            day=data["day"],
            bike=bike,
            exclude_booking_id=data.get("exclude_booking"),
        )
        result = RangeSelectionResultSerializer(
            {
                "start": selection.start,
                "end": selection.end,
                "is_complete": selection.is_complete,
                "blocked": blocked,
            }
        )
        return Response(result.data, status=status.HTTP_200_OK)
