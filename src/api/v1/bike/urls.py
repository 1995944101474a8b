from django.urls import path

from api.v1.bike.views import BikeOptionsAPIView, BikeViewSet
from api.v1.booking.views import BikeBookedDatesAPIView, BikeBookingListCreateAPIView
from api.v1.maintenance.views import (
    BikeMaintenanceHistoryAPIView,
    ReportFaultAPIView,
    StartMaintenanceAPIView,
)

app_name = "bike"

bike_list = BikeViewSet.as_view({"get": "list", "post": "create"})
bike_detail = BikeViewSet.as_view(
    {
        "get": "retrieve",
        "put": "update",
        "patch": "partial_update",
        "delete": "destroy",
    }
)

urlpatterns = [
    path("", bike_list, name="bike-list"),
    path("options/", BikeOptionsAPIView.as_view(), name="bike-options"),
    path("<int:pk>/", bike_detail, name="bike-detail"),
    path(
        "<int:bike_id>/maintenance/",
        BikeMaintenanceHistoryAPIView.as_view(),
        name="bike-maintenance-history",
    ),
    path(
        "<int:bike_id>/maintenance/report-fault/",
        ReportFaultAPIView.as_view(),
        name="bike-report-fault",
    ),
    path(
        "<int:bike_id>/maintenance/start/",
        StartMaintenanceAPIView.as_view(),
        name="bike-start-maintenance",
    ),
    path(
        "<int:bike_id>/bookings/",
        BikeBookingListCreateAPIView.as_view(),
        name="bike-bookings",
    ),
    path(
        "<int:bike_id>/booked-dates/",
        BikeBookedDatesAPIView.as_view(),
        name="bike-booked-dates",
    ),
]
