from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response

from api.v1.bike.filters import BikeFilterSet
from api.v1.bike.serializers import (
    BikeOptionsQuerySerializer,
    BikeOptionsSerializer,
    BikeSerializer,
)
from api.v1.booking.serializers import BookingSerializer
from api.v1.maintenance.serializers import MaintenanceRecordSerializer
from bike.models import Bike
from bike.services import BikeService
from booking.models import Booking
from core.api.views import BaseAPIView, BaseModelViewSet
from maintenance.services import MaintenanceService


@extend_schema(
    tags=["Bikes"],
    summary="Bikes CRUD",
    description=(
        "Lists the fleet newest first with status, size, brand, model and text "
        "filters. When both available_from and available_to are given, only bikes "
        "outside the workshop with no booking in that window are returned and the "
        "status filter is ignored. Deleting a bike also removes its maintenance "
        "records and bookings."
    ),
)
class BikeViewSet(BaseModelViewSet):
    serializer_class = BikeSerializer
    queryset = Bike.domain.get_queryset()
    filter_backends = (DjangoFilterBackend,)
    filterset_class = BikeFilterSet

    def retrieve(self, request, *args, **kwargs):
        bike = self.get_object()
        payload = self.get_serializer(bike).data
        payload["maintenance_records"] = MaintenanceRecordSerializer(
            MaintenanceService.history_for_bike(bike), many=True
        ).data
        payload["bookings"] = BookingSerializer(
            Booking.domain.schedule_for_bike(bike.id), many=True
        ).data
        return Response(payload, status=status.HTTP_200_OK)

    def perform_destroy(self, instance):
        BikeService.delete_bike(instance)


@extend_schema(
    tags=["Bikes"],
    summary="Brand and model options",
    description=(
        "Returns the distinct brands and models in the fleet, sorted. Passing a "
        "brand narrows the models to that brand."
    ),
    parameters=[BikeOptionsQuerySerializer],
    responses=BikeOptionsSerializer,
)
class BikeOptionsAPIView(BaseAPIView):
    serializer_class = BikeOptionsSerializer

    def get(self, request, *args, **kwargs):
        query = BikeOptionsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        options = BikeService.catalogue_options(brand=query.validated_data.get("brand"))
        return Response(self.get_serializer(options).data, status=status.HTTP_200_OK)
