from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response

from api.v1.maintenance.serializers import (
    MaintenanceRecordDetailSerializer,
    MaintenanceRecordSerializer,
    MaintenanceTaskTypeSerializer,
    OverdueMaintenanceSerializer,
    ProcessRecordSerializer,
    ReportFaultSerializer,
)
from bike.models import Bike
from core.api.views import BaseAPIView, BaseModelViewSet, ListAPIView, RetrieveAPIView
from maintenance.models import MaintenanceRecord, MaintenanceTaskType
from maintenance.services import (
    MaintenanceService,
    MaintenanceTaskTypeService,
    OverdueMaintenanceService,
)


class BikeLookupMixin:
    def get_bike(self) -> Bike:
        return get_object_or_404(Bike.objects.all(), pk=self.kwargs["bike_id"])


@extend_schema(
    tags=["Maintenance"],
    summary="Bike maintenance history",
    description="Returns the maintenance records of one bike, newest reported first.",
)
class BikeMaintenanceHistoryAPIView(BikeLookupMixin, ListAPIView):
    serializer_class = MaintenanceRecordSerializer

    def get_queryset(self):
        return MaintenanceService.history_for_bike(self.get_bike())


@extend_schema(
    tags=["Maintenance"],
    summary="Report a fault",
    description=(
        "Opens a pending maintenance record for the bike. The bike status is "
        "left unchanged."
    ),
)
class ReportFaultAPIView(BikeLookupMixin, BaseAPIView):
    serializer_class = ReportFaultSerializer

    def post(self, request, *args, **kwargs):
        bike = self.get_bike()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = MaintenanceService.report_fault(
            bike=bike,
            description=serializer.validated_data["description"],
        )
        return Response(
            MaintenanceRecordSerializer(record).data,
            status=status.HTTP_201_CREATED,
        )


@extend_schema(
    tags=["Maintenance"],
    summary="Start maintenance",
    description=(
        "Moves the bike into the workshop and opens a pending routine maintenance "
        "record that can be processed straight away."
    ),
    request=None,
)
class StartMaintenanceAPIView(BikeLookupMixin, BaseAPIView):
    serializer_class = MaintenanceRecordDetailSerializer

    def post(self, request, *args, **kwargs):
        record = MaintenanceService.start_maintenance(bike=self.get_bike())
        return Response(
            self.get_serializer(record).data,
            status=status.HTTP_201_CREATED,
        )


@extend_schema(
    tags=["Maintenance"],
    summary="Maintenance record detail",
    description="Returns one maintenance record with its bike.",
)
class MaintenanceRecordDetailAPIView(RetrieveAPIView):
    serializer_class = MaintenanceRecordDetailSerializer
    queryset = MaintenanceRecord.objects.select_related("bike")


@extend_schema(
    tags=["Maintenance"],
    summary="Process maintenance record",
    description=(
        "Replaces the performed tasks and workshop notes. With conclude=true the "
        "record is resolved today and the bike returns to the fleet once it has "
        "no other pending records."
    ),
    request=ProcessRecordSerializer,
    responses=MaintenanceRecordDetailSerializer,
)
class ProcessRecordAPIView(BaseAPIView):
    serializer_class = ProcessRecordSerializer
    queryset = MaintenanceRecord.objects.select_related("bike")

    def post(self, request, *args, **kwargs):
        record = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = MaintenanceService.process_record(
            record=record,
            tasks=serializer.validated_data.get("tasks"),
            workshop_notes=serializer.validated_data.get("workshop_notes"),
            conclude=serializer.validated_data["conclude"],
        )
        return Response(
            MaintenanceRecordDetailSerializer(record).data,
            status=status.HTTP_200_OK,
        )


@extend_schema(
    tags=["Maintenance"],
    summary="Overdue maintenance",
    description=(
        "Lists pending maintenance records reported more than the configured "
        "number of days ago, most overdue first."
    ),
)
class OverdueMaintenanceAPIView(BaseAPIView):
    serializer_class = OverdueMaintenanceSerializer

    def get(self, request, *args, **kwargs):
        overdue = OverdueMaintenanceService.list_overdue()
        serializer = self.get_serializer(overdue, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)


@extend_schema(
    tags=["Maintenance"],
    summary="Maintenance task type catalogue",
    description=(
        "Lists, adds and removes the task labels the workshop can record. "
        "Removing a label does not touch existing records."
    ),
)
class MaintenanceTaskTypeViewSet(BaseModelViewSet):
    serializer_class = MaintenanceTaskTypeSerializer
    queryset = MaintenanceTaskType.domain.get_queryset().order_by("name")
    pagination_class = None

    def perform_destroy(self, instance):
        MaintenanceTaskTypeService.remove_task_type(instance)
