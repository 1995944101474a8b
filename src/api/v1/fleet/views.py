from drf_spectacular.utils import OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from bike.services_snapshot import FleetSnapshotService
from core.api.views import BaseAPIView


@extend_schema(
    tags=["Fleet Snapshot"],
    summary="Export fleet snapshot",
    description=(
        "Returns the whole fleet as one JSON document with bikes, "
        "maintenanceRecords, bookings and maintenanceTaskTypes."
    ),
    responses=OpenApiTypes.OBJECT,
)
class FleetExportAPIView(BaseAPIView):
    def get(self, request, *args, **kwargs):
        return Response(FleetSnapshotService.export_snapshot(), status=status.HTTP_200_OK)


@extend_schema(
    tags=["Fleet Snapshot"],
    summary="Import fleet snapshot",
    description=(
        "Replaces the whole fleet with the posted snapshot document in one "
        "transaction. Nothing changes when the document is rejected."
    ),
    request=OpenApiTypes.OBJECT,
    responses=OpenApiTypes.OBJECT,
)
class FleetImportAPIView(BaseAPIView):
    def post(self, request, *args, **kwargs):
        try:
            summary = FleetSnapshotService.import_snapshot(request.data)
        except ValueError as exc:
            raise ValidationError({"snapshot": [str(exc)]}) from exc
        return Response(summary, status=status.HTTP_200_OK)
