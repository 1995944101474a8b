from rest_framework import serializers

from api.v1.bike.serializers import BikeSummarySerializer
from maintenance.models import MaintenanceRecord, MaintenanceTaskType
from maintenance.services import MaintenanceTaskTypeService


class MaintenanceRecordSerializer(serializers.ModelSerializer):
    bike_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = MaintenanceRecord
        fields = (
            "id",
            "bike_id",
            "description",
            "tasks",
            "workshop_notes",
            "reported_date",
            "resolved_date",
            "status",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class MaintenanceRecordDetailSerializer(MaintenanceRecordSerializer):
    bike = BikeSummarySerializer(read_only=True)

    class Meta(MaintenanceRecordSerializer.Meta):
        fields = (*MaintenanceRecordSerializer.Meta.fields, "bike")
        read_only_fields = fields


class ReportFaultSerializer(serializers.Serializer):
    description = serializers.CharField()


class ProcessRecordSerializer(serializers.Serializer):
    tasks = serializers.ListField(
        child=serializers.CharField(max_length=64),
        required=False,
    )
    workshop_notes = serializers.CharField(required=False, allow_blank=True)
    conclude = serializers.BooleanField(required=False, default=False)


class OverdueMaintenanceSerializer(serializers.Serializer):
    record = MaintenanceRecordSerializer(read_only=True)
    bike = BikeSummarySerializer(read_only=True)
    days_overdue = serializers.IntegerField(read_only=True)


class MaintenanceTaskTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = MaintenanceTaskType
        fields = ("id", "name", "created_at", "updated_at")
        read_only_fields = ("id", "created_at", "updated_at")

    def create(self, validated_data):
        return MaintenanceTaskTypeService.add_task_type(validated_data["name"])
