from rest_framework import serializers

from api.v1.bike.serializers import BikeSummarySerializer
from booking.models import Booking
from booking.services import BookingService


class BookingSerializer(serializers.ModelSerializer):
    bike = BikeSummarySerializer(read_only=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    class Meta:
        model = Booking
        fields = (
            "id",
            "bike",
            "booking_number",
            "start_date",
            "end_date",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "bike", "created_at", "updated_at")

    def validate_booking_number(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("booking_number must not be blank.")
        return value

    def create(self, validated_data):
        return BookingService.create_booking(bike=self.context["bike"], **validated_data)

    def update(self, instance, validated_data):
        return BookingService.update_booking(instance, **validated_data)


class BookingsOnDateQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class MonthQuerySerializer(serializers.Serializer):
    month = serializers.RegexField(
        r"^\d{4}-\d{2}$",
        required=False,
        allow_blank=True,
        error_messages={"invalid": "month must use the YYYY-MM format."},
    )


class BookedDatesQuerySerializer(MonthQuerySerializer):
    exclude_booking = serializers.IntegerField(required=False, min_value=1)


class CalendarCellSerializer(serializers.Serializer):
    date = serializers.DateField()
    in_current_month = serializers.BooleanField()
    is_today = serializers.BooleanField()
    booking_count = serializers.IntegerField()
    summary = serializers.CharField(allow_blank=True)


class RangeSelectionSerializer(serializers.Serializer):
    start = serializers.DateField(required=False, allow_null=True, default=None)
    end = serializers.DateField(required=False, allow_null=True, default=None)
    day = serializers.DateField()
    bike = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    exclude_booking = serializers.IntegerField(
        required=False, allow_null=True, min_value=1
    )

    def validate(self, attrs):
        if attrs.get("end") is not None and attrs.get("start") is None:
            raise serializers.ValidationError({"start": "start is required when end is set."})
        return attrs


class RangeSelectionResultSerializer(serializers.Serializer):
    start = serializers.DateField(allow_null=True)
    end = serializers.DateField(allow_null=True)
    is_complete = serializers.BooleanField()
    blocked = serializers.BooleanField()
