from rest_framework import serializers

from bike.models import Bike
from bike.services import BikeService
from core.api.exceptions import DomainValidationError
from core.utils.constants import BikeStatus


class BikeSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Bike
        fields = ("id", "ref_no", "brand", "model", "size", "status")
        read_only_fields = fields


class BikeSerializer(serializers.ModelSerializer):
    ref_no = serializers.CharField(max_length=64)
    status = serializers.ChoiceField(choices=BikeStatus.choices, required=False)
    image_url = serializers.CharField(required=False, allow_blank=True)
    image = serializers.FileField(write_only=True, required=False)

    class Meta:
        model = Bike
        fields = (
            "id",
            "ref_no",
            "brand",
            "model",
            "size",
            "status",
            "entry_date",
            "image_url",
            "image",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_ref_no(self, value: str) -> str:
        normalized = BikeService.normalize_ref_no(value)
        if not BikeService.is_valid_ref_no(normalized):
            raise serializers.ValidationError(
                "ref_no must match pattern [A-Z0-9-]{1,32}."
            )

        existing = Bike.objects.filter(ref_no__iexact=normalized)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Bike with this ref_no already exists.")
        return normalized

    def validate_brand(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("brand must not be blank.")
        return value

    def validate_model(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("model must not be blank.")
        return value

    def validate_image_url(self, value: str) -> str:
        value = value.strip()
        # Blank keeps the current picture on update and picks a placeholder on create.
        if value and not BikeService.is_valid_image_url(value):
            raise serializers.ValidationError(
                "image_url must be an http(s) URL or a base64 data:image URL."
            )
        return value

    def validate(self, attrs):
        image = attrs.pop("image", None)
        if image is not None:
            try:
                attrs["image_url"] = BikeService.image_to_data_url(image)
            except DomainValidationError as exc:
                raise serializers.ValidationError({"image": str(exc)}) from exc
        return attrs

    def create(self, validated_data):
        validated_data.pop("status", None)
        return BikeService.create_bike(**validated_data)

    def update(self, instance, validated_data):
        return BikeService.update_bike(instance, **validated_data)


class BikeOptionsQuerySerializer(serializers.Serializer):
    brand = serializers.CharField(required=False, allow_blank=True)


class BikeOptionsSerializer(serializers.Serializer):
    brands = serializers.ListField(child=serializers.CharField())
    models = serializers.ListField(child=serializers.CharField())
