from __future__ import annotations

import base64
import logging
import re
from datetime import date

from django.core.exceptions import ValidationError
from django.core.validators import URLValidator
from django.db import transaction
from django.utils import timezone

from bike.models import Bike
from core.api.exceptions import DomainValidationError
from core.utils.constants import BikeStatus

logger = logging.getLogger(__name__)


class BikeService:
    REF_NO_PATTERN = re.compile(r"^[A-Z0-9-]{1,32}$")
    PLACEHOLDER_IMAGE_TEMPLATE = "https://picsum.photos/seed/bike{token}/400/300"
    MAX_IMAGE_BYTES = 5 * 1024 * 1024
    DATA_IMAGE_URL_PATTERN = re.compile(r"^data:image/[\w.+-]+;base64,[A-Za-z0-9+/=\s]+$")
    HTTP_URL_VALIDATOR = URLValidator(schemes=["http", "https"])

    @classmethod
    def normalize_ref_no(cls, raw_ref_no: str) -> str:
        value = str(raw_ref_no or "")
        value = re.sub(r"\s+", "", value)
        return value.upper()

    @classmethod
    def is_valid_ref_no(cls, ref_no: str) -> bool:
        return bool(cls.REF_NO_PATTERN.fullmatch(cls.normalize_ref_no(ref_no)))

    @classmethod
    def is_valid_image_url(cls, value: str) -> bool:
        """Only http(s) links and inline base64 images are accepted."""
        value = str(value or "").strip()
        if cls.DATA_IMAGE_URL_PATTERN.match(value):
            return True
        try:
            cls.HTTP_URL_VALIDATOR(value)
        except ValidationError:
            return False
        return True

    @classmethod
    def get_by_ref_no(cls, ref_no: str) -> Bike | None:
        return Bike.domain.find_by_ref_no(cls.normalize_ref_no(ref_no))

    @classmethod
    def placeholder_image_url(cls, *, now=None) -> str:
        moment = now or timezone.now()
        return cls.PLACEHOLDER_IMAGE_TEMPLATE.format(
            token=int(moment.timestamp() * 1000)
        )

    @classmethod
    def image_to_data_url(cls, uploaded_file) -> str:
        """Inline an uploaded picture as a base64 data URL stored on the bike."""
        content_type = getattr(uploaded_file, "content_type", "") or ""
        if not content_type.startswith("image/"):
            raise DomainValidationError("Uploaded file must be an image.")
        if uploaded_file.size and uploaded_file.size > cls.MAX_IMAGE_BYTES:
            raise DomainValidationError("Uploaded image must not exceed 5 MB.")

        encoded = base64.b64encode(uploaded_file.read()).decode("ascii")
        return f"data:{content_type};base64,{encoded}"

    @classmethod
    def create_bike(
        cls,
        *,
        ref_no: str,
        brand: str,
        model: str,
        size: str,
        entry_date: date,
        image_url: str | None = None,
    ) -> Bike:
        bike = Bike.objects.create(
            ref_no=cls.normalize_ref_no(ref_no),
            brand=str(brand).strip(),
            model=str(model).strip(),
            size=size,
            entry_date=entry_date,
            status=BikeStatus.AVAILABLE,
            image_url=image_url or cls.placeholder_image_url(),
        )
        logger.info("Bike %s registered (id=%s).", bike.ref_no, bike.id)
        return bike

    @classmethod
    def update_bike(cls, bike: Bike, **changes) -> Bike:
        if "ref_no" in changes:
            changes["ref_no"] = cls.normalize_ref_no(changes["ref_no"])
        for field in ("brand", "model"):
            if field in changes:
                changes[field] = str(changes[field]).strip()
        if not changes.get("image_url"):
            changes.pop("image_url", None)

        for field, value in changes.items():
            setattr(bike, field, value)
        bike.save()
        return bike

    @classmethod
    @transaction.atomic
    def delete_bike(cls, bike: Bike) -> dict[str, int]:
        summary = {
            "maintenance_records": bike.maintenance_records.count(),
            "bookings": bike.bookings.count(),
        }
        ref_no = bike.ref_no
        bike.delete()
        logger.info(
            "Bike %s removed with %s maintenance records and %s bookings.",
            ref_no,
            summary["maintenance_records"],
            summary["bookings"],
        )
        return summary

    @classmethod
    def filter_bikes(
        cls,
        *,
        queryset=None,
        q: str | None = None,
        status: str | None = None,
        size: str | None = None,
        brand: str | None = None,
        model: str | None = None,
        available_from: date | None = None,
        available_to: date | None = None,
    ):
        queryset = queryset if queryset is not None else Bike.domain.get_queryset()

        availability_window = available_from is not None and available_to is not None
        if availability_window:
            if available_from > available_to:
                raise DomainValidationError(
                    "available_to must be greater than or equal to available_from."
                )
            queryset = queryset.available_between(available_from, available_to)
        elif status:
            queryset = queryset.with_status(status)

        if size:
            queryset = queryset.with_size(size)
        if brand:
            queryset = queryset.with_brand(brand)
        if model:
            queryset = queryset.with_model(model)
        if q and q.strip():
            queryset = queryset.search(q.strip())
        return queryset.newest_first()

    @classmethod
    def catalogue_options(cls, *, brand: str | None = None) -> dict[str, list[str]]:
        return {
            "brands": Bike.domain.brands(),
            "models": Bike.domain.models_for(brand=brand or None),
        }
