import itertools
from collections.abc import Callable
from datetime import date

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from bike.models import Bike
from booking.models import Booking
from core.utils.constants import BikeSize, BikeStatus, MaintenanceStatus
from maintenance.models import MaintenanceRecord

User = get_user_model()


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def authed_client_factory() -> Callable[[User], APIClient]:
    def _make(user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _make


@pytest.fixture
def user_factory(db) -> Callable[..., User]:
    seq = itertools.count(1)

    def _create_user(**overrides) -> User:
        idx = next(seq)
        payload = {
            "username": f"user_{idx}",
            "password": "pass1234",
            "first_name": "User",
            "email": f"user_{idx}@example.com",
        }
        payload.update(overrides)
        return User.objects.create_user(**payload)

    return _create_user


@pytest.fixture
def authed_client(authed_client_factory, user_factory) -> APIClient:
    return authed_client_factory(user_factory(username="fleet_manager"))


@pytest.fixture
def bike_factory(db) -> Callable[..., Bike]:
    seq = itertools.count(1)

    def _create_bike(**overrides) -> Bike:
        idx = next(seq)
        payload = {
            "ref_no": f"B{idx:03d}",
            "brand": "Trek",
            "model": "Marlin 5",
            "size": BikeSize.M,
            "status": BikeStatus.AVAILABLE,
            "entry_date": date(2023, 1, 15),
            "image_url": f"https://picsum.photos/seed/bike{idx}/400/300",
        }
        payload.update(overrides)
        return Bike.objects.create(**payload)

    return _create_bike


@pytest.fixture
def maintenance_record_factory(db, bike_factory) -> Callable[..., MaintenanceRecord]:
    def _create_record(**overrides) -> MaintenanceRecord:
        bike = overrides.pop("bike", None) or bike_factory()
        payload = {
            "bike": bike,
            "description": "Rear brake problem.",
            "tasks": [],
            "workshop_notes": "",
            "reported_date": date(2025, 11, 1),
            "status": MaintenanceStatus.PENDING,
        }
        payload.update(overrides)
        return MaintenanceRecord.objects.create(**payload)

    return _create_record


@pytest.fixture
def booking_factory(db, bike_factory) -> Callable[..., Booking]:
    seq = itertools.count(1)

    def _create_booking(**overrides) -> Booking:
        bike = overrides.pop("bike", None) or bike_factory()
        payload = {
            "bike": bike,
            "booking_number": f"R-{next(seq):03d}",
            "start_date": date(2025, 11, 17),
            "end_date": date(2025, 11, 19),
            "notes": "",
        }
        payload.update(overrides)
        return Booking.objects.create(**payload)

    return _create_booking
