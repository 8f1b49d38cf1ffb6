"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shedload.db.models import Base
from shedload.db.storage import DurableStorage, StorageError
from shedload.schemas import (
    Address,
    PackageDetails,
    Party,
    ServiceType,
    Shipment,
    TrackingStage,
)
from shedload.services.pricing import quote


@pytest.fixture
async def session_factory():
    """Create an in-memory database for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def storage(session_factory):
    return DurableStorage(session_factory)


class BrokenStorage(DurableStorage):
    """Storage whose backend is always unavailable."""

    def __init__(self):
        super().__init__(session_factory=None)

    async def get_item(self, key):
        raise StorageError("storage unavailable")

    async def set_item(self, key, value):
        raise StorageError("storage unavailable")

    async def remove_item(self, key):
        raise StorageError("storage unavailable")


@pytest.fixture
def broken_storage():
    return BrokenStorage()


@pytest.fixture
def make_shipment():
    """Build a priced shipment; keyword arguments override fields."""

    def _make(
        shipment_id="RS123456",
        status=TrackingStage.BOOKED,
        weight_kg=0.6,
        service_type=ServiceType.STANDARD,
        booking_date=datetime(2026, 10, 1, 9, 30, 15, tzinfo=timezone.utc),
        **overrides,
    ):
        data = dict(
            id=shipment_id,
            sender=Party(
                name="Asha Verma",
                address=Address(
                    street="12 Mall Road",
                    city="Ludhiana",
                    state="Punjab",
                    pincode="141001",
                    country="India",
                ),
                phone="+919812345678",
            ),
            receiver=Party(
                name="Rahul Mehta",
                address=Address(
                    street="44 Park Street",
                    city="Kolkata",
                    state="West Bengal",
                    pincode="700016",
                    country="India",
                ),
                phone="+919898989898",
            ),
            package=PackageDetails(weight_kg=weight_kg, width_cm=10, height_cm=12, length_cm=20),
            pickup_date=datetime(2026, 10, 2, tzinfo=timezone.utc),
            service_type=service_type,
            booking_date=booking_date,
            pricing=quote(weight_kg, service_type),
            status=status,
        )
        data.update(overrides)
        return Shipment(**data)

    return _make


@pytest.fixture
def api_shipment_record():
    """Build a snake_case shipment record as the courier API returns it."""

    def _record(shipment_id="RS654321", status="In Transit", **overrides):
        record = {
            "id": 17,
            "user_id": 3,
            "shipment_id_str": shipment_id,
            "sender_name": "Asha Verma",
            "sender_address_street": "12 Mall Road",
            "sender_address_city": "Ludhiana",
            "sender_address_state": "Punjab",
            "sender_address_pincode": "141001",
            "sender_address_country": "India",
            "sender_phone": "+919812345678",
            "receiver_name": "Rahul Mehta",
            "receiver_address_street": "44 Park Street",
            "receiver_address_city": "Kolkata",
            "receiver_address_state": "West Bengal",
            "receiver_address_pincode": "700016",
            "receiver_address_country": "India",
            "receiver_phone": "+919898989898",
            "package_weight_kg": "1.20",
            "package_width_cm": "10.00",
            "package_height_cm": "10.00",
            "package_length_cm": "15.00",
            "pickup_date": "2026-10-02T00:00:00",
            "service_type": "Express",
            "booking_date": "2026-10-01T09:30:15Z",
            "status": status,
            "price_without_tax": "205.00",
            "tax_amount_18_percent": "36.90",
            "total_with_tax_18_percent": "241.90",
            "tracking_history": [],
            "last_updated_at": "2026-10-02T11:00:00Z",
        }
        record.update(overrides)
        return record

    return _record
