"""Shipment store and API record mapping."""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from pydantic import TypeAdapter, ValidationError

from shedload.db.storage import DurableStorage, StorageError
from shedload.schemas import (
    Address,
    PackageDetails,
    Party,
    Pricing,
    Shipment,
    TrackingStep,
)
from shedload.services.rest_client import RestClient

logger = logging.getLogger(__name__)

SHIPMENTS_KEY = "shedloadoverseas_shipments"

_shipment_list = TypeAdapter(list[Shipment])


class ShipmentStore:
    """The current session's shipments, most recent first."""

    def __init__(self, storage: DurableStorage):
        self.storage = storage
        self._shipments: list[Shipment] = []
        self.is_loading = True

    @property
    def shipments(self) -> list[Shipment]:
        return list(self._shipments)

    async def load(self) -> None:
        """Restore the persisted shipment list."""
        try:
            stored = await self.storage.get_item(SHIPMENTS_KEY)
        except StorageError as e:
            logger.warning("Failed to load shipments from storage: %s", e)
            stored = None

        if stored:
            try:
                self._shipments = _shipment_list.validate_json(stored)
            except ValidationError as e:
                logger.error("Discarding corrupt shipment list: %s", e)
                await self._remove_persisted()

        self.is_loading = False
        logger.info("Loaded %d shipments", len(self._shipments))

    async def add_shipment(self, shipment: Shipment) -> None:
        """Prepend shipment and persist the whole list."""
        self._shipments.insert(0, shipment)
        await self._persist()

    def get_shipment_by_id(self, shipment_id: str) -> Shipment | None:
        """Exact-match lookup."""
        for shipment in self._shipments:
            if shipment.id == shipment_id:
                return shipment
        return None

    async def replace_all(self, shipments: list[Shipment]) -> None:
        self._shipments = list(shipments)
        await self._persist()

    async def clear(self) -> None:
        self._shipments = []
        await self._remove_persisted()

    async def refresh(self, client: RestClient) -> list[Shipment]:
        """Replace the list with the session's shipments from the API."""
        self.is_loading = True
        try:
            data = await client.get("/api/shipments")
            await self.replace_all([shipment_from_api(item) for item in data or []])
        finally:
            self.is_loading = False
        return self.shipments

    async def _persist(self) -> None:
        try:
            await self.storage.set_item(SHIPMENTS_KEY, _shipment_list.dump_json(self._shipments).decode())
        except StorageError as e:
            logger.warning("Failed to save shipments to storage: %s", e)

    async def _remove_persisted(self) -> None:
        try:
            await self.storage.remove_item(SHIPMENTS_KEY)
        except StorageError as e:
            logger.warning("Failed to remove shipments from storage: %s", e)


def _money(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


def _party(data: dict[str, Any], prefix: str) -> Party:
    return Party(
        name=data[f"{prefix}_name"],
        address=Address(
            street=data.get(f"{prefix}_address_street", ""),
            city=data.get(f"{prefix}_address_city", ""),
            state=data.get(f"{prefix}_address_state", ""),
            pincode=data.get(f"{prefix}_address_pincode", ""),
            country=data.get(f"{prefix}_address_country", ""),
        ),
        phone=data.get(f"{prefix}_phone", ""),
    )


def shipment_from_api(data: dict[str, Any]) -> Shipment:
    """Map a snake_case API shipment record to Shipment."""
    return Shipment(
        id=data["shipment_id_str"],
        sender=_party(data, "sender"),
        receiver=_party(data, "receiver"),
        package=PackageDetails(
            weight_kg=float(data["package_weight_kg"]),
            width_cm=float(data["package_width_cm"]),
            height_cm=float(data["package_height_cm"]),
            length_cm=float(data["package_length_cm"]),
        ),
        pickup_date=data["pickup_date"],
        service_type=data["service_type"],
        booking_date=data.get("booking_date") or datetime.now(timezone.utc),
        status=data.get("status", "Booked"),
        pricing=Pricing(
            price_without_tax=_money(data["price_without_tax"]),
            tax_amount=_money(data["tax_amount_18_percent"]),
            total_with_tax=_money(data["total_with_tax_18_percent"]),
        ),
        tracking_history=[TrackingStep.model_validate(step) for step in data.get("tracking_history") or []],
        last_updated_at=data.get("last_updated_at"),
    )


def shipment_to_api(shipment: Shipment) -> dict[str, Any]:
    """Map the booking fields of a Shipment to the API's snake_case body."""
    body: dict[str, Any] = {}
    for prefix, party in (("sender", shipment.sender), ("receiver", shipment.receiver)):
        body[f"{prefix}_name"] = party.name
        for field in ("street", "city", "state", "pincode", "country"):
            body[f"{prefix}_address_{field}"] = getattr(party.address, field)
        body[f"{prefix}_phone"] = party.phone

    body.update(
        package_weight_kg=shipment.package.weight_kg,
        package_width_cm=shipment.package.width_cm,
        package_height_cm=shipment.package.height_cm,
        package_length_cm=shipment.package.length_cm,
        pickup_date=shipment.pickup_date.date().isoformat(),
        service_type=shipment.service_type.value,
    )
    return body
