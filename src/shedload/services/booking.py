"""Service for booking new shipments."""

import logging
import random
from datetime import datetime, time, timezone

from shedload.schemas import BookingRequest, PackageDetails, Party, Shipment, TrackingStage
from shedload.services.pricing import quote
from shedload.services.rest_client import ApiError, RestClient
from shedload.services.shipments import ShipmentStore, shipment_from_api, shipment_to_api

logger = logging.getLogger(__name__)


def generate_shipment_id(rng: random.Random | None = None) -> str:
    """Return a human-readable id like RS123456."""
    rng = rng or random.Random()
    return f"RS{rng.randint(100000, 999999)}"


class BookingService:
    """Turns a validated booking request into a stored shipment.

    With a client, the API assigns the id and prices the shipment. Without
    one (demo mode), both happen locally.
    """

    def __init__(self, store: ShipmentStore, client: RestClient | None = None):
        self.store = store
        self.client = client

    def build_shipment(self, request: BookingRequest, now: datetime | None = None) -> Shipment:
        """Create a priced, Booked shipment from a request."""
        now = now or datetime.now(timezone.utc)

        shipment_id = generate_shipment_id()
        while self.store.get_shipment_by_id(shipment_id):
            shipment_id = generate_shipment_id()

        return Shipment(
            id=shipment_id,
            sender=Party.model_validate(request.sender.model_dump()),
            receiver=Party.model_validate(request.receiver.model_dump()),
            package=PackageDetails(
                weight_kg=request.weight_kg,
                width_cm=request.width_cm,
                height_cm=request.height_cm,
                length_cm=request.length_cm,
            ),
            pickup_date=datetime.combine(request.pickup_date, time.min, tzinfo=timezone.utc),
            service_type=request.service_type,
            booking_date=now,
            pricing=quote(request.weight_kg, request.service_type),
            status=TrackingStage.BOOKED,
            last_updated_at=now,
        )

    async def book(self, request: BookingRequest) -> Shipment:
        """Book a shipment and add it to the store."""
        shipment = self.build_shipment(request)

        if self.client is not None:
            response = await self.client.post("/api/shipments", json=shipment_to_api(shipment))
            if not isinstance(response, dict) or not isinstance(response.get("data"), dict):
                raise ApiError(502, response or None, "Booking response did not include the shipment")
            shipment = shipment_from_api(response["data"])

        await self.store.add_shipment(shipment)
        logger.info(
            "Booked %s (%s, %.2fkg) total %s",
            shipment.id,
            shipment.service_type.value,
            shipment.package.weight_kg,
            shipment.pricing.total_with_tax,
        )
        return shipment
