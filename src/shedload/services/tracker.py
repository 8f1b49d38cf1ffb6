"""Service for tracking shipments."""

import logging

from shedload.schemas import Shipment, TrackingReport
from shedload.services.rest_client import ApiError, RestClient
from shedload.services.shipments import ShipmentStore, shipment_from_api
from shedload.tracking.base import HistorySource

logger = logging.getLogger(__name__)


class TrackerService:
    """Resolves a shipment id to a tracking report.

    Sources are tried in order; the first one with any history wins.
    """

    def __init__(
        self,
        store: ShipmentStore,
        sources: list[HistorySource],
        client: RestClient | None = None,
    ):
        self.store = store
        self.sources = sources
        self.client = client

    async def get_shipment(self, shipment_id: str) -> Shipment | None:
        """Find a shipment by id.

        With a client the server record is authoritative. Without one only
        the local store is consulted. Unknown ids return None.
        """
        shipment_id = shipment_id.strip().upper()

        if self.client is None:
            return self.store.get_shipment_by_id(shipment_id)

        try:
            data = await self.client.get(f"/api/shipments/{shipment_id}")
        except ApiError as e:
            if e.status == 404:
                return None
            raise
        return shipment_from_api(data)

    async def track(self, shipment_id: str) -> TrackingReport | None:
        """Build the tracking report for a shipment."""
        shipment = await self.get_shipment(shipment_id)
        if not shipment:
            return None

        for source in self.sources:
            history = await source.fetch_history(shipment)
            if history:
                return TrackingReport(
                    shipment_id=shipment.id,
                    status=shipment.status,
                    history=history,
                    source=source.name,
                )

        logger.info("No tracking history available for %s", shipment.id)
        return TrackingReport(shipment_id=shipment.id, status=shipment.status, history=[], source="none")
