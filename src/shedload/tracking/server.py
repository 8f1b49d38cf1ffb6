"""Tracking history reported by the courier API."""

from shedload.schemas import Shipment, TrackingStep
from shedload.tracking.base import HistorySource
from shedload.tracking.status import tag_history


class ServerHistorySource(HistorySource):
    """History carried on the server's shipment record.

    The record comes from ``GET /api/shipments/{id}``. Its history is
    re-tagged against the record's own status.
    """

    name = "server"

    async def fetch_history(self, shipment: Shipment) -> list[TrackingStep]:
        if not shipment.tracking_history:
            return []
        return tag_history(shipment.tracking_history, shipment.status)
