"""Services package."""

from shedload.services.admin import AdminOrderBoard
from shedload.services.booking import BookingService
from shedload.services.rest_client import NO_CONTENT, ApiError, RestClient
from shedload.services.session import SessionStore
from shedload.services.shipments import ShipmentStore
from shedload.services.tracker import TrackerService

__all__ = [
    "NO_CONTENT",
    "AdminOrderBoard",
    "ApiError",
    "BookingService",
    "RestClient",
    "SessionStore",
    "ShipmentStore",
    "TrackerService",
]
