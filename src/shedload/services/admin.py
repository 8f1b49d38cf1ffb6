"""Admin view over all orders."""

import logging
from typing import Any

from shedload.schemas import AdminAnalytics, AdminOrderPage, Shipment, TrackingStage
from shedload.services.rest_client import ApiError, RestClient
from shedload.services.shipments import shipment_from_api
from shedload.tracking.status import check_transition

logger = logging.getLogger(__name__)

QR_CODE_ENDPOINT = "/api/admin/qr_code"


def default_status_note(stage: TrackingStage, shipment: Shipment | None) -> tuple[str, str]:
    """Return the (location, activity) sent with a status change."""
    city = shipment.receiver.address.city if shipment else ""
    location = city or "Destination City"

    if stage == TrackingStage.IN_TRANSIT:
        activity = "Shipment is now In Transit"
    elif stage == TrackingStage.OUT_FOR_DELIVERY:
        activity = f"Shipment is Out for Delivery in {location}"
    elif stage == TrackingStage.DELIVERED and shipment:
        activity = f"Shipment has been Delivered to {shipment.receiver.name}"
    elif stage == TrackingStage.CANCELLED:
        activity = "Shipment has been Cancelled"
    else:
        activity = f"Status updated to {stage.value}"

    return location, activity


class AdminOrderBoard:
    """One page of all orders, filtered and searched.

    Overlapping fetches are resolved last-call-wins: every fetch takes a new
    request token and a response is applied only if its token is still the
    latest. Nothing is applied after close().
    """

    def __init__(self, client: RestClient, page_size: int = 10):
        self.client = client
        self.page_size = page_size

        self.orders: list[Shipment] = []
        self.current_page = 1
        self.total_pages = 1
        self.total_count = 0
        self.search = ""
        self.status_filter: TrackingStage | None = None
        self.is_loading = False

        self._request_token = 0
        self._closed = False

    async def fetch(
        self,
        page: int = 1,
        search: str | None = None,
        status: TrackingStage | None = None,
    ) -> AdminOrderPage:
        """Load a page of orders.

        Always returns the page built from this call's own response. The
        board only takes it over when no newer fetch has started since.
        """
        self._request_token += 1
        token = self._request_token
        search = (search or "").strip()
        self.search = search
        self.status_filter = status
        self.is_loading = True

        params: dict[str, Any] = {
            "page": page,
            "limit": self.page_size,
            "q": search or None,
            "status": status.value if status else None,
        }

        try:
            response = await self.client.get("/api/admin/shipments", params=params)
        except ApiError:
            if self._is_latest(token):
                self.orders = []
                self.total_count = 0
                self.total_pages = 1
                self.is_loading = False
            raise

        shipments = [shipment_from_api(item) for item in response.get("shipments", [])]
        result = AdminOrderPage(
            shipments=shipments,
            total_pages=response.get("totalPages", 1),
            current_page=response.get("currentPage", page),
            total_count=response.get("totalCount", len(shipments)),
        )

        if not self._is_latest(token):
            logger.debug("Discarding stale order page (token %d, latest %d)", token, self._request_token)
            return result

        self.orders = list(result.shipments)
        self.total_pages = result.total_pages
        self.current_page = result.current_page
        self.total_count = result.total_count
        self.is_loading = False
        return result

    async def update_status(self, shipment_id: str, stage: TrackingStage) -> AdminOrderPage:
        """Move a shipment to a new stage and refresh the current page.

        Shipments not on the current page are looked up on the server first,
        so the transition is always checked before anything is changed.
        Local state is not touched when the server rejects the change.
        """
        shipment = self.get_order(shipment_id)
        if shipment is None:
            shipment = shipment_from_api(await self.client.get(f"/api/shipments/{shipment_id}"))
        check_transition(shipment.status, stage)

        location, activity = default_status_note(stage, shipment)
        await self.client.put(
            f"/api/admin/shipments/{shipment_id}/status",
            json={"status": stage.value, "location": location, "activity": activity},
        )
        logger.info("Shipment %s status updated to %s", shipment_id, stage.value)

        return await self.fetch(self.current_page, self.search, self.status_filter)

    def get_order(self, shipment_id: str) -> Shipment | None:
        """Find an order on the current page."""
        for order in self.orders:
            if order.id == shipment_id:
                return order
        return None

    async def fetch_analytics(self) -> AdminAnalytics:
        """Site-wide order, revenue and user totals."""
        data = await self.client.get("/api/admin/web_analytics")
        return AdminAnalytics.model_validate(data or {})

    async def upload_qr_code(self, content: bytes, filename: str, content_type: str) -> Any:
        """Replace the payment QR code image."""
        response = await self.client.request(
            "POST",
            QR_CODE_ENDPOINT,
            files={"qr_code": (filename, content, content_type)},
        )
        logger.info("Uploaded payment QR code %s", filename)
        return response

    async def fetch_qr_code(self) -> tuple[bytes, str] | None:
        """Return the current QR code image and its content type, or None."""
        try:
            response = await self.client.send("GET", QR_CODE_ENDPOINT)
        except ApiError as e:
            if e.status == 404:
                return None
            raise

        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            return None
        return response.content, content_type

    def close(self) -> None:
        """Stop applying responses; in-flight fetches are discarded."""
        self._closed = True

    def _is_latest(self, token: int) -> bool:
        return not self._closed and token == self._request_token
