"""Application state owned by the FastAPI lifespan."""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shedload.config import Settings
from shedload.db.storage import DurableStorage
from shedload.schemas import CompanyProfile
from shedload.services.admin import AdminOrderBoard
from shedload.services.booking import BookingService
from shedload.services.invoices import load_company
from shedload.services.rest_client import RestClient
from shedload.services.session import SessionStore
from shedload.services.shipments import ShipmentStore
from shedload.services.tracker import TrackerService
from shedload.tracking import ServerHistorySource, SynthesizedHistorySource

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything the routes read and write, built once per app."""

    settings: Settings
    storage: DurableStorage
    client: RestClient
    session: SessionStore
    shipments: ShipmentStore
    booking: BookingService
    tracker: TrackerService
    admin: AdminOrderBoard
    company: CompanyProfile

    @property
    def demo_mode(self) -> bool:
        return self.settings.demo_mode

    async def load(self) -> None:
        """Restore persisted session and shipments."""
        await self.session.load()
        await self.shipments.load()

    async def aclose(self) -> None:
        self.admin.close()
        await self.client.aclose()


def build_state(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    client: RestClient | None = None,
) -> AppState:
    """Wire stores and services together."""
    storage = DurableStorage(session_factory)
    session = SessionStore(storage)

    if client is None:
        client = RestClient(
            settings.api_base_url,
            token_provider=lambda: session.token,
            timeout=settings.api_timeout_seconds,
        )

    # Demo mode never calls the API for customer data
    customer_client = None if settings.demo_mode else client

    shipments = ShipmentStore(storage)
    state = AppState(
        settings=settings,
        storage=storage,
        client=client,
        session=session,
        shipments=shipments,
        booking=BookingService(shipments, customer_client),
        tracker=TrackerService(
            shipments,
            [ServerHistorySource(), SynthesizedHistorySource()],
            customer_client,
        ),
        admin=AdminOrderBoard(client, page_size=settings.admin_page_size),
        company=load_company(settings.company_file),
    )
    logger.info("Application state built (demo_mode=%s)", settings.demo_mode)
    return state
