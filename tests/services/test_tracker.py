"""Tests for the tracker service."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from shedload.schemas import StepStatus, TrackingStage
from shedload.services.rest_client import ApiError, RestClient
from shedload.services.shipments import ShipmentStore
from shedload.services.tracker import TrackerService
from shedload.tracking import ServerHistorySource, SynthesizedHistorySource

NOW = datetime(2026, 10, 20, tzinfo=timezone.utc)


def sources():
    return [ServerHistorySource(), SynthesizedHistorySource(clock=lambda: NOW)]


@pytest.fixture
async def store(storage):
    store = ShipmentStore(storage)
    await store.load()
    return store


class TestLocalTracking:
    """Tracking without an API (demo mode)."""

    async def test_synthesizes_history_for_own_shipment(self, store, make_shipment):
        await store.add_shipment(make_shipment(shipment_id="RS123456", status=TrackingStage.OUT_FOR_DELIVERY))
        tracker = TrackerService(store, sources())

        report = await tracker.track(" rs123456 ")

        assert report.shipment_id == "RS123456"
        assert report.status == TrackingStage.OUT_FOR_DELIVERY
        assert report.source == "synthesized"
        assert report.history[-1].stage == TrackingStage.OUT_FOR_DELIVERY
        assert report.history[-1].status == StepStatus.CURRENT

    async def test_unknown_id_is_not_found(self, store):
        tracker = TrackerService(store, sources())

        assert await tracker.track("RS000000") is None


class TestServerTracking:
    """Tracking backed by the courier API."""

    async def test_prefers_server_history(self, store, api_shipment_record):
        booked = datetime(2026, 10, 1, tzinfo=timezone.utc)
        record = api_shipment_record(
            "RS654321",
            status="In Transit",
            tracking_history=[
                {"stage": "In Transit", "date": (booked + timedelta(days=1)).isoformat(), "location": "Delhi", "activity": "Departed"},
                {"stage": "Booked", "date": booked.isoformat(), "location": "Ludhiana", "activity": "Booked"},
            ],
        )
        client = RestClient(
            "https://api.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=record)),
        )
        tracker = TrackerService(store, sources(), client)

        report = await tracker.track("RS654321")

        assert report.source == "server"
        assert [s.location for s in report.history] == ["Ludhiana", "Delhi"]
        assert [s.status for s in report.history] == [StepStatus.COMPLETED, StepStatus.CURRENT]

    async def test_falls_back_when_server_has_no_history(self, store, api_shipment_record):
        record = api_shipment_record("RS654321", status="Delivered")
        client = RestClient(
            "https://api.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=record)),
        )
        tracker = TrackerService(store, sources(), client)

        report = await tracker.track("RS654321")

        assert report.source == "synthesized"
        assert all(s.status == StepStatus.COMPLETED for s in report.history)

    async def test_server_not_found(self, store):
        client = RestClient(
            "https://api.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(404, json={"error": "Not found"})),
        )
        tracker = TrackerService(store, sources(), client)

        assert await tracker.track("RS000000") is None

    async def test_server_failure_propagates(self, store):
        client = RestClient(
            "https://api.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(500, json={})),
        )
        tracker = TrackerService(store, sources(), client)

        with pytest.raises(ApiError):
            await tracker.track("RS000000")
