"""Plausible tracking history for shipments the server has no history for.

The locations are filler picked from a fixed list of hubs. They are not
real scan data. Production history comes from ServerHistorySource.
"""

import random
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from shedload.schemas import Shipment, TrackingStage, TrackingStep
from shedload.tracking.base import HistorySource
from shedload.tracking.status import STAGE_ORDER, tag_history

HUB_LOCATIONS = [
    "Mumbai Hub",
    "Delhi Gateway",
    "Bengaluru Sorting Center",
    "Chennai Hub",
    "Kolkata Transit Facility",
    "Hyderabad Hub",
    "Ludhiana Facility",
]

# (day offset from booking, stage, activity, index into the picked locations)
_PLAN: list[tuple[int, TrackingStage, str, int]] = [
    (0, TrackingStage.BOOKED, "Shipment booked and awaiting pickup", 0),
    (1, TrackingStage.IN_TRANSIT, "Picked up and departed origin facility", 1),
    (2, TrackingStage.IN_TRANSIT, "Arrived at sorting hub", 2),
    (3, TrackingStage.OUT_FOR_DELIVERY, "Out for delivery", 3),
    (4, TrackingStage.DELIVERED, "Delivered to receiver", 3),
]


def _pick_locations(booking_date: datetime) -> list[str]:
    rng = random.Random(int(booking_date.timestamp()))
    return rng.sample(HUB_LOCATIONS, 4)


def synthesize_history(
    stage: TrackingStage,
    booking_date: datetime,
    now: datetime | None = None,
) -> list[TrackingStep]:
    """Build a tagged history ending at the shipment's current stage.

    Steps dated after ``now`` are dropped, except for the first step of the
    current stage. That step is kept and dated ``now``.
    """
    now = now or datetime.now(timezone.utc)
    horizon = max(now, booking_date)
    locations = _pick_locations(booking_date)

    if stage == TrackingStage.CANCELLED:
        cancelled_at = min(booking_date + timedelta(days=1), horizon)
        steps = [
            TrackingStep(
                stage=TrackingStage.CANCELLED,
                date=cancelled_at,
                location=locations[0],
                activity="Shipment has been Cancelled",
            )
        ]
        return tag_history(steps, stage)

    reached = STAGE_ORDER.index(stage)
    steps: list[TrackingStep] = []
    for offset, step_stage, activity, location_index in _PLAN:
        if STAGE_ORDER.index(step_stage) > reached:
            break

        date = booking_date + timedelta(days=offset)
        if date > horizon:
            if step_stage != stage or any(s.stage == stage for s in steps):
                continue
            date = horizon

        steps.append(
            TrackingStep(
                stage=step_stage,
                date=date,
                location=locations[location_index],
                activity=activity,
            )
        )

    return tag_history(steps, stage)


class SynthesizedHistorySource(HistorySource):
    """Demo history generated from a shipment's stage and booking date."""

    name = "synthesized"

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def fetch_history(self, shipment: Shipment) -> list[TrackingStep]:
        return synthesize_history(shipment.status, shipment.booking_date, self.clock())
