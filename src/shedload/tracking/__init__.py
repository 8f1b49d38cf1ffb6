"""Tracking-history sources package."""

from shedload.tracking.base import HistorySource
from shedload.tracking.server import ServerHistorySource
from shedload.tracking.status import StageTransitionError, can_transition, tag_history
from shedload.tracking.synthesizer import SynthesizedHistorySource, synthesize_history

__all__ = [
    "HistorySource",
    "ServerHistorySource",
    "StageTransitionError",
    "SynthesizedHistorySource",
    "can_transition",
    "synthesize_history",
    "tag_history",
]
