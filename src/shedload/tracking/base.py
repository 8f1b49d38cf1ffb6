"""Base class for tracking-history sources."""

from abc import ABC, abstractmethod

from shedload.schemas import Shipment, TrackingStep


class HistorySource(ABC):
    """Abstract base class for tracking-history sources.

    A source turns a shipment into the ordered, tagged list of steps shown to
    the user. Swapping sources never touches presentation code:
    1. Subclass HistorySource
    2. Set ``name`` (reported alongside the history)
    3. Implement fetch_history
    """

    name: str = "base"

    @abstractmethod
    async def fetch_history(self, shipment: Shipment) -> list[TrackingStep]:
        """Fetch the tracking history for a shipment.

        This method must be implemented by each source.

        Args:
            shipment: The shipment whose history is wanted.

        Returns:
            Steps sorted ascending by date, each tagged with a StepStatus.
            An empty list means the source has nothing for this shipment.
        """
        pass
