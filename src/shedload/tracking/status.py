"""Shipment lifecycle rules and tracking-step tagging."""

from shedload.schemas import StepStatus, TrackingStage, TrackingStep

# The only forward path. Cancelled sits outside it.
STAGE_ORDER: list[TrackingStage] = [
    TrackingStage.BOOKED,
    TrackingStage.IN_TRANSIT,
    TrackingStage.OUT_FOR_DELIVERY,
    TrackingStage.DELIVERED,
]

TERMINAL_STAGES = frozenset({TrackingStage.DELIVERED, TrackingStage.CANCELLED})


class StageTransitionError(ValueError):
    """Raised when a status change is not allowed from the current stage."""

    def __init__(self, current: TrackingStage, target: TrackingStage):
        super().__init__(f"Cannot move a shipment from {current.value} to {target.value}")
        self.current = current
        self.target = target


def is_terminal(stage: TrackingStage) -> bool:
    """Delivered and Cancelled shipments never change again."""
    return stage in TERMINAL_STAGES


def can_transition(current: TrackingStage, target: TrackingStage) -> bool:
    """Check whether a shipment may move from current to target.

    Terminal stages never move. Cancelled is reachable from any other stage.
    Otherwise the target must be further along the forward path.
    """
    if is_terminal(current):
        return False
    if target == TrackingStage.CANCELLED:
        return True
    return STAGE_ORDER.index(target) > STAGE_ORDER.index(current)


def check_transition(current: TrackingStage, target: TrackingStage) -> None:
    """Raise StageTransitionError unless the move is allowed."""
    if not can_transition(current, target):
        raise StageTransitionError(current, target)


def tag_history(steps: list[TrackingStep], stage: TrackingStage) -> list[TrackingStep]:
    """Sort steps by date and tag each one for display.

    The last step of the current stage is "current", earlier steps are
    "completed" and later ones "pending". When the shipment is in a terminal
    stage every step is "completed". Returns new step objects.
    """
    ordered = sorted(steps, key=lambda step: step.date)

    if is_terminal(stage):
        return [step.model_copy(update={"status": StepStatus.COMPLETED}) for step in ordered]

    current_index = None
    for index, step in enumerate(ordered):
        if step.stage == stage:
            current_index = index

    tagged = []
    for index, step in enumerate(ordered):
        if current_index is None:
            # Current stage has no entry yet: tag by position on the forward path
            reached = step.stage in STAGE_ORDER and STAGE_ORDER.index(step.stage) < STAGE_ORDER.index(stage)
            status = StepStatus.COMPLETED if reached else StepStatus.PENDING
        elif index < current_index:
            status = StepStatus.COMPLETED
        elif index == current_index:
            status = StepStatus.CURRENT
        else:
            status = StepStatus.PENDING
        tagged.append(step.model_copy(update={"status": status}))

    return tagged
