"""Round planning and turn resolution, independent of any presentation layer."""

from .engine import TurnEngine
from .models import DEFAULT_ROUND_SIZE, Accepted, Entry, Ignored, Outcome, Rejected, RoundPlan, TurnState
from .planner import plan_round

__all__ = [
    "Accepted",
    "DEFAULT_ROUND_SIZE",
    "Entry",
    "Ignored",
    "Outcome",
    "Rejected",
    "RoundPlan",
    "TurnEngine",
    "TurnState",
    "plan_round",
]
