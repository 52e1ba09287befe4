"""Session feature: service layer, schemas, playback and API router."""

from .playback import Cue, CuePlan, PlaybackConfig, PlaybackSequencer, cue_plan
from .router import create_session_router
from .schemas import (
    BoardResponse,
    CardPayload,
    CuePayload,
    FeedbackPayload,
    SelectResult,
    SummaryPayload,
)
from .service import SessionConfig, SessionManager

__all__ = [
    "BoardResponse",
    "CardPayload",
    "Cue",
    "CuePayload",
    "CuePlan",
    "FeedbackPayload",
    "PlaybackConfig",
    "PlaybackSequencer",
    "SelectResult",
    "SessionConfig",
    "SessionManager",
    "SummaryPayload",
    "create_session_router",
    "cue_plan",
]
