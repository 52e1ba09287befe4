from __future__ import annotations

import logging
import random
import secrets
import string
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ...core.engine import TurnEngine
from ...core.models import DEFAULT_ROUND_SIZE, Accepted, Entry, Outcome, Rejected
from ...core.planner import plan_round
from ...data.pool_loader import load_default_pool
from ...exceptions import StaleRoundError
from .concurrency import run_blocking
from .playback import DEFAULT_PLAYBACK, Cue, PlaybackConfig, cue_plan
from .schemas import (
    BoardResponse,
    CardPayload,
    CuePayload,
    FeedbackPayload,
    SelectResult,
    SummaryPayload,
)

__all__ = [
    "COMPLETION_GLYPH",
    "SessionConfig",
    "SessionManager",
    "SessionState",
    "_board_payload",
    "_feedback_payload",
]

logger = logging.getLogger(__name__)

COMPLETION_GLYPH = "⭐"
COMPLETE_MESSAGE = "🎉 Game Complete! 🎉"
CORRECT_MESSAGE = "Correct! 🎉"
WRONG_MESSAGE = "Try again! 🤔"


@dataclass(frozen=True)
class SessionConfig:
    """Configuration for a play session."""

    round_size: int = DEFAULT_ROUND_SIZE
    seed: int | None = None


@dataclass
class SessionState:
    config: SessionConfig
    rng: random.Random
    pool: tuple[Entry, ...]
    engine: TurnEngine
    round_id: str
    rounds_played: int = 1


class SessionManager:
    """Owns session lifecycle independent of the presentation layer."""

    def __init__(
        self,
        pool_source: Callable[[], Sequence[Entry]] | None = None,
        playback: PlaybackConfig | None = None,
    ) -> None:
        self._pool_source = pool_source or load_default_pool
        self._playback = playback or DEFAULT_PLAYBACK
        self._sessions: dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def create_session(self, config: SessionConfig) -> str:
        seed = config.seed if config.seed is not None else secrets.SystemRandom().getrandbits(32)
        rng = random.Random(seed)
        normalized_config = SessionConfig(round_size=max(1, config.round_size), seed=seed)
        pool = tuple(self._pool_source())
        plan = plan_round(pool, normalized_config.round_size, rng=rng)
        session_id = _sid()
        state = SessionState(
            config=normalized_config,
            rng=rng,
            pool=pool,
            engine=TurnEngine(plan),
            round_id=_sid(),
        )
        with self._lock:
            self._sessions[session_id] = state
        logger.info("session created", extra={"session_id": session_id, "round_size": plan.round_size})
        return session_id

    async def create_session_async(self, config: SessionConfig) -> str:
        return await run_blocking(self.create_session, config)

    def get_board(self, session_id: str) -> BoardResponse:
        with self._lock:
            state = self._require_session(session_id)
            return _board_payload(state)

    async def get_board_async(self, session_id: str) -> BoardResponse:
        return await run_blocking(self.get_board, session_id)

    def select(self, session_id: str, slot: int, round_id: str | None = None) -> SelectResult:
        with self._lock:
            state = self._require_session(session_id)
            if round_id is not None and round_id != state.round_id:
                logger.info(
                    "selection for superseded round",
                    extra={"session_id": session_id, "stale_round": round_id, "current_round": state.round_id},
                )
                raise StaleRoundError(f"round '{round_id}' is no longer active")
            outcome = state.engine.select(slot)
            feedback = _feedback_payload(state, outcome, self._playback)
            board = _board_payload(state)
        return SelectResult(feedback=feedback, board=board)

    async def select_async(self, session_id: str, slot: int, round_id: str | None = None) -> SelectResult:
        return await run_blocking(self.select, session_id, slot, round_id)

    def reset(self, session_id: str) -> BoardResponse:
        """Start a new round for the session, replacing plan and turn state wholesale."""

        with self._lock:
            state = self._require_session(session_id)
            plan = plan_round(state.pool, state.config.round_size, rng=state.rng)
            state.engine = TurnEngine(plan)
            state.round_id = _sid()
            state.rounds_played += 1
            logger.debug("round reset", extra={"session_id": session_id, "rounds_played": state.rounds_played})
            return _board_payload(state)

    async def reset_async(self, session_id: str) -> BoardResponse:
        return await run_blocking(self.reset, session_id)

    def summary(self, session_id: str) -> SummaryPayload:
        with self._lock:
            state = self._require_session(session_id)
            return SummaryPayload(
                round_id=state.round_id,
                round_size=state.engine.plan.round_size,
                progress=state.engine.progress,
                complete=state.engine.complete,
                rounds_played=state.rounds_played,
            )

    async def summary_async(self, session_id: str) -> SummaryPayload:
        return await run_blocking(self.summary, session_id)

    def drive_session(
        self,
        session_id: str,
        chooser: Callable[[BoardResponse, random.Random], int],
        *,
        cleanup: bool = False,
    ) -> list[FeedbackPayload]:
        """Play the current round to completion by delegating slot choice to ``chooser``.

        The ``chooser`` callback receives the current board and the session RNG
        and must return the slot to select.  Returns the feedback for every
        selection made, in order.
        """

        feedback: list[FeedbackPayload] = []
        while True:
            with self._lock:
                state = self._require_session(session_id)
                board = _board_payload(state)
                rng = state.rng
                if board.complete:
                    if cleanup:
                        self._sessions.pop(session_id, None)
                    logger.debug("drive_session completed", extra={"session_id": session_id, "selections": len(feedback)})
                    return feedback

            slot = chooser(board, rng)
            feedback.append(self.select(session_id, slot, board.round_id).feedback)

    def _require_session(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            raise KeyError(f"session '{session_id}' not found")
        return state


def _sid(length: int = 10) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _board_payload(state: SessionState) -> BoardResponse:
    engine = state.engine
    cards = [
        CardPayload(
            slot=slot,
            image=entry.image,
            alt=entry.word,
            revealed=engine.is_revealed(slot),
            label=engine.label_for(slot),
            glyph=COMPLETION_GLYPH if engine.complete and slot == engine.final_slot else None,
        )
        for slot, entry in enumerate(engine.plan.assignment)
    ]
    target = engine.current_target
    return BoardResponse(
        round_id=state.round_id,
        round_size=engine.plan.round_size,
        progress=engine.progress,
        complete=engine.complete,
        cards=cards,
        target_word=target.word if target else None,
        message=COMPLETE_MESSAGE if engine.complete else None,
    )


def _feedback_payload(state: SessionState, outcome: Outcome, playback: PlaybackConfig) -> FeedbackPayload:
    engine = state.engine
    if isinstance(outcome, Accepted):
        plan = cue_plan(outcome, engine.plan.entry_for(outcome.slot), playback)
        return FeedbackPayload(
            outcome="accepted",
            slot=outcome.slot,
            progress=outcome.progress,
            round_complete=outcome.round_complete,
            label=outcome.reveal_feedback,
            next_slot=outcome.next_slot,
            final_slot=outcome.final_slot,
            message=COMPLETE_MESSAGE if outcome.round_complete else CORRECT_MESSAGE,
            cues=_cue_payloads(plan.cues),
            glyph_delay_ms=plan.glyph_delay_ms,
        )
    if isinstance(outcome, Rejected):
        plan = cue_plan(outcome, config=playback)
        return FeedbackPayload(
            outcome="rejected",
            slot=outcome.slot,
            progress=engine.progress,
            round_complete=False,
            message=WRONG_MESSAGE,
            cues=_cue_payloads(plan.cues),
            shake_ms=plan.shake_ms,
        )
    return FeedbackPayload(
        outcome="ignored",
        slot=outcome.slot,
        progress=engine.progress,
        round_complete=engine.complete,
    )


def _cue_payloads(cues: Sequence[Cue]) -> list[CuePayload]:
    return [CuePayload(kind=cue.kind, src=cue.src) for cue in cues]
