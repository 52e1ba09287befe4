from __future__ import annotations

import logging
from dataclasses import replace

from ..exceptions import InvalidSlotError
from .models import Accepted, Entry, Ignored, Outcome, Rejected, RoundPlan, TurnState

logger = logging.getLogger(__name__)


class TurnEngine:
    """Resolve slot selections against a fixed :class:`RoundPlan`.

    Cards are labelled with their own word when revealed, so a card's back
    never changes after it flips.  ``select`` either commits a reveal in full
    or leaves the state untouched.
    """

    def __init__(self, plan: RoundPlan) -> None:
        self.plan = plan
        self._state = TurnState(round_size=plan.round_size)

    @property
    def progress(self) -> int:
        return self._state.progress

    @property
    def complete(self) -> bool:
        return self._state.complete

    @property
    def revealed(self) -> frozenset[int]:
        return frozenset(self._state.revealed)

    @property
    def expected_slot(self) -> int | None:
        if self._state.complete:
            return None
        return self.plan.target_at(self._state.progress)

    @property
    def current_target(self) -> Entry | None:
        slot = self.expected_slot
        return None if slot is None else self.plan.entry_for(slot)

    @property
    def final_slot(self) -> int:
        return self.plan.target_sequence[-1]

    def snapshot(self) -> TurnState:
        return replace(self._state, revealed=set(self._state.revealed))

    def is_revealed(self, slot: int) -> bool:
        return slot in self._state.revealed

    def label_for(self, slot: int) -> str | None:
        if slot not in self._state.revealed:
            return None
        return self.plan.entry_for(slot).word

    def select(self, slot: int) -> Outcome:
        self._check_slot(slot)
        state = self._state
        if state.complete or slot in state.revealed:
            return Ignored(slot=slot)

        expected = self.plan.target_at(state.progress)
        if slot != expected:
            logger.debug("rejected selection", extra={"slot": slot, "expected": expected})
            return Rejected(slot=slot, expected_slot=expected)

        state.revealed.add(slot)
        state.progress += 1
        feedback = self.plan.entry_for(slot).word
        if state.complete:
            return Accepted(
                slot=slot,
                reveal_feedback=feedback,
                progress=state.progress,
                round_complete=True,
                final_slot=self.final_slot,
            )
        return Accepted(
            slot=slot,
            reveal_feedback=feedback,
            progress=state.progress,
            round_complete=False,
            next_slot=self.plan.target_at(state.progress),
        )

    def _check_slot(self, slot: object) -> None:
        size = self.plan.round_size
        if isinstance(slot, bool) or not isinstance(slot, int) or not 0 <= slot < size:
            raise InvalidSlotError(slot, size)


__all__ = ["TurnEngine"]
