"""Audio cue planning and serialised playback.

The engine never touches audio.  Whoever presents an outcome asks
:func:`cue_plan` what to play and in which order, then hands the plan to a
:class:`PlaybackSequencer` so that the cues of two reveals never overlap.

Usage::

    sequencer = PlaybackSequencer(player)
    await sequencer.play(cue_plan(outcome, entry))

    # "play again": anything still queued from the old round stops early
    sequencer.advance_generation()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ...core.models import Accepted, Entry, Outcome, Rejected

logger = logging.getLogger(__name__)

AFFIRM = "affirm"
PRONOUNCE = "pronounce"
REJECT = "reject"


@dataclass(frozen=True)
class PlaybackConfig:
    affirm_src: str = "audio/ding.mp3"
    reject_src: str = "audio/thud.mp3"
    shake_ms: int = 500
    # Delay before the completion glyph replaces the final card's label.
    glyph_delay_ms: int = 500


@dataclass(frozen=True)
class Cue:
    kind: str
    src: str


@dataclass(frozen=True)
class CuePlan:
    cues: tuple[Cue, ...] = ()
    shake_ms: int | None = None
    glyph_delay_ms: int | None = None


DEFAULT_PLAYBACK = PlaybackConfig()


def cue_plan(outcome: Outcome, entry: Entry | None = None, config: PlaybackConfig = DEFAULT_PLAYBACK) -> CuePlan:
    """Return the ordered cues for *outcome*.

    ``entry`` is the revealed card's entry; it is only consulted for accepted
    outcomes, where its pronunciation follows the affirmative cue.
    """

    if isinstance(outcome, Accepted):
        cues = [Cue(AFFIRM, config.affirm_src)]
        if entry is not None and entry.audio:
            cues.append(Cue(PRONOUNCE, entry.audio))
        glyph_delay = config.glyph_delay_ms if outcome.round_complete else None
        return CuePlan(cues=tuple(cues), glyph_delay_ms=glyph_delay)
    if isinstance(outcome, Rejected):
        return CuePlan(cues=(Cue(REJECT, config.reject_src),), shake_ms=config.shake_ms)
    return CuePlan()


Player = Callable[[Cue], Awaitable[None]]


class PlaybackSequencer:
    """Play cue plans one at a time, each cue awaited to completion.

    A cue whose player fails counts as finished.  Plans belong to the
    generation that was current when they were submitted; once
    :meth:`advance_generation` runs they stop before their next cue.
    """

    def __init__(self, player: Player) -> None:
        self._player = player
        self._lock = asyncio.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def advance_generation(self) -> int:
        self._generation += 1
        return self._generation

    async def play(self, plan: CuePlan, generation: int | None = None) -> list[Cue]:
        owner = self._generation if generation is None else generation
        finished: list[Cue] = []
        async with self._lock:
            for cue in plan.cues:
                if owner != self._generation:
                    logger.debug("Abandoning cues from a superseded round", extra={"generation": owner})
                    break
                try:
                    await self._player(cue)
                except Exception:
                    logger.warning("Cue %s failed; continuing", cue.src, exc_info=True)
                finished.append(cue)
        return finished


__all__ = [
    "AFFIRM",
    "Cue",
    "CuePlan",
    "DEFAULT_PLAYBACK",
    "PRONOUNCE",
    "PlaybackConfig",
    "PlaybackSequencer",
    "REJECT",
    "cue_plan",
]
