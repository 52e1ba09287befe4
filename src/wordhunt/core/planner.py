"""Round planning.

A round is two independent random draws over the pool: which entries sit in
which grid slot, and the order in which those slots have to be found.  The
two are never correlated, so the first target is as likely to be slot 0 as
any other slot.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence

from ..exceptions import InsufficientPoolError
from .models import DEFAULT_ROUND_SIZE, Entry, RoundPlan

logger = logging.getLogger(__name__)


def distinct_entries(pool: Iterable[Entry]) -> list[Entry]:
    """Drop entries whose word already appeared earlier in *pool*."""

    seen: set[str] = set()
    unique: list[Entry] = []
    for entry in pool:
        key = entry.word.strip()
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def shuffled_slots(size: int, rng: random.Random) -> list[int]:
    """Fisher–Yates permutation of ``0..size-1``, swapping from the last index down."""

    order = list(range(size))
    for i in range(size - 1, 0, -1):
        j = rng.randint(0, i)
        order[i], order[j] = order[j], order[i]
    return order


def plan_round(
    pool: Sequence[Entry],
    round_size: int = DEFAULT_ROUND_SIZE,
    *,
    rng: random.Random | None = None,
) -> RoundPlan:
    if round_size < 1:
        raise ValueError("round_size must be at least 1")
    rng = rng or random.Random()
    unique = distinct_entries(pool)
    if len(unique) < round_size:
        raise InsufficientPoolError(available=len(unique), required=round_size)

    assignment = tuple(rng.sample(unique, round_size))
    target_sequence = tuple(shuffled_slots(round_size, rng))
    logger.debug(
        "planned round",
        extra={"round_size": round_size, "pool": len(unique), "first_target": target_sequence[0]},
    )
    return RoundPlan(assignment=assignment, target_sequence=target_sequence)


__all__ = ["distinct_entries", "plan_round", "shuffled_slots"]
