"""Exception hierarchy shared by the planner, engine and session layers."""

from __future__ import annotations


class WordHuntError(Exception):
    """Base exception for all game-related errors."""


class PoolLoadError(WordHuntError):
    """Raised when the word pool cannot be read, parsed or is empty."""


class InsufficientPoolError(PoolLoadError):
    """Raised when the pool holds fewer distinct entries than a round needs."""

    def __init__(self, available: int, required: int) -> None:
        super().__init__(f"pool has {available} distinct entries; a round needs {required}")
        self.available = available
        self.required = required


class InvalidSlotError(WordHuntError, ValueError):
    """Raised when a selection names a slot outside the round's grid."""

    def __init__(self, slot: object, round_size: int) -> None:
        super().__init__(f"slot {slot!r} is outside 0..{round_size - 1}")
        self.slot = slot
        self.round_size = round_size


class StaleRoundError(WordHuntError):
    """Raised when a selection targets a round that has since been replaced."""


__all__ = [
    "InsufficientPoolError",
    "InvalidSlotError",
    "PoolLoadError",
    "StaleRoundError",
    "WordHuntError",
]
