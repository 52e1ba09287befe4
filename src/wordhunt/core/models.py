from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

DEFAULT_ROUND_SIZE = 16


@dataclass(frozen=True)
class Entry:
    word: str
    image: str
    audio: str


@dataclass(frozen=True)
class RoundPlan:
    """Slot assignment plus the order in which slots must be found.

    ``assignment[slot]`` is the entry shown at grid position ``slot`` and
    ``target_sequence[i]`` is the slot that must be found ``i``-th.
    """

    assignment: tuple[Entry, ...]
    target_sequence: tuple[int, ...]

    def __post_init__(self) -> None:
        if sorted(self.target_sequence) != list(range(len(self.assignment))):
            raise ValueError("target_sequence must be a permutation of the assignment slots")

    @property
    def round_size(self) -> int:
        return len(self.assignment)

    def entry_for(self, slot: int) -> Entry:
        return self.assignment[slot]

    def target_at(self, index: int) -> int:
        return self.target_sequence[index]


@dataclass
class TurnState:
    round_size: int
    progress: int = 0
    revealed: set[int] = field(default_factory=set)

    @property
    def complete(self) -> bool:
        return self.progress == self.round_size


@dataclass(frozen=True)
class Accepted:
    slot: int
    reveal_feedback: str
    progress: int
    round_complete: bool
    # Slot to search for next; None once the round is complete.
    next_slot: int | None = None
    # Slot that carries the completion glyph; only set on the final reveal.
    final_slot: int | None = None


@dataclass(frozen=True)
class Rejected:
    slot: int
    expected_slot: int


@dataclass(frozen=True)
class Ignored:
    slot: int


Outcome = Union[Accepted, Rejected, Ignored]


__all__ = [
    "Accepted",
    "DEFAULT_ROUND_SIZE",
    "Entry",
    "Ignored",
    "Outcome",
    "Rejected",
    "RoundPlan",
    "TurnState",
]
