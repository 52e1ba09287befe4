from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "BoardResponse",
    "CardPayload",
    "CuePayload",
    "FeedbackPayload",
    "SelectResult",
    "SummaryPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CardPayload(_APIModel):
    slot: int
    image: str
    alt: str
    revealed: bool
    label: str | None = None
    glyph: str | None = None


class BoardResponse(_APIModel):
    round_id: str
    round_size: int
    progress: int
    complete: bool
    cards: list[CardPayload]
    target_word: str | None = None
    message: str | None = None


class CuePayload(_APIModel):
    kind: Literal["affirm", "pronounce", "reject"]
    src: str


class FeedbackPayload(_APIModel):
    outcome: Literal["accepted", "rejected", "ignored"]
    slot: int
    progress: int
    round_complete: bool
    label: str | None = None
    next_slot: int | None = None
    final_slot: int | None = None
    message: str | None = None
    cues: list[CuePayload] = Field(default_factory=list)
    shake_ms: int | None = None
    glyph_delay_ms: int | None = None


class SummaryPayload(_APIModel):
    round_id: str
    round_size: int
    progress: int
    complete: bool
    rounds_played: int


class SelectResult(_APIModel):
    feedback: FeedbackPayload
    board: BoardResponse
