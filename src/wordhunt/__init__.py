"""Find-the-word memory grid: round planning, turn resolution and web UI."""

from __future__ import annotations

__all__: list[str] = []
