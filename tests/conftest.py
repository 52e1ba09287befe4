from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from wordhunt.core.models import Entry  # noqa: E402

WORDS = [
    "apple", "ball", "cat", "dog", "egg", "fish", "goat", "hat",
    "ice", "jam", "kite", "lion", "moon", "nest", "owl", "pig",
    "queen", "ring", "sun", "tree",
]


def make_entry(word: str) -> Entry:
    return Entry(word=word, image=f"images/{word}.png", audio=f"audio/{word}.mp3")


@pytest.fixture
def pool() -> list[Entry]:
    return [make_entry(word) for word in WORDS]
