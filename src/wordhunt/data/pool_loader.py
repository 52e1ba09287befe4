from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..core.models import Entry
from ..exceptions import PoolLoadError

logger = logging.getLogger(__name__)

POOL_ENV_VAR = "WORDHUNT_WORDS"


@dataclass(slots=True)
class PoolLoaderConfig:
    """Location of the JSON word pool."""

    resource: Path


def default_resource() -> Path:
    override = os.getenv(POOL_ENV_VAR)
    if override:
        return Path(override)
    return Path(__file__).with_name("words") / "words.json"


def _coerce_entry(raw: Any) -> Entry | None:
    if not isinstance(raw, Mapping):
        return None
    word = raw.get("word")
    if not isinstance(word, str) or not word.strip():
        return None
    image = raw.get("image", "")
    audio = raw.get("audio", "")
    return Entry(
        word=word.strip(),
        image=image if isinstance(image, str) else "",
        audio=audio if isinstance(audio, str) else "",
    )


def parse_pool(payload: Any) -> list[Entry]:
    """Normalise a decoded JSON payload into a list of entries.

    Accepts a top-level list of entries, a ``{"words": [...]}`` wrapper, or a
    single bare entry object (treated as a one-element pool).
    """

    if isinstance(payload, Mapping):
        items = payload["words"] if "words" in payload else [payload]
    else:
        items = payload
    if not isinstance(items, list):
        raise PoolLoadError("word pool must be a list of entries")

    entries: list[Entry] = []
    for index, raw in enumerate(items):
        entry = _coerce_entry(raw)
        if entry is None:
            logger.debug("Skipping malformed pool entry at index %d", index)
            continue
        entries.append(entry)
    if not entries:
        raise PoolLoadError("word pool is empty")
    return entries


class PoolRepository:
    """Load the word pool once and hand out immutable copies."""

    def __init__(self, config: PoolLoaderConfig | None = None) -> None:
        resource = config.resource if config else default_resource()
        self._config = PoolLoaderConfig(resource=resource)
        self._entries = tuple(self._load_resource(resource))
        logger.info("Loaded word pool", extra={"resource": str(resource), "entries": len(self._entries)})

    @property
    def resource(self) -> Path:
        return self._config.resource

    @staticmethod
    def _load_resource(path: Path) -> list[Entry]:
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise PoolLoadError(f"cannot read word pool {path}: {exc}") from exc
        return parse_pool(data)

    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)


_REPOSITORY: Optional[PoolRepository] = None
_REPOSITORY_STAMP: Optional[tuple[Path, float]] = None


def get_repository(path: Path | None = None) -> PoolRepository:
    """Return a repository for *path* (or the default pool), reloading on change."""

    global _REPOSITORY, _REPOSITORY_STAMP
    resource = path or default_resource()
    try:
        stamp = (resource, resource.stat().st_mtime)
    except OSError as exc:
        raise PoolLoadError(f"cannot read word pool {resource}: {exc}") from exc
    if _REPOSITORY is None or _REPOSITORY_STAMP != stamp:
        _REPOSITORY = PoolRepository(PoolLoaderConfig(resource=resource))
        _REPOSITORY_STAMP = stamp
    return _REPOSITORY


def load_default_pool() -> tuple[Entry, ...]:
    return get_repository().entries()


__all__ = [
    "POOL_ENV_VAR",
    "PoolLoaderConfig",
    "PoolRepository",
    "default_resource",
    "get_repository",
    "load_default_pool",
    "parse_pool",
]
