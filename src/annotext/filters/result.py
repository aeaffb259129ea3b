"""Ordered-unique entity collections shared across one pipeline run."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

# Result keys written by the entity-extracting filters
HASHTAGS = "hashtags"
MENTIONS = "mentions"
ATTENTIONS = "attentions"
NUMERICAL_WORDS = "numerical_words"


class ResultAccumulator:
    """Mapping from entity kind to the values discovered for it.

    Values keep first-discovery order and duplicates collapse.  Create one
    per pipeline run (or per document) and pass it to every filter.
    """

    def __init__(self) -> None:
        self._entities: dict[str, dict[str, None]] = {}
        self.output: Any = None

    def ensure(self, kind: str) -> None:
        """Create an empty collection for *kind* if none exists yet."""
        self._entities.setdefault(kind, {})

    def add(self, kind: str, value: str | None) -> None:
        """Record *value* under *kind* unless it was already seen."""
        if value is None:
            return
        self._entities.setdefault(kind, {})[value] = None

    def get(self, kind: str, default: list[str] | None = None) -> list[str] | None:
        if kind not in self._entities:
            return default
        return list(self._entities[kind])

    def __getitem__(self, kind: str) -> list[str]:
        return list(self._entities[kind])

    def __contains__(self, kind: object) -> bool:
        return kind in self._entities

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def keys(self) -> list[str]:
        return list(self._entities)

    def to_dict(self) -> dict[str, list[str]]:
        """Plain-dict snapshot, e.g. for JSON output."""
        return {kind: list(values) for kind, values in self._entities.items()}

    def __repr__(self) -> str:
        return f"ResultAccumulator({self.to_dict()!r})"
