"""Episodic store — append-only log of timestamped records."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from sigmem.numerics import clamp, sanitize_field
from sigmem.types import EpisodicMemory
from sigmem.utils import parse_iso


class EpisodicStore:
    """Insertion-ordered episodic memories.

    Records are only appended during ingestion; consolidation is the one
    caller allowed to ``replace`` the whole log.
    """

    def __init__(self, records: Iterable[EpisodicMemory] | None = None) -> None:
        self._records: list[EpisodicMemory] = list(records or [])

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[EpisodicMemory]:
        return iter(self._records)

    def __getitem__(self, index: int) -> EpisodicMemory:
        return self._records[index]

    def add(self, content: str, context: str, emotional_weight: float) -> EpisodicMemory:
        memory = EpisodicMemory(
            content=content,
            context=context,
            emotional_weight=clamp(emotional_weight, -1.0, 1.0),
        )
        self._records.append(memory)
        return memory

    def append(self, memory: EpisodicMemory) -> None:
        self._records.append(memory)

    def snapshot(self) -> tuple[EpisodicMemory, ...]:
        return tuple(self._records)

    def replace(self, records: Iterable[EpisodicMemory]) -> None:
        self._records = list(records)

    def sanitize(self) -> int:
        fixed = 0
        for record in self._records:
            for name in ("emotional_weight", "relevance_score"):
                value, changed = sanitize_field(getattr(record, name), name)
                if changed:
                    setattr(record, name, value)
                    fixed += 1
        return fixed

    def to_list(self) -> list[dict[str, Any]]:
        return [r.to_dict() for r in self._records]

    @classmethod
    def from_list(cls, rows: list[dict[str, Any]]) -> EpisodicStore:
        records = []
        for raw in rows or []:
            records.append(
                EpisodicMemory(
                    id=str(raw["id"]),
                    timestamp=parse_iso(raw["timestamp"]),
                    content=str(raw.get("content", "")),
                    context=str(raw.get("context", "")),
                    emotional_weight=sanitize_field(raw.get("emotional_weight"), "emotional_weight")[0],
                    relevance_score=sanitize_field(raw.get("relevance_score"), "relevance_score")[0],
                )
            )
        return cls(records)
