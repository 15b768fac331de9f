"""Sigel — the owning aggregate mutated by learning and consolidation."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any

from sigmem.config import Config
from sigmem.knowledge.patterns import PatternIndex
from sigmem.knowledge.vocabulary import VocabularyStore
from sigmem.memory.episodic import EpisodicStore
from sigmem.numerics import sanitize_field
from sigmem.types import LearningState
from sigmem.utils import iso_str, new_id, parse_iso, utcnow

logger = logging.getLogger(__name__)

SIGEL_VERSION = "0.1.0"
DEFAULT_CONTEXTUAL_ALIGNMENT = 3.0


class Sigel:
    """Vocabulary, pattern index, episodic memory and learning state of one entity.

    ``lock`` serializes ingest/predict/consolidate per entity; it is never
    persisted.
    """

    def __init__(
        self,
        name: str,
        config: Config | None = None,
        *,
        id: str | None = None,
        vocabulary: VocabularyStore | None = None,
        patterns: PatternIndex | None = None,
        episodic: EpisodicStore | None = None,
        learning_state: LearningState | None = None,
        contextual_alignment: float = DEFAULT_CONTEXTUAL_ALIGNMENT,
        created_at: datetime | None = None,
        last_evolved: datetime | None = None,
        version: str = SIGEL_VERSION,
    ) -> None:
        cfg = config or Config()
        self.id = id if id is not None else new_id()
        self.name = name
        if vocabulary is None:
            vocabulary = VocabularyStore(cfg.learning.max_word_contexts)
        if patterns is None:
            patterns = PatternIndex(cfg.learning.semantic_network_cap)
        self.vocabulary = vocabulary
        self.patterns = patterns
        self.episodic = episodic if episodic is not None else EpisodicStore()
        self.learning_state = learning_state if learning_state is not None else LearningState(
            learning_rate=cfg.learning.learning_rate
        )
        self.contextual_alignment = contextual_alignment
        self.created_at = created_at if created_at is not None else utcnow()
        self.last_evolved = last_evolved if last_evolved is not None else self.created_at
        self.version = version
        self.lock = threading.RLock()

    def __repr__(self) -> str:
        return (
            f"Sigel(name={self.name!r}, words={len(self.vocabulary)}, "
            f"patterns={len(self.patterns)}, memories={len(self.episodic)})"
        )

    def evolve(self) -> None:
        self.last_evolved = utcnow()
        self.learning_state.training_iterations += 1
        self.contextual_alignment *= 1.001

    def sanitize(self) -> int:
        """Replace non-finite numbers with their documented defaults.

        Returns the number of values that were corrected.
        """
        fixed = self.vocabulary.sanitize() + self.patterns.sanitize() + self.episodic.sanitize()
        rate, changed = sanitize_field(self.learning_state.learning_rate, "learning_rate")
        if changed:
            self.learning_state.learning_rate = rate
            fixed += 1
        alignment, changed = sanitize_field(self.contextual_alignment, "contextual_alignment")
        if changed:
            self.contextual_alignment = alignment
            fixed += 1
        if fixed:
            logger.warning("Sanitized %d numeric values in sigel %s", fixed, self.name)
        return fixed

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "created_at": iso_str(self.created_at),
            "last_evolved": iso_str(self.last_evolved),
            "contextual_alignment": self.contextual_alignment,
            "learning_state": self.learning_state.to_dict(),
            "vocabulary": self.vocabulary.to_dict(),
            "patterns": self.patterns.to_dict(),
            "episodic_memories": self.episodic.to_list(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], config: Config | None = None) -> Sigel:
        cfg = config or Config()
        state = data.get("learning_state", {})
        created_at = parse_iso(data["created_at"])
        return cls(
            name=str(data["name"]),
            config=cfg,
            id=str(data["id"]),
            vocabulary=VocabularyStore.from_dict(
                data.get("vocabulary", {}), max_contexts=cfg.learning.max_word_contexts
            ),
            patterns=PatternIndex.from_dict(
                data.get("patterns", {}), network_cap=cfg.learning.semantic_network_cap
            ),
            episodic=EpisodicStore.from_list(data.get("episodic_memories", [])),
            learning_state=LearningState(
                training_iterations=int(state.get("training_iterations", 0)),
                text_corpus_size=int(state.get("text_corpus_size", 0)),
                learning_rate=sanitize_field(state.get("learning_rate"), "learning_rate")[0],
            ),
            contextual_alignment=sanitize_field(
                data.get("contextual_alignment"), "contextual_alignment"
            )[0],
            created_at=created_at,
            last_evolved=parse_iso(data.get("last_evolved") or data["created_at"]),
            version=str(data.get("version", SIGEL_VERSION)),
        )
