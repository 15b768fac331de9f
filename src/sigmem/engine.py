"""Sigel engine — orchestrator wiring learning, consolidation and persistence."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from sigmem.config import Config
from sigmem.consolidation.consolidator import MemoryConsolidator
from sigmem.learning.learner import IngestStats, PatternLearner
from sigmem.sigel import Sigel
from sigmem.storage.snapshot import SnapshotStore
from sigmem.types import ConsolidationReport, ConsolidationSchedule

logger = logging.getLogger(__name__)


class SigelEngine:
    """Entry point used by the CLI and any other caller.

    Every call that touches a Sigel takes that Sigel's own lock, so ingestion,
    prediction and consolidation never interleave on the same entity while
    different entities proceed independently.
    """

    def __init__(self, config: Config | None = None, rng: np.random.Generator | None = None) -> None:
        self.config = config or Config()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.learner = PatternLearner(self.config.learning, rng=self.rng)
        self.consolidator = MemoryConsolidator(
            self.config.consolidation,
            scoring_config=self.config.scoring,
        )
        self.snapshots = SnapshotStore(self.config)

    # --- Lifecycle ---

    def create(self, name: str) -> Sigel:
        return Sigel(name, config=self.config)

    def load(self, path: Path | str) -> Sigel:
        sigel = self.snapshots.load(path)
        logger.info("Loaded %r from %s", sigel, path)
        return sigel

    def save(self, sigel: Sigel, path: Path | str | None = None) -> Path:
        target = Path(path) if path is not None else self.config.sigel_path(sigel.name)
        with sigel.lock:
            return self.snapshots.save(sigel, target)

    # --- Learning ---

    def ingest(self, sigel: Sigel, text: str, source_tag: str = "") -> IngestStats:
        with sigel.lock:
            return self.learner.ingest(sigel, text, source_tag)

    def train_directory(self, sigel: Sigel, directory: Path | str) -> IngestStats:
        with sigel.lock:
            return self.learner.train_directory(sigel, directory)

    def learn_interaction(self, sigel: Sigel, interaction: str, response: str) -> None:
        with sigel.lock:
            self.learner.learn_interaction(sigel, interaction, response)

    def predict_next(self, sigel: Sigel, context: Sequence[str]) -> str:
        with sigel.lock:
            return self.learner.predict_next_token(sigel, list(context))

    # --- Consolidation ---

    def consolidate(self, sigel: Sigel, now: datetime | None = None) -> ConsolidationReport:
        with sigel.lock:
            return self.consolidator.consolidate(sigel, now=now)

    def schedule(self, now: datetime | None = None) -> ConsolidationSchedule:
        return self.consolidator.schedule(now)

    # --- Status ---

    def status(self, sigel: Sigel) -> dict[str, Any]:
        with sigel.lock:
            return {
                "id": sigel.id,
                "name": sigel.name,
                "words": len(sigel.vocabulary),
                "patterns": len(sigel.patterns),
                "temporal_patterns": len(sigel.patterns.temporal_patterns),
                "network_words": sum(1 for _ in sigel.patterns.network_words()),
                "memories": len(sigel.episodic),
                "training_iterations": sigel.learning_state.training_iterations,
                "text_corpus_size": sigel.learning_state.text_corpus_size,
                "last_evolved": sigel.last_evolved.isoformat(),
            }
