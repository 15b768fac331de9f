"""sigmem configuration."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field


def _default_data_dir() -> Path:
    return Path(os.environ.get("SIGMEM_DATA_DIR", Path.cwd() / "sigels"))


def _default_seed() -> int | None:
    raw = os.environ.get("SIGMEM_SEED", "").strip()
    return int(raw) if raw else None


class LearningConfig(BaseModel):
    learning_rate: float = 0.01
    min_eval_samples: int = 1_000
    max_eval_samples: int = 10_000
    # Exclusive bounds on tokens per remembered sentence.
    min_sentence_tokens: int = 5
    max_sentence_tokens: int = 50
    min_pattern_sentence_chars: int = 10
    pattern_prune_threshold: float = 0.1
    max_word_contexts: int = 32
    semantic_network_cap: int = 20


class ScoringConfig(BaseModel):
    emotional_weight: float = 0.3
    recency_weight: float = 0.2
    uniqueness_weight: float = 0.25
    pattern_weight: float = 0.15
    resonance_weight: float = 0.1
    recency_decay_per_hour: float = 0.01
    recency_floor: float = 0.1
    high_threshold: float = 0.7
    medium_threshold: float = 0.4


class ConsolidationConfig(BaseModel):
    similarity_threshold: float = 0.7
    retain_threshold: float = 0.8
    decay_rate: float = 0.01
    prune_threshold: float = 0.01
    bigram_reinforcement: float = 0.1
    trigram_reinforcement: float = 0.05
    max_pattern_strength: float = 2.0
    new_pattern_min_reinforcement: float = 0.1
    max_workers: int = 4
    initial_delay_hours: float = 1.0
    interval_hours: float = 6.0
    deep_interval_hours: float = 24.0


class StorageConfig(BaseModel):
    compress: bool = False
    extension: str = "sig"
    compressed_extension: str = "sig.gz"


class Config(BaseModel):
    data_dir: Path = Field(default_factory=_default_data_dir)
    seed: int | None = Field(default_factory=_default_seed)
    log_level: str = Field(default_factory=lambda: os.environ.get("SIGMEM_LOG_LEVEL", "INFO"))
    learning: LearningConfig = Field(default_factory=LearningConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    consolidation: ConsolidationConfig = Field(default_factory=ConsolidationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    def sigel_path(self, name: str) -> Path:
        ext = self.storage.compressed_extension if self.storage.compress else self.storage.extension
        return self.data_dir / f"{name}.{ext}"

    def ensure_dirs(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
