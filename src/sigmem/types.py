"""Core data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from sigmem.utils import iso_str, new_id, utcnow

CONSOLIDATED_CONTEXT = "consolidated_memory"
INTERACTION_CONTEXT = "user_interaction"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EmotionalProfile(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"

    @classmethod
    def from_weight(cls, weight: float) -> EmotionalProfile:
        if weight > 0.3:
            return cls.POSITIVE
        if weight < -0.3:
            return cls.NEGATIVE
        if abs(weight) <= 0.1:
            return cls.NEUTRAL
        return cls.MIXED

    @property
    def weight(self) -> float:
        """Emotional weight given to a consolidated record with this profile."""
        if self is EmotionalProfile.POSITIVE:
            return 0.7
        if self is EmotionalProfile.NEGATIVE:
            return -0.7
        return 0.0

    @property
    def concept(self) -> str:
        return {
            EmotionalProfile.POSITIVE: "positive_experience",
            EmotionalProfile.NEGATIVE: "challenging_experience",
            EmotionalProfile.NEUTRAL: "neutral_experience",
            EmotionalProfile.MIXED: "complex_experience",
        }[self]


@dataclass
class WordKnowledge:
    frequency: float = 1.0
    contexts: list[str] = field(default_factory=list)
    emotional_valence: float = 0.0
    semantic_weight: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "frequency": self.frequency,
            "contexts": list(self.contexts),
            "emotional_valence": self.emotional_valence,
            "semantic_weight": self.semantic_weight,
        }


@dataclass
class TemporalPattern:
    sequence: list[str]
    frequency: float
    context_relevance: float = 1.0

    @property
    def context(self) -> str:
        return " ".join(self.sequence[:3])

    @property
    def target(self) -> str:
        return self.sequence[3]

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": list(self.sequence),
            "frequency": self.frequency,
            "context_relevance": self.context_relevance,
        }


@dataclass
class EpisodicMemory:
    content: str
    context: str
    emotional_weight: float = 0.0
    relevance_score: float = 1.0
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": iso_str(self.timestamp),
            "content": self.content,
            "context": self.context,
            "emotional_weight": self.emotional_weight,
            "relevance_score": self.relevance_score,
        }


@dataclass(frozen=True)
class MemoryScore:
    total_importance: float
    factors: dict[str, float]
    priority: Priority


@dataclass
class MemoryCluster:
    core_index: int
    member_indices: list[int]
    topic: str
    aggregated_importance: float
    emotional_profile: EmotionalProfile


@dataclass
class ConsolidatedMemory:
    summary: str
    key_patterns: list[str]
    essential_concepts: dict[str, float]
    aggregated_importance: float
    emotional_profile: EmotionalProfile
    original_member_count: int
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    access_frequency: int = 0

    def to_episodic(self) -> EpisodicMemory:
        return EpisodicMemory(
            id=self.id,
            timestamp=self.created_at,
            content=self.summary,
            context=CONSOLIDATED_CONTEXT,
            emotional_weight=self.emotional_profile.weight,
            relevance_score=self.aggregated_importance,
        )


@dataclass(frozen=True)
class ConsolidationReport:
    memories_analyzed: int = 0
    clusters_formed: int = 0
    memories_consolidated: int = 0
    processing_time: float = 0.0
    memory_reduction_ratio: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "memories_analyzed": self.memories_analyzed,
            "clusters_formed": self.clusters_formed,
            "memories_consolidated": self.memories_consolidated,
            "processing_time": self.processing_time,
            "memory_reduction_ratio": self.memory_reduction_ratio,
        }


@dataclass(frozen=True)
class ConsolidationSchedule:
    next_consolidation: datetime
    interval_hours: float
    deep_interval_hours: float
    maintenance_mode: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "next_consolidation": iso_str(self.next_consolidation),
            "interval_hours": self.interval_hours,
            "deep_interval_hours": self.deep_interval_hours,
            "maintenance_mode": self.maintenance_mode,
        }


@dataclass
class LearningState:
    training_iterations: int = 0
    text_corpus_size: int = 0
    learning_rate: float = 0.01

    def to_dict(self) -> dict[str, Any]:
        return {
            "training_iterations": self.training_iterations,
            "text_corpus_size": self.text_corpus_size,
            "learning_rate": self.learning_rate,
        }
