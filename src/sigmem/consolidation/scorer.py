"""Multi-factor importance scoring of episodic memories."""

from __future__ import annotations

from datetime import datetime

from sigmem.config import ScoringConfig
from sigmem.sigel import Sigel
from sigmem.types import EpisodicMemory, MemoryScore, Priority
from sigmem.utils import clean_word, hours_between, utcnow, words


class ImportanceScorer:
    """Weighted sum of five independent factors.

    Each factor lives in its own unit range and is scaled by its weight; the
    weights are not normalized against each other. The only impure input is
    wall-clock time, which callers can pin with ``now``.
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig()

    def score(
        self,
        memory: EpisodicMemory,
        sigel: Sigel,
        now: datetime | None = None,
        contextual_alignment: float | None = None,
    ) -> MemoryScore:
        cfg = self.config
        alignment = sigel.contextual_alignment if contextual_alignment is None else contextual_alignment
        factors = {
            "emotional": abs(memory.emotional_weight) * cfg.emotional_weight,
            "recency": self.recency(memory, now or utcnow()) * cfg.recency_weight,
            "uniqueness": self.uniqueness(memory.content, sigel) * cfg.uniqueness_weight,
            "pattern_relevance": self.pattern_relevance(memory.content, sigel) * cfg.pattern_weight,
            "contextual_resonance": alignment * cfg.resonance_weight,
        }
        total = sum(factors.values())
        return MemoryScore(total_importance=total, factors=factors, priority=self.priority(total))

    def priority(self, total: float) -> Priority:
        if total > self.config.high_threshold:
            return Priority.HIGH
        if total > self.config.medium_threshold:
            return Priority.MEDIUM
        return Priority.LOW

    def recency(self, memory: EpisodicMemory, now: datetime) -> float:
        age_hours = hours_between(now, memory.timestamp)
        if age_hours < 0:
            # Clock skew: a record from the future gets a neutral recency.
            return 0.5
        return max(1.0 / (1.0 + age_hours * self.config.recency_decay_per_hour),
                   self.config.recency_floor)

    @staticmethod
    def uniqueness(content: str, sigel: Sigel) -> float:
        """Rare and unknown words raise uniqueness; normalized by content length."""
        total = 0.0
        for word in words(content):
            freq = sigel.vocabulary.frequency(clean_word(word))
            total += 1.0 if freq is None else 1.0 / (freq + 1.0)
        return min(total / max(1, len(content)), 1.0)

    @staticmethod
    def pattern_relevance(content: str, sigel: Sigel) -> float:
        return min(sigel.patterns.relevance(content) / max(1, len(sigel.patterns)), 1.0)
