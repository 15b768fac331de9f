"""Memory consolidation — scoring, clustering, compaction, reinforcement and decay."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from typing import Callable, Sequence, TypeVar

from sigmem.config import ConsolidationConfig, ScoringConfig
from sigmem.consolidation.clusterer import SimilarityClusterer
from sigmem.consolidation.scorer import ImportanceScorer
from sigmem.exceptions import ConsolidationError
from sigmem.sigel import Sigel
from sigmem.types import (
    CONSOLIDATED_CONTEXT,
    ConsolidatedMemory,
    ConsolidationReport,
    ConsolidationSchedule,
    EpisodicMemory,
    MemoryCluster,
    MemoryScore,
)
from sigmem.utils import ngrams, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class MemoryConsolidator:
    """Runs one consolidation pass over a Sigel.

    Scoring and cluster compaction are pure functions of a snapshot of the
    episodic store and run on a thread pool. Everything that mutates the Sigel
    happens afterwards on the calling thread, which must hold the Sigel's lock.
    """

    def __init__(
        self,
        config: ConsolidationConfig | None = None,
        scorer: ImportanceScorer | None = None,
        clusterer: SimilarityClusterer | None = None,
        scoring_config: ScoringConfig | None = None,
    ) -> None:
        self.config = config or ConsolidationConfig()
        self.scorer = scorer or ImportanceScorer(scoring_config)
        self.clusterer = clusterer or SimilarityClusterer(self.config.similarity_threshold)

    def consolidate(
        self,
        sigel: Sigel,
        now: datetime | None = None,
        contextual_alignment: float | None = None,
    ) -> ConsolidationReport:
        started = time.perf_counter()
        memories = sigel.episodic.snapshot()
        if not memories:
            return ConsolidationReport()
        now = now or utcnow()

        scores = self.score_all(memories, sigel, now, contextual_alignment)
        clusters = self.clusterer.cluster(memories, scores)
        self._check_partition(clusters, len(memories))
        consolidated = self.compact_all(clusters, now)

        self._update_memory_core(sigel, memories, scores, consolidated)
        self._optimize_patterns(sigel, memories, scores)
        self._enhance_semantic_network(sigel)

        after = len(sigel.episodic)
        report = ConsolidationReport(
            memories_analyzed=len(memories),
            clusters_formed=len(clusters),
            memories_consolidated=len(consolidated),
            processing_time=time.perf_counter() - started,
            memory_reduction_ratio=1.0 - after / max(1, len(memories)),
        )
        logger.info(
            "Memory consolidation completed for %s: %d memories analyzed, %d consolidated, %d retained",
            sigel.name, report.memories_analyzed, report.memories_consolidated, after,
        )
        return report

    def schedule(self, now: datetime | None = None) -> ConsolidationSchedule:
        now = now or utcnow()
        return ConsolidationSchedule(
            next_consolidation=now + timedelta(hours=self.config.initial_delay_hours),
            interval_hours=self.config.interval_hours,
            deep_interval_hours=self.config.deep_interval_hours,
        )

    # --- Parallel phases (read-only) ---

    def score_all(
        self,
        memories: Sequence[EpisodicMemory],
        sigel: Sigel,
        now: datetime,
        contextual_alignment: float | None = None,
    ) -> list[MemoryScore]:
        return self._parallel_map(
            lambda m: self.scorer.score(m, sigel, now=now, contextual_alignment=contextual_alignment),
            memories,
        )

    def compact_all(
        self,
        clusters: Sequence[MemoryCluster],
        now: datetime,
    ) -> list[ConsolidatedMemory]:
        return self._parallel_map(lambda c: self.compact(c, now), clusters)

    @staticmethod
    def compact(cluster: MemoryCluster, now: datetime | None = None) -> ConsolidatedMemory:
        """Compress one cluster into a summary record."""
        count = len(cluster.member_indices)
        concepts = {
            cluster.topic: 1.0,
            cluster.emotional_profile.concept: 0.8,
        }
        if cluster.aggregated_importance > 1.0:
            concepts["high_significance"] = 0.9
        return ConsolidatedMemory(
            summary=f"Consolidated memory cluster about {cluster.topic} with {count} related memories",
            key_patterns=[
                f"topic:{cluster.topic}",
                f"emotional_pattern:{cluster.emotional_profile.value}",
                "cluster_pattern",
            ],
            essential_concepts=concepts,
            aggregated_importance=cluster.aggregated_importance,
            emotional_profile=cluster.emotional_profile,
            original_member_count=count,
            created_at=now or utcnow(),
        )

    def _parallel_map(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        workers = max(1, int(self.config.max_workers))
        if workers == 1 or len(items) <= 1:
            return [fn(item) for item in items]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(fn, items))

    # --- Sequential merge ---

    def _update_memory_core(
        self,
        sigel: Sigel,
        memories: Sequence[EpisodicMemory],
        scores: Sequence[MemoryScore],
        consolidated: Sequence[ConsolidatedMemory],
    ) -> None:
        threshold = self.config.retain_threshold
        for memory, score in zip(memories, scores):
            memory.relevance_score = score.total_importance
        retained = [m for m in memories if m.relevance_score > threshold]
        sigel.episodic.replace([*retained, *(c.to_episodic() for c in consolidated)])

    def _optimize_patterns(
        self,
        sigel: Sigel,
        memories: Sequence[EpisodicMemory],
        scores: Sequence[MemoryScore],
    ) -> None:
        cfg = self.config
        reinforcement: dict[str, float] = {}
        for memory, score in zip(memories, scores):
            tokens = memory.content.split()
            for pattern in ngrams(tokens, 2):
                reinforcement[pattern] = reinforcement.get(pattern, 0.0) + score.total_importance * cfg.bigram_reinforcement
            for pattern in ngrams(tokens, 3):
                reinforcement[pattern] = reinforcement.get(pattern, 0.0) + score.total_importance * cfg.trigram_reinforcement

        sigel.patterns.apply_reinforcement(
            reinforcement,
            cap=cfg.max_pattern_strength,
            min_new=cfg.new_pattern_min_reinforcement,
        )
        # Decay also applies to the patterns reinforced just above.
        sigel.patterns.decay(cfg.decay_rate)
        sigel.patterns.prune(cfg.prune_threshold)

    def _enhance_semantic_network(self, sigel: Sigel) -> None:
        threshold = self.config.retain_threshold
        for memory in sigel.episodic:
            if memory.relevance_score <= threshold and memory.context != CONSOLIDATED_CONTEXT:
                continue
            tokens = [w.lower() for w in memory.content.split()]
            for i, first in enumerate(tokens):
                for second in tokens[i + 1:]:
                    if first != second:
                        sigel.patterns.link(first, second)
        sigel.patterns.normalize_network()

    @staticmethod
    def _check_partition(clusters: Sequence[MemoryCluster], count: int) -> None:
        members = [i for c in clusters for i in c.member_indices]
        if len(members) != count or len(set(members)) != count:
            raise ConsolidationError(
                f"clusters cover {len(set(members))} of {count} memories"
            )
