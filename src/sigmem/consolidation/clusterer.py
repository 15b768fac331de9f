"""Greedy single-link clustering of similar episodic memories."""

from __future__ import annotations

from typing import Sequence

from sigmem.types import EmotionalProfile, EpisodicMemory, MemoryCluster, MemoryScore
from sigmem.utils import hours_between

COMMON_WORDS = frozenset({
    "the", "and", "that", "have", "for", "not", "with", "you", "this", "but",
    "his", "from", "they", "she", "her", "been", "than", "its", "who", "did",
})


def jaccard(a: set[str], b: set[str]) -> float:
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union


def extract_topic(content: str) -> str:
    """Up to three longest meaningful words joined by ``_``, or ``"general"``."""
    seen: list[str] = []
    for word in content.split():
        if len(word) > 3 and word.lower() not in COMMON_WORDS and word not in seen:
            seen.append(word)
    if not seen:
        return "general"
    # sorted() is stable: equal lengths keep their order of appearance.
    longest = sorted(seen, key=len, reverse=True)[:3]
    return "_".join(longest)


class SimilarityClusterer:
    """Order-dependent greedy grouping.

    Memories are visited in store order and the first unprocessed memory always
    seeds the next cluster; only later memories can join it. This is the
    canonical tie-break and keeps results reproducible. O(n^2) in memory count.
    """

    def __init__(self, threshold: float = 0.7) -> None:
        self.threshold = threshold

    @staticmethod
    def similarity(a: EpisodicMemory, b: EpisodicMemory) -> float:
        content = jaccard(set(a.content.split()), set(b.content.split()))
        context = 1.0 if a.context == b.context else 0.0
        emotional = 1.0 - min(abs(a.emotional_weight - b.emotional_weight) / 2.0, 1.0)
        delta_hours = abs(hours_between(a.timestamp, b.timestamp))
        temporal = 1.0 / (1.0 + delta_hours * 0.1)
        return content * 0.4 + context * 0.2 + emotional * 0.2 + temporal * 0.2

    def cluster(
        self,
        memories: Sequence[EpisodicMemory],
        scores: Sequence[MemoryScore],
    ) -> list[MemoryCluster]:
        if len(scores) != len(memories):
            raise ValueError("memories and scores length mismatch")

        clusters: list[MemoryCluster] = []
        processed = [False] * len(memories)
        for idx, memory in enumerate(memories):
            if processed[idx]:
                continue
            processed[idx] = True
            cluster = MemoryCluster(
                core_index=idx,
                member_indices=[idx],
                topic=extract_topic(memory.content),
                aggregated_importance=scores[idx].total_importance,
                emotional_profile=EmotionalProfile.from_weight(memory.emotional_weight),
            )
            for other_idx in range(idx + 1, len(memories)):
                if processed[other_idx]:
                    continue
                if self.similarity(memory, memories[other_idx]) > self.threshold:
                    cluster.member_indices.append(other_idx)
                    cluster.aggregated_importance += scores[other_idx].total_importance
                    processed[other_idx] = True
            clusters.append(cluster)

        clusters.sort(key=lambda c: c.aggregated_importance, reverse=True)
        return clusters
