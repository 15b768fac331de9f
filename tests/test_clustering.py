from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from sigmem.consolidation.clusterer import SimilarityClusterer, extract_topic, jaccard
from sigmem.types import EmotionalProfile, EpisodicMemory, MemoryScore, Priority

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _memory(content: str, context: str = "ctx", weight: float = 0.0,
            at: datetime = NOW) -> EpisodicMemory:
    return EpisodicMemory(content=content, context=context, emotional_weight=weight, timestamp=at)


def _score(total: float) -> MemoryScore:
    return MemoryScore(total_importance=total, factors={}, priority=Priority.LOW)


def test_jaccard():
    assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
    assert jaccard(set(), set()) == 0.0


def test_identical_memories_have_full_similarity():
    a = _memory("the cat sat on the mat")
    b = _memory("the cat sat on the mat")
    assert SimilarityClusterer.similarity(a, b) == pytest.approx(1.0)


def test_similarity_components():
    a = _memory("alpha beta", context="one", weight=1.0)
    b = _memory("gamma delta", context="two", weight=-1.0, at=NOW + timedelta(hours=10))
    # no shared words, different context, opposite emotion, ten hours apart
    assert SimilarityClusterer.similarity(a, b) == pytest.approx(0.1)


def test_extract_topic():
    assert extract_topic("quantum fields are interesting") == "interesting_quantum_fields"
    assert extract_topic("the cat sat") == "general"
    assert extract_topic("that have been") == "general"
    assert extract_topic("blue blue green green") == "green_blue"


def test_cluster_groups_similar_memories_and_sorts_by_importance():
    memories = [
        _memory("quantum fields are interesting", context="lab"),
        _memory("the cat sat on the mat"),
        _memory("the cat sat on the rug"),
    ]
    scores = [_score(0.5), _score(0.4), _score(0.3)]
    clusters = SimilarityClusterer(0.7).cluster(memories, scores)

    assert [c.member_indices for c in clusters] == [[1, 2], [0]]
    assert clusters[0].core_index == 1
    assert clusters[0].aggregated_importance == pytest.approx(0.7)
    assert clusters[0].topic == "general"
    assert clusters[0].emotional_profile is EmotionalProfile.NEUTRAL
    assert clusters[1].topic == "interesting_quantum_fields"


def test_first_unprocessed_memory_seeds_the_cluster():
    memories = [_memory("same words here"), _memory("same words here"), _memory("same words here")]
    clusters = SimilarityClusterer().cluster(memories, [_score(0.1), _score(0.9), _score(0.2)])
    assert len(clusters) == 1
    assert clusters[0].core_index == 0
    assert clusters[0].member_indices == [0, 1, 2]


def test_cluster_rejects_mismatched_scores():
    with pytest.raises(ValueError):
        SimilarityClusterer().cluster([_memory("a b c")], [])


def test_emotional_profile_from_weight():
    assert EmotionalProfile.from_weight(0.5) is EmotionalProfile.POSITIVE
    assert EmotionalProfile.from_weight(-0.5) is EmotionalProfile.NEGATIVE
    assert EmotionalProfile.from_weight(0.05) is EmotionalProfile.NEUTRAL
    assert EmotionalProfile.from_weight(0.2) is EmotionalProfile.MIXED
