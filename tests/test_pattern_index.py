from __future__ import annotations

from sigmem.knowledge.patterns import PatternIndex
from sigmem.knowledge.vocabulary import VocabularyStore


def test_reinforce_decay_and_prune():
    index = PatternIndex()
    index.reinforce("the cat", 1.0)
    index.reinforce("the cat", 0.5)
    index.reinforce("cat sat", 0.2)
    assert index.strength("the cat") == 1.5

    index.decay(0.5)
    assert index.strength("the cat") == 0.75
    assert index.strength("cat sat") == 0.1

    removed = index.prune(0.1)
    assert removed == 1
    assert "cat sat" not in index
    assert len(index) == 1


def test_strengths_never_go_negative():
    index = PatternIndex()
    index.reinforce("a b", 0.2)
    index.reinforce("a b", -5.0)
    assert index.strength("a b") == 0.0

    index.reinforce("c d", 1.0)
    index.decay(1.5)
    assert index.strength("c d") == 0.0


def test_apply_reinforcement_caps_existing_and_gates_new_patterns():
    index = PatternIndex()
    index.reinforce("known", 1.9)
    updated, created = index.apply_reinforcement(
        {"known": 0.5, "fresh strong": 0.2, "fresh weak": 0.05},
        cap=2.0,
        min_new=0.1,
    )
    assert (updated, created) == (1, 1)
    assert index.strength("known") == 2.0
    assert index.strength("fresh strong") == 0.2
    assert "fresh weak" not in index


def test_connect_is_bidirectional_deduplicated_and_capped():
    index = PatternIndex(network_cap=3)
    for word in ["b", "c", "b", "d", "e", "f"]:
        index.connect("a", word)
    assert index.neighbors("a") == ["b", "c", "d"]
    assert index.neighbors("b") == ["a"]
    assert index.neighbors("f") == ["a"]


def test_connect_skips_empty_words():
    index = PatternIndex()
    index.connect("", "cat")
    index.connect("cat", "")
    assert index.neighbors("cat") == []
    assert list(index.network_words()) == []


def test_normalize_network_sorts_dedupes_and_truncates():
    index = PatternIndex(network_cap=20)
    for i in range(30):
        index.link("hub", f"w{i:02d}")
        index.link("hub", f"w{i:02d}")
    index.link("zed", "alpha")
    index.normalize_network()

    hub = index.neighbors("hub")
    assert len(hub) == 20
    assert hub == sorted(set(hub))
    assert hub[0] == "w00"
    assert index.neighbors("w05") == ["hub"]
    assert index.neighbors("zed") == ["alpha"]


def test_find_temporal_returns_first_inserted_match():
    index = PatternIndex()
    index.add_temporal(["The", "cat", "sat", "on"], frequency=0.01)
    index.add_temporal(["the", "cat", "sat", "down"], frequency=0.02)
    index.add_temporal(["the", "cat", "sat", "down"], frequency=0.02)

    match = index.find_temporal("the CAT sat")
    assert match is not None
    assert match.target == "on"
    assert len(index.temporal_patterns) == 3
    assert index.find_temporal("dog ran") is None


def test_relevance_sums_contained_patterns():
    index = PatternIndex()
    index.reinforce("the cat", 0.5)
    index.reinforce("on the", 0.25)
    index.reinforce("quantum", 1.0)
    assert index.relevance("the cat sat on the mat") == 0.75


def test_vocabulary_frequency_is_seeded_then_incremented():
    vocab = VocabularyStore(max_contexts=2)
    first = vocab.learn("cat", "the sat")
    assert first.frequency == 1.0
    vocab.learn("cat", "the sat")
    vocab.learn("cat", "a ran")
    vocab.learn("cat", "my slept")

    knowledge = vocab.get("cat")
    assert knowledge is not None
    assert knowledge.frequency == 4.0
    assert knowledge.contexts == ["the sat", "a ran"]
    assert vocab.frequency("dog") is None
    assert "cat" in vocab
