from __future__ import annotations

import logging

import numpy as np
import orjson
import pytest

from sigmem.config import LearningConfig
from sigmem.consolidation.consolidator import MemoryConsolidator
from sigmem.exceptions import StorageError
from sigmem.knowledge.patterns import PatternIndex
from sigmem.knowledge.vocabulary import VocabularyStore
from sigmem.learning.learner import PatternLearner
from sigmem.memory.episodic import EpisodicStore
from sigmem.sigel import Sigel
from sigmem.storage.snapshot import SnapshotStore

TEXT = "the cat sat on the mat. the dog ran in the park. I love a wonderful morning walk."


def _trained() -> Sigel:
    sigel = Sigel("persisted")
    learner = PatternLearner(
        LearningConfig(min_eval_samples=25, max_eval_samples=25),
        rng=np.random.default_rng(3),
    )
    learner.ingest(sigel, TEXT, "fixture")
    learner.learn_interaction(sigel, "hello", "hi")
    return sigel


def test_round_trip_preserves_finite_sigel(tmp_path):
    store = SnapshotStore()
    sigel = _trained()
    path = store.save(sigel, tmp_path / "persisted.sig")

    loaded = store.load(path)
    assert loaded.to_dict() == sigel.to_dict()
    assert store.dumps(loaded) == store.dumps(sigel)
    assert loaded.created_at == sigel.created_at
    assert [m.id for m in loaded.episodic] == [m.id for m in sigel.episodic]


def test_compressed_round_trip(tmp_path):
    store = SnapshotStore()
    sigel = _trained()
    path = store.save(sigel, tmp_path / "persisted.sig.gz")
    assert path.read_bytes()[:2] == b"\x1f\x8b"
    assert store.load(path).to_dict() == sigel.to_dict()


def test_non_finite_values_are_replaced_on_save(tmp_path, caplog):
    store = SnapshotStore()
    sigel = Sigel("broken")
    sigel.vocabulary.learn("cat", "the sat").frequency = float("inf")
    sigel.episodic.add("a record that goes bad", "c", 0.2).emotional_weight = float("nan")
    sigel.patterns.add_temporal(["a", "b", "c", "d"], frequency=float("nan"))
    sigel.contextual_alignment = float("-inf")

    with caplog.at_level(logging.WARNING):
        path = store.save(sigel, tmp_path / "broken.sig")
    assert "Sanitized 4 numeric values" in caplog.text

    raw = path.read_bytes()
    for token in (b"null", b"NaN", b"Infinity"):
        assert token not in raw

    loaded = store.load(path)
    assert loaded.vocabulary.get("cat").frequency == 1.0
    assert loaded.episodic[0].emotional_weight == 0.0
    assert loaded.patterns.temporal_patterns[0].frequency == 1.0
    assert loaded.contextual_alignment == 0.7


def test_null_values_on_load_use_defaults(tmp_path):
    data = Sigel("nulls").to_dict()
    data["patterns"]["linguistic_patterns"] = {"a b": None, "c d": -1.0}
    data["contextual_alignment"] = None
    path = tmp_path / "nulls.sig"
    path.write_bytes(orjson.dumps(data))

    loaded = SnapshotStore().load(path)
    assert loaded.patterns.strength("a b") == 0.5
    assert loaded.patterns.strength("c d") == 0.0
    assert loaded.contextual_alignment == 0.7


@pytest.mark.parametrize(
    "payload",
    [b"{not json", b"[]", b'{"id": "x"}'],
)
def test_bad_snapshots_raise_storage_error(tmp_path, payload):
    path = tmp_path / "bad.sig"
    path.write_bytes(payload)
    with pytest.raises(StorageError):
        SnapshotStore().load(path)


def test_missing_file_raises_storage_error(tmp_path):
    with pytest.raises(StorageError):
        SnapshotStore().load(tmp_path / "absent.sig")


def test_round_trip_keeps_network_without_linguistic_patterns(tmp_path):
    store = SnapshotStore()
    sigel = Sigel("network-only")
    sigel.patterns.connect("river", "bank")
    sigel.patterns.add_temporal(["the", "river", "bank", "flooded"], frequency=0.02)
    sigel.episodic.add("the river bank flooded overnight again", "c", 0.0)
    assert len(sigel.patterns) == 0

    loaded = store.load(store.save(sigel, tmp_path / "network-only.sig"))
    assert loaded.patterns.neighbors("river") == ["bank"]
    assert len(loaded.patterns.temporal_patterns) == 1
    assert loaded.patterns.to_dict() == sigel.patterns.to_dict()


def test_round_trip_after_interaction_and_consolidation(tmp_path):
    store = SnapshotStore()
    sigel = Sigel("interactive")
    PatternLearner().learn_interaction(sigel, "hello", "hi")
    MemoryConsolidator().consolidate(sigel)
    assert len(sigel.patterns) == 0
    assert list(sigel.patterns.network_words())

    loaded = store.load(store.save(sigel, tmp_path / "interactive.sig"))
    assert loaded.to_dict() == sigel.to_dict()


def test_empty_stores_passed_to_constructor_are_kept():
    patterns = PatternIndex()
    vocabulary = VocabularyStore()
    episodic = EpisodicStore()
    sigel = Sigel("empty", vocabulary=vocabulary, patterns=patterns, episodic=episodic)
    assert sigel.patterns is patterns
    assert sigel.vocabulary is vocabulary
    assert sigel.episodic is episodic
