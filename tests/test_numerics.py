from __future__ import annotations

import math

from sigmem.numerics import clamp, safe_divide, sanitize_field
from sigmem.utils import clean_word, ngrams, split_sentences


def test_sanitize_field_defaults_and_floors():
    assert sanitize_field(float("nan"), "pattern_strength") == (0.5, True)
    assert sanitize_field(None, "relevance_score") == (1.0, True)
    assert sanitize_field(-2.0, "frequency") == (0.0, True)
    assert sanitize_field(-0.4, "emotional_weight") == (-0.4, False)
    assert sanitize_field(True, "learning_rate") == (0.01, True)


def test_safe_divide_and_clamp():
    assert safe_divide(1.0, 0.0) == 0.0
    assert safe_divide(1.0, math.inf, default=-1.0) == -1.0
    assert safe_divide(3.0, 2.0) == 1.5
    assert clamp(5.0, -1.0, 1.0) == 1.0
    assert clamp(float("nan"), -1.0, 1.0) == 0.0


def test_text_helpers():
    assert split_sentences("one. two! three?") == ["one", " two", " three", ""]
    assert clean_word("--Hello!") == "hello"
    assert clean_word("123") == ""
    assert list(ngrams(["a", "b", "c"], 2)) == ["a b", "b c"]
    assert list(ngrams(["a"], 2)) == []
