"""Numeric guards for values that end up in persisted snapshots.

Non-finite floats are never raised as errors. They are replaced with a
per-field default and a warning is logged, so a snapshot written to disk is
always strict JSON (orjson would otherwise emit ``null`` for NaN/inf).
"""

from __future__ import annotations

import logging
import math
from typing import Any

logger = logging.getLogger(__name__)

FIELD_DEFAULTS: dict[str, float] = {
    "pattern_strength": 0.5,
    "frequency": 1.0,
    "emotional_valence": 0.0,
    "semantic_weight": 1.0,
    "emotional_weight": 0.0,
    "relevance_score": 1.0,
    "temporal_frequency": 1.0,
    "context_relevance": 1.0,
    "learning_rate": 0.01,
    "contextual_alignment": 0.7,
}

# Fields that must never go below zero.
NON_NEGATIVE_FIELDS = frozenset({
    "pattern_strength",
    "frequency",
    "semantic_weight",
    "temporal_frequency",
    "context_relevance",
    "learning_rate",
})


def is_valid(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def safe_f64(value: Any, default: float, field: str = "value") -> float:
    """Return ``value`` as a float, or ``default`` if it is null or non-finite."""
    if is_valid(value):
        return float(value)
    logger.warning("Invalid %s value %r replaced with %s", field, value, default)
    return default


def sanitize_field(value: Any, field: str) -> tuple[float, bool]:
    """Apply the documented default for ``field``. Returns (value, changed)."""
    default = FIELD_DEFAULTS[field]
    fixed = safe_f64(value, default, field)
    if field in NON_NEGATIVE_FIELDS and fixed < 0.0:
        logger.warning("Negative %s value %r floored to 0.0", field, fixed)
        fixed = 0.0
    changed = not is_valid(value) or fixed != value
    return fixed, changed


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    if denominator == 0.0 or not math.isfinite(denominator):
        return default
    result = numerator / denominator
    return result if math.isfinite(result) else default


def clamp(value: float, low: float, high: float) -> float:
    if not math.isfinite(value):
        value = (low + high) / 2.0
    return max(low, min(high, value))
