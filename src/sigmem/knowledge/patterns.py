"""Pattern index — n-gram strengths, semantic adjacency and temporal sequences.

All mutation goes through a narrow API (``reinforce``, ``decay``, ``prune``,
``connect``/``link``, ``add_temporal``). Callers never touch the raw maps.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from sigmem.numerics import sanitize_field
from sigmem.types import TemporalPattern


class PatternIndex:
    """Linguistic patterns, semantic network and temporal patterns of a Sigel."""

    def __init__(self, network_cap: int = 20) -> None:
        self.network_cap = max(1, network_cap)
        self._patterns: dict[str, float] = {}
        self._network: dict[str, list[str]] = {}
        self._temporal: list[TemporalPattern] = []

    # --- Linguistic patterns ---

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._patterns

    def strength(self, pattern: str) -> float | None:
        return self._patterns.get(pattern)

    def patterns(self) -> Iterator[tuple[str, float]]:
        return iter(self._patterns.items())

    def reinforce(self, pattern: str, delta: float) -> float:
        """Add ``delta`` to ``pattern``, creating it at zero if missing."""
        strength = max(0.0, self._patterns.get(pattern, 0.0) + delta)
        self._patterns[pattern] = strength
        return strength

    def apply_reinforcement(
        self,
        reinforcement: dict[str, float],
        cap: float,
        min_new: float,
    ) -> tuple[int, int]:
        """Merge accumulated reinforcement.

        Existing patterns grow up to ``cap``; unseen patterns are only created
        when their reinforcement exceeds ``min_new``. Returns (updated, created).
        """
        updated = 0
        created = 0
        for pattern, delta in reinforcement.items():
            current = self._patterns.get(pattern)
            if current is not None:
                self._patterns[pattern] = max(0.0, min(current + delta, cap))
                updated += 1
            elif delta > min_new:
                self._patterns[pattern] = delta
                created += 1
        return updated, created

    def decay(self, rate: float) -> None:
        """Multiply every strength by ``1 - rate``; strengths floor at zero."""
        factor = max(0.0, 1.0 - rate)
        for pattern in self._patterns:
            self._patterns[pattern] = max(0.0, self._patterns[pattern] * factor)

    def prune(self, threshold: float) -> int:
        """Drop patterns with strength <= ``threshold``. Returns removed count."""
        weak = [p for p, s in self._patterns.items() if s <= threshold]
        for pattern in weak:
            del self._patterns[pattern]
        return len(weak)

    def relevance(self, content: str) -> float:
        """Sum of strengths of patterns contained in ``content``."""
        return sum(s for p, s in self._patterns.items() if p in content)

    # --- Semantic network ---

    def neighbors(self, word: str) -> list[str]:
        return list(self._network.get(word, ()))

    def network_words(self) -> Iterator[str]:
        return iter(self._network)

    def connect(self, a: str, b: str) -> None:
        """Add a bidirectional edge while respecting the adjacency cap."""
        if not a or not b:
            return
        self._add_edge(a, b)
        self._add_edge(b, a)

    def _add_edge(self, src: str, dst: str) -> None:
        adjacent = self._network.setdefault(src, [])
        if dst not in adjacent and len(adjacent) < self.network_cap:
            adjacent.append(dst)

    def link(self, a: str, b: str) -> None:
        """Append a bidirectional edge without dedup; call ``normalize_network`` after."""
        if not a or not b:
            return
        self._network.setdefault(a, []).append(b)
        self._network.setdefault(b, []).append(a)

    def normalize_network(self) -> None:
        """Sort, deduplicate and truncate every adjacency list."""
        for word, adjacent in self._network.items():
            self._network[word] = sorted(set(adjacent))[:self.network_cap]

    # --- Temporal patterns ---

    @property
    def temporal_patterns(self) -> tuple[TemporalPattern, ...]:
        return tuple(self._temporal)

    def add_temporal(self, sequence: Iterable[str], frequency: float,
                     context_relevance: float = 1.0) -> TemporalPattern:
        pattern = TemporalPattern(
            sequence=list(sequence),
            frequency=frequency,
            context_relevance=context_relevance,
        )
        self._temporal.append(pattern)
        return pattern

    def find_temporal(self, context_key: str) -> TemporalPattern | None:
        """First-inserted temporal pattern whose context contains ``context_key``."""
        needle = context_key.lower()
        for pattern in self._temporal:
            if len(pattern.sequence) >= 4 and needle in pattern.context.lower():
                return pattern
        return None

    # --- Persistence ---

    def sanitize(self) -> int:
        fixed = 0
        for pattern, strength in self._patterns.items():
            value, changed = sanitize_field(strength, "pattern_strength")
            if changed:
                self._patterns[pattern] = value
                fixed += 1
        for temporal in self._temporal:
            for attr, name in (("frequency", "temporal_frequency"),
                               ("context_relevance", "context_relevance")):
                value, changed = sanitize_field(getattr(temporal, attr), name)
                if changed:
                    setattr(temporal, attr, value)
                    fixed += 1
        return fixed

    def to_dict(self) -> dict[str, Any]:
        return {
            "linguistic_patterns": dict(self._patterns),
            "semantic_networks": {w: list(adj) for w, adj in self._network.items()},
            "temporal_patterns": [t.to_dict() for t in self._temporal],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], network_cap: int = 20) -> PatternIndex:
        data = data or {}
        index = cls(network_cap=network_cap)
        for pattern, strength in data.get("linguistic_patterns", {}).items():
            index._patterns[pattern] = sanitize_field(strength, "pattern_strength")[0]
        for word, adjacent in data.get("semantic_networks", {}).items():
            index._network[word] = [str(w) for w in adjacent]
        for raw in data.get("temporal_patterns", []):
            index._temporal.append(
                TemporalPattern(
                    sequence=[str(t) for t in raw.get("sequence", [])],
                    frequency=sanitize_field(raw.get("frequency"), "temporal_frequency")[0],
                    context_relevance=sanitize_field(
                        raw.get("context_relevance"), "context_relevance"
                    )[0],
                )
            )
        return index
