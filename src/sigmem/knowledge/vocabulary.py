"""Vocabulary store — word frequency, contexts and weights."""

from __future__ import annotations

from typing import Any, Iterator

from sigmem.numerics import sanitize_field
from sigmem.types import WordKnowledge


class VocabularyStore:
    """Word → WordKnowledge map with bounded context sets."""

    def __init__(self, max_contexts: int = 32) -> None:
        self.max_contexts = max(1, max_contexts)
        self._words: dict[str, WordKnowledge] = {}

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def get(self, word: str) -> WordKnowledge | None:
        return self._words.get(word)

    def frequency(self, word: str) -> float | None:
        knowledge = self._words.get(word)
        return knowledge.frequency if knowledge is not None else None

    def items(self) -> Iterator[tuple[str, WordKnowledge]]:
        return iter(self._words.items())

    def learn(self, word: str, context: str) -> WordKnowledge:
        """Record one occurrence of ``word`` seen in ``context``."""
        knowledge = self._words.get(word)
        if knowledge is None:
            knowledge = WordKnowledge()
            self._words[word] = knowledge
        else:
            knowledge.frequency += 1.0
        if context not in knowledge.contexts and len(knowledge.contexts) < self.max_contexts:
            knowledge.contexts.append(context)
        return knowledge

    def sanitize(self) -> int:
        fixed = 0
        for knowledge in self._words.values():
            for name in ("frequency", "emotional_valence", "semantic_weight"):
                value, changed = sanitize_field(getattr(knowledge, name), name)
                if changed:
                    setattr(knowledge, name, value)
                    fixed += 1
        return fixed

    def to_dict(self) -> dict[str, Any]:
        return {word: k.to_dict() for word, k in self._words.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any], max_contexts: int = 32) -> VocabularyStore:
        store = cls(max_contexts=max_contexts)
        for word, raw in (data or {}).items():
            store._words[word] = WordKnowledge(
                frequency=sanitize_field(raw.get("frequency"), "frequency")[0],
                contexts=[str(c) for c in raw.get("contexts", [])],
                emotional_valence=sanitize_field(raw.get("emotional_valence"), "emotional_valence")[0],
                semantic_weight=sanitize_field(raw.get("semantic_weight"), "semantic_weight")[0],
            )
        return store
