"""Pattern learner — text ingestion, n-gram extraction and a self-evaluating predictor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import numpy as np

from sigmem.config import LearningConfig
from sigmem.numerics import clamp
from sigmem.sigel import Sigel
from sigmem.types import INTERACTION_CONTEXT
from sigmem.utils import clean_word, ngrams, split_sentences, words

logger = logging.getLogger(__name__)

UNKNOWN_TOKEN = "unknown"

POSITIVE_WORDS = ("love", "joy", "happy", "wonderful", "amazing", "beautiful", "peace", "harmony")
NEGATIVE_WORDS = ("hate", "sad", "terrible", "awful", "pain", "suffer", "angry", "fear")
PROFOUND_WORDS = ("consciousness", "universe", "existence", "meaning", "purpose", "infinite", "eternal")


def emotional_weight(text: str) -> float:
    """Lexicon emotional weight of ``text`` in [-1, 1]."""
    lowered = text.lower()
    weight = 0.0
    weight += 0.5 * sum(1 for w in POSITIVE_WORDS if w in lowered)
    weight -= 0.3 * sum(1 for w in NEGATIVE_WORDS if w in lowered)
    weight += 0.8 * sum(1 for w in PROFOUND_WORDS if w in lowered)
    return clamp(weight, -1.0, 1.0)


def prediction_accuracy(predicted: str, actual: str) -> float:
    """Case-insensitive closeness of a predicted token to the actual one."""
    p = predicted.lower()
    a = actual.lower()
    if p == a:
        return 1.0
    if p in a:
        return 0.7
    if a in p:
        return 0.6
    shared = sum(1 for ch in predicted if ch in actual)
    return shared / max(len(predicted), len(actual), 1) * 0.4


@dataclass(frozen=True)
class IngestStats:
    sentences: int = 0
    memories_added: int = 0
    patterns: int = 0
    samples: int = 0


class PatternLearner:
    """Builds vocabulary, patterns and episodic memories from free text.

    Randomness (self-evaluation sampling, fallback prediction) comes from the
    injected ``rng`` so runs can be reproduced with a seed.
    """

    def __init__(
        self,
        config: LearningConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or LearningConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

    # --- Public operations ---

    def ingest(self, sigel: Sigel, text: str, source_tag: str) -> IngestStats:
        """Absorb ``text`` into ``sigel``. Not idempotent."""
        sentences, added = self.absorb(sigel, text, source_tag)
        patterns, samples = self.learn_corpus(sigel, text)
        return IngestStats(sentences=sentences, memories_added=added,
                           patterns=patterns, samples=samples)

    def train_directory(self, sigel: Sigel, directory: Path | str) -> IngestStats:
        """Absorb every ``*.txt`` file in ``directory``, then learn over the joined corpus."""
        directory = Path(directory)
        corpus: list[str] = []
        sentences = 0
        added = 0
        for path in sorted(directory.glob("*.txt")):
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Could not read %s: %s", path, exc)
                continue
            logger.info("Absorbing %s", path.name)
            corpus.append(content)
            s, a = self.absorb(sigel, content, str(path))
            sentences += s
            added += a
        if not corpus:
            logger.warning("No readable .txt files in %s", directory)
            return IngestStats()
        patterns, samples = self.learn_corpus(sigel, "\n".join(corpus) + "\n")
        logger.info(
            "Trained %s on %d files: %d memories, %d patterns, %d samples",
            sigel.name, len(corpus), added, patterns, samples,
        )
        return IngestStats(sentences=sentences, memories_added=added,
                           patterns=patterns, samples=samples)

    def learn_interaction(self, sigel: Sigel, interaction: str, response: str) -> None:
        sigel.episodic.add(
            f"Interaction: {interaction} | Response: {response}",
            INTERACTION_CONTEXT,
            emotional_weight(interaction),
        )

    def predict_next_token(
        self,
        sigel: Sigel,
        context: Sequence[str],
        rng: np.random.Generator | None = None,
    ) -> str:
        """Predict the token following ``context``. Never mutates ``sigel``.

        The first temporal pattern (in insertion order) whose context contains
        the query wins; otherwise a random semantic neighbor of the last token;
        otherwise ``"unknown"``.
        """
        if not context:
            return UNKNOWN_TOKEN
        match = sigel.patterns.find_temporal(" ".join(context))
        if match is not None:
            return match.target

        neighbors = sigel.patterns.neighbors(clean_word(context[-1]))
        if neighbors:
            generator = rng if rng is not None else self.rng
            return neighbors[int(generator.integers(0, len(neighbors)))]
        return UNKNOWN_TOKEN

    @staticmethod
    def accuracy(predicted: str, actual: str) -> float:
        return prediction_accuracy(predicted, actual)

    # --- Phases ---

    def absorb(self, sigel: Sigel, text: str, source_tag: str) -> tuple[int, int]:
        """Vocabulary, semantic edges and episodic records for every sentence."""
        sentences = 0
        added = 0
        for sentence in split_sentences(text):
            tokens = words(sentence)
            if not tokens:
                continue
            sentences += 1
            for a, b, c in zip(tokens, tokens[1:], tokens[2:]):
                word = clean_word(b)
                if word:
                    sigel.vocabulary.learn(word, f"{a} {c}")
                sigel.patterns.connect(clean_word(a), clean_word(b))
                sigel.patterns.connect(clean_word(b), clean_word(c))

            if self.config.min_sentence_tokens < len(tokens) < self.config.max_sentence_tokens:
                sigel.episodic.add(sentence.strip(), source_tag, emotional_weight(sentence))
                added += 1
        return sentences, added

    def learn_corpus(self, sigel: Sigel, text: str) -> tuple[int, int]:
        """Self-evaluation then pattern extraction over the whole corpus.

        The extraction prune runs last and also removes weak self-evaluation keys.
        """
        sigel.learning_state.text_corpus_size = len(text)
        samples = self.self_evaluate(sigel, text)
        patterns = self.extract_patterns(sigel, text)
        sigel.evolve()
        return patterns, samples

    def extract_patterns(self, sigel: Sigel, text: str) -> int:
        """Add n-gram strengths (n = 2..4, weight 1/n) and prune weak patterns."""
        for sentence in split_sentences(text):
            if len(sentence.strip()) <= self.config.min_pattern_sentence_chars:
                continue
            tokens = words(sentence)
            for n in (2, 3, 4):
                for pattern in ngrams(tokens, n):
                    sigel.patterns.reinforce(pattern, 1.0 / n)
        sigel.patterns.prune(self.config.pattern_prune_threshold)
        return len(sigel.patterns)

    def self_evaluate(self, sigel: Sigel, text: str) -> int:
        """Predict sampled continuations and reinforce by accuracy. Returns sample count."""
        tokens = words(text)
        if len(tokens) < 4:
            return 0
        sample_size = min(
            max(len(tokens) // 100, self.config.min_eval_samples),
            self.config.max_eval_samples,
        )
        rate = sigel.learning_state.learning_rate
        for _ in range(sample_size):
            start = int(self.rng.integers(0, len(tokens) - 3))
            context = tokens[start:start + 3]
            target = tokens[start + 3]
            predicted = self.predict_next_token(sigel, context)
            score = prediction_accuracy(predicted, target)
            delta = rate * 2.0 if score < 0.5 else rate
            self._strengthen(sigel, context, target, delta)
            sigel.learning_state.training_iterations += 1
        return sample_size

    @staticmethod
    def _strengthen(sigel: Sigel, context: list[str], target: str, delta: float) -> None:
        sigel.patterns.add_temporal([*context, target], frequency=delta)
        sigel.patterns.reinforce(" ".join(context), delta)
