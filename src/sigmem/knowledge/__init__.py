from sigmem.knowledge.patterns import PatternIndex
from sigmem.knowledge.vocabulary import VocabularyStore

__all__ = ["PatternIndex", "VocabularyStore"]
