from sigmem.consolidation.clusterer import SimilarityClusterer
from sigmem.consolidation.consolidator import MemoryConsolidator
from sigmem.consolidation.scorer import ImportanceScorer

__all__ = ["ImportanceScorer", "MemoryConsolidator", "SimilarityClusterer"]
