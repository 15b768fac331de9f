from sigmem.learning.learner import PatternLearner, prediction_accuracy

__all__ = ["PatternLearner", "prediction_accuracy"]
