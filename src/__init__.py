"""cv-scorer: explainable candidate-to-job scoring and safe batch re-scoring."""

__version__ = "0.1.0"
