"""Training data loading and storage."""

from .training_data import TrainingData, fixture_path, parse_line

__all__ = ["TrainingData", "fixture_path", "parse_line"]
