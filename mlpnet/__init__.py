"""mlpnet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.dense import DenseLayer
from .core.stack import LayerStack
from .data.training_data import TrainingData
from .network import Network
from .training.pipelines import load_preset, presets, run_pipeline

__version__ = "0.1.0"

__all__ = [
    "DenseLayer",
    "LayerStack",
    "Network",
    "TrainingData",
    "activations",
    "types",
    "load_preset",
    "presets",
    "run_pipeline",
]
