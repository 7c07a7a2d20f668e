"""Core typing contracts for mlpnet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class Sample:
    """A single training sample: one input vector and its reference output."""

    inputs: Array
    targets: Array


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`mlpnet.network.Network.train`."""

    epochs: int
    steps: int
    final_loss: float
    metrics_path: str = ""
    manifest_path: str = ""


@dataclass(frozen=True)
class NetworkDescription:
    """Description of the feed-forward network architecture."""

    layer_dims: List[int]
