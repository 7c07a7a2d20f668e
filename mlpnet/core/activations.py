"""Activation utilities for mlpnet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np

from .types import Array


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(x, 0.0)


def relu_deriv(y: Array) -> Array:
    """Return the ReLU slope given the post-activation output ``y``."""

    return (np.asarray(y) > 0.0).astype(np.float64)


class Activation(Protocol):
    """Protocol implemented by layer activations."""

    name: str

    def forward(self, x: Array) -> Array:
        """Return the activation of the pre-activation sums ``x``."""

    def derivative(self, output: Array) -> Array:
        """Return the slope of the activation at the layer ``output``."""


@dataclass(frozen=True)
class ReLU:
    """Rectified linear unit.

    The derivative is taken from the layer output rather than the weighted
    sum; for ReLU both agree everywhere, including zero.
    """

    name: str = "relu"

    def forward(self, x: Array) -> Array:
        return relu(x)

    def derivative(self, output: Array) -> Array:
        return relu_deriv(output)


__all__ = ["Activation", "ReLU", "relu", "relu_deriv"]
