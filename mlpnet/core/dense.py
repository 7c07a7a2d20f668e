"""Fully-connected layer with per-sample delta-rule updates."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .activations import Activation, ReLU
from .types import Array


def _as_vector(values) -> Array:
    return np.asarray(values, dtype=np.float64).reshape(-1)


@dataclass(eq=False)
class DenseLayer:
    """A layer of ``num_nodes`` nodes, each reading ``num_weights`` inputs.

    Row ``i`` of :attr:`weights` is the weight vector of node ``i``. The
    buffers :attr:`output`, :attr:`bias` and :attr:`error` are updated in
    place, so views handed out by :meth:`feedforward` stay valid until the
    layer is resized.
    """

    num_nodes: int
    num_weights: int
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)
    activation: Activation = field(default_factory=ReLU)
    output: Array = field(init=False, repr=False)
    bias: Array = field(init=False, repr=False)
    error: Array = field(init=False, repr=False)
    weights: Array = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.num_nodes < 0 or self.num_weights < 0:
            raise ValueError(
                f"Layer dimensions must be non-negative, got "
                f"{self.num_nodes} nodes x {self.num_weights} weights"
            )
        self.reset()

    def reset(self) -> None:
        """Draw fresh biases and weights in ``[0, 1)`` and clear outputs/errors."""

        self.weights = self.rng.random((self.num_nodes, self.num_weights))
        self.bias = self.rng.random(self.num_nodes)
        self.output = np.zeros(self.num_nodes, dtype=np.float64)
        self.error = np.zeros(self.num_nodes, dtype=np.float64)

    def resize(self, num_nodes: int, num_weights: int) -> None:
        """Change the node count and/or the weights per node.

        Existing parameters are kept; new ones are drawn at random. Shrinking
        drops the trailing nodes or weights.
        """

        if num_nodes < 0 or num_weights < 0:
            raise ValueError(
                f"Layer dimensions must be non-negative, got {num_nodes} x {num_weights}"
            )
        if num_nodes != self.num_nodes:
            self._set_nodes(num_nodes)
        if num_weights != self.num_weights:
            self._set_weights(num_weights)

    def feedforward(self, inputs) -> Array:
        x = _as_vector(inputs)
        n = min(self.num_weights, x.shape[0])
        sums = self.bias + self.weights[:, :n] @ x[:n]
        self.output[:] = self.activation.forward(sums)
        return self.output

    def compute_output_error(self, reference) -> Array:
        """Error of a terminal layer against the reference outputs."""

        ref = _as_vector(reference)
        n = min(self.num_nodes, ref.shape[0])
        out = self.output[:n]
        self.error[:n] = (ref[:n] - out) * self.activation.derivative(out)
        return self.error

    def backpropagate(self, next_layer: "DenseLayer") -> Array:
        """Project the error of ``next_layer`` back onto this layer's nodes."""

        if next_layer.num_weights != self.num_nodes:
            raise ValueError(
                f"Cannot backpropagate from a layer with {next_layer.num_weights} "
                f"weights per node into a layer with {self.num_nodes} nodes"
            )
        deviation = next_layer.error @ next_layer.weights
        self.error[:] = deviation * self.activation.derivative(self.output)
        return self.error

    def optimize(self, inputs, learning_rate: float) -> None:
        x = _as_vector(inputs)
        n = min(self.num_weights, x.shape[0])
        change = self.error * learning_rate
        self.bias += change
        self.weights[:, :n] += np.outer(change, x[:n])

    def parameter_count(self) -> int:
        return int(self.num_nodes * (self.num_weights + 1))

    # ------------------------------------------------------------------
    # Helpers

    def _set_nodes(self, num_nodes: int) -> None:
        keep = min(self.num_nodes, num_nodes)
        added = num_nodes - keep
        weights = np.vstack(
            [self.weights[:keep], self.rng.random((added, self.num_weights))]
        )
        bias = np.concatenate([self.bias[:keep], self.rng.random(added)])
        output = np.zeros(num_nodes, dtype=np.float64)
        error = np.zeros(num_nodes, dtype=np.float64)
        output[:keep] = self.output[:keep]
        error[:keep] = self.error[:keep]

        self.weights, self.bias, self.output, self.error = weights, bias, output, error
        self.num_nodes = num_nodes

    def _set_weights(self, num_weights: int) -> None:
        keep = min(self.num_weights, num_weights)
        added = num_weights - keep
        self.weights = np.hstack(
            [self.weights[:, :keep], self.rng.random((self.num_nodes, added))]
        )
        self.num_weights = num_weights


__all__ = ["DenseLayer"]
