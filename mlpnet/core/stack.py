"""Ordered stack of hidden dense layers."""

from __future__ import annotations

import logging
from typing import Iterator, List

import numpy as np

from .activations import Activation, ReLU
from .dense import DenseLayer
from .types import Array

logger = logging.getLogger(__name__)


class LayerStack:
    """Hidden-layer pipeline; index 0 reads the network input.

    For every ``i > 0`` the layer at ``i`` takes as many weights per node as
    the layer at ``i - 1`` has nodes.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        activation: Activation | None = None,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.activation = activation or ReLU()
        self._layers: List[DenseLayer] = []

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[DenseLayer]:
        return iter(self._layers)

    def __getitem__(self, index: int) -> DenseLayer:
        return self._layers[index]

    def __repr__(self) -> str:
        dims = [(layer.num_nodes, layer.num_weights) for layer in self._layers]
        return f"LayerStack({dims})"

    @property
    def first(self) -> DenseLayer:
        if not self._layers:
            raise IndexError("Layer stack is empty")
        return self._layers[0]

    @property
    def last(self) -> DenseLayer:
        if not self._layers:
            raise IndexError("Layer stack is empty")
        return self._layers[-1]

    def append_layer(self, num_nodes: int, num_weights: int) -> bool:
        return self.append_layers(1, num_nodes, num_weights)

    def append_layers(self, count: int, num_nodes: int, num_weights: int) -> bool:
        """Append ``count`` layers of ``num_nodes`` nodes each.

        The first new layer reads ``num_weights`` values, every following one
        reads the ``num_nodes`` outputs of its predecessor. Returns ``False``
        and leaves the stack untouched when the layers cannot be allocated.
        """

        if count < 1:
            raise ValueError(f"count must be positive, got {count}")
        if num_nodes < 1 or num_weights < 1:
            raise ValueError(
                f"Layer dimensions must be positive, got {num_nodes} x {num_weights}"
            )
        try:
            new_layers = [self._make_layer(num_nodes, num_weights)]
            for _ in range(count - 1):
                new_layers.append(self._make_layer(num_nodes, num_nodes))
        except MemoryError:
            logger.error(
                "Could not allocate %d layer(s) of %d nodes", count, num_nodes
            )
            return False
        self._layers.extend(new_layers)
        return True

    def pop_layer(self) -> DenseLayer:
        if not self._layers:
            raise IndexError("pop from an empty layer stack")
        return self._layers.pop()

    def feedforward(self, network_input) -> Array:
        x = network_input
        for layer in self._layers:
            x = layer.feedforward(x)
        return x

    def backpropagate(self, output_layer: DenseLayer) -> None:
        next_layer = output_layer
        for layer in reversed(self._layers):
            layer.backpropagate(next_layer)
            next_layer = layer

    def optimize(self, network_input, learning_rate: float) -> None:
        """Update every layer, last to first, from its own input."""

        for idx in reversed(range(1, len(self._layers))):
            self._layers[idx].optimize(self._layers[idx - 1].output, learning_rate)
        if self._layers:
            self._layers[0].optimize(network_input, learning_rate)

    def parameter_count(self) -> int:
        return int(sum(layer.parameter_count() for layer in self._layers))

    def _make_layer(self, num_nodes: int, num_weights: int) -> DenseLayer:
        return DenseLayer(
            num_nodes, num_weights, rng=self.rng, activation=self.activation
        )


__all__ = ["LayerStack"]
