"""Multilayer perceptron trained with per-sample backpropagation."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, Iterable, Sequence

import numpy as np

from .core.activations import Activation, ReLU
from .core.dense import DenseLayer
from .core.stack import LayerStack
from .core.types import Array, NetworkDescription, TrainResult
from .data.training_data import TrainingData
from .reporting.report import ZERO_THRESHOLD, format_prediction_report
from .training.losses import squared_error

logger = logging.getLogger(__name__)


class Network:
    """Input layer, a stack of hidden ReLU layers and one output layer.

    Parameters
    ----------
    num_inputs, num_hidden, num_outputs:
        Widths of the input layer, the initial hidden layer and the output
        layer. More hidden layers can be added with :meth:`add_hidden_layer`.
    seed:
        Seed for the random source used for initialisation and shuffling.
    rng:
        Explicit random source; takes precedence over ``seed``.
    """

    def __init__(
        self,
        num_inputs: int,
        num_hidden: int,
        num_outputs: int,
        *,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
        activation: Activation | None = None,
    ) -> None:
        for name, value in (
            ("num_inputs", num_inputs),
            ("num_hidden", num_hidden),
            ("num_outputs", num_outputs),
        ):
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")
        self.num_inputs = int(num_inputs)
        self.num_outputs = int(num_outputs)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.activation = activation or ReLU()

        self.output_layer = DenseLayer(
            self.num_outputs, int(num_hidden), rng=self.rng, activation=self.activation
        )
        self.training_data = TrainingData(self.num_inputs, self.num_outputs)
        self.hidden_layers = LayerStack(rng=self.rng, activation=self.activation)
        self.hidden_layers.append_layer(int(num_hidden), self.num_inputs)

    def __repr__(self) -> str:
        return f"Network(layer_dims={self.describe().layer_dims})"

    # ------------------------------------------------------------------
    # Construction

    def add_hidden_layer(self, num_nodes: int) -> bool:
        return self.add_hidden_layers(1, num_nodes)

    def add_hidden_layers(self, count: int, num_nodes: int) -> bool:
        """Append ``count`` hidden layers of ``num_nodes`` nodes each.

        The output layer is rewired to read the new last hidden layer. Returns
        ``False`` and leaves the network unchanged if allocation fails.
        """

        num_weights = self.hidden_layers.last.num_nodes
        if not self.hidden_layers.append_layers(count, num_nodes, num_weights):
            return False
        try:
            self.output_layer.resize(self.num_outputs, num_nodes)
        except MemoryError:
            for _ in range(count):
                self.hidden_layers.pop_layer()
            logger.error("Could not resize the output layer to %d weights", num_nodes)
            return False
        return True

    def load_training_data(self, path: str | Path) -> int:
        return self.training_data.load(path)

    def set_training_data(self, inputs: Sequence, outputs: Sequence) -> None:
        self.training_data.assign(inputs, outputs)

    # ------------------------------------------------------------------
    # Training and prediction

    def train(
        self,
        num_epochs: int,
        learning_rate: float,
        callbacks: Sequence[object] | None = None,
    ) -> TrainResult:
        """Run ``num_epochs`` passes of online gradient descent.

        Each epoch shuffles the training data and updates the parameters once
        per sample. Callbacks receive ``on_epoch(epoch, {"loss": mse})``.
        """

        if num_epochs < 0:
            raise ValueError(f"num_epochs must be non-negative, got {num_epochs}")
        callbacks = list(callbacks or [])
        learning_rate = float(learning_rate)
        steps = 0
        epoch_loss = 0.0
        for epoch in range(1, num_epochs + 1):
            self.training_data.shuffle(self.rng)
            losses: list[float] = []
            for sample in self.training_data.samples():
                if not self.feedforward(sample.inputs):
                    continue
                losses.append(squared_error(self.output_layer.output, sample.targets))
                self.backpropagate(sample.targets)
                self.optimize(sample.inputs, learning_rate)
                steps += 1
            epoch_loss = float(np.mean(losses)) if losses else 0.0
            self._emit_epoch(epoch, {"loss": epoch_loss}, callbacks)
        return TrainResult(epochs=num_epochs, steps=steps, final_loss=epoch_loss)

    def predict(self, inputs) -> Array:
        """Return the output layer's buffer after feeding ``inputs`` forward.

        The returned array is overwritten by the next prediction; copy it to
        keep it.
        """

        self.feedforward(inputs)
        return self.output_layer.output

    def predict_range(
        self,
        inputs: Iterable | None = None,
        stream: IO[str] | None = None,
        threshold: float = ZERO_THRESHOLD,
    ) -> str:
        """Predict every vector in ``inputs`` and write a report to ``stream``.

        ``inputs`` defaults to the stored training inputs and ``stream`` to
        standard output.
        """

        if inputs is None:
            inputs = self.training_data.inputs
        pairs = []
        for row in inputs:
            output = self.predict(row)
            pairs.append((np.asarray(row, dtype=np.float64).reshape(-1), output.copy()))
        report = format_prediction_report(pairs, threshold=threshold)
        (stream or sys.stdout).write(report)
        return report

    # ------------------------------------------------------------------
    # Single training step

    def feedforward(self, inputs) -> bool:
        """Refresh every layer's output; does nothing for an undersized input."""

        x = np.asarray(inputs, dtype=np.float64).reshape(-1)
        if x.shape[0] < self.num_inputs:
            logger.debug(
                "Ignoring input of width %d, network expects %d",
                x.shape[0],
                self.num_inputs,
            )
            return False
        hidden_output = self.hidden_layers.feedforward(x)
        self.output_layer.feedforward(hidden_output)
        return True

    def backpropagate(self, reference) -> None:
        self.output_layer.compute_output_error(reference)
        self.hidden_layers.backpropagate(self.output_layer)

    def optimize(self, inputs, learning_rate: float) -> None:
        """Apply the cached errors; ``inputs`` must be the vector just fed forward."""

        self.output_layer.optimize(self.hidden_layers.last.output, learning_rate)
        self.hidden_layers.optimize(inputs, learning_rate)

    # ------------------------------------------------------------------
    # Introspection

    def describe(self) -> NetworkDescription:
        dims = [self.num_inputs]
        dims.extend(layer.num_nodes for layer in self.hidden_layers)
        dims.append(self.num_outputs)
        return NetworkDescription(layer_dims=dims)

    def layers(self) -> list[DenseLayer]:
        return [*self.hidden_layers, self.output_layer]

    def parameter_count(self) -> int:
        return self.hidden_layers.parameter_count() + self.output_layer.parameter_count()

    @staticmethod
    def _emit_epoch(epoch: int, metrics, callbacks: Sequence[object]) -> None:
        for callback in callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["Network"]
