"""Plain-text reports for predictions, layers and training data."""

from __future__ import annotations

from typing import Iterable, Tuple

from ..core.dense import DenseLayer
from ..core.types import Array
from ..data.training_data import TrainingData

RULE = "-" * 76
ZERO_THRESHOLD = 1e-4


def format_values(values: Iterable[float], threshold: float = 0.0) -> str:
    """Format ``values`` with ``%g``, printing anything within ``threshold`` of zero as 0."""

    parts = []
    for value in values:
        value = float(value)
        if -threshold < value < threshold:
            parts.append("0")
        else:
            parts.append(f"{value:g}")
    return " ".join(parts)


def format_prediction_report(
    pairs: Iterable[Tuple[Array, Array]], threshold: float = ZERO_THRESHOLD
) -> str:
    lines = [RULE]
    for inputs, outputs in pairs:
        lines.append(f"Input: {format_values(inputs, threshold)}")
        lines.append(f"Predicted output: {format_values(outputs, threshold)}")
    lines.append(RULE)
    return "\n".join(lines) + "\n\n"


def format_layer(layer: DenseLayer) -> str:
    if not layer.num_nodes:
        return ""
    lines = [
        f"Number of nodes: {layer.num_nodes}",
        f"Weights per node: {layer.num_weights}",
        RULE,
        f"Outputs: {format_values(layer.output)}",
        f"Bias: {format_values(layer.bias)}",
        f"Error: {format_values(layer.error)}",
        "",
        "Weights:",
    ]
    for idx, row in enumerate(layer.weights, start=1):
        lines.append(f"\tNode {idx}: {format_values(row)}")
    lines.append(RULE)
    return "\n".join(lines) + "\n\n"


def format_training_data(data: TrainingData) -> str:
    if not data.sets:
        return f"No training data!\n{RULE}\n\n"
    lines = [
        f"Number of training sets: {data.sets}",
        f"Inputs: {data.num_inputs}",
        f"Outputs: {data.num_outputs}",
        RULE,
    ]
    for idx, (inputs, outputs) in enumerate(zip(data.inputs, data.outputs), start=1):
        if idx > 1:
            lines.append("")
        lines.append(f"Set {idx}")
        lines.append(f"Inputs: {format_values(inputs)}")
        lines.append(f"Outputs: {format_values(outputs)}")
    lines.append(RULE)
    return "\n".join(lines) + "\n\n"


__all__ = [
    "RULE",
    "ZERO_THRESHOLD",
    "format_layer",
    "format_prediction_report",
    "format_training_data",
    "format_values",
]
