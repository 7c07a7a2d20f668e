"""Reporting utilities for mlpnet."""

from .artifacts import write_manifest
from .metrics import HistoryCallback, JsonlSink
from .plots import LossCurve
from .report import format_layer, format_prediction_report, format_training_data

__all__ = [
    "HistoryCallback",
    "JsonlSink",
    "LossCurve",
    "format_layer",
    "format_prediction_report",
    "format_training_data",
    "write_manifest",
]
