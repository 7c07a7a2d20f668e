"""Core numerical primitives for mlpnet."""

from . import activations, dense, stack, types

__all__ = ["activations", "dense", "stack", "types"]
