"""Loss helpers used to monitor training."""

from __future__ import annotations

import numpy as np

from ..core.types import Array


def squared_error(prediction: Array, target: Array) -> float:
    """Mean squared error of one sample over the overlapping outputs."""

    pred = np.asarray(prediction, dtype=np.float64).reshape(-1)
    targ = np.asarray(target, dtype=np.float64).reshape(-1)
    n = min(pred.shape[0], targ.shape[0])
    if n == 0:
        return 0.0
    return float(np.mean(np.square(targ[:n] - pred[:n])))


__all__ = ["squared_error"]
