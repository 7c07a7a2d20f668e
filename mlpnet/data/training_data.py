"""Training sample store with per-epoch shuffling."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

import numpy as np

from ..core.types import Array, Sample

logger = logging.getLogger(__name__)

FIXTURE_DIR = Path(__file__).resolve().parent / "_fixtures"

# A minus sign only counts when it opens the line; anywhere else it separates.
_TOKEN = re.compile(r"^-[0-9.]*|[0-9.]+")
_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def _to_float(token: str) -> float:
    match = _NUMBER.match(token)
    return float(match.group(0)) if match else 0.0


def parse_line(line: str) -> List[float]:
    """Return the numeric tokens of one training-data line."""

    return [_to_float(token) for token in _TOKEN.findall(line)]


def fixture_path(name: str) -> Path:
    return FIXTURE_DIR / name


class TrainingData:
    """Parallel input/output samples plus a shufflable presentation order."""

    def __init__(self, num_inputs: int, num_outputs: int) -> None:
        self.num_inputs = int(num_inputs)
        self.num_outputs = int(num_outputs)
        self.inputs: List[Array] = []
        self.outputs: List[Array] = []
        self.order: Array = np.arange(0, dtype=np.intp)

    @property
    def sets(self) -> int:
        return len(self.inputs)

    def __len__(self) -> int:
        return self.sets

    def __repr__(self) -> str:
        return (
            f"TrainingData(sets={self.sets}, num_inputs={self.num_inputs}, "
            f"num_outputs={self.num_outputs})"
        )

    def clear(self) -> None:
        self.inputs = []
        self.outputs = []
        self.order = np.arange(0, dtype=np.intp)

    def load(self, path: str | Path) -> int:
        """Append the samples found in the text file at ``path``.

        Returns the number of accepted lines. An unreadable file is logged
        and leaves the store as it was.
        """

        path = Path(path)
        try:
            text = path.read_text(errors="replace")
        except OSError as exc:
            logger.error("Could not open file at path %s: %s", path, exc)
            return 0
        return self.load_lines(text.splitlines())

    def load_lines(self, lines: Iterable[str]) -> int:
        datapoints = self.num_inputs + self.num_outputs
        accepted = 0
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            values = parse_line(line)
            if len(values) != datapoints:
                logger.warning(
                    "Could not extract %d datapoints out of line %d (found %d), skipping",
                    datapoints,
                    lineno,
                    len(values),
                )
                continue
            row = np.asarray(values, dtype=np.float64)
            self.inputs.append(row[: self.num_inputs].copy())
            self.outputs.append(row[self.num_inputs :].copy())
            accepted += 1
        self._reset_order()
        return accepted

    def assign(self, inputs: Sequence, outputs: Sequence) -> None:
        """Replace every stored sample with ``inputs``/``outputs``.

        Both sequences are expected to be parallel and sized for this store.
        """

        self.inputs = [np.array(row, dtype=np.float64).reshape(-1) for row in inputs]
        self.outputs = [np.array(row, dtype=np.float64).reshape(-1) for row in outputs]
        self._reset_order()

    def shuffle(self, rng: np.random.Generator) -> None:
        """Randomise the presentation order in place."""

        sets = self.sets
        order = self.order
        for i in range(sets):
            r = int(rng.integers(sets))
            order[i], order[r] = order[r], order[i]

    def samples(self) -> Iterator[Sample]:
        for k in self.order:
            yield Sample(inputs=self.inputs[k], targets=self.outputs[k])

    def _reset_order(self) -> None:
        self.order = np.arange(self.sets, dtype=np.intp)


__all__ = ["TrainingData", "fixture_path", "parse_line"]
