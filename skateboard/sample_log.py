"""
Bounded time-series log of per-step samples
"""

import csv
import io
from collections import deque
from dataclasses import astuple, dataclass, fields
from typing import Deque, List

import numpy as np


@dataclass(frozen=True)
class Sample:
    """One recorded physics step"""

    t: float
    x: float
    v: float
    a: float
    brake: float
    distance: float


SAMPLE_FIELDS = tuple(f.name for f in fields(Sample))


class SampleLog:
    """Ring buffer keeping the most recent samples"""

    def __init__(self, capacity: int = 5000) -> None:
        self.capacity = capacity
        self._buffer: Deque[Sample] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._buffer)

    def push(self, sample: Sample) -> None:
        self._buffer.append(sample)

    def clear(self) -> None:
        self._buffer.clear()

    def samples(self) -> List[Sample]:
        """Samples ordered oldest to newest"""
        return list(self._buffer)

    def as_array(self) -> np.ndarray:
        """Samples as an N x 6 array with columns t, x, v, a, brake, distance"""
        if not self._buffer:
            return np.zeros((0, len(SAMPLE_FIELDS)))
        return np.array([astuple(s) for s in self._buffer], dtype=float)

    def to_csv(self) -> str:
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(SAMPLE_FIELDS)
        for sample in self._buffer:
            writer.writerow(astuple(sample))
        return out.getvalue()
