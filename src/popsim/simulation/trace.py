"""Time series produced by an integration run."""

from typing import Dict, Iterator, List, Mapping, NamedTuple, Sequence

import numpy as np


class Sample(NamedTuple):
    time: float
    values: Dict[str, float]


class Trace:
    """
    Append-only sequence of samples, ordered by strictly increasing time.

    Every sample holds one value per captured name, in the order given at
    construction.
    """

    def __init__(self, names: Sequence[str]):
        self.names = tuple(names)
        self._samples: List[Sample] = []

    def append(self, time: float, values: Mapping[str, float]) -> None:
        time = float(time)
        if self._samples and time <= self._samples[-1].time:
            raise ValueError(
                f"Sample times must increase: {time} after {self._samples[-1].time}"
            )
        self._samples.append(Sample(time, {name: float(values[name]) for name in self.names}))

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> Sample:
        return self._samples[index]

    @property
    def times(self) -> np.ndarray:
        return np.array([s.time for s in self._samples], dtype=float)

    def series(self, name: str) -> np.ndarray:
        """Values of one captured variable over time."""
        if name not in self.names:
            raise KeyError(f"'{name}' is not captured in this trace. Captured: {list(self.names)}")
        return np.array([s.values[name] for s in self._samples], dtype=float)

    @property
    def final(self) -> Sample:
        if not self._samples:
            raise ValueError("Trace is empty")
        return self._samples[-1]

    def as_dict(self) -> Dict[str, np.ndarray]:
        """Column view: ``{"t": times, name: series, ...}``."""
        columns = {"t": self.times}
        for name in self.names:
            columns[name] = self.series(name)
        return columns

    def get_trace_info(self) -> Dict[str, object]:
        """Get information about the trace."""
        if not self._samples:
            return {"n_samples": 0, "captures": list(self.names)}
        return {
            "n_samples": len(self._samples),
            "time_span": (self._samples[0].time, self._samples[-1].time),
            "captures": list(self.names),
            "final": dict(self._samples[-1].values),
        }

    def __repr__(self) -> str:
        return f"Trace(names={list(self.names)}, n_samples={len(self._samples)})"
