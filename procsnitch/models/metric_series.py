"""
Metric series store.

An ordered, append-only collection of labelled value sequences. Each
sampling tick contributes one value to every series, or nothing at all.
The store is written by the sampling thread only, and read by the
supervisor once the session has stopped; the supervisor freezes it at that
point so a late append fails loudly instead of racing a reader.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence

from procsnitch.exceptions import SeriesFrozenError


@dataclass
class MetricSeries:
    """Label paired with its observed values, in tick order"""
    label: str
    values: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def to_dict(self) -> Dict:
        return {"label": self.label, "values": list(self.values)}


class MetricSeriesStore:

    def __init__(self, labels: Sequence[str]):
        if len(set(labels)) != len(labels):
            raise ValueError(f"Series labels must be unique: {list(labels)}")
        self._series: List[MetricSeries] = [MetricSeries(label) for label in labels]
        self._frozen = False

    @property
    def labels(self) -> List[str]:
        return [s.label for s in self._series]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def append_snapshot(self, values: Sequence[float]) -> None:
        """
        Append one value to every series.

        Args:
            values: One value per series, in label order

        Raises:
            SeriesFrozenError: If the store has been frozen
            ValueError: If the number of values does not match the number of series
        """
        if self._frozen:
            raise SeriesFrozenError("Cannot append to a frozen series store")
        if len(values) != len(self._series):
            raise ValueError(f"Expected {len(self._series)} values, got {len(values)}")
        # Convert everything first so a bad value leaves no partial tick behind
        converted = [float(v) for v in values]
        for series, value in zip(self._series, converted):
            series.values.append(value)

    def freeze(self) -> None:
        self._frozen = True

    def get(self, label: str) -> MetricSeries:
        for series in self._series:
            if series.label == label:
                return series
        raise KeyError(label)

    def __iter__(self) -> Iterator[MetricSeries]:
        return iter(self._series)

    def __len__(self) -> int:
        """Number of ticks recorded"""
        return len(self._series[0]) if self._series else 0

    def to_dict(self) -> Dict[str, List[float]]:
        """Convert to dictionary for JSON serialization"""
        return {s.label: list(s.values) for s in self._series}
