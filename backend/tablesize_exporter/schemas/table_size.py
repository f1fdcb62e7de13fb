"""Table size value objects.

A ``MetricSample`` is produced fresh for every row of every refresh cycle
and never mutated afterwards.  ``GaugeKey`` identifies one gauge series in
the registry; ``Snapshot`` bundles the samples of a single fetch.
"""

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class GaugeKey:
    """Composite label key of one table size series."""

    name: str
    scope: str


@dataclass(frozen=True)
class MetricSample:
    """Size of a single table, in bytes, within its database (scope)."""

    scope: str
    name: str
    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise ValueError(
                f"value of {self.scope}.{self.name} must be a number, got {self.value!r}"
            )
        if not math.isfinite(self.value) or self.value < 0:
            raise ValueError(
                f"value of {self.scope}.{self.name} must be non-negative and finite, "
                f"got {self.value!r}"
            )

    @property
    def key(self) -> GaugeKey:
        return GaugeKey(name=self.name, scope=self.scope)


@dataclass(frozen=True)
class Snapshot:
    """One complete set of readings taken in a single fetch.

    ``skipped_rows`` counts result rows that could not be decoded into a
    sample and were left out of ``samples``.
    """

    samples: tuple[MetricSample, ...] = field(default_factory=tuple)
    skipped_rows: int = 0

    def __len__(self) -> int:
        return len(self.samples)
