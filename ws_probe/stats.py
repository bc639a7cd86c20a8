"""
Statistics Aggregator
=====================

Reduces a completed run's probe records to count/min/avg/max.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .prober import ProbeRecord


@dataclass(frozen=True)
class Summary:
    count: int
    min_ms: float
    avg_ms: float
    max_ms: float

    def __str__(self) -> str:
        return (
            f"{self.count} pings sent, "
            f"Min/Avg/Max = {self.min_ms:.2f}/{self.avg_ms:.2f}/{self.max_ms:.2f} ms"
        )


def summarize(records: Sequence[ProbeRecord]) -> Optional[Summary]:
    """Summary of ``records``, or None if there are none.

    Works on integer microseconds so the mean of equal samples is exact
    and always lies within [min, max].
    """
    if not records:
        return None
    elapsed = [r.elapsed_us for r in records]
    return Summary(
        count=len(elapsed),
        min_ms=min(elapsed) / 1000,
        avg_ms=sum(elapsed) / len(elapsed) / 1000,
        max_ms=max(elapsed) / 1000,
    )
