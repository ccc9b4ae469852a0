"""Timing statistics for repeated reads."""
from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np


@dataclass
class TimingStats:
    """Aggregated timing statistics (milliseconds)."""

    samples: List[float] = field(default_factory=list)

    def add(self, elapsed_ms: float) -> None:
        self.samples.append(elapsed_ms)

    @property
    def count(self) -> int:
        return len(self.samples)

    @property
    def mean(self) -> float:
        return float(np.mean(self.samples)) if self.samples else 0.0

    @property
    def median(self) -> float:
        return self.percentile(50)

    @property
    def p95(self) -> float:
        return self.percentile(95)

    @property
    def p99(self) -> float:
        return self.percentile(99)

    @property
    def min_val(self) -> float:
        return float(np.min(self.samples)) if self.samples else 0.0

    @property
    def max_val(self) -> float:
        return float(np.max(self.samples)) if self.samples else 0.0

    @property
    def stddev(self) -> float:
        return float(np.std(self.samples, ddof=1)) if len(self.samples) > 1 else 0.0

    @property
    def total(self) -> float:
        return float(np.sum(self.samples)) if self.samples else 0.0

    def percentile(self, pct: float) -> float:
        if not self.samples:
            return 0.0
        return float(np.percentile(self.samples, pct))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "mean_ms": round(self.mean, 3),
            "median_ms": round(self.median, 3),
            "p95_ms": round(self.p95, 3),
            "p99_ms": round(self.p99, 3),
            "min_ms": round(self.min_val, 3),
            "max_ms": round(self.max_val, 3),
            "stddev_ms": round(self.stddev, 3),
            "total_ms": round(self.total, 3),
        }
