"""
Harness Configuration
"""
import os
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from arraybench.errors import ConfigError
from arraybench.sweep import DEFAULT_SEED


class ReportingMode(str, Enum):
    """How results are reported for each swept size."""

    PER_DOCUMENT = "per-document"  # one line per inserted document
    AGGREGATE = "aggregate"  # one bulk read-back and average size per size


DEFAULT_URI = "mongodb://localhost:27017"

# Documents per size when aggregate mode is chosen without an explicit count
AGGREGATE_REPETITIONS = 35

# Named harness configurations
PRESETS: Dict[str, Dict[str, Any]] = {
    "roundtrip": {
        "seed_pair": (0, 1),
        "ceiling": 10000,
        "repetitions_per_size": 1,
        "reporting_mode": ReportingMode.PER_DOCUMENT,
        "collection_per_size": False,
        "read_back": True,
        "persist_retrieval_time": True,
        "delete_after_read": False,
    },
    "aggregate": {
        "seed_pair": (1, 2),
        "ceiling": 10000,
        "repetitions_per_size": AGGREGATE_REPETITIONS,
        "reporting_mode": ReportingMode.AGGREGATE,
        "collection_per_size": True,
        "read_back": True,
        "persist_retrieval_time": False,
        "delete_after_read": False,
    },
}


@dataclass
class HarnessConfig:
    """Master configuration for a harness run."""

    run_id: str = field(default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S"))

    # Sweep
    seed_pair: Tuple[int, int] = DEFAULT_SEED
    ceiling: int = 10000

    # Round trip
    repetitions_per_size: Optional[int] = None  # None = 1, or AGGREGATE_REPETITIONS in aggregate mode
    reporting_mode: ReportingMode = ReportingMode.PER_DOCUMENT
    read_back: bool = True
    persist_retrieval_time: bool = True
    delete_after_read: bool = False
    read_iterations: int = 1  # bulk reads per size (aggregate mode)
    random_seed: Optional[int] = None  # None = unseeded

    # Storage
    backend: str = "mongo"
    connection_uri: str = field(
        default_factory=lambda: os.environ.get("MONGODB_URI", "").strip() or DEFAULT_URI
    )
    database: str = field(
        default_factory=lambda: os.environ.get("ARRAYBENCH_DATABASE", "testdb")
    )
    collection_prefix: str = "testcollection"
    collection_per_size: bool = False
    server_selection_timeout_ms: int = 5000

    # Output
    output_base: str = field(
        default_factory=lambda: os.environ.get("ARRAYBENCH_OUTPUT", "results")
    )

    @property
    def output_dir(self) -> str:
        return f"{self.output_base}/{self.run_id}"

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> "HarnessConfig":
        """Build a config from a named preset, then apply overrides."""
        if name not in PRESETS:
            raise ConfigError(
                f"Unknown preset: {name}",
                details=f"Available presets: {', '.join(PRESETS)}",
                parameter="preset",
                received=name,
            )
        return cls(**{**PRESETS[name], **overrides})

    def with_overrides(self, **overrides: Any) -> "HarnessConfig":
        return replace(self, **overrides)

    def validate(self) -> "HarnessConfig":
        """Raise ConfigError on values the runner cannot work with.

        Also fills in the mode-dependent defaults: aggregate mode always
        writes each size into its own collection and, unless a count was
        given, uses AGGREGATE_REPETITIONS documents per size.
        """
        try:
            self.reporting_mode = ReportingMode(self.reporting_mode)
        except ValueError as e:
            raise ConfigError(
                f"Unknown reporting mode: {self.reporting_mode}",
                details=f"Expected one of {', '.join(m.value for m in ReportingMode)}",
                parameter="reporting_mode",
                received=self.reporting_mode,
            ) from e
        aggregate = self.reporting_mode == ReportingMode.AGGREGATE
        if self.repetitions_per_size is None:
            self.repetitions_per_size = AGGREGATE_REPETITIONS if aggregate else 1
        if aggregate:
            self.collection_per_size = True

        if self.repetitions_per_size < 1:
            raise ConfigError(
                "repetitions_per_size must be at least 1",
                parameter="repetitions_per_size",
                received=self.repetitions_per_size,
            )
        if self.read_iterations < 1:
            raise ConfigError(
                "read_iterations must be at least 1",
                parameter="read_iterations",
                received=self.read_iterations,
            )
        if len(self.seed_pair) != 2:
            raise ConfigError(
                "seed_pair must hold exactly two values",
                parameter="seed_pair",
                received=self.seed_pair,
            )
        if not self.connection_uri and self.backend == "mongo":
            raise ConfigError(
                "MONGODB_URI must be set",
                parameter="connection_uri",
                missing=True,
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["seed_pair"] = list(self.seed_pair)
        d["reporting_mode"] = ReportingMode(self.reporting_mode).value
        # may hold credentials
        d.pop("connection_uri")
        return d
