"""
Result rows, CSV formatting and run result persistence.
"""
import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from arraybench.config import ReportingMode

logger = logging.getLogger(__name__)

PER_DOCUMENT_COLUMNS = ["ObjectCount", "SizeInBytes", "InsertionTime", "RetrievalTime(ms)"]
AGGREGATE_COLUMNS = ["ObjectCount", "AvgSizeInBytes", "RetrievalTime(ms)"]


@dataclass
class ResultRow:
    """One reported line.

    In aggregate mode ``size_in_bytes`` is the average over the documents
    inserted for the size and ``insertion_time`` is empty.
    """

    object_count: int
    size_in_bytes: float
    retrieval_time_ms: float
    insertion_time: str = ""
    documents: int = 1
    retrieval_stats: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "object_count": self.object_count,
            "size_in_bytes": self.size_in_bytes,
            "insertion_time": self.insertion_time,
            "retrieval_time_ms": round(self.retrieval_time_ms, 3),
            "documents": self.documents,
        }
        if self.retrieval_stats is not None:
            d["retrieval_stats"] = self.retrieval_stats
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ResultRow":
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})


def csv_columns(mode: ReportingMode) -> List[str]:
    if ReportingMode(mode) == ReportingMode.AGGREGATE:
        return list(AGGREGATE_COLUMNS)
    return list(PER_DOCUMENT_COLUMNS)


def csv_header(mode: ReportingMode) -> str:
    return ",".join(csv_columns(mode))


def csv_values(row: ResultRow, mode: ReportingMode) -> List[Any]:
    retrieval = f"{row.retrieval_time_ms:.3f}"
    if ReportingMode(mode) == ReportingMode.AGGREGATE:
        return [row.object_count, f"{row.size_in_bytes:.1f}", retrieval]
    return [row.object_count, int(row.size_in_bytes), row.insertion_time, retrieval]


def format_row(row: ResultRow, mode: ReportingMode) -> str:
    """Comma-separated line matching csv_header(mode)."""
    return ",".join(str(v) for v in csv_values(row, mode))


@dataclass
class RunResult:
    """Result from running one sweep."""

    run_id: str
    mode: str
    status: str = "pending"  # pending, running, completed, failed
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    duration_seconds: float = 0.0
    sizes_total: int = 0
    sizes_completed: int = 0
    rows: List[ResultRow] = field(default_factory=list)
    error: Optional[Dict[str, Any]] = None
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "completed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "mode": self.mode,
            "status": self.status,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "duration_seconds": round(self.duration_seconds, 1),
            "sizes_total": self.sizes_total,
            "sizes_completed": self.sizes_completed,
            "rows": [row.to_dict() for row in self.rows],
            "error": self.error,
            "config": self.config,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RunResult":
        data = {k: v for k, v in d.items() if k in cls.__dataclass_fields__}
        data["rows"] = [ResultRow.from_dict(r) for r in d.get("rows", [])]
        return cls(**data)

    def save(self, output_dir: Path) -> Path:
        """Save result.json and results.csv under output_dir."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        path = output_dir / "result.json"
        path.write_text(json.dumps(self.to_dict(), indent=2, default=str), encoding="utf-8")

        with open(output_dir / "results.csv", "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(csv_columns(self.mode))
            for row in self.rows:
                writer.writerow(csv_values(row, self.mode))

        logger.info(f"Saved run {self.run_id} result to {path}")
        return path

    @classmethod
    def load(cls, output_dir: Path) -> Optional["RunResult"]:
        path = Path(output_dir) / "result.json"
        if path.exists():
            return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))
        return None
