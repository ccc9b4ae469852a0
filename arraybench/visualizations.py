"""
Visualization
=============
Chart a sweep: document size and read-back latency against array length.

Uses matplotlib.Agg backend for headless rendering.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

# Headless rendering
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from arraybench.report import RunResult

COLORS = ["#2196F3", "#FF9800"]
FIGSIZE = (12, 7)
DPI = 150


def sweep_series(result: RunResult) -> Tuple[List[int], List[float], List[float]]:
    """Object counts with their mean size and mean retrieval time.

    Rows sharing an object count (repetitions, or N=1 twice under seed
    (0, 1)) are averaged into one point.
    """
    counts = sorted({row.object_count for row in result.rows})
    sizes = []
    latencies = []
    for n in counts:
        matching = [row for row in result.rows if row.object_count == n]
        sizes.append(float(np.mean([row.size_in_bytes for row in matching])))
        latencies.append(float(np.mean([row.retrieval_time_ms for row in matching])))
    return counts, sizes, latencies


def chart_sweep(result: RunResult, output_path: Union[str, Path]) -> Optional[str]:
    """Line chart of size (left axis) and retrieval time (right axis) vs N.

    The x axis is symmetric-log: linear between 0 and 1, logarithmic above,
    so N=0 and N=1 are separate points.
    Returns the written path, or None when the result has no rows.
    """
    if not result.rows:
        return None

    counts, sizes, latencies = sweep_series(result)

    fig, ax = plt.subplots(figsize=FIGSIZE, dpi=DPI)
    ax.plot(counts, sizes, "-o", color=COLORS[0], markersize=4, label="Size (bytes)")
    ax.set_xscale("symlog", linthresh=1)
    ax.set_xlim(left=0)
    ax.set_xlabel("Object count (N)")
    ax.set_ylabel("Document size (bytes)", color=COLORS[0])
    ax.tick_params(axis="y", labelcolor=COLORS[0])
    ax.grid(alpha=0.3)

    ax2 = ax.twinx()
    ax2.plot(counts, latencies, "--s", color=COLORS[1], markersize=4, label="Retrieval (ms)")
    ax2.set_ylabel("Retrieval time (ms)", color=COLORS[1])
    ax2.tick_params(axis="y", labelcolor=COLORS[1])

    title = f"Embedded array size impact ({result.mode}, run {result.run_id})"
    ax.set_title(title, fontweight="bold", fontsize=14)
    fig.legend(loc="upper left", fontsize=8)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close(fig)
    return str(output_path)
