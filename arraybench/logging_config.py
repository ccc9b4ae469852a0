"""
arraybench Logging Configuration - Color-Coded Console Logs

Provides:
- SizeFormatter: one line per record, tagged with the swept size when the
  record carries one (``extra={"object_count": n}``)
- Helper functions: log_size, log_run
- setup_logging(): Configure application logging

Logs go to stderr by default so the CSV result lines on stdout stay
machine-readable. Colors are only used when the stream is a terminal.

Usage:
    from arraybench.logging_config import setup_logging, log_size
    setup_logging()
    logger = logging.getLogger(__name__)
    log_size(logger, 89, "start", collection="testcollection_N=89")
"""

import logging
import sys
from typing import IO, Optional

# ANSI color codes
COLORS = {
    "RESET": "\033[0m",
    "DIM": "\033[2m",
    "SIZE": "\033[96m",  # Cyan - swept size tag
    "ERROR": "\033[91m",
    "WARN": "\033[33m",
    "DEBUG": "\033[90m",
}

LEVEL_COLORS = {
    logging.DEBUG: COLORS["DEBUG"],
    logging.WARNING: COLORS["WARN"],
    logging.ERROR: COLORS["ERROR"],
    logging.CRITICAL: COLORS["ERROR"],
}


class SizeFormatter(logging.Formatter):
    """``HH:MM:SS [LEVL] [N=89] message``.

    The ``[N=..]`` tag appears only on records logged with an
    ``object_count`` extra, so per-size progress lines line up under each
    other while run-level lines stay untagged.
    """

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def _paint(self, text: str, color: Optional[str]) -> str:
        if not self.use_color or not color:
            return text
        return f"{color}{text}{COLORS['RESET']}"

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            self._paint(self.formatTime(record, "%H:%M:%S"), COLORS["DIM"]),
            "[" + self._paint(record.levelname[:4], LEVEL_COLORS.get(record.levelno)) + "]",
        ]
        object_count = getattr(record, "object_count", None)
        if object_count is not None:
            parts.append(self._paint(f"[N={object_count}]", COLORS["SIZE"]))
        parts.append(record.getMessage())

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: int = logging.INFO, stream: Optional[IO[str]] = None) -> None:
    """Configure logging for the harness."""
    stream = stream or sys.stderr
    isatty = getattr(stream, "isatty", None)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(SizeFormatter(use_color=bool(isatty and isatty())))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    # Quiet noisy libraries
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)


# =============================================================================
# LOG HELPER FUNCTIONS
# =============================================================================


def _context(context: dict) -> str:
    return " ".join(f"{k}={v}" for k, v in context.items())


def log_size(logger: logging.Logger, object_count: int, state: str, **context) -> None:
    """Log the start or end of one swept size.

    Args:
        logger: Logger instance
        object_count: Swept array length N, rendered as the ``[N=..]`` tag
        state: 'start' or 'end'
        **context: Additional context (collection, size, retrieval_ms, etc.)
    """
    marker = ">>>" if state == "start" else "<<<"
    logger.debug(f"{marker} {_context(context)}".rstrip(), extra={"object_count": object_count})


def log_run(logger: logging.Logger, state: str, run_id: str, **context) -> None:
    """Log run start/end.

    Args:
        logger: Logger instance
        state: 'start' or 'end'
        run_id: Run identifier
        **context: Additional context (mode, sizes, status, etc.)
    """
    marker = ">>> RUN" if state == "start" else "<<< RUN"
    logger.info(f"{marker} {run_id} {_context(context)}".rstrip())
