"""
Run-level logging utility

Tees every log record of an analysis run into {run_dir}/logs/app.log, next to
the tables the run produced. The log opens with the run's grid and dataset
context, marks each dataset as it is processed and closes with a tally of
warnings and errors, so a reader can tell at a glance which pairs lost points
or hit degenerate axes.
"""

import logging
import time
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_RULE = "-" * 60


class _CountingFileHandler(logging.FileHandler):
    """File handler that keeps a per-level count of what it wrote."""

    def __init__(self, filename: Path):
        super().__init__(filename, mode='w', encoding='utf-8')
        self.level_counts: Counter = Counter()

    def emit(self, record: logging.LogRecord) -> None:
        self.level_counts[record.levelname] += 1
        super().emit(record)


class RunLogHandler:
    """
    Context manager attaching a run log to the root logger.

    Args:
        run_id: Run identifier, written into the header and footer
        run_dir: Output directory of the run; the log goes to run_dir/logs/app.log
        context: Flat mapping written as "key = value" header lines
            (grid size, out-of-range policy, datasets)

    Example:
        >>> with RunLogHandler(run_id, run_dir, {"grid.k": 4}) as run_log:
        ...     run_log.section("dataset iris")
        ...     analyze_axis_pair(...)
        >>> run_log.warning_count
        0
    """

    def __init__(self, run_id: str, run_dir: Path, context: Optional[Mapping[str, Any]] = None):
        self.run_id = run_id
        self.log_file = Path(run_dir) / "logs" / "app.log"
        self.context: Dict[str, Any] = dict(context or {})
        self.file_handler: Optional[_CountingFileHandler] = None
        self.level_counts: Counter = Counter()
        self._logger = logging.getLogger("regionflow.run")
        self._started = 0.0

    @property
    def warning_count(self) -> int:
        return self.level_counts["WARNING"]

    @property
    def error_count(self) -> int:
        return self.level_counts["ERROR"] + self.level_counts["CRITICAL"]

    def section(self, title: str) -> None:
        """Mark the start of one unit of work (a dataset) in the log."""
        self._logger.info(f"{_RULE[:10]} {title} {_RULE[:10]}")

    def __enter__(self) -> "RunLogHandler":
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        root = logging.getLogger()
        self.file_handler = _CountingFileHandler(self.log_file)
        self.file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        self.file_handler.setLevel(root.level or logging.INFO)
        root.addHandler(self.file_handler)

        self._started = time.monotonic()
        self._logger.info(_RULE)
        self._logger.info(f"Regionflow run {self.run_id}")
        for key in sorted(self.context):
            self._logger.info(f"  {key} = {self.context[key]}")
        self._logger.info(_RULE)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.file_handler is None:
            return False

        root = logging.getLogger()
        try:
            if exc_type is not None:
                self._logger.error(f"Run {self.run_id} aborted: {exc_type.__name__}: {exc_val}")

            counts = self.file_handler.level_counts
            status = "failed" if exc_type is not None else "ok"
            self._logger.info(_RULE)
            self._logger.info(
                f"Run {self.run_id} {status} in {time.monotonic() - self._started:.2f}s: "
                f"{counts['WARNING']} warning(s), {counts['ERROR'] + counts['CRITICAL']} error(s)"
            )
            self.file_handler.flush()
        finally:
            self.level_counts = Counter(self.file_handler.level_counts)
            root.removeHandler(self.file_handler)
            self.file_handler.close()
            self.file_handler = None
        return False

    def get_log_path(self) -> Optional[Path]:
        """Path of the written log, or None before the run opened it."""
        return self.log_file if self.log_file.exists() else None
