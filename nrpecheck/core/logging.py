"""Per-check JSONL run log and result history.

Every check run appends JSON lines to <log_dir>/<YYYY-MM-DD>/<check>.jsonl:
the command that was run, one debug entry per classified output line and a
final "result" entry. The result entries form the status history shown by
`nrpecheck logs --results`.

Logging must never cost a check its status line. If the log file cannot be
opened or written, the logger says so once on stderr and turns itself off.
"""

import json
import sys
from datetime import date, datetime, timezone
from functools import partialmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from nrpecheck.core.status import CheckResult


LEVELS = ("debug", "info", "warning", "error")

RESULT_EVENT = "result"


def log_file(log_dir: Path, check_name: str, day: date | None = None) -> Path:
    """Log file of a check for the given day (default: today)."""
    day = day or date.today()
    return log_dir / day.isoformat() / f"{check_name}.jsonl"


class CheckLogger:
    """Appends JSONL entries for one check run; a no-op without a path."""

    def __init__(self, check_name: str, path: Path | None = None):
        self.check_name = check_name
        self.path = path
        self._file = None

    @classmethod
    def for_directory(cls, check_name: str, log_dir: Path | None) -> "CheckLogger":
        return cls(check_name, log_file(log_dir, check_name) if log_dir else None)

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def _disable(self, error: OSError) -> None:
        print(f"{self.check_name}: logging disabled: {error}", file=sys.stderr)
        self.close()
        self.path = None

    def log(self, level: str, event: str, **fields: Any) -> None:
        """Append one entry; fields must be JSON serializable."""
        if not self.enabled:
            return
        entry = {
            "time": datetime.now(timezone.utc).isoformat(),
            "check": self.check_name,
            "level": level,
            "event": event,
            **fields,
        }
        try:
            if self._file is None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._file = open(self.path, "a")
            self._file.write(json.dumps(entry) + "\n")
            self._file.flush()
        except OSError as e:
            self._disable(e)

    debug = partialmethod(log, "debug")
    info = partialmethod(log, "info")
    warning = partialmethod(log, "warning")
    error = partialmethod(log, "error")

    def result(self, result: "CheckResult") -> None:
        """Record the final result of the run."""
        self.info(
            RESULT_EVENT,
            status=result.status.name,
            code=result.exit_code,
            detail=result.message,
        )

    def close(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            finally:
                self._file = None

    def __enter__(self) -> "CheckLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def read_entries(
    log_dir: Path,
    check_name: str,
    day: date | None = None,
    min_level: str = "debug",
    results_only: bool = False,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """
    Read the log entries of a check for one day.

    Args:
        log_dir: Base log directory
        check_name: Check to read
        day: Day to read (default: today)
        min_level: Lowest level to include
        results_only: Only return the final result of each run
        limit: Keep only the most recent entries

    Returns:
        Entries in the order they were written
    """
    path = log_file(log_dir, check_name, day)
    if not path.exists():
        return []

    threshold = LEVELS.index(min_level)
    entries = []
    with open(path) as f:
        for line in f:
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                # Partial line from an interrupted run
                continue
            if results_only and entry.get("event") != RESULT_EVENT:
                continue
            level = entry.get("level", "debug")
            if level in LEVELS and LEVELS.index(level) >= threshold:
                entries.append(entry)

    if limit:
        entries = entries[-limit:]
    return entries
