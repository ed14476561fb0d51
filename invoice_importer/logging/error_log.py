from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""JSON Lines log of rows the server refused to import.

Records are buffered and written on ``flush()``. The target file
``import-errors-YYYYMMDD-HHMMSS.log`` (UTC) is named on the first write and
reused by later flushes of the same buffer; nothing is created on disk while
the buffer stays empty.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")


def _log_name(now: datetime) -> str:
    return f"import-errors-{now:%Y%m%d-%H%M%S}.log"


class ErrorLogBuffer:
    """Single-threaded buffer of ErrorRecords for one CLI run."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory or LOGS_DIR
        self.path: Path | None = None
        self._pending: list[ErrorRecord] = []

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def extend(self, records: Iterable[ErrorRecord]) -> None:
        self._pending.extend(records)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path | None:
        """Append pending records to the log file.

        Returns the file written to, or None when nothing was pending.
        """
        if not self._pending:
            return None
        if self.path is None:
            self.path = self.directory / _log_name(datetime.now(UTC))
        self.directory.mkdir(parents=True, exist_ok=True)
        lines = "".join(f"{record.to_json_line()}\n" for record in self._pending)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(lines)
        self._pending.clear()
        return self.path
