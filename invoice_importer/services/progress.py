from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm

"""Row progress while a workbook is normalized.

A tqdm bar is drawn only when stdout is a terminal. Piped or CI output gets
no bar at all, only the counters, which the session logs afterwards.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Counts kept and skipped data rows, mirrored on a tqdm bar on a TTY.

    The postfix (``kept=.. skipped=..``) is refreshed every ``refresh_every``
    rows and once more on close.
    """

    def __init__(self, total: int, *, description: str = "Normalizing rows", refresh_every: int = 100) -> None:
        self.total = total
        self.kept = 0
        self.skipped = 0
        self._refresh_every = max(refresh_every, 1)
        self.pbar: Any = None
        if is_tty_enabled():
            self.pbar = tqdm(total=total, desc=description, unit="row", leave=False, ncols=80, ascii=True)

    @property
    def processed(self) -> int:
        return self.kept + self.skipped

    def advance(self, *, skipped: bool = False) -> None:
        if skipped:
            self.skipped += 1
        else:
            self.kept += 1
        if self.pbar is None:
            return
        self.pbar.update(1)
        if self.processed % self._refresh_every == 0:
            self.pbar.set_postfix(kept=self.kept, skipped=self.skipped)

    def close(self) -> None:
        if self.pbar is None:
            return
        self.pbar.set_postfix(kept=self.kept, skipped=self.skipped)
        self.pbar.close()
        self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
