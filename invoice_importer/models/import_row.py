from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

"""ImportRow model for the bulk invoice import pipeline.

An ImportRow is the raw, positional view of one spreadsheet row as produced by
the spreadsheet parser. It is discarded once the normalizer has turned it into
a CandidateInvoice.
"""

__all__ = [
    "ImportRow",
]


@dataclass(frozen=True)
class ImportRow:
    """Ordered, untyped cell values of a single spreadsheet row.

    ``index`` is the 0-based position inside the sheet, so the header row has
    index 0 and the first data row index 1. Empty cells are ``None``.
    """
    index: int  # 0-based sheet position (0 = header)
    cells: tuple[Any, ...]  # cell values, blanks as None

    def cell(self, position: int) -> Any:
        """Return the value at ``position`` or None when the row is shorter."""
        if 0 <= position < len(self.cells):
            return self.cells[position]
        return None

    @property
    def spreadsheet_row(self) -> int:
        """1-based row number as shown by Excel."""
        return self.index + 1

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.cells)

    def __getitem__(self, position: int) -> Any:
        return self.cells[position]
