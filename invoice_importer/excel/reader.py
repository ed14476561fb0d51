from __future__ import annotations

import io
from collections.abc import Iterator
from pathlib import Path
from typing import Any, BinaryIO

import pandas as pd

from ..models.import_row import ImportRow

"""Spreadsheet parser for the bulk invoice import.

Only the first sheet of a workbook is read. The header row is returned like
any other row; skipping it is the normalizer's job. The file is fully opened
and parsed up front so that an unreadable workbook fails with FileFormatError
before the caller sees a single row.
"""

__all__ = [
    "ALLOWED_EXTENSIONS",
    "FileFormatError",
    "MissingColumnsError",
    "SheetRows",
    "check_extension",
    "read_workbook",
]

ALLOWED_EXTENSIONS = (".xlsx", ".xls")


class FileFormatError(Exception):
    """Raised when a file is not a readable .xlsx/.xls workbook."""


class MissingColumnsError(Exception):
    """Raised when the header row does not carry the expected columns."""


def check_extension(filename: str) -> None:
    """Reject file names without an .xlsx/.xls suffix (case insensitive).

    This is a name check only; the content is validated when it is parsed.
    """
    if not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise FileFormatError(f"not an Excel file (.xlsx or .xls expected): {filename}")


def _na_options(keep_na_strings: list[str] | None) -> dict[str, Any]:
    # pandas._libs.parsers.STR_NA_VALUES holds the default NA strings
    import pandas._libs.parsers as parsers

    if not keep_na_strings:
        return {"keep_default_na": True, "na_values": None}
    custom_na = parsers.STR_NA_VALUES - set(keep_na_strings)
    return {"keep_default_na": False, "na_values": list(custom_na)}


def _clean_cell(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):  # pragma: no cover - non scalar cell
        return value
    return value


class SheetRows:
    """Finite, restartable sequence of rows of one parsed sheet.

    Each iteration starts over from the header row and builds the ImportRow
    objects lazily.
    """

    def __init__(self, frame: pd.DataFrame, sheet_name: str, source_name: str) -> None:
        self._frame = frame
        self.sheet_name = sheet_name
        self.source_name = source_name

    def __iter__(self) -> Iterator[ImportRow]:
        for index, values in enumerate(self._frame.itertuples(index=False, name=None)):
            yield ImportRow(index=index, cells=tuple(_clean_cell(v) for v in values))

    def __len__(self) -> int:
        return int(self._frame.shape[0])

    def __repr__(self) -> str:
        return f"SheetRows(source={self.source_name!r}, sheet={self.sheet_name!r}, rows={len(self)})"


def read_workbook(
    source: Path | str | bytes | BinaryIO,
    *,
    filename: str | None = None,
    keep_na_strings: list[str] | None = None,
) -> SheetRows:
    """Read the first sheet of a workbook.

    Parameters
    ----------
    source: path, raw bytes or a binary file object
    filename: name used for the suffix check; defaults to the path's name.
        Bytes and file objects without a filename skip the suffix check.
    keep_na_strings: strings excluded from pandas' default NaN conversion

    Raises
    ------
    FileFormatError: wrong suffix, missing file, or content that is not a
        workbook.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        name = filename or path.name
        check_extension(name)
        if not path.is_file():
            raise FileFormatError(f"file not found: {path}")
        handle: Any = path
    else:
        name = filename or "<upload>"
        if filename is not None:
            check_extension(filename)
        handle = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source

    na_options = _na_options(keep_na_strings)
    try:
        with pd.ExcelFile(handle) as xls:
            if not xls.sheet_names:
                raise FileFormatError(f"workbook has no sheets: {name}")
            sheet_name = str(xls.sheet_names[0])
            frame = xls.parse(xls.sheet_names[0], header=None, dtype=object, **na_options)
    except FileFormatError:
        raise
    except Exception as e:
        raise FileFormatError(f"unreadable Excel file {name}: {e}") from e
    return SheetRows(frame, sheet_name=sheet_name, source_name=name)
