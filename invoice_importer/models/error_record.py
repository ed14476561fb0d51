from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .candidate_invoice import CandidateInvoice
from .import_outcome import ImportFailure

"""ErrorRecord: one line of the import error log.

Written for every row the server refused. The keys are fixed by
``contracts/error_log_schema.json``.
"""

__all__ = [
    "UNKNOWN_ROW",
    "ErrorRecord",
]

UNKNOWN_ROW = -1


def _utc_stamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    timestamp: str  # ISO8601 UTC, 'Z' suffix
    file: str  # workbook the batch came from
    row: int  # 1-based spreadsheet row, UNKNOWN_ROW when it cannot be mapped
    invoice_number: str  # "" when unknown
    field: str
    message: str

    @staticmethod
    def create(file: str, row: int, invoice_number: str, field: str, message: str) -> ErrorRecord:
        return ErrorRecord(_utc_stamp(), file, row, invoice_number, field, message)

    @staticmethod
    def for_failure(file: str, failure: ImportFailure, batch: Sequence[CandidateInvoice]) -> ErrorRecord:
        """Map a server failure back to the sheet row it came from.

        The server counts rows 1-based within the submitted batch; positions
        outside the batch, or candidates built without a sheet row, are
        logged with UNKNOWN_ROW.
        """
        if not 1 <= failure.row <= len(batch):
            return ErrorRecord.create(file, UNKNOWN_ROW, "", failure.field, failure.message)
        candidate = batch[failure.row - 1]
        row = UNKNOWN_ROW if candidate.source_row is None else candidate.source_row
        return ErrorRecord.create(file, row, candidate.invoice_number, failure.field, failure.message)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
