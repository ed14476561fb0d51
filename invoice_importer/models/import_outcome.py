from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""ImportOutcome model: the per-batch result returned by ``POST /invoices/import``.

The outcome is produced by the server and only rendered client side; it is
never persisted. Parsing is strict on purpose: a body that does not follow the
documented shape raises ResponseContractError instead of being guessed at.
"""

__all__ = [
    "ImportFailure",
    "ImportOutcome",
    "ResponseContractError",
]


class ResponseContractError(Exception):
    """Raised when a 2xx response body breaks the endpoint contract."""


def _require_int(body: dict[str, Any], key: str) -> int:
    value = body.get(key)
    # bool is an int subclass; a flag where a count belongs is a contract break
    if isinstance(value, bool) or not isinstance(value, int):
        raise ResponseContractError(f"import response field '{key}' must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class ImportFailure:
    """One rejected record as reported by the server."""
    row: int  # 1-based position inside the submitted batch
    field: str  # offending field, e.g. invoiceNumber for duplicates
    message: str

    @staticmethod
    def from_response(raw: Any) -> ImportFailure:
        if not isinstance(raw, dict):
            raise ResponseContractError(f"import error entry must be an object, got {raw!r}")
        row = raw.get("row")
        if isinstance(row, bool) or not isinstance(row, int):
            raise ResponseContractError(f"import error 'row' must be an integer, got {row!r}")
        return ImportFailure(
            row=row,
            field=str(raw.get("field", "")),
            message=str(raw.get("message", "")),
        )


@dataclass(frozen=True)
class ImportOutcome:
    """Aggregated result of one import batch.

    ``success`` is the server's verdict for the batch as a whole. A batch can
    succeed while individual rows fail (typically duplicate invoice numbers);
    see ``is_partial``.
    """
    success: bool
    total_records: int
    successful_records: int
    failed_records: int
    errors: tuple[ImportFailure, ...] = ()

    @property
    def is_partial(self) -> bool:
        """True when the batch went through but some rows were skipped."""
        return self.success and self.failed_records > 0

    @staticmethod
    def from_response(body: Any) -> ImportOutcome:
        """Build an outcome from the decoded JSON body of the import endpoint.

        Raises:
            ResponseContractError: body is not an object, ``success`` is not a
                boolean, a counter is missing or not an integer, or ``errors``
                is present but not a list of ``{row, field, message}`` objects.
        """
        if not isinstance(body, dict):
            raise ResponseContractError(f"import response must be an object, got {type(body).__name__}")
        success = body.get("success")
        if not isinstance(success, bool):
            raise ResponseContractError(f"import response field 'success' must be a boolean, got {success!r}")
        raw_errors = body.get("errors") or []
        if not isinstance(raw_errors, list):
            raise ResponseContractError("import response field 'errors' must be a list")
        return ImportOutcome(
            success=success,
            total_records=_require_int(body, "totalRecords"),
            successful_records=_require_int(body, "successfulRecords"),
            failed_records=_require_int(body, "failedRecords"),
            errors=tuple(ImportFailure.from_response(e) for e in raw_errors),
        )
