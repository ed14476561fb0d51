from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from ..excel.reader import MissingColumnsError
from ..excel.template import TEMPLATE_COLUMNS
from ..models.candidate_invoice import CandidateInvoice, Currency, InvoiceStatus, InvoiceType, LineItem, parse_amount
from ..models.import_row import ImportRow
from .progress import ProgressTracker

"""Row normalizer: spreadsheet rows -> CandidateInvoice records.

Columns are mapped by position (see TEMPLATE_COLUMNS):

    0 invoice number   trimmed, rows without one are skipped
    1 invoice type     trimmed + lowercased, default "proforma"
    2 customer name    trimmed
    3 customer country trimmed
    4 invoice date     passthrough, default today
    5 due date         optional passthrough
    6 total amount     numeric, default 0
    7 currency         trimmed + uppercased, default "USD"
    8 status           trimmed + lowercased, default "pending"
    9-12 line item     only when column 9 has a product name

Type, currency and status are trimmed before their case is changed, so
" proforma" and "proforma" end up as the same value.

Malformed cells never fail a row: they fall back to the column default and
the substitution is logged at DEBUG level.
"""

__all__ = [
    "build_candidate",
    "check_header",
    "normalize_rows",
]

logger = logging.getLogger(__name__)

COL_INVOICE_NUMBER = 0
COL_INVOICE_TYPE = 1
COL_CUSTOMER_NAME = 2
COL_CUSTOMER_COUNTRY = 3
COL_INVOICE_DATE = 4
COL_DUE_DATE = 5
COL_TOTAL_AMOUNT = 6
COL_CURRENCY = 7
COL_STATUS = 8
COL_PRODUCT_NAME = 9
COL_QUANTITY = 10
COL_UNIT_PRICE = 11
COL_TOTAL_PRICE = 12


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _to_number(value: Any, row: ImportRow, column: int) -> float:
    """Coerce a cell to a non-negative number, 0 when that is not possible."""
    if _is_empty(value):
        return 0
    number = parse_amount(value)
    if number is None:
        logger.debug(
            f"row {row.spreadsheet_row}: {TEMPLATE_COLUMNS[column]} value {value!r} is not a valid amount, using 0"
        )
        return 0
    return number


def check_header(row: ImportRow | None) -> None:
    """Verify the header row names the template columns in template order.

    Raises:
        MissingColumnsError: header absent or a column name out of place.
    """
    if row is None:
        raise MissingColumnsError("sheet has no header row")
    expected = [c.lower() for c in TEMPLATE_COLUMNS]
    found = [_to_text(row.cell(i)).strip().lower() for i in range(len(expected))]
    missing = [TEMPLATE_COLUMNS[i] for i, (e, f) in enumerate(zip(expected, found)) if e != f]
    if missing:
        raise MissingColumnsError(f"header row missing columns: {missing}")


def build_candidate(row: ImportRow, today: date) -> CandidateInvoice:
    """Build one CandidateInvoice from a data row with a non-empty invoice number."""
    invoice_type = row.cell(COL_INVOICE_TYPE)
    invoice_date = row.cell(COL_INVOICE_DATE)
    due_date = row.cell(COL_DUE_DATE)
    currency = row.cell(COL_CURRENCY)
    status = row.cell(COL_STATUS)

    items: tuple[LineItem, ...] = ()
    product_name = row.cell(COL_PRODUCT_NAME)
    if not _is_empty(product_name):
        items = (
            LineItem(
                product_name=_to_text(product_name).strip(),
                quantity=_to_number(row.cell(COL_QUANTITY), row, COL_QUANTITY),
                unit_price=_to_number(row.cell(COL_UNIT_PRICE), row, COL_UNIT_PRICE),
                total_price=_to_number(row.cell(COL_TOTAL_PRICE), row, COL_TOTAL_PRICE),
            ),
        )

    return CandidateInvoice(
        invoice_number=_to_text(row.cell(COL_INVOICE_NUMBER)).strip(),
        invoice_type=(
            InvoiceType.PROFORMA.value if _is_empty(invoice_type) else _to_text(invoice_type).strip().lower()
        ),
        customer_name=_to_text(row.cell(COL_CUSTOMER_NAME)).strip(),
        customer_country=_to_text(row.cell(COL_CUSTOMER_COUNTRY)).strip(),
        invoice_date=today.isoformat() if _is_empty(invoice_date) else _to_text(invoice_date),
        due_date=None if _is_empty(due_date) else _to_text(due_date),
        total_amount=_to_number(row.cell(COL_TOTAL_AMOUNT), row, COL_TOTAL_AMOUNT),
        currency=Currency.USD.value if _is_empty(currency) else _to_text(currency).strip().upper(),
        status=InvoiceStatus.PENDING.value if _is_empty(status) else _to_text(status).strip().lower(),
        items=items,
        source_row=row.spreadsheet_row,
    )


def normalize_rows(
    rows: Iterable[ImportRow],
    *,
    today: date | None = None,
    strict_header: bool = False,
    progress: ProgressTracker | None = None,
) -> list[CandidateInvoice]:
    """Turn parsed rows into candidate invoices, preserving sheet order.

    The first row is the header and is skipped by position. Rows whose first
    cell is empty are skipped as well.

    Args:
        rows: Rows as produced by ``read_workbook`` (header included)
        today: Date used when the invoice date cell is blank
        strict_header: Check the header names with ``check_header`` first
        progress: Optional tracker advanced once per data row
    """
    today = today or date.today()
    candidates: list[CandidateInvoice] = []
    header: ImportRow | None = None
    skipped = 0
    for position, row in enumerate(rows):
        if position == 0:
            header = row
            if strict_header:
                check_header(row)
            continue
        if _is_empty(row.cell(COL_INVOICE_NUMBER)):
            skipped += 1
            if progress is not None:
                progress.advance(skipped=True)
            continue
        candidates.append(build_candidate(row, today))
        if progress is not None:
            progress.advance()
    if strict_header and header is None:
        check_header(None)
    logger.debug(f"normalized {len(candidates)} rows, skipped {skipped} without invoice number")
    return candidates
