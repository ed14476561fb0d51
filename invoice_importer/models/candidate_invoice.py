from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""CandidateInvoice domain model and invoice vocabularies.

A CandidateInvoice is a parsed-but-not-yet-persisted invoice: it is created by
the normalizer from one spreadsheet row, held while the preview is open and
sent to the import endpoint on confirmation.

Field values are kept as plain strings instead of enum members because the
normalizer is lenient: an unexpected invoice type typed into the sheet is
forwarded as-is and rejected (or accepted) by the server.
"""

__all__ = [
    "parse_amount",
    "InvoiceType",
    "Currency",
    "InvoiceStatus",
    "LineItem",
    "CandidateInvoice",
]


def parse_amount(value: Any) -> float | None:
    """Read a cell or JSON value as a non-negative number.

    Numbers and numeric strings are accepted; integral strings stay ints.
    Returns None for blanks, booleans, text, negative or non-finite values.
    """
    number: Any = None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        number = int(parsed) if parsed.is_integer() else parsed
    if number is None or not math.isfinite(number) or number < 0:
        return None
    return number

class InvoiceType(Enum):
    """Invoice kinds understood by the export backend."""
    PROFORMA = "proforma"
    PRE_SHIPMENT = "pre-shipment"
    POST_SHIPMENT = "post-shipment"


class Currency(Enum):
    USD = "USD"
    INR = "INR"


class InvoiceStatus(Enum):
    """Invoice lifecycle states.

    Imported invoices default to PENDING.
    """
    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class LineItem:
    product_name: str
    quantity: float = 0
    unit_price: float = 0
    total_price: float = 0

    def to_payload(self) -> dict[str, Any]:
        return {
            "productName": self.product_name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "totalPrice": self.total_price,
        }


@dataclass(frozen=True)
class CandidateInvoice:
    """Normalized invoice record awaiting user confirmation.

    Attributes:
        invoice_number: Natural key, trimmed, never empty
        invoice_type: Lowercased type, "proforma" when the cell was blank
        customer_name: Trimmed customer name
        customer_country: Trimmed customer country
        invoice_date: ISO date string, today when the cell was blank
        due_date: Optional due date string
        total_amount: Non-negative amount, 0 when the cell was not numeric
        currency: Uppercased currency code, "USD" when blank
        status: Lowercased status, "pending" when blank
        items: Line items in sheet order (at most one per row)
        source_row: 1-based spreadsheet row the record came from; never sent
    """
    invoice_number: str
    invoice_type: str = InvoiceType.PROFORMA.value
    customer_name: str = ""
    customer_country: str = ""
    invoice_date: str = ""
    due_date: str | None = None
    total_amount: float = 0
    currency: str = Currency.USD.value
    status: str = InvoiceStatus.PENDING.value
    items: tuple[LineItem, ...] = ()
    source_row: int | None = field(default=None, compare=False)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the camelCase wire shape of ``POST /invoices/import``.

        ``dueDate`` is left out entirely when there is no due date.
        """
        payload: dict[str, Any] = {
            "invoiceNumber": self.invoice_number,
            "invoiceType": self.invoice_type,
            "customerName": self.customer_name,
            "customerCountry": self.customer_country,
            "invoiceDate": self.invoice_date,
            "totalAmount": self.total_amount,
            "currency": self.currency,
            "status": self.status,
            "items": [item.to_payload() for item in self.items],
        }
        if self.due_date is not None:
            payload["dueDate"] = self.due_date
        return payload
