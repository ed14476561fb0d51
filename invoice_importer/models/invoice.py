from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .candidate_invoice import Currency, InvoiceStatus, InvoiceType, LineItem, parse_amount
from .import_outcome import ResponseContractError

"""Invoice view model for the canonical invoice list.

Invoices are owned by the backend. The client only reads them when the list is
refreshed after an import. The backend mixes camelCase (API layer) and
snake_case (SQLite rows) keys depending on which repository produced the
entry, so every field is looked up under both spellings.
"""

__all__ = [
    "Invoice",
]


def _pick(raw: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


def _date_part(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).split("T")[0]


def _number(value: Any) -> float:
    # backend rows may carry numeric strings; anything unusable counts as 0
    number = parse_amount(value)
    return 0 if number is None else number


def _item_from_api(raw: dict[str, Any]) -> LineItem:
    product = raw.get("product") if isinstance(raw.get("product"), dict) else {}
    quantity = _number(_pick(raw, "quantity"))
    unit_price = _number(_pick(raw, "unitPrice", "rate_usd"))
    raw_total = _pick(raw, "totalPrice", "amount")
    total_price = quantity * unit_price if raw_total is None else _number(raw_total)
    return LineItem(
        product_name=str(_pick(raw, "productName", "brand_name", default=None) or product.get("brandName") or "Item"),
        quantity=quantity,
        unit_price=unit_price,
        total_price=total_price,
    )


@dataclass(frozen=True)
class Invoice:
    """Persisted invoice as listed by ``GET /invoices``."""
    id: str
    invoice_number: str
    invoice_type: str
    customer_name: str
    customer_country: str
    invoice_date: str | None
    due_date: str | None
    total_amount: float
    currency: str
    status: str
    items: tuple[LineItem, ...] = ()

    @staticmethod
    def from_api(raw: Any) -> Invoice:
        """Map one list entry onto the view model.

        Raises:
            ResponseContractError: entry is not an object or has no id.
        """
        if not isinstance(raw, dict):
            raise ResponseContractError(f"invoice entry must be an object, got {raw!r}")
        invoice_id = raw.get("id")
        if invoice_id is None:
            raise ResponseContractError("invoice entry without 'id'")
        order = raw.get("order") if isinstance(raw.get("order"), dict) else {}
        items = raw.get("items") or []
        return Invoice(
            id=str(invoice_id),
            invoice_number=str(_pick(raw, "invoiceNumber", "invoice_number", default="INV")),
            invoice_type=str(_pick(raw, "invoiceType", "invoice_type", default=InvoiceType.PROFORMA.value)),
            customer_name=str(
                _pick(raw, "customerName", "customer_name", default=None) or order.get("customerName") or "-"
            ),
            customer_country=str(
                _pick(raw, "customerCountry", "customer_country", default=None) or order.get("customerCountry") or "-"
            ),
            invoice_date=_date_part(_pick(raw, "invoiceDate", "invoice_date", "createdAt", "created_at")),
            due_date=_date_part(_pick(raw, "dueDate", "due_date")),
            total_amount=_number(_pick(raw, "totalAmount", "total_amount", "amount")),
            currency=str(_pick(raw, "currency", default=Currency.USD.value)),
            status=str(_pick(raw, "status", default=InvoiceStatus.PENDING.value)),
            items=tuple(_item_from_api(i) for i in items if isinstance(i, dict)),
        )
