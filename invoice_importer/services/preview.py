from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ..models.candidate_invoice import CandidateInvoice, Currency

"""Preview rendering for parsed invoices.

The preview lists every candidate exactly as it will be submitted. Duplicate
invoice numbers are not detected here; the server skips them on import.
"""

__all__ = [
    "PREVIEW_COLUMNS",
    "format_amount",
    "preview_frame",
    "render_preview",
]

PREVIEW_COLUMNS = ["Invoice #", "Type", "Customer", "Country", "Date", "Amount", "Status", "Items"]

_CURRENCY_SYMBOLS = {Currency.USD.value: "$", Currency.INR.value: "₹"}


def format_amount(amount: float, currency: str) -> str:
    symbol = _CURRENCY_SYMBOLS.get(currency)
    text = f"{amount:,.2f}".rstrip("0").rstrip(".")
    return f"{symbol}{text}" if symbol else f"{text} {currency}"


def preview_frame(candidates: Sequence[CandidateInvoice]) -> pd.DataFrame:
    """Tabulate candidates, one row each, in submission order."""
    rows = [
        [
            c.invoice_number,
            c.invoice_type.replace("-", " "),
            c.customer_name,
            c.customer_country,
            c.invoice_date,
            format_amount(c.total_amount, c.currency),
            c.status,
            len(c.items),
        ]
        for c in candidates
    ]
    return pd.DataFrame(rows, columns=PREVIEW_COLUMNS)


def render_preview(candidates: Sequence[CandidateInvoice]) -> str:
    lines = [
        f"{len(candidates)} invoices ready to import",
        "Please review the data below before confirming the import. "
        "Any duplicate invoice numbers will be skipped.",
        "",
    ]
    if candidates:
        lines.append(preview_frame(candidates).to_string(index=False))
    else:
        lines.append("(no invoice rows found)")
    return "\n".join(lines)
