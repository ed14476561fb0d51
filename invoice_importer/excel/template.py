from __future__ import annotations

from pathlib import Path

import pandas as pd

"""Import template workbook.

The first sheet carries only the header row, so uploading an untouched
template produces no candidate invoices. A second sheet explains the columns.
"""

__all__ = [
    "TEMPLATE_COLUMNS",
    "INSTRUCTIONS",
    "write_template",
]

TEMPLATE_COLUMNS = [
    "Invoice Number",
    "Invoice Type",
    "Customer Name",
    "Customer Country",
    "Invoice Date",
    "Due Date",
    "Total Amount",
    "Currency",
    "Status",
    "Product Name",
    "Quantity",
    "Unit Price",
    "Total Price",
]

_COLUMN_WIDTHS = [15, 12, 20, 15, 12, 12, 12, 8, 10, 20, 10, 12, 12]

INSTRUCTIONS = [
    "Invoice Import Template - Instructions",
    "",
    "Required Fields:",
    "- Invoice Number: Unique identifier for the invoice (e.g., INV/2024/001)",
    "- Invoice Type: Must be one of: proforma, pre-shipment, post-shipment",
    "- Customer Name: Name of the customer",
    "- Customer Country: Country of the customer",
    "- Invoice Date: Date of the invoice (YYYY-MM-DD format)",
    "- Total Amount: Total amount of the invoice (numeric)",
    "- Currency: Must be USD or INR",
    "",
    "Optional Fields:",
    "- Due Date: Due date for payment (YYYY-MM-DD format)",
    "- Status: Invoice status (draft, pending, paid, overdue, cancelled) - defaults to pending",
    "- Product Name: Name of the product (for item details)",
    "- Quantity: Quantity of the product (numeric)",
    "- Unit Price: Unit price of the product (numeric)",
    "- Total Price: Total price for this item (numeric)",
    "",
    "Notes:",
    "- Keep the columns in the order of this template; they are read by position",
    "- Rows without an invoice number are ignored",
    "- Invoice numbers must be unique; duplicates are skipped during import",
]


def write_template(dest: Path) -> Path:
    """Write the import template to ``dest`` (.xlsx) and return the path."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(dest, engine="openpyxl") as writer:
        pd.DataFrame(columns=TEMPLATE_COLUMNS).to_excel(writer, sheet_name="Invoices", index=False)
        pd.DataFrame(INSTRUCTIONS).to_excel(writer, sheet_name="Instructions", header=False, index=False)
        invoices_ws = writer.sheets["Invoices"]
        for column_cells, width in zip(invoices_ws.iter_cols(min_row=1, max_row=1), _COLUMN_WIDTHS):
            invoices_ws.column_dimensions[column_cells[0].column_letter].width = width
        writer.sheets["Instructions"].column_dimensions["A"].width = 80
    return dest
