from __future__ import annotations

import logging

from ..api.client import ExportProClient
from ..models.invoice import Invoice

"""In-memory invoice list kept in sync with the server.

The list is never merged: every refresh replaces it wholesale with what the
server returns. Selection is dropped before fetching, since a selected id may
not survive the refresh.
"""

__all__ = [
    "InvoiceList",
]

logger = logging.getLogger(__name__)


class InvoiceList:
    def __init__(self, client: ExportProClient) -> None:
        self.client = client
        self.invoices: list[Invoice] = []
        self.selected_id: str | None = None

    @property
    def selected(self) -> Invoice | None:
        if self.selected_id is None:
            return None
        return next((inv for inv in self.invoices if inv.id == self.selected_id), None)

    def select(self, invoice_id: str) -> Invoice:
        """Select an invoice of the current list.

        Raises:
            KeyError: no invoice with that id is loaded
        """
        for inv in self.invoices:
            if inv.id == invoice_id:
                self.selected_id = invoice_id
                return inv
        raise KeyError(invoice_id)

    def refresh(self) -> list[Invoice]:
        """Re-fetch the canonical list and replace the local one.

        Raises:
            NetworkError / ResponseContractError from the client; the previous
            list is kept in that case but the selection stays cleared.
        """
        self.selected_id = None
        invoices = self.client.list_invoices()
        self.invoices = invoices
        logger.debug(f"invoice list refreshed: {len(invoices)} invoices")
        return invoices
