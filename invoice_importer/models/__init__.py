"""Domain models for the bulk invoice import client."""

from .candidate_invoice import CandidateInvoice, Currency, InvoiceStatus, InvoiceType, LineItem
from .config_models import ApiConfig, ImportConfig, ImportOptions
from .error_record import ErrorRecord
from .import_outcome import ImportFailure, ImportOutcome, ResponseContractError
from .import_row import ImportRow
from .import_session import ImportState
from .invoice import Invoice

__all__ = [
    # Configuration models
    "ApiConfig",
    "ImportConfig",
    "ImportOptions",
    # Import pipeline models
    "CandidateInvoice",
    "Currency",
    "ImportFailure",
    "ImportOutcome",
    "ImportRow",
    "ImportState",
    "InvoiceStatus",
    "InvoiceType",
    "LineItem",
    "ResponseContractError",
    # Server side view
    "Invoice",
    "ErrorRecord",
]
