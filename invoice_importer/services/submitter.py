from __future__ import annotations

import logging
from collections.abc import Sequence

from ..api.client import ExportProClient
from ..logging.error_log import ErrorLogBuffer
from ..models.candidate_invoice import CandidateInvoice
from ..models.error_record import ErrorRecord
from ..models.import_outcome import ImportOutcome

"""Import submitter: sends a confirmed batch in a single request.

The batch is never split or filtered. Row failures reported by the server
(typically duplicate invoice numbers) are written to the error log with the
spreadsheet row they came from.
"""

__all__ = [
    "ImportSubmitter",
]

logger = logging.getLogger(__name__)


class ImportSubmitter:
    def __init__(self, client: ExportProClient, error_log: ErrorLogBuffer | None = None) -> None:
        self.client = client
        self.error_log = error_log

    def submit(self, candidates: Sequence[CandidateInvoice], source_name: str = "") -> ImportOutcome:
        """POST the whole batch and return the server's outcome.

        Raises:
            NetworkError: request failed or the server answered non-2xx
            ResponseContractError: 2xx answer with an unexpected body
        """
        logger.info(f"submitting {len(candidates)} invoices")
        outcome = self.client.import_invoices(candidates)
        logger.info(
            f"import answered success={outcome.success} "
            f"ok={outcome.successful_records} failed={outcome.failed_records}"
        )
        if outcome.errors and self.error_log is not None:
            self.error_log.extend(ErrorRecord.for_failure(source_name, f, candidates) for f in outcome.errors)
            try:
                path = self.error_log.flush()
            except OSError as e:
                # rows are already committed server side; only the local log is lost
                logger.warning(f"could not write import error log: {e}")
            else:
                logger.warning(f"{len(outcome.errors)} rejected rows written to {path}")
        return outcome
