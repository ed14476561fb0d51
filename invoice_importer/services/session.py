from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import BinaryIO
from zoneinfo import ZoneInfo

from ..api.client import NetworkError
from ..excel.reader import FileFormatError, MissingColumnsError, read_workbook
from ..models.candidate_invoice import CandidateInvoice
from ..models.import_outcome import ImportOutcome, ResponseContractError
from ..models.import_session import ImportState
from .normalizer import normalize_rows
from .preview import render_preview
from .progress import ProgressTracker
from .refresh import InvoiceList
from .submitter import ImportSubmitter

"""Import session: file pick -> parse -> preview -> confirm -> submit -> refresh.

One session drives one import at a time. The candidates shown in the preview
are stored as an immutable tuple and that same tuple is what gets submitted.
Confirming while a submission is in flight is ignored, so a double click
never produces a second request.
"""

__all__ = [
    "ImportSession",
    "InvalidTransitionError",
    "today_in",
]

logger = logging.getLogger(__name__)

IMPORT_FAILED_MESSAGE = "Import failed. Please check the data and try again."
PARSE_FAILED_MESSAGE = "Error parsing Excel file. Please check the file format."

StateListener = Callable[[ImportState, ImportState], None]


class InvalidTransitionError(Exception):
    """Raised when a session operation is not allowed in the current state."""


def today_in(timezone: str) -> Callable[[], date]:
    """Return a clock giving the current date in ``timezone``."""
    tz = ZoneInfo(timezone)
    return lambda: datetime.now(tz).date()


class ImportSession:
    """State machine around one bulk import.

    Collaborators are injected: the submitter owns the HTTP call, the invoice
    list owns the refreshed view. ``on_state_change`` is called with
    ``(old, new)`` on every transition.
    """

    def __init__(
        self,
        submitter: ImportSubmitter,
        invoice_list: InvoiceList,
        *,
        today: Callable[[], date] = date.today,
        keep_na_strings: list[str] | None = None,
        strict_header: bool = False,
        show_progress: bool = False,
        on_state_change: StateListener | None = None,
    ) -> None:
        self.submitter = submitter
        self.invoice_list = invoice_list
        self.today = today
        self.keep_na_strings = keep_na_strings
        self.strict_header = strict_header
        self.show_progress = show_progress
        self.on_state_change = on_state_change

        self.state = ImportState.IDLE
        self.source: Path | bytes | BinaryIO | None = None
        self.source_name = ""
        self.candidates: tuple[CandidateInvoice, ...] = ()
        self.outcome: ImportOutcome | None = None
        self.error: str | None = None

    def _set_state(self, new: ImportState) -> None:
        old = self.state
        self.state = new
        logger.debug(f"session {old.value} -> {new.value}")
        if self.on_state_change is not None:
            self.on_state_change(old, new)

    def _require(self, *allowed: ImportState) -> None:
        if self.state not in allowed:
            names = ", ".join(s.value for s in allowed)
            raise InvalidTransitionError(f"cannot do that while {self.state.value} (expected {names})")

    def _reset(self) -> None:
        self.source = None
        self.source_name = ""
        self.candidates = ()

    @property
    def preview_open(self) -> bool:
        return self.state in (ImportState.PARSED, ImportState.SUBMITTING)

    def pick_file(self, source: Path | str | bytes | BinaryIO, filename: str | None = None) -> None:
        """Remember the selected file. IDLE -> FILE_PICKED."""
        self._require(ImportState.IDLE)
        if isinstance(source, str):
            source = Path(source)
        self.source = source
        self.source_name = filename or (source.name if isinstance(source, Path) else "<upload>")
        self.outcome = None
        self.error = None
        self._set_state(ImportState.FILE_PICKED)

    def parse(self) -> tuple[CandidateInvoice, ...]:
        """Parse and normalize the picked file. FILE_PICKED -> PARSED.

        On failure the session goes back to IDLE with ``error`` set and the
        FileFormatError / MissingColumnsError is re-raised.
        """
        self._require(ImportState.FILE_PICKED)
        try:
            rows = read_workbook(
                self.source,
                filename=self.source_name if self.source_name != "<upload>" else None,
                keep_na_strings=self.keep_na_strings,
            )
            progress = ProgressTracker(max(len(rows) - 1, 0)) if self.show_progress else None
            try:
                candidates = normalize_rows(
                    rows, today=self.today(), strict_header=self.strict_header, progress=progress
                )
            finally:
                if progress is not None:
                    progress.close()
        except (FileFormatError, MissingColumnsError) as e:
            logger.error(f"parse failed for {self.source_name}: {e}")
            self.error = f"{PARSE_FAILED_MESSAGE} ({e})"
            self._reset()
            self._set_state(ImportState.IDLE)
            raise
        self.candidates = tuple(candidates)
        logger.info(f"parsed {len(self.candidates)} invoices from {self.source_name}")
        self._set_state(ImportState.PARSED)
        return self.candidates

    def open(self, source: Path | str | bytes | BinaryIO, filename: str | None = None) -> tuple[CandidateInvoice, ...]:
        """``pick_file`` followed by ``parse``."""
        self.pick_file(source, filename)
        return self.parse()

    def render_preview(self) -> str:
        self._require(ImportState.PARSED, ImportState.SUBMITTING)
        return render_preview(self.candidates)

    def cancel(self) -> None:
        """Close the preview without submitting anything."""
        if self.state is ImportState.IDLE:
            return
        if self.state is ImportState.SUBMITTING:
            raise InvalidTransitionError("a submission in flight cannot be cancelled")
        self._require(ImportState.FILE_PICKED, ImportState.PARSED)
        self._reset()
        self._set_state(ImportState.IDLE)

    def confirm(self) -> ImportOutcome | None:
        """Submit the previewed batch.

        Returns the server outcome, or None when a submission is already in
        flight (the call is ignored). With ``success: true`` the invoice list
        is refreshed and the session returns to IDLE; otherwise the preview
        stays open (PARSED) so the user can retry.

        Raises:
            NetworkError / ResponseContractError: after returning to PARSED.
                Any other submission error also leaves the session in PARSED.
        """
        if self.state is ImportState.SUBMITTING:
            logger.debug("confirm ignored: submission already in flight")
            return None
        self._require(ImportState.PARSED)
        self.error = None
        self._set_state(ImportState.SUBMITTING)
        try:
            outcome = self.submitter.submit(self.candidates, self.source_name)
        except (NetworkError, ResponseContractError) as e:
            logger.error(f"import request failed: {e}")
            self.error = IMPORT_FAILED_MESSAGE
            self._set_state(ImportState.FAILED)
            self._set_state(ImportState.PARSED)
            raise
        except Exception:
            logger.exception("import submission aborted")
            self.error = IMPORT_FAILED_MESSAGE
            self._set_state(ImportState.FAILED)
            self._set_state(ImportState.PARSED)
            raise

        self.outcome = outcome
        if not outcome.success:
            self.error = IMPORT_FAILED_MESSAGE
            self._set_state(ImportState.FAILED)
            self._set_state(ImportState.PARSED)
            return outcome

        self._set_state(ImportState.SUCCEEDED)
        try:
            self.invoice_list.refresh()
        except (NetworkError, ResponseContractError) as e:
            # the import itself went through; only the list view is stale
            logger.warning(f"invoice list refresh failed: {e}")
        finally:
            self._reset()
            self._set_state(ImportState.IDLE)
        return outcome
