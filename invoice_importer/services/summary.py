from __future__ import annotations

from ..models.import_outcome import ImportOutcome

"""Summary rendering for an import outcome.

SUMMARY line format:

    SUMMARY total={n} success={ok} failed={failed} result={ok|partial|failed} elapsed_sec={s}
"""

__all__ = [
    "outcome_label",
    "render_result_message",
    "render_summary_line",
]


def outcome_label(outcome: ImportOutcome) -> str:
    if not outcome.success:
        return "failed"
    return "partial" if outcome.is_partial else "ok"


def _format_seconds(elapsed: float) -> str:
    if elapsed == 0:
        return "0"
    if elapsed == int(elapsed):
        return str(int(elapsed))
    if elapsed < 0.01:
        # avoid scientific notation
        return f"{elapsed:.6f}".rstrip("0").rstrip(".")
    return f"{elapsed:.2f}".rstrip("0").rstrip(".")


def render_summary_line(outcome: ImportOutcome, elapsed_seconds: float = 0.0, *, prefix: bool = True) -> str:
    """Render the SUMMARY line for ``outcome``.

    With ``prefix=False`` the leading "SUMMARY " is left out, for callers
    whose log formatter prints the level label itself.

    Examples:
        >>> outcome = ImportOutcome(success=True, total_records=2,
        ...                         successful_records=1, failed_records=1)
        >>> render_summary_line(outcome, 1.5)
        'SUMMARY total=2 success=1 failed=1 result=partial elapsed_sec=1.5'
    """
    body = (
        f"total={outcome.total_records} "
        f"success={outcome.successful_records} "
        f"failed={outcome.failed_records} "
        f"result={outcome_label(outcome)} "
        f"elapsed_sec={_format_seconds(elapsed_seconds)}"
    )
    return f"SUMMARY {body}" if prefix else body


def render_result_message(outcome: ImportOutcome) -> str:
    """User facing one-liner shown after the server answered."""
    if outcome.success:
        return (
            f"Successfully imported {outcome.successful_records} invoices. "
            f"{outcome.failed_records} failed."
        )
    return "Import failed. Please check the data and try again."
