from __future__ import annotations

from enum import Enum

"""ImportState enum for the preview/submit session.

State transitions:

    IDLE -> FILE_PICKED -> PARSED -> SUBMITTING -> (SUCCEEDED | FAILED)

- FILE_PICKED -> IDLE when parsing fails
- SUCCEEDED -> IDLE once the invoice list has been refreshed
- FAILED -> PARSED so the retained preview can be confirmed again
- FILE_PICKED / PARSED -> IDLE on cancel
"""

__all__ = [
    "ImportState",
]


class ImportState(Enum):
    IDLE = "idle"
    FILE_PICKED = "file_picked"
    PARSED = "parsed"  # preview open
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
