from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from ..models.candidate_invoice import CandidateInvoice
from ..models.config_models import ApiConfig
from ..models.import_outcome import ImportOutcome, ResponseContractError
from ..models.invoice import Invoice

"""HTTP client for the export backend.

Every endpoint has its own, explicit response contract:

    POST /invoices/import           -> {success, totalRecords, successfulRecords,
                                        failedRecords, errors?}
    GET  /invoices/import/template  -> workbook bytes
    GET  /invoices                  -> {status, data: [...], pagination?}

Transport failures and non-2xx answers raise NetworkError. A 2xx answer whose
body breaks the contract raises ResponseContractError. Nothing is retried.
"""

__all__ = [
    "ExportProClient",
    "NetworkError",
    "RequestMetrics",
    "ResponseContractError",
]

logger = logging.getLogger(__name__)

IMPORT_PATH = "/invoices/import"
TEMPLATE_PATH = "/invoices/import/template"
INVOICES_PATH = "/invoices"


class NetworkError(Exception):
    """Request could not be completed or the server answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class RequestMetrics:
    """Timing data for a single HTTP request."""
    method: str
    path: str
    status_code: int | None  # None when no response arrived
    elapsed_seconds: float


class ExportProClient:
    """Thin typed wrapper around a ``requests.Session``."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        token: str | None = None,
        session: requests.Session | None = None,
        metrics_callback: Callable[[RequestMetrics], None] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        self.metrics_callback = metrics_callback

    @classmethod
    def from_config(cls, cfg: ApiConfig, **kwargs: Any) -> ExportProClient:
        return cls(cfg.base_url, timeout=cfg.timeout_seconds, token=cfg.token, **kwargs)

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        status_code: int | None = None
        start_time = time.time()
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            status_code = response.status_code
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e
        finally:
            if self.metrics_callback is not None:
                self.metrics_callback(
                    RequestMetrics(
                        method=method,
                        path=path,
                        status_code=status_code,
                        elapsed_seconds=time.time() - start_time,
                    )
                )
        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ResponseContractError(f"{path} returned a body that is not JSON") from e

    def import_invoices(self, candidates: Sequence[CandidateInvoice]) -> ImportOutcome:
        """Send the whole batch in one request and return the server's outcome."""
        payload = {"invoices": [c.to_payload() for c in candidates]}
        response = self._request("POST", IMPORT_PATH, json=payload)
        return ImportOutcome.from_response(self._json(response, IMPORT_PATH))

    def download_template(self, dest: Path) -> Path:
        """Save the server-generated import template to ``dest``."""
        response = self._request("GET", TEMPLATE_PATH)
        if not response.content:
            raise ResponseContractError(f"{TEMPLATE_PATH} returned an empty body")
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response.content)
        return dest

    def list_invoices(self) -> list[Invoice]:
        """Fetch the canonical invoice list."""
        response = self._request("GET", INVOICES_PATH)
        body = self._json(response, INVOICES_PATH)
        if not isinstance(body, dict) or not isinstance(body.get("data"), list):
            raise ResponseContractError(f"{INVOICES_PATH} response must be an object with a 'data' list")
        return [Invoice.from_api(raw) for raw in body["data"]]
