# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pandas as pd
import pytest
import requests

from invoice_importer.excel.template import TEMPLATE_COLUMNS
from invoice_importer.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    for var in ("EXPORTPRO_API_URL", "EXPORTPRO_API_TOKEN", "EXPORTPRO_API_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def sample_config_yaml() -> str:
    return """api:
  base_url: http://exportpro.test/api
  timeout_seconds: 5
import:
  keep_na_strings: [NA]
  strict_header: false
timezone: Asia/Kolkata
error_log_dir: logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def write_workbook(path: Path, rows: list[list[Any]], sheet_name: str = "Invoices") -> Path:
    """Write ``rows`` verbatim (no pandas header/index) to the first sheet."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


@pytest.fixture()
def make_workbook(temp_workdir: Path) -> Callable[..., Path]:
    """Build an invoice workbook in data/: template header + the given data rows."""
    def _make(name: str, data_rows: list[list[Any]], header: list[str] | None = None) -> Path:
        rows = [list(header if header is not None else TEMPLATE_COLUMNS)] + [list(r) for r in data_rows]
        return write_workbook(temp_workdir / "data" / name, rows)
    return _make


def _make_response(status_code: int = 200, json_body: Any = None, content: bytes = b"") -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.content = content
    if json_body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_body
    return response


@pytest.fixture()
def http_session() -> MagicMock:
    """A requests.Session stand-in; set ``request.return_value`` / ``side_effect``."""
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


def _outcome_body(success: bool = True, ok: int = 1, failed: int = 0, errors: list[dict] | None = None) -> dict:
    body: dict[str, Any] = {
        "success": success,
        "totalRecords": ok + failed,
        "successfulRecords": ok,
        "failedRecords": failed,
    }
    if errors is not None:
        body["errors"] = errors
    return body


@pytest.fixture()
def make_response() -> Callable[..., MagicMock]:
    return _make_response


@pytest.fixture()
def outcome_body() -> Callable[..., dict]:
    return _outcome_body
