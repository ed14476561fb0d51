from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the bulk invoice import client.

The loader in ``invoice_importer.config.loader`` builds these from
``config/import.yml`` after schema validation and environment overrides.
"""

__all__ = [
    "ApiConfig",
    "ImportOptions",
    "ImportConfig",
]

DEFAULT_BASE_URL = "http://localhost:5001/api"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ApiConfig:
    """Connection settings for the export backend.

    Environment variables (EXPORTPRO_API_URL / EXPORTPRO_API_TOKEN /
    EXPORTPRO_API_TIMEOUT) take precedence over the YAML values.
    """
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    token: str | None = None  # sent as Bearer token when set


@dataclass(frozen=True)
class ImportOptions:
    """Parsing behaviour for uploaded workbooks."""
    # strings pandas would otherwise turn into NaN ("NA" is Namibia)
    keep_na_strings: list[str] = field(default_factory=lambda: ["NA"])
    strict_header: bool = False  # check header names against the template


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object."""
    api: ApiConfig = field(default_factory=ApiConfig)
    options: ImportOptions = field(default_factory=ImportOptions)
    timezone: str = "UTC"  # used for the invoice date default
    error_log_dir: str = "logs"
