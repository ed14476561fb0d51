"""HTTP access to the export backend."""

from .client import ExportProClient, NetworkError, RequestMetrics, ResponseContractError

__all__ = ["ExportProClient", "NetworkError", "RequestMetrics", "ResponseContractError"]
