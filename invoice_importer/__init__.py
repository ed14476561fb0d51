"""Bulk invoice import client for the BLS ExportPro export backend."""

__version__ = "1.0.0"
