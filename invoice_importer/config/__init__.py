"""Configuration loading for the invoice import client."""

from .loader import ConfigError, load_config

__all__ = ["ConfigError", "load_config"]
