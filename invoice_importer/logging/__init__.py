"""Logging setup and the JSON Lines import error log."""
