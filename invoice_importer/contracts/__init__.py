"""JSON schemas shipped with the package (config file, request body, error log)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

CONTRACTS_DIR = Path(__file__).parent


def load_schema(name: str) -> dict[str, Any]:
    """Load ``<name>.json`` from the contracts directory."""
    return json.loads((CONTRACTS_DIR / f"{name}.json").read_text(encoding="utf-8"))
