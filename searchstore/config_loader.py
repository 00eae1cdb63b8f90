"""Settings loader — parse and validate the store's YAML settings file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from contracts.config import StoreSettings

ENV_ENDPOINT = "AZURE_SEARCH_ENDPOINT"
ENV_API_KEY = "AZURE_SEARCH_API_KEY"


def load_settings(path: str) -> StoreSettings:
    """Load a settings file and return validated StoreSettings.

    ``search.endpoint`` and ``search.api_key`` fall back to the
    AZURE_SEARCH_ENDPOINT / AZURE_SEARCH_API_KEY environment variables
    when the file leaves them out.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    raw = p.read_text(encoding="utf-8")
    data = yaml.safe_load(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Settings must be a YAML mapping, got {type(data).__name__}")

    search: dict[str, Any] = dict(data.get("search") or {})
    for key, env_var in (("endpoint", ENV_ENDPOINT), ("api_key", ENV_API_KEY)):
        if not search.get(key):
            value = os.environ.get(env_var)
            if not value:
                raise ValueError(f"search.{key} is not set and ${env_var} is empty")
            search[key] = value
    data["search"] = search

    return StoreSettings(**data)
