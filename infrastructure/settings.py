"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

# Built-in values; settings.json only needs to carry what it overrides
DEFAULTS: dict[str, Any] = {
    "calendar": {"default_name": "My Calendar", "default_month": 12},
    "reveal": {"delay_ms": 700},
    "background": {"max_side": 4096},
    "logging": {"level": "INFO", "dir": ""},
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class JsonSettings:
    """JSON settings layered over `DEFAULTS`, with dotted-key access."""

    def __init__(self, settings_path: str | Path | None, defaults: dict[str, Any] | None = None) -> None:
        """Load `settings_path` over `defaults`.

        Raises:
            FileNotFoundError: If a path is given and does not exist.
            ValueError: If the file is not valid JSON or not an object.
        """
        self._path = Path(settings_path) if settings_path is not None else None
        base = DEFAULTS if defaults is None else defaults
        loaded: dict[str, Any] = {}
        if self._path is not None:
            if not self._path.exists():
                raise FileNotFoundError(f"settings.json not found: {self._path}")
            with self._path.open("r", encoding="utf-8") as f:
                loaded = json.load(f)
            if not isinstance(loaded, dict):
                raise ValueError(f"settings root must be an object: {self._path}")
        self._data = _merge(base, loaded)

    @classmethod
    def defaults_only(cls) -> JsonSettings:
        """Settings with no file behind them."""
        return cls(None)

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_int(self, key: str, default: int) -> int:
        """Return `key` as int; `default` when missing or not numeric."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return default
        try:
            return int(value)
        except (ValueError, TypeError):
            return default

    def get_str(self, key: str, default: str) -> str:
        """Return `key` as a non-empty string, else `default`."""
        value = self.get(key, default)
        return value if isinstance(value, str) and value else default
