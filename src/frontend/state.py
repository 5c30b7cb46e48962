"""State container for the config panel: loaded JSON, dirty flag, last save."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class ConfigState:
    data: dict[str, Any] | None = None
    dirty: bool = False
    error: str | None = None
    saved_at: datetime | None = None

    def section(self, key: str) -> dict[str, Any]:
        """Return a config section, or an empty dict when absent or malformed."""
        section = (self.data or {}).get(key)
        if isinstance(section, dict):
            return section
        return {}
