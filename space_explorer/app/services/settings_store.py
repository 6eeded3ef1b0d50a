from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from space_explorer.core.settings import AppSettings, default_settings, merge_settings

logger = logging.getLogger(__name__)


class SettingsStore:
    """JSON settings file normalised through :class:`AppSettings` on every load.

    Unknown keys are dropped, missing keys filled with defaults, and the
    normalised document is written back so the file on disk stays current.
    """

    def __init__(self, settings_path: Path) -> None:
        self.settings_path = settings_path

    def _read_payload(self) -> dict[str, Any]:
        try:
            payload = json.loads(self.settings_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable settings file %s.", self.settings_path)
            return {}
        return payload if isinstance(payload, dict) else {}

    def load(self) -> dict[str, Any]:
        if not self.settings_path.exists():
            settings = default_settings()
        else:
            try:
                settings = merge_settings(self._read_payload())
            except ValidationError as exc:
                logger.warning("Resetting invalid settings in %s: %s", self.settings_path, exc)
                settings = default_settings()
        self.save(settings)
        return settings

    def load_model(self) -> AppSettings:
        return AppSettings.model_validate(self.load())

    def save(self, settings: dict[str, Any]) -> None:
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        self.settings_path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
