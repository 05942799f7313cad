"""Per-project view settings storage."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from ..core.model import EditorViewSettings
from .parser import view_settings_from_dict, view_settings_to_dict

LOGGER = logging.getLogger(__name__)


class SettingsStore(Protocol):
    def get(self, project_id: str) -> Optional[EditorViewSettings]:
        ...

    def set(self, project_id: str, settings: EditorViewSettings) -> None:
        ...


class JsonSettingsStore:
    """View settings for every project in one JSON file, keyed by project id."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            LOGGER.warning("Could not read settings %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, project_id: str) -> Optional[EditorViewSettings]:
        entry = self._read().get(project_id)
        if entry is None:
            return None
        try:
            return view_settings_from_dict(entry)
        except ValueError as e:
            LOGGER.warning("Ignoring malformed settings for %s: %s", project_id, e)
            return None

    def set(self, project_id: str, settings: EditorViewSettings) -> None:
        data = self._read()
        data[project_id] = view_settings_to_dict(settings)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            LOGGER.warning("Could not write settings %s: %s", self.path, e)
