"""Per-document settings that survive restarts.

Currently this is where the cursor was when a document was last saved,
so reopening a file puts the cursor back. Settings live in one JSON file
in the user's config directory, keyed by absolute document path.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import platformdirs

from .model import Position

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"


class SettingsPersistence:
    """Loads and stores settings per document path."""

    def __init__(self, config_dir: Optional[str] = None):
        self._config_dir = Path(config_dir or platformdirs.user_config_dir("note"))
        self._settings_file = self._config_dir / SETTINGS_FILENAME
        self._cache: Optional[dict[str, dict[str, Any]]] = None

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _load_all(self) -> dict[str, dict[str, Any]]:
        if self._cache is not None:
            return self._cache
        self._cache = {}
        if not self._settings_file.exists():
            return self._cache
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return self._cache
        if isinstance(data, dict):
            self._cache = data
        else:
            logger.warning("Settings file has invalid format (not a dict), ignoring")
        return self._cache

    def _save_all(self, settings: dict[str, dict[str, Any]]) -> bool:
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                logger.debug(f"Could not remove {temp_file}")
            return False
        self._cache = settings
        return True

    def load_settings(self, document_path: Optional[str]) -> dict[str, Any]:
        """Settings for one document; empty if none are stored."""
        if document_path is None:
            return {}
        doc_settings = self._load_all().get(os.path.abspath(document_path), {})
        if not isinstance(doc_settings, dict):
            logger.warning(f"Settings for {document_path} are not a dict, ignoring")
            return {}
        return dict(doc_settings)

    def save_settings(self, document_path: Optional[str], settings: dict[str, Any]) -> bool:
        if document_path is None:
            return False
        all_settings = dict(self._load_all())
        all_settings[os.path.abspath(document_path)] = settings
        return self._save_all(all_settings)

    def load_cursor(self, document_path: Optional[str]) -> Optional[Position]:
        """Cursor position stored for a document, if it is well formed."""
        settings = self.load_settings(document_path)
        line = settings.get("cursor_line")
        column = settings.get("cursor_column")
        if not (validate_setting("cursor_line", line) and validate_setting("cursor_column", column)):
            return None
        if line is None or column is None:
            return None
        return Position(line, column)

    def save_cursor(self, document_path: Optional[str], position: Position) -> bool:
        settings = self.load_settings(document_path)
        settings["cursor_line"] = position.line
        settings["cursor_column"] = position.column
        return self.save_settings(document_path, settings)

    def clear_cache(self) -> None:
        self._cache = None


def validate_setting(key: str, value: Any) -> bool:
    """Whether a stored value is acceptable for its key.

    None means "not set" and is always valid; unknown keys are accepted
    so newer settings files can be read.
    """
    if value is None:
        return True
    if key in ("cursor_line", "cursor_column"):
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    return True
