"""Key-value store for connection parameters and display preferences"""

import json
import logging
from pathlib import Path

from cm2git.config import (
    SETTINGS_PATH,
    SETTING_OWNER,
    SETTING_REPO,
    SETTING_THEME,
    SETTING_TOKEN,
    SETTING_VIEW,
    THEMES,
    VIEW_MODES,
)

logger = logging.getLogger(__name__)

ALLOWED_VALUES = {
    SETTING_THEME: THEMES,
    SETTING_VIEW: VIEW_MODES,
}

DEFAULTS = {
    SETTING_THEME: THEMES[0],
    SETTING_VIEW: VIEW_MODES[0],
}

KNOWN_KEYS = [SETTING_OWNER, SETTING_REPO, SETTING_TOKEN, SETTING_THEME, SETTING_VIEW]


class SettingsStore:
    """JSON file backed settings, read on every access"""

    def __init__(self, path: Path = SETTINGS_PATH):
        self.path = Path(path)

    def load(self) -> dict:
        """Load all stored settings; a missing or unreadable file is empty"""
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default=None):
        value = self.load().get(key)
        if value is None:
            return DEFAULTS.get(key, default)
        return value

    def set(self, key: str, value) -> None:
        self.update({key: value})

    def update(self, values: dict) -> dict:
        """
        Validate and store several settings at once

        Raises:
            ValueError: for unknown keys or values outside the allowed set
        """
        for key, value in values.items():
            if key not in KNOWN_KEYS:
                raise ValueError(f"Unknown setting: {key}")
            allowed = ALLOWED_VALUES.get(key)
            if allowed and value not in allowed:
                raise ValueError(f"Invalid value for {key}: {value}")

        data = self.load()
        data.update(values)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(data, f, indent=2)
        return data

    def connection(self) -> tuple:
        """Stored (owner, repo, token), each possibly empty"""
        data = self.load()
        return (
            data.get(SETTING_OWNER) or "",
            data.get(SETTING_REPO) or "",
            data.get(SETTING_TOKEN) or "",
        )

    def public(self) -> dict:
        """Settings safe to send to a client: the token is reduced to has_token"""
        data = self.load()
        result = {key: self.get(key) for key in KNOWN_KEYS if key != SETTING_TOKEN}
        result["has_token"] = bool(data.get(SETTING_TOKEN))
        return result
