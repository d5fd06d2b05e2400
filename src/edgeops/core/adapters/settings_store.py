from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from edgeops.core.errors import LocalSettingsUnreadable
from edgeops.core.models import DatabaseSettings

logger = logging.getLogger(__name__)


class JsonSettingsStore:
    """Local settings file holding the token, name cache and credentials.

    The file is loaded once and rewritten after every mutation. There is no
    locking: two concurrent invocations may overwrite each other's writes.
    """

    _TOKEN_KEY = "token"
    _NAMES_CACHE_KEY = "cached_db_names"
    _DATABASES_KEY = "databases"

    def __init__(self, path: Path):
        """Load settings from ``path``; a missing file means empty settings."""
        self.path = path
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise LocalSettingsUnreadable(
                f"could not read local settings at {self.path}: {exc}",
                hint="Fix or remove the file; it is recreated on the next write.",
            ) from exc
        if not isinstance(payload, dict):
            raise LocalSettingsUnreadable(
                f"local settings at {self.path} must hold a JSON object"
            )
        return payload

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data, indent=2, sort_keys=True))
        except OSError as exc:
            raise LocalSettingsUnreadable(
                f"could not write local settings at {self.path}: {exc}",
                hint=f"Check that {self.path.parent} is a writable directory "
                "or point EDGEOPS_CONFIG_DIR elsewhere.",
            ) from exc
        logger.debug("wrote settings to %s", self.path)

    # token

    def get_token(self) -> str | None:
        token = self._data.get(self._TOKEN_KEY)
        return token if isinstance(token, str) and token else None

    def set_token(self, token: str) -> None:
        self._data[self._TOKEN_KEY] = token
        self._save()

    def clear_token(self) -> None:
        if self._data.pop(self._TOKEN_KEY, None) is not None:
            self._save()

    # database credentials

    def get_database_settings(self, database_id: str) -> DatabaseSettings | None:
        raw = (self._data.get(self._DATABASES_KEY) or {}).get(database_id)
        if not isinstance(raw, dict):
            return None
        return DatabaseSettings.from_dict(raw)

    def add_database(self, database_id: str, settings: DatabaseSettings) -> None:
        databases = self._data.setdefault(self._DATABASES_KEY, {})
        databases[database_id] = settings.to_dict()
        self._save()

    # name cache

    def get_db_names_cache(self) -> list[str] | None:
        names = self._data.get(self._NAMES_CACHE_KEY)
        if not isinstance(names, list):
            return None
        return [str(n) for n in names]

    def set_db_names_cache(self, names: list[str]) -> None:
        self._data[self._NAMES_CACHE_KEY] = list(names)
        self._save()

    def invalidate_db_names_cache(self) -> None:
        if self._NAMES_CACHE_KEY not in self._data:
            return
        del self._data[self._NAMES_CACHE_KEY]
        self._save()
