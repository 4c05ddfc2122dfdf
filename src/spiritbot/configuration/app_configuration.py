"""
Application settings read from ``config/app_config.yml``.

The file is parsed with PyYAML under a shared ``fcntl`` lock so an editor
saving it at the same moment never hands us half a document. Missing or
malformed values fall back to defaults; ids that are not integers are
treated as unset.
"""

from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from spiritbot.util.logger import get_logger

logger = get_logger("app_configuration")

CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULTS: Dict[str, Any] = {
    "prefix": "!",
    "greeting_pattern": "hi spirit",
    "allowed_sites_file": "./config/allowed_sites.txt",
    "database_path": "./data/spiritbot.db",
}


def _as_snowflake(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric id %r in %s", value, CONFIG_PATH.name)
        return None


def read_yaml_mapping(path: Path) -> Dict[str, Any]:
    """Parse ``path`` as a YAML mapping; anything else yields ``{}``."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_SH)
            try:
                loaded = yaml.safe_load(handle)
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
    except FileNotFoundError:
        logger.error("No configuration at %s; using defaults", path)
        return {}
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Could not read configuration %s: %s", path, exc)
        return {}

    if not isinstance(loaded, dict):
        logger.error("Configuration %s must be a mapping at the top level", path)
        return {}
    return loaded


class AppConfig:
    """Cached view over the YAML settings with typed accessors for ids and paths."""

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    def reload(self) -> Dict[str, Any]:
        """Re-read the file; returns the loaded mapping, ``{}`` when it could not be read."""
        self._data = read_yaml_mapping(self.config_path)
        return self._data

    def _setting(self, key: str) -> Any:
        return self._data.get(key) or DEFAULTS[key]

    def _lookup_id(self, section: str, name: str) -> Optional[int]:
        entries = self._data.get(section)
        if not isinstance(entries, dict):
            return None
        return _as_snowflake(entries.get(name))

    def channel_id(self, name: str) -> Optional[int]:
        """Id under ``channels:`` (art, notes, autos, commands, errors, tickets)."""
        return self._lookup_id("channels", name)

    def role_id(self, name: str) -> Optional[int]:
        """Id under ``roles:`` (moderator, any_moderator)."""
        return self._lookup_id("roles", name)

    @property
    def prefix(self) -> str:
        return str(self._setting("prefix"))

    @property
    def greeting_pattern(self) -> str:
        """Case-insensitive regex answered in the commands channel."""
        return str(self._setting("greeting_pattern"))

    @property
    def owner_id(self) -> Optional[int]:
        """Pinged on critical exception reports."""
        return _as_snowflake(self._data.get("owner_id"))

    art_channel_id = property(lambda self: self.channel_id("art"))
    commands_channel_id = property(lambda self: self.channel_id("commands"))
    moderator_role_id = property(lambda self: self.role_id("moderator"))
    any_moderator_role_id = property(lambda self: self.role_id("any_moderator"))

    @property
    def allowed_sites_file(self) -> Path:
        return Path(self._setting("allowed_sites_file")).resolve()

    @property
    def database_path(self) -> Path:
        return Path(self._setting("database_path")).resolve()


app_config = AppConfig(CONFIG_PATH)
