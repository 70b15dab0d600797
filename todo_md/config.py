from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .paths import expand_home

logger = logging.getLogger(__name__)

TODO_FILE_ENV = "TODO_MD_FILE"
DEFAULT_TODO_FILE = "~/.openclaw/workspace/TODO.md"
DEFAULT_BRAIN_STORE_PATH = "~/.openclaw/workspace/memory/brain-memory.jsonl"


class TodoSettings(BaseModel):
    """Options for the TODO commands. Accepts camelCase or snake_case keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled: bool = True
    todo_file: str = Field(DEFAULT_TODO_FILE, alias="todoFile")
    brain_log: bool = Field(True, alias="brainLog")
    brain_store_path: str = Field(DEFAULT_BRAIN_STORE_PATH, alias="brainStorePath")
    max_list_items: int = Field(30, ge=1, alias="maxListItems")
    section_header: Optional[str] = Field(None, alias="sectionHeader")

    @property
    def todo_path(self) -> Path:
        return Path(expand_home(self.todo_file))

    @property
    def brain_store(self) -> Path:
        return Path(expand_home(self.brain_store_path))


class ConfigManager:
    """Persistent JSON configuration in the XDG config directory."""

    def __init__(self, app_name: str = "todo-md"):
        self.app_name = app_name
        self._config_dir = self._get_config_dir()
        self._config_file = self._config_dir / "config.json"
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _get_config_dir(self) -> Path:
        """Get XDG-compliant config directory."""
        if os.name == "nt":
            base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        else:
            xdg_config = os.environ.get("XDG_CONFIG_HOME")
            base = Path(xdg_config) if xdg_config else Path.home() / ".config"

        config_dir = base / self.app_name
        config_dir.mkdir(parents=True, exist_ok=True)
        return config_dir

    def _load_config(self) -> None:
        """Load configuration from file; anything but a JSON object is ignored."""
        try:
            if self._config_file.exists():
                with open(self._config_file, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    self._config = loaded
                    logger.debug(f"Loaded config from {self._config_file}")
                else:
                    logger.warning(
                        f"Ignoring config in {self._config_file}: expected a JSON object, "
                        f"got {type(loaded).__name__}"
                    )
                    self._config = {}
            else:
                self._config = {}
                logger.debug("No config file found, using defaults")
        except Exception as e:
            logger.warning(f"Failed to load config from {self._config_file}: {e}")
            self._config = {}

    def _save_config(self) -> None:
        """Save configuration to file."""
        try:
            with open(self._config_file, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)
            logger.debug(f"Saved config to {self._config_file}")
        except Exception as e:
            logger.error(f"Failed to save config to {self._config_file}: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value and save."""
        self._config[key] = value
        self._save_config()

    def update(self, updates: Dict[str, Any]) -> None:
        """Update multiple configuration values and save."""
        self._config.update(updates)
        self._save_config()

    def get_all(self) -> Dict[str, Any]:
        """Get all stored configuration values, as written in the file."""
        return self._config.copy()

    def todo_settings(self, **overrides: Any) -> TodoSettings:
        """Build settings from the config file, the environment and ``overrides``.

        ``overrides`` use snake_case names; ``None`` values are ignored.
        """
        forced: Dict[str, Any] = {}
        env_file = os.environ.get(TODO_FILE_ENV)
        if env_file:
            forced["todo_file"] = env_file
        forced.update({k: v for k, v in overrides.items() if v is not None})

        data: Dict[str, Any] = dict(self._config)
        for key, value in forced.items():
            field = TodoSettings.model_fields.get(key)
            # aliases win over field names during validation
            if field is not None and field.alias:
                data.pop(field.alias, None)
            data[key] = value
        try:
            return TodoSettings.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Invalid TODO settings in {self._config_file}: {e}")
            return TodoSettings.model_validate(forced)

    @property
    def config_file_path(self) -> Path:
        """Get the config file path."""
        return self._config_file
