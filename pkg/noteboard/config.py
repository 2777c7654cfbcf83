# Note board — configuration
# Override the store URL and timings via noteboard.yaml, NOTEBOARD_URL or CLI args.

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .schema import DEFAULT_DESCRIPTION, DEFAULT_TITLE

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("noteboard.yaml")
URL_ENV = "NOTEBOARD_URL"


class ConfigError(Exception):
    """Raised when a configured value is unusable."""
    pass


@dataclass
class BoardConfig:
    """Runtime configuration for the board engine."""

    # Note store
    base_url: str = "http://localhost:6969"
    timeout_secs: float = 5

    # Behavior — persistence
    debounce_secs: float = 1.0
    refresh_interval_secs: float = 15.0

    # Behavior — layout
    stack_breakpoint_px: int = 768

    # Placeholder text for empty fields
    default_title: str = DEFAULT_TITLE
    default_description: str = DEFAULT_DESCRIPTION

    def validate(self) -> "BoardConfig":
        """Coerce numeric fields in place. Raises ConfigError on unusable values."""
        if not self.base_url:
            raise ConfigError("base_url must not be empty")
        self.base_url = str(self.base_url)
        self._positive("timeout_secs", float)
        self._positive("debounce_secs", float)
        self._positive("refresh_interval_secs", float)
        self._positive("stack_breakpoint_px", int)
        return self

    def _positive(self, name: str, kind: type) -> None:
        value = getattr(self, name)
        if isinstance(value, bool):
            raise ConfigError(f"{name} must be a number, got: {value!r}")
        try:
            number = kind(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{name} must be a number, got: {value!r}") from None
        if not number > 0:
            raise ConfigError(f"{name} must be > 0, got: {value!r}")
        setattr(self, name, number)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "BoardConfig":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else CONFIG_PATH
        known = {f.name for f in fields(cls)}
        cfg = cls()
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if k in known})
            except (OSError, yaml.YAMLError, AttributeError, TypeError) as e:
                logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
                cfg = cls()

        env_url = os.environ.get(URL_ENV)
        if env_url:
            cfg.base_url = env_url
        return cfg.validate()
