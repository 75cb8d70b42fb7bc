"""Configuration manager for the VisionaryAI estimator.

Dot-notation access into a YAML settings file, with secrets resolved from
the environment in this priority chain:
  1. Global ~/.visionary/.env  (lowest priority)
  2. Local backend/.env        (overrides global)
  3. Environment variables     (highest priority)
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_SETTINGS_PATH = Path(__file__).parent.parent.parent / "config" / "settings.yaml"

_config_instance: Optional["Config"] = None


class Config:
    """YAML configuration with dot-notation access and env lookup."""

    def __init__(self, config_path: str):
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(path, encoding="utf-8") as f:
            self._data: dict = yaml.safe_load(f)
        if not isinstance(self._data, dict):
            raise ValueError(f"Config file must be a YAML mapping, got: {type(self._data)}")
        self._path = path
        self._load_env()

    # ── private ──────────────────────────────────────────────────────────────

    def _load_env(self) -> None:
        """Load .env files in priority order (global → local).

        Neither file overrides a variable already present in the process
        environment.
        """
        global_env = Path.home() / ".visionary" / ".env"
        local_env = Path(__file__).parent.parent.parent / ".env"
        if global_env.exists():
            load_dotenv(global_env, override=False)
        if local_env.exists():
            load_dotenv(local_env, override=False)

    # ── public ───────────────────────────────────────────────────────────────

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Dot-notation access into the YAML tree.

        Example::

            config.get("gemini.model")              # "gemini-3-flash-preview"
            config.get("estimate.currency")         # "KRW"
            config.get("missing.key", "fallback")   # "fallback"
        """
        keys = key.split(".")
        val: Any = self._data
        for k in keys:
            if isinstance(val, dict) and k in val:
                val = val[k]
            else:
                return default
        return val

    def get_path(self, key: str) -> Path:
        """Return a config value as a Path object.

        Raises KeyError if the key does not exist.
        """
        val = self.get(key)
        if val is None:
            raise KeyError(f"Config key not found: {key}")
        return Path(str(val))

    def get_env(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return an environment variable value."""
        return os.environ.get(name, default)


# ── module-level singleton ────────────────────────────────────────────────────


def get_config(config_path: Optional[str] = None) -> Config:
    """Return the singleton Config instance.

    The first call loads ``config_path``, or the bundled
    ``backend/config/settings.yaml`` when no path is given.  Later calls
    return the existing instance and ignore ``config_path``.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_path or str(DEFAULT_SETTINGS_PATH))
    return _config_instance


def reset_config() -> None:
    """Clear the singleton (mainly for testing)."""
    global _config_instance
    _config_instance = None
