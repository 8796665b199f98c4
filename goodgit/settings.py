"""
Settings loading, validation, and normalization.

This module answers one question:
    "Where does the user keep things, and which host do aliases route to?"

Responsibilities:
- Load the optional settings YAML file
- Validate structure and version
- Layer environment overrides on top
- Expose a clean Python representation

This module does NOT:
- Read the identity store
- Touch the SSH config
- Run git
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .config import (
    SUPPORTED_SETTINGS_VERSION,
    DEFAULT_CANONICAL_HOST,
    DEFAULT_REMOTE,
    SSH_CONFIG_NAME,
    ENV_STORE,
    ENV_SSH_DIR,
    ENV_HOST,
    default_store_path,
    default_ssh_dir,
    env_override,
    expand_path,
)
from .errors import SettingsError


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    store_path: Path
    ssh_dir: Path
    canonical_host: str = DEFAULT_CANONICAL_HOST
    remote: str = DEFAULT_REMOTE
    strict_keys: bool = False

    @property
    def ssh_config_path(self) -> Path:
        return self.ssh_dir / SSH_CONFIG_NAME

    # ------------------------------------------------------------------
    # Loading API
    # ------------------------------------------------------------------

    @classmethod
    def defaults(cls) -> "Settings":
        return cls(store_path=default_store_path(), ssh_dir=default_ssh_dir())

    @classmethod
    def load(cls, path: Optional[str | Path] = None) -> "Settings":
        """
        Load settings from a YAML file and the environment.

        A missing file is not an error: the built-in defaults apply.

        Args:
            path: Path to the settings YAML file, or None for defaults only

        Raises:
            SettingsError: if the file is malformed

        Returns:
            Settings
        """

        settings = cls.defaults()

        if path is not None:
            path = Path(path)
            if path.exists():
                try:
                    with path.open("r", encoding="utf-8") as fh:
                        raw = yaml.safe_load(fh) or {}
                except yaml.YAMLError as e:
                    raise SettingsError(f"Settings file {path} is not valid YAML: {e}")
                settings = cls._from_dict(raw, base=settings, source=path)

        return settings.with_env()

    def with_env(self) -> "Settings":
        """Return a copy with ``GOODGIT_*`` environment overrides applied."""
        changes: Dict[str, Any] = {}

        store = env_override(ENV_STORE)
        if store:
            changes["store_path"] = expand_path(store)

        ssh_dir = env_override(ENV_SSH_DIR)
        if ssh_dir:
            changes["ssh_dir"] = expand_path(ssh_dir)

        host = env_override(ENV_HOST)
        if host:
            changes["canonical_host"] = host

        return replace(self, **changes) if changes else self

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @classmethod
    def _from_dict(cls, data: Any, base: "Settings", source: Path) -> "Settings":
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {source} must contain a mapping")

        version = data.get("version", SUPPORTED_SETTINGS_VERSION)
        if version != SUPPORTED_SETTINGS_VERSION:
            raise SettingsError(f"Unsupported settings version: {version}")

        changes: Dict[str, Any] = {}

        for key in ("store_path", "ssh_dir"):
            if key in data:
                changes[key] = expand_path(cls._require_str(data, key, source))

        for key in ("canonical_host", "remote"):
            if key in data:
                changes[key] = cls._require_str(data, key, source)

        if "strict_keys" in data:
            strict = data["strict_keys"]
            if not isinstance(strict, bool):
                raise SettingsError(f"'strict_keys' in {source} must be true or false")
            changes["strict_keys"] = strict

        return replace(base, **changes)

    @staticmethod
    def _require_str(data: Dict[str, Any], key: str, source: Path) -> str:
        value = data[key]
        if not isinstance(value, str) or not value.strip():
            raise SettingsError(f"'{key}' in {source} must be a non-empty string")
        return value.strip()
