"""
Global configuration and environment handling.

This module is responsible for:
- Defining global constants and defaults
- Reading path and host overrides from the environment
- Providing normalized, ready-to-use configuration values

Nothing in this file should depend on:
- the identity store contents
- the SSH config contents
- CLI arguments

If something here changes, the *entire tool* behavior changes.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final, Optional

# ---------------------------------------------------------------------------
# Tool / format versioning
# ---------------------------------------------------------------------------

SUPPORTED_SETTINGS_VERSION: Final[int] = 1
TOOL_VERSION: Final[str] = "1.0.0"

# ---------------------------------------------------------------------------
# Default behavior
# ---------------------------------------------------------------------------

DEFAULT_CANONICAL_HOST: Final[str] = "github.com"
DEFAULT_REMOTE: Final[str] = "origin"
DEFAULT_STORE_NAME: Final[str] = ".goodgit.json"
DEFAULT_SSH_DIR_NAME: Final[str] = ".ssh"
DEFAULT_SETTINGS_PATH: Final[str] = "~/.config/goodgit/config.yml"

# Private keys are named id_<alias>; public halves carry the .pub suffix
KEY_PREFIX: Final[str] = "id_"
PUBLIC_KEY_SUFFIX: Final[str] = ".pub"
SSH_CONFIG_NAME: Final[str] = "config"

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_STORE: Final[str] = "GOODGIT_STORE"
ENV_SSH_DIR: Final[str] = "GOODGIT_SSH_DIR"
ENV_HOST: Final[str] = "GOODGIT_HOST"
ENV_SETTINGS: Final[str] = "GOODGIT_CONFIG"

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def expand_path(raw: str | Path) -> Path:
    """Expand ``~`` and environment variables in a user-supplied path."""
    return Path(os.path.expandvars(os.path.expanduser(str(raw))))


def default_store_path() -> Path:
    return Path.home() / DEFAULT_STORE_NAME


def default_ssh_dir() -> Path:
    return Path.home() / DEFAULT_SSH_DIR_NAME


def env_override(name: str) -> Optional[str]:
    """
    Return a non-empty environment value or None.

    Empty strings are treated as unset so that ``GOODGIT_HOST=`` in a
    shell profile does not produce an empty canonical host.
    """

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def settings_path_from_env() -> Path:
    """
    Return the settings file location.

    Returns:
        Path: ``$GOODGIT_CONFIG`` if set, otherwise the default location
    """

    return expand_path(env_override(ENV_SETTINGS) or DEFAULT_SETTINGS_PATH)
