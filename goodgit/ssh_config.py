"""
SSH host-alias registry.

Each registered alias gets one stanza in the SSH client config:

    Host work.github.com
    HostName github.com
    IdentitiesOnly yes
    IdentityFile ~/.ssh/id_work

so that ``git@work.github.com:org/repo.git`` connects to github.com with
``~/.ssh/id_work``.

Matching is by exact substring, not by parsing the config. A stanza that
was re-indented or reordered by hand is not recognized and a second copy
would be appended.
"""

from __future__ import annotations

from pathlib import Path

from .config import DEFAULT_CANONICAL_HOST, KEY_PREFIX
from .utils import append_text, read_text, write_text


def host_alias(alias: str, canonical_host: str = DEFAULT_CANONICAL_HOST) -> str:
    """Return the alias-qualified host, e.g. ``work.github.com``."""
    return f"{alias}.{canonical_host}"


class HostAliasRegistry:
    def __init__(self, config_path: str | Path, canonical_host: str = DEFAULT_CANONICAL_HOST):
        self.config_path = Path(config_path)
        self.canonical_host = canonical_host

    # ------------------------------------------------------------------
    # Block text
    # ------------------------------------------------------------------

    def block_for(self, alias: str) -> str:
        """Return the stanza for ``alias`` without surrounding newlines."""
        return (
            f"Host {host_alias(alias, self.canonical_host)}\n"
            f"HostName {self.canonical_host}\n"
            f"IdentitiesOnly yes\n"
            f"IdentityFile ~/.ssh/{KEY_PREFIX}{alias}"
        )

    def appended_block_for(self, alias: str) -> str:
        """Return the stanza exactly as ``add_host_alias`` appends it."""
        return f"\n{self.block_for(alias)}\n"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read(self) -> str:
        return read_text(self.config_path, missing_ok=True)

    def has_host_alias(self, alias: str) -> bool:
        return self.block_for(alias) in self.read()

    def add_host_alias(self, alias: str) -> bool:
        """
        Append the stanza for ``alias`` unless it is already present.

        Returns:
            bool: True if the config file was changed
        """

        block = self.appended_block_for(alias)
        if block in self.read():
            return False

        append_text(self.config_path, block)
        return True

    def remove_host_alias(self, alias: str) -> bool:
        """
        Remove the stanza for ``alias`` if present.

        The newline-wrapped form written by ``add_host_alias`` is removed
        when it starts the file, follows a blank line or ends the file, so
        that add followed by remove restores the file byte for byte.
        Anywhere else (e.g. a stanza typed between two others with no blank
        line) only the bare stanza is removed, so the newline ending the
        previous line survives.

        Returns:
            bool: True if the config file was changed
        """

        if not self.config_path.exists():
            return False

        text = self.read()

        wrapped = self.appended_block_for(alias)
        start = text.find(wrapped)
        if start != -1:
            end = start + len(wrapped)
            if start == 0 or text[start - 1] == "\n" or end == len(text):
                write_text(self.config_path, text[:start] + text[end:])
                return True

        block = self.block_for(alias)
        if block in text:
            write_text(self.config_path, text.replace(block, "", 1))
            return True

        return False
