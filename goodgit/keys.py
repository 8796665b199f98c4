"""
SSH key discovery.

This module is responsible for:
- listing the SSH key directory
- recognizing private keys named ``id_<alias>``
- yielding the aliases those keys provide

This module does NOT:
- read or validate key material
- generate keys
- touch the SSH config file
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

from .config import KEY_PREFIX, PUBLIC_KEY_SUFFIX
from .errors import Advisory, DirectoryNotFoundError, NoKeysAvailableError


@dataclass(frozen=True)
class KeyScan:
    aliases: List[str] = field(default_factory=list)
    advisory: Optional[Advisory] = None

    def __contains__(self, alias: object) -> bool:
        return alias in self.aliases


def alias_from_filename(name: str) -> Optional[str]:
    """
    Return the alias a key filename provides, or None.

    ``id_work`` -> ``work``; ``id_work.pub`` and ``known_hosts`` -> None.
    """

    if not name.startswith(KEY_PREFIX) or name.endswith(PUBLIC_KEY_SUFFIX):
        return None
    alias = name[len(KEY_PREFIX):]
    return alias or None


class KeyDiscovery:
    def __init__(self, ssh_dir: str | Path):
        self.ssh_dir = Path(ssh_dir)

    def iter_aliases(self) -> Iterator[str]:
        """
        Walk the SSH directory and yield one alias per private key.

        Order follows the directory listing and is not sorted.

        Raises:
            DirectoryNotFoundError: if the SSH directory does not exist
        """

        if not self.ssh_dir.is_dir():
            raise DirectoryNotFoundError(f"SSH directory not found: {self.ssh_dir}")

        seen = set()
        for path in self.ssh_dir.iterdir():
            if not path.is_file():
                continue

            alias = alias_from_filename(path.name)
            if alias is None or alias in seen:
                continue

            seen.add(alias)
            yield alias

    def list_available_aliases(self) -> List[str]:
        return list(self.iter_aliases())

    def scan(self, strict: bool = False) -> KeyScan:
        """
        List aliases and flag an empty result.

        An empty directory is advisory by default; with ``strict`` the
        advisory is marked fatal and callers must raise it.
        """

        aliases = self.list_available_aliases()
        if aliases:
            return KeyScan(aliases=aliases)

        error = NoKeysAvailableError(f"No SSH keys found in {self.ssh_dir}")
        return KeyScan(aliases=[], advisory=Advisory(error, fatal=strict))
