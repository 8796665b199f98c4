"""
goodgit

Keeps several Git/SSH identities on one machine and switches between
them per repository by routing remotes through per-identity SSH host
aliases.
"""

__version__ = "1.0.0"

from .config import DEFAULT_CANONICAL_HOST
from .settings import Settings
from .store import IdentityRecord, IdentityStore
from .ssh_config import HostAliasRegistry
from .keys import KeyDiscovery
from .git import GitRunner
from .binding import BindingEngine, rewrite_url

__all__ = [
    "DEFAULT_CANONICAL_HOST",
    "Settings",
    "IdentityRecord",
    "IdentityStore",
    "HostAliasRegistry",
    "KeyDiscovery",
    "GitRunner",
    "BindingEngine",
    "rewrite_url",
]
