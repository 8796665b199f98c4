"""
Identity binding engine.

Ties the pieces together: an alias resolves to an identity record in the
store, a private key in the SSH directory and a host-alias stanza in the
SSH config. The engine applies that binding either to a fresh clone or
to the repository in the working directory.

The store and the SSH config are separate files written one after the
other. Nothing is rolled back: if the second write fails the first one
stays, and re-running the command converges because both writes are
idempotent.
"""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .config import DEFAULT_CANONICAL_HOST, DEFAULT_REMOTE
from .errors import Advisory, UnknownKeyError
from .git import GitRunner
from .keys import KeyDiscovery
from .ssh_config import HostAliasRegistry, host_alias
from .store import IdentityRecord, IdentityStore


def rewrite_url(url: str, alias: str, canonical_host: str = DEFAULT_CANONICAL_HOST) -> str:
    """
    Route ``url`` through the alias-qualified host.

    ``https://github.com/org/repo.git`` with alias ``work`` becomes
    ``https://work.github.com/org/repo.git``. Only the first occurrence of
    the host is replaced. A URL that does not contain the host verbatim
    is returned unchanged.
    """

    return url.replace(canonical_host, host_alias(alias, canonical_host), 1)


def routed_alias(url: str, canonical_host: str = DEFAULT_CANONICAL_HOST) -> Optional[str]:
    """
    Return the alias a URL is already routed through, or None.

    ``git@work.github.com:org/repo.git`` -> ``work``;
    ``https://github.com/org/repo.git`` -> None.
    """

    pattern = r"(?:@|//)([\w-]+)\." + re.escape(canonical_host) + r"(?=[:/]|$)"
    match = re.search(pattern, url)
    return match.group(1) if match else None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class Outcome:
    record: IdentityRecord
    advisories: List[Advisory] = field(default_factory=list)
    store_changed: bool = True
    ssh_config_changed: bool = False


@dataclass(frozen=True)
class CloneResult:
    record: IdentityRecord
    url: str
    url_rewritten: bool
    destination: Optional[str] = None


@dataclass(frozen=True)
class BindResult:
    record: IdentityRecord
    url: str
    remote_action: Optional[str] = None  # "add", "set-url" or None when untouched
    previous_alias: Optional[str] = None


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class BindingEngine:
    def __init__(
        self,
        store: IdentityStore,
        registry: HostAliasRegistry,
        keys: KeyDiscovery,
        git: GitRunner,
        canonical_host: str = DEFAULT_CANONICAL_HOST,
        remote: str = DEFAULT_REMOTE,
        strict_keys: bool = False,
    ):
        self.store = store
        self.registry = registry
        self.keys = keys
        self.git = git
        self.canonical_host = canonical_host
        self.remote = remote
        self.strict_keys = strict_keys

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, alias: str, username: str, email: str, dry_run: bool = False) -> Outcome:
        """
        Record an identity for ``alias`` and add its host-alias stanza.

        The alias must name a discovered private key. When no keys are
        discovered at all, any alias is accepted and the returned outcome
        carries a ``NoKeysAvailableError`` advisory (raised instead in
        strict mode).

        Raises:
            InvalidRecordError: if a field is blank
            UnknownKeyError: if keys exist but none is ``id_<alias>``
            DirectoryNotFoundError: if the SSH directory is missing
            NoKeysAvailableError: in strict mode with no keys
        """

        record = IdentityRecord(alias=alias, username=username, email=email)

        scan = self.keys.scan(strict=self.strict_keys)
        advisories: List[Advisory] = []
        if scan.advisory is not None:
            scan.advisory.raise_if_fatal()
            advisories.append(scan.advisory)
        elif alias not in scan:
            raise UnknownKeyError(alias, scan.aliases)

        if dry_run:
            changed = self.registry.appended_block_for(alias) not in self.registry.read()
            return Outcome(record=record, advisories=advisories, store_changed=False, ssh_config_changed=changed)

        self.store.upsert(alias, record)
        changed = self.registry.add_host_alias(alias)

        return Outcome(record=record, advisories=advisories, ssh_config_changed=changed)

    def unregister(self, alias: str, dry_run: bool = False) -> Outcome:
        """
        Forget ``alias`` and drop its host-alias stanza.

        Raises:
            UnknownAliasError: if the alias is not registered
        """

        if dry_run:
            record = self.lookup(alias)
            return Outcome(
                record=record,
                store_changed=False,
                ssh_config_changed=self.registry.has_host_alias(alias),
            )

        record = self.store.delete(alias)
        changed = self.registry.remove_host_alias(alias)
        return Outcome(record=record, ssh_config_changed=changed)

    def lookup(self, alias: str) -> IdentityRecord:
        return self.store.get(alias)

    def rewrite(self, url: str, alias: str) -> str:
        return rewrite_url(url, alias, self.canonical_host)

    # ------------------------------------------------------------------
    # Clone
    # ------------------------------------------------------------------

    def clone_command(
        self,
        record: IdentityRecord,
        url: str,
        destination: Optional[str] = None,
        options: str = "",
    ) -> List[str]:
        """Return the ``git clone`` arguments for ``record`` (without ``git``)."""
        args = [
            "clone",
            "--config", f"user.name={record.username}",
            "--config", f"user.email={record.email}",
        ]
        args.extend(shlex.split(options or ""))
        args.append(url)
        if destination:
            args.append(destination)
        return args

    def resolve_for_clone(
        self,
        alias: str,
        url: str,
        destination: Optional[str] = None,
        options: str = "",
        dry_run: bool = False,
    ) -> CloneResult:
        """
        Clone ``url`` as ``alias``.

        The identity is written into the new clone's own config through
        ``git clone --config``; global git config is left alone.

        Raises:
            UnknownAliasError: if the alias is not registered
            SubprocessFailure: if ``git clone`` fails
        """

        record = self.lookup(alias)
        rewritten = self.rewrite(url, alias)

        if not dry_run:
            self.git.run(*self.clone_command(record, rewritten, destination, options), passthrough=True)

        return CloneResult(
            record=record,
            url=rewritten,
            url_rewritten=rewritten != url,
            destination=destination,
        )

    # ------------------------------------------------------------------
    # Existing repository
    # ------------------------------------------------------------------

    def current_remote_url(self) -> str:
        """Return the remote URL, or an empty string when there is none."""
        result = self.git.run_nothrow("remote", "get-url", self.remote)
        return result.stdout.strip() if result.ok else ""

    def bind_existing_repository(
        self,
        alias: str,
        ask_url: Callable[[], str],
        dry_run: bool = False,
    ) -> BindResult:
        """
        Point the current repository at ``alias``.

        Reads the remote URL (asking through ``ask_url`` when the remote
        does not exist), routes it through the alias-qualified host and
        sets the repository-local ``user.name`` / ``user.email``.

        Raises:
            UnknownAliasError: if the alias is not registered
            SubprocessFailure: if a git command fails
        """

        record = self.lookup(alias)

        existing = self.current_remote_url()
        url = existing or ask_url().replace("\n", "").strip()

        remote_action = None
        previous_alias = None
        qualified = host_alias(alias, self.canonical_host)
        if qualified not in url:
            previous_alias = routed_alias(url, self.canonical_host)
            url = self.rewrite(url, alias)
            remote_action = "set-url" if existing else "add"
        elif not existing:
            remote_action = "add"

        if not dry_run:
            if remote_action is not None:
                self.git.run("remote", remote_action, self.remote, url)
            self.git.run("config", "--local", "user.name", record.username)
            self.git.run("config", "--local", "user.email", record.email)

        return BindResult(
            record=record,
            url=url,
            remote_action=remote_action,
            previous_alias=previous_alias,
        )
