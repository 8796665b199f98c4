"""
Error taxonomy.

Every failure the tool reports on purpose derives from ``GoodgitError``.
Each class carries the process exit code the CLI uses for it, so
scripts can tell a corrupt store apart from a failed ``git clone``.
"""

from __future__ import annotations

from typing import Optional, Sequence


class GoodgitError(RuntimeError):
    """Base class for all expected failures."""

    exit_code: int = 1


class CorruptStoreError(GoodgitError):
    """The identity store exists but is not the expected JSON shape."""

    exit_code = 3


class DirectoryNotFoundError(GoodgitError):
    """The SSH key directory does not exist."""

    exit_code = 4


class UnknownAliasError(GoodgitError):
    """An operation referenced an alias with no identity record."""

    exit_code = 5

    def __init__(self, alias: str, message: Optional[str] = None):
        self.alias = alias
        super().__init__(message or f"No identity registered for alias '{alias}'")


class UnknownKeyError(GoodgitError):
    """An alias was registered against a key that is not in the SSH directory."""

    exit_code = 9

    def __init__(self, alias: str, available: Sequence[str]):
        self.alias = alias
        self.available = list(available)
        super().__init__(
            f"No SSH key 'id_{alias}' found (available: {', '.join(self.available)})"
        )


class NoKeysAvailableError(GoodgitError):
    """No private keys were discovered. Advisory unless strict mode is on."""

    exit_code = 6


class SubprocessFailure(GoodgitError):
    """An invoked version-control command exited non-zero."""

    exit_code = 7

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stderr: str = "",
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr or "N/A"
        super().__init__(
            f"Command '{' '.join(self.command)}' failed (rc={returncode}). Stderr: '{detail}'"
        )


class InvalidRecordError(GoodgitError):
    """An identity record was built with a missing or blank field."""

    exit_code = 8


class NoChoicesError(GoodgitError):
    """A selection prompt was asked to choose from nothing."""

    exit_code = 8


class SettingsError(GoodgitError):
    """The YAML settings file is malformed."""

    exit_code = 8


# ---------------------------------------------------------------------------
# Advisories
# ---------------------------------------------------------------------------


class Advisory:
    """
    A condition an operation noticed but did not raise.

    ``fatal`` advisories must be raised by whoever receives them; use
    ``raise_if_fatal()`` rather than inspecting the flag by hand.
    """

    __slots__ = ("error", "fatal")

    def __init__(self, error: GoodgitError, fatal: bool = False):
        self.error = error
        self.fatal = fatal

    @property
    def message(self) -> str:
        return str(self.error)

    def raise_if_fatal(self) -> None:
        if self.fatal:
            raise self.error

    def __repr__(self) -> str:
        return f"Advisory({type(self.error).__name__}: {self.message!r}, fatal={self.fatal})"
