"""
Persisted identity store.

One JSON document maps each alias to the identity used with it:

    {"work": {"username": "Jane", "email": "jane@corp.example", "ssh_key": "work"}}

Every mutation rewrites the whole document. There is no caching between
invocations and no locking: two concurrent runs race and the last
writer wins.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .errors import CorruptStoreError, InvalidRecordError, UnknownAliasError
from .utils import read_text, write_text


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IdentityRecord:
    alias: str
    username: str
    email: str

    def __post_init__(self) -> None:
        for name in ("alias", "username", "email"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidRecordError(f"Identity field '{name}' must be a non-empty string")

    def to_dict(self) -> Dict[str, str]:
        return {"username": self.username, "email": self.email, "ssh_key": self.alias}

    @classmethod
    def from_dict(cls, alias: str, data: Dict[str, Any]) -> "IdentityRecord":
        return cls(
            alias=data.get("ssh_key") or alias,
            username=data["username"],
            email=data["email"],
        )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class IdentityStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load(self) -> Dict[str, IdentityRecord]:
        """
        Read every identity record.

        Creates the file as an empty document if it does not exist yet.

        Raises:
            CorruptStoreError: if the file is not a JSON object of records

        Returns:
            Dict[str, IdentityRecord]: records keyed by alias
        """

        if not self.path.exists():
            self.save({})
            return {}

        try:
            raw = json.loads(read_text(self.path))
        except UnicodeDecodeError as e:
            raise CorruptStoreError(f"Identity store {self.path} is not valid UTF-8: {e}")
        except json.JSONDecodeError as e:
            raise CorruptStoreError(f"Identity store {self.path} is not valid JSON: {e}")

        return self._parse(raw)

    def save(self, records: Dict[str, IdentityRecord]) -> None:
        """Replace the whole document with ``records``."""
        document = {alias: record.to_dict() for alias, record in records.items()}
        write_text(self.path, json.dumps(document, indent=2))

    # ------------------------------------------------------------------
    # Convenience compositions
    # ------------------------------------------------------------------

    def get(self, alias: str) -> IdentityRecord:
        records = self.load()
        try:
            return records[alias]
        except KeyError:
            raise UnknownAliasError(alias)

    def aliases(self) -> List[str]:
        return sorted(self.load())

    def upsert(self, alias: str, record: IdentityRecord) -> None:
        records = self.load()
        records[alias] = record
        self.save(records)

    def delete(self, alias: str) -> IdentityRecord:
        records = self.load()
        try:
            record = records.pop(alias)
        except KeyError:
            raise UnknownAliasError(alias)
        self.save(records)
        return record

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _parse(self, raw: Any) -> Dict[str, IdentityRecord]:
        if not isinstance(raw, dict):
            raise CorruptStoreError(f"Identity store {self.path} must contain a JSON object")

        records: Dict[str, IdentityRecord] = {}
        for alias, data in raw.items():
            if not isinstance(data, dict):
                raise CorruptStoreError(f"Entry '{alias}' in {self.path} is not an object")
            if not isinstance(data.get("username"), str) or not isinstance(data.get("email"), str):
                raise CorruptStoreError(
                    f"Entry '{alias}' in {self.path} is missing 'username' or 'email'"
                )
            try:
                records[alias] = IdentityRecord.from_dict(alias, data)
            except InvalidRecordError as e:
                raise CorruptStoreError(f"Entry '{alias}' in {self.path} is invalid: {e}")

        return records
