"""Stored hash representation: a hasher name tag plus opaque hash text."""

from __future__ import annotations

from dataclasses import dataclass

_SEPARATOR = ":"


class MalformedStoredHashError(ValueError):
    """Raised when a stored hash value carries no hasher name tag."""


@dataclass(frozen=True)
class StoredHash:
    """Parsed `<hasher-name>:<hash>` value as persisted on a credential row."""

    hasher_name: str
    hash_value: str

    @classmethod
    def parse(cls, raw: str) -> StoredHash:
        """Split a persisted value on its first separator."""

        name, separator, value = raw.partition(_SEPARATOR)
        if not separator or not name.strip() or not value:
            raise MalformedStoredHashError("stored hash must look like '<hasher>:<hash>'")
        return cls(hasher_name=name.strip().lower(), hash_value=value)

    def __str__(self) -> str:
        return f"{self.hasher_name}{_SEPARATOR}{self.hash_value}"
