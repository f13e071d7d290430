"""Port for scoped permission to write from a read request path."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from credential_verification.domain.credentials.errors import WriteGuardError


class WriteCapability:
    """Token proving the holder is inside an open unguarded-write scope.

    Writers call `require_open()` before touching storage. The issuing guard closes
    the token when its scope exits, so a token leaked past the scope is useless.
    """

    def __init__(self, *, reason: str) -> None:
        self.reason = reason
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        self._open = False

    def require_open(self) -> None:
        if not self._open:
            raise WriteGuardError(f"unguarded write scope already closed: {self.reason}")


class WriteGuardPort(Protocol):
    """Unguarded-write scope contract."""

    def unguarded_writes(self, *, reason: str) -> AbstractContextManager[WriteCapability]:
        """Open a tightly scoped write capability for a read-path write."""
