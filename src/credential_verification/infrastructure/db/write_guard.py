"""Scoped unguarded-write capabilities for writes triggered from read paths."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from credential_verification.application.ports.write_guard_port import (
    WriteCapability,
    WriteGuardPort,
)

logger = logging.getLogger(__name__)


class ScopedWriteGuard(WriteGuardPort):
    """Issue write capabilities that close as soon as their scope exits."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._open_scopes = 0

    @property
    def open_scopes(self) -> int:
        """Number of scopes currently open; stays at zero between operations."""

        with self._lock:
            return self._open_scopes

    @contextmanager
    def unguarded_writes(self, *, reason: str) -> Iterator[WriteCapability]:
        capability = WriteCapability(reason=reason)
        with self._lock:
            self._open_scopes += 1
        logger.debug("unguarded_write_scope_opened reason=%s", reason)
        try:
            yield capability
        finally:
            capability.close()
            with self._lock:
                self._open_scopes -= 1
            logger.debug("unguarded_write_scope_closed reason=%s", reason)
