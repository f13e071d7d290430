"""Process-wide read-only mode switch."""

from __future__ import annotations

import logging
import threading

from credential_verification.application.ports.read_only_mode_port import ReadOnlyModePort

logger = logging.getLogger(__name__)


class ProcessReadOnlyMode(ReadOnlyModePort):
    """Mutable read-only flag shared by every engine in the process.

    Seeded from settings at startup; administrative code may flip it at runtime,
    so readers must query it on each call instead of caching the value.
    """

    def __init__(self, *, read_only: bool = False) -> None:
        self._lock = threading.Lock()
        self._read_only = read_only

    def is_read_only(self) -> bool:
        with self._lock:
            return self._read_only

    def enable(self) -> None:
        with self._lock:
            self._read_only = True
        logger.warning("read_only_mode_enabled")

    def disable(self) -> None:
        with self._lock:
            self._read_only = False
        logger.info("read_only_mode_disabled")
