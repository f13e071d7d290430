"""Port for the process-wide read-only operating mode."""

from __future__ import annotations

from typing import Protocol


class ReadOnlyModePort(Protocol):
    """Read-only mode query contract."""

    def is_read_only(self) -> bool:
        """Return whether writes are currently forbidden process-wide."""
