"""Content-source metadata used to attribute audit transactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ContentSourceKind(StrEnum):
    """Where the request that triggered a write originated."""

    WEB = "web"
    API = "api"
    DAEMON = "daemon"
    CLI = "cli"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ContentSource:
    """Origin of one request, recorded on every audit transaction it causes."""

    source: ContentSourceKind
    params: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {"source": self.source.value, "params": dict(self.params)}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ContentSource:
        raw_source = str(payload.get("source", ContentSourceKind.UNKNOWN.value))
        try:
            source = ContentSourceKind(raw_source)
        except ValueError:
            source = ContentSourceKind.UNKNOWN
        return cls(source=source, params=dict(payload.get("params") or {}))
