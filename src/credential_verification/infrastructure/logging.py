"""Shared logging configuration for processes hosting the verification engine."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_SQLALCHEMY_ENGINE_LOGGER = "sqlalchemy.engine"


def resolve_log_level(level: str) -> int:
    """Map a textual level to its logging constant, falling back to INFO."""

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved = getattr(logging, normalized_level, logging.INFO)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str, sql_echo: bool = False) -> None:
    """Configure process logging with a consistent format and runtime level.

    SQL statement logging stays at WARNING unless ``sql_echo`` is set, since bound
    parameters of credential queries include stored hashes.
    """

    logging.basicConfig(
        level=resolve_log_level(level),
        format=_LOG_FORMAT,
    )
    logging.getLogger(_SQLALCHEMY_ENGINE_LOGGER).setLevel(
        logging.INFO if sql_echo else logging.WARNING
    )
