"""Compose the credential verification engine from settings and adapters."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from credential_verification.application.services.credential_verification_service import (
    CredentialVerificationEngine,
)
from credential_verification.application.services.password_hasher_registry import (
    PasswordHasherRegistry,
)
from credential_verification.config.settings import Settings, load_settings
from credential_verification.domain.credentials.digest import PasswordDigester
from credential_verification.infrastructure.db.credential_repository import (
    SqlAlchemyCredentialRepository,
)
from credential_verification.infrastructure.db.session import create_session_factory
from credential_verification.infrastructure.db.write_guard import ScopedWriteGuard
from credential_verification.infrastructure.logging import configure_logging
from credential_verification.infrastructure.runtime.read_only_mode import ProcessReadOnlyMode
from credential_verification.infrastructure.security.hasher_factory import (
    build_password_hasher_registry,
)


@dataclass(frozen=True)
class CredentialEngineServices:
    """Composed engine plus the shared collaborators callers may need directly."""

    engine: CredentialVerificationEngine
    credential_repository: SqlAlchemyCredentialRepository
    hashers: PasswordHasherRegistry
    read_only_mode: ProcessReadOnlyMode
    write_guard: ScopedWriteGuard


def build_credential_engine_services(
    *,
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    read_only_mode: ProcessReadOnlyMode | None = None,
) -> CredentialEngineServices:
    """Compose the production engine using SQLAlchemy and configured hashers."""

    resolved_session_factory = session_factory or create_session_factory(
        settings.database_url,
        echo=settings.sql_echo,
    )
    resolved_read_only_mode = read_only_mode or ProcessReadOnlyMode(
        read_only=settings.read_only_mode,
    )
    credential_repository = SqlAlchemyCredentialRepository(resolved_session_factory)
    hashers = build_password_hasher_registry(settings)
    write_guard = ScopedWriteGuard()

    engine = CredentialVerificationEngine(
        credentials=credential_repository,
        upgrades=credential_repository,
        hashers=hashers,
        digester=PasswordDigester(key=settings.password_digest_key),
        read_only=resolved_read_only_mode,
        write_guard=write_guard,
    )

    return CredentialEngineServices(
        engine=engine,
        credential_repository=credential_repository,
        hashers=hashers,
        read_only_mode=resolved_read_only_mode,
        write_guard=write_guard,
    )


def bootstrap_credential_engine(*, settings: Settings | None = None) -> CredentialEngineServices:
    """Load settings, configure process logging and compose the engine."""

    resolved_settings = settings or load_settings()
    configure_logging(level=resolved_settings.log_level, sql_echo=resolved_settings.sql_echo)
    return build_credential_engine_services(settings=resolved_settings)
