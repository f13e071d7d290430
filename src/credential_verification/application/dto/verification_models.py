"""Immutable request models for credential verification operations."""

from __future__ import annotations

from dataclasses import dataclass

from credential_verification.domain.credentials.content_source import ContentSource
from credential_verification.domain.credentials.errors import CredentialEngineConfigurationError


@dataclass(frozen=True)
class ActorRef:
    """Identity of the party performing a verification."""

    actor_id: str


@dataclass(frozen=True)
class AccountRef:
    """Account that owns the credentials being checked."""

    account_id: str


@dataclass(frozen=True)
class VerificationRequest:
    """Everything one verification operation needs, fixed at construction.

    `content_source` is only required when the operation may upgrade hashes; the
    engine enforces that per call because read-only mode can close the upgrade gate.
    """

    viewer: ActorRef
    account: AccountRef
    credential_type: str
    content_source: ContentSource | None = None
    upgrade_hashers: bool = True

    def __post_init__(self) -> None:
        require_request_fields(self)


def require_request_fields(request: VerificationRequest) -> None:
    """Raise a configuration error naming the first unset required field."""

    if request.account is None or not str(request.account.account_id or "").strip():
        raise CredentialEngineConfigurationError(missing_field="account")
    if request.credential_type is None or not str(request.credential_type).strip():
        raise CredentialEngineConfigurationError(missing_field="credential_type")
    if request.viewer is None or not str(request.viewer.actor_id or "").strip():
        raise CredentialEngineConfigurationError(missing_field="viewer")
