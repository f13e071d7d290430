"""Error taxonomy for credential verification and hash upgrades."""

from __future__ import annotations


class CredentialEngineConfigurationError(ValueError):
    """Raised when a verification request is missing a required field."""

    def __init__(self, *, missing_field: str) -> None:
        super().__init__(f"verification request is missing required field: {missing_field}")
        self.missing_field = missing_field


class HasherUnavailableError(LookupError):
    """Raised when a stored hash names a hasher that cannot run in this process."""

    def __init__(self, *, hasher_name: str) -> None:
        super().__init__(f"password hasher unavailable: {hasher_name!r}")
        self.hasher_name = hasher_name


class CredentialUpgradeError(RuntimeError):
    """Raised when persisting one credential hash upgrade fails."""

    def __init__(self, *, credential_id: int, reason: str) -> None:
        super().__init__(f"credential {credential_id} hash upgrade failed: {reason}")
        self.credential_id = credential_id
        self.reason = reason


class CredentialUpgradeConflictError(CredentialUpgradeError):
    """Raised when the stored hash changed between read and upgrade."""

    def __init__(self, *, credential_id: int) -> None:
        super().__init__(
            credential_id=credential_id,
            reason="stored hash changed concurrently",
        )


class WriteGuardError(PermissionError):
    """Raised when a write is attempted outside an open unguarded-write scope."""


class PasswordHashingError(RuntimeError):
    """Raised when a hasher fails to produce a new hash for a digest."""

    def __init__(self, *, hasher_name: str, reason: str) -> None:
        super().__init__(f"password hasher {hasher_name!r} failed to hash: {reason}")
        self.hasher_name = hasher_name
        self.reason = reason
