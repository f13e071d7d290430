"""Application service that verifies secrets against stored credential records."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import SecretStr

from credential_verification.application.dto.verification_models import (
    VerificationRequest,
    require_request_fields,
)
from credential_verification.application.ports.credential_repository_port import (
    CredentialRecord,
    CredentialRepositoryPort,
)
from credential_verification.application.ports.credential_upgrade_port import (
    CredentialHashUpgradeInput,
    CredentialUpgradePort,
)
from credential_verification.application.ports.read_only_mode_port import ReadOnlyModePort
from credential_verification.application.ports.write_guard_port import (
    WriteCapability,
    WriteGuardPort,
)
from credential_verification.application.services.password_hasher_registry import (
    PasswordHasherRegistry,
)
from credential_verification.domain.credentials.comparison import ComparisonResult
from credential_verification.domain.credentials.content_source import ContentSource
from credential_verification.domain.credentials.digest import (
    CURRENT_DIGEST_FORMAT,
    PasswordDigester,
    new_password_salt,
)
from credential_verification.domain.credentials.errors import (
    CredentialEngineConfigurationError,
    CredentialUpgradeError,
    HasherUnavailableError,
    PasswordHashingError,
)
from credential_verification.domain.credentials.stored_hash import StoredHash

logger = logging.getLogger(__name__)

_UPGRADE_SCOPE_REASON = "credential_hash_upgrade"


class CredentialVerificationEngine:
    """Check secrets against an account's credentials and upgrade weak hashes."""

    def __init__(
        self,
        *,
        credentials: CredentialRepositoryPort,
        upgrades: CredentialUpgradePort,
        hashers: PasswordHasherRegistry,
        digester: PasswordDigester,
        read_only: ReadOnlyModePort,
        write_guard: WriteGuardPort,
    ) -> None:
        self._credentials = credentials
        self._upgrades = upgrades
        self._hashers = hashers
        self._digester = digester
        self._read_only = read_only
        self._write_guard = write_guard

    async def is_valid_password(self, request: VerificationRequest, secret: SecretStr) -> bool:
        """Return whether the secret matches an active credential of the request type.

        Matched credentials stored under a weaker scheme are re-hashed before
        returning, unless upgrades are disabled or the process is read-only.
        """

        upgrade_source = self._require_setup(request)

        passwords = await self._credentials.list_for_account(
            account_id=request.account.account_id,
            credential_types=(request.credential_type,),
            is_revoked=False,
        )

        matches = self._get_matches(request, secret, passwords)
        if not matches:
            return False

        # Read-only mode may have been switched on while the query ran.
        if upgrade_source is not None and self._should_upgrade_hashers(request):
            await self._upgrade_hashers(
                request,
                secret,
                matches,
                content_source=upgrade_source,
            )

        return True

    async def is_unique_password(self, request: VerificationRequest, secret: SecretStr) -> bool:
        """Return whether the secret is unused across the account's credential history.

        Every type and revocation state is checked except the active credentials of
        the request type, so a password never collides with itself. Revoked
        credentials of the request type still count.
        """

        self._require_setup(request)

        passwords = await self._credentials.list_for_account(
            account_id=request.account.account_id,
        )
        candidates = [
            password
            for password in passwords
            if not (password.credential_type == request.credential_type and password.is_active)
        ]

        return not self._get_matches(request, secret, candidates)

    async def is_revoked_password(self, request: VerificationRequest, secret: SecretStr) -> bool:
        """Return whether the secret matches a revoked credential of any type."""

        self._require_setup(request)

        passwords = await self._credentials.list_for_account(
            account_id=request.account.account_id,
            is_revoked=True,
        )

        return bool(self._get_matches(request, secret, passwords))

    def _require_setup(self, request: VerificationRequest) -> ContentSource | None:
        """Validate the request and return the upgrade content source.

        None means upgrades are closed for this call.
        """

        require_request_fields(request)

        if not self._should_upgrade_hashers(request):
            return None
        if request.content_source is None:
            raise CredentialEngineConfigurationError(missing_field="content_source")
        return request.content_source

    def _should_upgrade_hashers(self, request: VerificationRequest) -> bool:
        if not request.upgrade_hashers:
            return False

        if self._read_only.is_read_only():
            # The upgraded hash could not be written back.
            return False

        return True

    def _get_matches(
        self,
        request: VerificationRequest,
        secret: SecretStr,
        passwords: Iterable[CredentialRecord],
    ) -> list[CredentialRecord]:
        account_id = request.account.account_id

        matches: list[CredentialRecord] = []
        for password in passwords:
            digest = self._digester.digest(
                secret,
                account_id=account_id,
                salt=password.password_salt,
                digest_format=password.digest_format,
            )
            result = self._hashers.compare(digest=digest, password_hash=password.password_hash)
            if result is ComparisonResult.UNAVAILABLE:
                logger.debug(
                    "credential_hasher_unavailable credential_id=%s account_id=%s",
                    password.credential_id,
                    account_id,
                )
            if result.is_match:
                matches.append(password)

        return matches

    async def _upgrade_hashers(
        self,
        request: VerificationRequest,
        secret: SecretStr,
        passwords: list[CredentialRecord],
        *,
        content_source: ContentSource,
    ) -> int:
        """Re-hash every upgradable match and return how many upgrades persisted."""

        need_upgrade = [password for password in passwords if self._hashers.can_upgrade(password)]
        if not need_upgrade:
            return 0

        upgraded = 0
        with self._write_guard.unguarded_writes(reason=_UPGRADE_SCOPE_REASON) as capability:
            for password in need_upgrade:
                if await self._upgrade_password_hasher(
                    request,
                    secret,
                    password,
                    content_source=content_source,
                    capability=capability,
                ):
                    upgraded += 1

        logger.info(
            "credential_hash_upgrade_finished account_id=%s eligible=%s upgraded=%s",
            request.account.account_id,
            len(need_upgrade),
            upgraded,
        )
        return upgraded

    async def _upgrade_password_hasher(
        self,
        request: VerificationRequest,
        secret: SecretStr,
        password: CredentialRecord,
        *,
        content_source: ContentSource,
        capability: WriteCapability,
    ) -> bool:
        old_hasher_name = StoredHash.parse(password.password_hash).hasher_name

        try:
            new_salt = new_password_salt()
            digest = self._digester.digest(
                secret,
                account_id=request.account.account_id,
                salt=new_salt,
                digest_format=CURRENT_DIGEST_FORMAT,
            )
            new_hash = self._hashers.hash_for_storage(digest)
            await self._upgrades.apply_hash_upgrade(
                CredentialHashUpgradeInput(
                    credential_id=password.credential_id,
                    account_id=password.account_id,
                    expected_password_hash=password.password_hash,
                    new_password_hash=str(new_hash),
                    new_password_salt=new_salt,
                    new_digest_format=CURRENT_DIGEST_FORMAT,
                    old_hasher_name=old_hasher_name,
                    new_hasher_name=new_hash.hasher_name,
                    actor_id=request.viewer.actor_id,
                    content_source=content_source,
                ),
                capability=capability,
            )
        except (CredentialUpgradeError, HasherUnavailableError, PasswordHashingError) as error:
            logger.warning(
                "credential_hash_upgrade_failed credential_id=%s old_hasher=%s error=%s",
                password.credential_id,
                old_hasher_name,
                error,
            )
            return False

        logger.info(
            "credential_hash_upgraded credential_id=%s old_hasher=%s new_hasher=%s",
            password.credential_id,
            old_hasher_name,
            new_hash.hasher_name,
        )
        return True
