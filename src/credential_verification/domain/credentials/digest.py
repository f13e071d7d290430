"""Account-bound password digests fed into the storage hashers."""

from __future__ import annotations

import hashlib
import hmac
import secrets
from enum import StrEnum

from pydantic import SecretStr

_SALT_BYTES = 32


class DigestFormat(StrEnum):
    """How a secret is digested before the storage hasher sees it."""

    HMAC_SHA256 = "hmac-sha256"
    LEGACY_SHA1 = "sha1"


CURRENT_DIGEST_FORMAT = DigestFormat.HMAC_SHA256


def new_password_salt() -> str:
    """Return a fresh random per-record salt."""

    return secrets.token_hex(_SALT_BYTES)


class PasswordDigester:
    """Bind a secret to one account and one record salt.

    Identical secrets on different accounts, or on different records of the same
    account, produce different digests.
    """

    def __init__(self, *, key: SecretStr) -> None:
        if not key.get_secret_value():
            raise ValueError("digest key cannot be empty")
        self._key = key

    def digest(
        self,
        secret: SecretStr,
        *,
        account_id: str,
        salt: str,
        digest_format: DigestFormat,
    ) -> SecretStr:
        """Return the hex digest for one candidate record."""

        raw = secret.get_secret_value()
        if digest_format is DigestFormat.LEGACY_SHA1:
            value = hashlib.sha1(
                f"{salt}{raw}{account_id}".encode("utf-8"),
                usedforsecurity=False,
            ).hexdigest()
            return SecretStr(value)

        value = hmac.new(
            self._key.get_secret_value().encode("utf-8"),
            f"{salt}:{account_id}:{raw}".encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return SecretStr(value)
