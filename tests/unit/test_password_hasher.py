from __future__ import annotations

import bcrypt
import pytest
from argon2 import PasswordHasher
from argon2.exceptions import HashingError
from pydantic import SecretStr

from credential_verification.domain.credentials.errors import PasswordHashingError
from credential_verification.infrastructure.security.argon2_hasher import Argon2idPasswordHasher
from credential_verification.infrastructure.security.md5_hasher import IteratedMd5PasswordHasher
from credential_verification.infrastructure.security.password_hasher import BcryptPasswordHasher

DIGEST = SecretStr("0f" * 32)


def test_bcrypt_hash_never_contains_digest_and_verifies() -> None:
    hasher = BcryptPasswordHasher(rounds=4)

    password_hash = hasher.hash_digest(DIGEST)

    assert DIGEST.get_secret_value() not in password_hash
    assert password_hash.startswith("$2b$04$")
    assert hasher.verify_digest(digest=DIGEST, hash_value=password_hash) is True
    assert hasher.verify_digest(digest=SecretStr("wrong"), hash_value=password_hash) is False


def test_bcrypt_malformed_hash_fails_verification() -> None:
    hasher = BcryptPasswordHasher(rounds=4)

    assert hasher.verify_digest(digest=DIGEST, hash_value="not-a-bcrypt-hash") is False


def test_bcrypt_needs_rehash_when_cost_changes() -> None:
    weak = BcryptPasswordHasher(rounds=4)
    strong = BcryptPasswordHasher(rounds=5)
    password_hash = weak.hash_digest(DIGEST)

    assert weak.needs_rehash(password_hash) is False
    assert strong.needs_rehash(password_hash) is True
    assert strong.needs_rehash("garbage") is True


def test_argon2id_hash_verifies_and_tracks_parameters() -> None:
    hasher = Argon2idPasswordHasher(time_cost=1, memory_cost_kib=8, parallelism=1)
    stronger = Argon2idPasswordHasher(time_cost=2, memory_cost_kib=8, parallelism=1)

    password_hash = hasher.hash_digest(DIGEST)

    assert password_hash.startswith("$argon2id$")
    assert hasher.verify_digest(digest=DIGEST, hash_value=password_hash) is True
    assert hasher.verify_digest(digest=SecretStr("wrong"), hash_value=password_hash) is False
    assert hasher.verify_digest(digest=DIGEST, hash_value="$argon2id$broken") is False
    assert hasher.needs_rehash(password_hash) is False
    assert stronger.needs_rehash(password_hash) is True


def test_iterated_md5_is_deterministic_and_weakest() -> None:
    hasher = IteratedMd5PasswordHasher(iterations=3)

    password_hash = hasher.hash_digest(DIGEST)

    assert password_hash == hasher.hash_digest(DIGEST)
    assert IteratedMd5PasswordHasher(iterations=4).hash_digest(DIGEST) != password_hash
    assert hasher.verify_digest(digest=DIGEST, hash_value=password_hash) is True
    assert hasher.verify_digest(digest=SecretStr("wrong"), hash_value=password_hash) is False
    assert hasher.needs_rehash(password_hash) is False
    assert hasher.strength < BcryptPasswordHasher().strength < Argon2idPasswordHasher().strength


def test_argon2id_hashing_failure_raises_password_hashing_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    hasher = Argon2idPasswordHasher(time_cost=1, memory_cost_kib=8, parallelism=1)

    def _fail(self: PasswordHasher, password: str | bytes, *, salt: bytes | None = None) -> str:
        raise HashingError("memory allocation failed")

    monkeypatch.setattr(PasswordHasher, "hash", _fail)

    with pytest.raises(PasswordHashingError) as excinfo:
        hasher.hash_digest(DIGEST)

    assert excinfo.value.hasher_name == "argon2id"
    assert isinstance(excinfo.value.__cause__, HashingError)


def test_bcrypt_hashing_failure_raises_password_hashing_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    hasher = BcryptPasswordHasher(rounds=4)

    def _fail(password: bytes, salt: bytes) -> bytes:
        raise ValueError("Invalid salt")

    monkeypatch.setattr(bcrypt, "hashpw", _fail)

    with pytest.raises(PasswordHashingError) as excinfo:
        hasher.hash_digest(DIGEST)

    assert excinfo.value.hasher_name == "bcrypt"
