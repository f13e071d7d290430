"""Build the password hasher registry from runtime settings."""

from __future__ import annotations

from collections.abc import Callable

from credential_verification.application.ports.password_hasher_port import PasswordHasherPort
from credential_verification.application.services.password_hasher_registry import (
    PasswordHasherRegistry,
)
from credential_verification.config.settings import Settings
from credential_verification.infrastructure.security.argon2_hasher import Argon2idPasswordHasher
from credential_verification.infrastructure.security.md5_hasher import IteratedMd5PasswordHasher
from credential_verification.infrastructure.security.password_hasher import BcryptPasswordHasher


class UnknownPasswordHasherError(ValueError):
    """Raised when settings enable a hasher name this package does not provide."""


def _build_hasher_constructors(settings: Settings) -> dict[str, Callable[[], PasswordHasherPort]]:
    return {
        "argon2id": lambda: Argon2idPasswordHasher(
            time_cost=settings.argon2_time_cost,
            memory_cost_kib=settings.argon2_memory_cost_kib,
            parallelism=settings.argon2_parallelism,
        ),
        "bcrypt": lambda: BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
        "md5": lambda: IteratedMd5PasswordHasher(iterations=settings.md5_iterations),
    }


def build_password_hasher_registry(settings: Settings) -> PasswordHasherRegistry:
    """Register every hasher named in CREDENTIAL_HASHERS, in configured order.

    Stored hashes tagged with a name left out of the setting are treated as
    unavailable by the registry.
    """

    constructors = _build_hasher_constructors(settings)
    hashers: list[PasswordHasherPort] = []
    for name in settings.credential_hashers:
        constructor = constructors.get(name)
        if constructor is None:
            raise UnknownPasswordHasherError(
                f"unsupported CREDENTIAL_HASHERS entry: {name!r}; "
                f"expected any of {sorted(constructors)!r}"
            )
        hashers.append(constructor())
    return PasswordHasherRegistry(hashers)
