"""Well-known credential type partitions."""

from __future__ import annotations

from enum import StrEnum


class CredentialType(StrEnum):
    """Partitions an account's credentials by role.

    Requests accept any non-empty label and match it exactly; these members name the
    partitions the bundled schema and tests use.
    """

    ACCOUNT = "account"
    VCS = "vcs"
    API_TOKEN = "api_token"
    TEST = "test"
