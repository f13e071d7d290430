"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]
BcryptRounds = Annotated[int, Field(ge=4, le=31)]

DEFAULT_CREDENTIAL_HASHERS = ("argon2id", "bcrypt", "md5")


class Settings(BaseSettings):
    """Environment-driven engine settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    password_digest_key: SecretStr = Field(validation_alias="PASSWORD_DIGEST_KEY")
    read_only_mode: bool = Field(default=False, validation_alias="READ_ONLY_MODE")
    credential_hashers: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_CREDENTIAL_HASHERS,
        validation_alias="CREDENTIAL_HASHERS",
    )
    bcrypt_rounds: BcryptRounds = Field(default=12, validation_alias="BCRYPT_ROUNDS")
    argon2_time_cost: PositiveInt = Field(default=3, validation_alias="ARGON2_TIME_COST")
    argon2_memory_cost_kib: PositiveInt = Field(
        default=65_536,
        validation_alias="ARGON2_MEMORY_COST_KIB",
    )
    argon2_parallelism: PositiveInt = Field(default=4, validation_alias="ARGON2_PARALLELISM")
    md5_iterations: PositiveInt = Field(default=1000, validation_alias="MD5_ITERATIONS")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    sql_echo: bool = Field(default=False, validation_alias="SQL_ECHO")

    @field_validator("password_digest_key")
    @classmethod
    def _reject_blank_digest_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("PASSWORD_DIGEST_KEY cannot be blank")
        return value

    @field_validator("credential_hashers", mode="before")
    @classmethod
    def _split_hasher_names(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            names = tuple(str(name).strip().lower() for name in value if str(name).strip())
            if not names:
                raise ValueError("CREDENTIAL_HASHERS must name at least one hasher")
            return names
        return value


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache engine settings."""

    return Settings()  # type: ignore[call-arg]
