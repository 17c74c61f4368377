"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from secure_prop.infrastructure.security.bcrypt_hasher import (
    BCRYPT_DEFAULT_COST,
    BCRYPT_MAX_COST,
    BCRYPT_MIN_COST,
)

BcryptCost = Annotated[int, Field(ge=BCRYPT_MIN_COST, le=BCRYPT_MAX_COST)]


class Settings(BaseSettings):
    """Environment-driven secret hashing settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    min_cost: bool = Field(default=False, validation_alias="SECURE_PROP_MIN_COST")
    bcrypt_cost: BcryptCost = Field(default=BCRYPT_DEFAULT_COST, validation_alias="BCRYPT_COST")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()
