"""Bcrypt secret hasher adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

import bcrypt

from secure_prop.application.ports.secret_hasher_port import SecretHasherPort

if TYPE_CHECKING:
    from secure_prop.config.settings import Settings

BCRYPT_MIN_COST = 4
BCRYPT_MAX_COST = 31
BCRYPT_DEFAULT_COST = 12
# bcrypt only reads this many bytes of its input.
BCRYPT_MAX_INPUT_BYTES = 72


class BcryptSecretHasher(SecretHasherPort):
    """Secret hashing adapter using bcrypt."""

    min_cost = BCRYPT_MIN_COST

    def __init__(self, *, default_cost: int = BCRYPT_DEFAULT_COST) -> None:
        self.default_cost = _require_cost(default_cost)

    def hash_secret(self, secret: str, *, cost: int) -> str:
        salt = bcrypt.gensalt(rounds=_require_cost(cost))
        return bcrypt.hashpw(_encode(secret), salt).decode("utf-8")

    def verify_secret(self, *, secret: str | None, digest: str | None) -> bool:
        if secret is None or not digest:
            return False
        try:
            return bcrypt.checkpw(_encode(secret), digest.encode("utf-8"))
        except ValueError:
            return False


def build_secret_hasher(settings: Settings) -> BcryptSecretHasher:
    """Build the bcrypt adapter configured by runtime settings."""

    return BcryptSecretHasher(default_cost=settings.bcrypt_cost)


def _encode(secret: str) -> bytes:
    return secret.encode("utf-8")[:BCRYPT_MAX_INPUT_BYTES]


def _require_cost(cost: int) -> int:
    if not BCRYPT_MIN_COST <= cost <= BCRYPT_MAX_COST:
        raise ValueError(
            f"bcrypt cost must be between {BCRYPT_MIN_COST} and {BCRYPT_MAX_COST}, got {cost}"
        )
    return cost
