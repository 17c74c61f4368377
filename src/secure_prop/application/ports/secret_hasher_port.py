"""Port for adaptive-cost secret hashing and verification."""

from __future__ import annotations

from typing import Protocol


class SecretHasherPort(Protocol):
    """Secret hashing/verification contract."""

    min_cost: int
    default_cost: int

    def hash_secret(self, secret: str, *, cost: int) -> str:
        """Hash plaintext secret with a fresh salt at the given cost."""

    def verify_secret(self, *, secret: str | None, digest: str | None) -> bool:
        """Verify plaintext secret against stored digest in constant time."""
