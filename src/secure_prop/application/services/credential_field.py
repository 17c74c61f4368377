"""Credential field holding one hashed secret and its transient inputs."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping

from secure_prop.application.ports.secret_hasher_port import SecretHasherPort
from secure_prop.domain.credentials.errors import (
    MAX_SECRET_LENGTH,
    CredentialErrorKind,
    FieldError,
)

logger = logging.getLogger(__name__)


class CredentialField:
    """Set, verify and validate one secret stored as a salted digest.

    ``plaintext`` and ``confirmation`` only live in memory. ``digest`` is the
    value a record persists as ``<name>_digest``. All three are kept as plain
    strings in ``store``: a private dict by default, or a record's ``__dict__``
    so copies of the record never share state.
    """

    def __init__(
        self,
        *,
        name: str,
        hasher: SecretHasherPort,
        min_cost: bool = False,
        validations: bool = True,
        digest: str | None = None,
        store: MutableMapping[str, str | None] | None = None,
    ) -> None:
        self.name = name
        self._store: MutableMapping[str, str | None] = {} if store is None else store
        if digest is not None:
            self.digest = digest
        self._hasher = hasher
        self._min_cost = min_cost
        self._validations = validations

    @property
    def plaintext(self) -> str | None:
        return self._store.get(_plaintext_key(self.name))

    @property
    def confirmation(self) -> str | None:
        return self._store.get(_confirmation_key(self.name))

    @property
    def digest(self) -> str | None:
        return self._store.get(self.digest_name)

    @digest.setter
    def digest(self, value: str | None) -> None:
        self._store[self.digest_name] = value

    @property
    def confirmation_name(self) -> str:
        return f"{self.name}_confirmation"

    @property
    def digest_name(self) -> str:
        return f"{self.name}_digest"

    @property
    def cost(self) -> int:
        """Cost factor used for the next digest."""

        return self._hasher.min_cost if self._min_cost else self._hasher.default_cost

    def set_plaintext(self, value: str | None) -> None:
        """Store a new secret and recompute its digest.

        ``None`` clears the digest, an empty string changes nothing.
        """

        if value is None:
            self.digest = None
            logger.debug("credential_digest_cleared property=%s", self.name)
            return
        if value == "":
            return

        cost = self.cost
        self._store[_plaintext_key(self.name)] = value
        self.digest = self._hasher.hash_secret(value, cost=cost)
        logger.debug("credential_digest_updated property=%s cost=%s", self.name, cost)

    def set_confirmation(self, value: str | None) -> None:
        self._store[_confirmation_key(self.name)] = value

    def matches(self, candidate: str | None) -> bool:
        """Return whether candidate matches the stored digest."""

        return self._hasher.verify_secret(secret=candidate, digest=self.digest)

    def validate(self) -> list[FieldError]:
        """Run presence, length and confirmation checks and return all errors."""

        if not self._validations:
            return []

        errors: list[FieldError] = []
        if _is_blank(self.plaintext):
            errors.append(
                FieldError(
                    field=self.name,
                    kind=CredentialErrorKind.BLANK,
                    message="can't be blank",
                )
            )
        if (
            self.plaintext is not None
            and len(self.plaintext.encode("utf-8")) > MAX_SECRET_LENGTH
        ):
            errors.append(
                FieldError(
                    field=self.name,
                    kind=CredentialErrorKind.TOO_LONG,
                    message=f"is too long (maximum is {MAX_SECRET_LENGTH} bytes)",
                )
            )
        if not _is_blank(self.confirmation) and self.confirmation != self.plaintext:
            errors.append(
                FieldError(
                    field=self.confirmation_name,
                    kind=CredentialErrorKind.CONFIRMATION_MISMATCH,
                    message=f"doesn't match {self.name.replace('_', ' ').capitalize()}",
                )
            )
        return errors


def _plaintext_key(name: str) -> str:
    return f"_{name}_plaintext"


def _confirmation_key(name: str) -> str:
    return f"_{name}_confirmation"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()
