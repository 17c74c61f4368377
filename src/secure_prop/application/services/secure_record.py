"""Attach credential fields to record types and operate on them per instance."""

from __future__ import annotations

import keyword
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal, Self, TypeVar

from secure_prop.application.ports.secret_hasher_port import SecretHasherPort
from secure_prop.application.services.credential_field import CredentialField
from secure_prop.domain.credentials.errors import FieldError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")
RecordTypeT = TypeVar("RecordTypeT", bound=type)

_REGISTRY_ATTR = "__secure_properties__"


class SecurePropertyAttachError(TypeError):
    """Raised when a record type cannot carry credential fields."""

    def __init__(self, *, record_type: object, reason: str) -> None:
        super().__init__(f"cannot attach secure property to {record_type!r}: {reason}")
        self.record_type = record_type
        self.reason = reason


class UnknownSecurePropertyError(LookupError):
    """Raised when a property name was never attached to the record type."""

    def __init__(self, *, record_type: type, property_name: str) -> None:
        super().__init__(f"{record_type.__name__} has no secure property {property_name!r}")
        self.record_type = record_type
        self.property_name = property_name


@dataclass(frozen=True)
class SecurePropertyConfig:
    """Per-property configuration captured at attach time."""

    name: str
    hasher: SecretHasherPort
    min_cost: bool
    validations: bool

    def bind(self, record: object) -> CredentialField:
        """Return a field view over the record's own attribute storage."""

        return CredentialField(
            name=self.name,
            hasher=self.hasher,
            min_cost=self.min_cost,
            validations=self.validations,
            store=vars(record),
        )


class _CredentialAttribute:
    """Data descriptor routing one record attribute into its credential field."""

    def __init__(self, property_name: str, attribute_name: str) -> None:
        self.property_name = property_name
        self.attribute_name = attribute_name

    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self._read(credential_field(instance, self.property_name))

    def __set__(self, instance: object, value: str | None) -> None:
        if value is not None and not isinstance(value, str):
            raise TypeError(
                f"{type(instance).__name__}.{self.attribute_name} must be str or None, "
                f"got {type(value).__name__}"
            )
        self._write(credential_field(instance, self.property_name), value)

    def _read(self, field: CredentialField) -> str | None:
        raise NotImplementedError

    def _write(self, field: CredentialField, value: str | None) -> None:
        raise NotImplementedError


class _PlaintextAttribute(_CredentialAttribute):
    def _read(self, field: CredentialField) -> str | None:
        return field.plaintext

    def _write(self, field: CredentialField, value: str | None) -> None:
        field.set_plaintext(value)


class _ConfirmationAttribute(_CredentialAttribute):
    def _read(self, field: CredentialField) -> str | None:
        return field.confirmation

    def _write(self, field: CredentialField, value: str | None) -> None:
        field.set_confirmation(value)


class _DigestAttribute(_CredentialAttribute):
    """Persisted digest; writes load a stored value without rehashing.

    Class access yields ``None`` so dataclasses built over an attached class
    use it as the field default.
    """

    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return None
        return super().__get__(instance, owner)

    def _read(self, field: CredentialField) -> str | None:
        return field.digest

    def _write(self, field: CredentialField, value: str | None) -> None:
        field.digest = value


def attach_secure(
    record_type: type,
    *properties: str,
    hasher: SecretHasherPort,
    min_cost: bool = False,
    validations: bool = True,
) -> None:
    """Install ``P``, ``P_confirmation`` and ``P_digest`` attributes on a record type.

    Example::

        class User(SecureRecordMixin):
            def __init__(self, *, name: str, password_digest: str | None = None) -> None:
                self.name = name
                self.password_digest = password_digest

        attach_secure(User, "password", hasher=BcryptSecretHasher())

        user = User(name="david")
        user.password = "mUc3m00RsqyRe"
        user.authenticate("password", "notright")       # => False
        user.authenticate("password", "mUc3m00RsqyRe")  # => user
    """

    _require_attachable(record_type, properties)

    registry = dict(secure_properties(record_type))
    for name in properties:
        registry[name] = SecurePropertyConfig(
            name=name,
            hasher=hasher,
            min_cost=min_cost,
            validations=validations,
        )
        for attribute in (
            _PlaintextAttribute(name, name),
            _ConfirmationAttribute(name, f"{name}_confirmation"),
            _DigestAttribute(name, f"{name}_digest"),
        ):
            setattr(record_type, attribute.attribute_name, attribute)
        logger.info(
            "secure_property_attached record_type=%s property=%s validations=%s",
            record_type.__name__,
            name,
            validations,
        )
    setattr(record_type, _REGISTRY_ATTR, registry)


def has_secure(
    *properties: str,
    hasher: SecretHasherPort,
    min_cost: bool = False,
    validations: bool = True,
) -> Callable[[RecordTypeT], RecordTypeT]:
    """Class decorator form of :func:`attach_secure`."""

    def decorate(record_type: RecordTypeT) -> RecordTypeT:
        attach_secure(
            record_type,
            *properties,
            hasher=hasher,
            min_cost=min_cost,
            validations=validations,
        )
        return record_type

    return decorate


def secure_properties(record_type: type) -> Mapping[str, SecurePropertyConfig]:
    """Return attached properties in registration order, including inherited ones."""

    registry: dict[str, SecurePropertyConfig] = getattr(record_type, _REGISTRY_ATTR, {})
    return MappingProxyType(registry)


def credential_field(record: object, property_name: str) -> CredentialField:
    """Return the credential field for one property, backed by the record's attributes."""

    config = secure_properties(type(record)).get(property_name)
    if config is None:
        raise UnknownSecurePropertyError(record_type=type(record), property_name=property_name)

    return config.bind(record)


def authenticate(
    record: RecordT,
    property_name: str,
    candidate: str | None,
) -> RecordT | Literal[False]:
    """Return the record when candidate matches the stored digest, otherwise False."""

    if credential_field(record, property_name).matches(candidate):
        return record
    return False


def validate_credentials(record: object) -> list[FieldError]:
    """Run declarative checks for every attached property and accumulate errors."""

    errors: list[FieldError] = []
    for name in secure_properties(type(record)):
        errors.extend(credential_field(record, name).validate())
    return errors


class SecureRecordMixin:
    """Record base exposing credential operations as methods."""

    def authenticate(self, property_name: str, candidate: str | None) -> Self | Literal[False]:
        return authenticate(self, property_name, candidate)

    def validate_credentials(self) -> list[FieldError]:
        return validate_credentials(self)


def _require_attachable(record_type: object, properties: tuple[str, ...]) -> None:
    if not isinstance(record_type, type):
        raise SecurePropertyAttachError(record_type=record_type, reason="not a class")
    if not properties:
        raise SecurePropertyAttachError(record_type=record_type, reason="no property given")
    if getattr(record_type, "__dictoffset__", 0) == 0:
        raise SecurePropertyAttachError(
            record_type=record_type,
            reason="instances have no __dict__ for per-record state",
        )
    for name in properties:
        if not name.isidentifier() or keyword.iskeyword(name):
            raise SecurePropertyAttachError(
                record_type=record_type,
                reason=f"invalid property name {name!r}",
            )
