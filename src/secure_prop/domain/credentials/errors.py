"""Validation error model for credential fields."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

# Longest secret, in UTF-8 bytes, the hash primitive reads in full.
MAX_SECRET_LENGTH = 72


class CredentialErrorKind(StrEnum):
    """Symbolic validation error kinds."""

    BLANK = "blank"
    TOO_LONG = "too_long"
    CONFIRMATION_MISMATCH = "confirmation_mismatch"


@dataclass(frozen=True)
class FieldError:
    """One user-facing validation error attached to a record field."""

    field: str
    kind: CredentialErrorKind
    message: str


def group_errors_by_field(errors: Iterable[FieldError]) -> dict[str, list[CredentialErrorKind]]:
    """Collect error kinds per field name, preserving first-seen order."""

    grouped: dict[str, list[CredentialErrorKind]] = {}
    for error in errors:
        grouped.setdefault(error.field, []).append(error.kind)
    return grouped
