"""SQLAlchemy helpers for persisting credential digests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import sqlalchemy as sa

from secure_prop.application.services.secure_record import credential_field, secure_properties


def digest_column_name(property_name: str) -> str:
    return f"{property_name}_digest"


def digest_column(property_name: str) -> sa.Column[str]:
    """Return the nullable text column storing one property's digest."""

    return sa.Column(digest_column_name(property_name), sa.Text(), nullable=True)


def digest_columns(record_type: type) -> list[sa.Column[str]]:
    """Return one digest column per secure property attached to the record type."""

    return [digest_column(name) for name in secure_properties(record_type)]


def dump_digests(record: object) -> dict[str, str | None]:
    """Return insert/update values for every digest column of the record."""

    return {
        digest_column_name(name): credential_field(record, name).digest
        for name in secure_properties(type(record))
    }


def load_digests(record: object, row: Mapping[str, Any]) -> None:
    """Copy stored digests from a row mapping into the record without rehashing."""

    for name in secure_properties(type(record)):
        column_name = digest_column_name(name)
        if column_name in row:
            credential_field(record, name).digest = row[column_name]
