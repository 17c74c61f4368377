from __future__ import annotations

from uuid import uuid4

import sqlalchemy as sa

from secure_prop.application.services.secure_record import SecureRecordMixin, has_secure
from secure_prop.infrastructure.db.digest_columns import (
    digest_column,
    digest_columns,
    dump_digests,
    load_digests,
)
from secure_prop.infrastructure.security.bcrypt_hasher import BcryptSecretHasher


@has_secure("password", "api_token", hasher=BcryptSecretHasher(), min_cost=True)
class Member(SecureRecordMixin):
    def __init__(self, *, email: str) -> None:
        self.email = email


def _members_table(metadata: sa.MetaData) -> sa.Table:
    return sa.Table(
        "members",
        metadata,
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        *digest_columns(Member),
    )


def test_digest_column_is_nullable_text() -> None:
    column = digest_column("password")

    assert column.name == "password_digest"
    assert column.nullable is True
    assert isinstance(column.type, sa.Text)


def test_dump_digests_covers_every_property() -> None:
    member = Member(email="member@example.com")
    member.password = "pw-value"

    values = dump_digests(member)

    assert set(values) == {"password_digest", "api_token_digest"}
    assert values["password_digest"] == member.password_digest
    assert values["api_token_digest"] is None


def test_digest_round_trip_through_sqlite_verifies_original_secret() -> None:
    engine = sa.create_engine("sqlite+pysqlite:///:memory:")
    metadata = sa.MetaData()
    members = _members_table(metadata)
    metadata.create_all(engine)

    member = Member(email="member@example.com")
    member.password = "mUc3m00RsqyRe"
    member_id = uuid4()

    with engine.begin() as connection:
        connection.execute(
            sa.insert(members).values(id=member_id, email=member.email, **dump_digests(member))
        )

    with engine.connect() as connection:
        row = connection.execute(
            sa.select(members).where(members.c.id == member_id)
        ).mappings().one()

    reloaded = Member(email=row["email"])
    load_digests(reloaded, row)

    assert row["password_digest"] != "mUc3m00RsqyRe"
    assert reloaded.password is None
    assert reloaded.authenticate("password", "mUc3m00RsqyRe") is reloaded
    assert reloaded.authenticate("password", "wrong") is False
    assert reloaded.authenticate("api_token", "") is False


def test_load_digests_ignores_missing_columns() -> None:
    member = Member(email="member@example.com")
    member.password = "pw-value"
    digest = member.password_digest

    load_digests(member, {"api_token_digest": None})

    assert member.password_digest == digest
    assert member.api_token_digest is None
