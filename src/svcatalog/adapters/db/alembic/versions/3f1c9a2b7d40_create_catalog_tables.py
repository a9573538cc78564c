"""Create service and version tables

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from svcatalog.adapters.db.sa_types import UTCDateTime

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f1c9a2b7d40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "service",
        sa.Column("seq", sa.Integer(), sa.Identity(start=1), nullable=False),
        sa.Column(
            "id",
            sa.String(length=64),
            nullable=False,
            comment="Opaque service identifier, assigned once on creation.",
        ),
        sa.Column(
            "version",
            sa.Integer(),
            nullable=False,
            comment="Per-service version (starts at 0); used for optimistic concurrency.",
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("desc", sa.Text(), nullable=False),
        sa.Column(
            "updated",
            UTCDateTime(),
            nullable=False,
            comment="Store-assigned UTC timestamp of this row.",
        ),
        sa.CheckConstraint(
            "version >= 0", name=op.f("ck_service_non_negative_version")
        ),
        sa.PrimaryKeyConstraint("seq", name=op.f("pk_service")),
        sa.UniqueConstraint("id", "version", name=op.f("uq_service_id_version")),
        comment="Append-only service rows. The highest version per id is current.",
    )
    op.create_index(op.f("ix_service_name"), "service", ["name"], unique=False)
    op.create_index(op.f("ix_service_desc"), "service", ["desc"], unique=False)

    op.create_table(
        "version",
        sa.Column("seq", sa.Integer(), sa.Identity(start=1), nullable=False),
        sa.Column("service_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "created",
            UTCDateTime(),
            nullable=False,
            comment="Store-assigned UTC creation timestamp.",
        ),
        sa.PrimaryKeyConstraint("seq", name=op.f("pk_version")),
        sa.UniqueConstraint(
            "service_id", "name", name=op.f("uq_version_service_id_name")
        ),
        comment="Immutable service versions.",
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("version")
    op.drop_index(op.f("ix_service_desc"), table_name="service")
    op.drop_index(op.f("ix_service_name"), table_name="service")
    op.drop_table("service")
