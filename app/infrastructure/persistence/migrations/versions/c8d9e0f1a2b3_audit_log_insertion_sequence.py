"""audit_log insertion sequence

Revision ID: c8d9e0f1a2b3
Revises: b7d8e9f0a1b2
Create Date: 2026-10-19

Adds seq, a database-assigned identity, as the tie-break of the audit
ordering (created_at DESC, seq DESC). Ids are random CUIDs and cannot order
entries that share a millisecond. Existing rows are numbered when the
column is added.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "c8d9e0f1a2b3"
down_revision: Union[str, Sequence[str], None] = "b7d8e9f0a1b2"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "audit_log",
        sa.Column("seq", sa.BigInteger(), sa.Identity(always=True), nullable=False),
    )
    op.create_unique_constraint("uq_audit_log_seq", "audit_log", ["seq"])
    op.drop_index("ix_audit_log_org_created", table_name="audit_log")
    op.create_index(
        "ix_audit_log_org_created", "audit_log", ["organization_id", "created_at", "seq"]
    )


def downgrade() -> None:
    op.drop_index("ix_audit_log_org_created", table_name="audit_log")
    op.create_index(
        "ix_audit_log_org_created", "audit_log", ["organization_id", "created_at", "id"]
    )
    op.drop_constraint("uq_audit_log_seq", "audit_log", type_="unique")
    op.drop_column("audit_log", "seq")
