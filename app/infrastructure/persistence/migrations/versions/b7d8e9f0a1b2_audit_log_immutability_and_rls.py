"""audit_log immutability trigger and organization RLS

Revision ID: b7d8e9f0a1b2
Revises: a1c2e3f4b5d6
Create Date: 2026-10-19

audit_log is append-only: a BEFORE UPDATE OR DELETE trigger rejects every
change at the database level (in addition to the ORM listeners). Row-level
security limits visible rows to current_setting('app.current_organization_id'),
which the application sets per request. Migrations and admin scripts should
use a role with BYPASSRLS; the application role must not own the table.
"""

from typing import Sequence, Union

from alembic import op

revision: str = "b7d8e9f0a1b2"
down_revision: Union[str, Sequence[str], None] = "a1c2e3f4b5d6"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_PREVENT_MUTATION_FUNCTION = """
CREATE OR REPLACE FUNCTION prevent_audit_log_mutation()
RETURNS TRIGGER
LANGUAGE plpgsql
AS $$
BEGIN
    RAISE EXCEPTION 'audit_log rows are append-only and cannot be updated or deleted'
        USING ERRCODE = 'integrity_constraint_violation';
END;
$$
"""


def upgrade() -> None:
    op.execute(_PREVENT_MUTATION_FUNCTION)
    op.execute(
        "CREATE TRIGGER prevent_audit_log_update_delete "
        "BEFORE UPDATE OR DELETE ON audit_log "
        "FOR EACH ROW EXECUTE PROCEDURE prevent_audit_log_mutation()"
    )
    op.execute("ALTER TABLE audit_log ENABLE ROW LEVEL SECURITY")
    op.execute(
        "CREATE POLICY organization_isolation ON audit_log "
        "USING (organization_id = current_setting('app.current_organization_id', true)) "
        "WITH CHECK (organization_id = current_setting('app.current_organization_id', true))"
    )


def downgrade() -> None:
    op.execute("DROP POLICY IF EXISTS organization_isolation ON audit_log")
    op.execute("ALTER TABLE audit_log DISABLE ROW LEVEL SECURITY")
    op.execute("DROP TRIGGER IF EXISTS prevent_audit_log_update_delete ON audit_log")
    op.execute("DROP FUNCTION IF EXISTS prevent_audit_log_mutation()")
