"""Audit log ORM model. Append-only record of authorized mutations."""

from typing import Any

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Connection,
    ForeignKey,
    Identity,
    Index,
    String,
    Text,
    event,
)
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from app.domain.enums import Severity
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import JsonType
from app.shared.enums import ActorType
from app.shared.utils.generators import generate_cuid


def _sql_in(values: list[str]) -> str:
    return ", ".join(f"'{v}'" for v in values)


class AuditLog(Base):
    """One immutable audit entry. No update/delete.

    actor_id carries no foreign key: entries outlive the members who wrote
    them and render from actor_name captured at write time.
    """

    __tablename__ = "audit_log"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)
    # Insertion order, assigned by the database; breaks created_at ties.
    seq: Mapped[int] = mapped_column(
        BigInteger, Identity(always=True), nullable=False, unique=True
    )
    organization_id: Mapped[str] = mapped_column(
        String, ForeignKey("organization.id"), nullable=False
    )
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    actor_id: Mapped[str | None] = mapped_column(String, nullable=True)
    actor_type: Mapped[str] = mapped_column(String, nullable=False)
    actor_name: Mapped[str | None] = mapped_column(String, nullable=True)
    changes: Mapped[dict[str, Any] | None] = mapped_column(JsonType, nullable=True)
    # "metadata" is reserved on declarative classes.
    entry_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JsonType, nullable=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    severity: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String, nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)

    # seq is read back with RETURNING on insert.
    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        CheckConstraint(
            f"severity IN ({_sql_in(Severity.values())})", name="ck_audit_log_severity"
        ),
        CheckConstraint(
            f"actor_type IN ({_sql_in(ActorType.values())})",
            name="ck_audit_log_actor_type",
        ),
        Index("ix_audit_log_org_created", "organization_id", "created_at", "seq"),
        Index(
            "ix_audit_log_org_severity_created",
            "organization_id",
            "severity",
            "created_at",
        ),
        Index(
            "ix_audit_log_org_entity_type_created",
            "organization_id",
            "entity_type",
            "created_at",
        ),
        Index(
            "ix_audit_log_org_action_created",
            "organization_id",
            "action",
            "created_at",
        ),
        Index(
            "ix_audit_log_org_actor_created",
            "organization_id",
            "actor_id",
            "created_at",
        ),
    )


@event.listens_for(AuditLog, "before_update")
def _prevent_audit_log_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: AuditLog
) -> None:
    """Audit log entries are append-only; updates are forbidden."""
    raise ValueError("Audit log entries are immutable and cannot be updated.")


@event.listens_for(AuditLog, "before_delete")
def _prevent_audit_log_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: AuditLog
) -> None:
    """Audit log entries cannot be deleted."""
    raise ValueError("Audit log entries cannot be deleted.")
