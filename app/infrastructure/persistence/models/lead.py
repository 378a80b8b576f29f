"""Lead ORM model with optimistic locking."""

from typing import Any

from sqlalchemy import Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    JsonType,
    OrganizationScopedModel,
)


class Lead(OrganizationScopedModel, Base):
    """Sales opportunity tracked through pipeline stages."""

    __tablename__ = "lead"

    title: Mapped[str] = mapped_column(String, nullable=False)
    contact_id: Mapped[str | None] = mapped_column(String, nullable=True)
    stage_id: Mapped[str] = mapped_column(
        String, ForeignKey("stage.id", ondelete="RESTRICT"), nullable=False
    )
    assigned_to: Mapped[str | None] = mapped_column(
        String, ForeignKey("team_member.id", ondelete="SET NULL"), nullable=True
    )
    value: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="BRL")
    priority: Mapped[str] = mapped_column(String, nullable=False, default="medium")
    temperature: Mapped[str] = mapped_column(String, nullable=False, default="cold")
    tags: Mapped[list[str]] = mapped_column(JsonType, nullable=False, default=list)
    custom_fields: Mapped[dict[str, Any]] = mapped_column(
        JsonType, nullable=False, default=dict
    )
    source_id: Mapped[str | None] = mapped_column(String, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_lead_organization_stage", "organization_id", "stage_id"),
        Index("ix_lead_organization_assigned_to", "organization_id", "assigned_to"),
    )
