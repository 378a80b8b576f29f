"""Team member ORM model (human or AI agent) with optimistic locking."""

from typing import Any

from sqlalchemy import CheckConstraint, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    JsonType,
    OrganizationScopedModel,
)


class TeamMember(OrganizationScopedModel, Base):
    """Member of an organization.

    role is stored as text without a CHECK so an out-of-range value surfaces
    as an integrity error at resolution time instead of being coerced.
    permissions_override, when set, is a complete permissions object.
    """

    __tablename__ = "team_member"

    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    permissions_override: Mapped[dict[str, Any] | None] = mapped_column(
        JsonType, nullable=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("type IN ('human', 'ai')", name="ck_team_member_type"),
        CheckConstraint(
            "status IN ('active', 'inactive', 'busy')", name="ck_team_member_status"
        ),
        Index("ix_team_member_organization_email", "organization_id", "email"),
    )
