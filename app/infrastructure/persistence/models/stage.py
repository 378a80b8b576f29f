"""Pipeline stage ORM model."""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import OrganizationScopedModel


class Stage(OrganizationScopedModel, Base):
    """Stage of a sales pipeline; leads move between stages."""

    __tablename__ = "stage"

    name: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_stage_organization_position", "organization_id", "position"),
    )
