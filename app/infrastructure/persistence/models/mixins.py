"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, OrganizationMixin, EpochTimestampMixin and the combined
OrganizationScopedModel. Timestamps are epoch milliseconds set by the
application clock so ordering matches what the audit trail records.
"""

from typing import Any

from sqlalchemy import JSON, BigInteger, ForeignKey, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.shared.utils.generators import generate_cuid

# JSONB on PostgreSQL, plain JSON elsewhere.
JsonType: Any = JSON().with_variant(JSONB(), "postgresql")


class CuidMixin:
    """Mixin for models using CUID as primary key."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class OrganizationMixin:
    """Mixin for tenant-scoped models: organization_id FK with CASCADE delete."""

    @declared_attr
    def organization_id(cls) -> Mapped[str]:
        return mapped_column(
            String,
            ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class EpochTimestampMixin:
    """Mixin for created_at and updated_at as epoch milliseconds."""

    @declared_attr
    def created_at(cls) -> Mapped[int]:
        return mapped_column(BigInteger, nullable=False)

    @declared_attr
    def updated_at(cls) -> Mapped[int]:
        return mapped_column(BigInteger, nullable=False)


class OrganizationScopedModel(CuidMixin, OrganizationMixin, EpochTimestampMixin):
    """Combined mixin: CUID + organization_id + created_at/updated_at."""

    __abstract__ = True
