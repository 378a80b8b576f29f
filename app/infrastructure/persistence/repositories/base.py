"""Base repository: organization-scoped loading and optimistic-locked updates."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.domain.exceptions import ConcurrentWriteConflictException
from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository for organization-scoped models.

    Every lookup filters by organization_id; there is no tenant-less get.
    Versioned models (version_id_col) raise ConcurrentWriteConflictException
    when the row moved past the version the caller read.
    """

    resource_type: str = "resource"

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_scoped(self, entity_id: str, organization_id: str) -> ModelType | None:
        """Return the row if it exists and belongs to the organization."""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).where(
                model.id == entity_id, model.organization_id == organization_id
            )
        )
        return result.scalar_one_or_none()

    async def _add(self, obj: ModelType) -> ModelType:
        """Persist a new row and reload server-side values."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _require_version(
        self, entity_id: str, organization_id: str, expected_version: int
    ) -> ModelType:
        row = await self._get_scoped(entity_id, organization_id)
        if row is None or getattr(row, "version") != expected_version:
            raise ConcurrentWriteConflictException(self.resource_type, entity_id)
        return row

    async def _update_versioned(
        self,
        entity_id: str,
        organization_id: str,
        expected_version: int,
        fields: dict[str, Any],
        now: int,
    ) -> ModelType:
        """Apply fields to the row at expected_version; flush bumps the version."""
        row = await self._require_version(entity_id, organization_id, expected_version)
        for name, value in fields.items():
            if not hasattr(self.model, name):
                raise ValueError(f"{self.model.__name__} has no attribute '{name}'")
            setattr(row, name, value)
        setattr(row, "updated_at", now)
        await self._flush(entity_id)
        await self.db.refresh(row)
        return row

    async def _delete_versioned(
        self, entity_id: str, organization_id: str, expected_version: int
    ) -> None:
        row = await self._require_version(entity_id, organization_id, expected_version)
        await self.db.delete(row)
        await self._flush(entity_id)

    async def _flush(self, entity_id: str) -> None:
        try:
            await self.db.flush()
        except StaleDataError as exc:
            raise ConcurrentWriteConflictException(
                self.resource_type, entity_id
            ) from exc
