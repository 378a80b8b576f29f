"""Stage repository (SQLAlchemy). Implements IStageRepository."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.lead import StageResult
from app.infrastructure.persistence.models.stage import Stage
from app.infrastructure.persistence.repositories.base import BaseRepository


class StageRepository(BaseRepository[Stage]):
    """Read access to pipeline stages (stage names label move entries)."""

    resource_type = "stage"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Stage)

    async def get_by_id_and_organization(
        self, stage_id: str, organization_id: str
    ) -> StageResult | None:
        row = await self._get_scoped(stage_id, organization_id)
        if row is None:
            return None
        return StageResult(
            id=row.id,
            organization_id=row.organization_id,
            name=row.name,
            position=row.position,
        )
