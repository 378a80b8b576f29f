"""Pytest configuration and fixtures for the CRM audit service.

Uses app.main:app for HTTP tests and app.infrastructure.persistence.database
for DB-dependent fixtures. Env is set before app imports so settings load in
debug mode without a .env file. Unit and API tests share the in-memory
repositories below; SQL tests use db_session.
"""

import itertools
import os
from dataclasses import replace

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production-0123456789")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

import app.infrastructure.persistence.database as database  # noqa: E402
from app.application.dtos.audit_log import (  # noqa: E402
    AuditActorOption,
    AuditFilterOptions,
    AuditLogResult,
)
from app.application.dtos.lead import LEAD_FIELD_ATTRIBUTES, LeadResult, StageResult  # noqa: E402
from app.application.dtos.team_member import TeamMemberResult  # noqa: E402
from app.application.services.audit_writer import AuditWriter  # noqa: E402
from app.application.services.authorization_service import AuthorizationService  # noqa: E402
from app.application.use_cases.leads import LeadService  # noqa: E402
from app.application.use_cases.team import TeamMemberService  # noqa: E402
from app.domain.enums import MemberStatus, MemberType, Role  # noqa: E402
from app.domain.exceptions import ConcurrentWriteConflictException  # noqa: E402
from app.main import app  # noqa: E402
from app.shared.utils.generators import generate_cuid  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI). Clears dependency overrides after."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL pointing at a migrated PostgreSQL database. Skips
    (pytest.skip) when it is not configured. Use @pytest.mark.requires_db to
    mark tests that need this fixture; run without DB via:
    pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


# ---- In-memory repositories (unit and API tests) ----


ORG_ID = "org_acme"
OTHER_ORG_ID = "org_globex"
START_MILLIS = 1_700_000_000_000


class FakeClock:
    """Epoch-millis clock that advances one millisecond per call."""

    def __init__(self, start: int = START_MILLIS) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


class InMemoryAuditLogRepository:
    """Append-only list with the same ordering and cursor rules as the SQL repository.

    Ids are random CUIDs as in production; seq is the insertion counter.
    """

    def __init__(self) -> None:
        self.entries: list[AuditLogResult] = []
        self._seq = itertools.count(1)

    async def create(self, entry) -> AuditLogResult:
        result = AuditLogResult(id=generate_cuid(), seq=next(self._seq), **entry.__dict__)
        self.entries.append(result)
        return result

    async def list_page(self, organization_id, filters, after, limit):
        def matches(e: AuditLogResult) -> bool:
            return (
                e.organization_id == organization_id
                and (filters.severity is None or e.severity == filters.severity)
                and (filters.entity_type is None or e.entity_type == filters.entity_type)
                and (filters.action is None or e.action == filters.action)
                and (filters.actor_id is None or e.actor_id == filters.actor_id)
                and (filters.start_date is None or e.created_at >= filters.start_date)
                and (filters.end_date is None or e.created_at <= filters.end_date)
                and (
                    after is None
                    or (e.created_at, e.seq) < (after.created_at, after.seq)
                )
            )

        rows = sorted(
            (e for e in self.entries if matches(e)),
            key=lambda e: (e.created_at, e.seq),
            reverse=True,
        )
        return rows[:limit]

    async def get_filter_options(self, organization_id) -> AuditFilterOptions:
        scoped = [e for e in self.entries if e.organization_id == organization_id]
        actors: dict[str, AuditActorOption] = {}
        for e in sorted(scoped, key=lambda e: e.created_at):
            if e.actor_id is not None:
                actors[e.actor_id] = AuditActorOption(
                    id=e.actor_id, name=e.actor_name, type=e.actor_type
                )
        return AuditFilterOptions(
            entity_types=sorted({e.entity_type for e in scoped}),
            actions=sorted({e.action for e in scoped}),
            actors=sorted(actors.values(), key=lambda a: ((a.name or "").lower(), a.id)),
        )

    def for_org(self, organization_id: str = ORG_ID) -> list[AuditLogResult]:
        return [e for e in self.entries if e.organization_id == organization_id]


class _VersionedStore:
    """Rows keyed by id; writes must present the version they read."""

    resource_type = "resource"

    def __init__(self) -> None:
        self.rows: dict = {}

    def _get(self, entity_id, organization_id):
        row = self.rows.get(entity_id)
        if row is None or row.organization_id != organization_id:
            return None
        return row

    def _require(self, entity_id, organization_id, expected_version):
        row = self._get(entity_id, organization_id)
        if row is None or row.version != expected_version:
            raise ConcurrentWriteConflictException(self.resource_type, entity_id)
        return row


class InMemoryTeamMemberRepository(_VersionedStore):
    resource_type = "teamMember"

    def __init__(self) -> None:
        super().__init__()
        self._ids = itertools.count(1)

    def add(self, member: TeamMemberResult) -> TeamMemberResult:
        self.rows[member.id] = member
        return member

    async def get_by_id_and_organization(self, member_id, organization_id):
        return self._get(member_id, organization_id)

    async def create_member(self, organization_id, data, now):
        return self.add(
            TeamMemberResult(
                id=f"member{next(self._ids)}",
                organization_id=organization_id,
                name=data.name.strip(),
                email=data.email,
                role=Role(data.role).value,
                type=data.type,
                status=MemberStatus.ACTIVE,
                permissions_override=None,
                created_at=now,
                updated_at=now,
            )
        )

    async def update_fields(self, member_id, organization_id, expected_version, fields, now):
        row = self._require(member_id, organization_id, expected_version)
        if "status" in fields:
            fields = {**fields, "status": MemberStatus(fields["status"])}
        updated = replace(row, **fields, version=row.version + 1, updated_at=now)
        self.rows[member_id] = updated
        return updated


class InMemoryLeadRepository(_VersionedStore):
    resource_type = "lead"

    def __init__(self) -> None:
        super().__init__()
        self._ids = itertools.count(1)

    def add(self, lead: LeadResult) -> LeadResult:
        self.rows[lead.id] = lead
        return lead

    async def get_by_id_and_organization(self, lead_id, organization_id):
        return self._get(lead_id, organization_id)

    async def create_lead(self, organization_id, data, now):
        return self.add(
            LeadResult(
                id=f"lead{next(self._ids)}",
                organization_id=organization_id,
                created_at=now,
                updated_at=now,
                **data.__dict__,
            )
        )

    async def update_fields(self, lead_id, organization_id, expected_version, fields, now):
        row = self._require(lead_id, organization_id, expected_version)
        unknown = set(fields) - set(LEAD_FIELD_ATTRIBUTES.values())
        if unknown:
            raise ValueError(f"Lead has no attribute {sorted(unknown)[0]!r}")
        updated = replace(row, **fields, version=row.version + 1, updated_at=now)
        self.rows[lead_id] = updated
        return updated

    async def delete_lead(self, lead_id, organization_id, expected_version):
        self._require(lead_id, organization_id, expected_version)
        del self.rows[lead_id]


class InMemoryStageRepository:
    def __init__(self, stages: list[StageResult] | None = None) -> None:
        self.stages = {s.id: s for s in stages or []}

    async def get_by_id_and_organization(self, stage_id, organization_id):
        stage = self.stages.get(stage_id)
        if stage is None or stage.organization_id != organization_id:
            return None
        return stage


def make_member(
    member_id: str,
    role: Role | str = Role.AGENT,
    *,
    organization_id: str = ORG_ID,
    name: str | None = None,
    member_type: MemberType = MemberType.HUMAN,
    status: MemberStatus = MemberStatus.ACTIVE,
    permissions_override: dict | None = None,
) -> TeamMemberResult:
    return TeamMemberResult(
        id=member_id,
        organization_id=organization_id,
        name=name or member_id.capitalize(),
        email=f"{member_id}@acme.test",
        role=role.value if isinstance(role, Role) else role,
        type=member_type,
        status=status,
        permissions_override=permissions_override,
        created_at=START_MILLIS,
        updated_at=START_MILLIS,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def audit_repo() -> InMemoryAuditLogRepository:
    return InMemoryAuditLogRepository()


@pytest.fixture
def audit_writer(audit_repo, clock) -> AuditWriter:
    return AuditWriter(audit_repo, clock=clock)


@pytest.fixture
def member_repo() -> InMemoryTeamMemberRepository:
    """Members of ORG_ID: ana (admin), marcos (manager), bruno (agent), iris (AI)."""
    repo = InMemoryTeamMemberRepository()
    repo.add(make_member("ana", Role.ADMIN, name="Ana"))
    repo.add(make_member("marcos", Role.MANAGER, name="Marcos"))
    repo.add(make_member("bruno", Role.AGENT, name="Bruno"))
    repo.add(make_member("iris", Role.AI, name="Iris", member_type=MemberType.AI))
    repo.add(make_member("otto", Role.ADMIN, name="Otto", organization_id=OTHER_ORG_ID))
    return repo


@pytest.fixture
def stage_repo() -> InMemoryStageRepository:
    return InMemoryStageRepository(
        [
            StageResult(id="stage_new", organization_id=ORG_ID, name="Novo", position=0),
            StageResult(id="stage_won", organization_id=ORG_ID, name="Ganho", position=1),
            StageResult(id="stage_other", organization_id=OTHER_ORG_ID, name="Novo", position=0),
        ]
    )


@pytest.fixture
def lead_repo() -> InMemoryLeadRepository:
    repo = InMemoryLeadRepository()
    repo.add(
        LeadResult(
            id="lead_site",
            organization_id=ORG_ID,
            title="Site novo",
            contact_id="contact1",
            stage_id="stage_new",
            assigned_to=None,
            value=5000,
            currency="BRL",
            priority="medium",
            temperature="warm",
            created_at=START_MILLIS,
            updated_at=START_MILLIS,
        )
    )
    return repo


@pytest.fixture
def authorization() -> AuthorizationService:
    return AuthorizationService()


@pytest.fixture
def lead_service(lead_repo, stage_repo, member_repo, authorization, audit_writer, clock):
    return LeadService(
        lead_repo=lead_repo,
        stage_repo=stage_repo,
        member_repo=member_repo,
        gate=authorization,
        audit_writer=audit_writer,
        clock=clock,
    )


@pytest.fixture
def team_service(member_repo, authorization, audit_writer, clock):
    return TeamMemberService(
        member_repo=member_repo,
        authorization=authorization,
        audit_writer=audit_writer,
        clock=clock,
    )


@pytest.fixture
def org_id() -> str:
    return ORG_ID


@pytest.fixture
def other_org_id() -> str:
    return OTHER_ORG_ID


@pytest.fixture
def member_factory():
    """make_member(member_id, role, **kwargs) for members not in member_repo."""
    return make_member
