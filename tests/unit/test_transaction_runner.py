"""TransactionRunner: savepoint per attempt, retries on write conflicts only."""

from contextlib import asynccontextmanager

import pytest

from app.domain.exceptions import (
    AuthorizationException,
    ConcurrentWriteConflictException,
    ValidationException,
)
from app.infrastructure.persistence.transaction import TransactionRunner


class _FakeSession:
    """Records savepoints and cache expiry like AsyncSession would see them."""

    def __init__(self) -> None:
        self.savepoints = 0
        self.rolled_back = 0
        self.expired = 0

    @asynccontextmanager
    async def begin_nested(self):
        self.savepoints += 1
        try:
            yield
        except Exception:
            self.rolled_back += 1
            raise

    def expire_all(self) -> None:
        self.expired += 1


def _flaky(failures: int, result: str = "ok"):
    calls = {"n": 0}

    async def operation() -> str:
        calls["n"] += 1
        if calls["n"] <= failures:
            raise ConcurrentWriteConflictException("lead", "lead_site")
        return result

    return operation, calls


async def test_returns_result_on_first_attempt() -> None:
    session = _FakeSession()
    operation, calls = _flaky(0)
    assert await TransactionRunner(session).run(operation) == "ok"
    assert calls["n"] == 1
    assert session.savepoints == 1
    assert session.expired == 0


async def test_retries_conflicts_and_rereads() -> None:
    session = _FakeSession()
    operation, calls = _flaky(2)
    assert await TransactionRunner(session, max_retries=3).run(operation) == "ok"
    assert calls["n"] == 3
    assert session.rolled_back == 2
    assert session.expired == 2


async def test_gives_up_after_max_retries() -> None:
    session = _FakeSession()
    operation, calls = _flaky(10)
    with pytest.raises(ConcurrentWriteConflictException):
        await TransactionRunner(session, max_retries=2).run(operation)
    assert calls["n"] == 3


async def test_zero_retries_surfaces_first_conflict() -> None:
    session = _FakeSession()
    operation, calls = _flaky(1)
    with pytest.raises(ConcurrentWriteConflictException):
        await TransactionRunner(session, max_retries=0).run(operation)
    assert calls["n"] == 1


async def test_other_errors_are_not_retried() -> None:
    session = _FakeSession()
    calls = {"n": 0}

    async def operation() -> None:
        calls["n"] += 1
        raise ValidationException("Stage not found in organization", field="stageId")

    with pytest.raises(ValidationException):
        await TransactionRunner(session).run(operation)
    assert calls["n"] == 1
    assert session.rolled_back == 1
    assert session.expired == 0


async def test_service_retry_rereads_and_writes_once(
    lead_service, lead_repo, audit_repo, member_repo
) -> None:
    """A concurrent write between load and write is retried against the fresh row."""
    real_update = lead_repo.update_fields
    state = {"interfered": False}

    async def racing_update(lead_id, organization_id, expected_version, fields, now):
        if not state["interfered"]:
            state["interfered"] = True
            await real_update(lead_id, organization_id, expected_version, {"priority": "high"}, now)
        return await real_update(lead_id, organization_id, expected_version, fields, now)

    lead_repo.update_fields = racing_update
    lead_service.runner = TransactionRunner(_FakeSession())
    manager = await member_repo.get_by_id_and_organization("marcos", "org_acme")
    moved = await lead_service.move_lead(manager, "org_acme", "lead_site", "stage_won")
    assert moved.stage_id == "stage_won"
    assert moved.priority == "high"
    assert moved.version == 3
    assert [e.action for e in audit_repo.entries] == ["move"]


async def test_service_retry_reauthorizes_current_actor(
    lead_service, lead_repo, audit_repo, member_repo
) -> None:
    """A manager demoted during a conflicting write is denied on the retry."""
    real_delete = lead_repo.delete_lead
    state = {"interfered": False}

    async def racing_delete(lead_id, organization_id, expected_version):
        if not state["interfered"]:
            state["interfered"] = True
            await lead_repo.update_fields(
                lead_id, organization_id, expected_version, {"priority": "high"}, 2
            )
            marcos = await member_repo.get_by_id_and_organization("marcos", organization_id)
            await member_repo.update_fields(
                "marcos", organization_id, marcos.version, {"role": "agent"}, 2
            )
        return await real_delete(lead_id, organization_id, expected_version)

    lead_repo.delete_lead = racing_delete
    lead_service.runner = TransactionRunner(_FakeSession())
    manager = await member_repo.get_by_id_and_organization("marcos", "org_acme")
    with pytest.raises(AuthorizationException):
        await lead_service.delete_lead(manager, "org_acme", "lead_site")
    assert "lead_site" in lead_repo.rows
    assert audit_repo.entries == []
