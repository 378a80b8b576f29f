"""AuditWriter: severity classification, validation, description, request stamps."""

import pytest

from app.application.dtos.audit_log import SYSTEM_ACTOR_NAME, AuditActor, AuditChanges
from app.application.services.audit_writer import classify_severity
from app.domain.enums import Severity
from app.domain.exceptions import IntegrityViolationException, ValidationException
from app.shared.context import clear_request_context, set_request_context
from app.shared.enums import ActorType, AuditAction


@pytest.mark.parametrize(
    ("entity_type", "action", "expected"),
    [
        ("lead", "create", Severity.MEDIUM),
        ("lead", "update", Severity.LOW),
        ("lead", "delete", Severity.MEDIUM),
        ("lead", "move", Severity.MEDIUM),
        ("lead", "assign", Severity.MEDIUM),
        ("handoff", "handoff", Severity.MEDIUM),
        ("teamMember", "delete", Severity.HIGH),
        ("apiKey", "delete", Severity.HIGH),
        ("webhook", "delete", Severity.HIGH),
        ("organization", "delete", Severity.CRITICAL),
    ],
)
def test_classify_severity(entity_type, action, expected) -> None:
    assert classify_severity(entity_type, action) == expected


def test_access_changes_are_high() -> None:
    severity = classify_severity("teamMember", AuditAction.UPDATE, access_change=True)
    assert severity == Severity.HIGH


async def test_record_stores_described_entry(audit_writer, audit_repo, member_factory) -> None:
    actor = AuditActor.from_member(member_factory("marcos", name="Marcos"))
    entry_id = await audit_writer.record(
        organization_id="org_acme",
        entity_type="lead",
        entity_id="lead_site",
        action=AuditAction.MOVE,
        actor=actor,
        severity=Severity.MEDIUM,
        changes=AuditChanges(before={"stageId": "s1"}, after={"stageId": "s2"}),
        metadata={"title": "Site novo", "fromStageName": "Novo", "toStageName": "Ganho"},
    )
    [entry] = audit_repo.entries
    assert entry.id == entry_id
    assert entry.action == "move"
    assert entry.severity == "medium"
    assert entry.actor_type == "human"
    assert entry.actor_name == "Marcos"
    assert entry.changes == {"before": {"stageId": "s1"}, "after": {"stageId": "s2"}}
    assert entry.description == "Marcos moveu o lead 'Site novo' de 'Novo' para 'Ganho'"
    assert entry.created_at > 0


async def test_record_stamps_request_context(audit_writer, audit_repo) -> None:
    set_request_context(ip_address="10.0.0.7", user_agent="pytest", request_id="req-1")
    try:
        await audit_writer.record(
            organization_id="org_acme",
            entity_type="lead",
            entity_id="lead_site",
            action="delete",
            actor=AuditActor.system(),
            severity="medium",
            metadata={"name": "Site novo"},
        )
    finally:
        clear_request_context()
    [entry] = audit_repo.entries
    assert entry.ip_address == "10.0.0.7"
    assert entry.user_agent == "pytest"


async def test_system_actor_without_request(audit_writer, audit_repo) -> None:
    await audit_writer.record(
        organization_id="org_acme",
        entity_type="organization",
        entity_id="org_acme",
        action="update",
        actor=AuditActor.system(),
        severity="low",
    )
    [entry] = audit_repo.entries
    assert entry.actor_id is None
    assert entry.actor_type == ActorType.SYSTEM.value
    assert entry.actor_name == SYSTEM_ACTOR_NAME
    assert entry.ip_address is None
    assert entry.metadata is None


async def test_ai_actor_type_is_recorded(audit_writer, audit_repo, member_repo) -> None:
    iris = await member_repo.get_by_id_and_organization("iris", "org_acme")
    await audit_writer.record(
        organization_id="org_acme",
        entity_type="lead",
        entity_id="lead_site",
        action="update",
        actor=AuditActor.from_member(iris),
        severity="low",
    )
    assert audit_repo.entries[0].actor_type == "ai"


@pytest.mark.parametrize(
    ("field", "kwargs"),
    [
        ("severity", {"severity": "urgent"}),
        ("action", {"action": "archive"}),
        ("actor_type", {"actor": AuditActor(id="x", type="robot", name="R")}),
    ],
)
async def test_record_rejects_unknown_values(audit_writer, audit_repo, field, kwargs) -> None:
    params = {
        "organization_id": "org_acme",
        "entity_type": "lead",
        "entity_id": "lead_site",
        "action": "update",
        "actor": AuditActor.system(),
        "severity": "low",
        **kwargs,
    }
    with pytest.raises(IntegrityViolationException) as exc_info:
        await audit_writer.record(**params)
    assert exc_info.value.details["field"] == field
    assert audit_repo.entries == []


async def test_record_rejects_mistyped_metadata(audit_writer, audit_repo) -> None:
    with pytest.raises(ValidationException):
        await audit_writer.record(
            organization_id="org_acme",
            entity_type="lead",
            entity_id="lead_site",
            action="create",
            actor=AuditActor.system(),
            severity="medium",
            metadata={"title": ["not", "a", "string"]},
        )
    assert audit_repo.entries == []
