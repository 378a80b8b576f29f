"""Lead endpoints wired to in-memory repositories via dependency overrides."""

import pytest
from httpx import AsyncClient

from app.api.v1.dependencies import get_lead_service, get_team_member_repo
from app.infrastructure.security.jwt import create_access_token
from app.main import app


def _headers(member_id: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {create_access_token(member_id, 'org_acme')}",
        "X-Organization-ID": "org_acme",
    }


@pytest.fixture
def overrides(member_repo, lead_service):
    app.dependency_overrides[get_team_member_repo] = lambda: member_repo
    app.dependency_overrides[get_lead_service] = lambda: lead_service


async def test_get_lead(client: AsyncClient, overrides) -> None:
    response = await client.get("/api/v1/leads/lead_site", headers=_headers("bruno"))
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Site novo"
    assert data["stageId"] == "stage_new"
    assert data["version"] == 1


async def test_missing_lead_is_404(client: AsyncClient, overrides) -> None:
    response = await client.get("/api/v1/leads/nope", headers=_headers("bruno"))
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_agent_cannot_delete(client: AsyncClient, overrides, lead_repo, audit_repo) -> None:
    response = await client.delete("/api/v1/leads/lead_site", headers=_headers("bruno"))
    assert response.status_code == 403
    assert response.json() == {"error": "PERMISSION_DENIED", "message": "Not authorized"}
    assert "lead_site" in lead_repo.rows
    assert audit_repo.entries == []


async def test_manager_deletes(client: AsyncClient, overrides, lead_repo, audit_repo) -> None:
    response = await client.delete("/api/v1/leads/lead_site", headers=_headers("marcos"))
    assert response.status_code == 204
    assert "lead_site" not in lead_repo.rows
    assert [e.action for e in audit_repo.entries] == ["delete"]


async def test_move(client: AsyncClient, overrides, audit_repo) -> None:
    response = await client.post(
        "/api/v1/leads/lead_site/move",
        json={"stageId": "stage_won"},
        headers={**_headers("marcos"), "User-Agent": "crm-web/2.1"},
    )
    assert response.status_code == 200
    assert response.json()["stageId"] == "stage_won"
    [entry] = audit_repo.entries
    assert entry.action == "move"
    assert entry.user_agent == "crm-web/2.1"
    assert entry.ip_address is not None


async def test_patch_same_value_is_noop(client: AsyncClient, overrides, audit_repo) -> None:
    response = await client.patch(
        "/api/v1/leads/lead_site", json={"value": 5000}, headers=_headers("bruno")
    )
    assert response.status_code == 200
    assert response.json()["version"] == 1
    assert audit_repo.entries == []


async def test_patch_changes_fields(client: AsyncClient, overrides, audit_repo) -> None:
    response = await client.patch(
        "/api/v1/leads/lead_site",
        json={"value": 7500, "customFields": {"cnpj": "123"}},
        headers=_headers("bruno"),
    )
    assert response.status_code == 200
    assert response.json()["customFields"] == {"cnpj": "123"}
    assert audit_repo.entries[0].changes["after"] == {
        "value": 7500,
        "customFields": {"cnpj": "123"},
    }


async def test_create(client: AsyncClient, overrides, audit_repo) -> None:
    response = await client.post(
        "/api/v1/leads",
        json={"title": "Consultoria", "stageId": "stage_new", "value": 1200},
        headers=_headers("bruno"),
    )
    assert response.status_code == 201
    assert response.json()["organizationId"] == "org_acme"
    assert audit_repo.entries[0].action == "create"


async def test_create_with_unknown_stage_is_400(client: AsyncClient, overrides) -> None:
    response = await client.post(
        "/api/v1/leads",
        json={"title": "Consultoria", "stageId": "stage_missing"},
        headers=_headers("bruno"),
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "stageId"}


async def test_assign_and_unassign(client: AsyncClient, overrides, audit_repo) -> None:
    response = await client.post(
        "/api/v1/leads/lead_site/assign",
        json={"assignedTo": "bruno"},
        headers=_headers("marcos"),
    )
    assert response.json()["assignedTo"] == "bruno"
    response = await client.post(
        "/api/v1/leads/lead_site/assign",
        json={"assignedTo": None},
        headers=_headers("marcos"),
    )
    assert response.json()["assignedTo"] is None
    assert [e.action for e in audit_repo.entries] == ["assign", "assign"]


@pytest.mark.parametrize(
    "field", ["value", "currency", "priority", "temperature", "tags", "customFields"]
)
async def test_patch_null_required_field_is_400(
    client: AsyncClient, overrides, lead_repo, audit_repo, field
) -> None:
    response = await client.patch(
        "/api/v1/leads/lead_site", json={field: None}, headers=_headers("bruno")
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
    assert response.json()["details"] == {"field": field}
    assert lead_repo.rows["lead_site"].version == 1
    assert audit_repo.entries == []


async def test_patch_unknown_priority_is_422(client: AsyncClient, overrides, audit_repo) -> None:
    response = await client.patch(
        "/api/v1/leads/lead_site", json={"priority": "extreme"}, headers=_headers("bruno")
    )
    assert response.status_code == 422
    assert audit_repo.entries == []


async def test_patch_priority_and_temperature(client: AsyncClient, overrides) -> None:
    response = await client.patch(
        "/api/v1/leads/lead_site",
        json={"priority": "urgent", "temperature": "hot"},
        headers=_headers("bruno"),
    )
    assert response.status_code == 200
    assert response.json()["priority"] == "urgent"
    assert response.json()["temperature"] == "hot"


async def test_create_with_unknown_temperature_is_422(
    client: AsyncClient, overrides, lead_repo
) -> None:
    before = set(lead_repo.rows)
    response = await client.post(
        "/api/v1/leads",
        json={"title": "Consultoria", "stageId": "stage_new", "temperature": "boiling"},
        headers=_headers("bruno"),
    )
    assert response.status_code == 422
    assert set(lead_repo.rows) == before
