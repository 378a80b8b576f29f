"""Request/response schemas for lead API."""

from typing import Any, Literal

from pydantic import Field

from app.schemas.common import CamelModel

LeadPriority = Literal["low", "medium", "high", "urgent"]
LeadTemperature = Literal["cold", "warm", "hot"]


class LeadCreateRequest(CamelModel):
    """Body for POST /leads."""

    title: str = Field(..., min_length=1, max_length=500)
    stage_id: str
    contact_id: str | None = None
    assigned_to: str | None = None
    value: float = Field(0, ge=0)
    currency: str = Field("BRL", min_length=3, max_length=3)
    priority: LeadPriority = "medium"
    temperature: LeadTemperature = "cold"
    tags: list[str] = Field(default_factory=list)
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    source_id: str | None = None


class LeadUpdateRequest(CamelModel):
    """Body for PATCH /leads/{id}: only fields sent are compared and changed.

    None is accepted here so the service can report an explicit null on a
    required field as a validation error naming that field.
    """

    title: str | None = Field(None, min_length=1, max_length=500)
    stage_id: str | None = None
    contact_id: str | None = None
    assigned_to: str | None = None
    value: float | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    priority: LeadPriority | None = None
    temperature: LeadTemperature | None = None
    tags: list[str] | None = None
    custom_fields: dict[str, Any] | None = None
    source_id: str | None = None

    def changed_fields(self) -> dict[str, Any]:
        """Fields the client sent, keyed by their camelCase API names."""
        return self.model_dump(exclude_unset=True, by_alias=True)


class LeadMoveRequest(CamelModel):
    stage_id: str


class LeadAssignRequest(CamelModel):
    """assignedTo null unassigns the lead."""

    assigned_to: str | None


class LeadResponse(CamelModel):
    """Lead (read)."""

    id: str
    organization_id: str
    title: str
    contact_id: str | None
    stage_id: str
    assigned_to: str | None
    value: float
    currency: str
    priority: str
    temperature: str
    tags: list[str]
    custom_fields: dict[str, Any]
    source_id: str | None
    version: int
    created_at: int
    updated_at: int
