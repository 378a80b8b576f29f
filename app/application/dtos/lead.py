"""DTOs for lead use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class LeadResult:
    """Lead read-model."""

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
    tags: list[str] = field(default_factory=list)
    custom_fields: dict[str, Any] = field(default_factory=dict)
    source_id: str | None = None
    version: int = 1
    created_at: int = 0
    updated_at: int = 0

    def audit_snapshot(self) -> dict[str, Any]:
        """Return the lead's auditable fields keyed by their API names."""
        return {
            "title": self.title,
            "contactId": self.contact_id,
            "stageId": self.stage_id,
            "assignedTo": self.assigned_to,
            "value": self.value,
            "currency": self.currency,
            "priority": self.priority,
            "temperature": self.temperature,
            "tags": list(self.tags),
            "customFields": dict(self.custom_fields),
            "sourceId": self.source_id,
        }


@dataclass(frozen=True)
class LeadCreate:
    """Input for creating a lead."""

    title: str
    stage_id: str
    contact_id: str | None = None
    assigned_to: str | None = None
    value: float = 0
    currency: str = "BRL"
    priority: str = "medium"
    temperature: str = "cold"
    tags: list[str] = field(default_factory=list)
    custom_fields: dict[str, Any] = field(default_factory=dict)
    source_id: str | None = None


@dataclass(frozen=True)
class StageResult:
    """Pipeline stage read-model (used for move descriptions)."""

    id: str
    organization_id: str
    name: str
    position: int = 0


# API field name -> LeadResult / ORM attribute name.
LEAD_FIELD_ATTRIBUTES: dict[str, str] = {
    "title": "title",
    "contactId": "contact_id",
    "stageId": "stage_id",
    "assignedTo": "assigned_to",
    "value": "value",
    "currency": "currency",
    "priority": "priority",
    "temperature": "temperature",
    "tags": "tags",
    "customFields": "custom_fields",
    "sourceId": "source_id",
}
