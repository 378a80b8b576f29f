"""Per-entity-type audit metadata shapes.

Each audited entity type declares which metadata key carries its primary
label (the "named thing" in descriptions) and a pydantic model for the
metadata it records. Unknown entity types fall back to a generic shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from app.domain.exceptions import ValidationException


class _AuditMetadata(BaseModel):
    """Base metadata: camelCase keys on the wire, extra keys kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    title: str | None = None
    name: str | None = None


class LeadAuditMetadata(_AuditMetadata):
    contact_id: str | None = None
    from_stage_name: str | None = None
    to_stage_name: str | None = None
    assignee_name: str | None = None


class ContactAuditMetadata(_AuditMetadata):
    email: str | None = None


class TeamMemberAuditMetadata(_AuditMetadata):
    role: str | None = None
    type: str | None = None
    status: str | None = None


class FieldDefinitionAuditMetadata(_AuditMetadata):
    key: str | None = None
    field_type: str | None = None


class WebhookAuditMetadata(_AuditMetadata):
    url: str | None = None


class HandoffAuditMetadata(_AuditMetadata):
    from_member_name: str | None = None
    to_member_name: str | None = None


class GenericAuditMetadata(_AuditMetadata):
    pass


@dataclass(frozen=True)
class EntityDescriptor:
    """How one entity type is named in PT-BR and where its label lives."""

    article: str
    noun: str
    label_field: str = "name"
    metadata_model: type[_AuditMetadata] = GenericAuditMetadata


ENTITY_DESCRIPTORS: dict[str, EntityDescriptor] = {
    "lead": EntityDescriptor("o", "lead", "title", LeadAuditMetadata),
    "contact": EntityDescriptor("o", "contato", "name", ContactAuditMetadata),
    "organization": EntityDescriptor("a", "organização"),
    "teamMember": EntityDescriptor("o", "membro", "name", TeamMemberAuditMetadata),
    "handoff": EntityDescriptor("o", "repasse", "title", HandoffAuditMetadata),
    "message": EntityDescriptor("a", "mensagem", "title"),
    "board": EntityDescriptor("o", "quadro"),
    "stage": EntityDescriptor("a", "etapa"),
    "webhook": EntityDescriptor("o", "webhook", "name", WebhookAuditMetadata),
    "leadSource": EntityDescriptor("a", "fonte de lead"),
    "fieldDefinition": EntityDescriptor(
        "o", "campo personalizado", "name", FieldDefinitionAuditMetadata
    ),
    "apiKey": EntityDescriptor("a", "chave de API"),
    "savedView": EntityDescriptor("a", "visualização salva"),
    "task": EntityDescriptor("a", "tarefa", "title"),
    "calendarEvent": EntityDescriptor("o", "evento", "title"),
    "form": EntityDescriptor("o", "formulário"),
    "formSubmission": EntityDescriptor("a", "submissão de formulário"),
}


def descriptor_for(entity_type: str) -> EntityDescriptor | None:
    """Return the descriptor for entity_type, or None when the tag is unknown."""
    return ENTITY_DESCRIPTORS.get(entity_type)


def normalize_metadata(
    entity_type: str, metadata: dict[str, Any] | None
) -> dict[str, Any] | None:
    """Validate metadata against the entity type's shape; return camelCase dict.

    Raises:
        ValidationException: metadata has a wrongly typed known key.
    """
    if metadata is None:
        return None
    descriptor = descriptor_for(entity_type)
    model = descriptor.metadata_model if descriptor else GenericAuditMetadata
    try:
        parsed = model.model_validate(metadata)
    except ValidationError as e:
        raise ValidationException(
            f"Invalid audit metadata for {entity_type}: {e.errors()[0]['msg']}",
            field="metadata",
        ) from e
    return parsed.model_dump(by_alias=True, exclude_none=True)
