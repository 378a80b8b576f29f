"""Human-readable PT-BR descriptions for audit log entries.

One implementation shared by the audit writer (canonical text stored on the
entry) and by every reader that meets a legacy entry without a description.
Pure and deterministic; unknown actions or entity types degrade to the raw
tag instead of raising.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.application.dtos.audit_log import AuditLogResult
from app.application.services.audit_metadata import descriptor_for

ACTION_VERBS: dict[str, str] = {
    "create": "Criou",
    "update": "Atualizou",
    "delete": "Excluiu",
    "move": "Moveu",
    "assign": "Atribuiu",
    "handoff": "Repassou",
}

_DEFAULT_ARTICLE = "o"


def _text(value: Any) -> str:
    """Return value as display text ('' for None/empty)."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _label(
    label_field: str,
    metadata: Mapping[str, Any],
    after: Mapping[str, Any],
    before: Mapping[str, Any],
) -> str:
    for source, key in (
        (metadata, label_field),
        (metadata, "title"),
        (metadata, "name"),
        (after, label_field),
        (before, label_field),
    ):
        text = _text(source.get(key))
        if text:
            return text
    return ""


def describe(
    action: str,
    entity_type: str,
    actor_name: str | None = None,
    metadata: Mapping[str, Any] | None = None,
    changes: Mapping[str, Any] | None = None,
) -> str:
    """Build the canonical description for one audited action.

    Args:
        action: Audit action tag (create, update, delete, move, assign, handoff).
        entity_type: Entity type tag (lead, contact, teamMember, ...).
        actor_name: Actor name captured at write time; prefixes the sentence.
        metadata: Entry metadata (camelCase keys), e.g. title/name, stage names.
        changes: Entry change-set ``{"before": {...}, "after": {...}}``.

    Returns:
        Sentence such as "Ana moveu o lead 'Site novo' de 'Novo' para 'Ganho'".
    """
    action = _text(action)
    entity_type = _text(entity_type)
    meta = _mapping(metadata)
    change_set = _mapping(changes)
    after = _mapping(change_set.get("after"))
    before = _mapping(change_set.get("before"))

    descriptor = descriptor_for(entity_type)
    article = descriptor.article if descriptor else _DEFAULT_ARTICLE
    noun = descriptor.noun if descriptor else entity_type
    label_field = descriptor.label_field if descriptor else "name"

    verb = ACTION_VERBS.get(action, action)
    name = _label(label_field, meta, after, before)
    name_str = f" '{name}'" if name else ""
    subject = f"{verb} {article} {noun}{name_str}"

    from_stage = _text(meta.get("fromStageName"))
    to_stage = _text(meta.get("toStageName"))
    assignee = _text(meta.get("assigneeName"))
    from_member = _text(meta.get("fromMemberName"))
    to_member = _text(meta.get("toMemberName"))

    if action == "move" and from_stage and to_stage:
        sentence = f"{subject} de '{from_stage}' para '{to_stage}'"
    elif action == "move" and to_stage:
        sentence = f"{subject} para '{to_stage}'"
    elif action == "assign" and assignee:
        sentence = f"{subject} para {assignee}"
    elif action == "handoff" and from_member and to_member:
        sentence = f"{subject} de {from_member} para {to_member}"
    elif action == "handoff" and to_member:
        sentence = f"{subject} para {to_member}"
    elif action == "update" and len(after) == 1:
        sentence = f"{subject} ({next(iter(after))})"
    elif action == "update" and len(after) > 1:
        sentence = f"{subject} ({len(after)} campos)"
    else:
        sentence = subject

    actor = _text(actor_name).strip()
    if actor and sentence:
        return f"{actor} {sentence[0].lower()}{sentence[1:]}"
    return sentence


def describe_entry(entry: AuditLogResult) -> str:
    """Return the stored description, or generate it for legacy entries."""
    if entry.description:
        return entry.description
    return describe(
        entry.action,
        entry.entity_type,
        actor_name=entry.actor_name,
        metadata=entry.metadata,
        changes=entry.changes,
    )
