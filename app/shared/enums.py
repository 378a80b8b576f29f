"""Shared enumerations for the CRM.

Cross-cutting enums used by application and infrastructure (audit action,
actor type). Domain-specific enums (e.g. Role) live in app.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ActorType(_ValuesMixin, str, Enum):
    """Actor type for audit tracking (who performed the action)."""

    HUMAN = "human"
    AI = "ai"
    SYSTEM = "system"


class AuditAction(_ValuesMixin, str, Enum):
    """Audit action types recorded on audit log entries."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MOVE = "move"
    ASSIGN = "assign"
    HANDOFF = "handoff"
