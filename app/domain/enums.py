"""Domain enumerations for the CRM.

Enums represent fixed sets of domain values (roles, member lifecycle,
capability areas and actions, audit severity).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class Role(_ValuesMixin, str, Enum):
    """Team member role. Closed set: each role needs a default capability table."""

    ADMIN = "admin"
    MANAGER = "manager"
    AGENT = "agent"
    AI = "ai"


class MemberType(_ValuesMixin, str, Enum):
    """Whether a team member is a person or an AI agent."""

    HUMAN = "human"
    AI = "ai"


class MemberStatus(_ValuesMixin, str, Enum):
    """Team member lifecycle status. Removal is a soft delete to INACTIVE."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BUSY = "busy"


class ResourceArea(_ValuesMixin, str, Enum):
    """Resource areas of the capability matrix (keys of a Permissions mapping)."""

    LEADS = "leads"
    CONTACTS = "contacts"
    CONVERSATIONS = "conversations"
    TEAM = "team"
    SETTINGS = "settings"
    API_KEYS = "apiKeys"
    WEBHOOKS = "webhooks"
    AUDIT_LOGS = "auditLogs"
    FIELD_DEFINITIONS = "fieldDefinitions"


class PermissionAction(_ValuesMixin, str, Enum):
    """Actions a capability flag can gate within one resource area."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    ASSIGN = "assign"
    MANAGE = "manage"


class Severity(_ValuesMixin, str, Enum):
    """Audit entry severity, assigned by the mutating caller."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
