"""Capability matrix: resource areas, their actions, and per-role default tables.

A Permissions value is a plain JSON-compatible mapping
``{area: {action: bool}}`` that must be total: every area the matrix knows,
and every action that area declares, with a boolean flag. Overrides are
substituted whole (never merged), so a partial object would silently lose
capabilities; CapabilityMatrix.validate rejects it instead.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.domain.enums import PermissionAction, ResourceArea, Role
from app.domain.exceptions import IntegrityViolationException

Permissions = dict[str, dict[str, bool]]

_A = PermissionAction

_DECLARED_ACTIONS: Mapping[ResourceArea, tuple[PermissionAction, ...]] = {
    ResourceArea.LEADS: (_A.VIEW, _A.CREATE, _A.EDIT, _A.DELETE, _A.ASSIGN),
    ResourceArea.CONTACTS: (_A.VIEW, _A.CREATE, _A.EDIT, _A.DELETE),
    ResourceArea.CONVERSATIONS: (_A.VIEW, _A.CREATE, _A.EDIT, _A.ASSIGN),
    ResourceArea.TEAM: (_A.VIEW, _A.CREATE, _A.EDIT, _A.DELETE, _A.MANAGE),
    ResourceArea.SETTINGS: (_A.VIEW, _A.MANAGE),
    ResourceArea.API_KEYS: (_A.VIEW, _A.CREATE, _A.DELETE, _A.MANAGE),
    ResourceArea.WEBHOOKS: (_A.VIEW, _A.CREATE, _A.EDIT, _A.DELETE, _A.MANAGE),
    ResourceArea.AUDIT_LOGS: (_A.VIEW,),
    ResourceArea.FIELD_DEFINITIONS: (_A.VIEW, _A.CREATE, _A.EDIT, _A.DELETE),
}

# Plain-string view used for stored and resolved Permissions objects.
AREA_ACTIONS: Mapping[str, tuple[str, ...]] = {
    area.value: tuple(action.value for action in actions)
    for area, actions in _DECLARED_ACTIONS.items()
}


def _key(value: Any) -> str:
    """Return the plain string for an enum member or string."""
    return value.value if isinstance(value, Enum) else value


def build_permissions(
    granted: Mapping[str, Iterable[str]],
    area_actions: Mapping[str, tuple[str, ...]] = AREA_ACTIONS,
) -> Permissions:
    """Return a total Permissions object: flags in ``granted`` true, all others false."""
    granted_sets = {
        _key(area): {_key(action) for action in actions} for area, actions in granted.items()
    }
    return {
        area: {action: action in granted_sets.get(area, set()) for action in actions}
        for area, actions in area_actions.items()
    }


def _all(area: ResourceArea) -> tuple[str, ...]:
    return AREA_ACTIONS[area.value]


DEFAULT_PERMISSIONS: Mapping[Role, Permissions] = {
    Role.ADMIN: build_permissions(AREA_ACTIONS),
    Role.MANAGER: build_permissions(
        {
            ResourceArea.LEADS.value: _all(ResourceArea.LEADS),
            ResourceArea.CONTACTS.value: _all(ResourceArea.CONTACTS),
            ResourceArea.CONVERSATIONS.value: _all(ResourceArea.CONVERSATIONS),
            ResourceArea.TEAM.value: ("view", "create", "edit"),
            ResourceArea.SETTINGS.value: ("view",),
            ResourceArea.API_KEYS.value: ("view",),
            ResourceArea.WEBHOOKS.value: ("view",),
            ResourceArea.AUDIT_LOGS.value: ("view",),
            ResourceArea.FIELD_DEFINITIONS.value: ("view", "create", "edit"),
        }
    ),
    Role.AGENT: build_permissions(
        {
            ResourceArea.LEADS.value: ("view", "create", "edit"),
            ResourceArea.CONTACTS.value: ("view", "create", "edit"),
            ResourceArea.CONVERSATIONS.value: ("view", "create", "edit"),
            ResourceArea.TEAM.value: ("view",),
            ResourceArea.FIELD_DEFINITIONS.value: ("view",),
        }
    ),
    Role.AI: build_permissions(
        {
            ResourceArea.LEADS.value: ("view", "create", "edit"),
            ResourceArea.CONTACTS.value: ("view", "create", "edit"),
            ResourceArea.CONVERSATIONS.value: ("view", "create", "edit", "assign"),
            ResourceArea.TEAM.value: ("view",),
            ResourceArea.FIELD_DEFINITIONS.value: ("view",),
        }
    ),
}


@dataclass(frozen=True)
class CapabilityMatrix:
    """Read-only capability configuration injected into the permission resolver.

    Holds the area → actions declaration and one default table per role.
    Construction validates that every Role has a total default table.
    """

    area_actions: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: AREA_ACTIONS)
    defaults: Mapping[Role, Permissions] = field(default_factory=lambda: DEFAULT_PERMISSIONS)

    def __post_init__(self) -> None:
        for role in Role:
            if role not in self.defaults:
                raise IntegrityViolationException(
                    f"No default permissions for role '{role.value}'", role=role.value
                )
            self.validate(self.defaults[role])

    def validate(self, permissions: Any) -> None:
        """Raise IntegrityViolationException unless permissions is total and boolean.

        Every known area must be present with every declared action, each a
        bool; unknown areas or actions are rejected too.
        """
        if not isinstance(permissions, Mapping):
            raise IntegrityViolationException("Permissions must be a mapping of areas")
        unknown_areas = set(permissions) - set(self.area_actions)
        if unknown_areas:
            raise IntegrityViolationException(
                "Permissions contain unknown areas", areas=sorted(map(str, unknown_areas))
            )
        for area, actions in self.area_actions.items():
            flags = permissions.get(area)
            if not isinstance(flags, Mapping):
                raise IntegrityViolationException(
                    f"Permissions missing area '{area}'", area=area
                )
            unknown_actions = set(flags) - set(actions)
            if unknown_actions:
                raise IntegrityViolationException(
                    f"Permissions for '{area}' contain unknown actions",
                    area=area,
                    actions=sorted(map(str, unknown_actions)),
                )
            for action in actions:
                if not isinstance(flags.get(action), bool):
                    raise IntegrityViolationException(
                        f"Permissions missing flag '{area}.{action}'",
                        area=area,
                        action=action,
                    )

    def default_for(self, role: Role) -> Permissions:
        """Return a copy of the default table for role (callers may not mutate the shared one)."""
        return copy.deepcopy(self.defaults[role])

    def declares(self, area: str, action: str) -> bool:
        """Return True if the matrix has a flag for (area, action)."""
        return action in self.area_actions.get(area, ())

    def all_denied(self) -> Permissions:
        """Return a total Permissions object with every flag false."""
        return build_permissions({}, self.area_actions)


def is_granted(permissions: Mapping[str, Mapping[str, bool]], area: str, action: str) -> bool:
    """Return True only when permissions[area][action] is exactly True."""
    flags = permissions.get(area)
    if flags is None:
        return False
    return flags.get(action) is True
