"""Permission resolver: effective permissions from role defaults and an optional override."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.domain.capabilities import CapabilityMatrix, Permissions
from app.domain.enums import Role
from app.domain.exceptions import IntegrityViolationException


class PermissionResolver:
    """Resolves a member's effective permissions (pure; no I/O, no caching).

    The capability matrix is injected so tests and deployments can supply
    alternate role tables without touching shared module state.
    """

    def __init__(self, matrix: CapabilityMatrix | None = None) -> None:
        self.matrix = matrix or CapabilityMatrix()

    @staticmethod
    def coerce_role(role: Role | str) -> Role:
        """Return role as a Role; unknown values raise IntegrityViolationException."""
        try:
            return Role(role)
        except ValueError:
            raise IntegrityViolationException(
                f"Unknown role: {role!r}", role=str(role)
            ) from None

    def resolve(
        self, role: Role | str, override: Permissions | None = None
    ) -> Permissions:
        """Return override unchanged when present, else the default table for role.

        The override is a full substitution, never a merge. The role and the
        override are both checked so a corrupt member record fails loudly
        instead of resolving to a partial table.
        """
        resolved_role = self.coerce_role(role)
        if override is not None:
            self.matrix.validate(override)
            return override
        return self.matrix.default_for(resolved_role)

    def validate(self, permissions: Any) -> None:
        """Raise IntegrityViolationException unless permissions is a total Permissions object."""
        self.matrix.validate(permissions)

    def with_override(
        self, role: Role | str, patch: Mapping[str, Mapping[str, bool]] | None = None
    ) -> Permissions:
        """Build a complete override from the role defaults plus a partial patch.

        Authoring is partial (``{"leads": {"delete": True}}``); the returned
        object is total and validated, ready to be stored as an override.
        """
        permissions = self.matrix.default_for(self.coerce_role(role))
        for area, flags in (patch or {}).items():
            if area not in permissions:
                raise IntegrityViolationException(
                    f"Unknown permission area '{area}'", area=area
                )
            for action, value in flags.items():
                if not self.matrix.declares(area, action):
                    raise IntegrityViolationException(
                        f"Unknown permission flag '{area}.{action}'",
                        area=area,
                        action=action,
                    )
                permissions[area][action] = value
        self.validate(permissions)
        return permissions
