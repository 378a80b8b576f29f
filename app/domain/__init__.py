"""Domain layer: enums, capability tables, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.capabilities import CapabilityMatrix, Permissions, is_granted
from app.domain.enums import (
    MemberStatus,
    MemberType,
    PermissionAction,
    ResourceArea,
    Role,
    Severity,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConcurrentWriteConflictException,
    CrmException,
    IntegrityViolationException,
    ResourceNotFoundException,
    SelfLockoutException,
    ValidationException,
)

__all__ = [
    # Capabilities
    "CapabilityMatrix",
    "Permissions",
    "is_granted",
    # Enums
    "MemberStatus",
    "MemberType",
    "PermissionAction",
    "ResourceArea",
    "Role",
    "Severity",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "ConcurrentWriteConflictException",
    "CrmException",
    "IntegrityViolationException",
    "ResourceNotFoundException",
    "SelfLockoutException",
    "ValidationException",
]
