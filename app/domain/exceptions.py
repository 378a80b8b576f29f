"""Domain exceptions for the CRM.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class CrmException(Exception):
    """Base exception for all CRM application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(CrmException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(CrmException):
    """Raised when no actor could be identified for the request."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(CrmException):
    """Raised when the acting member lacks the capability for the operation.

    The client-facing message never names the protected resource; area and
    action are kept on the instance for logging only.
    """

    def __init__(
        self,
        area: str | None = None,
        action: str | None = None,
        message: str = "Not authorized",
    ) -> None:
        """Initialize with optional area, action, and message.

        Args:
            area: Resource area that was checked (e.g. 'leads').
            action: Action that was attempted (e.g. 'delete').
            message: Human-readable message returned to the client.
        """
        self.area = area
        self.action = action
        super().__init__(message, "PERMISSION_DENIED")


class SelfLockoutException(CrmException):
    """Raised when a member would revoke their own ability to manage the team."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            "This change would remove your own access to team management",
            "SELF_LOCKOUT",
            {"member_id": member_id},
        )


class ResourceNotFoundException(CrmException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'lead', 'teamMember').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class IntegrityViolationException(CrmException):
    """Raised when stored or supplied data breaks a data-model invariant.

    Examples: an unknown role, a Permissions object missing an area or flag,
    a severity outside the known levels. Never coerced to a default.
    """

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, "INTEGRITY_VIOLATION", details)


class ConcurrentWriteConflictException(CrmException):
    """Raised when a concurrent request updated the same entity first (optimistic lock)."""

    def __init__(self, resource_type: str, resource_id: str | None = None) -> None:
        details: dict[str, Any] = {"resource_type": resource_type}
        if resource_id is not None:
            details["resource_id"] = resource_id
        super().__init__(
            f"{resource_type} was updated by another request; retry.",
            "WRITE_CONFLICT",
            details,
        )


class SqlNotConfiguredException(CrmException):
    """Raised when an operation requires Postgres but the backend is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
