"""Domain exceptions for the agent-site platform.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in core.exception_handlers.
"""

from typing import Any


class AgentSitesException(Exception):
    """Base exception for all agent-site platform errors.

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
        """Serialize for an error response body."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AgentSitesException):
    """Raised when input validation fails (e.g. wrong scope for a role)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(AgentSitesException):
    """Raised when the bearer token is missing, invalid or expired."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class PermissionDeniedException(AgentSitesException):
    """Raised when the actor's rank does not allow a role assignment or revocation."""

    def __init__(
        self,
        action: str,
        role: str,
        actor_rank: int,
        site_id: str | None = None,
    ) -> None:
        """Initialize with the attempted action and the rank that was insufficient.

        Args:
            action: 'assign' or 'revoke' (or another gated action name).
            role: Target role of the attempted action.
            actor_rank: Effective rank the actor holds at the site.
            site_id: Site the action was scoped to, if any.
        """
        super().__init__(
            f"Permission denied: cannot {action} role '{role}'",
            "PERMISSION_DENIED",
            {"action": action, "role": role, "actor_rank": actor_rank, "site_id": site_id},
        )


class NotAuthorizedException(AgentSitesException):
    """Raised when an operation is reserved for Uber Admins (or other gate fails)."""

    def __init__(self, message: str = "Uber Admin access required") -> None:
        super().__init__(message, "NOT_AUTHORIZED")


class ResourceNotFoundException(AgentSitesException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'agent_site', 'propagation_record').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidTransitionException(AgentSitesException):
    """Raised when a propagation record is not in the status an operation requires."""

    def __init__(self, record_id: str, current_status: str, attempted: str) -> None:
        super().__init__(
            f"Cannot {attempted} propagation record {record_id} in status '{current_status}'",
            "INVALID_TRANSITION",
            {
                "record_id": record_id,
                "current_status": current_status,
                "attempted": attempted,
            },
        )


class DuplicateAssignmentException(AgentSitesException):
    """Raised when assigning a role the user already holds at that scope."""

    def __init__(self, user_id: str, role: str, site_id: str | None) -> None:
        super().__init__(
            f"User {user_id} already holds role '{role}'",
            "DUPLICATE_ASSIGNMENT",
            {"user_id": user_id, "role": role, "site_id": site_id},
        )


class SiteAlreadyExistsException(AgentSitesException):
    """Raised when creating a site whose slug already exists."""

    def __init__(self, site_slug: str) -> None:
        super().__init__(
            f"Site with slug '{site_slug}' already exists",
            "SITE_ALREADY_EXISTS",
            {"site_slug": site_slug},
        )


class SqlNotConfiguredException(AgentSitesException):
    """Raised when the database engine cannot be created (DATABASE_URL unset)."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
