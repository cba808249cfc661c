"""Tests for domain exceptions (error_code, message, details) and their HTTP mapping."""

from agentsites.core.exception_handlers import status_for
from agentsites.domain.exceptions import (
    AgentSitesException,
    AuthenticationException,
    DuplicateAssignmentException,
    InvalidTransitionException,
    NotAuthorizedException,
    PermissionDeniedException,
    ResourceNotFoundException,
    SiteAlreadyExistsException,
    SqlNotConfiguredException,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base exception uses class name as error_code when not provided."""
    exc = AgentSitesException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "AgentSitesException"
    assert exc.details == {}


def test_to_dict() -> None:
    exc = ResourceNotFoundException("agent_site", "s1")
    assert exc.to_dict() == {
        "error": "RESOURCE_NOT_FOUND",
        "message": "agent_site not found: s1",
        "details": {"resource_type": "agent_site", "resource_id": "s1"},
    }


def test_permission_denied_details() -> None:
    exc = PermissionDeniedException("assign", "super_admin", 40, "site-1")
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {
        "action": "assign",
        "role": "super_admin",
        "actor_rank": 40,
        "site_id": "site-1",
    }


def test_invalid_transition_details() -> None:
    exc = InvalidTransitionException("r1", "pushed", "approve")
    assert exc.error_code == "INVALID_TRANSITION"
    assert exc.details["current_status"] == "pushed"
    assert "approve" in exc.message


def test_validation_field_is_optional() -> None:
    assert ValidationException("bad").details == {}
    assert ValidationException("bad", field="role").details == {"field": "role"}


def test_status_mapping() -> None:
    """Each domain error code maps to its HTTP status."""
    assert status_for(PermissionDeniedException("assign", "moderator", 0)) == 403
    assert status_for(NotAuthorizedException()) == 403
    assert status_for(ResourceNotFoundException("x", "1")) == 404
    assert status_for(InvalidTransitionException("r", "pending", "push")) == 409
    assert status_for(DuplicateAssignmentException("u", "moderator", "s")) == 409
    assert status_for(SiteAlreadyExistsException("slug")) == 409
    assert status_for(ValidationException("bad")) == 400
    assert status_for(AuthenticationException()) == 401
    assert status_for(SqlNotConfiguredException()) == 503
    assert status_for(AgentSitesException("x", "UNMAPPED")) == 400
