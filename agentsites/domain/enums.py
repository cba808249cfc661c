"""Domain enumerations for the agent-site platform.

Enums represent fixed sets of domain values (roles, site and propagation
status, propagatable entity types).
"""

from enum import Enum


class _ValuesMixin:
    """Adds values() returning every member value as a string."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for CHECK constraints)."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class SiteRole(_ValuesMixin, str, Enum):
    """Closed set of roles a user can hold.

    UBER_ADMIN is system-wide (never scoped to a site); every other role is
    scoped to exactly one site. Ranks live in domain.role_hierarchy.
    """

    UBER_ADMIN = "uber_admin"
    SUPER_ADMIN = "super_admin"
    CONTENT_ADMIN = "content_admin"
    SOCIAL_ADMIN = "social_admin"
    MODERATOR = "moderator"


class SiteStatus(_ValuesMixin, str, Enum):
    """Agent site availability."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class SeedStatus(_ValuesMixin, str, Enum):
    """Progress of copying the master template into a branch site."""

    PENDING = "pending"
    COMPLETED = "completed"


class PropagationStatus(_ValuesMixin, str, Enum):
    """Propagation record lifecycle.

    pending -> approved -> pushed, or pending -> rejected. Terminal states
    are rejected and pushed.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PUSHED = "pushed"


class PropagationEntityType(_ValuesMixin, str, Enum):
    """Entity types that can be propagated from the master to branch sites."""

    CONTENT_ITEM = "content_item"
    CONTENT_CATEGORY = "content_category"
    MISSION_PILLAR = "mission_pillar"
    AGENT_BRANCH = "agent_branch"
    UTILITIES_CONFIG = "utilities_config"


class RoleAuditAction(_ValuesMixin, str, Enum):
    """Action recorded in the role audit trail."""

    ASSIGNED = "assigned"
    REMOVED = "removed"
