"""Role hierarchy: rank table and assignment rules.

Pure functions, no I/O. An actor may assign or revoke a role only when their
effective rank at the site is strictly greater than the role's rank.
uber_admin is the exception: only a system-wide Uber Admin may grant or
remove it.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import assert_never

from agentsites.domain.enums import SiteRole

UBER_ADMIN_RANK = 100


def _rank(role: SiteRole) -> int:
    match role:
        case SiteRole.UBER_ADMIN:
            return UBER_ADMIN_RANK
        case SiteRole.SUPER_ADMIN:
            return 50
        case SiteRole.CONTENT_ADMIN:
            return 40
        case SiteRole.SOCIAL_ADMIN:
            return 30
        case SiteRole.MODERATOR:
            return 20
        case _:
            assert_never(role)


def _coerce(role: SiteRole | str) -> SiteRole | None:
    if isinstance(role, SiteRole):
        return role
    try:
        return SiteRole(role)
    except ValueError:
        return None


def rank_of(role: SiteRole | str) -> int:
    """Return the rank of a role; unrecognized role names rank 0."""
    known = _coerce(role)
    return _rank(known) if known is not None else 0


def effective_rank(
    roles: Iterable[SiteRole | str], *, is_uber_admin: bool = False
) -> int:
    """Return the actor's effective rank at one site.

    Args:
        roles: Roles the actor holds at that site (unknown names count as 0).
        is_uber_admin: Whether the actor is a system-wide Uber Admin.

    Returns:
        100 for Uber Admins, otherwise the highest rank held, or 0.
    """
    if is_uber_admin:
        return UBER_ADMIN_RANK
    return max((rank_of(r) for r in roles), default=0)


def can_assign(
    actor_rank: int,
    target_role: SiteRole | str,
    *,
    actor_is_uber_admin: bool | None = None,
) -> bool:
    """Return whether an actor of the given rank may grant target_role.

    Granting uber_admin requires system-wide Uber Admin status; when
    actor_is_uber_admin is omitted it is inferred from the rank. Unknown
    roles rank 0 and follow the uber_admin rule.
    """
    role = _coerce(target_role)
    if role is None or role is SiteRole.UBER_ADMIN:
        if actor_is_uber_admin is None:
            return actor_rank >= UBER_ADMIN_RANK
        return actor_is_uber_admin
    return actor_rank > rank_of(target_role)


def can_revoke(
    actor_rank: int,
    target_role: SiteRole | str,
    *,
    actor_is_uber_admin: bool | None = None,
) -> bool:
    """Return whether an actor of the given rank may remove target_role (same rule as assign)."""
    return can_assign(actor_rank, target_role, actor_is_uber_admin=actor_is_uber_admin)


def assignable_roles(actor_rank: int, is_uber_admin: bool) -> list[SiteRole]:
    """Return every role the actor may assign, highest rank first."""
    return [
        role
        for role in sorted(SiteRole, key=_rank, reverse=True)
        if can_assign(actor_rank, role, actor_is_uber_admin=is_uber_admin)
    ]


def has_minimum_role(
    roles: Iterable[SiteRole | str], required_role: SiteRole | str
) -> bool:
    """Return whether any held role ranks at least as high as required_role."""
    required = rank_of(required_role)
    return any(rank_of(r) >= required for r in roles)


@dataclass(frozen=True)
class RoleMetadata:
    """Display metadata for role pickers."""

    role: str
    rank: int
    title: str
    description: str
    level: str
    permissions: tuple[str, ...] = field(default_factory=tuple)


_ROLE_METADATA: dict[SiteRole, tuple[str, str, str, tuple[str, ...]]] = {
    SiteRole.UBER_ADMIN: (
        "Uber Admin (System-wide)",
        "Full system access across all sites",
        "System",
        (
            "Manage all sites and users",
            "Create other Uber Admins",
            "Push updates across estate",
            "Access master site controls",
        ),
    ),
    SiteRole.SUPER_ADMIN: (
        "Super Admin (Site Owner)",
        "Full site control and user management",
        "Site",
        (
            "Manage site configuration",
            "Create site admins",
            "Full content control",
            "User management",
        ),
    ),
    SiteRole.CONTENT_ADMIN: (
        "Content Admin",
        "Manage content, categories, and publishing",
        "Department",
        (
            "Create/edit content",
            "Manage categories",
            "Publish content",
            "Moderate user content",
        ),
    ),
    SiteRole.SOCIAL_ADMIN: (
        "Social Admin",
        "Manage social connections and campaigns",
        "Department",
        (
            "Manage social accounts",
            "Create campaigns",
            "View analytics",
            "Schedule posts",
        ),
    ),
    SiteRole.MODERATOR: (
        "Moderator",
        "Basic moderation capabilities",
        "Team",
        (
            "Moderate comments",
            "Flag content",
            "View reports",
            "Basic user management",
        ),
    ),
}


def role_metadata(role: SiteRole | str) -> RoleMetadata:
    """Return display metadata for a role; unknown roles get a generic entry."""
    known = _coerce(role)
    if known is None:
        return RoleMetadata(
            role=str(role),
            rank=0,
            title=str(role),
            description="Unknown role",
            level="Unknown",
        )
    title, description, level, permissions = _ROLE_METADATA[known]
    return RoleMetadata(
        role=known.value,
        rank=_rank(known),
        title=title,
        description=description,
        level=level,
        permissions=permissions,
    )


def hierarchy() -> list[RoleMetadata]:
    """Return metadata for every role, highest rank first."""
    return [role_metadata(r) for r in sorted(SiteRole, key=_rank, reverse=True)]
