"""Unit tests for the role hierarchy (ranks, assign/revoke rules, metadata)."""

import pytest

from agentsites.domain import role_hierarchy
from agentsites.domain.enums import SiteRole
from agentsites.domain.role_hierarchy import (
    assignable_roles,
    can_assign,
    can_revoke,
    effective_rank,
    has_minimum_role,
    rank_of,
    role_metadata,
)


@pytest.mark.parametrize(
    ("role", "rank"),
    [
        (SiteRole.UBER_ADMIN, 100),
        (SiteRole.SUPER_ADMIN, 50),
        (SiteRole.CONTENT_ADMIN, 40),
        (SiteRole.SOCIAL_ADMIN, 30),
        (SiteRole.MODERATOR, 20),
    ],
)
def test_rank_table(role: SiteRole, rank: int) -> None:
    assert rank_of(role) == rank
    assert rank_of(role.value) == rank


def test_unknown_role_ranks_zero_and_never_raises() -> None:
    assert rank_of("janitor") == 0
    assert rank_of("") == 0


class TestEffectiveRank:
    def test_max_of_held_roles(self) -> None:
        assert effective_rank(["moderator", "content_admin"]) == 40

    def test_no_roles_is_zero(self) -> None:
        assert effective_rank([]) == 0

    def test_uber_admin_flag_wins(self) -> None:
        assert effective_rank(["moderator"], is_uber_admin=True) == 100

    def test_unknown_roles_are_ignored(self) -> None:
        assert effective_rank(["janitor", "social_admin"]) == 30


class TestCanAssign:
    def test_strictly_greater_rank_required(self) -> None:
        """content_admin (40) may assign social_admin (30) but not a peer content_admin."""
        assert can_assign(40, SiteRole.SOCIAL_ADMIN)
        assert can_assign(40, SiteRole.MODERATOR)
        assert not can_assign(40, SiteRole.CONTENT_ADMIN)
        assert not can_assign(40, SiteRole.SUPER_ADMIN)

    def test_super_admin_cannot_grant_uber_admin(self) -> None:
        assert not can_assign(50, SiteRole.UBER_ADMIN)
        assert not can_assign(50, "uber_admin", actor_is_uber_admin=False)

    def test_uber_admin_can_grant_uber_admin(self) -> None:
        assert can_assign(100, SiteRole.UBER_ADMIN)
        assert can_assign(100, SiteRole.UBER_ADMIN, actor_is_uber_admin=True)

    def test_uber_status_is_explicit_when_given(self) -> None:
        assert not can_assign(100, SiteRole.UBER_ADMIN, actor_is_uber_admin=False)

    def test_zero_rank_assigns_nothing(self) -> None:
        assert not any(can_assign(0, r) for r in SiteRole)

    def test_unknown_target_role_needs_uber_admin(self) -> None:
        assert not can_assign(20, "janitor")
        assert not can_assign(50, "janitor")
        assert not can_assign(50, "janitor", actor_is_uber_admin=False)
        assert can_assign(100, "janitor", actor_is_uber_admin=True)
        assert can_assign(100, "janitor")

    def test_unknown_target_role_revoke_needs_uber_admin(self) -> None:
        assert not can_revoke(50, "janitor")
        assert can_revoke(100, "janitor", actor_is_uber_admin=True)

    def test_revoke_uses_same_rule(self) -> None:
        for actor_rank in (0, 20, 30, 40, 50, 100):
            for role in SiteRole:
                assert can_revoke(actor_rank, role) == can_assign(actor_rank, role)


class TestAssignableRoles:
    def test_super_admin(self) -> None:
        assert assignable_roles(50, False) == [
            SiteRole.CONTENT_ADMIN,
            SiteRole.SOCIAL_ADMIN,
            SiteRole.MODERATOR,
        ]

    def test_uber_admin_gets_everything_highest_first(self) -> None:
        assert assignable_roles(100, True) == [
            SiteRole.UBER_ADMIN,
            SiteRole.SUPER_ADMIN,
            SiteRole.CONTENT_ADMIN,
            SiteRole.SOCIAL_ADMIN,
            SiteRole.MODERATOR,
        ]

    def test_moderator_gets_nothing(self) -> None:
        assert assignable_roles(20, False) == []


def test_has_minimum_role() -> None:
    assert has_minimum_role(["super_admin"], SiteRole.CONTENT_ADMIN)
    assert has_minimum_role(["moderator"], SiteRole.MODERATOR)
    assert not has_minimum_role(["moderator"], SiteRole.SOCIAL_ADMIN)
    assert not has_minimum_role([], SiteRole.MODERATOR)


def test_role_metadata_known_and_unknown() -> None:
    meta = role_metadata(SiteRole.SUPER_ADMIN)
    assert meta.title == "Super Admin (Site Owner)"
    assert meta.level == "Site"
    assert meta.rank == 50
    assert len(meta.permissions) == 4

    unknown = role_metadata("janitor")
    assert unknown.title == "janitor"
    assert unknown.level == "Unknown"
    assert unknown.rank == 0
    assert unknown.permissions == ()


def test_hierarchy_is_ordered_by_rank() -> None:
    ranks = [m.rank for m in role_hierarchy.hierarchy()]
    assert ranks == sorted(ranks, reverse=True)
    assert len(ranks) == len(SiteRole)
