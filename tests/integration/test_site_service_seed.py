"""SiteService integration tests: creation with owner role and seeding from the master."""

import pytest

from agentsites.application.dtos.actor import Actor
from agentsites.application.services.site_service import SiteService
from agentsites.domain.enums import PropagationEntityType
from agentsites.domain.exceptions import NotAuthorizedException, ValidationException
from agentsites.infrastructure.persistence.repositories import (
    RoleAuditRepository,
    SiteRepository,
    UserRoleRepository,
    site_entity_repo_for,
)


def _service(db_session) -> SiteService:
    return SiteService(
        SiteRepository(db_session),
        UserRoleRepository(db_session),
        RoleAuditRepository(db_session),
        lambda entity_type: site_entity_repo_for(entity_type, db_session),
    )


async def _master_template(db_session, master_id: str) -> None:
    await site_entity_repo_for("content_category", db_session).upsert_by_natural_key(
        master_id, {"slug": "news", "name": "News"}
    )
    await site_entity_repo_for("content_item", db_session).upsert_by_natural_key(
        master_id, {"slug": "welcome", "title": "Welcome", "category": "news"}
    )
    await site_entity_repo_for("mission_pillar", db_session).upsert_by_natural_key(
        master_id, {"display_name": "Education"}
    )
    await site_entity_repo_for("utilities_config", db_session).upsert_by_natural_key(
        master_id, {"teaching_on": True}
    )


async def test_create_site_grants_owner_super_admin(db_session, uber_actor) -> None:
    svc = _service(db_session)

    site = await svc.create_site(uber_actor, "Branch", "branch", owner_user_id="alice")

    roles = await UserRoleRepository(db_session).roles_at_site("alice", site.id)
    assert roles == ["super_admin"]
    audit = await RoleAuditRepository(db_session).list_for_user("alice", 10)
    assert [(e.action, e.role, e.actor_id) for e in audit] == [
        ("assigned", "super_admin", "uber-1")
    ]


async def test_non_uber_cannot_create_for_someone_else(db_session, plain_actor) -> None:
    with pytest.raises(NotAuthorizedException):
        await _service(db_session).create_site(
            plain_actor, "Branch", "branch", owner_user_id="someone-else"
        )


async def test_create_with_seed_copies_master_template(
    db_session, make_site, uber_actor
) -> None:
    master = await make_site("Master", is_master=True)
    await _master_template(db_session, master)
    svc = _service(db_session)

    site = await svc.create_site(uber_actor, "Branch", "branch", seed_from_master=True)

    assert site.seed_status == "completed"
    item_repo = site_entity_repo_for("content_item", db_session)
    (item,) = await item_repo.list_for_site(site.id)
    assert item.slug == "welcome"
    (config,) = await site_entity_repo_for("utilities_config", db_session).list_for_site(
        site.id
    )
    assert config.teaching_on is True


async def test_seed_is_idempotent(db_session, make_site, make_role, plain_actor) -> None:
    master = await make_site("Master", is_master=True)
    branch = await make_site("Branch")
    await make_role(plain_actor.user_id, "super_admin", branch)
    await _master_template(db_session, master)
    svc = _service(db_session)

    first = await svc.seed_from_master(plain_actor, branch)
    second = await svc.seed_from_master(plain_actor, branch)

    assert first.counts == second.counts
    assert first.counts["content_item"] == 1
    assert first.counts["agent_branch"] == 0
    assert len(await site_entity_repo_for("content_item", db_session).list_for_site(branch)) == 1


async def test_seed_requires_super_admin(db_session, make_site, make_role) -> None:
    await make_site("Master", is_master=True)
    branch = await make_site("Branch")
    await make_role("mod", "moderator", branch)
    with pytest.raises(NotAuthorizedException):
        await _service(db_session).seed_from_master(Actor(user_id="mod"), branch)


async def test_master_cannot_seed_itself(db_session, make_site, uber_actor) -> None:
    master = await make_site("Master", is_master=True)
    with pytest.raises(ValidationException):
        await _service(db_session).seed_from_master(uber_actor, master)


async def test_failed_seed_rolls_back_with_its_pending_marker(
    db_session, make_site, uber_actor
) -> None:
    master = await make_site("Master", is_master=True)
    branch = await make_site("Branch")
    await _master_template(db_session, master)
    await db_session.commit()

    def entity_repo(entity_type):
        if entity_type is PropagationEntityType.CONTENT_ITEM:
            raise RuntimeError("content store unavailable")
        return site_entity_repo_for(entity_type, db_session)

    svc = SiteService(
        SiteRepository(db_session),
        UserRoleRepository(db_session),
        RoleAuditRepository(db_session),
        entity_repo,
    )
    with pytest.raises(RuntimeError):
        await svc.seed_from_master(uber_actor, branch)
    await db_session.rollback()

    assert (await SiteRepository(db_session).get(branch)).seed_status is None
    assert await site_entity_repo_for("content_category", db_session).list_for_site(branch) == []
