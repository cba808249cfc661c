"""End-to-end propagation on SQLite: enqueue, approve, push with a partial failure, requeue."""

from sqlalchemy import select

from agentsites.application.services.propagation_service import PropagationService
from agentsites.application.use_cases.propagation.push_update import PushUpdateUseCase
from agentsites.domain.enums import PropagationStatus
from agentsites.infrastructure.persistence.models import ContentItem
from agentsites.infrastructure.persistence.repositories import (
    PropagationRepository,
    SiteRepository,
    site_entity_repo_for,
)


async def _seed_item(session_factory, site_id: str, title: str) -> None:
    async with session_factory() as session:
        async with session.begin():
            session.add(ContentItem(site_id=site_id, slug="welcome", title=title))


async def _items(session_factory, site_id: str) -> list[ContentItem]:
    async with session_factory() as session:
        result = await session.execute(
            select(ContentItem).where(ContentItem.site_id == site_id)
        )
        return list(result.scalars().all())


def _push_use_case(db_session, session_factory) -> PushUpdateUseCase:
    return PushUpdateUseCase(
        PropagationRepository(db_session),
        SiteRepository(db_session),
        session_factory,
        site_entity_repo_for,
        max_concurrency=1,
        site_timeout_seconds=10.0,
    )


async def test_partial_failure_then_requeue_only_failed_site(
    db_session, session_factory, make_site, uber_actor
) -> None:
    """Alpha already has the item (update succeeds); Beta has none and the snapshot
    lacks a title, so its insert fails. Alpha keeps its update, the record is pushed,
    and a requeue targets Beta alone."""
    master = await make_site("Master", is_master=True)
    alpha = await make_site("Alpha")
    beta = await make_site("Beta")
    await _seed_item(session_factory, alpha, "Old title")

    svc = PropagationService(PropagationRepository(db_session), SiteRepository(db_session))
    record = await svc.enqueue(
        uber_actor, master, "content_item", "ci-master", {"slug": "welcome", "featured": True}
    )
    await svc.approve(uber_actor, record.id)
    await db_session.commit()

    result = await _push_use_case(db_session, session_factory).execute(uber_actor, record.id)
    await db_session.commit()

    assert result.success == ["Alpha"]
    assert result.failed == ["Beta"]
    assert result.total == 2
    assert result.message == "Propagated to 1 of 2 sites"

    (alpha_item,) = await _items(session_factory, alpha)
    assert alpha_item.featured is True
    assert alpha_item.title == "Old title"
    assert await _items(session_factory, beta) == []

    pushed = await svc.get_record(uber_actor, record.id)
    assert pushed.status == PropagationStatus.PUSHED.value
    assert pushed.pushed_at is not None
    assert sorted(pushed.target_sites) == sorted([alpha, beta])
    assert pushed.failed_sites == [beta]
    assert pushed.source_site_name == "Master"

    retry = await svc.requeue_failed(uber_actor, record.id)
    assert retry.status == PropagationStatus.PENDING.value
    assert retry.retry_of_id == record.id
    assert retry.restrict_site_ids == [beta]
    await svc.approve(uber_actor, retry.id)
    await db_session.commit()

    await _seed_item(session_factory, beta, "Beta title")
    retry_result = await _push_use_case(db_session, session_factory).execute(
        uber_actor, retry.id
    )
    await db_session.commit()

    assert retry_result.success == ["Beta"]
    assert retry_result.failed == []
    (beta_item,) = await _items(session_factory, beta)
    assert beta_item.featured is True


async def test_push_to_every_branch_inserts_rows(
    db_session, session_factory, make_site, uber_actor
) -> None:
    master = await make_site("Master", is_master=True)
    branches = [await make_site(name) for name in ("One", "Two", "Three")]

    svc = PropagationService(PropagationRepository(db_session), SiteRepository(db_session))
    record = await svc.enqueue(
        uber_actor,
        master,
        "content_category",
        None,
        {"id": "master-cat", "slug": "news", "name": "News"},
    )
    await svc.approve(uber_actor, record.id)
    await db_session.commit()

    result = await _push_use_case(db_session, session_factory).execute(uber_actor, record.id)
    await db_session.commit()

    assert result.failed == []
    assert result.success == ["One", "Three", "Two"]
    async with session_factory() as session:
        repo = site_entity_repo_for("content_category", session)
        for site_id in branches:
            (row,) = await repo.list_for_site(site_id)
            assert row.name == "News"
            assert row.id != "master-cat"
        assert await repo.list_for_site(master) == []


async def test_genesis_block_update_keeps_branch_row_identity(
    db_session, session_factory, make_site, uber_actor
) -> None:
    """Master edits "genesis-block"; branch B already has it and keeps its row id,
    branch C does not and gets a fresh row with its own id."""
    master = await make_site("Master", is_master=True)
    branch_b = await make_site("Branch B")
    branch_c = await make_site("Branch C")
    async with session_factory() as session:
        async with session.begin():
            existing = ContentItem(
                site_id=branch_b,
                slug="genesis-block",
                title="Genesis",
                description="First post",
            )
            session.add(existing)
            await session.flush()
            existing_id = existing.id

    svc = PropagationService(PropagationRepository(db_session), SiteRepository(db_session))
    record = await svc.enqueue(
        uber_actor,
        master,
        "content_item",
        "master-genesis",
        {
            "id": "master-genesis",
            "site_id": master,
            "slug": "genesis-block",
            "title": "Genesis Block",
            "description": "Where it all began",
        },
    )
    await svc.approve(uber_actor, record.id)
    await db_session.commit()

    result = await _push_use_case(db_session, session_factory).execute(uber_actor, record.id)
    await db_session.commit()

    assert result.success == ["Branch B", "Branch C"]
    assert result.failed == []
    assert result.total == 2

    (b_item,) = await _items(session_factory, branch_b)
    assert b_item.id == existing_id
    assert b_item.title == "Genesis Block"
    assert b_item.description == "Where it all began"
    assert b_item.site_id == branch_b

    (c_item,) = await _items(session_factory, branch_c)
    assert c_item.id not in (existing_id, "master-genesis")
    assert c_item.title == "Genesis Block"
    assert c_item.site_id == branch_c
