"""Site entity repository integration tests (natural-key upsert) on SQLite."""

import pytest
from sqlalchemy import func, select

from agentsites.domain.enums import PropagationEntityType
from agentsites.domain.exceptions import ValidationException
from agentsites.infrastructure.persistence.models import (
    AgentBranch,
    ContentItem,
    MissionPillar,
    UtilitiesConfig,
)
from agentsites.infrastructure.persistence.repositories import site_entity_repo_for


async def _count(db_session, model, site_id: str) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(model).where(model.site_id == site_id)
    )
    return result.scalar_one()


async def test_insert_then_update_by_slug(db_session, make_site) -> None:
    """Same slug at the same site updates in place; the second upsert creates nothing."""
    site_id = await make_site("Branch One")
    repo = site_entity_repo_for(PropagationEntityType.CONTENT_ITEM, db_session)

    row_id, created = await repo.upsert_by_natural_key(
        site_id, {"id": "master-row-id", "slug": "welcome", "title": "Welcome"}
    )
    assert created is True
    assert row_id != "master-row-id"

    same_id, created_again = await repo.upsert_by_natural_key(
        site_id, {"slug": "welcome", "title": "Welcome back", "featured": True}
    )
    assert created_again is False
    assert same_id == row_id
    assert await _count(db_session, ContentItem, site_id) == 1

    row = await repo.find_by_natural_key(site_id, {"slug": "welcome"})
    assert row.title == "Welcome back"
    assert row.featured is True
    assert row.site_id == site_id


async def test_same_slug_on_another_site_is_a_new_row(db_session, make_site) -> None:
    a = await make_site("Branch A")
    b = await make_site("Branch B")
    repo = site_entity_repo_for("content_item", db_session)

    first, _ = await repo.upsert_by_natural_key(a, {"slug": "x", "title": "X"})
    second, created = await repo.upsert_by_natural_key(b, {"slug": "x", "title": "X"})

    assert created is True
    assert first != second


async def test_snapshot_site_id_and_unknown_keys_are_ignored(db_session, make_site) -> None:
    site_id = await make_site("Branch")
    other = await make_site("Other")
    repo = site_entity_repo_for("content_category", db_session)

    row_id, _ = await repo.upsert_by_natural_key(
        site_id,
        {"slug": "news", "name": "News", "site_id": other, "not_a_column": 1},
    )

    row = await repo.find_by_natural_key(site_id, {"slug": "news"})
    assert row.id == row_id
    assert row.site_id == site_id
    assert await repo.list_for_site(other) == []


async def test_missing_natural_key_is_rejected(db_session, make_site) -> None:
    site_id = await make_site("Branch")
    repo = site_entity_repo_for("mission_pillar", db_session)
    with pytest.raises(ValidationException) as exc_info:
        await repo.upsert_by_natural_key(site_id, {"short_summary": "no name"})
    assert exc_info.value.details == {"field": "display_name"}


async def test_utilities_config_is_one_row_per_site(db_session, make_site) -> None:
    site_id = await make_site("Branch")
    repo = site_entity_repo_for("utilities_config", db_session)

    await repo.upsert_by_natural_key(site_id, {"social_on": True})
    _, created = await repo.upsert_by_natural_key(site_id, {"teaching_on": True})

    assert created is False
    assert await _count(db_session, UtilitiesConfig, site_id) == 1
    (row,) = await repo.list_for_site(site_id)
    assert row.social_on is True
    assert row.teaching_on is True


async def test_to_snapshot_drops_site_and_timestamps(db_session, make_site) -> None:
    site_id = await make_site("Branch")
    repo = site_entity_repo_for("agent_branch", db_session)
    await repo.upsert_by_natural_key(site_id, {"display_name": "Teacher", "tone": "warm"})

    (row,) = await repo.list_for_site(site_id)
    snapshot = repo.to_snapshot(row)

    assert snapshot["display_name"] == "Teacher"
    assert snapshot["tone"] == "warm"
    assert "site_id" not in snapshot
    assert "created_at" not in snapshot


@pytest.mark.parametrize(
    ("entity_type", "model", "first", "second", "changed"),
    [
        (
            PropagationEntityType.MISSION_PILLAR,
            MissionPillar,
            {"display_name": "Learn to Earn", "short_summary": "v1"},
            {"display_name": "Learn to Earn", "short_summary": "v2", "kpis_json": ["reach"]},
            {"short_summary": "v2", "kpis_json": ["reach"]},
        ),
        (
            PropagationEntityType.AGENT_BRANCH,
            AgentBranch,
            {"display_name": "Teacher", "tone": "warm"},
            {"display_name": "Teacher", "tone": "formal", "audience": "students"},
            {"tone": "formal", "audience": "students"},
        ),
    ],
)
async def test_display_name_strategies_update_in_place(
    db_session, make_site, entity_type, model, first, second, changed
) -> None:
    """Pillars and branches match on display_name: a second upsert keeps the row id."""
    site_id = await make_site("Branch")
    repo = site_entity_repo_for(entity_type, db_session)

    row_id, created = await repo.upsert_by_natural_key(site_id, first)
    same_id, created_again = await repo.upsert_by_natural_key(site_id, second)

    assert created is True
    assert created_again is False
    assert same_id == row_id
    assert await _count(db_session, model, site_id) == 1
    (row,) = await repo.list_for_site(site_id)
    assert row.id == row_id
    for column, value in changed.items():
        assert getattr(row, column) == value


async def test_renamed_display_name_inserts_a_new_row(db_session, make_site) -> None:
    site_id = await make_site("Branch")
    repo = site_entity_repo_for("mission_pillar", db_session)

    first, _ = await repo.upsert_by_natural_key(site_id, {"display_name": "Old name"})
    second, created = await repo.upsert_by_natural_key(site_id, {"display_name": "New name"})

    assert created is True
    assert second != first
    assert await _count(db_session, MissionPillar, site_id) == 2
