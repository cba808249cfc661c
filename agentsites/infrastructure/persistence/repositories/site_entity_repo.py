"""Per-site entity repository with natural-key upsert.

Each propagatable entity type maps to an ORM model and the columns that
identify the "same" row across sites. Upserting a snapshot into a site
updates the matching row or inserts a new one with that site's id.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from agentsites.domain.enums import PropagationEntityType
from agentsites.domain.exceptions import ValidationException
from agentsites.infrastructure.persistence.database import Base
from agentsites.infrastructure.persistence.models.content import (
    AgentBranch,
    ContentCategory,
    ContentItem,
    MissionPillar,
    UtilitiesConfig,
)

# Never copied from a snapshot onto a target row.
_PROTECTED_COLUMNS = frozenset({"id", "site_id", "created_at", "updated_at"})


ModelType = TypeVar("ModelType", bound=Base)


class SiteEntityRepository(Generic[ModelType]):
    """Upsert and read one propagatable entity type within a site."""

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        natural_key: tuple[str, ...],
    ) -> None:
        self.db = db
        self.model = model
        self.natural_key = natural_key
        self._columns = frozenset(attr.key for attr in sa_inspect(model).column_attrs)

    def _key_values(self, data: dict[str, Any]) -> dict[str, Any]:
        missing = [k for k in self.natural_key if data.get(k) in (None, "")]
        if missing:
            raise ValidationException(
                f"{self.model.__tablename__} snapshot is missing its match key: "
                + ", ".join(missing),
                field=missing[0],
            )
        return {k: data[k] for k in self.natural_key}

    async def find_by_natural_key(
        self, site_id: str, data: dict[str, Any]
    ) -> ModelType | None:
        model: Any = self.model
        key = self._key_values(data)
        stmt = select(self.model).where(model.site_id == site_id)
        for column, value in key.items():
            stmt = stmt.where(getattr(model, column) == value)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def upsert_by_natural_key(
        self, site_id: str, data: dict[str, Any]
    ) -> tuple[str, bool]:
        """Update the row matching the snapshot's natural key, or insert one.

        Snapshot keys that are not columns are ignored; id, site_id and
        timestamps are never copied.

        Returns:
            (row id, created) where created is True for an insert.

        Raises:
            ValidationException: If the snapshot lacks its natural key.
        """
        values = {
            k: v
            for k, v in data.items()
            if k in self._columns and k not in _PROTECTED_COLUMNS
        }
        existing = await self.find_by_natural_key(site_id, data)
        if existing is not None:
            for column, value in values.items():
                if column not in self.natural_key:
                    setattr(existing, column, value)
            await self.db.flush()
            return existing.id, False
        row = self.model(site_id=site_id, **values)
        self.db.add(row)
        await self.db.flush()
        return row.id, True

    async def list_for_site(self, site_id: str) -> list[ModelType]:
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).where(model.site_id == site_id).order_by(model.created_at, model.id)
        )
        return list(result.scalars().all())

    def to_snapshot(self, row: ModelType) -> dict[str, Any]:
        """Column values of a row, without site_id and timestamps."""
        return {
            column: getattr(row, column)
            for column in self._columns
            if column not in ("site_id", "created_at", "updated_at")
        }


SITE_ENTITY_STRATEGIES: dict[PropagationEntityType, tuple[type[Base], tuple[str, ...]]] = {
    PropagationEntityType.CONTENT_ITEM: (ContentItem, ("slug",)),
    PropagationEntityType.CONTENT_CATEGORY: (ContentCategory, ("slug",)),
    PropagationEntityType.MISSION_PILLAR: (MissionPillar, ("display_name",)),
    PropagationEntityType.AGENT_BRANCH: (AgentBranch, ("display_name",)),
    PropagationEntityType.UTILITIES_CONFIG: (UtilitiesConfig, ()),
}


def site_entity_repo_for(
    entity_type: PropagationEntityType | str, db: AsyncSession
) -> SiteEntityRepository[Any]:
    """Return the repository that upserts entity_type within a site."""
    model, natural_key = SITE_ENTITY_STRATEGIES[PropagationEntityType(entity_type)]
    return SiteEntityRepository(db, model, natural_key)
