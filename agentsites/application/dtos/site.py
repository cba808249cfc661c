"""DTOs for agent site use cases."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class SiteResult:
    """Agent site read-model."""

    id: str
    display_name: str
    site_slug: str
    is_master: bool
    status: str
    seed_status: str | None
    owner_user_id: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class SeedResult:
    """Outcome of seeding a site from the master template (rows upserted per entity type)."""

    site_id: str
    master_site_id: str
    counts: dict[str, int] = field(default_factory=dict)
