"""DTOs for the propagation pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class PropagationRecordResult:
    """Propagation record read-model, with the source site's name and slug when joined."""

    id: str
    source_site_id: str
    update_type: str
    entity_id: str | None
    entity_data: dict[str, Any]
    status: str
    created_by: str
    approved_by: str | None
    approved_at: datetime | None
    created_at: datetime
    pushed_at: datetime | None
    target_sites: list[str] = field(default_factory=list)
    failed_sites: list[str] = field(default_factory=list)
    notes: str | None = None
    retry_of_id: str | None = None
    restrict_site_ids: list[str] | None = None
    source_site_name: str | None = None
    source_site_slug: str | None = None


@dataclass(frozen=True)
class FanoutResult:
    """Per-push outcome: branch-site display names that succeeded or failed.

    A non-empty failed list is a partial fan-out failure; it is reported, not raised.
    """

    success: list[str]
    failed: list[str]
    total: int

    @property
    def message(self) -> str:
        return f"Propagated to {len(self.success)} of {self.total} sites"
