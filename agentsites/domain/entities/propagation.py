"""Propagation record domain entity.

A propagation record captures one master-site change awaiting review and
distribution. Lifecycle: pending -> approved -> pushed, or pending ->
rejected. Transitions are checked here; persistence applies them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from agentsites.domain.enums import PropagationEntityType, PropagationStatus
from agentsites.domain.exceptions import (
    InvalidTransitionException,
    ValidationException,
)


@dataclass
class PropagationRecordEntity:
    """Domain entity for a master-site update (business rules separate from persistence)."""

    id: str
    source_site_id: str
    update_type: PropagationEntityType
    entity_data: dict[str, Any]
    status: PropagationStatus = PropagationStatus.PENDING
    entity_id: str | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    pushed_at: datetime | None = None
    target_sites: list[str] = field(default_factory=list)
    failed_sites: list[str] = field(default_factory=list)
    restrict_site_ids: list[str] | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate record rules. Raises ValidationException if invalid."""
        if not self.source_site_id:
            raise ValidationException(
                "Propagation record requires a source site", field="source_site_id"
            )
        if not isinstance(self.entity_data, dict):
            raise ValidationException(
                "Entity snapshot must be an object", field="entity_data"
            )

    def _require(self, expected: PropagationStatus, attempted: str) -> None:
        if self.status != expected:
            raise InvalidTransitionException(self.id, self.status.value, attempted)

    def approve(self, approver_id: str, at: datetime) -> None:
        """Move pending -> approved, recording who approved and when.

        Raises:
            InvalidTransitionException: If the record is not pending.
        """
        self._require(PropagationStatus.PENDING, "approve")
        self.status = PropagationStatus.APPROVED
        self.approved_by = approver_id
        self.approved_at = at

    def reject(self, approver_id: str, at: datetime) -> None:
        """Move pending -> rejected (terminal)."""
        self._require(PropagationStatus.PENDING, "reject")
        self.status = PropagationStatus.REJECTED
        self.approved_by = approver_id
        self.approved_at = at

    def ensure_pushable(self) -> None:
        """Raise InvalidTransitionException unless the record is approved."""
        self._require(PropagationStatus.APPROVED, "push")

    def mark_pushed(
        self, at: datetime, target_sites: list[str], failed_sites: list[str]
    ) -> None:
        """Move approved -> pushed (terminal), recording attempted and failed sites."""
        self.ensure_pushable()
        self.status = PropagationStatus.PUSHED
        self.pushed_at = at
        self.target_sites = list(target_sites)
        self.failed_sites = list(failed_sites)

    def ensure_requeueable(self) -> None:
        """Raise unless this is a pushed record with failed sites to retry."""
        self._require(PropagationStatus.PUSHED, "requeue")
        if not self.failed_sites:
            raise ValidationException(
                "Propagation record has no failed sites to retry", field="failed_sites"
            )
