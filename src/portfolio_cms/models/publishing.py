"""Result types returned by the publishing engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from portfolio_cms.constants import EntityType
from portfolio_cms.models.errors import PartialBatchFailure


@dataclass(slots=True)
class UnpublishedItem:
    """Summary of an entity whose draft differs from what is published.

    Attributes:
        id: Entity id.
        entity_type: Entity type.
        display_name: Human label (title, key, platform, ...).
        updated_at: Last mutation time of the entity row.
    """

    id: str
    entity_type: EntityType
    display_name: str
    updated_at: datetime | None = None


@dataclass(slots=True)
class BatchItemResult:
    """Outcome of one item in a bulk publish or discard."""

    id: str
    entity_type: EntityType
    display_name: str
    success: bool
    error: str | None = None


@dataclass(slots=True)
class BatchReport:
    """Aggregate result of a bulk operation.

    Items are independent: a failure on one never rolls back another, so the
    report lists exactly which items need a retry.
    """

    action: str
    succeeded: list[BatchItemResult] = field(default_factory=list)
    failed: list[BatchItemResult] = field(default_factory=list)

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed

    def record(self, result: BatchItemResult) -> None:
        if result.success:
            self.succeeded.append(result)
        else:
            self.failed.append(result)

    def raise_for_failures(self) -> None:
        """Raise :class:`PartialBatchFailure` if any item failed."""
        if self.failed:
            raise PartialBatchFailure(self)
