"""Exceptions raised by the content services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from portfolio_cms.models.publishing import BatchReport


class ContentError(Exception):
    """Base class for all content service errors."""


class EntityNotFoundError(ContentError):
    """Raised when an entity id does not resolve, or resolves to a soft-deleted row."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        super().__init__(f"{entity_type} '{entity_id}' not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ContentValidationError(ContentError):
    """Raised when a field value has the wrong type or shape."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class PublishFailedError(ContentError):
    """Raised when the store fails mid-publish; the transaction was rolled back."""


class DiscardFailedError(ContentError):
    """Raised when the store fails mid-discard; the transaction was rolled back."""


class ResumeActivationError(ContentError):
    """Raised when switching the active resume fails; the previous one stays active."""


class PartialBatchFailure(ContentError):
    """Raised by callers that treat any failed item of a bulk operation as fatal.

    The full per-item report is available as ``report``.
    """

    def __init__(self, report: BatchReport) -> None:
        super().__init__(
            f"{report.action}: {report.failed_count} of "
            f"{report.failed_count + report.succeeded_count} items failed"
        )
        self.report = report
