"""Data models and type definitions"""

from portfolio_cms.models.errors import (
    ContentError,
    ContentValidationError,
    DiscardFailedError,
    EntityNotFoundError,
    PartialBatchFailure,
    PublishFailedError,
    ResumeActivationError,
)
from portfolio_cms.models.publishing import (
    BatchItemResult,
    BatchReport,
    UnpublishedItem,
)

__all__ = [
    "BatchItemResult",
    "BatchReport",
    "ContentError",
    "ContentValidationError",
    "DiscardFailedError",
    "EntityNotFoundError",
    "PartialBatchFailure",
    "PublishFailedError",
    "ResumeActivationError",
    "UnpublishedItem",
]
