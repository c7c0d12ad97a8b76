"""Services"""

from portfolio_cms.services.authoring import AuthoringService
from portfolio_cms.services.content_store import ContentStore
from portfolio_cms.services.preview import PreviewProjector
from portfolio_cms.services.publishing import PublishingEngine

__all__ = [
    "AuthoringService",
    "ContentStore",
    "PreviewProjector",
    "PublishingEngine",
]
