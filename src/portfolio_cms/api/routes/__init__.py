"""Route handlers for the API."""

from portfolio_cms.api.routes import content, health, preview, publishing, settings

__all__ = [
    "content",
    "health",
    "preview",
    "publishing",
    "settings",
]
