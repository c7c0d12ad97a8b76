"""Pydantic schemas for site and theme settings endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SettingValueResponse(BaseModel):
    """Draft and published value of one settings key."""

    id: str
    draft: Any = None
    published: Any = None
    is_published: bool


class SettingsUpdateRequest(BaseModel):
    """Draft values to write, keyed by setting key. Missing keys are created."""

    values: dict[str, Any] = Field(..., description="Setting key to new draft value")
