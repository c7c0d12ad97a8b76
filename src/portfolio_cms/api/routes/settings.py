"""Site settings, theme settings and resume activation routes."""

from __future__ import annotations

from typing import Annotated, Literal

from fastapi import APIRouter, Path, status

from portfolio_cms.api.dependencies import AuthoringDep, EngineDep
from portfolio_cms.api.schemas.settings import SettingsUpdateRequest, SettingValueResponse
from portfolio_cms.constants import EntityType

router = APIRouter(tags=["settings"])

_SCOPES = {"site": EntityType.SITE_SETTING, "theme": EntityType.THEME_SETTING}

ScopePath = Annotated[Literal["site", "theme"], Path(description="Settings group")]


def _to_value(record: dict) -> SettingValueResponse:
    published = record["published"]
    return SettingValueResponse(
        id=record["id"],
        draft=record["draft"]["value"],
        published=published["value"] if published is not None else None,
        is_published=record["is_published"],
    )


@router.get("/settings/{scope}", response_model=dict[str, SettingValueResponse])
def get_settings(scope: ScopePath, authoring: AuthoringDep) -> dict[str, SettingValueResponse]:
    """Get every key of a settings group with its draft and published value."""
    records = authoring.list_entities(_SCOPES[scope])
    return {record["attributes"]["key"]: _to_value(record) for record in records}


@router.put("/settings/{scope}", response_model=dict[str, SettingValueResponse])
def update_settings(
    scope: ScopePath, data: SettingsUpdateRequest, authoring: AuthoringDep
) -> dict[str, SettingValueResponse]:
    """Write draft values for the given keys, creating missing keys."""
    records = authoring.update_settings(_SCOPES[scope], data.values)
    return {key: _to_value(record) for key, record in records.items()}


@router.post("/resume/{resume_id}/activate", status_code=status.HTTP_204_NO_CONTENT)
def activate_resume(
    resume_id: Annotated[str, Path(description="Resume asset ID")], engine: EngineDep
) -> None:
    """Make this resume asset the only active one."""
    engine.activate_resume(resume_id)
