"""Known shapes of section ``content`` documents.

Each section slug with a dedicated renderer has a pydantic model describing
its content. Known keys are type-checked, unknown keys are kept so renderers
can grow without a schema change. Slugs without a model accept any JSON
object (an opaque structured value).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from portfolio_cms.constants import SectionSlug
from portfolio_cms.models.errors import ContentValidationError


class _ContentShape(BaseModel):
    model_config = ConfigDict(extra="allow")


class HeroContent(_ContentShape):
    headline: StrictStr = ""
    tagline: StrictStr = ""
    cta_label: StrictStr = ""
    cta_href: StrictStr = ""


class SummaryContent(_ContentShape):
    body: StrictStr = ""


class SkillCategory(_ContentShape):
    name: StrictStr
    skills: list[StrictStr] = Field(default_factory=list)


class SkillsContent(_ContentShape):
    categories: list[SkillCategory] = Field(default_factory=list)


class ExperienceItem(_ContentShape):
    role: StrictStr
    company: StrictStr
    period: StrictStr = ""
    description: StrictStr = ""
    highlights: list[StrictStr] = Field(default_factory=list)


class ExperienceContent(_ContentShape):
    experiences: list[ExperienceItem] = Field(default_factory=list)


class ProcessStep(_ContentShape):
    title: StrictStr
    description: StrictStr = ""


class HowIWorkContent(_ContentShape):
    steps: list[ProcessStep] = Field(default_factory=list)


class ContactContent(_ContentShape):
    email: StrictStr = ""
    message: StrictStr = ""


class ProjectsContent(_ContentShape):
    """The projects section renders the project list; its content is free-form."""


SectionContent = (
    HeroContent
    | SummaryContent
    | SkillsContent
    | ExperienceContent
    | HowIWorkContent
    | ContactContent
    | ProjectsContent
)

CONTENT_SHAPES: dict[str, type[_ContentShape]] = {
    SectionSlug.HERO: HeroContent,
    SectionSlug.SUMMARY: SummaryContent,
    SectionSlug.SKILLS: SkillsContent,
    SectionSlug.EXPERIENCE: ExperienceContent,
    SectionSlug.HOW_I_WORK: HowIWorkContent,
    SectionSlug.PROJECTS: ProjectsContent,
    SectionSlug.CONTACT: ContactContent,
}


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "content"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def parse_section_content(slug: str, value: Any) -> SectionContent | dict[str, Any]:
    """Parse a section content document according to the section slug.

    Args:
        slug: Section slug selecting the expected shape.
        value: Decoded JSON document.

    Returns:
        The matching shape model for known slugs, otherwise the document itself.

    Raises:
        ContentValidationError: If the document is not a JSON object or does not
            match the shape registered for ``slug``.
    """
    if not isinstance(value, dict):
        raise ContentValidationError("content must be a JSON object", field="content")
    if not all(isinstance(key, str) for key in value):
        raise ContentValidationError("content keys must be strings", field="content")

    shape = CONTENT_SHAPES.get(slug)
    if shape is None:
        return value

    try:
        return shape.model_validate(value)
    except ValidationError as exc:
        raise ContentValidationError(
            f"invalid {slug} content: {_format_errors(exc)}", field="content"
        ) from exc
