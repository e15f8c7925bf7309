"""CV data models.

Field names are snake_case in Python and camelCase on the wire
(``firstName``, ``graduationDate``...); both spellings are accepted on input.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _coerce_to_list(v: Any) -> list[str]:
    """Coerce various inputs to list of strings for LLM output robustness."""
    if v is None:
        return []
    if isinstance(v, list):
        return [str(item).strip() for item in v if item is not None and str(item).strip()]
    if isinstance(v, str):
        # Try to parse as JSON array first
        v = v.strip()
        if v.startswith("["):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(item) for item in parsed]
            except json.JSONDecodeError:
                pass
        # Treat as comma-separated or single item
        if "," in v:
            return [item.strip() for item in v.split(",") if item.strip()]
        return [v] if v else []
    return [str(v)]


def _coerce_to_model_list(v: Any) -> list[Any]:
    """Coerce JSON string to list of dicts for nested model parsing."""
    if v is None:
        return []
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        v = v.strip()
        if v.startswith("["):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
        return []
    return []


def _coerce_to_mapping(v: Any) -> dict[str, str]:
    """Coerce language input to an ordered ``{language: level}`` mapping.

    Accepts a mapping, a list of ``{"language": ..., "level": ...}`` objects
    (the shape some models answer with) or a JSON object string. Entries with
    a blank language name are dropped; insertion order is preserved.
    """
    if v is None:
        return {}
    if isinstance(v, str):
        v = v.strip()
        if not v.startswith("{"):
            return {}
        try:
            v = json.loads(v)
        except json.JSONDecodeError:
            return {}
    if isinstance(v, list):
        pairs = []
        for item in v:
            if isinstance(item, dict):
                pairs.append((item.get("language") or item.get("name"), item.get("level")))
        v = dict(pairs)
    if not isinstance(v, dict):
        return {}
    result: dict[str, str] = {}
    for language, level in v.items():
        if language is None or not str(language).strip():
            continue
        result[str(language).strip()] = "" if level is None else str(level).strip()
    return result


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class _CVModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )


class Project(_CVModel):
    """Project entry, standalone or nested under an experience."""

    name: str
    description: str
    technologies: list[str] = Field(default_factory=list)
    github: str | None = None
    url: str | None = None

    @field_validator("technologies", mode="before")
    @classmethod
    def coerce_to_list(cls, v: Any) -> list[str]:
        return _coerce_to_list(v)

    @field_validator("github", "url", mode="before")
    @classmethod
    def blank_links_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class GitHubProject(Project):
    """Project derived from a GitHub repository, with its popularity counts."""

    stars: int = 0
    forks: int = 0


class Experience(_CVModel):
    """Work experience entry."""

    company: str
    position: str
    start_date: str
    end_date: str
    summary: str | None = None
    projects: list[Project] = Field(default_factory=list)

    @field_validator("summary", mode="before")
    @classmethod
    def blank_summary_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("projects", mode="before")
    @classmethod
    def coerce_model_lists(cls, v: Any) -> list[Any]:
        return _coerce_to_model_list(v)


class Education(_CVModel):
    """Education entry."""

    institution: str
    degree: str
    graduation_date: str
    start_date: str | None = None

    @field_validator("start_date", mode="before")
    @classmethod
    def blank_start_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class CVRecord(_CVModel):
    """A fully merged, validated CV ready for rendering."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str | None = None
    github: str | None = None
    linkedin: str | None = None
    about: str | None = None
    skills: list[str] = Field(default_factory=list)
    languages: dict[str, str] = Field(default_factory=dict)
    education: list[Education] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)

    @field_validator("phone", "github", "linkedin", "about", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("skills", mode="before")
    @classmethod
    def coerce_to_list(cls, v: Any) -> list[str]:
        return _coerce_to_list(v)

    @field_validator("languages", mode="before")
    @classmethod
    def coerce_to_mapping(cls, v: Any) -> dict[str, str]:
        return _coerce_to_mapping(v)

    @field_validator("education", "experience", "projects", mode="before")
    @classmethod
    def coerce_model_lists(cls, v: Any) -> list[Any]:
        return _coerce_to_model_list(v)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class PartialCVRecord(_CVModel):
    """A CV fragment from one source (form, model completion, repositories).

    Every field is optional; fragments are reconciled into a ``CVRecord`` by
    ``cv_generator.enrichment.merge``.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    github: str | None = None
    linkedin: str | None = None
    about: str | None = None
    skills: list[str] = Field(default_factory=list)
    languages: dict[str, str] = Field(default_factory=dict)
    education: list[Education] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)

    @field_validator(
        "first_name", "last_name", "email", "phone", "github", "linkedin", "about", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("skills", mode="before")
    @classmethod
    def coerce_to_list(cls, v: Any) -> list[str]:
        return _coerce_to_list(v)

    @field_validator("languages", mode="before")
    @classmethod
    def coerce_to_mapping(cls, v: Any) -> dict[str, str]:
        return _coerce_to_mapping(v)

    @field_validator("education", "experience", "projects", mode="before")
    @classmethod
    def coerce_model_lists(cls, v: Any) -> list[Any]:
        return _coerce_to_model_list(v)
