"""Reconcile CV fragments from several sources into one record.

Precedence rules:

* Scalar fields: the manual value wins unless it is missing or blank.
* ``skills``: manual labels first, then generated ones, de-duplicated.
* ``languages``: merged key by key; manual keys keep their position and
  their level unless it is blank.
* ``education``, ``experience``, ``projects``: concatenated and
  de-duplicated by identity (institution + degree, company + position,
  project name). Duplicates are merged field by field with the same rules,
  so nested technology lists and experience projects are unioned.

Labels and identities compare case-insensitively, ignoring ``**`` markers.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

from cv_generator.models import CVRecord, Education, Experience, PartialCVRecord, Project
from cv_generator.pdf.segmenter import strip_emphasis

logger = logging.getLogger(__name__)

DEFAULT_FIRST_NAME = "Anonymous"
DEFAULT_LAST_NAME = "User"
DEFAULT_EMAIL = "no-email@example.com"
DEFAULT_PROJECT_DESCRIPTION = "No description provided"

M = TypeVar("M", bound=BaseModel)

PartialInput = PartialCVRecord | Mapping[str, Any] | None


def label_key(label: str) -> str:
    """Comparison key for skill and technology labels."""
    return " ".join(strip_emphasis(label).split()).casefold()


def dedupe_labels(labels: Iterable[str]) -> list[str]:
    """Drop repeated labels, keeping the first spelling seen."""
    seen: set[str] = set()
    result = []
    for label in labels:
        key = label_key(label)
        if key and key not in seen:
            seen.add(key)
            result.append(label)
    return result


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _merge_languages(primary: Mapping[str, str], secondary: Mapping[str, str]) -> dict[str, str]:
    merged: dict[str, str] = {}
    keys: dict[str, str] = {}
    for source in (primary, secondary):
        for language, level in source.items():
            key = label_key(language)
            if key not in keys:
                keys[key] = language
                merged[language] = level
            elif _is_missing(merged[keys[key]]):
                merged[keys[key]] = level
    return merged


def _merge_entity(primary: M, secondary: M) -> M:
    """Field-wise merge of two descriptions of the same entry."""
    updates: dict[str, Any] = {}
    for name in type(primary).model_fields:
        ours = getattr(primary, name)
        theirs = getattr(secondary, name, None)
        if name == "technologies":
            updates[name] = dedupe_labels([*ours, *(theirs or [])])
        elif name == "projects":
            updates[name] = merge_entries(ours, theirs or [], _project_key)
        elif _is_missing(ours) and not _is_missing(theirs):
            updates[name] = theirs
    return primary.model_copy(update=updates)


def merge_entries(primary: Iterable[M], secondary: Iterable[M], key: Callable[[M], Any]) -> list[M]:
    """Concatenate two entry lists, merging entries with the same identity."""
    merged: dict[Any, M] = {}
    for entry in [*primary, *secondary]:
        identity = key(entry)
        if identity in merged:
            merged[identity] = _merge_entity(merged[identity], entry)
        else:
            merged[identity] = entry
    return list(merged.values())


def _project_key(project: Project) -> str:
    return label_key(project.name)


def _education_key(entry: Education) -> tuple[str, str]:
    return label_key(entry.institution), label_key(entry.degree)


def _experience_key(entry: Experience) -> tuple[str, str]:
    return label_key(entry.company), label_key(entry.position)


def _as_partial(value: PartialInput) -> PartialCVRecord:
    if value is None:
        return PartialCVRecord()
    if isinstance(value, PartialCVRecord):
        return value
    if isinstance(value, CVRecord):
        return PartialCVRecord.model_validate(dict(value))
    return PartialCVRecord.model_validate(value)


def merge_records(manual: PartialInput, generated: PartialInput) -> PartialCVRecord:
    """Merge a manual fragment with a generated one; manual data takes precedence."""
    ours, theirs = _as_partial(manual), _as_partial(generated)

    scalars = {}
    for name in ("first_name", "last_name", "email", "phone", "github", "linkedin", "about"):
        value = getattr(ours, name)
        scalars[name] = getattr(theirs, name) if _is_missing(value) else value

    return PartialCVRecord(
        **scalars,
        skills=dedupe_labels([*ours.skills, *theirs.skills]),
        languages=_merge_languages(ours.languages, theirs.languages),
        education=merge_entries(ours.education, theirs.education, _education_key),
        experience=merge_entries(ours.experience, theirs.experience, _experience_key),
        projects=merge_entries(ours.projects, theirs.projects, _project_key),
    )


def _project_defaults(project: Project) -> Project:
    if _is_missing(project.description):
        return project.model_copy(update={"description": DEFAULT_PROJECT_DESCRIPTION})
    return project


def finalize_record(partial: PartialCVRecord) -> CVRecord:
    """Fill required defaults and freeze a fragment into a ``CVRecord``."""
    experience = [
        entry.model_copy(update={"projects": [_project_defaults(p) for p in entry.projects]})
        for entry in partial.experience
    ]
    return CVRecord(
        first_name=partial.first_name or DEFAULT_FIRST_NAME,
        last_name=partial.last_name or DEFAULT_LAST_NAME,
        email=partial.email or DEFAULT_EMAIL,
        phone=partial.phone,
        github=partial.github,
        linkedin=partial.linkedin,
        about=partial.about,
        skills=partial.skills,
        languages=partial.languages,
        education=partial.education,
        experience=experience,
        projects=[_project_defaults(p) for p in partial.projects],
    )


def build_cv_record(
    manual: PartialInput = None,
    generated: PartialInput = None,
    repository_projects: Iterable[Project] | None = None,
) -> CVRecord:
    """Reconcile manual, generated and repository data into a final record.

    Repository projects rank below both other sources: they only add
    projects or fill gaps in projects already described.
    """
    merged = merge_records(manual, generated)
    if repository_projects:
        merged = merge_records(merged, PartialCVRecord(projects=list(repository_projects)))
    record = finalize_record(merged)
    logger.debug(
        f"Built CV record for {record.full_name}: {len(record.experience)} experience, "
        f"{len(record.projects)} project(s)"
    )
    return record
