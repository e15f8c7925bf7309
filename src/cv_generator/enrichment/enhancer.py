"""Turn free-text CV input into structured data with an LLM."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

from cv_generator.config import get_settings
from cv_generator.enrichment.json_extract import extract_json_object
from cv_generator.enrichment.merge import (
    DEFAULT_PROJECT_DESCRIPTION,
    PartialInput,
    build_cv_record,
)
from cv_generator.enrichment.prompts import build_cv_prompt
from cv_generator.exceptions import EnhancementError, LLMError
from cv_generator.llm.base import LLMProvider, provider_from_settings
from cv_generator.models import CVRecord, Education, Experience, PartialCVRecord, Project

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

PROGRESS_INITIALIZING = "Initializing CV generation..."
PROGRESS_CONNECTED = "Connected to AI model, generating CV data..."
PROGRESS_COMPLETE = "AI generation complete, processing result..."
PROGRESS_FORMATTING = "Formatting CV data..."

_ENTITY_FIELDS: dict[str, tuple[str, type[BaseModel]]] = {
    "education": ("education", Education),
    "experience": ("experience", Experience),
    "projects": ("project", Project),
}


def _notify(callback: ProgressCallback | None, message: str) -> None:
    logger.info(message)
    if callback is not None:
        callback(message)


def _with_project_defaults(project: Any) -> Any:
    if not isinstance(project, dict):
        return project
    project = dict(project)
    if not project.get("description"):
        project["description"] = DEFAULT_PROJECT_DESCRIPTION
    if project.get("technologies") is None:
        project["technologies"] = []
    return project


def _valid_entities(
    items: Any, label: str, model: type[BaseModel], warnings: list[str]
) -> list[BaseModel]:
    """Validate entries one by one, skipping the ones a model got wrong."""
    if not isinstance(items, list):
        if items not in (None, "", {}):
            warnings.append(f"Ignored {label} data that is not a list")
        return []

    valid = []
    for index, item in enumerate(items, start=1):
        if model is Project:
            item = _with_project_defaults(item)
        elif model is Experience and isinstance(item, dict):
            item = {
                **item,
                "projects": [_with_project_defaults(p) for p in item.get("projects") or []],
            }
        try:
            valid.append(model.model_validate(item))
        except ValidationError as e:
            message = f"Skipped invalid {label} entry {index}: {e.error_count()} error(s)"
            logger.warning(f"{message}\n{e}")
            warnings.append(message)
    return valid


def parse_cv_completion(raw: str) -> tuple[PartialCVRecord, list[str]]:
    """Parse a model completion into a CV fragment.

    Returns:
        The fragment and warnings about entries that had to be skipped.

    Raises:
        EnhancementError: If the completion holds no usable JSON object.
    """
    data = extract_json_object(raw)
    warnings: list[str] = []

    entities = {}
    for key, (label, model) in _ENTITY_FIELDS.items():
        entities[key] = _valid_entities(data.pop(key, None), label, model, warnings)

    try:
        partial = PartialCVRecord.model_validate({**data, **entities})
    except ValidationError as e:
        raise EnhancementError(f"Generated CV data is invalid: {e}", raw=raw) from e
    return partial, warnings


class CVEnhancer:
    """Generate CV data from free text with a configured provider."""

    def __init__(
        self,
        provider: LLMProvider,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.warnings: list[str] = []

    def generate(
        self, text: str, progress_callback: ProgressCallback | None = None
    ) -> PartialCVRecord:
        """Ask the model for a CV built from ``text``.

        Warnings about skipped entries are kept in ``self.warnings``.

        Raises:
            LLMError: If the provider cannot answer.
            EnhancementError: If the answer cannot be parsed.
        """
        self.warnings = []
        _notify(progress_callback, PROGRESS_INITIALIZING)
        prompt = build_cv_prompt(text)

        _notify(progress_callback, PROGRESS_CONNECTED)
        raw = self.provider.complete(
            prompt, temperature=self.temperature, max_tokens=self.max_tokens
        )

        _notify(progress_callback, PROGRESS_COMPLETE)
        partial, self.warnings = parse_cv_completion(raw)
        return partial


@dataclass
class EnhancementResult:
    """Outcome of ``enhance_cv``.

    ``enhanced`` is False when the model step was skipped or failed and the
    record was built from the other sources only.
    """

    record: CVRecord
    enhanced: bool
    warnings: list[str] = field(default_factory=list)


def enhance_cv(
    text: str | None,
    manual: PartialInput = None,
    provider: LLMProvider | None = None,
    repository_projects: Iterable[Project] | None = None,
    progress_callback: ProgressCallback | None = None,
) -> EnhancementResult:
    """Build a CV record from free text, form data and repository projects.

    A model failure is recoverable when manual data exists: the record is
    built without the generated part and a warning explains why.

    Raises:
        LLMError, EnhancementError: If the model step fails and there is no
            manual data to fall back on.
        ValueError: If neither text nor manual data is given.
    """
    if not (text and text.strip()) and manual is None:
        raise ValueError("Either text or manual CV data is required")

    generated: PartialCVRecord | None = None
    warnings: list[str] = []

    if text and text.strip():
        if provider is None:
            provider = provider_from_settings(get_settings())
        enhancer = CVEnhancer(provider)
        try:
            generated = enhancer.generate(text, progress_callback)
            warnings.extend(enhancer.warnings)
        except (LLMError, EnhancementError) as e:
            if manual is None:
                raise
            logger.warning(f"CV enhancement failed, using manual data only: {e}")
            warnings.append(f"Could not enhance CV: {e}")

    _notify(progress_callback, PROGRESS_FORMATTING)
    record = build_cv_record(manual, generated, repository_projects)
    return EnhancementResult(record=record, enhanced=generated is not None, warnings=warnings)
