"""Tests for LLM-based CV enhancement."""

import json
from unittest.mock import MagicMock

import pytest

from cv_generator.enrichment import (
    CVEnhancer,
    enhance_cv,
    extract_json_object,
    parse_cv_completion,
)
from cv_generator.enrichment.enhancer import (
    PROGRESS_COMPLETE,
    PROGRESS_CONNECTED,
    PROGRESS_FORMATTING,
    PROGRESS_INITIALIZING,
)
from cv_generator.enrichment.prompts import (
    README_LIMIT,
    build_cv_prompt,
    build_project_analysis_prompt,
)
from cv_generator.exceptions import EnhancementError, LLMError
from cv_generator.llm.base import LLMProvider

GENERATED_CV = {
    "firstName": "Jane",
    "lastName": "Doe",
    "email": "jane@example.com",
    "about": "Engineer.",
    "skills": ["Python", "**Go**"],
    "languages": {"English": "C1"},
    "experience": [
        {"company": "Tech Corp", "position": "Engineer", "startDate": "2020", "endDate": "Now"}
    ],
    "education": [],
    "projects": [{"name": "cli", "technologies": None}],
}


def _provider(answer: str | Exception) -> MagicMock:
    provider = MagicMock(spec=LLMProvider)
    if isinstance(answer, Exception):
        provider.complete.side_effect = answer
    else:
        provider.complete.return_value = answer
    return provider


class TestExtractJsonObject:
    """Tests for extract_json_object."""

    def test_plain_json(self) -> None:
        """Test a bare JSON object."""
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_json_fence_preferred(self) -> None:
        """Test that a json code fence wins over surrounding text."""
        text = 'Here you go:\n```\nnot this\n```\n```json\n{"a": 2}\n```'
        assert extract_json_object(text) == {"a": 2}

    def test_bare_fence(self) -> None:
        """Test a code fence without a language."""
        assert extract_json_object('```\n{"a": 3}\n```') == {"a": 3}

    def test_chatty_preamble_and_trailer(self) -> None:
        """Test an object surrounded by prose."""
        text = 'Sure! Here is the CV: {"a": {"b": 4}} Let me know if you need more.'
        assert extract_json_object(text) == {"a": {"b": 4}}

    def test_no_object_raises(self) -> None:
        """Test that text without an object raises."""
        with pytest.raises(EnhancementError, match="no JSON object") as exc_info:
            extract_json_object("I cannot help with that.")
        assert exc_info.value.raw == "I cannot help with that."

    def test_invalid_json_raises(self) -> None:
        """Test that malformed JSON raises."""
        with pytest.raises(EnhancementError, match="not valid JSON"):
            extract_json_object('{"a": 1,}')


class TestParseCVCompletion:
    """Tests for parse_cv_completion."""

    def test_valid_completion(self) -> None:
        """Test parsing a valid completion."""
        partial, warnings = parse_cv_completion(json.dumps(GENERATED_CV))
        assert partial.first_name == "Jane"
        assert partial.skills == ["Python", "**Go**"]
        assert partial.projects[0].description == "No description provided"
        assert partial.projects[0].technologies == []
        assert warnings == []

    def test_invalid_entries_skipped_with_warning(self) -> None:
        """Test invalid entries skipped with warning."""
        data = {
            **GENERATED_CV,
            "education": [
                {"institution": "MIT", "degree": "BSc"},
                {"institution": "MIT", "degree": "MSc", "graduationDate": "2017"},
            ],
        }
        partial, warnings = parse_cv_completion(json.dumps(data))
        assert [e.degree for e in partial.education] == ["MSc"]
        assert warnings == ["Skipped invalid education entry 1: 1 error(s)"]

    def test_non_list_entities_ignored(self) -> None:
        """Test that non-list entity fields are ignored."""
        partial, warnings = parse_cv_completion(json.dumps({**GENERATED_CV, "projects": 5}))
        assert partial.projects == []
        assert warnings == ["Ignored project data that is not a list"]

    def test_invalid_scalar_raises(self) -> None:
        """Test that an invalid scalar field raises."""
        with pytest.raises(EnhancementError, match="Generated CV data is invalid"):
            parse_cv_completion(json.dumps({**GENERATED_CV, "firstName": ["Jane"]}))


class TestCVEnhancer:
    """Tests for CVEnhancer."""

    def test_generate_reports_progress(self) -> None:
        """Test generate reports progress."""
        provider = _provider(f"```json\n{json.dumps(GENERATED_CV)}\n```")
        messages: list[str] = []

        partial = CVEnhancer(provider, temperature=0.2).generate("I am Jane", messages.append)

        assert partial.last_name == "Doe"
        assert messages == [PROGRESS_INITIALIZING, PROGRESS_CONNECTED, PROGRESS_COMPLETE]
        prompt = provider.complete.call_args.args[0]
        assert "I am Jane" in prompt
        assert provider.complete.call_args.kwargs == {"temperature": 0.2, "max_tokens": None}


class TestEnhanceCV:
    """Tests for the enhance_cv pipeline."""

    def test_requires_some_input(self) -> None:
        """Test that text or manual data is required."""
        with pytest.raises(ValueError, match="Either text or manual"):
            enhance_cv("  ")

    def test_manual_data_overrides_generated(self) -> None:
        """Test that manual data overrides generated data."""
        provider = _provider(json.dumps(GENERATED_CV))
        result = enhance_cv(
            "I am Jane",
            manual={"firstName": "Janet", "skills": ["Rust"]},
            provider=provider,
        )
        assert result.enhanced
        assert result.record.first_name == "Janet"
        assert result.record.skills == ["Rust", "Python", "**Go**"]

    def test_failure_without_manual_data_raises(self) -> None:
        """Test failure without manual data raises."""
        with pytest.raises(LLMError):
            enhance_cv("I am Jane", provider=_provider(LLMError("down")))

    def test_failure_with_manual_data_degrades(self) -> None:
        """Test fallback to manual data with a warning."""
        provider = _provider("no json here")
        messages: list[str] = []
        result = enhance_cv(
            "I am Jane",
            manual={"firstName": "Jane", "lastName": "Doe", "email": "jane@example.com"},
            provider=provider,
            progress_callback=messages.append,
        )
        assert not result.enhanced
        assert result.record.full_name == "Jane Doe"
        assert result.warnings[0].startswith("Could not enhance CV:")
        assert messages[-1] == PROGRESS_FORMATTING

    def test_manual_only_skips_model(self) -> None:
        """Test that manual data alone skips the model."""
        provider = _provider("unused")
        result = enhance_cv(None, manual={"firstName": "Jane"}, provider=provider)
        provider.complete.assert_not_called()
        assert result.record.last_name == "User"


class TestPrompts:
    """Tests for prompt construction."""

    def test_cv_prompt_embeds_text(self) -> None:
        """Test that the CV prompt embeds the input text."""
        prompt = build_cv_prompt("  Ten years of Python.  ")
        assert "Ten years of Python." in prompt
        assert "interface Project {" in prompt

    def test_analysis_prompt_truncates_readme(self) -> None:
        """Test that the analysis prompt truncates long READMEs."""
        readme = "a" * (README_LIMIT + 100)
        prompt = build_project_analysis_prompt("repo", None, ["Python"], readme)
        assert "a" * README_LIMIT in prompt
        assert "a" * (README_LIMIT + 1) not in prompt

    def test_analysis_prompt_lists_dependencies(self) -> None:
        """Test analysis prompt lists dependencies."""
        prompt = build_project_analysis_prompt(
            "repo",
            "desc",
            ["TypeScript"],
            "readme",
            dependencies={"dependencies": ["react"], "devDependencies": ["vitest"]},
            config_files=["package.json"],
        )
        assert "- Dependencies: react" in prompt
        assert "- DevDependencies: vitest" in prompt
        assert "- Config files: package.json" in prompt
