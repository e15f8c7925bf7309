"""Pytest configuration and fixtures."""

from datetime import date
from typing import Any

import pytest
from fpdf import FPDF

from cv_generator.models import CVRecord
from cv_generator.pdf.fonts import FALLBACK_FONT
from cv_generator.pdf.layout import LayoutContext
from cv_generator.pdf.styles import resolve_options

GENERATED_ON = date(2024, 1, 15)


def fixed_width_measure(text: str, bold: bool) -> float:
    """Monospace stand-in for font metrics: 2mm per char, 2.5mm bold."""
    return len(text) * (2.5 if bold else 2.0)


@pytest.fixture
def measure():
    return fixed_width_measure


@pytest.fixture
def sample_record_data() -> dict[str, Any]:
    """A complete CV in the camelCase wire format."""
    return {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane.doe@example.com",
        "phone": "+1 555 123 4567",
        "github": "janedoe",
        "linkedin": "linkedin.com/in/janedoe",
        "about": "Backend engineer focused on **distributed systems** and developer tooling.",
        "skills": ["JavaScript", "**React**", "Node.js", "PostgreSQL", "Docker", "AWS"],
        "languages": {"English": "Native", "German": "B2", "Polish": ""},
        "education": [
            {
                "institution": "Stanford University",
                "degree": "MSc Computer Science",
                "startDate": "2015",
                "graduationDate": "2017",
            }
        ],
        "experience": [
            {
                "company": "Tech Corp",
                "position": "Senior Engineer",
                "startDate": "2020",
                "endDate": "Present",
                "summary": "Led the platform team building **internal APIs**.",
                "projects": [
                    {
                        "name": "Billing Service",
                        "description": "Rewrote invoicing on an event-sourced core.",
                        "technologies": ["Go", "Kafka"],
                    }
                ],
            }
        ],
        "projects": [
            {
                "name": "cv-generator",
                "description": "Renders CVs to PDF.",
                "technologies": ["Python"],
                "github": "janedoe/cv-generator",
                "url": "example.com/cv",
            }
        ],
    }


@pytest.fixture
def sample_record(sample_record_data: dict[str, Any]) -> CVRecord:
    return CVRecord.model_validate(sample_record_data)


@pytest.fixture
def minimal_record() -> CVRecord:
    return CVRecord(first_name="Jane", last_name="Doe", email="jane@example.com")


@pytest.fixture
def render_options() -> dict[str, Any]:
    """Options pinning the footer date and the built-in Helvetica font."""
    return {"generatedOn": GENERATED_ON, "font": "Helvetica"}


@pytest.fixture
def layout_context() -> LayoutContext:
    """A fresh single-page context painting with Helvetica."""
    settings = resolve_options({"generatedOn": GENERATED_ON})
    geometry = settings.geometry
    pdf = FPDF(unit="mm", format=(geometry.page_width, geometry.page_height))
    pdf.set_auto_page_break(auto=False)
    pdf.add_page()
    return LayoutContext(
        pdf=pdf, settings=settings, font_family=FALLBACK_FONT, y=geometry.margin_top
    )
