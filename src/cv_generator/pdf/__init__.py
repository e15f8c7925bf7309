"""Paginated PDF layout engine for CV records."""

from cv_generator.pdf.document import CVDocument, generate_cv_pdf
from cv_generator.pdf.styles import (
    DEFAULT_STYLES,
    ColorScheme,
    PageGeometry,
    PDFOptions,
    RenderSettings,
    Spacing,
    TextStyle,
    resolve_options,
)

__all__ = [
    "DEFAULT_STYLES",
    "CVDocument",
    "ColorScheme",
    "PDFOptions",
    "PageGeometry",
    "RenderSettings",
    "Spacing",
    "TextStyle",
    "generate_cv_pdf",
    "resolve_options",
]
