"""Document driver: turn a ``CVRecord`` into a paginated PDF."""

import logging
import re
from collections.abc import Mapping
from datetime import datetime, time, timezone
from pathlib import Path
from typing import Any

from fpdf import FPDF, ViewerPreferences  # type: ignore[import-untyped]

from cv_generator.exceptions import RenderError
from cv_generator.models import CVRecord
from cv_generator.pdf.fonts import FALLBACK_FONT, register_fonts
from cv_generator.pdf.layout import LayoutContext
from cv_generator.pdf.sections import SECTION_RENDERERS
from cv_generator.pdf.styles import PDFOptions, RenderSettings, resolve_options

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\s]+')


class CVDocument(FPDF):
    """A rendered CV.

    Instances are produced by ``generate_cv_pdf``; each owns its pages,
    fonts and resolved settings, so renders never share state.
    """

    def __init__(self, record: CVRecord, settings: RenderSettings) -> None:
        geometry = settings.geometry
        super().__init__(unit="mm", format=(geometry.page_width, geometry.page_height))
        self.record = record
        self.settings = settings
        self.page_breaks = 0
        self._buffer: bytes | None = None

        # Page breaks come from LayoutContext.ensure_space only
        self.set_auto_page_break(auto=False)
        self.set_margins(
            left=geometry.margin_left,
            top=geometry.margin_top,
            right=geometry.margin_right,
        )
        self.font_name = FALLBACK_FONT

    @property
    def suggested_filename(self) -> str:
        """``{firstName}_{lastName}_CV.pdf`` with path-hostile characters replaced."""
        stem = f"{self.record.first_name}_{self.record.last_name}_CV"
        return _UNSAFE_FILENAME_CHARS.sub("_", stem) + ".pdf"

    def _set_metadata(self) -> None:
        name = self.record.full_name
        self.set_title(f"{name} - CV")
        self.set_author(name)
        self.set_subject("Curriculum Vitae")
        self.set_creator("CV Generator")
        self.viewer_preferences = ViewerPreferences(display_doc_title=True)

        # A pinned creation date keeps the output byte-identical between runs
        generated = datetime.combine(self.settings.generated_on, time(), tzinfo=timezone.utc)
        self.set_creation_date(generated)

    def render(self) -> None:
        """Paint every section in order, then the footer.

        Raises:
            RenderError: If anything fails while painting. The document is
                left unusable in that case.
        """
        section = "setup"
        try:
            self.font_name = register_fonts(self, self.settings.fonts_dir, self.settings.font)
            self._set_metadata()
            self.add_page()

            ctx = LayoutContext(
                pdf=self,
                settings=self.settings,
                font_family=self.font_name,
                y=self.settings.geometry.margin_top,
            )
            for section, renderer in SECTION_RENDERERS:
                renderer(ctx, self.record)

            section = "output"
            self.page_breaks = ctx.page_breaks
            self._buffer = bytes(self.output())
        except RenderError as e:
            raise RenderError(e.message, section=e.section or section) from e
        except Exception as e:
            raise RenderError(f"{type(e).__name__}: {e}", section=section) from e

        logger.info(
            f"Rendered CV for {self.record.full_name}: {self.pages_count} page(s), "
            f"{self.page_breaks} page break(s)"
        )

    def to_bytes(self) -> bytes:
        """The finished PDF file contents."""
        if self._buffer is None:
            raise RenderError("Document has not been rendered")
        return self._buffer

    def save(self, path: str | Path | None = None) -> Path:
        """Write the PDF to ``path`` (default: ``suggested_filename``).

        A directory path receives the file under its suggested name.
        """
        target = Path(path) if path is not None else Path(self.suggested_filename)
        if target.is_dir():
            target = target / self.suggested_filename
        target.write_bytes(self.to_bytes())
        logger.info(f"Saved CV to {target}")
        return target


def generate_cv_pdf(
    record: CVRecord | Mapping[str, Any],
    options: PDFOptions | Mapping[str, Any] | None = None,
) -> CVDocument:
    """Render a CV to PDF.

    Args:
        record: A validated record, or a mapping in the camelCase wire format.
        options: Style, spacing and colour overrides; omitted keys keep the
            defaults.

    Returns:
        The rendered document.

    Raises:
        pydantic.ValidationError: If ``record`` or ``options`` is invalid.
        RenderError: If painting fails.
    """
    if not isinstance(record, CVRecord):
        record = CVRecord.model_validate(record)
    settings = resolve_options(options)

    document = CVDocument(record, settings)
    document.render()
    return document
