"""Layout context: the vertical cursor, style application and page breaks.

The cursor ``y`` is the text baseline of the next line to paint, in
millimetres from the top edge. Pagination is explicit: fpdf's automatic page
break is disabled and every new page comes from ``LayoutContext.ensure_space``
so that breaks happen between logical entries. Only a block taller than a
whole page continues line by line onto the next page.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from fpdf import FPDF  # type: ignore[import-untyped]

from cv_generator.exceptions import RenderError
from cv_generator.pdf.fonts import is_core_font, to_latin1
from cv_generator.pdf.styles import RenderSettings, Spacing, TextStyle

logger = logging.getLogger(__name__)

# (text, bold) -> width in millimetres
Measure = Callable[[str, bool], float]


def exceeds_page(cursor: float, required: float, bottom: float) -> bool:
    """Check whether a block of height ``required`` starting at ``cursor`` crosses ``bottom``."""
    return cursor + required > bottom


@dataclass
class LayoutContext:
    """Mutable state of one render pass.

    One context is created per document; nothing here is shared between
    renders.
    """

    pdf: FPDF
    settings: RenderSettings
    font_family: str
    y: float
    page_breaks: int = 0

    # Geometry shortcuts

    @property
    def left(self) -> float:
        return self.settings.geometry.margin_left

    @property
    def right(self) -> float:
        return self.settings.geometry.content_right

    @property
    def content_width(self) -> float:
        return self.settings.geometry.content_width

    @property
    def spacing(self) -> Spacing:
        return self.settings.spacing

    # Styles and metrics

    def style(self, name: str) -> TextStyle:
        try:
            return self.settings.styles[name]
        except KeyError:
            raise RenderError(f"Unknown text style: {name}") from None

    def apply_style(self, name: str, bold: bool | None = None) -> TextStyle:
        """Set font, size and colour for a named style.

        ``bold`` overrides the style's own weight (used for emphasized runs).
        """
        style = self.style(name)
        weight = style.bold if bold is None else bold
        self.pdf.set_font(self.font_family, "B" if weight else "", style.font_size)
        self.pdf.set_text_color(*style.color)
        return style

    def prepare(self, text: str) -> str:
        """Return ``text`` as it will be painted with the active font family."""
        if is_core_font(self.font_family):
            return to_latin1(text)
        return text

    def text_width(self, text: str) -> float:
        """Width of ``text`` in the current font."""
        return self.pdf.get_string_width(self.prepare(text))

    def measurer(self, style_name: str) -> Measure:
        """Build a measure callable bound to a style.

        The returned callable sets the exact font used for painting before
        measuring, so wrap decisions match what ends up on the page.
        """

        def measure(text: str, bold: bool) -> float:
            self.apply_style(style_name, bold=bold)
            return self.text_width(text)

        return measure

    # Painting

    def text(self, x: float, y: float, text: str) -> None:
        """Paint ``text`` with its baseline at ``y``."""
        self.pdf.text(x, y, self.prepare(text))

    def text_right(self, y: float, text: str) -> float:
        """Paint ``text`` right-aligned to the content edge; return its x."""
        x = self.right - self.text_width(text)
        self.text(x, y, text)
        return x

    def link(self, x: float, y: float, width: float, url: str) -> None:
        """Add a clickable region over a painted line whose baseline is ``y``."""
        height = self.pdf.font_size  # em box in user units
        self.pdf.link(x, y - height * 0.8, width, height, url)

    # Pagination

    @property
    def usable_height(self) -> float:
        """Height between the top margin and the bottom boundary."""
        geometry = self.settings.geometry
        return geometry.bottom_boundary - geometry.margin_top

    def ensure_space(self, required: float) -> float:
        """Start a new page when ``required`` mm do not fit below the cursor.

        Returns the (possibly reset) cursor.
        """
        geometry = self.settings.geometry
        if exceeds_page(self.y, required, geometry.bottom_boundary):
            self.pdf.add_page()
            self.page_breaks += 1
            logger.debug(
                f"Page break before {required:.1f}mm block at y={self.y:.1f}, "
                f"now on page {self.pdf.page_no()}"
            )
            self.y = geometry.margin_top
        return self.y

    def keep_together(self, height: float) -> float:
        """Reserve ``height`` mm for a block that should not be split.

        A block taller than a whole page only reserves a page; its lines then
        continue onto following pages.
        """
        return self.ensure_space(min(height, self.usable_height))

    def next_line(self, baseline: float, height: float) -> float:
        """Baseline for a line of ``height`` mm due at ``baseline``.

        Moves the cursor there and breaks the page when the line would cross
        the bottom boundary.
        """
        self.y = baseline
        return self.ensure_space(height)
