"""Tests for paragraph wrapping."""

from cv_generator.pdf.layout import LayoutContext
from cv_generator.pdf.paragraph import paragraph_height, render_paragraph, wrap_text
from cv_generator.pdf.segmenter import TextRun


def _line_texts(lines: list[list[TextRun]]) -> list[str]:
    return ["".join(run.text for run in line) for line in lines]


class TestWrapText:
    """Tests for wrap_text with a fixed-width measure."""

    def test_empty_text_has_no_lines(self, measure) -> None:
        """Test empty text has no lines."""
        assert wrap_text("", 50, measure) == []
        assert wrap_text("   \n ", 50, measure) == []

    def test_fits_on_one_line(self, measure) -> None:
        """Test fits on one line."""
        assert wrap_text("one two", 50, measure) == [[TextRun("one two")]]

    def test_wraps_on_word_boundaries(self, measure) -> None:
        """Test wraps on word boundaries."""
        lines = wrap_text("one two three", 20, measure)
        assert _line_texts(lines) == ["one two", "three"]

    def test_emphasis_runs_survive_wrapping(self, measure) -> None:
        """Test emphasis runs survive wrapping."""
        lines = wrap_text("a **bold** word", 100, measure)
        assert lines == [[TextRun("a "), TextRun("bold", True), TextRun(" word")]]

    def test_emphasized_words_measured_bold(self, measure) -> None:
        """Bold is wider, so the same text wraps earlier with emphasis."""
        assert len(wrap_text("abcd efgh", 19, measure)) == 1
        assert _line_texts(wrap_text("**abcd** efgh", 19, measure)) == ["abcd", "efgh"]

    def test_word_straddling_emphasis_boundary(self, measure) -> None:
        """Test word straddling emphasis boundary."""
        lines = wrap_text("**React**, Vue", 100, measure)
        assert lines == [[TextRun("React", True), TextRun(", Vue")]]

    def test_hard_breaks_are_kept(self, measure) -> None:
        """Test hard breaks are kept."""
        lines = wrap_text("first\n\nsecond", 100, measure)
        assert _line_texts(lines) == ["first", "", "second"]

    def test_long_word_split_at_characters(self, measure) -> None:
        """Test long word split at characters."""
        lines = wrap_text("x" * 15, 20, measure)
        assert _line_texts(lines) == ["x" * 10, "x" * 5]

    def test_long_word_tail_joins_next_words(self, measure) -> None:
        """Test long word tail joins next words."""
        lines = wrap_text(f"{'x' * 12} ab", 20, measure)
        assert _line_texts(lines) == ["x" * 10, "xx ab"]

    def test_no_line_exceeds_width(self, measure) -> None:
        """Test no line exceeds width."""
        text = "Designed and shipped **event-driven** billing across twelve regional markets"
        for width in (20, 35, 60):
            for line in wrap_text(text, width, measure):
                assert sum(measure(run.text, run.emphasized) for run in line) <= width


class TestRenderParagraph:
    """Tests for render_paragraph on a real page."""

    def test_returns_cursor_below_painted_lines(self, layout_context: LayoutContext) -> None:
        """A single line advances the cursor by one line height."""
        ctx = layout_context
        end_y = render_paragraph(ctx, "Short line", ctx.left, 40, ctx.content_width)
        assert end_y == 40 + ctx.spacing.line_height

    def test_wrapped_paragraph_cursor(self, layout_context: LayoutContext) -> None:
        """Every wrapped line adds one line height."""
        ctx = layout_context
        text = "Led the **platform team** building internal APIs for billing and payments."
        end_y = render_paragraph(ctx, text, ctx.left, 40, 40)
        lines = wrap_text(text, 40, ctx.measurer("normal"))
        assert len(lines) > 1
        assert end_y == 40 + ctx.spacing.line_height * len(lines)
        assert paragraph_height(ctx, text, 40) == ctx.spacing.line_height * len(lines)

    def test_empty_paragraph_consumes_nothing(self, layout_context: LayoutContext) -> None:
        """No text keeps the cursor and measures zero."""
        assert render_paragraph(layout_context, "", 20, 40, 100) == 40
        assert paragraph_height(layout_context, "", 100) == 0

    def test_paragraph_taller_than_page_continues(self, layout_context: LayoutContext) -> None:
        """Lines past the bottom boundary move to new pages instead of off the page."""
        ctx = layout_context
        bottom = ctx.settings.geometry.bottom_boundary
        baselines: list[tuple[float, int]] = []
        paint = ctx.pdf.text

        def text(x: float, y: float, value: str) -> None:
            baselines.append((y, ctx.pdf.page_no()))
            paint(x, y, value)

        ctx.pdf.text = text  # type: ignore[method-assign]
        end_y = render_paragraph(ctx, "word " * 1500, ctx.left, 200.0, ctx.content_width)

        assert ctx.pdf.pages_count > 1
        assert ctx.page_breaks == ctx.pdf.pages_count - 1
        assert all(y + ctx.spacing.line_height <= bottom for y, _ in baselines)
        assert baselines[-1][1] == ctx.pdf.pages_count
        assert end_y <= bottom
