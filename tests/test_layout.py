"""Tests for the layout context and page break controller."""

import pytest

from cv_generator.exceptions import RenderError
from cv_generator.pdf.fonts import FALLBACK_FONT, find_font_files, register_fonts, to_latin1
from cv_generator.pdf.layout import LayoutContext, exceeds_page


class TestExceedsPage:
    """Tests for the pure page-fit check."""

    def test_fits_exactly(self) -> None:
        """Test a block ending exactly at the boundary."""
        assert not exceeds_page(250.0, 27.0, 277.0)

    def test_overflows(self) -> None:
        """Test a block crossing the boundary."""
        assert exceeds_page(250.0, 27.5, 277.0)


class TestEnsureSpace:
    """Tests for LayoutContext.ensure_space."""

    def test_cursor_unchanged_when_block_fits(self, layout_context: LayoutContext) -> None:
        """Test cursor unchanged when block fits."""
        ctx = layout_context
        ctx.y = 100.0
        assert ctx.ensure_space(50.0) == 100.0
        assert ctx.pdf.pages_count == 1
        assert ctx.page_breaks == 0

    def test_block_reaching_bottom_fits(self, layout_context: LayoutContext) -> None:
        """Test block reaching bottom fits."""
        ctx = layout_context
        bottom = ctx.settings.geometry.bottom_boundary
        ctx.y = bottom - 10.0
        assert ctx.ensure_space(10.0) == bottom - 10.0
        assert ctx.page_breaks == 0

    def test_new_page_resets_to_top_margin(self, layout_context: LayoutContext) -> None:
        """Test new page resets to top margin."""
        ctx = layout_context
        ctx.y = 270.0
        assert ctx.ensure_space(21.0) == ctx.settings.geometry.margin_top
        assert ctx.y == ctx.settings.geometry.margin_top
        assert ctx.pdf.pages_count == 2
        assert ctx.page_breaks == 1

    def test_consecutive_checks_break_once(self, layout_context: LayoutContext) -> None:
        """Test consecutive checks break once."""
        ctx = layout_context
        ctx.y = 270.0
        ctx.ensure_space(21.0)
        ctx.ensure_space(21.0)
        assert ctx.pdf.pages_count == 2

    def test_keep_together_caps_at_one_page(self, layout_context: LayoutContext) -> None:
        """Test that a block taller than a page reserves only a page."""
        ctx = layout_context
        ctx.y = ctx.settings.geometry.margin_top
        assert ctx.keep_together(1000.0) == ctx.settings.geometry.margin_top
        assert ctx.page_breaks == 0

        ctx.y = 100.0
        ctx.keep_together(1000.0)
        assert ctx.page_breaks == 1
        assert ctx.y == ctx.settings.geometry.margin_top

    def test_next_line_moves_cursor(self, layout_context: LayoutContext) -> None:
        """Test that next_line keeps a fitting line and breaks before one that does not."""
        ctx = layout_context
        assert ctx.next_line(200.0, 7.0) == 200.0
        assert ctx.y == 200.0
        assert ctx.next_line(272.0, 7.0) == ctx.settings.geometry.margin_top
        assert ctx.page_breaks == 1


class TestLayoutContext:
    """Tests for style application and measurement."""

    def test_unknown_style_raises(self, layout_context: LayoutContext) -> None:
        """Test unknown style raises."""
        with pytest.raises(RenderError, match="Unknown text style: h9"):
            layout_context.apply_style("h9")

    def test_apply_style_sets_font(self, layout_context: LayoutContext) -> None:
        """Test apply style sets font."""
        style = layout_context.apply_style("h2")
        assert layout_context.pdf.font_size_pt == style.font_size
        assert "B" in layout_context.pdf.font_style

    def test_bold_override(self, layout_context: LayoutContext) -> None:
        """Test that bold overrides the style weight."""
        layout_context.apply_style("normal", bold=True)
        assert "B" in layout_context.pdf.font_style

    def test_measurer_uses_painting_font(self, layout_context: LayoutContext) -> None:
        """Test measurer uses painting font."""
        measure = layout_context.measurer("normal")
        assert measure("Kubernetes", True) > measure("Kubernetes", False)

    def test_text_right_aligns_to_content_edge(self, layout_context: LayoutContext) -> None:
        """Test text right aligns to content edge."""
        ctx = layout_context
        ctx.apply_style("normal")
        x = ctx.text_right(40, "2020 - Present")
        assert abs(x + ctx.text_width("2020 - Present") - ctx.right) < 1e-6

    def test_core_font_text_made_latin1(self, layout_context: LayoutContext) -> None:
        """Test that core font text is made Latin-1 safe."""
        assert layout_context.prepare("• Łódź") == "· ?ód?"


class TestFonts:
    """Tests for font discovery and fallback."""

    def test_missing_dir_has_no_fonts(self, tmp_path) -> None:
        """Test missing dir has no fonts."""
        assert find_font_files(tmp_path / "missing") is None
        assert find_font_files(None) is None

    def test_partial_font_set_is_ignored(self, tmp_path) -> None:
        """Test partial font set is ignored."""
        (tmp_path / "NotoSans-Regular.ttf").write_bytes(b"")
        assert find_font_files(tmp_path) is None

    def test_complete_font_set_found(self, tmp_path) -> None:
        """Test complete font set found."""
        for name in ("NotoSans-Regular.ttf", "NotoSans-Bold.ttf"):
            (tmp_path / name).write_bytes(b"")
        fonts = find_font_files(tmp_path)
        assert fonts == {
            "regular": tmp_path / "NotoSans-Regular.ttf",
            "bold": tmp_path / "NotoSans-Bold.ttf",
        }

    def test_register_falls_back_to_helvetica(
        self, layout_context: LayoutContext, tmp_path, caplog
    ) -> None:
        """Test register falls back to helvetica."""
        with caplog.at_level("WARNING"):
            family = register_fonts(layout_context.pdf, tmp_path)
        assert family == FALLBACK_FONT
        assert "falling back" in caplog.text

    def test_register_preferred_core_font(self, layout_context: LayoutContext) -> None:
        """Test register preferred core font."""
        assert register_fonts(layout_context.pdf, None, preferred="times") == "Times"

    def test_to_latin1_replaces_typography(self) -> None:
        """Test typographic replacements for Latin-1."""
        assert to_latin1("“Quoted” – fine…") == '"Quoted" - fine...'
        assert to_latin1("Zürich") == "Zürich"
