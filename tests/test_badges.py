"""Tests for badge flow layout."""

from cv_generator.pdf.badges import (
    badge_rows_height,
    layout_badges,
    render_badge,
    render_badge_row,
)
from cv_generator.pdf.layout import LayoutContext


SKILLS = ["JavaScript", "**React**", "Node.js", "PostgreSQL", "Docker", "AWS"]


def _layout(measure, labels, max_width=60.0, origin_x=20.0):
    return layout_badges(
        labels,
        measure,
        origin_x=origin_x,
        max_width=max_width,
        row_height=7.0,
        start_y=50.0,
        padding=2.0,
        gap=3.0,
    )


class TestLayoutBadges:
    """Tests for layout_badges."""

    def test_no_labels_keeps_cursor(self, measure) -> None:
        """Test no labels keeps cursor."""
        placements, end_y = _layout(measure, [])
        assert placements == []
        assert end_y == 50.0

    def test_single_row(self, measure) -> None:
        """Test that badges within the width share one row."""
        placements, end_y = _layout(measure, ["Go", "Rust"], max_width=100)
        assert [p.row for p in placements] == [0, 0]
        assert placements[0].x == 20.0
        # "Go": 4 + 2 * 2 padding = 8, then 3 gap
        assert placements[1].x == 31.0
        assert end_y == 57.0

    def test_skills_wrap_back_to_origin(self, measure) -> None:
        """Narrow content width wraps the skill list onto several rows."""
        placements, end_y = _layout(measure, SKILLS, max_width=60)

        rows = {p.row for p in placements}
        assert len(rows) >= 2
        second_row = [p for p in placements if p.row == 1]
        assert second_row[0].x == placements[0].x == 20.0
        assert end_y == 50.0 + len(rows) * 7.0

    def test_emphasized_label_is_bold_without_markers(self, measure) -> None:
        """Test emphasized label is bold without markers."""
        placements, _ = _layout(measure, SKILLS, max_width=200)
        react = placements[1]
        assert react.text == "React"
        assert react.bold
        # Bold text measured in bold: 5 chars * 2.5 + padding
        assert react.width == 16.5
        assert not placements[0].bold

    def test_left_edges_stay_within_bounds(self, measure) -> None:
        """Test left edges stay within bounds."""
        labels = ["a" * n for n in (3, 12, 1, 7, 20, 2, 9, 4, 15, 6)]
        for max_width in (30, 45, 60, 90):
            placements, _ = _layout(measure, labels, max_width=max_width)
            for badge in placements:
                overflow = badge.width > max_width
                assert badge.x <= 20.0 + max_width or overflow
                if not overflow:
                    assert badge.x + badge.width <= 20.0 + max_width

    def test_oversized_badge_gets_own_row(self, measure) -> None:
        """Test oversized badge gets own row."""
        placements, end_y = _layout(measure, ["Go", "x" * 40, "Rust"], max_width=30)
        assert [p.row for p in placements] == [0, 1, 2]
        assert placements[1].x == 20.0
        assert placements[1].width > 30
        assert end_y == 50.0 + 3 * 7.0

    def test_oversized_first_badge_does_not_leave_empty_row(self, measure) -> None:
        """Test oversized first badge does not leave empty row."""
        placements, _ = _layout(measure, ["x" * 40], max_width=30)
        assert placements[0].row == 0
        assert placements[0].y == 50.0

    def test_rows_advance_by_row_height(self, measure) -> None:
        """Test rows advance by row height."""
        placements, _ = _layout(measure, SKILLS, max_width=60)
        for badge in placements:
            assert badge.y == 50.0 + badge.row * 7.0


class TestRenderBadges:
    """Tests for painting badges on a page."""

    def test_render_badge_returns_padded_width(self, layout_context: LayoutContext) -> None:
        """Test that a painted badge is text width plus padding."""
        width = render_badge(layout_context, "Python", 20, 40)
        layout_context.apply_style("normal")
        expected = layout_context.text_width("Python") + 2 * layout_context.spacing.badge_padding
        assert abs(width - expected) < 1e-6

    def test_render_badge_row_matches_layout(self, layout_context: LayoutContext) -> None:
        """Test that painting returns the cursor of the pure layout pass."""
        ctx = layout_context
        end_y = render_badge_row(ctx, SKILLS, ctx.left, 40.0, 50.0)
        _, expected_end = layout_badges(
            SKILLS,
            ctx.measurer("normal"),
            origin_x=ctx.left,
            max_width=50.0,
            row_height=ctx.spacing.line_height,
            start_y=40.0,
            padding=ctx.spacing.badge_padding,
            gap=ctx.spacing.badge_spacing,
        )
        assert end_y == expected_end
        assert end_y > 40.0 + ctx.spacing.line_height

    def test_empty_row_paints_nothing(self, layout_context: LayoutContext) -> None:
        """Test empty row paints nothing."""
        assert render_badge_row(layout_context, [], 20.0, 40.0, 100.0) == 40.0

    def test_rows_height_matches_render(self, layout_context: LayoutContext) -> None:
        """Test that the measured height is the distance the cursor moves."""
        ctx = layout_context
        height = badge_rows_height(ctx, SKILLS, 50.0)
        assert render_badge_row(ctx, SKILLS, ctx.left, 40.0, 50.0) == 40.0 + height

    def test_rows_past_bottom_move_to_next_page(self, layout_context: LayoutContext) -> None:
        """Test that rows crossing the bottom boundary continue on new pages."""
        ctx = layout_context
        bottom = ctx.settings.geometry.bottom_boundary
        row_height = ctx.spacing.line_height
        painted: list[tuple[float, int]] = []
        paint = ctx.pdf.text

        def text(x: float, y: float, value: str) -> None:
            painted.append((y, ctx.pdf.page_no()))
            paint(x, y, value)

        ctx.pdf.text = text  # type: ignore[method-assign]
        skills = [f"Skill {index}" for index in range(400)]
        end_y = render_badge_row(ctx, skills, ctx.left, 250.0, ctx.content_width)

        assert len(painted) == 400
        assert ctx.pdf.pages_count > 1
        assert all(y + row_height <= bottom for y, _ in painted)
        assert painted[-1][1] == ctx.pdf.pages_count
        assert end_y <= bottom
