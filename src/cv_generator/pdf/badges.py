"""Badge flow layout for skills, technologies and languages."""

from collections.abc import Iterable
from dataclasses import dataclass

from cv_generator.pdf.layout import LayoutContext, Measure, exceeds_page
from cv_generator.pdf.segmenter import has_emphasis, strip_emphasis

# Distance from the text baseline up to the badge top edge
_BADGE_RISE = 3.5


@dataclass(frozen=True)
class BadgePlacement:
    """Where one badge lands; ``y`` is the text baseline of its row."""

    text: str
    bold: bool
    x: float
    y: float
    width: float
    row: int


def layout_badges(
    labels: Iterable[str],
    measure: Measure,
    origin_x: float,
    max_width: float,
    row_height: float,
    start_y: float,
    padding: float,
    gap: float,
) -> tuple[list[BadgePlacement], float]:
    """Place badges left to right, wrapping onto new rows.

    A label holding a balanced ``**...**`` pair renders the whole badge bold;
    the markers themselves are never painted. A badge wraps when it plus the
    trailing gap would cross ``origin_x + max_width`` and its row already holds
    a badge, so a badge wider than the line gets a row of its own instead of
    leaving an empty one behind.

    Args:
        labels: Badge labels in display order.
        measure: ``(text, bold) -> width`` using the painting font.
        origin_x: Left edge of every row.
        max_width: Available row width.
        row_height: Vertical advance per row.
        start_y: Baseline of the first row.
        padding: Horizontal padding on each side of the text.
        gap: Space between neighbouring badges.

    Returns:
        The placements and the cursor after the last row
        (``start_y + rows * row_height``). No labels means no rows and
        ``start_y`` unchanged.
    """
    placements: list[BadgePlacement] = []
    limit = origin_x + max_width
    x = origin_x
    y = start_y
    row = 0

    for label in labels:
        text = strip_emphasis(label)
        bold = has_emphasis(label)
        width = measure(text, bold) + padding * 2

        if x + width + gap > limit and x > origin_x:
            x = origin_x
            y += row_height
            row += 1

        placements.append(BadgePlacement(text=text, bold=bold, x=x, y=y, width=width, row=row))
        x += width + gap

    if not placements:
        return placements, start_y
    return placements, start_y + (row + 1) * row_height


def render_badge(
    ctx: LayoutContext, text: str, x: float, y: float, *, style: str = "normal", bold: bool = False
) -> float:
    """Paint one badge with its baseline at ``y``; return its width."""
    spacing = ctx.spacing
    ctx.apply_style(style, bold=bold)
    width = ctx.text_width(text) + spacing.badge_padding * 2

    ctx.pdf.set_fill_color(*ctx.settings.colors.badge_background)
    ctx.pdf.rect(
        x,
        y - _BADGE_RISE,
        width,
        spacing.badge_height,
        style="F",
        round_corners=True,
        corner_radius=spacing.badge_radius,
    )
    ctx.text(x + spacing.badge_padding, y, text)
    return width


def _layout_for(
    ctx: LayoutContext, labels: Iterable[str], x: float, y: float, max_width: float, style: str
) -> tuple[list[BadgePlacement], float]:
    spacing = ctx.spacing
    return layout_badges(
        labels,
        ctx.measurer(style),
        origin_x=x,
        max_width=max_width,
        row_height=spacing.line_height,
        start_y=y,
        padding=spacing.badge_padding,
        gap=spacing.badge_spacing,
    )


def badge_rows_height(
    ctx: LayoutContext, labels: Iterable[str], max_width: float, *, style: str = "normal"
) -> float:
    """Height ``render_badge_row`` needs for ``labels`` when they fit on the page."""
    _, end_y = _layout_for(ctx, labels, 0.0, 0.0, max_width, style)
    return end_y


def render_badge_row(
    ctx: LayoutContext,
    labels: Iterable[str],
    x: float,
    y: float,
    max_width: float,
    *,
    style: str = "normal",
) -> float:
    """Flow ``labels`` as badges from ``(x, y)`` and return the cursor below them.

    A row that would cross the bottom boundary moves, with every row after
    it, to the next page.
    """
    row_height = ctx.spacing.line_height
    bottom = ctx.settings.geometry.bottom_boundary
    placements, end_y = _layout_for(ctx, labels, x, y, max_width, style)

    shift = 0.0
    row = -1
    for badge in placements:
        if badge.row != row:
            row = badge.row
            baseline = badge.y + shift
            if exceeds_page(baseline, row_height, bottom):
                shift = ctx.next_line(baseline, row_height) - badge.y
        render_badge(ctx, badge.text, badge.x, badge.y + shift, style=style, bold=badge.bold)
    return end_y + shift
