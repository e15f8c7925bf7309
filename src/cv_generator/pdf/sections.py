"""Section renderers.

Each renderer paints one logical section of a ``CVRecord`` starting at the
context cursor and returns the new cursor. A section whose data is absent or
empty paints nothing and leaves the cursor where it was. Every entry is
measured with the pure layout passes and kept together on one page; a section
header is kept with its first entry.
"""

from collections.abc import Callable

from cv_generator.models import CVRecord, Experience, Project
from cv_generator.pdf.badges import badge_rows_height, render_badge, render_badge_row
from cv_generator.pdf.layout import LayoutContext
from cv_generator.pdf.links import github_url, linkedin_url, mailto_url, normalize_url, tel_url
from cv_generator.pdf.paragraph import paragraph_height, render_paragraph

SectionRenderer = Callable[[LayoutContext, CVRecord], float]

CONTACT_COLUMNS = 2
LANGUAGES_PER_ROW = 3
FOOTER_TEMPLATE = "Generated with CV Generator - {date}"

# Horizontal indents of nested experience projects
_PROJECT_BULLET_INDENT = 3.0
_PROJECT_BODY_INDENT = 6.0

# The project panel starts this far above the heading baseline
_PANEL_RISE = 5.0
_PANEL_OVERHANG = 2.0
_DIVIDER_WIDTH = 0.5

# Between the project heading row and its description
_HEADING_GAP = 2.0


def section_header_height(ctx: LayoutContext) -> float:
    spacing = ctx.spacing
    return spacing.before_h2 + spacing.line_height * 0.8 + spacing.after_h2


def render_section_header(ctx: LayoutContext, title: str) -> float:
    """Paint an ``h2`` title with an accent divider across the content width."""
    spacing = ctx.spacing
    y = ctx.y + spacing.before_h2
    ctx.apply_style("h2")
    ctx.text(ctx.left, y, title)
    y += spacing.line_height * 0.8

    ctx.pdf.set_draw_color(*ctx.settings.colors.accent)
    ctx.pdf.set_line_width(_DIVIDER_WIDTH)
    ctx.pdf.line(ctx.left, y, ctx.right, y)

    ctx.y = y + spacing.after_h2
    return ctx.y


def _contact_cells(record: CVRecord) -> list[tuple[str, str, str]]:
    """(label, value, link target) for every contact field that is set."""
    cells = [("Email", record.email, mailto_url(record.email))]
    if record.phone:
        cells.append(("Phone", record.phone, tel_url(record.phone)))
    if record.github:
        cells.append(("GitHub", record.github, github_url(record.github)))
    if record.linkedin:
        cells.append(("LinkedIn", record.linkedin, linkedin_url(record.linkedin)))
    return cells


def render_header(ctx: LayoutContext, record: CVRecord) -> float:
    """Name in ``h1`` followed by a two-column contact grid."""
    spacing = ctx.spacing
    ctx.apply_style("h1")
    ctx.text(ctx.left, ctx.y, record.full_name)
    y = ctx.y + spacing.after_h1

    cells = _contact_cells(record)
    column_width = ctx.content_width / CONTACT_COLUMNS
    for index, (label, value, target) in enumerate(cells):
        row, column = divmod(index, CONTACT_COLUMNS)
        x = ctx.left + column * column_width
        baseline = y + row * spacing.line_height
        text = f"{label}: {value}"

        ctx.apply_style("normal")
        ctx.text(x, baseline, text)
        ctx.link(x, baseline, ctx.text_width(text), target)

    rows = -(-len(cells) // CONTACT_COLUMNS)
    ctx.y = y + rows * spacing.line_height + spacing.paragraph_gap
    return ctx.y


def render_about(ctx: LayoutContext, record: CVRecord) -> float:
    if not record.about:
        return ctx.y

    body = paragraph_height(ctx, record.about, ctx.content_width)
    ctx.keep_together(section_header_height(ctx) + body)
    render_section_header(ctx, "About")
    ctx.y = render_paragraph(ctx, record.about, ctx.left, ctx.y, ctx.content_width)
    return ctx.y


def render_skills(ctx: LayoutContext, record: CVRecord) -> float:
    """Skills as one flow of badges; ``**Label**`` skills render bold."""
    if not record.skills:
        return ctx.y

    rows = badge_rows_height(ctx, record.skills, ctx.content_width)
    ctx.keep_together(section_header_height(ctx) + rows)
    render_section_header(ctx, "Skills")
    ctx.y = render_badge_row(ctx, record.skills, ctx.left, ctx.y, ctx.content_width)
    ctx.y += ctx.spacing.paragraph_gap
    return ctx.y


def _experience_project_height(ctx: LayoutContext, project: Project) -> float:
    spacing = ctx.spacing
    body_width = ctx.content_width - _PROJECT_BODY_INDENT
    height = spacing.line_height
    height += paragraph_height(ctx, project.description, body_width)
    height += spacing.paragraph_gap * 0.5
    if project.technologies:
        height += badge_rows_height(ctx, project.technologies, body_width, style="accent")
    return height


def _experience_entry_height(ctx: LayoutContext, entry: Experience) -> float:
    spacing = ctx.spacing
    height = spacing.after_h3
    if entry.summary:
        height += paragraph_height(ctx, entry.summary, ctx.content_width)
        height += spacing.paragraph_gap
    for index, project in enumerate(entry.projects):
        if index:
            height += spacing.paragraph_gap
        height += _experience_project_height(ctx, project)
    return height


def _render_experience_project(ctx: LayoutContext, project: Project) -> None:
    spacing = ctx.spacing
    ctx.keep_together(_experience_project_height(ctx, project))

    ctx.apply_style("h4")
    ctx.text(ctx.left + _PROJECT_BULLET_INDENT, ctx.y, f"• {project.name}")
    ctx.y += spacing.line_height

    body_x = ctx.left + _PROJECT_BODY_INDENT
    body_width = ctx.content_width - _PROJECT_BODY_INDENT
    ctx.y = render_paragraph(ctx, project.description, body_x, ctx.y, body_width)
    ctx.y += spacing.paragraph_gap * 0.5

    if project.technologies:
        ctx.y = render_badge_row(
            ctx, project.technologies, body_x, ctx.y, body_width, style="accent"
        )


def _render_experience_entry(ctx: LayoutContext, entry: Experience) -> None:
    spacing = ctx.spacing
    ctx.keep_together(_experience_entry_height(ctx, entry))

    ctx.apply_style("h3")
    ctx.text(ctx.left, ctx.y, f"{entry.position} at {entry.company}")
    ctx.apply_style("secondary")
    ctx.text_right(ctx.y, f"{entry.start_date} - {entry.end_date}")
    ctx.y += spacing.after_h3

    if entry.summary:
        ctx.y = render_paragraph(ctx, entry.summary, ctx.left, ctx.y, ctx.content_width)
        ctx.y += spacing.paragraph_gap

    for index, project in enumerate(entry.projects):
        if index:
            ctx.y += spacing.paragraph_gap
        _render_experience_project(ctx, project)


def render_experience(ctx: LayoutContext, record: CVRecord) -> float:
    if not record.experience:
        return ctx.y

    spacing = ctx.spacing
    first = _experience_entry_height(ctx, record.experience[0])
    ctx.keep_together(section_header_height(ctx) + first)
    render_section_header(ctx, "Experience")
    for index, entry in enumerate(record.experience):
        if index:
            ctx.y += spacing.item_gap
        _render_experience_entry(ctx, entry)
    return ctx.y


def render_education(ctx: LayoutContext, record: CVRecord) -> float:
    """Degree with right-aligned dates, institution underneath."""
    if not record.education:
        return ctx.y

    spacing = ctx.spacing
    entry_height = spacing.after_h3 + spacing.line_height
    ctx.keep_together(section_header_height(ctx) + entry_height)
    render_section_header(ctx, "Education")

    for index, entry in enumerate(record.education):
        if index:
            ctx.y += spacing.paragraph_gap
        ctx.keep_together(entry_height)

        ctx.apply_style("h3")
        ctx.text(ctx.left, ctx.y, entry.degree)
        dates = (
            f"{entry.start_date} - {entry.graduation_date}"
            if entry.start_date
            else entry.graduation_date
        )
        ctx.apply_style("secondary")
        ctx.text_right(ctx.y, dates)
        ctx.y += spacing.after_h3

        ctx.apply_style("secondary")
        ctx.text(ctx.left, ctx.y, entry.institution)
        ctx.y += spacing.line_height
    return ctx.y


def _render_project_heading(ctx: LayoutContext, project: Project) -> None:
    spacing = ctx.spacing
    ctx.pdf.set_fill_color(*ctx.settings.colors.panel_background)
    ctx.pdf.rect(
        ctx.left - _PANEL_OVERHANG,
        ctx.y - _PANEL_RISE,
        ctx.content_width + _PANEL_OVERHANG * 2,
        spacing.line_height + 1,
        style="F",
        round_corners=True,
        corner_radius=spacing.badge_radius,
    )

    if project.url:
        ctx.apply_style("link")
        ctx.text(ctx.left, ctx.y, project.name)
        ctx.link(ctx.left, ctx.y, ctx.text_width(project.name), normalize_url(project.url))
    else:
        ctx.apply_style("h3")
        ctx.text(ctx.left, ctx.y, project.name)

    if project.github:
        ctx.apply_style("link")
        x = ctx.text_right(ctx.y, project.github)
        ctx.link(x, ctx.y, ctx.text_width(project.github), github_url(project.github))


def _project_height(ctx: LayoutContext, project: Project) -> float:
    spacing = ctx.spacing
    height = spacing.after_h3 + _HEADING_GAP
    height += paragraph_height(ctx, project.description, ctx.content_width)
    height += spacing.paragraph_gap * 0.5
    if project.technologies:
        height += badge_rows_height(ctx, project.technologies, ctx.content_width, style="accent")
    return height


def render_projects(ctx: LayoutContext, record: CVRecord) -> float:
    """Standalone projects: linked heading on a panel, description, technologies."""
    if not record.projects:
        return ctx.y

    spacing = ctx.spacing
    first = _project_height(ctx, record.projects[0])
    ctx.keep_together(section_header_height(ctx) + first)
    render_section_header(ctx, "Projects")

    for index, project in enumerate(record.projects):
        if index:
            ctx.y += spacing.item_gap
        ctx.keep_together(_project_height(ctx, project))

        _render_project_heading(ctx, project)
        ctx.y += spacing.after_h3 + _HEADING_GAP

        ctx.y = render_paragraph(ctx, project.description, ctx.left, ctx.y, ctx.content_width)
        ctx.y += spacing.paragraph_gap * 0.5

        if project.technologies:
            ctx.y = render_badge_row(
                ctx, project.technologies, ctx.left, ctx.y, ctx.content_width, style="accent"
            )
    return ctx.y


def render_languages(ctx: LayoutContext, record: CVRecord) -> float:
    """Bold ``language (level)`` badges on a fixed three-column grid."""
    if not record.languages:
        return ctx.y

    spacing = ctx.spacing
    ctx.keep_together(section_header_height(ctx) + spacing.line_height * 1.3)
    render_section_header(ctx, "Languages")

    entries = list(record.languages.items())
    column_width = ctx.content_width / LANGUAGES_PER_ROW
    for start in range(0, len(entries), LANGUAGES_PER_ROW):
        ctx.ensure_space(spacing.line_height * 1.5)
        for column, (language, level) in enumerate(entries[start : start + LANGUAGES_PER_ROW]):
            label = f"{language} ({level})" if level else language
            x = ctx.left + column * column_width
            render_badge(ctx, label, x, ctx.y, style="small", bold=True)
        ctx.y += spacing.line_height * 1.3
    return ctx.y


def render_footer(ctx: LayoutContext, record: CVRecord) -> float:
    """Centred generation note below the bottom margin of the current page.

    Leaves the cursor untouched.
    """
    geometry = ctx.settings.geometry
    text = FOOTER_TEMPLATE.format(date=ctx.settings.generated_on.isoformat())
    ctx.apply_style("muted")
    x = (geometry.page_width - ctx.text_width(text)) / 2
    ctx.text(x, geometry.bottom_boundary + ctx.spacing.footer_offset, text)
    return ctx.y


# Paint order of the document body; the footer runs last, once
SECTION_RENDERERS: tuple[tuple[str, SectionRenderer], ...] = (
    ("header", render_header),
    ("about", render_about),
    ("skills", render_skills),
    ("experience", render_experience),
    ("education", render_education),
    ("projects", render_projects),
    ("languages", render_languages),
    ("footer", render_footer),
)
