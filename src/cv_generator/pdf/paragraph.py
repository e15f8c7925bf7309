"""Paragraph flow layout with inline ``**bold**`` runs."""

import re

from cv_generator.pdf.layout import LayoutContext, Measure, exceeds_page
from cv_generator.pdf.segmenter import TextRun, merge_runs, split_emphasis

_WHITESPACE = re.compile(r"(\s+)")

Line = list[TextRun]


def _runs_width(runs: list[TextRun], measure: Measure) -> float:
    return sum(measure(run.text, run.emphasized) for run in runs)


def _split_words(text: str) -> tuple[list[Line], list[TextRun]]:
    """Break one source line into words, each a list of runs.

    A word may straddle an emphasis boundary (``**React**,``). The returned
    separators hold the single space painted before each word after the
    first, carrying the emphasis of the whitespace it replaces.
    """
    words: list[Line] = []
    separators: list[TextRun] = []
    current: Line = []
    pending_space: TextRun | None = None

    for run in split_emphasis(text):
        for index, part in enumerate(_WHITESPACE.split(run.text)):
            if not part:
                continue
            if index % 2:
                if current:
                    words.append(current)
                    current = []
                pending_space = TextRun(" ", run.emphasized)
                continue
            if not current and words:
                separators.append(pending_space or TextRun(" "))
            pending_space = None
            current.append(TextRun(part, run.emphasized))
    if current:
        words.append(current)
    return words, separators


def _split_long_word(word: Line, max_width: float, measure: Measure) -> list[Line]:
    """Cut a word wider than the line at character boundaries.

    Every chunk holds at least one character.
    """
    chunks: list[Line] = []
    chunk: Line = []
    width = 0.0
    for run in word:
        for char in run.text:
            char_width = measure(char, run.emphasized)
            if chunk and width + char_width > max_width:
                chunks.append(merge_runs(chunk))
                chunk, width = [], 0.0
            chunk.append(TextRun(char, run.emphasized))
            width += char_width
    if chunk:
        chunks.append(merge_runs(chunk))
    return chunks


def wrap_text(text: str, max_width: float, measure: Measure) -> list[Line]:
    """Wrap ``text`` to ``max_width`` on word boundaries.

    Each line is a list of runs; emphasis markers are resolved before
    measuring so bold words are measured in bold. Hard line breaks are kept
    and a blank source line yields an empty line. No hyphenation: a single
    word wider than the line is split at character boundaries.
    """
    if not text or not text.strip():
        return []

    lines: list[Line] = []
    for source_line in text.split("\n"):
        words, separators = _split_words(source_line)
        if not words:
            lines.append([])
            continue

        line: Line = []
        width = 0.0
        for index, word in enumerate(words):
            word_width = _runs_width(word, measure)
            if line:
                separator = separators[index - 1]
                candidate = width + measure(separator.text, separator.emphasized) + word_width
                if candidate <= max_width:
                    line.extend([separator, *word])
                    width = candidate
                    continue
                lines.append(merge_runs(line))
                line, width = [], 0.0

            if word_width > max_width:
                *full, word = _split_long_word(word, max_width, measure)
                lines.extend(full)
                word_width = _runs_width(word, measure)
            line = list(word)
            width = word_width

        if line:
            lines.append(merge_runs(line))
    return lines


def _style_measure(ctx: LayoutContext, style: str) -> tuple[Measure, bool]:
    base_bold = ctx.style(style).bold
    style_measure = ctx.measurer(style)

    def measure(chunk: str, emphasized: bool) -> float:
        return style_measure(chunk, emphasized or base_bold)

    return measure, base_bold


def paragraph_height(
    ctx: LayoutContext, text: str, max_width: float, *, style: str = "normal"
) -> float:
    """Height ``render_paragraph`` needs for ``text`` when it fits on the page."""
    measure, _ = _style_measure(ctx, style)
    return ctx.spacing.line_height * len(wrap_text(text, max_width, measure))


def render_paragraph(
    ctx: LayoutContext,
    text: str,
    x: float,
    y: float,
    max_width: float,
    *,
    style: str = "normal",
) -> float:
    """Paint a wrapped paragraph with its first baseline at ``y``.

    Runs are painted one after another, advancing by each run's measured
    width in its own weight. A line that would cross the bottom boundary
    moves to the next page.

    Returns:
        The cursor below the last line, ``y + line_height * line_count`` when
        no page break was needed.
    """
    measure, base_bold = _style_measure(ctx, style)
    lines = wrap_text(text, max_width, measure)
    line_height = ctx.spacing.line_height

    baseline = y
    for line in lines:
        if exceeds_page(baseline, line_height, ctx.settings.geometry.bottom_boundary):
            baseline = ctx.next_line(baseline, line_height)
        offset = 0.0
        for run in line:
            ctx.apply_style(style, bold=run.emphasized or base_bold)
            ctx.text(x + offset, baseline, run.text)
            offset += ctx.text_width(run.text)
        baseline += line_height

    return baseline
