"""Font asset discovery and registration.

Noto Sans (Open Font License) covers Latin Extended, Greek and Cyrillic, so
names like "Łukasz Żółć" render correctly. When the TTF files are missing the
document degrades to the built-in Helvetica, which only covers Latin-1.
"""

import logging
from pathlib import Path

from fpdf import FPDF  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

FONT_FAMILY = "NotoSans"
FALLBACK_FONT = "Helvetica"
CORE_FONTS = {"courier", "helvetica", "times"}

_FONT_FILES = {
    "regular": "NotoSans-Regular.ttf",
    "bold": "NotoSans-Bold.ttf",
}

# Typographic characters outside Latin-1 and their closest Latin-1 spelling
_LATIN1_REPLACEMENTS = {
    "•": "·",  # • bullet -> middle dot
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
    "…": "...",
    " ": " ",
}


def find_font_files(fonts_dir: Path | None) -> dict[str, Path] | None:
    """Get Noto Sans font files from a fonts directory.

    Returns dict with 'regular' and 'bold' keys mapped to their file paths,
    or None if the directory or any file is missing.
    """
    if fonts_dir is None or not fonts_dir.exists():
        return None

    fonts = {style: fonts_dir / filename for style, filename in _FONT_FILES.items()}
    for path in fonts.values():
        if not path.exists():
            return None
    return fonts


def is_core_font(family: str) -> bool:
    """Check whether ``family`` is one of the PDF standard fonts."""
    return family.lower() in CORE_FONTS


def register_fonts(pdf: FPDF, fonts_dir: Path | None, preferred: str | None = None) -> str:
    """Register fonts on ``pdf`` and return the family to paint with.

    ``preferred`` may name a core font (Helvetica, Times, Courier) to skip
    the TTF lookup. Any other unavailable family falls back to Helvetica.
    """
    if preferred and is_core_font(preferred):
        return preferred.capitalize()

    if preferred and preferred != FONT_FAMILY:
        logger.warning(f"Font '{preferred}' is not bundled, using {FONT_FAMILY}")

    fonts = find_font_files(fonts_dir)
    if fonts is None:
        logger.warning(
            f"{FONT_FAMILY} font files not found in {fonts_dir}, falling back to {FALLBACK_FONT}"
        )
        return FALLBACK_FONT

    pdf.add_font(FONT_FAMILY, "", str(fonts["regular"]))
    pdf.add_font(FONT_FAMILY, "B", str(fonts["bold"]))
    logger.debug(f"Registered {FONT_FAMILY} from {fonts_dir}")
    return FONT_FAMILY


def to_latin1(text: str) -> str:
    """Make ``text`` paintable with a core font.

    Known typographic characters are replaced by Latin-1 equivalents, the
    rest by '?'.
    """
    for char, replacement in _LATIN1_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", errors="replace").decode("latin-1")
