"""Typography, spacing and page geometry for the CV layout engine.

All lengths are millimetres, font sizes are points. Every render resolves
its own ``RenderSettings`` from the defaults below plus caller overrides, so
two documents rendered side by side never share style state.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel, to_snake

from cv_generator.config import get_settings

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class TextStyle:
    """A named text preset."""

    font_size: float
    bold: bool
    color: RGB


@dataclass(frozen=True)
class Spacing:
    """Vertical rhythm and badge metrics."""

    after_h1: float = 8.0
    before_h2: float = 4.0
    after_h2: float = 5.0
    before_h3: float = 7.0
    after_h3: float = 5.0
    paragraph_gap: float = 5.0
    line_height: float = 7.0
    item_gap: float = 7.0
    section_gap: float = 8.0
    badge_padding: float = 2.0
    badge_height: float = 5.5
    badge_spacing: float = 3.0
    badge_radius: float = 1.0
    footer_offset: float = 10.0


@dataclass(frozen=True)
class ColorScheme:
    """Document palette.

    The text roles (``primary``, ``secondary``, ``accent``, ``muted``, ``link``)
    recolour the text styles listed in ``STYLE_COLOR_ROLES``; the rest colour
    decorations.
    """

    primary: RGB = (0, 0, 0)
    secondary: RGB = (64, 64, 64)
    accent: RGB = (50, 90, 140)  # Also the section dividers
    muted: RGB = (100, 100, 100)
    link: RGB = (0, 0, 238)
    badge_background: RGB = (240, 240, 245)
    panel_background: RGB = (245, 245, 250)  # Project heading panel


@dataclass(frozen=True)
class PageGeometry:
    """Page size and margins (A4 portrait by default)."""

    page_width: float = 210.0
    page_height: float = 297.0
    margin_top: float = 20.0
    margin_right: float = 20.0
    margin_bottom: float = 20.0
    margin_left: float = 20.0

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_right(self) -> float:
        return self.page_width - self.margin_right

    @property
    def bottom_boundary(self) -> float:
        """Lowest y a block may reach before a page break is required."""
        return self.page_height - self.margin_bottom


# Style presets
DEFAULT_STYLES: Mapping[str, TextStyle] = MappingProxyType(
    {
        "h1": TextStyle(font_size=26, bold=True, color=(0, 0, 0)),
        "h2": TextStyle(font_size=17, bold=True, color=(0, 0, 0)),
        "h3": TextStyle(font_size=13, bold=True, color=(0, 0, 0)),
        "h4": TextStyle(font_size=12, bold=True, color=(0, 0, 0)),
        "normal": TextStyle(font_size=11, bold=False, color=(0, 0, 0)),
        "small": TextStyle(font_size=10, bold=False, color=(0, 0, 0)),
        "link": TextStyle(font_size=11, bold=False, color=(0, 0, 238)),
        "muted": TextStyle(font_size=10, bold=False, color=(100, 100, 100)),
        "secondary": TextStyle(font_size=11, bold=False, color=(64, 64, 64)),
        "accent": TextStyle(font_size=11, bold=False, color=(50, 90, 140)),
    }
)

# Which ColorScheme entry colours each text style
STYLE_COLOR_ROLES: Mapping[str, str] = MappingProxyType(
    {
        "h1": "primary",
        "h2": "primary",
        "h3": "primary",
        "h4": "primary",
        "normal": "primary",
        "small": "primary",
        "secondary": "secondary",
        "link": "link",
        "muted": "muted",
        "accent": "accent",
    }
)

_SPACING_FIELDS = {f.name for f in fields(Spacing)}
_COLOR_FIELDS = {f.name for f in fields(ColorScheme)}
_STYLE_ATTRS = {"font_size", "font_style", "bold", "color"}


def _validate_rgb(value: Any) -> RGB:
    if not isinstance(value, list | tuple) or len(value) != 3:
        raise ValueError(f"Colour must be an (r, g, b) triple, got {value!r}")
    channels = tuple(int(c) for c in value)
    if any(c < 0 or c > 255 for c in channels):
        raise ValueError(f"Colour channels must be within 0-255, got {value!r}")
    return channels  # type: ignore[return-value]


def _snake_keys(mapping: Mapping[str, Any], allowed: set[str], what: str) -> dict[str, Any]:
    result = {}
    for key, value in mapping.items():
        name = key if key in allowed else to_snake(key)
        if name not in allowed:
            raise ValueError(f"Unknown {what} key: {key}")
        result[name] = value
    return result


class PDFOptions(BaseModel):
    """Caller overrides for a render; omitted keys keep their defaults.

    ``color_scheme`` and ``spacing`` override key by key. ``styles`` overrides
    per style name and, within a style, per attribute (``fontSize``,
    ``fontStyle``/``bold``, ``color``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    color_scheme: dict[str, RGB] | None = None
    spacing: dict[str, float] | None = None
    styles: dict[str, dict[str, Any]] | None = None
    font: str | None = None
    generated_on: date | None = None
    fonts_dir: Path | None = None

    @field_validator("color_scheme", mode="before")
    @classmethod
    def validate_colors(cls, v: Any) -> Any:
        if v is None:
            return None
        colors = _snake_keys(v, _COLOR_FIELDS, "colour scheme")
        return {name: _validate_rgb(rgb) for name, rgb in colors.items()}

    @field_validator("spacing", mode="before")
    @classmethod
    def validate_spacing(cls, v: Any) -> Any:
        if v is None:
            return None
        return _snake_keys(v, _SPACING_FIELDS, "spacing")

    @field_validator("styles", mode="before")
    @classmethod
    def validate_styles(cls, v: Any) -> Any:
        if v is None:
            return None
        return {name: _style_overrides(name, attrs) for name, attrs in v.items()}


def _style_overrides(name: str, attrs: Any) -> dict[str, Any]:
    if isinstance(attrs, TextStyle):
        return {"font_size": attrs.font_size, "bold": attrs.bold, "color": attrs.color}
    if not isinstance(attrs, Mapping):
        raise ValueError(f"Style '{name}' must be a mapping")
    overrides: dict[str, Any] = {}
    for key, value in attrs.items():
        attr = key if key in _STYLE_ATTRS else to_snake(key)
        if attr == "font_size":
            overrides["font_size"] = float(value)
        elif attr == "font_style":
            if value not in ("bold", "normal"):
                raise ValueError(f"Style '{name}': fontStyle must be 'bold' or 'normal'")
            overrides["bold"] = value == "bold"
        elif attr == "bold":
            overrides["bold"] = bool(value)
        elif attr == "color":
            overrides["color"] = _validate_rgb(value)
        else:
            raise ValueError(f"Style '{name}': unknown attribute {key}")
    return overrides


@dataclass(frozen=True)
class RenderSettings:
    """Fully resolved configuration for one render."""

    geometry: PageGeometry = field(default_factory=PageGeometry)
    styles: Mapping[str, TextStyle] = field(default_factory=lambda: DEFAULT_STYLES)
    spacing: Spacing = field(default_factory=Spacing)
    colors: ColorScheme = field(default_factory=ColorScheme)
    font: str | None = None
    generated_on: date = field(default_factory=date.today)
    fonts_dir: Path | None = None


def _merge_styles(
    colors: ColorScheme, overrides: Mapping[str, Mapping[str, Any]]
) -> Mapping[str, TextStyle]:
    """Recolour the presets from the palette, then apply per-style overrides."""
    styles = dict(DEFAULT_STYLES)
    for name, role in STYLE_COLOR_ROLES.items():
        styles[name] = replace(styles[name], color=getattr(colors, role))

    for name, attrs in overrides.items():
        base = styles.get(name)
        if base is None:
            if "font_size" not in attrs:
                raise ValueError(f"New style '{name}' needs a fontSize")
            base = TextStyle(font_size=attrs["font_size"], bold=False, color=colors.primary)
        styles[name] = replace(base, **attrs)
    return MappingProxyType(styles)


def resolve_options(
    options: PDFOptions | Mapping[str, Any] | None = None,
    geometry: PageGeometry | None = None,
) -> RenderSettings:
    """Merge caller overrides onto the documented defaults.

    Without a ``fontsDir`` override the fonts directory comes from the
    application settings.
    """
    if options is None:
        options = PDFOptions()
    elif not isinstance(options, PDFOptions):
        options = PDFOptions.model_validate(options)

    colors = replace(ColorScheme(), **(options.color_scheme or {}))
    return RenderSettings(
        geometry=geometry or PageGeometry(),
        styles=_merge_styles(colors, options.styles or {}),
        spacing=replace(Spacing(), **(options.spacing or {})),
        colors=colors,
        font=options.font,
        generated_on=options.generated_on or date.today(),
        fonts_dir=options.fonts_dir or get_settings().fonts_dir,
    )
