"""
Export options and their resolution against defaults.

Functions
---------
resolve_options(overrides=None, **kwargs)
    Merge caller overrides into the default options and validate the result.
check_printable_area(options)
    Raise when the margins leave no printable area on the page.

Classes
-------
ExportOptions
    Immutable, fully-resolved options for one export call.

Notes
-----
- Overrides set to ``None`` are treated as unspecified, so a resolved
  ``ExportOptions`` never carries missing values.
- A ``.pdf`` extension is appended to filenames that lack one.
- ``format`` and ``scale`` are accepted as aliases of ``page_format`` and
  ``raster_scale``.
- Margins are expressed in ``unit``; page geometry helpers return values in
  the same unit, or in PDF points for the ``*_points`` variants.

Examples
--------
>>> from docexport.options import resolve_options
>>> options = resolve_options({"filename": "receipt.pdf"}, margin=8)
>>> options.filename, options.margin, options.page_format
('receipt.pdf', 8, 'a4')
>>> [round(v, 1) for v in options.page_size]
[210.0, 297.0]
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LEGAL, LETTER, landscape, portrait
from reportlab.lib.units import cm, inch, mm

from ._utils import read_config, validate_positive_number, validate_string_flag
from .errors import ConfigurationError

PAGE_FORMATS = {"a4": A4, "letter": LETTER, "legal": LEGAL}
UNITS = {"mm": mm, "pt": 1.0, "cm": cm, "in": inch}
ORIENTATIONS = ("portrait", "landscape")
OPTION_ALIASES = {"format": "page_format", "scale": "raster_scale"}


@dataclass(frozen=True)
class ExportOptions:
    """
    Resolved options of one export call.

    Attributes
    ----------
    filename : str
        Name of the delivered file.
    orientation : {'portrait', 'landscape'}
        Page orientation.
    unit : {'mm', 'pt', 'cm', 'in'}
        Unit of ``margin`` and of the page geometry helpers.
    page_format : {'a4', 'letter', 'legal'}
        Paper size.
    margin : float
        Margin applied on every side of the page, in ``unit``.
    raster_scale : float
        Resolution multiplier used when capturing visual surfaces.
    background_color : str
        Background color of captured surfaces.
    """

    filename: str = "document.pdf"
    orientation: str = "portrait"
    unit: str = "mm"
    page_format: str = "a4"
    margin: float = 10
    raster_scale: float = 2
    background_color: str = "#ffffff"

    @property
    def page_size_points(self) -> tuple[float, float]:
        size = PAGE_FORMATS[self.page_format]
        return landscape(size) if self.orientation == "landscape" else portrait(size)

    @property
    def page_size(self) -> tuple[float, float]:
        """Page width and height in ``unit``."""
        width, height = self.page_size_points
        return width / UNITS[self.unit], height / UNITS[self.unit]

    @property
    def margin_points(self) -> float:
        return self.to_points(self.margin)

    def to_points(self, value: float) -> float:
        """Convert a length in ``unit`` into PDF points."""
        return value * UNITS[self.unit]


DEFAULT_OPTIONS = ExportOptions()


def resolve_options(
    overrides: Mapping[str, Any] | None = None, **kwargs
) -> ExportOptions:
    """
    Resolve caller overrides against the default export options.

    Parameters
    ----------
    overrides : Mapping[str, Any], optional
        Partial options. Keys are ``ExportOptions`` field names or the
        ``format``/``scale`` aliases.
    **kwargs
        More partial options; they take precedence over ``overrides``.

    Returns
    -------
    ExportOptions
        Options where every unspecified or ``None`` field holds its default.

    Raises
    ------
    TypeError
        If an unknown option name is given.
    ConfigurationError
        If a value is not supported (unknown page format, negative margin,
        non-positive scale, unparseable color, empty filename).

    Examples
    --------
    >>> resolve_options(scale=3, orientation="landscape").raster_scale
    3
    >>> resolve_options(filename=None).filename
    'document.pdf'
    """
    errors = read_config("messages")["errors"]
    merged = {**(overrides or {}), **kwargs}
    known = {f.name for f in dataclasses.fields(ExportOptions)}
    values = {}
    unknown = []
    for key, value in merged.items():
        name = OPTION_ALIASES.get(key, key)
        if name not in known:
            unknown.append(key)
            continue
        if value is None:
            continue
        if name in {"orientation", "unit", "page_format"} and isinstance(value, str):
            value = value.lower()
        values[name] = value
    if unknown:
        raise TypeError(
            errors["unknown_options_f"].format(sorted(unknown), sorted(known))
        )
    options = dataclasses.replace(DEFAULT_OPTIONS, **values)
    _validate_options(options, errors)
    if not options.filename.lower().endswith(".pdf"):
        options = dataclasses.replace(options, filename=f"{options.filename}.pdf")
    return options


def _validate_options(options: ExportOptions, errors: dict) -> None:
    validate_string_flag(
        options.orientation,
        ORIENTATIONS,
        errors["unsupported_option_f"].format(
            "orientation", options.orientation, ORIENTATIONS
        ),
    )
    validate_string_flag(
        options.unit,
        tuple(UNITS),
        errors["unsupported_option_f"].format("unit", options.unit, tuple(UNITS)),
    )
    validate_string_flag(
        options.page_format,
        tuple(PAGE_FORMATS),
        errors["unsupported_option_f"].format(
            "page_format", options.page_format, tuple(PAGE_FORMATS)
        ),
    )
    validate_positive_number(
        options.margin,
        errors["invalid_number_option_f"].format("margin", options.margin),
        allow_zero=True,
    )
    validate_positive_number(
        options.raster_scale,
        errors["invalid_number_option_f"].format(
            "raster_scale", options.raster_scale
        ),
    )
    if not isinstance(options.filename, str) or not options.filename.strip():
        raise ConfigurationError(errors["invalid_filename_f"].format(options.filename))
    try:
        colors.toColor(options.background_color)
    except ValueError as e:
        raise ConfigurationError(
            errors["unsupported_option_f"].format(
                "background_color", options.background_color, "a CSS color"
            )
        ) from e


def check_printable_area(options: ExportOptions) -> tuple[float, float]:
    """
    Return the printable width and height of a page, in ``options.unit``.

    Raises
    ------
    ConfigurationError
        If the margins consume the whole page width or height.
    """
    page_width, page_height = options.page_size
    printable_width = page_width - 2 * options.margin
    printable_height = page_height - 2 * options.margin
    if printable_width <= 0 or printable_height <= 0:
        raise ConfigurationError(
            read_config("messages")["errors"]["margin_too_large_f"].format(
                options.margin,
                options.unit,
                round(page_width, 2),
                round(page_height, 2),
                options.unit,
            )
        )
    return printable_width, printable_height
