"""
Defensive normalization of untrusted report values.

Report payloads are produced by external endpoints and their shape is not
guaranteed. The functions in this module turn any value into either a finite
number or display-safe text. They never raise and never return ``NaN``,
infinities or ``None``.

Functions
---------
to_safe_number(value)
    Finite number, or ``0`` when the value cannot be read as one.
to_safe_text(value)
    Display text, or ``"-"`` for missing/blank values.
to_currency_text(value), to_percent_text(value), to_count_text(value)
    ``to_safe_number`` composed with the matching formatter.
to_date_text(value)
    ``d/m/yyyy`` text, ``"-"`` for missing values.
to_safe_list(value)
    The value when it is a list or tuple, otherwise an empty list.
to_safe_mapping(value)
    The value when it is a mapping, otherwise an empty dict.
lookup_label(labels, value)
    Display label for an enum-like code, falling back to ``to_safe_text``.

Examples
--------
>>> from docexport.normalization import to_safe_number, to_safe_text
>>> to_safe_number("12.5")
12.5
>>> to_safe_number({"nested": 1})
0
>>> to_safe_text("   ")
'-'
"""

import math
from decimal import Decimal
from numbers import Real
from typing import Any, Mapping

import numpy as np
import pandas as pd

from ._utils import read_config
from .formatting import format_currency, format_date, format_number, format_percent

def _dash() -> str:
    return read_config("labels")["dash"]


def to_safe_number(value) -> float:
    """
    Coerce an arbitrary value into a finite number.

    Parameters
    ----------
    value : Any
        Value to coerce.

    Returns
    -------
    float or int
        - real numbers (including numpy scalars and ``Decimal``) when finite;
        - non-blank numeric strings parsed with ``pd.to_numeric``;
        - ``0`` for everything else: ``None``, booleans, containers,
          non-numeric strings, ``NaN`` and infinities.

    Examples
    --------
    >>> to_safe_number(3)
    3
    >>> to_safe_number(" 1e3 ")
    1000.0
    >>> to_safe_number(float("nan"))
    0
    >>> to_safe_number("N/A")
    0
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (Real, Decimal)):
        try:
            finite = bool(np.isfinite(float(value)))
        except (ValueError, OverflowError):
            return 0
        if not finite:
            return 0
        return float(value) if isinstance(value, Decimal) else value
    if isinstance(value, str) and value.strip():
        parsed = pd.to_numeric(value.strip(), errors="coerce")
        if isinstance(parsed, Real) and np.isfinite(parsed):
            return float(parsed)
    return 0


def to_safe_text(value) -> str:
    """
    Convert a value into display text.

    ``None``, ``NaN`` and strings that are empty after stripping become the
    dash placeholder; anything else is passed through ``str``.

    Examples
    --------
    >>> to_safe_text(None)
    '-'
    >>> to_safe_text(42)
    '42'
    """
    if value is None:
        return _dash()
    if isinstance(value, float) and math.isnan(value):
        return _dash()
    if isinstance(value, str) and not value.strip():
        return _dash()
    return str(value)


def to_currency_text(value) -> str:
    """Currency text for an untrusted amount."""
    return format_currency(to_safe_number(value))


def to_percent_text(value) -> str:
    """Percent text for an untrusted value already on a 0-100 scale."""
    return format_percent(to_safe_number(value))


def to_count_text(value) -> str:
    """Grouped number text for an untrusted count."""
    return format_number(to_safe_number(value))


def to_date_text(value) -> str:
    """
    Date text for an untrusted date value.

    Missing values give the dash placeholder, present but unparseable values
    give the invalid-date text of :func:`docexport.formatting.format_date`.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return _dash()
    return format_date(value)


def to_safe_list(value) -> list:
    """
    Return ``value`` only if it is an actual list (or tuple).

    Strings, mappings and every other type yield an empty list, so iterating
    over a payload's array field never walks characters or dict keys.

    Examples
    --------
    >>> to_safe_list([1, 2])
    [1, 2]
    >>> to_safe_list("abc")
    []
    """
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return []


def to_safe_mapping(value) -> Mapping[str, Any]:
    """Return ``value`` when it is a mapping, otherwise an empty dict."""
    if isinstance(value, Mapping):
        return value
    return {}


def lookup_label(labels: Mapping[str, str] | str, value) -> str:
    """
    Translate an enum-like code into its display label.

    Parameters
    ----------
    labels : Mapping[str, str] or str
        Either the mapping itself or the name of a group under ``statuses``
        in the labels configuration (``"order"``, ``"inventory"``,
        ``"customer_type"``).
    value : Any
        The raw code from the payload.

    Examples
    --------
    >>> lookup_label("order", "PENDING")
    'Pending'
    >>> lookup_label("order", "ARCHIVED")
    'ARCHIVED'
    """
    if isinstance(labels, str):
        labels = read_config("labels")["statuses"][labels]
    if isinstance(value, str) and value in labels:
        return labels[value]
    return to_safe_text(value)
