"""
Display formatting helpers.

Pure functions turning already-safe values into display text: currency
amounts, grouped numbers, percentages and dates. They expect well-formed
input; untrusted payload values go through :mod:`docexport.normalization`
first, which composes these helpers with defensive coercion.

Functions
---------
format_currency(amount, symbol=None)
    Two-decimal grouped amount followed by the currency symbol.
format_number(value)
    Grouped number with up to three fraction digits.
format_percent(value, decimals=2)
    Percentage value (already scaled to 0-100) with a ``%`` suffix.
format_date(value)
    ``d/m/yyyy`` date.
format_date_long(value)
    ``d Month yyyy`` date.
format_datetime(value)
    ``d/m/yyyy - HH:MM`` timestamp.

Examples
--------
>>> from docexport.formatting import format_currency, format_date
>>> format_currency(1000.5)
'1,000.50 SDG'
>>> format_date("2024-09-23T10:30:00Z")
'23/9/2024'
"""

from datetime import date, datetime
from numbers import Real

import pandas as pd

from ._utils import read_config


def format_currency(amount: float, symbol: str = None) -> str:
    """
    Format an amount with two decimals, thousands separators and a symbol.

    Parameters
    ----------
    amount : float
        Amount to format.
    symbol : str, optional
        Currency symbol appended after the amount. Defaults to
        ``currency_symbol`` from the labels configuration.

    Examples
    --------
    >>> format_currency(500)
    '500.00 SDG'
    """
    if symbol is None:
        symbol = read_config("labels")["currency_symbol"]
    return f"{amount:,.2f} {symbol}"


def format_number(value: float) -> str:
    """
    Format a number with thousands separators and at most 3 fraction digits.

    Examples
    --------
    >>> format_number(1000)
    '1,000'
    >>> format_number(1500.75)
    '1,500.75'
    """
    rounded = round(float(value), 3)
    if rounded == int(rounded):
        return f"{int(rounded):,}"
    return f"{rounded:,.3f}".rstrip("0")


def format_percent(value: float, decimals: int = 2) -> str:
    """
    Format a percentage that is already expressed on a 0-100 scale.

    Examples
    --------
    >>> format_percent(12.5)
    '12.50%'
    """
    return f"{value:.{decimals}f}%"


def _to_timestamp(value) -> pd.Timestamp | None:
    """Parse ``value`` into a timestamp, or None when it is not a date."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (datetime, date)):
            parsed = pd.Timestamp(value)
        elif isinstance(value, Real):
            # numeric timestamps arrive in epoch milliseconds
            parsed = pd.to_datetime(value, unit="ms", errors="coerce")
        elif isinstance(value, str):
            parsed = pd.to_datetime(value.strip(), errors="coerce")
        else:
            return None
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed


def format_date(value) -> str:
    """
    Format a date as ``d/m/yyyy``.

    Accepts ``datetime``/``date`` objects, ISO-like strings and epoch
    milliseconds. Anything else yields the configured invalid-date text.

    Examples
    --------
    >>> format_date(datetime(2024, 9, 23))
    '23/9/2024'
    >>> format_date("not a date")
    'Invalid date'
    """
    ts = _to_timestamp(value)
    if ts is None:
        return read_config("labels")["invalid_date"]
    return f"{ts.day}/{ts.month}/{ts.year}"


def format_date_long(value) -> str:
    """Format a date as ``d Month yyyy``, e.g. ``23 September 2024``."""
    ts = _to_timestamp(value)
    labels = read_config("labels")
    if ts is None:
        return labels["invalid_date"]
    return f"{ts.day} {labels['months'][ts.month - 1]} {ts.year}"


def format_datetime(value) -> str:
    """Format a timestamp as ``d/m/yyyy - HH:MM``."""
    ts = _to_timestamp(value)
    if ts is None:
        return read_config("labels")["invalid_date"]
    return f"{format_date(ts)} - {ts.hour:02d}:{ts.minute:02d}"
