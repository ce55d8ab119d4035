"""
Validation utilities for export options.

Functions
---------
validate_string_flag(arg, supported_values, err_msg)
    Validate a string flag against a set of supported values.
validate_positive_number(value, err_msg, allow_zero=False)
    Validate that a value is a finite real number above zero (or at least
    zero when ``allow_zero`` is set).

Notes
-----
- Both validators raise ``ConfigurationError``, which is a ``ValueError``
  subclass, so callers that already catch ``ValueError`` keep working.
"""

import math
from numbers import Real
from typing import Iterable

from ..errors import ConfigurationError


def validate_string_flag(
    arg: str, supported_values: Iterable[str], err_msg: str
) -> None:
    """
    Validate a string flag against a set of supported values.

    Parameters
    ----------
    arg : str
        The string flag to validate.
    supported_values : Iterable[str]
        An iterable containing all supported flag values.
    err_msg : str
        The error message used if validation fails.

    Raises
    ------
    ConfigurationError
        If `arg` is not found in `supported_values`.

    Examples
    --------
    >>> validate_string_flag("a4", {"a4", "letter"}, "Unsupported format")
    >>> validate_string_flag("a5", {"a4", "letter"}, "Unsupported format")
    Traceback (most recent call last):
        ...
    docexport.errors.ConfigurationError: Unsupported format
    """
    if arg not in supported_values:
        raise ConfigurationError(err_msg)


def validate_positive_number(value, err_msg: str, allow_zero: bool = False) -> None:
    """
    Validate that ``value`` is a finite real number greater than zero.

    Booleans are rejected even though they are ``int`` subclasses.

    Raises
    ------
    ConfigurationError
        If the value is not a real number, is not finite, or is below the
        allowed bound.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ConfigurationError(err_msg)
    if not math.isfinite(value):
        raise ConfigurationError(err_msg)
    if value < 0 or (value == 0 and not allow_zero):
        raise ConfigurationError(err_msg)
