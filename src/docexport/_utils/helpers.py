"""
Logging helpers shared by the export pipelines.

Methods
-------
temp_log_level(logger, level)
    Temporarily sets the logging level of a logger within a context.
log_context(logger, verbose, debug)
    Pick the temporary logging context requested by ``verbose``/``debug`` flags.

Examples
--------
>>> import logging
>>> from docexport._utils import log_context
>>> logger = logging.getLogger("docexport.example")
>>> with log_context(logger, verbose=True):
...     logger.info("Visible while the context is active")
"""

import logging
from contextlib import contextmanager, nullcontext


@contextmanager
def temp_log_level(logger, level):
    """
    Temporarily sets the logging level of a logger within a context.

    Parameters
    ----------
    logger : logging.Logger
        The logger whose level will be temporarily changed.
    level : int
        The logging level to set (e.g., logging.INFO, logging.DEBUG).

    Usage
    -----
    >>> import logging
    >>> logger = logging.getLogger("my_logger")
    >>> with temp_log_level(logger, logging.INFO):
    ...     logger.info("This will be shown if logger level was lower before")
    ...
    # After the context, logger level is restored to its original value.

    Notes
    -----
    After exiting the context, the original log level is always restored,
    even if an exception occurs.
    """
    old_level = logger.level
    logger.setLevel(level)
    try:
        yield
    finally:
        logger.setLevel(old_level)


def log_context(logger, verbose: bool = False, debug: bool = False):
    """
    Return the logging context matching the ``verbose``/``debug`` flags.

    ``debug`` takes precedence over ``verbose``. Without either flag a
    ``nullcontext`` is returned and the logger level is left untouched.
    """
    if debug:
        return temp_log_level(logger, logging.DEBUG)
    if verbose:
        return temp_log_level(logger, logging.INFO)
    return nullcontext()
