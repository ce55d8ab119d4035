"""
Utilities for robust file path handling, validation, and PDF delivery.

This module provides helper functions for managing filesystem paths, validating
them against common conditions, and delivering finished documents to disk. A
document is always written to a temporary sibling file first and moved into
place in one step, so a failed export never leaves a half-written PDF behind.

Functions
---------
convert_filepath(path, default_filename)
    Ensure a given path always points to a file,
    appending a default filename if necessary.
validate_path(path, overwrite_check=True, dir_exists_check=True,
              have_permissions_check=True)
    Validate a filesystem path with optional checks for:
        - Existing files (overwrite check)
        - Directory existence (warn if directory does not exist)
        - Write permissions
enable_io_logs(logger)
    Decorator for I/O functions to automatically log PermissionError, FileExistsError,
    and other unexpected exceptions.
deliver_document(pdf_bytes, path, filename, overwrite=True)
    Atomically save PDF bytes under ``path`` using ``filename`` when ``path``
    is a directory.

Examples
--------
>>> from docexport._utils.io import convert_filepath, deliver_document

>>> convert_filepath("exports", "receipt.pdf")
PosixPath('exports/receipt.pdf')

>>> deliver_document(b"%PDF-1.4 ...", "exports", "receipt.pdf")
PosixPath('exports/receipt.pdf')
"""

import os
import re
import logging
import tempfile
import warnings
from pathlib import Path
from typing import Callable
import functools

from ..errors import SerializationError
from .readers import read_config

logger = logging.getLogger(__name__)

DIR_MISSING_WARNING_F = "Directory '{}' does not exist. It will be created automatically."


def convert_filepath(path: str | Path, default_filename: str) -> Path:
    """
    Convert a given path into a full file path with a specified filename.

    If the input `path` is a directory (has no suffix), the
    `default_filename` is appended. If the input is already a file path,
    it is returned unchanged.

    Parameters
    ----------
    path : str or Path
        The input path, which can be either a directory or a file path.
    default_filename : str
        The filename to append if `path` is a directory (has no suffix).

    Returns
    -------
    Path
        A `Path` object pointing to a file.

    Examples
    --------
    >>> convert_filepath("output", "report.pdf")
    PosixPath('output/report.pdf')

    >>> convert_filepath("output/report.pdf", "ignored.pdf")
    PosixPath('output/report.pdf')
    """
    path_pl = Path(path)
    if path_pl.suffix == "":
        return path_pl / default_filename
    return path_pl


def validate_path(
    path: str | Path,
    overwrite_check: bool = True,
    dir_exists_check: bool = True,
    have_permissions_check: bool = True,
):
    """
    Validate a filesystem path before performing IO operations.

    Parameters
    ----------
    path : str or Path
        The filesystem path to validate. Can be a full file path or a directory.
        - If a file path is provided, the directory containing the file will be checked.
        - If a directory path is provided, the directory itself will be checked.
    overwrite_check : bool, default=True
        If True, raises a `FileExistsError` when the path already exists.
    dir_exists_check : bool, default=True
        If True, issues a `UserWarning` when the directory does not exist.
        The directory is created automatically by the caller afterwards.
    have_permissions_check : bool, default=True
        If True, raises a `PermissionError` when the first existing ancestor
        of the path is not writable.

    Raises
    ------
    FileExistsError
        If `overwrite_check` is True and the file or directory already exists.
    PermissionError
        If `have_permissions_check` is True and the directory is not writable.
    ValueError
        If `have_permissions_check` is True but no existing parent directory
        can be found to verify permissions.

    Warns
    -----
    UserWarning
        If `dir_exists_check` is True and the directory does not exist.

    Examples
    --------
    >>> validate_path("output/report.pdf")  # Raises warning if 'output/' does not exist
    >>> validate_path("output/report.pdf", overwrite_check=False)  # Allows overwriting
    """
    path_pl = Path(path)
    directory = path_pl.parent if path_pl.suffix else path_pl

    if overwrite_check and path_pl.exists():
        raise FileExistsError(f"Path '{path}' already exists.")
    if dir_exists_check and not directory.exists():
        warnings.warn(DIR_MISSING_WARNING_F.format(directory))
    if have_permissions_check:
        existing_path = path_pl
        while True:
            if existing_path.exists():
                break
            if existing_path.parent == existing_path:
                raise ValueError(
                    f"Unable to verify permissions to the specified path: {path}. "
                    "Try to provide an absolute path."
                )
            existing_path = existing_path.parent
        if not os.access(existing_path, os.W_OK):
            raise PermissionError(f"No write permissions for path '{existing_path}'")


def enable_io_logs(io_logger: logging.Logger = None) -> Callable:
    """
    Decorator factory for logging I/O errors with a specified logger.

    Wraps an I/O function to catch common filesystem exceptions, log them,
    and re-raise them unchanged.

    Parameters
    ----------
    io_logger : logging.Logger, optional
        Logger instance to emit error messages through. If not provided,
        defaults to the logger of this module (`docexport._utils.io`).

    Returns
    -------
    Callable
        A decorator to wrap I/O functions.

    Notes
    -----
    - ``PermissionError``, ``FileExistsError`` and any other ``Exception``
      are logged and re-raised.
    - Warnings raised inside the wrapped function are recorded; the
      "directory will be created" warning is mirrored into the log, and
      every recorded warning is re-emitted so filters and test frameworks
      still observe it.

    Examples
    --------
    >>> import logging
    >>> logger = logging.getLogger("docexport.raster.tiling")
    >>> @enable_io_logs(logger)
    ... def _save(pdf_bytes, path):
    ...     with open(path, "wb") as f:
    ...         f.write(pdf_bytes)
    """
    if io_logger is None:
        io_logger = logger

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            caught_warnings = []
            warns_to_log_regex = {r"Directory '.*' does not exist\."}
            try:
                with warnings.catch_warnings(record=True) as caught_warnings:
                    warnings.simplefilter("always")
                    return fn(*args, **kwargs)
            except PermissionError as e:
                io_logger.error("Permission denied in %s: %s", fn.__name__, e)
                raise
            except FileExistsError as e:
                io_logger.error("File already exists in %s: %s", fn.__name__, e)
                raise
            except Exception as e:
                io_logger.error("Unexpected IO error in %s: %s", fn.__name__, e)
                raise
            finally:
                for w in caught_warnings:
                    msg = str(w.message)
                    for regex in warns_to_log_regex:
                        if re.search(regex, msg):
                            io_logger.warning(
                                "Captured warning in %s: %s", fn.__name__, msg
                            )
                    warnings.warn(w.message, category=w.category, stacklevel=2)

        return wrapper

    return decorator


@enable_io_logs(logger)
def deliver_document(
    pdf_bytes: bytes,
    path: str | Path,
    filename: str,
    overwrite: bool = True,
) -> Path:
    """
    Save finished PDF bytes to disk atomically.

    Parameters
    ----------
    pdf_bytes : bytes
        Serialized PDF document.
    path : str or Path
        Directory or full ``.pdf`` file path. A directory receives
        ``filename`` inside it.
    filename : str
        File name used when ``path`` is a directory.
    overwrite : bool, default=True
        If False, a `FileExistsError` is raised when the target exists.

    Returns
    -------
    Path
        The path the document was written to.

    Raises
    ------
    ValueError
        If the resolved target does not have a ``.pdf`` extension.
    SerializationError
        If writing or moving the file fails.

    Notes
    -----
    The bytes are written into a temporary file in the target directory and
    moved over the target with ``os.replace``. The temporary file is removed
    whatever happens, so a failure leaves no partial document behind.
    """
    target = convert_filepath(path, filename)
    if target.suffix.lower() != ".pdf":
        raise ValueError(f"'{target}' must be a directory or have .pdf extension")
    validate_path(target, overwrite_check=not overwrite)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.stem}-", suffix=".part", dir=target.parent
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(pdf_bytes)
        os.replace(tmp_name, target)
    except OSError as e:
        raise SerializationError(
            read_config("messages")["errors"]["serialization_failed_f"].format(
                target, e
            )
        ) from e
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
    logger.debug("Delivered %d bytes to '%s'", len(pdf_bytes), target)
    return target
