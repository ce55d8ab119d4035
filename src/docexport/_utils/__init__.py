"""
Internal utilities for docexport.

This module provides low-level utilities for configuration reading,
logging, option validation and document delivery. These are internal APIs
and may change without notice.

Methods
-------
read_config(name)
    Read and cache JSON configuration files.
temp_log_level(logger, level)
    Temporarily sets the logging level of a logger within a context.
log_context(logger, verbose, debug)
    Pick the temporary logging context for ``verbose``/``debug`` flags.
convert_filepath(path, default_filename)
    Ensure a given path always points to a file,
    appending a default filename if necessary.
validate_path(path, overwrite_check=True, dir_exists_check=True,
              have_permissions_check=True)
    Validate a filesystem path with optional checks.
enable_io_logs(logger)
    Decorator for I/O functions to automatically log PermissionError, FileExistsError,
    and other unexpected exceptions.
deliver_document(pdf_bytes, path, filename, overwrite)
    Atomically save a finished PDF document.
validate_string_flag(arg, supported_values, err_msg)
    Validate a string flag against a set of supported values.
validate_positive_number(value, err_msg, allow_zero)
    Validate a finite positive real number.
"""

from .helpers import log_context, temp_log_level
from .readers import read_config
from .io import convert_filepath, deliver_document, enable_io_logs, validate_path
from .validation import validate_positive_number, validate_string_flag

__all__ = [
    "read_config",
    "temp_log_level",
    "log_context",
    "convert_filepath",
    "validate_path",
    "enable_io_logs",
    "deliver_document",
    "validate_string_flag",
    "validate_positive_number",
]
