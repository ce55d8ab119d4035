"""
Configuration reading utilities.

This module provides a cached reader for the JSON configuration files
shipped with docexport (message templates, display labels and font
sources). Files are read once per process and reused by every export.

Methods
-------
read_config
    Read and cache JSON configuration files from the package's config directory.

Notes
-----
- All functions use LRU caching to avoid repeated file I/O
- Returned dictionaries are shared between callers and must not be mutated

Examples
--------
>>> from docexport._utils import read_config

>>> read_config("messages")["errors"]["margin_too_large_f"]
'Margin {} {} leaves no printable area on a {} x {} {} page.'
"""

import json
import pathlib
from functools import lru_cache


@lru_cache(maxsize=3)
def read_config(name) -> dict:
    """
    Read and cache JSON configuration files.

    This function reads JSON files from the package's `config/` directory
    and caches the results to avoid repeated file system access.

    Parameters
    ----------
    name : str
        The name of the configuration file (without .json extension).
        File is located at `config/{name}.json` relative to the package root.

    Returns
    -------
    dict
        The parsed JSON content of the configuration file.

    Raises
    ------
    FileNotFoundError
        If the requested configuration file does not exist.

    Examples
    --------
    >>> from docexport._utils import read_config

    >>> read_config("labels")["placeholder"]
    'No data available'

    Notes
    -----
    - The cache size is set to 3 because docexport currently uses 3
      configuration files: ``messages``, ``labels`` and ``fonts``.
    """
    path = pathlib.Path(__file__).resolve().parent.parent / f"config/{name}.json"
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
