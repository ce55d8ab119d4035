"""
docexport: a document export engine producing paginated PDF files.

Features include:
- Rasterization export of drawn visual surfaces tiled across pages
- Structured report export from loosely-typed report bundles
- Defensive normalization of numbers, text, dates and lists
- Single-flight loading of the embedded font family
"""
import logging

from .errors import (
    CaptureError,
    ConfigurationError,
    ExportError,
    ResourceLoadError,
    SerializationError,
)
from .export import export_report_bundle, export_visual_node
from .fonts import FontRegistry
from .options import ExportOptions, resolve_options
from .types import CompanyIdentity, ReportMeta

__version__ = "0.1.0"

__all__ = [
    "export_visual_node",
    "export_report_bundle",
    "resolve_options",
    "ExportOptions",
    "FontRegistry",
    "ReportMeta",
    "CompanyIdentity",
    "ExportError",
    "ResourceLoadError",
    "CaptureError",
    "ConfigurationError",
    "SerializationError",
]

logger = logging.getLogger("docexport")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
logger.setLevel(logging.WARNING)
