"""
Error taxonomy of docexport.

Every failure surfaced by an export is an instance of :class:`ExportError`,
so presentation code can catch one base class and decide how to inform the
user. Malformed report payload fields are never errors: they are normalized
to safe defaults by :mod:`docexport.normalization`.

Classes
-------
ExportError
    Base class for all export failures.
ResourceLoadError
    A font asset could not be fetched, decoded or registered.
CaptureError
    A visual surface could not be rasterized (detached or zero-size).
ConfigurationError
    Export options are invalid, e.g. margins leave no printable area.
SerializationError
    The PDF document could not be assembled or written.
"""


class ExportError(Exception):
    """Base class for all errors raised by docexport."""


class ResourceLoadError(ExportError):
    """Raised when font assets cannot be fetched or registered."""


class CaptureError(ExportError):
    """Raised when a visual surface cannot be captured as a raster image."""


class ConfigurationError(ExportError, ValueError):
    """Raised for invalid export options."""


class SerializationError(ExportError):
    """Raised when a PDF document cannot be built or delivered."""
