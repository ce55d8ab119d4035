"""
Public export facade.

Two operations are exposed to the rest of an application: exporting an
already-drawn visual surface by rasterizing and tiling it, and exporting a
report bundle as a native structured document. Both resolve caller options
against the defaults before choosing a pipeline.

Functions
---------
export_visual_node(node, path=".", capturer=None, **options)
    Rasterize a visual surface into a paginated PDF.
export_report_bundle(bundle, meta=None, path=".", registry=None, **options)
    Build sections from a report bundle and render them into a PDF.

Notes
-----
- Both functions are coroutines. Independent exports may run concurrently
  on the same event loop; the only state they share is the font registry.
- ``path=None`` skips writing to disk; the PDF bytes are always returned.
- ``verbose`` and ``debug`` temporarily lower the level of the package
  logger for the duration of the call.

Examples
--------
>>> import asyncio
>>> import matplotlib.pyplot as plt
>>> from docexport import export_visual_node, export_report_bundle
>>> fig, ax = plt.subplots()
>>> pdf_bytes = asyncio.run(
...     export_visual_node(fig, path="./exports", filename="receipt.pdf")
... )
>>> pdf_bytes = asyncio.run(
...     export_report_bundle(
...         {"sales": {"summary": {"totalSales": 1000, "totalOrders": 4}}},
...         {"start_date": "2024-01-01", "end_date": "2024-01-31"},
...         path="./exports",
...         filename="sales.pdf",
...         orientation="landscape",
...     )
... )
"""

import logging

from ._utils import log_context
from .fonts import FontRegistry
from .options import resolve_options
from .raster import RasterCapturer, export_element_to_pdf
from .reports import build_sections, render_report_document

logger = logging.getLogger(__name__)

_package_logger = logging.getLogger("docexport")


async def export_visual_node(
    node,
    path=".",
    capturer: RasterCapturer | None = None,
    verbose: bool = False,
    debug: bool = False,
    overwrite: bool = True,
    **options,
) -> bytes:
    """
    Export a visual surface as a paginated PDF.

    Parameters
    ----------
    node : Any
        Surface to capture. With the default capturer, a matplotlib
        ``Figure`` or a sequence of figures (bulk export, stacked
        vertically).
    path : str or Path or None, default="."
        Directory or full ``.pdf`` path of the delivered file. A directory
        receives ``filename`` inside it. ``None`` disables writing.
    capturer : RasterCapturer, optional
        Capture capability. Defaults to :class:`docexport.raster.FigureCapturer`.
    verbose : bool, default=False
        Enables info-level logging during the function execution.
    debug : bool, default=False
        Enables debug-level logging during the function execution.
        Takes precedence over the 'verbose' parameter.
    overwrite : bool, default=True
        If False, an existing target raises ``FileExistsError``.
    **options
        Partial :class:`docexport.options.ExportOptions` fields:
        ``filename``, ``orientation``, ``unit``, ``page_format`` (or
        ``format``), ``margin``, ``raster_scale`` (or ``scale``),
        ``background_color``.

    Returns
    -------
    bytes
        PDF content as bytes.

    Raises
    ------
    TypeError
        If an unknown option is given.
    ConfigurationError
        If an option value is invalid or the margins leave no printable
        area.
    CaptureError
        If the surface cannot be captured.
    SerializationError
        If assembling or writing the document fails.
    """
    with log_context(_package_logger, verbose, debug):
        resolved = resolve_options(options)
        logger.info("Exporting visual node to '%s'", resolved.filename)
        return await export_element_to_pdf(
            node, resolved, capturer=capturer, path=path, overwrite=overwrite
        )


async def export_report_bundle(
    bundle,
    meta=None,
    path=".",
    registry: FontRegistry | None = None,
    verbose: bool = False,
    debug: bool = False,
    overwrite: bool = True,
    **options,
) -> bytes:
    """
    Export a report bundle as a structured, paginated PDF.

    Parameters
    ----------
    bundle : Mapping[str, Any]
        Report kind -> payload, for any subset of the kinds overview,
        sales, purchases, inventory, customers, suppliers and financial.
        Payload shape is not trusted; malformed fields are normalized.
    meta : ReportMeta or Mapping, optional
        Report period, company identity and generation time.
    path : str or Path or None, default="."
        Directory or full ``.pdf`` path of the delivered file. ``None``
        disables writing.
    registry : FontRegistry, optional
        Font registry to embed fonts from. Defaults to the process-wide
        registry.
    verbose : bool, default=False
        Enables info-level logging during the function execution.
    debug : bool, default=False
        Enables debug-level logging during the function execution.
        Takes precedence over the 'verbose' parameter.
    overwrite : bool, default=True
        If False, an existing target raises ``FileExistsError``.
    **options
        Partial :class:`docexport.options.ExportOptions` fields.

    Returns
    -------
    bytes
        PDF content as bytes.

    Raises
    ------
    TypeError
        If an unknown option is given.
    ConfigurationError
        If an option value is invalid or the margins leave no printable
        area.
    ResourceLoadError
        If the font family cannot be loaded. The registry stays
        unregistered so the next export retries.
    SerializationError
        If building or writing the document fails.
    """
    with log_context(_package_logger, verbose, debug):
        resolved = resolve_options(options)
        sections = build_sections(bundle)
        logger.info(
            "Exporting report bundle to '%s' (%d sections)",
            resolved.filename,
            len(sections),
        )
        return await render_report_document(
            sections,
            meta,
            options=resolved,
            registry=registry,
            path=path,
            overwrite=overwrite,
        )
