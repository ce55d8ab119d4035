"""
Tiling of a single raster capture across fixed-size PDF pages.

A visual surface is captured once and scaled to the printable width of the
page. When the scaled image is taller than the printable height, the same
image is drawn again on every following page, shifted upward by the part
already shown, until the whole height has been exposed.

Functions
---------
wait_for_next_frame()
    Yield one event loop iteration so pending layout work can settle.
plan_page_slices(content_height, printable_height, margin)
    Vertical offsets of the image on every page.
export_element_to_pdf(node, options=None, capturer=None, path=None, **kwargs)
    Capture a visual surface and tile it into PDF bytes.

Notes
-----
- Offsets are measured from the top edge of the page, in the same unit as
  the heights passed in. The first page places the image at ``margin``;
  page ``k`` places it at ``height_left - content_height + margin`` where
  ``height_left`` is what remained unshown before page ``k``.
- The page count equals ``ceil(content_height / printable_height)``.
- Geometry is checked before anything is captured, so a margin that
  leaves no printable area fails fast with ``ConfigurationError``.

Examples
--------
>>> from docexport.raster.tiling import plan_page_slices
>>> [s.vertical_offset for s in plan_page_slices(2500, 980, 10)]
[10, -970, -1950]
"""

import asyncio
import logging
from io import BytesIO
from typing import Any, Mapping

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .._utils import deliver_document, log_context, read_config
from ..errors import CaptureError, ConfigurationError, SerializationError
from ..options import ExportOptions, check_printable_area, resolve_options
from ..types import PageSlice, RasterImage
from .capture import FigureCapturer, RasterCapturer

logger = logging.getLogger(__name__)

# float remainder treated as fully shown
_HEIGHT_TOLERANCE = 1e-9


async def wait_for_next_frame() -> None:
    """Give the event loop one iteration before a capture starts."""
    await asyncio.sleep(0)


def plan_page_slices(
    content_height: float, printable_height: float, margin: float
) -> list[PageSlice]:
    """
    Plan the vertical placement of one tall image across pages.

    Parameters
    ----------
    content_height : float
        Height of the scaled image.
    printable_height : float
        Page height minus top and bottom margins.
    margin : float
        Top margin of every page.

    Returns
    -------
    list[PageSlice]
        One slice per page, in page order. There is always at least one.

    Raises
    ------
    ConfigurationError
        If ``printable_height`` is not positive.

    Examples
    --------
    >>> len(plan_page_slices(2500, 1000 - 2 * 10, 10))
    3
    >>> len(plan_page_slices(500, 980, 10))
    1
    """
    if printable_height <= 0:
        raise ConfigurationError(
            read_config("messages")["errors"]["printable_height_f"].format(
                printable_height, margin
            )
        )
    slices = [PageSlice(page_index=0, vertical_offset=margin)]
    height_left = content_height - printable_height
    while height_left > _HEIGHT_TOLERANCE:
        slices.append(
            PageSlice(
                page_index=len(slices),
                vertical_offset=height_left - content_height + margin,
            )
        )
        height_left -= printable_height
    return slices


def _tile_to_pdf(
    image: RasterImage, options: ExportOptions, slices: list[PageSlice], content_height
) -> bytes:
    page_width, page_height = options.page_size_points
    margin = options.margin_points
    content_width = page_width - 2 * margin
    buffer = BytesIO()
    try:
        pdf = canvas.Canvas(buffer, pagesize=(page_width, page_height))
        reader = ImageReader(BytesIO(image.image_data))
        for page in slices:
            # reportlab measures y from the bottom edge
            y = page_height - page.vertical_offset - content_height
            pdf.drawImage(reader, margin, y, width=content_width, height=content_height)
            pdf.showPage()
        pdf.save()
        return buffer.getvalue()
    except Exception as e:
        raise SerializationError(
            read_config("messages")["errors"]["serialization_failed_f"].format(
                options.filename, e
            )
        ) from e
    finally:
        buffer.close()


async def export_element_to_pdf(
    node,
    options: ExportOptions | Mapping[str, Any] | None = None,
    capturer: RasterCapturer | None = None,
    path=None,
    **kwargs,
) -> bytes:
    """
    Capture a visual surface once and tile it across PDF pages.

    Parameters
    ----------
    node : Any
        Surface understood by ``capturer``. With the default capturer, a
        matplotlib ``Figure`` or a sequence of figures.
    options : ExportOptions or Mapping, optional
        Page geometry, raster scale, background color and filename.
        Mappings are resolved with :func:`docexport.options.resolve_options`.
    capturer : RasterCapturer, optional
        Capture capability. Defaults to :class:`FigureCapturer`.
    path : str or Path, optional
        Directory or full ``.pdf`` path to deliver the document to. If
        None, nothing is written to disk.

    Other parameters
    ----------------
    verbose : bool, default=False
        Enables info-level logging during the function execution.
    debug : bool, default=False
        Enables debug-level logging during the function execution.
        Takes precedence over the 'verbose' parameter.
    overwrite : bool, default=True
        If False, delivering over an existing file raises
        ``FileExistsError``.

    Returns
    -------
    bytes
        PDF content as bytes.

    Raises
    ------
    ConfigurationError
        If the margins leave no printable area. Raised before capturing.
    CaptureError
        If the surface is detached, empty, unsupported or has zero size.
    SerializationError
        If assembling or writing the document fails.
    """
    params = {
        "verbose": kwargs.get("verbose", False),
        "debug": kwargs.get("debug", False),
        "overwrite": kwargs.get("overwrite", True),
    }
    if not isinstance(options, ExportOptions):
        options = resolve_options(options)
    capturer = capturer or FigureCapturer()
    with log_context(logger, params["verbose"], params["debug"]):
        check_printable_area(options)
        page_width, page_height = options.page_size_points
        margin = options.margin_points
        content_width = page_width - 2 * margin
        printable_height = page_height - 2 * margin

        await wait_for_next_frame()
        image = await capturer.capture(
            node, options.raster_scale, options.background_color
        )
        if image.pixel_width <= 0 or image.pixel_height <= 0:
            raise CaptureError(
                read_config("messages")["errors"]["capture_zero_size_f"].format(
                    image.pixel_width, image.pixel_height
                )
            )
        content_height = image.pixel_height * content_width / image.pixel_width
        slices = plan_page_slices(content_height, printable_height, margin)
        logger.info(
            "Tiling %d x %d px capture over %d page(s)",
            image.pixel_width,
            image.pixel_height,
            len(slices),
        )

        pdf_bytes = _tile_to_pdf(image, options, slices, content_height)
        if path is not None:
            deliver_document(
                pdf_bytes, path, options.filename, overwrite=params["overwrite"]
            )
        logger.info("'%s' was successfully exported", options.filename)
        return pdf_bytes
