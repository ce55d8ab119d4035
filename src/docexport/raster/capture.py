"""
Raster capture of visual surfaces.

The tiling pipeline never talks to a rendering backend directly; it awaits
a capturer implementing :class:`RasterCapturer`. The default
:class:`FigureCapturer` renders matplotlib figures, which are the visual
surfaces this package knows how to draw.

Classes
-------
RasterCapturer
    Protocol of objects able to capture a surface into one PNG image.
FigureCapturer
    Capturer for a matplotlib ``Figure`` or a sequence of figures.

Functions
---------
stack_images(images, background_color)
    Concatenate PNG captures vertically into a single image.

Notes
-----
- A sequence of figures is the bulk-export case: each figure is rendered
  separately and the captures are stacked top to bottom, left-aligned, on
  a canvas filled with the background color.
- ``None`` stands for a detached surface and raises ``CaptureError``, as
  do empty sequences and surfaces of zero width or height.

Examples
--------
>>> import asyncio
>>> import matplotlib.pyplot as plt
>>> from docexport.raster import FigureCapturer
>>> fig, ax = plt.subplots(figsize=(4, 3), dpi=100)
>>> image = asyncio.run(FigureCapturer().capture(fig, scale=2))
>>> image.pixel_width, image.pixel_height
(800, 600)
"""

import logging
from io import BytesIO
from typing import Protocol, Sequence

from matplotlib.figure import Figure
from PIL import Image
from reportlab.lib import colors

from .._utils import read_config
from ..errors import CaptureError
from ..types import RasterImage

logger = logging.getLogger(__name__)


class RasterCapturer(Protocol):
    """Capability capturing one visual surface as a single raster image."""

    async def capture(
        self, node, scale: float = 2, background_color: str = "#ffffff"
    ) -> RasterImage:
        ...


def _rgb(color: str) -> tuple[int, int, int]:
    rgb = colors.toColor(color).rgb()
    return tuple(round(channel * 255) for channel in rgb)


def _png_image(image_data: bytes) -> RasterImage:
    with Image.open(BytesIO(image_data)) as img:
        width, height = img.size
    return RasterImage(pixel_width=width, pixel_height=height, image_data=image_data)


def stack_images(
    images: Sequence[RasterImage], background_color: str = "#ffffff"
) -> RasterImage:
    """
    Stack PNG captures vertically into one PNG capture.

    Parameters
    ----------
    images : Sequence[RasterImage]
        Captures to stack, top to bottom.
    background_color : str, default="#ffffff"
        Fill of the area not covered by narrower captures.

    Returns
    -------
    RasterImage
        One capture as wide as the widest input and as tall as all of them.
    """
    width = max(image.pixel_width for image in images)
    height = sum(image.pixel_height for image in images)
    canvas = Image.new("RGB", (width, height), _rgb(background_color))
    top = 0
    for image in images:
        with Image.open(BytesIO(image.image_data)) as part:
            canvas.paste(part.convert("RGB"), (0, top))
        top += image.pixel_height
    buffer = BytesIO()
    canvas.save(buffer, format="PNG")
    return RasterImage(pixel_width=width, pixel_height=height, image_data=buffer.getvalue())


class FigureCapturer:
    """
    Capture matplotlib figures as PNG images.

    The figure is drawn at ``figure.dpi * scale`` so that ``scale`` acts as
    a resolution multiplier independent of the figure's own dpi.
    """

    async def capture(
        self, node, scale: float = 2, background_color: str = "#ffffff"
    ) -> RasterImage:
        """
        Capture ``node`` into one raster image.

        Parameters
        ----------
        node : matplotlib.figure.Figure or Sequence[Figure]
            Surface to capture. A sequence is captured figure by figure and
            stacked vertically.
        scale : float, default=2
            Resolution multiplier.
        background_color : str, default="#ffffff"
            Face color of the rendered figure.

        Returns
        -------
        RasterImage

        Raises
        ------
        CaptureError
            If ``node`` is None, an empty sequence, an unsupported object,
            a zero-size figure, or if drawing fails.
        """
        errors = read_config("messages")["errors"]
        if node is None:
            raise CaptureError(errors["capture_detached"])
        if isinstance(node, Figure):
            return self._capture_figure(node, scale, background_color)
        if isinstance(node, (list, tuple)):
            if len(node) == 0:
                raise CaptureError(errors["capture_empty"])
            parts = []
            for figure in node:
                if figure is None:
                    raise CaptureError(errors["capture_detached"])
                if not isinstance(figure, Figure):
                    raise CaptureError(
                        errors["capture_unsupported_f"].format(type(figure).__name__)
                    )
                parts.append(self._capture_figure(figure, scale, background_color))
            logger.debug("Stacking %d captured figures", len(parts))
            return stack_images(parts, background_color)
        raise CaptureError(errors["capture_unsupported_f"].format(type(node).__name__))

    def _capture_figure(
        self, figure: Figure, scale: float, background_color: str
    ) -> RasterImage:
        errors = read_config("messages")["errors"]
        width_in, height_in = figure.get_size_inches()
        if width_in <= 0 or height_in <= 0:
            raise CaptureError(errors["capture_zero_size_f"].format(width_in, height_in))
        buffer = BytesIO()
        try:
            figure.savefig(
                buffer,
                format="png",
                dpi=figure.dpi * scale,
                facecolor=background_color,
            )
        except Exception as e:
            raise CaptureError(errors["capture_failed_f"].format(e)) from e
        image = _png_image(buffer.getvalue())
        logger.debug(
            "Captured figure at %.1f dpi: %d x %d px",
            figure.dpi * scale,
            image.pixel_width,
            image.pixel_height,
        )
        return image
