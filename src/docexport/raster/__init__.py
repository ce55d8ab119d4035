"""
Rasterization export of visual surfaces.

Functions
---------
export_element_to_pdf(node, options, capturer, path, **kwargs)
    Capture a surface once and tile it across PDF pages.
plan_page_slices(content_height, printable_height, margin)
    Vertical image offsets of every page.
wait_for_next_frame()
    Yield one event loop iteration before capturing.
stack_images(images, background_color)
    Stack captures vertically into one image.

Classes
-------
RasterCapturer
    Protocol of capture capabilities.
FigureCapturer
    Default capturer for matplotlib figures.
"""

from .capture import FigureCapturer, RasterCapturer, stack_images
from .tiling import export_element_to_pdf, plan_page_slices, wait_for_next_frame

__all__ = [
    "FigureCapturer",
    "RasterCapturer",
    "stack_images",
    "export_element_to_pdf",
    "plan_page_slices",
    "wait_for_next_frame",
]
