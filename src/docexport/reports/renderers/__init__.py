"""
Renderers turning built report sections into output documents.

Functions
---------
render_report_document(sections, meta, options, registry, path, **kwargs)
    Render sections into PDF bytes, optionally saving them to disk.
render_sections_pdf(sections, styles, frame_width)
    Convert sections into ReportLab Flowables.
coerce_meta(meta)
    Normalize report metadata into a ``ReportMeta``.
"""

from .pdf import coerce_meta, render_report_document, render_sections_pdf

__all__ = ["coerce_meta", "render_report_document", "render_sections_pdf"]
