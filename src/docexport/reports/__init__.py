"""
Structured report assembly.

This package turns report bundles of unknown shape into ordered display
sections and renders them as native, paginated PDF documents. A bundle maps
report kinds (overview, sales, purchases, inventory, customers, suppliers,
financial) to the payloads returned by reporting endpoints; any subset of
kinds may be present.

Functions
---------
validate_bundle(bundle)
    Coerce a raw bundle into typed payloads at the boundary.
build_sections(bundle)
    Build summary and table sections in fixed kind order.
render_report_document(sections, meta, options, registry, path, **kwargs)
    Render built sections into PDF bytes.

Classes
-------
ValidatedBundle
    Present report payloads in fixed kind order.
BuiltSections
    Summary sections followed by table sections.

Examples
--------
>>> import asyncio
>>> from docexport.reports import build_sections, render_report_document
>>> built = build_sections({"inventory": {"summary": {"totalItems": 3}}})
>>> [s.title for s in built]
['Inventory summary', 'Detailed inventory status']
>>> pdf_bytes = asyncio.run(render_report_document(built, None))
"""

from .schema import REPORT_KINDS, ReportPayload, ValidatedBundle, validate_bundle
from .sections import BuiltSections, build_sections
from .renderers import render_report_document

__all__ = [
    "REPORT_KINDS",
    "ReportPayload",
    "ValidatedBundle",
    "validate_bundle",
    "BuiltSections",
    "build_sections",
    "render_report_document",
]
