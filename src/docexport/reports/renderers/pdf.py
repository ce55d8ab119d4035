"""
PDF renderer for structured reports.

This module lays out the sections produced by
:func:`docexport.reports.sections.build_sections` as a native, paginated
ReportLab document: a header with the report title, company identity and
period, then every summary section, then every table section, then a
footnote. ReportLab's platypus engine handles page breaks.

Functions
---------
render_report_document(sections, meta=None, options=None, registry=None, path=None, **kwargs)
    Render built sections into PDF bytes, optionally delivering them to disk.
render_sections_pdf(sections, styles, frame_width)
    Convert sections into ReportLab Flowables without building a document.
coerce_meta(meta)
    Turn a ``ReportMeta`` or a plain mapping into a ``ReportMeta``.

Notes
-----
- The font family is registered through a
  :class:`docexport.fonts.FontRegistry` before layout; a failed font load
  surfaces as ``ResourceLoadError`` and no document is produced.
- All cell and label text is XML-escaped before it reaches a ``Paragraph``.
- Empty sections are rendered with the "no data" placeholder, never
  dropped.
- Table columns share the frame width equally.

Examples
--------
>>> import asyncio
>>> from docexport.reports import build_sections
>>> from docexport.reports.renderers import render_report_document
>>> built = build_sections({"sales": {"summary": {"totalSales": 10}}})
>>> pdf_bytes = asyncio.run(
...     render_report_document(built, {"start_date": "2024-01-01",
...                                    "end_date": "2024-01-31"})
... )
>>> pdf_bytes[:5]
b'%PDF-'
"""

from datetime import datetime
from io import BytesIO
from typing import Any, Mapping
from xml.sax.saxutils import escape
import logging

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import (
    Flowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from ..._utils import deliver_document, log_context, read_config
from ...errors import SerializationError
from ...fonts import FontRegistry, get_default_registry
from ...formatting import format_date_long, format_datetime
from ...options import ExportOptions, check_printable_area, resolve_options
from ...types import CompanyIdentity, ReportMeta, SummarySection, TableSection
from ..sections import BuiltSections

logger = logging.getLogger(__name__)

TEXT_COLOR = colors.HexColor("#0f172a")
MUTED_COLOR = colors.HexColor("#64748b")
CELL_COLOR = colors.HexColor("#1f2937")
BORDER_COLOR = colors.HexColor("#e5e7eb")
HEADER_BACKGROUND = colors.HexColor("#f1f5f9")
PLACEHOLDER_COLOR = colors.HexColor("#94a3b8")

# alternative keys accepted in mapping-shaped metadata
_META_KEYS = {
    "start_date": ("start_date", "startDate"),
    "end_date": ("end_date", "endDate"),
    "company": ("company", "companySettings"),
    "generated_at": ("generated_at", "generatedAt"),
}
_COMPANY_KEYS = {
    "name": ("name", "nameAr", "nameEn"),
    "phone": ("phone", "phone1"),
    "email": ("email",),
    "tax_number": ("tax_number", "taxNumber"),
    "address": ("address",),
}


def _pick(mapping: Mapping[str, Any], keys: tuple[str, ...]):
    for key in keys:
        value = mapping.get(key)
        if value is not None and value != "":
            return value
    return None


def coerce_meta(meta) -> ReportMeta:
    """
    Coerce report metadata into a :class:`ReportMeta`.

    Parameters
    ----------
    meta : ReportMeta, Mapping or None
        Either a ready ``ReportMeta`` or a mapping with ``start_date``,
        ``end_date``, ``company`` and ``generated_at`` keys (camelCase
        variants such as ``startDate`` or ``companySettings`` are accepted
        too). ``None`` yields metadata with an unknown period.

    Returns
    -------
    ReportMeta

    Examples
    --------
    >>> coerce_meta({"startDate": "2024-01-01", "endDate": "2024-01-31",
    ...              "companySettings": {"nameAr": "ACME", "phone1": "123"}}).company
    CompanyIdentity(name='ACME', phone='123', email=None, tax_number=None, address=None)
    """
    if isinstance(meta, ReportMeta):
        return meta
    if meta is None:
        meta = {}
    if not isinstance(meta, Mapping):
        raise TypeError(
            f"Expected ReportMeta or a mapping as 'meta', got {type(meta).__name__}"
        )
    values = {name: _pick(meta, keys) for name, keys in _META_KEYS.items()}
    company = values["company"]
    if isinstance(company, Mapping):
        fields = {name: _pick(company, keys) for name, keys in _COMPANY_KEYS.items()}
        company = CompanyIdentity(
            **{name: None if v is None else str(v) for name, v in fields.items()}
        )
    elif not isinstance(company, CompanyIdentity):
        company = None
    return ReportMeta(
        start_date=values["start_date"],
        end_date=values["end_date"],
        company=company,
        generated_at=values["generated_at"],
    )


def _make_styles(registry: FontRegistry) -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    regular, medium, bold = (
        registry.regular_font,
        registry.medium_font,
        registry.bold_font,
    )
    return {
        "title": ParagraphStyle(
            "ReportTitle",
            parent=base["Title"],
            fontName=bold,
            fontSize=18,
            leading=24,
            alignment=TA_CENTER,
            textColor=TEXT_COLOR,
            spaceAfter=4,
        ),
        "subtitle": ParagraphStyle(
            "ReportSubtitle",
            parent=base["Normal"],
            fontName=regular,
            fontSize=12,
            leading=16,
            alignment=TA_CENTER,
            textColor=colors.HexColor("#1e293b"),
            spaceAfter=6,
        ),
        "meta_label": ParagraphStyle(
            "MetaLabel",
            parent=base["Normal"],
            fontName=medium,
            fontSize=10,
            leading=14,
            textColor=MUTED_COLOR,
        ),
        "meta_value": ParagraphStyle(
            "MetaValue",
            parent=base["Normal"],
            fontName=bold,
            fontSize=10,
            leading=14,
            textColor=TEXT_COLOR,
        ),
        "section_title": ParagraphStyle(
            "SectionTitle",
            parent=base["Heading2"],
            fontName=medium,
            fontSize=13,
            leading=18,
            textColor=TEXT_COLOR,
            spaceBefore=12,
            spaceAfter=6,
        ),
        "summary_label": ParagraphStyle(
            "SummaryLabel",
            parent=base["Normal"],
            fontName=regular,
            fontSize=10,
            leading=14,
            textColor=colors.HexColor("#475569"),
        ),
        "summary_value": ParagraphStyle(
            "SummaryValue",
            parent=base["Normal"],
            fontName=bold,
            fontSize=10,
            leading=14,
            textColor=TEXT_COLOR,
        ),
        "header_cell": ParagraphStyle(
            "HeaderCell",
            parent=base["Normal"],
            fontName=medium,
            fontSize=9,
            leading=12,
            textColor=TEXT_COLOR,
        ),
        "cell": ParagraphStyle(
            "Cell",
            parent=base["Normal"],
            fontName=regular,
            fontSize=9,
            leading=12,
            textColor=CELL_COLOR,
        ),
        "placeholder": ParagraphStyle(
            "Placeholder",
            parent=base["Normal"],
            fontName=regular,
            fontSize=9,
            leading=12,
            alignment=TA_CENTER,
            textColor=PLACEHOLDER_COLOR,
        ),
        "footnote": ParagraphStyle(
            "Footnote",
            parent=base["Normal"],
            fontName=regular,
            fontSize=8,
            leading=11,
            alignment=TA_CENTER,
            textColor=PLACEHOLDER_COLOR,
            spaceBefore=20,
        ),
    }


def _text(value, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(str(value)), style)


def _header_rows(meta: ReportMeta, generated_at: str) -> list[tuple[str, str]]:
    document = read_config("labels")["document"]
    bounds = [
        format_date_long(bound)
        for bound in (meta.start_date, meta.end_date)
        if bound is not None and bound != ""
    ]
    rows = [(document["period"], " - ".join(bounds))] if bounds else []
    company = meta.company or CompanyIdentity()
    for key in ("phone", "email", "tax_number", "address"):
        value = getattr(company, key)
        if value:
            rows.append((document[key], value))
    rows.append((document["generated_at"], generated_at))
    return rows


def _render_header(
    meta: ReportMeta, generated_at: str, styles: dict, frame_width: float
) -> list[Flowable]:
    document = read_config("labels")["document"]
    story = [_text(document["title"], styles["title"])]
    if meta.company is not None and meta.company.name:
        story.append(_text(meta.company.name, styles["subtitle"]))
    rows = [
        [_text(label, styles["meta_label"]), _text(value, styles["meta_value"])]
        for label, value in _header_rows(meta, generated_at)
    ]
    table = Table(rows, colWidths=[frame_width * 0.35, frame_width * 0.65])
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("TOPPADDING", (0, 0), (-1, -1), 2),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
            ]
        )
    )
    story.append(table)
    story.append(Spacer(1, 12))
    return story


def _render_summary(
    section: SummarySection, styles: dict, frame_width: float
) -> list[Flowable]:
    story = [_text(section.title, styles["section_title"])]
    if section.is_empty:
        story.append(_text(section.display_entries()[0][0], styles["placeholder"]))
        return story
    rows = [
        [_text(label, styles["summary_label"]), _text(value, styles["summary_value"])]
        for label, value in section.display_entries()
    ]
    table = Table(rows, colWidths=[frame_width * 0.6, frame_width * 0.4])
    table.setStyle(
        TableStyle(
            [
                ("LINEABOVE", (0, 0), (-1, 0), 1, BORDER_COLOR),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("TOPPADDING", (0, 0), (-1, -1), 3),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ]
        )
    )
    story.append(table)
    return story


def _render_table(
    section: TableSection, styles: dict, frame_width: float
) -> list[Flowable]:
    story = [_text(section.title, styles["section_title"])]
    n_columns = max(len(section.headers), 1)
    data = [[_text(header, styles["header_cell"]) for header in section.headers]]
    rows = section.display_rows()
    if section.is_empty:
        # one spanning cell with the placeholder text
        data.append(
            [_text(rows[0][0], styles["placeholder"])] + [""] * (n_columns - 1)
        )
    else:
        data.extend([_text(cell, styles["cell"]) for cell in row] for row in rows)
    table = Table(
        data, colWidths=[frame_width / n_columns] * n_columns, repeatRows=1
    )
    table_style = [
        ("BOX", (0, 0), (-1, -1), 1, BORDER_COLOR),
        ("LINEBELOW", (0, 0), (-1, -2), 1, BORDER_COLOR),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BACKGROUND),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ("LEFTPADDING", (0, 0), (-1, -1), 6),
        ("RIGHTPADDING", (0, 0), (-1, -1), 6),
    ]
    if section.is_empty:
        table_style.append(("SPAN", (0, 1), (-1, 1)))
    table.setStyle(TableStyle(table_style))
    story.append(table)
    return story


def render_sections_pdf(
    sections: BuiltSections, styles: dict, frame_width: float
) -> list[Flowable]:
    """
    Convert built sections into ReportLab Flowables.

    Summary sections come first, then table sections, each in the order
    given by ``sections``. The result is a story fragment; it does not
    build or save a PDF file.

    Parameters
    ----------
    sections : BuiltSections
        Sections to lay out.
    styles : dict[str, ParagraphStyle]
        Paragraph styles keyed by role, as created for the registered font
        family.
    frame_width : float
        Width of the page frame in points. Tables span the full width.

    Returns
    -------
    list[reportlab.platypus.Flowable]
    """
    story = []
    for section in sections.summaries:
        story.extend(_render_summary(section, styles, frame_width))
    for section in sections.tables:
        story.extend(_render_table(section, styles, frame_width))
    logger.debug(
        "Laid out %d summary and %d table sections",
        len(sections.summaries),
        len(sections.tables),
    )
    return story


def _get_build_pdf(story: list, options: ExportOptions) -> bytes:
    """
    Build a PDF document from a prepared story into memory.

    Page size, orientation and margins come from ``options``. Any failure
    raised by ReportLab while laying out or serializing is wrapped into
    ``SerializationError``.
    """
    buffer = BytesIO()
    margin = options.margin_points
    try:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=options.page_size_points,
            leftMargin=margin,
            rightMargin=margin,
            topMargin=margin,
            bottomMargin=margin,
            title=read_config("labels")["document"]["title"],
        )
        doc.build(story)
        return buffer.getvalue()
    except Exception as e:
        raise SerializationError(
            read_config("messages")["errors"]["serialization_failed_f"].format(
                options.filename, e
            )
        ) from e
    finally:
        buffer.close()


async def render_report_document(
    sections: BuiltSections,
    meta=None,
    options: ExportOptions | Mapping[str, Any] | None = None,
    registry: FontRegistry | None = None,
    path=None,
    **kwargs,
) -> bytes:
    """
    Render a structured report into PDF format.

    Parameters
    ----------
    sections : BuiltSections
        Summary and table sections, typically from
        :func:`docexport.reports.sections.build_sections`.
    meta : ReportMeta or Mapping, optional
        Report period, company identity and generation time. See
        :func:`coerce_meta`.
    options : ExportOptions or Mapping, optional
        Page geometry and filename. Mappings are resolved with
        :func:`docexport.options.resolve_options`.
    registry : FontRegistry, optional
        Registry providing the embedded font family. Defaults to the
        process-wide registry.
    path : str or Path, optional
        Directory or full ``.pdf`` path to deliver the document to. A
        directory receives ``options.filename``. If None, nothing is
        written to disk.

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
        PDF content as bytes, also when ``path`` is given.

    Raises
    ------
    TypeError
        If ``sections`` is not a ``BuiltSections`` instance.
    ConfigurationError
        If the margins leave no printable area.
    ResourceLoadError
        If the font family cannot be fetched or registered.
    SerializationError
        If building or writing the document fails.
    """
    params = {
        "verbose": kwargs.get("verbose", False),
        "debug": kwargs.get("debug", False),
        "overwrite": kwargs.get("overwrite", True),
    }
    if not isinstance(sections, BuiltSections):
        raise TypeError(
            read_config("messages")["errors"]["invalid_sections_f"].format(
                type(sections).__name__
            )
        )
    if not isinstance(options, ExportOptions):
        options = resolve_options(options)
    with log_context(logger, params["verbose"], params["debug"]):
        printable_width, _ = check_printable_area(options)
        frame_width = options.to_points(printable_width)
        meta = coerce_meta(meta)
        registry = registry or get_default_registry()
        logger.info("Rendering report '%s' (%d sections)", options.filename, len(sections))

        await registry.ensure_registered()
        styles = _make_styles(registry)

        generated_at = format_datetime(meta.generated_at or datetime.now())
        story = _render_header(meta, generated_at, styles, frame_width)
        story.extend(render_sections_pdf(sections, styles, frame_width))
        document = read_config("labels")["document"]
        story.append(
            _text(
                document["footnote_f"].format(document["platform_name"], generated_at),
                styles["footnote"],
            )
        )

        pdf_bytes = _get_build_pdf(story, options)
        if path is not None:
            deliver_document(
                pdf_bytes, path, options.filename, overwrite=params["overwrite"]
            )
        logger.info("'%s' was successfully rendered", options.filename)
        return pdf_bytes
