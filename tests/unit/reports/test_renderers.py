import asyncio
from collections import defaultdict
from datetime import datetime

import pytest
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, Table

from docexport.errors import ConfigurationError, ResourceLoadError, SerializationError
from docexport.options import resolve_options
from docexport.reports.renderers.pdf import (
    _get_build_pdf,
    _header_rows,
    _make_styles,
    coerce_meta,
    render_report_document,
    render_sections_pdf,
)
from docexport.reports.sections import BuiltSections, build_sections
from docexport.types import CompanyIdentity, ReportMeta, SummarySection, TableSection

# -------------------------------
# Tests for coerce_meta
# -------------------------------

def test_coerce_meta_passthrough():
    meta = ReportMeta("2024-01-01", "2024-01-31")
    assert coerce_meta(meta) is meta


def test_coerce_meta_from_camel_case_mapping():
    meta = coerce_meta(
        {
            "startDate": "2024-01-01",
            "endDate": "2024-01-31",
            "companySettings": {"nameAr": "ACME", "phone1": 123, "email": ""},
        }
    )
    assert meta.start_date == "2024-01-01"
    assert meta.company == CompanyIdentity(name="ACME", phone="123")


def test_coerce_meta_none_and_invalid():
    assert coerce_meta(None) == ReportMeta(None, None)
    with pytest.raises(TypeError):
        coerce_meta(["2024-01-01"])

# -------------------------------
# Tests for header rows
# -------------------------------

def test_header_rows_omit_missing_company_fields():
    meta = ReportMeta(
        "2024-01-01",
        "2024-01-31",
        company=CompanyIdentity(name="ACME", email="info@acme.test"),
    )
    rows = _header_rows(meta, "1/2/2024 - 10:00")
    assert rows == [
        ("Period covered", "1 January 2024 - 31 January 2024"),
        ("Email", "info@acme.test"),
        ("Generated at", "1/2/2024 - 10:00"),
    ]


def test_header_rows_without_company():
    rows = _header_rows(ReportMeta("2024-01-01", "2024-01-31"), "now")
    assert [label for label, _ in rows] == ["Period covered", "Generated at"]

# -------------------------------
# Tests for render_sections_pdf
# -------------------------------

def test_render_sections_pdf_keeps_every_section():
    styles = defaultdict(lambda: getSampleStyleSheet()["Normal"])
    sections = BuiltSections(
        summaries=[SummarySection("Empty summary")],
        tables=[TableSection("Empty table", ["A", "B"]), TableSection("T", ["A"], [["x"]])],
    )
    story = render_sections_pdf(sections, styles, 500)
    titles = [f.getPlainText() for f in story if isinstance(f, Paragraph)]
    assert titles[:2] == ["Empty summary", "No data available"]
    assert "Empty table" in titles and "T" in titles
    assert sum(isinstance(f, Table) for f in story) == 2

# -------------------------------
# Tests for render_report_document
# -------------------------------

def test_render_report_document_rejects_raw_bundle(font_registry):
    with pytest.raises(TypeError, match="BuiltSections"):
        asyncio.run(render_report_document({"sales": {}}, None, registry=font_registry))


def test_render_report_document_margin_checked_first(font_registry, fetcher):
    options = resolve_options(unit="mm", margin=200)
    with pytest.raises(ConfigurationError):
        asyncio.run(
            render_report_document(BuiltSections(), None, options, registry=font_registry)
        )
    assert sum(fetcher.calls.values()) == 0


def test_render_report_document_font_failure(font_registry, fetcher, font_sources, tmp_path):
    fetcher.fail_urls.add(font_sources[0].url)
    with pytest.raises(ResourceLoadError):
        asyncio.run(
            render_report_document(
                build_sections({"sales": {}}), None, registry=font_registry, path=tmp_path
            )
        )
    assert list(tmp_path.iterdir()) == []
    assert not font_registry.registered


def test_render_report_document_returns_pdf(font_registry):
    meta = ReportMeta("2024-01-01", "2024-01-31", generated_at=datetime(2024, 2, 1, 9, 30))
    pdf_bytes = asyncio.run(
        render_report_document(
            build_sections({"sales": {"summary": {"totalSales": 5}}}),
            meta,
            registry=font_registry,
        )
    )
    assert pdf_bytes.startswith(b"%PDF-")


def test_get_build_pdf_wraps_failures(mocker):
    mocker.patch(
        "docexport.reports.renderers.pdf.SimpleDocTemplate.build",
        side_effect=RuntimeError("layout exploded"),
    )
    with pytest.raises(SerializationError, match="layout exploded"):
        _get_build_pdf([], resolve_options())


def test_header_rows_without_period():
    rows = _header_rows(ReportMeta(None, None), "now")
    assert rows == [("Generated at", "now")]
    assert not any("Invalid date" in value for _, value in rows)


@pytest.mark.parametrize(
    "start, end, expected",
    [
        ("2024-01-01", None, "1 January 2024"),
        (None, "2024-01-31", "31 January 2024"),
        ("", "2024-01-31", "31 January 2024"),
    ],
)
def test_header_rows_single_period_bound(start, end, expected):
    rows = _header_rows(ReportMeta(start, end), "now")
    assert rows[0] == ("Period covered", expected)
    assert [label for label, _ in rows] == ["Period covered", "Generated at"]

# -------------------------------
# Tests for _make_styles
# -------------------------------

def test_make_styles_font_weights(font_registry):
    styles = _make_styles(font_registry)
    assert styles["section_title"].fontName == "TestSans-Medium"
    assert styles["meta_label"].fontName == "TestSans-Medium"
    assert styles["header_cell"].fontName == "TestSans-Medium"
    assert styles["title"].fontName == "TestSans-Bold"
    assert styles["cell"].fontName == "TestSans-Regular"
