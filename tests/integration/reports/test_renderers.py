import asyncio
from datetime import datetime
from io import BytesIO

import pytest
from pypdf import PdfReader

from docexport.reports import build_sections, render_report_document
from docexport.types import CompanyIdentity, ReportMeta

# -------------------------------
# Consts and fixtures
# -------------------------------

def make_full_bundle(n_items=60):
    return {
        "overview": {
            "sales": {"totalSales": 125000, "totalOrders": 48},
            "purchases": {"totalPurchases": 80000, "totalOrders": 12},
            "profit": 45000,
            "inventory": {"totalItems": 320, "lowStockCount": 7},
        },
        "sales": {
            "summary": {
                "totalSales": 125000,
                "totalOrders": 48,
                "totalDiscount": 1500,
                "averageOrderValue": 2604.17,
            },
            "topItems": [
                {"name": "Widget", "category": "Tools", "quantity": 40, "revenue": 9000},
                {"name": "Gadget & Co <XL>", "revenue": "N/A", "quantity": None},
            ],
            "topCustomers": [],
            "recentOrders": [
                {
                    "orderNumber": "SO-1001",
                    "customer": "Globex",
                    "date": "2024-01-15",
                    "amount": 3200,
                    "discount": 0,
                    "status": "COMPLETED",
                }
            ],
            "chartData": [{"date": "2024-01-15", "amount": 3200}],
        },
        "inventory": {
            "summary": {"totalItems": 320, "lowStockCount": 7},
            "items": [
                {
                    "name": f"Item {i}",
                    "category": "Bulk",
                    "currentStock": i,
                    "minStock": 5,
                    "unit": "pcs",
                    "status": "low_stock" if i < 5 else "good",
                }
                for i in range(n_items)
            ],
        },
        "financial": {"summary": {"profitMargin": 36}, "salesData": "broken"},
    }


@pytest.fixture
def report_meta():
    return ReportMeta(
        start_date="2024-01-01",
        end_date="2024-01-31",
        company=CompanyIdentity(name="ACME Trading", phone="+249 123", address="Khartoum"),
        generated_at=datetime(2024, 2, 1, 9, 30),
    )


def extract_text(pdf_bytes):
    reader = PdfReader(BytesIO(pdf_bytes))
    text = "\n".join(page.extract_text() for page in reader.pages)
    return reader, " ".join(text.split())

# -------------------------------
# Tests for render_report_document
# -------------------------------

def test_render_report_document_example_based(tmp_path, font_registry, report_meta):
    sections = build_sections(make_full_bundle())
    pdf_bytes = asyncio.run(
        render_report_document(
            sections,
            report_meta,
            {"filename": "monthly.pdf"},
            registry=font_registry,
            path=tmp_path,
        )
    )

    assert (tmp_path / "monthly.pdf").read_bytes() == pdf_bytes
    reader, text = extract_text(pdf_bytes)

    # long inventory table flows over several pages
    assert len(reader.pages) > 1

    # header
    assert "Comprehensive report for the selected period" in text
    assert "ACME Trading" in text
    assert "1 January 2024 - 31 January 2024" in text
    assert "Khartoum" in text
    assert "Email" not in text

    # sections in order: summaries first, then tables
    order = [
        "Overview summary",
        "Sales summary",
        "Inventory summary",
        "Financial summary",
        "Top items - sales",
        "Top customers - sales",
        "Detailed inventory status",
        "Daily revenue - financial",
    ]
    positions = [text.index(title) for title in order]
    assert positions == sorted(positions)

    # cells, escaping and placeholders
    assert "Widget" in text
    assert "Gadget & Co <XL>" in text
    assert "SO-1001" in text
    assert "125,000.00 SDG" in text
    assert "Item 59" in text
    assert "No data available" in text

    # footnote
    assert "This report was generated by the Logistigs platform on 1/2/2024 - 09:30" in text


def test_render_report_document_landscape_page(font_registry, report_meta):
    pdf_bytes = asyncio.run(
        render_report_document(
            build_sections({"sales": {}}),
            report_meta,
            {"orientation": "landscape", "page_format": "a4"},
            registry=font_registry,
        )
    )
    page = PdfReader(BytesIO(pdf_bytes)).pages[0]
    assert float(page.mediabox.width) > float(page.mediabox.height)


def test_render_report_document_empty_bundle(font_registry, report_meta):
    pdf_bytes = asyncio.run(
        render_report_document(build_sections({}), report_meta, registry=font_registry)
    )
    reader, text = extract_text(pdf_bytes)
    assert len(reader.pages) == 1
    assert "Comprehensive report for the selected period" in text


def test_render_report_document_concurrent_exports_share_fonts(
    font_registry, fetcher, report_meta
):
    sections = build_sections(make_full_bundle(n_items=3))

    async def run():
        return await asyncio.gather(
            *(
                render_report_document(sections, report_meta, registry=font_registry)
                for _ in range(4)
            )
        )

    results = asyncio.run(run())
    assert len(results) == 4
    assert all(count == 1 for count in fetcher.calls.values())
