import asyncio
from io import BytesIO

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest
from pypdf import PdfReader

from docexport import (
    CaptureError,
    ConfigurationError,
    ResourceLoadError,
    export_report_bundle,
    export_visual_node,
)

SALES_BUNDLE = {
    "sales": {
        "summary": {
            "totalSales": 1000,
            "totalOrders": 4,
            "totalDiscount": 0,
            "averageOrderValue": 250,
        },
        "topItems": [],
        "topCustomers": [],
        "recentOrders": [],
        "chartData": [],
    }
}

META = {"startDate": "2024-01-01", "endDate": "2024-01-31"}

# -------------------------------
# Tests for export_visual_node
# -------------------------------

def test_export_visual_node_figure(tmp_path):
    fig, ax = plt.subplots(figsize=(4, 12), dpi=50)
    ax.plot(range(10))
    try:
        pdf_bytes = asyncio.run(
            export_visual_node(fig, path=tmp_path, filename="receipt", scale=1)
        )
    finally:
        plt.close(fig)
    assert (tmp_path / "receipt.pdf").read_bytes() == pdf_bytes
    # 190 mm wide content is 570 mm tall; 277 mm printable per page
    assert len(PdfReader(BytesIO(pdf_bytes)).pages) == 3


def test_export_visual_node_bulk_figures():
    figures = [plt.subplots(figsize=(4, 3), dpi=50)[0] for _ in range(3)]
    try:
        pdf_bytes = asyncio.run(export_visual_node(figures, path=None, scale=1))
    finally:
        for fig in figures:
            plt.close(fig)
    # 3 stacked 4x3 captures: 190 mm wide, 427.5 mm tall
    assert len(PdfReader(BytesIO(pdf_bytes)).pages) == 2


def test_export_visual_node_custom_capturer(fake_capturer):
    pdf_bytes = asyncio.run(
        export_visual_node("node", path=None, capturer=fake_capturer, margin=0)
    )
    assert len(PdfReader(BytesIO(pdf_bytes)).pages) == 1


def test_export_visual_node_detached(tmp_path):
    with pytest.raises(CaptureError):
        asyncio.run(export_visual_node(None, path=tmp_path))
    assert list(tmp_path.iterdir()) == []


def test_export_visual_node_invalid_options(fake_capturer):
    with pytest.raises(ConfigurationError):
        asyncio.run(export_visual_node("node", capturer=fake_capturer, margin=-1))
    with pytest.raises(TypeError):
        asyncio.run(export_visual_node("node", capturer=fake_capturer, dpi=300))
    assert fake_capturer.calls == []

# -------------------------------
# Tests for export_report_bundle
# -------------------------------

def test_export_report_bundle_writes_file(tmp_path, font_registry):
    pdf_bytes = asyncio.run(
        export_report_bundle(
            SALES_BUNDLE, META, path=tmp_path, registry=font_registry, filename="sales.pdf"
        )
    )
    assert (tmp_path / "sales.pdf").read_bytes() == pdf_bytes
    text = " ".join(
        " ".join(page.extract_text() for page in PdfReader(BytesIO(pdf_bytes)).pages).split()
    )
    assert "Sales summary" in text
    assert "1,000.00 SDG" in text
    assert text.count("No data available") == 4


def test_export_report_bundle_default_filename(tmp_path, font_registry):
    asyncio.run(export_report_bundle({}, None, path=tmp_path, registry=font_registry))
    assert (tmp_path / "document.pdf").exists()


def test_export_report_bundle_font_failure_then_retry(
    tmp_path, font_registry, fetcher, font_sources
):
    fetcher.fail_urls.add(font_sources[1].url)
    with pytest.raises(ResourceLoadError):
        asyncio.run(
            export_report_bundle(SALES_BUNDLE, META, path=tmp_path, registry=font_registry)
        )
    assert list(tmp_path.iterdir()) == []

    fetcher.fail_urls.clear()
    asyncio.run(export_report_bundle(SALES_BUNDLE, META, path=tmp_path, registry=font_registry))
    assert (tmp_path / "document.pdf").exists()


def test_export_report_bundle_verbose_logs(caplog, font_registry):
    with caplog.at_level("INFO", logger="docexport"):
        asyncio.run(
            export_report_bundle(
                SALES_BUNDLE, META, path=None, registry=font_registry, verbose=True
            )
        )
    assert any("successfully rendered" in record.message for record in caplog.records)
