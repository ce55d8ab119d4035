import pytest

from docexport.types import PageSlice, RasterImage, SummarySection, TableSection


def test_summary_section_placeholder_when_empty():
    section = SummarySection(title="Sales summary")
    assert section.is_empty
    assert section.display_entries() == [("No data available", "")]


def test_summary_section_entries_kept_in_order():
    entries = [("Total sales", "1,000.00 SDG"), ("Number of orders", "4")]
    section = SummarySection("Sales summary", entries)
    assert not section.is_empty
    assert section.display_entries() == entries


def test_table_section_placeholder_row():
    section = TableSection("Daily sales", ["Date", "Revenue"])
    assert section.is_empty
    assert section.display_rows() == [["No data available", ""]]


def test_table_section_placeholder_single_column():
    assert TableSection("t", ["Only"]).display_rows() == [["No data available"]]


def test_table_section_pads_and_truncates():
    section = TableSection("t", ["a", "b"], [["1"], ["1", "2", "3"], ["x", "y"]])
    assert section.display_rows() == [["1", "-"], ["1", "2"], ["x", "y"]]


def test_table_section_pad_cell_from_labels(mocker):
    mocker.patch(
        "docexport.types.read_config",
        return_value={"dash": "n/a", "placeholder": "No data available"},
    )
    section = TableSection("t", ["a", "b"], [["1"]])
    assert section.display_rows() == [["1", "n/a"]]


def test_table_section_rows_match_header_count():
    headers = ["#", "Product", "Category", "Quantity", "Revenue"]
    rows = [[], ["1"], ["1", "2", "3", "4", "5", "6", "7"]]
    for row in TableSection("t", headers, rows).display_rows():
        assert len(row) == len(headers)


def test_sections_are_frozen():
    section = TableSection("t", ["a"])
    with pytest.raises(AttributeError):
        section.title = "other"


def test_raster_image_and_page_slice():
    image = RasterImage(10, 20, b"png")
    assert (image.pixel_width, image.pixel_height) == (10, 20)
    assert PageSlice(0, 10.0) == PageSlice(page_index=0, vertical_offset=10.0)
