"""
Data model shared by the docexport pipelines.

Classes
-------
SummarySection
    Titled, ordered list of ``(label, value_text)`` pairs.
TableSection
    Titled table with ordered headers and text rows.
CachedFontAsset
    One fetched font binary, base64-encoded, keyed by its source URL.
RasterImage
    A single PNG capture of a visual surface.
PageSlice
    Page index and vertical image offset used while tiling a raster image.
CompanyIdentity
    Optional company lines printed in the report header.
ReportMeta
    Period, company identity and generation time of a report export.

Notes
-----
- Sections are never dropped because they are empty. ``display_entries``
  and ``display_rows`` always return at least one row: the configured
  "no data" placeholder stands in for missing content.
- ``display_rows`` pads short rows with ``"-"`` and truncates long rows so
  every row has exactly as many cells as there are headers.

Examples
--------
>>> from docexport.types import TableSection
>>> section = TableSection(title="Daily sales", headers=["Date", "Revenue"])
>>> section.display_rows()
[['No data available', '']]
>>> TableSection("t", ["a", "b"], [["1"], ["1", "2", "3"]]).display_rows()
[['1', '-'], ['1', '2']]
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ._utils import read_config


def _placeholder() -> str:
    return read_config("labels")["placeholder"]


@dataclass(frozen=True)
class SummarySection:
    """
    Summary block of a report: a title and ordered label/value pairs.

    Parameters
    ----------
    title : str
        Section heading.
    entries : list of tuple[str, str]
        Ordered ``(label, value_text)`` pairs.
    """

    title: str
    entries: list[tuple[str, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return len(self.entries) == 0

    def display_entries(self) -> list[tuple[str, str]]:
        """Entries to render; a single placeholder pair when empty."""
        if self.is_empty:
            return [(_placeholder(), "")]
        return list(self.entries)


@dataclass(frozen=True)
class TableSection:
    """
    Tabular block of a report.

    Parameters
    ----------
    title : str
        Section heading.
    headers : list of str
        Ordered column names.
    rows : list of list of str
        Ordered rows of cell text, nominally aligned to ``headers``.
    """

    title: str
    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 0

    def display_rows(self) -> list[list[str]]:
        """
        Rows to render, each with exactly ``len(headers)`` cells.

        Short rows are padded with ``"-"``, long rows are truncated. An empty
        table yields one placeholder row whose first cell carries the
        "no data" text and whose remaining cells are blank.
        """
        width = len(self.headers)
        if self.is_empty:
            return [[_placeholder()] + [""] * max(width - 1, 0)]
        aligned = []
        for row in self.rows:
            cells = [str(cell) for cell in row[:width]]
            cells.extend([read_config("labels")["dash"]] * (width - len(cells)))
            aligned.append(cells)
        return aligned


@dataclass(frozen=True)
class CachedFontAsset:
    """A font binary fetched once and kept for the registry's lifetime."""

    source_url: str
    weight: int
    embedded_data: str


@dataclass(frozen=True)
class RasterImage:
    """
    Single raster capture of a visual surface.

    Parameters
    ----------
    pixel_width : int
        Width of the captured image in pixels.
    pixel_height : int
        Height of the captured image in pixels.
    image_data : bytes
        PNG-encoded image.
    """

    pixel_width: int
    pixel_height: int
    image_data: bytes


@dataclass(frozen=True)
class PageSlice:
    page_index: int
    vertical_offset: float


@dataclass(frozen=True)
class CompanyIdentity:
    """
    Company lines shown under the report title.

    Every field is optional; missing fields are left out of the header
    instead of being rendered as dashes.
    """

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    tax_number: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class ReportMeta:
    """
    Metadata printed in the header of a structured report.

    Parameters
    ----------
    start_date, end_date : date-like
        Bounds of the covered period. Anything accepted by
        :func:`docexport.formatting.format_date_long`.
    company : CompanyIdentity, optional
        Company identity lines.
    generated_at : datetime, optional
        Generation timestamp. Defaults to the time the header is built.
    """

    start_date: object
    end_date: object
    company: Optional[CompanyIdentity] = None
    generated_at: Optional[datetime] = None
