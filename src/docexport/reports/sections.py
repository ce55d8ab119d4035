"""
Section builder for structured reports.

Turns a report bundle into ordered display sections: one summary section
per report kind that carries summary figures, and one table section per
list-shaped field of every present kind.

Functions
---------
build_sections(bundle)
    Build summary and table sections from a raw or validated bundle.

Classes
-------
BuiltSections
    Summary sections followed by table sections, in render order.

Notes
-----
- Kind order is fixed (overview, sales, purchases, inventory, customers,
  suppliers, financial), and so is the order of entries and fields within
  a kind. Output never depends on the key order of the input mappings.
- A present kind with empty lists still yields its table sections; they
  render a "no data" placeholder row. Absent kinds yield nothing.
- Row construction never raises: missing or malformed fields become
  ``"-"`` or zero text through :mod:`docexport.normalization`.

Examples
--------
>>> from docexport.reports.sections import build_sections
>>> built = build_sections({"sales": {"summary": {"totalSales": 1000}}})
>>> [s.title for s in built.summaries]
['Sales summary']
>>> built.summaries[0].entries[0]
('Total sales', '1,000.00 SDG')
>>> [t.title for t in built.tables]
['Top items - sales', 'Top customers - sales', 'Recent orders - sales', 'Daily sales']
"""

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Mapping

from .._utils import read_config
from ..normalization import (
    lookup_label,
    to_count_text,
    to_currency_text,
    to_date_text,
    to_percent_text,
    to_safe_mapping,
    to_safe_text,
)
from ..types import SummarySection, TableSection
from .schema import ReportPayload, validate_bundle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryField:
    key: str
    path: tuple[str, ...]
    formatter: Callable[[Any], str]


@dataclass(frozen=True)
class Column:
    key: str
    # the first field holding a non-None value is used
    fields: tuple[str, ...]
    formatter: Callable[[Any], str]


@dataclass(frozen=True)
class TableSpec:
    field: str
    columns: tuple[Column, ...]
    ranked: bool = False


order_status = partial(lookup_label, "order")
inventory_status = partial(lookup_label, "inventory")
customer_type = partial(lookup_label, "customer_type")

SUMMARY_FIELDS = {
    "overview": (
        SummaryField("total_sales", ("sales", "totalSales"), to_currency_text),
        SummaryField("sales_orders", ("sales", "totalOrders"), to_count_text),
        SummaryField(
            "total_purchases", ("purchases", "totalPurchases"), to_currency_text
        ),
        SummaryField("purchase_orders", ("purchases", "totalOrders"), to_count_text),
        SummaryField("net_profit", ("profit",), to_currency_text),
        SummaryField("total_items", ("inventory", "totalItems"), to_count_text),
        SummaryField("low_stock", ("inventory", "lowStockCount"), to_count_text),
    ),
    "sales": (
        SummaryField("total_sales", ("totalSales",), to_currency_text),
        SummaryField("total_orders", ("totalOrders",), to_count_text),
        SummaryField("total_discount", ("totalDiscount",), to_currency_text),
        SummaryField("average_order_value", ("averageOrderValue",), to_currency_text),
    ),
    "purchases": (
        SummaryField("total_purchases", ("totalPurchases",), to_currency_text),
        SummaryField("total_orders", ("totalOrders",), to_count_text),
        SummaryField("average_order_value", ("averageOrderValue",), to_currency_text),
    ),
    "inventory": (
        SummaryField("total_items", ("totalItems",), to_count_text),
        SummaryField("good_stock", ("goodStockCount",), to_count_text),
        SummaryField("warning_stock", ("warningStockCount",), to_count_text),
        SummaryField("low_stock", ("lowStockCount",), to_count_text),
        SummaryField("out_of_stock", ("outOfStockCount",), to_count_text),
    ),
    "customers": (
        SummaryField("total_customers", ("totalCustomers",), to_count_text),
        SummaryField("total_revenue", ("totalRevenue",), to_currency_text),
        SummaryField("average_order_value", ("averageOrderValue",), to_currency_text),
    ),
    "suppliers": (
        SummaryField("total_suppliers", ("totalSuppliers",), to_count_text),
        SummaryField("total_purchases", ("totalPurchases",), to_currency_text),
        SummaryField("average_order_value", ("averageOrderValue",), to_currency_text),
    ),
    "financial": (
        SummaryField("total_revenue", ("totalRevenue",), to_currency_text),
        SummaryField("total_expenses", ("totalExpenses",), to_currency_text),
        SummaryField("net_profit", ("grossProfit",), to_currency_text),
        SummaryField("profit_margin", ("profitMargin",), to_percent_text),
        SummaryField("sales_orders", ("salesOrders",), to_count_text),
        SummaryField("purchase_orders", ("purchaseOrders",), to_count_text),
    ),
}

_DAILY_DATE = Column("date", ("date", "label"), to_date_text)

TABLE_SPECS = {
    "overview": (),
    "sales": (
        TableSpec(
            "topItems",
            (
                Column("product", ("name",), to_safe_text),
                Column("category", ("category",), to_safe_text),
                Column("quantity", ("quantity",), to_count_text),
                Column("revenue", ("revenue",), to_currency_text),
            ),
            ranked=True,
        ),
        TableSpec(
            "topCustomers",
            (
                Column("customer", ("name",), to_safe_text),
                Column("total_spent", ("total",), to_currency_text),
                Column("orders", ("orders",), to_count_text),
            ),
            ranked=True,
        ),
        TableSpec(
            "recentOrders",
            (
                Column("order", ("orderNumber",), to_safe_text),
                Column("customer", ("customer",), to_safe_text),
                Column("date", ("date",), to_date_text),
                Column("amount", ("amount",), to_currency_text),
                Column("discount", ("discount",), to_currency_text),
                Column("status", ("status",), order_status),
            ),
        ),
        TableSpec(
            "chartData",
            (_DAILY_DATE, Column("revenue", ("amount",), to_currency_text)),
        ),
    ),
    "purchases": (
        TableSpec(
            "topSuppliers",
            (
                Column("supplier", ("name",), to_safe_text),
                Column("total_purchases", ("total",), to_currency_text),
                Column("orders", ("orders",), to_count_text),
            ),
            ranked=True,
        ),
        TableSpec(
            "recentOrders",
            (
                Column("order", ("orderNumber",), to_safe_text),
                Column("supplier", ("supplier",), to_safe_text),
                Column("date", ("date",), to_date_text),
                Column("amount", ("amount",), to_currency_text),
                Column("status", ("status",), order_status),
            ),
        ),
        TableSpec(
            "chartData",
            (_DAILY_DATE, Column("expenses", ("amount",), to_currency_text)),
        ),
    ),
    "inventory": (
        TableSpec(
            "items",
            (
                Column("product", ("name",), to_safe_text),
                Column("category", ("category",), to_safe_text),
                Column("current_stock", ("currentStock",), to_count_text),
                Column("min_stock", ("minStock",), to_count_text),
                Column("unit", ("unit",), to_safe_text),
                Column("status", ("status",), inventory_status),
            ),
        ),
    ),
    "customers": (
        TableSpec(
            "customers",
            (
                Column("customer", ("name",), to_safe_text),
                Column("phone", ("phone",), to_safe_text),
                Column("email", ("email",), to_safe_text),
                Column("type", ("customerType",), customer_type),
                Column("total_spent", ("totalSpent",), to_currency_text),
                Column("orders", ("ordersCount",), to_count_text),
                Column("average_order", ("averageOrderValue",), to_currency_text),
                Column("last_order", ("lastOrderDate",), to_date_text),
            ),
        ),
    ),
    "suppliers": (
        TableSpec(
            "suppliers",
            (
                Column("supplier", ("name",), to_safe_text),
                Column("phone", ("phone",), to_safe_text),
                Column("email", ("email",), to_safe_text),
                Column("total_purchases", ("totalPurchased",), to_currency_text),
                Column("orders", ("ordersCount",), to_count_text),
                Column("average_order", ("averageOrderValue",), to_currency_text),
                Column("last_order", ("lastOrderDate",), to_date_text),
            ),
        ),
    ),
    "financial": (
        TableSpec(
            "salesData",
            (_DAILY_DATE, Column("revenue", ("amount",), to_currency_text)),
        ),
        TableSpec(
            "purchasesData",
            (_DAILY_DATE, Column("expenses", ("amount",), to_currency_text)),
        ),
    ),
}


@dataclass(frozen=True)
class BuiltSections:
    """Sections of one report, summaries first."""

    summaries: list[SummarySection] = field(default_factory=list)
    tables: list[TableSection] = field(default_factory=list)

    def __iter__(self):
        yield from self.summaries
        yield from self.tables

    def __len__(self):
        return len(self.summaries) + len(self.tables)


def _dig(record: Mapping[str, Any], path: tuple[str, ...]):
    value = record
    for key in path:
        value = to_safe_mapping(value).get(key)
    return value


def _first_present(record: Mapping[str, Any], fields: tuple[str, ...]):
    for name in fields:
        value = record.get(name)
        if value is not None:
            return value
    return None


def _build_summary(payload: ReportPayload, labels: dict) -> SummarySection:
    kind_labels = labels["summaries"][payload.kind]
    entries = [
        (kind_labels["labels"][spec.key], spec.formatter(_dig(payload.summary, spec.path)))
        for spec in SUMMARY_FIELDS[payload.kind]
    ]
    return SummarySection(title=kind_labels["title"], entries=entries)


def _build_table(payload: ReportPayload, spec: TableSpec, labels: dict) -> TableSection:
    table_labels = labels["tables"][f"{payload.kind}.{spec.field}"]
    headers = [table_labels["headers"][column.key] for column in spec.columns]
    if spec.ranked:
        headers.insert(0, labels["rank_header"])
    rows = []
    for index, record in enumerate(payload.records(spec.field), start=1):
        row = [
            column.formatter(_first_present(record, column.fields))
            for column in spec.columns
        ]
        if spec.ranked:
            row.insert(0, str(index))
        rows.append(row)
    return TableSection(title=table_labels["title"], headers=headers, rows=rows)


def build_sections(bundle) -> BuiltSections:
    """
    Build the display sections of a report bundle.

    Parameters
    ----------
    bundle : Mapping[str, Any] or ValidatedBundle
        Report kind -> payload. Any subset of kinds may be present.

    Returns
    -------
    BuiltSections
        ``summaries`` and ``tables`` in fixed kind and field order.

    Examples
    --------
    >>> built = build_sections({
    ...     "sales": {
    ...         "summary": {"totalSales": 1000, "totalOrders": 4},
    ...         "topItems": [{"name": "Widget", "revenue": "N/A", "quantity": None}],
    ...     }
    ... })
    >>> built.tables[0].rows
    [['1', 'Widget', '-', '0', '0.00 SDG']]
    """
    validated = validate_bundle(bundle)
    labels = read_config("labels")
    summaries = []
    tables = []
    for payload in validated.payloads:
        if payload.summary is not None:
            summaries.append(_build_summary(payload, labels))
        kind_tables = [
            _build_table(payload, spec, labels) for spec in TABLE_SPECS[payload.kind]
        ]
        tables.extend(kind_tables)
        logger.debug(
            "Built %s: summary=%s, tables=%d",
            payload.kind,
            payload.summary is not None,
            len(kind_tables),
        )
    return BuiltSections(summaries=summaries, tables=tables)
