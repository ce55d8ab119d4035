import math
from decimal import Decimal

import numpy as np
import pytest

from docexport.normalization import (
    lookup_label,
    to_count_text,
    to_currency_text,
    to_date_text,
    to_percent_text,
    to_safe_list,
    to_safe_mapping,
    to_safe_number,
    to_safe_text,
)

# -------------------------------
# Tests for to_safe_number
# -------------------------------

@pytest.mark.parametrize(
    "value, expected",
    [
        (3, 3),
        (-2.5, -2.5),
        ("12.5", 12.5),
        (" 1e3 ", 1000.0),
        (np.int64(7), 7),
        (Decimal("4.25"), 4.25),
    ],
)
def test_to_safe_number_reads_numbers(value, expected):
    assert to_safe_number(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        None,
        True,
        False,
        "",
        "   ",
        "N/A",
        "12abc",
        {"nested": 1},
        [1, 2],
        object(),
        float("nan"),
        float("inf"),
        -float("inf"),
        np.nan,
        "nan",
        "inf",
        Decimal("NaN"),
        10 ** 400,
    ],
)
def test_to_safe_number_falls_back_to_zero(value):
    assert to_safe_number(value) == 0


def test_to_safe_number_always_finite():
    values = [None, "x", 1, "2", {}, [], float("nan"), 3.5, "-4", object()]
    for value in values:
        assert math.isfinite(to_safe_number(value))

# -------------------------------
# Tests for to_safe_text
# -------------------------------

@pytest.mark.parametrize("value", [None, "", "   ", float("nan")])
def test_to_safe_text_dash_for_missing(value):
    assert to_safe_text(value) == "-"


def test_to_safe_text_dash_from_labels(mocker):
    mocker.patch(
        "docexport.normalization.read_config", return_value={"dash": "n/a"}
    )
    assert to_safe_text(None) == "n/a"
    assert to_date_text("") == "n/a"


def test_to_safe_text_stringifies():
    assert to_safe_text(42) == "42"
    assert to_safe_text("Widget") == "Widget"
    assert to_safe_text(0) == "0"

# -------------------------------
# Tests for formatter wrappers
# -------------------------------

def test_to_currency_text():
    assert to_currency_text(1000) == "1,000.00 SDG"
    assert to_currency_text("N/A") == "0.00 SDG"
    assert to_currency_text(None) == "0.00 SDG"


def test_to_count_text():
    assert to_count_text(4) == "4"
    assert to_count_text("1500") == "1,500"
    assert to_count_text(None) == "0"


def test_to_percent_text():
    assert to_percent_text(12.5) == "12.50%"
    assert to_percent_text("oops") == "0.00%"


def test_to_date_text():
    assert to_date_text(None) == "-"
    assert to_date_text("  ") == "-"
    assert to_date_text("2024-09-23") == "23/9/2024"
    assert to_date_text("not a date") == "Invalid date"

# -------------------------------
# Tests for containers and labels
# -------------------------------

def test_to_safe_list():
    items = [1, 2]
    assert to_safe_list(items) is items
    assert to_safe_list((1, 2)) == [1, 2]
    for value in ["abc", {"a": 1}, None, 5, {1, 2}]:
        assert to_safe_list(value) == []


def test_to_safe_mapping():
    record = {"a": 1}
    assert to_safe_mapping(record) is record
    assert to_safe_mapping([("a", 1)]) == {}
    assert to_safe_mapping(None) == {}


def test_lookup_label():
    assert lookup_label("order", "PENDING") == "Pending"
    assert lookup_label("order", "ARCHIVED") == "ARCHIVED"
    assert lookup_label("order", None) == "-"
    assert lookup_label({"A": "Alpha"}, "A") == "Alpha"
