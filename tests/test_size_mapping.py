from __future__ import annotations

import pytest

from models.company_record import CompanySize
from services.mapping import map_size_label


@pytest.mark.parametrize(
    "label,expected",
    [
        ("2-10 employees", CompanySize.RANGE_1_10),
        ("0-1 employees", CompanySize.RANGE_1_10),
        ("1-10", CompanySize.RANGE_1_10),
        ("11-50 employees", CompanySize.RANGE_11_50),
        ("51-200 employees", CompanySize.RANGE_51_200),
        ("201-500 employees", CompanySize.RANGE_201_500),
        ("501-1,000 employees", CompanySize.RANGE_501_1000),
        ("501-1000 employees", CompanySize.RANGE_501_1000),
        ("1,001-5,000 employees", CompanySize.RANGE_1001_5000),
        ("5,001-10,000 employees", CompanySize.RANGE_5001_10000),
        ("10,001+ employees", CompanySize.RANGE_10001_PLUS),
        ("10001+", CompanySize.RANGE_10001_PLUS),
    ],
)
def test_documented_labels(label, expected):
    assert map_size_label(label) == expected


def test_spacing_and_dash_variants():
    assert map_size_label("11 – 50 Employees") == CompanySize.RANGE_11_50
    assert map_size_label("10,001 + employees") == CompanySize.RANGE_10001_PLUS


def test_larger_ranges_are_not_read_as_small_ones():
    assert map_size_label("501-1,000") != CompanySize.RANGE_1_10
    assert map_size_label("5,001-10,000") != CompanySize.RANGE_1_10
    assert map_size_label("1,001-5,000") != CompanySize.RANGE_1_10


@pytest.mark.parametrize("label", [None, "", "Self-employed", "lots of people", 42])
def test_unrecognized_labels_are_unknown(label):
    assert map_size_label(label) == CompanySize.UNKNOWN
