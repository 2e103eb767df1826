"""Tests for bead_map.report: usage listing and purchase estimates."""

import numpy as np
import pytest

from bead_map.quantize import quantize
from bead_map.report import (
    colour_usage,
    estimate_purchase,
    group_by_category,
    package_for,
    suggested_quantity,
)


def _result_for(palette, ids):
    grid = np.array(
        [[list(palette.get(cid).rgb) + [255] for cid in row] for row in ids],
        dtype=np.uint8,
    )
    return quantize(grid, palette)


class TestSuggestedQuantity:
    @pytest.mark.parametrize(
        "count,expected",
        [(0, 0), (1, 100), (90, 100), (91, 200), (1000, 1100), (1001, 1200), (2500, 2800)],
    )
    def test_rounding(self, count, expected):
        assert suggested_quantity(count) == expected

    def test_never_below_count(self):
        for count in range(1, 3000, 37):
            assert suggested_quantity(count) >= count


class TestPackageFor:
    @pytest.mark.parametrize(
        "quantity,package",
        [(100, 200), (200, 200), (201, 500), (500, 500), (1100, 2000), (5000, 2000)],
    )
    def test_smallest_fitting_package(self, quantity, package):
        assert package_for(quantity) == package


class TestEstimatePurchase:
    def test_totals(self, palette):
        estimate = estimate_purchase({"P02": 1, "P01": 1000}, palette)
        assert [line.id for line in estimate.lines] == ["P01", "P02"]
        assert estimate.total_needed == 1001
        assert estimate.total_suggested == 1200
        assert estimate.estimated_cost == pytest.approx(60.0)

    def test_line_fields(self, palette):
        (line,) = estimate_purchase({"P06": 450}, palette).lines
        assert line.name == "Red"
        assert line.needed == 450
        assert line.suggested == 500
        assert line.package == 500

    def test_empty(self, palette):
        estimate = estimate_purchase({}, palette)
        assert estimate.lines == []
        assert estimate.estimated_cost == 0.0


class TestColourUsage:
    def test_most_used_first_then_catalog_order(self, palette):
        ids = [["P02", "P01", "P17"], ["P17", "P02", "P01"], ["P17", "P06", "P06"]]
        lines = colour_usage(_result_for(palette, ids))
        assert [(line.id, line.count) for line in lines] == [
            ("P17", 3),
            ("P01", 2),
            ("P02", 2),
            ("P06", 2),
        ]
        assert lines[0].hex == "#BCBCBB"

    def test_group_by_category(self, palette):
        ids = [["P06", "P01", "P06"]]
        groups = group_by_category(colour_usage(_result_for(palette, ids)))
        assert list(groups) == ["red", "white"]
        assert [line.id for line in groups["white"]] == ["P01"]
