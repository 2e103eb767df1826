"""Tests for bead_map.quality.analyze."""

import numpy as np
import pytest

from bead_map.colour_convert import rgb_to_lab
from bead_map.core_types import QualityReport
from bead_map.distance import delta_e2000
from bead_map.errors import DimensionMismatch
from bead_map.quality import analyze
from bead_map.quantize import quantize


def _grid_of(palette, ids):
    return np.array(
        [[list(palette.get(cid).rgb) + [255] for cid in row] for row in ids],
        dtype=np.uint8,
    )


class TestAnalyze:
    def test_exact_reproduction(self, palette):
        ids = [["P01", "P02", "P06"], ["P10", "P07", "P05"]]
        report = analyze(_grid_of(palette, ids), ids, palette)
        assert report.average_error == 0.0
        assert report.max_error == 0.0
        assert report.min_error == 0.0
        assert report.matched_pixels == 6
        assert report.score == 100
        assert not report.partial

    def test_known_errors(self, palette):
        original = np.array([[[255, 255, 255], [0, 0, 0]]], dtype=np.uint8)
        ids = [["P01", "P01"]]
        report = analyze(original, ids, palette)
        white = delta_e2000(rgb_to_lab(255, 255, 255), palette.get("P01").lab)
        black = delta_e2000(rgb_to_lab(0, 0, 0), palette.get("P01").lab)
        assert report.average_error == pytest.approx((white + black) / 2)
        assert report.max_error == pytest.approx(max(white, black))
        assert report.min_error == pytest.approx(min(white, black))

    def test_repeated_pairs_weighted(self, palette):
        original = np.array([[[0, 0, 0], [0, 0, 0], [0, 0, 0], [255, 255, 255]]], dtype=np.uint8)
        ids = [["P01"] * 4]
        report = analyze(original, ids, palette)
        white = delta_e2000(rgb_to_lab(255, 255, 255), palette.get("P01").lab)
        black = delta_e2000(rgb_to_lab(0, 0, 0), palette.get("P01").lab)
        assert report.average_error == pytest.approx((3 * black + white) / 4)

    def test_from_quantization_result(self, palette, rng):
        grid = rng.integers(0, 256, size=(12, 12, 4), dtype=np.uint8)
        grid[..., 3] = 255
        result = quantize(grid, palette)
        report = analyze(grid, result)
        assert report.matched_pixels == 144
        # Opaque input: quality error is the quantizer's own mean error.
        assert report.average_error == pytest.approx(result.mean_distance)
        assert report.min_error <= report.average_error <= report.max_error

    def test_alpha_ignored(self, palette):
        ids = [["P06"]]
        original = np.array([[[179, 25, 46, 0]]], dtype=np.uint8)
        assert analyze(original, ids, palette).average_error == 0.0

    def test_ids_need_palette(self, palette):
        with pytest.raises(ValueError):
            analyze(np.zeros((1, 1, 3), dtype=np.uint8), [["P01"]])

    def test_unknown_id(self, palette):
        with pytest.raises(KeyError):
            analyze(np.zeros((1, 1, 3), dtype=np.uint8), [["nope"]], palette)

    def test_ragged_rows(self, palette):
        with pytest.raises(ValueError):
            analyze(np.zeros((2, 2, 3), dtype=np.uint8), [["P01", "P01"], ["P01"]], palette)


class TestDimensionMismatch:
    def test_overlap_scored(self, palette):
        original = np.zeros((3, 4, 3), dtype=np.uint8)
        ids = [["P02"] * 3] * 2
        report = analyze(original, ids, palette)
        assert report.matched_pixels == 6
        assert report.partial
        assert isinstance(report.mismatch, DimensionMismatch)
        assert report.mismatch.overlap_shape == (2, 3)
        assert report.mismatch.original_shape == (3, 4)
        assert report.mismatch.assigned_shape == (2, 3)

    def test_assigned_larger(self, palette):
        original = np.zeros((1, 1, 3), dtype=np.uint8)
        report = analyze(original, [["P02", "P01"], ["P01", "P01"]], palette)
        assert report.matched_pixels == 1
        assert report.average_error == pytest.approx(
            delta_e2000(rgb_to_lab(0, 0, 0), palette.get("P02").lab)
        )

    def test_no_overlap(self, palette):
        report = analyze(np.zeros((2, 2, 3), dtype=np.uint8), [], palette)
        assert report == QualityReport(0.0, 0.0, 0.0, 0)
        assert report.partial

    def test_message(self):
        err = DimensionMismatch((3, 4), (2, 3))
        assert str(err) == "original grid 4x3 vs assigned grid 3x2"
        assert isinstance(err, ValueError)


class TestScore:
    @pytest.mark.parametrize(
        "average,score",
        [(0.0, 100), (3.4, 97), (3.5, 97), (3.6, 96), (99.5, 1), (99.9, 0), (150.0, 0)],
    )
    def test_score(self, average, score):
        assert QualityReport(average, average, 0.0, 1).score == score
