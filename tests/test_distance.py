"""Tests for bead_map.distance: ΔE76, CIEDE2000 and the hybrid metric."""

import numpy as np
import pytest

from bead_map.colour_convert import rgb_to_lab
from bead_map.distance import (
    delta_e76,
    delta_e76_vec,
    delta_e2000,
    delta_e2000_vec,
    hybrid_distance,
)

# Sharma, Wu & Dalal (2005) CIEDE2000 test data.
SHARMA_PAIRS = [
    ((50.0000, 2.6772, -79.7751), (50.0000, 0.0000, -82.7485), 2.0425),
    ((50.0000, 3.1571, -77.2803), (50.0000, 0.0000, -82.7485), 2.8615),
    ((50.0000, 2.8361, -74.0200), (50.0000, 0.0000, -82.7485), 3.4412),
    ((50.0000, 0.0000, 0.0000), (50.0000, -1.0000, 2.0000), 2.3669),
    ((50.0000, -1.0000, 2.0000), (50.0000, 0.0000, 0.0000), 2.3669),
    ((50.0000, 2.4900, -0.0010), (50.0000, -2.4900, 0.0009), 7.1792),
    ((50.0000, 2.4900, -0.0010), (50.0000, -2.4900, 0.0011), 7.2195),
    ((50.0000, 2.4900, -0.0010), (50.0000, -2.4900, 0.0012), 7.2195),
    ((50.0000, 2.5000, 0.0000), (73.0000, 25.0000, -18.0000), 27.1492),
    ((50.0000, 2.5000, 0.0000), (61.0000, -5.0000, 29.0000), 22.8977),
    ((50.0000, 2.5000, 0.0000), (56.0000, -27.0000, -3.0000), 31.9030),
    ((50.0000, 2.5000, 0.0000), (50.0000, 3.1736, 0.5854), 1.0000),
    ((60.2574, -34.0099, 36.2677), (60.4626, -34.1751, 39.4387), 1.2644),
    ((63.0109, -31.0961, -5.8663), (62.8187, -29.7946, -4.0864), 1.2630),
    ((90.8027, -2.0831, 1.4410), (91.1528, -1.6435, 0.0447), 1.4441),
    ((90.9257, -0.5406, -0.9208), (88.6381, -0.8985, -0.7239), 1.5381),
    ((2.0776, 0.0795, -1.1350), (0.9033, -0.0636, -0.5514), 0.9082),
]


class TestDeltaE76:
    def test_zero_for_identical(self):
        lab = rgb_to_lab(10, 20, 30)
        assert delta_e76(lab, lab) == 0.0

    def test_euclidean(self):
        assert delta_e76((0, 0, 0), (3, 4, 0)) == pytest.approx(5.0)

    def test_symmetry(self):
        a, b = rgb_to_lab(100, 50, 200), rgb_to_lab(120, 60, 180)
        assert delta_e76(a, b) == delta_e76(b, a)

    def test_vectorised_matches_scalar(self):
        ref = rgb_to_lab(40, 90, 140)
        cands = np.array([rgb_to_lab(0, 0, 0), rgb_to_lab(255, 255, 255), ref])
        out = delta_e76_vec(ref, cands)
        assert out.shape == (3,)
        assert out[2] == 0.0
        assert out[0] == pytest.approx(delta_e76(ref, cands[0]))


class TestDeltaE2000:
    @pytest.mark.parametrize("lab1,lab2,expected", SHARMA_PAIRS)
    def test_sharma_reference(self, lab1, lab2, expected):
        assert delta_e2000(lab1, lab2) == pytest.approx(expected, abs=1e-4)

    @pytest.mark.parametrize("lab1,lab2,expected", SHARMA_PAIRS)
    def test_symmetry(self, lab1, lab2, expected):
        assert delta_e2000(lab1, lab2) == pytest.approx(delta_e2000(lab2, lab1), abs=1e-9)

    def test_zero_for_identical(self):
        lab = rgb_to_lab(200, 30, 90)
        assert delta_e2000(lab, lab) == 0.0

    def test_neutral_greys(self):
        d = delta_e2000(rgb_to_lab(0, 0, 0), rgb_to_lab(255, 255, 255))
        assert d > 90.0

    def test_accepts_arrays(self):
        lab1, lab2, expected = SHARMA_PAIRS[0]
        assert delta_e2000(np.array(lab1), np.array(lab2)) == pytest.approx(expected, abs=1e-4)

    def test_vectorised_matches_scalar(self):
        lab1 = SHARMA_PAIRS[0][0]
        cands = np.array([pair[1] for pair in SHARMA_PAIRS[:3]])
        out = delta_e2000_vec(lab1, cands)
        assert out.tolist() == [delta_e2000(lab1, c) for c in cands]


class TestHybridDistance:
    def test_close_pair_uses_ciede2000(self):
        lab1, lab2, expected = SHARMA_PAIRS[0]
        assert delta_e76(lab1, lab2) < 5.0
        assert hybrid_distance(lab1, lab2) == pytest.approx(expected, abs=1e-4)

    def test_far_pair_uses_delta_e76(self):
        lab1, lab2, _ = SHARMA_PAIRS[8]
        assert hybrid_distance(lab1, lab2) == delta_e76(lab1, lab2)

    def test_threshold_is_configurable(self):
        lab1, lab2, expected = SHARMA_PAIRS[8]
        assert hybrid_distance(lab1, lab2, threshold=100.0) == pytest.approx(expected, abs=1e-4)
        assert hybrid_distance(lab1, lab2, threshold=0.0) == delta_e76(lab1, lab2)

    def test_zero_for_identical(self):
        lab = rgb_to_lab(7, 7, 7)
        assert hybrid_distance(lab, lab) == 0.0
