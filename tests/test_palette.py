"""Tests for bead_map.palette and bead_map.palette_data."""

import math

import pytest

from bead_map.colour_convert import rgb_to_lab
from bead_map.core_types import PaletteColor, hex_to_rgb, rgb_to_hex
from bead_map.errors import ConfigurationError
from bead_map.palette import Palette
from bead_map.palette_data import (
    BEAD_COLORS,
    SPECIAL_CATEGORIES,
    build_palette,
    default_palette,
)


def _entry(colour_id, rgb, category="white"):
    return PaletteColor(
        id=colour_id,
        name=colour_id,
        category=category,
        rgb=rgb,
        lab=rgb_to_lab(*rgb),
        special=category in SPECIAL_CATEGORIES,
    )


class TestCatalog:
    def test_size(self, palette):
        assert len(palette) == len(BEAD_COLORS) == 80

    def test_catalog_order_kept(self, palette):
        assert palette.ids == tuple(row[0] for row in BEAD_COLORS)

    def test_lab_computed_once_per_entry(self, palette):
        for c in palette:
            assert c.lab == rgb_to_lab(*c.rgb)

    def test_special_flag_follows_category(self, palette):
        for c in palette:
            assert c.special == (c.category in SPECIAL_CATEGORIES)

    def test_default_palette_is_shared(self):
        assert default_palette() is default_palette()

    def test_hex_rows(self):
        pal = build_palette([("A", "a", "white", "#eeeeee"), ("B", "b", "red", (1, 2, 3))])
        assert pal.get("A").rgb == (238, 238, 238)
        assert pal.get("A").lab == rgb_to_lab(238, 238, 238)
        assert pal.get("B").rgb == (1, 2, 3)

    def test_hex(self, palette):
        assert palette.get("P01").hex == "#EEEEEE"
        assert palette.get("P27").hex == "#FF0000"


class TestLookups:
    def test_get_and_index(self, palette):
        assert palette.get("P84").name == "Snow White"
        assert palette[palette.index_of("P84")].id == "P84"

    def test_unknown_id(self, palette):
        with pytest.raises(KeyError):
            palette.get("P999")

    def test_contains(self, palette):
        assert "P01" in palette
        assert "nope" not in palette

    def test_arrays_shape(self, palette):
        assert palette.lab_array.shape == (80, 3)
        assert palette.rgb_array.shape == (80, 3)
        assert palette.rgb_array[0].tolist() == [238, 238, 238]

    def test_arrays_read_only(self, palette):
        with pytest.raises(ValueError):
            palette.lab_array[0, 0] = 1.0
        with pytest.raises(ValueError):
            palette.rgb_array[0, 0] = 1

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ConfigurationError):
            Palette([_entry("A", (1, 2, 3)), _entry("A", (4, 5, 6))])


class TestFiltered:
    def test_no_flags_returns_same_palette(self, palette):
        assert palette.filtered() is palette

    def test_exclude_special(self, palette):
        view = palette.filtered(exclude_special=True)
        assert len(view) > 0
        assert not any(c.special for c in view)
        assert len(view) == sum(1 for c in palette if not c.special)

    def test_exclude_translucent_keeps_other_specials(self, palette):
        view = palette.filtered(exclude_translucent=True)
        categories = {c.category for c in view}
        assert "translucent" not in categories
        assert "glow" in categories
        assert len(view) == len(palette) - 4

    def test_view_keeps_catalog_order(self, palette):
        view = palette.filtered(exclude_special=True, exclude_translucent=True)
        positions = [palette.index_of(cid) for cid in view.ids]
        assert positions == sorted(positions)

    def test_view_name(self, palette):
        view = palette.filtered(exclude_special=True, exclude_translucent=True)
        assert view.name == "beads:no-special+no-translucent"

    def test_base_not_mutated(self, palette):
        palette.filtered(exclude_special=True)
        assert len(palette) == 80

    def test_empty_view_raises(self):
        only_glow = build_palette([("G1", "Glow", "glow", (10, 200, 10))])
        with pytest.raises(ConfigurationError):
            only_glow.filtered(exclude_special=True)

    def test_empty_palette_raises(self):
        with pytest.raises(ConfigurationError):
            Palette([]).filtered()

    def test_where(self, palette):
        reds = palette.where(lambda c: c.category == "red", name="reds")
        assert reds.name == "reds"
        assert {c.category for c in reds} == {"red"}
        with pytest.raises(ConfigurationError):
            palette.where(lambda c: False)


class TestGrouping:
    def test_by_category(self, palette):
        groups = palette.by_category()
        assert list(groups)[0] == "white"
        assert [c.id for c in groups["translucent"]] == ["P27", "P28", "P29", "P30"]
        assert sum(len(v) for v in groups.values()) == len(palette)


class TestMinPairwiseDistance:
    def test_duplicates_ignored(self, palette):
        assert palette.min_pairwise_distance() > 0.0

    def test_duplicates_counted(self, palette):
        # Glow Pink and Pearl Pink share an RGB value.
        assert palette.min_pairwise_distance(ignore_duplicates=False) == 0.0

    def test_two_entries(self):
        pal = Palette([_entry("A", (0, 0, 0)), _entry("B", (255, 255, 255))])
        assert pal.min_pairwise_distance() == pytest.approx(100.0, abs=1e-3)

    def test_single_entry_is_inf(self):
        assert math.isinf(Palette([_entry("A", (0, 0, 0))]).min_pairwise_distance())


class TestHex:
    def test_round_trip_case(self):
        assert rgb_to_hex((255, 128, 0)) == "#FF8000"
        assert hex_to_rgb("#ff8000") == (255, 128, 0)

    def test_short_and_no_hash(self):
        assert hex_to_rgb("fff") == (255, 255, 255)

    def test_alpha_dropped(self):
        assert hex_to_rgb("#11223344") == (17, 34, 51)

    def test_invalid(self):
        with pytest.raises(ValueError):
            hex_to_rgb("#ff")
