# bead_map/palette_data.py
from __future__ import annotations

"""
Bead catalog and palette builders.

Exports:
  BEAD_COLORS: list[tuple[str, str, str, RGBTuple]]  # [(id, name, category, rgb), ...]
  SPECIAL_CATEGORIES: frozenset[str]
  build_palette(entries=BEAD_COLORS, name="beads") -> Palette
  default_palette() -> Palette   # full catalog, built on first call
"""

from functools import lru_cache
from typing import Iterable, List, Tuple, Union

from .colour_convert import rgb_to_lab
from .core_types import PaletteColor, RGBTuple, hex_to_rgb
from .palette import Palette

# Glow, fluorescent, translucent, metallic and pearlescent beads.
SPECIAL_CATEGORIES = frozenset(
    {"glow", "fluorescent", "translucent", "metallic", "pearlescent"}
)

CatalogEntry = Tuple[str, str, str, Union[RGBTuple, str]]

BEAD_COLORS: List[CatalogEntry] = [
    # whites and greys
    ("P01", "White", "white", (238, 238, 238)),
    ("P17", "Light Grey", "white", (188, 188, 187)),
    ("P18", "Dark Grey", "white", (138, 141, 145)),
    ("P02", "Black", "white", (70, 68, 68)),
    ("P84", "Snow White", "white", (253, 254, 254)),
    ("P85", "Cream White", "white", (255, 246, 226)),
    # reds
    ("P06", "Red", "red", (179, 25, 46)),
    ("P20", "Light Red", "red", (229, 77, 65)),
    ("P22", "Dark Red", "red", (122, 26, 42)),
    ("P53", "Wine Red", "red", (137, 27, 54)),
    ("P59", "Vermilion", "red", (224, 66, 66)),
    ("P87", "Coffee Red", "red", (150, 54, 54)),
    ("P88", "Rust Red", "red", (172, 68, 68)),
    # pinks
    ("P08", "Pink", "pink", (238, 158, 176)),
    ("P54", "Pale Pink", "pink", (247, 207, 214)),
    ("P58", "Bright Pink", "pink", (245, 108, 155)),
    ("P57", "Rose Pink", "pink", (224, 126, 175)),
    ("P86", "Sakura Pink", "pink", (255, 193, 213)),
    # yellows
    ("P03", "Yellow", "yellow", (252, 216, 86)),
    ("P46", "Light Yellow", "yellow", (254, 238, 170)),
    ("P83", "Cream Yellow", "yellow", (254, 232, 119)),
    ("P15", "Golden Yellow", "yellow", (255, 217, 102)),
    ("P19", "Ochre", "yellow", (229, 155, 86)),
    ("P74", "Apricot Yellow", "yellow", (252, 220, 128)),
    # oranges
    ("P04", "Orange", "orange", (240, 108, 34)),
    ("P47", "Light Orange", "orange", (255, 185, 141)),
    ("P25", "Dark Orange", "orange", (202, 81, 47)),
    ("P63", "Coral Orange", "orange", (255, 127, 80)),
    # greens
    ("P10", "Green", "green", (25, 132, 72)),
    ("P11", "Light Green", "green", (118, 199, 130)),
    ("P61", "Dark Green", "green", (0, 102, 61)),
    ("P42", "Mint Green", "green", (123, 218, 214)),
    ("P21", "Grass Green", "green", (104, 159, 56)),
    ("P56", "Forest Green", "green", (31, 99, 71)),
    ("P75", "Jade Green", "green", (133, 193, 158)),
    ("P89", "Olive Green", "green", (107, 142, 35)),
    # blues
    ("P07", "Blue", "blue", (44, 113, 171)),
    ("P09", "Light Blue", "blue", (108, 172, 207)),
    ("P43", "Sky Blue", "blue", (134, 200, 239)),
    ("P51", "Dark Blue", "blue", (38, 59, 114)),
    ("P52", "Navy Blue", "blue", (52, 87, 136)),
    ("P26", "Sapphire Blue", "blue", (51, 102, 153)),
    ("P60", "Midnight Blue", "blue", (25, 25, 112)),
    ("P76", "Light Grey Blue", "blue", (135, 206, 235)),
    ("P90", "Indigo", "blue", (75, 0, 130)),
    # purples
    ("P05", "Purple", "purple", (109, 72, 137)),
    ("P44", "Light Purple", "purple", (182, 144, 202)),
    ("P45", "Dark Purple", "purple", (84, 50, 119)),
    ("P23", "Lavender", "purple", (199, 186, 220)),
    ("P55", "Grape Purple", "purple", (138, 43, 226)),
    # browns
    ("P12", "Brown", "brown", (113, 66, 47)),
    ("P62", "Light Brown", "brown", (169, 123, 103)),
    ("P70", "Dark Brown", "brown", (81, 51, 40)),
    ("P13", "Beige", "brown", (222, 184, 135)),
    ("P71", "Chocolate", "brown", (128, 64, 0)),
    ("P79", "Coffee", "brown", (111, 78, 55)),
    ("P91", "Khaki", "brown", (195, 176, 145)),
    # glow in the dark
    ("P34", "Glow Yellow Green", "glow", (214, 229, 171)),
    ("P35", "Glow Orange", "glow", (255, 196, 161)),
    ("P36", "Glow Pink", "glow", (255, 182, 193)),
    ("P37", "Glow Blue", "glow", (173, 216, 230)),
    # fluorescent
    ("P48", "Fluorescent Yellow", "fluorescent", (255, 233, 0)),
    ("P49", "Fluorescent Orange", "fluorescent", (255, 127, 0)),
    ("P50", "Fluorescent Pink", "fluorescent", (255, 62, 150)),
    ("P73", "Fluorescent Green", "fluorescent", (0, 255, 127)),
    # translucent
    ("P27", "Translucent Red", "translucent", (255, 0, 0)),
    ("P28", "Translucent Blue", "translucent", (0, 0, 255)),
    ("P29", "Translucent Yellow", "translucent", (255, 255, 0)),
    ("P30", "Translucent Green", "translucent", (0, 255, 0)),
    # metallic
    ("P31", "Gold", "metallic", (255, 215, 0)),
    ("P32", "Silver", "metallic", (192, 192, 192)),
    ("P33", "Bronze", "metallic", (205, 127, 50)),
    # pearlescent
    ("P38", "Pearl White", "pearlescent", (255, 250, 250)),
    ("P39", "Pearl Pink", "pearlescent", (255, 182, 193)),
    ("P40", "Pearl Blue", "pearlescent", (176, 224, 230)),
    ("P41", "Pearl Purple", "pearlescent", (221, 160, 221)),
]


def build_palette(
    entries: Iterable[CatalogEntry] = BEAD_COLORS, name: str = "beads"
) -> Palette:
    """
    Convert (id, name, category, rgb) rows into a Palette.
    rgb may also be a hex string such as "#EEEEEE".

    Lab is derived here, once per entry; nothing downstream recomputes it.
    """
    colors: List[PaletteColor] = []
    for colour_id, display_name, category, rgb in entries:
        if isinstance(rgb, str):
            rgb = hex_to_rgb(rgb)
        rgb_tuple: RGBTuple = (int(rgb[0]), int(rgb[1]), int(rgb[2]))
        colors.append(
            PaletteColor(
                id=colour_id,
                name=display_name,
                category=category,
                rgb=rgb_tuple,
                lab=rgb_to_lab(*rgb_tuple),
                special=category in SPECIAL_CATEGORIES,
            )
        )
    return Palette(colors, name=name)


@lru_cache(maxsize=1)
def default_palette() -> Palette:
    """
    The full bead catalog. Built on first call (about 80 Lab conversions)
    and returned as the same immutable instance afterwards.
    """
    return build_palette()


__all__ = [
    "BEAD_COLORS",
    "SPECIAL_CATEGORIES",
    "build_palette",
    "default_palette",
]
