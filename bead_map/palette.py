# bead_map/palette.py
from __future__ import annotations

"""
Immutable, ordered bead palette and its filtered views.

A Palette is built once (see palette_data.build_palette) and passed by
reference to every matching call. Filtering returns a new Palette over the
same PaletteColor objects; the base collection and its arrays are never
mutated, so one instance can be shared freely across threads.
"""

from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .core_types import ColourId, Lab, PaletteColor, U8Image
from .errors import ConfigurationError

TRANSLUCENT_CATEGORY = "translucent"


def _read_only(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


class Palette:
    """
    Ordered collection of PaletteColor with precomputed lookup arrays.

    Iteration order is catalog order; ties in matching resolve to the entry
    that comes first here.
    """

    __slots__ = ("_colors", "_index_of", "_lab", "_rgb", "name")

    def __init__(self, colors: Iterable[PaletteColor], name: str = "palette") -> None:
        entries: Tuple[PaletteColor, ...] = tuple(colors)
        index_of: Dict[ColourId, int] = {}
        for i, c in enumerate(entries):
            if c.id in index_of:
                raise ConfigurationError(f"duplicate palette id: {c.id}")
            index_of[c.id] = i

        self._colors = entries
        self._index_of = index_of
        self._lab: Lab = _read_only(
            np.array([c.lab for c in entries], dtype=np.float64).reshape(-1, 3)
        )
        self._rgb: U8Image = _read_only(
            np.array([c.rgb for c in entries], dtype=np.uint8).reshape(-1, 3)
        )
        self.name = name

    # Sequence protocol

    def __len__(self) -> int:
        return len(self._colors)

    def __iter__(self) -> Iterator[PaletteColor]:
        return iter(self._colors)

    def __getitem__(self, index: int) -> PaletteColor:
        return self._colors[index]

    def __contains__(self, colour_id: object) -> bool:
        return colour_id in self._index_of

    def __repr__(self) -> str:
        return f"Palette({self.name!r}, {len(self)} colours)"

    # Lookups

    @property
    def colors(self) -> Tuple[PaletteColor, ...]:
        return self._colors

    @property
    def ids(self) -> Tuple[ColourId, ...]:
        return tuple(c.id for c in self._colors)

    @property
    def lab_array(self) -> Lab:
        """float64 [P,3], read-only."""
        return self._lab

    @property
    def rgb_array(self) -> U8Image:
        """uint8 [P,3], read-only."""
        return self._rgb

    def get(self, colour_id: ColourId) -> PaletteColor:
        """Entry by id; KeyError if absent from this view."""
        return self._colors[self.index_of(colour_id)]

    def index_of(self, colour_id: ColourId) -> int:
        try:
            return self._index_of[colour_id]
        except KeyError:
            raise KeyError(f"unknown palette id: {colour_id}") from None

    # Views

    def where(
        self, predicate: Callable[[PaletteColor], bool], name: Optional[str] = None
    ) -> "Palette":
        """
        View of the entries satisfying predicate, in catalog order.
        Raises ConfigurationError if nothing is left.
        """
        kept = [c for c in self._colors if predicate(c)]
        if not kept:
            raise ConfigurationError(
                f"palette filter left no colours to match against ({self.name})"
            )
        return Palette(kept, name=name or f"{self.name}:filtered")

    def filtered(
        self, exclude_special: bool = False, exclude_translucent: bool = False
    ) -> "Palette":
        """
        Drop special-flagged and/or translucent entries.

        With both flags off the palette itself is returned. Raises
        ConfigurationError when the view would be empty.
        """
        if not exclude_special and not exclude_translucent:
            if not self._colors:
                raise ConfigurationError(f"palette {self.name} is empty")
            return self

        def keep(c: PaletteColor) -> bool:
            if exclude_special and c.special:
                return False
            if exclude_translucent and c.category == TRANSLUCENT_CATEGORY:
                return False
            return True

        tags = []
        if exclude_special:
            tags.append("no-special")
        if exclude_translucent:
            tags.append("no-translucent")
        return self.where(keep, name=f"{self.name}:{'+'.join(tags)}")

    def by_category(self) -> Dict[str, List[PaletteColor]]:
        """Category -> entries, both in catalog order."""
        groups: Dict[str, List[PaletteColor]] = {}
        for c in self._colors:
            groups.setdefault(c.category, []).append(c)
        return groups

    # Diagnostics

    def min_pairwise_distance(self, ignore_duplicates: bool = True) -> float:
        """
        Smallest ΔE76 between two entries of this palette.

        Entries sharing the exact same RGB are skipped when ignore_duplicates
        is set. Returns inf for palettes with fewer than two distinct colours.
        """
        lab = self._lab
        if lab.shape[0] < 2:
            return float("inf")
        diff = lab[:, None, :] - lab[None, :, :]
        dist = np.sqrt(np.sum(diff * diff, axis=2))
        mask = ~np.eye(lab.shape[0], dtype=bool)
        if ignore_duplicates:
            same_rgb = np.all(self._rgb[:, None, :] == self._rgb[None, :, :], axis=2)
            mask &= ~same_rgb
        if not np.any(mask):
            return float("inf")
        return float(dist[mask].min())


__all__ = ["Palette", "TRANSLUCENT_CATEGORY"]
