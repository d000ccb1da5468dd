"""Sector grid spatial index for narrowing prey searches.

The world is split into an n x n grid of square sectors with side d,
addressed as (row, col) with row 0 along the top edge. A predator samples
four points on its visual search circle (NE, NW, SW, SE) and the grid
returns the prey bucketed in the sectors those samples span, widened so
that nothing inside the circle is missed.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Iterable

import structlog

from abm.core.geometry import Vector, translate_position_to_sector
from abm.core.prey import ColourPolymorphicPrey

logger = structlog.get_logger()

Sector = tuple[int, int]

# Sample angles on the visual search circle, relative to the world axes
SAMPLE_ANGLES = (math.pi / 4, 3 * math.pi / 4, 5 * math.pi / 4, 7 * math.pi / 4)

# Gap between the sampled box and the full circle, as a fraction of the radius
_CIRCLE_MARGIN = 1.0 - math.cos(math.pi / 4)


def sector_samples(position: Vector, vsr: float, d: float, n: int) -> tuple[Sector, Sector, Sector, Sector]:
    """Sectors containing the 45°, 135°, 225° and 315° points of the search circle.

    Args:
        position: Centre of the visual search circle.
        vsr: Radius of the circle.
        d: Sector side length.
        n: Number of sectors along each axis.

    Returns:
        Four (row, col) pairs in sample-angle order.
    """
    x, y = position
    samples = [
        translate_position_to_sector(d, n, (x + vsr * math.cos(a), y + vsr * math.sin(a)))
        for a in SAMPLE_ANGLES
    ]
    return (samples[0], samples[1], samples[2], samples[3])


class PreyGrid:
    """Uniform grid of prey keyed by sector.

    Rebuild it once per tick, after prey have moved and before predators
    search, so bucket membership matches current positions.
    """

    def __init__(self, d: float, n: int) -> None:
        """Initialize an empty grid.

        Args:
            d: Sector side length in world units.
            n: Number of sectors along each axis.
        """
        if d <= 0.0 or n <= 0:
            raise ValueError("sector size and count must be positive")
        self.d = d
        self.n = n
        self._cells: dict[Sector, list[ColourPolymorphicPrey]] = defaultdict(list)

    def cell_of(self, prey: ColourPolymorphicPrey) -> Sector:
        return translate_position_to_sector(self.d, self.n, prey.pos)

    def insert(self, prey: ColourPolymorphicPrey) -> None:
        self._cells[self.cell_of(prey)].append(prey)

    def clear(self) -> None:
        self._cells.clear()

    def rebuild(self, population: Iterable[ColourPolymorphicPrey]) -> None:
        """Re-bucket all living prey from scratch."""
        self._cells.clear()
        count = 0
        for prey in population:
            if prey.is_alive():
                self.insert(prey)
                count += 1
        logger.debug("prey_grid_rebuilt", prey_count=count, occupied_cells=len(self._cells))

    def cells_for(self, position: Vector, vsr: float) -> list[Sector]:
        """Sectors that may hold prey within vsr of position.

        Note:
            The four samples bound a box of half-width vsr * cos 45°, which
            is narrower than the circle. The row/col range is widened by
            enough whole sectors to cover the remaining margin.
        """
        samples = sector_samples(position, vsr, self.d, self.n)
        rows = [row for row, _ in samples]
        cols = [col for _, col in samples]
        pad = math.ceil(_CIRCLE_MARGIN * vsr / self.d)
        row_min = max(min(rows) - pad, 0)
        row_max = min(max(rows) + pad, self.n - 1)
        col_min = max(min(cols) - pad, 0)
        col_max = min(max(cols) + pad, self.n - 1)
        return [
            (row, col)
            for row in range(row_min, row_max + 1)
            for col in range(col_min, col_max + 1)
        ]

    def query(self, position: Vector, vsr: float) -> list[ColourPolymorphicPrey]:
        """Living prey in the sectors around position.

        Returns a superset of the prey within vsr; callers still apply the
        exact range test.
        """
        found: list[ColourPolymorphicPrey] = []
        for cell in self.cells_for(position, vsr):
            found.extend(p for p in self._cells.get(cell, ()) if p.is_alive())
        return found

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._cells.values())
