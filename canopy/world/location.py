"""Location — immutable grid addressing.

A Location is the only key used by the field layers.  Neighbour and
radius queries are computed purely from grid bounds and returned in a
random order: callers that take "the first" candidate rely on that order
being unbiased.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator


@dataclass(frozen=True, slots=True)
class Location:
    """A ``(row, col)`` position on the grid.

    Attributes:
        row: Row index (0 at the top).
        col: Column index (0 at the left).
    """

    row: int
    col: int

    def __str__(self) -> str:
        return f"{self.row},{self.col}"


def locations_within(
    location: Location,
    radius: int,
    height: int,
    width: int,
    rng: Generator,
) -> list[Location]:
    """Return in-bounds locations within a Chebyshev radius, shuffled.

    Args:
        location: Centre of the search (excluded from the result).
        radius: Maximum Chebyshev distance.
        height: Number of grid rows.
        width: Number of grid columns.
        rng: Seeded random generator used for the shuffle.

    Returns:
        Every in-bounds location at distance 1..radius.
    """
    result: list[Location] = []
    for dr in range(-radius, radius + 1):
        row = location.row + dr
        if not 0 <= row < height:
            continue
        for dc in range(-radius, radius + 1):
            col = location.col + dc
            if 0 <= col < width and (dr != 0 or dc != 0):
                result.append(Location(row, col))
    rng.shuffle(result)
    return result
