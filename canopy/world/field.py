"""Field — dual-layer occupancy grid for one simulation step.

The Field keeps an animal layer and a plant layer side by side, each a
mapping from Location to its occupant plus a membership list in
placement order.  An animal may stand on a plant's cell.  The engine
builds a fresh Field every step and only ever writes into that "next"
field, so a Field is either read-only (current) or write-only (next)
for the duration of a step.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from canopy.world.location import Location, locations_within

if TYPE_CHECKING:
    from numpy.random import Generator

    from canopy.species.animal import Animal
    from canopy.species.plant import Plant


@dataclass
class Field:
    """A rectangular grid with separate animal and plant layers.

    Attributes:
        height: Number of grid rows.
        width: Number of grid columns.
        animals: Animals placed in this field, in placement order.
        plants: Plants placed in this field, in placement order.
    """

    height: int
    width: int
    animals: list[Animal] = field(init=False, default_factory=list)
    plants: list[Plant] = field(init=False, default_factory=list)
    _animal_layer: dict[Location, Animal] = field(
        init=False,
        default_factory=dict,
        repr=False,
    )
    _plant_layer: dict[Location, Plant] = field(
        init=False,
        default_factory=dict,
        repr=False,
    )

    def __post_init__(self) -> None:
        """Reject degenerate dimensions."""
        if self.height <= 0 or self.width <= 0:
            msg = f"field dimensions must be positive, got {self.height}x{self.width}"
            raise ValueError(msg)

    # -- Placement -------------------------------------------------------------

    def place_animal(self, animal: Animal, location: Location) -> None:
        """Put an animal at a location, evicting any previous occupant.

        Args:
            animal: The animal to place.
            location: Where to place it.

        Raises:
            ValueError: If ``location`` is None.
        """
        if location is None:
            msg = f"cannot place {animal!r} without a location"
            raise ValueError(msg)
        other = self._animal_layer.get(location)
        if other is not None:
            self.animals.remove(other)
        self._animal_layer[location] = animal
        self.animals.append(animal)

    def place_plant(self, plant: Plant | None, location: Location) -> None:
        """Put a plant at a location; ``None`` clears the plant slot.

        Raises:
            ValueError: If ``location`` is None.
        """
        if location is None:
            msg = f"cannot place {plant!r} without a location"
            raise ValueError(msg)
        other = self._plant_layer.pop(location, None)
        if other is not None:
            self.plants.remove(other)
        if plant is not None:
            self._plant_layer[location] = plant
            self.plants.append(plant)

    def clear_plant(self, location: Location) -> None:
        """Remove whatever plant occupies ``location``."""
        self.place_plant(None, location)

    def clear_animal(self, location: Location) -> None:
        """Remove whatever animal occupies ``location``."""
        removed = self._animal_layer.pop(location, None)
        if removed is not None:
            self.animals.remove(removed)

    def clear(self) -> None:
        """Empty both layers."""
        self._animal_layer.clear()
        self._plant_layer.clear()
        self.animals.clear()
        self.plants.clear()

    # -- Lookup ----------------------------------------------------------------

    def animal_at(self, location: Location) -> Animal | None:
        """Return the animal at ``location``, if any."""
        return self._animal_layer.get(location)

    def plant_at(self, location: Location) -> Plant | None:
        """Return the plant at ``location``, if any."""
        return self._plant_layer.get(location)

    def is_taken(self, location: Location) -> bool:
        """Return True if a live animal already occupies ``location``."""
        animal = self._animal_layer.get(location)
        return animal is not None and animal.alive

    def in_bounds(self, location: Location) -> bool:
        """Return True if ``location`` lies on the grid."""
        return 0 <= location.row < self.height and 0 <= location.col < self.width

    def locations(self) -> list[Location]:
        """Return every grid location in row-major order."""
        return [
            Location(row, col) for row in range(self.height) for col in range(self.width)
        ]

    # -- Spatial queries -------------------------------------------------------

    def adjacent_locations(self, location: Location, rng: Generator) -> list[Location]:
        """Return the up-to-8 neighbours of ``location`` in random order."""
        return locations_within(location, 1, self.height, self.width, rng)

    def locations_within_radius(
        self,
        location: Location,
        radius: int,
        rng: Generator,
    ) -> list[Location]:
        """Return every location within Chebyshev ``radius``, shuffled."""
        return locations_within(location, radius, self.height, self.width, rng)

    def free_adjacent_locations(
        self,
        location: Location,
        rng: Generator,
    ) -> list[Location]:
        """Return neighbours whose animal slot is empty or holds a corpse.

        The result keeps the random order of ``adjacent_locations``.
        """
        return [
            loc
            for loc in self.adjacent_locations(location, rng)
            if not self.is_taken(loc)
        ]

    # -- Aggregates ------------------------------------------------------------

    def population_counts(self) -> dict[str, int]:
        """Count live animals and plants per species name."""
        counts: Counter[str] = Counter()
        for animal in self._animal_layer.values():
            if animal.alive:
                counts[animal.species.name] += 1
        for plant in self._plant_layer.values():
            if plant.alive:
                counts[plant.species.name] += 1
        return dict(counts)

    def is_viable(self) -> bool:
        """Return True while at least two species have a live member."""
        alive: set[str] = set()
        for entity in (*self.animals, *self.plants):
            if entity.alive:
                alive.add(entity.species.name)
                if len(alive) >= 2:
                    return True
        return False
