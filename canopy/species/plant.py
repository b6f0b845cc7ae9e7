"""Plant — stationary producers that mature and spread into free cells."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from canopy.species.entity import Entity

if TYPE_CHECKING:
    from numpy.random import Generator

    from canopy.species.profiles import PlantSpecies
    from canopy.world.environment import Environment
    from canopy.world.field import Field
    from canopy.world.location import Location


@dataclass(eq=False, kw_only=True)
class Plant(Entity):
    """A single plant.

    Attributes:
        species: Parameters of this plant's species.
    """

    species: PlantSpecies

    @classmethod
    def spawn(
        cls,
        species: PlantSpecies,
        location: Location,
        rng: Generator,
        *,
        random_age: bool = False,
    ) -> Plant:
        """Create a plant, optionally at a random age in ``0..max_age``."""
        age = int(rng.integers(0, species.max_age + 1)) if random_age else 0
        return cls(species=species, location=location, age=age)

    @property
    def max_age(self) -> int:
        return self.species.max_age

    @property
    def is_edible(self) -> bool:
        """Return True once the plant has reached maturity."""
        return self.age >= self.species.maturity_age

    def __repr__(self) -> str:
        return (
            f"Plant({self.species.name}, age={self.age}, alive={self.alive}, "
            f"location={self.location})"
        )

    def act(
        self,
        current: Field,
        next_field: Field,
        environment: Environment,
        rng: Generator,
    ) -> None:
        """Age, carry over into the next field, and maybe spread.

        Args:
            current: The field as it was at the start of the step (read).
            next_field: The field being built for the next step (write).
            environment: Time of day and weather for this step.
            rng: Seeded random generator.
        """
        location = self.location
        if location is None:
            return

        self.increment_age()
        if not self.alive:
            return
        next_field.place_plant(self, location)
        self._spread(current, next_field, location, environment, rng)

    def _spread(
        self,
        current: Field,
        next_field: Field,
        location: Location,
        environment: Environment,
        rng: Generator,
    ) -> int:
        """Seed free neighbouring cells; returns the number of offspring."""
        if not self.is_edible:
            return 0
        if self.species.requires_daylight and not environment.is_daylight:
            return 0

        chance = self.species.spread_probability * environment.plant_growth_factor
        placed = 0
        for loc in next_field.free_adjacent_locations(location, rng):
            if placed >= self.species.max_offspring:
                break
            rooted = current.plant_at(loc)
            if (rooted is not None and rooted.alive) or next_field.plant_at(loc) is not None:
                continue
            if rng.random() < chance:
                next_field.place_plant(Plant.spawn(self.species, loc, rng), loc)
                placed += 1
        return placed
