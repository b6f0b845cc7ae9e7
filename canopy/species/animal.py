"""Animal — the shared turn state machine for every animal species.

Each step an animal runs one turn, reading only the current field and
writing only into the next one.  The phases always run in this order,
and any of them may end the turn by killing the animal:

1. **Age**: one step older; death past the species maximum.
2. **Disease progression**: infection ages, may kill, then recovers
   into a temporary immunity.
3. **Disease spread**: infected animals pass it to adjacent animals.
4. **Activity gate**: inactive animals shelter in place (or in the
   nearest free cell) and do nothing else.
5. **Hunger**: food level drops; starvation at zero.
6. **Birth**: offspring fill free cells of the next field.
7. **Feeding & movement**: eat adjacent prey or plants and move onto
   the food, otherwise wander into a free cell; no cell means death by
   overcrowding.

Birth cells are claimed in the next field before the movement pool is
computed, so a newborn and its parent never end up on the same cell.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from canopy.species.disease import Disease, Health
from canopy.species.entity import Entity

if TYPE_CHECKING:
    from numpy.random import Generator

    from canopy.species.profiles import AnimalSpecies
    from canopy.world.environment import Environment
    from canopy.world.field import Field
    from canopy.world.location import Location


class Gender(Enum):
    """Fixed at birth; matters only for mate-gated species."""

    MALE = auto()
    FEMALE = auto()


@dataclass(eq=False, kw_only=True)
class Animal(Entity):
    """A single animal.

    Attributes:
        species: Parameters of this animal's species.
        gender: Assigned once at creation.
        food_level: Turns the animal can go before starving.
        health: Disease state.
    """

    species: AnimalSpecies
    gender: Gender
    food_level: int = 0
    health: Health = field(default_factory=Health)

    @classmethod
    def spawn(
        cls,
        species: AnimalSpecies,
        location: Location,
        rng: Generator,
        *,
        random_age: bool = False,
    ) -> Animal:
        """Create an animal with a random gender and starting food level.

        Args:
            species: Species profile.
            location: Where the animal is born.
            rng: Seeded random generator.
            random_age: Start at a random age in ``0..max_age`` (used when
                seeding the world) instead of as a newborn.

        Returns:
            The new Animal, not yet placed in any field.
        """
        gender = Gender.MALE if rng.random() < 0.5 else Gender.FEMALE
        low, high = species.initial_food
        food_level = int(rng.integers(low, high))
        age = int(rng.integers(0, species.max_age + 1)) if random_age else 0
        return cls(
            species=species,
            location=location,
            gender=gender,
            food_level=food_level,
            age=age,
        )

    @property
    def max_age(self) -> int:
        return self.species.max_age

    @property
    def is_infected(self) -> bool:
        return self.health.is_infected

    @property
    def is_immune(self) -> bool:
        return self.health.is_immune

    def __repr__(self) -> str:
        return (
            f"Animal({self.species.name}, age={self.age}, alive={self.alive}, "
            f"location={self.location}, food_level={self.food_level})"
        )

    # -- Turn ------------------------------------------------------------------

    def act(
        self,
        current: Field,
        next_field: Field,
        environment: Environment,
        rng: Generator,
        disease: Disease,
    ) -> None:
        """Run one turn.

        Args:
            current: The field as it was at the start of the step (read).
            next_field: The field being built for the next step (write).
            environment: Time of day and weather for this step.
            rng: Seeded random generator.
            disease: Run-wide disease parameters.
        """
        location = self.location
        if location is None:
            return

        self.increment_age()
        if not self.alive:
            return

        if self.health.progress(disease, rng):
            self.set_dead()
            return

        if self.is_infected:
            self._spread_disease(current, location, disease, rng)

        if not self.species.is_active(self, environment):
            self._shelter(next_field, location, rng)
            return

        self._increment_hunger()
        if not self.alive:
            return

        self._give_birth(current, next_field, location, environment, rng, disease)

        free = next_field.free_adjacent_locations(location, rng)
        destination = None
        if self.is_hunting_ready:
            destination = self._find_food(current, next_field, location, environment, rng)
        if destination is None or next_field.is_taken(destination):
            destination = free.pop(0) if free else None

        if destination is None:
            # Overcrowding.
            self.set_dead()
            return
        self.location = destination
        next_field.place_animal(self, destination)

    # -- Phases ----------------------------------------------------------------

    @property
    def is_hunting_ready(self) -> bool:
        """Return True if the animal looks for food this turn."""
        if self.species.always_hungry:
            return True
        return self.food_level <= self.species.hunger_threshold

    def _increment_hunger(self) -> None:
        if not self.species.tracks_hunger:
            return
        self.food_level -= 1
        if self.food_level <= 0:
            self.set_dead()

    def _spread_disease(
        self,
        current: Field,
        location: Location,
        disease: Disease,
        rng: Generator,
    ) -> None:
        for loc in current.adjacent_locations(location, rng):
            neighbour = current.animal_at(loc)
            if neighbour is None or not neighbour.alive:
                continue
            if rng.random() < disease.transmission_probability:
                neighbour.health.infect()

    def _shelter(self, next_field: Field, location: Location, rng: Generator) -> None:
        """Stay put for the step, shifting over if the cell is taken."""
        if not next_field.is_taken(location):
            next_field.place_animal(self, location)
            return
        free = next_field.free_adjacent_locations(location, rng)
        if not free:
            # Crowded out while sheltering.
            self.set_dead()
            return
        self.location = free[0]
        next_field.place_animal(self, self.location)

    def _has_mate_nearby(self, current: Field, location: Location, rng: Generator) -> bool:
        """Look for a live opposite-gender conspecific within mate range."""
        for loc in current.locations_within_radius(
            location,
            self.species.mate_search_radius,
            rng,
        ):
            other = current.animal_at(loc)
            if (
                other is not None
                and other.alive
                and other.species.name == self.species.name
                and other.gender is not self.gender
            ):
                return True
        return False

    def litter_size(
        self,
        environment: Environment,
        rng: Generator,
        disease: Disease,
    ) -> int:
        """Draw the number of offspring this turn (may be zero)."""
        if self.age < self.species.breeding_age:
            return 0
        chance = self.species.breeding_probability * environment.breeding_factor
        if self.is_infected:
            chance *= disease.breeding_penalty
        if rng.random() >= chance:
            return 0
        return int(rng.integers(1, self.species.max_litter_size + 1))

    def _give_birth(
        self,
        current: Field,
        next_field: Field,
        location: Location,
        environment: Environment,
        rng: Generator,
        disease: Disease,
    ) -> None:
        birth_cells = next_field.free_adjacent_locations(location, rng)
        if not birth_cells:
            return
        if self.species.requires_mate and not self._has_mate_nearby(current, location, rng):
            return
        births = self.litter_size(environment, rng, disease)
        for loc in birth_cells[:births]:
            young = Animal.spawn(self.species, loc, rng)
            next_field.place_animal(young, loc)

    def _find_food(
        self,
        current: Field,
        next_field: Field,
        location: Location,
        environment: Environment,
        rng: Generator,
    ) -> Location | None:
        """Eat the first suitable adjacent prey, else the first edible plant.

        Returns:
            Where the food was, or None if nothing was eaten.
        """
        adjacent = current.adjacent_locations(location, rng)

        for loc in adjacent:
            prey = current.animal_at(loc)
            if prey is None or not prey.alive:
                continue
            value = self.species.food_value(prey.species.name)
            if value <= 0 or not self.species.can_eat(self, prey.species.name):
                continue
            if rng.random() >= environment.hunting_success_factor:
                continue
            self._eat_animal(prey, next_field, value)
            return loc

        for loc in adjacent:
            plant = current.plant_at(loc)
            if plant is None or not plant.alive or not plant.is_edible:
                continue
            value = self.species.food_value(plant.species.name)
            if value <= 0:
                continue
            plant.set_dead()
            current.clear_plant(loc)
            self.food_level = value
            return loc

        return None

    def _eat_animal(self, prey: Animal, next_field: Field, value: int) -> None:
        # Prey that already took its turn is registered in the next field.
        if prey.location is not None and next_field.animal_at(prey.location) is prey:
            next_field.clear_animal(prey.location)
        prey.set_dead()
        self.food_level = value
        if prey.is_infected:
            self.health.infect()
