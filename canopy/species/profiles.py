"""Species profiles — the data that tells one species from another.

Every animal runs the same turn (``Animal.act``) and every plant the same
spreading rule (``Plant.act``).  Species differ only through the records
below: numeric parameters, a food-value table kept on the predator's
side, and a couple of named predicate hooks.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from canopy.species.animal import Animal
    from canopy.world.environment import Environment

ActivityHook = Callable[["Animal", "Environment"], bool]
EligibilityHook = Callable[["Animal", str], bool]


def active_in_daylight(animal: Animal, environment: Environment) -> bool:
    """Default activity: move in daylight unless a storm forces shelter."""
    return environment.is_daylight and environment.allows_movement


def active_any_hour(animal: Animal, environment: Environment) -> bool:
    """Activity for species that hunt through the night."""
    return environment.allows_movement


def eats_anything_listed(animal: Animal, prey: str) -> bool:
    """Default eligibility: any species with a positive food value."""
    return True


@dataclass(frozen=True, eq=False)
class AnimalSpecies:
    """Parameters shared by every animal of one species.

    Attributes:
        name: Species identity used by food tables, counts and mating.
        max_age: Age beyond which the animal dies.
        breeding_age: Minimum age for giving birth.
        breeding_probability: Base chance per active turn of a litter.
        max_litter_size: Largest litter; sizes are uniform in 1..max.
        food_values: Prey species name -> food level gained (0 = not prey).
        hunger_threshold: Food level at or below which the animal looks
            for food.
        always_hungry: Hunt every turn regardless of food level.
        tracks_hunger: Whether food level drops each active turn.
        requires_mate: Breeding needs an opposite-gender conspecific
            within ``mate_search_radius``.
        mate_search_radius: Chebyshev radius of the mate search.
        initial_food: ``(low, high)`` range, high exclusive, for the
            food level of new animals.
        is_active: Hook deciding whether the animal acts or shelters.
        can_eat: Hook for conditional prey, called with the prey name.
    """

    name: str
    max_age: int
    breeding_age: int
    breeding_probability: float
    max_litter_size: int
    food_values: Mapping[str, int] = field(default_factory=dict)
    hunger_threshold: int = 0
    always_hungry: bool = False
    tracks_hunger: bool = True
    requires_mate: bool = False
    mate_search_radius: int = 2
    initial_food: tuple[int, int] = (1, 2)
    is_active: ActivityHook = active_in_daylight
    can_eat: EligibilityHook = eats_anything_listed

    def food_value(self, prey: str) -> int:
        """Return the food level gained by eating ``prey``."""
        return self.food_values.get(prey, 0)


@dataclass(frozen=True, eq=False)
class PlantSpecies:
    """Parameters shared by every plant of one species.

    Attributes:
        name: Species identity.
        max_age: Age beyond which the plant dies.
        maturity_age: Age from which the plant is edible and spreads.
        spread_probability: Base chance of seeding each candidate cell.
        max_offspring: Hard cap on offspring per step.
        requires_daylight: Only spread during daylight.
    """

    name: str
    max_age: int
    maturity_age: int
    spread_probability: float
    max_offspring: int
    requires_daylight: bool = False
