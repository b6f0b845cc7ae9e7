"""Catalog — the rainforest species.

Two plants on the forest floor and canopy, two herbivores that graze
them, and two apex predators.  Configuration refers to species by the
names registered here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from canopy.species.profiles import AnimalSpecies, PlantSpecies, active_any_hour

if TYPE_CHECKING:
    from canopy.species.animal import Animal

# -- Plants ------------------------------------------------------------------

FERN = PlantSpecies(
    name="fern",
    max_age=80,
    maturity_age=10,
    spread_probability=0.30,
    max_offspring=5,
)

# Fruit trees release seeds only in sunlight.
FRUIT_TREE = PlantSpecies(
    name="fruit_tree",
    max_age=150,
    maturity_age=8,
    spread_probability=0.25,
    max_offspring=5,
    requires_daylight=True,
)

# -- Herbivores --------------------------------------------------------------

_FERN_FOOD_VALUE = 12
_FRUIT_FOOD_VALUE = 14

CAPYBARA = AnimalSpecies(
    name="capybara",
    max_age=80,
    breeding_age=5,
    breeding_probability=0.10,
    max_litter_size=1,
    food_values={FERN.name: _FERN_FOOD_VALUE},
    hunger_threshold=_FERN_FOOD_VALUE // 2,
    mate_search_radius=10,
    initial_food=(6, 6 + _FERN_FOOD_VALUE),
)

HOWLER_MONKEY = AnimalSpecies(
    name="howler_monkey",
    max_age=80,
    breeding_age=4,
    breeding_probability=0.14,
    max_litter_size=1,
    food_values={FRUIT_TREE.name: _FRUIT_FOOD_VALUE},
    hunger_threshold=_FRUIT_FOOD_VALUE // 2,
    mate_search_radius=10,
    initial_food=(4, 4 + _FRUIT_FOOD_VALUE),
)

# -- Apex predators ----------------------------------------------------------

_APEX_MAX_AGE = 150
_APEX_BREEDING_AGE = 7
_APEX_MATE_RADIUS = 20
_JAGUAR_PREY_VALUE = 14
_EAGLE_PREY_VALUE = 9


def _eagle_can_eat(eagle: Animal, prey: str) -> bool:
    """Eagles take capybara only when below half of a meal."""
    if prey == CAPYBARA.name:
        return eagle.food_level * 2 < _EAGLE_PREY_VALUE
    return True


JAGUAR = AnimalSpecies(
    name="jaguar",
    max_age=_APEX_MAX_AGE,
    breeding_age=_APEX_BREEDING_AGE,
    breeding_probability=0.10,
    max_litter_size=1,
    food_values={CAPYBARA.name: _JAGUAR_PREY_VALUE},
    always_hungry=True,
    mate_search_radius=_APEX_MATE_RADIUS,
    initial_food=(7, 14),
    is_active=active_any_hour,
)

HARPY_EAGLE = AnimalSpecies(
    name="harpy_eagle",
    max_age=_APEX_MAX_AGE,
    breeding_age=_APEX_BREEDING_AGE,
    breeding_probability=0.05,
    max_litter_size=1,
    food_values={
        HOWLER_MONKEY.name: _EAGLE_PREY_VALUE,
        CAPYBARA.name: _EAGLE_PREY_VALUE,
    },
    always_hungry=True,
    mate_search_radius=_APEX_MATE_RADIUS,
    initial_food=(7, 14),
    can_eat=_eagle_can_eat,
)

PLANT_SPECIES: dict[str, PlantSpecies] = {
    species.name: species for species in (FERN, FRUIT_TREE)
}

ANIMAL_SPECIES: dict[str, AnimalSpecies] = {
    species.name: species
    for species in (CAPYBARA, HOWLER_MONKEY, JAGUAR, HARPY_EAGLE)
}
