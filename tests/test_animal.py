"""Tests for canopy.species.animal — the shared animal turn."""

from __future__ import annotations

import dataclasses

import pytest
from numpy.random import Generator

from canopy.species.animal import Animal, Gender
from canopy.species.catalog import ANIMAL_SPECIES, CAPYBARA, FERN, HARPY_EAGLE, JAGUAR
from canopy.species.disease import Disease
from canopy.species.entity import Entity
from canopy.species.plant import Plant
from canopy.species.profiles import AnimalSpecies
from canopy.world.environment import Environment, Weather
from canopy.world.field import Field
from canopy.world.location import Location

HEALTHY = Disease(death_probability=0.0, transmission_probability=0.0)


def _always_active(animal: Animal, environment: Environment) -> bool:
    return True


AGOUTI = AnimalSpecies(
    name="agouti",
    max_age=10,
    breeding_age=100,
    breeding_probability=0.0,
    max_litter_size=1,
    initial_food=(5, 6),
    is_active=_always_active,
)

BREEDER = dataclasses.replace(
    AGOUTI,
    name="breeder",
    breeding_age=0,
    breeding_probability=1.0,
    max_litter_size=1,
)

OCELOT = AnimalSpecies(
    name="ocelot",
    max_age=100,
    breeding_age=100,
    breeding_probability=0.0,
    max_litter_size=1,
    food_values={"agouti": 7},
    always_hungry=True,
    initial_food=(5, 6),
    is_active=_always_active,
)


def _put(
    field: Field,
    species: AnimalSpecies,
    row: int,
    col: int,
    *,
    food_level: int = 5,
    gender: Gender = Gender.FEMALE,
) -> Animal:
    loc = Location(row, col)
    animal = Animal(species=species, location=loc, gender=gender, food_level=food_level)
    field.place_animal(animal, loc)
    return animal


class TestSpawn:
    """Tests for creating new animals."""

    def test_newborn(self, rng: Generator) -> None:
        animal = Animal.spawn(CAPYBARA, Location(1, 1), rng)
        assert animal.age == 0
        assert animal.alive
        assert 6 <= animal.food_level < 18
        assert isinstance(animal.gender, Gender)

    def test_random_age_within_lifespan(self, rng: Generator) -> None:
        ages = {
            Animal.spawn(CAPYBARA, Location(0, 0), rng, random_age=True).age
            for _ in range(200)
        }
        assert min(ages) >= 0
        assert max(ages) <= CAPYBARA.max_age
        assert len(ages) > 1

    def test_both_genders_occur(self, rng: Generator) -> None:
        genders = {Animal.spawn(CAPYBARA, Location(0, 0), rng).gender for _ in range(50)}
        assert genders == {Gender.MALE, Gender.FEMALE}


class TestAging:
    """Tests for the age phase."""

    def test_age_increments_by_one(
        self,
        small_field: Field,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        animal = _put(small_field, AGOUTI, 3, 3, food_level=50)
        for expected in range(1, 6):
            next_field = Field(height=8, width=8)
            animal.act(small_field, next_field, daytime, rng, HEALTHY)
            assert animal.age == expected
            small_field = next_field

    def test_dies_exactly_past_max_age(
        self,
        small_field: Field,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        animal = _put(small_field, AGOUTI, 3, 3, food_level=50)
        animal.age = AGOUTI.max_age - 1

        next_field = Field(height=8, width=8)
        animal.act(small_field, next_field, daytime, rng, HEALTHY)
        assert animal.alive
        assert animal.age == AGOUTI.max_age

        small_field, next_field = next_field, Field(height=8, width=8)
        animal.act(small_field, next_field, daytime, rng, HEALTHY)
        assert not animal.alive
        assert animal.location is None
        assert next_field.animals == []

    def test_dead_animal_does_nothing(
        self,
        next_field: Field,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        animal = Animal(species=AGOUTI, location=Location(0, 0), gender=Gender.MALE)
        animal.set_dead()
        animal.act(Field(height=8, width=8), next_field, daytime, rng, HEALTHY)
        assert animal.age == 0
        assert next_field.animals == []

    def test_entity_base_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            Entity(location=Location(0, 0))  # type: ignore[abstract]


class TestHunger:
    """Tests for starvation."""

    def test_starves_after_one_step(
        self,
        small_field: Field,
        next_field: Field,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        animal = _put(small_field, AGOUTI, 3, 3, food_level=1)
        animal.act(small_field, next_field, daytime, rng, HEALTHY)
        assert animal.food_level == 0
        assert not animal.alive
        assert next_field.animals == []

    def test_hunger_drops_by_one(
        self,
        small_field: Field,
        next_field: Field,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        animal = _put(small_field, AGOUTI, 3, 3, food_level=4)
        animal.act(small_field, next_field, daytime, rng, HEALTHY)
        assert animal.food_level == 3
        assert animal.alive

    def test_untracked_hunger(
        self,
        small_field: Field,
        next_field: Field,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        species = dataclasses.replace(AGOUTI, tracks_hunger=False)
        animal = _put(small_field, species, 3, 3, food_level=1)
        animal.act(small_field, next_field, daytime, rng, HEALTHY)
        assert animal.alive
        assert animal.food_level == 1


class TestActivityGate:
    """Tests for sheltering when inactive."""

    def test_shelters_in_place_at_night(
        self,
        small_field: Field,
        next_field: Field,
        nighttime: Environment,
        rng: Generator,
    ) -> None:
        animal = _put(small_field, CAPYBARA, 3, 3, food_level=1)
        animal.act(small_field, next_field, nighttime, rng, HEALTHY)
        assert animal.alive
        assert animal.location == Location(3, 3)
        assert next_field.animal_at(Location(3, 3)) is animal
        # Sheltering animals do not get hungrier.
        assert animal.food_level == 1

    def test_shelters_during_storm(
        self,
        small_field: Field,
        next_field: Field,
        rng: Generator,
    ) -> None:
        storm = Environment(step_in_day=12, weather=Weather.STORMY)
        animal = _put(small_field, CAPYBARA, 3, 3)
        animal.act(small_field, next_field, storm, rng, HEALTHY)
        assert next_field.animal_at(Location(3, 3)) is animal

    def test_shelter_shifts_when_cell_taken(
        self,
        small_field: Field,
        next_field: Field,
        nighttime: Environment,
        rng: Generator,
    ) -> None:
        animal = _put(small_field, CAPYBARA, 3, 3)
        occupant = _put(next_field, CAPYBARA, 3, 3)
        animal.act(small_field, next_field, nighttime, rng, HEALTHY)
        assert animal.alive
        assert animal.location != Location(3, 3)
        assert next_field.animal_at(Location(3, 3)) is occupant
        assert next_field.animal_at(animal.location) is animal

    def test_crowded_out_while_sheltering(
        self,
        nighttime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=1)
        next_field = Field(height=1, width=1)
        animal = _put(current, CAPYBARA, 0, 0)
        _put(next_field, CAPYBARA, 0, 0)
        animal.act(current, next_field, nighttime, rng, HEALTHY)
        assert not animal.alive

    def test_jaguar_hunts_at_night(
        self,
        nighttime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        jaguar = _put(current, JAGUAR, 0, 0)
        capybara = _put(current, CAPYBARA, 0, 1)

        jaguar.act(current, next_field, nighttime, rng, HEALTHY)

        assert not capybara.alive
        assert jaguar.location == Location(0, 1)
        assert jaguar.food_level == JAGUAR.food_value(CAPYBARA.name)
        assert next_field.animals == [jaguar]

    def test_jaguar_shelters_in_storm(
        self,
        rng: Generator,
    ) -> None:
        storm_night = Environment(step_in_day=0, weather=Weather.STORMY)
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        jaguar = _put(current, JAGUAR, 0, 0)
        capybara = _put(current, CAPYBARA, 0, 1)

        jaguar.act(current, next_field, storm_night, rng, HEALTHY)

        assert capybara.alive
        assert jaguar.location == Location(0, 0)
        assert jaguar.food_level == 5
        assert next_field.animals == [jaguar]


class TestMovement:
    """Tests for wandering and overcrowding."""

    def test_moves_to_adjacent_cell(
        self,
        small_field: Field,
        next_field: Field,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        animal = _put(small_field, AGOUTI, 3, 3)
        animal.act(small_field, next_field, daytime, rng, HEALTHY)
        assert animal.alive
        assert animal.location is not None
        assert max(abs(animal.location.row - 3), abs(animal.location.col - 3)) == 1
        assert next_field.animals == [animal]

    def test_dies_when_no_cell_is_free(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=1)
        next_field = Field(height=1, width=1)
        animal = _put(current, AGOUTI, 0, 0)
        animal.act(current, next_field, daytime, rng, HEALTHY)
        assert not animal.alive
        assert next_field.animals == []


class TestBirth:
    """Tests for breeding and the birth/movement reservation pools."""

    def test_parent_still_moves_with_two_free_cells(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=3)
        next_field = Field(height=1, width=3)
        parent = _put(current, BREEDER, 0, 1)

        parent.act(current, next_field, daytime, rng, HEALTHY)

        assert parent.alive
        assert len(next_field.animals) == 2
        young = next(a for a in next_field.animals if a is not parent)
        assert young.age == 0
        assert {parent.location, young.location} == {Location(0, 0), Location(0, 2)}

    def test_litter_capped_by_free_cells(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        species = dataclasses.replace(BREEDER, max_litter_size=8)
        current = Field(height=3, width=3)
        next_field = Field(height=3, width=3)
        parent = _put(current, species, 1, 1)

        parent.act(current, next_field, daytime, rng, HEALTHY)

        locations = [a.location for a in next_field.animals]
        assert len(locations) == len(set(locations))
        assert len(locations) <= 9

    def test_too_young_to_breed(
        self,
        small_field: Field,
        next_field: Field,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        species = dataclasses.replace(BREEDER, breeding_age=5)
        parent = _put(small_field, species, 3, 3)
        parent.act(small_field, next_field, daytime, rng, HEALTHY)
        assert next_field.animals == [parent]

    def test_storm_prevents_births(self, rng: Generator) -> None:
        storm = Environment(step_in_day=12, weather=Weather.STORMY)
        for _ in range(50):
            current = Field(height=5, width=5)
            next_field = Field(height=5, width=5)
            parent = _put(current, BREEDER, 2, 2, food_level=50)
            parent.act(current, next_field, storm, rng, HEALTHY)
            assert next_field.animals == [parent]

    def test_litter_size_zero_in_storm(self, rng: Generator) -> None:
        storm = Environment(weather=Weather.STORMY)
        parent = Animal(species=BREEDER, location=Location(0, 0), gender=Gender.MALE)
        assert all(parent.litter_size(storm, rng, HEALTHY) == 0 for _ in range(500))

    def test_infection_suppresses_breeding(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        parent = Animal(species=BREEDER, location=Location(0, 0), gender=Gender.MALE)
        parent.health.infect()
        births = sum(parent.litter_size(daytime, rng, HEALTHY) for _ in range(400))
        assert 0 < births < 400

    def test_requires_mate_without_partner(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        species = dataclasses.replace(BREEDER, requires_mate=True, mate_search_radius=2)
        current = Field(height=1, width=5)
        next_field = Field(height=1, width=5)
        parent = _put(current, species, 0, 2, gender=Gender.FEMALE)
        _put(current, species, 0, 0, gender=Gender.FEMALE)

        parent.act(current, next_field, daytime, rng, HEALTHY)

        assert next_field.animals == [parent]

    def test_requires_mate_with_partner(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        species = dataclasses.replace(BREEDER, requires_mate=True, mate_search_radius=2)
        current = Field(height=1, width=5)
        next_field = Field(height=1, width=5)
        parent = _put(current, species, 0, 2, gender=Gender.FEMALE)
        _put(current, species, 0, 0, gender=Gender.MALE)

        parent.act(current, next_field, daytime, rng, HEALTHY)

        assert len(next_field.animals) == 2
        assert parent in next_field.animals

    def test_mate_out_of_range(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        species = dataclasses.replace(BREEDER, requires_mate=True, mate_search_radius=1)
        current = Field(height=1, width=5)
        next_field = Field(height=1, width=5)
        parent = _put(current, species, 0, 2, gender=Gender.FEMALE)
        _put(current, species, 0, 0, gender=Gender.MALE)

        parent.act(current, next_field, daytime, rng, HEALTHY)

        assert next_field.animals == [parent]

    def test_catalog_species_breed_without_mate(self) -> None:
        assert not any(species.requires_mate for species in ANIMAL_SPECIES.values())

    def test_lone_capybara_gives_birth(
        self,
        small_field: Field,
        next_field: Field,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        species = dataclasses.replace(CAPYBARA, breeding_probability=1.0)
        parent = _put(small_field, species, 3, 3, food_level=20)
        parent.age = species.breeding_age

        parent.act(small_field, next_field, daytime, rng, HEALTHY)

        assert len(next_field.animals) == 2
        assert parent in next_field.animals


class TestFeeding:
    """Tests for predation and grazing."""

    def test_predator_eats_adjacent_prey(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        ocelot = _put(current, OCELOT, 0, 0, food_level=3)
        prey = _put(current, AGOUTI, 0, 1)

        ocelot.act(current, next_field, daytime, rng, HEALTHY)

        assert not prey.alive
        assert ocelot.location == Location(0, 1)
        assert ocelot.food_level == 7
        assert next_field.animals == [ocelot]

    def test_eaten_prey_removed_from_next_field(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=3)
        next_field = Field(height=1, width=3)
        ocelot = _put(current, OCELOT, 0, 0)
        prey = _put(current, AGOUTI, 0, 1)
        # The prey already took its turn and stayed put.
        next_field.place_animal(prey, Location(0, 1))

        ocelot.act(current, next_field, daytime, rng, HEALTHY)

        assert not prey.alive
        assert next_field.animals == [ocelot]
        assert all(animal.alive for animal in next_field.animals)

    def test_predator_catches_infection(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        ocelot = _put(current, OCELOT, 0, 0)
        prey = _put(current, AGOUTI, 0, 1)
        prey.health.infect()

        ocelot.act(current, next_field, daytime, rng, HEALTHY)

        assert ocelot.is_infected

    def test_no_kill_without_hunting_success(self, rng: Generator) -> None:
        # Always-active species ignore the storm, but hunting still fails.
        storm = Environment(step_in_day=12, weather=Weather.STORMY)
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        ocelot = _put(current, OCELOT, 0, 0, food_level=3)
        prey = _put(current, AGOUTI, 0, 1)

        ocelot.act(current, next_field, storm, rng, HEALTHY)

        assert prey.alive
        assert ocelot.food_level == 2

    def test_falls_back_when_food_cell_taken(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=3)
        next_field = Field(height=1, width=3)
        ocelot = _put(current, OCELOT, 0, 1)
        prey = _put(current, AGOUTI, 0, 2)
        blocker = _put(next_field, OCELOT, 0, 2)

        ocelot.act(current, next_field, daytime, rng, HEALTHY)

        assert not prey.alive
        assert ocelot.alive
        assert ocelot.location == Location(0, 0)
        assert next_field.animal_at(Location(0, 2)) is blocker

    def test_not_prey_is_ignored(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        ocelot = _put(current, OCELOT, 0, 0)
        other = _put(current, OCELOT, 0, 1)

        ocelot.act(current, next_field, daytime, rng, HEALTHY)

        assert other.alive

    @pytest.mark.parametrize(
        ("food_level", "eats"),
        [(8, False), (4, True)],
    )
    def test_eagle_takes_capybara_only_when_hungry(
        self,
        daytime: Environment,
        rng: Generator,
        food_level: int,
        eats: bool,
    ) -> None:
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        eagle = _put(current, HARPY_EAGLE, 0, 0, food_level=food_level)
        capybara = _put(current, CAPYBARA, 0, 1)

        eagle.act(current, next_field, daytime, rng, HEALTHY)

        assert capybara.alive is not eats

    def test_herbivore_grazes_mature_plant(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        capybara = _put(current, CAPYBARA, 0, 0, food_level=3)
        fern = Plant(species=FERN, location=Location(0, 1), age=FERN.maturity_age)
        current.place_plant(fern, Location(0, 1))

        capybara.act(current, next_field, daytime, rng, HEALTHY)

        assert not fern.alive
        assert current.plant_at(Location(0, 1)) is None
        assert capybara.food_level == 12
        assert capybara.location == Location(0, 1)

    def test_immature_plant_not_eaten(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        capybara = _put(current, CAPYBARA, 0, 0, food_level=3)
        fern = Plant(species=FERN, location=Location(0, 1), age=0)
        current.place_plant(fern, Location(0, 1))

        capybara.act(current, next_field, daytime, rng, HEALTHY)

        assert fern.alive
        assert capybara.food_level == 2

    def test_well_fed_herbivore_does_not_graze(
        self,
        daytime: Environment,
        rng: Generator,
    ) -> None:
        current = Field(height=1, width=2)
        next_field = Field(height=1, width=2)
        capybara = _put(current, CAPYBARA, 0, 0, food_level=12)
        fern = Plant(species=FERN, location=Location(0, 1), age=FERN.maturity_age)
        current.place_plant(fern, Location(0, 1))

        capybara.act(current, next_field, daytime, rng, HEALTHY)

        assert fern.alive
        assert capybara.food_level == 11
