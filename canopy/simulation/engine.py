"""SimulationEngine — the main step loop.

Owns all top-level simulation state and advances it one step at a time:

1. Advance the environment (time of day, weather)
2. Allocate an empty next field
3. Run every live animal's turn, reading the current field
4. Run every live plant's turn, reading the current field
5. Replace the current field with the next one

Entities only ever write into the next field, so the order in which they
are processed does not change what any of them sees.  The one deliberate
exception is the "is this destination already taken" check against the
next field: the first animal to claim a cell keeps it.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

import numpy as np
from numpy.random import Generator

from canopy.simulation.config import SimulationConfig
from canopy.species.animal import Animal
from canopy.species.catalog import ANIMAL_SPECIES, PLANT_SPECIES
from canopy.species.plant import Plant
from canopy.world.environment import Environment, select_bucket
from canopy.world.field import Field

logger = logging.getLogger("canopy.engine")


@dataclass
class SimulationEngine:
    """Drives the simulation forward step by step.

    Attributes:
        config: Loaded simulation configuration.
        field: The current field (read-only while a step runs).
        environment: Time of day and weather.
        rng: Master seeded random generator.
        tick: Steps completed so far.
    """

    config: SimulationConfig
    field: Field = dataclasses.field(init=False)
    environment: Environment = dataclasses.field(init=False)
    rng: Generator = dataclasses.field(init=False)
    tick: int = 0

    def __post_init__(self) -> None:
        """Build the RNG, environment and a freshly seeded field."""
        self.rng = np.random.default_rng(self.config.seed)
        self.environment = Environment(
            day_length=self.config.day_length,
            weather_change_steps=self.config.weather_change_steps,
        )
        self.field = Field(
            height=self.config.world_height,
            width=self.config.world_width,
        )
        self.populate()

    def populate(self) -> None:
        """Randomly seed every cell with at most one plant and one animal.

        For each cell, one roll picks a plant species and a second roll
        picks an animal species from the configured seeding tables.
        """
        plant_species = [PLANT_SPECIES[name] for name in self.config.plant_seeding]
        plant_weights = list(self.config.plant_seeding.values())
        animal_species = [ANIMAL_SPECIES[name] for name in self.config.animal_seeding]
        animal_weights = list(self.config.animal_seeding.values())

        self.field.clear()
        for location in self.field.locations():
            index = select_bucket(float(self.rng.random()), plant_weights)
            if index is not None:
                plant = Plant.spawn(
                    plant_species[index],
                    location,
                    self.rng,
                    random_age=True,
                )
                self.field.place_plant(plant, location)

            index = select_bucket(float(self.rng.random()), animal_weights)
            if index is not None:
                animal = Animal.spawn(
                    animal_species[index],
                    location,
                    self.rng,
                    random_age=True,
                )
                if self.rng.random() < self.config.initial_infection_probability:
                    animal.health.infect()
                self.field.place_animal(animal, location)

        logger.info(
            "seeded %dx%d field: %s",
            self.field.height,
            self.field.width,
            self.field.population_counts(),
        )

    def step(self) -> None:
        """Advance the simulation by one step."""
        self.environment.advance(self.rng)
        next_field = Field(height=self.field.height, width=self.field.width)

        for animal in list(self.field.animals):
            if animal.alive:
                animal.act(
                    self.field,
                    next_field,
                    self.environment,
                    self.rng,
                    self.config.disease,
                )

        for plant in list(self.field.plants):
            if plant.alive:
                plant.act(self.field, next_field, self.environment, self.rng)

        self.field = next_field
        self.tick += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "step %d (%s): %s",
                self.tick,
                self.environment.label,
                self.field.population_counts(),
            )

    def run(self, ticks: int) -> int:
        """Run for up to ``ticks`` steps, stopping once the field is not viable.

        Args:
            ticks: Maximum number of steps to advance.

        Returns:
            Number of steps actually performed.
        """
        performed = 0
        for _ in range(ticks):
            if not self.field.is_viable():
                logger.info("field no longer viable after %d steps", self.tick)
                break
            self.step()
            performed += 1
        return performed
