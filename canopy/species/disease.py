"""Disease — a susceptible/infected/immune cycle carried by animals.

An infected animal progresses once per active turn: it may die, and
after ``infection_duration`` turns it recovers into a temporary immunity
that counts down back to susceptible.  Infection spreads by contact with
adjacent animals and by eating infected prey.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator


class HealthStatus(Enum):
    """Where an animal sits in the disease cycle."""

    SUSCEPTIBLE = auto()
    INFECTED = auto()
    IMMUNE = auto()


@dataclass(frozen=True)
class Disease:
    """Disease parameters shared by every animal in a run.

    Attributes:
        infection_duration: Turns spent infected before becoming immune.
        immunity_duration: Turns of immunity before becoming susceptible.
        death_probability: Chance per infected turn of dying outright.
        transmission_probability: Chance per turn of infecting each
            adjacent animal.
        breeding_penalty: Multiplier on breeding probability while
            infected.
    """

    infection_duration: int = 10
    immunity_duration: int = 20
    death_probability: float = 0.01
    transmission_probability: float = 0.05
    breeding_penalty: float = 0.4


@dataclass
class Health:
    """Per-animal disease state.

    Attributes:
        status: Current position in the cycle.
        infection_age: Turns spent infected so far.
        immunity_left: Turns of immunity remaining.
    """

    status: HealthStatus = HealthStatus.SUSCEPTIBLE
    infection_age: int = 0
    immunity_left: int = 0

    @property
    def is_infected(self) -> bool:
        return self.status is HealthStatus.INFECTED

    @property
    def is_immune(self) -> bool:
        return self.status is HealthStatus.IMMUNE

    def infect(self) -> bool:
        """Infect a susceptible animal.

        Returns:
            True if the animal was newly infected; False if it was
            already infected or immune.
        """
        if self.status is not HealthStatus.SUSCEPTIBLE:
            return False
        self.status = HealthStatus.INFECTED
        self.infection_age = 0
        return True

    def progress(self, disease: Disease, rng: Generator) -> bool:
        """Advance the cycle by one turn.

        Args:
            disease: Run-wide disease parameters.
            rng: Seeded random generator.

        Returns:
            True if the disease killed the animal this turn.
        """
        if self.status is HealthStatus.INFECTED:
            self.infection_age += 1
            if rng.random() < disease.death_probability:
                return True
            if self.infection_age >= disease.infection_duration:
                self.status = HealthStatus.IMMUNE
                self.immunity_left = disease.immunity_duration
        elif self.status is HealthStatus.IMMUNE:
            self.immunity_left -= 1
            if self.immunity_left <= 0:
                self.status = HealthStatus.SUSCEPTIBLE
                self.infection_age = 0
        return False
