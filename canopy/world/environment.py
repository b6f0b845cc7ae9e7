"""Environment — time of day and weather.

Advanced first in each simulation step so that every animal and plant
reacts to the same time phase and weather.  Entities never look at the
raw weather condition for rate decisions: they read the growth, hunting
and breeding multipliers exposed here.

One in-game day is split into phases on a 24-hour clock scaled to
``day_length`` steps::

    hours  0-4   NIGHT
    hours  5-6   DAWN
    hours  7-17  DAY
    hours 18-19  DUSK
    hours 20-23  NIGHT

Weather is redrawn at the configured step(s) of each day and held
constant in between.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

logger = logging.getLogger("canopy.environment")

HOURS_PER_DAY = 24


class TimePhase(Enum):
    """Part of the day, in cyclic order."""

    NIGHT = "Night"
    DAWN = "Dawn"
    DAY = "Day"
    DUSK = "Dusk"

    @property
    def label(self) -> str:
        return self.value


class Weather(Enum):
    """Weather condition, held constant between daily draws."""

    SUNNY = "Sunny"
    RAINY = "Rainy"
    FOGGY = "Foggy"
    STORMY = "Storm"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class WeatherEffects:
    """Rate multipliers applied while a weather condition holds.

    Attributes:
        plant_growth: Scales plant spreading probability.
        hunting_success: Upper bound of the predator success roll.
        breeding: Scales animal breeding probability.
    """

    plant_growth: float
    hunting_success: float
    breeding: float


# Daily probability of each condition, in Weather declaration order.
WEATHER_PROBABILITIES: dict[Weather, float] = {
    Weather.SUNNY: 0.45,
    Weather.RAINY: 0.30,
    Weather.FOGGY: 0.15,
    Weather.STORMY: 0.10,
}

WEATHER_EFFECTS: dict[Weather, WeatherEffects] = {
    Weather.SUNNY: WeatherEffects(plant_growth=1.0, hunting_success=1.0, breeding=1.0),
    Weather.RAINY: WeatherEffects(plant_growth=1.7, hunting_success=0.65, breeding=0.8),
    Weather.FOGGY: WeatherEffects(plant_growth=0.85, hunting_success=0.30, breeding=0.9),
    Weather.STORMY: WeatherEffects(plant_growth=0.3, hunting_success=0.0, breeding=0.0),
}

# (first hour of phase, phase), ascending.
_PHASE_STARTS: tuple[tuple[int, TimePhase], ...] = (
    (0, TimePhase.NIGHT),
    (5, TimePhase.DAWN),
    (7, TimePhase.DAY),
    (18, TimePhase.DUSK),
    (20, TimePhase.NIGHT),
)


def select_bucket(roll: float, weights: Sequence[float]) -> int | None:
    """Walk a cumulative distribution and return the bucket ``roll`` lands in.

    Args:
        roll: A uniform draw in ``[0, 1)``.
        weights: Per-bucket probability mass, in order.

    Returns:
        Index of the first bucket whose cumulative mass exceeds ``roll``,
        or None if ``roll`` lies beyond the total mass.
    """
    cumulative = 0.0
    for index, weight in enumerate(weights):
        cumulative += weight
        if roll < cumulative:
            return index
    return None


def draw_weather(rng: Generator) -> Weather:
    """Draw a weather condition from ``WEATHER_PROBABILITIES``.

    Falls back to the last condition if rounding leaves the cumulative
    mass a hair below 1.0.
    """
    conditions = list(WEATHER_PROBABILITIES)
    index = select_bucket(float(rng.random()), list(WEATHER_PROBABILITIES.values()))
    if index is None:
        return conditions[-1]
    return conditions[index]


def phase_for(step_in_day: int, day_length: int) -> TimePhase:
    """Return the time phase for a step within a day of ``day_length`` steps."""
    hour = step_in_day * HOURS_PER_DAY // day_length
    phase = TimePhase.NIGHT
    for start, candidate in _PHASE_STARTS:
        if hour >= start:
            phase = candidate
    return phase


@dataclass
class Environment:
    """Global time/weather state that changes once per step.

    Attributes:
        step: Steps advanced since the start of the run.
        step_in_day: Position within the current day, ``0..day_length-1``.
        phase: Current time phase.
        weather: Current weather condition.
        day_length: Steps in a full day/night cycle.
        weather_change_steps: Steps of the day at which weather is redrawn.
    """

    step: int = 0
    step_in_day: int = 0
    phase: TimePhase = TimePhase.NIGHT
    weather: Weather = Weather.SUNNY
    day_length: int = HOURS_PER_DAY
    weather_change_steps: tuple[int, ...] = (0,)

    def __post_init__(self) -> None:
        if self.day_length <= 0:
            msg = f"day_length must be positive, got {self.day_length}"
            raise ValueError(msg)
        self.phase = phase_for(self.step_in_day, self.day_length)

    # -- Derived queries -------------------------------------------------------

    @property
    def effects(self) -> WeatherEffects:
        return WEATHER_EFFECTS[self.weather]

    @property
    def is_daylight(self) -> bool:
        """Return True during dawn, day and dusk."""
        return self.phase is not TimePhase.NIGHT

    @property
    def allows_movement(self) -> bool:
        """Return False while animals shelter from a storm."""
        return self.weather is not Weather.STORMY

    @property
    def plant_growth_factor(self) -> float:
        return self.effects.plant_growth

    @property
    def hunting_success_factor(self) -> float:
        return self.effects.hunting_success

    @property
    def breeding_factor(self) -> float:
        return self.effects.breeding

    @property
    def label(self) -> str:
        """Short status string for displays, e.g. ``"Dawn  Rainy"``."""
        return f"{self.phase.label}  {self.weather.label}"

    # -- Update ----------------------------------------------------------------

    def advance(self, rng: Generator) -> None:
        """Advance time by one step, redrawing weather at day boundaries.

        Args:
            rng: Seeded random generator.
        """
        self.step += 1
        self.step_in_day = self.step % self.day_length
        self.phase = phase_for(self.step_in_day, self.day_length)

        if self.step_in_day in self.weather_change_steps:
            previous = self.weather
            self.weather = draw_weather(rng)
            if self.weather is not previous:
                logger.debug(
                    "step %d: weather %s -> %s",
                    self.step,
                    previous.label,
                    self.weather.label,
                )
