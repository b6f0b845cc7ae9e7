"""Shared fixtures for the Canopy test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from canopy.simulation.config import SimulationConfig
from canopy.world.environment import Environment, Weather
from canopy.world.field import Field


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_field() -> Field:
    """An empty 8x8 field for fast tests."""
    return Field(height=8, width=8)


@pytest.fixture
def next_field() -> Field:
    """An empty 8x8 field standing in for the next step's buffer."""
    return Field(height=8, width=8)


@pytest.fixture
def daytime() -> Environment:
    """Midday, sunny weather."""
    return Environment(step_in_day=12, weather=Weather.SUNNY)


@pytest.fixture
def nighttime() -> Environment:
    """Midnight, sunny weather."""
    return Environment(step_in_day=0, weather=Weather.SUNNY)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default configuration on a small grid (no YAML file needed)."""
    return SimulationConfig(world_width=16, world_height=16)
