"""Entity — lifecycle state shared by animals and plants.

Holds the alive flag, grid location and age.  Who eats whom is decided
entirely on the predator's side (see ``AnimalSpecies.food_values``), so
this base class knows nothing about concrete species.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from canopy.world.location import Location


@dataclass(eq=False, kw_only=True)
class Entity(ABC):
    """Something that lives on the grid.

    Compared by identity: the field stores references, and two entities
    with identical state are still distinct individuals.

    Attributes:
        location: Current grid location, None once dead.
        age: Steps lived so far.
        alive: Whether the entity is still alive.
    """

    location: Location | None
    age: int = 0
    alive: bool = True

    @property
    @abstractmethod
    def max_age(self) -> int:
        """Age beyond which the entity dies."""

    def set_dead(self) -> None:
        """Mark the entity dead and detach it from the grid."""
        self.alive = False
        self.location = None

    def increment_age(self) -> None:
        """Age by one step; die once the species maximum is exceeded."""
        self.age += 1
        if self.age > self.max_age:
            self.set_dead()
