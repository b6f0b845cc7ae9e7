"""Read-only views of a field for reporting and rendering.

Nothing here mutates the engine.  Counts are computed fresh on every call
rather than maintained incrementally.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from canopy.world.field import Field
    from canopy.world.location import Location


@dataclass(frozen=True)
class CellView:
    """What a renderer needs to know about one occupied cell.

    Attributes:
        location: Grid location.
        plant: Species name of the live plant, if any.
        animal: Species name of the live animal, if any.
        infected: Whether the animal is infected.
        immune: Whether the animal is immune.
    """

    location: Location
    plant: str | None = None
    animal: str | None = None
    infected: bool = False
    immune: bool = False


def snapshot(field: Field) -> Iterator[CellView]:
    """Yield a view of every cell holding a live plant or animal."""
    for location in field.locations():
        plant = field.plant_at(location)
        animal = field.animal_at(location)
        if plant is not None and not plant.alive:
            plant = None
        if animal is not None and not animal.alive:
            animal = None
        if plant is None and animal is None:
            continue
        yield CellView(
            location=location,
            plant=plant.species.name if plant is not None else None,
            animal=animal.species.name if animal is not None else None,
            infected=animal is not None and animal.is_infected,
            immune=animal is not None and animal.is_immune,
        )


def population_counts(field: Field) -> dict[str, int]:
    """Return the number of live individuals per species."""
    return field.population_counts()


def population_details(field: Field) -> str:
    """Return a one-line summary such as ``"capybara: 12 fern: 40"``."""
    counts = population_counts(field)
    return " ".join(f"{name}: {count}" for name, count in sorted(counts.items()))


def csv_header(species: Sequence[str]) -> str:
    return ",".join(["step", *species])


def csv_row(step: int, field: Field, species: Sequence[str]) -> str:
    """Format one CSV line of per-species counts, zero for absent species."""
    counts = population_counts(field)
    return ",".join([str(step), *(str(counts.get(name, 0)) for name in species)])
