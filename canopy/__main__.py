"""Entry point for ``python -m canopy``.

Loads the YAML config and builds a simulation engine, then either opens
a Pygame window or runs headless, printing one CSV line of population
counts per step.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import time

from canopy.simulation.config import SimulationConfig
from canopy.simulation.engine import SimulationEngine
from canopy.simulation.stats import csv_header, csv_row
from canopy.species.catalog import ANIMAL_SPECIES, PLANT_SPECIES

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

logger = logging.getLogger("canopy.entrypoint")


def run_headless(engine: SimulationEngine, steps: int, delay: float = 0.0) -> int:
    """Step the engine without a display, printing CSV counts.

    Args:
        engine: The engine to drive.
        steps: Maximum number of steps.
        delay: Seconds to wait between steps (0 for no pacing).

    Returns:
        Number of steps performed before the run ended.
    """
    species = [*PLANT_SPECIES, *ANIMAL_SPECIES]
    print(csv_header(species))
    print(csv_row(engine.tick, engine.field, species))
    performed = 0
    for _ in range(steps):
        if engine.run(1) == 0:
            break
        performed += 1
        print(csv_row(engine.tick, engine.field, species))
        if delay > 0:
            time.sleep(delay)
    logger.info("headless run finished after %d steps", performed)
    return performed


def main() -> None:
    """Parse CLI args, create engine, run headless or launch renderer."""
    parser = argparse.ArgumentParser(
        prog="canopy",
        description="Canopy - rainforest ecosystem simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and print CSV population counts",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=500,
        help="Steps to run in headless mode (default: 500)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.0,
        help="Seconds between headless steps (default: 0)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=8,
        help="Pixel size per grid cell (default: 8)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=10.0,
        help="Simulation steps per second (default: 10)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    engine = SimulationEngine(config=config)

    if args.headless:
        run_headless(engine, args.steps, args.delay)
        return

    from canopy.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(
        engine=engine,
        cell_size=args.cell_size,
        steps_per_second=args.speed,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
