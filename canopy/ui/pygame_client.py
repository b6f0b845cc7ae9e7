"""Pygame 2D visualization for the Canopy simulation.

Renders plants as cell backgrounds and animals as coloured dots, with a
marker for infected and immune animals.  The simulation steps at a
configurable rate while the display refreshes at the Pygame frame rate.
The renderer only reads the engine through ``stats.snapshot``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import pygame

from canopy.simulation.stats import population_counts, snapshot

if TYPE_CHECKING:
    from canopy.simulation.engine import SimulationEngine

# Colour palette
_BG = (245, 245, 235)
_NIGHT_TINT = (0, 0, 40, 90)
_UNKNOWN = (128, 128, 128)
_INFECTED = (220, 30, 30)
_IMMUNE = (200, 180, 0)
_TEXT = (30, 30, 30)

_SPECIES_COLOURS: dict[str, tuple[int, int, int]] = {
    "capybara": (139, 90, 43),
    "howler_monkey": (180, 130, 60),
    "jaguar": (210, 100, 0),
    "harpy_eagle": (50, 50, 160),
    "fern": (80, 200, 50),
    "fruit_tree": (0, 130, 90),
}


class PygameRenderer:
    """Renders a SimulationEngine state into a Pygame window.

    Attributes:
        engine: The simulation engine to visualise.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    # Speed presets: steps per second at 30 fps
    _SPEED_STEPS: ClassVar[list[float]] = [
        0.5,
        1.0,
        3.0,
        5.0,
        10.0,
        15.0,
        30.0,
        60.0,
    ]

    def __init__(
        self,
        engine: SimulationEngine,
        cell_size: int = 8,
        steps_per_second: float = 10.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The simulation engine to render.
            cell_size: Pixel width/height per grid cell.
            steps_per_second: Simulation steps per real-time second.
        """
        self.engine = engine
        self.cell_size = cell_size
        self.steps_per_second = steps_per_second
        self._speed_index = self._nearest_speed(steps_per_second)
        self._step_accumulator = 0.0

        w = engine.field.width * cell_size
        h = engine.field.height * cell_size
        self._panel_width = 220
        self._win_w = w + self._panel_width
        self._win_h = h

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Canopy")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True
        self.paused = False

    def _nearest_speed(self, sps: float) -> int:
        """Return the index of the closest speed preset."""
        return min(
            range(len(self._SPEED_STEPS)),
            key=lambda i: abs(self._SPEED_STEPS[i] - sps),
        )

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, step sim, render.

        Stepping pauses on its own once the field stops being viable.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0
            self._handle_events()
            if not self.paused:
                self._step_accumulator += self.steps_per_second * dt
                steps = int(self._step_accumulator)
                self._step_accumulator -= steps
                if steps and self.engine.run(steps) < steps:
                    self.paused = True
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._speed_index = min(
                        len(self._SPEED_STEPS) - 1,
                        self._speed_index + 1,
                    )
                    self.steps_per_second = self._SPEED_STEPS[self._speed_index]
                elif event.key == pygame.K_MINUS:
                    self._speed_index = max(0, self._speed_index - 1)
                    self.steps_per_second = self._SPEED_STEPS[self._speed_index]

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_cells()
        if not self.engine.environment.is_daylight:
            self._draw_night_tint()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_cells(self) -> None:
        """Draw plants as cell backgrounds and animals as dots on top."""
        cs = self.cell_size
        radius = max(2, cs // 3)
        for view in snapshot(self.engine.field):
            x = view.location.col * cs
            y = view.location.row * cs
            if view.plant is not None:
                colour = _SPECIES_COLOURS.get(view.plant, _UNKNOWN)
                pygame.draw.rect(self.screen, colour, (x, y, cs, cs))
            if view.animal is not None:
                colour = _SPECIES_COLOURS.get(view.animal, _UNKNOWN)
                centre = (x + cs // 2, y + cs // 2)
                pygame.draw.circle(self.screen, colour, centre, radius)
                if view.infected:
                    pygame.draw.circle(self.screen, _INFECTED, centre, radius, 1)
                elif view.immune:
                    pygame.draw.circle(self.screen, _IMMUNE, centre, radius, 1)

    def _draw_night_tint(self) -> None:
        overlay = pygame.Surface(
            (self.engine.field.width * self.cell_size, self._win_h),
            pygame.SRCALPHA,
        )
        overlay.fill(_NIGHT_TINT)
        self.screen.blit(overlay, (0, 0))

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        panel_x = self.engine.field.width * self.cell_size + 10
        y = 10

        lines = [
            f"Step: {self.engine.tick}",
            self.engine.environment.label,
            f"Speed: {self.steps_per_second:.1f} s/s",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            "",
            "--- Population ---",
        ]
        counts = population_counts(self.engine.field)
        for name in _SPECIES_COLOURS:
            lines.append(f"{name}: {counts.get(name, 0)}")

        lines += [
            "",
            "--- Controls ---",
            "SPACE: pause",
            "+/-: speed",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
