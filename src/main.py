"""Entry point for the mosaic composer.

Sets up the session world, event bus, systems, and Arcade window.
"""
import argparse
import logging
import random

from arcade import Window, run, set_background_color, color, key

from mosaic.constants import MOUSE_BUTTON_LEFT
from mosaic.events.bus import (
    EventBus,
    EVENT_MOUSE_DRAG,
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_RELEASE,
)
from mosaic.factories.catalogue import load_catalogue
from mosaic.systems.aggregate_system import AggregateSystem
from mosaic.systems.input import InputSystem
from mosaic.systems.placement_system import PlacementSystem
from mosaic.systems.render import RenderSystem
from mosaic.systems.session_system import SessionSystem
from mosaic.utils.session import get_grid, get_session_state
from mosaic.world import create_world

WINDOW_SIZE = (1024, 768)


class MosaicWindow(Window):
    def __init__(self, *, catalogue=None, seed=None, width=None, height=None):
        super().__init__(WINDOW_SIZE[0], WINDOW_SIZE[1], "Mosaic", resizable=True)
        self.event_bus = EventBus()
        self.world = create_world(
            self.event_bus,
            catalogue=catalogue,
            rng=random.Random(seed),
            viewport=WINDOW_SIZE,
        )
        self.session_system = SessionSystem(self.world, self.event_bus)
        self.placement_system = PlacementSystem(self.world, self.event_bus)
        self.aggregate_system = AggregateSystem(self.world, self.event_bus)
        self.input_system = InputSystem(self.world, self.event_bus)
        self.render_system = RenderSystem(self.world, self.event_bus, self)
        set_background_color(color.WHITE_SMOKE)
        if width is not None and height is not None:
            self.session_system.start_or_resize(width, height)

    # Arcade reports y upward from the bottom; the core works top-down.
    def _core_y(self, y: float) -> float:
        return self.height - y

    def on_resize(self, width: int, height: int):
        # Arcade may fire a resize before __init__ has built the systems.
        if hasattr(self, 'render_system'):
            self.render_system.notify_resize(width, height)
            get_session_state(self.world).viewport = (width, height)
        return super().on_resize(width, height)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=self._core_y(y), button=button)

    def on_mouse_drag(self, x: float, y: float, dx: float, dy: float, buttons: int, modifiers: int):
        if not buttons & MOUSE_BUTTON_LEFT:
            return
        self.event_bus.emit(EVENT_MOUSE_DRAG, x=x, y=self._core_y(y), dx=dx, dy=-dy)

    def on_mouse_release(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_RELEASE, x=x, y=self._core_y(y), button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        grid = get_grid(self.world)
        cols, rows = (grid.cols, grid.rows) if grid is not None else (0, 0)
        if symbol == key.RIGHT:
            self.session_system.start_or_resize(cols + 1, max(rows, 1))
        elif symbol == key.LEFT:
            self.session_system.start_or_resize(cols - 1, rows)
        elif symbol == key.DOWN:
            self.session_system.start_or_resize(max(cols, 1), rows + 1)
        elif symbol == key.UP:
            self.session_system.start_or_resize(cols, rows - 1)
        elif symbol == key.C:
            self.session_system.clear()
        elif symbol == key.R:
            self.session_system.restart()
        elif symbol == key.F:
            self.session_system.random_fill()
        elif symbol == key.A:
            state = get_session_state(self.world)
            self.session_system.set_alternate_finish(not state.alternate_finish)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compose a tile mosaic.")
    parser.add_argument("--catalogue", help="JSON file describing tile types and unit prices")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the floating pool")
    parser.add_argument("--width", help="Initial grid width (columns)")
    parser.add_argument("--height", help="Initial grid height (rows)")
    parser.add_argument("--verbose", action="store_true", help="Log placement decisions")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    catalogue = load_catalogue(args.catalogue) if args.catalogue else None
    MosaicWindow(catalogue=catalogue, seed=args.seed, width=args.width, height=args.height)
    run()


if __name__ == "__main__":
    main()
