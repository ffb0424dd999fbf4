from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT & INTERACTION (core coordinates, y grows downward)
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                      # payload: x, y, button
EVENT_MOUSE_DRAG = "mouse_drag"                        # payload: x, y, dx, dy
EVENT_MOUSE_RELEASE = "mouse_release"                  # payload: x, y, button
EVENT_TILE_DRAG_START = "tile_drag_start"              # payload: tile_id, x, y
EVENT_TILE_DROP = "tile_drop"                          # payload: tile_id, x, y, offset_x, offset_y (grab point inside the tile)
EVENT_TILE_DOUBLE_ACTIVATE = "tile_double_activate"    # payload: tile_id
EVENT_POOL_TILE_ROTATE = "pool_tile_rotate"            # payload: tile_id
EVENT_GRID_CELL_CLICK = "grid_cell_click"              # payload: row, col
EVENT_GRID_CELL_DOUBLE_CLICK = "grid_cell_double_click"  # payload: row, col


# ============================================================================
# GRID & POOL STATE
# ============================================================================
EVENT_TILE_PLACED = "tile_placed"                  # payload: tile_id, row, col, via=str
EVENT_PLACEMENT_REJECTED = "placement_rejected"    # payload: tile_id, outcome=PlacementOutcome, row=int|None, col=int|None
EVENT_TILE_REMOVED = "tile_removed"                # payload: tile_id, row, col
EVENT_TILE_ROTATED = "tile_rotated"                # payload: tile_id, row, col, rotation
EVENT_GRID_CHANGED = "grid_changed"                # payload: reason=str, positions=list[(r,c)]
EVENT_POOL_CHANGED = "pool_changed"                # payload: reason=str, tile_ids=list[str]
EVENT_OWNERSHIP_VIOLATION = "ownership_violation"  # payload: tile_id, operation=str


# ============================================================================
# SESSION COMMANDS
# ============================================================================
EVENT_SESSION_STARTED = "session_started"                  # payload: rows, cols, resized=bool
EVENT_SESSION_RESTARTED = "session_restarted"              # payload: None
EVENT_COMMAND_REJECTED = "command_rejected"                # payload: command=str, reason=str
EVENT_ALTERNATE_FINISH_CHANGED = "alternate_finish_changed"  # payload: enabled=bool


# ============================================================================
# PRICING
# ============================================================================
EVENT_SUMMARY_UPDATED = "summary_updated"  # payload: summary=AggregateSummary
