# pathpaint/core/session.py
#!/usr/bin/env python3
"""
EditSession: the grid plus everything a user edit needs to know.

Collaborators send edit commands by name with a cell coordinate:

    designate-start, designate-end, toggle-wall, set-weight,
    clear-cell, resize, reset

apply() returns True when the grid changed. Rejected edits (walls or
weights on an endpoint, bad weights, cells off the grid) are no-ops that
return False. resize raises InvalidDimensions and leaves the grid alone.
"""

import logging
from typing import Optional

from pathpaint.core.errors import InvalidDimensions, InvalidWeight
from pathpaint.core.grid import Grid, parse_weight
from pathpaint.core.search import AStarSearch
from pathpaint.core.types import Cell, MIN_DIMENSION, ROLE_NONE

log = logging.getLogger(__name__)

CMD_START = "designate-start"
CMD_END = "designate-end"
CMD_WALL = "toggle-wall"
CMD_WEIGHT = "set-weight"
CMD_CLEAR = "clear-cell"
CMD_RESIZE = "resize"
CMD_RESET = "reset"

# click mode -> command applied to the clicked cell
MODES = {
    "wall": CMD_WALL,
    "start": CMD_START,
    "end": CMD_END,
    "weight": CMD_WEIGHT,
    "clear": CMD_CLEAR,
}


class EditSession:
    def __init__(self, rows: int = 10, cols: int = 10, grid: Optional[Grid] = None):
        self.grid = grid if grid is not None else Grid(rows, cols)
        self.mode = "wall"
        self.weight_value: Optional[int] = None  # used by "weight" clicks

    @classmethod
    def from_settings(cls, settings) -> "EditSession":
        return cls(settings.rows, settings.cols)

    # -------------------- modes --------------------

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"unknown mode {mode!r}")
        self.mode = mode

    def set_weight_value(self, value) -> bool:
        try:
            self.weight_value = parse_weight(value)
        except InvalidWeight as ex:
            log.warning("weight not changed: %s", ex)
            return False
        return True

    def click(self, cell: Cell, value=None) -> bool:
        """Apply the current mode to cell."""
        if self.mode == "weight" and value is None:
            value = self.weight_value
        return self.apply(MODES[self.mode], cell, value)

    # -------------------- commands --------------------

    def apply(self, command: str, cell: Optional[Cell] = None, value=None) -> bool:
        grid = self.grid
        if command == CMD_RESIZE:
            try:
                rows, cols = value
            except (TypeError, ValueError):
                raise InvalidDimensions(value, value, MIN_DIMENSION) from None
            grid.resize(rows, cols)
            return True
        if command == CMD_RESET:
            grid.reset()
            return True

        if cell is None or not grid.in_bounds(cell):
            log.debug("%s ignored: %s is off the grid", command, cell)
            return False

        if command == CMD_START:
            grid.set_start(cell)
            return True
        if command == CMD_END:
            grid.set_end(cell)
            return True

        # endpoints only move; they never take walls or weights
        if grid.role_of(cell) != ROLE_NONE:
            log.debug("%s ignored on %s cell %s", command, grid.role_of(cell), cell)
            return False
        if command == CMD_WALL:
            return grid.toggle_wall(cell)
        if command == CMD_WEIGHT:
            if value is None:
                return False
            return grid.set_weight(cell, value)
        if command == CMD_CLEAR:
            return grid.clear_cell(cell)
        raise ValueError(f"unknown command {command!r}")

    # -------------------- search / storage --------------------

    def begin_search(self) -> AStarSearch:
        """Fresh search over the current grid; raises MissingEndpoints."""
        search = AStarSearch()
        search.init(self.grid)
        return search

    def save(self, store) -> None:
        store.save(self.grid)

    def load(self, store) -> bool:
        """Replace the grid from store. False when the slot is empty."""
        return store.load_into(self.grid)
