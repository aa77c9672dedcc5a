# pathpaint/core/grid.py
#!/usr/bin/env python3
"""
Mutable grid of cells: walls, entry weights and the start/end markers.

The grid stores what it is told. Rules about which edits a user may make
live in EditSession; the only guards here are the no-op cases of
toggle_wall / set_weight / clear_cell.
"""

import logging
from typing import Iterator, List, Optional, Tuple

from pathpaint.core.errors import InvalidDimensions, InvalidWeight
from pathpaint.core.neighbors import neighbors4
from pathpaint.core.types import (
    Cell, CellState, DEFAULT_WEIGHT, MIN_DIMENSION,
    ROLE_NONE, ROLE_START, ROLE_END,
)

log = logging.getLogger(__name__)


def _is_int(v) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def parse_weight(value) -> int:
    """Accept an int or a decimal integer string >= 1; raise InvalidWeight otherwise."""
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            raise InvalidWeight(f"weight must be a whole number, got {text!r}") from None
    if not _is_int(value):
        raise InvalidWeight(f"weight must be a whole number, got {value!r}")
    if value < 1:
        raise InvalidWeight(f"weight must be >= 1, got {value}")
    return value


def check_dimensions(rows, cols) -> Tuple[int, int]:
    if not (_is_int(rows) and _is_int(cols)):
        raise InvalidDimensions(rows, cols, MIN_DIMENSION)
    if rows < MIN_DIMENSION or cols < MIN_DIMENSION:
        raise InvalidDimensions(rows, cols, MIN_DIMENSION)
    return rows, cols


class Grid:
    def __init__(self, rows: int = 10, cols: int = 10):
        rows, cols = check_dimensions(rows, cols)
        self.rows = rows
        self.cols = cols
        self.cells: List[List[CellState]] = []   # [row][col]
        self.start: Optional[Cell] = None
        self.end: Optional[Cell] = None
        self._allocate()

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols}, start={self.start}, end={self.end})"

    # -------------------- lifecycle --------------------

    def _allocate(self) -> None:
        self.cells = [[CellState() for _ in range(self.cols)] for _ in range(self.rows)]
        self.start = None
        self.end = None

    def resize(self, rows, cols) -> None:
        """Drop all cell state and recreate defaults at rows x cols (both >= 5)."""
        rows, cols = check_dimensions(rows, cols)
        self.rows, self.cols = rows, cols
        self._allocate()
        log.info("grid resized to %dx%d", rows, cols)

    def reset(self) -> None:
        self._allocate()

    def clear_marks(self) -> None:
        """Remove visited / on_path tags left by a previous run."""
        for state in self.iter_states():
            state.visited = False
            state.on_path = False

    # -------------------- queries --------------------

    def in_bounds(self, c: Cell) -> bool:
        r, col = c
        return 0 <= r < self.rows and 0 <= col < self.cols

    def cell(self, c: Cell) -> CellState:
        if not self.in_bounds(c):
            raise IndexError(f"cell {c} outside {self.rows}x{self.cols} grid")
        r, col = c
        return self.cells[r][col]

    def is_wall(self, c: Cell) -> bool:
        return self.cell(c).is_wall

    def weight_of(self, c: Cell) -> int:
        return self.cell(c).weight

    def role_of(self, c: Cell) -> str:
        return self.cell(c).role

    def neighbors(self, c: Cell) -> List[Cell]:
        return neighbors4(self, c)

    def iter_cells(self) -> Iterator[Tuple[Cell, CellState]]:
        """Row-major (coordinate, state) pairs."""
        for r, row in enumerate(self.cells):
            for col, state in enumerate(row):
                yield (r, col), state

    def iter_states(self) -> Iterator[CellState]:
        for _, state in self.iter_cells():
            yield state

    # -------------------- edits --------------------

    def set_role(self, c: Cell, role: str) -> None:
        """Move the unique start or end marker onto c."""
        if role not in (ROLE_START, ROLE_END):
            raise ValueError(f"unknown role {role!r}")
        target = self.cell(c)

        previous = self.start if role == ROLE_START else self.end
        if previous is not None and previous != c:
            self.cell(previous).role = ROLE_NONE

        # the target may hold the other marker
        if target.role == ROLE_START and role == ROLE_END:
            self.start = None
        elif target.role == ROLE_END and role == ROLE_START:
            self.end = None

        target.role = role
        target.is_wall = False
        target.weight = DEFAULT_WEIGHT
        if role == ROLE_START:
            self.start = c
        else:
            self.end = c

    def set_start(self, c: Cell) -> None:
        self.set_role(c, ROLE_START)

    def set_end(self, c: Cell) -> None:
        self.set_role(c, ROLE_END)

    def toggle_wall(self, c: Cell) -> bool:
        state = self.cell(c)
        if state.role != ROLE_NONE:
            return False
        state.is_wall = not state.is_wall
        return True

    def set_weight(self, c: Cell, value) -> bool:
        """Store an entry weight. Returns False (and changes nothing) when rejected."""
        state = self.cell(c)
        try:
            weight = parse_weight(value)
        except InvalidWeight as ex:
            log.warning("ignoring weight for %s: %s", c, ex)
            return False
        if state.role != ROLE_NONE or state.is_wall:
            return False
        state.weight = weight
        return True

    def clear_cell(self, c: Cell) -> bool:
        """Put a role-less cell back to an open, weight-1 cell."""
        state = self.cell(c)
        if state.role != ROLE_NONE:
            return False
        state.is_wall = False
        state.weight = DEFAULT_WEIGHT
        return True
