# pathpaint/core/persistence.py
#!/usr/bin/env python3
"""
Grid <-> flat record, and a single-slot JSON store.

Record shape (no version field):
    {"rows": int, "cols": int,
     "cells": [{"weight": int | "int", "isWall": bool,
                "isStart": bool, "isEnd": bool}, ...]}   # row-major

deserialize() validates the whole record before building anything, so a
failed load never leaves a half-applied grid behind.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pathpaint.core.errors import CorruptRecord, InvalidDimensions, InvalidWeight
from pathpaint.core.grid import Grid, check_dimensions, parse_weight
from pathpaint.core.types import Cell, ROLE_START, ROLE_END

log = logging.getLogger(__name__)

CELL_FIELDS = ("weight", "isWall", "isStart", "isEnd")


def serialize(grid: Grid) -> Dict[str, Any]:
    cells = []
    for _, state in grid.iter_cells():
        cells.append({
            "weight": state.weight,
            "isWall": state.is_wall,
            "isStart": state.role == ROLE_START,
            "isEnd": state.role == ROLE_END,
        })
    return {"rows": grid.rows, "cols": grid.cols, "cells": cells}


def _flag(raw: dict, key: str, index: int) -> bool:
    v = raw[key]
    if not isinstance(v, bool):
        raise CorruptRecord(f"cell {index}: {key} must be true/false, got {v!r}")
    return v


def _parse(record) -> Tuple[int, int, List[Tuple[int, bool]], Optional[Cell], Optional[Cell]]:
    if not isinstance(record, dict):
        raise CorruptRecord(f"record must be an object, got {type(record).__name__}")
    for key in ("rows", "cols", "cells"):
        if key not in record:
            raise CorruptRecord(f"record is missing {key!r}")
    try:
        rows, cols = check_dimensions(record["rows"], record["cols"])
    except InvalidDimensions as ex:
        raise CorruptRecord(str(ex)) from ex

    raw_cells = record["cells"]
    if not isinstance(raw_cells, list):
        raise CorruptRecord("cells must be a list")
    if len(raw_cells) != rows * cols:
        raise CorruptRecord(f"expected {rows * cols} cells for {rows}x{cols}, got {len(raw_cells)}")

    cells: List[Tuple[int, bool]] = []
    start: Optional[Cell] = None
    end: Optional[Cell] = None
    for i, raw in enumerate(raw_cells):
        if not isinstance(raw, dict):
            raise CorruptRecord(f"cell {i} is not an object")
        missing = [k for k in CELL_FIELDS if k not in raw]
        if missing:
            raise CorruptRecord(f"cell {i} is missing {', '.join(missing)}")
        try:
            weight = parse_weight(raw["weight"])
        except InvalidWeight as ex:
            raise CorruptRecord(f"cell {i}: {ex}") from ex
        is_wall = _flag(raw, "isWall", i)
        is_start = _flag(raw, "isStart", i)
        is_end = _flag(raw, "isEnd", i)

        pos = divmod(i, cols)
        if is_start and is_end:
            raise CorruptRecord(f"cell {pos} is both start and end")
        if is_start:
            if start is not None:
                raise CorruptRecord(f"more than one start cell ({start} and {pos})")
            start = pos
        if is_end:
            if end is not None:
                raise CorruptRecord(f"more than one end cell ({end} and {pos})")
            end = pos
        cells.append((weight, is_wall))
    return rows, cols, cells, start, end


def _apply(grid: Grid, rows: int, cols: int, cells, start, end) -> None:
    grid.resize(rows, cols)
    for (_, state), (weight, is_wall) in zip(grid.iter_cells(), cells):
        state.weight = weight
        state.is_wall = is_wall
    # set_role restores the endpoint invariant (no wall, default weight)
    if start is not None:
        grid.set_start(start)
    if end is not None:
        grid.set_end(end)


def deserialize(record) -> Grid:
    rows, cols, cells, start, end = _parse(record)
    grid = Grid(rows, cols)
    _apply(grid, rows, cols, cells, start, end)
    return grid


def load_into(grid: Grid, record) -> None:
    """Replace the live grid's contents with record; untouched on CorruptRecord."""
    rows, cols, cells, start, end = _parse(record)
    _apply(grid, rows, cols, cells, start, end)


class SlotStore:
    """One well-known JSON file holding the saved grid."""

    def __init__(self, path):
        self.path = Path(path).expanduser()

    def __repr__(self) -> str:
        return f"SlotStore({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, grid: Grid) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(serialize(grid), f, indent=2)
        log.info("saved %dx%d grid to %s", grid.rows, grid.cols, self.path)

    def _read(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as ex:
            raise CorruptRecord(f"{self.path} is not a readable JSON record: {ex}") from ex

    def load(self) -> Optional[Grid]:
        """Return the saved grid, or None when nothing has been saved yet."""
        if not self.exists():
            return None
        grid = deserialize(self._read())
        log.info("loaded %dx%d grid from %s", grid.rows, grid.cols, self.path)
        return grid

    def load_into(self, grid: Grid) -> bool:
        if not self.exists():
            return False
        load_into(grid, self._read())
        log.info("loaded %dx%d grid from %s", grid.rows, grid.cols, self.path)
        return True

    def clear(self) -> None:
        if self.exists():
            self.path.unlink()
