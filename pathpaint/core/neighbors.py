# pathpaint/core/neighbors.py
#!/usr/bin/env python3
"""
4-connected neighborhood and the Manhattan heuristic.

Neighbor order is east, south, west, north. The search relies on this
order for its tie-breaking, so keep it fixed.
"""

from typing import List, Tuple

from pathpaint.core.types import Cell

# (d_row, d_col): east, south, west, north
DELTAS4: Tuple[Cell, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


def candidates4(c: Cell) -> List[Cell]:
    row, col = c
    return [(row + dr, col + dc) for dr, dc in DELTAS4]


def neighbors4(grid, c: Cell) -> List[Cell]:
    """Return in-bounds, non-wall 4-neighbors of c."""
    out: List[Cell] = []
    for n in candidates4(c):
        if grid.in_bounds(n) and not grid.is_wall(n):
            out.append(n)
    return out


def manhattan(a: Cell, b: Cell) -> int:
    """Admissible for 4-connected moves where every entry costs at least 1."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])
