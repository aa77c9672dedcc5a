# pathpaint/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any

Cell = Tuple[int, int]  # (row, col)

ROLE_NONE = "none"
ROLE_START = "start"
ROLE_END = "end"

DEFAULT_WEIGHT = 1
MIN_DIMENSION = 5


@dataclass
class CellState:
    role: str = ROLE_NONE
    is_wall: bool = False
    weight: int = DEFAULT_WEIGHT
    # presentation only, the search never reads these
    visited: bool = False
    on_path: bool = False

    @property
    def is_default(self) -> bool:
        return self.role == ROLE_NONE and not self.is_wall and self.weight == DEFAULT_WEIGHT


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def terminal(self) -> bool:
        return self.status in ("done", "no_path")


@dataclass(frozen=True)
class RevealEvent:
    """Mark `cell` as part of the path and drop its visited tag."""
    cell: Cell

    def apply(self, grid) -> None:
        state = grid.cell(self.cell)
        state.visited = False
        state.on_path = True
