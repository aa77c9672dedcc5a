# pathpaint/core/search.py
#!/usr/bin/env python3
"""
Weighted A*, one expansion per step() for animation.

API expected by the viewer:
- init(grid) - reset() - step() -> StepResult - is_terminated

Cost model:
- Entering cell v costs grid.weight_of(v); the source cell's weight is irrelevant.
- Heuristic is Manhattan distance, admissible and consistent because every
  entry costs at least 1.

Tie-breaking in the PQ:
- (f, seq, cell): lower f, then the cell that joined the open set first.
  A cell keeps its seq when its f improves while it is still open.
  With unit weights this expands cells in the same order as re-sorting a
  list each step; with heavier cells a re-keyed cell can win a tie it
  would lose there. Costs are unaffected.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple, List, Optional, Set
import heapq
import logging
from math import inf

from pathpaint.core.errors import MissingEndpoints
from pathpaint.core.grid import Grid
from pathpaint.core.neighbors import manhattan
from pathpaint.core.types import StepResult, Cell

log = logging.getLogger(__name__)


@dataclass
class AStarSearch:
    name: str = "A*"

    # Internal state
    grid: Optional[Grid] = None
    open_pq: List[Tuple[int, int, Cell]] = field(default_factory=list)  # (f, seq, cell)
    open_set: Set[Cell] = field(default_factory=set)
    open_seq: Dict[Cell, int] = field(default_factory=dict)
    closed_set: Set[Cell] = field(default_factory=set)
    g: Dict[Cell, int] = field(default_factory=dict)
    f: Dict[Cell, int] = field(default_factory=dict)
    parent: Dict[Cell, Cell] = field(default_factory=dict)
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    start_cell: Optional[Cell] = None
    goal_cell: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    seq: int = 0  # monotonic counter for PQ stability

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid) -> None:
        """Bind to a grid and seed the open set with its start cell."""
        if grid.start is None or grid.end is None:
            raise MissingEndpoints()
        if grid.start == grid.end:
            raise MissingEndpoints("start and end must be different cells")
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        """Clear all state and seed with the start node."""
        if self.grid is None:
            return
        self.open_pq.clear()
        self.open_set.clear()
        self.open_seq.clear()
        self.closed_set.clear()
        self.g.clear()
        self.f.clear()
        self.parent.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.path = None
        self.start_cell = self.grid.start
        self.goal_cell = self.grid.end
        self.seq = 0
        self.grid.clear_marks()

        s = self.start_cell
        self.g[s] = 0
        self._push(s, self._h(s))
        log.debug("search seeded at %s, goal %s", s, self.goal_cell)

    @property
    def is_terminated(self) -> bool:
        return self.done or self.no_path

    # -------------------- helpers --------------------

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _h(self, c: Cell) -> int:
        return manhattan(c, self.goal_cell)

    def _push(self, c: Cell, f_c: int) -> bool:
        """Insert or re-key c. Returns True if c was not open before."""
        self.f[c] = f_c
        added = c not in self.open_set
        if added:
            self.open_set.add(c)
            self.open_seq[c] = self._bump()
        heapq.heappush(self.open_pq, (f_c, self.open_seq[c], c))
        return added

    def _pop_best(self) -> Optional[Cell]:
        while self.open_pq:
            f_u, seq, u = heapq.heappop(self.open_pq)
            # ignore entries superseded by a better f or by a later re-open
            if u in self.open_set and self.open_seq[u] == seq and self.f[u] == f_u:
                self.open_set.remove(u)
                del self.open_seq[u]
                return u
        return None

    def _reconstruct_path(self, end: Cell) -> List[Cell]:
        path: List[Cell] = [end]
        cur = end
        while cur in self.parent:
            cur = self.parent[cur]
            path.append(cur)
        path.reverse()
        return path

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE A* expansion step:
          - Pop the lowest-f node.
          - If goal, reconstruct and finish.
          - Else relax neighbors with edge cost = weight of the neighbor.
        """
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(status="done", path=list(self.path),
                              metrics=self._metrics())

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        u = self._pop_best()
        if u is None:
            self.no_path = True
            log.info("no path from %s to %s after %d expansions",
                     self.start_cell, self.goal_cell, self.popped_count)
            return StepResult(status="no_path", metrics=self._metrics())

        self.popped_count += 1
        self.closed_set.add(u)
        if u != self.start_cell and u != self.goal_cell:
            self.grid.cell(u).visited = True

        if u == self.goal_cell:
            self.done = True
            self.path = self._reconstruct_path(u)
            log.info("path found: %d edges, cost %d, %d expansions",
                     len(self.path) - 1, self.g[u], self.popped_count)
            return StepResult(status="done", closed=[u], current=u,
                              path=list(self.path), metrics=self._metrics())

        opened_now: List[Cell] = []
        g_u = self.g[u]
        for v in self.grid.neighbors(u):
            alt = g_u + self.grid.weight_of(v)
            if alt < self.g.get(v, inf):
                self.g[v] = alt
                self.parent[v] = u
                if self._push(v, alt + self._h(v)):
                    opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())

    def run(self, max_steps: Optional[int] = None) -> StepResult:
        """Step until termination (or max_steps) and return the last result."""
        res = StepResult(status="idle", metrics=self._metrics())
        if self.grid is None:
            return res
        n = 0
        while not self.is_terminated:
            if max_steps is not None and n >= max_steps:
                break
            res = self.step()
            n += 1
        if self.is_terminated and not res.terminal:
            res = self.step()
        return res

    def total_cost(self) -> Optional[int]:
        if not self.done:
            return None
        return self.g[self.goal_cell]

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "path_len": len(self.path) - 1 if self.path else 0,
            "total_cost": self.total_cost(),
        }


def run_search(grid, max_steps: Optional[int] = None) -> StepResult:
    """Headless driver: search grid from start to end in a tight loop."""
    search = AStarSearch()
    search.init(grid)
    return search.run(max_steps=max_steps)
