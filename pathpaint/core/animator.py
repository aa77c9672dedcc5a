# pathpaint/core/animator.py
#!/usr/bin/env python3
"""
Replays a found path as reveal events, one cell per step().

The caller paces it exactly like the search: call step() after its own
delay until is_terminated. Start and end cells are never revealed.
The sequence is consumed once; build a new PathAnimator to replay.
"""

from typing import Iterable, Iterator, Optional

from pathpaint.core.types import Cell, RevealEvent


class PathAnimator:
    def __init__(self, path: Iterable[Cell], start: Optional[Cell], end: Optional[Cell]):
        self._events: Iterator[RevealEvent] = self._generate(list(path), start, end)
        self._next: Optional[RevealEvent] = next(self._events, None)
        self.revealed = 0

    @classmethod
    def for_grid(cls, grid, path: Iterable[Cell]) -> "PathAnimator":
        return cls(path, grid.start, grid.end)

    @staticmethod
    def _generate(path, start, end) -> Iterator[RevealEvent]:
        for c in path:
            if c == start or c == end:
                continue
            yield RevealEvent(cell=c)

    @property
    def is_terminated(self) -> bool:
        return self._next is None

    def step(self) -> Optional[RevealEvent]:
        """Return the next event, or None once the path is exhausted."""
        event = self._next
        if event is None:
            return None
        self._next = next(self._events, None)
        self.revealed += 1
        return event

    def __iter__(self) -> "PathAnimator":
        return self

    def __next__(self) -> RevealEvent:
        event = self.step()
        if event is None:
            raise StopIteration
        return event
