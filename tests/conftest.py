import pytest

from pathpaint.core.grid import Grid


@pytest.fixture
def grid():
    return Grid(5, 5)


@pytest.fixture
def make_grid():
    """Open grid with start/end defaulting to opposite corners."""
    def _make(rows, cols, start=None, end=None):
        g = Grid(rows, cols)
        g.set_start(start or (0, 0))
        g.set_end(end or (rows - 1, cols - 1))
        return g
    return _make
