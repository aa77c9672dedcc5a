import heapq
import random

import pytest

from pathpaint.core.errors import MissingEndpoints
from pathpaint.core.grid import Grid
from pathpaint.core.neighbors import manhattan
from pathpaint.core.search import AStarSearch, run_search


def path_cost(grid, path):
    return sum(grid.weight_of(c) for c in path[1:])


def assert_valid_path(grid, path):
    assert path[0] == grid.start
    assert path[-1] == grid.end
    for a, b in zip(path, path[1:]):
        assert manhattan(a, b) == 1
        assert not grid.is_wall(b)


@pytest.mark.parametrize("rows,cols", [(5, 5), (5, 9), (12, 7)])
def test_open_grid_path_is_manhattan(make_grid, rows, cols):
    g = make_grid(rows, cols)
    res = run_search(g)
    assert res.status == "done"
    assert len(res.path) - 1 == (rows - 1) + (cols - 1)
    assert res.metrics["total_cost"] == (rows - 1) + (cols - 1)
    assert res.metrics["path_len"] == (rows - 1) + (cols - 1)
    assert_valid_path(g, res.path)


def test_wall_in_middle_example(make_grid):
    g = make_grid(5, 5, start=(0, 0), end=(2, 2))
    g.toggle_wall((1, 1))
    res = run_search(g)
    assert res.status == "done"
    assert len(res.path) - 1 == 4
    assert path_cost(g, res.path) == 4
    assert (1, 1) not in res.path
    # east is tried before south
    assert res.path == [(0, 0), (0, 1), (0, 2), (1, 2), (2, 2)]


def test_weighted_cells_are_avoided_when_cheaper(make_grid):
    g = make_grid(5, 5, start=(2, 0), end=(2, 4))
    for col in (1, 2, 3):
        g.set_weight((2, col), 10)
    res = run_search(g)
    assert res.status == "done"
    assert path_cost(g, res.path) == 6
    assert all(g.weight_of(c) == 1 for c in res.path)


def test_entry_cost_uses_target_weight(make_grid):
    g = make_grid(5, 5, start=(0, 0), end=(0, 1))
    # leaving a heavy cell is free, entering it is not
    g.cell((0, 0)).weight = 50
    res = run_search(g)
    assert res.metrics["total_cost"] == 1


def test_unreachable_end_reports_no_path(make_grid):
    g = make_grid(5, 5, start=(0, 0), end=(4, 4))
    for c in ((3, 4), (4, 3), (3, 3)):
        g.toggle_wall(c)
    search = AStarSearch()
    search.init(g)
    res = search.run()
    assert res.status == "no_path"
    assert res.path is None
    assert search.is_terminated
    assert not search.open_set
    # terminal result repeats without further work
    popped = search.popped_count
    again = search.step()
    assert again.status == "no_path"
    assert search.popped_count == popped


def test_missing_endpoints_raise_before_state(grid):
    search = AStarSearch()
    with pytest.raises(MissingEndpoints):
        search.init(grid)
    assert search.grid is None
    grid.set_start((0, 0))
    with pytest.raises(MissingEndpoints):
        search.init(grid)


def test_uninitialized_search_is_idle():
    search = AStarSearch()
    assert search.step().status == "idle"
    assert search.run().status == "idle"


def test_step_by_step_marks_visited_but_not_endpoints(make_grid):
    g = make_grid(6, 6)
    search = AStarSearch()
    search.init(g)

    first = search.step()
    assert first.status == "running"
    assert first.current == (0, 0)
    assert first.opened == [(0, 1), (1, 0)]
    assert not g.cell((0, 0)).visited

    second = search.step()
    assert second.current == (0, 1)  # equal f, opened first
    assert g.cell((0, 1)).visited

    res = search.run()
    assert res.status == "done"
    assert not g.cell(g.end).visited
    assert not g.cell(g.start).visited


def test_max_steps_pauses_run(make_grid):
    g = make_grid(8, 8)
    search = AStarSearch()
    search.init(g)
    res = search.run(max_steps=3)
    assert res.status == "running"
    assert search.popped_count == 3
    assert search.run().status == "done"


def test_reset_restarts_and_clears_marks(make_grid):
    g = make_grid(6, 6)
    search = AStarSearch()
    search.init(g)
    first = search.run()
    search.reset()
    assert not any(s.visited for s in g.iter_states())
    assert search.run().path == first.path


def test_tie_breaking_is_deterministic(make_grid):
    paths = {tuple(run_search(make_grid(7, 7)).path) for _ in range(3)}
    assert len(paths) == 1


def _dijkstra_cost(grid):
    dist = {grid.start: 0}
    pq = [(0, grid.start)]
    while pq:
        d, u = heapq.heappop(pq)
        if d > dist[u]:
            continue
        for v in grid.neighbors(u):
            nd = d + grid.weight_of(v)
            if nd < dist.get(v, float("inf")):
                dist[v] = nd
                heapq.heappush(pq, (nd, v))
    return dist.get(grid.end)


@pytest.mark.parametrize("seed", range(8))
def test_matches_uniform_cost_search_on_random_maps(seed):
    rng = random.Random(seed)
    g = Grid(9, 11)
    for c, _ in list(g.iter_cells()):
        roll = rng.random()
        if roll < 0.2:
            g.toggle_wall(c)
        elif roll < 0.5:
            g.set_weight(c, rng.randint(2, 9))
    g.set_start((0, 0))
    g.set_end((8, 10))

    res = run_search(g)
    expected = _dijkstra_cost(g)
    if expected is None:
        assert res.status == "no_path"
    else:
        assert res.status == "done"
        assert_valid_path(g, res.path)
        assert path_cost(g, res.path) == expected == res.metrics["total_cost"]
        assert expected >= manhattan(g.start, g.end)


def test_raising_a_weight_never_lowers_cost(make_grid):
    g = make_grid(6, 6)
    base = run_search(g).metrics["total_cost"]
    rng = random.Random(3)
    for _ in range(10):
        c = (rng.randrange(6), rng.randrange(6))
        if g.role_of(c) != "none":
            continue
        g.set_weight(c, g.weight_of(c) + rng.randint(1, 5))
        cost = run_search(g).metrics["total_cost"]
        assert cost >= base
        assert cost >= manhattan(g.start, g.end)
        base = cost


def _array_sort_order(grid):
    """Expansion order of an A* that re-sorts a plain list each step (stable sort, take the head)."""
    start, end = grid.start, grid.end
    open_list = [start]
    g = {start: 0}
    f = {start: manhattan(start, end)}
    order = []
    while open_list:
        open_list.sort(key=lambda c: f[c])
        cur = open_list.pop(0)
        order.append(cur)
        if cur == end:
            break
        for n in grid.neighbors(cur):
            t = g[cur] + grid.weight_of(n)
            if t < g.get(n, float("inf")):
                g[n] = t
                f[n] = t + manhattan(n, end)
                if n not in open_list:
                    open_list.append(n)
    return order


@pytest.mark.parametrize("seed", range(25))
def test_unit_weight_expansion_order_matches_sorted_list(seed):
    rng = random.Random(100 + seed)
    g = Grid(7, 7)
    for c, _ in list(g.iter_cells()):
        if rng.random() < 0.25:
            g.toggle_wall(c)
    g.set_start((rng.randrange(7), rng.randrange(7)))
    end = (rng.randrange(7), rng.randrange(7))
    while end == g.start:
        end = (rng.randrange(7), rng.randrange(7))
    g.set_end(end)

    search = AStarSearch()
    search.init(g)
    order = []
    while not search.is_terminated:
        res = search.step()
        if res.current is not None:
            order.append(res.current)
    assert order == _array_sort_order(g)
