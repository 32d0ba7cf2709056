"""Tests specific to jump point search."""

import math
import random

import pytest

from gridsteer import find_path, new_grid
from gridsteer.model.grid import DiagonalMovement
from gridsteer.pathfinding import (DijkstraFinder, JumpPointFinder,
                                   OrthogonalJumpPointFinder)


def test_orthogonal_jps_on_open_grid():
    grid = new_grid(10, 10)
    result = OrthogonalJumpPointFinder().find_path(0, 0, 9, 9, grid)
    assert result.found
    assert result.cost == pytest.approx(18.0)
    assert len(result.path) == 19
    assert OrthogonalJumpPointFinder(allow_diagonal=True).diagonal_movement \
        is DiagonalMovement.NEVER


def test_diagonal_jps_on_open_grid():
    grid = new_grid(10, 10)
    result = JumpPointFinder().find_path(0, 0, 9, 9, grid)
    assert result.path == tuple((i, i) for i in range(10))
    assert result.cost == pytest.approx(9 * math.sqrt(2))


def test_jps_skips_most_cells():
    grid = new_grid(50, 50)
    jps = find_path('jps', (0, 0), (49, 49), grid)
    astar = find_path('astar', (0, 0), (49, 49), grid)
    assert jps.cost == pytest.approx(astar.cost)
    assert jps.nodes_visited < astar.nodes_visited


@pytest.mark.parametrize("mode", [DiagonalMovement.NEVER,
                                  DiagonalMovement.ONLY_WHEN_NO_OBSTACLES,
                                  DiagonalMovement.IF_AT_MOST_ONE_OBSTACLE])
def test_jps_around_wall_matches_dijkstra(mode):
    grid = new_grid(7, 7)
    grid.add_wall_rectangle(3, 0, 1, 6)
    expected = DijkstraFinder(diagonal_movement=mode).find_path(0, 0, 6, 0,
                                                                 grid)
    result = JumpPointFinder(diagonal_movement=mode).find_path(0, 0, 6, 0,
                                                                grid)
    assert result.found
    assert (3, 6) in result.path
    assert result.cost == pytest.approx(expected.cost)
    for (x0, y0), (x1, y1) in zip(result.path, result.path[1:]):
        assert grid.can_step(x0, y0, x1, y1, mode)


def test_jps_unreachable_goal():
    grid = new_grid(6, 6)
    grid.add_wall_rectangle(0, 3, 6, 1)
    assert not find_path('jps', (0, 0), (5, 5), grid).found
    assert not find_path('orthogonal_jps', (0, 0), (5, 5), grid).found


@pytest.mark.parametrize("mode", list(DiagonalMovement))
def test_jps_matches_dijkstra_on_random_grids(mode):
    rng = random.Random(f"jps-{mode.name}")
    for _ in range(40):
        grid = new_grid(10, 10)
        for y in range(10):
            for x in range(10):
                if rng.random() < 0.3:
                    grid.set_cell(x, y, walkable=False)
        cells = [(n.x, n.y) for n in grid.nodes if n.walkable]
        start, goal = rng.choice(cells), rng.choice(cells)
        expected = DijkstraFinder(diagonal_movement=mode).find_path(
            *start, *goal, grid)
        result = JumpPointFinder(diagonal_movement=mode).find_path(
            *start, *goal, grid)
        assert result.found == expected.found, f"{start}->{goal}"
        if not expected.found:
            continue
        assert result.cost == pytest.approx(expected.cost), f"{start}->{goal}"
        assert result.path[0] == start and result.path[-1] == goal
        for (x0, y0), (x1, y1) in zip(result.path, result.path[1:]):
            assert grid.can_step(x0, y0, x1, y1, mode)
