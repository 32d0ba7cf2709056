"""Tests for Grid, Node and the corner-cutting policies."""

import numpy as np
import pytest

from gridsteer import (InvalidGridDimensions, InvalidParameter, OutOfBounds,
                       new_grid)
from gridsteer.model.grid import DiagonalMovement, Grid


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3), (2.5, 3)])
def test_invalid_dimensions(width, height):
    with pytest.raises(InvalidGridDimensions):
        Grid(width, height)


def test_out_of_bounds_access():
    grid = new_grid(4, 3)
    with pytest.raises(OutOfBounds):
        grid.get(4, 0)
    with pytest.raises(IndexError):
        grid.set_cell(0, -1, walkable=False)
    assert not grid.is_walkable(-1, 0)


def test_node_index_layout():
    grid = new_grid(4, 3)
    node = grid.get(2, 1)
    assert node.index == 1 * 4 + 2
    assert grid.node_at(node.index) is node
    assert node.position == (2, 1)


def test_set_cell_and_weights():
    grid = new_grid(3, 3, default_weight=2.0)
    assert grid.get(1, 1).weight == 2.0
    grid.set_cell(1, 1, walkable=False, weight=5.0)
    assert not grid.is_walkable(1, 1)
    assert grid.get(1, 1).weight == 5.0
    with pytest.raises(InvalidParameter):
        grid.set_cell(0, 0, weight=0.5)
    with pytest.raises(InvalidParameter):
        new_grid(3, 3, default_weight=-1)


def test_from_matrix_nonzero_is_blocked():
    grid = Grid.from_matrix([
        [0, 1, 0],
        [0, 0, 0],
    ])
    assert grid.width == 3 and grid.height == 2
    assert not grid.is_walkable(1, 0)
    assert grid.is_walkable(1, 1)
    expected = np.array([[True, False, True], [True, True, True]])
    assert (grid.walkable_matrix() == expected).all()


def test_walls_and_weight_rectangles():
    grid = new_grid(6, 6)
    grid.add_wall_rectangle(1, 1, 2, 2)
    grid.add_wall_points([(5, 5), (10, 10)])
    grid.fill_weight_rectangle(4, 0, 2, 1, 3.0)
    matrix = grid.walkable_matrix()
    assert matrix.sum() == 36 - 5
    assert not grid.is_walkable(2, 2)
    assert grid.weight_matrix()[0, 5] == 3.0


def _neighbor_set(grid, x, y, mode):
    return {n.position for n in grid.neighbors_for(grid.get(x, y), mode)}


def test_neighbor_policies():
    # . # .
    # . . .
    # . . .
    grid = Grid.from_matrix([
        [0, 1, 0],
        [0, 0, 0],
        [0, 0, 0],
    ])
    assert _neighbor_set(grid, 0, 0, DiagonalMovement.NEVER) == {(0, 1)}
    assert _neighbor_set(grid, 0, 0, DiagonalMovement.ONLY_WHEN_NO_OBSTACLES) \
        == {(0, 1)}
    assert _neighbor_set(grid, 0, 0, DiagonalMovement.IF_AT_MOST_ONE_OBSTACLE) \
        == {(0, 1), (1, 1)}

    center = _neighbor_set(grid, 1, 1, DiagonalMovement.ALWAYS)
    assert center == {(0, 0), (2, 0), (0, 1), (2, 1), (0, 2), (1, 2), (2, 2)}
    strict = _neighbor_set(grid, 1, 1, DiagonalMovement.ONLY_WHEN_NO_OBSTACLES)
    assert strict == {(0, 1), (2, 1), (1, 2), (0, 2), (2, 2)}


def test_neighbors_orthogonal_first():
    grid = new_grid(3, 3)
    order = [n.position for n in grid.neighbors(grid.get(1, 1))]
    assert order[:4] == [(1, 0), (2, 1), (1, 2), (0, 1)]
    assert len(order) == 8


def test_flag_mapping():
    assert DiagonalMovement.from_flags(False, True) is DiagonalMovement.NEVER
    assert DiagonalMovement.from_flags(True, True) is \
        DiagonalMovement.ONLY_WHEN_NO_OBSTACLES
    assert DiagonalMovement.from_flags(True, False) is \
        DiagonalMovement.IF_AT_MOST_ONE_OBSTACLE


def test_begin_search_bumps_epoch():
    grid = new_grid(2, 2)
    assert grid.begin_search() == 1
    assert grid.begin_search() == 2
    assert grid.epoch == 2


def test_clone_is_independent():
    grid = new_grid(3, 3)
    grid.set_cell(1, 1, walkable=False)
    copy = grid.clone()
    copy.set_cell(0, 0, walkable=False)
    assert not copy.is_walkable(1, 1)
    assert grid.is_walkable(0, 0)
