"""Path reconstruction and post-processing helpers."""

import math
from typing import List, Sequence, Tuple

from ..model.grid import NO_PARENT, Grid, Node

Point = Tuple[int, int]

SQRT2 = math.sqrt(2)


def step_cost(from_x: int, from_y: int, to_node: Node) -> float:
    """Cost of moving onto `to_node` from an adjacent cell."""
    if from_x != to_node.x and from_y != to_node.y:
        return to_node.weight * SQRT2
    return to_node.weight


def backtrace(grid: Grid, node: Node) -> List[Point]:
    """Follow forward-lane parent indices from `node` back to the start."""
    path = [(node.x, node.y)]
    index = node.parent
    while index != NO_PARENT:
        node = grid.nodes[index]
        path.append((node.x, node.y))
        index = node.parent
    path.reverse()
    return path


def backtrace_back(grid: Grid, node: Node) -> List[Point]:
    """Follow backward-lane parent indices from `node` to the goal."""
    path = [(node.x, node.y)]
    index = node.back_parent
    while index != NO_PARENT:
        node = grid.nodes[index]
        path.append((node.x, node.y))
        index = node.back_parent
    return path


def bi_backtrace(grid: Grid, node_a: Node, node_b: Node) -> List[Point]:
    """
    Join the start-side trace ending at `node_a` with the goal-side trace
    starting at `node_b`. Pass the same node twice for a shared meeting cell.
    """
    head = backtrace(grid, node_a)
    tail = backtrace_back(grid, node_b)
    if node_a is node_b:
        tail = tail[1:]
    return head + tail


def path_cost(grid: Grid, path: Sequence[Point]) -> float:
    """Weighted traversal cost of a grid-adjacent path."""
    total = 0.0
    for (x0, y0), (x1, y1) in zip(path, path[1:]):
        total += step_cost(x0, y0, grid.get(x1, y1))
    return total


def path_length(path: Sequence[Point]) -> float:
    """Euclidean length, ignoring weights."""
    total = 0.0
    for (x0, y0), (x1, y1) in zip(path, path[1:]):
        total += math.hypot(x1 - x0, y1 - y0)
    return total


def interpolate(x0: int, y0: int, x1: int, y1: int) -> List[Point]:
    """Cells on the Bresenham line between two points, both ends included."""
    line = []
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    while True:
        line.append((x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy
    return line


def expand_path(path: Sequence[Point]) -> List[Point]:
    """Fill the gaps of a compressed path (e.g. jump points) cell by cell."""
    if len(path) < 2:
        return list(path)
    expanded = []
    for (x0, y0), (x1, y1) in zip(path, path[1:]):
        segment = interpolate(x0, y0, x1, y1)
        expanded.extend(segment[:-1])
    expanded.append(tuple(path[-1]))
    return expanded


def compress_path(path: Sequence[Point]) -> List[Point]:
    """Keep only the end points and the cells where direction changes."""
    if len(path) < 3:
        return list(path)
    compressed = [tuple(path[0])]
    px, py = path[0]
    x, y = path[1]
    ldx, ldy = x - px, y - py
    for nx, ny in path[2:]:
        dx, dy = nx - x, ny - y
        if (dx, dy) != (ldx, ldy):
            compressed.append((x, y))
        ldx, ldy = dx, dy
        x, y = nx, ny
    compressed.append((x, y))
    return compressed


def has_line_of_sight(grid: Grid, a: Point, b: Point) -> bool:
    return all(grid.is_walkable(x, y) for x, y in interpolate(*a, *b))


def smoothen_path(grid: Grid, path: Sequence[Point]) -> List[Point]:
    """
    Drop intermediate waypoints that have a clear Bresenham line from the
    last kept point. The result is no longer grid-adjacent.
    """
    if len(path) < 3:
        return list(path)
    smoothed = [tuple(path[0])]
    anchor = tuple(path[0])
    for i in range(2, len(path)):
        if not has_line_of_sight(grid, anchor, path[i]):
            anchor = tuple(path[i - 1])
            smoothed.append(anchor)
    smoothed.append(tuple(path[-1]))
    return smoothed
