"""Grid-wide direction field guiding agents toward a goal cell."""

import math
from collections import deque
from typing import Optional, Tuple

import numpy as np

from ..errors import InvalidParameter
from .grid import DiagonalMovement, Grid
from .vector import Vector2


class FlowField:
    """
    Pre-computed distance and direction field over a Grid.

    Distances come from a breadth-first propagation out of the goal cell;
    every reachable cell then points at its lowest-distance neighbor.
    World positions map onto cells through `origin` and `cell_size`, so the
    same field can drive agents that live in pixel space.
    """

    def __init__(self, grid: Grid, cell_size: float = 1.0,
                 origin: Optional[Vector2] = None):
        if not cell_size > 0:
            raise InvalidParameter(
                f"cell_size must be positive, got {cell_size}")
        self.grid = grid
        self.width = grid.width
        self.height = grid.height
        self.cell_size = float(cell_size)
        self.origin = origin.copy() if origin is not None else Vector2()
        self.goal: Optional[Tuple[int, int]] = None
        self.distance = np.full((self.height, self.width), np.inf)
        self.directions = np.zeros((self.height, self.width, 2),
                                   dtype=np.float64)

    def compute(self, goal: Tuple[int, int],
                diagonal_movement: DiagonalMovement =
                DiagonalMovement.ONLY_WHEN_NO_OBSTACLES) -> None:
        """Rebuild distances and directions toward `goal`."""
        self.goal = goal
        self.distance = np.full((self.height, self.width), np.inf)
        self.directions = np.zeros((self.height, self.width, 2),
                                   dtype=np.float64)
        gx, gy = goal
        if not self.grid.is_walkable(gx, gy):
            return

        grid = self.grid
        self.distance[gy, gx] = 0
        queue = deque([grid.get(gx, gy)])
        while queue:
            node = queue.popleft()
            dist = self.distance[node.y, node.x]
            for neighbor in grid.neighbors_for(node, diagonal_movement):
                if np.isinf(self.distance[neighbor.y, neighbor.x]):
                    self.distance[neighbor.y, neighbor.x] = dist + 1
                    queue.append(neighbor)

        for node in grid.nodes:
            dist = self.distance[node.y, node.x]
            if np.isinf(dist) or dist == 0:
                continue
            best = None
            best_dist = dist
            for neighbor in grid.neighbors_for(node, diagonal_movement):
                n_dist = self.distance[neighbor.y, neighbor.x]
                if n_dist < best_dist:
                    best_dist = n_dist
                    best = neighbor
            if best is not None:
                dx = best.x - node.x
                dy = best.y - node.y
                norm = math.hypot(dx, dy)
                self.directions[node.y, node.x] = (dx / norm, dy / norm)

    def is_reachable(self, x: int, y: int) -> bool:
        return self.grid.is_inside(x, y) and np.isfinite(self.distance[y, x])

    def get_distance(self, x: int, y: int) -> float:
        """Return raw step distance at position."""
        if self.grid.is_inside(x, y):
            return float(self.distance[y, x])
        return math.inf

    def direction_at_cell(self, x: int, y: int) -> Vector2:
        if not self.grid.is_inside(x, y):
            return Vector2()
        dx, dy = self.directions[y, x]
        return Vector2(dx, dy)

    def cell_for(self, position: Vector2) -> Tuple[int, int]:
        return (int(math.floor((position.x - self.origin.x) / self.cell_size)),
                int(math.floor((position.y - self.origin.y) / self.cell_size)))

    def cell_center(self, x: int, y: int) -> Vector2:
        return Vector2(self.origin.x + (x + 0.5) * self.cell_size,
                       self.origin.y + (y + 0.5) * self.cell_size)

    def sample(self, position: Vector2) -> Vector2:
        """Bilinear blend of the four cell directions around `position`."""
        fx = (position.x - self.origin.x) / self.cell_size - 0.5
        fy = (position.y - self.origin.y) / self.cell_size - 0.5
        fx = min(max(fx, 0.0), self.width - 1.0)
        fy = min(max(fy, 0.0), self.height - 1.0)
        x0 = int(math.floor(fx))
        y0 = int(math.floor(fy))
        x1 = min(x0 + 1, self.width - 1)
        y1 = min(y0 + 1, self.height - 1)
        tx = fx - x0
        ty = fy - y0

        d = self.directions
        top = d[y0, x0] * (1 - tx) + d[y0, x1] * tx
        bottom = d[y1, x0] * (1 - tx) + d[y1, x1] * tx
        blended = top * (1 - ty) + bottom * ty
        return Vector2(blended[0], blended[1])


def build_flow_field(grid: Grid, goal: Tuple[int, int],
                     cell_size: float = 1.0,
                     origin: Optional[Vector2] = None,
                     diagonal_movement: DiagonalMovement =
                     DiagonalMovement.ONLY_WHEN_NO_OBSTACLES) -> FlowField:
    field = FlowField(grid, cell_size, origin)
    field.compute(goal, diagonal_movement)
    return field
