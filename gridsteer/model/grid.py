"""Weighted walkability grid and its epoch-tagged search nodes."""

import math
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..errors import InvalidGridDimensions, InvalidParameter, OutOfBounds

NO_PARENT = -1


class DiagonalMovement(Enum):
    """Corner-cutting policy applied when expanding diagonal neighbors."""
    ALWAYS = "always"
    NEVER = "never"
    IF_AT_MOST_ONE_OBSTACLE = "if_at_most_one_obstacle"
    ONLY_WHEN_NO_OBSTACLES = "only_when_no_obstacles"

    @classmethod
    def from_flags(cls, allow_diagonal: bool,
                   dont_cross_corners: bool) -> "DiagonalMovement":
        if not allow_diagonal:
            return cls.NEVER
        if dont_cross_corners:
            return cls.ONLY_WHEN_NO_OBSTACLES
        return cls.IF_AT_MOST_ONE_OBSTACLE


def check_weight(weight: float) -> float:
    weight = float(weight)
    if not math.isfinite(weight) or weight < 1.0:
        raise InvalidParameter(
            f"cell weight must be a finite number >= 1.0, got {weight}")
    return weight


class Node:
    """
    A single grid cell.

    Search fields are only meaningful when the matching epoch stamp equals
    `Grid.epoch`; anything else is left over from an earlier search.
    `parent` is an index into `Grid.nodes` or NO_PARENT.
    """

    __slots__ = (
        'x', 'y', 'index', 'walkable', 'weight',
        'g_cost', 'h_cost', 'parent',
        'visited_epoch', 'opened_epoch', 'closed_epoch',
        'back_g_cost', 'back_h_cost', 'back_parent',
        'back_opened_epoch', 'back_closed_epoch',
    )

    def __init__(self, x: int, y: int, index: int,
                 walkable: bool = True, weight: float = 1.0):
        self.x = x
        self.y = y
        self.index = index
        self.walkable = walkable
        self.weight = weight
        self.g_cost = 0.0
        self.h_cost = 0.0
        self.parent = NO_PARENT
        self.visited_epoch = 0
        self.opened_epoch = 0
        self.closed_epoch = 0
        # Second lane, only written by bidirectional searches
        self.back_g_cost = 0.0
        self.back_h_cost = 0.0
        self.back_parent = NO_PARENT
        self.back_opened_epoch = 0
        self.back_closed_epoch = 0

    @property
    def f_cost(self) -> float:
        return self.g_cost + self.h_cost

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return (f"Node({self.x}, {self.y}, walkable={self.walkable}, "
                f"weight={self.weight})")


class Grid:
    """
    Rectangular arena of nodes.

    Coordinate convention: (x, y) for the API, index = y * width + x for the
    flat node list, [y, x] for the numpy snapshots.
    """

    def __init__(self, width: int, height: int, default_weight: float = 1.0,
                 matrix: Optional[Sequence[Sequence[int]]] = None):
        if (not isinstance(width, (int, np.integer)) or
                not isinstance(height, (int, np.integer)) or
                width <= 0 or height <= 0):
            raise InvalidGridDimensions(
                f"grid dimensions must be positive integers, "
                f"got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.default_weight = check_weight(default_weight)
        self.epoch = 0
        self.nodes: List[Node] = [
            Node(i % self.width, i // self.width, i,
                 walkable=True, weight=self.default_weight)
            for i in range(self.width * self.height)
        ]
        if matrix is not None:
            self._apply_matrix(matrix)

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[int]],
                    default_weight: float = 1.0) -> "Grid":
        """Build a grid from rows of cells; non-zero cells are blocked."""
        arr = np.asarray(matrix)
        if arr.ndim != 2:
            raise InvalidGridDimensions("matrix must be two dimensional")
        height, width = arr.shape
        return cls(int(width), int(height), default_weight, matrix=arr)

    def _apply_matrix(self, matrix) -> None:
        arr = np.asarray(matrix)
        if arr.shape != (self.height, self.width):
            raise InvalidGridDimensions(
                f"matrix shape {arr.shape} does not match "
                f"{self.height}x{self.width}")
        for node in self.nodes:
            node.walkable = not bool(arr[node.y, node.x])

    # Cell access

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Node:
        if not self.is_inside(x, y):
            raise OutOfBounds(x, y, self.width, self.height)
        return self.nodes[y * self.width + x]

    def node_at(self, index: int) -> Node:
        return self.nodes[index]

    def is_walkable(self, x: int, y: int) -> bool:
        """Check if cell is within bounds and not blocked."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        return self.nodes[y * self.width + x].walkable

    def set_walkable(self, x: int, y: int, walkable: bool) -> None:
        self.get(x, y).walkable = bool(walkable)

    def set_weight(self, x: int, y: int, weight: float) -> None:
        self.get(x, y).weight = check_weight(weight)

    def set_cell(self, x: int, y: int, walkable: Optional[bool] = None,
                 weight: Optional[float] = None) -> None:
        node = self.get(x, y)
        if weight is not None:
            node.weight = check_weight(weight)
        if walkable is not None:
            node.walkable = bool(walkable)

    def add_wall_rectangle(self, x: int, y: int, w: int, h: int) -> None:
        """Mark rectangular region as blocked."""
        # Clamp to grid boundaries
        x_end = min(x + w, self.width)
        y_end = min(y + h, self.height)
        for yy in range(max(0, y), y_end):
            for xx in range(max(0, x), x_end):
                self.nodes[yy * self.width + xx].walkable = False

    def add_wall_points(self, coords: Sequence[Tuple[int, int]]) -> None:
        """Mark specific cells as blocked."""
        for x, y in coords:
            if self.is_inside(x, y):
                self.nodes[y * self.width + x].walkable = False

    def fill_weight_rectangle(self, x: int, y: int, w: int, h: int,
                              weight: float) -> None:
        weight = check_weight(weight)
        for yy in range(max(0, y), min(y + h, self.height)):
            for xx in range(max(0, x), min(x + w, self.width)):
                self.nodes[yy * self.width + xx].weight = weight

    # Search support

    def begin_search(self) -> int:
        """Invalidate all per-node search state and return the new epoch."""
        self.epoch += 1
        return self.epoch

    def neighbors(self, node: Node, allow_diagonal: bool = True,
                  dont_cross_corners: bool = True) -> List[Node]:
        return self.neighbors_for(
            node, DiagonalMovement.from_flags(allow_diagonal,
                                              dont_cross_corners))

    def neighbors_for(self, node: Node,
                      diagonal_movement: DiagonalMovement) -> List[Node]:
        """
        Walkable neighbors of `node` under the given corner policy.

        Orthogonal neighbors come first (up, right, down, left), then the
        diagonals that the policy allows.
        """
        x, y = node.x, node.y
        width = self.width
        nodes = self.nodes
        walkable = self.is_walkable
        neighbors = []

        up = walkable(x, y - 1)
        right = walkable(x + 1, y)
        down = walkable(x, y + 1)
        left = walkable(x - 1, y)
        if up:
            neighbors.append(nodes[(y - 1) * width + x])
        if right:
            neighbors.append(nodes[y * width + x + 1])
        if down:
            neighbors.append(nodes[(y + 1) * width + x])
        if left:
            neighbors.append(nodes[y * width + x - 1])

        if diagonal_movement is DiagonalMovement.NEVER:
            return neighbors

        if diagonal_movement is DiagonalMovement.ONLY_WHEN_NO_OBSTACLES:
            up_right = up and right
            down_right = down and right
            down_left = down and left
            up_left = up and left
        elif diagonal_movement is DiagonalMovement.IF_AT_MOST_ONE_OBSTACLE:
            up_right = up or right
            down_right = down or right
            down_left = down or left
            up_left = up or left
        else:
            up_right = down_right = down_left = up_left = True

        if up_right and walkable(x + 1, y - 1):
            neighbors.append(nodes[(y - 1) * width + x + 1])
        if down_right and walkable(x + 1, y + 1):
            neighbors.append(nodes[(y + 1) * width + x + 1])
        if down_left and walkable(x - 1, y + 1):
            neighbors.append(nodes[(y + 1) * width + x - 1])
        if up_left and walkable(x - 1, y - 1):
            neighbors.append(nodes[(y - 1) * width + x - 1])
        return neighbors

    def can_step(self, x0: int, y0: int, x1: int, y1: int,
                 diagonal_movement: DiagonalMovement) -> bool:
        """Whether a single move between two cells is legal."""
        dx, dy = x1 - x0, y1 - y0
        if max(abs(dx), abs(dy)) != 1:
            return False
        if not (self.is_walkable(x0, y0) and self.is_walkable(x1, y1)):
            return False
        if dx == 0 or dy == 0:
            return True
        if diagonal_movement is DiagonalMovement.NEVER:
            return False
        side_a = self.is_walkable(x1, y0)
        side_b = self.is_walkable(x0, y1)
        if diagonal_movement is DiagonalMovement.ONLY_WHEN_NO_OBSTACLES:
            return side_a and side_b
        if diagonal_movement is DiagonalMovement.IF_AT_MOST_ONE_OBSTACLE:
            return side_a or side_b
        return True

    # Snapshots

    def walkable_matrix(self) -> np.ndarray:
        """Boolean [height, width] array, True = walkable."""
        return np.array([n.walkable for n in self.nodes],
                        dtype=bool).reshape(self.height, self.width)

    def weight_matrix(self) -> np.ndarray:
        return np.array([n.weight for n in self.nodes],
                        dtype=np.float64).reshape(self.height, self.width)

    def clone(self) -> "Grid":
        """Copy of walkability and weights, with fresh search state."""
        other = Grid(self.width, self.height, self.default_weight)
        for src, dst in zip(self.nodes, other.nodes):
            dst.walkable = src.walkable
            dst.weight = src.weight
        return other

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, epoch={self.epoch})"


def new_grid(width: int, height: int, default_weight: float = 1.0) -> Grid:
    return Grid(width, height, default_weight)
