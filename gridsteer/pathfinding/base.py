"""Shared driver for every pathfinder variant."""

import logging
import math
import time
from typing import List, Optional, Tuple

from ..errors import InvalidParameter
from ..model.grid import DiagonalMovement, Grid, Node
from ..model.state import PathResult
from .heuristics import heuristic_name, resolve_heuristic
from .util import path_cost

logger = logging.getLogger(__name__)

Point = Tuple[int, int]

# Clock reads are comparatively slow; only look every N iterations
_TIME_CHECK_INTERVAL = 64


class BudgetExhausted(Exception):
    """Internal signal: the caller's iteration or time budget ran out."""


class Finder:
    """
    Base class of the pathfinder family.

    Subclasses implement `_search(start, goal, grid)` and return the list of
    cells from start to goal, or None when no route exists. The base class
    handles the epoch bump, out-of-bounds and blocked endpoints, budgets,
    timing and building the PathResult, so a failed search is always a
    `found=False` result and never an exception.
    """

    name = "Finder"

    def __init__(self, allow_diagonal: bool = True,
                 dont_cross_corners: bool = True,
                 heuristic=None,
                 weight: float = 1.0,
                 diagonal_movement: Optional[DiagonalMovement] = None,
                 max_iterations: Optional[int] = None,
                 time_limit: Optional[float] = None):
        if diagonal_movement is None:
            diagonal_movement = DiagonalMovement.from_flags(
                allow_diagonal, dont_cross_corners)
        self.diagonal_movement = diagonal_movement
        self.heuristic = resolve_heuristic(heuristic, diagonal_movement)
        if not weight > 0 or not math.isfinite(weight):
            raise InvalidParameter(
                f"heuristic weight must be positive, got {weight}")
        self.weight = float(weight)
        if max_iterations is not None and max_iterations <= 0:
            raise InvalidParameter(
                f"max_iterations must be positive, got {max_iterations}")
        if time_limit is not None and not time_limit > 0:
            raise InvalidParameter(
                f"time_limit must be positive, got {time_limit}")
        self.max_iterations = max_iterations
        self.time_limit = time_limit

        self._epoch = 0
        self._iterations = 0
        self._visited = 0
        self._deadline: Optional[float] = None

    @property
    def allow_diagonal(self) -> bool:
        return self.diagonal_movement is not DiagonalMovement.NEVER

    def find_path(self, start_x: int, start_y: int, goal_x: int, goal_y: int,
                  grid: Grid) -> PathResult:
        started = time.perf_counter()
        self._epoch = grid.begin_search()
        self._iterations = 0
        self._visited = 0
        self._deadline = (started + self.time_limit
                          if self.time_limit is not None else None)

        if not (grid.is_walkable(start_x, start_y) and
                grid.is_walkable(goal_x, goal_y)):
            logger.debug("%s: start %s or goal %s blocked or out of bounds",
                         self.name, (start_x, start_y), (goal_x, goal_y))
            return PathResult.not_found(
                self.name, elapsed=time.perf_counter() - started)

        start = grid.get(start_x, start_y)
        goal = grid.get(goal_x, goal_y)
        self._touch(start)

        if start is goal:
            path: Optional[List[Point]] = [(start_x, start_y)]
        else:
            try:
                path = self._search(start, goal, grid)
            except BudgetExhausted:
                logger.debug("%s: budget exhausted after %d iterations",
                             self.name, self._iterations)
                path = None

        elapsed = time.perf_counter() - started
        if not path:
            return PathResult.not_found(self.name, self._visited, elapsed)

        result = PathResult(
            path=tuple(path),
            found=True,
            nodes_visited=self._visited,
            elapsed=elapsed,
            cost=path_cost(grid, path),
            algorithm=self.name,
        )
        logger.debug("%s: %d cells, cost %.3f, %d visited in %.2f ms",
                     self.name, len(result.path), result.cost,
                     result.nodes_visited, elapsed * 1000)
        return result

    def _search(self, start: Node, goal: Node,
                grid: Grid) -> Optional[List[Point]]:
        raise NotImplementedError

    # Helpers for subclasses

    def _neighbors(self, grid: Grid, node: Node) -> List[Node]:
        return grid.neighbors_for(node, self.diagonal_movement)

    def _estimate(self, node: Node, target: Node) -> float:
        return self.weight * self.heuristic(abs(node.x - target.x),
                                            abs(node.y - target.y))

    def _touch(self, node: Node) -> None:
        """Count `node` once per epoch toward `nodes_visited`."""
        if node.visited_epoch != self._epoch:
            node.visited_epoch = self._epoch
            self._visited += 1

    def _tick(self) -> None:
        """Charge one iteration against the caller's budget."""
        self._iterations += 1
        if (self.max_iterations is not None and
                self._iterations > self.max_iterations):
            raise BudgetExhausted()
        if (self._deadline is not None and
                self._iterations % _TIME_CHECK_INTERVAL == 0 and
                time.perf_counter() > self._deadline):
            raise BudgetExhausted()

    def __repr__(self) -> str:
        return (f"{type(self).__name__}("
                f"diagonal_movement={self.diagonal_movement.value}, "
                f"heuristic={heuristic_name(self.heuristic)}, "
                f"weight={self.weight})")
