"""Iterative deepening A*."""

import logging
import math
from typing import List, Optional, Tuple

from ..errors import InvalidParameter, SearchDepthExceeded
from ..model.grid import NO_PARENT, Grid, Node
from .base import Finder
from .util import backtrace, step_cost

logger = logging.getLogger(__name__)

Point = Tuple[int, int]

# Threshold comparisons tolerate accumulated float error
_TOLERANCE = 1e-9


class IDAStarFinder(Finder):
    """
    Depth-first search bounded by an f-cost threshold that grows to the
    smallest f seen above it after each unsuccessful pass.

    Each pass runs in its own grid epoch. Within a pass `closed_epoch` marks
    nodes on the current DFS path (cycle check) and `opened_epoch`/`g_cost`
    remember the cheapest g seen, so a node reached again at equal or
    higher cost is not searched twice.

    `max_depth` caps the DFS stack (default: number of cells) and raises
    SearchDepthExceeded. `cost_budget` stops deepening once the threshold
    passes it (default: width * height * 10) and reports no path.
    """

    name = "IDAStarFinder"

    def __init__(self, *args, max_depth: Optional[int] = None,
                 cost_budget: Optional[float] = None, **kwargs):
        super().__init__(*args, **kwargs)
        if max_depth is not None and max_depth <= 0:
            raise InvalidParameter(
                f"max_depth must be positive, got {max_depth}")
        if cost_budget is not None and not cost_budget > 0:
            raise InvalidParameter(
                f"cost_budget must be positive, got {cost_budget}")
        self.max_depth = max_depth
        self.cost_budget = cost_budget

    def _search(self, start: Node, goal: Node,
                grid: Grid) -> Optional[List[Point]]:
        max_depth = self.max_depth or grid.width * grid.height
        budget = self.cost_budget or grid.width * grid.height * 10
        threshold = self._estimate(start, goal)

        passes = 0
        while True:
            passes += 1
            path, next_threshold = self._bounded_search(
                start, goal, grid, threshold, max_depth)
            if path is not None:
                logger.debug("%s: found after %d passes", self.name, passes)
                return path
            if math.isinf(next_threshold) or next_threshold > budget:
                return None
            threshold = next_threshold
            # Fresh epoch so the next pass starts with clean labels
            self._epoch = grid.begin_search()
            self._touch(start)

    def _bounded_search(self, start: Node, goal: Node, grid: Grid,
                        threshold: float, max_depth: int
                        ) -> Tuple[Optional[List[Point]], float]:
        epoch = self._epoch
        start.g_cost = 0.0
        start.parent = NO_PARENT
        start.opened_epoch = epoch
        start.closed_epoch = epoch
        next_threshold = math.inf

        stack = [(start, iter(self._neighbors(grid, start)))]
        while stack:
            self._tick()
            node, neighbors = stack[-1]
            neighbor = next(neighbors, None)
            if neighbor is None:
                stack.pop()
                node.closed_epoch = 0
                continue
            if neighbor.closed_epoch == epoch:
                continue

            g = node.g_cost + step_cost(node.x, node.y, neighbor)
            if neighbor.opened_epoch == epoch and g >= neighbor.g_cost:
                continue
            self._touch(neighbor)
            f = g + self._estimate(neighbor, goal)
            if f > threshold + _TOLERANCE:
                next_threshold = min(next_threshold, f)
                continue

            neighbor.g_cost = g
            neighbor.opened_epoch = epoch
            neighbor.parent = node.index
            if neighbor is goal:
                return backtrace(grid, goal), threshold

            if len(stack) >= max_depth:
                raise SearchDepthExceeded(
                    f"{self.name} exceeded max depth {max_depth}")
            neighbor.closed_epoch = epoch
            stack.append((neighbor, iter(self._neighbors(grid, neighbor))))

        return None, next_threshold
