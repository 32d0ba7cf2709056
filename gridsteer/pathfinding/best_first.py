"""Unidirectional searches: A*, Dijkstra, greedy best-first and BFS."""

from collections import deque
from typing import List, Optional, Tuple

from ..model.grid import NO_PARENT, Grid, Node
from ..model.heap import BinaryHeap
from .base import Finder
from .util import backtrace, step_cost

Point = Tuple[int, int]


def compare_f(a: Node, b: Node) -> float:
    # Ties go to the node closer to the goal
    return (a.g_cost + a.h_cost - b.g_cost - b.h_cost) or (a.h_cost - b.h_cost)


def compare_g(a: Node, b: Node) -> float:
    return a.g_cost - b.g_cost


def compare_h(a: Node, b: Node) -> float:
    return a.h_cost - b.h_cost


class AStarFinder(Finder):
    """
    A* over weighted cells.

    A node whose g_cost can be lowered is queued again even if it was
    already closed, so inconsistent custom heuristics still give the
    cheapest path at the price of re-expansions.
    """

    name = "AStarFinder"
    comparator = staticmethod(compare_f)
    use_heuristic = True

    def _search(self, start: Node, goal: Node,
                grid: Grid) -> Optional[List[Point]]:
        epoch = self._epoch
        open_list = BinaryHeap(self.comparator)

        start.g_cost = 0.0
        start.h_cost = self._estimate(start, goal) if self.use_heuristic else 0.0
        start.parent = NO_PARENT
        start.opened_epoch = epoch
        open_list.push(start)

        while open_list:
            self._tick()
            node = open_list.pop()
            node.closed_epoch = epoch
            if node is goal:
                return backtrace(grid, goal)

            for neighbor in self._neighbors(grid, node):
                self._touch(neighbor)
                g = node.g_cost + step_cost(node.x, node.y, neighbor)
                seen = neighbor.opened_epoch == epoch
                if seen and g >= neighbor.g_cost:
                    continue

                neighbor.g_cost = g
                if not seen:
                    neighbor.h_cost = (self._estimate(neighbor, goal)
                                       if self.use_heuristic else 0.0)
                    neighbor.opened_epoch = epoch
                neighbor.parent = node.index

                if neighbor in open_list:
                    open_list.update(neighbor)
                else:
                    # First discovery, or a cheaper way into a closed node
                    neighbor.closed_epoch = 0
                    open_list.push(neighbor)
        return None


class DijkstraFinder(AStarFinder):
    """Uniform-cost search: A* ordered by g_cost alone."""

    name = "DijkstraFinder"
    comparator = staticmethod(compare_g)
    use_heuristic = False


class BestFirstFinder(Finder):
    """
    Greedy best-first search ordered by the heuristic alone.

    Fast but not optimal; a node keeps the parent it was first seen from.
    """

    name = "BestFirstFinder"

    def _search(self, start: Node, goal: Node,
                grid: Grid) -> Optional[List[Point]]:
        epoch = self._epoch
        open_list = BinaryHeap(compare_h)

        start.g_cost = 0.0
        start.h_cost = self._estimate(start, goal)
        start.parent = NO_PARENT
        start.opened_epoch = epoch
        open_list.push(start)

        while open_list:
            self._tick()
            node = open_list.pop()
            node.closed_epoch = epoch
            if node is goal:
                return backtrace(grid, goal)

            for neighbor in self._neighbors(grid, node):
                self._touch(neighbor)
                if neighbor.opened_epoch == epoch:
                    continue
                neighbor.g_cost = node.g_cost + step_cost(node.x, node.y,
                                                          neighbor)
                neighbor.h_cost = self._estimate(neighbor, goal)
                neighbor.parent = node.index
                neighbor.opened_epoch = epoch
                open_list.push(neighbor)
        return None


class BreadthFirstFinder(Finder):
    """Breadth-first search; shortest in number of moves, ignores weights."""

    name = "BreadthFirstFinder"

    def _search(self, start: Node, goal: Node,
                grid: Grid) -> Optional[List[Point]]:
        epoch = self._epoch
        start.g_cost = 0.0
        start.parent = NO_PARENT
        start.opened_epoch = epoch
        queue = deque([start])

        while queue:
            self._tick()
            node = queue.popleft()
            node.closed_epoch = epoch
            if node is goal:
                return backtrace(grid, goal)

            for neighbor in self._neighbors(grid, node):
                self._touch(neighbor)
                if neighbor.opened_epoch == epoch:
                    continue
                neighbor.g_cost = node.g_cost + 1
                neighbor.parent = node.index
                neighbor.opened_epoch = epoch
                queue.append(neighbor)
        return None
