"""Bidirectional searches meeting in the middle."""

import math
from collections import deque
from typing import List, Optional, Tuple

from ..model.grid import NO_PARENT, Grid, Node
from ..model.heap import BinaryHeap
from .base import Finder
from .util import bi_backtrace, step_cost

Point = Tuple[int, int]


class _Lane:
    """
    One direction of a bidirectional search.

    The forward lane uses the plain Node search fields, the backward lane
    the `back_*` ones, so both searches can label the same node.
    """

    def __init__(self, forward: bool, origin: Node, target: Node):
        prefix = '' if forward else 'back_'
        self.forward = forward
        self.origin = origin
        self.target = target
        self.g_attr = prefix + 'g_cost'
        self.h_attr = prefix + 'h_cost'
        self.parent_attr = prefix + 'parent'
        self.opened_attr = prefix + 'opened_epoch'
        self.closed_attr = prefix + 'closed_epoch'
        self.frontier = None

    def g(self, node: Node) -> float:
        return getattr(node, self.g_attr)

    def h(self, node: Node) -> float:
        return getattr(node, self.h_attr)

    def f(self, node: Node) -> float:
        return getattr(node, self.g_attr) + getattr(node, self.h_attr)

    def is_open(self, node: Node, epoch: int) -> bool:
        """Labelled by this lane during the current search."""
        return getattr(node, self.opened_attr) == epoch

    def label(self, node: Node, g: float, parent: int) -> None:
        setattr(node, self.g_attr, g)
        setattr(node, self.parent_attr, parent)

    def edge_cost(self, node: Node, neighbor: Node) -> float:
        # The backward lane walks edges against the direction of travel
        if self.forward:
            return step_cost(node.x, node.y, neighbor)
        return step_cost(neighbor.x, neighbor.y, node)

    def join(self, grid: Grid, node: Node) -> List[Point]:
        return bi_backtrace(grid, node, node)


class _BiCostFinder(Finder):
    """
    Bidirectional Dijkstra / A*.

    The sides alternate one expansion each. Every relaxation onto a node
    labelled by the other side is a candidate meeting; the cheapest one is
    kept. The search stops once no unexpanded route can beat it: the sum of
    both frontier minima for Dijkstra, the larger frontier minimum f for A*.
    """

    use_heuristic = True

    def _search(self, start: Node, goal: Node,
                grid: Grid) -> Optional[List[Point]]:
        epoch = self._epoch
        fwd = _Lane(True, start, goal)
        bwd = _Lane(False, goal, start)
        for lane in (fwd, bwd):
            lane.frontier = BinaryHeap(self._comparator(lane))
            origin = lane.origin
            setattr(origin, lane.h_attr,
                    self._lane_estimate(origin, lane.target))
            lane.label(origin, 0.0, NO_PARENT)
            setattr(origin, lane.opened_attr, epoch)
            lane.frontier.push(origin)

        self._best = math.inf
        self._meet: Optional[Node] = None

        while fwd.frontier and bwd.frontier:
            if self._done(fwd, bwd):
                break
            self._expand(fwd, bwd, grid, epoch)
            if not bwd.frontier or self._done(fwd, bwd):
                break
            self._expand(bwd, fwd, grid, epoch)

        if self._meet is None:
            return None
        return fwd.join(grid, self._meet)

    def _comparator(self, lane: _Lane):
        if self.use_heuristic:
            return lambda a, b: lane.f(a) - lane.f(b) or lane.h(a) - lane.h(b)
        return lambda a, b: lane.g(a) - lane.g(b)

    def _lane_estimate(self, node: Node, target: Node) -> float:
        return self._estimate(node, target) if self.use_heuristic else 0.0

    def _done(self, fwd: _Lane, bwd: _Lane) -> bool:
        if self._meet is None:
            return False
        if not fwd.frontier or not bwd.frontier:
            return True
        top_f = fwd.frontier.peek()
        top_b = bwd.frontier.peek()
        if self.use_heuristic:
            bound = max(fwd.f(top_f), bwd.f(top_b))
        else:
            bound = fwd.g(top_f) + bwd.g(top_b)
        return bound >= self._best

    def _offer(self, node: Node, lane: _Lane, other: _Lane, epoch: int) -> None:
        if other.is_open(node, epoch):
            total = lane.g(node) + other.g(node)
            if total < self._best:
                self._best = total
                self._meet = node

    def _expand(self, lane: _Lane, other: _Lane, grid: Grid,
                epoch: int) -> None:
        self._tick()
        node = lane.frontier.pop()
        setattr(node, lane.closed_attr, epoch)
        self._offer(node, lane, other, epoch)

        for neighbor in self._neighbors(grid, node):
            self._touch(neighbor)
            g = lane.g(node) + lane.edge_cost(node, neighbor)
            seen = lane.is_open(neighbor, epoch)
            if seen and g >= lane.g(neighbor):
                continue
            lane.label(neighbor, g, node.index)
            if not seen:
                setattr(neighbor, lane.h_attr,
                        self._lane_estimate(neighbor, lane.target))
                setattr(neighbor, lane.opened_attr, epoch)
            if neighbor in lane.frontier:
                lane.frontier.update(neighbor)
            else:
                setattr(neighbor, lane.closed_attr, 0)
                lane.frontier.push(neighbor)
            self._offer(neighbor, lane, other, epoch)


class BiAStarFinder(_BiCostFinder):
    name = "BiAStarFinder"
    use_heuristic = True


class BiDijkstraFinder(_BiCostFinder):
    name = "BiDijkstraFinder"
    use_heuristic = False


class BiBestFirstFinder(Finder):
    """Greedy best-first from both ends; stops at the first meeting."""

    name = "BiBestFirstFinder"

    def _search(self, start: Node, goal: Node,
                grid: Grid) -> Optional[List[Point]]:
        epoch = self._epoch
        fwd = _Lane(True, start, goal)
        bwd = _Lane(False, goal, start)
        for lane in (fwd, bwd):
            lane.frontier = BinaryHeap(
                lambda a, b, lane=lane: lane.h(a) - lane.h(b))
            origin = lane.origin
            setattr(origin, lane.h_attr, self._estimate(origin, lane.target))
            lane.label(origin, 0.0, NO_PARENT)
            setattr(origin, lane.opened_attr, epoch)
            lane.frontier.push(origin)

        while fwd.frontier and bwd.frontier:
            for lane, other in ((fwd, bwd), (bwd, fwd)):
                self._tick()
                node = lane.frontier.pop()
                setattr(node, lane.closed_attr, epoch)
                for neighbor in self._neighbors(grid, node):
                    self._touch(neighbor)
                    if lane.is_open(neighbor, epoch):
                        continue
                    lane.label(neighbor,
                               lane.g(node) + lane.edge_cost(node, neighbor),
                               node.index)
                    setattr(neighbor, lane.h_attr,
                            self._estimate(neighbor, lane.target))
                    setattr(neighbor, lane.opened_attr, epoch)
                    if other.is_open(neighbor, epoch):
                        return fwd.join(grid, neighbor)
                    lane.frontier.push(neighbor)
                if not lane.frontier:
                    return None
        return None


class BiBreadthFirstFinder(Finder):
    """
    Breadth-first from both ends, one whole layer per side per round.

    All meetings found while expanding a layer are compared and the one with
    the fewest moves wins, so the result has the same number of moves as a
    plain breadth-first search.
    """

    name = "BiBreadthFirstFinder"

    def _search(self, start: Node, goal: Node,
                grid: Grid) -> Optional[List[Point]]:
        epoch = self._epoch
        fwd = _Lane(True, start, goal)
        bwd = _Lane(False, goal, start)
        for lane in (fwd, bwd):
            lane.label(lane.origin, 0.0, NO_PARENT)
            setattr(lane.origin, lane.opened_attr, epoch)
            lane.frontier = deque([lane.origin])

        while fwd.frontier and bwd.frontier:
            for lane, other in ((fwd, bwd), (bwd, fwd)):
                meeting = self._expand_layer(lane, other, grid, epoch)
                if meeting is not None:
                    node, neighbor = meeting
                    if lane.forward:
                        return bi_backtrace(grid, node, neighbor)
                    return bi_backtrace(grid, neighbor, node)
                if not lane.frontier:
                    return None
        return None

    def _expand_layer(self, lane: _Lane, other: _Lane, grid: Grid,
                      epoch: int) -> Optional[Tuple[Node, Node]]:
        best = None
        best_moves = math.inf
        for _ in range(len(lane.frontier)):
            self._tick()
            node = lane.frontier.popleft()
            setattr(node, lane.closed_attr, epoch)
            depth = lane.g(node)
            for neighbor in self._neighbors(grid, node):
                self._touch(neighbor)
                if other.is_open(neighbor, epoch):
                    moves = depth + 1 + other.g(neighbor)
                    if moves < best_moves:
                        best_moves = moves
                        best = (node, neighbor)
                    continue
                if lane.is_open(neighbor, epoch):
                    continue
                lane.label(neighbor, depth + 1, node.index)
                setattr(neighbor, lane.opened_attr, epoch)
                lane.frontier.append(neighbor)
        return best
