"""Jump point search for uniform-cost grids."""

from typing import List, Optional, Tuple

from ..model.grid import NO_PARENT, DiagonalMovement, Grid, Node
from ..model.heap import BinaryHeap
from .base import Finder
from .best_first import compare_f
from .util import backtrace, expand_path, interpolate, step_cost

Point = Tuple[int, int]


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class JumpPointFinder(Finder):
    """
    A* over jump points.

    Successors are found by jumping along straight and diagonal lines until
    the goal or a cell with a forced neighbor is reached. Pruning rules
    follow the active DiagonalMovement; with `allow_diagonal=False` this is
    the 4-directional variant. The returned path is expanded back to
    adjacent cells. Segment costs include cell weights, but pruning assumes
    uniform weights, so the path is only guaranteed optimal on those.
    """

    name = "JumpPointFinder"

    def _search(self, start: Node, goal: Node,
                grid: Grid) -> Optional[List[Point]]:
        epoch = self._epoch
        self._grid = grid
        self._goal = goal
        open_list = BinaryHeap(compare_f)

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
                return expand_path(backtrace(grid, goal))
            self._identify_successors(node, open_list, epoch)
        return None

    def _identify_successors(self, node: Node, open_list: BinaryHeap,
                             epoch: int) -> None:
        grid = self._grid
        for nx, ny in self._find_neighbors(node):
            point = self._jump(nx, ny, node.x, node.y)
            if point is None:
                continue
            jump_node = grid.get(*point)
            self._touch(jump_node)
            if jump_node.closed_epoch == epoch:
                continue

            g = node.g_cost + self._segment_cost(node, jump_node)
            seen = jump_node.opened_epoch == epoch
            if seen and g >= jump_node.g_cost:
                continue
            jump_node.g_cost = g
            jump_node.parent = node.index
            if not seen:
                jump_node.h_cost = self._estimate(jump_node, self._goal)
                jump_node.opened_epoch = epoch
                open_list.push(jump_node)
            else:
                open_list.update(jump_node)

    def _segment_cost(self, a: Node, b: Node) -> float:
        grid = self._grid
        cost = 0.0
        cells = interpolate(a.x, a.y, b.x, b.y)
        for (x0, y0), (x1, y1) in zip(cells, cells[1:]):
            cost += step_cost(x0, y0, grid.get(x1, y1))
        return cost

    # Neighbor pruning

    def _find_neighbors(self, node: Node) -> List[Point]:
        grid = self._grid
        if node.parent == NO_PARENT:
            return [(n.x, n.y) for n in grid.neighbors_for(
                node, self.diagonal_movement)]

        parent = grid.nodes[node.parent]
        x, y = node.x, node.y
        dx = _sign(x - parent.x)
        dy = _sign(y - parent.y)
        walkable = grid.is_walkable
        mode = self.diagonal_movement
        neighbors = []

        if mode is DiagonalMovement.NEVER:
            if dx != 0:
                candidates = [(x, y - 1), (x, y + 1), (x + dx, y)]
            else:
                candidates = [(x - 1, y), (x + 1, y), (x, y + dy)]
            return [c for c in candidates if walkable(*c)]

        if mode is DiagonalMovement.ONLY_WHEN_NO_OBSTACLES:
            if dx != 0 and dy != 0:
                vertical = walkable(x, y + dy)
                horizontal = walkable(x + dx, y)
                if vertical:
                    neighbors.append((x, y + dy))
                if horizontal:
                    neighbors.append((x + dx, y))
                if vertical and horizontal:
                    neighbors.append((x + dx, y + dy))
            elif dx != 0:
                ahead = walkable(x + dx, y)
                top = walkable(x, y + 1)
                bottom = walkable(x, y - 1)
                if ahead:
                    neighbors.append((x + dx, y))
                    if top:
                        neighbors.append((x + dx, y + 1))
                    if bottom:
                        neighbors.append((x + dx, y - 1))
                if top:
                    neighbors.append((x, y + 1))
                if bottom:
                    neighbors.append((x, y - 1))
            else:
                ahead = walkable(x, y + dy)
                right = walkable(x + 1, y)
                left = walkable(x - 1, y)
                if ahead:
                    neighbors.append((x, y + dy))
                    if right:
                        neighbors.append((x + 1, y + dy))
                    if left:
                        neighbors.append((x - 1, y + dy))
                if right:
                    neighbors.append((x + 1, y))
                if left:
                    neighbors.append((x - 1, y))
            return neighbors

        # ALWAYS and IF_AT_MOST_ONE_OBSTACLE share the pruning rules; the
        # latter additionally needs one open side for every diagonal step
        relaxed = mode is DiagonalMovement.ALWAYS
        if dx != 0 and dy != 0:
            vertical = walkable(x, y + dy)
            horizontal = walkable(x + dx, y)
            if vertical:
                neighbors.append((x, y + dy))
            if horizontal:
                neighbors.append((x + dx, y))
            if relaxed or vertical or horizontal:
                neighbors.append((x + dx, y + dy))
            if not walkable(x - dx, y) and (relaxed or vertical):
                neighbors.append((x - dx, y + dy))
            if not walkable(x, y - dy) and (relaxed or horizontal):
                neighbors.append((x + dx, y - dy))
        elif dx != 0:
            ahead = walkable(x + dx, y)
            if ahead:
                neighbors.append((x + dx, y))
            if relaxed or ahead:
                if not walkable(x, y + 1):
                    neighbors.append((x + dx, y + 1))
                if not walkable(x, y - 1):
                    neighbors.append((x + dx, y - 1))
        else:
            ahead = walkable(x, y + dy)
            if ahead:
                neighbors.append((x, y + dy))
            if relaxed or ahead:
                if not walkable(x + 1, y):
                    neighbors.append((x + 1, y + dy))
                if not walkable(x - 1, y):
                    neighbors.append((x - 1, y + dy))
        return neighbors

    # Jumping

    def _jump(self, x: int, y: int, px: int, py: int) -> Optional[Point]:
        if self.diagonal_movement is DiagonalMovement.NEVER:
            return self._jump_orthogonal(x, y, x - px, y - py)
        return self._jump_diagonal(x, y, x - px, y - py)

    def _jump_orthogonal(self, x: int, y: int, dx: int,
                         dy: int) -> Optional[Point]:
        walkable = self._grid.is_walkable
        goal = self._goal
        while True:
            if not walkable(x, y):
                return None
            if x == goal.x and y == goal.y:
                return (x, y)
            if dx != 0:
                if ((walkable(x, y - 1) and not walkable(x - dx, y - 1)) or
                        (walkable(x, y + 1) and not walkable(x - dx, y + 1))):
                    return (x, y)
            else:
                if ((walkable(x - 1, y) and not walkable(x - 1, y - dy)) or
                        (walkable(x + 1, y) and not walkable(x + 1, y - dy))):
                    return (x, y)
                # Vertical runs must stop where a horizontal run would
                if (self._jump_orthogonal(x + 1, y, 1, 0) is not None or
                        self._jump_orthogonal(x - 1, y, -1, 0) is not None):
                    return (x, y)
            x += dx
            y += dy

    def _jump_diagonal(self, x: int, y: int, dx: int,
                       dy: int) -> Optional[Point]:
        walkable = self._grid.is_walkable
        goal = self._goal
        mode = self.diagonal_movement
        strict = mode is DiagonalMovement.ONLY_WHEN_NO_OBSTACLES
        while True:
            if not walkable(x, y):
                return None
            if x == goal.x and y == goal.y:
                return (x, y)

            if dx != 0 and dy != 0:
                if not strict and (
                        (walkable(x - dx, y + dy) and not walkable(x - dx, y)) or
                        (walkable(x + dx, y - dy) and not walkable(x, y - dy))):
                    return (x, y)
                if (self._jump_diagonal(x + dx, y, dx, 0) is not None or
                        self._jump_diagonal(x, y + dy, 0, dy) is not None):
                    return (x, y)
            elif strict:
                if dx != 0:
                    if ((walkable(x, y - 1) and not walkable(x - dx, y - 1)) or
                            (walkable(x, y + 1) and not walkable(x - dx, y + 1))):
                        return (x, y)
                else:
                    if ((walkable(x - 1, y) and not walkable(x - 1, y - dy)) or
                            (walkable(x + 1, y) and not walkable(x + 1, y - dy))):
                        return (x, y)
                    if (self._jump_diagonal(x + 1, y, 1, 0) is not None or
                            self._jump_diagonal(x - 1, y, -1, 0) is not None):
                        return (x, y)
            else:
                if dx != 0:
                    if ((walkable(x + dx, y + 1) and not walkable(x, y + 1)) or
                            (walkable(x + dx, y - 1) and not walkable(x, y - 1))):
                        return (x, y)
                elif ((walkable(x + 1, y + dy) and not walkable(x + 1, y)) or
                        (walkable(x - 1, y + dy) and not walkable(x - 1, y))):
                    return (x, y)

            if mode is DiagonalMovement.IF_AT_MOST_ONE_OBSTACLE:
                if not (walkable(x + dx, y) or walkable(x, y + dy)):
                    return None
            elif strict:
                if not (walkable(x + dx, y) and walkable(x, y + dy)):
                    return None
            x += dx
            y += dy


class OrthogonalJumpPointFinder(JumpPointFinder):
    """Jump point search restricted to the four orthogonal moves."""

    name = "OrthogonalJumpPointFinder"

    def __init__(self, *args, **kwargs):
        kwargs['allow_diagonal'] = False
        kwargs.pop('diagonal_movement', None)
        super().__init__(*args, **kwargs)
