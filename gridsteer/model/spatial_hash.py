"""Uniform bucket grid for radius-bounded neighbor queries."""

import math
from typing import Dict, Hashable, Iterable, List, Tuple

from ..errors import InvalidParameter
from .vector import Vector2

Cell = Tuple[int, int]


class SpatialHash:
    """
    Buckets agents by the cell their position falls in.

    Agents only need `id` (hashable) and `position` (Vector2). Bucket
    membership is refreshed lazily: `update` touches the buckets only when
    the agent crossed a cell boundary.
    """

    def __init__(self, cell_size: float):
        if not cell_size > 0:
            raise InvalidParameter(
                f"cell_size must be positive, got {cell_size}")
        self.cell_size = float(cell_size)
        self._inv_cell_size = 1.0 / self.cell_size
        self.buckets: Dict[Cell, List] = {}
        self.agent_to_cell: Dict[Hashable, Cell] = {}

    def cell_of(self, position: Vector2) -> Cell:
        return (int(math.floor(position.x * self._inv_cell_size)),
                int(math.floor(position.y * self._inv_cell_size)))

    def insert(self, agent) -> None:
        if agent.id in self.agent_to_cell:
            self.update(agent)
            return
        cell = self.cell_of(agent.position)
        self.buckets.setdefault(cell, []).append(agent)
        self.agent_to_cell[agent.id] = cell

    def update(self, agent) -> bool:
        """Move the agent to its current cell; False if it did not change."""
        old_cell = self.agent_to_cell.get(agent.id)
        if old_cell is None:
            self.insert(agent)
            return True
        cell = self.cell_of(agent.position)
        if cell == old_cell:
            return False
        self._discard(old_cell, agent)
        self.buckets.setdefault(cell, []).append(agent)
        self.agent_to_cell[agent.id] = cell
        return True

    def remove(self, agent) -> None:
        cell = self.agent_to_cell.pop(agent.id, None)
        if cell is not None:
            self._discard(cell, agent)

    def _discard(self, cell: Cell, agent) -> None:
        bucket = self.buckets.get(cell)
        if bucket is None:
            return
        for i, other in enumerate(bucket):
            if other.id == agent.id:
                del bucket[i]
                break
        if not bucket:
            del self.buckets[cell]

    def rebuild(self, agents: Iterable) -> None:
        self.clear()
        for agent in agents:
            self.insert(agent)

    def clear(self) -> None:
        self.buckets.clear()
        self.agent_to_cell.clear()

    def query_radius(self, center: Vector2, radius: float) -> List:
        """All agents whose position lies within `radius` of `center`.

        Scans the covered cells, or every occupied bucket when the query
        covers more cells than there are buckets.
        """
        if not math.isfinite(radius):
            raise InvalidParameter(f"radius must be finite, got {radius!r}")
        if radius < 0:
            return []
        inv = self._inv_cell_size
        min_cx = int(math.floor((center.x - radius) * inv))
        max_cx = int(math.floor((center.x + radius) * inv))
        min_cy = int(math.floor((center.y - radius) * inv))
        max_cy = int(math.floor((center.y + radius) * inv))
        r2 = radius * radius

        buckets = self.buckets
        covered = (max_cx - min_cx + 1) * (max_cy - min_cy + 1)
        if covered > len(buckets):
            cells = [cell for cell in buckets
                     if min_cx <= cell[0] <= max_cx and
                     min_cy <= cell[1] <= max_cy]
        else:
            cells = [(cx, cy) for cy in range(min_cy, max_cy + 1)
                     for cx in range(min_cx, max_cx + 1)]

        result = []
        for cell in cells:
            bucket = buckets.get(cell)
            if bucket is None:
                continue
            for agent in bucket:
                if agent.position.distance_squared_to(center) <= r2:
                    result.append(agent)
        return result

    def __len__(self) -> int:
        return len(self.agent_to_cell)

    def __contains__(self, agent) -> bool:
        return agent.id in self.agent_to_cell
