"""Immutable result and snapshot dataclasses."""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

Point = Tuple[int, int]


@dataclass(frozen=True)
class PathResult:
    """Outcome of a single pathfinding query."""
    path: Tuple[Point, ...] = ()
    found: bool = False
    nodes_visited: int = 0
    elapsed: float = 0.0     # seconds
    cost: float = math.inf
    algorithm: str = ""

    def __len__(self) -> int:
        return len(self.path)

    @classmethod
    def not_found(cls, algorithm: str = "", nodes_visited: int = 0,
                  elapsed: float = 0.0) -> "PathResult":
        return cls(path=(), found=False, nodes_visited=nodes_visited,
                   elapsed=elapsed, algorithm=algorithm)


@dataclass(frozen=True)
class AgentSnapshot:
    """Read-only view of an agent for renderers and exporters."""
    agent_id: int
    x: float
    y: float
    vx: float
    vy: float
    radius: float

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)


@dataclass
class SimulationState:
    """Snapshot of the steering world after one tick."""
    step: int
    time: float
    agents: List[AgentSnapshot]
    metrics: Dict[str, float] = field(default_factory=dict)

    def to_csv_rows(self) -> List[Dict]:
        """Convert to CSV-compatible format."""
        return [
            {
                "step": self.step,
                "time": round(self.time, 6),
                "agent_id": a.agent_id,
                "x": round(a.x, 6),
                "y": round(a.y, 6),
                "vx": round(a.vx, 6),
                "vy": round(a.vy, 6),
                "speed": round(a.speed, 6),
            }
            for a in self.agents
        ]
