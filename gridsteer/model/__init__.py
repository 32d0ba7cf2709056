"""Model package: grid, search structures, agents and the steering world."""

from .vector import Vector2
from .state import AgentSnapshot, PathResult, SimulationState
from .grid import DiagonalMovement, Grid, Node, new_grid
from .heap import BinaryHeap
from .spatial_hash import SpatialHash
from .flow_field import FlowField, build_flow_field
from .agent import SteeringAgent, attach_behavior, create_agent, tick
from .engine import SimulationEngine, SteeringWorld

__all__ = [
    'Vector2',
    'AgentSnapshot',
    'PathResult',
    'SimulationState',
    'DiagonalMovement',
    'Grid',
    'Node',
    'new_grid',
    'BinaryHeap',
    'SpatialHash',
    'FlowField',
    'build_flow_field',
    'SteeringAgent',
    'attach_behavior',
    'create_agent',
    'tick',
    'SimulationEngine',
    'SteeringWorld',
]
