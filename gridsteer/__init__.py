"""Grid pathfinding and steering behaviors for 2D agents."""

from .errors import (ConfigError, EmptyHeap, GridSteerError,
                     InvalidGridDimensions, InvalidParameter, OutOfBounds,
                     SearchDepthExceeded, UnknownAlgorithm)
from .model import (AgentSnapshot, DiagonalMovement, Grid, PathResult,
                    SimulationState, SpatialHash, SteeringAgent, SteeringWorld,
                    Vector2, attach_behavior, create_agent, new_grid, tick)
from .pathfinding import available_algorithms, create_finder, find_path
from .steering import BehaviorKind, create_behavior

__version__ = "0.1.0"

__all__ = [
    'ConfigError',
    'EmptyHeap',
    'GridSteerError',
    'InvalidGridDimensions',
    'InvalidParameter',
    'OutOfBounds',
    'SearchDepthExceeded',
    'UnknownAlgorithm',
    'AgentSnapshot',
    'DiagonalMovement',
    'Grid',
    'PathResult',
    'SimulationState',
    'SpatialHash',
    'SteeringAgent',
    'SteeringWorld',
    'Vector2',
    'attach_behavior',
    'create_agent',
    'new_grid',
    'tick',
    'available_algorithms',
    'create_finder',
    'find_path',
    'BehaviorKind',
    'create_behavior',
]
