"""Steering behaviors and the geometry they react to."""

from .avoidance import (Containment, ObstacleAvoidance,
                        UnalignedCollisionAvoidance, WallFollowing)
from .base import Behavior, BehaviorKind
from .environment import (BoundingBox, CircleObstacle, SteeringPath,
                          WallSegment)
from .group import Alignment, Cohesion, LeaderFollowing, Separation
from .individual import (Arrival, Evade, Flee, OffsetPursuit, Pursuit, Seek,
                         Wander)
from .paths import FlowFieldFollowing, PathFollowing
from .registry import BEHAVIORS, create_behavior

__all__ = [
    'Behavior',
    'BehaviorKind',
    'BoundingBox',
    'CircleObstacle',
    'SteeringPath',
    'WallSegment',
    'Seek',
    'Flee',
    'Arrival',
    'Wander',
    'Pursuit',
    'Evade',
    'OffsetPursuit',
    'ObstacleAvoidance',
    'PathFollowing',
    'WallFollowing',
    'Containment',
    'Separation',
    'Cohesion',
    'Alignment',
    'LeaderFollowing',
    'FlowFieldFollowing',
    'UnalignedCollisionAvoidance',
    'BEHAVIORS',
    'create_behavior',
]
