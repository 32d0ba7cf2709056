"""Kind-keyed construction of behaviors."""

from typing import Dict, Type

from ..errors import InvalidParameter
from .avoidance import (Containment, ObstacleAvoidance,
                        UnalignedCollisionAvoidance, WallFollowing)
from .base import Behavior, BehaviorKind
from .group import Alignment, Cohesion, LeaderFollowing, Separation
from .individual import (Arrival, Evade, Flee, OffsetPursuit, Pursuit, Seek,
                         Wander)
from .paths import FlowFieldFollowing, PathFollowing

BEHAVIORS: Dict[BehaviorKind, Type[Behavior]] = {
    cls.kind: cls for cls in (
        Seek,
        Flee,
        Arrival,
        Wander,
        Pursuit,
        Evade,
        OffsetPursuit,
        ObstacleAvoidance,
        PathFollowing,
        WallFollowing,
        Containment,
        Separation,
        Cohesion,
        Alignment,
        LeaderFollowing,
        FlowFieldFollowing,
        UnalignedCollisionAvoidance,
    )
}


def create_behavior(kind, **params) -> Behavior:
    """Build a behavior from its kind (enum, name or display name)."""
    kind = BehaviorKind.parse(kind)
    try:
        return BEHAVIORS[kind](**params)
    except TypeError as e:
        raise InvalidParameter(f"bad parameters for {kind.value}: {e}") from e
