"""Behavior interface, kinds and the shared steering primitives."""

import math
from enum import Enum
from typing import Any, Dict

from ..errors import InvalidParameter
from ..model.vector import EPSILON, Vector2


class BehaviorKind(Enum):
    """Stable identifier for every behavior variant."""
    SEEK = "Seek"
    FLEE = "Flee"
    ARRIVAL = "Arrival"
    WANDER = "Wander"
    PURSUIT = "Pursuit"
    EVADE = "Evade"
    OFFSET_PURSUIT = "Offset Pursuit"
    OBSTACLE_AVOIDANCE = "Obstacle Avoidance"
    PATH_FOLLOWING = "Path Following"
    WALL_FOLLOWING = "Wall Following"
    CONTAINMENT = "Containment"
    SEPARATION = "Separation"
    COHESION = "Cohesion"
    ALIGNMENT = "Alignment"
    LEADER_FOLLOWING = "Leader Following"
    FLOW_FIELD_FOLLOWING = "Flow Field Following"
    UNALIGNED_COLLISION_AVOIDANCE = "Unaligned Collision Avoidance"

    @classmethod
    def parse(cls, value) -> "BehaviorKind":
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for kind in cls:
            if text in (kind.value, kind.name) or \
                    text.lower().replace(' ', '_') == kind.name.lower():
                return kind
        raise InvalidParameter(f"unknown behavior kind {value!r}")


class Behavior:
    """
    A force-producing strategy.

    Subclasses set `kind`, validate their parameters in `validate()` and
    implement `compute_force(agent, world)`. Parameters are checked when the
    behavior is built and on every `configure()` call; `compute_force`
    itself never raises.
    """

    kind: BehaviorKind

    def compute_force(self, agent, world) -> Vector2:
        raise NotImplementedError

    def validate(self) -> None:
        pass

    def configure(self, **params: Any) -> None:
        """Update parameters in place, rolling back if any is invalid."""
        for name in params:
            if not hasattr(self, name) or name.startswith('_'):
                raise InvalidParameter(
                    f"{type(self).__name__} has no parameter {name!r}")
        previous: Dict[str, Any] = {}
        for name, value in params.items():
            previous[name] = getattr(self, name)
            setattr(self, name, value)
        try:
            self.validate()
        except InvalidParameter:
            for name, value in previous.items():
                setattr(self, name, value)
            raise

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def require_positive(name: str, value: float) -> None:
    if not (isinstance(value, (int, float)) and math.isfinite(value)
            and value > 0):
        raise InvalidParameter(f"{name} must be positive, got {value!r}")


def require_non_negative(name: str, value: float) -> None:
    if not (isinstance(value, (int, float)) and math.isfinite(value)
            and value >= 0):
        raise InvalidParameter(f"{name} must be >= 0, got {value!r}")


# Primitives shared by the behaviors. All return desired minus current
# velocity (Reynolds steering).

def seek_force(agent, target: Vector2) -> Vector2:
    desired = target - agent.position
    if desired.length_squared() < EPSILON:
        return Vector2()
    desired.normalize()
    desired *= agent.max_speed
    return desired - agent.velocity


def flee_force(agent, threat: Vector2) -> Vector2:
    desired = agent.position - threat
    if desired.length_squared() < EPSILON:
        return Vector2()
    desired.normalize()
    desired *= agent.max_speed
    return desired - agent.velocity


def arrive_force(agent, target: Vector2, slowing_radius: float,
                 tolerance: float = 0.5) -> Vector2:
    """Seek with a linear slow-down inside `slowing_radius`; brake at the target."""
    to_target = target - agent.position
    distance = to_target.length()
    if distance < tolerance:
        return -agent.velocity
    speed = agent.max_speed
    if distance < slowing_radius:
        speed *= distance / slowing_radius
    desired = to_target * (speed / distance)
    return desired - agent.velocity


def predict_position(pursuer, target, clamp: bool = False) -> Vector2:
    """Target position after the time the pursuer needs to close the gap."""
    distance = pursuer.position.distance_to(target.position)
    look_ahead = distance / pursuer.max_speed if pursuer.max_speed > EPSILON else 0.0
    if clamp:
        look_ahead = min(look_ahead, 1.0)
    return target.position + target.velocity * look_ahead
