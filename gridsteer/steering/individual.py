"""Behaviors that steer a single agent toward or away from a target."""

import math
from typing import Optional

from ..errors import InvalidParameter
from ..model.vector import EPSILON, Vector2
from .base import (Behavior, BehaviorKind, arrive_force, flee_force,
                   predict_position, require_non_negative, require_positive,
                   seek_force)


class Seek(Behavior):
    kind = BehaviorKind.SEEK

    def __init__(self, target):
        self.target = Vector2.of(target)
        self.validate()

    def validate(self) -> None:
        self.target = Vector2.of(self.target)

    def compute_force(self, agent, world) -> Vector2:
        return seek_force(agent, self.target).truncate(agent.max_force)


class Flee(Behavior):
    """Steer away from a point; no force beyond `panic_distance` when set."""

    kind = BehaviorKind.FLEE

    def __init__(self, target, panic_distance: Optional[float] = None):
        self.target = Vector2.of(target)
        self.panic_distance = panic_distance
        self.validate()

    def validate(self) -> None:
        self.target = Vector2.of(self.target)
        if self.panic_distance is not None:
            require_positive("panic_distance", self.panic_distance)

    def compute_force(self, agent, world) -> Vector2:
        if self.panic_distance is not None and \
                agent.position.distance_squared_to(self.target) > \
                self.panic_distance ** 2:
            return Vector2()
        return flee_force(agent, self.target).truncate(agent.max_force)


class Arrival(Behavior):
    kind = BehaviorKind.ARRIVAL

    def __init__(self, target, slowing_radius: float = 100.0,
                 tolerance: float = 0.5):
        self.target = Vector2.of(target)
        self.slowing_radius = slowing_radius
        self.tolerance = tolerance
        self.validate()

    def validate(self) -> None:
        self.target = Vector2.of(self.target)
        require_positive("slowing_radius", self.slowing_radius)
        require_non_negative("tolerance", self.tolerance)

    def compute_force(self, agent, world) -> Vector2:
        return arrive_force(agent, self.target, self.slowing_radius,
                            self.tolerance)


class Wander(Behavior):
    """
    Seek a point on a circle projected `wander_distance` ahead of the agent.

    The point's angle drifts by at most `wander_jitter / 2` radians per
    second, drawn from the world's random generator so runs are
    reproducible under a fixed seed.
    """

    kind = BehaviorKind.WANDER

    def __init__(self, wander_distance: float = 60.0,
                 wander_radius: float = 30.0, wander_jitter: float = 2.0,
                 angle: float = 0.0):
        self.wander_distance = wander_distance
        self.wander_radius = wander_radius
        self.wander_jitter = wander_jitter
        self.angle = angle
        self.validate()

    def validate(self) -> None:
        require_non_negative("wander_distance", self.wander_distance)
        require_positive("wander_radius", self.wander_radius)
        require_non_negative("wander_jitter", self.wander_jitter)

    def compute_force(self, agent, world) -> Vector2:
        self.angle += self.wander_jitter * (world.rng.random() - 0.5) * world.dt
        self.angle = math.remainder(self.angle, 2 * math.pi)

        heading = agent.heading
        center = agent.position + heading * self.wander_distance
        offset = Vector2.from_angle(heading.angle() + self.angle,
                                    self.wander_radius)
        return seek_force(agent, center + offset).truncate(agent.max_force)


class Pursuit(Behavior):
    """Seek the position the target will reach by the time we get there."""

    kind = BehaviorKind.PURSUIT

    def __init__(self, target):
        self.target = target
        self.validate()

    def validate(self) -> None:
        if self.target is None:
            raise InvalidParameter("pursuit needs a target agent")

    def compute_force(self, agent, world) -> Vector2:
        if self.target is agent:
            return Vector2()
        future = predict_position(agent, self.target)
        return seek_force(agent, future).truncate(agent.max_force)


class Evade(Behavior):
    kind = BehaviorKind.EVADE

    def __init__(self, target, panic_distance: Optional[float] = None):
        self.target = target
        self.panic_distance = panic_distance
        self.validate()

    def validate(self) -> None:
        if self.target is None:
            raise InvalidParameter("evade needs a threat agent")
        if self.panic_distance is not None:
            require_positive("panic_distance", self.panic_distance)

    def compute_force(self, agent, world) -> Vector2:
        if self.target is agent:
            return Vector2()
        if self.panic_distance is not None and \
                agent.position.distance_squared_to(self.target.position) > \
                self.panic_distance ** 2:
            return Vector2()
        future = predict_position(agent, self.target)
        return flee_force(agent, future).truncate(agent.max_force)


class OffsetPursuit(Behavior):
    """
    Hold a fixed offset in the leader's local frame.

    `offset.x` is measured along the leader's heading and `offset.y` along
    its left side, so (-30, 0) trails 30 units behind the leader.
    """

    kind = BehaviorKind.OFFSET_PURSUIT

    def __init__(self, leader, offset, slowing_radius: float = 5.0,
                 tolerance: float = 0.5):
        self.leader = leader
        self.offset = Vector2.of(offset)
        self.slowing_radius = slowing_radius
        self.tolerance = tolerance
        self.validate()

    def validate(self) -> None:
        if self.leader is None:
            raise InvalidParameter("offset pursuit needs a leader agent")
        self.offset = Vector2.of(self.offset)
        require_positive("slowing_radius", self.slowing_radius)
        require_non_negative("tolerance", self.tolerance)

    def world_offset(self) -> Vector2:
        heading = self.leader.heading
        side = heading.perpendicular()
        return (self.leader.position + heading * self.offset.x +
                side * self.offset.y)

    def compute_force(self, agent, world) -> Vector2:
        if self.leader is agent:
            return Vector2()
        target = self.world_offset()
        closing_speed = agent.max_speed + self.leader.velocity.length()
        if closing_speed > EPSILON:
            look_ahead = agent.position.distance_to(target) / closing_speed
            target += self.leader.velocity * look_ahead
        return arrive_force(agent, target, self.slowing_radius,
                            self.tolerance).truncate(agent.max_force)
