"""Steering agent with weighted behavior blending and Euler integration."""

import math
from typing import List, Optional, Tuple

from ..errors import InvalidParameter
from ..steering.base import Behavior, BehaviorKind
from .state import AgentSnapshot
from .vector import EPSILON, Vector2


def _check_positive(name: str, value: float) -> float:
    if not (isinstance(value, (int, float)) and math.isfinite(value)
            and value > 0):
        raise InvalidParameter(f"{name} must be positive, got {value!r}")
    return float(value)


class SteeringAgent:
    """
    Point-mass vehicle driven by a weighted sum of steering behaviors.

    Per tick:
    force = sum(weight_i * behavior_i.compute_force(agent, world)),
    truncated to max_force; acceleration = force / mass;
    velocity += acceleration * dt, clamped to max_speed;
    position += velocity * dt.

    Behaviors are kept in attachment order, at most one per BehaviorKind.
    """

    def __init__(self, agent_id: int, position: Vector2,
                 velocity: Optional[Vector2] = None,
                 mass: float = 1.0, max_force: float = 100.0,
                 max_speed: float = 100.0, radius: float = 5.0):
        self.id = agent_id
        self.position = Vector2.of(position)
        self.velocity = Vector2.of(velocity) if velocity is not None \
            else Vector2()
        self.mass = _check_positive("mass", mass)
        self.max_force = _check_positive("max_force", max_force)
        self.max_speed = _check_positive("max_speed", max_speed)
        self.radius = _check_positive("radius", radius)
        self.behaviors: List[Tuple[Behavior, float]] = []
        self.last_force = Vector2()

        self.velocity.truncate(self.max_speed)
        self._heading = Vector2(1.0, 0.0)
        if not self.velocity.is_zero():
            self._heading = self.velocity.normalized()

    @property
    def heading(self) -> Vector2:
        """Unit direction of travel; the last one while standing still."""
        return self._heading.copy()

    @heading.setter
    def heading(self, value: Vector2) -> None:
        value = Vector2.of(value)
        if value.is_zero():
            raise InvalidParameter("heading must be non-zero")
        self._heading = value.normalized()

    @property
    def speed(self) -> float:
        return self.velocity.length()

    # Behavior registry

    def attach_behavior(self, behavior: Behavior, weight: float = 1.0) -> None:
        """Attach `behavior`, replacing any attached behavior of the same kind."""
        weight = self._check_weight(weight)
        for i, (existing, _) in enumerate(self.behaviors):
            if existing.kind is behavior.kind:
                self.behaviors[i] = (behavior, weight)
                return
        self.behaviors.append((behavior, weight))

    def detach_behavior(self, kind: BehaviorKind) -> Optional[Behavior]:
        kind = BehaviorKind.parse(kind)
        for i, (existing, _) in enumerate(self.behaviors):
            if existing.kind is kind:
                del self.behaviors[i]
                return existing
        return None

    def get_behavior(self, kind: BehaviorKind) -> Optional[Behavior]:
        kind = BehaviorKind.parse(kind)
        for existing, _ in self.behaviors:
            if existing.kind is kind:
                return existing
        return None

    def set_weight(self, kind: BehaviorKind, weight: float) -> None:
        kind = BehaviorKind.parse(kind)
        weight = self._check_weight(weight)
        for i, (existing, _) in enumerate(self.behaviors):
            if existing.kind is kind:
                self.behaviors[i] = (existing, weight)
                return
        raise KeyError(kind)

    def behavior_weight(self, kind: BehaviorKind) -> float:
        kind = BehaviorKind.parse(kind)
        for existing, weight in self.behaviors:
            if existing.kind is kind:
                return weight
        raise KeyError(kind)

    @staticmethod
    def _check_weight(weight: float) -> float:
        if not (isinstance(weight, (int, float)) and math.isfinite(weight)
                and weight >= 0):
            raise InvalidParameter(
                f"behavior weight must be >= 0, got {weight!r}")
        return float(weight)

    # Kinematics

    def compute_steering(self, world) -> Vector2:
        """Weighted sum of all behavior forces, truncated to max_force."""
        force = Vector2()
        for behavior, weight in self.behaviors:
            if weight == 0:
                continue
            force += behavior.compute_force(self, world) * weight
        return force.truncate(self.max_force)

    def integrate(self, force: Vector2, dt: float) -> None:
        """Apply `force` for `dt` seconds."""
        if not (isinstance(dt, (int, float)) and math.isfinite(dt) and dt > 0):
            raise InvalidParameter(f"dt must be positive, got {dt!r}")
        if not self.mass > 0:
            raise InvalidParameter(f"mass must be positive, got {self.mass!r}")

        self.last_force = force.truncated(self.max_force)
        acceleration = self.last_force * (1.0 / self.mass)
        self.velocity += acceleration * dt
        self.velocity.truncate(self.max_speed)
        self.position += self.velocity * dt
        if self.velocity.length_squared() > EPSILON * EPSILON:
            self._heading = self.velocity.normalized()

    def tick(self, world, dt: float) -> None:
        self.integrate(self.compute_steering(world), dt)

    def snapshot(self) -> AgentSnapshot:
        return AgentSnapshot(agent_id=self.id, x=self.position.x,
                             y=self.position.y, vx=self.velocity.x,
                             vy=self.velocity.y, radius=self.radius)

    def __repr__(self) -> str:
        return (f"SteeringAgent(id={self.id}, pos={self.position}, "
                f"vel={self.velocity})")


def create_agent(position, max_speed: float = 100.0,
                 max_force: float = 100.0, mass: float = 1.0,
                 radius: float = 5.0, agent_id: int = 0,
                 velocity=None) -> SteeringAgent:
    return SteeringAgent(agent_id, position, velocity=velocity, mass=mass,
                         max_force=max_force, max_speed=max_speed,
                         radius=radius)


def attach_behavior(agent: SteeringAgent, behavior: Behavior,
                    weight: float = 1.0) -> None:
    agent.attach_behavior(behavior, weight)


def tick(agent: SteeringAgent, world, dt: float) -> Tuple[Vector2, Vector2]:
    """Advance one agent by `dt` and return its new (position, velocity)."""
    agent.tick(world, dt)
    return agent.position.copy(), agent.velocity.copy()
