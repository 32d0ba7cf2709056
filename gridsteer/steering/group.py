"""Flocking behaviors driven by spatial-hash neighbor queries."""

from typing import Iterable

from ..errors import InvalidParameter
from ..model.vector import EPSILON, Vector2
from .base import (Behavior, BehaviorKind, arrive_force, flee_force,
                   predict_position, require_non_negative, require_positive,
                   seek_force)


def separation_force(agent, neighbors: Iterable) -> Vector2:
    """Away-vectors from each neighbor, weighted by inverse distance."""
    push = Vector2()
    for other in neighbors:
        away = agent.position - other.position
        distance = away.normalize()
        if distance < EPSILON:
            continue
        push += away * (1.0 / distance)
    if push.is_zero():
        return Vector2()
    desired = push.with_length(agent.max_speed)
    return desired - agent.velocity


class Separation(Behavior):
    kind = BehaviorKind.SEPARATION

    def __init__(self, neighbor_radius: float = 30.0):
        self.neighbor_radius = neighbor_radius
        self.validate()

    def validate(self) -> None:
        require_positive("neighbor_radius", self.neighbor_radius)

    def compute_force(self, agent, world) -> Vector2:
        neighbors = world.neighbors(agent, self.neighbor_radius)
        return separation_force(agent, neighbors).truncate(agent.max_force)


class Cohesion(Behavior):
    kind = BehaviorKind.COHESION

    def __init__(self, neighbor_radius: float = 50.0):
        self.neighbor_radius = neighbor_radius
        self.validate()

    def validate(self) -> None:
        require_positive("neighbor_radius", self.neighbor_radius)

    def compute_force(self, agent, world) -> Vector2:
        neighbors = world.neighbors(agent, self.neighbor_radius)
        if not neighbors:
            return Vector2()
        centroid = Vector2()
        for other in neighbors:
            centroid += other.position
        centroid *= 1.0 / len(neighbors)
        return seek_force(agent, centroid).truncate(agent.max_force)


class Alignment(Behavior):
    kind = BehaviorKind.ALIGNMENT

    def __init__(self, neighbor_radius: float = 50.0):
        self.neighbor_radius = neighbor_radius
        self.validate()

    def validate(self) -> None:
        require_positive("neighbor_radius", self.neighbor_radius)

    def compute_force(self, agent, world) -> Vector2:
        neighbors = world.neighbors(agent, self.neighbor_radius)
        if not neighbors:
            return Vector2()
        average = Vector2()
        for other in neighbors:
            average += other.velocity
        if average.is_zero():
            return Vector2()
        desired = average.with_length(agent.max_speed)
        return (desired - agent.velocity).truncate(agent.max_force)


class LeaderFollowing(Behavior):
    """
    Arrive at a point `behind_distance` behind the leader, keep apart from
    nearby agents, and get out of the way when standing in front of the
    leader (within `sight_radius` of the point `sight_distance` ahead).
    """

    kind = BehaviorKind.LEADER_FOLLOWING

    def __init__(self, leader, behind_distance: float = 40.0,
                 sight_distance: float = 30.0, sight_radius: float = 30.0,
                 separation_radius: float = 30.0,
                 slowing_radius: float = 50.0):
        self.leader = leader
        self.behind_distance = behind_distance
        self.sight_distance = sight_distance
        self.sight_radius = sight_radius
        self.separation_radius = separation_radius
        self.slowing_radius = slowing_radius
        self.validate()

    def validate(self) -> None:
        if self.leader is None:
            raise InvalidParameter("leader following needs a leader agent")
        require_non_negative("behind_distance", self.behind_distance)
        require_non_negative("sight_distance", self.sight_distance)
        require_non_negative("sight_radius", self.sight_radius)
        require_positive("separation_radius", self.separation_radius)
        require_positive("slowing_radius", self.slowing_radius)

    def in_sight(self, agent) -> bool:
        leader = self.leader
        ahead = leader.position + leader.heading * self.sight_distance
        limit = self.sight_radius * self.sight_radius
        return (agent.position.distance_squared_to(ahead) <= limit or
                agent.position.distance_squared_to(leader.position) <= limit)

    def compute_force(self, agent, world) -> Vector2:
        leader = self.leader
        if leader is agent:
            return Vector2()

        behind = leader.position - leader.heading * self.behind_distance
        force = arrive_force(agent, behind, self.slowing_radius)
        if self.in_sight(agent):
            force += flee_force(agent, predict_position(agent, leader))
        force += separation_force(
            agent, world.neighbors(agent, self.separation_radius))
        return force.truncate(agent.max_force)
