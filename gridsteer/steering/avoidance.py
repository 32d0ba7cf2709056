"""Behaviors that keep agents clear of obstacles, walls, bounds and each other."""

import math
from typing import List, Optional

from ..model.vector import EPSILON, Vector2
from .base import (Behavior, BehaviorKind, require_non_negative,
                   require_positive, seek_force)
from .environment import (BoundingBox, CircleObstacle, WallSegment,
                          ray_circle_distance, segment_intersection)

FEELER_ANGLE = math.pi / 6
WHISKER_ANGLE = math.pi / 4


class ObstacleAvoidance(Behavior):
    """
    Cast three feelers (ahead, and angled left and right) against circular
    obstacles and push sideways away from the nearest hit.

    The obstacle list is shared with the world when not given explicitly.
    """

    kind = BehaviorKind.OBSTACLE_AVOIDANCE

    def __init__(self, obstacles: Optional[List[CircleObstacle]] = None,
                 feeler_length: float = 80.0,
                 avoidance_force: float = 200.0,
                 side_feeler_ratio: float = 0.6):
        self.obstacles = obstacles
        self.feeler_length = feeler_length
        self.avoidance_force = avoidance_force
        self.side_feeler_ratio = side_feeler_ratio
        self.validate()

    def validate(self) -> None:
        require_positive("feeler_length", self.feeler_length)
        require_non_negative("avoidance_force", self.avoidance_force)
        require_positive("side_feeler_ratio", self.side_feeler_ratio)

    def feelers(self, agent):
        heading = agent.heading
        side_length = self.feeler_length * self.side_feeler_ratio
        return [
            (heading, self.feeler_length),
            (heading.rotated(FEELER_ANGLE), side_length),
            (heading.rotated(-FEELER_ANGLE), side_length),
        ]

    def compute_force(self, agent, world) -> Vector2:
        obstacles = self.obstacles if self.obstacles is not None \
            else world.obstacles
        if not obstacles:
            return Vector2()

        nearest = None
        nearest_hit = math.inf
        for direction, length in self.feelers(agent):
            for obstacle in obstacles:
                hit = ray_circle_distance(agent.position, direction, length,
                                          obstacle.center,
                                          obstacle.radius + agent.radius)
                if hit is not None and hit < nearest_hit:
                    nearest_hit = hit
                    nearest = obstacle
        if nearest is None:
            return Vector2()

        heading = agent.heading
        to_center = nearest.center - agent.position
        lateral = to_center - heading * to_center.dot(heading)
        if lateral.is_zero():
            # Dead ahead; pick the left side
            lateral = -heading.perpendicular()
        away = -lateral.normalized()
        strength = (self.feeler_length - nearest_hit) / self.feeler_length
        return away * (self.avoidance_force * strength)


class WallFollowing(Behavior):
    """
    Hold `desired_distance` from the nearest wall while moving along it.

    Whiskers push the agent back off walls it is about to cross; the
    closest wall within reach is tracked by seeking a point offset from it
    by the desired distance, slightly ahead along the agent's direction.
    """

    kind = BehaviorKind.WALL_FOLLOWING

    def __init__(self, walls: Optional[List[WallSegment]] = None,
                 desired_distance: float = 20.0, feeler_length: float = 40.0,
                 wall_force: float = 200.0):
        self.walls = walls
        self.desired_distance = desired_distance
        self.feeler_length = feeler_length
        self.wall_force = wall_force
        self.validate()

    def validate(self) -> None:
        require_non_negative("desired_distance", self.desired_distance)
        require_positive("feeler_length", self.feeler_length)
        require_non_negative("wall_force", self.wall_force)

    def whiskers(self, agent):
        heading = agent.heading
        return [heading, heading.rotated(WHISKER_ANGLE),
                heading.rotated(-WHISKER_ANGLE)]

    def compute_force(self, agent, world) -> Vector2:
        walls = self.walls if self.walls is not None else world.walls
        if not walls:
            return Vector2()

        force = Vector2()
        position = agent.position
        for direction in self.whiskers(agent):
            tip = position + direction * self.feeler_length
            best_dist = math.inf
            best_wall = None
            for wall in walls:
                hit = segment_intersection(position, tip, wall.start, wall.end)
                if hit is None:
                    continue
                dist = position.distance_to(hit)
                if dist < best_dist:
                    best_dist = dist
                    best_wall = wall
            if best_wall is not None:
                overshoot = self.feeler_length - best_dist
                force += best_wall.normal_towards(position) * (
                    overshoot * self.wall_force / self.feeler_length)

        reach = self.desired_distance + self.feeler_length
        closest_wall = None
        closest_point = None
        closest_dist = reach
        for wall in walls:
            point = wall.closest_point(position)
            dist = position.distance_to(point)
            if dist <= closest_dist:
                closest_dist = dist
                closest_wall = wall
                closest_point = point
        if closest_wall is not None:
            tangent = closest_wall.direction
            if tangent.dot(agent.heading) < 0:
                tangent = -tangent
            target = (closest_point +
                      closest_wall.normal_towards(position) *
                      self.desired_distance +
                      tangent * self.feeler_length)
            force += seek_force(agent, target).truncate(agent.max_force)
        return force


class Containment(Behavior):
    """
    Keep the agent inside a bounding box.

    When the point `predict_distance` ahead leaves the box, steer toward the
    box center with a force that grows with how far outside that point is,
    between 0.1 and 1.5 times `force_increase`.
    """

    kind = BehaviorKind.CONTAINMENT

    def __init__(self, bounds: Optional[BoundingBox] = None,
                 predict_distance: float = 50.0,
                 force_increase: float = 100.0):
        self.bounds = bounds
        self.predict_distance = predict_distance
        self.force_increase = force_increase
        self.validate()

    def validate(self) -> None:
        require_positive("predict_distance", self.predict_distance)
        require_non_negative("force_increase", self.force_increase)

    def compute_force(self, agent, world) -> Vector2:
        bounds = self.bounds if self.bounds is not None else world.bounds
        if bounds is None:
            return Vector2()

        ahead = agent.position + agent.heading * self.predict_distance
        if bounds.contains(ahead):
            return Vector2()

        inside_x = min(max(ahead.x, bounds.min_corner.x), bounds.max_corner.x)
        inside_y = min(max(ahead.y, bounds.min_corner.y), bounds.max_corner.y)
        outside = ahead.distance_to(Vector2(inside_x, inside_y))
        q = min(max(outside / self.predict_distance, 0.1), 1.5)

        direction = bounds.center - agent.position
        if direction.is_zero():
            direction = -agent.heading
        return direction.with_length(self.force_increase * q)


class UnalignedCollisionAvoidance(Behavior):
    """
    Predict the closest approach to every neighbor from relative velocity and
    sidestep the soonest one that comes within the combined radii.
    """

    kind = BehaviorKind.UNALIGNED_COLLISION_AVOIDANCE

    def __init__(self, neighbor_radius: float = 100.0,
                 max_prediction_time: float = 2.0,
                 safety_margin: float = 0.0):
        self.neighbor_radius = neighbor_radius
        self.max_prediction_time = max_prediction_time
        self.safety_margin = safety_margin
        self.validate()

    def validate(self) -> None:
        require_positive("neighbor_radius", self.neighbor_radius)
        require_positive("max_prediction_time", self.max_prediction_time)
        require_non_negative("safety_margin", self.safety_margin)

    def compute_force(self, agent, world) -> Vector2:
        soonest = math.inf
        threat_offset = None
        for other in world.neighbors(agent, self.neighbor_radius):
            rel_pos = other.position - agent.position
            rel_vel = other.velocity - agent.velocity
            speed_sq = rel_vel.length_squared()
            if speed_sq < EPSILON:
                continue
            t = -rel_pos.dot(rel_vel) / speed_sq
            if t < 0 or t > self.max_prediction_time:
                continue
            approach = rel_pos + rel_vel * t
            limit = agent.radius + other.radius + self.safety_margin
            if approach.length_squared() > limit * limit:
                continue
            if t < soonest:
                soonest = t
                threat_offset = approach

        if threat_offset is None:
            return Vector2()

        heading = agent.heading
        lateral = threat_offset - heading * threat_offset.dot(heading)
        if lateral.is_zero():
            lateral = -heading.perpendicular()
        return -lateral.with_length(agent.max_force)
