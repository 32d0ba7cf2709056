"""Behaviors that turn pathfinding output into steering."""

from ..errors import InvalidParameter
from ..model.flow_field import FlowField
from ..model.vector import Vector2
from .base import (Behavior, BehaviorKind, arrive_force, require_non_negative,
                   require_positive, seek_force)
from .environment import SteeringPath, closest_point_on_segment

SEGMENT_LOOKAHEAD = 3


class PathFollowing(Behavior):
    """
    Follow a SteeringPath.

    The agent's position `prediction` units ahead is projected onto the
    nearest of the next few segments. Outside the path radius the agent
    seeks that projection; inside it seeks a point further along the path.
    On an open path the agent arrives at the last waypoint.
    """

    kind = BehaviorKind.PATH_FOLLOWING

    def __init__(self, path: SteeringPath, prediction: float = 25.0,
                 slowing_radius: float = 50.0):
        self.path = path
        self.prediction = prediction
        self.slowing_radius = slowing_radius
        self.current_segment = 0
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.path, SteeringPath):
            raise InvalidParameter("path following needs a SteeringPath")
        require_non_negative("prediction", self.prediction)
        require_positive("slowing_radius", self.slowing_radius)

    def reset(self) -> None:
        self.current_segment = 0

    def compute_force(self, agent, world) -> Vector2:
        path = self.path
        predicted = agent.position + agent.heading * self.prediction

        best_index = self.current_segment
        best_point = None
        best_dist = None
        last = path.segment_count - 1
        for offset in range(SEGMENT_LOOKAHEAD):
            index = self.current_segment + offset
            if not path.looped and index > last:
                break
            a, b = path.segment(index)
            point = closest_point_on_segment(a, b, predicted)
            dist = point.distance_squared_to(predicted)
            if best_dist is None or dist < best_dist:
                best_dist = dist
                best_point = point
                best_index = index
        if path.looped:
            best_index %= path.segment_count
        self.current_segment = best_index

        a, b = path.segment(best_index)
        end_reached = (not path.looped and best_index == last and
                       best_point.distance_to(b) <= path.radius)
        if end_reached:
            return arrive_force(agent, b, self.slowing_radius)

        if best_dist > path.radius * path.radius:
            target = best_point
        else:
            target = best_point + (b - a).with_length(self.prediction)
        return seek_force(agent, target).truncate(agent.max_force)


class FlowFieldFollowing(Behavior):
    """
    Steer along the direction of the cell under the agent.

    With `look_ahead` the cell is taken that far ahead along the heading;
    `interpolate` blends the four surrounding cells instead. Inside the goal
    cell, or wherever the field has no direction (off the grid, unreachable
    cells), the agent arrives at the goal cell's center.
    """

    kind = BehaviorKind.FLOW_FIELD_FOLLOWING

    def __init__(self, field: FlowField, look_ahead: float = 0.0,
                 interpolate: bool = False):
        self.field = field
        self.look_ahead = look_ahead
        self.interpolate = interpolate
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.field, FlowField):
            raise InvalidParameter("flow field following needs a FlowField")
        require_non_negative("look_ahead", self.look_ahead)

    def direction(self, agent) -> Vector2:
        ahead = agent.position + agent.heading * self.look_ahead
        if self.interpolate:
            return self.field.sample(ahead)
        return self.field.direction_at_cell(*self.field.cell_for(ahead))

    def compute_force(self, agent, world) -> Vector2:
        field = self.field
        if field.goal is None or not field.is_reachable(*field.goal):
            return Vector2()

        if field.cell_for(agent.position) != field.goal:
            direction = self.direction(agent)
            if not direction.is_zero():
                desired = direction.with_length(agent.max_speed)
                return (desired - agent.velocity).truncate(agent.max_force)
        return arrive_force(agent, field.cell_center(*field.goal),
                            field.cell_size).truncate(agent.max_force)
