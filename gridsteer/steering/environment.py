"""Static geometry that steering behaviors react to."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..errors import InvalidParameter
from ..model.vector import Vector2


@dataclass
class CircleObstacle:
    center: Vector2
    radius: float

    def __post_init__(self):
        self.center = Vector2.of(self.center)
        if not self.radius > 0:
            raise InvalidParameter(
                f"obstacle radius must be positive, got {self.radius}")


@dataclass
class WallSegment:
    start: Vector2
    end: Vector2

    def __post_init__(self):
        self.start = Vector2.of(self.start)
        self.end = Vector2.of(self.end)
        if self.start.distance_squared_to(self.end) == 0:
            raise InvalidParameter("wall segment has zero length")

    @property
    def direction(self) -> Vector2:
        return (self.end - self.start).normalized()

    @property
    def normal(self) -> Vector2:
        return self.direction.perpendicular()

    def closest_point(self, point: Vector2) -> Vector2:
        return closest_point_on_segment(self.start, self.end, point)

    def normal_towards(self, point: Vector2) -> Vector2:
        """Unit normal on the side of the wall where `point` lies."""
        normal = self.normal
        if (point - self.start).dot(normal) < 0:
            normal = -normal
        return normal


@dataclass
class BoundingBox:
    min_corner: Vector2
    max_corner: Vector2

    def __post_init__(self):
        self.min_corner = Vector2.of(self.min_corner)
        self.max_corner = Vector2.of(self.max_corner)
        if (self.max_corner.x <= self.min_corner.x or
                self.max_corner.y <= self.min_corner.y):
            raise InvalidParameter(
                "bounding box max corner must exceed its min corner")

    @property
    def center(self) -> Vector2:
        return (self.min_corner + self.max_corner) * 0.5

    def contains(self, point: Vector2) -> bool:
        return (self.min_corner.x <= point.x <= self.max_corner.x and
                self.min_corner.y <= point.y <= self.max_corner.y)


@dataclass
class SteeringPath:
    """Polyline of waypoints with a corridor radius."""
    points: List[Vector2]
    radius: float = 20.0
    looped: bool = False

    def __post_init__(self):
        self.points = [Vector2.of(p) for p in self.points]
        if len(self.points) < 2:
            raise InvalidParameter("a path needs at least two points")
        if not self.radius > 0:
            raise InvalidParameter(
                f"path radius must be positive, got {self.radius}")

    @property
    def segment_count(self) -> int:
        return len(self.points) if self.looped else len(self.points) - 1

    def segment(self, index: int) -> Tuple[Vector2, Vector2]:
        n = len(self.points)
        return self.points[index % n], self.points[(index + 1) % n]

    @classmethod
    def from_cells(cls, cells: Sequence[Tuple[int, int]],
                   cell_size: float = 1.0, radius: Optional[float] = None,
                   origin: Optional[Vector2] = None) -> "SteeringPath":
        """Waypoints at the centers of grid cells, e.g. a PathResult.path."""
        origin = origin or Vector2()
        points = [Vector2(origin.x + (x + 0.5) * cell_size,
                          origin.y + (y + 0.5) * cell_size)
                  for x, y in cells]
        if len(points) == 1:
            points.append(points[0].copy())
        return cls(points, radius if radius is not None else cell_size * 0.5)


def closest_point_on_segment(a: Vector2, b: Vector2, p: Vector2) -> Vector2:
    ab = b - a
    length_sq = ab.length_squared()
    if length_sq == 0:
        return a.copy()
    t = min(max((p - a).dot(ab) / length_sq, 0.0), 1.0)
    return a + ab * t


def segment_intersection(p0: Vector2, p1: Vector2, q0: Vector2,
                         q1: Vector2) -> Optional[Vector2]:
    """Intersection point of segments p0-p1 and q0-q1, if any."""
    r = p1 - p0
    s = q1 - q0
    denom = r.cross(s)
    if abs(denom) < 1e-9:
        return None
    qp = q0 - p0
    t = qp.cross(s) / denom
    u = qp.cross(r) / denom
    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return p0 + r * t
    return None


def ray_circle_distance(origin: Vector2, direction: Vector2, length: float,
                        center: Vector2, radius: float) -> Optional[float]:
    """Distance along a unit `direction` ray to a circle, within `length`."""
    to_center = center - origin
    if to_center.length_squared() <= radius * radius:
        return 0.0
    along = to_center.dot(direction)
    if along < 0:
        return None
    perp_sq = to_center.length_squared() - along * along
    r_sq = radius * radius
    if perp_sq > r_sq:
        return None
    hit = along - (r_sq - perp_sq) ** 0.5
    if hit > length:
        return None
    return max(hit, 0.0)
