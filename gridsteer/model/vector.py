"""Mutable 2D vector used by the steering engine."""

import math
from typing import Iterator, Tuple

EPSILON = 1e-6


class Vector2:
    """
    Mutable 2D vector.

    Arithmetic operators always return a new vector. The in-place methods
    (`set`, `normalize`, `truncate`, ...) modify the vector and are meant for
    the owner of the vector only; hand out `copy()` when sharing.
    """

    __slots__ = ('x', 'y')

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)

    @classmethod
    def from_angle(cls, angle: float, length: float = 1.0) -> "Vector2":
        return cls(math.cos(angle) * length, math.sin(angle) * length)

    @classmethod
    def of(cls, value) -> "Vector2":
        """Build from a Vector2 or any (x, y) pair."""
        if isinstance(value, Vector2):
            return value.copy()
        x, y = value
        return cls(x, y)

    def copy(self) -> "Vector2":
        return Vector2(self.x, self.y)

    def set(self, x: float, y: float) -> "Vector2":
        self.x = float(x)
        self.y = float(y)
        return self

    def set_from(self, other: "Vector2") -> "Vector2":
        self.x = other.x
        self.y = other.y
        return self

    def zero(self) -> "Vector2":
        self.x = 0.0
        self.y = 0.0
        return self

    # Arithmetic

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector2":
        if scalar == 0:
            return Vector2()
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def __iadd__(self, other: "Vector2") -> "Vector2":
        self.x += other.x
        self.y += other.y
        return self

    def __isub__(self, other: "Vector2") -> "Vector2":
        self.x -= other.x
        self.y -= other.y
        return self

    def __imul__(self, scalar: float) -> "Vector2":
        self.x *= scalar
        self.y *= scalar
        return self

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector2):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    # Mutable, so explicitly unhashable
    __hash__ = None

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __repr__(self) -> str:
        return f"Vector2({self.x:.4g}, {self.y:.4g})"

    # Geometry

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def dot(self, other: "Vector2") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vector2") -> float:
        """Z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def distance_to(self, other: "Vector2") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def distance_squared_to(self, other: "Vector2") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def normalize(self) -> float:
        """Scale to unit length in place and return the previous length."""
        length = self.length()
        if length == 0:
            return 0.0
        self.x /= length
        self.y /= length
        return length

    def normalized(self) -> "Vector2":
        result = self.copy()
        result.normalize()
        return result

    def truncate(self, max_length: float) -> "Vector2":
        """Clamp the length in place to `max_length`."""
        length_sq = self.length_squared()
        if length_sq > max_length * max_length:
            scale = max_length / math.sqrt(length_sq)
            self.x *= scale
            self.y *= scale
        return self

    def truncated(self, max_length: float) -> "Vector2":
        return self.copy().truncate(max_length)

    def with_length(self, length: float) -> "Vector2":
        result = self.normalized()
        result *= length
        return result

    def perpendicular(self) -> "Vector2":
        """Counter-clockwise perpendicular, (-y, x)."""
        return Vector2(-self.y, self.x)

    def rotated(self, angle: float) -> "Vector2":
        c = math.cos(angle)
        s = math.sin(angle)
        return Vector2(self.x * c - self.y * s, self.x * s + self.y * c)

    def angle(self) -> float:
        return math.atan2(self.y, self.x)

    def is_zero(self, eps: float = EPSILON) -> bool:
        return self.length_squared() < eps * eps

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)
