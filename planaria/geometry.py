"""
Plane geometry primitives.

Immutable 2D vectors and affine transforms used by the layout engine.
All angles are in radians. Headings come from ``math.atan2`` and are
normalized to [0, 2*pi), so no quadrant bookkeeping is needed anywhere.

    >>> v = Vector2D(3.0, 4.0)
    >>> v.length()
    5.0
    >>> round(Vector2D(0.0, 1.0).heading(), 6)
    1.570796
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final, Iterable

from .exceptions import GeometryError

TWO_PI: Final = 2.0 * math.pi

# Magnitudes below this are treated as zero
EPSILON: Final = 1e-10


def normalize_angle(theta: float) -> float:
    """Map an angle onto [0, 2*pi)."""
    theta = math.fmod(theta, TWO_PI)
    if theta < 0.0:
        theta += TWO_PI
    if theta >= TWO_PI:
        theta = 0.0
    return theta


def signed_angle(theta: float) -> float:
    """Map an angle onto (-pi, pi]."""
    theta = normalize_angle(theta)
    if theta > math.pi:
        theta -= TWO_PI
    return theta


@dataclass(frozen=True, slots=True)
class Vector2D:
    """A point or direction in the drawing plane.

    Attributes:
        x: Horizontal component.
        y: Vertical component.
    """

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_angle(cls, theta: float, length: float = 1.0) -> Vector2D:
        """Create a vector of the given length pointing at heading ``theta``."""
        return cls(math.cos(theta) * length, math.sin(theta) * length)

    def __add__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vector2D:
        return Vector2D(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vector2D:
        return Vector2D(self.x / divisor, self.y / divisor)

    def __neg__(self) -> Vector2D:
        return Vector2D(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def is_zero(self) -> bool:
        return self.length() < EPSILON

    def dot(self, other: Vector2D) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2D) -> float:
        """Z component of the 3D cross product; positive if ``other`` is to the left."""
        return self.x * other.y - self.y * other.x

    def distance(self, other: Vector2D) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def normalized(self) -> Vector2D:
        """Return the unit vector in the same direction.

        Raises:
            GeometryError: If the vector has (near) zero length.
        """
        length = self.length()
        if length < EPSILON:
            raise GeometryError(f"Cannot normalize zero-length vector {self!r}")
        return Vector2D(self.x / length, self.y / length)

    def scaled_to(self, length: float) -> Vector2D:
        """Return a vector in the same direction with the given length."""
        return self.normalized() * length

    def heading(self) -> float:
        """Angle to the positive x axis, counter-clockwise, in [0, 2*pi).

        Raises:
            GeometryError: If the vector has (near) zero length.
        """
        if self.is_zero():
            raise GeometryError(f"Zero-length vector {self!r} has no heading")
        return normalize_angle(math.atan2(self.y, self.x))

    def angle(self, other: Vector2D) -> float:
        """Unsigned angle between two vectors, in [0, pi].

        Raises:
            GeometryError: If either vector has (near) zero length.
        """
        denom = self.length() * other.length()
        if denom < EPSILON:
            raise GeometryError("Angle with a zero-length vector is undefined")
        cosine = max(-1.0, min(1.0, self.dot(other) / denom))
        return math.acos(cosine)

    def rotated(self, theta: float) -> Vector2D:
        """Rotate counter-clockwise about the origin."""
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        return Vector2D(
            self.x * cos_t - self.y * sin_t,
            self.x * sin_t + self.y * cos_t,
        )

    def perpendicular(self) -> Vector2D:
        """The vector rotated by +90 degrees."""
        return Vector2D(-self.y, self.x)

    def is_close(self, other: Vector2D, tol: float = 1e-6) -> bool:
        return self.distance(other) <= tol


ORIGIN: Final = Vector2D(0.0, 0.0)


def centroid(points: Iterable[Vector2D]) -> Vector2D:
    """Arithmetic mean of a collection of points.

    Raises:
        GeometryError: If ``points`` is empty.
    """
    sum_x = 0.0
    sum_y = 0.0
    count = 0
    for point in points:
        sum_x += point.x
        sum_y += point.y
        count += 1
    if count == 0:
        raise GeometryError("Centroid of an empty point set is undefined")
    return Vector2D(sum_x / count, sum_y / count)


@dataclass(frozen=True, slots=True)
class Transform2D:
    """A 2D affine transform ``p -> A @ p + t``.

    The matrix is stored row-major as ``(a, b, c, d)`` with translation
    ``(tx, ty)``:

        x' = a*x + b*y + tx
        y' = c*x + d*y + ty

    Example:
        >>> t = Transform2D.translation(Vector2D(1, 0)).then(
        ...     Transform2D.rotation(math.pi / 2))
        >>> p = t.apply(Vector2D(0, 0))
        >>> round(p.x, 9), round(p.y, 9)
        (0.0, 1.0)
    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @classmethod
    def identity(cls) -> Transform2D:
        return cls()

    @classmethod
    def translation(cls, offset: Vector2D) -> Transform2D:
        return cls(tx=offset.x, ty=offset.y)

    @classmethod
    def rotation(cls, theta: float, origin: Vector2D = ORIGIN) -> Transform2D:
        """Counter-clockwise rotation by ``theta`` about ``origin``."""
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        return cls(
            a=cos_t,
            b=-sin_t,
            c=sin_t,
            d=cos_t,
            tx=origin.x - cos_t * origin.x + sin_t * origin.y,
            ty=origin.y - sin_t * origin.x - cos_t * origin.y,
        )

    def then(self, other: Transform2D) -> Transform2D:
        """Compose: apply ``self`` first, then ``other``."""
        return Transform2D(
            a=other.a * self.a + other.b * self.c,
            b=other.a * self.b + other.b * self.d,
            c=other.c * self.a + other.d * self.c,
            d=other.c * self.b + other.d * self.d,
            tx=other.a * self.tx + other.b * self.ty + other.tx,
            ty=other.c * self.tx + other.d * self.ty + other.ty,
        )

    def apply(self, point: Vector2D) -> Vector2D:
        return Vector2D(
            self.a * point.x + self.b * point.y + self.tx,
            self.c * point.x + self.d * point.y + self.ty,
        )
