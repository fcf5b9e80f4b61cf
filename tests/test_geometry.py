"""Tests for vectors, angles and affine transforms."""

import math

import pytest

from planaria.exceptions import GeometryError
from planaria.geometry import (
    TWO_PI,
    Transform2D,
    Vector2D,
    centroid,
    normalize_angle,
    signed_angle,
)


class TestAngles:

    @pytest.mark.parametrize("theta,expected", [
        (0.0, 0.0),
        (math.pi, math.pi),
        (-math.pi / 2, 3 * math.pi / 2),
        (TWO_PI, 0.0),
        (5 * math.pi, math.pi),
        (-TWO_PI - 0.5, TWO_PI - 0.5),
    ])
    def test_normalize(self, theta, expected):
        assert normalize_angle(theta) == pytest.approx(expected)

    def test_normalize_range(self):
        for k in range(-20, 21):
            theta = normalize_angle(k * 0.7)
            assert 0.0 <= theta < TWO_PI

    @pytest.mark.parametrize("theta,expected", [
        (0.0, 0.0),
        (3 * math.pi / 2, -math.pi / 2),
        (math.pi, math.pi),
        (-math.pi / 4, -math.pi / 4),
    ])
    def test_signed(self, theta, expected):
        assert signed_angle(theta) == pytest.approx(expected)


class TestVector2D:

    def test_arithmetic(self):
        a = Vector2D(1.0, 2.0)
        b = Vector2D(3.0, -1.0)
        assert a + b == Vector2D(4.0, 1.0)
        assert a - b == Vector2D(-2.0, 3.0)
        assert a * 2 == Vector2D(2.0, 4.0)
        assert 2 * a == Vector2D(2.0, 4.0)
        assert b / 2 == Vector2D(1.5, -0.5)
        assert -a == Vector2D(-1.0, -2.0)
        assert tuple(a) == (1.0, 2.0)

    def test_products(self):
        a = Vector2D(1.0, 0.0)
        b = Vector2D(0.0, 1.0)
        assert a.dot(b) == 0.0
        assert a.cross(b) == 1.0
        assert b.cross(a) == -1.0

    def test_immutable(self):
        v = Vector2D(1.0, 1.0)
        with pytest.raises(AttributeError):
            v.x = 2.0

    def test_length_and_distance(self):
        assert Vector2D(3.0, 4.0).length() == 5.0
        assert Vector2D(1.0, 1.0).distance(Vector2D(4.0, 5.0)) == 5.0

    def test_normalized(self):
        v = Vector2D(0.0, -7.0).normalized()
        assert v.is_close(Vector2D(0.0, -1.0))

    def test_scaled_to(self):
        v = Vector2D(3.0, 4.0).scaled_to(10.0)
        assert v.is_close(Vector2D(6.0, 8.0))

    @pytest.mark.parametrize("vector,heading", [
        (Vector2D(1.0, 0.0), 0.0),
        (Vector2D(0.0, 1.0), math.pi / 2),
        (Vector2D(-1.0, 0.0), math.pi),
        (Vector2D(0.0, -1.0), 3 * math.pi / 2),
        (Vector2D(1.0, -1.0), 7 * math.pi / 4),
    ])
    def test_heading(self, vector, heading):
        assert vector.heading() == pytest.approx(heading)

    def test_from_angle_round_trip(self):
        for k in range(12):
            theta = k * math.pi / 6
            assert Vector2D.from_angle(theta, 2.0).heading() == pytest.approx(theta, abs=1e-9)

    def test_angle_between(self):
        assert Vector2D(1.0, 0.0).angle(Vector2D(0.0, 3.0)) == pytest.approx(math.pi / 2)
        assert Vector2D(1.0, 0.0).angle(Vector2D(-2.0, 0.0)) == pytest.approx(math.pi)
        assert Vector2D(1.0, 1.0).angle(Vector2D(2.0, 2.0)) == pytest.approx(0.0, abs=1e-7)

    def test_rotated(self):
        v = Vector2D(1.0, 0.0).rotated(math.pi / 2)
        assert v.is_close(Vector2D(0.0, 1.0))

    def test_perpendicular(self):
        assert Vector2D(2.0, 1.0).perpendicular() == Vector2D(-1.0, 2.0)

    @pytest.mark.parametrize("call", [
        lambda v: v.normalized(),
        lambda v: v.heading(),
        lambda v: v.angle(Vector2D(1.0, 0.0)),
        lambda v: v.scaled_to(1.5),
    ])
    def test_zero_vector_raises(self, call):
        with pytest.raises(GeometryError):
            call(Vector2D(0.0, 0.0))


class TestCentroid:

    def test_square(self):
        points = [Vector2D(0, 0), Vector2D(2, 0), Vector2D(2, 2), Vector2D(0, 2)]
        assert centroid(points).is_close(Vector2D(1.0, 1.0))

    def test_generator_input(self):
        assert centroid(Vector2D(x, 0) for x in range(5)).is_close(Vector2D(2.0, 0.0))

    def test_empty(self):
        with pytest.raises(GeometryError):
            centroid([])


class TestTransform2D:

    def test_identity(self):
        p = Vector2D(3.0, -2.0)
        assert Transform2D.identity().apply(p) == p

    def test_translation(self):
        t = Transform2D.translation(Vector2D(1.0, 2.0))
        assert t.apply(Vector2D(1.0, 1.0)).is_close(Vector2D(2.0, 3.0))

    def test_rotation_about_origin(self):
        t = Transform2D.rotation(math.pi / 2)
        assert t.apply(Vector2D(1.0, 0.0)).is_close(Vector2D(0.0, 1.0))

    def test_rotation_about_point(self):
        pivot = Vector2D(1.0, 1.0)
        t = Transform2D.rotation(math.pi, pivot)
        assert t.apply(pivot).is_close(pivot)
        assert t.apply(Vector2D(2.0, 1.0)).is_close(Vector2D(0.0, 1.0))

    def test_then_order(self):
        move = Transform2D.translation(Vector2D(1.0, 0.0))
        turn = Transform2D.rotation(math.pi / 2)
        assert move.then(turn).apply(Vector2D()).is_close(Vector2D(0.0, 1.0))
        assert turn.then(move).apply(Vector2D()).is_close(Vector2D(1.0, 0.0))

    def test_rigid(self):
        """Rotations and translations keep distances."""
        t = (
            Transform2D.translation(Vector2D(-3.0, 1.0))
            .then(Transform2D.rotation(1.234))
            .then(Transform2D.translation(Vector2D(5.0, 5.0)))
        )
        a, b = Vector2D(0.5, 0.25), Vector2D(-1.0, 2.0)
        assert t.apply(a).distance(t.apply(b)) == pytest.approx(a.distance(b))
