import math
from dataclasses import dataclass

import pytest

from katanacore.colliders import (
    AABBCollider,
    Collider,
    CollisionLayer,
    LineCollider,
    MovingLineCollider,
    OBBCollider,
)
from katanacore.component import Vector2
from katanacore.shapes import ColliderType


@dataclass
class Owner:
    pos: Vector2


def test_ids_are_unique_and_increasing():
    a = AABBCollider(1.0, 1.0)
    b = LineCollider(Vector2(), Vector2(1.0, 1.0))
    c = Collider()
    assert a.id < b.id < c.id


def test_layer_is_stored():
    col = AABBCollider(2.0, 2.0, CollisionLayer.PLAYER)
    assert col.layer is CollisionLayer.PLAYER


def test_collider_without_shape():
    col = Collider()
    assert col.width == 0.0
    assert col.height == 0.0
    assert col.start_point == Vector2()
    with pytest.raises(ValueError):
        col.collider_type


def test_aabb_bounds_surround_owner():
    owner = Owner(Vector2(100.0, 40.0))
    col = AABBCollider(30.0, 50.0, owner=owner)
    lo, hi = col.aabb_min(), col.aabb_max()
    assert (lo + hi) * 0.5 == owner.pos
    assert hi - lo == Vector2(col.width, col.height)
    assert col.center == owner.pos
    assert col.collider_type is ColliderType.AABB


def test_aabb_rect_truncates_toward_zero():
    col = AABBCollider(3.0, 3.0, owner=Owner(Vector2(0.0, 0.0)))
    assert col.rect() == (-1, -1, 1, 1)


def test_aabb_rect_integral_for_integer_bounds():
    col = AABBCollider(4.0, 6.0, owner=Owner(Vector2(10.0, 20.0)))
    lo, hi = col.aabb_min(), col.aabb_max()
    assert col.rect() == (lo.x, lo.y, hi.x, hi.y)


def test_aabb_resize():
    col = AABBCollider(4.0, 6.0, owner=Owner(Vector2(0.0, 0.0)))
    col.resize(10.0, 12.0)
    assert (col.width, col.height) == (10.0, 12.0)
    assert col.aabb_max() - col.aabb_min() == Vector2(10.0, 12.0)


def test_base_resize_keeps_line():
    col = LineCollider(Vector2(0.0, 0.0), Vector2(5.0, 5.0))
    col.resize(10.0, 10.0)
    assert col.width == 0.0
    assert col.end_point == Vector2(5.0, 5.0)


def test_line_collider_points_fixed():
    start, end = Vector2(1.0, 2.0), Vector2(3.0, 4.0)
    col = LineCollider(start, end, CollisionLayer.WALL, owner=Owner(Vector2(50.0, 50.0)))
    assert col.start_point == start
    assert col.end_point == end
    assert col.collider_type is ColliderType.LINE


def test_moving_line_follows_owner():
    owner = Owner(Vector2(0.0, 0.0))
    col = MovingLineCollider(20.0, 0.5, owner=owner)
    owner.pos = Vector2(30.0, -7.0)
    mid = (col.start_point + col.end_point) * 0.5
    assert mid.x == pytest.approx(owner.pos.x)
    assert mid.y == pytest.approx(owner.pos.y)
    assert (col.end_point - col.start_point).length() == pytest.approx(col.length)
    assert col.radian == 0.5
    assert col.layer is CollisionLayer.ENEMY_HITBOX


def test_update_leaves_geometry_unchanged():
    col = AABBCollider(4.0, 6.0, owner=Owner(Vector2(1.0, 1.0)))
    col.update(0.016)
    assert (col.width, col.height) == (4.0, 6.0)


def test_obb_axes_unrotated():
    col = OBBCollider(10.0, 20.0, 0.0)
    assert col.axes() == (Vector2(1.0, 0.0), Vector2(0.0, 1.0))


@pytest.mark.parametrize("rotation", [0.2, 1.1, -2.0])
def test_obb_axes_orthonormal(rotation):
    x_axis, y_axis = OBBCollider(10.0, 20.0, rotation).axes()
    assert x_axis.length() == pytest.approx(1.0)
    assert y_axis.length() == pytest.approx(1.0)
    assert x_axis.dot(y_axis) == pytest.approx(0.0, abs=1e-12)


def test_obb_vertices_order_unrotated():
    pos = Vector2(50.0, 60.0)
    col = OBBCollider(10.0, 20.0, 0.0, owner=Owner(pos))
    hw, hh = col.width / 2, col.height / 2
    assert col.vertices() == [
        Vector2(pos.x - hw, pos.y - hh),
        Vector2(pos.x - hw, pos.y + hh),
        Vector2(pos.x + hw, pos.y + hh),
        Vector2(pos.x + hw, pos.y - hh),
    ]


def test_obb_vertices_rotate_about_origin():
    pos = Vector2(50.0, 60.0)
    plain = OBBCollider(10.0, 20.0, 0.0, owner=Owner(pos)).vertices()
    rotated = OBBCollider(10.0, 20.0, 0.7, owner=Owner(pos)).vertices()
    for a, b in zip(plain, rotated):
        assert b.length() == pytest.approx(a.length())


def test_obb_projection_unrotated():
    pos = Vector2(50.0, 60.0)
    col = OBBCollider(10.0, 20.0, 0.0, owner=Owner(pos))
    assert col.project(Vector2(1.0, 0.0)) == (pos.x - col.width / 2, pos.x + col.width / 2)
    assert col.project(Vector2(0.0, 1.0)) == (pos.y - col.height / 2, pos.y + col.height / 2)


def test_obb_projection_bounds_all_vertices():
    col = OBBCollider(10.0, 20.0, math.pi / 5, owner=Owner(Vector2(3.0, 4.0)))
    axis = Vector2(0.6, 0.8)
    lo, hi = col.project(axis)
    dots = [v.dot(axis) for v in col.vertices()]
    assert lo == min(dots)
    assert hi == max(dots)
    assert lo <= hi