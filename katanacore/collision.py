"""Geometric collision tests between boxes, segments and rotated boxes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .colliders import AABBCollider, Collider, CollisionLayer
from .component import Vector2

Rect = tuple[int, int, int, int]
"""Integer rectangle as (left, top, right, bottom)."""

_PARALLEL_EPSILON = 1e-6
_AXIS_EPSILON = 1e-12


@dataclass
class CollisionInfo:
    """Outcome of one collision test."""

    is_colliding: bool = False
    collision_point: Vector2 = field(default_factory=Vector2)
    hit_normal: Vector2 = field(default_factory=Vector2)
    collision_actor: Any = None
    collision_layer: Optional[CollisionLayer] = None
    penetration_depth: float = 0.0
    hit_corner: int = 0


def _upward_normal(direction: Vector2) -> Vector2:
    """Unit normal of ``direction`` pointing up (negative y)."""
    normal = Vector2(-direction.y, direction.x).normalized()
    if normal.y > 0:
        normal = normal * -1
    return normal


def line_intersection(
    p1: Vector2, p2: Vector2, q1: Vector2, q2: Vector2
) -> Optional[tuple[Vector2, float]]:
    """Intersect segment p1-p2 with segment q1-q2.

    Returns the intersection point and its parameter along p1-p2, or None
    when the segments are parallel or do not meet.
    """
    dir1 = p2 - p1
    dir2 = q2 - q1
    cross = dir1.x * dir2.y - dir1.y * dir2.x
    if abs(cross) < _PARALLEL_EPSILON:
        return None

    diff = q1 - p1
    t1 = (diff.x * dir2.y - diff.y * dir2.x) / cross
    t2 = (diff.x * dir1.y - diff.y * dir1.x) / cross
    if 0.0 <= t1 <= 1.0 and 0.0 <= t2 <= 1.0:
        return p1 + dir1 * t1, t1
    return None


def y_on_line_at_x(a: Vector2, b: Vector2, x: float) -> Optional[tuple[float, bool]]:
    """Return the y of line a-b at ``x`` and whether ``x`` lies within the segment.

    Returns None for a vertical line.
    """
    dx = b.x - a.x
    if abs(dx) < _PARALLEL_EPSILON:
        return None
    t = (x - a.x) / dx
    return a.y + (b.y - a.y) * t, 0.0 <= t <= 1.0


def ccw(a: Vector2, b: Vector2, c: Vector2) -> int:
    """Orientation of a, b, c: 1 counter-clockwise, -1 clockwise, 0 collinear."""
    cross = (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)
    if cross > 0:
        return 1
    if cross < 0:
        return -1
    return 0


def is_point_on_segment(a: Vector2, b: Vector2, c: Vector2) -> bool:
    """Whether collinear point ``c`` lies within the bounds of segment a-b."""
    return (
        min(a.x, b.x) <= c.x <= max(a.x, b.x)
        and min(a.y, b.y) <= c.y <= max(a.y, b.y)
    )


def line_hits_aabb(
    start: Vector2, end: Vector2, aabb_min: Vector2, aabb_max: Vector2
) -> Optional[Vector2]:
    """Clip a segment against a box (Liang-Barsky).

    Returns the unit direction of the segment as hit normal, or None on a miss.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    ps = (-dx, dx, -dy, dy)
    qs = (
        start.x - aabb_min.x,
        aabb_max.x - start.x,
        start.y - aabb_min.y,
        aabb_max.y - start.y,
    )

    enter = 0.0
    leave = 1.0
    for p, q in zip(ps, qs):
        if p == 0:
            if q < 0:
                return None
            continue
        t = q / p
        if p < 0:
            enter = max(enter, t)
        else:
            leave = min(leave, t)
        if enter > leave:
            return None

    return (end - start).normalized()


def lines_intersect(start1: Vector2, end1: Vector2, start2: Vector2, end2: Vector2) -> bool:
    """Whether two segments cross or touch."""
    c1 = ccw(start1, end1, start2)
    c2 = ccw(start1, end1, end2)
    c3 = ccw(start2, end2, start1)
    c4 = ccw(start2, end2, end1)

    if c1 * c2 < 0 and c3 * c4 < 0:
        return True

    return (
        (c1 == 0 and is_point_on_segment(start1, end1, start2))
        or (c2 == 0 and is_point_on_segment(start1, end1, end2))
        or (c3 == 0 and is_point_on_segment(start2, end2, start1))
        or (c4 == 0 and is_point_on_segment(start2, end2, end1))
    )


def aabb_corners(pos: Vector2, half_width: float, half_height: float) -> list[Vector2]:
    """Box corners in order top-left, top-right, bottom-right, bottom-left."""
    return [
        Vector2(pos.x - half_width, pos.y - half_height),
        Vector2(pos.x + half_width, pos.y - half_height),
        Vector2(pos.x + half_width, pos.y + half_height),
        Vector2(pos.x - half_width, pos.y + half_height),
    ]


def rotated_corners(center: Vector2, radian: float, width: float, height: float) -> list[Vector2]:
    """Corners of a box rotated about its centre, in the same order as aabb_corners."""
    local = aabb_corners(Vector2(), width * 0.5, height * 0.5)
    return [center + corner.rotate(radian) for corner in local]


def _project(points: Sequence[Vector2], axis: Vector2) -> tuple[float, float]:
    projections = [point.dot(axis) for point in points]
    return min(projections), max(projections)


def overlap_on_axis(first: Sequence[Vector2], second: Sequence[Vector2], axis: Vector2) -> bool:
    """Whether the projections of two point sets on ``axis`` overlap.

    A degenerate axis never separates.
    """
    if axis.x * axis.x + axis.y * axis.y < _AXIS_EPSILON:
        return True
    lo1, hi1 = _project(first, axis)
    lo2, hi2 = _project(second, axis)
    return not (hi1 < lo2 or hi2 < lo1)


def obb_overlaps_aabb(obb: Sequence[Vector2], aabb: Sequence[Vector2]) -> bool:
    """Separating-axis test between a rotated box and an axis-aligned box."""
    edge1 = obb[1] - obb[0]
    edge2 = obb[3] - obb[0]
    axes = (
        Vector2(-edge1.y, edge1.x),
        Vector2(-edge2.y, edge2.x),
        Vector2(1.0, 0.0),
        Vector2(0.0, 1.0),
    )
    return all(overlap_on_axis(obb, aabb, axis) for axis in axes)


def aabb_between(receive: AABBCollider, send: AABBCollider) -> CollisionInfo:
    """Overlap of two axis-aligned box colliders with contact point and normal."""
    receive_min, receive_max = receive.aabb_min(), receive.aabb_max()
    send_min, send_max = send.aabb_min(), send.aabb_max()

    nx = send.center.x - receive.center.x
    ny = send.center.y - receive.center.y

    receive_extent = (receive_max - receive_min) * 0.5
    send_extent = (send_max - send_min) * 0.5

    overlap_x = receive_extent.x + send_extent.x - abs(nx)
    overlap_y = receive_extent.y + send_extent.y - abs(ny)
    if overlap_x < 0 or overlap_y < 0:
        return CollisionInfo()

    if overlap_x > overlap_y:
        normal = Vector2(0.0, -1.0) if ny < 0 else Vector2(0.0, 1.0)
        contact_x = (max(receive_min.x, send_min.x) + min(receive_max.x, send_max.x)) * 0.5
        contact_y = receive_min.y if ny < 0 else receive_max.y
    else:
        normal = Vector2(-1.0, 0.0) if nx < 0 else Vector2(1.0, 0.0)
        contact_x = receive_min.x if nx < 0 else receive_max.x
        contact_y = (max(receive_min.y, send_min.y) + min(receive_max.y, send_max.y)) * 0.5

    return CollisionInfo(
        is_colliding=True,
        collision_point=Vector2(contact_x, contact_y),
        hit_normal=normal,
        collision_actor=send.owner,
    )


def ground_collision(old_rect: Rect, new_rect: Rect, ground: Collider) -> CollisionInfo:
    """Collide a moving box against a solid ground box.

    The side is the one entered this step with the smallest penetration.
    """
    half_w = ground.width * 0.5
    half_h = ground.height * 0.5
    gpos = ground.pos
    g_left = math.trunc(gpos.x - half_w)
    g_top = math.trunc(gpos.y - half_h)
    g_right = math.trunc(gpos.x + half_w)
    g_bottom = math.trunc(gpos.y + half_h)

    old_left, old_top, old_right, old_bottom = old_rect
    left, top, right, bottom = new_rect

    if not (left < g_right and right > g_left and top < g_bottom and bottom >= g_top):
        return CollisionInfo()

    from_top = old_bottom <= g_top and bottom >= g_top
    from_bottom = old_top >= g_bottom and top < g_bottom
    from_left = old_right <= g_left and right > g_left
    from_right = old_left >= g_right and left < g_right

    top_pen = bottom - g_top if from_top else math.inf
    bottom_pen = g_bottom - top if from_bottom else math.inf
    left_pen = right - g_left if from_left else math.inf
    right_pen = g_right - left if from_right else math.inf

    smallest = min(top_pen, bottom_pen, left_pen, right_pen)
    if smallest == math.inf:
        return CollisionInfo()

    mid_x = (max(left, g_left) + min(right, g_right)) * 0.5
    mid_y = (max(top, g_top) + min(bottom, g_bottom)) * 0.5

    result = CollisionInfo(
        is_colliding=True,
        penetration_depth=smallest,
        collision_actor=ground.owner,
    )
    if smallest == top_pen:
        result.collision_point = Vector2(mid_x, float(g_top))
        result.hit_normal = Vector2(0.0, -1.0)
        result.hit_corner = 0
    elif smallest == bottom_pen:
        result.collision_point = Vector2(mid_x, float(g_bottom))
        result.hit_normal = Vector2(0.0, 1.0)
        result.hit_corner = 3
    elif smallest == left_pen:
        result.collision_point = Vector2(float(g_left), mid_y)
        result.hit_normal = Vector2(-1.0, 0.0)
        result.hit_corner = 1
    else:
        result.collision_point = Vector2(float(g_right), mid_y)
        result.hit_normal = Vector2(1.0, 0.0)
        result.hit_corner = 2
    return result


def platform_collision(
    old_pos: Vector2,
    new_pos: Vector2,
    half_width: float,
    half_height: float,
    line: Collider,
) -> CollisionInfo:
    """Land a box on a one-way platform segment when falling onto it."""
    if (new_pos - old_pos).y < 0.0:
        return CollisionInfo()

    start, end = line.start_point, line.end_point
    left = y_on_line_at_x(start, end, new_pos.x - half_width)
    right = y_on_line_at_x(start, end, new_pos.x + half_width)
    left_in = left is not None and left[1]
    right_in = right is not None and right[1]
    if not left_in and not right_in:
        return CollisionInfo()

    if left_in and right_in:
        platform_top = min(left[0], right[0])
    elif left_in:
        platform_top = left[0]
    else:
        platform_top = right[0]

    bottom = new_pos.y + half_height
    old_bottom = old_pos.y + half_height
    if old_bottom <= platform_top and bottom >= platform_top - 2.0:
        return CollisionInfo(
            is_colliding=True,
            collision_point=Vector2(new_pos.x, platform_top),
            hit_normal=_upward_normal(end - start),
            collision_actor=line.owner,
            penetration_depth=max(0.0, bottom - platform_top),
        )
    return CollisionInfo()


def wall_collision(
    old_pos: Vector2,
    new_pos: Vector2,
    half_width: float,
    half_height: float,
    wall: Collider,
) -> CollisionInfo:
    """Stop the leading side of a box at a wall segment.

    A box that does not move horizontally is probed one pixel to each side.
    """
    move = new_pos - old_pos
    start, end = wall.start_point, wall.end_point

    def attempt(m_start: Vector2, m_end: Vector2, normal: Vector2) -> Optional[CollisionInfo]:
        hit = line_intersection(m_start, m_end, start, end)
        if hit is None:
            return None
        return CollisionInfo(
            is_colliding=True,
            collision_point=hit[0],
            hit_normal=normal,
            collision_actor=wall.owner,
        )

    right_start = Vector2(old_pos.x + half_width, old_pos.y)
    left_start = Vector2(old_pos.x - half_width, old_pos.y)
    if move.x > 0:
        found = attempt(right_start, Vector2(new_pos.x + half_width, new_pos.y), Vector2(-1.0, 0.0))
    elif move.x < 0:
        found = attempt(left_start, Vector2(new_pos.x - half_width, new_pos.y), Vector2(1.0, 0.0))
    else:
        found = attempt(
            right_start, Vector2(new_pos.x + half_width + 1.0, new_pos.y), Vector2(-1.0, 0.0)
        ) or attempt(
            left_start, Vector2(new_pos.x - half_width - 1.0, new_pos.y), Vector2(1.0, 0.0)
        )
    return found or CollisionInfo()


def ceiling_collision(
    old_pos: Vector2,
    new_pos: Vector2,
    half_width: float,
    half_height: float,
    ceiling: Collider,
) -> CollisionInfo:
    """Stop the top of a rising box at a ceiling segment."""
    if (new_pos - old_pos).y >= 0.0:
        return CollisionInfo()

    move_start = Vector2(old_pos.x, old_pos.y - half_height)
    move_end = Vector2(new_pos.x, new_pos.y - half_height)
    hit = line_intersection(move_start, move_end, ceiling.start_point, ceiling.end_point)
    if hit is None:
        return CollisionInfo()
    return CollisionInfo(
        is_colliding=True,
        collision_point=hit[0],
        hit_normal=Vector2(0.0, 1.0),
        collision_actor=ceiling.owner,
    )


def stair_collision(
    old_pos: Vector2,
    new_pos: Vector2,
    half_width: float,
    half_height: float,
    stair: Collider,
    was_stair: bool,
    ignore_upward: bool = True,
) -> CollisionInfo:
    """Keep a box on a stair segment, or detect it stepping onto one.

    ``hit_corner`` is 2 for the bottom-right corner and 1 for the bottom-left.
    """
    start, end = stair.start_point, stair.end_point
    direction = end - start
    right_up = (direction.x > 0 and direction.y < 0) or (direction.x < 0 and direction.y > 0)

    if was_stair:
        corner = (
            Vector2(new_pos.x + half_width, new_pos.y + half_height)
            if right_up
            else Vector2(new_pos.x - half_width, new_pos.y + half_height)
        )
        tolerance = 10.0
        if min(start.x, end.x) - tolerance <= corner.x <= max(start.x, end.x) + tolerance:
            on_line = y_on_line_at_x(start, end, corner.x)
            if on_line is not None and abs(corner.y - on_line[0]) <= 15.0:
                return CollisionInfo(
                    is_colliding=True,
                    collision_point=Vector2(corner.x, on_line[0]),
                    hit_normal=_upward_normal(direction),
                    collision_actor=stair.owner,
                    hit_corner=2 if right_up else 1,
                )
        return CollisionInfo()

    if ignore_upward and (new_pos - old_pos).y < -5.0:
        return CollisionInfo()

    corners = (
        (
            2,
            Vector2(old_pos.x + half_width, old_pos.y + half_height),
            Vector2(new_pos.x + half_width, new_pos.y + half_height),
        ),
        (
            1,
            Vector2(old_pos.x - half_width, old_pos.y + half_height),
            Vector2(new_pos.x - half_width, new_pos.y + half_height),
        ),
    )

    best_t = math.inf
    best_point = Vector2()
    hit_corner = 0
    for offset in (-1.0, 0.0, 1.0):
        shift = Vector2(0.0, offset)
        for corner_id, old_corner, new_corner in corners:
            hit = line_intersection(old_corner + shift, new_corner + shift, start, end)
            if hit is not None and 0.0 <= hit[1] <= 1.0 and hit[1] < best_t:
                best_point, best_t = hit
                hit_corner = corner_id

    if best_t == math.inf:
        return CollisionInfo()

    return CollisionInfo(
        is_colliding=True,
        collision_point=best_point,
        hit_normal=_upward_normal(direction),
        collision_actor=stair.owner,
        hit_corner=hit_corner,
    )