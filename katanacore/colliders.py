"""Colliders: components that give an actor a collision shape and layer."""

from __future__ import annotations

import itertools
import math
from enum import IntEnum
from typing import Any, ClassVar

from .component import Component, Vector2
from .shapes import AABBShape, ColliderType, CollisionShape, LineShape, MovingLineShape, OBBShape


class CollisionLayer(IntEnum):
    """Layer a collider belongs to; decides what it can collide with."""

    PLAYER = 0
    ENEMY = 1
    GROUND = 2
    PLATFORM = 3
    WALL = 4
    CEILING = 5
    STAIR = 6
    PLAYER_HITBOX = 7
    ENEMY_HITBOX = 8
    PORTAL = 9


class Collider(Component):
    """A component that owns a collision shape and a unique id."""

    _ids: ClassVar[itertools.count] = itertools.count()

    def __init__(
        self,
        shape: CollisionShape | None = None,
        layer: CollisionLayer = CollisionLayer.GROUND,
        owner: Any = None,
    ) -> None:
        super().__init__(owner)
        self.id = next(Collider._ids)
        self.shape = shape
        self.layer = layer
        self.overlapped = False
        self.blocked = False

    @property
    def collider_type(self) -> ColliderType:
        if self.shape is None:
            raise ValueError("collider has no shape")
        return self.shape.type

    @property
    def width(self) -> float:
        return self.shape.width if self.shape else 0.0

    @property
    def height(self) -> float:
        return self.shape.height if self.shape else 0.0

    @property
    def length(self) -> float:
        return self.shape.length if self.shape else 0.0

    @property
    def radian(self) -> float:
        return self.shape.radian if self.shape else 0.0

    @property
    def start_point(self) -> Vector2:
        return self.shape.start_point(self.pos) if self.shape else Vector2()

    @property
    def end_point(self) -> Vector2:
        return self.shape.end_point(self.pos) if self.shape else Vector2()

    def update(self, delta_time: float) -> None:
        """Let the shape advance with the collider."""
        if self.shape is not None:
            self.shape.update(self, delta_time)

    def resize(self, width: float, height: float) -> None:
        """Change the extent; colliders without a box extent keep their shape."""


class AABBCollider(Collider):
    """An axis-aligned box centred on the owner."""

    def __init__(
        self,
        width: float,
        height: float,
        layer: CollisionLayer = CollisionLayer.GROUND,
        owner: Any = None,
    ) -> None:
        super().__init__(AABBShape(width, height), layer, owner)

    @property
    def center(self) -> Vector2:
        return self.pos

    def aabb_min(self) -> Vector2:
        """Top-left corner."""
        pos = self.pos
        return Vector2(pos.x - self.width / 2, pos.y - self.height / 2)

    def aabb_max(self) -> Vector2:
        """Bottom-right corner."""
        pos = self.pos
        return Vector2(pos.x + self.width / 2, pos.y + self.height / 2)

    def rect(self) -> tuple[int, int, int, int]:
        """Integer (left, top, right, bottom), truncated toward zero."""
        pos = self.pos
        half_w = self.width * 0.5
        half_h = self.height * 0.5
        return (
            math.trunc(pos.x - half_w),
            math.trunc(pos.y - half_h),
            math.trunc(pos.x + half_w),
            math.trunc(pos.y + half_h),
        )

    def resize(self, width: float, height: float) -> None:
        if isinstance(self.shape, AABBShape):
            self.shape.width = width
            self.shape.height = height


class LineCollider(Collider):
    """A fixed segment in world coordinates."""

    def __init__(
        self,
        start: Vector2,
        end: Vector2,
        layer: CollisionLayer = CollisionLayer.GROUND,
        owner: Any = None,
    ) -> None:
        super().__init__(LineShape(start, end), layer, owner)


class MovingLineCollider(Collider):
    """A segment that travels with its owner, such as a bullet."""

    def __init__(
        self,
        length: float,
        radian: float,
        layer: CollisionLayer = CollisionLayer.ENEMY_HITBOX,
        owner: Any = None,
    ) -> None:
        super().__init__(MovingLineShape(length, radian), layer, owner)


class OBBCollider(Collider):
    """A rotated box centred on the owner."""

    def __init__(
        self,
        width: float,
        height: float,
        rotation: float = 0.0,
        layer: CollisionLayer = CollisionLayer.GROUND,
        owner: Any = None,
    ) -> None:
        super().__init__(OBBShape(width, height, rotation), layer, owner)
        self.center = Vector2()

    def axes(self) -> tuple[Vector2, Vector2]:
        """Unit local x and y axes of the box."""
        if not isinstance(self.shape, OBBShape):
            return Vector2(1.0, 0.0), Vector2(0.0, 1.0)
        cos_r = math.cos(self.shape.rotation)
        sin_r = math.sin(self.shape.rotation)
        return Vector2(cos_r, sin_r), Vector2(-sin_r, cos_r)

    def vertices(self) -> list[Vector2]:
        """Corners in the order top-left, bottom-left, bottom-right, top-right.

        Each corner is rotated about the world origin.
        """
        if not isinstance(self.shape, OBBShape):
            return [Vector2() for _ in range(4)]
        half_w = self.shape.width / 2
        half_h = self.shape.height / 2
        c = self.pos
        corners = (
            Vector2(c.x - half_w, c.y - half_h),
            Vector2(c.x - half_w, c.y + half_h),
            Vector2(c.x + half_w, c.y + half_h),
            Vector2(c.x + half_w, c.y - half_h),
        )
        return [corner.rotate(self.shape.rotation) for corner in corners]

    def project(self, axis: Vector2) -> tuple[float, float]:
        """Return the (min, max) interval of the vertices projected onto ``axis``."""
        projections = [vertex.dot(axis) for vertex in self.vertices()]
        return min(projections), max(projections)