"""Geometric shapes that colliders use to describe their extent."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, ClassVar

from .component import Vector2


class ColliderType(Enum):
    """Kind of geometry a collision shape describes."""

    AABB = auto()
    OBB = auto()
    LINE = auto()


class CollisionShape:
    """Base shape: every measure defaults to zero and both end points to the origin."""

    type: ClassVar[ColliderType]

    width: float = 0.0
    height: float = 0.0
    length: float = 0.0
    radian: float = 0.0
    elapsed: float = 0.0

    def update(self, collider: Any, delta_time: float) -> None:
        """Advance the shape's clock; its geometry stays as it is."""
        self.elapsed += delta_time

    def start_point(self, owner_pos: Vector2) -> Vector2:
        """Start of the shape as a segment; the origin for non-line shapes."""
        return Vector2()

    def end_point(self, owner_pos: Vector2) -> Vector2:
        """End of the shape as a segment; the origin for non-line shapes."""
        return Vector2()


@dataclass
class AABBShape(CollisionShape):
    """An axis-aligned box centred on its owner."""

    type: ClassVar[ColliderType] = ColliderType.AABB

    width: float = 0.0
    height: float = 0.0


@dataclass
class OBBShape(CollisionShape):
    """A box rotated by ``rotation`` radians."""

    type: ClassVar[ColliderType] = ColliderType.OBB

    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0


@dataclass
class LineShape(CollisionShape):
    """A fixed segment in world coordinates."""

    type: ClassVar[ColliderType] = ColliderType.LINE

    start: Vector2 = field(default_factory=Vector2)
    end: Vector2 = field(default_factory=Vector2)

    def start_point(self, owner_pos: Vector2) -> Vector2:
        return self.start

    def end_point(self, owner_pos: Vector2) -> Vector2:
        return self.end


@dataclass
class MovingLineShape(CollisionShape):
    """A segment of ``length`` centred on its owner and pointing along ``radian``."""

    type: ClassVar[ColliderType] = ColliderType.LINE

    length: float = 0.0
    radian: float = 0.0

    def _half_offset(self) -> Vector2:
        half = self.length * 0.5
        return Vector2(math.cos(self.radian) * half, math.sin(self.radian) * half)

    def start_point(self, owner_pos: Vector2) -> Vector2:
        return owner_pos - self._half_offset()

    def end_point(self, owner_pos: Vector2) -> Vector2:
        return owner_pos + self._half_offset()