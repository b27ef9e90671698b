"""Two-dimensional vectors and the base class shared by all components."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar, Iterator


@dataclass(frozen=True)
class Vector2:
    """An immutable two-dimensional vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector2:
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def dot(self, other: Vector2) -> float:
        """Return the dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        """Return the Euclidean length."""
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vector2:
        """Return a unit vector in the same direction; the zero vector stays zero."""
        size = self.length()
        if size == 0.0:
            return Vector2(0.0, 0.0)
        return Vector2(self.x / size, self.y / size)

    def rotate(self, radian: float) -> Vector2:
        """Return this vector rotated about the origin by ``radian``."""
        cos_r = math.cos(radian)
        sin_r = math.sin(radian)
        return Vector2(self.x * cos_r - self.y * sin_r, self.x * sin_r + self.y * cos_r)


class ComponentPriority(IntEnum):
    """Order in which components of an actor are processed."""

    INPUT = 0
    CAMERA = 1
    MOVEMENT = 2
    ANIMATION = 3
    EFFECT = 4
    DEFAULT = 5


class Component:
    """A piece of behaviour attached to an owning actor.

    The owner is any object exposing a ``pos`` attribute holding a Vector2.
    """

    priority: ClassVar[ComponentPriority] = ComponentPriority.DEFAULT

    def __init__(self, owner: Any = None) -> None:
        self.owner = owner

    @property
    def pos(self) -> Vector2:
        """Position of the owner, or the origin when there is none."""
        if self.owner is not None:
            return self.owner.pos
        return Vector2(0.0, 0.0)

    def update(self, delta_time: float) -> None:
        """Advance the component by ``delta_time`` seconds.

        The base component carries no per-frame state; subclasses override this.
        """