"""Movement physics for the player, regular enemies and the boss."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, ClassVar, Optional

from .component import Component, ComponentPriority, Vector2
from .input_manager import InputManager, KeyType
from .time_manager import TimeManager

GRAVITY = Vector2(0.0, 2000.0)
"""Gravity acceleration shared by every moving actor, in pixels per second squared."""

DEFAULT_FPS = 60.0
"""Frame rate assumed for friction when no time manager is supplied."""


class PlayerState(Enum):
    """States of the player that affect its movement."""

    IDLE = auto()
    IDLE_TO_RUN = auto()
    RUN = auto()
    RUN_TO_IDLE = auto()
    JUMP = auto()
    FALL = auto()
    PRECROUCH = auto()
    CROUCH = auto()
    POSTCROUCH = auto()
    ATTACK = auto()
    ROLL = auto()
    WALLSLIDE = auto()
    WALLJUMP = auto()
    HURT_BEGIN = auto()
    HURT_LOOP = auto()


class BossState(Enum):
    """States of the boss that affect its movement."""

    IDLE = auto()
    LUNGE = auto()


def _settle(
    velocity: Vector2,
    normal_gravity: Vector2,
    gravity_length: float,
    up_factor: float,
    side_factor: float,
    side_damping: float,
    gravity_damping: float = 1.0,
) -> Vector2:
    """Split velocity along gravity, clamp and damp each part, and recombine.

    ``gravity_length`` is the gravity-direction speed measured before this
    step's acceleration was applied; whatever the acceleration added ends up
    in the side part and is clamped and damped with it.
    """
    gravity_vector = normal_gravity * gravity_length
    side = velocity - gravity_vector
    side_length = side.length()

    if gravity_length > up_factor:
        gravity_vector = normal_gravity * up_factor
    if side_length > side_factor:
        side = side.normalized() * side_factor

    gravity_vector = gravity_vector * gravity_damping
    side = side * side_damping
    if side.length() < 1.0:
        side = Vector2()
    return gravity_vector + side


class PlayerMovementComponent(Component):
    """Gravity, jumping, wall jumps and friction for the player.

    The owner exposes ``pos`` (settable) and ``current_state`` (a PlayerState).
    When ``input_manager`` is given, holding S while jumping or falling
    slams the player downward.
    """

    priority: ClassVar[ComponentPriority] = ComponentPriority.MOVEMENT

    def __init__(self, owner: Any = None, input_manager: Optional[InputManager] = None) -> None:
        super().__init__(owner)
        self.input_manager = input_manager
        self.gravity = GRAVITY
        self.velocity = Vector2()
        self.acceleration = Vector2()
        self.new_pos = Vector2()

        self.jump_initial_velocity = 450.0
        self.air_resistance = 50.0

        self.on_ground = False
        self.left_wall = False
        self.right_wall = False
        self.is_jumped = False
        self.on_platform = False
        self.is_air = False
        self.on_stair = False
        self.stair_right = False
        self.stair_direction = Vector2()

        self.max_frame_rate = 60.0

    @property
    def is_wall(self) -> bool:
        return self.left_wall or self.right_wall

    def release_wall(self) -> None:
        """Detach from both walls."""
        self.left_wall = False
        self.right_wall = False

    def _fast_fall_held(self) -> bool:
        return self.input_manager is not None and self.input_manager.button_pressed(KeyType.S)

    def apply_physics(self, delta_time: float) -> None:
        """Integrate acceleration into velocity for one step."""
        state = self.owner.current_state
        normal_gravity = self.gravity.normalized()
        gravity_length = self.velocity.dot(normal_gravity)

        if self.on_ground or self.on_platform:
            if self.velocity.y >= 0.0:
                self.is_jumped = False
            self.velocity = Vector2(self.velocity.x, 0.0)
            gravity_length = 0.0
        elif self.on_stair:
            self.is_jumped = False
            self.velocity = self.velocity - normal_gravity * gravity_length
        elif state == PlayerState.WALLSLIDE:
            self.acceleration = self.acceleration + self.gravity * 0.5
        else:
            self.acceleration = self.acceleration + self.gravity

        if state in (PlayerState.FALL, PlayerState.JUMP) and self._fast_fall_held():
            self.acceleration = self.acceleration + Vector2(0.0, 100000.0)

        self.velocity = self.velocity + self.acceleration * delta_time

        up_factor = 400.0
        side_factor = 500.0
        if state in (PlayerState.ROLL, PlayerState.ATTACK):
            side_factor = 1000.0
        elif state == PlayerState.WALLJUMP:
            up_factor = 1000.0
            side_factor = 1000.0
        elif state in (PlayerState.HURT_BEGIN, PlayerState.HURT_LOOP):
            side_factor = 800.0

        exponent = delta_time * self.max_frame_rate
        gravity_damping = 1.0
        friction = 0.85
        if state == PlayerState.ROLL:
            friction = 1.0
        elif state == PlayerState.ATTACK:
            friction = 0.98
        elif state in (PlayerState.WALLJUMP, PlayerState.HURT_BEGIN, PlayerState.HURT_LOOP):
            friction = 0.98
            gravity_damping = friction**exponent

        self.velocity = _settle(
            self.velocity,
            normal_gravity,
            gravity_length,
            up_factor,
            side_factor,
            friction**exponent,
            gravity_damping,
        )

    def update_position(self) -> None:
        """Move the owner to the resolved position and clear the acceleration."""
        self.owner.pos = self.new_pos
        self.acceleration = Vector2()

    def jump(self) -> None:
        """Leave the ground with the initial jump speed."""
        self.velocity = Vector2(0.0, -self.jump_initial_velocity)
        self.on_ground = False
        self.on_platform = False
        self.on_stair = False
        self.is_jumped = True

    def wall_jump(self) -> None:
        """Kick off the wall the player clings to."""
        x_speed = 1000.0 if self.left_wall else -1000.0
        self.velocity = Vector2(x_speed, -1000.0)
        self.on_ground = False
        self.on_platform = False

    def attack_force(self, direction: Vector2) -> None:
        """Stop, then push hard along the attack ``direction``."""
        self.velocity = Vector2()
        self.acceleration = self.acceleration + direction * 100000000.0


class EnemyMovementComponent(Component):
    """Gravity and friction for regular enemies, with a separate knock-back mode.

    The owner exposes ``pos``, ``was_hit`` and ``is_dead``. While the owner
    was hit, physics runs on the unscaled step of ``time_manager`` so that
    knock-back ignores slow motion.
    """

    priority: ClassVar[ComponentPriority] = ComponentPriority.MOVEMENT

    def __init__(self, owner: Any = None, time_manager: Optional[TimeManager] = None) -> None:
        super().__init__(owner)
        self.time_manager = time_manager
        self.gravity = GRAVITY
        self.velocity = Vector2()
        self.acceleration = Vector2()
        self.new_pos = Vector2()
        self.on_ground = False
        self.on_stair = False
        self.on_platform = False
        self.max_frame_rate = 60.0

    @property
    def _supported(self) -> bool:
        return self.on_ground or self.on_platform or self.on_stair

    def _fps(self) -> float:
        return float(self.time_manager.fps) if self.time_manager is not None else DEFAULT_FPS

    def update(self, delta_time: float) -> None:
        """Run one physics step and compute the intended new position."""
        if self.owner.was_hit:
            step = (
                self.time_manager.const_delta_time
                if self.time_manager is not None
                else delta_time
            )
            self.hit_physics(step)
            self.new_pos = self.pos + self.velocity * step
        else:
            self.apply_physics(delta_time)
            self.new_pos = self.pos + self.velocity * delta_time

    def _gravity_step(self, delta_time: float) -> tuple[Vector2, float]:
        normal_gravity = self.gravity.normalized()
        gravity_length = self.velocity.dot(normal_gravity)
        if self._supported:
            self.velocity = Vector2(self.velocity.x, 0.0)
            gravity_length = 0.0
        else:
            self.acceleration = self.acceleration + self.gravity
        self.velocity = self.velocity + self.acceleration * delta_time
        return normal_gravity, gravity_length

    def apply_physics(self, delta_time: float) -> None:
        """Regular movement step."""
        normal_gravity, gravity_length = self._gravity_step(delta_time)
        friction = 0.8
        if self.owner.is_dead and not self._supported:
            friction = 0.98
        self.velocity = _settle(
            self.velocity,
            normal_gravity,
            gravity_length,
            1000.0,
            1000.0,
            friction ** (delta_time * self.max_frame_rate),
        )

    def hit_physics(self, delta_time: float) -> None:
        """Knock-back step: higher speed limits and little friction."""
        fps = self._fps()
        normal_gravity, gravity_length = self._gravity_step(delta_time)
        self.velocity = _settle(
            self.velocity,
            normal_gravity,
            gravity_length,
            2000.0,
            2000.0,
            0.98 ** (delta_time * fps),
        )


class BossMovementComponent(Component):
    """Gravity, friction and parabolic lunges for the boss.

    The owner exposes ``pos``, ``was_hit`` and ``current_state`` (a BossState).
    """

    priority: ClassVar[ComponentPriority] = ComponentPriority.MOVEMENT
    lunge_speed: ClassVar[float] = 1000.0

    def __init__(self, owner: Any = None, time_manager: Optional[TimeManager] = None) -> None:
        super().__init__(owner)
        self.time_manager = time_manager
        self.gravity = GRAVITY
        self.velocity = Vector2()
        self.acceleration = Vector2()
        self.new_pos = Vector2()
        self.on_ground = False
        self.on_stair = False
        self.lunge = False

    def _fps(self) -> float:
        return float(self.time_manager.fps) if self.time_manager is not None else DEFAULT_FPS

    def update(self, delta_time: float) -> None:
        """Run one physics step and compute the intended new position."""
        self.apply_physics(delta_time)
        self.new_pos = self.pos + self.velocity * delta_time

    def apply_physics(self, delta_time: float) -> None:
        """Integrate one step; during a lunge only gravity acts."""
        if self.lunge:
            self.velocity = Vector2(
                self.velocity.x, self.velocity.y + self.gravity.y * delta_time
            )
            return

        normal_gravity = self.gravity.normalized()
        gravity_length = self.velocity.dot(normal_gravity)
        was_hit = self.owner.was_hit

        if was_hit:
            self.acceleration = self.acceleration + self.gravity
        elif self.on_ground:
            self.velocity = Vector2(self.velocity.x, 0.0)
            gravity_length = 0.0
        else:
            self.acceleration = self.acceleration + self.gravity

        self.velocity = self.velocity + self.acceleration * delta_time

        friction = 0.8
        if (was_hit and not self.on_ground) or self.owner.current_state == BossState.LUNGE:
            friction = 0.98

        self.velocity = _settle(
            self.velocity,
            normal_gravity,
            gravity_length,
            1000.0,
            1000.0,
            friction ** (delta_time * self._fps()),
        )

    def parabolic_jump(self, target_pos: Vector2) -> None:
        """Leap toward ``target_pos`` along a parabola."""
        self.lunge = True
        self.on_ground = False
        self.velocity = self.parabolic_velocity(self.pos, target_pos)
        self.acceleration = Vector2()

    def parabolic_velocity(self, start_pos: Vector2, target_pos: Vector2) -> Vector2:
        """Initial velocity that lands on ``target_pos`` under gravity.

        Flight time is the horizontal distance over 1000, clamped to 0.3-0.5 s.
        """
        dx = target_pos.x - start_pos.x
        dy = target_pos.y - start_pos.y
        direction = 1.0 if dx >= 0.0 else -1.0
        dx = abs(dx)
        g = self.gravity.y

        flight = min(max(dx / 1000.0, 0.3), 0.5)
        return Vector2(direction * (dx / flight), (dy - 0.5 * g * flight * flight) / flight)