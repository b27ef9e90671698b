# katanacore

This is the engine-independent core of a fast 2D side-scrolling action game.
It contains the parts that decide how the game behaves: geometry, collision,
movement physics, timing, input recording and frame rewind. Everything here is
plain Python with no dependencies outside the standard library.

## Modules

- `katanacore.component`
  - `Vector2` is an immutable 2D vector. It supports `+`, `-`, scalar `*` and
    `/`, `dot`, `length`, `normalized` and `rotate`.
  - `ComponentPriority` orders components.
  - `Component` is the base class. It has an `owner`, and its `pos` property
    reads the owner's `pos`, or gives the origin when there is no owner.
- `katanacore.shapes`
  - `ColliderType` names the kinds of geometry.
  - The shapes are `AABBShape`, `OBBShape`, `LineShape` (a fixed segment) and
    `MovingLineShape`. A `MovingLineShape` is a segment centred on its owner
    and pointing along `radian`.
- `katanacore.colliders`
  - `CollisionLayer` lists the layers.
  - `Collider` adds a unique `id`, a `shape` and a `layer` to a component.
  - The subclasses are `AABBCollider`, `LineCollider`, `MovingLineCollider`
    and `OBBCollider`.
  - `AABBCollider` offers `aabb_min`, `aabb_max`, `rect` and `resize`.
  - `OBBCollider` offers `axes`, `vertices` and `project`.
- `katanacore.collision`
  - `CollisionInfo` holds the result of a test.
  - Geometry helpers:
    - `line_intersection` and `y_on_line_at_x`;
    - `ccw` and `is_point_on_segment`;
    - `line_hits_aabb`, a Liang–Barsky clip;
    - `lines_intersect`;
    - `aabb_corners` and `rotated_corners`;
    - `overlap_on_axis` and `obb_overlaps_aabb`, a separating-axis test.
  - Movement responses:
    - `aabb_between`;
    - `ground_collision`;
    - `platform_collision`, for one-way platforms;
    - `wall_collision`;
    - `ceiling_collision`;
    - `stair_collision`.
- `katanacore.collision_manager`
  - `CollisionManager` registers colliders by layer and keeps a block mask
    between layers, which you change with `set_bit_flag`.
  - On `update` it tests each blocking pair once. It calls
    `on_collision_begin_overlap`, `on_collision_stay_overlap` and
    `on_collision_end_overlap` on the owners.
  - `post_update` readies the contacts for the next frame.
  - `check_obb_hitbox` handles a rotated attack box, described by an
    `AttackInfo`.
  - `check_aabb_hitbox` handles an axis-aligned enemy attack. Both call
    `take_damage` on what they hit.
  - `pair_key` builds the order-independent key used for a contact pair.
- `katanacore.time_manager`
  - `TimeManager` measures real frame time with an injectable `clock` and
    counts FPS.
  - On each `fixed_update` it produces a scaled `delta_time` and an unscaled
    `const_delta_time`.
  - It provides:
    - slow motion that eases in and out (`start_slow_motion`,
      `end_slow_motion`), with an overlay `mask_alpha`;
    - an 11-cell battery that drains during slow motion and recharges
      otherwise (`reset_battery`);
    - hit stop (`trigger_hit_stop`);
    - `sync_clock`, which discards time lost to a stall.
  - The optional callbacks `on_global_speed` and `on_slow_motion` let audio
    code follow the time scale.
- `katanacore.input_manager`
  - `InputManager.update` takes the set of key codes currently held and the
    mouse position. It turns them into `KeyState` values: `DOWN`, `PRESSED`,
    `UP` and `NONE`.
  - It records every frame. After `set_replay(True)`, the recording drives the
    states again, and `replay_update` plays one frame at a time.
  - `KeyType` holds the virtual key codes the game uses.
  - `next_key_state` and `is_held` hold the state rules.
- `katanacore.rewind`
  - `RewindBuffer` keeps every n-th frame passed to `capture_frame` (every
    15th by default).
  - After `start_rewind`, `next_rewind_frame` returns the frames newest first,
    each as a `FrameSnapshot`.
- `katanacore.movement`
  - `PlayerMovementComponent`, `EnemyMovementComponent` and
    `BossMovementComponent` apply gravity, clamp side and vertical speed, and
    add frame-rate-independent friction.
  - The player component adds jumps, wall jumps, attack pushes and a fast fall
    while S is held.
  - The enemy component adds a knock-back mode that runs on unscaled time.
  - The boss component adds parabolic lunges (`parabolic_jump`,
    `parabolic_velocity`).
  - `PlayerState` and `BossState` name the states that affect movement.

## Installation

```
pip install katanacore
```

Requires Python 3.10 or later.

## Example

```python
from katanacore.component import Vector2
from katanacore.collision import line_hits_aabb, lines_intersect

# A diagonal segment through a 2x2 box: returns the unit direction of the segment
print(line_hits_aabb(Vector2(-5, -5), Vector2(5, 5), Vector2(-1, -1), Vector2(1, 1)))

# Two crossing segments
print(lines_intersect(Vector2(0, 0), Vector2(2, 2), Vector2(0, 2), Vector2(2, 0)))  # True
```

Input recording and replay:

```python
from katanacore.input_manager import InputManager, KeyType

inputs = InputManager()
inputs.update(1 / 60, {KeyType.W}, (0, 0))
assert inputs.button_down(KeyType.W)
inputs.update(1 / 60, {KeyType.W}, (0, 0))
assert inputs.button_pressed(KeyType.W)

inputs.set_replay(True)      # the recorded frames now drive the key states
inputs.replay_update()
assert inputs.button_down(KeyType.W)
```

## What it does not do

This package contains no game loop, window, rendering or sound. It does not
read the keyboard or mouse itself: the caller passes the held keys and the
mouse position to `InputManager.update`. It does not load sprites, textures,
maps or audio. It has no sprite animation and no visual effects. Frames
passed to `RewindBuffer` are stored as given and never drawn. Actors are
supplied by the caller and must provide the attributes and callbacks
described in each module's docstrings.

## Running the tests

```
pip install -e ".[test]"
pytest
```