"""Collision bookkeeping: layers, contact tracking and attack hit boxes.

Colliders registered here must have an owner exposing:

* ``pos`` and ``new_pos`` (Vector2): current and intended position,
* ``is_active``, ``was_hit``, ``is_dead`` (bool),
* ``on_stair`` and, for players, ``on_platform`` (bool),
* ``on_collision_begin_overlap(info)``, ``on_collision_stay_overlap(info)``,
  ``on_collision_end_overlap(info)`` and ``take_damage(attacker, direction)``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any

from .colliders import AABBCollider, Collider, CollisionLayer
from .collision import (
    CollisionInfo,
    aabb_between,
    aabb_corners,
    ceiling_collision,
    ground_collision,
    line_hits_aabb,
    lines_intersect,
    obb_overlaps_aabb,
    platform_collision,
    rotated_corners,
    stair_collision,
    wall_collision,
)
from .component import Vector2
from .shapes import ColliderType

_ID_MASK = 0xFFFFFFFF


class CollisionResponse(Enum):
    """How two layers respond to one another."""

    BLOCK = auto()
    IGNORE = auto()


@dataclass
class AttackInfo:
    """A rotated attack box and the colliders it has already struck."""

    attack_radian: float = 0.0
    width: float = 0.0
    height: float = 0.0
    attack_dir: Vector2 = field(default_factory=Vector2)
    attack_layer: CollisionLayer = CollisionLayer.PLAYER_HITBOX
    hit_actors: list[Collider] = field(default_factory=list)


def pair_key(a: int, b: int) -> int:
    """Order-independent 64-bit key for a pair of collider ids."""
    left, right = (a, b) if a < b else (b, a)
    return ((left & _ID_MASK) << 32) | (right & _ID_MASK)


def _rect(pos: Vector2, half_width: float, half_height: float) -> tuple[int, int, int, int]:
    return (
        math.trunc(pos.x - half_width),
        math.trunc(pos.y - half_height),
        math.trunc(pos.x + half_width),
        math.trunc(pos.y + half_height),
    )


class CollisionManager:
    """Tracks colliders per layer and dispatches overlap events between them."""

    _BLOCK_PAIRS = (
        (CollisionLayer.PLAYER, CollisionLayer.GROUND),
        (CollisionLayer.PLAYER, CollisionLayer.WALL),
        (CollisionLayer.PLAYER, CollisionLayer.CEILING),
        (CollisionLayer.PLAYER, CollisionLayer.PLATFORM),
        (CollisionLayer.PLAYER, CollisionLayer.STAIR),
        (CollisionLayer.PLAYER, CollisionLayer.ENEMY_HITBOX),
        (CollisionLayer.PLAYER, CollisionLayer.PORTAL),
        (CollisionLayer.ENEMY, CollisionLayer.GROUND),
        (CollisionLayer.ENEMY, CollisionLayer.WALL),
        (CollisionLayer.ENEMY, CollisionLayer.CEILING),
        (CollisionLayer.ENEMY, CollisionLayer.PLATFORM),
        (CollisionLayer.ENEMY, CollisionLayer.STAIR),
        (CollisionLayer.ENEMY, CollisionLayer.PLAYER_HITBOX),
        (CollisionLayer.ENEMY, CollisionLayer.ENEMY_HITBOX),
        (CollisionLayer.ENEMY_HITBOX, CollisionLayer.ENEMY),
        (CollisionLayer.ENEMY_HITBOX, CollisionLayer.PLAYER_HITBOX),
        (CollisionLayer.ENEMY_HITBOX, CollisionLayer.GROUND),
        (CollisionLayer.ENEMY_HITBOX, CollisionLayer.WALL),
        (CollisionLayer.ENEMY_HITBOX, CollisionLayer.CEILING),
        (CollisionLayer.ENEMY_HITBOX, CollisionLayer.STAIR),
    )

    def __init__(self) -> None:
        self._colliders: dict[CollisionLayer, list[Collider]] = {
            layer: [] for layer in CollisionLayer
        }
        self._contacts: dict[int, bool] = {}
        self._masks: dict[CollisionResponse, dict[CollisionLayer, int]] = {
            response: {layer: 0 for layer in CollisionLayer} for response in CollisionResponse
        }
        self._send_layers: dict[CollisionLayer, list[CollisionLayer]] = {}
        for first, second in self._BLOCK_PAIRS:
            self.set_bit_flag(first, second, CollisionResponse.BLOCK, True)

    # ------------------------------------------------------------------ layers

    def _rebuild_layer_cache(self) -> None:
        block = self._masks[CollisionResponse.BLOCK]
        self._send_layers = {
            receive: [send for send in CollisionLayer if block[receive] & (1 << send)]
            for receive in CollisionLayer
        }

    def _blocks(self, layer: CollisionLayer, other: CollisionLayer) -> bool:
        return bool(self._masks[CollisionResponse.BLOCK][layer] & (1 << other))

    def set_bit_flag(
        self,
        layer1: CollisionLayer,
        layer2: CollisionLayer,
        response: CollisionResponse,
        on: bool,
    ) -> None:
        """Turn the response between two layers on or off, in both directions."""
        mask = self._masks[response]
        if on:
            mask[layer1] |= 1 << layer2
            mask[layer2] |= 1 << layer1
        else:
            mask[layer1] &= ~(1 << layer2)
            mask[layer2] &= ~(1 << layer1)
        self._rebuild_layer_cache()

    # --------------------------------------------------------------- registry

    def add_collider(self, collider: Collider) -> None:
        """Register a collider under its layer."""
        self._colliders[collider.layer].append(collider)

    def remove_collider(self, collider: Collider) -> None:
        """Unregister a collider; unknown colliders are ignored."""
        placed = self._colliders[collider.layer]
        if collider in placed:
            placed.remove(collider)

    def clear(self) -> None:
        """Unregister every collider."""
        for placed in self._colliders.values():
            placed.clear()

    def placed_colliders(self, layer: CollisionLayer) -> tuple[Collider, ...]:
        """Colliders registered under ``layer``, in registration order."""
        return tuple(self._colliders[layer])

    # ------------------------------------------------------------------ frame

    def update(self) -> None:
        """Test every blocking pair once and fire begin, stay and end events."""
        for receive_layer in CollisionLayer:
            for receive in list(self._colliders[receive_layer]):
                if not receive.owner.is_active:
                    continue
                for send_layer in self._send_layers[receive_layer]:
                    for send in list(self._colliders[send_layer]):
                        if not send.owner.is_active:
                            continue
                        self._process_pair(receive, send)

    def _process_pair(self, receive: Collider, send: Collider) -> None:
        key = pair_key(receive.id, send.id)
        visited = self._contacts.get(key)
        first_contact = visited is None
        if visited:
            return

        info = self.check_collision(receive, send)
        if info.is_colliding:
            if first_contact:
                receive.owner.on_collision_begin_overlap(info)
                self._contacts[key] = True
                send.overlapped = True
            else:
                send.owner.on_collision_stay_overlap(
                    replace(info, collision_layer=receive.layer, collision_actor=receive.owner)
                )
                receive.owner.on_collision_stay_overlap(
                    replace(info, collision_layer=send.layer, collision_actor=send.owner)
                )
                self._contacts[key] = True
        elif not first_contact:
            receive.owner.on_collision_end_overlap(info)
            del self._contacts[key]
            send.overlapped = False

    def post_update(self) -> None:
        """Mark every ongoing contact as not yet handled for the next frame."""
        for key in self._contacts:
            self._contacts[key] = False

    # ------------------------------------------------------------- dispatch

    def check_collision(self, receive: Collider, send: Collider) -> CollisionInfo:
        """Test ``receive`` against ``send`` according to the receiver's layer."""
        if receive.layer == CollisionLayer.PLAYER:
            return self._player_check(receive, send)
        if receive.layer == CollisionLayer.ENEMY:
            return self._enemy_check(receive, send)
        if receive.layer == CollisionLayer.ENEMY_HITBOX:
            if receive.collider_type == ColliderType.LINE:
                return self._bullet_check(receive, send)
            return self._axe_check(receive, send)
        return CollisionInfo()

    @staticmethod
    def _line_against_rect(send: Collider, rect: tuple[int, int, int, int]) -> CollisionInfo:
        aabb_min = Vector2(float(rect[0]), float(rect[1]))
        aabb_max = Vector2(float(rect[2]), float(rect[3]))
        # A reflected line travels backwards, so its end leads.
        normal = line_hits_aabb(send.end_point, send.start_point, aabb_min, aabb_max)
        if normal is None:
            return CollisionInfo()
        return CollisionInfo(is_colliding=True, hit_normal=normal, collision_actor=send.owner)

    def _player_check(self, receive: Collider, send: Collider) -> CollisionInfo:
        half_w = receive.width * 0.5
        half_h = receive.height * 0.5
        owner = receive.owner
        cur_pos = receive.pos
        new_pos = owner.new_pos
        old_rect = _rect(cur_pos, half_w, half_h)
        new_rect = _rect(new_pos, half_w, half_h)

        layer = send.layer
        info = CollisionInfo()
        if layer in (CollisionLayer.GROUND, CollisionLayer.PORTAL):
            info = ground_collision(old_rect, new_rect, send)
        elif layer == CollisionLayer.WALL:
            info = wall_collision(cur_pos, new_pos, half_w, half_h, send)
        elif layer == CollisionLayer.CEILING:
            info = ceiling_collision(cur_pos, new_pos, half_w, half_h, send)
        elif layer == CollisionLayer.STAIR:
            if not getattr(owner, "on_platform", False):
                info = stair_collision(
                    cur_pos, new_pos, half_w, half_h, send, bool(owner.on_stair)
                )
        elif layer == CollisionLayer.PLATFORM:
            info = platform_collision(cur_pos, new_pos, half_w, half_h, send)
        elif layer == CollisionLayer.ENEMY_HITBOX:
            if send.collider_type == ColliderType.AABB:
                info = aabb_between(receive, send)  # type: ignore[arg-type]
            else:
                info = self._line_against_rect(send, new_rect)

        info.collision_layer = layer
        return info

    def _enemy_check(self, receive: Collider, send: Collider) -> CollisionInfo:
        half_w = receive.width * 0.5
        half_h = receive.height * 0.5
        owner = receive.owner
        cur_pos = receive.pos
        new_pos = owner.new_pos
        old_rect = _rect(cur_pos, half_w, half_h)
        new_rect = _rect(new_pos, half_w, half_h)

        layer = send.layer
        info = CollisionInfo()
        if layer == CollisionLayer.GROUND:
            info = ground_collision(old_rect, new_rect, send)
        elif layer == CollisionLayer.WALL:
            info = wall_collision(cur_pos, new_pos, half_w, half_h, send)
        elif layer == CollisionLayer.CEILING:
            info = ceiling_collision(cur_pos, new_pos, half_w, half_h, send)
        elif layer == CollisionLayer.STAIR:
            ignore_up = not (owner.was_hit or owner.is_dead)
            info = stair_collision(
                cur_pos, new_pos, half_w, half_h, send, bool(owner.on_stair), ignore_up
            )
        elif layer == CollisionLayer.PLATFORM:
            info = platform_collision(cur_pos, new_pos, half_w, half_h, send)
        elif layer == CollisionLayer.ENEMY_HITBOX:
            if send.collider_type == ColliderType.LINE:
                info = self._line_against_rect(send, new_rect)
            else:
                info = aabb_between(receive, send)  # type: ignore[arg-type]

        info.collision_layer = layer
        return info

    def _bullet_check(self, receive: Collider, send: Collider) -> CollisionInfo:
        pos = receive.pos
        half = receive.length * 0.5
        offset = Vector2(math.cos(receive.radian) * half, math.sin(receive.radian) * half)
        start = pos - offset
        end = pos + offset

        layer = send.layer
        info = CollisionInfo()
        if layer == CollisionLayer.GROUND and isinstance(send, AABBCollider):
            left, top, right, bottom = send.rect()
            normal = line_hits_aabb(
                start, end, Vector2(float(left), float(top)), Vector2(float(right), float(bottom))
            )
            if normal is not None:
                info = CollisionInfo(is_colliding=True, hit_normal=normal)
        elif layer in (CollisionLayer.WALL, CollisionLayer.CEILING, CollisionLayer.STAIR):
            info.is_colliding = lines_intersect(start, end, send.start_point, send.end_point)

        info.collision_layer = layer
        return info

    def _axe_check(self, receive: Collider, send: Collider) -> CollisionInfo:
        half_w = receive.width * 0.5
        half_h = receive.height * 0.5
        owner = receive.owner
        cur_pos = owner.pos
        new_pos = owner.new_pos

        layer = send.layer
        info = CollisionInfo()
        if layer == CollisionLayer.GROUND:
            info = ground_collision(
                _rect(cur_pos, half_w, half_h), _rect(new_pos, half_w, half_h), send
            )
        elif layer == CollisionLayer.WALL:
            info = wall_collision(cur_pos, new_pos, half_w, half_h, send)
        elif layer == CollisionLayer.CEILING:
            info = ceiling_collision(cur_pos, new_pos, half_w, half_h, send)
        elif layer == CollisionLayer.ENEMY:
            info = aabb_between(receive, send)  # type: ignore[arg-type]

        info.collision_layer = layer
        return info

    # -------------------------------------------------------------- hit boxes

    def check_obb_hitbox(self, attacker: Any, attack: AttackInfo) -> bool:
        """Damage everything a rotated attack box touches.

        Struck colliders are added to ``attack.hit_actors`` and not struck again.
        Returns True when an enemy projectile was hit, i.e. should be reflected.
        """
        center = attacker.pos
        corners = rotated_corners(center, attack.attack_radian, attack.width, attack.height)

        cos_r = math.cos(attack.attack_radian)
        sin_r = math.sin(attack.attack_radian)
        local_x = Vector2(cos_r, sin_r)
        local_y = Vector2(-sin_r, cos_r)
        box_min = Vector2(-attack.width * 0.5, -attack.height * 0.5)
        box_max = Vector2(attack.width * 0.5, attack.height * 0.5)

        reflected = False
        for layer in CollisionLayer:
            if not self._blocks(layer, attack.attack_layer):
                continue
            for collider in list(self._colliders[layer]):
                if collider.owner.was_hit:
                    continue
                if any(hit.id == collider.id for hit in attack.hit_actors):
                    continue

                if layer == CollisionLayer.ENEMY:
                    box = aabb_corners(collider.pos, collider.width * 0.5, collider.height * 0.5)
                    if obb_overlaps_aabb(corners, box):
                        attack.hit_actors.append(collider)
                        collider.owner.take_damage(attacker, attack.attack_dir)
                elif layer == CollisionLayer.ENEMY_HITBOX:
                    if collider.collider_type == ColliderType.LINE:
                        rel1 = collider.start_point - center
                        rel2 = collider.end_point - center
                        local1 = Vector2(rel1.dot(local_x), rel1.dot(local_y))
                        local2 = Vector2(rel2.dot(local_x), rel2.dot(local_y))
                        struck = line_hits_aabb(local1, local2, box_min, box_max) is not None
                    else:
                        box = aabb_corners(
                            collider.pos, collider.width * 0.5, collider.height * 0.5
                        )
                        struck = obb_overlaps_aabb(corners, box)
                    if struck:
                        reflected = True
                        attack.hit_actors.append(collider)
                        collider.owner.take_damage(attacker, attack.attack_dir)
        return reflected

    def check_aabb_hitbox(
        self, attacker: Any, center: Vector2, width: float, height: float
    ) -> bool:
        """Damage players inside an axis-aligned hit box.

        Returns True as soon as a player is found outside the box, meaning the
        hit box should stay alive; False once every player has been struck.
        """
        for collider in list(self._colliders[CollisionLayer.PLAYER]):
            col_pos = collider.pos
            nx = center.x - col_pos.x
            ny = center.y - col_pos.y
            overlap_x = (collider.width * 0.5 + width * 0.5) - abs(nx)
            overlap_y = (collider.height * 0.5 + height * 0.5) - abs(ny)
            if overlap_x < 0 or overlap_y < 0:
                return True
            direction = (col_pos - center).normalized()
            collider.owner.take_damage(attacker, direction)
        return False