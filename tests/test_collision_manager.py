from dataclasses import dataclass, field
from typing import Any

import pytest

from katanacore.colliders import AABBCollider, CollisionLayer, LineCollider, MovingLineCollider
from katanacore.collision_manager import (
    AttackInfo,
    CollisionManager,
    CollisionResponse,
    pair_key,
)
from katanacore.component import Vector2


@dataclass
class FakeActor:
    pos: Vector2 = field(default_factory=Vector2)
    new_pos: Vector2 = field(default_factory=Vector2)
    is_active: bool = True
    was_hit: bool = False
    is_dead: bool = False
    on_stair: bool = False
    on_platform: bool = False
    events: list = field(default_factory=list)
    damage: list = field(default_factory=list)

    def on_collision_begin_overlap(self, info: Any) -> None:
        self.events.append(("begin", info))

    def on_collision_stay_overlap(self, info: Any) -> None:
        self.events.append(("stay", info))

    def on_collision_end_overlap(self, info: Any) -> None:
        self.events.append(("end", info))

    def take_damage(self, attacker: Any, direction: Vector2) -> None:
        self.damage.append((attacker, direction))


def _landing_scene():
    manager = CollisionManager()
    player = FakeActor(pos=Vector2(0, 0), new_pos=Vector2(0, 10))
    ground = FakeActor(pos=Vector2(0, 30))
    player_col = AABBCollider(20, 40, CollisionLayer.PLAYER, owner=player)
    ground_col = AABBCollider(200, 20, CollisionLayer.GROUND, owner=ground)
    manager.add_collider(player_col)
    manager.add_collider(ground_col)
    return manager, player, ground, player_col, ground_col


def test_pair_key_is_order_independent():
    assert pair_key(3, 7) == pair_key(7, 3)
    assert pair_key(3, 7) == (3 << 32) | 7


def test_registry_add_remove_clear():
    manager = CollisionManager()
    a = AABBCollider(1, 1, CollisionLayer.WALL, owner=FakeActor())
    b = AABBCollider(1, 1, CollisionLayer.WALL, owner=FakeActor())
    manager.add_collider(a)
    manager.add_collider(b)
    assert manager.placed_colliders(CollisionLayer.WALL) == (a, b)
    manager.remove_collider(a)
    manager.remove_collider(a)
    assert manager.placed_colliders(CollisionLayer.WALL) == (b,)
    manager.clear()
    assert manager.placed_colliders(CollisionLayer.WALL) == ()


def test_landing_fires_begin_once():
    manager, player, ground, _, ground_col = _landing_scene()
    manager.update()
    assert len(player.events) == 1
    kind, info = player.events[0]
    assert kind == "begin"
    assert info.hit_normal == Vector2(0.0, -1.0)
    assert info.collision_layer == CollisionLayer.GROUND
    assert info.collision_actor is ground
    assert ground_col.overlapped is True
    manager.update()
    assert len(player.events) == 1


def test_stay_then_end():
    manager, player, ground, _, ground_col = _landing_scene()
    manager.update()
    manager.post_update()
    manager.update()
    assert [kind for kind, _ in player.events] == ["begin", "stay"]
    assert player.events[1][1].collision_actor is ground
    assert ground.events[0][0] == "stay"
    assert ground.events[0][1].collision_actor is player
    assert ground.events[0][1].collision_layer == CollisionLayer.PLAYER

    manager.post_update()
    player.pos = Vector2(0, -100)
    player.new_pos = Vector2(0, -100)
    manager.update()
    assert player.events[-1][0] == "end"
    assert ground_col.overlapped is False


def test_inactive_owner_is_skipped():
    manager, player, _, _, _ = _landing_scene()
    player.is_active = False
    manager.update()
    assert player.events == []


def test_disabled_layer_pair_does_not_collide():
    manager, player, _, _, _ = _landing_scene()
    manager.set_bit_flag(
        CollisionLayer.PLAYER, CollisionLayer.GROUND, CollisionResponse.BLOCK, False
    )
    manager.update()
    assert player.events == []


def test_enemy_walks_into_wall():
    manager = CollisionManager()
    enemy = FakeActor(pos=Vector2(0, 0), new_pos=Vector2(10, 0))
    enemy_col = AABBCollider(20, 40, CollisionLayer.ENEMY, owner=enemy)
    wall = LineCollider(Vector2(15, -50), Vector2(15, 50), CollisionLayer.WALL, owner=FakeActor())
    info = manager.check_collision(enemy_col, wall)
    assert info.is_colliding
    assert info.hit_normal == Vector2(-1.0, 0.0)
    assert info.collision_point.x == pytest.approx(15.0)
    assert info.collision_layer == CollisionLayer.WALL


def test_bullet_against_walls():
    manager = CollisionManager()
    bullet = MovingLineCollider(20, 0.0, owner=FakeActor(pos=Vector2(0, 0)))
    near = LineCollider(Vector2(5, -10), Vector2(5, 10), CollisionLayer.WALL, owner=FakeActor())
    far = LineCollider(Vector2(50, -10), Vector2(50, 10), CollisionLayer.WALL, owner=FakeActor())
    assert manager.check_collision(bullet, near).is_colliding is True
    assert manager.check_collision(bullet, far).is_colliding is False


def test_player_hit_by_reflected_line_points_backwards():
    manager = CollisionManager()
    player = FakeActor(pos=Vector2(0, 0), new_pos=Vector2(0, 0))
    player_col = AABBCollider(20, 40, CollisionLayer.PLAYER, owner=player)
    shooter = FakeActor(pos=Vector2(0, 0))
    bullet = MovingLineCollider(20, 0.0, owner=shooter)
    info = manager.check_collision(player_col, bullet)
    assert info.is_colliding
    assert info.collision_actor is shooter
    assert info.hit_normal == Vector2(-1.0, 0.0)


def test_unhandled_receiver_layer_never_collides():
    manager = CollisionManager()
    ground = AABBCollider(100, 100, CollisionLayer.GROUND, owner=FakeActor())
    player = AABBCollider(10, 10, CollisionLayer.PLAYER, owner=FakeActor())
    info = manager.check_collision(ground, player)
    assert info.is_colliding is False


def test_obb_hitbox_damages_enemy_once():
    manager = CollisionManager()
    attacker = FakeActor(pos=Vector2(0, 0))
    enemy = FakeActor(pos=Vector2(30, 0))
    enemy_col = AABBCollider(20, 40, CollisionLayer.ENEMY, owner=enemy)
    manager.add_collider(enemy_col)
    attack = AttackInfo(0.0, 60, 20, Vector2(1, 0))
    assert manager.check_obb_hitbox(attacker, attack) is False
    assert enemy.damage == [(attacker, Vector2(1, 0))]
    assert attack.hit_actors == [enemy_col]
    manager.check_obb_hitbox(attacker, attack)
    assert len(enemy.damage) == 1


def test_obb_hitbox_reflects_bullet():
    manager = CollisionManager()
    attacker = FakeActor(pos=Vector2(0, 0))
    shooter = FakeActor(pos=Vector2(10, 0))
    manager.add_collider(MovingLineCollider(10, 0.0, owner=shooter))
    attack = AttackInfo(0.0, 60, 20, Vector2(1, 0))
    assert manager.check_obb_hitbox(attacker, attack) is True
    assert len(shooter.damage) == 1


def test_obb_hitbox_skips_already_hit_owner():
    manager = CollisionManager()
    enemy = FakeActor(pos=Vector2(30, 0), was_hit=True)
    manager.add_collider(AABBCollider(20, 40, CollisionLayer.ENEMY, owner=enemy))
    manager.check_obb_hitbox(FakeActor(), AttackInfo(0.0, 60, 20, Vector2(1, 0)))
    assert enemy.damage == []


def test_aabb_hitbox_damages_player_toward_player():
    manager = CollisionManager()
    player = FakeActor(pos=Vector2(0, 0))
    manager.add_collider(AABBCollider(20, 40, CollisionLayer.PLAYER, owner=player))
    attacker = FakeActor()
    assert manager.check_aabb_hitbox(attacker, Vector2(10, 0), 20, 20) is False
    assert player.damage == [(attacker, Vector2(-1.0, 0.0))]


def test_aabb_hitbox_misses_far_player():
    manager = CollisionManager()
    player = FakeActor(pos=Vector2(0, 0))
    manager.add_collider(AABBCollider(20, 40, CollisionLayer.PLAYER, owner=player))
    assert manager.check_aabb_hitbox(FakeActor(), Vector2(500, 0), 20, 20) is True
    assert player.damage == []