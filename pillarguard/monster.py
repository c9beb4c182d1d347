"""Monsters that march on the pillar and shoot at the player, and the monster factory."""

from __future__ import annotations

import math
import random
from typing import Any

from .entity import Bullet, EntityLife, spawn_explosion
from .utility import (
    BULLET_MONSTER_CATEGORY,
    BULLET_MONSTER_COLLISION,
    BULLET_MONSTER_CONTACT,
    MONSTER_CATEGORY,
    MONSTER_COLLISION,
    MONSTER_CONTACT,
    PATH_IMAGE_BULLET,
    PATH_IMAGE_UI,
    VISIBLE_SIZE,
    PhysicsBody,
    Vec2,
)

MONSTER_NAMES = ("Bat", "Gosth", "Ariman", "Deathspirit")
BULLET_SPEED = 150
SPREAD_CHANCE = 15
SPREAD_ANGLE = math.radians(20)
ANIMATION_TAG = 0


class Monster(EntityLife):
    """A walking enemy with a health bar that fires at the player when in range."""

    hp_bar_background = PATH_IMAGE_UI + "hp_bg.png"
    hp_bar_progress = PATH_IMAGE_UI + "hp_progress.png"
    hp_bar_margin = 15

    def __init__(self, name: str = "", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.attack_range = VISIBLE_SIZE.width / 2
        self.speed = 30
        self.damage = 50.0
        self.attack_speed = 0.0
        self.hp = 200
        self.hp_max = 200
        self.is_dead = False
        self.hp_bar_percent = 100
        self._init_body()

    def _init_body(self) -> None:
        self.set_physics_body(
            PhysicsBody(
                contact_test_bitmask=MONSTER_CONTACT,
                collision_bitmask=MONSTER_COLLISION,
                category_bitmask=MONSTER_CATEGORY,
            )
        )
        self.actions[ANIMATION_TAG] = self.name

    def _rng(self) -> Any:
        rng = getattr(self.game, "rng", None)
        return rng if rng is not None else random

    def hp_percent(self) -> int:
        return int(self.hp / self.hp_max * 100)

    def update(self, dt: float) -> None:
        if self.hp <= 0:
            if not self.removed:
                self.remove()
            return
        self.direction = self.dir_move
        self.attack()
        super().update(dt)
        self.hp_bar_percent = self.hp_percent()

    def _finish_attack(self) -> None:
        self.is_attack = False

    def attack(self) -> list[Bullet]:
        """Shoot at the player when in range; sometimes fire a three-way spread."""
        if self.hp <= 0 or self.is_attack:
            return []
        character = getattr(self.game, "character", None)
        if character is None:
            return []
        aim = character.position - self.position
        if aim.length() > self.attack_range or character.hp <= 0:
            return []
        self.is_attack = True
        bullets = [self.create_bullet(aim)]
        if self._rng().randint(1, 100) <= SPREAD_CHANCE:
            turn = Vec2.from_angle(SPREAD_ANGLE)
            bullets.append(self.create_bullet(aim.rotate(turn)))
            bullets.append(self.create_bullet(aim.rotate(turn.with_y(-turn.y))))
        self.schedule_once(self.attack_speed, self._finish_attack)
        return bullets

    def create_bullet(self, direction: Vec2) -> Bullet:
        """Fire one bullet from the monster's position along ``direction``."""
        if self.parent is None:
            raise RuntimeError("monster is not in a scene")
        unit = direction.normalized()
        bullet = Bullet(texture=PATH_IMAGE_BULLET + "Bullet4.png", game=self.game)
        body = bullet.physics_body
        body.contact_test_bitmask = BULLET_MONSTER_CONTACT
        body.category_bitmask = BULLET_MONSTER_CATEGORY
        body.collision_bitmask = BULLET_MONSTER_COLLISION
        bullet.point_start = self.position
        bullet.damage = self.damage
        bullet.rotation = -math.degrees(unit.angle())
        body.velocity = unit * BULLET_SPEED
        bullet.position = self.position
        bullet.z_order = 1
        self.parent.add_child(bullet)
        return bullet

    def remove(self) -> None:
        """Explode and leave the scene."""
        parent = self.parent
        if parent is not None:
            spawn_explosion(parent, self.position, self.game)
        super().remove()


class Boss(Monster):
    """A large monster with its own health bar; it neither moves nor attacks."""

    hp_bar_background = PATH_IMAGE_UI + "hp_boss_bg.png"
    hp_bar_progress = PATH_IMAGE_UI + "hp_boss_progress.png"
    hp_bar_margin = 10

    def _init_body(self) -> None:
        self.physics_body = None

    def update(self, dt: float) -> None:
        """A boss is static: nothing changes on update."""

    def attack(self) -> list[Bullet]:
        return []


def create_monster(name: str) -> Monster:
    """Build the monster called ``name``."""
    if name in MONSTER_NAMES:
        return Monster(name, texture=f"{name}.png")
    raise ValueError(f"unknown monster {name!r}")