"""The player character, its weapon and the character factory."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Optional

from .entity import Bullet, EntityLife, Entity, to_world_space
from .input_handler import Key, MouseButton
from .utility import (
    BULLET_CHARACTER_CATEGORY,
    BULLET_CHARACTER_COLLISION,
    BULLET_CHARACTER_CONTACT,
    CHARACTER_CATEGORY,
    CHARACTER_COLLISION,
    CHARACTER_CONTACT,
    PATH_IMAGE_BULLET,
    PATH_IMAGE_WEAPON,
    PATH_SOUND,
    TAG_ACTION_IDLE,
    TAG_ACTION_MOVE,
    Direction,
    PhysicsBody,
    Size,
    Vec2,
    apply_direction,
)


class Weapon(Entity):
    """A gun held by a character that fires bullets towards a direction."""

    def __init__(self, name: str = "", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.bullet_name = "bullet"
        self.bullet_size = Size()
        self.gap_time = 0.2
        self.energy_cost = 2
        self.damage = 50
        self.anchor_point = Vec2(0.5, 0.5)

    def create_bullet(self, direction: Vec2) -> Bullet:
        """Fire one bullet from the muzzle along ``direction`` into the tile map."""
        if self.parent is None:
            raise RuntimeError("weapon is not held by anything")
        game = self.game
        tile_map = self._tile_map()
        bullet = Bullet(
            texture=f"{PATH_IMAGE_BULLET}{self.bullet_name}.png",
            content_size=self.bullet_size,
            game=game,
        )
        body = bullet.physics_body
        body.contact_test_bitmask = BULLET_CHARACTER_CONTACT
        body.category_bitmask = BULLET_CHARACTER_CATEGORY
        body.collision_bitmask = BULLET_CHARACTER_COLLISION
        bullet.damage = self.damage

        unit = direction.normalized()
        world_pos = to_world_space(self.parent, self.position)
        bullet.point_start = world_pos
        bullet.position = world_pos + unit * (self.content_size.width / 2)
        body.velocity = unit * bullet.flying_speed
        bullet.rotation = -math.degrees(unit.angle())
        bullet.z_order = 1
        tile_map.add_child(bullet)

        sound = getattr(game, "sound", None)
        if sound is not None:
            sound.play_effect(PATH_SOUND + "laser.mp3")
        return bullet

    def attack(self, direction: Vec2) -> Bullet:
        return self.create_bullet(direction)

    def update(self, dt: float) -> None:
        angle = math.degrees(self.direction.angle())
        holder = self.parent
        if isinstance(holder, Character):
            size = holder.content_size
            offset = -10 if self.direction.x < 0 else 10
            self.position = Vec2(size.width / 2 + offset, size.height / 4)
        self.flipped_y = self.direction.x <= 0.0
        self.rotation = -angle


class Character(EntityLife, ABC):
    """A player-controlled fighter with mana and an optional weapon."""

    def __init__(self, name: str = "", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.weapon: Optional[Weapon] = None
        self.mp = 400
        self.mp_max = 400
        self.speed = 400
        self.is_attack = False
        self.sprite_frame = ""

    def _input(self) -> Any:
        return getattr(self.game, "input", None)

    def init_weapon(self, name: str) -> Weapon:
        weapon = Weapon(texture=f"{PATH_IMAGE_WEAPON}{name}.png")
        size = self.content_size
        weapon.position = Vec2(size.width / 2 + 10, size.height / 4)
        weapon.z_order = 1
        self.add_child(weapon)
        weapon.direction = self.direction
        self.weapon = weapon
        return weapon

    def move(self, direction: Vec2) -> None:
        if self.hp <= 0 or self.dir_move == direction:
            return
        self.dir_move = direction
        self.actions.pop(TAG_ACTION_IDLE, None)
        self.actions[TAG_ACTION_MOVE] = f"{self.name}/run"

    def idle(self) -> None:
        if self.hp <= 0 or TAG_ACTION_IDLE in self.actions:
            return
        self.sprite_frame = f"{self.name}/idle1.png"
        self.actions.pop(TAG_ACTION_MOVE, None)
        self.actions[TAG_ACTION_IDLE] = f"{self.name}/idle"

    def dead(self) -> None:
        self.dir_move = Vec2.ZERO
        self.actions.clear()
        self.sprite_frame = f"{self.name}/death.png"
        self.flipped_x = self.direction.x <= 0
        if self.weapon is not None:
            self.weapon.visible = False

    @abstractmethod
    def attack(self, direction: Vec2) -> bool:
        """Attack towards ``direction``; True when an attack was made."""

    def update(self, dt: float) -> None:
        super().update(dt)
        handler = self._input()
        aiming = handler is not None and handler.is_mouse_down(MouseButton.LEFT)
        weapon = self.weapon
        if weapon is not None and aiming:
            facing = Direction.LEFT if weapon.direction.x <= 0.0 else Direction.RIGHT
            self.direction = self.direction.with_x(float(facing))
        elif self.dir_move.x or (self.dir_move.y and not aiming):
            if weapon is not None and self.dir_move.x and self.direction.x != self.dir_move.x:
                weapon.direction = weapon.direction.with_x(-weapon.direction.x)
            self.direction = apply_direction(self.dir_move, self.direction)

    def update_keyboard(self, dt: float) -> None:
        handler = self._input()

        def pressed(*keys: Key) -> bool:
            return handler is not None and any(handler.is_key_pressed(k) for k in keys)

        if pressed(Key.A, Key.LEFT_ARROW):
            direction = Vec2(float(Direction.LEFT), 0.0)
        elif pressed(Key.D, Key.RIGHT_ARROW):
            direction = Vec2(float(Direction.RIGHT), 0.0)
        elif pressed(Key.W, Key.UP_ARROW):
            direction = Vec2(0.0, float(Direction.UP))
        elif pressed(Key.S, Key.DOWN_ARROW):
            direction = Vec2(0.0, float(Direction.DOWN))
        else:
            direction = Vec2.ZERO

        if direction:
            self.move(direction)
        else:
            self.dir_move = Vec2.ZERO
            self.idle()


class Mage(Character):
    """The playable mage."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("Mage", **kwargs)
        self.sprite_frame = "Mage.png"
        self.set_physics_body(
            PhysicsBody(
                contact_test_bitmask=CHARACTER_CONTACT,
                collision_bitmask=CHARACTER_COLLISION,
                category_bitmask=CHARACTER_CATEGORY,
                rotation_enabled=False,
            )
        )

    def _finish_attack(self) -> None:
        self.is_attack = False

    def attack(self, direction: Vec2) -> bool:
        weapon = self.weapon
        if weapon is None or self.is_attack or self.hp <= 0 or self.mp < weapon.energy_cost:
            return False
        self.is_attack = True
        weapon.attack(direction)
        self.schedule_once(weapon.gap_time, self._finish_attack)
        return True

    def update(self, dt: float) -> None:
        super().update(dt)
        self.update_keyboard(dt)


def create_character(name: str) -> Character:
    """Build the character called ``name``."""
    if name == "Mage":
        return Mage()
    raise ValueError(f"unknown character {name!r}")