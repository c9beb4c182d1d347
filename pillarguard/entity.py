"""Sprites that live in the game world: the base entity, living entities, the pillar and bullets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .utility import (
    ORDER_BACKGROUND_LAYER,
    ORDER_MIDDLEGROUND_LAYER,
    PILLAR_CATEGORY,
    PILLAR_COLLISION,
    PILLAR_CONTACT,
    VISIBLE_SIZE,
    Direction,
    Node,
    PhysicsBody,
    Size,
    TileMap,
    Vec2,
    animation_frame_names,
)

ANIMATION_INTERVAL = 1.0 / 60
EXPLOSION_FRAME = "Explosion1"
EXPLOSION_FRAME_DELAY = 0.05


def to_world_space(node: Optional[Node], point: Vec2) -> Vec2:
    """Convert a point in ``node``'s local coordinates to world coordinates."""
    while node is not None:
        if isinstance(node, Entity):
            size, anchor = node.content_size, node.anchor_point
            point = point - Vec2(anchor.x * size.width, anchor.y * size.height)
        point = point + node.position
        node = node.parent
    return point


@dataclass
class _Timer:
    remaining: float
    callback: Callable[[], Any]


class Entity(Node):
    """A sprite with a facing direction, a texture and optional physics body."""

    def __init__(
        self,
        name: str = "",
        *,
        texture: Optional[str] = None,
        content_size: Size = Size(),
        game: Any = None,
    ) -> None:
        super().__init__(name)
        if texture is None:
            texture = f"{name}.png" if name else ""
        self.texture = texture
        self.content_size = content_size
        self.anchor_point = Vec2(0.5, 0.5)
        self.direction = Vec2(float(Direction.LEFT), 0.0)
        self.flipped_x = False
        self.flipped_y = False
        self.rotation = 0.0
        self.physics_body: Optional[PhysicsBody] = None
        self.actions: dict[int, str] = {}
        self.removed = False
        self._game = game
        self._timers: list[_Timer] = []

    @property
    def game(self) -> Any:
        """The game this entity belongs to, inherited from an entity parent."""
        if self._game is not None:
            return self._game
        parent = self.parent
        return parent.game if isinstance(parent, Entity) else None

    @game.setter
    def game(self, value: Any) -> None:
        self._game = value

    def _tile_map(self) -> TileMap:
        tile_map = getattr(self.game, "tile_map", None)
        if tile_map is None:
            raise RuntimeError("entity is not attached to a game with a tile map")
        return tile_map

    def set_physics_body(self, body: PhysicsBody) -> None:
        body.node = self
        self.physics_body = body

    def schedule_once(self, delay: float, callback: Callable[[], Any]) -> None:
        """Run ``callback`` once ``delay`` seconds of updates have passed."""
        self._timers.append(_Timer(delay, callback))

    def advance_timers(self, dt: float) -> None:
        due: list[_Timer] = []
        pending: list[_Timer] = []
        for timer in self._timers:
            timer.remaining -= dt
            (due if timer.remaining <= 0 else pending).append(timer)
        self._timers = pending
        for timer in due:
            timer.callback()

    def bounding_box(self) -> tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the sprite in its parent's space."""
        size, anchor = self.content_size, self.anchor_point
        left = self.position.x - anchor.x * size.width
        bottom = self.position.y - anchor.y * size.height
        return left, bottom, left + size.width, bottom + size.height

    def contains_point(self, point: Vec2) -> bool:
        left, bottom, right, top = self.bounding_box()
        return left <= point.x <= right and bottom <= point.y <= top

    def convert_to_world_space(self, point: Vec2) -> Vec2:
        return to_world_space(self, point)

    def update(self, dt: float) -> None:
        self.advance_timers(dt)
        self.flipped_x = self.direction.x <= 0

    def remove(self) -> None:
        """Detach from the scene and drop pending actions and timers."""
        self.remove_from_parent()
        self.actions.clear()
        self._timers.clear()
        self.removed = True


class Explosion(Entity):
    """A one-shot explosion effect that removes itself when its animation ends."""

    def __init__(
        self,
        position: Vec2,
        *,
        frame_count: int = 1,
        frame_delay: float = EXPLOSION_FRAME_DELAY,
        game: Any = None,
    ) -> None:
        super().__init__(EXPLOSION_FRAME, game=game)
        self.position = position
        self.duration = frame_count * frame_delay
        self.actions[0] = EXPLOSION_FRAME
        self.schedule_once(self.duration, self.remove)

    def update(self, dt: float) -> None:
        self.advance_timers(dt)


def spawn_explosion(parent: Node, position: Vec2, game: Any = None) -> Explosion:
    """Add an explosion at ``position`` to ``parent``."""
    frames = animation_frame_names(EXPLOSION_FRAME, getattr(game, "sprite_frames", ()))
    explosion = Explosion(position, frame_count=len(frames), game=game)
    parent.add_child(explosion)
    return explosion


class EntityLife(Entity):
    """An entity with hit points that can walk over the tile map."""

    def __init__(self, name: str = "", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.speed = 0
        self.hp = 500
        self.hp_max = 500
        self.dir_move = Vec2.ZERO
        self.is_attack = False

    def move(self) -> None:
        """Set velocity along ``dir_move`` unless blocked, and pick the draw layer."""
        tile_map = self._tile_map()
        size = self.content_size
        tile_size = tile_map.tile_size

        feet = self.position - Vec2(0, size.height / 3)
        if self.dir_move.x == Direction.LEFT:
            feet = feet - Vec2(size.height / 4, 0)
        elif self.dir_move.x == Direction.RIGHT:
            feet = feet + Vec2(size.height / 4, 0)

        step = self.dir_move * (self.speed * ANIMATION_INTERVAL)
        can_move = False
        if self.dir_move.x:
            can_move = tile_map.check_tile(feet + step, "Meta", "collidable")
        if self.dir_move.y:
            side = Vec2(size.height / 4, 0)
            probes = (feet + step, feet + side + step, feet - side + step)
            if all(tile_map.check_tile(p, "Meta", "collidable") for p in probes):
                can_move = True

        if self.physics_body is not None:
            self.physics_body.velocity = self.dir_move * self.speed if can_move else Vec2.ZERO

        pos = self.position
        tw = tile_size.width
        around = (
            pos,
            Vec2(pos.x - tw, pos.y),
            Vec2(pos.x + tw, pos.y),
            Vec2(pos.x, pos.y + tw),
            Vec2(pos.x + tw, pos.y + tw),
            Vec2(pos.x - tw, pos.y + tw),
        )
        in_front = any(not tile_map.check_tile(p, "Meta1", "isFront") for p in around)
        self.z_order = ORDER_MIDDLEGROUND_LAYER if in_front else ORDER_BACKGROUND_LAYER

    def update(self, dt: float) -> None:
        super().update(dt)
        if self.dir_move:
            self.move()
        elif self.physics_body is not None:
            self.physics_body.velocity = Vec2.ZERO


class Pillar(EntityLife):
    """The structure the player defends."""

    def __init__(self, name: str = "", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.hp = 5000
        self.hp_max = 5000
        self.set_physics_body(
            PhysicsBody(
                contact_test_bitmask=PILLAR_CONTACT,
                category_bitmask=PILLAR_CATEGORY,
                collision_bitmask=PILLAR_COLLISION,
            )
        )
        self.hp_bar_percent = self.hp_percent()

    def hp_percent(self) -> float:
        return self.hp / self.hp_max * 100

    def update(self, dt: float) -> None:
        self.hp_bar_percent = self.hp_percent()


class Bullet(Entity):
    """A projectile that disappears after its range or on hitting a wall."""

    def __init__(self, name: str = "", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.damage = 0.0
        self.flying_speed = 1000.0
        self.point_start = Vec2.ZERO
        self.distance_fly = VISIBLE_SIZE.width * 1.5
        self.anchor_point = Vec2(1.0, 0.5)
        self.radius = self.content_size.width / 2
        self.set_physics_body(PhysicsBody(contact_test_bitmask=1, collision_bitmask=1))

    def update(self, dt: float) -> None:
        if (self.position - self.point_start).length() >= self.distance_fly:
            self.remove()
            return
        game = self.game
        pillar = getattr(game, "pillar", None)
        if pillar is not None and pillar.contains_point(self.position):
            return
        if not self._tile_map().check_tile(self.position, "Meta", "collidable"):
            if self.parent is not None:
                spawn_explosion(self.parent, self.position, game)
            self.remove()