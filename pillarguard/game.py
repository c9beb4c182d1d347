"""The game scene: map, pillar, player, monster waves, input, camera and contacts."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Iterator, Optional

from .entity import Bullet, Entity, Pillar, to_world_space
from .file_manager import GameData
from .game_manager import GameManager
from .input_handler import MouseButton
from .ui import HubLayer, StateBoard
from .utility import (
    BULLET_CHARACTER_COLLISION,
    BULLET_MONSTER_COLLISION,
    CHARACTER_COLLISION,
    MONSTER_COLLISION,
    ORDER_BACKGROUND_LAYER,
    ORDER_HUB_LAYER,
    ORDER_MIDDLEGROUND_LAYER,
    PATH_IMAGE_OBJECT,
    PATH_SOUND,
    PILLAR_COLLISION,
    VISIBLE_SIZE,
    Node,
    PhysicsBody,
    Size,
    TileMap,
    Vec2,
)

GATE_NAMES = ("west_gate", "north_gate", "east_gate", "south_gate")
GATE_COUNT = len(GATE_NAMES)
SPAWN_INTERVAL = 2.0
SPAWN_DELAY = 5.0
GAME_OVER_DELAY = 3.0
PILLAR_HIT_DAMAGE = 200
SPAWN_OFFSET_MIN = 2
SPAWN_OFFSET_MAX = 35
CHARACTER_NAME = "Mage"
WEAPON_NAME = "Gun"
BACKGROUND_MUSIC = PATH_SOUND + "Blizzard.mp3"


@dataclass
class _Timer:
    remaining: float
    callback: Callable[[], Any]


def _descendants(node: Node) -> Iterator[Node]:
    for child in list(node.children):
        yield child
        yield from _descendants(child)


def _world_box(entity: Entity) -> tuple[float, float, float, float]:
    world = to_world_space(entity.parent, entity.position)
    size, anchor = entity.content_size, entity.anchor_point
    left = world.x - anchor.x * size.width
    bottom = world.y - anchor.y * size.height
    return left, bottom, left + size.width, bottom + size.height


def _overlap(a: Entity, b: Entity) -> bool:
    al, ab, ar, at = _world_box(a)
    bl, bb, br, bt = _world_box(b)
    return al <= br and bl <= ar and ab <= bt and bb <= at


def _can_contact(a: PhysicsBody, b: PhysicsBody) -> bool:
    return bool(
        (a.category_bitmask & b.contact_test_bitmask)
        or (b.category_bitmask & a.contact_test_bitmask)
    )


def _pair(
    body_a: PhysicsBody, body_b: PhysicsBody, first: int, second: int
) -> Optional[tuple[Any, Any]]:
    """The nodes of two bodies ordered by collision mask, or None if they do not match."""
    if body_a.collision_bitmask == first and body_b.collision_bitmask == second:
        return body_a.node, body_b.node
    if body_a.collision_bitmask == second and body_b.collision_bitmask == first:
        return body_b.node, body_a.node
    return None


class GameScene(Node):
    """One game: the player defends the pillar against waves coming through four gates."""

    def __init__(
        self,
        data: GameData,
        tile_map: TileMap,
        *,
        game: Optional[GameManager] = None,
        on_main_menu: Optional[Callable[[], Any]] = None,
        visible_size: Size = VISIBLE_SIZE,
        pillar_size: Size = Size(),
        character_size: Size = Size(),
    ) -> None:
        super().__init__("GameScene")
        self.data = data
        self.visible_size = visible_size
        self.game = game if game is not None else GameManager()
        self.game.scene = self
        self.turn = 0
        self.turn_count = data.turn_count()
        self.count_monster = [0] * GATE_COUNT
        self.total_monster = [0] * GATE_COUNT
        self.camera = visible_size.as_vec() / 2
        self._timers: list[_Timer] = []
        self._contacts: set[tuple[int, int]] = set()
        self._pending_outcomes: set[bool] = set()

        self.game.physics_world.gravity = Vec2.ZERO
        self._init_map(tile_map)
        self._init_pillar(pillar_size)
        self._init_character(character_size)
        self._init_hub_layer(on_main_menu)
        self.game.sound.play_background_music(BACKGROUND_MUSIC)

    # setup

    def _init_map(self, tile_map: TileMap) -> None:
        self.layer_orders: dict[str, int] = {}
        for prefix, order in (
            ("Background", ORDER_BACKGROUND_LAYER),
            ("Middleground", ORDER_MIDDLEGROUND_LAYER),
        ):
            for index in itertools.count(1):
                layer = f"{prefix}{index}"
                if layer not in tile_map.layers:
                    break
                self.layer_orders[layer] = order
        for hidden in ("Meta", "Meta1"):
            if hidden not in tile_map.layers:
                raise KeyError(f"tile map has no layer named {hidden!r}")
        self.hidden_layers = frozenset({"Meta", "Meta1"})
        self.tile_map = tile_map
        self.game.tile_map = tile_map
        self.add_child(tile_map)

    def _object_point(self, name: str) -> Vec2:
        try:
            point = self.tile_map.objects[name]
        except KeyError:
            raise KeyError(f"tile map has no object named {name!r}") from None
        return Vec2(int(point.x), int(point.y))

    def _init_pillar(self, size: Size) -> None:
        pillar = Pillar(
            texture=PATH_IMAGE_OBJECT + "Pillar.png", content_size=size, game=self.game
        )
        pillar.position = self._object_point("pillar")
        pillar.z_order = ORDER_MIDDLEGROUND_LAYER
        self.game.pillar = pillar
        self.tile_map.add_child(pillar)

    def _init_character(self, size: Size) -> None:
        character = self.data.character_default(CHARACTER_NAME)
        character.game = self.game
        character.content_size = size
        character.init_weapon(WEAPON_NAME)
        character.position = self._object_point("start")
        character.z_order = ORDER_BACKGROUND_LAYER
        self.game.character = character
        self.tile_map.add_child(character)

    def _init_hub_layer(self, on_main_menu: Optional[Callable[[], Any]]) -> None:
        hub = HubLayer(self.game, on_main_menu)
        hub.z_order = ORDER_HUB_LAYER
        self.game.hub_layer = hub
        self.add_child(hub)

    # scheduling

    def _schedule(self, delay: float, callback: Callable[[], Any]) -> None:
        self._timers.append(_Timer(delay, callback))

    def _advance_timers(self, dt: float) -> None:
        due: list[_Timer] = []
        pending: list[_Timer] = []
        for timer in self._timers:
            timer.remaining -= dt
            (due if timer.remaining <= 0 else pending).append(timer)
        self._timers = pending
        for timer in due:
            timer.callback()

    def _schedule_game_over(self, is_win: bool) -> None:
        if is_win in self._pending_outcomes:
            return
        self._pending_outcomes.add(is_win)
        self._schedule(GAME_OVER_DELAY, partial(self.game.game_over, is_win))

    # per-frame callbacks

    def update(self, dt: float) -> None:
        """Schedule the end of the game when it is won or lost, and drop dead monsters."""
        if self.turn > self.turn_count:
            self._schedule_game_over(True)
        if self.game.character.hp <= 0 or self.game.pillar.hp <= 0:
            self._schedule_game_over(False)
        self.game.remove_dead_monsters()

    def update_camera(self, dt: float) -> None:
        """Follow the player while the view stays inside the map."""
        char_pos = self.game.character.position
        tile_size = self.tile_map.tile_size
        map_width = self.tile_map.map_size.width * tile_size.width
        map_height = self.tile_map.map_size.height * tile_size.height
        half_w = self.visible_size.width / 2
        half_h = self.visible_size.height / 2
        cam = self.camera
        if half_w < char_pos.x < map_width - half_w:
            cam = cam.with_x(char_pos.x)
        if half_h < char_pos.y < map_height - half_h:
            cam = cam.with_y(char_pos.y)
        self.camera = cam
        self.game.hub_layer.position = cam - self.visible_size.as_vec() / 2

    def update_mouse(self, dt: float) -> bool:
        """Aim and fire at the mouse while the left button is held."""
        handler = self.game.input
        if not handler.is_mouse_down(MouseButton.LEFT):
            return False
        character = self.game.character
        weapon = character.weapon
        if weapon is None:
            return False
        location = handler.mouse_location
        location = location.with_y(self.visible_size.height - location.y)
        mouse_pos = self.camera - self.visible_size.as_vec() / 2 + location
        weapon_pos = character.convert_to_world_space(weapon.position)
        weapon.direction = mouse_pos - character.position
        return character.attack(mouse_pos - weapon_pos)

    def init_monster_data(self, dt: float = 0) -> None:
        """Start the next turn once the last wave is spawned and defeated."""
        wave_done = all(c >= t for c, t in zip(self.count_monster, self.total_monster))
        if not (wave_done and self.game.no_monsters_left()):
            return
        self.turn += 1
        if self.turn > self.turn_count:
            return
        self.total_monster = [
            self.data.monster_count(self.turn, gate) for gate in range(1, GATE_COUNT + 1)
        ]
        self.count_monster = [0] * GATE_COUNT
        self._schedule(SPAWN_DELAY, partial(self.spawn_monsters, 0))

    def spawn_monsters(self, dt: float) -> None:
        """Release each gate's monsters one after another, SPAWN_INTERVAL apart."""
        for gate, total in enumerate(self.total_monster, start=1):
            for k in range(total):
                self._schedule(k * SPAWN_INTERVAL, partial(self._spawn_one, gate))

    def _spawn_one(self, gate: int) -> None:
        self.add_monster_to_scene(gate)
        self.count_monster[gate - 1] += 1

    def add_monster_to_scene(self, gate: int) -> Any:
        """Put the next monster of ``gate`` near it, walking towards the pillar."""
        if not 1 <= gate <= GATE_COUNT:
            raise ValueError(f"gate {gate} out of range 1..{GATE_COUNT}")
        point = self._object_point(GATE_NAMES[gate - 1])
        offset = self.game.rng.randint(SPAWN_OFFSET_MIN, SPAWN_OFFSET_MAX)
        shift = Vec2(offset, 0) if gate in (2, 4) else Vec2(0, offset)
        position = point + shift
        monster = self.data.monster(self.turn, gate, self.count_monster[gate - 1])
        monster.game = self.game
        monster.position = position
        monster.dir_move = (self.game.pillar.position - position).normalized()
        self.game.add_monster(monster)
        self.tile_map.add_child(monster)
        return monster

    # contacts

    def on_contact_began(self, body_a: PhysicsBody, body_b: PhysicsBody) -> bool:
        """Apply bullet hits and monsters reaching the pillar."""
        hit = _pair(body_a, body_b, CHARACTER_COLLISION, BULLET_MONSTER_COLLISION)
        if hit is not None:
            character, bullet = hit
            if character is not None and bullet is not None:
                hp = max(0, int(character.hp - bullet.damage))
                character.hp = hp
                bullet.remove()
                if hp <= 0:
                    character.dead()

        hit = _pair(body_a, body_b, MONSTER_COLLISION, BULLET_CHARACTER_COLLISION)
        if hit is not None:
            monster, bullet = hit
            if monster is not None and bullet is not None:
                monster.hp = max(0, int(monster.hp - bullet.damage))
                bullet.remove()

        hit = _pair(body_a, body_b, PILLAR_COLLISION, MONSTER_COLLISION)
        if hit is not None:
            pillar, monster = hit
            if pillar is not None and monster is not None:
                pillar.hp = max(0, int(pillar.hp - PILLAR_HIT_DAMAGE))
                monster.hp = 0
        return True

    # input

    def on_key_pressed(self, key: int) -> None:
        self.game.input.key_down(int(key))

    def on_key_released(self, key: int) -> None:
        self.game.input.key_up(int(key))

    def on_mouse_down(self, button: MouseButton, location: Vec2) -> None:
        self.game.input.mouse_down(button, location)

    def on_mouse_move(self, location: Vec2) -> None:
        self.game.input.mouse_move(location)

    def on_mouse_up(self, button: MouseButton, location: Vec2) -> None:
        self.game.input.mouse_up(button, location)

    # main loop

    def _bodies(self) -> list[Entity]:
        return [
            node
            for node in _descendants(self.tile_map)
            if isinstance(node, Entity) and node.physics_body is not None and not node.removed
        ]

    def _step_physics(self, dt: float) -> None:
        speed = self.game.physics_world.speed
        entities = self._bodies()
        if speed:
            for entity in entities:
                velocity = entity.physics_body.velocity
                if velocity:
                    entity.position = entity.position + velocity * (dt * speed)
        current: set[tuple[int, int]] = set()
        for a, b in itertools.combinations(entities, 2):
            if a.removed or b.removed:
                continue
            if not _can_contact(a.physics_body, b.physics_body) or not _overlap(a, b):
                continue
            key = (id(a), id(b))
            current.add(key)
            if key not in self._contacts:
                self.on_contact_began(a.physics_body, b.physics_body)
        self._contacts = current

    def step(self, dt: float) -> None:
        """Advance the whole scene by ``dt`` seconds; nothing moves while paused."""
        if self.paused:
            return
        self._advance_timers(dt)
        if self.paused:
            return
        self.update(dt)
        self.update_mouse(dt)
        self.update_camera(dt)
        self.init_monster_data(dt)
        for node in list(_descendants(self)):
            if isinstance(node, Entity):
                if node.removed or node.paused:
                    continue
                node.update(dt)
            elif isinstance(node, StateBoard) and not node.paused:
                node.update(dt)
        self._step_physics(dt)