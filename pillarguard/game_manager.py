"""Shared game state: the map, the player, the pillar, live monsters, pause and game over."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .input_handler import InputHandler
from .sound import SoundManager
from .utility import Node, TileMap, Vec2

UNPAUSABLE_LAYERS = frozenset({"PauseLayer", "GameOverLayer"})


@dataclass
class PhysicsWorld:
    """Global physics settings; speed 0 freezes the simulation."""

    gravity: Vec2 = Vec2.ZERO
    speed: float = 1.0


class GameManager:
    """Everything a running game shares between its scene, entities and HUD."""

    def __init__(
        self,
        *,
        tile_map: Optional[TileMap] = None,
        hub_layer: Any = None,
        character: Any = None,
        pillar: Any = None,
        physics_world: Optional[PhysicsWorld] = None,
        scene: Optional[Node] = None,
        input_handler: Optional[InputHandler] = None,
        sound: Optional[SoundManager] = None,
        sprite_frames: Iterable[str] = (),
        rng: Optional[random.Random] = None,
    ) -> None:
        self.tile_map = tile_map
        self.hub_layer = hub_layer
        self.character = character
        self.pillar = pillar
        self.physics_world = physics_world if physics_world is not None else PhysicsWorld()
        self.scene = scene
        self.input = input_handler if input_handler is not None else InputHandler()
        self.sound = sound if sound is not None else SoundManager()
        self.sprite_frames = set(sprite_frames)
        self.rng = rng if rng is not None else random.Random()
        self.monsters: list[Any] = []

    def add_monster(self, monster: Any) -> None:
        self.monsters.append(monster)

    def remove_dead_monsters(self) -> None:
        self.monsters = [m for m in self.monsters if m.hp > 0]

    def no_monsters_left(self) -> bool:
        return not self.monsters

    def _require_scene(self) -> tuple[Node, Any]:
        if self.scene is None or self.hub_layer is None:
            raise RuntimeError("no running scene with a HUD")
        return self.scene, self.hub_layer

    def _freeze(self, scene: Node) -> None:
        self.physics_world.speed = 0
        scene.pause()
        self.pause_nodes(scene.children)

    def game_over(self, is_win: bool) -> None:
        """Show the victory or game-over dialog and freeze the game."""
        scene, hub = self._require_scene()
        hub.pause_button.visible = False
        if is_win:
            hub.victory_layer.visible = True
        else:
            hub.game_over_layer.visible = True
        self._freeze(scene)

    def pause_game(self) -> None:
        scene, hub = self._require_scene()
        hub.pause_button.enabled = False
        hub.pause_layer.visible = True
        self._freeze(scene)

    def resume_game(self) -> None:
        scene, hub = self._require_scene()
        hub.pause_button.enabled = True
        self.physics_world.speed = 1.0
        scene.resume()
        self.resume_nodes(scene.children)

    def pause_nodes(self, nodes: Iterable[Node]) -> None:
        """Pause nodes and their descendants, skipping the dialog layers."""
        for node in nodes:
            if node.name in UNPAUSABLE_LAYERS:
                continue
            node.pause()
            self.pause_nodes(node.children)

    def resume_nodes(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            if node.name in UNPAUSABLE_LAYERS:
                continue
            node.resume()
            self.resume_nodes(node.children)