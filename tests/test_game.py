import random

import pytest

from pillarguard.entity import Bullet
from pillarguard.file_manager import GameData
from pillarguard.game import GameScene
from pillarguard.game_manager import GameManager
from pillarguard.input_handler import Key, MouseButton
from pillarguard.monster import Monster
from pillarguard.utility import (
    BULLET_CHARACTER_CATEGORY,
    BULLET_CHARACTER_COLLISION,
    BULLET_CHARACTER_CONTACT,
    BULLET_MONSTER_CATEGORY,
    BULLET_MONSTER_COLLISION,
    BULLET_MONSTER_CONTACT,
    ORDER_BACKGROUND_LAYER,
    ORDER_MIDDLEGROUND_LAYER,
    Size,
    TileMap,
    Vec2,
)

OBJECTS = {
    "start": Vec2(320, 320),
    "pillar": Vec2(640, 640),
    "west_gate": Vec2(0, 600),
    "north_gate": Vec2(600, 2400),
    "east_gate": Vec2(2500, 600),
    "south_gate": Vec2(600, 0),
}


def make_data():
    characters = {
        "Characters": [
            {"Name": "Mage", "Speed": 400, "Hp": 500, "HpMax": 500, "Mp": 400, "MpMax": 400}
        ]
    }
    monsters = {
        "Monsters": [
            {"Name": "Bat", "Speed": 30, "AttackSpeed": 1.0, "Hp": 200, "HpMax": 200, "Dame": 50}
        ]
    }
    turns = {
        "Turns": [
            {
                "Percent": 0.0,
                "Gates": [
                    {"Gate": 1, "Monsters": [{"Name": "Bat", "Count": 2}]},
                    {"Gate": 2, "Monsters": [{"Name": "Bat", "Count": 1}]},
                ],
            }
        ]
    }
    return GameData(characters, monsters, turns)


def make_map(layers=None):
    if layers is None:
        layers = {"Meta": {}, "Meta1": {}, "Background1": {}, "Middleground1": {}}
    return TileMap(Size(80, 80), Size(32, 32), layers=layers, objects=dict(OBJECTS))


@pytest.fixture
def scene():
    game = GameManager(rng=random.Random(0))
    return GameScene(make_data(), make_map(), game=game)


def test_setup_places_player_and_pillar(scene):
    game = scene.game
    assert game.character.position == OBJECTS["start"]
    assert game.pillar.position == OBJECTS["pillar"]
    assert game.character.weapon is not None
    assert game.character.parent is scene.tile_map
    assert game.hub_layer in scene.children
    assert scene.turn_count == 1
    assert scene.layer_orders == {
        "Background1": ORDER_BACKGROUND_LAYER,
        "Middleground1": ORDER_MIDDLEGROUND_LAYER,
    }
    paths = [track.path for track in game.sound.engine.tracks.values()]
    assert paths == ["Sound/Blizzard.mp3"]


def test_missing_meta_layer_raises():
    with pytest.raises(KeyError):
        GameScene(make_data(), make_map({"Meta1": {}}), game=GameManager())


def test_init_monster_data_starts_turn(scene):
    scene.init_monster_data(0)
    assert scene.turn == 1
    assert scene.total_monster == [2, 1, 0, 0]
    assert scene.count_monster == [0, 0, 0, 0]
    scene.init_monster_data(0)
    assert scene.turn == 1


def test_waves_spawn_over_time(scene):
    scene.step(0)
    assert scene.turn == 1
    scene.step(5)
    assert scene.game.monsters == []
    scene.step(0)
    assert scene.count_monster[:2] == [1, 1]
    assert len(scene.game.monsters) == 2
    scene.step(2)
    assert scene.count_monster[:2] == [2, 1]
    assert len(scene.game.monsters) == 3


def test_add_monster_west_gate(scene):
    scene.init_monster_data(0)
    monster = scene.add_monster_to_scene(1)
    gate = OBJECTS["west_gate"]
    assert monster.position.x == gate.x
    assert 2 <= monster.position.y - gate.y <= 35
    assert monster.dir_move.length() == pytest.approx(1.0)
    toward = scene.game.pillar.position - monster.position
    assert monster.dir_move.x * toward.x + monster.dir_move.y * toward.y > 0
    assert monster in scene.game.monsters
    assert monster.parent is scene.tile_map
    assert monster.game is scene.game


def test_add_monster_north_gate_offsets_x(scene):
    scene.init_monster_data(0)
    monster = scene.add_monster_to_scene(2)
    gate = OBJECTS["north_gate"]
    assert monster.position.y == gate.y
    assert 2 <= monster.position.x - gate.x <= 35


def test_add_monster_bad_gate(scene):
    scene.init_monster_data(0)
    with pytest.raises(ValueError):
        scene.add_monster_to_scene(5)


def monster_bullet(scene, damage):
    bullet = Bullet(game=scene.game)
    body = bullet.physics_body
    body.collision_bitmask = BULLET_MONSTER_COLLISION
    body.category_bitmask = BULLET_MONSTER_CATEGORY
    body.contact_test_bitmask = BULLET_MONSTER_CONTACT
    bullet.damage = damage
    scene.tile_map.add_child(bullet)
    return bullet


def test_monster_bullet_hits_character(scene):
    character = scene.game.character
    before = character.hp
    bullet = monster_bullet(scene, 100)
    assert scene.on_contact_began(bullet.physics_body, character.physics_body) is True
    assert character.hp == before - 100
    assert bullet.removed
    bullet2 = monster_bullet(scene, 100)
    scene.on_contact_began(character.physics_body, bullet2.physics_body)
    assert character.hp == before - 200


def test_lethal_bullet_kills_character(scene):
    character = scene.game.character
    bullet = monster_bullet(scene, 10_000)
    scene.on_contact_began(character.physics_body, bullet.physics_body)
    assert character.hp == 0
    assert character.sprite_frame == "Mage/death.png"
    assert character.weapon.visible is False


def test_character_bullet_hits_monster(scene):
    monster = Monster("Bat", game=scene.game)
    scene.tile_map.add_child(monster)
    before = monster.hp
    bullet = Bullet(game=scene.game)
    bullet.physics_body.collision_bitmask = BULLET_CHARACTER_COLLISION
    bullet.damage = 50
    scene.tile_map.add_child(bullet)
    scene.on_contact_began(bullet.physics_body, monster.physics_body)
    assert monster.hp == before - 50
    assert bullet.removed


def test_monster_reaching_pillar(scene):
    pillar = scene.game.pillar
    before = pillar.hp
    monster = Monster("Bat", game=scene.game)
    scene.tile_map.add_child(monster)
    scene.on_contact_began(monster.physics_body, pillar.physics_body)
    assert pillar.hp == before - 200
    assert monster.hp == 0


def test_unrelated_contact_changes_nothing(scene):
    character = scene.game.character
    pillar = scene.game.pillar
    hp = (character.hp, pillar.hp)
    assert scene.on_contact_began(character.physics_body, pillar.physics_body) is True
    assert (character.hp, pillar.hp) == hp


def test_losing_shows_game_over(scene):
    scene.game.character.hp = 0
    scene.step(0)
    assert scene.game.hub_layer.game_over_layer.visible is False
    scene.step(3)
    hub = scene.game.hub_layer
    assert hub.game_over_layer.visible is True
    assert hub.victory_layer.visible is False
    assert scene.paused is True


def test_winning_shows_victory(scene):
    scene.turn = scene.turn_count + 1
    scene.step(0)
    scene.step(3)
    hub = scene.game.hub_layer
    assert hub.victory_layer.visible is True
    assert hub.pause_button.visible is False
    turn = scene.turn
    scene.step(1)
    assert scene.turn == turn


def test_camera_follows_character(scene):
    character = scene.game.character
    start = scene.camera
    scene.update_camera(0)
    assert scene.camera == start
    character.position = Vec2(700, 700)
    scene.update_camera(0)
    assert scene.camera == Vec2(700, 700)
    assert scene.game.hub_layer.position == scene.camera - scene.visible_size.as_vec() / 2


def test_mouse_fires_bullet(scene):
    game = scene.game
    assert scene.update_mouse(0) is False
    game.input.mouse_down(MouseButton.LEFT, Vec2(640, 384))
    assert scene.update_mouse(0) is True
    bullets = [n for n in scene.tile_map.children if isinstance(n, Bullet)]
    assert len(bullets) == 1
    assert bullets[0].damage == 50
    assert game.character.is_attack is True
    assert game.character.weapon.direction == scene.camera - game.character.position
    paths = [t.path for t in game.sound.engine.tracks.values()]
    assert "Sound/laser.mp3" in paths


def test_bullet_moves_with_velocity(scene):
    game = scene.game
    game.input.mouse_down(MouseButton.LEFT, Vec2(640, 384))
    scene.update_mouse(0)
    game.input.mouse_up(MouseButton.LEFT, Vec2(640, 384))
    bullet = next(n for n in scene.tile_map.children if isinstance(n, Bullet))
    start = bullet.position
    velocity = bullet.physics_body.velocity
    scene.step(0.01)
    assert bullet.position.x == pytest.approx(start.x + velocity.x * 0.01)
    assert bullet.position.y == pytest.approx(start.y + velocity.y * 0.01)


def test_step_detects_contact(scene):
    character = scene.game.character
    before = character.hp
    bullet = monster_bullet(scene, 30)
    bullet.position = character.position
    bullet.point_start = character.position
    scene.step(0)
    assert character.hp == before - 30
    assert bullet.removed


def test_key_events_reach_input(scene):
    scene.on_key_pressed(Key.A)
    assert scene.game.input.is_key_pressed(Key.A) is True
    scene.on_key_released(Key.A)
    assert scene.game.input.is_key_pressed(Key.A) is False


def test_mouse_events_reach_input(scene):
    scene.on_mouse_down(MouseButton.LEFT, Vec2(1, 2))
    assert scene.game.input.is_mouse_down(MouseButton.LEFT) is True
    scene.on_mouse_move(Vec2(3, 4))
    assert scene.game.input.mouse_location == Vec2(3, 4)
    scene.on_mouse_up(MouseButton.LEFT, Vec2(5, 6))
    assert scene.game.input.is_mouse_down(MouseButton.LEFT) is False
    assert scene.game.input.mouse_location == Vec2(5, 6)


def test_pause_freezes_spawning(scene):
    scene.step(0)
    scene.game.pause_game()
    scene.step(10)
    scene.step(0)
    assert scene.game.monsters == []
    assert scene.game.hub_layer.pause_layer.visible is True
    scene.game.resume_game()
    scene.step(5)
    scene.step(0)
    assert len(scene.game.monsters) == 2