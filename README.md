# pillarguard

The game logic of a small top-down tower-defence shooter. A mage stands
on a tiled map and guards a pillar. Monsters come through four gates in
waves and fire at the mage. The game is lost when the pillar or the mage
runs out of hit points. It is won when every turn has been cleared.

The package models the world as plain Python objects: a node tree, a
tile map with tile properties, entities with hit points and movement,
and the scenes that tie them together. The host application feeds input
events in, calls `GameScene.step(dt)` once per frame and reads the state
back out.

## What is inside

- `pillarguard.utility`: `Vec2` vector maths, the `Direction` values,
  the `Node` tree, and `TileMap` with `position_to_index`, `tile_gid`,
  `properties_for_gid` and `check_tile`. It also holds the helpers
  `normalize_angle`, `apply_direction`, `animation_frame_names` and
  `screen_center`, and the collision bitmask and layer-order constants.
- `pillarguard.body_parser`: `BodyParser` reads rigid-body polygon
  descriptions from JSON (`parse`, `parse_file`) and builds a scaled
  `PhysicsBody` with `body_from_json`. Invalid JSON raises
  `BodyParseError`.
- `pillarguard.input_handler`: `InputHandler` tracks which keys and
  mouse buttons are held and where the mouse is (`Key`, `MouseButton`).
- `pillarguard.sound`: `SoundManager` on top of an `AudioEngine` that
  records which clips are playing or paused, with a sound on/off switch
  (`set_sound`).
- `pillarguard.entity`: `Entity`, `EntityLife`, `Pillar` and `Bullet`.
- `pillarguard.character`: `Character`, `Mage`, `Weapon` and
  `create_character`.
- `pillarguard.monster`: `Monster`, `Boss` and `create_monster`.
- `pillarguard.file_manager`: `GameData` holds the character, monster
  and turn tables and can load them from `Character.json`,
  `Monster.json` and `Turn.json`.
- `pillarguard.game_manager`: `GameManager` holds the shared game state
  and the live monsters, and handles pause, resume and game over.
- `pillarguard.ui`: `HubLayer`, `StateBoard`, `PauseLayer`,
  `GameOverLayer` and `VictoryLayer`.
- `pillarguard.game`: `GameScene` runs the waves, contacts, camera and
  the per-frame `step`.
- `pillarguard.app`: `Director`, `LoadingScene`, `MainMenuScene` and
  `AppDelegate`.

## A short look

```python
from pillarguard.utility import Size, TileMap, Vec2, normalize_angle
from pillarguard.input_handler import InputHandler, Key, MouseButton

normalize_angle(-90)    # 270
Vec2(3, 4).length()     # 5.0

keys = InputHandler()
keys.key_down(Key.A)
keys.is_key_pressed(Key.A)                  # True
keys.mouse_down(MouseButton.LEFT, Vec2(10, 20))
keys.is_mouse_down(MouseButton.LEFT)        # True

tiles = TileMap(
    Size(10, 10), Size(32, 32),
    layers={"Meta": {(0, 9): 5}},
    properties={5: {"collidable": "true"}},
)
tiles.position_to_index(Vec2(10, 10))                 # (0, 9)
tiles.check_tile(Vec2(10, 10), "Meta", "collidable")  # False: blocked
tiles.check_tile(Vec2(40, 10), "Meta", "collidable")  # True
```

Wave data comes from a directory with the three JSON files:

```python
from pillarguard.file_manager import GameData

data = GameData.from_directory("Data/Default")
data.turn_count()
data.monster_count(1, 1)   # monsters in turn 1 through gate 1
data.monsters(1)           # {gate: [Monster, ...]} for turn 1
```

Turns and gates are numbered from 1; a turn outside the table raises
`IndexError`. Each turn has a `Percent` value, and every monster of that
turn has its hit points and damage raised by that fraction.

A `GameScene` is built from a `GameData` and a `TileMap`. The map needs
the layers `Meta` and `Meta1` and the objects `pillar`, `start`,
`west_gate`, `north_gate`, `east_gate` and `south_gate`.

## Rules worth knowing

- The mage starts with 400 MP and speed 400. Monsters start with 200 HP,
  speed 30 and 50 damage. The pillar has 5000 HP.
- A monster that touches the pillar takes 200 HP off the pillar and dies.
- Monsters shoot when the mage is within half the screen width. On 15 of
  100 attacks they fire two extra bullets at ±20°.
- A point is blocked when it lies outside the map, or on a tile of the
  `Meta` layer whose `collidable` property is `"true"`.
- A new turn starts five seconds after the last wave is spawned and
  cleared; each gate releases a monster every two seconds.

## What it does not do

The package draws nothing, opens no window, plays no real audio
(`AudioEngine` only records what would be playing) and reads no input
devices. It has no command to start a game; a host program creates the
scenes, feeds input events in and calls `step`.

## Tests

The tests use pytest and live in `tests/`:

```
pip install .[test]
pytest
```