import pytest

from pillarguard.character import Mage
from pillarguard.game_manager import GameManager
from pillarguard.ui import GameOverLayer, HubLayer, PauseLayer, StateBoard, VictoryLayer
from pillarguard.utility import PATH_IMAGE_UI, Node


@pytest.fixture
def game():
    scene = Node("GameScene")
    manager = GameManager(character=Mage(), scene=scene)
    return manager


@pytest.fixture
def hub(game):
    calls = []
    hub_layer = HubLayer(game, on_main_menu=lambda: calls.append("menu"))
    hub_layer.menu_calls = calls
    game.hub_layer = hub_layer
    game.scene.add_child(hub_layer)
    return hub_layer


def test_state_board_shows_full_bars_at_start(game):
    board = StateBoard(game)
    assert board.hp_percent == 100
    assert board.mp_percent == 100
    assert board.hp_label == str(game.character.hp)
    assert board.mp_label == str(game.character.mp)


def test_state_board_update_follows_character(game):
    board = StateBoard(game)
    game.character.hp = game.character.hp_max // 2
    game.character.mp = 100
    board.update(0.1)
    assert board.hp_percent == pytest.approx(50.0)
    assert board.hp_label == str(game.character.hp_max // 2)
    assert board.mp_label == "100"
    assert board.mp_percent == pytest.approx(100 / game.character.mp_max * 100)


def test_state_board_requires_character():
    with pytest.raises(RuntimeError):
        StateBoard(GameManager())


def test_dialogs_start_hidden(hub):
    assert hub.pause_layer.visible is False
    assert hub.game_over_layer.visible is False
    assert hub.victory_layer.visible is False
    assert hub.pause_layer.name == "PauseLayer"
    assert hub.game_over_layer.name == "GameOverLayer"


def test_press_pause_shows_dialog_and_pauses_game(hub, game):
    hub.press_pause()
    assert hub.pause_layer.visible is True
    assert hub.pause_button.enabled is False
    assert hub.state_board.paused is True
    assert hub.pause_layer.paused is False
    assert game.physics_world.speed == 0


def test_resume_from_pause_layer(hub, game):
    hub.press_pause()
    hub.pause_layer.resume_game()
    assert hub.pause_layer.visible is False
    assert hub.pause_button.enabled is True
    assert hub.state_board.paused is False
    assert game.physics_world.speed == 1.0


def test_toggle_sound_flips_state(game):
    layer = PauseLayer(game)
    assert layer.toggle_sound() is False
    assert game.sound.sound_on is False
    assert layer.sound_item_index == 1
    assert layer.toggle_sound() is True
    assert layer.sound_item_index == 0


def test_pause_layer_starts_on_sound_off_when_muted(game):
    game.sound.set_sound(False)
    layer = PauseLayer(game)
    assert layer.sound_item_index == 1


@pytest.mark.parametrize("layer_type", [PauseLayer, GameOverLayer, VictoryLayer])
def test_go_to_main_menu_stops_music_and_calls_back(game, layer_type):
    calls = []
    layer = layer_type(game, on_main_menu=lambda: calls.append(True))
    music_id = game.sound.play_background_music("Sound/Blizzard.mp3")
    layer.go_to_main_menu()
    assert music_id not in game.sound.engine.tracks
    assert calls == [True]


def test_result_images(game):
    assert GameOverLayer(game).result_image == PATH_IMAGE_UI + "gameover.png"
    assert VictoryLayer(game).result_image == PATH_IMAGE_UI + "win.png"


def test_game_over_win_shows_victory(hub, game):
    game.game_over(True)
    assert hub.victory_layer.visible is True
    assert hub.game_over_layer.visible is False
    assert hub.pause_button.visible is False


def test_back_item_activates_main_menu(hub):
    hub.game_over_layer.back_item.activate()
    assert hub.menu_calls == ["menu"]