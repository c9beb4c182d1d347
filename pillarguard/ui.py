"""The in-game HUD: status board, pause button and the pause, game-over and victory dialogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .utility import (
    PATH_IMAGE_NUMBER,
    PATH_IMAGE_UI,
    VISIBLE_SIZE,
    Node,
    Size,
    Vec2,
)

DIALOG_COLOR = (0, 0, 0, 200)
DIALOG_ORDER = 100
HUD_ORDER = 10


@dataclass
class Button:
    """A clickable image with a normal and a selected texture."""

    normal: str
    selected: str
    position: Vec2 = Vec2.ZERO
    content_size: Size = field(default_factory=Size)
    visible: bool = True
    enabled: bool = True


@dataclass
class MenuItem:
    """An entry of a dialog menu and the action it triggers."""

    normal: str
    selected: str
    callback: Optional[Callable[[], Any]] = None

    def activate(self) -> Any:
        if self.callback is None:
            return None
        return self.callback()


class StateBoard(Node):
    """Hit point and mana bars of the player, with their numbers."""

    def __init__(self, game: Any) -> None:
        super().__init__()
        self.game = game
        self.background = PATH_IMAGE_UI + "state_bar.png"
        self.anchor_point = Vec2(0.0, 1.0)
        self.position = Vec2(0, VISIBLE_SIZE.height)
        self.hp_bar_texture = PATH_IMAGE_UI + "hp_bar.png"
        self.mp_bar_texture = PATH_IMAGE_UI + "mp_bar.png"
        self.label_font = PATH_IMAGE_NUMBER + "number_white.png"
        self.hp_percent = 0.0
        self.mp_percent = 0.0
        self.hp_label = ""
        self.mp_label = ""
        self._refresh_hp()
        self._refresh_mp()

    def _character(self) -> Any:
        character = getattr(self.game, "character", None)
        if character is None:
            raise RuntimeError("the state board needs a character to show")
        return character

    def _refresh_hp(self) -> None:
        character = self._character()
        self.hp_percent = character.hp / float(character.hp_max) * 100
        self.hp_label = str(character.hp)

    def _refresh_mp(self) -> None:
        character = self._character()
        self.mp_percent = character.mp / float(character.mp_max) * 100
        self.mp_label = str(character.mp)

    def update(self, dt: float) -> None:
        self._refresh_hp()
        self._refresh_mp()


class _DialogLayer(Node):
    """A translucent full-screen layer holding a dialog; hidden until shown."""

    def __init__(
        self,
        name: str,
        game: Any,
        on_main_menu: Optional[Callable[[], Any]] = None,
        color: tuple[int, int, int, int] = DIALOG_COLOR,
    ) -> None:
        super().__init__(name)
        self.game = game
        self.on_main_menu = on_main_menu
        self.color = color
        self.visible = False

    def go_to_main_menu(self) -> None:
        """Stop the music and leave for the main menu."""
        sound = getattr(self.game, "sound", None)
        if sound is not None:
            sound.stop_background_music()
        if self.on_main_menu is not None:
            self.on_main_menu()


class _ResultLayer(_DialogLayer):
    """A dialog showing a result image and a button back to the main menu."""

    result_image = ""

    def __init__(self, game: Any, on_main_menu: Optional[Callable[[], Any]] = None) -> None:
        super().__init__("GameOverLayer", game, on_main_menu)
        self.background = PATH_IMAGE_UI + "dialog1.png"
        self.back_item = MenuItem(
            PATH_IMAGE_UI + "backbtn.png",
            PATH_IMAGE_UI + "backbtn_selected.png",
            self.go_to_main_menu,
        )
        self.items = [self.back_item]


class GameOverLayer(_ResultLayer):
    """Shown when the player or the pillar falls."""

    result_image = PATH_IMAGE_UI + "gameover.png"

    def go_to_main_menu(self) -> None:
        super().go_to_main_menu()


class VictoryLayer(_ResultLayer):
    """Shown when every turn has been survived."""

    result_image = PATH_IMAGE_UI + "win.png"

    def go_to_main_menu(self) -> None:
        super().go_to_main_menu()


class PauseLayer(_DialogLayer):
    """The pause dialog: sound switch, resume and back to the main menu."""

    def __init__(self, game: Any, on_main_menu: Optional[Callable[[], Any]] = None) -> None:
        super().__init__("PauseLayer", game, on_main_menu)
        self.background = PATH_IMAGE_UI + "dialog.png"
        self.sound_item_index = 0
        sound = getattr(game, "sound", None)
        if sound is not None and not sound.sound_on:
            self.sound_item_index = 1
        self.sound_items = (
            MenuItem(PATH_IMAGE_UI + "sound_on.png", PATH_IMAGE_UI + "sound_on.png"),
            MenuItem(PATH_IMAGE_UI + "sound_off.png", PATH_IMAGE_UI + "sound_off.png"),
        )
        self.resume_item = MenuItem(
            PATH_IMAGE_UI + "startbtn.png",
            PATH_IMAGE_UI + "startbtn_selected.png",
            self.resume_game,
        )
        self.back_item = MenuItem(
            PATH_IMAGE_UI + "backbtn.png",
            PATH_IMAGE_UI + "backbtn_selected.png",
            self.go_to_main_menu,
        )
        self.items = [
            MenuItem("", "", self.toggle_sound),
            self.resume_item,
            self.back_item,
        ]

    def resume_game(self) -> None:
        self.visible = False
        self.game.resume_game()

    def go_to_main_menu(self) -> None:
        """Stop the music and leave for the main menu."""
        super().go_to_main_menu()

    def toggle_sound(self) -> bool:
        """Switch sound on or off; returns whether sound is now on."""
        sound = self.game.sound
        sound.set_sound(not sound.sound_on)
        self.sound_item_index = 1 - self.sound_item_index
        return sound.sound_on


class HubLayer(Node):
    """The HUD laid over the game: status board, pause button and dialogs."""

    def __init__(self, game: Any, on_main_menu: Optional[Callable[[], Any]] = None) -> None:
        super().__init__("HubLayer")
        self.game = game

        self.state_board = StateBoard(game)
        self.state_board.z_order = HUD_ORDER
        self.add_child(self.state_board)

        self.pause_button = Button(
            PATH_IMAGE_UI + "pausebtn.png", PATH_IMAGE_UI + "pausebtn_selected.png"
        )
        size = self.pause_button.content_size
        self.pause_button.position = Vec2(
            VISIBLE_SIZE.width - size.width / 1.5,
            VISIBLE_SIZE.height - size.height / 1.5,
        )

        self.pause_layer = PauseLayer(game, on_main_menu)
        self.game_over_layer = GameOverLayer(game, on_main_menu)
        self.victory_layer = VictoryLayer(game, on_main_menu)
        for layer in (self.pause_layer, self.game_over_layer, self.victory_layer):
            layer.position = Vec2.ZERO
            layer.z_order = DIALOG_ORDER
            self.add_child(layer)

    def press_pause(self) -> None:
        """The pause button was touched."""
        if self.pause_button.enabled:
            self.game.pause_game()