"""Application start-up: the director, the loading screen and the main menu."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from .sound import SoundManager
from .ui import MenuItem
from .utility import (
    PATH_DATA_PLIST,
    PATH_IMAGE_CHARACTER,
    PATH_IMAGE_EFFECT,
    PATH_IMAGE_MONSTER,
    PATH_IMAGE_UI,
    PATH_SOUND,
    TRANSITION_TIME,
    VISIBLE_SIZE,
    Node,
    Size,
    Vec2,
    screen_center,
)

APP_NAME = "Asm"
DESIGN_RESOLUTION = Size(1280, 768)
SMALL_RESOLUTION = Size(480, 320)
MEDIUM_RESOLUTION = Size(1024, 768)
LARGE_RESOLUTION = Size(2048, 1536)
ANIMATION_INTERVAL = 1.0 / 60
MENU_MUSIC = PATH_SOUND + "StartGame.mp3"

SPRITE_SHEETS = tuple(
    PATH_DATA_PLIST + f"{name}.plist"
    for name in ("Mage", "Explosion1", "Rock", "Bat", "Deathspirit", "Gosth", "Ariman")
)
TEXTURES = (
    PATH_IMAGE_CHARACTER + "Mage.png",
    PATH_IMAGE_EFFECT + "Explosion1.png",
    PATH_IMAGE_MONSTER + "Rock.png",
    PATH_IMAGE_MONSTER + "Bat.png",
    PATH_IMAGE_MONSTER + "Deathspirit.png",
    PATH_IMAGE_MONSTER + "Ariman.png",
    PATH_IMAGE_MONSTER + "Gosth.png",
)

TextureLoader = Callable[[str, Callable[[str], Any]], Any]


class ResolutionPolicy(Enum):
    EXACT_FIT = "exact_fit"
    NO_BORDER = "no_border"
    SHOW_ALL = "show_all"
    FIXED_HEIGHT = "fixed_height"
    FIXED_WIDTH = "fixed_width"


@dataclass(frozen=True)
class GLContextAttrs:
    """Bit depths of the drawing surface."""

    red: int = 8
    green: int = 8
    blue: int = 8
    alpha: int = 8
    depth: int = 24
    stencil: int = 8
    multisamples: int = 0


@dataclass
class GLView:
    """The window the game draws into."""

    name: str
    frame_size: Size
    design_resolution: Size = field(default_factory=Size)
    policy: ResolutionPolicy = ResolutionPolicy.NO_BORDER


@dataclass(frozen=True)
class TransitionFade:
    """A scene to switch to, faded in over ``duration`` seconds."""

    duration: float
    scene: Node


def _load_now(path: str, callback: Callable[[str], Any]) -> None:
    callback(path)


class Director:
    """Owns the window, the running scene and the frame timing."""

    def __init__(
        self,
        *,
        sound: Any = None,
        game_factory: Optional[Callable[["Director"], Node]] = None,
        texture_loader: TextureLoader = _load_now,
        visible_size: Size = VISIBLE_SIZE,
    ) -> None:
        self.sound = sound if sound is not None else SoundManager()
        self.game_factory = game_factory
        self.texture_loader = texture_loader
        self.visible_size = visible_size
        self.view: Optional[GLView] = None
        self.running_scene: Optional[Node] = None
        self.last_transition: Optional[float] = None
        self.display_stats = False
        self.animation_interval = ANIMATION_INTERVAL
        self.animating = True

    def run_with_scene(self, scene: Node) -> None:
        """Start the first scene."""
        if self.running_scene is not None:
            raise RuntimeError("a scene is already running")
        self.running_scene = scene

    def replace_scene(self, scene: Any) -> None:
        """Switch to ``scene``, which may be wrapped in a transition."""
        if self.running_scene is None:
            raise RuntimeError("use run_with_scene to start the first scene")
        if isinstance(scene, TransitionFade):
            self.last_transition = scene.duration
            scene = scene.scene
        else:
            self.last_transition = None
        self.running_scene = scene

    def create_game_scene(self) -> Node:
        if self.game_factory is None:
            raise RuntimeError("no game is configured")
        return self.game_factory(self)

    def go_to_main_menu(self) -> None:
        self.replace_scene(MainMenuScene(self))

    def stop_animation(self) -> None:
        self.animating = False

    def start_animation(self) -> None:
        self.animating = True


class LoadingScene(Node):
    """Loads sprite sheets and textures while showing a progress bar."""

    def __init__(self, director: Director) -> None:
        super().__init__("LoadingScene")
        self.director = director
        self.total = len(TEXTURES)
        self.count = 0
        self.background = PATH_IMAGE_UI + "background.png"
        self.background_position = screen_center(director.visible_size, Vec2.ZERO)
        self.slider_bar = PATH_IMAGE_UI + "loading_bg.png"
        self.slider_progress = PATH_IMAGE_UI + "loading_progress.png"
        self.slider_position = Vec2(
            director.visible_size.width / 2, director.visible_size.height / 5
        )
        self.percent = 0.0
        self.sprite_sheets: list[str] = []
        self.loaded: list[str] = []
        self.scheduled = True
        self.load_resources()

    def load_resources(self) -> None:
        """Register the sprite sheets and ask for every texture to be loaded."""
        self.sprite_sheets.extend(SPRITE_SHEETS)
        for texture in TEXTURES:
            self.director.texture_loader(texture, self.loading_callback)

    def loading_callback(self, texture: str) -> float:
        """One texture is ready; returns the new progress in percent."""
        self.loaded.append(texture)
        self.count += 1
        self.percent = self.count / self.total * 100
        return self.percent

    def update(self, dt: float) -> bool:
        """Fade to the main menu once everything is loaded; True when that happens."""
        if not self.scheduled or self.count < self.total:
            return False
        self.scheduled = False
        self.director.replace_scene(
            TransitionFade(TRANSITION_TIME, MainMenuScene(self.director))
        )
        return True


class MainMenuScene(Node):
    """The title screen with a play button."""

    def __init__(self, director: Director) -> None:
        super().__init__("MainMenuScene")
        self.director = director
        self.background = PATH_IMAGE_UI + "background.png"
        self.background_position = screen_center(director.visible_size, Vec2.ZERO)
        self.play_item = MenuItem(
            PATH_IMAGE_UI + "play.png",
            PATH_IMAGE_UI + "play_selected.png",
            self.go_to_game_scene,
        )
        self.items = [self.play_item]
        director.sound.play_background_music(MENU_MUSIC)

    def go_to_game_scene(self) -> Node:
        """Stop the menu music and start a new game."""
        scene = self.director.create_game_scene()
        self.director.sound.stop_background_music()
        self.director.replace_scene(scene)
        return scene


class AppDelegate:
    """Sets up the window and the director and reacts to the app going away and back."""

    def __init__(self, director: Optional[Director] = None) -> None:
        self.director = director if director is not None else Director()
        self.gl_context_attrs = GLContextAttrs()

    def application_did_finish_launching(self) -> bool:
        director = self.director
        if director.view is None:
            director.view = GLView(APP_NAME, DESIGN_RESOLUTION)
        director.display_stats = True
        director.animation_interval = ANIMATION_INTERVAL
        director.view.design_resolution = DESIGN_RESOLUTION
        director.view.policy = ResolutionPolicy.NO_BORDER
        director.run_with_scene(LoadingScene(director))
        return True

    def application_did_enter_background(self) -> None:
        self.director.stop_animation()

    def application_will_enter_foreground(self) -> None:
        self.director.start_animation()