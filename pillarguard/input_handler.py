"""Keyboard and mouse state tracking."""

from __future__ import annotations

from enum import IntEnum

from .utility import Vec2

KEY_COUNT = 165


class MouseButton(IntEnum):
    LEFT = 0
    RIGHT = 1
    MIDDLE = 2


class Key(IntEnum):
    """Key codes of the keys the game reads."""

    LEFT_ARROW = 26
    RIGHT_ARROW = 27
    UP_ARROW = 28
    DOWN_ARROW = 29
    A = 124
    D = 127
    S = 142
    W = 146


def _check_key(key: int) -> int:
    key = int(key)
    if not 0 <= key < KEY_COUNT:
        raise ValueError(f"key code {key} out of range")
    return key


class InputHandler:
    """Which keys and mouse buttons are held, and where the mouse is."""

    def __init__(self) -> None:
        self._keys: set[int] = set()
        self._buttons: set[MouseButton] = set()
        self.mouse_location = Vec2.ZERO

    def key_down(self, key: int) -> None:
        self._keys.add(_check_key(key))

    def key_up(self, key: int) -> None:
        self._keys.discard(_check_key(key))

    def is_key_pressed(self, key: int) -> bool:
        return _check_key(key) in self._keys

    def mouse_down(self, button: MouseButton, location: Vec2) -> None:
        self._buttons.add(MouseButton(button))
        self.mouse_location = location

    def mouse_move(self, location: Vec2) -> None:
        self.mouse_location = location

    def mouse_up(self, button: MouseButton, location: Vec2) -> None:
        self._buttons.discard(MouseButton(button))
        self.mouse_location = location

    def is_mouse_down(self, button: MouseButton) -> bool:
        return MouseButton(button) in self._buttons