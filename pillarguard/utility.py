"""Geometry, scene-graph and tile-map helpers shared by the game."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import ClassVar, Iterable, Optional

PATH_IMAGE_CHARACTER = "Image/Character/"
PATH_IMAGE_WEAPON = "Image/Weapon/"
PATH_IMAGE_MONSTER = "Image/Monster/"
PATH_IMAGE_UI = "Image/UI/"
PATH_IMAGE_OBJECT = "Image/Object/"
PATH_IMAGE_ITEM = "Image/Item/"
PATH_IMAGE_BULLET = "Image/Bullet/"
PATH_IMAGE_EFFECT = "Image/Effect/"
PATH_IMAGE_NUMBER = "Image/Number/"
PATH_MAP = "Map/"
PATH_SOUND = "Sound/"
PATH_DATA_PLIST = "Data/Plist/"
PATH_DATA_DEFAULT = "Data/Default/"

NUMBER_STRING = "0123456789+-"
TRANSITION_TIME = 0.5

ORDER_BACKGROUND_LAYER = 1
ORDER_PLAYER = 10
ORDER_MIDDLEGROUND_LAYER = 20
ORDER_HUB_LAYER = 100

TAG_ACTION_MOVE = 1
TAG_ACTION_IDLE = 2
TAG_ACTION_ATTACK = 3

CHARACTER_COLLISION = 0b000000001
MONSTER_COLLISION = 0b000010010
BULLET_CHARACTER_COLLISION = 0b000000100
BULLET_MONSTER_COLLISION = 0b000001000
PILLAR_COLLISION = 0b000100000

CHARACTER_CATEGORY = 0b000001000
MONSTER_CATEGORY = 0b000100100
BULLET_CHARACTER_CATEGORY = 0b000000010
BULLET_MONSTER_CATEGORY = 0b000000001
PILLAR_CATEGORY = 0b000010000

CHARACTER_CONTACT = 0b000000001
MONSTER_CONTACT = 0b000010010
BULLET_CHARACTER_CONTACT = 0b000000100
BULLET_MONSTER_CONTACT = 0b000001000
PILLAR_CONTACT = 0b000100000

_MATH_TOLERANCE = 2e-37


class Direction(IntEnum):
    """Unit steps along the axes; UP and DOWN share values with RIGHT and LEFT."""

    RIGHT = 1
    LEFT = -1
    UP = 1
    DOWN = -1


@dataclass(frozen=True)
class Vec2:
    """An immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    ZERO: ClassVar["Vec2"]

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vec2":
        return Vec2(self.x / scalar, self.y / scalar)

    def __bool__(self) -> bool:
        return bool(self.x or self.y)

    def with_x(self, x: float) -> "Vec2":
        return replace(self, x=x)

    def with_y(self, y: float) -> "Vec2":
        return replace(self, y=y)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> "Vec2":
        """Unit vector in the same direction; a zero vector stays zero."""
        n = self.length()
        if n < _MATH_TOLERANCE:
            return self
        return Vec2(self.x / n, self.y / n)

    def angle(self) -> float:
        """Angle from the positive x axis, in radians."""
        return math.atan2(self.y, self.x)

    def rotate(self, other: "Vec2") -> "Vec2":
        """Rotate by the angle that ``other`` points along, scaled by its length."""
        return Vec2(
            self.x * other.x - self.y * other.y,
            self.x * other.y + self.y * other.x,
        )

    @classmethod
    def from_angle(cls, radians: float) -> "Vec2":
        return cls(math.cos(radians), math.sin(radians))


Vec2.ZERO = Vec2()


@dataclass(frozen=True)
class Size:
    """Width and height of a rectangle."""

    width: float = 0.0
    height: float = 0.0

    def __truediv__(self, scalar: float) -> "Size":
        return Size(self.width / scalar, self.height / scalar)

    def as_vec(self) -> Vec2:
        return Vec2(self.width, self.height)


VISIBLE_SIZE = Size(1280, 768)


@dataclass
class PhysicsBody:
    """Collision data attached to a node."""

    polygons: list[list[Vec2]] = field(default_factory=list)
    origin: Vec2 = Vec2.ZERO
    category_bitmask: int = 0xFFFFFFFF
    collision_bitmask: int = 0xFFFFFFFF
    contact_test_bitmask: int = 0
    velocity: Vec2 = Vec2.ZERO
    rotation_enabled: bool = True
    node: Optional["Node"] = None


class Node:
    """A scene-graph node with a parent, children and a paused flag."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.parent: Optional[Node] = None
        self.children: list[Node] = []
        self.position = Vec2.ZERO
        self.z_order = 0
        self.visible = True
        self.paused = False

    def add_child(self, child: "Node") -> None:
        if child.parent is not None:
            raise ValueError("node already has a parent")
        child.parent = self
        self.children.append(child)

    def remove_from_parent(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False


class TileMap(Node):
    """A tiled map: named layers of tile GIDs, per-GID properties and named points."""

    def __init__(
        self,
        map_size: Size,
        tile_size: Size,
        layers: Optional[dict[str, dict[tuple[int, int], int]]] = None,
        properties: Optional[dict[int, dict[str, str]]] = None,
        objects: Optional[dict[str, Vec2]] = None,
        name: str = "",
    ) -> None:
        super().__init__(name)
        self.map_size = map_size
        self.tile_size = tile_size
        self.layers = layers if layers is not None else {}
        self.properties = properties if properties is not None else {}
        self.objects = objects if objects is not None else {}

    def position_to_index(self, position: Vec2) -> tuple[int, int]:
        """Tile coordinate under a point, with y counted from the top row."""
        x = int(position.x / self.tile_size.width)
        map_height = self.map_size.height * self.tile_size.height
        y = int((map_height - position.y) / self.tile_size.height)
        return x, y

    def tile_gid(self, layer: str, coord: tuple[int, int]) -> int:
        try:
            tiles = self.layers[layer]
        except KeyError:
            raise KeyError(f"no layer named {layer!r}") from None
        return tiles.get(coord, 0)

    def properties_for_gid(self, gid: int) -> Optional[dict[str, str]]:
        return self.properties.get(gid)

    def check_tile(self, position: Vec2, layer: str, prop: str) -> bool:
        """False outside the map or on a tile whose ``prop`` is "true"."""
        x, y = self.position_to_index(position)
        if x >= self.map_size.width or y >= self.map_size.height or x < 0 or y < 0:
            return False
        gid = self.tile_gid(layer, (x, y))
        if gid:
            props = self.properties_for_gid(gid)
            if props and props[prop] == "true":
                return False
        return True


def normalize_angle(angle: float) -> float:
    """Map an angle in degrees from [-180, 0) onto [180, 360)."""
    if -180 <= angle < 0:
        return 360 + angle
    return angle


def apply_direction(dir_move: Vec2, direction: Vec2) -> Vec2:
    """Facing after moving: horizontal movement sets x, otherwise y."""
    if dir_move.x:
        return direction.with_x(dir_move.x)
    return direction.with_y(dir_move.y)


def animation_frame_names(
    frame_name: str, available: Iterable[str], frame_count: Optional[int] = None
) -> list[str]:
    """Names of animation frames ``<name>1.png``, ``<name>2.png``... that exist.

    Without a count, collection stops at the first missing frame. With a count,
    frames 1 to ``frame_count - 1`` are tried and missing ones skipped.
    """
    names = set(available)
    if frame_count is None:
        frames = []
        index = 1
        while (candidate := f"{frame_name}{index}.png") in names:
            frames.append(candidate)
            index += 1
        return frames
    return [
        candidate
        for candidate in (f"{frame_name}{i}.png" for i in range(1, frame_count))
        if candidate in names
    ]


def screen_center(visible_size: Size, origin: Vec2) -> Vec2:
    return Vec2(visible_size.width / 2 + origin.x, visible_size.height / 2 + origin.y)