import math

import pytest

from pillarguard.utility import (
    Direction,
    Node,
    Size,
    TileMap,
    Vec2,
    animation_frame_names,
    apply_direction,
    normalize_angle,
    screen_center,
)


def test_add_sub_round_trip():
    a, b = Vec2(1.5, -2), Vec2(3, 4)
    assert (a + b) - b == a


def test_scalar_multiplication_matches_addition():
    v = Vec2(2, -7)
    assert v * 2 == v + v
    assert 2 * v == v + v


def test_length_of_three_four():
    assert Vec2(3, 4).length() == 5


@pytest.mark.parametrize("v", [Vec2(3, 4), Vec2(-1, 0.25), Vec2(0, -9)])
def test_normalized_has_unit_length(v):
    assert v.normalized().length() == pytest.approx(1.0)


def test_zero_normalized_stays_zero():
    assert Vec2.ZERO.normalized() == Vec2.ZERO
    assert not Vec2.ZERO


@pytest.mark.parametrize("a", [0.0, 0.5, 1.2, -2.0, 3.0])
def test_from_angle_and_angle_round_trip(a):
    assert Vec2.from_angle(a).angle() == pytest.approx(a)


@pytest.mark.parametrize("a", [0.3, -1.1, 2.5])
def test_rotate_round_trip_and_keeps_length(a):
    v = Vec2(5, -2)
    rotated = v.rotate(Vec2.from_angle(a))
    assert rotated.length() == pytest.approx(v.length())
    back = rotated.rotate(Vec2.from_angle(-a))
    assert back.x == pytest.approx(v.x)
    assert back.y == pytest.approx(v.y)


def test_direction_values_drive_apply_direction():
    horizontal = apply_direction(
        Vec2(Direction.LEFT, 0), Vec2(Direction.RIGHT, Direction.UP)
    )
    assert horizontal == Vec2(-1, 1)
    vertical = apply_direction(
        Vec2(0, Direction.DOWN), Vec2(Direction.RIGHT, Direction.UP)
    )
    assert vertical == Vec2(1, -1)


@pytest.mark.parametrize("angle", [0, 45, 90, 135, 180])
def test_normalize_angle_keeps_non_negative(angle):
    assert normalize_angle(angle) == angle


@pytest.mark.parametrize("angle", [-1, -45, -90, -91, -179, -180])
def test_normalize_angle_moves_negative_into_upper_half(angle):
    result = normalize_angle(angle)
    assert 180 <= result < 360
    assert (result - angle) % 360 == 0


def test_normalize_angle_leaves_out_of_range_value():
    assert normalize_angle(-270) == -270


def test_apply_direction_horizontal():
    result = apply_direction(Vec2(-1, 0), Vec2(1, 1))
    assert result == Vec2(-1, 1)


def test_apply_direction_vertical():
    result = apply_direction(Vec2(0, -1), Vec2(1, 1))
    assert result == Vec2(1, -1)


def test_frame_names_stop_at_gap():
    available = {"run1.png", "run2.png", "run4.png"}
    assert animation_frame_names("run", available) == ["run1.png", "run2.png"]


def test_frame_names_with_count_skip_missing():
    available = {"run1.png", "run2.png", "run4.png"}
    assert animation_frame_names("run", available, 5) == [
        "run1.png",
        "run2.png",
        "run4.png",
    ]


def test_frame_names_with_count_exclude_count():
    available = {"run1.png", "run2.png", "run3.png"}
    assert animation_frame_names("run", available, 3) == ["run1.png", "run2.png"]


def test_screen_center():
    assert screen_center(Size(100, 50), Vec2(10, 20)) == Vec2(60, 45)


def _map():
    return TileMap(
        Size(10, 10),
        Size(32, 32),
        layers={"Meta": {(2, 3): 7, (4, 4): 8, (5, 5): 9}},
        properties={7: {"collidable": "true"}, 8: {"collidable": "false"}, 9: {}},
    )


@pytest.mark.parametrize("cx,cy", [(0, 0), (3, 7), (9, 9)])
def test_position_to_index_of_tile_center(cx, cy):
    tile_map = _map()
    position = Vec2(cx * 32 + 16, (10 - cy) * 32 - 16)
    assert tile_map.position_to_index(position) == (cx, cy)


def test_top_left_corner_is_tile_zero():
    assert _map().position_to_index(Vec2(0, 320)) == (0, 0)


@pytest.mark.parametrize("pos", [Vec2(400, 100), Vec2(100, -40), Vec2(-40, 100)])
def test_check_tile_outside_map_is_false(pos):
    assert _map().check_tile(pos, "Meta", "collidable") is False


def test_check_tile_empty_tile_is_true():
    tile_map = _map()
    pos = Vec2(16, 320 - 16)
    assert tile_map.check_tile(pos, "Meta", "collidable") is True


def _center(cx, cy):
    return Vec2(cx * 32 + 16, (10 - cy) * 32 - 16)


def test_check_tile_collidable_is_false():
    assert _map().check_tile(_center(2, 3), "Meta", "collidable") is False


def test_check_tile_not_collidable_is_true():
    assert _map().check_tile(_center(4, 4), "Meta", "collidable") is True


def test_check_tile_empty_properties_is_true():
    assert _map().check_tile(_center(5, 5), "Meta", "collidable") is True


def test_check_tile_missing_property_raises():
    with pytest.raises(KeyError):
        _map().check_tile(_center(2, 3), "Meta", "isFront")


def test_check_tile_missing_layer_raises():
    with pytest.raises(KeyError):
        _map().check_tile(_center(2, 3), "Meta1", "isFront")


def test_node_add_and_remove_child():
    parent, child = Node("parent"), Node("child")
    parent.add_child(child)
    assert child.parent is parent
    assert parent.children == [child]
    child.remove_from_parent()
    assert child.parent is None
    assert parent.children == []


def test_node_cannot_have_two_parents():
    a, b, child = Node(), Node(), Node()
    a.add_child(child)
    with pytest.raises(ValueError):
        b.add_child(child)


def test_node_pause_and_resume():
    node = Node()
    node.pause()
    assert node.paused is True
    node.resume()
    assert node.paused is False