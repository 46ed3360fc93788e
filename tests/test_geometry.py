import pytest

from composeverse.geometry import direction_unit, lerp_point, offset
from composeverse.models import Color, rotate_point, sample_gradient


def test_direction_unit() -> None:
    assert direction_unit((0.0, 0.0), (3.0, 4.0)) == pytest.approx((0.6, 0.8))


def test_direction_unit_of_coincident_points_is_zero() -> None:
    assert direction_unit((5.0, 5.0), (5.0, 5.0)) == (0.0, 0.0)


def test_offset_and_lerp() -> None:
    assert offset((1.0, 1.0), (0.0, 1.0), 4.0) == (1.0, 5.0)
    assert lerp_point((0.0, 0.0), (10.0, -10.0), 0.25) == (2.5, -2.5)


def test_rotate_point_is_clockwise_on_screen() -> None:
    assert rotate_point((10.0, 0.0), 90, (0.0, 0.0)) == pytest.approx((0.0, 10.0))


def test_color_helpers() -> None:
    c = Color.from_argb(0x802196F3)
    assert (c.red, c.green, c.blue) == (0x21, 0x96, 0xF3)
    assert c.alpha == pytest.approx(128 / 255)
    assert c.to_hex() == "#2196f3"
    assert c.with_alpha(1.7).alpha == 1.0
    assert c.with_alpha(-0.2).alpha == 0.0


def test_sample_gradient() -> None:
    black, white = Color(0, 0, 0), Color(255, 255, 255)
    assert sample_gradient((black, white), 0.5) == Color(128, 128, 128)
    assert sample_gradient((black, white), 2.0) == white
    assert sample_gradient((black,), 0.7) == black
