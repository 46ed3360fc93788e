import pytest

from composeverse.compute import peak_distance, place_bodies, place_body
from composeverse.models import Viewport
from composeverse.scene import PLANETS, rider_host, rider_target


def test_bodies_start_on_the_positive_x_axis() -> None:
    vp = Viewport(3000, 1500)  # scale factor 1.0
    for p in place_bodies(0.0, vp):
        assert p.position == pytest.approx((1500 + p.body.orbital_radius, 750))
        assert p.radius == p.body.radius
        assert p.orbital_radius == p.body.orbital_radius


def test_orbital_velocity_scales_the_master_rotation() -> None:
    vp = Viewport(1500, 1500)
    mercury = PLANETS[0]
    # 45° of master rotation is a full 360° lap at 8× speed.
    assert place_body(mercury, 45.0, vp).position == pytest.approx((850, 750))
    # Quarter lap: y grows downward, so the body is below the sun.
    assert place_body(mercury, 11.25, vp).position == pytest.approx((750, 850))


def test_scale_factor_uses_the_short_side() -> None:
    assert Viewport(1200, 750).scale_factor == 0.5
    assert Viewport(750, 3000).scale_factor == 0.5


def test_rider_host_and_target() -> None:
    assert rider_host().name == "Earth"
    assert rider_target().name == "Neptune"
    assert peak_distance(rider_host(), rider_target(), Viewport(1500, 3000)) == 450.0
