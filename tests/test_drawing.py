import pytest

from composeverse.clock import AnimationClock
from composeverse.compute import place_bodies
from composeverse.drawing import (
    STAR_COUNT,
    HeuristicTextMeasurer,
    draw_body,
    draw_title,
    flatten,
    render_scene,
    starfield,
)
from composeverse.models import (
    Circle,
    Group,
    ImageBlit,
    RadialGradient,
    RiderPhase,
    RiderPose,
    Text,
    Viewport,
)
from composeverse.rider import JUMPING

VP = Viewport(1200, 800)


def _texts(ops) -> list[str]:
    return [op.text for op in ops if isinstance(op, Text)]


def test_starfield_is_deterministic() -> None:
    stars = starfield(VP)
    assert stars == starfield(VP)
    assert len(stars) == STAR_COUNT
    assert sum(s.twinkles for s in stars) == 67
    for s in stars:
        assert 0 <= s.x <= VP.width and 0 <= s.y <= VP.height
        assert 0.2 <= s.base_alpha <= 0.7
        assert 0.5 <= s.radius <= 2.0


def test_heuristic_measurer() -> None:
    extent = HeuristicTextMeasurer().measure("abc", 10)
    assert extent.width == pytest.approx(18.0)
    assert extent.height == pytest.approx(12.0)


def test_title_alignment_follows_orientation() -> None:
    measurer = HeuristicTextMeasurer()
    landscape = list(draw_title(Viewport(1500, 1000), 0.0, measurer))
    portrait = list(draw_title(Viewport(1000, 1500), 0.0, measurer))
    assert len(landscape) == len(portrait) == 2
    assert landscape[0].top_left[0] == pytest.approx(40 * 1000 / 1500)
    width = measurer.measure(
        "ComposeVerse", portrait[0].font_size, bold=True, letter_spacing=portrait[0].letter_spacing
    ).width
    assert portrait[0].top_left[0] == pytest.approx(500 - width / 2)


def test_body_is_lit_from_the_sun() -> None:
    earth = next(p for p in place_bodies(0.0, VP) if p.body.name == "Earth")
    ops = list(draw_body(earth, VP, HeuristicTextMeasurer()))
    disk = next(op for op in ops if isinstance(op, Circle) and op.radius == earth.radius)
    assert isinstance(disk.paint, RadialGradient)
    # Earth sits right of the sun, so its highlight is shifted left.
    assert disk.paint.center[0] < earth.position[0]
    assert disk.paint.center[1] == pytest.approx(earth.position[1])
    assert _texts(ops) == ["Earth"]


def test_only_saturn_has_rings() -> None:
    measurer = HeuristicTextMeasurer()
    for p in place_bodies(0.0, VP):
        strokes = [
            op
            for op in draw_body(p, VP, measurer)
            if isinstance(op, Circle) and op.stroke_width is not None
        ]
        assert len(strokes) == (2 if p.body.name == "Saturn" else 1)


def test_scene_paint_order_without_rider() -> None:
    state = AnimationClock().sample(0)
    ops = render_scene(state, VP, place_bodies(state.rotation_degrees, VP))
    assert all(isinstance(op, Circle) for op in ops[: 3 + STAR_COUNT])
    texts = _texts(ops)
    assert texts[:3] == ["Sun", "ComposeVerse", "ComposeVerse"]
    assert texts[3:] == [
        "Mercury", "Venus", "Earth", "Mars", "Jupiter", "Saturn", "Uranus", "Neptune"
    ]
    assert not any(isinstance(op, Group) for op in ops)


def _pose(altitude: float, descending: bool = False) -> RiderPose:
    return RiderPose(
        position=(700.0, 400.0),
        size=30.0,
        rotation_degrees=2.0,
        altitude=altitude,
        is_descending=descending,
        phase=RiderPhase.ASCENT,
        caption=JUMPING,
    )


def test_rider_is_drawn_right_after_its_host() -> None:
    state = AnimationClock().sample(6_000)
    ops = render_scene(
        state, VP, place_bodies(state.rotation_degrees, VP), rider=_pose(0.45)
    )
    texts = _texts(ops)
    assert texts.index(JUMPING) == texts.index("Earth") + 1
    rocket = next(op for op in ops if isinstance(op, Group))
    assert rocket.rotation_degrees == 2.0
    assert rocket.pivot == (700.0, 400.0)
    assert any(isinstance(op, ImageBlit) for op in rocket.children)


def test_near_miss_meteor_only_mid_ascent() -> None:
    state = AnimationClock().sample(0)
    placements = place_bodies(0.0, VP)
    climbing = render_scene(state, VP, placements, rider=_pose(0.5))
    falling = render_scene(state, VP, placements, rider=_pose(0.5, descending=True))
    assert len(climbing) == len(falling) + 2


def test_shooting_star_drawn_last_while_streaking() -> None:
    state = AnimationClock().sample(5_500)
    ops = render_scene(state, VP, place_bodies(state.rotation_degrees, VP))
    idle = render_scene(AnimationClock().sample(0), VP, place_bodies(0.0, VP))
    assert len(ops) == len(idle) + 2
    assert isinstance(ops[-1], Circle) and ops[-1].radius == 2.0


def test_flatten_bakes_group_rotation() -> None:
    child = Circle((110.0, 100.0), 5.0, RadialGradient((), (110.0, 100.0), 5.0))
    (leaf,) = flatten((Group((child,), rotation_degrees=90, pivot=(100.0, 100.0)),))
    assert leaf.center == pytest.approx((100.0, 110.0))
    assert leaf.paint.center == pytest.approx((100.0, 110.0))
