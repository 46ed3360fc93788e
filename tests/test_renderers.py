from dataclasses import replace

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402
from matplotlib.patches import Ellipse  # noqa: E402

from composeverse import models  # noqa: E402
from composeverse.engine import Engine, run  # noqa: E402
from composeverse.images import load_image  # noqa: E402
from composeverse.models import Color, Oval, Viewport  # noqa: E402
from composeverse.renderers import static, svg_2d  # noqa: E402
from composeverse.renderers.plotly_2d import render_plotly_frame  # noqa: E402
from composeverse.renderers.static import (  # noqa: E402
    TextPathMeasurer,
    render_static_frame,
    save_animation,
    save_static_frame,
)
from composeverse.renderers.svg_2d import render_svg, render_svg_html  # noqa: E402

VP = Viewport(1200, 800)


@pytest.fixture(scope="module")
def frame():
    return run(6_000, VP)


def test_svg_document(frame) -> None:
    svg = render_svg(frame)
    assert svg.startswith("<svg")
    assert svg.rstrip().endswith("</svg>")
    assert 'viewBox="0 0 1200 800"' in svg
    assert "ComposeVerse" in svg
    assert "Neptune" in svg
    assert "Woohooo!" in svg
    assert "rotate(" in svg
    assert "<image" not in svg


def test_svg_clips_the_rider_image(frame) -> None:
    svg = render_svg(frame, images=lambda resource: b"\x89PNG fake")
    assert svg.count("<image") == 1
    assert "data:image/png;base64," in svg
    assert "<clipPath" in svg


def test_svg_html_wraps_the_document(frame) -> None:
    page = render_svg_html(frame)
    assert page.startswith("<!DOCTYPE html>")
    assert render_svg(frame) in page


def test_static_frame_matches_viewport(frame) -> None:
    fig = render_static_frame(frame)
    try:
        assert tuple(fig.get_size_inches()) == pytest.approx((12.0, 8.0))
        ax = fig.axes[0]
        assert ax.get_ylim() == (800.0, 0.0)
        assert len(ax.patches) > 200
    finally:
        plt.close(fig)


def test_save_static_frame(frame, tmp_path) -> None:
    path = save_static_frame(frame, tmp_path / "nested" / "frame.png")
    assert path.exists()
    assert path.read_bytes()[:4] == b"\x89PNG"


def test_save_animation(tmp_path) -> None:
    small = Viewport(300, 200)
    path = save_animation(Engine(), small, tmp_path / "loop.gif", duration_s=0.4, fps=5)
    assert path.read_bytes()[:3] == b"GIF"


def test_text_path_measurer_grows_with_text() -> None:
    measurer = TextPathMeasurer()
    short = measurer.measure("Sun", 20)
    long = measurer.measure("Neptune", 20)
    assert long.width > short.width
    assert measurer.measure("Sun", 20, letter_spacing=5).width == pytest.approx(short.width + 10)


def test_plotly_figure(frame) -> None:
    fig = render_plotly_frame(frame)
    assert len(fig.layout.shapes) > 200
    assert list(fig.layout.yaxis.range) == [800, 0]
    texts = [a.text for a in fig.layout.annotations]
    assert "Sun" in texts
    assert "<b>ComposeVerse</b>" in texts


def test_missing_rider_image_is_skipped() -> None:
    assert load_image("no-such-resource") is None


def test_ovals_reach_every_backend(frame) -> None:
    oval = Oval((100.0, 100.0), (80.0, 40.0), Color(255, 0, 0), stroke_width=2.0)
    custom = replace(frame, ops=(oval,), rider=None)

    assert '<ellipse cx="140.00" cy="120.00" rx="40.00" ry="20.00"' in render_svg(custom)

    fig = render_static_frame(custom)
    try:
        (patch,) = fig.axes[0].patches
        assert isinstance(patch, Ellipse)
        assert patch.center == (140.0, 120.0)
    finally:
        plt.close(fig)

    (shape,) = render_plotly_frame(custom).layout.shapes
    assert (shape.type, shape.x0, shape.x1, shape.y0, shape.y1) == ("circle", 100, 180, 100, 140)


def test_static_backend_resolves_the_project_root() -> None:
    assert (static._ROOT / "pyproject.toml").is_file()  # noqa: SLF001


def test_backends_share_the_image_provider_type() -> None:
    assert static.ImageProvider is svg_2d.ImageProvider is models.ImageProvider


def test_bundled_rider_face() -> None:
    data = load_image("rajesh")
    assert data is not None
    assert data[:8] == b"\x89PNG\r\n\x1a\n"


def test_rider_face_reaches_svg_and_matplotlib(frame) -> None:
    assert "data:image/png;base64," in render_svg(frame, images=load_image)

    fig = render_static_frame(frame, images=load_image)
    try:
        assert len(fig.axes[0].images) == 1
    finally:
        plt.close(fig)
