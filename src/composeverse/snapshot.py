"""CLI entry point for rendering a still frame and a looping GIF.

Settings come from COMPOSEVERSE_* environment variables (or a .env file),
then run:
    uv run python src/composeverse/snapshot.py

Writes a PNG, an SVG, a full-window SVG page and an interactive Plotly page of
one frame, plus a GIF of a full launch loop, into COMPOSEVERSE_OUTPUT_DIR.
"""

from dotenv import load_dotenv

load_dotenv()

from composeverse.config import Settings  # noqa: E402
from composeverse.engine import Engine, run  # noqa: E402
from composeverse.images import load_image  # noqa: E402
from composeverse.models import Viewport  # noqa: E402
from composeverse.renderers.plotly_2d import render_plotly_frame  # noqa: E402
from composeverse.renderers.static import (  # noqa: E402
    TextPathMeasurer,
    save_animation,
    save_static_frame,
)
from composeverse.renderers.svg_2d import render_svg, render_svg_html  # noqa: E402

# Mid-ascent: the rider, the near-miss meteor and a caption are all on screen.
SNAPSHOT_MS = 6_000

settings = Settings.from_env()
settings.configure_logging()
viewport = Viewport(settings.width, settings.height)
measurer = TextPathMeasurer()

frame = run(
    SNAPSHOT_MS,
    viewport,
    measurer=measurer,
    activation_delay_ms=settings.activation_delay_ms,
    haptic_duration_ms=settings.haptic_ms,
)
png_path = save_static_frame(
    frame, settings.output_dir / "composeverse.png", images=load_image
)
print(f"Saved: {png_path}")

svg_path = settings.output_dir / "composeverse.svg"
svg_path.write_text(render_svg(frame, images=load_image), encoding="utf-8")
print(f"Saved: {svg_path}")

page_path = settings.output_dir / "composeverse.html"
page_path.write_text(render_svg_html(frame, images=load_image), encoding="utf-8")
print(f"Saved: {page_path}")

html_path = settings.output_dir / "composeverse_interactive.html"
render_plotly_frame(frame).write_html(html_path, include_plotlyjs="cdn")
print(f"Saved: {html_path}")

engine = Engine(
    measurer=measurer,
    activation_delay_ms=settings.activation_delay_ms,
    haptic_duration_ms=settings.haptic_ms,
)
gif_path = save_animation(
    engine,
    viewport,
    settings.output_dir / "composeverse.gif",
    duration_s=settings.duration_s,
    fps=settings.fps,
    images=load_image,
)
print(f"Saved: {gif_path}")
