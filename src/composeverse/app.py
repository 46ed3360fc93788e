"""ComposeVerse — Streamlit host running the animated solar system."""

import time

import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv
from streamlit_js_eval import streamlit_js_eval

load_dotenv()

from composeverse.config import Settings  # noqa: E402
from composeverse.engine import Engine  # noqa: E402
from composeverse.images import load_image  # noqa: E402
from composeverse.models import Viewport  # noqa: E402
from composeverse.renderers.svg_2d import render_svg  # noqa: E402

_settings = Settings.from_env()
_settings.configure_logging()

st.set_page_config(
    page_title="ComposeVerse",
    page_icon="🪐",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# --- Viewport detection (browser-first via streamlit-js-eval) ---
# The first run returns None; the rerun triggered by streamlit_js_eval fills
# it in. Until then the configured size is used.
if "viewport" not in st.session_state:
    _size: list[float] | None = streamlit_js_eval(
        js_expressions="[window.innerWidth, window.innerHeight]",
        key="_viewport_detect",
        height=0,
    )
    if _size is not None:
        st.session_state.viewport = Viewport(float(_size[0]), float(_size[1]))

_viewport: Viewport = st.session_state.get(
    "viewport", Viewport(_settings.width, _settings.height)
)

# --- Dark fullscreen theme CSS ---
st.markdown(
    """
    <style>
    /* Hide streamlit_js_eval invisible iframe */
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    /* Full background */
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #050510 !important;
    }
    /* Hide header/toolbar */
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    /* Remove main block padding */
    [data-testid="stMainBlockContainer"] {
        padding: 0 !important;
        max-width: 100% !important;
    }
    /* Orrery fills the viewport */
    .orrery {
        position: fixed;
        inset: 0;
        z-index: 0;
    }
    .orrery svg {
        width: 100vw;
        height: 100vh;
        display: block;
    }
    /* Zero-height haptic iframe */
    [data-testid="stElementContainer"]:has(iframe[height="0"]) {
        display: none !important;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

# --- Session state initialization ---
if "started_at" not in st.session_state:
    st.session_state.started_at = time.monotonic()
if "pulse_seq" not in st.session_state:
    st.session_state.pulse_seq = 0

chart_placeholder = st.empty()
haptic_placeholder = st.empty()


def _vibrate(duration_ms: int) -> None:
    """Ask the browser for a short vibration. Browsers without a motor ignore it."""
    st.session_state.pulse_seq += 1
    with haptic_placeholder:
        components.html(
            f"<!-- pulse {st.session_state.pulse_seq} -->"
            "<script>"
            "var n = window.parent.navigator;"
            f"if (n && n.vibrate) {{ n.vibrate({duration_ms}); }}"
            "</script>",
            height=0,
        )


if "engine" not in st.session_state:
    st.session_state.engine = Engine(
        haptics=_vibrate,
        activation_delay_ms=_settings.activation_delay_ms,
        haptic_duration_ms=_settings.haptic_ms,
    )
else:
    # Reruns redefine the placeholder; point the engine at the live one.
    st.session_state.engine.haptics = _vibrate

_engine: Engine = st.session_state.engine
_frame_delay = 1.0 / _settings.fps

# --- Render loop: one engine step per tick until the session ends ---
while True:
    _elapsed_ms = (time.monotonic() - st.session_state.started_at) * 1000
    _frame = _engine.step(_elapsed_ms, _viewport)
    chart_placeholder.markdown(
        f"<div class='orrery'>{render_svg(_frame, images=load_image)}</div>",
        unsafe_allow_html=True,
    )
    time.sleep(_frame_delay)
