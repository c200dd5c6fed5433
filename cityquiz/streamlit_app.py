"""Main Streamlit application entry point."""
import uuid

import streamlit as st

from cityquiz.core.config import (
    DIFFICULTY_RADII_M, DEFAULT_DIFFICULTY, ENABLE_PERSISTENCE, LAND_BOUNDARY_PATH,
    GRID_LAT_MIN, GRID_LAT_MAX, GRID_LON_MIN, GRID_LON_MAX, GRID_STEP_DEG,
    LOG_LEVEL, PROGRESS_DB_PATH, radius_for,
)
from cityquiz.core.coverage_grid import build_grid
from cityquiz.core.datasets import DatasetCatalog
from cityquiz.core.polygon_mask import load_polygon_mask
from cityquiz.core.session import QuizSession
from cityquiz.core.storage import open_progress_store, CUTOFF_PREFERENCE
from cityquiz.map_canvas import MapCanvas
from cityquiz.utils.error_handler import handle_streamlit_errors, safe_execute
from cityquiz.utils.logging import setup_logging

# Setup logging
setup_logging(LOG_LEVEL)

st.set_page_config(
    page_title="City Coverage Quiz",
    page_icon="🗺️",
    layout="wide"
)


@st.cache_resource
def get_grid():
    mask = load_polygon_mask(LAND_BOUNDARY_PATH)
    return build_grid(GRID_LAT_MIN, GRID_LAT_MAX, GRID_LON_MIN, GRID_LON_MAX, GRID_STEP_DEG, mask)


@st.cache_resource
def get_catalog():
    return DatasetCatalog()


@st.cache_resource
def get_progress_store():
    """One database connection per server process; sessions get per-player cursors."""
    return open_progress_store(PROGRESS_DB_PATH, enabled=ENABLE_PERSISTENCE)


def get_player_id() -> str:
    """Player id carried in the page URL, so a reload restores the same progress."""
    player_id = st.query_params.get("player")
    if not player_id:
        player_id = uuid.uuid4().hex
        st.query_params["player"] = player_id
    return player_id


def init_session_state():
    """Create the store, quiz session and canvas once per browser session."""
    if "quiz" in st.session_state:
        return

    catalog = get_catalog()
    store = get_progress_store().for_player(get_player_id())
    cutoff = catalog.resolve_choice(safe_execute(store.get_preference, CUTOFF_PREFERENCE))

    quiz = QuizSession(catalog.get(cutoff), get_grid(), store)
    canvas = MapCanvas()
    canvas.apply(quiz.restore(safe_execute(store.load)))

    st.session_state.store = store
    st.session_state.quiz = quiz
    st.session_state.canvas = canvas
    st.session_state.cutoff = cutoff
    st.session_state.rejected = None


def handle_submit():
    quiz: QuizSession = st.session_state.quiz
    text = st.session_state.get("guess", "").strip()
    if not text:
        return
    outcome = quiz.submit_guess(text, radius_for(st.session_state.difficulty))
    if outcome.rejected:
        st.session_state.rejected = text
        return
    st.session_state.canvas.apply(outcome.events)
    st.session_state.guess = ""


def handle_cutoff_change():
    cutoff = get_catalog().resolve_choice(st.session_state.cutoff)
    events = st.session_state.quiz.switch_dataset(get_catalog().get(cutoff))
    st.session_state.canvas.apply(events)
    safe_execute(st.session_state.store.set_preference, CUTOFF_PREFERENCE, cutoff)


def handle_reset():
    st.session_state.canvas.apply(st.session_state.quiz.reset())


@handle_streamlit_errors()
def render_page():
    init_session_state()
    catalog = get_catalog()

    st.title("🗺️ City Coverage Quiz")
    st.markdown("Name cities to cover the map. Every guess reveals the cities around it.")

    with st.sidebar:
        difficulties = list(DIFFICULTY_RADII_M)
        st.selectbox(
            "Difficulty",
            difficulties,
            index=difficulties.index(DEFAULT_DIFFICULTY) if DEFAULT_DIFFICULTY in difficulties else 2,
            format_func=lambda d: f"{d} ({DIFFICULTY_RADII_M[d] // 1000:,} km)",
            key="difficulty",
        )
        st.selectbox(
            "Cities",
            catalog.choices,
            format_func=lambda c: f"Population ≥ {c}",
            key="cutoff",
            on_change=handle_cutoff_change,
        )
        st.button("Reset", on_click=handle_reset, use_container_width=True)

    with st.form("guess_form"):
        col1, col2 = st.columns([4, 1])
        with col1:
            st.text_input("City", key="guess", placeholder="e.g. 'Springfield, IL'", label_visibility="collapsed")
        with col2:
            st.form_submit_button("Guess", type="primary", on_click=handle_submit, use_container_width=True)

    if st.session_state.rejected:
        st.toast(f"No city matches '{st.session_state.rejected}'", icon="⚠️")
        st.session_state.rejected = None

    stats = st.session_state.quiz.stats()
    col1, col2, col3 = st.columns(3)
    col1.metric("Circles", stats.circles)
    col2.metric("Cities Revealed", stats.revealed)
    col3.metric("Map Covered", stats.covered_text)

    st.pydeck_chart(st.session_state.canvas.deck())


render_page()
