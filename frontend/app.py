"""
Streamlit frontend for EthnoGuessr - a geography guessing game.

Features:
- Two illustrative images per ethnic group, one group per round
- Click the world map to place a guess, confirm to score it
- Result map with the actual location and a line from your guess
- Live stats with recent round results

IMPORTANT:
- Set BACKEND_URL or provide via environment variable
- Requires the catalog backend running (default: http://localhost:8000)
"""

import logging

import requests
import streamlit as st
import streamlit.components.v1 as components

from frontend.config import BACKEND_URL, LOG_FORMAT, LOG_LEVEL
from frontend.game import GameController
from frontend.geo import format_distance
from frontend.map_view import FoliumSurface, InteractiveMap, LocationSelected
from frontend.rounds import ImageLoadError, ImageSlot, fetch_image, fetch_rounds

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger("ethnoguessr.frontend")


@st.cache_resource(show_spinner="Loading rounds...")
def load_rounds():
    # Round definitions are fixed for the lifetime of the process
    return fetch_rounds(BACKEND_URL)


@st.cache_data(show_spinner=False)
def load_image(url: str) -> bytes:
    return fetch_image(url)


def show_confetti():
    """Show celebratory confetti animation"""
    js = """
    <script src="https://cdn.jsdelivr.net/npm/canvas-confetti@1.5.1/dist/confetti.min.js"></script>
    <script>
    confetti({
      particleCount: 150,
      spread: 90,
      origin: { x: 0.5, y: 0.4 }
    })
    </script>
    """
    components.html(js, height=0)


def new_map(controller: GameController) -> InteractiveMap:
    interactive_map = InteractiveMap(FoliumSurface())

    def on_location_selected(event: LocationSelected):
        controller.select_location(event.coordinate)

    interactive_map.on_location_selected(on_location_selected)
    return interactive_map


def start_new_game():
    """Restart the controller and replace the map surface."""
    controller = st.session_state.controller
    controller.restart()
    st.session_state.map.dispose()
    st.session_state.map = new_map(controller)
    st.session_state.game_number += 1


def show_round_image(controller: GameController, which: ImageSlot):
    round_def = controller.current_round
    round_index = controller.state.current_round_index
    if round_def.image_error(which):
        controller.report_image_failure(round_index, which)
    if not controller.image_failed(which):
        try:
            st.image(load_image(round_def.image(which)), caption=f"{round_def.name} {which.value.title()}", width=160)
            return
        except ImageLoadError as e:
            logger.warning("%s", e)
            controller.report_image_failure(round_index, which)
    st.markdown(
        """
        <div style='width: 160px; height: 160px; background: #374151; border-radius: 8px;
                    display: flex; align-items: center; justify-content: center; color: white;'>
            Image Error
        </div>
        """,
        unsafe_allow_html=True,
    )


def show_result_feedback(distance_km: float, points: float):
    dist_str = format_distance(distance_km)
    if distance_km < 100:
        st.success(f"🎯 **Amazing!** {points:.0f} points | Distance: {dist_str}")
    elif distance_km < 1000:
        st.info(f"👍 **Great!** {points:.0f} points | Distance: {dist_str}")
    elif distance_km < 5000:
        st.warning(f"📍 Good try! {points:.0f} points | Distance: {dist_str}")
    else:
        st.error(f"🌐 Keep practicing! {points:.0f} points | Distance: {dist_str}")


def show_game_over(controller: GameController):
    st.balloons()
    st.markdown("<h2 style='text-align: center;'>🎉 Game Over! 🎉</h2>", unsafe_allow_html=True)
    st.markdown(
        f"<p style='text-align: center; font-size: 32px;'>Your Final Score: {controller.state.cumulative_score:.0f}</p>",
        unsafe_allow_html=True,
    )
    if st.button("🔄 Play Again", use_container_width=True):
        start_new_game()
        st.rerun()


def show_stats(controller: GameController):
    state = controller.state
    st.subheader("📊 Your Stats")
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Points", f"{state.cumulative_score:.0f}")
    with col2:
        st.metric("Round", f"{state.current_round_index}/{controller.round_count}")

    st.divider()
    st.subheader("📈 Recent Results")
    if not state.results:
        st.info("No results yet")
        return
    for r in reversed(state.results[-5:]):
        st.write(f"**Round {r.round_index}:** {r.score:.0f} pts | {format_distance(r.distance_km)} away")


def show_round(controller: GameController, interactive_map: InteractiveMap):
    state = controller.state
    round_def = controller.current_round

    st.markdown(f"## Round {state.current_round_index} / {controller.round_count}: {round_def.name}")
    st.markdown("Where does this ethnic group originate from?")

    col_male, col_female, _ = st.columns([1, 1, 2])
    with col_male:
        show_round_image(controller, ImageSlot.MALE)
    with col_female:
        show_round_image(controller, ImageSlot.FEMALE)

    interactive_map.update(
        selected_location=state.pending_guess,
        actual_location=controller.actual_location,
        show_result=controller.is_showing_result,
    )
    if not controller.is_showing_result:
        st.caption("📍 **Click on the map to place your guess, then click Confirm Guess**")

    map_key = f"map_{st.session_state.game_number}_{state.current_round_index}"
    clicked = interactive_map.surface.show(key=map_key)
    if clicked is not None and interactive_map.handle_click(clicked):
        st.rerun()

    if controller.is_showing_result:
        result = controller.last_result
        show_confetti()
        show_result_feedback(result.distance_km, result.score)
        label = "See Final Score" if controller.is_last_round else "➡️ Next Round"
        if st.button(label, use_container_width=True, key=f"next_{map_key}"):
            controller.advance_round()
            st.rerun()
    else:
        if state.pending_guess is not None:
            st.markdown(
                f"📍 **Your guess:** `{state.pending_guess.latitude:.4f}, {state.pending_guess.longitude:.4f}`"
            )
        if st.button(
            "Confirm Guess",
            use_container_width=True,
            type="primary",
            disabled=state.pending_guess is None,
            key=f"confirm_{map_key}",
        ):
            controller.confirm_guess()
            st.rerun()


def main():
    st.set_page_config(page_title="EthnoGuessr", layout="wide")

    try:
        rounds = load_rounds()
    except (requests.RequestException, ValueError) as e:
        logger.error("Could not load rounds from %s: %s", BACKEND_URL, e)
        st.error(f"❌ Failed to load rounds from {BACKEND_URL}: {e}")
        return

    if "controller" not in st.session_state:
        st.session_state.controller = GameController(rounds)
        st.session_state.map = new_map(st.session_state.controller)
        st.session_state.game_number = 0

    controller = st.session_state.controller

    st.markdown("<h1 style='text-align: center;'>ETHNOGUESSR</h1>", unsafe_allow_html=True)

    col_main, col_stats = st.columns([2.5, 1], gap="large")
    with col_main:
        if controller.state.is_game_over:
            show_game_over(controller)
        else:
            show_round(controller, st.session_state.map)
    with col_stats:
        show_stats(controller)


if __name__ == "__main__":
    main()
