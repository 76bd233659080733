"""
Hotel Bookings Dashboard
Run:  streamlit run app/streamlit_app.py
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import streamlit as st
from src.utils import resolve_data_path
from src.dashboard import Dashboard
from src.charts import CHART_KINDS, NO_DATA_FOR_PERIOD_TEXT, build_figure

# ── page config ─────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Hotel Bookings Dashboard",
    page_icon="🏨",
    layout="wide",
)

# ── global CSS tweaks ───────────────────────────────────────────────────────
st.markdown("""
<style>
    .block-container { padding-top: 1.5rem; }
    div[data-testid="stButton"] button { min-width: 3rem; font-size: 1.25rem; }
    .no-data-message {
        text-align: center; padding: 120px 0;
        color: #636e72; font-size: 1.1rem;
    }
</style>
""", unsafe_allow_html=True)

data_path, using_sample = resolve_data_path()
db_info = "Sample Dataset" if using_sample else "Full Dataset"


# ── session state ───────────────────────────────────────────────────────────

def get_dashboard() -> Dashboard:
    """One Dashboard per session, loaded on first use."""
    if "dashboard" not in st.session_state:
        dash = Dashboard()
        with st.spinner("Loading..."):
            dash.load(data_path)
        st.session_state["dashboard"] = dash
    return st.session_state["dashboard"]


dash = get_dashboard()

st.title("🏨 Hotel Bookings Dashboard")
st.caption(f"{db_info} · {data_path.name}")

if dash.error:
    st.error(f"Error: {dash.error}")
    st.stop()

# ── date filter ─────────────────────────────────────────────────────────────
with st.form("date_selector"):
    c1, c2, c3 = st.columns([2, 2, 1])
    with c1:
        start_date = st.date_input("Start Date", value=None)
    with c2:
        end_date = st.date_input("End Date", value=None)
    with c3:
        st.write("")
        submitted = st.form_submit_button("Filter Data", use_container_width=True)

if submitted:
    dash.apply_filter(start_date, end_date)

if dash.filter_error:
    st.warning(f"Error: {dash.filter_error}")

# ── chart carousel ──────────────────────────────────────────────────────────
left, centre, right = st.columns([1, 12, 1])

with left:
    if st.button("❮", key="prev_chart", disabled=not dash.has_data):
        dash.previous_chart()
with right:
    if st.button("❯", key="next_chart", disabled=not dash.has_data):
        dash.next_chart()

with centre:
    config = dash.current_chart()
    if config is None:
        st.markdown(f'<div class="no-data-message">{NO_DATA_FOR_PERIOD_TEXT}</div>',
                    unsafe_allow_html=True)
    else:
        st.plotly_chart(build_figure(config), use_container_width=True)
        st.caption(
            f"Chart {dash.carousel.index + 1} of {len(CHART_KINDS)} · "
            f"{len(dash.filtered):,} of {len(dash.records):,} bookings"
        )
