# app.py
# Streamlit app entrypoint

import asyncio
import logging

import streamlit as st

from config import settings
from ui.map_view import render_map
from ui.results_table import render_results_table
from ui.sidebar import render_sidebar
from ui.state import current_filters, get_service, init_session_state, on_remove_filter
from utils.filters import active_filters_summary

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title="DPE Visualiser", layout="wide")

init_session_state()
service = get_service()

# --- Sidebar (filtres) ---
apply_btn = render_sidebar()
filters = current_filters()

# --- Main layout ---
st.title("🏠 DPE VISUALISER")
st.caption(f"Filtrage avancé des DPE ADEME • max {settings.PAGE_SIZE} résultats")

chips = active_filters_summary(filters)
if chips:
    cols = st.columns(len(chips))
    for col, (chip_key, chip_label) in zip(cols, chips):
        col.button(f"❌ {chip_label}", key=f"chip_{chip_key}", on_click=on_remove_filter, args=(chip_key,))

# Première recherche au chargement, puis sur demande
if apply_btn or "first_search_done" not in st.session_state:
    st.session_state["first_search_done"] = True
    with st.spinner("Récupération des DPE depuis l'ADEME…"):
        asyncio.run(service.execute(filters))

render_results_table(service.state)

if st.session_state.get("show_map"):
    render_map(service.state.results)
