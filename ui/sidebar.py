import datetime as dt

import streamlit as st

from services.filter_state import BUILDING_TYPES, DPE_GRADES
from ui.state import current_filters, on_reset
from utils.filters import BUILDING_TYPE_LABELS, labels_caption


def render_sidebar() -> bool:
    """Affiche les filtres ; retourne True si l'utilisateur lance la recherche."""
    st.sidebar.header("🔎 Filtres")

    st.sidebar.text_input("Code postal", key="f_postal_code", placeholder="Ex: 42450")
    st.sidebar.text_input("Commune (commence par)", key="f_commune_prefix", placeholder="Ex: Su (pour Sury...)")

    st.sidebar.subheader("Surface habitable (m²)")
    col_a, col_b = st.sidebar.columns(2)
    with col_a:
        st.text_input("Min", key="f_surface_min", placeholder="Ex: 60")
    with col_b:
        st.text_input("Max", key="f_surface_max", placeholder="Ex: 120")

    st.sidebar.selectbox(
        "Type de bâtiment",
        [""] + BUILDING_TYPES,
        key="f_building_type",
        format_func=lambda v: BUILDING_TYPE_LABELS.get(v, "Tous"),
    )

    st.sidebar.subheader("Date d'établissement")
    st.sidebar.date_input("Début (optionnel)", key="f_start_date", min_value=dt.date(2000, 1, 1), format="YYYY-MM-DD")
    st.sidebar.date_input("Fin (optionnel)", key="f_end_date", min_value=dt.date(2000, 1, 1), format="YYYY-MM-DD")

    st.sidebar.subheader("Étiquettes DPE")
    cols = st.sidebar.columns(len(DPE_GRADES))
    for col, g in zip(cols, DPE_GRADES):
        col.checkbox(g, key=f"dpe_{g}")
    st.sidebar.caption(labels_caption(current_filters()))

    st.sidebar.divider()
    apply_btn = st.sidebar.button("🔍 Appliquer les filtres", type="primary", use_container_width=True)
    st.sidebar.button("🧹 Réinitialiser", on_click=on_reset, use_container_width=True)
    st.sidebar.toggle("Afficher sur la carte", key="show_map")
    return apply_btn
