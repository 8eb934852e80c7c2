import datetime as dt
from typing import Optional

import streamlit as st

from services.filter_state import DPE_GRADES, FilterState, default_filters, reset_filters
from services.query_builder import to_iso
from services.search_service import SearchService
from utils.filters import remove_filter

TEXT_FIELDS = ["postal_code", "commune_prefix", "surface_min", "surface_max"]


def _to_date(value: str) -> Optional[dt.date]:
    iso = to_iso(value)
    if not iso:
        return None
    try:
        return dt.date.fromisoformat(iso)
    except ValueError:
        return None


def init_session_state() -> None:
    if "search_service" not in st.session_state:
        st.session_state["search_service"] = SearchService()
    if "show_map" not in st.session_state:
        st.session_state["show_map"] = False
    if "filters_ready" not in st.session_state:
        apply_filters(default_filters())
        st.session_state["filters_ready"] = True


def get_service() -> SearchService:
    return st.session_state["search_service"]


def apply_filters(filters: FilterState) -> None:
    """Recopie un FilterState dans les clés des widgets (à appeler avant leur rendu)."""
    for f in TEXT_FIELDS:
        st.session_state[f"f_{f}"] = str(getattr(filters, f) or "")
    st.session_state["f_building_type"] = filters.building_type
    st.session_state["f_start_date"] = _to_date(filters.start_date)
    st.session_state["f_end_date"] = _to_date(filters.end_date)
    for g in DPE_GRADES:
        st.session_state[f"dpe_{g}"] = g in filters.dpe_labels


def current_filters() -> FilterState:
    start = st.session_state.get("f_start_date")
    end = st.session_state.get("f_end_date")
    return FilterState(
        postal_code=st.session_state.get("f_postal_code", ""),
        commune_prefix=st.session_state.get("f_commune_prefix", ""),
        surface_min=st.session_state.get("f_surface_min", ""),
        surface_max=st.session_state.get("f_surface_max", ""),
        dpe_labels=tuple(g for g in DPE_GRADES if st.session_state.get(f"dpe_{g}")),
        building_type=st.session_state.get("f_building_type", ""),
        start_date=start.isoformat() if start else "",
        end_date=end.isoformat() if end else "",
    )


# Callbacks (exécutés avant le rerun, donc avant la création des widgets)
def on_reset() -> None:
    apply_filters(reset_filters(current_filters()))


def on_remove_filter(key: str) -> None:
    apply_filters(remove_filter(current_filters(), key))
