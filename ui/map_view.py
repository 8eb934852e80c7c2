# ui/map_view.py
from __future__ import annotations
import html
from typing import Any, Dict, List

import folium
import streamlit as st
from folium.plugins import MarkerCluster
from streamlit_folium import st_folium

from config import settings
from utils.geo import compute_view, to_map_points


def _popup_html(popup: Dict[str, Any]) -> str:
    def esc(key: str, default: str = "") -> str:
        return html.escape(str(popup.get(key) or default))

    return (
        "<div style='font-size: 12px'>"
        f"<strong>{esc('numero_dpe')}</strong><br>"
        f"{esc('adresse_ban')}<br>"
        f"DPE : {esc('etiquette_dpe', '—')} / {esc('etiquette_ges', '—')}"
        "</div>"
    )


def build_map(rows: List[Dict[str, Any]]) -> folium.Map:
    """Carte OSM avec un marqueur par DPE géolocalisé, cadrée sur les résultats."""
    points = to_map_points(rows)
    view = compute_view([(lat, lon) for _, lat, lon, _ in points])

    m = folium.Map(
        location=list(view.center),
        zoom_start=view.zoom or settings.DEFAULT_ZOOM,
        tiles="OpenStreetMap",
    )

    cluster = MarkerCluster().add_to(m)
    for dpe_id, lat, lon, popup in points:
        folium.Marker(
            location=[lat, lon],
            tooltip=str(dpe_id or ""),
            popup=folium.Popup(_popup_html(popup), max_width=300),
            icon=folium.Icon(color="blue", icon="home", prefix="fa"),
        ).add_to(cluster)

    if view.bounds:
        m.fit_bounds(view.bounds, padding=view.padding)
    return m


def render_map(rows: List[Dict[str, Any]]) -> None:
    st.subheader("🗺️ Carte")
    st_folium(build_map(rows), height=settings.MAP_HEIGHT, use_container_width=True, returned_objects=[])
    st.caption("Astuce : cliquez sur un marqueur pour voir le détail (n° DPE, adresse, étiquettes).")
