# ui/results_table.py
from __future__ import annotations
from typing import Any, Dict, List

import pandas as pd
import streamlit as st

from services.normalizer import parse_date
from services.search_service import SearchState
from utils.geo import extract_coordinates

MISSING = "—"

DISPLAY_COLUMNS = [
    "# DPE",
    "Date établ.",
    "Etiq. DPE",
    "Etiq. GES",
    "Année constr.",
    "Surface (m²)",
    "Adresse",
]


def format_date(value: Any) -> str:
    """Date au format français (jj/mm/aaaa) ; valeur brute si illisible."""
    if not value:
        return ""
    d = parse_date(value)
    if d is None:
        return str(value)
    return d.strftime("%d/%m/%Y")


def _as_text(value: Any) -> str:
    # colonnes texte uniquement : Arrow refuse les colonnes mixtes nombre / "—"
    return MISSING if value is None or value == "" else str(value)


def to_display_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    recs = []
    for r in rows:
        address = r.get("adresse_ban") or MISSING
        if extract_coordinates(r) is None:
            address += " (coordonnées indisponibles)"
        recs.append(
            {
                "# DPE": r.get("numero_dpe"),
                "Date établ.": format_date(r.get("date_etablissement_dpe")),
                "Etiq. DPE": r.get("etiquette_dpe") or MISSING,
                "Etiq. GES": r.get("etiquette_ges") or MISSING,
                "Année constr.": _as_text(r.get("annee_construction") or r.get("periode_construction")),
                "Surface (m²)": _as_text(r.get("surface_habitable_logement")),
                "Adresse": address,
            }
        )
    return pd.DataFrame.from_records(recs, columns=DISPLAY_COLUMNS)


def render_results_table(state: SearchState) -> None:
    if state.error:
        st.error(f"**Erreur** : {state.error}")

    col_count, col_link = st.columns([3, 1])
    col_count.caption(f"{len(state.results)} résultat(s)")
    if state.url:
        col_link.markdown(f"[Ouvrir l'appel API]({state.url})")

    if not state.loading and not state.results:
        st.info("Aucun résultat avec ces filtres. Essayez d'élargir la recherche.")
        return

    st.dataframe(to_display_frame(state.results), use_container_width=True, hide_index=True)
