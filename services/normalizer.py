# services/normalizer.py
from __future__ import annotations
import datetime as dt
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from services.filter_state import FilterState, clean_labels
from services.query_builder import to_iso


def parse_date(value: Any) -> Optional[dt.date]:
    """Date calendaire d'un champ texte ADEME, None si absente ou illisible."""
    if not value or not isinstance(value, str):
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def _in_date_range(row: Dict[str, Any], start: Optional[dt.date], end: Optional[dt.date]) -> bool:
    d = parse_date(row.get("date_etablissement_dpe"))
    if d is None:
        return False
    if start and d < start:
        return False
    if end and d > end:
        return False
    return True


def normalize(records: Iterable[Any], filters: FilterState) -> List[Dict[str, Any]]:
    """
    Re-filtre côté client les lignes renvoyées par l'API.

    Le filtre serveur sur les dates n'est pas fiable, on le réapplique ici,
    ainsi que les étiquettes DPE et le type de bâtiment. L'ordre de l'API est
    conservé ; une ligne doit passer tous les filtres actifs.
    """
    out = [row for row in (records or []) if isinstance(row, dict)]

    # --- Dates (bornes incluses) ---
    start = parse_date(to_iso(filters.start_date))
    end = parse_date(to_iso(filters.end_date))
    if start or end:
        out = [row for row in out if _in_date_range(row, start, end)]

    # --- Étiquettes DPE ---
    labels = set(clean_labels(filters.dpe_labels))
    if labels:
        out = [row for row in out if str(row.get("etiquette_dpe") or "").upper() in labels]

    # --- Type de bâtiment ---
    building_type = (filters.building_type or "").strip().lower()
    if building_type:
        out = [
            row for row in out
            if str(row.get("type_batiment") or "").strip().lower() == building_type
        ]

    return out
