# utils/filters.py
from __future__ import annotations
from dataclasses import replace
from typing import List, Tuple

from services.filter_state import FilterState, clean_labels

BUILDING_TYPE_LABELS = {"maison": "Maison", "appartement": "Appartement"}


def labels_caption(filters: FilterState) -> str:
    labels = clean_labels(filters.dpe_labels)
    return "Sélection : " + ", ".join(labels) if labels else "Toutes"


def active_filters_summary(filters: FilterState) -> List[Tuple[str, str]]:
    chips: List[Tuple[str, str]] = []
    if filters.building_type.strip():
        bt = filters.building_type.strip().lower()
        chips.append(("building_type", "Type : " + BUILDING_TYPE_LABELS.get(bt, bt)))
    if filters.postal_code.strip():
        chips.append(("postal_code", f"CP : {filters.postal_code.strip()}"))
    if filters.commune_prefix.strip():
        chips.append(("commune_prefix", f"Commune : {filters.commune_prefix.strip()}…"))
    if str(filters.surface_min).strip():
        chips.append(("surface_min", f"Surface min : {filters.surface_min} m²"))
    if str(filters.surface_max).strip():
        chips.append(("surface_max", f"Surface max : {filters.surface_max} m²"))
    if clean_labels(filters.dpe_labels):
        chips.append(("dpe_labels", "DPE : " + ", ".join(clean_labels(filters.dpe_labels))))
    if filters.start_date:
        chips.append(("start_date", f"Depuis le {filters.start_date}"))
    if filters.end_date:
        chips.append(("end_date", f"Jusqu'au {filters.end_date}"))
    return chips


def remove_filter(filters: FilterState, key: str) -> FilterState:
    if not hasattr(filters, key):
        return filters
    if key == "dpe_labels":
        return replace(filters, dpe_labels=())
    return replace(filters, **{key: ""})
