# services/filter_state.py
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Iterable, Tuple

from config import settings

DPE_GRADES = list("ABCDEFG")
BUILDING_TYPES = ["maison", "appartement"]


@dataclass(frozen=True)
class FilterState:
    """Instantané des filtres saisis par l'utilisateur.

    Tous les champs texte vides valent « non renseigné ». Les valeurs mal
    formées (date invalide, surface non numérique) ne sont jamais rejetées ici :
    c'est le constructeur de requête qui les ignore.
    """
    postal_code: str = ""
    commune_prefix: str = ""
    surface_min: str = ""
    surface_max: str = ""
    dpe_labels: Tuple[str, ...] = ()
    building_type: str = ""
    start_date: str = ""
    end_date: str = ""

    def __post_init__(self):
        # accepte une liste / un set de classes, stocké en tuple ;
        # un set n'a pas d'ordre stable, on le range de A à G
        labels = self.dpe_labels or ()
        if isinstance(labels, (set, frozenset)):
            labels = sorted(labels, key=_grade_order)
        object.__setattr__(self, "dpe_labels", tuple(labels))


def _grade_order(label) -> Tuple[int, str]:
    lab = str(label or "").strip().upper()
    return (DPE_GRADES.index(lab) if lab in DPE_GRADES else len(DPE_GRADES), lab)


def default_filters() -> FilterState:
    return FilterState(
        postal_code=settings.DEFAULT_POSTAL_CODE,
        building_type=settings.DEFAULT_BUILDING_TYPE,
    )


def reset_filters(filters: FilterState) -> FilterState:
    """Remet les filtres à zéro en conservant le code postal saisi."""
    return replace(
        filters,
        commune_prefix="",
        surface_min="",
        surface_max="",
        start_date="",
        end_date="",
        dpe_labels=(),
        building_type=settings.DEFAULT_BUILDING_TYPE,
    )


def toggle_label(filters: FilterState, label: str, checked: bool) -> FilterState:
    if checked:
        if label in filters.dpe_labels:
            return filters
        return replace(filters, dpe_labels=filters.dpe_labels + (label,))
    return replace(filters, dpe_labels=tuple(x for x in filters.dpe_labels if x != label))


def clean_labels(labels: Iterable[str]) -> Tuple[str, ...]:
    """Majuscules, sans vides ni doublons, ordre de saisie conservé."""
    out = []
    for raw in labels or ():
        lab = str(raw or "").strip().upper()
        if lab and lab not in out:
            out.append(lab)
    return tuple(out)
