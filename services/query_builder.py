# services/query_builder.py
from __future__ import annotations
import logging
import math
import re
from typing import Any, Dict, Optional

from config import settings
from services.filter_state import FilterState, clean_labels

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
OPEN_BOUND = "*"


def to_iso(value: Any) -> str:
    """Retourne la date si elle suit strictement AAAA-MM-JJ, sinon ""."""
    if not value:
        return ""
    val = str(value)
    if ISO_DATE_RE.match(val):
        return val
    logger.debug("Date ignorée (format invalide) : %r", val)
    return ""


def surface_bound(value: Any) -> str:
    """Borne de surface telle que saisie, ou "" si absente ou non numérique."""
    # non numérique -> borne ouverte, jamais envoyée telle quelle (ex. "60m2")
    val = str(value if value is not None else "").strip()
    if not val:
        return ""
    try:
        num = float(val)
    except ValueError:
        logger.debug("Surface ignorée (non numérique) : %r", val)
        return ""
    if not math.isfinite(num) or num < 0:
        logger.debug("Surface ignorée (hors plage) : %r", val)
        return ""
    return val


def _range(field: str, low: str, high: str) -> str:
    return f"{field}:[{low or OPEN_BOUND} TO {high or OPEN_BOUND}]"


def build_qs(filters: FilterState) -> str:
    """
    Construit la chaîne `qs` (syntaxe Lucene de Data Fair) à partir des filtres.
    Ordre des clauses fixe : type de bâtiment, code postal, commune, surface,
    étiquettes DPE, dates. Aucun filtre -> chaîne vide (recherche non filtrée).
    """
    qs_parts = []

    # --- Type de bâtiment ---
    building_type = (filters.building_type or "").strip()
    if building_type:
        qs_parts.append(f"type_batiment:{building_type.lower()}")

    # --- Code postal (BAN ou brut) ---
    pc = (filters.postal_code or "").strip()
    if pc:
        qs_parts.append(f"((code_postal_ban:{pc} OR code_postal_brut:{pc}))")

    # --- Commune : préfixe, les espaces deviennent un joker d'un caractère ---
    commune = (filters.commune_prefix or "").strip()
    if commune:
        token = re.sub(r"\s+", "?", commune)
        qs_parts.append(f"nom_commune_ban:{token}*")

    # --- Surfaces ---
    smin = surface_bound(filters.surface_min)
    smax = surface_bound(filters.surface_max)
    if smin or smax:
        qs_parts.append(_range("surface_habitable_logement", smin, smax))

    # --- Étiquettes DPE ---
    labels = clean_labels(filters.dpe_labels)
    if labels:
        qs_parts.append("etiquette_dpe:(" + " OR ".join(labels) + ")")

    # --- Dates d'établissement ---
    start = to_iso(filters.start_date)
    end = to_iso(filters.end_date)
    if start or end:
        qs_parts.append(_range("date_etablissement_dpe", start, end))

    return " AND ".join(qs_parts)


def build_search_params(qs: str, size: Optional[int] = None) -> Dict[str, Any]:
    """Paramètres de l'appel `/lines` : une page, les DPE les plus récents d'abord."""
    return {
        "size": size or settings.PAGE_SIZE,
        "sort": settings.SORT,
        "qs": qs,
    }
