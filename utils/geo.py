import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from config import settings

# Le nommage des coordonnées varie selon les lignes / versions du dataset ADEME
LATITUDE_FIELDS = ("coordonnee_cartographique_y_ban", "y_ban", "y")
LONGITUDE_FIELDS = ("coordonnee_cartographique_x_ban", "x_ban", "x")

POPUP_FIELDS = ("numero_dpe", "adresse_ban", "etiquette_dpe", "etiquette_ges")

_FLOAT_PREFIX_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _first_present(row: Dict[str, Any], fields: Iterable[str]) -> Any:
    for f in fields:
        if row.get(f) is not None:
            return row[f]
    return None


def to_float(value: Any) -> Optional[float]:
    """Lecture tolérante d'un nombre (préfixe numérique d'une chaîne accepté)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        m = _FLOAT_PREFIX_RE.match(str(value))
        if not m:
            return None
        num = float(m.group(0))
    return num if math.isfinite(num) else None


def extract_coordinates(row: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """Retourne (lat, lon) d'une ligne DPE, ou None si l'une des deux manque."""
    lat = to_float(_first_present(row, LATITUDE_FIELDS))
    lon = to_float(_first_present(row, LONGITUDE_FIELDS))
    if lat is None or lon is None:
        return None
    return lat, lon


def to_map_points(rows: Iterable[Dict[str, Any]]) -> List[Tuple[Any, float, float, Dict[str, Any]]]:
    """(id, lat, lon, champs du popup) pour chaque ligne géolocalisée."""
    points = []
    for row in rows:
        coords = extract_coordinates(row)
        if coords is None:
            continue
        popup = {f: row.get(f) for f in POPUP_FIELDS}
        points.append((row.get("numero_dpe"), coords[0], coords[1], popup))
    return points


@dataclass(frozen=True)
class MapView:
    """Cadrage de la carte : centre + zoom, ou emprise à ajuster."""
    center: Tuple[float, float]
    zoom: Optional[int] = None
    bounds: Optional[List[List[float]]] = None  # [[sud, ouest], [nord, est]]
    padding: Optional[Tuple[int, int]] = None


def compute_view(points: List[Tuple[float, float]]) -> MapView:
    if not points:
        return MapView(center=settings.DEFAULT_CENTER, zoom=settings.DEFAULT_ZOOM)
    if len(points) == 1:
        return MapView(center=tuple(points[0]), zoom=settings.POINT_ZOOM)
    arr = np.array(points, dtype=float)
    south, west = arr.min(axis=0)
    north, east = arr.max(axis=0)
    return MapView(
        center=(float((south + north) / 2), float((west + east) / 2)),
        bounds=[[float(south), float(west)], [float(north), float(east)]],
        padding=settings.FIT_PADDING,
    )
