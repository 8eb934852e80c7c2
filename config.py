import os
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Settings:
    # ADEME (Data Fair)
    ADEME_API_BASE: str = os.getenv("ADEME_API_BASE", "https://data.ademe.fr/data-fair/api/v1")
    ADEME_DATASET_SLUG: str = os.getenv("ADEME_DATASET_SLUG", "dpe03existant")

    # Requête : une seule page, les plus récents d'abord
    PAGE_SIZE: int = 500
    SORT: str = "-date_etablissement_dpe"
    REQUEST_TIMEOUT: int = 30

    # Carte (centre France approx.)
    DEFAULT_CENTER: Tuple[float, float] = (46.7, 2.5)
    DEFAULT_ZOOM: int = 6
    POINT_ZOOM: int = 12
    FIT_PADDING: Tuple[int, int] = (20, 20)
    MAP_HEIGHT: int = 420

    # Valeurs initiales des filtres
    DEFAULT_POSTAL_CODE: str = "42450"
    DEFAULT_BUILDING_TYPE: str = "maison"

    # App
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
