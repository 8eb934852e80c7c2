import logging
from typing import Any, Dict, List, Optional

import requests

from config import settings

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Échec de l'appel à l'API ADEME (réseau, statut HTTP, corps illisible)."""


class AdemeDPEClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        dataset_slug: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url or settings.ADEME_API_BASE
        self.dataset_slug = dataset_slug or settings.ADEME_DATASET_SLUG
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _dataset_lines_url(self) -> str:
        return f"{self.base_url}/datasets/{self.dataset_slug}/lines"

    def lines_url(self, params: Dict[str, Any]) -> str:
        """URL complète de l'appel, pour le lien « Ouvrir l'appel API »."""
        return requests.Request("GET", self._dataset_lines_url(), params=params).prepare().url

    def search(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Interroge le dataset DPE et renvoie les lignes brutes.
        Une réponse sans liste `results` vaut zéro ligne ; les erreurs réseau
        et statuts non 2xx lèvent TransportError.
        """
        url = self._dataset_lines_url()
        logger.info("Appel ADEME %s qs=%r", url, params.get("qs"))
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e) or "Erreur de chargement") from e

        if not r.ok:
            raise TransportError(f"HTTP {r.status_code}")

        try:
            payload = r.json()
        except ValueError as e:
            raise TransportError("Réponse illisible (JSON invalide)") from e

        rows = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(rows, list):
            logger.warning("Réponse ADEME sans liste 'results', 0 ligne retenue")
            return []
        logger.info("%d lignes DPE reçues", len(rows))
        return rows
