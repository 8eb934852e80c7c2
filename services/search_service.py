# services/search_service.py
from __future__ import annotations
import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from data_adapters.ademe_client import AdemeDPEClient, TransportError
from services.filter_state import FilterState
from services.normalizer import normalize
from services.query_builder import build_qs, build_search_params

logger = logging.getLogger(__name__)


@dataclass
class SearchState:
    """État publié pour l'affichage ; seul SearchService l'écrit."""
    results: List[Dict[str, Any]] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    query: str = ""
    url: str = ""
    generation: int = 0


class SearchService:
    def __init__(self, client: Optional[Any] = None):
        self.client = client or AdemeDPEClient()
        self.state = SearchState()
        self._generation = 0

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _fetch(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        # clients async attendus directement, clients requests dans un thread
        if inspect.iscoroutinefunction(self.client.search):
            return await self.client.search(params)
        return await asyncio.to_thread(self.client.search, params)

    async def execute(self, filters: FilterState) -> List[Dict[str, Any]]:
        """
        Lance une recherche pour les filtres donnés et renvoie les lignes retenues.

        Chaque appel prend un nouveau numéro de génération : la réponse d'un
        appel plus ancien, même arrivée plus tard, ne remplace jamais l'état
        publié. Le drapeau `loading` est levé par l'appel courant uniquement.
        """
        self._generation += 1
        generation = self._generation

        qs = build_qs(filters)
        params = build_search_params(qs)
        self.state.generation = generation
        self.state.query = qs
        self.state.url = self.client.lines_url(params) if hasattr(self.client, "lines_url") else ""
        self.state.loading = True
        self.state.error = None

        try:
            raw = await self._fetch(params)
        except TransportError as e:
            logger.warning("Recherche DPE en échec : %s", e)
            if self.is_current(generation):
                self.state.results = []
                self.state.error = str(e) or "Erreur de chargement"
            return []
        finally:
            if self.is_current(generation):
                self.state.loading = False

        rows = normalize(raw if isinstance(raw, list) else [], filters)
        if self.is_current(generation):
            self.state.results = rows
        else:
            logger.debug("Réponse obsolète ignorée (génération %d < %d)", generation, self._generation)
        return rows
