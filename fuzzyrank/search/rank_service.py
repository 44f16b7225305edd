"""Module contenant le service de classement principal."""
# fuzzyrank/search/rank_service.py
import hashlib
import time
from dataclasses import dataclass
from typing import Optional

import psutil
from redis.exceptions import RedisError

from fuzzyrank.cache import CacheManager, cache_manager
from fuzzyrank.config import settings
from fuzzyrank.logger import logger
from fuzzyrank.models import RankedCandidate, RankOptions, RankRequest, RankResponse
from fuzzyrank.scoring.ranking import Ranker, ranker as default_ranker


@dataclass
class RankContext:
    """Contexte partagé pour un classement."""
    query: str
    options: RankOptions
    drop_unmatched: bool
    start_time: float


class RankService:
    """Service de classement : scoring flou + cache Redis + pagination."""

    def __init__(
        self,
        ranker: Optional[Ranker] = None,
        cache: Optional[CacheManager] = None,
        cache_enabled: bool = settings.CACHE_ENABLED,
    ):
        self.ranker = ranker or default_ranker
        self.cache = cache or cache_manager
        self.cache_enabled = cache_enabled

    @staticmethod
    def _cache_key(request: RankRequest) -> str:
        """Clé de cache indépendante de la pagination (per_page/offset)."""
        cache_request = request.model_copy(deep=True)
        cache_request.options.per_page = None
        cache_request.options.offset = 0
        digest = hashlib.sha256(cache_request.model_dump_json().encode("utf-8")).hexdigest()
        return f"rank:{digest}"

    @staticmethod
    def _paginate(response: RankResponse, options: RankOptions) -> RankResponse:
        """Applique offset/per_page sur la réponse complète."""
        start = options.offset
        end = None if options.per_page is None else start + options.per_page
        return response.model_copy(update={"hits": response.hits[start:end]})

    async def _cache_get(self, key: str) -> Optional[str]:
        try:
            return await self.cache.get(key)
        except RedisError as e:
            logger.warning("Cache indisponible en lecture ({error}), classement sans cache", error=e)
            return None

    async def _cache_set(self, key: str, value: str) -> None:
        try:
            await self.cache.set(key, value, expire=settings.CACHE_TTL)
        except RedisError as e:
            logger.warning("Cache indisponible en écriture ({error})", error=e)

    async def rank(self, request: RankRequest) -> RankResponse:
        """Classe les candidats d'une requête en utilisant un système de cache.

        Args:
            request: Requête, candidats et options de classement.

        Returns:
            Un objet RankResponse paginé.
        """
        if not self.cache_enabled:
            return self._paginate(self._execute_rank(request), request.options)

        # On met en cache le classement complet, la pagination est faite après.
        cache_key = self._cache_key(request)

        cached_result = await self._cache_get(cache_key)
        if cached_result:
            logger.info("Cache HIT for key: {key}", key=cache_key)
            response_from_cache = RankResponse.model_validate_json(cached_result)
            return self._paginate(response_from_cache, request.options)

        logger.info("Cache MISS for key: {key}", key=cache_key)
        full_response = self._execute_rank(request)

        await self._cache_set(cache_key, full_response.model_dump_json())
        return self._paginate(full_response, request.options)

    def _execute_rank(self, request: RankRequest) -> RankResponse:
        """Exécute le classement sans cache."""
        options = request.options
        ctx = RankContext(
            query=request.query,
            options=options,
            drop_unmatched=(
                settings.DROP_UNMATCHED
                if options.drop_unmatched is None
                else options.drop_unmatched
            ),
            start_time=time.time(),
        )

        ranked = self.ranker.rank_scored(
            request.candidates,
            lambda candidate: candidate.label(options.label_field),
            ctx.query,
            drop_unmatched=ctx.drop_unmatched,
        )
        ranked = ranked[:options.limit]

        hits = [
            RankedCandidate.model_validate(
                {**r.item.model_dump(), "score": r.score, "matched": r.matched}
            )
            for r in ranked
        ]

        duration = time.time() - ctx.start_time
        memory_mb = psutil.Process().memory_info().rss / 1024 / 1024

        logger.info(
            "Classement (query: '{query}', candidats: {count}) : "
            "Durée = {duration:.4f}s | RAM = {memory:.2f} Mo",
            query=ctx.query, count=len(request.candidates),
            duration=duration, memory=memory_mb,
        )

        return RankResponse(
            hits=hits,
            total=len(hits),
            matched_count=sum(1 for hit in hits if hit.matched),
            total_before_filter=len(request.candidates),
            query_time_ms=duration * 1000,
            memory_used_mb=memory_mb,
        )
