"""
Application Services - Orquestrador da busca agregada
"""
import logging
import time
from typing import Callable, Optional

from ..domain.deadline import Deadline
from ..domain.errors import PipelineError, SearchCancelledError
from ..domain.models import SearchMetadata, SearchRequest, SearchResponse
from .gateway import ProviderGateway
from .interfaces import SearchCacheInterface
from .pipeline import MergePipeline

logger = logging.getLogger(__name__)


class FlightSearchService:
    """Serviço principal de busca de voos

    Cache → (miss) gateway de provedores → pipeline de merge → cache.
    """

    def __init__(
        self,
        gateway: ProviderGateway,
        cache: SearchCacheInterface,
        pipeline: MergePipeline,
        cache_key_builder: Callable[[SearchRequest], str],
        default_timeout: float = 2.0,
    ):
        self._gateway = gateway
        self._cache = cache
        self._pipeline = pipeline
        self._cache_key = cache_key_builder
        self._default_timeout = default_timeout

    @property
    def providers_queried(self) -> int:
        return self._gateway.provider_count

    async def search(self, request: SearchRequest, deadline: Optional[Deadline] = None) -> SearchResponse:
        """Executa a busca completa respeitando o prazo informado"""
        start = time.perf_counter()
        if deadline is None:
            deadline = Deadline.after(self._default_timeout)

        key = self._cache_key(request)
        cached, found = self._cache.lookup(key)
        if found:
            logger.debug("Cache hit para %s → %s", request.origin, request.destination)
            response = cached.model_copy(deep=True)
            response.metadata.cache_hit = True
            response.metadata.search_time_ms = self._elapsed_ms(start)
            return response

        logger.debug("Cache miss para %s → %s", request.origin, request.destination)
        queried = self.providers_queried

        if deadline.expired:
            raise SearchCancelledError(
                "deadline exceeded before fetching from providers",
                SearchMetadata(
                    providers_queried=queried,
                    providers_succeeded=0,
                    providers_failed=queried,
                    search_time_ms=self._elapsed_ms(start),
                ),
            )

        try:
            result = await self._gateway.fetch_all(request, deadline)
        except SearchCancelledError as e:
            e.metadata.search_time_ms = self._elapsed_ms(start)
            raise

        metadata = SearchMetadata(
            providers_queried=queried,
            providers_succeeded=result.succeeded,
            providers_failed=result.failed,
        )

        try:
            flights = self._pipeline.run(result.offers, request)
        except Exception as e:
            metadata.search_time_ms = self._elapsed_ms(start)
            raise PipelineError(f"merge pipeline failed: {e}", metadata) from e

        metadata.total_results = len(flights)
        metadata.search_time_ms = self._elapsed_ms(start)
        response = SearchResponse(search_criteria=request, metadata=metadata, flights=flights)

        self._cache.store(key, response.model_copy(deep=True))
        logger.info(
            "Busca %s → %s em %s: %d oferta(s), %d/%d provedor(es) ok em %d ms",
            request.origin, request.destination, request.departure_date,
            metadata.total_results, metadata.providers_succeeded, queried, metadata.search_time_ms,
        )
        return response

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.perf_counter() - start) * 1000)
