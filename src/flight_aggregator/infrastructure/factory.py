"""
Factory para criar instâncias configuradas dos serviços
"""
from typing import List, Optional

from .config import Config
from .cache import SearchCache, build_cache_key
from .providers import (
    AirAsiaProvider,
    BatikAirProvider,
    GarudaIndonesiaProvider,
    HttpFlightProvider,
    LionAirProvider,
)
from .ranking.scoring_service import BestValueScoringService
from ..application.gateway import ProviderGateway
from ..application.interfaces import FlightProviderInterface, ScoringServiceInterface
from ..application.pipeline import MergePipeline
from ..application.services import FlightSearchService


class FlightSearchServiceFactory:
    """Factory para criar o serviço de busca configurado"""

    @staticmethod
    def create(
        config: Optional[Config] = None,
        providers: Optional[List[FlightProviderInterface]] = None,
        cache: Optional[SearchCache] = None,
    ) -> FlightSearchService:
        """Cria uma instância completa do serviço de busca"""
        if config is None:
            config = Config()

        if providers is None:
            providers = FlightSearchServiceFactory._create_providers(config)

        gateway = ProviderGateway(
            providers,
            max_retries=config.PROVIDER_MAX_RETRIES,
            retry_backoff=config.retry_backoff_seconds,
            attempt_timeout=config.PROVIDER_ATTEMPT_TIMEOUT,
        )
        pipeline = MergePipeline(FlightSearchServiceFactory._create_scoring_service())
        if cache is None:
            cache = FlightSearchServiceFactory._create_cache(config)

        return FlightSearchService(
            gateway=gateway,
            cache=cache,
            pipeline=pipeline,
            cache_key_builder=build_cache_key,
            default_timeout=config.SEARCH_TIMEOUT,
        )

    @staticmethod
    def _create_providers(config: Config) -> List[FlightProviderInterface]:
        """Cria lista de provedores disponíveis"""
        providers: List[FlightProviderInterface] = [
            GarudaIndonesiaProvider(config),
            AirAsiaProvider(config, failure_rate=config.SIMULATED_FAILURE_RATE),
            LionAirProvider(config),
            BatikAirProvider(config),
        ]

        for name, url in config.http_sources().items():
            providers.append(HttpFlightProvider(name, url, config))

        return providers

    @staticmethod
    def _create_scoring_service() -> ScoringServiceInterface:
        """Cria serviço de pontuação"""
        return BestValueScoringService()

    @staticmethod
    def _create_cache(config: Config) -> SearchCache:
        """Cria o cache com capacidade e TTL configurados"""
        return SearchCache(capacity=config.CACHE_CAPACITY, ttl_seconds=config.CACHE_TTL_SECONDS)
