"""
Interfaces/Contratos para Application Layer
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Protocol, Tuple

from ..domain.deadline import Deadline
from ..domain.models import FlightOffer, SearchRequest, SearchResponse


class FlightProviderInterface(Protocol):
    """Interface para provedores de voo"""
    name: str

    async def fetch_offers(self, request: SearchRequest, deadline: Deadline) -> List[FlightOffer]:
        """Busca ofertas de voo; levanta exceção em caso de falha"""
        ...


class ScoringServiceInterface(ABC):
    """Interface para serviço de pontuação de ofertas"""

    @abstractmethod
    def score_offers(self, offers: List[FlightOffer]) -> List[FlightOffer]:
        """Pontua e ordena ofertas por valor"""
        pass


class SearchCacheInterface(ABC):
    """Interface para cache de respostas de busca"""

    @abstractmethod
    def lookup(self, key: str) -> Tuple[Optional[SearchResponse], bool]:
        """Retorna (valor, encontrado)"""
        pass

    @abstractmethod
    def store(self, key: str, value: SearchResponse) -> None:
        """Armazena o valor com o TTL do cache"""
        pass
