"""
Merge Pipeline - Filtro → Deduplicação → Duração → Ranking → Ordenação
"""
import logging
from typing import Callable, Dict, List, Tuple

from ..domain.models import FlightDuration, FlightOffer, SearchRequest, SortOption
from .interfaces import ScoringServiceInterface

logger = logging.getLogger(__name__)


# campo de ordenação e se é decrescente
SORT_KEYS: Dict[str, Tuple[Callable[[FlightOffer], int], bool]] = {
    SortOption.PRICE_ASC.value: (lambda o: o.price.amount, False),
    SortOption.PRICE_DESC.value: (lambda o: o.price.amount, True),
    SortOption.DURATION_ASC.value: (lambda o: o.duration.total_minutes, False),
    SortOption.DURATION_DESC.value: (lambda o: o.duration.total_minutes, True),
    SortOption.DEPARTURE_ASC.value: (lambda o: o.departure.timestamp, False),
    SortOption.DEPARTURE_DESC.value: (lambda o: o.departure.timestamp, True),
    SortOption.ARRIVAL_ASC.value: (lambda o: o.arrival.timestamp, False),
    SortOption.ARRIVAL_DESC.value: (lambda o: o.arrival.timestamp, True),
}


class MergePipeline:
    """Transforma ofertas brutas de vários provedores em uma lista canônica"""

    def __init__(self, scoring_service: ScoringServiceInterface):
        self._scoring_service = scoring_service

    def run(self, offers: List[FlightOffer], request: SearchRequest) -> List[FlightOffer]:
        """Aplica todos os estágios na ordem fixa sem alterar as ofertas recebidas"""
        filtered = self.filter_offers(offers, request)
        unique = [offer.model_copy(deep=True) for offer in self.deduplicate_offers(filtered)]
        self.fill_durations(unique)
        ranked = self.rank_offers(unique)
        return self.sort_offers(ranked, request.sort_by)

    def filter_offers(self, offers: List[FlightOffer], request: SearchRequest) -> List[FlightOffer]:
        """Mantém só a rota pedida e as ofertas que satisfazem todos os filtros presentes"""
        return [o for o in offers if self._matches(o, request)]

    def _matches(self, offer: FlightOffer, request: SearchRequest) -> bool:
        if offer.departure.airport != request.origin or offer.arrival.airport != request.destination:
            return False

        price = offer.price.amount
        if request.min_price is not None and price < request.min_price:
            return False
        if request.max_price is not None and price > request.max_price:
            return False

        if request.min_stops is not None and offer.stops < request.min_stops:
            return False
        if request.max_stops is not None and offer.stops > request.max_stops:
            return False

        if not _within_window(offer.departure.clock_time, request.departure_time_start, request.departure_time_end):
            return False
        if not _within_window(offer.arrival.clock_time, request.arrival_time_start, request.arrival_time_end):
            return False

        if request.airlines:
            if offer.airline.name not in request.airlines and offer.airline.code not in request.airlines:
                return False

        minutes = offer.duration.total_minutes
        if request.min_duration_minutes is not None and minutes < request.min_duration_minutes:
            return False
        if request.max_duration_minutes is not None and minutes > request.max_duration_minutes:
            return False

        return True

    def deduplicate_offers(self, offers: List[FlightOffer]) -> List[FlightOffer]:
        """Um voo por (número, partida): fica o menor preço, empate mantém o primeiro"""
        selected: Dict[Tuple[str, int], FlightOffer] = {}
        for offer in offers:
            key = (offer.flight_number, offer.departure.timestamp)
            current = selected.get(key)
            if current is None or offer.price.amount < current.price.amount:
                selected[key] = offer
        return list(selected.values())

    def fill_durations(self, offers: List[FlightOffer]) -> None:
        """Calcula a duração a partir dos horários quando o provedor não informou"""
        for offer in offers:
            dep = offer.departure.timestamp
            arr = offer.arrival.timestamp
            if offer.duration.total_minutes == 0 and dep > 0 and arr >= dep:
                offer.duration = FlightDuration.from_minutes((arr - dep) // 60)

    def rank_offers(self, offers: List[FlightOffer]) -> List[FlightOffer]:
        """Ordem padrão por melhor custo-benefício"""
        return self._scoring_service.score_offers(offers)

    def sort_offers(self, offers: List[FlightOffer], sort_by: str = None) -> List[FlightOffer]:
        """Sobrescreve a ordem do ranking quando há ordenação explícita reconhecida"""
        if not sort_by or len(offers) < 2:
            return offers

        spec = SORT_KEYS.get(sort_by)
        if spec is None:
            logger.debug("Ordenação desconhecida %r, mantendo ranking", sort_by)
            return offers

        key, descending = spec
        return sorted(offers, key=key, reverse=descending)


def _within_window(clock_time: str, start: str = None, end: str = None) -> bool:
    # janela só vale com início e fim informados
    if start is None or end is None:
        return True
    return start <= clock_time <= end
