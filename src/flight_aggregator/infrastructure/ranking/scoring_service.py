"""
Serviço de pontuação "melhor custo-benefício"
"""
import numpy as np
from typing import List

from ...domain.models import FlightOffer
from ...application.interfaces import ScoringServiceInterface


class BestValueScoringService(ScoringServiceInterface):
    """Pontua ofertas por preço, paradas, duração e horário de partida (menor é melhor)"""

    STOP_WEIGHT = 100_000
    MINUTE_WEIGHT = 100
    SECONDS_PER_HOUR = 3600

    def score_offers(self, offers: List[FlightOffer]) -> List[FlightOffer]:
        """Calcula o score de cada oferta e ordena de forma estável (crescente)"""
        if not offers:
            return []

        scores = self.compute_scores(offers)
        for offer, score in zip(offers, scores):
            offer.best_value_score = int(score)

        order = np.argsort(scores, kind="stable")
        return [offers[i] for i in order]

    def compute_scores(self, offers: List[FlightOffer]) -> np.ndarray:
        """Score composto vetorizado"""
        prices = np.array([o.price.amount for o in offers], dtype=np.int64)
        stops = np.array([o.stops for o in offers], dtype=np.int64)
        minutes = np.array([o.duration.total_minutes for o in offers], dtype=np.int64)
        departures = np.array([o.departure.timestamp for o in offers], dtype=np.int64)

        return (
            prices
            + stops * self.STOP_WEIGHT
            + minutes * self.MINUTE_WEIGHT
            + departures // self.SECONDS_PER_HOUR
        )
