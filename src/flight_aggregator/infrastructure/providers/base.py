"""
Base Provider - Template Method Pattern para provedores com dados locais
"""
import asyncio
import json
import random
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ...domain.deadline import Deadline
from ...domain.errors import ProviderError
from ...domain.models import FlightOffer, SearchRequest
from ..config import Config


def parse_timestamp(value: str) -> int:
    """ISO datetime com offset → epoch-seconds (0 se ausente ou inválido)"""
    if not value:
        return 0
    try:
        return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp())
    except ValueError:
        return 0


class FixtureFlightProvider(ABC):
    """Provedor que simula uma API lendo respostas gravadas em JSON"""

    name: str = ""
    fixture_name: str = ""
    id_suffix: str = ""
    latency_ms: Tuple[int, int] = (50, 100)
    failure_rate: float = 0.0

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        data_dir: Optional[Path] = None,
        latency_ms: Optional[Tuple[int, int]] = None,
        failure_rate: Optional[float] = None,
        simulate_latency: Optional[bool] = None,
        rng: Optional[random.Random] = None,
    ):
        config = config or Config()
        self._data_dir = Path(data_dir or config.MOCK_DATA_DIR)
        self._currency = config.DEFAULT_CURRENCY
        self._simulate_latency = config.SIMULATE_LATENCY if simulate_latency is None else simulate_latency
        if latency_ms is not None:
            self.latency_ms = latency_ms
        if failure_rate is not None:
            self.failure_rate = failure_rate
        self._rng = rng or random.Random()

    async def fetch_offers(self, request: SearchRequest, deadline: Deadline) -> List[FlightOffer]:
        """Template method: latência → falha simulada → leitura → conversão"""
        await self._simulate_delay()

        if self.failure_rate and self._rng.random() < self.failure_rate:
            raise ProviderError(f"{self.name} API Service Unavailable (503)", provider=self.name, status_code=503)

        raw_data = await asyncio.to_thread(self._load_fixture)
        return self._parse_response(raw_data, request)

    async def _simulate_delay(self) -> None:
        """Espera de rede simulada; cancelável pelo gateway"""
        if not self._simulate_latency:
            return
        low, high = self.latency_ms
        await asyncio.sleep(self._rng.uniform(low, high) / 1000.0)

    def _load_fixture(self) -> Dict[str, Any]:
        path = self._data_dir / self.fixture_name
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ProviderError(f"Could not read {path}: {e}", provider=self.name) from e

    def _parse_response(self, raw_data: Dict[str, Any], request: SearchRequest) -> List[FlightOffer]:
        """Converte os registros brutos em ofertas"""
        return [self._parse_flight(item, request) for item in raw_data.get("flights", [])]

    @abstractmethod
    def _parse_flight(self, item: Dict[str, Any], request: SearchRequest) -> FlightOffer:
        """Converte um registro no formato do provedor"""
        pass
