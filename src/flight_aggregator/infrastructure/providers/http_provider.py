"""
Provedor HTTP genérico (ofertas já no formato canônico)
"""
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from ...domain.deadline import Deadline
from ...domain.errors import ProviderError
from ...domain.models import FlightOffer, SearchRequest
from ..config import Config

logger = logging.getLogger(__name__)


class HttpFlightProvider:
    """Provedor de voos via endpoint HTTP configurado em HTTP_SOURCES"""

    def __init__(
        self,
        name: str,
        base_url: str,
        config: Optional[Config] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.name = name
        self._config = config or Config()
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    async def fetch_offers(self, request: SearchRequest, deadline: Deadline) -> List[FlightOffer]:
        """Busca ofertas no endpoint /flights"""
        timeout = min(self._config.REQUEST_TIMEOUT, deadline.remaining())

        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            try:
                response = await client.get(
                    f"{self._base_url}/flights",
                    params=self._build_search_params(request),
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                raise ProviderError(
                    f"{self.name} returned HTTP {e.response.status_code}",
                    provider=self.name,
                    status_code=e.response.status_code,
                ) from e
            except (httpx.HTTPError, ValueError) as e:
                raise ProviderError(f"{self.name} request failed: {e}", provider=self.name) from e

        if not isinstance(data, dict):
            raise ProviderError(f"{self.name} returned an unexpected payload", provider=self.name)
        return self._parse_response(data)

    def _build_search_params(self, request: SearchRequest) -> dict:
        """Constrói parâmetros da requisição"""
        params = {
            "origin": request.origin,
            "destination": request.destination,
            "date": request.departure_date,
            "passengers": request.passengers,
            "cabin_class": request.cabin_class,
        }
        if request.return_date:
            params["return_date"] = request.return_date
        return params

    def _parse_response(self, data: dict) -> List[FlightOffer]:
        """Converte resposta da API em ofertas"""
        offers = []
        for item in data.get("flights", []):
            try:
                item = {**item, "provider": self.name}
                offers.append(FlightOffer.model_validate(item))
            except ValidationError as e:
                logger.debug("Oferta inválida de %s ignorada: %s", self.name, e)
        return offers
