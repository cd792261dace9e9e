"""
Provider Gateway - Consulta concorrente aos provedores com retry e prazo
"""
import asyncio
import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from ..domain.deadline import Deadline
from ..domain.errors import SearchCancelledError
from ..domain.models import FlightOffer, SearchMetadata, SearchRequest
from .interfaces import FlightProviderInterface

logger = logging.getLogger(__name__)


class ProviderOutcome(BaseModel):
    """Resultado final de um provedor após as tentativas"""
    provider: str
    offers: List[FlightOffer] = Field(default_factory=list)
    error: Optional[str] = None
    attempts: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None


class GatewayResult(BaseModel):
    """Ofertas concatenadas e contagem de sucesso/falha"""
    offers: List[FlightOffer] = Field(default_factory=list)
    succeeded: int = 0
    failed: int = 0
    outcomes: List[ProviderOutcome] = Field(default_factory=list)


class ProviderGateway:
    """Dispara uma tarefa por provedor e aguarda todas (ou o prazo)"""

    def __init__(
        self,
        providers: Sequence[FlightProviderInterface],
        max_retries: int = 2,
        retry_backoff: float = 0.1,
        attempt_timeout: Optional[float] = None,
    ):
        self._providers = list(providers)
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff
        self._attempt_timeout = attempt_timeout

    @property
    def providers(self) -> List[FlightProviderInterface]:
        return list(self._providers)

    @property
    def provider_count(self) -> int:
        return len(self._providers)

    async def fetch_all(self, request: SearchRequest, deadline: Deadline) -> GatewayResult:
        """Consulta todos os provedores concorrentemente

        Cada tarefa devolve seu ProviderOutcome; as contagens são somadas só
        depois que todas terminam. Se o prazo expirar antes, as tarefas
        pendentes são canceladas e SearchCancelledError é levantada com as
        contagens acumuladas.
        """
        if not self._providers:
            return GatewayResult()

        tasks = [
            asyncio.create_task(
                self._fetch_with_retry(provider, request, deadline),
                name=f"provider:{provider.name}",
            )
            for provider in self._providers
        ]

        try:
            done, pending = await asyncio.wait(tasks, timeout=deadline.remaining())
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            succeeded = sum(1 for task in done if task.result().succeeded)
            failed = len(tasks) - succeeded
            logger.warning(
                "Prazo expirado com %d provedor(es) pendente(s): %d sucesso, %d falha",
                len(pending), succeeded, failed,
            )
            raise SearchCancelledError(
                "deadline exceeded while fetching from providers",
                SearchMetadata(
                    providers_queried=len(tasks),
                    providers_succeeded=succeeded,
                    providers_failed=failed,
                ),
            )

        # ordem de registro, não de conclusão
        outcomes = [task.result() for task in tasks]
        offers: List[FlightOffer] = []
        for outcome in outcomes:
            offers.extend(outcome.offers)

        succeeded = sum(1 for o in outcomes if o.succeeded)
        return GatewayResult(
            offers=offers,
            succeeded=succeeded,
            failed=len(outcomes) - succeeded,
            outcomes=outcomes,
        )

    async def _fetch_with_retry(
        self,
        provider: FlightProviderInterface,
        request: SearchRequest,
        deadline: Deadline,
    ) -> ProviderOutcome:
        """Executa até max_retries + 1 tentativas com espera crescente entre elas"""
        total_attempts = self._max_retries + 1
        last_error: Optional[Exception] = None
        attempt = 0

        while attempt < total_attempts:
            attempt += 1
            try:
                offers = await self._attempt(provider, request, deadline)
                return ProviderOutcome(provider=provider.name, offers=offers, attempts=attempt)
            except Exception as e:
                last_error = e
                logger.warning(
                    "Provedor %s falhou (tentativa %d/%d): %s",
                    provider.name, attempt, total_attempts, str(e) or type(e).__name__,
                )

            if attempt >= total_attempts or deadline.expired:
                break
            await asyncio.sleep(self._retry_backoff * attempt)

        logger.info("Provedor %s esgotou as tentativas", provider.name)
        return ProviderOutcome(
            provider=provider.name,
            error=str(last_error) or type(last_error).__name__,
            attempts=attempt,
        )

    async def _attempt(
        self,
        provider: FlightProviderInterface,
        request: SearchRequest,
        deadline: Deadline,
    ) -> List[FlightOffer]:
        if self._attempt_timeout is None:
            return await provider.fetch_offers(request, deadline)
        timeout = min(self._attempt_timeout, deadline.remaining())
        return await asyncio.wait_for(provider.fetch_offers(request, deadline), timeout=timeout)
