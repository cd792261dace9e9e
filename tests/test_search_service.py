from typing import List

import pytest

from flight_aggregator.application.gateway import ProviderGateway
from flight_aggregator.application.interfaces import ScoringServiceInterface
from flight_aggregator.application.pipeline import MergePipeline
from flight_aggregator.application.services import FlightSearchService
from flight_aggregator.domain.deadline import Deadline
from flight_aggregator.domain.errors import PipelineError, SearchCancelledError
from flight_aggregator.domain.models import FlightOffer
from flight_aggregator.infrastructure.cache import SearchCache, build_cache_key
from flight_aggregator.infrastructure.factory import FlightSearchServiceFactory
from flight_aggregator.infrastructure.providers import (
    AirAsiaProvider,
    BatikAirProvider,
    GarudaIndonesiaProvider,
    LionAirProvider,
)
from flight_aggregator.infrastructure.ranking.scoring_service import BestValueScoringService

from conftest import FailingProvider, StaticProvider, make_offer, make_request


def fixture_providers():
    return [
        GarudaIndonesiaProvider(simulate_latency=False),
        AirAsiaProvider(simulate_latency=False, failure_rate=0.0),
        LionAirProvider(simulate_latency=False),
        BatikAirProvider(simulate_latency=False),
    ]


@pytest.fixture
def cache():
    return SearchCache(capacity=100, ttl_seconds=300)


@pytest.fixture
def service(cache):
    return FlightSearchServiceFactory.create(providers=fixture_providers(), cache=cache)


@pytest.mark.asyncio
async def test_end_to_end_search(service, cache):
    response = await service.search(make_request(), Deadline.after(2))

    metadata = response.metadata
    assert metadata.providers_queried == 4
    assert metadata.providers_succeeded == 4
    assert metadata.providers_failed == 0
    assert metadata.cache_hit is False
    assert metadata.total_results == len(response.flights) == 14
    assert all(o.departure.airport == "CGK" and o.arrival.airport == "DPS" for o in response.flights)

    keys = [(o.flight_number, o.departure.timestamp) for o in response.flights]
    assert len(keys) == len(set(keys))
    codeshare = next(o for o in response.flights if o.flight_number == "ID6514")
    assert codeshare.price.amount == 1_100_000
    assert codeshare.provider == "Batik Air"

    scores = [o.best_value_score for o in response.flights]
    assert scores == sorted(scores)
    assert response.best_offer.flight_number == "QZ7532"
    filled = next(o for o in response.flights if o.flight_number == "QZ7250")
    assert filled.duration.formatted == "4h 50m"
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_repeated_search_is_served_from_cache(service):
    first = await service.search(make_request(), Deadline.after(2))
    second = await service.search(make_request(), Deadline.after(2))

    assert second.metadata.cache_hit is True
    assert second.metadata.total_results == first.metadata.total_results
    assert second.flights == first.flights


@pytest.mark.asyncio
async def test_mutating_a_response_does_not_touch_the_cache(service):
    first = await service.search(make_request(), Deadline.after(2))
    first.flights.clear()
    first.metadata.total_results = 0

    second = await service.search(make_request(), Deadline.after(2))

    assert second.metadata.total_results == 14
    assert len(second.flights) == 14


@pytest.mark.asyncio
async def test_expired_deadline_cancels_without_caching(service, cache):
    with pytest.raises(SearchCancelledError) as exc_info:
        await service.search(make_request(), Deadline.after(0))

    metadata = exc_info.value.metadata
    assert metadata.providers_queried == 4
    assert metadata.providers_succeeded == 0
    assert metadata.providers_failed == 4
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_cached_result_is_returned_even_after_deadline(service):
    await service.search(make_request(), Deadline.after(2))

    response = await service.search(make_request(), Deadline.after(0))

    assert response.metadata.cache_hit is True


@pytest.mark.asyncio
async def test_deadline_during_fetch_cancels_search(cache):
    providers = [StaticProvider("Fast", [make_offer("GA400")]), StaticProvider("Slow", [], delay=5)]
    service = FlightSearchServiceFactory.create(providers=providers, cache=cache)

    with pytest.raises(SearchCancelledError) as exc_info:
        await service.search(make_request(), Deadline.after(0.1))

    assert exc_info.value.metadata.providers_succeeded == 1
    assert exc_info.value.metadata.providers_failed == 1
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_filters_are_applied_end_to_end(service):
    request = make_request(
        min_price=1_000_000,
        max_stops=0,
        airlines=["Garuda Indonesia"],
        min_duration_minutes=100,
        max_duration_minutes=200,
    )

    response = await service.search(request, Deadline.after(2))

    assert sorted(o.flight_number for o in response.flights) == ["GA400", "GA410"]
    for offer in response.flights:
        assert offer.price.amount >= 1_000_000
        assert offer.stops == 0
        assert offer.airline.name == "Garuda Indonesia"
        assert 100 <= offer.duration.total_minutes <= 200


@pytest.mark.asyncio
async def test_sort_directive_overrides_rank(service):
    response = await service.search(make_request(sort_by="price_desc"), Deadline.after(2))

    prices = [o.price.amount for o in response.flights]
    assert prices == sorted(prices, reverse=True)
    assert response.cheapest_offer.price.amount == min(prices)


@pytest.mark.asyncio
async def test_all_providers_failing_is_an_empty_success(cache):
    providers = [FailingProvider(f"Down{i}") for i in range(4)]
    gateway = ProviderGateway(providers, retry_backoff=0)
    service = FlightSearchService(gateway, cache, MergePipeline(BestValueScoringService()), build_cache_key)

    response = await service.search(make_request(), Deadline.after(2))

    assert response.flights == []
    assert response.metadata.providers_failed == 4
    assert response.metadata.providers_succeeded == 0
    assert response.metadata.total_results == 0


class _BrokenScoring(ScoringServiceInterface):
    def score_offers(self, offers: List[FlightOffer]) -> List[FlightOffer]:
        if offers:
            raise RuntimeError("scoring backend unavailable")
        return offers


@pytest.mark.asyncio
async def test_pipeline_failure_is_reported_and_not_cached(cache):
    gateway = ProviderGateway([StaticProvider("Garuda", [make_offer("GA400")])], retry_backoff=0)
    service = FlightSearchService(gateway, cache, MergePipeline(_BrokenScoring()), build_cache_key)

    with pytest.raises(PipelineError) as exc_info:
        await service.search(make_request(), Deadline.after(2))

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert exc_info.value.metadata.providers_succeeded == 1
    assert len(cache) == 0

