import asyncio
import itertools
from typing import List, Optional

import pytest

from flight_aggregator.domain.errors import ProviderError
from flight_aggregator.domain.models import (
    Airline,
    FlightDuration,
    FlightEvent,
    FlightOffer,
    Price,
    SearchRequest,
)

# 2025-12-15T00:00:00+07:00
BASE_TS = 1765731600

_ids = itertools.count(1)


def make_offer(
    flight_number: str = "GA400",
    price: int = 1_000_000,
    stops: int = 0,
    minutes: int = 110,
    dep_offset_min: int = 6 * 60,
    origin: str = "CGK",
    destination: str = "DPS",
    airline: str = "Garuda Indonesia",
    code: str = "GA",
    provider: str = "Test",
    arrival_ts: Optional[int] = None,
) -> FlightOffer:
    dep_ts = BASE_TS + dep_offset_min * 60
    arr_ts = arrival_ts if arrival_ts is not None else dep_ts + minutes * 60
    duration = FlightDuration.from_minutes(minutes) if minutes else FlightDuration()
    return FlightOffer(
        id=f"{flight_number}_{next(_ids)}",
        provider=provider,
        airline=Airline(name=airline, code=code),
        flight_number=flight_number,
        departure=FlightEvent(airport=origin, timestamp=dep_ts),
        arrival=FlightEvent(airport=destination, timestamp=arr_ts),
        duration=duration,
        stops=stops,
        price=Price(amount=price, currency="IDR"),
    )


def make_request(**overrides) -> SearchRequest:
    fields = {
        "origin": "CGK",
        "destination": "DPS",
        "departure_date": "2025-12-15",
        "passengers": 1,
        "cabin_class": "economy",
    }
    fields.update(overrides)
    return SearchRequest(**fields)


class StaticProvider:
    """Returns a fixed offer list, optionally after a delay"""

    def __init__(self, name: str, offers: List[FlightOffer], delay: float = 0.0):
        self.name = name
        self._offers = offers
        self._delay = delay
        self.calls = 0

    async def fetch_offers(self, request, deadline):
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        return [offer.model_copy(deep=True) for offer in self._offers]


class FlakyProvider(StaticProvider):
    """Fails the first `failures` calls, then succeeds"""

    def __init__(self, name: str, offers: List[FlightOffer], failures: int):
        super().__init__(name, offers)
        self._failures = failures

    async def fetch_offers(self, request, deadline):
        self.calls += 1
        if self.calls <= self._failures:
            raise ProviderError(f"{self.name} unavailable", provider=self.name, status_code=503)
        return [offer.model_copy(deep=True) for offer in self._offers]


class FailingProvider(StaticProvider):
    def __init__(self, name: str):
        super().__init__(name, [])

    async def fetch_offers(self, request, deadline):
        self.calls += 1
        raise ProviderError(f"{self.name} unavailable", provider=self.name, status_code=503)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def request_cgk_dps():
    return make_request()
