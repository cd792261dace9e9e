"""
Provedores das companhias aéreas (Garuda Indonesia, Lion Air, Batik Air, AirAsia)
"""
from typing import Any, Dict

from ...domain.models import (
    Airline,
    Baggage,
    FlightDuration,
    FlightEvent,
    FlightOffer,
    Price,
    SearchRequest,
)
from .base import FixtureFlightProvider, parse_timestamp


def _pieces(count: int) -> str:
    return f"{count} piece(s)"


class NestedFormatProvider(FixtureFlightProvider):
    """Formato aninhado compartilhado por Garuda, Lion Air e Batik Air"""

    def _parse_flight(self, item: Dict[str, Any], request: SearchRequest) -> FlightOffer:
        dep = item.get("departure", {})
        arr = item.get("arrival", {})
        baggage = item.get("baggage", {})
        flight_id = item["flight_id"]
        minutes = int(item.get("duration_minutes", 0))

        return FlightOffer(
            id=f"{flight_id}_{self.id_suffix}",
            provider=self.name,
            airline=Airline(name=item.get("airline", self.name), code=item.get("airline_code", "")),
            flight_number=flight_id,
            departure=FlightEvent(
                airport=dep.get("airport", ""),
                city=dep.get("city", ""),
                local_datetime=dep.get("time", ""),
                timestamp=parse_timestamp(dep.get("time", "")),
            ),
            arrival=FlightEvent(
                airport=arr.get("airport", ""),
                city=arr.get("city", ""),
                local_datetime=arr.get("time", ""),
                timestamp=parse_timestamp(arr.get("time", "")),
            ),
            duration=FlightDuration.from_minutes(minutes) if minutes else FlightDuration(),
            stops=int(item.get("stops", 0)),
            price=Price(amount=int(item["price"]["amount"]), currency=self._currency),
            available_seats=int(item.get("available_seats", 0)),
            cabin_class=item.get("cabin_class", request.cabin_class),
            aircraft=item.get("aircraft") or None,
            amenities=list(item.get("amenities", [])),
            baggage=Baggage(
                carry_on=_pieces(int(baggage.get("carry_on", 0))),
                checked=_pieces(int(baggage.get("checked", 0))),
            ),
        )


class GarudaIndonesiaProvider(NestedFormatProvider):
    """Garuda Indonesia"""
    name = "Garuda Indonesia"
    fixture_name = "garuda_indonesia_search_response.json"
    id_suffix = "Garuda"
    latency_ms = (50, 100)


class LionAirProvider(NestedFormatProvider):
    """Lion Air"""
    name = "Lion Air"
    fixture_name = "lion_air_search_response.json"
    id_suffix = "Lion"
    latency_ms = (100, 200)


class BatikAirProvider(NestedFormatProvider):
    """Batik Air"""
    name = "Batik Air"
    fixture_name = "batik_air_search_response.json"
    id_suffix = "Batik"
    latency_ms = (200, 400)


class AirAsiaProvider(FixtureFlightProvider):
    """AirAsia - formato plano e instabilidade simulada de 10%"""
    name = "AirAsia"
    fixture_name = "airasia_search_response.json"
    id_suffix = "AirAsia"
    latency_ms = (50, 150)
    failure_rate = 0.1

    def _parse_flight(self, item: Dict[str, Any], request: SearchRequest) -> FlightOffer:
        code = item["flight_code"]
        minutes = int(float(item.get("duration_hours", 0)) * 60)

        return FlightOffer(
            id=f"{code}_{self.id_suffix}",
            provider=self.name,
            airline=Airline(name="AirAsia", code=code.rstrip("0123456789")),
            flight_number=code,
            departure=FlightEvent(
                airport=item.get("from_airport", ""),
                local_datetime=item.get("depart_time", ""),
                timestamp=parse_timestamp(item.get("depart_time", "")),
            ),
            arrival=FlightEvent(
                airport=item.get("to_airport", ""),
                local_datetime=item.get("arrive_time", ""),
                timestamp=parse_timestamp(item.get("arrive_time", "")),
            ),
            duration=FlightDuration.from_minutes(minutes) if minutes else FlightDuration(),
            stops=0 if item.get("direct_flight", True) else 1,
            price=Price(amount=int(item["price_idr"]), currency=self._currency),
            available_seats=int(item.get("seats", 0)),
            cabin_class=item.get("cabin_class", request.cabin_class),
            amenities=list(item.get("amenities", [])),
            baggage=Baggage(carry_on="Included", checked=item.get("baggage_note", "")),
        )
