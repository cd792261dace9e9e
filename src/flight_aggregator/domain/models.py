"""
Domain Models - Entidades de negócio puras
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SortOption(str, Enum):
    """Ordenações explícitas reconhecidas"""
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    DURATION_ASC = "duration_asc"
    DURATION_DESC = "duration_desc"
    DEPARTURE_ASC = "departure_asc"
    DEPARTURE_DESC = "departure_desc"
    ARRIVAL_ASC = "arrival_asc"
    ARRIVAL_DESC = "arrival_desc"


class Airline(BaseModel):
    """Companhia aérea"""
    name: str
    code: str


class FlightEvent(BaseModel):
    """Partida ou chegada de um voo"""
    airport: str = Field(..., description="IATA código do aeroporto")
    city: str = ""
    local_datetime: str = Field("", description="ISO datetime local para exibição")
    timestamp: int = Field(0, description="Instante absoluto em epoch-seconds")

    @property
    def clock_time(self) -> str:
        """Horário local "HH:MM" no aeroporto"""
        if self.local_datetime:
            try:
                parsed = datetime.fromisoformat(self.local_datetime.replace("Z", "+00:00"))
                return parsed.strftime("%H:%M")
            except ValueError:
                pass
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).strftime("%H:%M")


class FlightDuration(BaseModel):
    """Duração total do voo"""
    total_minutes: int = 0
    formatted: str = ""

    @classmethod
    def from_minutes(cls, minutes: int) -> "FlightDuration":
        return cls(total_minutes=minutes, formatted=f"{minutes // 60}h {minutes % 60}m")


class Price(BaseModel):
    """Preço total da oferta"""
    amount: int
    currency: str = "IDR"


class Baggage(BaseModel):
    """Franquia de bagagem"""
    carry_on: str = ""
    checked: str = ""


class FlightOffer(BaseModel):
    """Oferta de voo completa"""
    id: str
    provider: str
    airline: Airline
    flight_number: str
    departure: FlightEvent
    arrival: FlightEvent
    duration: FlightDuration = Field(default_factory=FlightDuration)
    stops: int = Field(0, ge=0)
    price: Price
    available_seats: int = 0
    cabin_class: str = "economy"
    aircraft: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    baggage: Baggage = Field(default_factory=Baggage)
    best_value_score: Optional[int] = None

    @property
    def route_summary(self) -> str:
        """Resumo da rota"""
        return f"{self.departure.airport} → {self.arrival.airport}"


class SearchRequest(BaseModel):
    """Critérios de busca"""
    origin: str = Field(..., description="IATA origem")
    destination: str = Field(..., description="IATA destino")
    departure_date: str = Field(..., description="Data de partida (YYYY-MM-DD)")
    return_date: Optional[str] = None
    passengers: int = Field(default=1, ge=1, le=9)
    cabin_class: str = "economy"

    # Filtros avançados
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    min_stops: Optional[int] = Field(None, ge=0)
    max_stops: Optional[int] = Field(None, ge=0)
    departure_time_start: Optional[str] = Field(None, description="HH:MM")
    departure_time_end: Optional[str] = Field(None, description="HH:MM")
    arrival_time_start: Optional[str] = Field(None, description="HH:MM")
    arrival_time_end: Optional[str] = Field(None, description="HH:MM")
    airlines: Optional[List[str]] = None
    min_duration_minutes: Optional[int] = None
    max_duration_minutes: Optional[int] = None
    sort_by: Optional[str] = None

    @field_validator(
        "departure_time_start",
        "departure_time_end",
        "arrival_time_start",
        "arrival_time_end",
    )
    @classmethod
    def _clock_format(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            parsed = datetime.strptime(v, "%H:%M")
        except ValueError:
            raise ValueError(f"expected HH:MM, got {v!r}") from None
        # "9:05" e "09:05" precisam comparar igual na janela lexical
        return parsed.strftime("%H:%M")

    @field_validator("departure_date", "return_date")
    @classmethod
    def _iso_date(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            datetime.strptime(v, "%Y-%m-%d")
        return v


class SearchMetadata(BaseModel):
    """Metadados de execução da busca"""
    total_results: int = 0
    providers_queried: int = 0
    providers_succeeded: int = 0
    providers_failed: int = 0
    search_time_ms: int = 0
    cache_hit: bool = False


class SearchResponse(BaseModel):
    """Resultado de uma busca"""
    search_criteria: SearchRequest
    metadata: SearchMetadata
    flights: List[FlightOffer] = Field(default_factory=list)

    @property
    def best_offer(self) -> Optional[FlightOffer]:
        """Primeira oferta na ordem final"""
        return self.flights[0] if self.flights else None

    @property
    def cheapest_offer(self) -> Optional[FlightOffer]:
        """Oferta mais barata"""
        if not self.flights:
            return None
        return min(self.flights, key=lambda x: x.price.amount)
