from .airline_providers import (
    AirAsiaProvider,
    BatikAirProvider,
    GarudaIndonesiaProvider,
    LionAirProvider,
)
from .http_provider import HttpFlightProvider

__all__ = [
    "AirAsiaProvider",
    "BatikAirProvider",
    "GarudaIndonesiaProvider",
    "LionAirProvider",
    "HttpFlightProvider",
]
