"""
Configuração da aplicação
"""
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    return float(raw)


def parse_http_sources(raw: str) -> Dict[str, str]:
    """Converte "nome=url,nome2=url2" em dicionário"""
    sources: Dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, url = item.partition("=")
        if not sep or not name.strip() or not url.strip():
            raise ValueError(f"Invalid HTTP_SOURCES entry: {item!r} (expected name=url)")
        sources[name.strip()] = url.strip()
    return sources


class Config:
    """Configuração centralizada"""

    # Cache
    CACHE_CAPACITY = int(os.getenv("CACHE_CAPACITY", "1000"))
    CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "300"))

    # Busca
    SEARCH_TIMEOUT = float(os.getenv("SEARCH_TIMEOUT", "2.0"))
    PROVIDER_MAX_RETRIES = int(os.getenv("PROVIDER_MAX_RETRIES", "2"))
    PROVIDER_RETRY_BACKOFF_MS = int(os.getenv("PROVIDER_RETRY_BACKOFF_MS", "100"))
    PROVIDER_ATTEMPT_TIMEOUT = _optional_float(os.getenv("PROVIDER_ATTEMPT_TIMEOUT"))

    # Provedores simulados
    SIMULATE_LATENCY = os.getenv("SIMULATE_LATENCY", "true").lower() == "true"
    SIMULATED_FAILURE_RATE = float(os.getenv("SIMULATED_FAILURE_RATE", "0.1"))
    MOCK_DATA_DIR = Path(os.getenv("MOCK_DATA_DIR") or Path(__file__).parent / "providers" / "mock_data")

    # Provedores HTTP
    HTTP_SOURCES = os.getenv("HTTP_SOURCES", "")
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

    # Defaults
    DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "IDR")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def retry_backoff_seconds(self) -> float:
        return self.PROVIDER_RETRY_BACKOFF_MS / 1000.0

    def http_sources(self) -> Dict[str, str]:
        return parse_http_sources(self.HTTP_SOURCES)

    def is_http_configured(self) -> bool:
        return bool(self.http_sources())
