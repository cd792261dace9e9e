"""
Domain Errors - Falhas de provedor e de busca
"""
from typing import Optional

from .models import SearchMetadata


class ProviderError(Exception):
    """Falha de um único provedor (absorvida pelo gateway)"""

    def __init__(self, message: str, provider: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class FlightSearchError(Exception):
    """Falha da busca como um todo, com os metadados coletados até o momento"""

    def __init__(self, message: str, metadata: Optional[SearchMetadata] = None):
        super().__init__(message)
        self.metadata = metadata or SearchMetadata()


class SearchCancelledError(FlightSearchError):
    """Prazo da busca expirou antes ou durante a consulta aos provedores"""


class PipelineError(FlightSearchError):
    """Um estágio do pipeline de merge não conseguiu concluir"""
