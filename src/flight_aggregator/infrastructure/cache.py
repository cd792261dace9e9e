"""
Cache em memória com TTL fixo e capacidade limitada (despejo FIFO)
"""
import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, NamedTuple, Optional, Tuple

from ..application.interfaces import SearchCacheInterface
from ..domain.models import SearchRequest

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    value: Any
    expires_at: float


def build_cache_key(request: SearchRequest) -> str:
    """Chave canônica: hash de todos os campos da requisição, ausentes incluídos"""
    payload = json.dumps(
        request.model_dump(mode="json"),
        sort_keys=True,
        separators=(",", ":"),
    )
    return "search:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()


class SearchCache(SearchCacheInterface):
    """Cache de respostas de busca

    Leituras não usam lock; expurgo, despejo e inserção acontecem sob um
    único lock. Como o TTL é uniforme, a
    ordem de inserção é também a ordem de expiração.
    """

    def __init__(
        self,
        capacity: int = 1000,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._capacity = capacity
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._lock = threading.Lock()

    def lookup(self, key: str) -> Tuple[Optional[Any], bool]:
        """Retorna (valor, True) se houver entrada válida, senão (None, False)"""
        entry = self._entries.get(key)
        if entry is None:
            return None, False
        if self._clock() < entry.expires_at:
            return entry.value, True

        with self._lock:
            # outra tarefa pode ter regravado a chave nesse intervalo
            if self._entries.get(key) is entry:
                del self._entries[key]
        return None, False

    def store(self, key: str, value: Any) -> None:
        """Insere ou substitui, despejando a entrada mais antiga se necessário"""
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache cheio, despejando %s", evicted)
            self._entries[key] = _Entry(value, now + self._ttl)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _purge_expired(self, now: float) -> None:
        while self._entries:
            oldest_key = next(iter(self._entries))
            if self._entries[oldest_key].expires_at > now:
                break
            del self._entries[oldest_key]
