"""
Deadline - Prazo absoluto compartilhado pelas tarefas de uma busca
"""
import time
from typing import Callable


class Deadline:
    """Instante de expiração em relógio monotônico"""

    def __init__(self, expires_at: float, clock: Callable[[], float] = time.monotonic):
        self._expires_at = expires_at
        self._clock = clock

    @classmethod
    def after(cls, seconds: float, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        """Cria um prazo que expira daqui a `seconds` segundos"""
        return cls(clock() + seconds, clock)

    def remaining(self) -> float:
        """Segundos restantes (nunca negativo)"""
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining():.3f}s)"
