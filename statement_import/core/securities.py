"""
Security registry collaborator.

The engine only asks for securities; it never owns their identity.
"""
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from statement_import.common.logging_config import get_logger
from statement_import.common.models import SecurityRef

logger = get_logger(__name__)

_SECURITY_NAMESPACE = uuid.UUID('6f1c1f5e-3c55-4a57-9a1e-2f0b6c1d8e11')


class SecurityRegistry(ABC):
    """get_or_create must be idempotent per (ticker, name) and safe to call concurrently."""

    @abstractmethod
    def get_or_create(self, ticker: str, name: str) -> SecurityRef:
        pass


class InMemorySecurityRegistry(SecurityRegistry):
    """
    Process-local registry.

    Calls for the same (ticker, name) are serialized by a per-key lock so that
    parallel extractions never create two entries for one instrument. Ids are
    derived from the key, so repeated runs hand out the same SecurityRef.
    """

    def __init__(self):
        self._securities: Dict[Tuple[str, str], SecurityRef] = {}
        self._locks: Dict[Tuple[str, str], threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: Tuple[str, str]) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())

    def get_or_create(self, ticker: str, name: str) -> SecurityRef:
        key = (ticker, name)
        with self._lock_for(key):
            security = self._securities.get(key)
            if security is None:
                security = SecurityRef(
                    ticker=ticker,
                    name=name,
                    uuid=str(uuid.uuid5(_SECURITY_NAMESPACE, f"{ticker}|{name}")),
                )
                self._securities[key] = security
                logger.debug(f"Created security {ticker}", ticker=ticker, security_name=name)
            return security

    def all(self) -> List[SecurityRef]:
        with self._guard:
            return list(self._securities.values())

    def __len__(self):
        return len(self._securities)
