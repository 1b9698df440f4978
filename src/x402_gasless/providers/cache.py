"""
Process-wide cache of per-network chain handles
"""

import logging
import threading
from typing import Callable, Dict, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderCache(Generic[T]):
    """
    Get-or-create cache keyed by network identifier.

    Entries are built lazily by *factory*, live for the life of the process
    and are never evicted. Construction happens under a lock, so concurrent
    callers for the same network all receive the first instance built, and a
    reader never observes a half-initialized entry.
    """

    def __init__(self, factory: Callable[[str], T]) -> None:
        self._factory = factory
        self._instances: Dict[str, T] = {}
        self._lock = threading.Lock()

    def get_or_create(self, network: str) -> T:
        instance = self._instances.get(network)
        if instance is not None:
            return instance

        with self._lock:
            instance = self._instances.get(network)
            if instance is None:
                instance = self._factory(network)
                self._instances[network] = instance
                logger.debug("Created chain provider for network %s", network)
        return instance

    def __contains__(self, network: object) -> bool:
        return network in self._instances

    def __len__(self) -> int:
        return len(self._instances)
