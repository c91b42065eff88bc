"""
Process-wide get-or-create registry.

Ensures one shared instance per stable key (e.g. one ledger client per
ledger name) across warm invocations of the same process.
"""

import threading
from typing import Any, Callable, Dict, Optional


class ProviderRegistry:
    """
    Lazily constructs and caches one object per key.

    The factory runs at most once per key; concurrent lookups of the same
    key wait on a single lock.
    """

    def __init__(self) -> None:
        self._providers: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get_or_create(self, key: str, factory: Callable[[], Any]) -> Any:
        existing = self._providers.get(key)
        if existing is not None:
            return existing

        with self._lock:
            existing = self._providers.get(key)
            if existing is None:
                existing = factory()
                self._providers[key] = existing
            return existing

    def get(self, key: str) -> Optional[Any]:
        return self._providers.get(key)

    def reset(self) -> None:
        """Drop all providers, closing those that support it."""
        with self._lock:
            providers = list(self._providers.values())
            self._providers.clear()
        for provider in providers:
            close = getattr(provider, "close", None)
            if callable(close):
                close()


# Shared by the Lambda entry points
registry = ProviderRegistry()
