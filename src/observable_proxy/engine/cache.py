"""Process-lifetime cache of synthesized proxy types."""

from __future__ import annotations

import threading
from collections.abc import Callable
from logging import getLogger
from typing import TypeAlias

log = getLogger(__name__)

TypeBuilder: TypeAlias = Callable[[type], type]


class TypeCache:
    """Append-only mapping from contract type to its synthesized proxy type.

    Hits are served without locking. A miss takes a lock owned by that contract, so
    concurrent first requests for the same contract run the builder once and all observe
    the same resulting type. A builder that raises leaves no entry behind.
    """

    def __init__(self) -> None:
        self._types: dict[type, type] = {}
        self._contract_locks: dict[type, threading.Lock] = {}
        self._lock = threading.Lock()

    def get(self, contract: type) -> type | None:
        return self._types.get(contract)

    def get_or_create(self, contract: type, build: TypeBuilder) -> type:
        cached = self._types.get(contract)
        if cached is not None:
            return cached

        with self._lock_for(contract):
            cached = self._types.get(contract)
            if cached is not None:
                return cached
            proxy_type = build(contract)
            with self._lock:
                self._types[contract] = proxy_type
                self._contract_locks.pop(contract, None)
            log.debug("Cached proxy type %s for %s", proxy_type.__name__, contract.__qualname__)
            return proxy_type

    def __contains__(self, contract: object) -> bool:
        return contract in self._types

    def __len__(self) -> int:
        return len(self._types)

    def _lock_for(self, contract: type) -> threading.Lock:
        with self._lock:
            return self._contract_locks.setdefault(contract, threading.Lock())
