"""Change dispatch shared by every synthesized setter."""

from __future__ import annotations

import threading
from logging import getLogger
from typing import Any

from .contracts import MISSING
from .errors import HandlerInvocationError
from .events import PropertyChangedEvent

log = getLogger(__name__)


def values_equal(previous: object, current: object) -> bool:
    """Value equality with ``None`` equal only to ``None`` and ``MISSING`` only to itself."""

    if previous is current:
        return True
    if previous is None or current is None or previous is MISSING or current is MISSING:
        return False
    return bool(previous == current)


class CarrierLocator:
    """Memoised lookup of the property-changed carrier of a concrete type."""

    def __init__(self) -> None:
        self._carriers: dict[type, PropertyChangedEvent | None] = {}
        self._lock = threading.Lock()

    def locate(self, cls: type) -> PropertyChangedEvent | None:
        try:
            return self._carriers[cls]
        except KeyError:
            pass
        carrier = self._search(cls)
        with self._lock:
            return self._carriers.setdefault(cls, carrier)

    def __len__(self) -> int:
        return len(self._carriers)

    @staticmethod
    def _search(cls: type) -> PropertyChangedEvent | None:
        for owner in cls.__mro__:
            for member in vars(owner).values():
                if isinstance(member, PropertyChangedEvent):
                    return member
        return None


class DispatchHook:
    """Notify subscribers of ``instance`` when a write changed a property's value.

    Handlers run synchronously in registration order. The first failing handler stops the
    dispatch; its exception reaches the code that performed the write, which has already
    been committed.
    """

    def __init__(
        self,
        *,
        wrap_handler_errors: bool = False,
        locator: CarrierLocator | None = None,
    ) -> None:
        self.wrap_handler_errors = wrap_handler_errors
        self.locator = CarrierLocator() if locator is None else locator

    def __call__(self, instance: Any, property_name: str, previous: Any, current: Any) -> None:
        if values_equal(previous, current):
            return

        carrier = self.locator.locate(type(instance))
        if carrier is None:
            log.debug("No property-changed carrier on %s", type(instance).__qualname__)
            return

        handlers = carrier.handlers(instance)
        if not handlers:
            return

        for handler in handlers:
            try:
                handler(instance, property_name)
            except Exception as exc:
                if self.wrap_handler_errors:
                    raise HandlerInvocationError(
                        f"handler {handler!r} failed for property {property_name!r}: {exc}",
                        property_name=property_name,
                        handler=handler,
                    ) from exc
                exc.add_note(f"raised by change handler for property {property_name!r}")
                raise
