"""Property-changed notification carrier.

A :class:`PropertyChangedEvent` is a descriptor declared on a class. Each instance of that
class owns its own list of subscribed handlers, kept in the instance ``__dict__`` under a
private name derived from the attribute name. Reading the attribute from an instance returns
an :class:`EventHandlers` view exposing the subscribe/unsubscribe accessors::

    class Person(ObservableObject):
        name: str | None = None

    person = create(Person)
    person.property_changed += lambda sender, property_name: ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, overload, runtime_checkable

if TYPE_CHECKING:
    from typing import Self

PropertyChangedHandler: TypeAlias = Callable[[Any, str], None]


class PropertyChangedEvent:
    """Descriptor holding per-instance property-changed subscribers."""

    __slots__ = ("name", "storage_name")

    def __init__(self) -> None:
        self.name = ""
        self.storage_name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.storage_name = f"_{name}_handlers"

    @overload
    def __get__(self, instance: None, owner: type | None = None) -> Self: ...

    @overload
    def __get__(self, instance: object, owner: type | None = None) -> EventHandlers: ...

    def __get__(self, instance: object | None, owner: type | None = None) -> Self | EventHandlers:
        if instance is None:
            return self
        return EventHandlers(self, instance)

    def __set__(self, instance: object, value: object) -> None:
        # ``obj.event += handler`` rebinds the attribute to the view returned by __iadd__.
        if isinstance(value, EventHandlers) and value.event is self and value.owner is instance:
            return
        raise AttributeError(
            f"cannot assign to event {self.name!r}; use subscribe()/unsubscribe() or +=/-="
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def subscribe(self, instance: object, handler: PropertyChangedHandler) -> None:
        if not callable(handler):
            raise TypeError(f"handler must be callable, got {type(handler).__name__}")
        self._subscribers(instance).append(handler)

    def unsubscribe(self, instance: object, handler: PropertyChangedHandler) -> None:
        """Remove the most recent registration of ``handler``; unknown handlers are ignored."""
        subscribers = self._subscribers(instance)
        for index in range(len(subscribers) - 1, -1, -1):
            if subscribers[index] == handler:
                del subscribers[index]
                return

    def handlers(self, instance: object) -> tuple[PropertyChangedHandler, ...]:
        """Snapshot of the handlers currently registered on ``instance``."""
        return tuple(instance.__dict__.get(self.storage_name, ()))

    def _subscribers(self, instance: object) -> list[PropertyChangedHandler]:
        if not self.storage_name:
            raise TypeError("PropertyChangedEvent must be declared as a class attribute")
        return instance.__dict__.setdefault(self.storage_name, [])


class EventHandlers:
    """Instance-bound view of a :class:`PropertyChangedEvent`."""

    __slots__ = ("event", "owner")

    def __init__(self, event: PropertyChangedEvent, owner: object) -> None:
        self.event = event
        self.owner = owner

    def subscribe(self, handler: PropertyChangedHandler) -> PropertyChangedHandler:
        """Register ``handler``; returns it so this can be used as a decorator."""
        self.event.subscribe(self.owner, handler)
        return handler

    def unsubscribe(self, handler: PropertyChangedHandler) -> None:
        self.event.unsubscribe(self.owner, handler)

    def __iadd__(self, handler: PropertyChangedHandler) -> Self:
        self.subscribe(handler)
        return self

    def __isub__(self, handler: PropertyChangedHandler) -> Self:
        self.unsubscribe(handler)
        return self

    def __iter__(self) -> Iterator[PropertyChangedHandler]:
        return iter(self.event.handlers(self.owner))

    def __len__(self) -> int:
        return len(self.event.handlers(self.owner))

    def __contains__(self, handler: object) -> bool:
        return handler in self.event.handlers(self.owner)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.event.name!r} handlers={len(self)}>"


@runtime_checkable
class NotifyPropertyChanged(Protocol):
    """Interface declaring a ``property_changed`` event."""

    property_changed: PropertyChangedEvent


class ObservableObject:
    """Base class supplying a ``property_changed`` carrier to class contracts."""

    property_changed = PropertyChangedEvent()
