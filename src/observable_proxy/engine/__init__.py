"""Proxy synthesis engine: introspection, synthesis, interception and dispatch."""

from __future__ import annotations

from .cache import TypeCache
from .contracts import (
    MISSING,
    CarrierDescriptor,
    CarrierOrigin,
    Contract,
    ContractKind,
    PropertyDescriptor,
    PropertyPlan,
    StoragePolicy,
    SynthesizedType,
)
from .dispatch import CarrierLocator, DispatchHook, values_equal
from .errors import (
    GenerationError,
    HandlerInvocationError,
    ObservableProxyError,
    StartupError,
    UnsupportedContractError,
)
from .events import (
    EventHandlers,
    NotifyPropertyChanged,
    ObservableObject,
    PropertyChangedEvent,
    PropertyChangedHandler,
)
from .factory import ObservableFactory, create, get_factory, proxy_type, shutdown, startup
from .introspection import introspect, is_interface
from .synthesis import TypeSynthesizer, describe, is_proxy_type

__all__ = [  # noqa: RUF022
    # entry points
    "ObservableFactory",
    "create",
    "proxy_type",
    "get_factory",
    "startup",
    "shutdown",
    # carrier
    "PropertyChangedEvent",
    "PropertyChangedHandler",
    "EventHandlers",
    "NotifyPropertyChanged",
    "ObservableObject",
    # description
    "MISSING",
    "Contract",
    "ContractKind",
    "PropertyDescriptor",
    "CarrierDescriptor",
    "CarrierOrigin",
    "StoragePolicy",
    "PropertyPlan",
    "SynthesizedType",
    "introspect",
    "is_interface",
    "describe",
    "is_proxy_type",
    # machinery
    "TypeCache",
    "TypeSynthesizer",
    "DispatchHook",
    "CarrierLocator",
    "values_equal",
    # errors
    "ObservableProxyError",
    "UnsupportedContractError",
    "GenerationError",
    "HandlerInvocationError",
    "StartupError",
]
