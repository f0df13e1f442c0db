"""Observable proxies: synthesized types that report genuine property changes."""

from __future__ import annotations

from importlib import metadata

from observable_proxy.engine import (
    GenerationError,
    HandlerInvocationError,
    NotifyPropertyChanged,
    ObservableFactory,
    ObservableObject,
    ObservableProxyError,
    PropertyChangedEvent,
    UnsupportedContractError,
    create,
    describe,
    is_proxy_type,
    proxy_type,
)

try:
    __version__ = metadata.version("observable-proxy")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"

__all__ = [
    "GenerationError",
    "HandlerInvocationError",
    "NotifyPropertyChanged",
    "ObservableFactory",
    "ObservableObject",
    "ObservableProxyError",
    "PropertyChangedEvent",
    "UnsupportedContractError",
    "__version__",
    "create",
    "describe",
    "is_proxy_type",
    "proxy_type",
]
