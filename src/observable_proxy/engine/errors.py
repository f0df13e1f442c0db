"""Error taxonomy for proxy synthesis and change dispatch."""

from __future__ import annotations


class ObservableProxyError(RuntimeError):
    """Base class for errors raised by the observable proxy engine."""


class UnsupportedContractError(ObservableProxyError):
    """Raised when a contract offers no usable or synthesizable notification carrier."""


class GenerationError(ObservableProxyError):
    """Raised when a proxy type cannot be synthesized for a contract."""


class HandlerInvocationError(ObservableProxyError):
    """Raised when a change handler fails and handler errors are configured to be wrapped."""

    def __init__(self, message: str, *, property_name: str, handler: object) -> None:
        super().__init__(message)
        self.property_name = property_name
        self.handler = handler


class StartupError(ObservableProxyError):
    """Raised when the default factory is started twice without ``force``."""
