"""Entry points for creating observable proxies."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from logging import getLogger
from typing import TypeVar, cast

from observable_proxy.common import configure_logging
from observable_proxy.config import ObservableConfig, get_observable_config

from .cache import TypeCache
from .dispatch import DispatchHook
from .errors import StartupError
from .introspection import introspect
from .synthesis import TypeSynthesizer

log = getLogger(__name__)

T = TypeVar("T")


class ObservableFactory:
    """Owns one type cache, one dispatch hook and the synthesizer that uses them."""

    def __init__(
        self,
        config: ObservableConfig | None = None,
        *,
        cache: TypeCache | None = None,
        hook: DispatchHook | None = None,
    ) -> None:
        self.config = config or ObservableConfig()
        self.cache = TypeCache() if cache is None else cache
        self.hook = hook or DispatchHook(wrap_handler_errors=self.config.wrap_handler_errors)
        self._synthesizer = TypeSynthesizer(self.hook, self.config)

    def proxy_type(self, contract: type[T]) -> type[T]:
        """Return the synthesized type for ``contract``, generating it on first use."""
        return cast("type[T]", self.cache.get_or_create(contract, self._build))

    def create(self, contract: type[T]) -> T:
        """Return a new, default-initialised proxy instance for ``contract``."""
        return self.proxy_type(contract)()

    def _build(self, contract: type) -> type:
        description = introspect(contract)
        return self._synthesizer.synthesize(description)


@dataclass(slots=True)
class _FactoryState:
    """Default-factory lifecycle.

    ``cache`` and ``hook`` live for the whole process: generated setters hold on to the
    hook, and a contract must map to the same type across restarts. A restart only swaps
    the factory and re-applies its dispatch policy to the shared hook.
    """

    factory: ObservableFactory | None = None
    cache: TypeCache = field(default_factory=TypeCache)
    hook: DispatchHook = field(default_factory=DispatchHook)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def build(self, config: ObservableConfig) -> ObservableFactory:
        self.hook.wrap_handler_errors = config.wrap_handler_errors
        configure_logging(level=config.log_level)
        return ObservableFactory(config, cache=self.cache, hook=self.hook)


_STATE = _FactoryState()


def startup(
    *,
    config: ObservableConfig | None = None,
    factory: ObservableFactory | None = None,
    force: bool = False,
) -> ObservableFactory:
    """Install the process-wide default factory.

    Without ``factory`` the new default shares the process type cache, so contracts
    synthesized before a restart keep their types. An explicit ``factory`` is installed
    as given.
    """

    with _STATE.lock:
        if _STATE.factory is not None and not force:
            raise StartupError(
                "Observable factory already initialised. Pass force=True to reconfigure."
            )
        _STATE.factory = factory or _STATE.build(config or get_observable_config())
        log.info("Observable factory started: %s", _STATE.factory.config)
        return _STATE.factory


def shutdown() -> None:
    """Drop the default factory; the next request starts a new one over the same cache."""

    with _STATE.lock:
        _STATE.factory = None
    log.info("Observable factory shut down")


def get_factory() -> ObservableFactory:
    """Return the default factory, starting it from the environment on first use."""

    with _STATE.lock:
        if _STATE.factory is None:
            _STATE.factory = _STATE.build(get_observable_config())
            log.info("Observable factory started: %s", _STATE.factory.config)
        return _STATE.factory


def proxy_type(contract: type[T]) -> type[T]:
    return get_factory().proxy_type(contract)


def create(contract: type[T]) -> T:
    """Create an observable instance of ``contract`` using the default factory."""
    return get_factory().create(contract)
