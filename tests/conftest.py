from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import pytest

import observable_proxy.engine.factory as factory_module
from observable_proxy.common import PACKAGE_LOGGER
from observable_proxy.config import ENV_PREFIX, ObservableConfig
from observable_proxy.engine import ObservableFactory
from tests.support.recording import ChangeRecorder

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    # Fresh default factory, type cache and hook for every test.
    monkeypatch.setattr(factory_module, "_STATE", factory_module._FactoryState())  # noqa: SLF001


@pytest.fixture
def factory() -> ObservableFactory:
    return ObservableFactory(ObservableConfig())


@pytest.fixture
def recorder() -> ChangeRecorder:
    return ChangeRecorder()


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = logger.level
    try:
        yield logger
    finally:
        logger.setLevel(level)
