from __future__ import annotations

import threading
import time

import pytest

from observable_proxy.engine import GenerationError, ObservableFactory, TypeCache, is_proxy_type
from tests.support.contracts import Foo, NeedsArguments, Person, Point


def test_create_reuses_the_synthesized_type(factory: ObservableFactory) -> None:
    first = factory.create(Foo)
    second = factory.create(Foo)

    assert first is not second
    assert type(first) is type(second)
    assert type(first) is factory.proxy_type(Foo)
    assert isinstance(first, Foo)
    assert is_proxy_type(type(first))
    assert len(factory.cache) == 1


def test_each_contract_gets_its_own_type(factory: ObservableFactory) -> None:
    foo_type = factory.proxy_type(Foo)
    point_type = factory.proxy_type(Point)
    person_type = factory.proxy_type(Person)

    assert len({foo_type, point_type, person_type}) == 3
    assert len(factory.cache) == 3
    assert not is_proxy_type(Foo)


def test_concurrent_first_requests_share_one_type() -> None:
    factory = ObservableFactory()
    barrier = threading.Barrier(8)
    results: list[type] = []
    lock = threading.Lock()

    def request() -> None:
        barrier.wait()
        proxy_type = factory.proxy_type(Point)
        with lock:
            results.append(proxy_type)

    threads = [threading.Thread(target=request) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 8
    assert len(set(results)) == 1


def test_cache_runs_the_builder_once_under_contention() -> None:
    cache = TypeCache()
    calls: list[type] = []
    barrier = threading.Barrier(6)

    class Contract:
        pass

    def build(contract: type) -> type:
        calls.append(contract)
        time.sleep(0.05)
        return type("Built", (contract,), {})

    results: list[type] = []

    def request() -> None:
        barrier.wait()
        results.append(cache.get_or_create(Contract, build))

    threads = [threading.Thread(target=request) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert calls == [Contract]
    assert len(set(results)) == 1
    assert cache.get(Contract) is results[0]


def test_failed_builds_are_not_cached() -> None:
    cache = TypeCache()
    attempts: list[int] = []

    class Contract:
        pass

    def failing(contract: type) -> type:
        attempts.append(1)
        raise GenerationError("boom")

    for _ in range(2):
        with pytest.raises(GenerationError, match="boom"):
            cache.get_or_create(Contract, failing)

    assert attempts == [1, 1]
    assert Contract not in cache
    assert len(cache) == 0


def test_generation_failure_leaves_factory_cache_empty(factory: ObservableFactory) -> None:
    with pytest.raises(GenerationError, match="required parameters: value"):
        factory.create(NeedsArguments)

    assert NeedsArguments not in factory.cache


def test_separate_factories_keep_separate_caches() -> None:
    first = ObservableFactory()
    second = ObservableFactory()

    first_type = first.proxy_type(Point)

    assert first_type is not second.proxy_type(Point)
    assert first_type is first.proxy_type(Point)
