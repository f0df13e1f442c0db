from __future__ import annotations

import pytest

from observable_proxy.config import ObservableConfig
from observable_proxy.engine import (
    MISSING,
    CarrierLocator,
    DispatchHook,
    HandlerInvocationError,
    ObservableFactory,
    ObservableObject,
    values_equal,
)
from tests.support.contracts import Foo, NoCarrier, Person, Point
from tests.support.recording import ChangeRecorder


@pytest.mark.parametrize(
    ("previous", "current", "expected"),
    [
        (None, None, True),
        (None, "", False),
        ("", None, False),
        ("x", "x", True),
        (1, 1.0, True),
        ([1, 2], [1, 2], True),
        (MISSING, None, False),
        (MISSING, MISSING, True),
        (float("nan"), float("nan"), False),
    ],
)
def test_values_equal(previous: object, current: object, expected: bool) -> None:
    assert values_equal(previous, current) is expected


def test_same_nan_object_is_equal() -> None:
    value = float("nan")

    assert values_equal(value, value)


def test_handlers_run_in_registration_order(factory: ObservableFactory) -> None:
    proxy = factory.create(Foo)
    calls: list[str] = []
    proxy.property_changed += lambda sender, name: calls.append(f"first:{name}")
    proxy.property_changed += lambda sender, name: calls.append(f"second:{name}")

    proxy.x = "value"

    assert calls == ["first:x", "second:x"]


def test_failing_handler_propagates_and_skips_the_rest(factory: ObservableFactory) -> None:
    proxy = factory.create(Foo)
    after = ChangeRecorder()

    def fail(sender: object, name: str) -> None:
        raise LookupError(f"cannot handle {name}")

    proxy.property_changed += fail
    proxy.property_changed += after

    with pytest.raises(LookupError, match="cannot handle x") as exc:
        proxy.x = "committed"

    assert proxy.x == "committed"
    assert after.changes == []
    assert any("'x'" in note for note in exc.value.__notes__)


def test_failing_handler_can_be_wrapped() -> None:
    factory = ObservableFactory(ObservableConfig(wrap_handler_errors=True))
    proxy = factory.create(Foo)

    def fail(sender: object, name: str) -> None:
        raise LookupError("nope")

    proxy.property_changed += fail

    with pytest.raises(HandlerInvocationError) as exc:
        proxy.y = "committed"

    assert exc.value.property_name == "y"
    assert exc.value.handler is fail
    assert isinstance(exc.value.__cause__, LookupError)
    assert proxy.y == "committed"


def test_dispatch_uses_a_snapshot_of_handlers(factory: ObservableFactory) -> None:
    proxy = factory.create(Point)
    late = ChangeRecorder()

    def subscribe_late(sender: Point, name: str) -> None:
        sender.property_changed += late

    proxy.property_changed += subscribe_late
    proxy.x = 1
    assert late.changes == []

    proxy.y = 2
    assert late.names == ["y"]


def test_no_handlers_is_a_no_op(factory: ObservableFactory) -> None:
    proxy = factory.create(Person)

    proxy.name = "nobody listens"

    assert proxy.name == "nobody listens"


def test_hook_ignores_types_without_carrier() -> None:
    hook = DispatchHook()

    hook(NoCarrier(), "value", 0, 1)

    assert hook.locator.locate(NoCarrier) is None


def test_carrier_lookup_is_memoised_per_type(factory: ObservableFactory) -> None:
    locator = factory.hook.locator
    foo = factory.create(Foo)
    person = factory.create(Person)
    foo.property_changed += ChangeRecorder()
    person.property_changed += ChangeRecorder()

    foo.x = "a"
    foo.x = "b"
    person.name = "c"

    assert len(locator) == 2
    assert locator.locate(type(foo)) is Foo.property_changed
    assert locator.locate(type(person)) is vars(type(person))["property_changed"]


def test_locator_finds_nearest_carrier() -> None:
    locator = CarrierLocator()

    assert locator.locate(Foo) is vars(ObservableObject)["property_changed"]
