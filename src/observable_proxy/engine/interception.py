"""Per-property write interception.

Every synthesized setter follows the same protocol: read the previous value through the
setter's storage, commit the new value, then hand ``(instance, name, previous, value)`` to
the dispatch hook. Getters are plain reads and are never intercepted.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

from .contracts import MISSING, PropertyPlan, StoragePolicy

if TYPE_CHECKING:
    from .contracts import Getter, PropertyDescriptor, Setter

ChangeCallback: TypeAlias = Callable[[Any, str, Any, Any], None]

BACKING_FIELD_PREFIX = "_observed_"


def backing_field_name(property_name: str) -> str:
    return f"{BACKING_FIELD_PREFIX}{property_name}"


def field_reader(field: str) -> Getter:
    def read(instance: Any) -> Any:
        return getattr(instance, field)

    return read


def field_writer(field: str) -> Setter:
    def write(instance: Any, value: Any) -> None:
        instance.__dict__[field] = value

    return write


def read_previous(read: Getter | None, instance: Any) -> Any:
    """Current stored value, or ``MISSING`` when there is nothing to compare against."""

    if read is None:
        return MISSING
    try:
        return read(instance)
    except AttributeError:
        # Base storage not assigned yet (unset slot, attribute created by the setter).
        return MISSING


def intercept(name: str, read: Getter | None, write: Setter, hook: ChangeCallback) -> Setter:
    """Wrap ``write`` in the capture/commit/dispatch protocol."""

    def setter(instance: Any, value: Any) -> None:
        previous = read_previous(read, instance)
        write(instance, value)
        hook(instance, name, previous, value)

    setter.__name__ = name
    return setter


def build_property(
    descriptor: PropertyDescriptor,
    hook: ChangeCallback,
) -> tuple[property, PropertyPlan]:
    """Build the synthesized property for ``descriptor`` and record its storage plan."""

    name = descriptor.name
    field = backing_field_name(name)
    uses_field = False

    fget: Getter | None = None
    getter_policy: StoragePolicy | None = None
    if descriptor.gettable:
        getter_policy = descriptor.getter_policy
        if getter_policy is StoragePolicy.DELEGATE_TO_BASE:
            fget = descriptor.base_getter
        else:
            fget = field_reader(field)
            uses_field = True

    fset: Setter | None = None
    setter_policy: StoragePolicy | None = None
    if descriptor.settable:
        setter_policy = descriptor.setter_policy
        if descriptor.base_setter is not None:
            fset = intercept(name, descriptor.base_getter, descriptor.base_setter, hook)
        else:
            fset = intercept(name, field_reader(field), field_writer(field), hook)
            uses_field = True

    plan = PropertyPlan(
        name=name,
        getter_policy=getter_policy,
        setter_policy=setter_policy,
        backing_field=field if uses_field else None,
    )
    return property(fget, fset, doc=f"Observable property {name!r}."), plan
