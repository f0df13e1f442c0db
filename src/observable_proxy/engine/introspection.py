"""Contract introspection.

Turns a user type into a :class:`Contract`: the set of observable properties plus the
location of the property-changed carrier. Classes are read along their MRO; protocols are
read by a breadth-first walk over the protocol extension graph.
"""

from __future__ import annotations

import inspect
from collections import deque
from logging import getLogger
from types import FunctionType, MemberDescriptorType
from typing import TYPE_CHECKING, ClassVar, Final, Protocol, get_origin

from .contracts import (
    MISSING,
    CarrierDescriptor,
    CarrierOrigin,
    Contract,
    ContractKind,
    PropertyDescriptor,
)
from .errors import GenerationError, UnsupportedContractError
from .events import PropertyChangedEvent

if TYPE_CHECKING:
    from collections.abc import Iterator

log = getLogger(__name__)

_SKIPPED_QUALIFIERS: Final = ("ClassVar", "Final", "InitVar")
_NON_PROPERTY_TYPES: Final = (
    FunctionType,
    classmethod,
    staticmethod,
    type,
)


def is_interface(cls: object) -> bool:
    """Return whether ``cls`` is a protocol class (not a class implementing one)."""

    if not isinstance(cls, type) or cls is Protocol:
        return False
    return bool(getattr(cls, "_is_protocol", False))


def introspect(contract: object) -> Contract:
    """Describe ``contract``'s observable properties and notification carrier."""

    if not isinstance(contract, type):
        raise UnsupportedContractError(
            f"contract must be a class or protocol, got {type(contract).__name__}"
        )
    if is_interface(contract):
        return _introspect_interface(contract)
    return _introspect_class(contract)


# --- classes -----------------------------------------------------------------------------


def _introspect_class(contract: type) -> Contract:
    carrier = _find_declared_carrier(contract)
    if carrier is None:
        raise UnsupportedContractError(
            f"{contract.__qualname__} declares no PropertyChangedEvent carrier; "
            "derive from ObservableObject or declare one"
        )

    properties: list[PropertyDescriptor] = []
    seen: set[str] = {carrier.name}
    for owner in _class_hierarchy(contract):
        for name in _public_names(owner):
            if name in seen:
                continue
            seen.add(name)
            descriptor = _describe_class_member(contract, name)
            if descriptor is not None:
                properties.append(descriptor)

    kind = ContractKind.ABSTRACT_CLASS if inspect.isabstract(contract) else ContractKind.CLASS
    log.debug(
        "Introspected %s contract %s: properties=%s",
        kind,
        contract.__qualname__,
        [descriptor.name for descriptor in properties],
    )
    return Contract(
        target=contract,
        kind=kind,
        properties=tuple(properties),
        carrier=carrier,
    )


def _find_declared_carrier(contract: type) -> CarrierDescriptor | None:
    for owner in _class_hierarchy(contract):
        for name, member in vars(owner).items():
            if isinstance(member, PropertyChangedEvent):
                return CarrierDescriptor(
                    name=name,
                    origin=CarrierOrigin.DECLARED,
                    declared_by=owner,
                )
    return None


def _describe_class_member(contract: type, name: str) -> PropertyDescriptor | None:
    owner, member = _resolve(contract, name)
    annotation = _annotation_for(contract, name)

    if isinstance(member, property):
        fget, fset = member.fget, member.fset
        return PropertyDescriptor(
            name=name,
            value_type=_return_annotation(fget),
            gettable=fget is not None,
            settable=fset is not None,
            overridable=not getattr(fget, "__final__", False),
            base_getter=None if _is_abstract(fget) else fget,
            base_setter=None if _is_abstract(fset) else fset,
            declared_by=owner,
        )

    if isinstance(member, MemberDescriptorType):
        return PropertyDescriptor(
            name=name,
            value_type=object if annotation is MISSING else annotation,
            base_getter=member.__get__,
            base_setter=member.__set__,
            declared_by=owner,
        )

    if (
        annotation is MISSING
        or _is_qualified_annotation(annotation)
        or _is_event_annotation(annotation)
    ):
        return None
    if member is not MISSING and (
        isinstance(member, _NON_PROPERTY_TYPES) or _is_descriptor(member)
    ):
        return None
    return PropertyDescriptor(
        name=name,
        value_type=annotation,
        initializer=member,
        declared_by=owner,
    )


def _class_hierarchy(contract: type) -> Iterator[type]:
    for owner in contract.__mro__:
        if owner is not object:
            yield owner


def _resolve(contract: type, name: str) -> tuple[type | None, object]:
    for owner in contract.__mro__:
        if name in vars(owner):
            return owner, vars(owner)[name]
    return _annotation_owner(contract, name), MISSING


def _annotation_owner(contract: type, name: str) -> type | None:
    for owner in contract.__mro__:
        if name in _annotations(owner):
            return owner
    return None


def _annotation_for(contract: type, name: str) -> object:
    for owner in contract.__mro__:
        annotations = _annotations(owner)
        if name in annotations:
            return annotations[name]
    return MISSING


# --- protocols ---------------------------------------------------------------------------


def _introspect_interface(contract: type) -> Contract:
    properties: list[PropertyDescriptor] = []
    events: dict[str, type] = {}
    methods: dict[str, None] = {}

    for interface in _interface_graph(contract):
        annotations = _annotations(interface)
        members = vars(interface)

        for name, member in members.items():
            if name.startswith("_"):
                continue
            if isinstance(member, PropertyChangedEvent):
                events.setdefault(name, interface)
            elif isinstance(member, (FunctionType, classmethod, staticmethod)):
                methods.setdefault(name)
            elif isinstance(member, property):
                _merge(
                    properties,
                    PropertyDescriptor(
                        name=name,
                        value_type=_return_annotation(member.fget),
                        gettable=member.fget is not None,
                        settable=member.fset is not None,
                        declared_by=interface,
                    ),
                )

        for name, annotation in annotations.items():
            if name.startswith("_") or _is_qualified_annotation(annotation):
                continue
            if _is_event_annotation(annotation):
                events.setdefault(name, interface)
                continue
            member = members.get(name, MISSING)
            if isinstance(member, (property, PropertyChangedEvent)):
                continue
            _merge(
                properties,
                PropertyDescriptor(
                    name=name,
                    value_type=annotation,
                    initializer=member,
                    declared_by=interface,
                ),
            )

    if not events:
        raise UnsupportedContractError(
            f"interface {contract.__qualname__} declares no PropertyChangedEvent; "
            "extend NotifyPropertyChanged or declare one"
        )
    if len(events) > 1:
        raise GenerationError(
            f"interface {contract.__qualname__} declares more than one change event: "
            f"{', '.join(sorted(events))}"
        )

    [(event_name, declared_by)] = events.items()
    log.debug(
        "Introspected interface contract %s: properties=%s, event=%s",
        contract.__qualname__,
        [descriptor.name for descriptor in properties],
        event_name,
    )
    return Contract(
        target=contract,
        kind=ContractKind.INTERFACE,
        properties=tuple(properties),
        carrier=CarrierDescriptor(
            name=event_name,
            origin=CarrierOrigin.MUST_SYNTHESIZE,
            declared_by=declared_by,
        ),
        methods=tuple(methods),
    )


def _interface_graph(contract: type) -> Iterator[type]:
    """Yield every protocol reachable from ``contract`` exactly once, breadth first."""

    visited: set[type] = {contract}
    queue: deque[type] = deque([contract])
    while queue:
        interface = queue.popleft()
        for base in interface.__bases__:
            if base in visited or not is_interface(base):
                continue
            visited.add(base)
            queue.append(base)
        yield interface


def _merge(properties: list[PropertyDescriptor], descriptor: PropertyDescriptor) -> None:
    for index, existing in enumerate(properties):
        if not existing.same_signature(descriptor):
            continue
        # Same signature declared by several protocols: one property, union of accessors.
        properties[index] = PropertyDescriptor(
            name=existing.name,
            value_type=existing.value_type,
            gettable=existing.gettable or descriptor.gettable,
            settable=existing.settable or descriptor.settable,
            initializer=(
                existing.initializer if existing.has_initializer else descriptor.initializer
            ),
            declared_by=existing.declared_by,
        )
        return
    properties.append(descriptor)



# --- helpers -----------------------------------------------------------------------------


def _public_names(owner: type) -> list[str]:
    names = [*vars(owner), *_annotations(owner)]
    return [name for name in dict.fromkeys(names) if not name.startswith("_")]


def _annotations(obj: object) -> dict[str, object]:
    try:
        return inspect.get_annotations(obj, eval_str=True)  # type: ignore[arg-type]
    except (NameError, AttributeError, SyntaxError, TypeError):
        # Unresolvable forward references stay as text.
        return inspect.get_annotations(obj)  # type: ignore[arg-type]


def _is_abstract(accessor: object) -> bool:
    return accessor is None or bool(getattr(accessor, "__isabstractmethod__", False))


def _is_descriptor(member: object) -> bool:
    kind = type(member)
    return hasattr(kind, "__get__") or hasattr(kind, "__set__")


def _return_annotation(fget: object) -> object:
    if fget is None:
        return object
    return _annotations(fget).get("return", object)


def _is_qualified_annotation(annotation: object) -> bool:
    if isinstance(annotation, str):
        head = annotation.split("[", 1)[0].strip()
        return head.rsplit(".", 1)[-1] in _SKIPPED_QUALIFIERS
    if annotation in (ClassVar, Final) or get_origin(annotation) in (ClassVar, Final):
        return True
    return type(annotation).__name__ == "InitVar"


def _is_event_annotation(annotation: object) -> bool:
    if isinstance(annotation, str):
        return annotation.strip().rsplit(".", 1)[-1] == PropertyChangedEvent.__name__
    return annotation is PropertyChangedEvent
