"""Contract and synthesis descriptions.

A :class:`Contract` is the immutable, introspected view of a user type: which properties
it exposes and where its change-notification carrier lives. A :class:`SynthesizedType`
records how a generated proxy type stores each of those properties.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final, TypeAlias

Getter: TypeAlias = Callable[[Any], Any]
Setter: TypeAlias = Callable[[Any, Any], None]


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final[Any] = _Missing()


class ContractKind(StrEnum):
    """Shape of the type a proxy is synthesized for."""

    CLASS = "class"
    ABSTRACT_CLASS = "abstract_class"
    INTERFACE = "interface"


class StoragePolicy(StrEnum):
    """Where a synthesized accessor reads from or writes to."""

    DELEGATE_TO_BASE = "delegate_to_base"
    OWN_BACKING_FIELD = "own_backing_field"


class CarrierOrigin(StrEnum):
    """Whether the notification carrier is inherited or generated."""

    DECLARED = "declared"
    MUST_SYNTHESIZE = "must_synthesize"


@dataclass(frozen=True, slots=True, kw_only=True)
class PropertyDescriptor:
    """One observable property of a contract."""

    name: str
    value_type: object = object
    gettable: bool = True
    settable: bool = True
    overridable: bool = True
    # Non-abstract accessors supplied by the contract itself, if any.
    base_getter: Getter | None = None
    base_setter: Setter | None = None
    initializer: object = MISSING
    declared_by: type | None = None

    @property
    def getter_policy(self) -> StoragePolicy:
        if self.base_getter is not None:
            return StoragePolicy.DELEGATE_TO_BASE
        return StoragePolicy.OWN_BACKING_FIELD

    @property
    def setter_policy(self) -> StoragePolicy:
        if self.base_setter is not None:
            return StoragePolicy.DELEGATE_TO_BASE
        return StoragePolicy.OWN_BACKING_FIELD

    @property
    def has_initializer(self) -> bool:
        return self.initializer is not MISSING

    @property
    def type_label(self) -> str:
        return annotation_key(self.value_type)

    def same_signature(self, other: PropertyDescriptor) -> bool:
        return self.name == other.name and same_annotation(self.value_type, other.value_type)


@dataclass(frozen=True, slots=True, kw_only=True)
class CarrierDescriptor:
    """Location of the subscriber list that change notifications go to."""

    name: str
    origin: CarrierOrigin
    declared_by: type


@dataclass(frozen=True, slots=True, kw_only=True)
class Contract:
    """Introspected description of a contract type. Never mutated after introspection."""

    target: type
    kind: ContractKind
    properties: tuple[PropertyDescriptor, ...]
    carrier: CarrierDescriptor
    # Interface methods other than property accessors; a proxy has no body for them.
    methods: tuple[str, ...] = ()

    @property
    def is_interface(self) -> bool:
        return self.kind is ContractKind.INTERFACE

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(descriptor.name for descriptor in self.properties)


@dataclass(frozen=True, slots=True, kw_only=True)
class PropertyPlan:
    """Storage chosen for one property of a synthesized type."""

    name: str
    getter_policy: StoragePolicy | None
    setter_policy: StoragePolicy | None
    backing_field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SynthesizedType:
    """Record attached to every generated proxy type."""

    contract: Contract
    proxy_type: type
    properties: tuple[PropertyPlan, ...]
    carrier_synthesized: bool

    def plan_for(self, name: str) -> PropertyPlan:
        for plan in self.properties:
            if plan.name == name:
                return plan
        raise KeyError(name)


def annotation_key(annotation: object) -> str:
    """Normalise an annotation so postponed (string) and evaluated forms compare equal."""

    if isinstance(annotation, str):
        return annotation.replace(" ", "")
    if isinstance(annotation, type) and not getattr(annotation, "__args__", None):
        return annotation.__qualname__
    return repr(annotation).replace("typing.", "").replace(" ", "")


def same_annotation(left: object, right: object) -> bool:
    """Whether two annotations denote the same type.

    Evaluated annotations compare as objects, so ``Optional[str]`` matches ``str | None``.
    Text is compared only when one side is an unresolved string annotation.
    """

    if isinstance(left, str) or isinstance(right, str):
        return annotation_key(left) == annotation_key(right)
    try:
        return bool(left == right)
    except TypeError:
        return left is right
