"""Synthesis of proxy types from introspected contracts."""

from __future__ import annotations

import inspect
import types
from logging import getLogger
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from observable_proxy.config import ObservableConfig

from .contracts import Contract, PropertyPlan, SynthesizedType
from .errors import GenerationError
from .events import PropertyChangedEvent
from .interception import build_property

if TYPE_CHECKING:
    from .contracts import PropertyDescriptor
    from .interception import ChangeCallback

log = getLogger(__name__)

SYNTHESIS_ATTRIBUTE = "__observable_synthesis__"


class TypeSynthesizer:
    """Derive a concrete, default-constructible proxy type honouring a contract.

    Generated setters capture ``hook``; it is called after every write with the previous
    and the written value.
    """

    def __init__(self, hook: ChangeCallback, config: ObservableConfig | None = None) -> None:
        self.hook = hook
        self.config = config or ObservableConfig()

    def synthesize(self, contract: Contract) -> type:
        target = contract.target
        self._check_members(contract)
        self._check_constructible(target)

        namespace: dict[str, Any] = {}
        plans: list[PropertyPlan] = []
        for descriptor in contract.properties:
            prop, plan = build_property(descriptor, self.hook)
            namespace[descriptor.name] = prop
            if plan.backing_field is not None:
                namespace[plan.backing_field] = (
                    descriptor.initializer if descriptor.has_initializer else None
                )
            plans.append(plan)

        if contract.is_interface:
            namespace[contract.carrier.name] = PropertyChangedEvent()

        name = self._type_name(target)
        namespace["__module__"] = target.__module__
        namespace["__qualname__"] = name
        namespace["__doc__"] = target.__doc__
        try:
            proxy_type = types.new_class(
                name,
                (target,),
                exec_body=lambda body: body.update(namespace),
            )
        except Exception as exc:
            raise GenerationError(
                f"cannot derive a proxy type from {target.__qualname__}: {exc}"
            ) from exc

        if inspect.isabstract(proxy_type):
            remaining = ", ".join(sorted(proxy_type.__abstractmethods__))
            raise GenerationError(
                f"{target.__qualname__} has abstract members that are not properties: {remaining}"
            )

        synthesis = SynthesizedType(
            contract=contract,
            proxy_type=proxy_type,
            properties=tuple(plans),
            carrier_synthesized=contract.is_interface,
        )
        setattr(proxy_type, SYNTHESIS_ATTRIBUTE, synthesis)
        log.debug(
            "Synthesized %s for %s contract %s (%d properties)",
            name,
            contract.kind,
            target.__qualname__,
            len(plans),
        )
        return proxy_type

    def _type_name(self, target: type) -> str:
        name = f"{target.__name__}_{self.config.type_name_suffix}"
        if self.config.unique_type_names:
            name = f"{name}_{uuid4().hex}"
        return name

    @staticmethod
    def _check_members(contract: Contract) -> None:
        if contract.methods:
            raise GenerationError(
                f"interface {contract.target.__qualname__} declares methods a proxy cannot "
                f"implement: {', '.join(contract.methods)}"
            )
        by_name: dict[str, PropertyDescriptor] = {}
        for descriptor in contract.properties:
            if descriptor.name == contract.carrier.name:
                raise GenerationError(
                    f"property {descriptor.name!r} of {contract.target.__qualname__} "
                    "collides with its change event"
                )
            if not descriptor.overridable:
                raise GenerationError(
                    f"property {descriptor.name!r} of {contract.target.__qualname__} "
                    "is final and cannot be intercepted"
                )
            existing = by_name.setdefault(descriptor.name, descriptor)
            if not existing.same_signature(descriptor):
                raise GenerationError(
                    f"property {descriptor.name!r} of {contract.target.__qualname__} is "
                    f"declared with conflicting types {existing.type_label!r} and "
                    f"{descriptor.type_label!r}"
                )


    @staticmethod
    def _check_constructible(target: type) -> None:
        try:
            signature = inspect.signature(target)
        except (TypeError, ValueError):
            return
        required = [
            parameter.name
            for parameter in signature.parameters.values()
            if parameter.default is inspect.Parameter.empty
            and parameter.kind
            not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        ]
        if required:
            raise GenerationError(
                f"{target.__qualname__} cannot be constructed without arguments; "
                f"required parameters: {', '.join(required)}"
            )


def describe(proxy_type: type) -> SynthesizedType:
    """Return the synthesis record of a generated proxy type."""

    synthesis = vars(proxy_type).get(SYNTHESIS_ATTRIBUTE)
    if not isinstance(synthesis, SynthesizedType):
        raise TypeError(f"{proxy_type.__qualname__} is not a synthesized proxy type")
    return synthesis


def is_proxy_type(cls: object) -> bool:
    return isinstance(cls, type) and isinstance(
        vars(cls).get(SYNTHESIS_ATTRIBUTE), SynthesizedType
    )
