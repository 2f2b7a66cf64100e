"""Metadata descriptors consumed by the type resolver.

A metadata provider describes services, structs and enums with these values.
They are the provider-side vocabulary; the resolver turns them into TypeInfo.

Cycle precondition: a provider MUST NOT emit an infinite descriptor graph.
A struct field that refers to its enclosing struct, or to a struct that is not
yet fully known, arrives as a TypedefAlias rather than as a StructRef.
"""

from dataclasses import dataclass

from rpcdoc.models.types import FieldRequirement, TypeKind


class ValueDescriptor:
    """Base class of field value descriptors."""


@dataclass(frozen=True)
class PrimitiveDescriptor(ValueDescriptor):
    """A primitive value (``i32``, ``string``, ``binary``, ...)."""

    kind: TypeKind


@dataclass(frozen=True)
class StructRef(ValueDescriptor):
    """Reference to a struct whose fields the provider can list."""

    name: str


@dataclass(frozen=True)
class EnumRef(ValueDescriptor):
    """Reference to an enum whose constants the provider can list."""

    name: str


@dataclass(frozen=True)
class ExceptionRef(ValueDescriptor):
    """Reference to an exception type."""

    name: str


@dataclass(frozen=True)
class ListDescriptor(ValueDescriptor):
    """A list of elements."""

    element: ValueDescriptor


@dataclass(frozen=True)
class SetDescriptor(ValueDescriptor):
    """A set of elements."""

    element: ValueDescriptor


@dataclass(frozen=True)
class MapDescriptor(ValueDescriptor):
    """A key/value mapping."""

    key: ValueDescriptor
    value: ValueDescriptor


@dataclass(frozen=True)
class TypedefAlias(ValueDescriptor):
    """A named reference whose definition is not expanded.

    Attributes:
        kind: What the alias stands for
        alias_name: Qualified alias name
    """

    kind: TypeKind
    alias_name: str


@dataclass(frozen=True)
class FieldDescriptor:
    """A named, typed field as reported by the provider."""

    name: str
    requirement: FieldRequirement
    value: ValueDescriptor


@dataclass(frozen=True)
class MethodDescriptor:
    """A service method as reported by the provider.

    Attributes:
        name: Method name
        parameters: Parameter fields in declaration order
        success: Result field, None for oneway or void methods
        exceptions: Declared exception types in declaration order
        args_type: Name of the argument type, used to look up sample requests
        oneway: Whether the method is fire-and-forget
    """

    name: str
    parameters: tuple[FieldDescriptor, ...] = ()
    success: FieldDescriptor | None = None
    exceptions: tuple[ExceptionRef, ...] = ()
    args_type: str = ""
    oneway: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "exceptions", tuple(self.exceptions))
