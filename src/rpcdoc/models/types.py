"""Type descriptors for the service specification.

The closed set of type variants used to document RPC signatures:
- PrimitiveInfo: VOID, BOOL, I8, I16, I32, I64, DOUBLE, STRING, BINARY
- ClassInfo: named types (StructInfo, EnumInfo, ExceptionInfo)
- CollectionInfo: ListInfo and SetInfo
- MapInfo: key/value mapping
- UnresolvedClassInfo: named placeholder for a typedef alias

All descriptors are frozen. Named types are identified by their qualified name;
the class collector deduplicates on that key.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TypeKind(Enum):
    """Kind of a type descriptor."""

    VOID = "void"
    BOOL = "bool"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    DOUBLE = "double"
    STRING = "string"
    BINARY = "binary"
    STRUCT = "struct"
    ENUM = "enum"
    EXCEPTION = "exception"
    LIST = "list"
    SET = "set"
    MAP = "map"

    @property
    def is_primitive(self) -> bool:
        """Return True for the value kinds that carry no payload."""
        return self in PRIMITIVE_KINDS


PRIMITIVE_KINDS = frozenset({
    TypeKind.VOID,
    TypeKind.BOOL,
    TypeKind.I8,
    TypeKind.I16,
    TypeKind.I32,
    TypeKind.I64,
    TypeKind.DOUBLE,
    TypeKind.STRING,
    TypeKind.BINARY,
})

# Kinds a typedef alias placeholder may stand for
ALIASABLE_KINDS = frozenset({
    TypeKind.STRUCT,
    TypeKind.ENUM,
    TypeKind.LIST,
    TypeKind.SET,
    TypeKind.MAP,
})


class FieldRequirement(Enum):
    """Requirement level of a struct field or function parameter."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    DEFAULT = "default"


class TypeInfo:
    """Base class of every type descriptor."""

    kind: TypeKind

    def signature(self) -> str:
        """Return a compact IDL-style signature (e.g. ``list<i32>``)."""
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        raise NotImplementedError


@dataclass(frozen=True)
class PrimitiveInfo(TypeInfo):
    """A value type with no identity (``i32``, ``string``, ...).

    ``BINARY`` and ``STRING`` are distinct even though both travel as byte
    strings on the wire.
    """

    kind: TypeKind

    def __post_init__(self) -> None:
        if not self.kind.is_primitive:
            raise ValueError(f"Not a primitive kind: {self.kind.value}")

    def signature(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value}


VOID = PrimitiveInfo(TypeKind.VOID)
BOOL = PrimitiveInfo(TypeKind.BOOL)
I8 = PrimitiveInfo(TypeKind.I8)
I16 = PrimitiveInfo(TypeKind.I16)
I32 = PrimitiveInfo(TypeKind.I32)
I64 = PrimitiveInfo(TypeKind.I64)
DOUBLE = PrimitiveInfo(TypeKind.DOUBLE)
STRING = PrimitiveInfo(TypeKind.STRING)
BINARY = PrimitiveInfo(TypeKind.BINARY)

PRIMITIVES: dict[TypeKind, PrimitiveInfo] = {
    p.kind: p for p in (VOID, BOOL, I8, I16, I32, I64, DOUBLE, STRING, BINARY)
}


@dataclass(frozen=True)
class FieldInfo:
    """A named, typed member of a struct, exception or parameter list.

    Attributes:
        name: Field name
        requirement: Requirement level
        type_info: Resolved field type
        doc_string: Documentation string if available
    """

    name: str
    requirement: FieldRequirement
    type_info: TypeInfo
    doc_string: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "requirement": self.requirement.value,
            "type": self.type_info.to_dict(),
        }
        if self.doc_string is not None:
            result["doc_string"] = self.doc_string
        return result


class ClassInfo(TypeInfo):
    """Base class of named types (struct, enum, exception).

    Two instances denote the same entity iff their ``name`` values are equal.
    """

    name: str
    doc_string: str | None

    @property
    def fields(self) -> tuple[FieldInfo, ...]:
        """Return the member fields (empty for enums)."""
        return ()

    @property
    def simple_name(self) -> str:
        """Return the name without its namespace."""
        return self.name.rsplit(".", 1)[-1]

    def signature(self) -> str:
        return self.name


@dataclass(frozen=True)
class StructInfo(ClassInfo):
    """A struct (or union) with fields in declaration order."""

    name: str
    fields: tuple[FieldInfo, ...] = ()
    doc_string: str | None = None
    kind: TypeKind = field(default=TypeKind.STRUCT, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.kind.value,
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
        }
        if self.doc_string is not None:
            result["doc_string"] = self.doc_string
        return result


@dataclass(frozen=True)
class ExceptionInfo(ClassInfo):
    """A declared exception with fields in declaration order."""

    name: str
    fields: tuple[FieldInfo, ...] = ()
    doc_string: str | None = None
    kind: TypeKind = field(default=TypeKind.EXCEPTION, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.kind.value,
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
        }
        if self.doc_string is not None:
            result["doc_string"] = self.doc_string
        return result


@dataclass(frozen=True)
class EnumInfo(ClassInfo):
    """An enum with constant names in declaration order."""

    name: str
    constants: tuple[str, ...] = ()
    doc_string: str | None = None
    kind: TypeKind = field(default=TypeKind.ENUM, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "constants", tuple(self.constants))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.kind.value,
            "name": self.name,
            "constants": list(self.constants),
        }
        if self.doc_string is not None:
            result["doc_string"] = self.doc_string
        return result


class CollectionInfo(TypeInfo):
    """Base class of single-element collections."""

    element_type_info: TypeInfo

    def signature(self) -> str:
        return f"{self.kind.value}<{self.element_type_info.signature()}>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "element": self.element_type_info.to_dict(),
        }


@dataclass(frozen=True)
class ListInfo(CollectionInfo):
    """An ordered list of elements."""

    element_type_info: TypeInfo
    kind: TypeKind = field(default=TypeKind.LIST, init=False)


@dataclass(frozen=True)
class SetInfo(CollectionInfo):
    """An unordered set of elements."""

    element_type_info: TypeInfo
    kind: TypeKind = field(default=TypeKind.SET, init=False)


@dataclass(frozen=True)
class MapInfo(TypeInfo):
    """A key/value mapping."""

    key_type_info: TypeInfo
    value_type_info: TypeInfo
    kind: TypeKind = field(default=TypeKind.MAP, init=False)

    def signature(self) -> str:
        return f"map<{self.key_type_info.signature()}, {self.value_type_info.signature()}>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "key": self.key_type_info.to_dict(),
            "value": self.value_type_info.to_dict(),
        }


@dataclass(frozen=True)
class UnresolvedClassInfo(TypeInfo):
    """Named forward reference whose definition was not expanded.

    Produced for typedef aliases and for self or forward references inside a
    struct. Consumers look the name up among the specification's classes.

    Attributes:
        kind: What the alias stands for (struct, enum, list, set, map)
        name: Qualified alias name
        doc_string: Documentation string of the alias if available
    """

    kind: TypeKind
    name: str
    doc_string: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in ALIASABLE_KINDS:
            raise ValueError(f"Unresolved class cannot stand for {self.kind.value}")

    def signature(self) -> str:
        return self.name

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": "unresolved",
            "kind": self.kind.value,
            "name": self.name,
        }
        if self.doc_string is not None:
            result["doc_string"] = self.doc_string
        return result
