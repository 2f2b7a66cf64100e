"""rpcdoc data models.

This module exports all core entities used throughout the application:
- TypeInfo variants: primitives, structs, enums, exceptions, collections, maps,
  unresolved placeholders
- FieldInfo, FunctionInfo, EndpointInfo, ServiceInfo, ServiceSpecification
- Descriptors: the provider-side vocabulary consumed by the resolver
- ServiceBinding, GenerationError, GenerationResult: generation input and output
"""

from rpcdoc.models.descriptors import (
    EnumRef,
    ExceptionRef,
    FieldDescriptor,
    ListDescriptor,
    MapDescriptor,
    MethodDescriptor,
    PrimitiveDescriptor,
    SetDescriptor,
    StructRef,
    TypedefAlias,
    ValueDescriptor,
)
from rpcdoc.models.generation import (
    GenerationError,
    GenerationResult,
    GenerationStatus,
    ServiceBinding,
)
from rpcdoc.models.specification import (
    EndpointInfo,
    FunctionInfo,
    ServiceInfo,
    ServiceSpecification,
)
from rpcdoc.models.types import (
    BINARY,
    BOOL,
    DOUBLE,
    I8,
    I16,
    I32,
    I64,
    STRING,
    VOID,
    ClassInfo,
    CollectionInfo,
    EnumInfo,
    ExceptionInfo,
    FieldInfo,
    FieldRequirement,
    ListInfo,
    MapInfo,
    PrimitiveInfo,
    SetInfo,
    StructInfo,
    TypeInfo,
    TypeKind,
    UnresolvedClassInfo,
)

__all__ = [
    # Types
    "TypeKind",
    "TypeInfo",
    "PrimitiveInfo",
    "ClassInfo",
    "StructInfo",
    "EnumInfo",
    "ExceptionInfo",
    "CollectionInfo",
    "ListInfo",
    "SetInfo",
    "MapInfo",
    "UnresolvedClassInfo",
    "FieldInfo",
    "FieldRequirement",
    "VOID",
    "BOOL",
    "I8",
    "I16",
    "I32",
    "I64",
    "DOUBLE",
    "STRING",
    "BINARY",
    # Specification
    "FunctionInfo",
    "EndpointInfo",
    "ServiceInfo",
    "ServiceSpecification",
    # Descriptors
    "ValueDescriptor",
    "PrimitiveDescriptor",
    "StructRef",
    "EnumRef",
    "ExceptionRef",
    "ListDescriptor",
    "SetDescriptor",
    "MapDescriptor",
    "TypedefAlias",
    "FieldDescriptor",
    "MethodDescriptor",
    # Generation
    "ServiceBinding",
    "GenerationError",
    "GenerationStatus",
    "GenerationResult",
]
