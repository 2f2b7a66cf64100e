"""Type resolver: metadata descriptors to TypeInfo.

Resolution rules:
1. Primitive descriptors map to the primitive constants (BINARY stays distinct
   from STRING)
2. Struct, exception and enum references expand through the provider, with
   doc strings attached to the class and to each field
3. Collections and maps resolve their element, key and value descriptors
4. Typedef aliases become UnresolvedClassInfo placeholders; the alias is never
   dereferenced

The resolver performs no cycle detection. It relies on the provider never
emitting an infinite descriptor graph, and fails with MalformedDescriptor when
expansion nests deeper than ``max_depth``.
"""

import logging
from collections.abc import Mapping

from rpcdoc.errors import MalformedDescriptor
from rpcdoc.models.descriptors import (
    EnumRef,
    ExceptionRef,
    FieldDescriptor,
    ListDescriptor,
    MapDescriptor,
    PrimitiveDescriptor,
    SetDescriptor,
    StructRef,
    TypedefAlias,
    ValueDescriptor,
)
from rpcdoc.models.types import (
    ALIASABLE_KINDS,
    PRIMITIVES,
    EnumInfo,
    ExceptionInfo,
    FieldInfo,
    ListInfo,
    MapInfo,
    SetInfo,
    StructInfo,
    TypeInfo,
    UnresolvedClassInfo,
)
from rpcdoc.providers.base import MetadataProvider, doc_key

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


class TypeResolver:
    """Converts value descriptors into TypeInfo.

    Usage:
        resolver = TypeResolver(provider, provider.doc_strings())
        type_info = resolver.resolve(StructRef("com.example.FooStruct"))
    """

    def __init__(
        self,
        provider: MetadataProvider,
        doc_strings: Mapping[str, str] | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """Initialize the resolver.

        Args:
            provider: Metadata source for struct, exception and enum expansion
            doc_strings: Doc strings keyed by qualified name
            max_depth: Maximum nesting of struct expansion
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive (got {max_depth})")
        self.provider = provider
        self.doc_strings: Mapping[str, str] = doc_strings or {}
        self.max_depth = max_depth

    def resolve(
        self,
        descriptor: ValueDescriptor,
        context: str | None = None,
        _depth: int = 0,
    ) -> TypeInfo:
        """Resolve one value descriptor.

        Args:
            descriptor: Descriptor reported by the provider
            context: Qualified field or type name, for error messages

        Returns:
            Resolved TypeInfo

        Raises:
            MalformedDescriptor: If the descriptor kind is not recognized or
                expansion exceeds max_depth
            MetadataUnavailable: If the provider cannot introspect a reference
        """
        if _depth > self.max_depth:
            raise MalformedDescriptor(
                f"type expansion exceeded max depth {self.max_depth}; "
                "the provider emitted a cyclic descriptor graph",
                context,
            )

        if isinstance(descriptor, PrimitiveDescriptor):
            primitive = PRIMITIVES.get(descriptor.kind)
            if primitive is None:
                raise MalformedDescriptor(f"unexpected primitive type: {descriptor.kind}", context)
            return primitive

        if isinstance(descriptor, StructRef):
            return self.resolve_struct(descriptor, _depth)

        if isinstance(descriptor, ExceptionRef):
            return self.resolve_exception(descriptor, _depth)

        if isinstance(descriptor, EnumRef):
            return self.resolve_enum(descriptor)

        if isinstance(descriptor, ListDescriptor):
            return ListInfo(self.resolve(descriptor.element, context, _depth))

        if isinstance(descriptor, SetDescriptor):
            return SetInfo(self.resolve(descriptor.element, context, _depth))

        if isinstance(descriptor, MapDescriptor):
            return MapInfo(
                self.resolve(descriptor.key, context, _depth),
                self.resolve(descriptor.value, context, _depth),
            )

        if isinstance(descriptor, TypedefAlias):
            if descriptor.kind not in ALIASABLE_KINDS:
                raise MalformedDescriptor(f"unexpected typedef type: {descriptor.kind}", context)
            return UnresolvedClassInfo(
                descriptor.kind,
                descriptor.alias_name,
                self.doc_strings.get(descriptor.alias_name),
            )

        raise MalformedDescriptor(f"unknown descriptor: {descriptor!r}", context)

    def resolve_field(
        self,
        descriptor: FieldDescriptor,
        namespace: str | None,
        _depth: int = 0,
    ) -> FieldInfo:
        """Resolve a field, attaching the doc string keyed by ``namespace.name``."""
        key = doc_key(namespace, descriptor.name)
        return FieldInfo(
            name=descriptor.name,
            requirement=descriptor.requirement,
            type_info=self.resolve(descriptor.value, key, _depth),
            doc_string=self.doc_strings.get(key),
        )

    def resolve_struct(self, ref: StructRef, _depth: int = 0) -> StructInfo:
        """Expand a struct into its fields."""
        fields = [
            self.resolve_field(f, ref.name, _depth + 1) for f in self.provider.struct_fields(ref)
        ]
        return StructInfo(ref.name, fields, self.doc_strings.get(ref.name))

    def resolve_exception(self, ref: ExceptionRef, _depth: int = 0) -> ExceptionInfo:
        """Expand an exception into its fields (empty when it declares none)."""
        fields = [
            self.resolve_field(f, ref.name, _depth + 1)
            for f in self.provider.exception_fields(ref)
        ]
        return ExceptionInfo(ref.name, fields, self.doc_strings.get(ref.name))

    def resolve_enum(self, ref: EnumRef) -> EnumInfo:
        """List the constants of an enum."""
        constants = self.provider.enum_constants(ref)
        return EnumInfo(ref.name, constants, self.doc_strings.get(ref.name))
