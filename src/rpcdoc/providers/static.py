"""Static metadata provider backed by a YAML or JSON metadata document.

The document is a build-time registry of enums, typedefs, structs and services.
Field types are written as IDL type expressions::

    i32, string, binary, list<FooStruct>, map<string, set<FooEnum>>

Structs are declared in order. A struct or exception field that refers to a
struct declared at the same or a later position (including itself) is reported
as a named reference (TypedefAlias) instead of an expandable StructRef, the way
IDL compilers emit metadata for types that are not fully defined yet. This
keeps every descriptor graph finite.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from rpcdoc.errors import MalformedDescriptor, MetadataUnavailable
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
from rpcdoc.models.types import FieldRequirement, TypeKind
from rpcdoc.providers.base import DEFAULT_BASE_EXCEPTION, MetadataProvider, doc_key

logger = logging.getLogger(__name__)

PRIMITIVE_NAMES: dict[str, TypeKind] = {
    "void": TypeKind.VOID,
    "bool": TypeKind.BOOL,
    "byte": TypeKind.I8,
    "i8": TypeKind.I8,
    "i16": TypeKind.I16,
    "i32": TypeKind.I32,
    "i64": TypeKind.I64,
    "double": TypeKind.DOUBLE,
    "string": TypeKind.STRING,
    "binary": TypeKind.BINARY,
}

CONTAINER_ARITY: dict[str, int] = {"list": 1, "set": 1, "map": 2}

REQUIREMENTS: dict[str, FieldRequirement] = {
    "required": FieldRequirement.REQUIRED,
    "optional": FieldRequirement.OPTIONAL,
    "default": FieldRequirement.DEFAULT,
    "req_out": FieldRequirement.DEFAULT,
}

STRUCT_KINDS = {"struct", "union", "exception"}

_TOKEN_RE = re.compile(r"\s*(?:([A-Za-z_][A-Za-z0-9_.]*)|([<>,]))")


# =============================================================================
# Type Expressions
# =============================================================================


@dataclass
class TypeExpression:
    """Parsed IDL type expression.

    Attributes:
        name: Base type name (``i32``, ``list``, ``FooStruct``)
        args: Type arguments of a container
    """

    name: str
    args: list["TypeExpression"] = field(default_factory=list)

    @property
    def is_container(self) -> bool:
        """Return True for list, set and map."""
        return self.name in CONTAINER_ARITY


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None or match.end() == pos:
            raise MalformedDescriptor(f"unexpected character {text[pos]!r}", context=text)
        tokens.append(match.group(1) or match.group(2))
        pos = match.end()
    return tokens


def parse_type_expression(text: str) -> TypeExpression:
    """Parse an IDL type expression.

    Args:
        text: Expression such as ``map<string, list<Foo>>``

    Returns:
        Parsed expression tree

    Raises:
        MalformedDescriptor: On syntax errors or wrong container arity
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedDescriptor(f"invalid type expression {text!r}")

    tokens = _tokenize(text)
    expression, pos = _parse_tokens(tokens, 0, text)
    if pos != len(tokens):
        raise MalformedDescriptor(f"trailing tokens after {tokens[pos - 1]!r}", context=text)
    return expression


def _parse_tokens(tokens: list[str], pos: int, text: str) -> tuple[TypeExpression, int]:
    if pos >= len(tokens) or tokens[pos] in {"<", ">", ","}:
        raise MalformedDescriptor("expected a type name", context=text)

    expression = TypeExpression(name=tokens[pos])
    pos += 1

    if pos < len(tokens) and tokens[pos] == "<":
        pos += 1
        while True:
            arg, pos = _parse_tokens(tokens, pos, text)
            expression.args.append(arg)
            if pos >= len(tokens):
                raise MalformedDescriptor("unterminated type arguments", context=text)
            if tokens[pos] == ",":
                pos += 1
                continue
            if tokens[pos] == ">":
                pos += 1
                break
            raise MalformedDescriptor(f"unexpected token {tokens[pos]!r}", context=text)

    expected = CONTAINER_ARITY.get(expression.name, 0)
    if len(expression.args) != expected:
        raise MalformedDescriptor(
            f"{expression.name} takes {expected} type argument(s), got {len(expression.args)}",
            context=text,
        )
    return expression, pos


# =============================================================================
# Document Loading
# =============================================================================


def load_document(path: Path) -> dict[str, Any]:
    """Load a metadata document from YAML or JSON.

    Args:
        path: Document path (``.json`` is read as JSON, anything else as YAML)

    Returns:
        Document mapping

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document cannot be parsed or is not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Metadata document not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Invalid metadata document {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Metadata document must be a mapping: {path}")
    return data


@dataclass
class _StructDecl:
    name: str
    kind: str
    position: int
    fields: list[Any] = field(default_factory=list)
    doc: str | None = None


@dataclass
class _EnumDecl:
    name: str
    constants: list[str] = field(default_factory=list)
    doc: str | None = None


@dataclass
class _TypedefDecl:
    name: str
    target: str
    doc: str | None = None


@dataclass
class _ServiceDecl:
    name: str
    functions: list[Any] = field(default_factory=list)
    doc: str | None = None


# =============================================================================
# Provider
# =============================================================================


class StaticMetadataProvider(MetadataProvider):
    """Metadata provider over an in-memory metadata document.

    Usage:
        provider = StaticMetadataProvider.from_file(Path("services.yaml"))
        methods = provider.list_methods("com.example.FooService")
    """

    def __init__(
        self,
        document: dict[str, Any],
        name: str = "static",
        base_exception: str | None = None,
    ) -> None:
        """Index the document.

        Args:
            document: Metadata document mapping
            name: Provider identifier
            base_exception: Catch-all exception marker (overrides the document)

        Raises:
            ValueError: If the document declares a type or service twice
        """
        super().__init__(
            name,
            base_exception or document.get("base_exception") or DEFAULT_BASE_EXCEPTION,
        )
        self.namespace: str = document.get("namespace") or ""
        self._structs: dict[str, _StructDecl] = {}
        self._enums: dict[str, _EnumDecl] = {}
        self._typedefs: dict[str, _TypedefDecl] = {}
        self._services: dict[str, _ServiceDecl] = {}
        self._doc_strings: dict[str, str] = {}

        self._index(document)
        logger.debug(
            "Indexed metadata: %d services, %d structs, %d enums, %d typedefs",
            len(self._services),
            len(self._structs),
            len(self._enums),
            len(self._typedefs),
        )

    @classmethod
    def from_file(cls, path: Path, base_exception: str | None = None) -> "StaticMetadataProvider":
        """Create a provider from a YAML or JSON metadata document."""
        return cls(load_document(path), base_exception=base_exception)

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> "StaticMetadataProvider":
        """Create a provider from a metadata mapping."""
        return cls(data, **kwargs)

    def qualify(self, name: str) -> str:
        """Prefix an unqualified name with the document namespace."""
        if "." in name or not self.namespace:
            return name
        return f"{self.namespace}.{name}"

    # =========================================================================
    # Indexing
    # =========================================================================

    def _index(self, document: dict[str, Any]) -> None:
        declared: set[str] = set()

        def declare(data: Any, section: str) -> str:
            if not isinstance(data, dict):
                raise ValueError(f"Entry in {section} must be a mapping: {data!r}")
            raw_name = data.get("name")
            if not isinstance(raw_name, str) or not raw_name:
                raise ValueError(f"Missing name in {section} declaration")
            qualified = self.qualify(raw_name)
            if qualified in declared:
                raise ValueError(f"Duplicate declaration: {qualified}")
            declared.add(qualified)
            return qualified

        for data in document.get("enums") or []:
            name = declare(data, "enums")
            constants = [
                c["name"] if isinstance(c, dict) else str(c)
                for c in data.get("constants") or []
            ]
            self._enums[name] = _EnumDecl(name, constants, data.get("doc"))

        for data in document.get("typedefs") or []:
            name = declare(data, "typedefs")
            self._typedefs[name] = _TypedefDecl(name, data.get("type", ""), data.get("doc"))

        for position, data in enumerate(document.get("structs") or []):
            name = declare(data, "structs")
            kind = data.get("kind", "struct")
            if kind not in STRUCT_KINDS:
                raise ValueError(f"Invalid struct kind for {name}: {kind}. Valid: {STRUCT_KINDS}")
            self._structs[name] = _StructDecl(
                name, kind, position, list(data.get("fields") or []), data.get("doc")
            )

        for data in document.get("services") or []:
            name = declare(data, "services")
            self._services[name] = _ServiceDecl(
                name, list(data.get("functions") or []), data.get("doc")
            )

        self._collect_doc_strings()

    def _collect_doc_strings(self) -> None:
        docs = self._doc_strings

        def put(key: str, value: Any) -> None:
            if value:
                docs[key] = str(value).strip()

        for enum in self._enums.values():
            put(enum.name, enum.doc)
        for typedef in self._typedefs.values():
            put(typedef.name, typedef.doc)
        for struct in self._structs.values():
            put(struct.name, struct.doc)
            for field_data in struct.fields:
                if isinstance(field_data, dict) and field_data.get("name"):
                    put(doc_key(struct.name, field_data["name"]), field_data.get("doc"))
        for service in self._services.values():
            put(service.name, service.doc)
            for function in service.functions:
                if not isinstance(function, dict) or not function.get("name"):
                    continue
                function_key = doc_key(service.name, function["name"])
                put(function_key, function.get("doc"))
                for arg in function.get("arguments") or []:
                    if isinstance(arg, dict) and arg.get("name"):
                        put(doc_key(function_key, arg["name"]), arg.get("doc"))

    # =========================================================================
    # Descriptor Construction
    # =========================================================================

    def _descriptor(
        self,
        expression: TypeExpression,
        owner: _StructDecl | None,
        context: str,
    ) -> ValueDescriptor:
        if expression.name in PRIMITIVE_NAMES:
            return PrimitiveDescriptor(PRIMITIVE_NAMES[expression.name])
        if expression.name == "list":
            return ListDescriptor(self._descriptor(expression.args[0], owner, context))
        if expression.name == "set":
            return SetDescriptor(self._descriptor(expression.args[0], owner, context))
        if expression.name == "map":
            return MapDescriptor(
                self._descriptor(expression.args[0], owner, context),
                self._descriptor(expression.args[1], owner, context),
            )
        return self._named_descriptor(self.qualify(expression.name), owner, context)

    def _named_descriptor(
        self,
        name: str,
        owner: _StructDecl | None,
        context: str,
    ) -> ValueDescriptor:
        if name in self._typedefs:
            kind = self._alias_kind(name, set())
            if kind.is_primitive:
                return PrimitiveDescriptor(kind)
            return TypedefAlias(kind, name)

        if name in self._structs:
            decl = self._structs[name]
            # Same or later declaration: not fully defined yet from the owner's view
            if owner is not None and decl.position >= owner.position:
                return TypedefAlias(TypeKind.STRUCT, name)
            if decl.kind == "exception":
                return ExceptionRef(name)
            return StructRef(name)

        if name in self._enums:
            return EnumRef(name)

        raise MetadataUnavailable(name, f"Unknown type {name} referenced in {context}")

    def _alias_kind(self, name: str, seen: set[str]) -> TypeKind:
        if name in seen:
            raise MalformedDescriptor(f"typedef cycle through {name}")
        seen.add(name)

        return self._expression_kind(parse_type_expression(self._typedefs[name].target), name, seen)

    def _expression_kind(self, expression: TypeExpression, alias: str, seen: set[str]) -> TypeKind:
        if expression.is_container:
            # Element names must exist even though only the container kind is reported
            for arg in expression.args:
                self._expression_kind(arg, alias, set(seen))
            return TypeKind(expression.name)
        if expression.name in PRIMITIVE_NAMES:
            return PRIMITIVE_NAMES[expression.name]

        qualified = self.qualify(expression.name)
        if qualified in self._typedefs:
            return self._alias_kind(qualified, seen)
        if qualified in self._structs:
            return TypeKind.STRUCT
        if qualified in self._enums:
            return TypeKind.ENUM
        raise MetadataUnavailable(qualified, f"Unknown type {qualified} aliased by {alias}")

    def _field(
        self,
        data: Any,
        owner: _StructDecl | None,
        namespace: str,
    ) -> FieldDescriptor:
        if not isinstance(data, dict) or not data.get("name"):
            raise MalformedDescriptor(f"field declaration must have a name: {data!r}", namespace)

        name = data["name"]
        context = doc_key(namespace, name)

        raw_requirement = str(data.get("requirement", "default")).lower()
        requirement = REQUIREMENTS.get(raw_requirement)
        if requirement is None:
            raise MalformedDescriptor(f"unknown requirement type: {raw_requirement}", context)

        type_text = data.get("type")
        if not type_text:
            raise MalformedDescriptor("field has no type", context)

        value = self._descriptor(parse_type_expression(type_text), owner, context)
        return FieldDescriptor(name, requirement, value)

    def _exception_ref(self, data: Any, context: str) -> ExceptionRef:
        raw_name = data.get("type") if isinstance(data, dict) else data
        if not isinstance(raw_name, str) or not raw_name:
            raise MalformedDescriptor(f"invalid throws entry: {data!r}", context)
        if raw_name == self.base_exception:
            return ExceptionRef(self.base_exception)

        name = self.qualify(raw_name)
        decl = self._structs.get(name)
        if decl is None:
            raise MetadataUnavailable(name, f"Unknown exception {name} thrown by {context}")
        if decl.kind != "exception":
            raise MalformedDescriptor(f"{name} is a {decl.kind}, not an exception", context)
        return ExceptionRef(name)

    # =========================================================================
    # MetadataProvider
    # =========================================================================

    def list_services(self) -> list[str]:
        return list(self._services)

    def service_type_of(self, interface: str) -> str:
        candidates = [interface, self.qualify(interface)]
        if "." in interface:
            enclosing = interface.rsplit(".", 1)[0]
            candidates.extend([enclosing, self.qualify(enclosing)])

        for candidate in candidates:
            if candidate in self._services:
                return candidate
        raise MetadataUnavailable(interface, f"Unknown service interface: {interface}")

    def list_methods(self, service_type: str) -> list[MethodDescriptor]:
        service = self._services.get(service_type)
        if service is None:
            raise MetadataUnavailable(service_type, f"Unknown service: {service_type}")

        methods: list[MethodDescriptor] = []
        for data in service.functions:
            if not isinstance(data, dict) or not data.get("name"):
                raise MalformedDescriptor(f"function declaration must have a name: {data!r}", service.name)

            name = data["name"]
            namespace = doc_key(service.name, name)
            oneway = bool(data.get("oneway", False))
            returns = data.get("returns") or "void"

            success: FieldDescriptor | None = None
            if returns != "void":
                if oneway:
                    raise MalformedDescriptor("oneway function cannot return a value", namespace)
                success = FieldDescriptor(
                    "success",
                    FieldRequirement.DEFAULT,
                    self._descriptor(parse_type_expression(returns), None, namespace),
                )

            methods.append(MethodDescriptor(
                name=name,
                parameters=tuple(
                    self._field(arg, None, namespace) for arg in data.get("arguments") or []
                ),
                success=success,
                exceptions=tuple(
                    self._exception_ref(e, namespace) for e in data.get("throws") or []
                ),
                args_type=f"{service.name}.{name}_args",
                oneway=oneway,
            ))
        return methods

    def struct_fields(self, ref: StructRef) -> list[FieldDescriptor]:
        decl = self._structs.get(ref.name)
        if decl is None or decl.kind == "exception":
            raise MetadataUnavailable(ref.name, f"Unknown struct: {ref.name}")
        return [self._field(data, decl, decl.name) for data in decl.fields]

    def enum_constants(self, ref: EnumRef) -> list[str]:
        decl = self._enums.get(ref.name)
        if decl is None:
            raise MetadataUnavailable(ref.name, f"Unknown enum: {ref.name}")
        return list(decl.constants)

    def exception_fields(self, ref: ExceptionRef) -> list[FieldDescriptor]:
        decl = self._structs.get(ref.name)
        if decl is None or decl.kind != "exception":
            raise MetadataUnavailable(ref.name, f"Unknown exception: {ref.name}")
        return [self._field(data, decl, decl.name) for data in decl.fields]

    def doc_strings(self) -> dict[str, str]:
        return dict(self._doc_strings)
