"""Unit tests for the specification generator."""

import json
from typing import Any

import pytest

from rpcdoc.bindings import load_inputs
from rpcdoc.encoders import JsonSampleEncoder
from rpcdoc.errors import DuplicateQualifiedNameConflict, MetadataUnavailable
from rpcdoc.generator import GenerationOptions, SpecificationGenerator
from rpcdoc.models import (
    I32,
    STRING,
    VOID,
    ClassInfo,
    EndpointInfo,
    FieldDescriptor,
    FieldInfo,
    FieldRequirement,
    GenerationStatus,
    ListInfo,
    MapInfo,
    PrimitiveDescriptor,
    ServiceBinding,
    SetInfo,
    StructInfo,
    StructRef,
    TypeInfo,
    TypeKind,
    UnresolvedClassInfo,
)
from rpcdoc.providers import StaticMetadataProvider
from tests.fixtures import FOO_ENUM, FOO_EXCEPTION, FOO_SERVICE, FOO_STRUCT, FOO_UNION, HELLO_SERVICE


def _generate(document: dict[str, Any], **options: Any):
    provider = StaticMetadataProvider(document)
    inputs = load_inputs(document, provider)
    generator = SpecificationGenerator(
        provider, encoder=JsonSampleEncoder(), options=GenerationOptions(**options)
    )
    return generator.generate(inputs.bindings, inputs.example_headers, inputs.sample_requests)


def _named_types(type_info: TypeInfo) -> list[str]:
    """Every ClassInfo name reachable from a type."""
    if isinstance(type_info, ClassInfo):
        names = [type_info.name]
        for f in getattr(type_info, "fields", ()):
            names.extend(_named_types(f.type_info))
        return names
    if isinstance(type_info, (ListInfo, SetInfo)):
        return _named_types(type_info.element_type_info)
    if isinstance(type_info, MapInfo):
        return _named_types(type_info.key_type_info) + _named_types(type_info.value_type_info)
    return []


class FlippingProvider(StaticMetadataProvider):
    """Provider whose struct definition changes between lookups."""

    def __init__(self, document: dict[str, Any]) -> None:
        super().__init__(document)
        self._calls = 0

    def struct_fields(self, ref: StructRef) -> list[FieldDescriptor]:
        self._calls += 1
        kind = TypeKind.I32 if self._calls == 1 else TypeKind.STRING
        return [FieldDescriptor("value", FieldRequirement.DEFAULT, PrimitiveDescriptor(kind))]


class TestFooSpecification:
    """Tests against the FooService / HelloService fixture."""

    def test_services(self, foo_document: dict[str, Any]) -> None:
        """Test that both bound services are documented."""
        result = _generate(foo_document)

        assert result.status == GenerationStatus.COMPLETED
        assert list(result.specification.services) == [FOO_SERVICE, HELLO_SERVICE]

    def test_endpoints_and_headers(self, foo_document: dict[str, Any]) -> None:
        """Test endpoint and example-header attachment."""
        spec = _generate(foo_document).specification

        hello = spec.services[HELLO_SERVICE]
        assert hello.endpoints == (
            EndpointInfo("*", "/hello", "", "tbinary", frozenset({"tbinary", "tcompact", "tjson", "ttext"})),
        )
        assert [dict(h) for h in hello.example_headers] == [{"hello": "world"}]

        foo = spec.services[FOO_SERVICE]
        assert foo.endpoints == (EndpointInfo("*", "/foo", "", "tcompact", frozenset({"tcompact"})),)
        assert [dict(h) for h in foo.example_headers] == [{"foo": "bar"}]

    def test_sample_request(self, foo_document: dict[str, Any]) -> None:
        """Test that the registered sample reaches bar3 only."""
        foo = _generate(foo_document).specification.services[FOO_SERVICE]

        assert json.loads(foo.functions["bar3"].sample_request) == {"intVal": 10}
        assert foo.functions["bar4"].sample_request == ""

    def test_global_classes(self, foo_document: dict[str, Any]) -> None:
        """Test the global class set and its ordering."""
        spec = _generate(foo_document).specification

        assert list(spec.classes) == sorted([FOO_ENUM, FOO_EXCEPTION, FOO_STRUCT, FOO_UNION])

    def test_self_reference(self, foo_document: dict[str, Any]) -> None:
        """Test that FooStruct.selfRef is a placeholder naming FooStruct."""
        spec = _generate(foo_document).specification
        foo_struct = spec.classes[FOO_STRUCT]
        self_ref = {f.name: f for f in foo_struct.fields}["selfRef"]

        assert self_ref.requirement == FieldRequirement.OPTIONAL
        assert isinstance(self_ref.type_info, UnresolvedClassInfo)
        assert self_ref.type_info.kind == TypeKind.STRUCT
        assert self_ref.type_info.name == foo_struct.name


class TestCoreProperties:
    """Tests for the properties every specification must satisfy."""

    def test_idempotent(self, foo_document: dict[str, Any]) -> None:
        """Test that generating twice yields equal specifications."""
        first = _generate(foo_document).specification
        second = _generate(foo_document).specification

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_class_completeness(self, foo_document: dict[str, Any]) -> None:
        """Test that every reachable named type is in both class sets."""
        spec = _generate(foo_document).specification

        for service in spec.services.values():
            for function in service.functions.values():
                reachable = _named_types(function.return_type_info)
                for parameter in function.parameters:
                    reachable.extend(_named_types(parameter.type_info))
                for exception in function.exceptions:
                    reachable.extend(_named_types(exception))
                for name in reachable:
                    assert name in service.classes
                    assert name in spec.classes

    def test_class_uniqueness(self, foo_document: dict[str, Any]) -> None:
        """Test that the global class set holds each name once with its own key."""
        spec = _generate(foo_document).specification

        assert all(key == info.name for key, info in spec.classes.items())
        shared = spec.services[FOO_SERVICE].classes[FOO_STRUCT]
        assert spec.classes[FOO_STRUCT] == shared

    def test_no_unresolved_in_classes(self, foo_document: dict[str, Any]) -> None:
        """Test that placeholders never become classes."""
        spec = _generate(foo_document).specification

        assert not any(isinstance(c, UnresolvedClassInfo) for c in spec.classes.values())
        assert "com.example.foo.TypedefedStruct" not in spec.classes

    def test_ordering_independent_of_binding_order(self, foo_document: dict[str, Any]) -> None:
        """Test that reversing the bindings does not change the output."""
        reversed_document = {**foo_document, "endpoints": list(reversed(foo_document["endpoints"]))}

        assert _generate(foo_document).specification == _generate(reversed_document).specification


class TestScenarios:
    """Focused generation scenarios."""

    def test_void_function(self) -> None:
        """Test a service with one no-argument void function."""
        document = {"namespace": "ns", "services": [{"name": "S", "functions": [{"name": "noop"}]}]}

        spec = _generate(document).specification
        function = spec.services["ns.S"].functions["noop"]

        assert function.return_type_info == VOID
        assert function.parameters == ()
        assert function.exceptions == ()
        assert spec.classes == {}

    def test_primitives_only(self) -> None:
        """Test that primitive-only signatures yield no classes."""
        document = {
            "namespace": "ns",
            "services": [{
                "name": "S",
                "functions": [{"name": "add", "returns": "i32", "arguments": [{"name": "s", "type": "string"}]}],
            }],
        }

        spec = _generate(document).specification
        function = spec.services["ns.S"].functions["add"]

        assert function.return_type_info == I32
        assert function.parameters == (FieldInfo("s", FieldRequirement.DEFAULT, STRING),)
        assert spec.classes == {}

    def test_nested_collection(self) -> None:
        """Test map<string, list<set<i32>>> round-trips through generation."""
        document = {
            "namespace": "ns",
            "services": [{"name": "S", "functions": [{"name": "f", "returns": "map<string, list<set<i32>>>"}]}],
        }

        function = _generate(document).specification.services["ns.S"].functions["f"]

        assert function.return_type_info == MapInfo(STRING, ListInfo(SetInfo(I32)))

    def test_dedup_across_services(self) -> None:
        """Test that a struct shared by two services appears once globally."""
        document = {
            "namespace": "ns",
            "structs": [{"name": "Shared", "fields": [{"name": "id", "type": "i64"}]}],
            "services": [
                {"name": "A", "functions": [{"name": "get", "returns": "Shared"}]},
                {"name": "B", "functions": [{"name": "put", "arguments": [{"name": "s", "type": "Shared"}]}]},
            ],
        }

        spec = _generate(document).specification

        assert list(spec.classes) == ["ns.Shared"]
        assert "ns.Shared" in spec.services["ns.A"].classes
        assert "ns.Shared" in spec.services["ns.B"].classes

    def test_multi_endpoint_merge(self) -> None:
        """Test that one service bound twice is one entry with both endpoints."""
        document = {
            "namespace": "ns",
            "services": [{"name": "S", "functions": [{"name": "f"}]}],
            "endpoints": [
                {"interface": "S.Iface", "path": "/x", "service_name": "a"},
                {"interface": "S.AsyncIface", "path": "/debug/x", "service_name": "b", "default_format": "ttext"},
            ],
            "examples": {"headers": {"S": [{"k": "v"}]}},
        }

        spec = _generate(document).specification

        assert list(spec.services) == ["ns.S"]
        service = spec.services["ns.S"]
        assert [(e.path, e.service_name) for e in service.endpoints] == [("/debug/x", "b"), ("/x", "a")]
        assert [dict(h) for h in service.example_headers] == [{"k": "v"}, {"k": "v"}]

    def test_binding_without_path(self) -> None:
        """Test that a non-exact binding documents the service without an endpoint."""
        document = {
            "namespace": "ns",
            "services": [{"name": "S", "functions": [{"name": "f"}]}],
            "endpoints": [{"interface": "S.Iface"}],
        }

        service = _generate(document).specification.services["ns.S"]

        assert service.endpoints == ()

    def test_without_endpoints_every_service_is_documented(self, minimal_document: dict[str, Any]) -> None:
        """Test the fallback binding of every declared service."""
        spec = _generate(minimal_document).specification

        assert list(spec.services) == ["com.example.ItemService"]
        assert list(spec.classes) == ["com.example.Item"]

    def test_empty_bindings(self, foo_provider: StaticMetadataProvider) -> None:
        """Test that no bindings produce an empty specification."""
        result = SpecificationGenerator(foo_provider).generate([])

        assert result.specification.service_count == 0
        assert result.status == GenerationStatus.COMPLETED

    def test_doc_string_overlay(self, foo_provider: StaticMetadataProvider) -> None:
        """Test that extra doc strings override the provider's."""
        generator = SpecificationGenerator(foo_provider, doc_strings={FOO_SERVICE: "Overridden."})

        result = generator.generate([ServiceBinding("FooService.Iface", path="/foo")])

        assert result.specification.services[FOO_SERVICE].doc_string == "Overridden."


class TestErrorHandling:
    """Tests for per-service isolation and fail-fast behavior."""

    @pytest.fixture
    def broken_document(self) -> dict[str, Any]:
        """Return a document with one service referencing an unknown struct."""
        return {
            "namespace": "ns",
            "structs": [{"name": "Item", "fields": [{"name": "id", "type": "i64"}]}],
            "services": [
                {"name": "Good", "functions": [{"name": "get", "returns": "Item"}]},
                {"name": "Bad", "functions": [{"name": "get", "returns": "Missing"}]},
            ],
        }

    def test_failing_service_is_isolated(self, broken_document: dict[str, Any]) -> None:
        """Test that a failing service is recorded and skipped."""
        result = _generate(broken_document)

        assert result.status == GenerationStatus.PARTIAL
        assert list(result.specification.services) == ["ns.Good"]
        assert [e.service for e in result.errors] == ["ns.Bad"]
        assert result.errors[0].component == "provider"

    def test_fail_fast(self, broken_document: dict[str, Any]) -> None:
        """Test that fail_fast aborts the whole run."""
        with pytest.raises(MetadataUnavailable):
            _generate(broken_document, fail_fast=True)

    def test_all_services_failing(self) -> None:
        """Test the failed status when nothing could be documented."""
        document = {"services": [{"name": "Bad", "functions": [{"name": "f", "returns": "Missing"}]}]}

        result = _generate(document)

        assert result.status == GenerationStatus.FAILED
        assert result.specification.service_count == 0

    def test_unknown_interface_is_recorded(self, foo_provider: StaticMetadataProvider) -> None:
        """Test that a binding naming no known service is an error entry."""
        result = SpecificationGenerator(foo_provider).generate([
            ServiceBinding("FooService.Iface", path="/foo"),
            ServiceBinding("NoSuchService.Iface", path="/nope"),
        ])

        assert result.status == GenerationStatus.PARTIAL
        assert result.errors[0].service == "NoSuchService.Iface"

    def test_global_conflict_raises(self) -> None:
        """Test that two services defining one name differently is fatal."""
        document = {
            "structs": [{"name": "X", "fields": []}],
            "services": [
                {"name": "A", "functions": [{"name": "f", "returns": "X"}]},
                {"name": "B", "functions": [{"name": "f", "returns": "X"}]},
            ],
        }
        provider = FlippingProvider(document)
        bindings = [ServiceBinding("A"), ServiceBinding("B")]

        with pytest.raises(DuplicateQualifiedNameConflict) as exc_info:
            SpecificationGenerator(provider).generate(bindings)

        assert exc_info.value.qualified_name == "X"
        assert exc_info.value.existing == StructInfo("X", [FieldInfo("value", FieldRequirement.DEFAULT, I32)])
