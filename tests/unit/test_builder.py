"""Unit tests for the function and service builder."""

import json

import pytest

from rpcdoc.core.builder import ServiceBuilder
from rpcdoc.core.resolver import TypeResolver
from rpcdoc.encoders import JsonSampleEncoder, YamlSampleEncoder
from rpcdoc.errors import MetadataUnavailable, SampleEncodingFailure
from rpcdoc.models.descriptors import StructRef
from rpcdoc.models.specification import EndpointInfo
from rpcdoc.models.types import (
    I32,
    STRING,
    VOID,
    FieldInfo,
    FieldRequirement,
    ListInfo,
    MapInfo,
    TypeKind,
    UnresolvedClassInfo,
)
from rpcdoc.providers import StaticMetadataProvider
from tests.fixtures import FOO_ENUM, FOO_EXCEPTION, FOO_SERVICE, FOO_STRUCT, FOO_UNION, HELLO_SERVICE


def _builder(provider: StaticMetadataProvider, encoder=None) -> ServiceBuilder:
    return ServiceBuilder(provider, TypeResolver(provider, provider.doc_strings()), encoder)


@pytest.fixture
def builder(foo_provider: StaticMetadataProvider) -> ServiceBuilder:
    """Return a builder with a JSON sample encoder."""
    return _builder(foo_provider, JsonSampleEncoder())


@pytest.fixture
def foo_methods(foo_provider: StaticMetadataProvider) -> dict:
    """Return FooService method descriptors by name."""
    return {m.name: m for m in foo_provider.list_methods(FOO_SERVICE)}


class TestBuildFunction:
    """Tests for FunctionInfo construction."""

    def test_void_function(self, builder: ServiceBuilder, foo_methods: dict) -> None:
        """Test a function with no parameters and no result."""
        bar1 = builder.build_function(foo_methods["bar1"], FOO_SERVICE)

        assert bar1.parameters == ()
        assert bar1.return_type_info == VOID
        assert [e.name for e in bar1.exceptions] == [FOO_EXCEPTION]
        assert bar1.sample_request == ""
        assert bar1.doc_string == "Does nothing."

    def test_primitive_result(self, builder: ServiceBuilder, foo_methods: dict) -> None:
        """Test a function returning a primitive."""
        bar2 = builder.build_function(foo_methods["bar2"], FOO_SERVICE)

        assert bar2.return_type_info == STRING
        assert len(bar2.exceptions) == 1

    def test_struct_parameter_and_result(self, builder: ServiceBuilder, foo_methods: dict) -> None:
        """Test struct expansion in parameters and result."""
        bar3 = builder.build_function(foo_methods["bar3"], FOO_SERVICE)
        foo = builder.resolver.resolve(StructRef(FOO_STRUCT))

        assert bar3.return_type_info == foo
        assert bar3.parameters == (
            FieldInfo("intVal", FieldRequirement.DEFAULT, I32, "An integer."),
            FieldInfo("foo", FieldRequirement.DEFAULT, foo),
        )

    def test_collection_results(self, builder: ServiceBuilder, foo_methods: dict) -> None:
        """Test list and map of structs."""
        bar3 = builder.build_function(foo_methods["bar3"], FOO_SERVICE)
        foo = bar3.return_type_info

        bar4 = builder.build_function(foo_methods["bar4"], FOO_SERVICE)
        bar5 = builder.build_function(foo_methods["bar5"], FOO_SERVICE)

        assert bar4.return_type_info == ListInfo(foo)
        assert bar4.parameters == (FieldInfo("foos", FieldRequirement.DEFAULT, ListInfo(foo)),)
        assert bar5.return_type_info == MapInfo(STRING, foo)

    def test_typedef_parameters(self, builder: ServiceBuilder, foo_methods: dict) -> None:
        """Test that typedef parameters stay unresolved."""
        bar6 = builder.build_function(foo_methods["bar6"], FOO_SERVICE)
        typed = UnresolvedClassInfo(TypeKind.STRUCT, "com.example.foo.TypedefedStruct", "Alias of FooStruct.")

        assert [p.type_info for p in bar6.parameters] == [
            STRING,
            typed,
            UnresolvedClassInfo(TypeKind.ENUM, "com.example.foo.TypedefedEnum"),
            UnresolvedClassInfo(TypeKind.MAP, "com.example.foo.TypedefedMap"),
            UnresolvedClassInfo(TypeKind.LIST, "com.example.foo.TypedefedList"),
            UnresolvedClassInfo(TypeKind.SET, "com.example.foo.TypedefedSet"),
            UnresolvedClassInfo(TypeKind.LIST, "com.example.foo.NestedTypedefedStructs"),
            ListInfo(ListInfo(typed)),
        ]
        assert bar6.return_type_info == VOID
        assert bar6.exceptions == ()

    def test_sample_request_encoded(self, builder: ServiceBuilder, foo_methods: dict) -> None:
        """Test that a registered sample is encoded."""
        samples = {f"{FOO_SERVICE}.bar3_args": {"intVal": 10}}

        bar3 = builder.build_function(foo_methods["bar3"], FOO_SERVICE, samples)

        assert json.loads(bar3.sample_request) == {"intVal": 10}

    def test_sample_request_yaml(self, foo_provider: StaticMetadataProvider, foo_methods: dict) -> None:
        """Test that the encoder decides the sample format."""
        samples = {f"{FOO_SERVICE}.bar3_args": {"intVal": 10}}

        bar3 = _builder(foo_provider, YamlSampleEncoder()).build_function(foo_methods["bar3"], FOO_SERVICE, samples)

        assert bar3.sample_request == "intVal: 10"

    def test_no_encoder_means_no_sample(self, foo_provider: StaticMetadataProvider, foo_methods: dict) -> None:
        """Test that samples stay empty without an encoder."""
        samples = {f"{FOO_SERVICE}.bar3_args": {"intVal": 10}}

        bar3 = _builder(foo_provider).build_function(foo_methods["bar3"], FOO_SERVICE, samples)

        assert bar3.sample_request == ""

    def test_unencodable_sample(self, builder: ServiceBuilder, foo_methods: dict) -> None:
        """Test that an encoding failure is reported with the argument type."""
        samples = {f"{FOO_SERVICE}.bar3_args": {"intVal": object()}}

        with pytest.raises(SampleEncodingFailure) as exc_info:
            builder.build_function(foo_methods["bar3"], FOO_SERVICE, samples)

        assert exc_info.value.args_type == f"{FOO_SERVICE}.bar3_args"

    def test_base_exception_excluded(self, builder: ServiceBuilder, foo_provider: StaticMetadataProvider) -> None:
        """Test that the catch-all exception is not listed."""
        hello = builder.build_function(foo_provider.list_methods(HELLO_SERVICE)[0], HELLO_SERVICE)

        assert hello.exceptions == ()
        assert hello.parameters == (FieldInfo("name", FieldRequirement.REQUIRED, STRING),)

    def test_oneway_reports_void(self, builder: ServiceBuilder, foo_provider: StaticMetadataProvider) -> None:
        """Test that a oneway function returns VOID."""
        ping = builder.build_function(foo_provider.list_methods(HELLO_SERVICE)[1], HELLO_SERVICE)

        assert ping.return_type_info == VOID


class TestBuildService:
    """Tests for ServiceInfo construction."""

    def test_functions_in_declaration_order(self, builder: ServiceBuilder) -> None:
        """Test that functions keep provider order."""
        service = builder.build_service(FOO_SERVICE)

        assert list(service.functions) == ["bar1", "bar2", "bar3", "bar4", "bar5", "bar6"]
        assert service.doc_string == "Foo operations."

    def test_reachable_classes(self, builder: ServiceBuilder) -> None:
        """Test that every named type reachable from a function is collected."""
        service = builder.build_service(FOO_SERVICE)

        assert set(service.classes) == {FOO_EXCEPTION, FOO_ENUM, FOO_UNION, FOO_STRUCT}
        assert list(service.classes).index(FOO_UNION) < list(service.classes).index(FOO_STRUCT)

    def test_endpoints_sorted(self, builder: ServiceBuilder) -> None:
        """Test that endpoints are ordered by path regardless of input order."""
        service = builder.build_service(
            FOO_SERVICE,
            endpoints=[
                EndpointInfo("*", "/foo", "a", "tbinary"),
                EndpointInfo("*", "/debug/foo", "b", "ttext"),
            ],
        )

        assert [e.path for e in service.endpoints] == ["/debug/foo", "/foo"]

    def test_example_headers(self, builder: ServiceBuilder) -> None:
        """Test that example headers are carried in order."""
        service = builder.build_service(
            FOO_SERVICE, example_headers=[{"foobar": "barbaz"}, {"a": "b"}]
        )

        assert [dict(h) for h in service.example_headers] == [{"foobar": "barbaz"}, {"a": "b"}]

    def test_unknown_service(self, builder: ServiceBuilder) -> None:
        """Test that an unknown service is unavailable."""
        with pytest.raises(MetadataUnavailable):
            builder.build_service("com.example.foo.Nope")
