"""Unit tests for loading bindings and examples from a metadata document."""

from typing import Any

import pytest

from rpcdoc.bindings import load_bindings, load_examples, load_inputs
from rpcdoc.models import EndpointInfo, ServiceBinding
from rpcdoc.providers import StaticMetadataProvider
from tests.fixtures import FOO_SERVICE, HELLO_SERVICE


class TestLoadBindings:
    """Tests for the endpoints section."""

    def test_fixture_bindings(self, foo_document: dict[str, Any], foo_provider: StaticMetadataProvider) -> None:
        """Test bindings in declaration order with their endpoint settings."""
        bindings = load_bindings(foo_document, foo_provider)

        assert bindings == [
            ServiceBinding(
                "HelloService.AsyncIface",
                path="/hello",
                allowed_formats=frozenset({"tbinary", "tcompact", "tjson", "ttext"}),
            ),
            ServiceBinding(
                "FooService.AsyncIface",
                path="/foo",
                default_format="tcompact",
                allowed_formats=frozenset({"tcompact"}),
            ),
        ]

    def test_no_endpoints_binds_every_service(self, minimal_document: dict[str, Any]) -> None:
        """Test the fallback when no endpoints are declared."""
        provider = StaticMetadataProvider(minimal_document)

        assert load_bindings(minimal_document, provider) == [ServiceBinding("com.example.ItemService")]

    def test_missing_interface(self, minimal_document: dict[str, Any]) -> None:
        """Test that an endpoint entry must name its interface."""
        document = {**minimal_document, "endpoints": [{"path": "/items"}]}

        with pytest.raises(ValueError, match="must name an interface"):
            load_bindings(document, StaticMetadataProvider(document))

    def test_binding_to_endpoint(self) -> None:
        """Test the endpoint a binding exposes."""
        binding = ServiceBinding("S.Iface", path="/s", service_name="s", default_format="tjson")

        assert binding.to_endpoint() == EndpointInfo("*", "/s", "s", "tjson", frozenset({"tjson"}))
        assert ServiceBinding("S.Iface").to_endpoint() is None


class TestLoadExamples:
    """Tests for the examples section."""

    def test_fixture_examples(self, foo_document: dict[str, Any], foo_provider: StaticMetadataProvider) -> None:
        """Test that service and argument-type keys are qualified."""
        headers, requests = load_examples(foo_document, foo_provider)

        assert headers == {HELLO_SERVICE: [{"hello": "world"}], FOO_SERVICE: [{"foo": "bar"}]}
        assert requests == {f"{FOO_SERVICE}.bar3_args": {"intVal": 10}}

    def test_header_values_are_strings(self, minimal_document: dict[str, Any]) -> None:
        """Test that header names and values are coerced to strings."""
        document = {**minimal_document, "examples": {"headers": {"ItemService": [{"retries": 3}]}}}

        headers, _ = load_examples(document, StaticMetadataProvider(document))

        assert headers == {"com.example.ItemService": [{"retries": "3"}]}

    @pytest.mark.parametrize(
        "examples, message",
        [
            (["headers"], "examples must be a mapping"),
            ({"headers": ["ItemService"]}, "examples.headers must be a mapping"),
            ({"headers": {"ItemService": {"a": "1"}}}, "Header sets for ItemService must be a list"),
            ({"headers": {"ItemService": ["a=1"]}}, "Header set for ItemService must be a mapping"),
            ({"requests": ["ItemService.getItem_args"]}, "examples.requests must be a mapping"),
        ],
    )
    def test_malformed_examples(self, minimal_document: dict[str, Any], examples: Any, message: str) -> None:
        """Test that misshapen example sections are rejected with ValueError."""
        document = {**minimal_document, "examples": examples}

        with pytest.raises(ValueError, match=message):
            load_examples(document, StaticMetadataProvider(document))

    def test_no_examples(self, minimal_document: dict[str, Any]) -> None:
        """Test that a document without examples yields empty mappings."""
        assert load_examples(minimal_document, StaticMetadataProvider(minimal_document)) == ({}, {})

    def test_load_inputs(self, foo_document: dict[str, Any], foo_provider: StaticMetadataProvider) -> None:
        """Test that load_inputs combines bindings and examples."""
        inputs = load_inputs(foo_document, foo_provider)

        assert len(inputs.bindings) == 2
        assert FOO_SERVICE in inputs.example_headers
        assert f"{FOO_SERVICE}.bar3_args" in inputs.sample_requests
