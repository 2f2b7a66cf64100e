"""Generation inputs read from a metadata document.

The ``endpoints`` section lists service bindings; the ``examples`` section
holds example header sets (keyed by service) and sample requests (keyed by
argument type, ``<service>.<method>_args``).
"""

from dataclasses import dataclass, field
from typing import Any

from rpcdoc.models.generation import ServiceBinding
from rpcdoc.providers.base import MetadataProvider


@dataclass
class GenerationInputs:
    """Everything a generation run needs besides the provider.

    Attributes:
        bindings: Service bindings in declaration order
        example_headers: Example header sets by qualified service name
        sample_requests: Sample request values by argument type name
    """

    bindings: list[ServiceBinding] = field(default_factory=list)
    example_headers: dict[str, list[dict[str, str]]] = field(default_factory=dict)
    sample_requests: dict[str, Any] = field(default_factory=dict)


def _mapping(data: Any, what: str) -> dict[Any, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a mapping: {data!r}")
    return data


def load_bindings(document: dict[str, Any], provider: MetadataProvider) -> list[ServiceBinding]:
    """Load service bindings from the ``endpoints`` section.

    Without an ``endpoints`` section every known service is bound once with no
    endpoint, so the whole document is still documented.

    Args:
        document: Metadata document mapping
        provider: Provider over the same document

    Returns:
        Service bindings

    Raises:
        ValueError: If an endpoint entry has no interface
    """
    endpoints = document.get("endpoints")
    if not endpoints:
        return [ServiceBinding(interface=name) for name in provider.list_services()]

    bindings: list[ServiceBinding] = []
    for data in endpoints:
        interface = data.get("interface") if isinstance(data, dict) else None
        if not interface:
            raise ValueError(f"Endpoint entry must name an interface: {data!r}")
        bindings.append(ServiceBinding(
            interface=interface,
            path=data.get("path"),
            host_pattern=data.get("host", "*"),
            service_name=data.get("service_name", ""),
            default_format=data.get("default_format", "tbinary"),
            allowed_formats=frozenset(data.get("allowed_formats") or []),
        ))
    return bindings


def load_examples(
    document: dict[str, Any],
    provider: MetadataProvider,
) -> tuple[dict[str, list[dict[str, str]]], dict[str, Any]]:
    """Load example headers and sample requests from the ``examples`` section.

    Service and argument-type keys are qualified with the document namespace.

    Returns:
        Tuple of (example headers by service, sample requests by argument type)

    Raises:
        ValueError: If a section or header set is not shaped as documented
    """
    examples = _mapping(document.get("examples"), "examples")
    qualify = getattr(provider, "qualify", lambda name: name)

    example_headers: dict[str, list[dict[str, str]]] = {}
    for service, header_sets in _mapping(examples.get("headers"), "examples.headers").items():
        if header_sets is not None and not isinstance(header_sets, list):
            raise ValueError(f"Header sets for {service} must be a list: {header_sets!r}")
        example_headers[qualify(service)] = [
            {str(k): str(v) for k, v in _mapping(headers, f"Header set for {service}").items()}
            for headers in header_sets or []
        ]

    sample_requests: dict[str, Any] = {}
    for args_type, value in _mapping(examples.get("requests"), "examples.requests").items():
        # "FooService.bar_args" -> "<namespace>.FooService.bar_args"
        service, _, method = args_type.rpartition(".")
        key = f"{qualify(service)}.{method}" if service else args_type
        sample_requests[key] = value

    return example_headers, sample_requests


def load_inputs(document: dict[str, Any], provider: MetadataProvider) -> GenerationInputs:
    """Load bindings and examples from a metadata document."""
    example_headers, sample_requests = load_examples(document, provider)
    return GenerationInputs(
        bindings=load_bindings(document, provider),
        example_headers=example_headers,
        sample_requests=sample_requests,
    )
