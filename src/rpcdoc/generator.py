"""Specification generator (aggregator).

Merges every (endpoint, service interface) binding into one
ServiceSpecification in two phases:
1. Group bindings by the logical service they implement into append-only
   entries (endpoints and example headers in registration order)
2. Build one immutable ServiceInfo per entry, then union the per-service class
   sets by qualified name

One generate() call is atomic: rerun it wholesale when metadata changes.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from rpcdoc.core.builder import ServiceBuilder
from rpcdoc.core.collector import ClassCollector
from rpcdoc.core.resolver import DEFAULT_MAX_DEPTH, TypeResolver
from rpcdoc.encoders.base import SampleEncoder
from rpcdoc.errors import MalformedDescriptor, MetadataUnavailable, RpcDocError
from rpcdoc.models.generation import (
    GenerationError,
    GenerationResult,
    GenerationStatus,
    ServiceBinding,
)
from rpcdoc.models.specification import EndpointInfo, ServiceInfo, ServiceSpecification
from rpcdoc.providers.base import MetadataProvider
from rpcdoc.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class GenerationOptions:
    """Options for controlling generation.

    Attributes:
        fail_fast: Abort the whole run on the first failing service
            (otherwise failing services are recorded and skipped)
        max_depth: Maximum nesting of struct expansion
    """

    fail_fast: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass
class ServiceEntry:
    """Bindings of one logical service, accumulated during grouping.

    Attributes:
        service_type: Qualified service name
        endpoints: Endpoints in registration order
        example_headers: Example header sets in registration order
    """

    service_type: str
    endpoints: list[EndpointInfo] = field(default_factory=list)
    example_headers: list[Mapping[str, str]] = field(default_factory=list)


class SpecificationGenerator:
    """Generates a ServiceSpecification from service bindings.

    Usage:
        generator = SpecificationGenerator(provider, encoder=JsonSampleEncoder())
        result = generator.generate(bindings, example_headers)
        spec = result.specification
    """

    def __init__(
        self,
        provider: MetadataProvider,
        doc_strings: Mapping[str, str] | None = None,
        encoder: SampleEncoder | None = None,
        options: GenerationOptions | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            provider: Metadata source
            doc_strings: Extra doc strings, overlaid on the provider's
            encoder: Sample request encoder (samples stay empty without one)
            options: Generation options
        """
        self.provider = provider
        self.options = options or GenerationOptions()
        self.doc_strings = {**provider.doc_strings(), **(doc_strings or {})}
        self._resolver = TypeResolver(provider, self.doc_strings, self.options.max_depth)
        self._builder = ServiceBuilder(provider, self._resolver, encoder)

    def generate(
        self,
        bindings: Iterable[ServiceBinding],
        example_headers: Mapping[str, Sequence[Mapping[str, str]]] | None = None,
        sample_requests: Mapping[str, Any] | None = None,
    ) -> GenerationResult:
        """Generate the specification.

        Args:
            bindings: Service interfaces bound at endpoints
            example_headers: Example header sets keyed by qualified service name
            sample_requests: Sample request values keyed by argument type name

        Returns:
            GenerationResult with the specification and per-service errors

        Raises:
            RpcDocError: On the first failure when fail_fast is set
            DuplicateQualifiedNameConflict: If two services define the same
                qualified name differently
        """
        result = GenerationResult()
        entries = self.group_bindings(bindings, example_headers or {}, result)

        services: list[ServiceInfo] = []
        for entry in entries:
            try:
                service = self._builder.build_service(
                    entry.service_type,
                    entry.endpoints,
                    sample_requests,
                    entry.example_headers,
                )
            except RpcDocError as e:
                self._handle_error(result, e, entry.service_type)
                continue
            services.append(service)

        global_classes = ClassCollector()
        for service in services:
            global_classes.merge(service.classes.values())

        result.specification = ServiceSpecification.of(services, global_classes.classes.values())
        result.status = self._status(result)

        spec = result.specification
        logger.structured(
            logging.INFO,
            f"Generated specification: {spec.service_count} services, "
            f"{spec.function_count} functions, {spec.class_count} classes",
            status=result.status.value,
            services=spec.service_count,
            functions=spec.function_count,
            classes=spec.class_count,
            skipped=len(result.errors),
        )
        return result

    def group_bindings(
        self,
        bindings: Iterable[ServiceBinding],
        example_headers: Mapping[str, Sequence[Mapping[str, str]]],
        result: GenerationResult,
    ) -> list[ServiceEntry]:
        """Group bindings by logical service type.

        For every binding, the example headers registered for its service are
        appended, so a service bound at two endpoints carries them twice.

        Returns:
            Entries sorted by service type
        """
        entries: dict[str, ServiceEntry] = {}

        for binding in bindings:
            try:
                service_type = self.provider.service_type_of(binding.interface)
            except (MetadataUnavailable, MalformedDescriptor) as e:
                self._handle_error(result, e, binding.interface)
                continue

            entry = entries.get(service_type)
            if entry is None:
                entry = entries[service_type] = ServiceEntry(service_type)

            endpoint = binding.to_endpoint()
            if endpoint is not None:
                entry.endpoints.append(endpoint)
            else:
                logger.debug("No exact path for %s; endpoint omitted", binding.interface)

            entry.example_headers.extend(example_headers.get(service_type, ()))

        return [entries[name] for name in sorted(entries)]

    def _handle_error(self, result: GenerationResult, error: RpcDocError, service: str) -> None:
        if self.options.fail_fast:
            raise error
        logger.warning("Skipping %s: %s", service, error)
        result.add_error(GenerationError.from_exception(error, service=service))

    @staticmethod
    def _status(result: GenerationResult) -> GenerationStatus:
        if not result.has_errors():
            return GenerationStatus.COMPLETED
        if result.specification.service_count == 0:
            return GenerationStatus.FAILED
        return GenerationStatus.PARTIAL
