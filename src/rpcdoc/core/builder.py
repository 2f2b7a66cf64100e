"""Function and service builder.

Turns the methods of one service interface into FunctionInfo values and
assembles the ServiceInfo with every named type reachable from them.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from rpcdoc.core.collector import ClassCollector
from rpcdoc.core.resolver import TypeResolver
from rpcdoc.encoders.base import SampleEncoder
from rpcdoc.models.descriptors import MethodDescriptor
from rpcdoc.models.specification import EndpointInfo, FunctionInfo, ServiceInfo
from rpcdoc.models.types import VOID, TypeInfo
from rpcdoc.providers.base import MetadataProvider, doc_key

logger = logging.getLogger(__name__)


class ServiceBuilder:
    """Builds FunctionInfo and ServiceInfo values from provider metadata.

    Usage:
        builder = ServiceBuilder(provider, resolver, encoder)
        service = builder.build_service("com.example.FooService", endpoints)
    """

    def __init__(
        self,
        provider: MetadataProvider,
        resolver: TypeResolver,
        encoder: SampleEncoder | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            provider: Metadata source
            resolver: Type resolver sharing the same provider
            encoder: Sample request encoder; without one, samples are empty
        """
        self.provider = provider
        self.resolver = resolver
        self.encoder = encoder

    @property
    def doc_strings(self) -> Mapping[str, str]:
        return self.resolver.doc_strings

    def build_function(
        self,
        method: MethodDescriptor,
        namespace: str,
        sample_requests: Mapping[str, Any] | None = None,
    ) -> FunctionInfo:
        """Build one function.

        Args:
            method: Method descriptor
            namespace: Qualified name of the enclosing service
            sample_requests: Sample values keyed by argument type name

        Returns:
            FunctionInfo with parameters and exceptions in declaration order

        Raises:
            SampleEncodingFailure: If the sample for this method cannot be encoded
        """
        function_key = doc_key(namespace, method.name)

        parameters = [self.resolver.resolve_field(p, function_key) for p in method.parameters]

        return_type: TypeInfo = VOID
        if method.success is not None and not method.oneway:
            return_type = self.resolver.resolve_field(method.success, function_key).type_info

        exceptions = [
            self.resolver.resolve_exception(ref)
            for ref in method.exceptions
            if ref.name != self.provider.base_exception
        ]

        sample_request = ""
        sample = (sample_requests or {}).get(method.args_type)
        if sample is not None and self.encoder is not None:
            sample_request = self.encoder.encode_sample(method.args_type, sample)

        return FunctionInfo(
            name=method.name,
            return_type_info=return_type,
            parameters=parameters,
            exceptions=exceptions,
            sample_request=sample_request,
            doc_string=self.doc_strings.get(function_key),
        )

    def build_service(
        self,
        service_type: str,
        endpoints: Iterable[EndpointInfo] = (),
        sample_requests: Mapping[str, Any] | None = None,
        example_headers: Sequence[Mapping[str, str]] = (),
    ) -> ServiceInfo:
        """Build one service.

        Args:
            service_type: Qualified service name
            endpoints: Endpoints serving the service (sorted on construction)
            sample_requests: Sample values keyed by argument type name
            example_headers: Example header sets in registration order

        Returns:
            ServiceInfo with functions in declaration order

        Raises:
            MetadataUnavailable: If the service or a reachable type is unknown
            MalformedDescriptor: If the provider reports an unrecognized descriptor
            DuplicateQualifiedNameConflict: If two definitions share a name
            SampleEncodingFailure: If a sample request cannot be encoded
        """
        functions: dict[str, FunctionInfo] = {}
        collector = ClassCollector()

        for method in self.provider.list_methods(service_type):
            if method.name in functions:
                logger.warning("Duplicate method %s in %s", method.name, service_type)
            function = self.build_function(method, service_type, sample_requests)
            functions[function.name] = function
            collector.collect_function(function)

        logger.debug(
            "Built service %s: %d functions, %d classes",
            service_type,
            len(functions),
            len(collector),
        )

        return ServiceInfo(
            name=service_type,
            functions=functions,
            classes=collector.classes,
            endpoints=tuple(endpoints),
            doc_string=self.doc_strings.get(service_type),
            example_headers=tuple(example_headers),
        )
