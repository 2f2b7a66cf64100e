"""Service specification entities.

This module contains the aggregate entities of a generated specification:
- FunctionInfo: One RPC method with resolved parameter, return and exception types
- EndpointInfo: One network endpoint serving a service
- ServiceInfo: One logical service with its functions, classes and endpoints
- ServiceSpecification: Every documented service plus the global class set

Entities are immutable once constructed. Mappings are exposed read-only.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from rpcdoc.models.types import ClassInfo, ExceptionInfo, FieldInfo, TypeInfo


@dataclass(frozen=True)
class FunctionInfo:
    """A service method.

    Attributes:
        name: Method name
        return_type_info: Resolved return type (VOID for oneway/void methods)
        parameters: Parameters in declaration order
        exceptions: Declared exceptions in declaration order
        sample_request: Encoded sample request, empty when none was supplied
        doc_string: Documentation string if available
    """

    name: str
    return_type_info: TypeInfo
    parameters: tuple[FieldInfo, ...] = ()
    exceptions: tuple[ExceptionInfo, ...] = ()
    sample_request: str = ""
    doc_string: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "exceptions", tuple(self.exceptions))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "return_type": self.return_type_info.to_dict(),
            "parameters": [p.to_dict() for p in self.parameters],
            "exceptions": [e.name for e in self.exceptions],
            "sample_request": self.sample_request,
        }
        if self.doc_string is not None:
            result["doc_string"] = self.doc_string
        return result


@dataclass(frozen=True)
class EndpointInfo:
    """A network endpoint serving a service.

    Attributes:
        host_pattern: Virtual host pattern (e.g. ``*``)
        path: Exact path the service is mounted at
        service_name: Name of the service within a multiplexed endpoint
        default_format: Default serialization format
        allowed_formats: Every serialization format the endpoint accepts
    """

    host_pattern: str
    path: str
    service_name: str = ""
    default_format: str = "tbinary"
    allowed_formats: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        formats = frozenset(self.allowed_formats) | {self.default_format}
        object.__setattr__(self, "allowed_formats", formats)

    @property
    def sort_key(self) -> tuple[str, str, str, str]:
        """Display ordering: path, then service name."""
        return (self.path, self.service_name, self.host_pattern, self.default_format)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "host_pattern": self.host_pattern,
            "path": self.path,
            "service_name": self.service_name,
            "default_format": self.default_format,
            "allowed_formats": sorted(self.allowed_formats),
        }


@dataclass(frozen=True, eq=False)
class ServiceInfo:
    """A documented logical service.

    Attributes:
        name: Qualified service name
        functions: Functions by name, in declaration order
        classes: Reachable named types by qualified name, in discovery order
        endpoints: Endpoints sorted by (path, service_name)
        doc_string: Documentation string if available
        example_headers: Example header sets in registration order
    """

    name: str
    functions: Mapping[str, FunctionInfo] = field(default_factory=dict)
    classes: Mapping[str, ClassInfo] = field(default_factory=dict)
    endpoints: tuple[EndpointInfo, ...] = ()
    doc_string: str | None = None
    example_headers: tuple[Mapping[str, str], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "functions", MappingProxyType(dict(self.functions)))
        object.__setattr__(self, "classes", MappingProxyType(dict(self.classes)))
        object.__setattr__(
            self, "endpoints", tuple(sorted(self.endpoints, key=lambda e: e.sort_key))
        )
        object.__setattr__(
            self,
            "example_headers",
            tuple(MappingProxyType(dict(h)) for h in self.example_headers),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServiceInfo):
            return NotImplemented
        return (
            self.name == other.name
            and list(self.functions.items()) == list(other.functions.items())
            and list(self.classes.items()) == list(other.classes.items())
            and self.endpoints == other.endpoints
            and self.doc_string == other.doc_string
            and [dict(h) for h in self.example_headers]
            == [dict(h) for h in other.example_headers]
        )

    @property
    def simple_name(self) -> str:
        """Return the name without its namespace."""
        return self.name.rsplit(".", 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "functions": [f.to_dict() for f in self.functions.values()],
            "classes": list(self.classes),
            "endpoints": [e.to_dict() for e in self.endpoints],
            "example_headers": [dict(h) for h in self.example_headers],
        }
        if self.doc_string is not None:
            result["doc_string"] = self.doc_string
        return result


@dataclass(frozen=True, eq=False)
class ServiceSpecification:
    """The normalized output graph of services, functions and types.

    Attributes:
        services: Services by qualified name, sorted by name
        classes: Named types by qualified name, sorted by name, at most one per name
    """

    services: Mapping[str, ServiceInfo] = field(default_factory=dict)
    classes: Mapping[str, ClassInfo] = field(default_factory=dict)

    def __post_init__(self) -> None:
        services = {name: self.services[name] for name in sorted(self.services)}
        classes = {name: self.classes[name] for name in sorted(self.classes)}
        object.__setattr__(self, "services", MappingProxyType(services))
        object.__setattr__(self, "classes", MappingProxyType(classes))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServiceSpecification):
            return NotImplemented
        return dict(self.services) == dict(other.services) and dict(self.classes) == dict(
            other.classes
        )

    @classmethod
    def of(cls, services: Iterable[ServiceInfo], classes: Iterable[ClassInfo]) -> "ServiceSpecification":
        """Build a specification from service and class sequences."""
        return cls(
            services={s.name: s for s in services},
            classes={c.name: c for c in classes},
        )

    @property
    def service_count(self) -> int:
        """Return total number of services."""
        return len(self.services)

    @property
    def class_count(self) -> int:
        """Return total number of named types."""
        return len(self.classes)

    @property
    def function_count(self) -> int:
        """Return total number of functions across all services."""
        return sum(len(s.functions) for s in self.services.values())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "services": [s.to_dict() for s in self.services.values()],
            "classes": [c.to_dict() for c in self.classes.values()],
            "service_count": self.service_count,
            "class_count": self.class_count,
            "function_count": self.function_count,
        }
