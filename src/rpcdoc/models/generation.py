"""Generation input and result entities.

This module contains entities related to one generation run:
- ServiceBinding: One service interface bound at one endpoint (input)
- GenerationError: A service that could not be documented
- GenerationStatus: Outcome of a run
- GenerationResult: The specification plus the errors collected on the way
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rpcdoc.models.specification import EndpointInfo, ServiceSpecification


class GenerationStatus(Enum):
    """Status of a generation run."""

    PENDING = "pending"
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True)
class ServiceBinding:
    """A service interface bound at a network endpoint.

    Attributes:
        interface: Qualified name of the bound interface (or of the service itself)
        path: Exact path, None when the route is not an exact path
        host_pattern: Virtual host pattern
        service_name: Name of the service within a multiplexed endpoint
        default_format: Default serialization format
        allowed_formats: Accepted serialization formats
    """

    interface: str
    path: str | None = None
    host_pattern: str = "*"
    service_name: str = ""
    default_format: str = "tbinary"
    allowed_formats: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_formats", frozenset(self.allowed_formats))

    def to_endpoint(self) -> EndpointInfo | None:
        """Return the endpoint this binding exposes, None for non-exact paths."""
        if self.path is None:
            return None
        return EndpointInfo(
            host_pattern=self.host_pattern,
            path=self.path,
            service_name=self.service_name,
            default_format=self.default_format,
            allowed_formats=self.allowed_formats,
        )


@dataclass
class GenerationError:
    """A failure encountered while documenting one service.

    Attributes:
        component: Component that failed (provider, resolver, collector, encoder)
        message: Error description
        service: Qualified name of the affected service, if known
        recoverable: Whether generation continued after this error
    """

    component: str
    message: str
    service: str | None = None
    recoverable: bool = True

    @classmethod
    def from_exception(
        cls,
        error: Exception,
        service: str | None = None,
        recoverable: bool = True,
    ) -> "GenerationError":
        """Create an error entry from a raised exception."""
        return cls(
            component=getattr(error, "component", "rpcdoc"),
            message=str(error),
            service=service,
            recoverable=recoverable,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "component": self.component,
            "message": self.message,
            "service": self.service,
            "recoverable": self.recoverable,
        }


@dataclass
class GenerationResult:
    """Outcome of one generation run.

    Attributes:
        specification: The generated specification (failed services omitted)
        status: Run status
        errors: Per-service failures
    """

    specification: ServiceSpecification = field(default_factory=ServiceSpecification)
    status: GenerationStatus = GenerationStatus.PENDING
    errors: list[GenerationError] = field(default_factory=list)

    def add_error(self, error: GenerationError) -> None:
        """Add a generation error."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Check if any errors were recorded."""
        return len(self.errors) > 0

    def get_errors_by_service(self, service: str) -> list[GenerationError]:
        """Get errors for a specific service."""
        return [e for e in self.errors if e.service == service]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "status": self.status.value,
            "specification": self.specification.to_dict(),
            "errors": [e.to_dict() for e in self.errors],
        }
