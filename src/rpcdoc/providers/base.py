"""Abstract metadata provider interface.

All metadata providers MUST implement this interface. Each provider:
1. Lists the methods of one service interface
2. Lists the fields of one struct or exception
3. Lists the constants of one enum
4. Supplies doc strings keyed by qualified name

How a provider discovers metadata (parsed IDL, a static registry, runtime
introspection) is irrelevant to the resolver. A referenced type that cannot be
introspected is fatal and MUST raise MetadataUnavailable.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from rpcdoc.models.descriptors import (
    EnumRef,
    ExceptionRef,
    FieldDescriptor,
    MethodDescriptor,
    StructRef,
)

DEFAULT_BASE_EXCEPTION = "TException"


def doc_key(namespace: str | None, name: str) -> str:
    """Build the doc-string lookup key of a member.

    Args:
        namespace: Enclosing qualified name (service, function or type)
        name: Member name

    Returns:
        ``namespace.name``, or ``name`` alone when there is no namespace
    """
    if not namespace:
        return name
    return f"{namespace}.{name}"


class MetadataProvider(ABC):
    """Abstract source of service, struct and enum metadata.

    Attributes:
        name: Provider identifier (e.g., "static")
        base_exception: Name of the catch-all exception marker excluded
            from function exception lists
    """

    def __init__(self, name: str, base_exception: str = DEFAULT_BASE_EXCEPTION) -> None:
        """Initialize the provider.

        Args:
            name: Provider identifier
            base_exception: Catch-all exception marker
        """
        self.name = name
        self.base_exception = base_exception

    @classmethod
    @abstractmethod
    def from_file(cls, path: Path, base_exception: str | None = None) -> "MetadataProvider":
        """Create a provider from a metadata source file.

        Args:
            path: Metadata source file
            base_exception: Catch-all exception marker override

        Raises:
            FileNotFoundError: If the file does not exist
        """

    @abstractmethod
    def list_services(self) -> list[str]:
        """Return the qualified names of every known service."""

    @abstractmethod
    def service_type_of(self, interface: str) -> str:
        """Return the logical service an interface belongs to.

        Raises:
            MetadataUnavailable: If the interface is unknown
        """

    @abstractmethod
    def list_methods(self, service_type: str) -> list[MethodDescriptor]:
        """Return the methods of a service in declaration order.

        Raises:
            MetadataUnavailable: If the service is unknown
        """

    @abstractmethod
    def struct_fields(self, ref: StructRef) -> list[FieldDescriptor]:
        """Return the fields of a struct in declaration order.

        Raises:
            MetadataUnavailable: If the struct is unknown
        """

    @abstractmethod
    def enum_constants(self, ref: EnumRef) -> list[str]:
        """Return the constant names of an enum in declaration order.

        Raises:
            MetadataUnavailable: If the enum is unknown
        """

    @abstractmethod
    def exception_fields(self, ref: ExceptionRef) -> list[FieldDescriptor]:
        """Return the fields of an exception, empty when it declares none.

        Raises:
            MetadataUnavailable: If the exception is unknown
        """

    @abstractmethod
    def doc_strings(self) -> dict[str, str]:
        """Return every known doc string keyed by qualified name."""

    def doc_string(self, key: str) -> str | None:
        """Look up one doc string."""
        return self.doc_strings().get(key)

    def get_metadata(self) -> dict[str, Any]:
        """Get provider metadata for logging and debugging."""
        return {
            "name": self.name,
            "base_exception": self.base_exception,
            "services": self.list_services(),
        }
