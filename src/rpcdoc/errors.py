"""Errors raised while generating a service specification.

None of these are retried: each is a deterministic function of the input.
"""

from typing import Any


class RpcDocError(Exception):
    """Base class for rpcdoc errors."""

    component = "rpcdoc"


class MetadataUnavailable(RpcDocError):
    """Raised when a type reachable from a method signature cannot be introspected."""

    component = "provider"

    def __init__(self, qualified_name: str, message: str | None = None) -> None:
        self.qualified_name = qualified_name
        self.message = message or f"Metadata not available: {qualified_name}"
        super().__init__(self.message)


class MalformedDescriptor(RpcDocError):
    """Raised when a provider returns a descriptor the resolver cannot map."""

    component = "resolver"

    def __init__(self, message: str, context: str | None = None) -> None:
        self.context = context
        full_message = f"Malformed descriptor: {message}"
        if context:
            full_message += f" (in {context})"
        super().__init__(full_message)


class DuplicateQualifiedNameConflict(RpcDocError):
    """Raised when two different definitions claim the same qualified name."""

    component = "collector"

    def __init__(self, qualified_name: str, existing: Any, incoming: Any) -> None:
        self.qualified_name = qualified_name
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"Conflicting definitions for {qualified_name}: {existing!r} != {incoming!r}"
        )


class SampleEncodingFailure(RpcDocError):
    """Raised when a sample request value cannot be encoded."""

    component = "encoder"

    def __init__(self, args_type: str, message: str) -> None:
        self.args_type = args_type
        super().__init__(f"Failed to encode sample request for {args_type}: {message}")
