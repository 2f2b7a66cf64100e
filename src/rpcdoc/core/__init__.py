"""Core specification logic.

- TypeResolver: descriptors to TypeInfo
- ServiceBuilder: methods to FunctionInfo, services to ServiceInfo
- ClassCollector: reachable named types, deduplicated by qualified name
"""

from rpcdoc.core.builder import ServiceBuilder
from rpcdoc.core.collector import ClassCollector
from rpcdoc.core.resolver import DEFAULT_MAX_DEPTH, TypeResolver

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ClassCollector",
    "ServiceBuilder",
    "TypeResolver",
]
