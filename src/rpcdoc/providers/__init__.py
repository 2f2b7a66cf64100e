"""rpcdoc metadata providers.

Providers expose service, struct and enum metadata to the type resolver.

Providers:
- StaticMetadataProvider: YAML/JSON metadata document (build-time registry)
"""

from rpcdoc.encoders import JsonSampleEncoder, YamlSampleEncoder
from rpcdoc.providers.base import DEFAULT_BASE_EXCEPTION, MetadataProvider, doc_key
from rpcdoc.providers.registry import ProviderRegistry, get_registry, reset_registry
from rpcdoc.providers.static import (
    StaticMetadataProvider,
    TypeExpression,
    load_document,
    parse_type_expression,
)

__all__ = [
    "DEFAULT_BASE_EXCEPTION",
    "MetadataProvider",
    "ProviderRegistry",
    "StaticMetadataProvider",
    "TypeExpression",
    "doc_key",
    "get_registry",
    "load_document",
    "parse_type_expression",
    "reset_registry",
    "setup_default_providers",
]


def setup_default_providers(registry: ProviderRegistry | None = None) -> ProviderRegistry:
    """Register all default providers and encoders.

    Args:
        registry: Registry to populate (uses global if None)

    Returns:
        Populated ProviderRegistry
    """
    if registry is None:
        registry = get_registry()

    registry.register_provider("static", StaticMetadataProvider, is_default=True)

    registry.register_encoder("json", JsonSampleEncoder, is_default=True)
    registry.register_encoder("yaml", YamlSampleEncoder)

    return registry
