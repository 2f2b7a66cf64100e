"""Registry of metadata providers and sample encoders.

The registry maps configured names to implementations. Providers and encoders
are selected in YAML config, not hardcoded.
"""

from pathlib import Path
from typing import Any

from rpcdoc.encoders.base import SampleEncoder
from rpcdoc.providers.base import MetadataProvider


class ProviderRegistry:
    """Registry of available metadata providers and sample encoders.

    Configuration example:
        provider:
          name: static        # → StaticMetadataProvider.from_file(metadata)
          metadata: services.yaml
        samples:
          encoder: json       # → JsonSampleEncoder

    Adding a new provider:
        1. Implement MetadataProvider
        2. Register it under a name
        3. No changes needed to the rest of the codebase
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._providers: dict[str, type[MetadataProvider]] = {}
        self._encoders: dict[str, type[SampleEncoder]] = {}
        self._default_provider: str | None = None
        self._default_encoder: str | None = None

    # =========================================================================
    # Registration
    # =========================================================================

    def register_provider(
        self,
        name: str,
        provider_class: type[MetadataProvider],
        is_default: bool = False,
    ) -> None:
        """Register a metadata provider.

        Args:
            name: Provider identifier (e.g., "static")
            provider_class: Provider class to register
            is_default: Whether this is the default provider
        """
        self._providers[name] = provider_class
        if is_default:
            self._default_provider = name

    def register_encoder(
        self,
        name: str,
        encoder_class: type[SampleEncoder],
        is_default: bool = False,
    ) -> None:
        """Register a sample encoder.

        Args:
            name: Encoder identifier (e.g., "json")
            encoder_class: Encoder class to register
            is_default: Whether this is the default encoder
        """
        self._encoders[name] = encoder_class
        if is_default:
            self._default_encoder = name

    # =========================================================================
    # Retrieval
    # =========================================================================

    def create_provider(
        self,
        source: Path,
        name: str | None = None,
        base_exception: str | None = None,
    ) -> MetadataProvider:
        """Create a metadata provider over a source file.

        Args:
            source: Metadata source file
            name: Provider name (uses default if None)
            base_exception: Catch-all exception marker override

        Returns:
            Loaded provider

        Raises:
            KeyError: If the provider is not registered
            FileNotFoundError: If the source does not exist
        """
        provider_name = name or self._default_provider
        if provider_name is None or provider_name not in self._providers:
            available = list(self._providers.keys())
            raise KeyError(f"Provider '{provider_name}' not registered. Available: {available}")

        return self._providers[provider_name].from_file(source, base_exception=base_exception)

    def get_encoder(self, name: str | None = None) -> SampleEncoder:
        """Get a sample encoder instance.

        Args:
            name: Encoder name (uses default if None)

        Returns:
            Instantiated encoder

        Raises:
            KeyError: If the encoder is not registered
        """
        encoder_name = name or self._default_encoder
        if encoder_name is None or encoder_name not in self._encoders:
            available = list(self._encoders.keys())
            raise KeyError(f"Encoder '{encoder_name}' not registered. Available: {available}")

        return self._encoders[encoder_name]()

    # =========================================================================
    # Introspection
    # =========================================================================

    def list_providers(self) -> list[str]:
        """Get list of registered provider names."""
        return list(self._providers.keys())

    def list_encoders(self) -> list[str]:
        """Get list of registered encoder names."""
        return list(self._encoders.keys())

    def get_metadata(self) -> dict[str, Any]:
        """Get registry metadata for logging and debugging."""
        return {
            "providers": self.list_providers(),
            "encoders": self.list_encoders(),
            "default_provider": self._default_provider,
            "default_encoder": self._default_encoder,
        }


# Global registry instance
_registry: ProviderRegistry | None = None


def get_registry() -> ProviderRegistry:
    """Get the global provider registry instance."""
    global _registry
    if _registry is None:
        _registry = ProviderRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (primarily for testing)."""
    global _registry
    _registry = None
