"""Generation pipeline orchestrator.

Wires configuration to the generation core:
1. Create the configured metadata provider through the registry
2. Load endpoint bindings, example headers and sample requests
3. Run the SpecificationGenerator with the configured encoder and options
"""

import logging
from pathlib import Path

from rpcdoc.bindings import load_inputs
from rpcdoc.config import RpcDocConfig
from rpcdoc.encoders.base import SampleEncoder
from rpcdoc.generator import GenerationOptions, SpecificationGenerator
from rpcdoc.models.generation import GenerationResult
from rpcdoc.providers import get_registry, load_document, setup_default_providers
from rpcdoc.utils.logging import get_logger

logger = get_logger(__name__)


class GenerationPipeline:
    """Runs one generation from configuration to GenerationResult.

    Usage:
        pipeline = GenerationPipeline(config)
        result = pipeline.run(Path("services.yaml"))
    """

    def __init__(self, config: RpcDocConfig | None = None) -> None:
        """Initialize the pipeline.

        Args:
            config: rpcdoc configuration (uses defaults if None)
        """
        self.config = config or RpcDocConfig()

        setup_default_providers()
        self._registry = get_registry()

    @property
    def metadata_path(self) -> Path:
        """Return the configured metadata document path."""
        return Path(self.config.provider.metadata)

    def create_encoder(self) -> SampleEncoder | None:
        """Create the configured sample encoder, or None when samples are disabled."""
        if not self.config.samples.enabled:
            return None
        return self._registry.get_encoder(self.config.samples.encoder)

    def run(self, metadata_path: Path | None = None) -> GenerationResult:
        """Generate the specification for a metadata document.

        Args:
            metadata_path: Metadata document (overrides config)

        Returns:
            GenerationResult with the specification and per-service errors

        Raises:
            FileNotFoundError: If the metadata document does not exist
            KeyError: If the configured provider or encoder is not registered
            ValueError: If the metadata document is invalid
            RpcDocError: On the first failure when fail_fast is set, or on a
                class conflict between services
        """
        path = metadata_path or self.metadata_path
        logger.info("Loading metadata from %s", path)

        provider = self._registry.create_provider(
            path,
            self.config.provider.name,
            base_exception=self.config.generation.base_exception,
        )
        logger.structured(
            logging.DEBUG,
            f"Using provider {provider.name}",
            provider=provider.get_metadata(),
            registry=self._registry.get_metadata(),
        )
        inputs = load_inputs(load_document(path), provider)
        logger.debug(
            "Loaded %d bindings, %d sample requests",
            len(inputs.bindings),
            len(inputs.sample_requests),
        )

        generator = SpecificationGenerator(
            provider,
            doc_strings=self.config.doc_strings,
            encoder=self.create_encoder(),
            options=GenerationOptions(
                fail_fast=self.config.generation.fail_fast,
                max_depth=self.config.generation.max_depth,
            ),
        )

        return generator.generate(
            inputs.bindings,
            example_headers=inputs.example_headers,
            sample_requests=inputs.sample_requests,
        )
