"""rpcdoc configuration system.

Configuration is primarily YAML-based with minimal CLI overrides (--output, --format, --metadata).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.rpcdoc/config.yaml
3. ./rpcdoc.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from rpcdoc.core.resolver import DEFAULT_MAX_DEPTH

OUTPUT_FORMATS = {"markdown", "json"}

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        path: Output file path
        format: Output format (markdown, json)
        template: Custom Jinja2 template file for markdown output
        title: Document title
    """

    path: str = "docs/SERVICES.md"
    format: str = "markdown"
    template: str | None = None
    title: str = "Service Specification"

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if self.format not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output format: {self.format}. Valid: {OUTPUT_FORMATS}")


@dataclass
class ProviderConfig:
    """Metadata provider selection.

    Attributes:
        name: Registered provider name (static)
        metadata: Path to the metadata source
    """

    name: str = "static"
    metadata: str = "rpcdoc.metadata.yaml"


@dataclass
class GenerationConfig:
    """Generation settings.

    Attributes:
        max_depth: Maximum nesting of struct expansion
        fail_fast: Abort on the first failing service instead of skipping it
        base_exception: Catch-all exception excluded from exception lists
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    fail_fast: bool = False
    base_exception: str | None = None

    def __post_init__(self) -> None:
        """Validate generation configuration."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive (got {self.max_depth})")


@dataclass
class SampleConfig:
    """Sample request encoding.

    Attributes:
        enabled: Whether sample requests are encoded at all
        encoder: Registered encoder name (json, yaml)
    """

    enabled: bool = True
    encoder: str = "json"


@dataclass
class RpcDocConfig:
    """Top-level rpcdoc configuration.

    Attributes:
        output: Output path and format
        provider: Metadata provider selection
        generation: Generation settings
        samples: Sample request encoding
        doc_strings: Extra doc strings overlaid on the provider's
    """

    output: OutputConfig = field(default_factory=OutputConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    samples: SampleConfig = field(default_factory=SampleConfig)
    doc_strings: dict[str, str] = field(default_factory=dict)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${METADATA_DIR}/services.yaml

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.rpcdoc/config.yaml
    2. ./rpcdoc.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".rpcdoc" / "config.yaml",
        start_path / "rpcdoc.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> RpcDocConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        RpcDocConfig instance
    """
    data = substitute_env_vars(data)

    config = RpcDocConfig()

    if "output" in data:
        output_data = data["output"]
        config.output = OutputConfig(
            path=output_data.get("path", config.output.path),
            format=output_data.get("format", config.output.format),
            template=output_data.get("template"),
            title=output_data.get("title", config.output.title),
        )

    if "provider" in data:
        provider_data = data["provider"]
        config.provider = ProviderConfig(
            name=provider_data.get("name", config.provider.name),
            metadata=provider_data.get("metadata", config.provider.metadata),
        )

    if "generation" in data:
        generation_data = data["generation"]
        config.generation = GenerationConfig(
            max_depth=int(generation_data.get("max_depth", DEFAULT_MAX_DEPTH)),
            fail_fast=bool(generation_data.get("fail_fast", False)),
            base_exception=generation_data.get("base_exception"),
        )

    if "samples" in data:
        samples_data = data["samples"]
        config.samples = SampleConfig(
            enabled=bool(samples_data.get("enabled", True)),
            encoder=samples_data.get("encoder", config.samples.encoder),
        )

    if "doc_strings" in data:
        config.doc_strings = {str(k): str(v) for k, v in (data["doc_strings"] or {}).items()}

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> RpcDocConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        RpcDocConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
        ValueError: If the config file is not a valid YAML mapping
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {found_path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Config file must be a mapping: {found_path}")
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = RpcDocConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# rpcdoc Configuration

# Output settings
output:
  path: "docs/SERVICES.md"
  format: "markdown"        # markdown, json
  title: "Service Specification"
  # template: ".rpcdoc/SPEC.md.j2"  # custom Jinja2 template

# Metadata source
provider:
  name: "static"
  metadata: "rpcdoc.metadata.yaml"

# Generation settings
generation:
  max_depth: 64             # struct nesting limit
  fail_fast: false          # false: skip failing services and report them
  # base_exception: "TException"

# Sample request encoding
samples:
  enabled: true
  encoder: "json"           # json, yaml

# Extra doc strings keyed by qualified name
# doc_strings:
#   com.example.FooService: "Handles foo requests."
'''


def create_sample_metadata() -> str:
    """Create a sample metadata document.

    Returns:
        YAML string describing a small service
    """
    return '''# rpcdoc metadata document
namespace: com.example

enums:
  - name: Status
    doc: "Account status."
    constants: [ACTIVE, SUSPENDED]

structs:
  - name: Account
    doc: "A user account."
    fields:
      - {name: id, type: i64, requirement: required}
      - {name: email, type: string}
      - {name: status, type: Status}
      - {name: avatar, type: binary, requirement: optional}
  - name: AccountNotFound
    kind: exception
    fields:
      - {name: id, type: i64}

services:
  - name: AccountService
    doc: "Looks up accounts."
    functions:
      - name: getAccount
        doc: "Returns one account."
        returns: Account
        arguments:
          - {name: id, type: i64, doc: "Account identifier."}
        throws: [AccountNotFound]
      - name: ping
        oneway: true

endpoints:
  - interface: AccountService.Iface
    path: /accounts
    default_format: tbinary
    allowed_formats: [tbinary, tcompact, tjson]

examples:
  headers:
    AccountService:
      - {authorization: "Bearer <token>"}
  requests:
    AccountService.getAccount_args: {id: 42}
'''
