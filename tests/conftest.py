"""Shared pytest fixtures for rpcdoc tests.

Fixtures are organized by category:
- Path fixtures: Metadata documents under tests/fixtures
- Provider fixtures: Providers loaded from those documents
- Configuration fixtures: Config mappings for various scenarios
"""

from pathlib import Path
from typing import Any

import pytest

from rpcdoc.providers import StaticMetadataProvider, load_document, reset_registry
from tests.fixtures import BROKEN_METADATA_PATH, FOO_METADATA_PATH

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def foo_metadata_path() -> Path:
    """Return the path to the FooService metadata document."""
    return FOO_METADATA_PATH


@pytest.fixture
def broken_metadata_path() -> Path:
    """Return the path to the partially broken metadata document."""
    return BROKEN_METADATA_PATH


# =============================================================================
# Provider Fixtures
# =============================================================================


@pytest.fixture
def foo_document() -> dict[str, Any]:
    """Return the FooService metadata document as a mapping."""
    return load_document(FOO_METADATA_PATH)


@pytest.fixture
def foo_provider(foo_document: dict[str, Any]) -> StaticMetadataProvider:
    """Return a provider over the FooService metadata document."""
    return StaticMetadataProvider(foo_document)


@pytest.fixture
def minimal_document() -> dict[str, Any]:
    """Return a small single-service document."""
    return {
        "namespace": "com.example",
        "structs": [
            {"name": "Item", "fields": [{"name": "id", "type": "i64", "requirement": "required"}]},
        ],
        "services": [
            {
                "name": "ItemService",
                "functions": [
                    {"name": "getItem", "returns": "Item", "arguments": [{"name": "id", "type": "i64"}]},
                ],
            },
        ],
    }


@pytest.fixture(autouse=True)
def _reset_provider_registry():
    """Give every test a fresh global provider registry."""
    reset_registry()
    yield
    reset_registry()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid rpcdoc configuration."""
    return {
        "output": {
            "path": "docs/SERVICES.md",
            "format": "markdown",
        }
    }


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete rpcdoc configuration with all options."""
    return {
        "output": {
            "path": "build/api.json",
            "format": "json",
            "title": "Foo API",
        },
        "provider": {
            "name": "static",
            "metadata": "metadata/services.yaml",
        },
        "generation": {
            "max_depth": 16,
            "fail_fast": True,
            "base_exception": "BaseError",
        },
        "samples": {
            "enabled": False,
            "encoder": "yaml",
        },
        "doc_strings": {
            "com.example.FooService": "Overridden.",
        },
    }
