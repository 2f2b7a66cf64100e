"""Test fixtures for rpcdoc.

Metadata documents:
- foo_service.yaml: FooService (every type shape) and HelloService, bound at /foo and /hello
- broken_service.yaml: one resolvable service and one referencing an unknown struct
"""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent
METADATA_DIR = FIXTURES_DIR / "metadata"
FOO_METADATA_PATH = METADATA_DIR / "foo_service.yaml"
BROKEN_METADATA_PATH = METADATA_DIR / "broken_service.yaml"

FOO_NAMESPACE = "com.example.foo"
FOO_SERVICE = f"{FOO_NAMESPACE}.FooService"
HELLO_SERVICE = f"{FOO_NAMESPACE}.HelloService"
FOO_STRUCT = f"{FOO_NAMESPACE}.FooStruct"
FOO_UNION = f"{FOO_NAMESPACE}.FooUnion"
FOO_ENUM = f"{FOO_NAMESPACE}.FooEnum"
FOO_EXCEPTION = f"{FOO_NAMESPACE}.FooServiceException"
