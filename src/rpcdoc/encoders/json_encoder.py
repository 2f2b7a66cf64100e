"""JSON sample encoder."""

import base64
import dataclasses
import json
from enum import Enum
from typing import Any

from rpcdoc.encoders.base import SampleEncoder


def _to_plain(value: Any) -> Any:
    """Convert values json cannot serialize natively."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonSampleEncoder(SampleEncoder):
    """Encodes sample requests as JSON text.

    Binary values are base64 encoded, sets are emitted as sorted lists.
    """

    name = "json"

    def __init__(self, indent: int | None = None) -> None:
        self.indent = indent

    def encode(self, value: Any) -> str:
        return json.dumps(value, default=_to_plain, indent=self.indent, allow_nan=False)
