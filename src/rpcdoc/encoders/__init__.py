"""Sample request encoders.

- JsonSampleEncoder: JSON text (default)
- YamlSampleEncoder: block-style YAML
"""

from rpcdoc.encoders.base import SampleEncoder
from rpcdoc.encoders.json_encoder import JsonSampleEncoder
from rpcdoc.encoders.yaml_encoder import YamlSampleEncoder
from rpcdoc.errors import SampleEncodingFailure

__all__ = [
    "JsonSampleEncoder",
    "SampleEncoder",
    "SampleEncodingFailure",
    "YamlSampleEncoder",
]
