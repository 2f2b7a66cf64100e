"""YAML sample encoder."""

from typing import Any

import yaml

from rpcdoc.encoders.base import SampleEncoder


class YamlSampleEncoder(SampleEncoder):
    """Encodes sample requests as block-style YAML."""

    name = "yaml"

    def encode(self, value: Any) -> str:
        try:
            return yaml.safe_dump(value, default_flow_style=False, sort_keys=False).rstrip("\n")
        except yaml.YAMLError as e:
            raise ValueError(str(e)) from e
