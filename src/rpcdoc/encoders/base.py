"""Abstract sample request encoder.

Encoders turn an example request value into display text for the
documentation. The value's shape is known ahead of time, so an encoding
failure is an internal-consistency error, not a recoverable condition.
"""

from abc import ABC, abstractmethod
from typing import Any

from rpcdoc.errors import SampleEncodingFailure


class SampleEncoder(ABC):
    """Abstract encoder for sample request values.

    Attributes:
        name: Encoder identifier (e.g., "json")
    """

    name: str = "sample"

    @abstractmethod
    def encode(self, value: Any) -> str:
        """Encode a sample value.

        Raises:
            TypeError: If the value contains unsupported types
            ValueError: If the value cannot be represented
        """

    def encode_sample(self, args_type: str, value: Any) -> str:
        """Encode the sample request of one function.

        Args:
            args_type: Argument type the sample belongs to
            value: Sample value

        Returns:
            Encoded text

        Raises:
            SampleEncodingFailure: If encoding fails
        """
        try:
            return self.encode(value)
        except (TypeError, ValueError) as e:
            raise SampleEncodingFailure(args_type, str(e)) from e
