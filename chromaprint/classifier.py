"""A filter paired with a quantizer, producing one small code."""

from __future__ import annotations

from dataclasses import dataclass, field

from .filters import Filter, IntegralImage
from .quantizer import Quantizer


@dataclass
class Classifier:
    """Applies a filter and quantizes its response."""

    filter: Filter = field(default_factory=Filter)
    quantizer: Quantizer = field(default_factory=Quantizer)

    def classify(self, image: IntegralImage, offset: int) -> int:
        """Return the quantized filter response at ``offset``."""
        return self.quantizer.quantize(self.filter.apply(image, offset))

    def __str__(self) -> str:
        return f"Classifier({self.filter}, {self.quantizer})"