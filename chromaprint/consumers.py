"""Interfaces for the stages of the fingerprinting pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

FFTFrame = list[float]
"""Magnitude spectrum of one analysis window."""


class AudioConsumer(ABC):
    """Receives blocks of 16-bit PCM samples."""

    @abstractmethod
    def consume(self, samples: Sequence[int]) -> None:
        """Process a block of samples."""


class FeatureVectorConsumer(ABC):
    """Receives one feature vector per frame."""

    @abstractmethod
    def consume(self, features: list[float]) -> None:
        """Process a feature vector."""


class FFTFrameConsumer(ABC):
    """Receives one spectrum per analysis window."""

    @abstractmethod
    def consume(self, frame: FFTFrame) -> None:
        """Process a spectrum frame."""