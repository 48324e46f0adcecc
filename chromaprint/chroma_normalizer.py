"""Scaling of chroma vectors to unit length."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence

from .consumers import FeatureVectorConsumer

Norm = Callable[[Sequence[float]], float]


def euclidean_norm(values: Iterable[float]) -> float:
    """Square root of the sum of squares."""
    return math.sqrt(sum(v * v for v in values))


def normalize_vector(
    values: Sequence[float], norm: Norm = euclidean_norm, threshold: float = 0.01
) -> list[float]:
    """Divide every value by the norm; a norm below ``threshold`` gives zeros."""
    magnitude = norm(values)
    if magnitude < threshold:
        return [0.0] * len(values)
    return [v / magnitude for v in values]


class ChromaNormalizer(FeatureVectorConsumer):
    """Normalizes each feature vector before passing it on."""

    def __init__(self, consumer: FeatureVectorConsumer) -> None:
        self.consumer = consumer
        self.last_features: list[float] | None = None

    def reset(self) -> None:
        """Forget the most recently normalized vector."""
        self.last_features = None

    def consume(self, features: list[float]) -> None:
        features[:] = normalize_vector(features, euclidean_norm, 0.01)
        self.last_features = list(features)
        self.consumer.consume(features)