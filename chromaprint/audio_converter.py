"""Channel remixing and sample-rate conversion of 16-bit PCM audio."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

_INT16_MIN = -32768
_INT16_MAX = 32767


def _to_int16(value: float) -> int:
    return max(_INT16_MIN, min(_INT16_MAX, int(round(value))))


def _sinc(x: float) -> float:
    if x == 0.0:
        return 1.0
    return math.sin(math.pi * x) / (math.pi * x)


def _blackman(u: float) -> float:
    if abs(u) > 1.0:
        return 0.0
    return 0.42 + 0.5 * math.cos(math.pi * u) + 0.08 * math.cos(2.0 * math.pi * u)


class AudioConverter:
    """Streams interleaved 16-bit samples to another channel count and rate.

    Channels are remixed first: fewer output channels average the input
    channels that fold onto them, more output channels repeat the input ones.
    Rates are converted with a windowed-sinc low-pass filter of
    ``filter_size`` taps (widened when downsampling) and cut-off ``cutoff``.
    Call :meth:`flush` at the end of the stream to get the delayed tail.
    """

    def __init__(
        self,
        input_sample_rate: int,
        input_channels: int,
        output_sample_rate: int,
        output_channels: int,
        filter_size: int = 16,
        cutoff: float = 0.8,
    ) -> None:
        for name, value in (
            ("input sample rate", input_sample_rate),
            ("input channels", input_channels),
            ("output sample rate", output_sample_rate),
            ("output channels", output_channels),
            ("filter size", filter_size),
        ):
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")
        if not 0.0 < cutoff <= 1.0:
            raise ValueError(f"cutoff must be in (0, 1], got {cutoff}")

        self.input_sample_rate = input_sample_rate
        self.input_channels = input_channels
        self.output_sample_rate = output_sample_rate
        self.output_channels = output_channels

        factor = min(1.0, output_sample_rate / input_sample_rate)
        self._cutoff = factor * cutoff
        self._half = math.ceil(filter_size / 2 / factor)
        self._weights_cache: dict[int, list[float]] = {}
        self._start_stream()

    def _start_stream(self) -> None:
        self._history: list[list[float]] = [[] for _ in range(self.output_channels)]
        self._history_start = 0
        self._input_count = 0
        self._output_count = 0

    @property
    def _resampling(self) -> bool:
        return self.input_sample_rate != self.output_sample_rate

    def _remix(self, frame: Sequence[int]) -> list[float]:
        n_in, n_out = self.input_channels, self.output_channels
        if n_in == n_out:
            return [float(v) for v in frame]
        if n_out > n_in:
            return [float(frame[c % n_in]) for c in range(n_out)]
        mixed = []
        for c in range(n_out):
            group = frame[c::n_out]
            mixed.append(sum(group) / len(group))
        return mixed

    def _frames(self, samples: list[int]) -> Iterable[list[float]]:
        step = self.input_channels
        for start in range(0, len(samples), step):
            yield self._remix(samples[start:start + step])

    def _weights(self, remainder: int) -> list[float]:
        weights = self._weights_cache.get(remainder)
        if weights is None:
            frac = remainder / self.output_sample_rate
            half = self._half
            taps = [
                _sinc(self._cutoff * d) * _blackman(d / half)
                for d in (frac + half - 1 - j for j in range(2 * half))
            ]
            total = sum(taps)
            weights = [t / total for t in taps]
            self._weights_cache[remainder] = weights
        return weights

    def _sample(self, channel: int, index: int) -> float:
        local = index - self._history_start
        history = self._history[channel]
        if 0 <= local < len(history):
            return history[local]
        return 0.0

    def _drain(self, final: bool) -> list[int]:
        in_rate, out_rate, half = self.input_sample_rate, self.output_sample_rate, self._half
        total = -(-self._input_count * out_rate // in_rate)
        output: list[int] = []
        while True:
            n = self._output_count
            if final and n >= total:
                break
            center, remainder = divmod(n * in_rate, out_rate)
            if not final and center + half >= self._input_count:
                break
            weights = self._weights(remainder)
            first = center - half + 1
            for channel in range(self.output_channels):
                acc = sum(
                    w * self._sample(channel, first + j) for j, w in enumerate(weights)
                )
                output.append(_to_int16(acc))
            self._output_count += 1

        next_center = self._output_count * in_rate // out_rate
        drop = max(0, next_center - half + 1) - self._history_start
        if drop > 0:
            for history in self._history:
                del history[:drop]
            self._history_start += drop
        return output

    def convert(self, samples: Iterable[int]) -> list[int]:
        """Convert a block of interleaved samples; returns what is ready."""
        samples = list(samples)
        if len(samples) % self.input_channels:
            raise ValueError(
                f"{len(samples)} samples do not form whole frames "
                f"of {self.input_channels} channels"
            )
        frames = list(self._frames(samples))
        if not self._resampling:
            return [_to_int16(v) for frame in frames for v in frame]
        for frame in frames:
            for history, value in zip(self._history, frame):
                history.append(value)
        self._input_count += len(frames)
        return self._drain(final=False)

    def flush(self) -> list[int]:
        """Return the samples still held back and start a fresh stream."""
        if not self._resampling:
            return []
        output = self._drain(final=True)
        self._start_stream()
        return output