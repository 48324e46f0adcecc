"""Reading of PCM audio from WAV files, raw sample files and standard input."""

from __future__ import annotations

import io
import os
import struct
import sys
import wave
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from .audio_converter import AudioConverter

_FRAMES_PER_READ = 4096
_STDIN_NAMES = ("-", "pipe:0")


class AudioReaderError(Exception):
    """Raised when audio cannot be opened, decoded or read."""


@dataclass(frozen=True)
class _RawFormat:
    width: int
    signed: bool
    byteorder: str


_RAW_FORMATS = {
    "s16le": _RawFormat(2, True, "little"),
    "s16be": _RawFormat(2, True, "big"),
    "s8": _RawFormat(1, True, "little"),
    "u8": _RawFormat(1, False, "little"),
}
_CONTAINER_FORMATS = ("wav",)


def _decode(data: bytes, width: int, signed: bool, byteorder: str) -> list[int]:
    """Turn packed samples of any supported width into 16-bit integers."""
    if width == 2:
        prefix = "<" if byteorder == "little" else ">"
        return list(struct.unpack(f"{prefix}{len(data) // 2}h", data))
    if width == 1:
        if signed:
            return [(b - 256 if b > 127 else b) << 8 for b in data]
        return [(b - 128) << 8 for b in data]
    shift = 8 * (width - 2)
    return [
        int.from_bytes(data[i:i + width], byteorder, signed=True) >> shift
        for i in range(0, len(data) - width + 1, width)
    ]


class _Source:
    """An opened stream of packed interleaved samples."""

    def __init__(
        self,
        stream: BinaryIO,
        owned: bool,
        sample_rate: int,
        channels: int,
        width: int,
        signed: bool,
        byteorder: str,
        total_frames: int | None,
        wav: wave.Wave_read | None = None,
    ) -> None:
        self._stream = stream
        self._owned = owned
        self._wav = wav
        self.sample_rate = sample_rate
        self.channels = channels
        self.width = width
        self.signed = signed
        self.byteorder = byteorder
        self.total_frames = total_frames

    @property
    def frame_bytes(self) -> int:
        return self.width * self.channels

    def read(self, frames: int) -> bytes:
        if self._wav is not None:
            return self._wav.readframes(frames)
        return self._stream.read(frames * self.frame_bytes)

    def decode(self, data: bytes) -> list[int]:
        return _decode(data, self.width, self.signed, self.byteorder)

    def close(self) -> None:
        if self._wav is not None:
            self._wav.close()
        if self._owned:
            self._stream.close()


class AudioReader:
    """Reads interleaved 16-bit samples, converted to the requested layout.

    Output sample rate and channel count default to those of the input;
    set ``output_sample_rate`` or ``output_channels`` before :meth:`open`
    to have the audio remixed and resampled.
    """

    def __init__(self, output_sample_rate: int = 0, output_channels: int = 0) -> None:
        self.output_sample_rate = output_sample_rate
        self.output_channels = output_channels
        self._input_format: str | None = None
        self._input_sample_rate: int | None = None
        self._input_channels: int | None = None
        self._source: _Source | None = None
        self._converter: AudioConverter | None = None
        self._finished = False

    def set_input_format(self, name: str) -> None:
        """Force the input format: ``wav``, ``s16le``, ``s16be``, ``s8`` or ``u8``."""
        if name not in _RAW_FORMATS and name not in _CONTAINER_FORMATS:
            raise AudioReaderError(f"Invalid format {name!r}")
        self._input_format = name

    def set_input_sample_rate(self, sample_rate: int) -> None:
        """Sample rate of raw input, in Hz."""
        if sample_rate < 1:
            raise ValueError(f"sample rate must be positive, got {sample_rate}")
        self._input_sample_rate = sample_rate

    def set_input_channels(self, channels: int) -> None:
        """Number of interleaved channels in raw input."""
        if channels < 1:
            raise ValueError(f"channel count must be positive, got {channels}")
        self._input_channels = channels

    def _open_stream(self, file_name: str | os.PathLike[str]) -> tuple[BinaryIO, bool]:
        if isinstance(file_name, str) and file_name in _STDIN_NAMES:
            return sys.stdin.buffer, False
        try:
            return open(file_name, "rb"), True
        except OSError as exc:
            raise AudioReaderError(f"Could not open the input file ({exc.strerror})") from exc

    @staticmethod
    def _peek(stream: BinaryIO, count: int) -> bytes:
        if stream.seekable():
            position = stream.tell()
            head = stream.read(count)
            stream.seek(position)
            return head
        if isinstance(stream, io.BufferedReader):
            return stream.peek(count)[:count]
        return b""

    def _detect_format(self, stream: BinaryIO) -> str:
        if self._input_format is not None:
            return self._input_format
        head = self._peek(stream, 12)
        if head[:4] == b"RIFF" and head[8:12] == b"WAVE":
            return "wav"
        raise AudioReaderError("Could not find stream information in the file")

    def _make_source(self, stream: BinaryIO, owned: bool, fmt: str) -> _Source:
        if fmt == "wav":
            try:
                wav = wave.open(stream, "rb")
            except (wave.Error, EOFError) as exc:
                raise AudioReaderError(
                    f"Could not find stream information in the file ({exc})"
                ) from exc
            width = wav.getsampwidth()
            return _Source(
                stream,
                owned,
                wav.getframerate(),
                wav.getnchannels(),
                width,
                width != 1,
                "little",
                wav.getnframes(),
                wav,
            )

        raw = _RAW_FORMATS[fmt]
        sample_rate = self._input_sample_rate or 44100
        channels = self._input_channels or 1
        total_frames = None
        if stream.seekable():
            try:
                size = os.fstat(stream.fileno()).st_size
                total_frames = size // (raw.width * channels)
            except (OSError, io.UnsupportedOperation):
                total_frames = None
        return _Source(
            stream, owned, sample_rate, channels, raw.width, raw.signed, raw.byteorder, total_frames
        )

    def open(self, file_name: str | os.PathLike[str]) -> None:
        """Open a file, or standard input for ``-`` and ``pipe:0``."""
        self.close()
        stream, owned = self._open_stream(file_name)
        try:
            fmt = self._detect_format(stream)
            source = self._make_source(stream, owned, fmt)
        except BaseException:
            if owned:
                stream.close()
            raise

        if not self.output_sample_rate:
            self.output_sample_rate = source.sample_rate
        if not self.output_channels:
            self.output_channels = source.channels

        if (
            source.channels != self.output_channels
            or source.sample_rate != self.output_sample_rate
        ):
            try:
                self._converter = AudioConverter(
                    source.sample_rate,
                    source.channels,
                    self.output_sample_rate,
                    self.output_channels,
                )
            except ValueError as exc:
                source.close()
                raise AudioReaderError(
                    f"Could not create an audio converter instance ({exc})"
                ) from exc

        self._source = source
        self._finished = False

    def close(self) -> None:
        """Release the opened input; does nothing when nothing is open."""
        if self._source is not None:
            self._source.close()
        self._source = None
        self._converter = None

    def read(self) -> list[int]:
        """Return the next block of interleaved samples; empty once finished."""
        if self._source is None:
            raise AudioReaderError("The reader is not open")
        if self._finished:
            return []

        source = self._source
        try:
            data = source.read(_FRAMES_PER_READ)
        except (OSError, wave.Error, EOFError) as exc:
            raise AudioReaderError(f"Error reading from the audio source ({exc})") from exc

        usable = len(data) - len(data) % source.frame_bytes
        if usable == 0:
            self._finished = True
            return self._converter.flush() if self._converter is not None else []

        samples = source.decode(data[:usable])
        if self._converter is not None:
            return self._converter.convert(samples)
        return samples

    def __iter__(self) -> Iterator[list[int]]:
        while not self.is_finished:
            block = self.read()
            if block:
                yield block

    @property
    def is_open(self) -> bool:
        return self._source is not None

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def sample_rate(self) -> int:
        """Output sample rate in Hz."""
        return self.output_sample_rate

    @property
    def channels(self) -> int:
        """Output channel count."""
        return self.output_channels

    @property
    def duration(self) -> int | None:
        """Estimated duration of the input in milliseconds, or None if unknown."""
        source = self._source
        if source is None or source.total_frames is None:
            return None
        return 1000 * source.total_frames // source.sample_rate

    def __enter__(self) -> AudioReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()