"""Command-line style fingerprint calculation over audio files."""

from __future__ import annotations

import re
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, TextIO

from .audio_reader import AudioReader, AudioReaderError

VERSION = "1.4.4"
DEFAULT_ALGORITHM = 1

HELP = (
    "Usage: {prog} [OPTIONS] FILE [FILE...]\n"
    "\n"
    "Generate fingerprints from audio files/streams.\n"
    "\n"
    "Options:\n"
    "  -format NAME   Set the input format name\n"
    "  -rate NUM      Set the sample rate of the input audio\n"
    "  -channels NUM  Set the number of channels in the input audio\n"
    "  -length SECS   Restrict the duration of the processed input audio (default 120)\n"
    "  -chunk SECS    Split the input audio into chunks of this duration\n"
    "  -algorithm NUM Set the algorigthm method (default 2)\n"
    "  -overlap       Overlap the chunks slightly to make sure audio on the edges is fingerprinted\n"
    "  -ts            Output UNIX timestamps for chunked results, useful when fingerprinting real-time audio stream\n"
    "  -raw           Output fingerprints in the uncompressed format\n"
    "  -signed        Change the uncompressed format from unsigned integers to signed (for pg_acoustid compatibility)\n"
    "  -json          Print the output in JSON format\n"
    "  -text          Print the output in text format\n"
    "  -plain         Print the just the fingerprint in text format\n"
    "  -version       Print version information\n"
)


class OutputFormat(Enum):
    TEXT = 0
    JSON = 1
    PLAIN = 2


class FpcalcError(Exception):
    """A failure that ends the run with ``exit_code``."""

    def __init__(self, message: str, exit_code: int = 2) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass
class Options:
    """Settings taken from the command line."""

    format: OutputFormat = OutputFormat.TEXT
    input_format: str | None = None
    input_channels: int = 0
    input_sample_rate: int = 0
    max_duration: float = 120.0
    max_chunk_duration: float = 0.0
    overlap: bool = False
    raw: bool = False
    signed: bool = False
    abs_ts: bool = False
    ignore_errors: bool = False
    algorithm: int = DEFAULT_ALGORITHM
    files: list[str] = field(default_factory=list)
    show_help: bool = False
    show_version: bool = False


class Fingerprinter(Protocol):
    """The fingerprinting context that audio is fed into."""

    delay: int
    delay_ms: int

    def start(self, sample_rate: int, num_channels: int) -> None: ...

    def feed(self, samples: Sequence[int]) -> None: ...

    def finish(self) -> None: ...

    def clear_fingerprint(self) -> None: ...

    @property
    def raw_fingerprint(self) -> list[int]: ...

    @property
    def fingerprint(self) -> str: ...


_INT_PREFIX = re.compile(r"\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group()) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group()) if match else 0.0


_FLAGS = {
    "-text": ("format", OutputFormat.TEXT),
    "-json": ("format", OutputFormat.JSON),
    "-plain": ("format", OutputFormat.PLAIN),
    "-overlap": ("overlap", True),
    "-ts": ("abs_ts", True),
    "-raw": ("raw", True),
    "-signed": ("signed", True),
    "-ignore-errors": ("ignore_errors", True),
}


def parse_options(argv: Sequence[str]) -> Options:
    """Parse arguments (without the program name) into :class:`Options`."""
    options = Options()
    args = list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        has_value = i + 1 < len(args)
        if arg == "--":
            options.files.extend(args[i + 1:])
            break
        if arg in ("-format", "-f") and has_value:
            options.input_format = args[i + 1]
            i += 1
        elif arg in ("-channels", "-c") and has_value:
            value = _atoi(args[i + 1])
            if value <= 0:
                raise FpcalcError(
                    f"The argument for {arg} must be a non-zero positive number"
                )
            options.input_channels = value
            i += 1
        elif arg in ("-rate", "-r") and has_value:
            value = _atoi(args[i + 1])
            if value < 0:
                raise FpcalcError(f"The argument for {arg} must be a positive number")
            options.input_sample_rate = value
            i += 1
        elif arg in ("-length", "-t") and has_value:
            seconds = _atof(args[i + 1])
            if seconds < 0:
                raise FpcalcError(f"The argument for {arg} must be a positive number")
            options.max_duration = seconds
            i += 1
        elif arg == "-chunk" and has_value:
            seconds = _atof(args[i + 1])
            if seconds < 0:
                raise FpcalcError(f"The argument for {arg} must be a positive number")
            options.max_chunk_duration = seconds
            i += 1
        elif arg in ("-algorithm", "-a") and has_value:
            value = _atoi(args[i + 1])
            if not 1 <= value <= 5:
                raise FpcalcError(f"The argument for {arg} must be 1 - 5")
            options.algorithm = value - 1
            i += 1
        elif arg in _FLAGS:
            name, value = _FLAGS[arg]
            setattr(options, name, value)
        elif arg in ("-v", "-version"):
            options.show_version = True
            return options
        elif arg in ("-h", "-help", "--help"):
            options.show_help = True
            return options
        elif len(arg) > 1 and arg.startswith("-"):
            raise FpcalcError(f"Unknown option {arg}")
        else:
            options.files.append(arg)
        i += 1

    if not options.files:
        raise FpcalcError("No input files")
    return options


def _raw_text(options: Options, fingerprint: Sequence[int]) -> str:
    if options.signed:
        values = (v - (1 << 32) if v >= (1 << 31) else v for v in fingerprint)
    else:
        values = iter(fingerprint)
    return ",".join(str(v) for v in values)


def format_result(
    options: Options,
    fingerprint: str | Sequence[int],
    first: bool,
    timestamp: float,
    duration: float,
) -> str:
    """Render one result; an empty fingerprint is an error only for the first."""
    if not fingerprint:
        if first:
            raise FpcalcError("Empty fingerprint")
        return ""

    fp = _raw_text(options, fingerprint) if options.raw else str(fingerprint)

    if options.format is OutputFormat.TEXT:
        lines = [] if first else [""]
        if options.abs_ts:
            lines.append(f"TIMESTAMP={timestamp:.2f}")
        lines.append(f"DURATION={int(duration)}")
        lines.append(f"FINGERPRINT={fp}")
        return "\n".join(lines) + "\n"

    if options.format is OutputFormat.JSON:
        value = f"[{fp}]" if options.raw else f'"{fp}"'
        if options.max_chunk_duration != 0:
            return (
                f'{{"timestamp": {timestamp:.2f}, "duration": {duration:.2f}, '
                f'"fingerprint": {value}}}\n'
            )
        return f'{{"duration": {duration:.2f}, "fingerprint": {value}}}\n'

    return f"{fp}\n"


def _emit(
    ctx: Fingerprinter,
    reader: AudioReader,
    options: Options,
    out: TextIO,
    first: bool,
    timestamp: float,
    duration: float,
) -> None:
    raw = list(ctx.raw_fingerprint)
    if not raw:
        if first:
            raise FpcalcError("Empty fingerprint")
        return
    fingerprint: str | list[int] = raw if options.raw else ctx.fingerprint

    if options.max_chunk_duration == 0:
        total_ms = reader.duration
        duration = 0.0 if total_ms is None or total_ms < 0 else total_ms / 1000.0

    out.write(format_result(options, fingerprint, first, timestamp, duration))
    out.flush()


def process_file(
    ctx: Fingerprinter,
    reader: AudioReader,
    file_name: str,
    options: Options,
    out: TextIO,
) -> None:
    """Fingerprint one file, writing each (chunk) result to ``out``."""
    ts = time.time() if options.abs_ts else 0.0

    if file_name == "-":
        file_name = "pipe:0"

    try:
        reader.open(file_name)
    except AudioReaderError as exc:
        raise FpcalcError(str(exc)) from exc

    sample_rate = reader.sample_rate
    channels = reader.channels
    ctx.start(sample_rate, channels)

    stream_size = 0
    stream_limit = int(options.max_duration * sample_rate)

    chunk_size = 0
    chunk_limit = int(options.max_chunk_duration * sample_rate)

    extra_chunk_limit = 0
    overlap = 0.0
    if chunk_limit > 0 and options.overlap:
        extra_chunk_limit = ctx.delay
        overlap = ctx.delay_ms / 1000.0

    first_chunk = True
    read_error: AudioReaderError | None = None
    got_results = False

    while not reader.is_finished:
        try:
            block = reader.read()
        except AudioReaderError as exc:
            read_error = exc
            break

        frame_size = len(block) // channels

        stream_done = False
        if stream_limit > 0:
            remaining = stream_limit - stream_size
            if frame_size > remaining:
                frame_size = remaining
                stream_done = True
        stream_size += frame_size

        if frame_size == 0:
            if stream_done:
                break
            continue

        chunk_done = False
        first_part = frame_size
        if chunk_limit > 0:
            remaining = chunk_limit + extra_chunk_limit - chunk_size
            if first_part > remaining:
                first_part = remaining
                chunk_done = True

        ctx.feed(block[:first_part * channels])
        chunk_size += first_part

        if chunk_done:
            ctx.finish()
            chunk_duration = (chunk_size - extra_chunk_limit) / sample_rate + overlap
            _emit(ctx, reader, options, out, first_chunk, ts, chunk_duration)
            got_results = True

            if options.abs_ts:
                ts = time.time()
            else:
                ts += chunk_duration

            if options.overlap:
                ctx.clear_fingerprint()
                ts -= overlap
            else:
                ctx.start(sample_rate, channels)

            if first_chunk:
                extra_chunk_limit = 0
                first_chunk = False

            chunk_size = 0

        rest = block[first_part * channels:frame_size * channels]
        if rest:
            ctx.feed(rest)
        chunk_size += frame_size - first_part

        if stream_done:
            break

    ctx.finish()

    if chunk_size > 0:
        chunk_duration = (chunk_size - extra_chunk_limit) / sample_rate + overlap
        _emit(ctx, reader, options, out, first_chunk, ts, chunk_duration)
        got_results = True
    elif first_chunk:
        raise FpcalcError("Not enough audio data")

    if read_error is not None:
        if options.ignore_errors:
            sys.stderr.write(f"ERROR: {read_error}\n")
        else:
            raise FpcalcError(str(read_error), 3 if got_results else 2) from read_error