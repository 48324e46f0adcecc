import io
import json
import struct

import pytest

from chromaprint.audio_reader import AudioReader
from chromaprint.fpcalc import (
    FpcalcError,
    Options,
    OutputFormat,
    format_result,
    parse_options,
    process_file,
)


class FakeFingerprinter:
    def __init__(self, delay=0, delay_ms=0):
        self.delay = delay
        self.delay_ms = delay_ms
        self.starts = []
        self.fed = []
        self.clears = 0
        self.finishes = 0
        self._count = 0

    def start(self, sample_rate, num_channels):
        self.starts.append((sample_rate, num_channels))
        self._count = 0

    def feed(self, samples):
        self.fed.extend(samples)
        self._count += len(samples)

    def finish(self):
        self.finishes += 1

    def clear_fingerprint(self):
        self.clears += 1
        self._count = 0

    @property
    def raw_fingerprint(self):
        return [self._count] if self._count else []

    @property
    def fingerprint(self):
        return f"FP{self._count}"


def _raw_file(tmp_path, count):
    path = tmp_path / "audio.raw"
    path.write_bytes(struct.pack(f"<{count}h", *range(count)))
    return str(path)


def _reader():
    reader = AudioReader()
    reader.set_input_format("s16le")
    reader.set_input_channels(1)
    reader.set_input_sample_rate(100)
    return reader


def test_parse_defaults_and_files():
    options = parse_options(["a.wav", "b.wav"])
    assert options.files == ["a.wav", "b.wav"]
    assert options.format is OutputFormat.TEXT
    assert options.max_duration == 120


def test_parse_values():
    options = parse_options(
        ["-rate", "8000", "-c", "2", "-length", "30", "-chunk", "5", "-a", "3", "-json", "x"]
    )
    assert options.input_sample_rate == 8000
    assert options.input_channels == 2
    assert options.max_duration == 30.0
    assert options.max_chunk_duration == 5.0
    assert options.algorithm == 2
    assert options.format is OutputFormat.JSON


def test_parse_flags():
    options = parse_options(["-raw", "-signed", "-overlap", "-ts", "-ignore-errors", "-plain", "f"])
    assert options.raw and options.signed and options.overlap
    assert options.abs_ts and options.ignore_errors
    assert options.format is OutputFormat.PLAIN


def test_double_dash_takes_rest_as_files():
    options = parse_options(["--", "-json", "-"])
    assert options.files == ["-json", "-"]
    assert options.format is OutputFormat.TEXT


@pytest.mark.parametrize(
    "argv",
    [
        ["-channels", "0", "f"],
        ["-rate", "-5", "f"],
        ["-length", "-1", "f"],
        ["-algorithm", "6", "f"],
        ["-bogus", "f"],
        ["f", "-rate"],
        [],
    ],
)
def test_parse_errors(argv):
    with pytest.raises(FpcalcError) as info:
        parse_options(argv)
    assert info.value.exit_code == 2


def test_help_and_version_stop_parsing():
    assert parse_options(["-h"]).show_help
    assert parse_options(["-version", "-bogus"]).show_version


def test_format_text():
    options = Options()
    assert format_result(options, "AQAA", True, 0.0, 12.7) == "DURATION=12\nFINGERPRINT=AQAA\n"
    assert format_result(options, "AQAA", False, 0.0, 1.0).startswith("\nDURATION=1\n")


def test_format_raw_signed():
    options = Options(raw=True, signed=True, format=OutputFormat.PLAIN)
    assert format_result(options, [4294967295, 1], True, 0.0, 0.0) == "-1,1\n"
    options.signed = False
    assert format_result(options, [4294967295, 1], True, 0.0, 0.0) == "4294967295,1\n"


def test_format_json_is_valid():
    options = Options(format=OutputFormat.JSON, raw=True, max_chunk_duration=1.0)
    data = json.loads(format_result(options, [1, 2], True, 3.0, 1.5))
    assert data == {"timestamp": 3.0, "duration": 1.5, "fingerprint": [1, 2]}
    options = Options(format=OutputFormat.JSON)
    data = json.loads(format_result(options, "AQAA", True, 0.0, 2.0))
    assert data == {"duration": 2.0, "fingerprint": "AQAA"}


def test_format_empty():
    with pytest.raises(FpcalcError):
        format_result(Options(), [], True, 0.0, 0.0)
    assert format_result(Options(), [], False, 0.0, 0.0) == ""


def test_process_whole_file(tmp_path):
    ctx = FakeFingerprinter()
    out = io.StringIO()
    process_file(ctx, _reader(), _raw_file(tmp_path, 250), Options(), out)
    assert out.getvalue() == "DURATION=2\nFINGERPRINT=FP250\n"
    assert ctx.fed == list(range(250))
    assert ctx.starts == [(100, 1)]


def test_process_length_limit(tmp_path):
    ctx = FakeFingerprinter()
    out = io.StringIO()
    process_file(ctx, _reader(), _raw_file(tmp_path, 250), Options(max_duration=1), out)
    assert ctx.fed == list(range(100))
    assert "FINGERPRINT=FP100" in out.getvalue()


def test_process_overlap_clears_instead_of_restarting(tmp_path):
    ctx = FakeFingerprinter(delay=10, delay_ms=100)
    out = io.StringIO()
    options = Options(format=OutputFormat.PLAIN, raw=True, max_chunk_duration=1, overlap=True)
    process_file(ctx, _reader(), _raw_file(tmp_path, 250), options, out)
    lines = out.getvalue().splitlines()
    assert lines[0] == "110"
    assert len(ctx.starts) == 1
    assert ctx.clears == len(lines) - 1
    assert ctx.fed == list(range(250))


def test_process_empty_audio(tmp_path):
    with pytest.raises(FpcalcError, match="Not enough audio data"):
        process_file(FakeFingerprinter(), _reader(), _raw_file(tmp_path, 0), Options(), io.StringIO())


def test_process_missing_file(tmp_path):
    with pytest.raises(FpcalcError) as info:
        process_file(
            FakeFingerprinter(), _reader(), str(tmp_path / "none.raw"), Options(), io.StringIO()
        )
    assert info.value.exit_code == 2