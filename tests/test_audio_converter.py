import math

import pytest

from chromaprint.audio_converter import AudioConverter


def _sine(n, period=50, amplitude=8000):
    return [int(amplitude * math.sin(2 * math.pi * i / period)) for i in range(n)]


def test_pass_through_same_format():
    data = _sine(1000)
    converter = AudioConverter(44100, 1, 44100, 1)
    assert converter.convert(data) == data
    assert converter.flush() == []


def test_stereo_with_equal_channels_to_mono():
    mono = _sine(500)
    stereo = [v for v in mono for _ in range(2)]
    converter = AudioConverter(44100, 2, 44100, 1)
    assert converter.convert(stereo) == mono


def test_mono_to_stereo_repeats_channel():
    mono = _sine(300)
    converter = AudioConverter(11025, 1, 11025, 2)
    out = converter.convert(mono)
    assert out[0::2] == mono
    assert out[1::2] == mono


def test_downsample_length():
    data = _sine(4400)
    converter = AudioConverter(44100, 1, 11025, 1)
    out = converter.convert(data) + converter.flush()
    assert len(out) == len(data) // 4


def test_upsample_length():
    data = _sine(1000)
    converter = AudioConverter(11025, 1, 44100, 1)
    out = converter.convert(data) + converter.flush()
    assert len(out) == len(data) * 4


def test_constant_signal_keeps_level_away_from_edges():
    data = [1000] * 8000
    converter = AudioConverter(44100, 1, 11025, 1)
    out = converter.convert(data) + converter.flush()
    middle = out[100:-100]
    assert middle
    assert all(v == 1000 for v in middle)


def test_chunked_conversion_matches_whole():
    data = _sine(6000)
    whole = AudioConverter(44100, 2, 8000, 1)
    stereo = [v for v in data for _ in range(2)]
    expected = whole.convert(stereo) + whole.flush()

    chunked = AudioConverter(44100, 2, 8000, 1)
    out = []
    for start in range(0, len(stereo), 734):
        out.extend(chunked.convert(stereo[start:start + 734]))
    out.extend(chunked.flush())
    assert out == expected


def test_flush_starts_new_stream():
    data = _sine(2000)
    converter = AudioConverter(44100, 1, 22050, 1)
    first = converter.convert(data) + converter.flush()
    second = converter.convert(data) + converter.flush()
    assert first == second


def test_output_stays_in_int16_range():
    data = [32767, -32768] * 2000
    converter = AudioConverter(44100, 1, 16000, 1)
    out = converter.convert(data) + converter.flush()
    assert out
    assert all(-32768 <= v <= 32767 for v in out)


def test_partial_frame_rejected():
    converter = AudioConverter(44100, 2, 11025, 1)
    with pytest.raises(ValueError):
        converter.convert([1, 2, 3])


@pytest.mark.parametrize("args", [(0, 1, 11025, 1), (44100, 0, 11025, 1), (44100, 1, 11025, 0)])
def test_invalid_parameters_rejected(args):
    with pytest.raises(ValueError):
        AudioConverter(*args)


def test_invalid_cutoff_rejected():
    with pytest.raises(ValueError):
        AudioConverter(44100, 1, 11025, 1, cutoff=1.5)