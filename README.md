# chromaprint

Pure-Python building blocks for computing acoustic fingerprints of audio.
It has no dependencies outside the standard library.

## What is in the package

- `chromaprint.audio_reader` — `AudioReader` reads interleaved 16-bit PCM
  from WAV files, raw sample files (`s16le`, `s16be`, `s8`, `u8`) or standard
  input (`-` or `pipe:0`), optionally remixed and resampled to a requested
  sample rate and channel count. Failures raise `AudioReaderError`.
- `chromaprint.audio_converter` — `AudioConverter` remixes channels and
  converts sample rates of a stream of 16-bit samples with a windowed-sinc
  filter (`convert` for each block, `flush` at the end).
- `chromaprint.audio_slicer` — `AudioSlicer` cuts a stream of samples into
  overlapping windows of a fixed size, however the input arrives.
- `chromaprint.chroma_normalizer` — `euclidean_norm`, `normalize_vector` and
  `ChromaNormalizer`, which scales feature vectors to unit length before
  passing them on.
- `chromaprint.consumers` — the abstract `AudioConsumer`,
  `FeatureVectorConsumer` and `FFTFrameConsumer` pipeline interfaces.
- `chromaprint.image` — `Image`, a growable grid of floats stored row by
  row, with `ImageRow` views.
- `chromaprint.filters` — the six rectangular filter shapes `filter0` …
  `filter5` over an integral image (any object with
  `area(x1, y1, x2, y2)`), the comparators `subtract` and `subtract_log`, and
  `Filter`, which picks one shape by type.
- `chromaprint.quantizer` — `Quantizer` maps a filter response onto 0–3.
- `chromaprint.classifier` — `Classifier` pairs a `Filter` with a `Quantizer`.
- `chromaprint.moving_average` — `MovingAverage`, an integer average over a
  fixed window.
- `chromaprint.fpcalc` — `parse_options` for the fingerprinting command-line
  options, `format_result` for text, JSON and plain output, and
  `process_file`, which reads a file (with length limit, chunking and
  overlap) and feeds it to a fingerprinting context, writing each result.
  Errors raise `FpcalcError`, which carries an `exit_code`.

## Examples

Quantizing filter responses:

```python
from chromaprint.quantizer import Quantizer

q = Quantizer(0.0, 0.1, 0.3)
codes = [q.quantize(v) for v in (-0.1, 0.03, 0.13, 0.33)]
# codes == [0, 1, 2, 3]
```

Slicing a stream into windows of four samples, advancing by two. The
consumer receives the samples kept from earlier calls and the samples from
the current block:

```python
from chromaprint.audio_slicer import AudioSlicer

frames = []
slicer = AudioSlicer(4, 2)
collect = lambda kept, new: frames.append(list(kept) + list(new))
slicer.process([0, 1, 2], collect)
slicer.process([3, 4, 5], collect)
# frames == [[0, 1, 2, 3], [2, 3, 4, 5]]
```

Keeping a moving average:

```python
from chromaprint.moving_average import MovingAverage

avg = MovingAverage(3)
for value in (3, 6, 9, 12):
    avg.add_value(value)
# avg.average == 9
```

Reading a raw stereo file as mono at 11025 Hz:

```python
from chromaprint.audio_reader import AudioReader

with AudioReader(output_sample_rate=11025, output_channels=1) as reader:
    reader.set_input_format("s16le")
    reader.set_input_channels(2)
    reader.set_input_sample_rate(44100)
    reader.open("audio.raw")
    samples = [s for block in reader for s in block]
```

Parsing options and formatting a result:

```python
from chromaprint.fpcalc import format_result, parse_options

options = parse_options(["-json", "-raw", "song.wav"])
line = format_result(options, [1, 2, 3], True, 0.0, 12.5)
# line == '{"duration": 12.50, "fingerprint": [1,2,3]}\n'
```

## What the package does not do

The package does not compute fingerprints by itself: it has no spectrum
analysis, chroma extraction, integral-image construction or fingerprint
compression. `process_file` expects the caller to supply a fingerprinting
context with `start`, `feed`, `finish`, `clear_fingerprint`, `delay`,
`delay_ms`, `raw_fingerprint` and `fingerprint`. There is no installed
command; `parse_options` and `process_file` are called from Python.
`AudioReader` decodes only WAV and raw PCM, not compressed formats.

## Running the tests

The tests use pytest, available through the `test` extra:

```
pip install -e .[test]
pytest
```