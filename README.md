# pcmkit

`pcmkit` works with streams of PCM audio samples in plain Python. It uses
only the standard library.

A *source* is an iterator of interleaved samples (for stereo: left, right,
left, right, ...). It also reports its channel count, its sample rate, its
sample format and, when it is known, its total duration. You can build a
source from a list, convert it, queue several sources one after another, mix
sources together, or decode one from WAV data.

## Installation

```
pip install pcmkit
```

To run the test suite:

```
pip install "pcmkit[test]"
pytest
```

## Modules

- `pcmkit.sample`
  - `SampleFormat`: an enum with the members `I16`, `U16` and `F32`.
    `I16` is silent at 0, `U16` at 32768 and `F32` at 0.0. Each member has
    `zero_value()`, `lerp(first, second, numerator, denominator)`,
    `amplify(value, factor)`, `saturating_add(first, second)` (integer
    formats are clamped to their range) and `convert(value, target)`.
  - `DataConverter(input, source_format, target_format)`: an iterator that
    converts every sample of `input` to another format.
- `pcmkit.source.Source`: the abstract base class of every source. Subclasses
  provide `__next__`, `channels()`, `sample_rate()`, `sample_format()`,
  `current_frame_len()` and `total_duration()`. `size_hint()` returns a lower
  bound and an optional upper bound for the number of samples left.
- `pcmkit.buffer.SamplesBuffer(channels, sample_rate, data, sample_format)`:
  a source built from a sequence of samples. A channel count or sample rate
  of zero raises `ValueError`.
- `pcmkit.channels.ChannelCountConverter(input, from_channels, to_channels)`:
  changes the channel count. It drops extra channels, and it fills missing
  channels by repeating the last input channel of each frame.
- `pcmkit.sample_rate.SampleRateConverter(input, from_rate, to_rate, channels, sample_format)`:
  resamples by linear interpolation.
- `pcmkit.queue.queue(keep_alive_if_empty, sample_format)`: returns a
  `SourcesQueueInput` and a `SourcesQueueOutput`.
- `pcmkit.dynamic_mixer.mixer(channels, sample_rate, sample_format)`: returns
  a `DynamicMixerController` and a `DynamicMixer`.
- `pcmkit.wav`: `WavDecoder`, `is_wave`, the sample scaling helpers
  `f32_to_i16`, `i8_to_i16`, `i24_to_i16` and `i32_to_i16`, and the errors
  `WavFormatError` and `UnsupportedWavSpecError`.
- `pcmkit.decoder`: `Decoder`, `LoopedDecoder`, `DecoderError` and
  `Mp4Type`.

Both converters accept any iterable and produce an iterator. Each one has
`size_hint()`, `into_inner()`, and a `len()` that raises `TypeError` when the
length of its input is not known exactly.

## Examples

A buffer as a source:

```python
from pcmkit.buffer import SamplesBuffer
from pcmkit.sample import SampleFormat

buf = SamplesBuffer(2, 2, [0, 0, 0, 0, 0, 0], SampleFormat.I16)
print(buf.total_duration())   # 0:00:01.500000
print(list(buf))              # [0, 0, 0, 0, 0, 0]
```

Converting channels, sample rate and sample format:

```python
from pcmkit.channels import ChannelCountConverter
from pcmkit.sample import DataConverter, SampleFormat
from pcmkit.sample_rate import SampleRateConverter

print(list(ChannelCountConverter([1, 2, 1, 2], 2, 3)))
# [1, 2, 2, 1, 2, 2]

print(list(SampleRateConverter([2, 16, 4, 18, 6, 20, 8, 22], 2000, 3000, 2)))
# [2, 16, 3, 17, 4, 18, 6, 20, 7, 21, 8, 22]

print(list(DataConverter([0, 16384], SampleFormat.I16, SampleFormat.F32)))
# [0.0, 0.5]
```

Mixing two sources. Each one added is converted to the channel count, rate
and format of the mixer, and the output sums them with saturating addition.
The output ends once every source it is playing has ended:

```python
from pcmkit.buffer import SamplesBuffer
from pcmkit.dynamic_mixer import mixer
from pcmkit.sample import SampleFormat

controller, output = mixer(1, 48000, SampleFormat.I16)
controller.add(SamplesBuffer(1, 48000, [10, -10, 10, -10], SampleFormat.I16))
controller.add(SamplesBuffer(1, 48000, [5, 5, 5, 5], SampleFormat.I16))
print(list(output))           # [15, -5, 15, -5]
```

Sources added while the output is running start on the next frame boundary.

Playing sources one after the other:

```python
from pcmkit.buffer import SamplesBuffer
from pcmkit.queue import queue
from pcmkit.sample import SampleFormat

tx, rx = queue(False, SampleFormat.I16)
tx.append(SamplesBuffer(1, 48000, [1, 2], SampleFormat.I16))
done = tx.append_with_signal(SamplesBuffer(1, 48000, [3, 4], SampleFormat.I16))
print(list(rx))               # [1, 2, 3, 4]
print(done.is_set())          # True
```

`append_with_signal` returns a `threading.Event`. The event is set once the
source has finished playing, or once `clear()` removes the source from the
queue. `clear()` returns the number of sources it removed. If
`keep_alive_if_empty` is true, the output plays silence instead of ending
when nothing is queued. You can change this setting with
`set_keep_alive_if_empty`.

Decoding a WAV file:

```python
from pcmkit.decoder import Decoder

with open("sound.wav", "rb") as fh:
    decoder = Decoder(fh)
    print(decoder.channels(), decoder.sample_rate(), decoder.total_duration())
    samples = list(decoder)
```

The decoder reads PCM, IEEE float and extensible WAVE data. It decodes 8-,
16-, 24- and 32-bit integer samples and 32-bit float samples to `i16`.
If the data is not WAVE, `Decoder` raises `DecoderError`. If the data uses
some other sample width, `UnsupportedWavSpecError` is raised when samples are
read. `Decoder.new_looped(data)` returns a `LoopedDecoder`, which seeks back
to the start and plays again each time the data ends.

## What pcmkit does not do

- It does not play sound. Nothing here opens an audio device. Sources
  only produce samples for your own code to consume.
- It decodes WAV data only. FLAC, Ogg Vorbis, MP3 and MP4/AAC are not
  decoded. `Mp4Type` only parses and prints the names of the MP4 file
  extensions.
- It has no command-line program.