"""PCM sample sources: buffers, format, channel and rate conversion, queues, mixing and WAV decoding."""

__version__ = "0.17.1"