import struct

import numpy as np

from .errors import WriteError

WAV_HEADER_SIZE = 44
FMT_CHUNK_SIZE = 16
WAVE_FORMAT_PCM = 1
BITS_PER_SAMPLE = 16


def wav_header(sample_count, channels, rate):
    """Canonical 44-byte RIFF/WAVE header for 16-bit integer PCM."""
    block_align = channels * BITS_PER_SAMPLE // 8
    byte_rate = (rate * block_align) & 0xFFFFFFFF
    data_size = sample_count * 2
    riff_size = 4 + (8 + FMT_CHUNK_SIZE) + (8 + data_size)
    return struct.pack(
        '<4sI4s4sIHHIIHH4sI',
        b'RIFF', riff_size, b'WAVE',
        b'fmt ', FMT_CHUNK_SIZE, WAVE_FORMAT_PCM, channels, rate & 0xFFFFFFFF,
        byte_rate, block_align, BITS_PER_SAMPLE,
        b'data', data_size,
    )


def build_wav(samples, channels, rate):
    samples = np.asarray(samples, dtype='<i2')
    return wav_header(len(samples), channels, rate) + samples.tobytes()


def write_wav(output_path, samples, channels, rate):
    """Write samples as a .wav file. Raises WriteError on any I/O failure."""
    try:
        payload = build_wav(samples, channels, rate)
        with open(output_path, 'wb') as f:
            f.write(payload)
    except (OSError, struct.error) as e:
        raise WriteError(f"Failed to write WAV: {output_path} ({e})") from e
    return output_path
