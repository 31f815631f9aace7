from collections import namedtuple
from enum import Enum

import numpy as np


class ChannelMode(Enum):
    MONO = 1
    STEREO = 2

    @classmethod
    def from_channels(cls, channels):
        return cls.STEREO if channels == 2 else cls.MONO


# Channel state: predictor in [-32767, 32767], step_index in [0, 48]
AdpcmChannel = namedtuple('AdpcmChannel', ['predictor', 'step_index'], defaults=(0, 0))


class SdpAdpcmDecoder:
    """
    4-bit ADPCM decoder for SDP sound containers.
    IMA-style adaptation, but with its own 49-entry step table (256..24832)
    and a symmetric predictor clamp of +/-32767.

    Every byte carries two nibbles, high first. In stereo the high nibble
    belongs to the left channel and the low nibble to the right one; in mono
    both nibbles feed the same channel, one after the other.
    """

    index_table = [
        -1, -1, -1, -1, 2, 4, 6, 8,
        -1, -1, -1, -1, 2, 4, 6, 8
    ]

    step_table = [
        256, 272, 304, 336, 368, 400, 448, 496, 544, 592, 656,
        720, 800, 880, 960, 1056, 1168, 1280, 1408, 1552, 1712,
        1888, 2080, 2288, 2512, 2768, 3040, 3344, 3680, 4048,
        4464, 4912, 5392, 5936, 6528, 7184, 7904, 8704, 9568,
        10528, 11584, 12736, 14016, 15408, 16960, 18656, 20512,
        22576, 24832
    ]

    PREDICTOR_MIN = -32767
    PREDICTOR_MAX = 32767
    STEP_INDEX_MAX = len(step_table) - 1

    def __init__(self, mode=ChannelMode.MONO):
        self.mode = mode

    @classmethod
    def decode_nibble(cls, state, nibble):
        """Advance one channel by one nibble. Returns (new_state, sample)."""
        step = cls.step_table[state.step_index]
        diff = step >> 3

        if nibble & 1: diff += (step >> 2)
        if nibble & 2: diff += (step >> 1)
        if nibble & 4: diff += step

        if nibble & 8:
            diff = -diff

        predictor = max(cls.PREDICTOR_MIN, min(cls.PREDICTOR_MAX, state.predictor + diff))
        step_index = max(0, min(cls.STEP_INDEX_MAX, state.step_index + cls.index_table[nibble]))

        return AdpcmChannel(predictor, step_index), predictor

    def decode(self, data):
        """
        Decodes ADPCM bytes into a numpy int16 array of exactly 2 * len(data)
        samples (interleaved L, R when stereo).
        """
        out = np.empty(len(data) * 2, dtype=np.int16)
        first = AdpcmChannel()
        second = AdpcmChannel()
        pos = 0

        for byte in data:
            hi = (byte >> 4) & 0x0F
            lo = byte & 0x0F

            first, out[pos] = self.decode_nibble(first, hi)
            if self.mode is ChannelMode.STEREO:
                second, out[pos + 1] = self.decode_nibble(second, lo)
            else:
                first, out[pos + 1] = self.decode_nibble(first, lo)
            pos += 2

        return out


def decode_adpcm(data, channels):
    return SdpAdpcmDecoder(ChannelMode.from_channels(channels)).decode(data)
