"""
SDP sound container reader.

Layout (all little-endian):

  0x00  u32  entry count
  0x04  ...  padding up to HEADER_SIZE

  HEADER_SIZE + i * RECORD_SIZE: attribute record i
    +0x00  u32  id
    +0x04  u16  unknown
    +0x06  u16  unknown
    +0x08  u32  flags        bit 0 = stereo, bit 2 = ADPCM
    +0x0C  s32  attenuation
    +0x10  u32  unknown
    +0x14  u32  payload offset (relative to the payload region)
    +0x18  u32  payload size in bytes
    +0x1C  u32  unknown
    +0x20  u32  sample rate
    +0x24  28s  name, NUL terminated

  HEADER_SIZE + count * RECORD_SIZE: payload region, clips back-to-back.
"""

from .common.binary import read_u16_le, read_u32_le, read_s32_le, read_cstring
from .errors import SDPError, TooSmall, Truncated, InvalidRange

HEADER_SIZE = 64
RECORD_SIZE = 64
NAME_OFFSET = 0x24
NAME_SIZE = 28

FLAG_STEREO = 0x01
FLAG_ADPCM = 0x04

U64_MAX = (1 << 64) - 1


class WaveAttributes:
    def __init__(self, index, id, unk2, unk3, flags, attenuation, unk6,
                 offset, size, unk7, sample_rate, name):
        self.index = index
        self.id = id
        self.unk2 = unk2
        self.unk3 = unk3
        self.flags = flags
        self.attenuation = attenuation
        self.unk6 = unk6
        self.offset = offset
        self.size = size
        self.unk7 = unk7
        self.sample_rate = sample_rate
        self.name = name

    @property
    def channels(self):
        return 2 if self.flags & FLAG_STEREO else 1

    @property
    def compressed(self):
        return bool(self.flags & FLAG_ADPCM)

    @property
    def output_name(self):
        name = self.name or f"wave_{self.index}"
        return name.replace('/', '_').replace('\\', '_')

    def to_dict(self):
        return {
            'index': self.index,
            'id': self.id,
            'name': self.name,
            'flags': self.flags,
            'channels': self.channels,
            'compressed': self.compressed,
            'rate': self.sample_rate,
            'attenuation': self.attenuation,
            'offset': self.offset,
            'size': self.size,
        }

    def __repr__(self):
        return (f"WaveAttributes(index={self.index}, name={self.name!r}, flags={self.flags:#x}, "
                f"offset={self.offset:#x}, size={self.size}, rate={self.sample_rate})")


def parse_record(data, base, index):
    return WaveAttributes(
        index=index,
        id=read_u32_le(data, base + 0x00),
        unk2=read_u16_le(data, base + 0x04),
        unk3=read_u16_le(data, base + 0x06),
        flags=read_u32_le(data, base + 0x08),
        attenuation=read_s32_le(data, base + 0x0C),
        unk6=read_u32_le(data, base + 0x10),
        offset=read_u32_le(data, base + 0x14),
        size=read_u32_le(data, base + 0x18),
        unk7=read_u32_le(data, base + 0x1C),
        sample_rate=read_u32_le(data, base + 0x20),
        name=read_cstring(data, base + NAME_OFFSET, NAME_SIZE),
    )


def read_entry_count(data):
    """Declared entry count from the header; not yet checked against the file size."""
    if len(data) < HEADER_SIZE:
        raise TooSmall(f"File too small to be a valid SDP ({len(data)} bytes)")
    return read_u32_le(data, 0)


def parse_records(data):
    """
    Validate the header and record table of an SDP container and return the
    list of attribute records. Raises TooSmall / Truncated.
    """
    count = read_entry_count(data)
    if len(data) < HEADER_SIZE + count * RECORD_SIZE:
        raise Truncated(f"File truncated or corrupted: {count} entries need "
                        f"{HEADER_SIZE + count * RECORD_SIZE} bytes, have {len(data)}")

    return [parse_record(data, HEADER_SIZE + i * RECORD_SIZE, i) for i in range(count)]


def payload_region_start(count):
    return HEADER_SIZE + count * RECORD_SIZE


def locate_payload(record, region_start, file_size):
    """Return the absolute (start, end) byte range of a record's payload."""
    start = region_start + record.offset
    end = start + record.size
    if end > U64_MAX or end > file_size:
        raise InvalidRange(f"Invalid offset/size "
                           f"({start:#x}..{end:#x}, file is {file_size:#x} bytes)")
    return start, end


def load_file(path):
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise SDPError(f"Failed to open input file: {path} ({e})") from e


class SDPReader:
    def __init__(self, data):
        self.data = data
        self.records = parse_records(data)
        self.region_start = payload_region_start(len(self.records))

    @classmethod
    def from_file(cls, path):
        return cls(load_file(path))

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def payload(self, record):
        """Zero-copy view of a record's payload bytes."""
        start, end = locate_payload(record, self.region_start, len(self.data))
        return memoryview(self.data)[start:end]
