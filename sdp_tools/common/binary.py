import struct


def _check(data, offset, size):
    if offset < 0 or offset + size > len(data):
        raise IndexError(f"read of {size} bytes at {offset:#x} past end of {len(data):#x}-byte buffer")


def read_u16_le(data, offset=0):
    _check(data, offset, 2)
    return struct.unpack_from('<H', data, offset)[0]


def read_u32_le(data, offset=0):
    _check(data, offset, 4)
    return struct.unpack_from('<I', data, offset)[0]


def read_s32_le(data, offset=0):
    _check(data, offset, 4)
    return struct.unpack_from('<i', data, offset)[0]


def read_cstring(data, offset, size):
    """
    Read a fixed-width NUL-terminated string field.
    The last byte of the field is always treated as the terminator, whatever
    is stored there, so the result never runs past the field.
    """
    _check(data, offset, size)
    raw = bytearray(data[offset:offset + size])
    raw[size - 1] = 0
    return bytes(raw[:raw.index(0)]).decode('latin-1')
