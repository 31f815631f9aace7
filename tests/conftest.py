import struct

import pytest

HEADER_SIZE = 64
RECORD_SIZE = 64


def pack_record(offset, size, flags=0, rate=22050, name=b"", id=0, attenuation=0):
    rec = struct.pack('<IHHIiIIIII', id, 0, 0, flags, attenuation, 0, offset, size, 0, rate)
    rec += name[:28].ljust(28, b'\x00')
    assert len(rec) == RECORD_SIZE
    return rec


def build_sdp(entries, count=None):
    """
    entries: list of dicts with 'payload' plus any pack_record keyword.
    Payloads are laid out back-to-back unless an explicit 'offset'/'size' is given.
    """
    header = struct.pack('<I', len(entries) if count is None else count).ljust(HEADER_SIZE, b'\x00')
    records = b''
    region = b''
    for e in entries:
        e = dict(e)
        payload = e.pop('payload', b'')
        offset = e.pop('offset', len(region))
        size = e.pop('size', len(payload))
        records += pack_record(offset, size, **e)
        region += payload
    return header + records + region


@pytest.fixture
def make_sdp():
    return build_sdp


@pytest.fixture
def sdp_file(tmp_path):
    def _write(entries, name="SOUND.SDP", count=None):
        path = tmp_path / name
        path.write_bytes(build_sdp(entries, count))
        return path
    return _write
