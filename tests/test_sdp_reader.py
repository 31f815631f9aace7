import pytest

from sdp_tools.errors import (
    EntryError, InvalidRange, OddPcmSize, SDPError, Truncated, TooSmall, WriteError,
)
from sdp_tools.sdp_reader import (
    HEADER_SIZE, RECORD_SIZE, SDPReader, locate_payload, parse_records, read_entry_count,
)


def test_too_small():
    with pytest.raises(TooSmall):
        parse_records(b'\x00' * 63)


def test_empty_container(make_sdp):
    data = make_sdp([])
    assert len(data) == HEADER_SIZE
    reader = SDPReader(data)
    assert len(reader) == 0
    assert reader.region_start == HEADER_SIZE


def test_truncated_record_table(make_sdp):
    data = make_sdp([{'payload': b''}], count=2)
    assert len(data) == HEADER_SIZE + RECORD_SIZE
    with pytest.raises(Truncated):
        parse_records(data)


def test_huge_count_is_truncated():
    data = b'\xff\xff\xff\xff'.ljust(HEADER_SIZE, b'\x00')
    with pytest.raises(Truncated):
        parse_records(data)


def test_record_fields(make_sdp):
    data = make_sdp([
        {'payload': b'\x01\x02', 'flags': 0x5, 'rate': 32000, 'name': b'jump', 'id': 7, 'attenuation': -12},
        {'payload': b'\x03\x04\x05\x06'},
    ])
    first, second = parse_records(data)
    assert first.id == 7
    assert first.flags == 0x5
    assert first.channels == 2
    assert first.compressed
    assert first.attenuation == -12
    assert first.sample_rate == 32000
    assert first.name == 'jump'
    assert (first.offset, first.size) == (0, 2)

    assert second.channels == 1
    assert not second.compressed
    assert (second.offset, second.size) == (2, 4)
    assert second.name == ''
    assert second.output_name == 'wave_1'


def test_name_terminator_is_forced(make_sdp):
    data = make_sdp([{'payload': b'', 'name': b'A' * 28}])
    (record,) = parse_records(data)
    assert record.name == 'A' * 27


def test_output_name_cannot_leave_directory(make_sdp):
    (record,) = parse_records(make_sdp([{'name': b'../evil'}]))
    assert record.output_name == '.._evil'


def test_payload_view(make_sdp):
    data = make_sdp([{'payload': b'ab'}, {'payload': b'cdef'}])
    reader = SDPReader(data)
    assert reader.region_start == HEADER_SIZE + 2 * RECORD_SIZE
    view = reader.payload(reader.records[1])
    assert isinstance(view, memoryview)
    assert bytes(view) == b'cdef'


def test_payload_past_end(make_sdp):
    data = make_sdp([{'payload': b'abcd', 'size': 5}])
    reader = SDPReader(data)
    with pytest.raises(InvalidRange):
        reader.payload(reader.records[0])


def test_payload_at_exact_end(make_sdp):
    data = make_sdp([{'payload': b'abcd', 'offset': 2, 'size': 2}])
    reader = SDPReader(data)
    assert bytes(reader.payload(reader.records[0])) == b'cd'


def test_locate_payload_large_values(make_sdp):
    (record,) = parse_records(make_sdp([{'offset': 0xFFFFFFFF, 'size': 0xFFFFFFFF}]))
    region_start = HEADER_SIZE + RECORD_SIZE
    end = region_start + 0xFFFFFFFF + 0xFFFFFFFF
    with pytest.raises(InvalidRange):
        locate_payload(record, region_start, end - 1)
    assert locate_payload(record, region_start, end) == (region_start + 0xFFFFFFFF, end)
    with pytest.raises(InvalidRange):
        locate_payload(record, (1 << 64) - 1, 1 << 70)


def test_from_file_missing(tmp_path):
    with pytest.raises(SDPError):
        SDPReader.from_file(tmp_path / "missing.sdp")


def test_error_severities():
    for fatal in (TooSmall, Truncated):
        assert issubclass(fatal, SDPError)
        assert not issubclass(fatal, EntryError)
    for recoverable in (InvalidRange, OddPcmSize, WriteError):
        assert issubclass(recoverable, EntryError)
        assert issubclass(recoverable, SDPError)


def test_read_entry_count_before_table_check(make_sdp):
    data = make_sdp([], count=9)
    assert read_entry_count(data) == 9
    with pytest.raises(TooSmall):
        read_entry_count(data[:HEADER_SIZE - 1])
