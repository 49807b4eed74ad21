import io

import pytest

from ziptide.errors import (
    InvalidExtraFieldHeaderError,
    Zip64ExtendedFieldIncompleteError,
)
from ziptide.headers import (
    CentralDirectoryRecord,
    EndOfCentralDirectoryHeader,
    GeneralPurposeFlag,
    LocalFileHeader,
    UnknownExtraField,
    Zip64EndOfCentralDirectoryLocator,
    Zip64EndOfCentralDirectoryRecord,
    Zip64ExtendedInformationExtraField,
    extra_field_from_bytes,
    extra_fields_to_bytes,
    get_zip64_extra_field,
    parse_extra_fields,
)

ZIP64_EOCDR_BYTES = bytes(
    [
        0x50, 0x4B, 0x06, 0x06, 0x2C, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x1E, 0x03,
        0x2D, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x2F, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x40, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
    ]
)

ZIP64_EOCDL_BYTES = bytes(
    [
        0x50, 0x4B, 0x06, 0x07, 0x00, 0x00, 0x00, 0x00, 0x6F, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x01, 0x00, 0x00, 0x00,
    ]
)


def test_parse_zip64_eocdr():
    record = Zip64EndOfCentralDirectoryRecord.from_bytes(ZIP64_EOCDR_BYTES[4:56])
    assert record == Zip64EndOfCentralDirectoryRecord(
        size_of_zip64_end_of_cd_record=44,
        version_made_by=798,
        version_needed_to_extract=45,
        disk_number=0,
        disk_number_start_of_cd=0,
        num_entries_in_directory_on_disk=1,
        num_entries_in_directory=1,
        directory_size=47,
        offset_of_start_of_directory=64,
    )


def test_parse_zip64_eocdl():
    locator = Zip64EndOfCentralDirectoryLocator.try_from_reader(io.BytesIO(ZIP64_EOCDL_BYTES))
    assert locator == Zip64EndOfCentralDirectoryLocator(
        number_of_disk_with_start_of_zip64_end_of_central_directory=0,
        relative_offset=111,
        total_number_of_disks=1,
    )


def test_zip64_eocdr_round_trip():
    body = ZIP64_EOCDR_BYTES[4:]
    assert Zip64EndOfCentralDirectoryRecord.from_bytes(body).to_bytes() == body


def test_zip64_eocdr_from_reader():
    record = Zip64EndOfCentralDirectoryRecord.from_reader(io.BytesIO(ZIP64_EOCDR_BYTES[4:]))
    assert record.offset_of_start_of_directory == 64
    assert record.directory_size == 47


def test_zip64_eocdl_round_trip():
    body = ZIP64_EOCDL_BYTES[4:]
    assert Zip64EndOfCentralDirectoryLocator.from_bytes(body).to_bytes() == body


def test_zip64_eocdl_wrong_signature_is_none():
    data = b"PK\x05\x06" + bytes(16)
    reader = io.BytesIO(data)
    assert Zip64EndOfCentralDirectoryLocator.try_from_reader(reader) is None
    assert reader.tell() == 4


def test_zip64_eocdl_truncated_raises():
    with pytest.raises(EOFError):
        Zip64EndOfCentralDirectoryLocator.try_from_reader(io.BytesIO(ZIP64_EOCDL_BYTES[:10]))


@pytest.mark.parametrize(
    "value, expected",
    [
        (0x0000, (False, False, False)),
        (0x0001, (True, False, False)),
        (0x0008, (False, True, False)),
        (0x0800, (False, False, True)),
        (0x0809, (True, True, True)),
    ],
)
def test_flag_from_int(value, expected):
    flag = GeneralPurposeFlag.from_int(value)
    assert (flag.encrypted, flag.data_descriptor, flag.filename_unicode) == expected


def test_flag_to_bytes_keeps_only_known_bits():
    assert GeneralPurposeFlag.from_int(0xFFFF).to_bytes() == b"\x09\x08"
    assert GeneralPurposeFlag().to_bytes() == b"\x00\x00"


def make_lfh():
    return LocalFileHeader(
        version=20,
        flags=GeneralPurposeFlag(filename_unicode=True),
        compression=8,
        mod_time=0x6000,
        mod_date=0x5621,
        crc=0xDEADBEEF,
        compressed_size=100,
        uncompressed_size=250,
        file_name_length=9,
        extra_field_length=0,
    )


def test_local_file_header_round_trip():
    header = make_lfh()
    data = header.to_bytes()
    assert len(data) == 26
    assert data[:2] == b"\x14\x00"
    assert data[2:4] == b"\x00\x08"
    assert LocalFileHeader.from_bytes(data) == header


def test_local_file_header_from_reader():
    data = make_lfh().to_bytes() + b"filename!"
    reader = io.BytesIO(data)
    header = LocalFileHeader.from_reader(reader)
    assert header.crc == 0xDEADBEEF
    assert reader.read() == b"filename!"


def test_local_file_header_short_read():
    with pytest.raises(EOFError):
        LocalFileHeader.from_reader(io.BytesIO(bytes(10)))


def test_local_file_header_wrong_length():
    with pytest.raises(ValueError):
        LocalFileHeader.from_bytes(bytes(25))


def test_central_directory_record_round_trip():
    record = CentralDirectoryRecord(
        v_made_by=0x033F,
        v_needed=20,
        flags=GeneralPurposeFlag(data_descriptor=True),
        compression=0,
        mod_time=1,
        mod_date=2,
        crc=3,
        compressed_size=4,
        uncompressed_size=5,
        file_name_length=6,
        extra_field_length=7,
        file_comment_length=8,
        disk_start=0,
        inter_attr=1,
        exter_attr=0x81A40000,
        lh_offset=1234,
    )
    data = record.to_bytes()
    assert len(data) == 42
    assert data[38:42] == (1234).to_bytes(4, "little")
    assert CentralDirectoryRecord.from_reader(io.BytesIO(data)) == record


def test_eocdr_pinned_bytes():
    header = EndOfCentralDirectoryHeader(0, 0, 1, 1, 47, 64, 0)
    expected = b"\x00\x00\x00\x00\x01\x00\x01\x00/\x00\x00\x00@\x00\x00\x00\x00\x00"
    assert header.to_bytes() == expected
    assert EndOfCentralDirectoryHeader.from_bytes(expected) == header
    assert EndOfCentralDirectoryHeader.from_reader(io.BytesIO(expected)) == header


ZIP64_FIELD = b"\x01\x00\x10\x00" + (5).to_bytes(8, "little") + (3).to_bytes(8, "little")
UNKNOWN_FIELD = b"\x55\x54\x05\x00\x01abcd"


def test_parse_extra_fields():
    fields = parse_extra_fields(ZIP64_FIELD + UNKNOWN_FIELD)
    assert fields == [
        Zip64ExtendedInformationExtraField(1, 16, 5, 3, None, None),
        UnknownExtraField(0x5455, 5, b"\x01abcd"),
    ]
    assert extra_fields_to_bytes(fields) == ZIP64_FIELD + UNKNOWN_FIELD


def test_parse_extra_fields_ignores_trailing_empty_header():
    assert parse_extra_fields(b"\x55\x54\x00\x00") == []


def test_parse_extra_fields_overflow():
    with pytest.raises(InvalidExtraFieldHeaderError):
        parse_extra_fields(b"\x55\x54\x10\x00ab")


def test_zip64_field_incomplete():
    with pytest.raises(Zip64ExtendedFieldIncompleteError):
        parse_extra_fields(b"\x01\x00\x08\x00" + bytes(8))


def test_zip64_field_optional_members():
    body = b"".join(n.to_bytes(8, "little") for n in (10, 20, 30, 40))
    extra = Zip64ExtendedInformationExtraField.from_bytes(1, 32, body)
    assert extra.relative_header_offset == 30
    assert extra.disk_start_number == 40
    assert extra.byte_count() == 36
    assert extra.to_bytes() == b"\x01\x00\x20\x00" + body


def test_zip64_field_with_offset_only():
    body = b"".join(n.to_bytes(8, "little") for n in (10, 20, 30))
    extra = extra_field_from_bytes(1, 24, body)
    assert extra.relative_header_offset == 30
    assert extra.disk_start_number is None
    assert extra.byte_count() == 28


def test_unknown_field_byte_count():
    extra = extra_field_from_bytes(0x7875, 3, b"xyz")
    assert extra == UnknownExtraField(0x7875, 3, b"xyz")
    assert extra.byte_count() == 7
    assert extra.to_bytes() == b"\x75\x78\x03\x00xyz"


def test_get_zip64_extra_field():
    fields = parse_extra_fields(UNKNOWN_FIELD + ZIP64_FIELD)
    found = get_zip64_extra_field(fields)
    assert found.uncompressed_size == 5
    assert found.compressed_size == 3
    assert get_zip64_extra_field(parse_extra_fields(UNKNOWN_FIELD)) is None