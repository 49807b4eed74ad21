"""Fixed-layout ZIP headers, records and extra fields."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, Optional, Union

from ziptide.constants import (
    CDH_LENGTH,
    EOCDR_LENGTH,
    LFH_LENGTH,
    SIGNATURE_LENGTH,
    ZIP64_EOCDL_SIGNATURE,
    ZIP64_EOCDR_LENGTH,
)
from ziptide.errors import (
    InvalidExtraFieldHeaderError,
    Zip64ExtendedFieldIncompleteError,
)

# Header id of the Zip64 extended information extra field.
ZIP64_EXTRA_FIELD_ID = 0x0001

ZIP64_EOCDL_BODY_LENGTH = 16

_LFH = struct.Struct("<HHHHHIIIHH")
_CDR = struct.Struct("<HHHHHHIIIHHHHHII")
_EOCDR = struct.Struct("<HHHHIIH")
_ZIP64_EOCDR = struct.Struct("<QHHIIQQQQ")
_ZIP64_EOCDL = struct.Struct("<IQI")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


def _read_exact(reader: BinaryIO, length: int) -> bytes:
    data = reader.read(length)
    if len(data) != length:
        raise EOFError(f"expected {length} bytes, got {len(data)}")
    return data


def _unpack(layout: struct.Struct, data: bytes, what: str) -> tuple:
    if len(data) != layout.size:
        raise ValueError(f"{what} must be {layout.size} bytes, got {len(data)}")
    return layout.unpack(data)


@dataclass(frozen=True)
class GeneralPurposeFlag:
    """The general purpose bit flags this package understands."""

    encrypted: bool = False
    data_descriptor: bool = False
    filename_unicode: bool = False

    @classmethod
    def from_int(cls, value: int) -> GeneralPurposeFlag:
        return cls(
            encrypted=bool(value & 0x1),
            data_descriptor=bool(value & 0x8),
            filename_unicode=bool(value & 0x800),
        )

    def __int__(self) -> int:
        return (
            (0x1 if self.encrypted else 0)
            | (0x8 if self.data_descriptor else 0)
            | (0x800 if self.filename_unicode else 0)
        )

    def to_bytes(self) -> bytes:
        return _U16.pack(int(self))


@dataclass
class LocalFileHeader:
    """A local file header, without its signature."""

    version: int
    flags: GeneralPurposeFlag
    compression: int
    mod_time: int
    mod_date: int
    crc: int
    compressed_size: int
    uncompressed_size: int
    file_name_length: int
    extra_field_length: int

    @classmethod
    def from_bytes(cls, data: bytes) -> LocalFileHeader:
        values = _unpack(_LFH, data, "local file header")
        version, flags, *rest = values
        return cls(version, GeneralPurposeFlag.from_int(flags), *rest)

    @classmethod
    def from_reader(cls, reader: BinaryIO) -> LocalFileHeader:
        return cls.from_bytes(_read_exact(reader, LFH_LENGTH))

    def to_bytes(self) -> bytes:
        return _LFH.pack(
            self.version,
            int(self.flags),
            self.compression,
            self.mod_time,
            self.mod_date,
            self.crc,
            self.compressed_size,
            self.uncompressed_size,
            self.file_name_length,
            self.extra_field_length,
        )


@dataclass
class CentralDirectoryRecord:
    """A central directory file header, without its signature."""

    v_made_by: int
    v_needed: int
    flags: GeneralPurposeFlag
    compression: int
    mod_time: int
    mod_date: int
    crc: int
    compressed_size: int
    uncompressed_size: int
    file_name_length: int
    extra_field_length: int
    file_comment_length: int
    disk_start: int
    inter_attr: int
    exter_attr: int
    lh_offset: int

    @classmethod
    def from_bytes(cls, data: bytes) -> CentralDirectoryRecord:
        values = _unpack(_CDR, data, "central directory record")
        v_made_by, v_needed, flags, *rest = values
        return cls(v_made_by, v_needed, GeneralPurposeFlag.from_int(flags), *rest)

    @classmethod
    def from_reader(cls, reader: BinaryIO) -> CentralDirectoryRecord:
        return cls.from_bytes(_read_exact(reader, CDH_LENGTH))

    def to_bytes(self) -> bytes:
        return _CDR.pack(
            self.v_made_by,
            self.v_needed,
            int(self.flags),
            self.compression,
            self.mod_time,
            self.mod_date,
            self.crc,
            self.compressed_size,
            self.uncompressed_size,
            self.file_name_length,
            self.extra_field_length,
            self.file_comment_length,
            self.disk_start,
            self.inter_attr,
            self.exter_attr,
            self.lh_offset,
        )


@dataclass
class EndOfCentralDirectoryHeader:
    """The end of central directory record, without its signature."""

    disk_num: int
    start_cent_dir_disk: int
    num_of_entries_disk: int
    num_of_entries: int
    size_cent_dir: int
    cent_dir_offset: int
    file_comm_length: int

    @classmethod
    def from_bytes(cls, data: bytes) -> EndOfCentralDirectoryHeader:
        return cls(*_unpack(_EOCDR, data, "end of central directory record"))

    @classmethod
    def from_reader(cls, reader: BinaryIO) -> EndOfCentralDirectoryHeader:
        return cls.from_bytes(_read_exact(reader, EOCDR_LENGTH))

    def to_bytes(self) -> bytes:
        return _EOCDR.pack(
            self.disk_num,
            self.start_cent_dir_disk,
            self.num_of_entries_disk,
            self.num_of_entries,
            self.size_cent_dir,
            self.cent_dir_offset,
            self.file_comm_length,
        )


@dataclass
class Zip64EndOfCentralDirectoryRecord:
    """The Zip64 end of central directory record, without its signature.

    The variable-length extensible data sector that may follow is ignored.
    """

    size_of_zip64_end_of_cd_record: int
    version_made_by: int
    version_needed_to_extract: int
    disk_number: int
    disk_number_start_of_cd: int
    num_entries_in_directory_on_disk: int
    num_entries_in_directory: int
    directory_size: int
    offset_of_start_of_directory: int

    @classmethod
    def from_bytes(cls, data: bytes) -> Zip64EndOfCentralDirectoryRecord:
        return cls(*_unpack(_ZIP64_EOCDR, data, "Zip64 end of central directory record"))

    @classmethod
    def from_reader(cls, reader: BinaryIO) -> Zip64EndOfCentralDirectoryRecord:
        return cls.from_bytes(_read_exact(reader, ZIP64_EOCDR_LENGTH))

    def to_bytes(self) -> bytes:
        return _ZIP64_EOCDR.pack(
            self.size_of_zip64_end_of_cd_record,
            self.version_made_by,
            self.version_needed_to_extract,
            self.disk_number,
            self.disk_number_start_of_cd,
            self.num_entries_in_directory_on_disk,
            self.num_entries_in_directory,
            self.directory_size,
            self.offset_of_start_of_directory,
        )


@dataclass
class Zip64EndOfCentralDirectoryLocator:
    """The Zip64 end of central directory locator, without its signature."""

    number_of_disk_with_start_of_zip64_end_of_central_directory: int
    relative_offset: int
    total_number_of_disks: int

    @classmethod
    def from_bytes(cls, data: bytes) -> Zip64EndOfCentralDirectoryLocator:
        return cls(*_unpack(_ZIP64_EOCDL, data, "Zip64 end of central directory locator"))

    @classmethod
    def try_from_reader(
        cls, reader: BinaryIO
    ) -> Optional[Zip64EndOfCentralDirectoryLocator]:
        """Read a signature and, if it is the locator's, the locator itself."""
        (signature,) = _U32.unpack(_read_exact(reader, SIGNATURE_LENGTH))
        if signature != ZIP64_EOCDL_SIGNATURE:
            return None
        return cls.from_bytes(_read_exact(reader, ZIP64_EOCDL_BODY_LENGTH))

    def to_bytes(self) -> bytes:
        return _ZIP64_EOCDL.pack(
            self.number_of_disk_with_start_of_zip64_end_of_central_directory,
            self.relative_offset,
            self.total_number_of_disks,
        )


@dataclass
class Zip64ExtendedInformationExtraField:
    """The Zip64 extended information extra field."""

    header_id: int
    data_size: int
    uncompressed_size: int
    compressed_size: int
    relative_header_offset: Optional[int] = None
    disk_start_number: Optional[int] = None

    @classmethod
    def from_bytes(
        cls, header_id: int, data_size: int, data: bytes
    ) -> Zip64ExtendedInformationExtraField:
        """Parse the field body; data excludes the four-byte field header."""
        if len(data) < 16:
            raise Zip64ExtendedFieldIncompleteError()
        uncompressed_size, compressed_size = struct.unpack_from("<QQ", data, 0)
        relative_header_offset = (
            _U64.unpack_from(data, 16)[0] if len(data) >= 24 else None
        )
        disk_start_number = _U64.unpack_from(data, 24)[0] if len(data) >= 32 else None
        return cls(
            header_id=header_id,
            data_size=data_size,
            uncompressed_size=uncompressed_size,
            compressed_size=compressed_size,
            relative_header_offset=relative_header_offset,
            disk_start_number=disk_start_number,
        )

    def to_bytes(self) -> bytes:
        parts = [
            _U16.pack(self.header_id),
            _U16.pack(self.data_size),
            _U64.pack(self.uncompressed_size),
            _U64.pack(self.compressed_size),
        ]
        if self.relative_header_offset is not None:
            parts.append(_U64.pack(self.relative_header_offset))
        if self.disk_start_number is not None:
            parts.append(_U64.pack(self.disk_start_number))
        return b"".join(parts)

    def byte_count(self) -> int:
        return (
            20
            + (8 if self.relative_header_offset is not None else 0)
            + (8 if self.disk_start_number is not None else 0)
        )


@dataclass
class UnknownExtraField:
    """An extra field whose content is kept unparsed."""

    header_id: int
    data_size: int
    content: bytes = field(default=b"")

    def to_bytes(self) -> bytes:
        return _U16.pack(self.header_id) + _U16.pack(self.data_size) + bytes(self.content)

    def byte_count(self) -> int:
        return 4 + len(self.content)


ExtraField = Union[Zip64ExtendedInformationExtraField, UnknownExtraField]


def extra_field_from_bytes(header_id: int, data_size: int, data: bytes) -> ExtraField:
    """Build the extra field matching a header id from its body bytes."""
    if header_id == ZIP64_EXTRA_FIELD_ID:
        return Zip64ExtendedInformationExtraField.from_bytes(header_id, data_size, data)
    return UnknownExtraField(header_id=header_id, data_size=data_size, content=bytes(data))


def parse_extra_fields(data: bytes) -> list[ExtraField]:
    """Split a raw extra field block into its individual fields."""
    fields: list[ExtraField] = []
    cursor = 0
    while cursor + 4 < len(data):
        header_id, field_size = struct.unpack_from("<HH", data, cursor)
        end = cursor + 4 + field_size
        if end > len(data):
            raise InvalidExtraFieldHeaderError(field_size, len(data) - cursor - 4)
        fields.append(extra_field_from_bytes(header_id, field_size, data[cursor + 4 : end]))
        cursor = end
    return fields


def extra_fields_to_bytes(fields: Iterable[ExtraField]) -> bytes:
    """Serialise extra fields back into a single block."""
    return b"".join(extra.to_bytes() for extra in fields)


def get_zip64_extra_field(
    extra_fields: Iterable[ExtraField],
) -> Optional[Zip64ExtendedInformationExtraField]:
    """Return the first Zip64 extended information field, if any."""
    return next(
        (f for f in extra_fields if isinstance(f, Zip64ExtendedInformationExtraField)),
        None,
    )