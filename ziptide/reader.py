"""Reading ZIP archives from seekable sources and from in-memory bytes."""

from __future__ import annotations

import io
import logging
import struct
import sys
from typing import BinaryIO, Optional

from ziptide.compression import AttributeCompatibility, Compression
from ziptide.constants import (
    CDH_SIGNATURE,
    LFH_SIGNATURE,
    NON_ZIP64_MAX_SIZE,
    SIGNATURE_LENGTH,
    ZIP64_EOCDL_LENGTH,
)
from ziptide.date import ZipDateTime
from ziptide.entry import StoredZipEntry, ZipEntry, ZipFile
from ziptide.entry_reader import ZipEntryReader, read_bytes, read_string
from ziptide.errors import (
    EntryIndexOutOfBoundsError,
    FeatureNotSupportedError,
    TargetZip64NotSupportedError,
    UnexpectedHeaderError,
)
from ziptide.headers import (
    CentralDirectoryRecord,
    EndOfCentralDirectoryHeader,
    LocalFileHeader,
    Zip64EndOfCentralDirectoryLocator,
    Zip64EndOfCentralDirectoryRecord,
    Zip64ExtendedInformationExtraField,
    get_zip64_extra_field,
    parse_extra_fields,
)
from ziptide.records import CombinedCentralDirectoryRecord, locate_eocdr

_log = logging.getLogger(__name__)

_U32 = struct.Struct("<I")


def _read_signature(reader: BinaryIO) -> int:
    data = reader.read(SIGNATURE_LENGTH)
    if len(data) != SIGNATURE_LENGTH:
        raise EOFError(f"expected {SIGNATURE_LENGTH} bytes, got {len(data)}")
    return _U32.unpack(data)[0]


def _assert_signature(reader: BinaryIO, expected: int) -> None:
    actual = _read_signature(reader)
    if actual != expected:
        raise UnexpectedHeaderError(actual, expected)


def _combined_sizes(
    uncompressed_size: int,
    compressed_size: int,
    extra_field: Optional[Zip64ExtendedInformationExtraField],
) -> tuple[int, int]:
    if extra_field is not None:
        if uncompressed_size == NON_ZIP64_MAX_SIZE:
            uncompressed_size = extra_field.uncompressed_size
        if compressed_size == NON_ZIP64_MAX_SIZE:
            compressed_size = extra_field.compressed_size
    return uncompressed_size, compressed_size


def read_file(reader: BinaryIO) -> ZipFile:
    """Read the archive information from a seekable binary source."""
    _log.debug("Locate EOCDR")
    eocdr_offset = locate_eocdr(reader)

    reader.seek(eocdr_offset)
    eocdr = EndOfCentralDirectoryHeader.from_reader(reader)
    _log.debug("EOCDR: %r", eocdr)

    comment = read_string(reader, eocdr.file_comm_length)

    # The Zip64 locator, if present, sits just before the EOCDR signature.
    locator: Optional[Zip64EndOfCentralDirectoryLocator] = None
    locator_offset = eocdr_offset - ZIP64_EOCDL_LENGTH - SIGNATURE_LENGTH
    if locator_offset >= 0:
        reader.seek(locator_offset)
        locator = Zip64EndOfCentralDirectoryLocator.try_from_reader(reader)
    _log.debug("Zip64EOCDL: %r", locator)

    zip64 = locator is not None
    zip64_eocdr: Optional[Zip64EndOfCentralDirectoryRecord] = None
    if locator is not None:
        reader.seek(locator.relative_offset + SIGNATURE_LENGTH)
        zip64_eocdr = Zip64EndOfCentralDirectoryRecord.from_reader(reader)
    _log.debug("Zip64EOCDR: %r", zip64_eocdr)

    combined = CombinedCentralDirectoryRecord.combine(eocdr, zip64_eocdr)
    _log.debug("Combined directory: %r", combined)

    if (
        combined.disk_number != combined.disk_number_start_of_cd
        or combined.num_entries_in_directory != combined.num_entries_in_directory_on_disk
    ):
        raise FeatureNotSupportedError("Spanned/split files")

    _log.debug("Read central directory")
    reader.seek(combined.offset_of_start_of_directory)
    entries = read_central_directory(reader, combined.num_entries_in_directory, zip64)

    return ZipFile(entries=entries, comment=comment, zip64=zip64)


def read_central_directory(
    reader: BinaryIO, num_of_entries: int, zip64: bool
) -> list[StoredZipEntry]:
    """Read the given number of central directory records."""
    if num_of_entries > sys.maxsize:
        raise TargetZip64NotSupportedError()
    return [read_cd_record(reader) for _ in range(num_of_entries)]


def read_cd_record(reader: BinaryIO) -> StoredZipEntry:
    """Read one central directory record, signature included."""
    _assert_signature(reader, CDH_SIGNATURE)

    header = CentralDirectoryRecord.from_reader(reader)
    filename = read_string(reader, header.file_name_length)
    compression = Compression.from_code(header.compression)
    extra_fields = parse_extra_fields(read_bytes(reader, header.extra_field_length))
    comment = read_string(reader, header.file_comment_length)

    zip64_extra_field = get_zip64_extra_field(extra_fields)
    uncompressed_size, compressed_size = _combined_sizes(
        header.uncompressed_size, header.compressed_size, zip64_extra_field
    )

    file_offset = header.lh_offset
    if (
        zip64_extra_field is not None
        and file_offset == NON_ZIP64_MAX_SIZE
        and zip64_extra_field.relative_header_offset is not None
    ):
        file_offset = zip64_extra_field.relative_header_offset

    entry = ZipEntry(
        filename=filename,
        compression=compression,
        attribute_compatibility=AttributeCompatibility.UNIX,
        crc32=header.crc,
        uncompressed_size=uncompressed_size,
        compressed_size=compressed_size,
        last_modification_date=ZipDateTime(date=header.mod_date, time=header.mod_time),
        internal_file_attribute=header.inter_attr,
        external_file_attribute=header.exter_attr,
        extra_fields=extra_fields,
        comment=comment,
    )
    _log.debug("Entry: %r, offset %d", entry, file_offset)
    return StoredZipEntry(entry=entry, file_offset=file_offset)


def read_local_file_header(reader: BinaryIO) -> Optional[ZipEntry]:
    """Read a local file header, or return None on reaching the central directory."""
    signature = _read_signature(reader)
    if signature == CDH_SIGNATURE:
        return None
    if signature != LFH_SIGNATURE:
        raise UnexpectedHeaderError(signature, LFH_SIGNATURE)

    header = LocalFileHeader.from_reader(reader)
    filename = read_string(reader, header.file_name_length)
    compression = Compression.from_code(header.compression)
    extra_fields = parse_extra_fields(read_bytes(reader, header.extra_field_length))

    zip64_extra_field = get_zip64_extra_field(extra_fields)
    uncompressed_size, compressed_size = _combined_sizes(
        header.uncompressed_size, header.compressed_size, zip64_extra_field
    )

    if header.flags.data_descriptor:
        raise FeatureNotSupportedError(
            "stream reading entries with data descriptors (planned to be reintroduced)"
        )
    if header.flags.encrypted:
        raise FeatureNotSupportedError("encryption")

    return ZipEntry(
        filename=filename,
        compression=compression,
        attribute_compatibility=AttributeCompatibility.UNIX,
        crc32=header.crc,
        uncompressed_size=uncompressed_size,
        compressed_size=compressed_size,
        last_modification_date=ZipDateTime(date=header.mod_date, time=header.mod_time),
        internal_file_attribute=0,
        external_file_attribute=0,
        extra_fields=extra_fields,
        comment="",
    )


def _stored_entry(file: ZipFile, index: int) -> StoredZipEntry:
    if not 0 <= index < len(file.entries):
        raise EntryIndexOutOfBoundsError()
    return file.entries[index]


def _seek_to_data_offset(reader: BinaryIO, stored: StoredZipEntry) -> None:
    """Position the reader at the first byte of the entry's data."""
    reader.seek(stored.file_offset)
    _assert_signature(reader, LFH_SIGNATURE)
    header = LocalFileHeader.from_reader(reader)
    reader.seek(header.file_name_length + header.extra_field_length, io.SEEK_CUR)


def _open_entry(reader: BinaryIO, stored: StoredZipEntry) -> ZipEntryReader:
    _seek_to_data_offset(reader, stored)
    return ZipEntryReader(
        reader, stored.entry.compression, stored.entry.compressed_size
    )


class SeekZipFileReader:
    """A ZIP reader over a seekable binary source.

    Entry readers share the source, so only one should be read at a time.
    """

    def __init__(self, reader: BinaryIO) -> None:
        self._reader = reader
        self._file = read_file(reader)

    @classmethod
    def from_raw_parts(cls, reader: BinaryIO, file: ZipFile) -> SeekZipFileReader:
        """Build a reader from a source and information already read from it."""
        instance = cls.__new__(cls)
        instance._reader = reader
        instance._file = file
        return instance

    @property
    def file(self) -> ZipFile:
        """This archive's information."""
        return self._file

    @property
    def inner(self) -> BinaryIO:
        """The underlying seekable source."""
        return self._reader

    def entry(self, index: int) -> ZipEntryReader:
        """Return a reader for the entry at index."""
        return _open_entry(self._reader, _stored_entry(self._file, index))


class MemZipFileReader:
    """A ZIP reader over bytes held in memory.

    Each entry reader has its own cursor, so several may be read at once.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._file = read_file(io.BytesIO(self._data))

    @classmethod
    def from_raw_parts(cls, data: bytes, file: ZipFile) -> MemZipFileReader:
        """Build a reader from bytes and information already read from them."""
        instance = cls.__new__(cls)
        instance._data = bytes(data)
        instance._file = file
        return instance

    @property
    def file(self) -> ZipFile:
        """This archive's information."""
        return self._file

    @property
    def data(self) -> bytes:
        """The raw bytes given at construction."""
        return self._data

    def entry(self, index: int) -> ZipEntryReader:
        """Return a reader for the entry at index."""
        stored = _stored_entry(self._file, index)
        return _open_entry(io.BytesIO(self._data), stored)