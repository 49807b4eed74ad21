"""Locating and combining the end of central directory records."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Optional

from ziptide.constants import (
    EOCDR_BUFFER_SIZE,
    EOCDR_LENGTH,
    EOCDR_LOWER_BOUND,
    EOCDR_SIGNATURE,
    SIGNATURE_LENGTH,
)
from ziptide.errors import UnableToLocateEOCDRError
from ziptide.headers import (
    EndOfCentralDirectoryHeader,
    Zip64EndOfCentralDirectoryRecord,
)

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF


@dataclass
class CombinedCentralDirectoryRecord:
    """The fields of the EOCDR merged with those of an optional Zip64 EOCDR."""

    version_made_by: Optional[int]
    version_needed_to_extract: Optional[int]
    disk_number: int
    disk_number_start_of_cd: int
    num_entries_in_directory_on_disk: int
    num_entries_in_directory: int
    directory_size: int
    offset_of_start_of_directory: int
    file_comment_length: int

    @classmethod
    def from_eocdr(cls, header: EndOfCentralDirectoryHeader) -> CombinedCentralDirectoryRecord:
        """The record for an archive without a Zip64 EOCDR."""
        return cls(
            version_made_by=None,
            version_needed_to_extract=None,
            disk_number=header.disk_num,
            disk_number_start_of_cd=header.start_cent_dir_disk,
            num_entries_in_directory_on_disk=header.num_of_entries_disk,
            num_entries_in_directory=header.num_of_entries,
            directory_size=header.size_cent_dir,
            offset_of_start_of_directory=header.cent_dir_offset,
            file_comment_length=header.file_comm_length,
        )

    @classmethod
    def combine(
        cls,
        eocdr: EndOfCentralDirectoryHeader,
        zip64eocdr: Optional[Zip64EndOfCentralDirectoryRecord] = None,
    ) -> CombinedCentralDirectoryRecord:
        """Combine an EOCDR with an optional Zip64 EOCDR.

        Fields holding their maximum value in the EOCDR are replaced by the
        corresponding Zip64 EOCDR field.
        """
        combined = cls.from_eocdr(eocdr)
        if zip64eocdr is None:
            return combined
        if eocdr.disk_num == _U16_MAX:
            combined.disk_number = zip64eocdr.disk_number
        if eocdr.start_cent_dir_disk == _U16_MAX:
            combined.disk_number_start_of_cd = zip64eocdr.disk_number_start_of_cd
        if eocdr.num_of_entries_disk == _U16_MAX:
            combined.num_entries_in_directory_on_disk = (
                zip64eocdr.num_entries_in_directory_on_disk
            )
        if eocdr.num_of_entries == _U16_MAX:
            combined.num_entries_in_directory = zip64eocdr.num_entries_in_directory
        if eocdr.size_cent_dir == _U32_MAX:
            combined.directory_size = zip64eocdr.directory_size
        if eocdr.cent_dir_offset == _U32_MAX:
            combined.offset_of_start_of_directory = zip64eocdr.offset_of_start_of_directory
        combined.version_made_by = zip64eocdr.version_made_by
        combined.version_needed_to_extract = zip64eocdr.version_needed_to_extract
        return combined


def reverse_search_buffer(buffer: bytes, signature: bytes) -> Optional[int]:
    """Index of the last byte of the final occurrence of signature, or None."""
    if not buffer:
        return None
    start = bytes(buffer).rfind(bytes(signature))
    if start < 0:
        return None
    return start + len(signature) - 1


def locate_eocdr(reader: BinaryIO) -> int:
    """Return the offset just past the EOCDR signature.

    The data is searched backwards in overlapping buffers, as the record may
    be followed by a variable-length comment.
    """
    length = reader.seek(0, 2)
    signature = struct.pack("<I", EOCDR_SIGNATURE)
    lower_limit = max(0, length - EOCDR_LOWER_BOUND)

    position = max(0, length - (EOCDR_LENGTH + EOCDR_BUFFER_SIZE))
    while True:
        reader.seek(position)
        buffer = reader.read(EOCDR_BUFFER_SIZE)
        match = reverse_search_buffer(buffer, signature)
        if match is not None:
            return position + match + 1

        if position == 0 or position <= lower_limit:
            raise UnableToLocateEOCDRError()

        # Overlap reads by the signature length so a match that straddles two
        # buffers is still found.
        position = max(0, position - (EOCDR_BUFFER_SIZE - SIGNATURE_LENGTH))