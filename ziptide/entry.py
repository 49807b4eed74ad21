"""Entries of a ZIP archive and the archive-level information around them."""

from __future__ import annotations

from dataclasses import dataclass, field

from ziptide.compression import AttributeCompatibility, Compression
from ziptide.constants import SPEC_VERSION_MADE_BY
from ziptide.date import ZipDateTime
from ziptide.headers import ExtraField

# Host code used for the "version made by" field; entries default to Unix.
_UNIX_HOST = int(AttributeCompatibility.UNIX)


@dataclass
class ZipEntry:
    """The metadata of a single file or directory within a ZIP archive."""

    filename: str
    compression: Compression = Compression.STORED
    attribute_compatibility: AttributeCompatibility = AttributeCompatibility.UNIX
    crc32: int = 0
    uncompressed_size: int = 0
    compressed_size: int = 0
    last_modification_date: ZipDateTime = field(default_factory=ZipDateTime)
    internal_file_attribute: int = 0
    external_file_attribute: int = 0
    extra_fields: list[ExtraField] = field(default_factory=list)
    comment: str = ""

    def dir(self) -> bool:
        """Whether the entry names a directory (its filename ends with '/')."""
        return self.filename.endswith("/")


@dataclass
class StoredZipEntry:
    """An entry together with the offset of its local file header."""

    entry: ZipEntry
    file_offset: int


@dataclass
class ZipFile:
    """The information read from an archive's central directory."""

    entries: list[StoredZipEntry] = field(default_factory=list)
    comment: str = ""
    zip64: bool = False


def version_needed_to_extract(entry: ZipEntry) -> int:
    """The minimum ZIP specification version needed to extract the entry."""
    version = {
        Compression.DEFLATE: 20,
        Compression.BZ: 46,
        Compression.LZMA: 63,
    }.get(entry.compression, 10)
    if entry.dir():
        version = max(version, 20)
    return version


def version_made_by() -> int:
    """The "version made by" value written by this package."""
    return (_UNIX_HOST << 8) | SPEC_VERSION_MADE_BY