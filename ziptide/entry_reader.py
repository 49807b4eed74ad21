"""Reading, decompressing and checksumming the data of a single entry."""

from __future__ import annotations

import zlib
from typing import BinaryIO, Optional

from ziptide.compression import Compression, new_decompressor
from ziptide.entry import ZipEntry
from ziptide.errors import CRC32CheckError

_CHUNK_SIZE = 64 * 1024


def read_bytes(reader: BinaryIO, length: int) -> bytes:
    """Read up to length bytes, fewer only if the reader runs out."""
    parts = []
    remaining = length
    while remaining > 0:
        chunk = reader.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def read_string(reader: BinaryIO, length: int) -> str:
    """Read up to length bytes and decode them as UTF-8."""
    return read_bytes(reader, length).decode("utf-8")


class ZipEntryReader:
    """Reads an entry's data, decompressing it and tracking its CRC32.

    At most ``size`` compressed bytes are taken from the underlying reader,
    which is left positioned just after them once the end has been reached.
    """

    def __init__(self, reader: BinaryIO, compression: Compression, size: int) -> None:
        self._reader = reader
        self._remaining = size
        self._decompressor = new_decompressor(compression)
        self._pending = bytearray()
        self._eof = False
        self._crc = 0

    def _fill(self) -> None:
        chunk = (
            self._reader.read(min(_CHUNK_SIZE, self._remaining))
            if self._remaining > 0
            else b""
        )
        if chunk:
            self._remaining -= len(chunk)
            self._pending += self._decompressor.decompress(chunk)
        else:
            self._pending += self._decompressor.flush()
            self._eof = True

    def read(self, size: Optional[int] = -1) -> bytes:
        """Read up to size decompressed bytes, or everything left if negative."""
        if size is None or size < 0:
            while not self._eof:
                self._fill()
            size = len(self._pending)
        else:
            while len(self._pending) < size and not self._eof:
                self._fill()
        data = bytes(self._pending[:size])
        del self._pending[:size]
        self._crc = zlib.crc32(data, self._crc)
        return data

    def compute_hash(self) -> int:
        """Return the CRC32 of the data read so far and reset it.

        Only meaningful once all the data has been read.
        """
        crc, self._crc = self._crc, 0
        return crc

    def read_to_end_checked(self, entry: ZipEntry) -> bytes:
        """Read the remaining data and verify it against the entry's CRC32."""
        data = self.read()
        if self.compute_hash() != entry.crc32:
            raise CRC32CheckError()
        return data

    def read_to_string_checked(self, entry: ZipEntry) -> str:
        """Read the remaining data as UTF-8 and verify the entry's CRC32."""
        text = self.read().decode("utf-8")
        if self.compute_hash() != entry.crc32:
            raise CRC32CheckError()
        return text