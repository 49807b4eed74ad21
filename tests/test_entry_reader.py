import bz2
import io
import lzma
import zlib

import pytest
import zstandard

from ziptide.compression import Compression
from ziptide.entry import ZipEntry
from ziptide.entry_reader import ZipEntryReader, read_bytes, read_string
from ziptide.errors import CRC32CheckError

DATA = b"The quick brown fox jumps over the lazy dog.\n" * 500


def _deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


COMPRESSORS = {
    Compression.STORED: lambda d: d,
    Compression.DEFLATE: _deflate,
    Compression.BZ: bz2.compress,
    Compression.XZ: lambda d: lzma.compress(d, format=lzma.FORMAT_XZ),
    Compression.ZSTD: lambda d: zstandard.ZstdCompressor().compress(d),
}


@pytest.mark.parametrize("compression", list(COMPRESSORS))
def test_round_trip_all_methods(compression):
    packed = COMPRESSORS[compression](DATA)
    reader = ZipEntryReader(io.BytesIO(packed), compression, len(packed))
    assert reader.read() == DATA
    assert reader.compute_hash() == zlib.crc32(DATA)


def test_reads_in_small_pieces():
    packed = _deflate(DATA)
    reader = ZipEntryReader(io.BytesIO(packed), Compression.DEFLATE, len(packed))
    pieces = []
    while True:
        piece = reader.read(97)
        if not piece:
            break
        assert len(piece) <= 97
        pieces.append(piece)
    assert b"".join(pieces) == DATA


def test_stops_at_size_and_leaves_source_positioned():
    packed = _deflate(DATA)
    source = io.BytesIO(packed + b"TRAILER")
    reader = ZipEntryReader(source, Compression.DEFLATE, len(packed))
    assert reader.read() == DATA
    assert source.read() == b"TRAILER"


def test_stored_size_limits_output():
    source = io.BytesIO(b"abcdefgh")
    reader = ZipEntryReader(source, Compression.STORED, 3)
    assert reader.read() == b"abc"
    assert reader.read() == b""


def test_compute_hash_resets():
    reader = ZipEntryReader(io.BytesIO(DATA), Compression.STORED, len(DATA))
    reader.read()
    assert reader.compute_hash() == zlib.crc32(DATA)
    assert reader.compute_hash() == 0


def test_read_to_end_checked_success():
    packed = _deflate(DATA)
    entry = ZipEntry("f.txt", Compression.DEFLATE, crc32=zlib.crc32(DATA))
    reader = ZipEntryReader(io.BytesIO(packed), Compression.DEFLATE, len(packed))
    assert reader.read_to_end_checked(entry) == DATA


def test_read_to_end_checked_detects_mismatch():
    entry = ZipEntry("f.txt", crc32=zlib.crc32(DATA) ^ 1)
    reader = ZipEntryReader(io.BytesIO(DATA), Compression.STORED, len(DATA))
    with pytest.raises(CRC32CheckError):
        reader.read_to_end_checked(entry)


def test_read_to_string_checked():
    text = "héllo wörld"
    raw = text.encode("utf-8")
    entry = ZipEntry("t.txt", crc32=zlib.crc32(raw))
    reader = ZipEntryReader(io.BytesIO(raw), Compression.STORED, len(raw))
    assert reader.read_to_string_checked(entry) == text


def test_read_to_string_checked_mismatch():
    raw = b"plain"
    entry = ZipEntry("t.txt", crc32=zlib.crc32(raw) + 1)
    reader = ZipEntryReader(io.BytesIO(raw), Compression.STORED, len(raw))
    with pytest.raises(CRC32CheckError):
        reader.read_to_string_checked(entry)


def test_read_bytes_takes_at_most_length():
    source = io.BytesIO(b"0123456789")
    assert read_bytes(source, 4) == b"0123"
    assert read_bytes(source, 100) == b"456789"
    assert read_bytes(source, 5) == b""


def test_read_string_decodes_utf8():
    raw = "dir/ñame.txt".encode("utf-8")
    source = io.BytesIO(raw + b"rest")
    assert read_string(source, len(raw)) == "dir/ñame.txt"
    assert source.read() == b"rest"


def test_read_string_rejects_invalid_utf8():
    with pytest.raises(UnicodeDecodeError):
        read_string(io.BytesIO(b"\xff\xfe"), 2)