"""Compression methods, host compatibility and streaming decompressors."""

from __future__ import annotations

import bz2
import enum
import lzma
import zlib
from dataclasses import dataclass
from typing import ClassVar, Protocol

import zstandard

from ziptide.errors import (
    AttributeCompatibilityNotSupportedError,
    CompressionNotSupportedError,
)


class Compression(enum.IntEnum):
    """A compression method, valued by its ZIP method code."""

    STORED = 0
    DEFLATE = 8
    BZ = 12
    LZMA = 14
    ZSTD = 93
    XZ = 95

    @classmethod
    def from_code(cls, value: int) -> Compression:
        """Return the method for a ZIP method code."""
        try:
            return cls(value)
        except ValueError:
            raise CompressionNotSupportedError(value) from None


class AttributeCompatibility(enum.IntEnum):
    """A host attribute compatibility, valued by its ZIP code."""

    UNIX = 3

    @classmethod
    def from_code(cls, value: int) -> AttributeCompatibility:
        """Return the compatibility for a ZIP host code."""
        try:
            return cls(value)
        except ValueError:
            raise AttributeCompatibilityNotSupportedError(value) from None


class DeflateKind(enum.Enum):
    NORMAL = "normal"
    MAXIMUM = "maximum"
    FAST = "fast"
    SUPER = "super"
    OTHER = "other"


@dataclass(frozen=True)
class DeflateOption:
    """The level data should be compressed with for deflate."""

    kind: DeflateKind
    level: int | None = None

    NORMAL: ClassVar[DeflateOption]
    MAXIMUM: ClassVar[DeflateOption]
    FAST: ClassVar[DeflateOption]
    SUPER: ClassVar[DeflateOption]

    def __post_init__(self) -> None:
        if self.kind is DeflateKind.OTHER:
            if self.level is None or not 0 <= self.level <= 0xFFFFFFFF:
                raise ValueError("an implementation-defined level must be a u32 value")
        elif self.level is not None:
            raise ValueError(f"{self.kind.value} option takes no explicit level")

    @classmethod
    def other(cls, level: int) -> DeflateOption:
        """An implementation-defined compression level."""
        return cls(DeflateKind.OTHER, level)

    def to_level(self) -> int | None:
        """The precise level to compress with, or None for the default."""
        return self.level if self.kind is DeflateKind.OTHER else None


DeflateOption.NORMAL = DeflateOption(DeflateKind.NORMAL)
DeflateOption.MAXIMUM = DeflateOption(DeflateKind.MAXIMUM)
DeflateOption.FAST = DeflateOption(DeflateKind.FAST)
DeflateOption.SUPER = DeflateOption(DeflateKind.SUPER)


class Decompressor(Protocol):
    def decompress(self, data: bytes) -> bytes: ...

    def flush(self) -> bytes: ...


class _Stored:
    def decompress(self, data: bytes) -> bytes:
        return bytes(data)

    def flush(self) -> bytes:
        return b""


class _Deflate:
    def __init__(self) -> None:
        self._inner = zlib.decompressobj(-zlib.MAX_WBITS)

    def decompress(self, data: bytes) -> bytes:
        return self._inner.decompress(data)

    def flush(self) -> bytes:
        return self._inner.flush()


class _Wrapped:
    """Adapts decompressor objects that have no flush of their own."""

    def __init__(self, inner) -> None:
        self._inner = inner

    def decompress(self, data: bytes) -> bytes:
        if not data or self._inner.eof:
            return b""
        return self._inner.decompress(data)

    def flush(self) -> bytes:
        return b""


class _Zstd:
    def __init__(self) -> None:
        self._inner = zstandard.ZstdDecompressor().decompressobj()

    def decompress(self, data: bytes) -> bytes:
        if not data:
            return b""
        return self._inner.decompress(data)

    def flush(self) -> bytes:
        return self._inner.flush()


def new_decompressor(compression: Compression) -> Decompressor:
    """Return a fresh streaming decompressor for the given method."""
    compression = Compression(compression)
    if compression is Compression.STORED:
        return _Stored()
    if compression is Compression.DEFLATE:
        return _Deflate()
    if compression is Compression.BZ:
        return _Wrapped(bz2.BZ2Decompressor())
    if compression is Compression.LZMA:
        return _Wrapped(lzma.LZMADecompressor(format=lzma.FORMAT_ALONE))
    if compression is Compression.XZ:
        return _Wrapped(lzma.LZMADecompressor(format=lzma.FORMAT_XZ))
    return _Zstd()