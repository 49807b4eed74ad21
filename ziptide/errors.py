"""Exceptions raised while reading ZIP archives."""

from __future__ import annotations


class ZipError(Exception):
    """Base class for every error raised by this package."""

    default_message = "ZIP error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class FeatureNotSupportedError(ZipError):
    """The archive uses a feature that is not supported."""

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"feature not currently supported: {feature}")


class CompressionNotSupportedError(ZipError):
    """The compression method code is not supported."""

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"compression not supported: {code}")


class AttributeCompatibilityNotSupportedError(ZipError):
    """The host attribute compatibility code is not supported."""

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"host attribute compatibility not supported: {code}")


class UnexpectedHeaderError(ZipError):
    """A header signature did not match the expected one."""

    def __init__(self, actual: int, expected: int) -> None:
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"unexpected header signature: {actual:#010x} (expected {expected:#010x})"
        )


class EntryIndexOutOfBoundsError(ZipError):
    """The requested entry index does not exist."""

    default_message = "entry index was out of bounds"


class EOFNotReachedError(ZipError):
    """An entry was finished before all of its data had been read."""

    default_message = "attempted to finish an entry before reaching end of its data"


class CRC32CheckError(ZipError):
    """The computed CRC32 of entry data did not match the stored value."""

    default_message = "computed CRC32 value did not match the expected value"


class UnableToLocateEOCDRError(ZipError):
    """No end of central directory record could be found."""

    default_message = "unable to locate the end of central directory record"


class Zip64ExtendedFieldIncompleteError(ZipError):
    """A Zip64 extended information field was too short."""

    default_message = "Zip64 extended information field was incomplete"


class InvalidExtraFieldHeaderError(ZipError):
    """An extra field declared more data than is available."""

    def __init__(self, field_size: int, remaining: int) -> None:
        self.field_size = field_size
        self.remaining = remaining
        super().__init__(
            f"extra field size {field_size} exceeds the remaining data ({remaining})"
        )


class TargetZip64NotSupportedError(ZipError):
    """The archive needs Zip64 support that this platform cannot provide."""

    default_message = "the target archive requires Zip64 support that is unavailable"