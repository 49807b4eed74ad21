"""Read ZIP archives from seekable sources or in-memory bytes."""

__version__ = "0.1.0"

__all__ = [
    "compression",
    "constants",
    "date",
    "entry",
    "entry_reader",
    "errors",
    "extract",
    "headers",
    "reader",
    "records",
]