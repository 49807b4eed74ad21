"""Safe extraction of every entry in a ZIP archive to a directory."""

from __future__ import annotations

import argparse
import re
import shutil
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

from ziptide.reader import SeekZipFileReader

_ILLEGAL = re.compile(r'[/?<>\\:*|"]')
_CONTROL = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED = re.compile(r"^\.+$")
_WINDOWS_RESERVED = re.compile(
    r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE
)
_WINDOWS_TRAILING = re.compile(r"[. ]+$")
_MAX_COMPONENT_BYTES = 255


def _sanitize_component(name: str) -> str:
    name = _ILLEGAL.sub("", name)
    name = _CONTROL.sub("", name)
    name = _RESERVED.sub("", name)
    name = _WINDOWS_RESERVED.sub("", name)
    name = _WINDOWS_TRAILING.sub("", name)
    while len(name.encode("utf-8")) > _MAX_COMPONENT_BYTES:
        name = name[:-1]
    return name


def sanitize_file_path(path: str) -> Path:
    """A relative path without reserved names, redundant separators, '.' or '..'."""
    components = (_sanitize_component(part) for part in path.replace("\\", "/").split("/"))
    return Path(*(part for part in components if part))


def unzip_file(archive: BinaryIO, out_dir: Path) -> list[Path]:
    """Extract every entry of a seekable archive into out_dir.

    Entries whose names end with '/' become directories. Existing files are
    never overwritten. Returns the paths written, in archive order.
    """
    out_dir = Path(out_dir)
    reader = SeekZipFileReader(archive)
    written: list[Path] = []
    for index, stored in enumerate(reader.file.entries):
        entry = stored.entry
        path = out_dir / sanitize_file_path(entry.filename)
        entry_reader = reader.entry(index)

        if entry.dir():
            # The directory may already exist if entries come out of order.
            path.mkdir(parents=True, exist_ok=True)
        else:
            # Parents may be missing when the archive has no directory entries.
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("xb") as target:
                shutil.copyfileobj(entry_reader, target)
        written.append(path)
    return written


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Extract an archive (default example.zip) into a directory (default the cwd)."""
    parser = argparse.ArgumentParser(
        prog="ziptide-extract", description="Safely extract everything from a ZIP file."
    )
    parser.add_argument("archive", nargs="?", default="example.zip")
    parser.add_argument("out_dir", nargs="?", default=None)
    args = parser.parse_args(argv)

    out_dir = Path(args.out_dir) if args.out_dir else Path.cwd()
    with open(args.archive, "rb") as archive:
        unzip_file(archive, out_dir)
    return 0