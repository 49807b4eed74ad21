# ziptide

ziptide reads ZIP archives. It locates the end of central directory record
(including ZIP64 archives), parses the central directory and hands back
readers that decompress entry data and check it against the stored CRC32.

Supported compression methods (`ziptide.compression.Compression`) are
`STORED`, `DEFLATE`, `BZ`, `LZMA`, `XZ` and `ZSTD`. Any other method code
raises `ziptide.errors.CompressionNotSupportedError`. Spanned or split
archives raise `ziptide.errors.FeatureNotSupportedError`.

## Installation

```
pip install ziptide
```

## Reading an archive held in memory

```python
from ziptide.reader import MemZipFileReader

with open("archive.zip", "rb") as fh:
    zip_reader = MemZipFileReader(fh.read())

for index, stored in enumerate(zip_reader.file.entries):
    if stored.entry.dir():
        continue
    data = zip_reader.entry(index).read_to_end_checked(stored.entry)
    print(stored.entry.filename, len(data))
```

`MemZipFileReader` keeps its own copy of the bytes (available as `.data`)
and gives every entry reader its own cursor, so several entry readers may be
open at once.

## Reading from a seekable file

```python
from ziptide.reader import SeekZipFileReader

with open("archive.zip", "rb") as fh:
    zip_reader = SeekZipFileReader(fh)
    first = zip_reader.file.entries[0].entry
    text = zip_reader.entry(0).read_to_string_checked(first)
```

Entry readers from a `SeekZipFileReader` share the underlying file (`.inner`),
so read one entry at a time. Both readers also offer `from_raw_parts` to reuse
a `ZipFile` that was already read from the same source.

An entry reader (`ziptide.entry_reader.ZipEntryReader`) has a file-like
`read(size)` as well as the checked helpers. If the computed CRC32 of the
decompressed data does not match the one in the archive,
`ziptide.errors.CRC32CheckError` is raised. Asking for an index past the end
of the directory raises `ziptide.errors.EntryIndexOutOfBoundsError`.

## Extracting to disk

`ziptide.extract.unzip_file(archive, out_dir)` extracts every entry of a
seekable archive into a directory and returns the paths it wrote. Each path in
the archive is cleaned by `sanitize_file_path` first: backslashes become
separators, and `.`/`..`, reserved names and illegal characters are removed
from every component, so entries cannot escape the target directory. Names
ending in `/` become directories. Existing files are never overwritten; a
clash raises `FileExistsError`.

The same thing is available from the command line:

```
ziptide-extract [archive] [out_dir]
```

Without arguments it extracts `example.zip` into the current directory.

## Lower-level pieces

- `ziptide.headers`: the fixed-layout headers and records, with `from_bytes`
  and `to_bytes`, plus `parse_extra_fields` for extra field blocks.
- `ziptide.records`: `locate_eocdr` and `CombinedCentralDirectoryRecord`.
- `ziptide.date.ZipDateTime`: MS-DOS date and time, convertible to and from
  `datetime`.

## What it does not do

- It only reads archives; there is no way to write or modify one.
- It needs a seekable source or the whole archive in memory; there is no
  reader for forward-only streams.
- Encrypted entries are not decrypted.

## Errors

Every error raised while parsing an archive derives from
`ziptide.errors.ZipError`, so a single `except ZipError` catches them all.
A source that ends in the middle of a header raises `EOFError`.