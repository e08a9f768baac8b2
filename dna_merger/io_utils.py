"""I/O utilities for reading vendor downloads and writing results.

Vendor raw data arrives as plain text, gzip (detected by magic bytes) or a
zip archive holding a single .txt/.csv export. Results are written
atomically so an interrupted run never leaves a partial file behind.

Example:
    content = read_text(Path("AncestryDNA.zip"))
    write_text_atomic(Path("out/merged.csv"), text)
"""

import gzip
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

# Gzip magic bytes (first two bytes of gzip file)
GZIP_MAGIC = b"\x1f\x8b"

# Zip local file header signature
ZIP_MAGIC = b"PK\x03\x04"

# Archive members considered raw data exports
RAW_DATA_SUFFIXES = (".txt", ".csv", ".tsv")

# utf-8-sig strips the byte order mark some vendors prepend
ENCODING = "utf-8-sig"


def _read_magic(filepath: Path, size: int) -> bytes:
    try:
        with open(filepath, "rb") as f:
            return f.read(size)
    except OSError:
        return b""


def is_gzipped(filepath: Path) -> bool:
    """Detect if a file is gzip-compressed.

    Checks magic bytes first, falls back to the extension if the file is
    too small or unreadable.

    Example:
        >>> is_gzipped(Path("genome.txt.gz"))
        True
        >>> is_gzipped(Path("genome.txt"))
        False
    """
    magic = _read_magic(filepath, 2)
    if len(magic) >= 2:
        return magic == GZIP_MAGIC
    return filepath.suffix == ".gz"


def is_zipped(filepath: Path) -> bool:
    """Detect if a file is a zip archive (magic bytes)."""
    return _read_magic(filepath, 4) == ZIP_MAGIC


@contextmanager
def smart_open(filepath: Path) -> Iterator[IO[str]]:
    """Open a raw data file as text with automatic gzip detection.

    Args:
        filepath: Path to file (may be .gz or uncompressed)

    Yields:
        Text file handle
    """
    if is_gzipped(filepath):
        f = gzip.open(filepath, "rt", encoding=ENCODING)
    else:
        f = open(filepath, "r", encoding=ENCODING)

    try:
        yield f
    finally:
        f.close()


def read_text(filepath: Path) -> str:
    """Read the full text of a raw data file.

    Zip archives are read from their first member ending in .txt, .csv or
    .tsv (vendor downloads ship zipped); gzip files are decompressed.

    Args:
        filepath: Path to the download

    Returns:
        Decoded file content

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If a zip archive holds no raw data member
    """
    if not filepath.exists():
        raise FileNotFoundError(f"Input file not found: {filepath}")

    if is_zipped(filepath):
        with zipfile.ZipFile(filepath) as archive:
            for name in archive.namelist():
                if name.lower().endswith(RAW_DATA_SUFFIXES):
                    return archive.read(name).decode(ENCODING)
        raise ValueError(
            f"No raw data file (.txt, .csv, .tsv) found in archive: {filepath}"
        )

    with smart_open(filepath) as f:
        return f.read()


def write_text_atomic(output_path: Path, text: str) -> Path:
    """Write text to a file atomically.

    Writes to a temporary file in the target directory, then renames it
    over the destination.

    Args:
        output_path: Destination path
        text: Content to write

    Returns:
        output_path
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        newline="",
        dir=output_path.parent,
        suffix=".tmp",
        delete=False,
    ) as tmp:
        tmp.write(text)
        tmp_path = Path(tmp.name)

    # Atomic rename
    tmp_path.replace(output_path)
    return output_path
