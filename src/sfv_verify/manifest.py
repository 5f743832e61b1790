"""SFV manifest parsing and serialization.

An SFV manifest holds one `<filename> <crc32 hex>` entry per line. File names
may contain spaces, so the checksum is whatever follows the last space.

Parsing is permissive: each line is classified as parsed or skipped, and
skipped lines never fail the whole manifest. Only failing to read the file
at all is reported, as ManifestReadError.
"""

import logging
import os
import re
import string
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

from .checksums import CRC32_MASK, format_crc32
from .errors import ManifestReadError, ManifestWriteError
from .models import ManifestEntry, VerificationResult

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"

_HEX_DIGITS = frozenset(string.hexdigits)

_BOM = "\ufeff"

# CRLF, LF, CR, VT, FF, NEL and the Unicode line/paragraph separators.
# str.splitlines() would also split on the \x1c-\x1e information separators.
_LINE_BREAK = re.compile("\r\n|[\n\r\x0b\x0c\x85\u2028\u2029]")

# Skip reasons reported by classify_line
SKIP_EMPTY = "empty"
SKIP_NO_SEPARATOR = "no_separator"
SKIP_BAD_CHECKSUM = "bad_checksum"


@dataclass(frozen=True)
class ParsedLine:
    """A manifest line that yielded an entry."""
    entry: ManifestEntry


@dataclass(frozen=True)
class SkippedLine:
    """A manifest line that was ignored, with the reason why."""
    line: str
    reason: str


LineResult = Union[ParsedLine, SkippedLine]
SerializableEntry = Union[VerificationResult, ManifestEntry, Tuple[str, int]]


def _parse_hex_token(token: str) -> int | None:
    """Parse a bare hexadecimal uint32 token, returning None when invalid.

    int(token, 16) alone would also accept "0x", signs, underscores and
    surrounding whitespace, none of which are valid in an SFV checksum.
    """
    if not token or not all(c in _HEX_DIGITS for c in token):
        return None
    value = int(token, 16)
    if value > CRC32_MASK:
        return None
    return value


def classify_line(line: str) -> LineResult:
    """Classify a single manifest line.

    Args:
        line: One line of manifest text, without its line terminator

    Returns:
        ParsedLine with the entry, or SkippedLine with the skip reason
    """
    if not line:
        return SkippedLine(line=line, reason=SKIP_EMPTY)

    separator = line.rfind(' ')
    if separator == -1:
        return SkippedLine(line=line, reason=SKIP_NO_SEPARATOR)

    filename = line[:separator]
    crc = _parse_hex_token(line[separator + 1:])
    if crc is None:
        return SkippedLine(line=line, reason=SKIP_BAD_CHECKSUM)

    return ParsedLine(entry=ManifestEntry(filename=filename, expected_crc32=crc))


def iter_entries(content: str) -> Iterable[LineResult]:
    """Classify every line of manifest text in order.

    A leading byte-order mark, as written by many Windows SFV tools, is not
    part of the first filename.
    """
    if content.startswith(_BOM):
        content = content[len(_BOM):]
    for line in _LINE_BREAK.split(content):
        yield classify_line(line)


def parse_manifest(content: str) -> Dict[str, int]:
    """Parse manifest text into a filename -> expected CRC32 mapping.

    Lines without a space or with an invalid checksum token are skipped.
    When a filename appears more than once the last entry wins.

    Args:
        content: Full manifest text

    Returns:
        Mapping from filename to expected CRC32
    """
    manifest: Dict[str, int] = {}
    skipped = 0

    for result in iter_entries(content):
        if isinstance(result, SkippedLine):
            if result.reason != SKIP_EMPTY:
                skipped += 1
                logger.debug(f"Skipping manifest line: {{'line': {result.line!r}, 'reason': {result.reason!r}}}")
            continue
        manifest[result.entry.filename] = result.entry.expected_crc32

    if skipped:
        logger.debug(f"Parsed manifest: {{'entries': {len(manifest)}, 'skipped': {skipped}}}")

    return manifest


def load_manifest(path: Path, encoding: str = DEFAULT_ENCODING) -> Dict[str, int]:
    """Read and parse an SFV file.

    Args:
        path: Path to the .sfv file
        encoding: Text encoding of the file

    Returns:
        Mapping from filename to expected CRC32 (empty for an empty manifest)

    Raises:
        ManifestReadError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        content = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(
            f"Cannot read manifest {path}: {e}",
            path=str(path),
            encoding=encoding,
        ) from e

    manifest = parse_manifest(content)
    logger.info(f"Loaded manifest: {{'path': {str(path)!r}, 'entries': {len(manifest)}}}")
    return manifest


def _entry_fields(entry: SerializableEntry) -> Tuple[str, int]:
    if isinstance(entry, VerificationResult):
        return entry.filename, entry.computed_crc32
    if isinstance(entry, ManifestEntry):
        return entry.filename, entry.expected_crc32
    filename, crc = entry
    return filename, crc


def serialize_manifest(entries: Iterable[SerializableEntry]) -> str:
    """Render entries as SFV text.

    Each entry becomes `<filename> <CRC32>` with the checksum as 8 uppercase
    hex digits. Lines are joined with "\\n" in input order, without a
    trailing newline.

    Args:
        entries: VerificationResult, ManifestEntry or (filename, crc) items

    Returns:
        Manifest text
    """
    lines: List[str] = []
    for entry in entries:
        filename, crc = _entry_fields(entry)
        lines.append(f"{filename} {format_crc32(crc)}")
    return "\n".join(lines)


def save_manifest(
    path: Path,
    entries: Iterable[SerializableEntry],
    encoding: str = DEFAULT_ENCODING,
) -> Path:
    """Serialize entries and write them to path atomically.

    The text is written to a temporary file in the destination directory
    and moved over the destination, so readers never see a partial file.

    Args:
        path: Destination .sfv path
        entries: Entries to write, in output order
        encoding: Text encoding of the file

    Returns:
        The destination path

    Raises:
        ManifestWriteError: If the file cannot be written
    """
    path = Path(path)
    content = serialize_manifest(entries)
    tmp_name = None

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.",
            suffix=".tmp",
            dir=path.parent,
        )
        with os.fdopen(fd, 'w', encoding=encoding, newline='') as f:
            f.write(content)
        os.replace(tmp_name, path)
        tmp_name = None
    except (OSError, UnicodeEncodeError) as e:
        raise ManifestWriteError(
            f"Cannot write manifest {path}: {e}",
            path=str(path),
            encoding=encoding,
        ) from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug(f"Could not remove temporary manifest file: {tmp_name}")

    logger.info(f"Saved manifest: {{'path': {str(path)!r}, 'bytes': {len(content.encode(encoding))}}}")
    return path
