"""
Raw disk image container.

The whole image is held in memory. Reads go either through positional
helpers or through a ContainerCursor, which carries its own position so
that independent readers never disturb each other.
"""

import os
import struct
from typing import BinaryIO

from .constants import DUMP_LINE_LEN, DUMP_PAGE_LEN
from .exceptions import ImageReadError, OutOfBoundsError, TruncatedError
from .logging_config import get_logger

log = get_logger(__name__)


def hex_dump(data: bytes, offset: int = 0, length: int | None = None) -> list[str]:
    """
    Render part of a byte buffer as hexadecimal and ASCII lines.

    Sixteen bytes are shown per line. Zero bytes are left blank in the hex
    part and non-printable bytes appear as dots in the ASCII part. A blank
    line separates every 0x100 byte page.

    Args:
        data: Buffer to display
        offset: Position of the first byte, ideally a multiple of 0x10
        length: Number of bytes (defaults to the rest of the buffer)

    Returns:
        List of output lines
    """
    if length is None:
        length = len(data) - offset
    last = min(offset + length, len(data))

    lines = []
    pos = offset
    while pos < last:
        if pos != offset and pos % DUMP_PAGE_LEN == 0:
            lines.append("")
        chunk = data[pos:min(pos + DUMP_LINE_LEN, last)]
        hex_part = ''.join(f" {b:2x}" if b else "   " for b in chunk)
        hex_part = hex_part.ljust(3 * DUMP_LINE_LEN)
        ascii_part = ''.join(chr(b) if 0x20 <= b <= 0x7E else '.' for b in chunk)
        lines.append(f"{pos:6x}:{hex_part}  {ascii_part}")
        pos += DUMP_LINE_LEN
    return lines


class RawContainer:
    """Unstructured image: the file bytes are the disk bytes."""

    code = "raw"
    description = "Raw container file"

    def __init__(self, data: bytes = b""):
        self._data = bytes(data)
        # Geometry discovered while loading (DSK); None or 0 when unknown
        self.max_cylinder: int | None = None
        self.max_head = 0
        self.max_sector = 0
        self.sector_size = 0
        self.descriptor = ""

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @staticmethod
    def read_source(source: str | os.PathLike | BinaryIO) -> bytes:
        """Read every byte of a path or binary stream."""
        if hasattr(source, 'read'):
            try:
                data = source.read()
            except OSError as e:
                raise ImageReadError(f"Cannot read image stream: {e}") from e
            if not isinstance(data, (bytes, bytearray)):
                raise ImageReadError("Image stream is not opened in binary mode")
            return bytes(data)

        try:
            expected = os.path.getsize(source)
            with open(source, 'rb') as f:
                data = f.read()
        except FileNotFoundError as e:
            raise ImageReadError(f"Disk image not found: {source}") from e
        except PermissionError as e:
            raise ImageReadError(f"Permission denied: {source}") from e
        except OSError as e:
            raise ImageReadError(f"Cannot read disk image {source}: {e}") from e

        if len(data) < expected:
            raise TruncatedError(
                f"Read {len(data)} of {expected} bytes from {source}")
        return data

    def load(self, source: str | os.PathLike | BinaryIO) -> 'RawContainer':
        """Fill the container from a path or stream. Returns self."""
        self._data = self.decode(self.read_source(source))
        log.debug("%s: loaded %d bytes", self.code, len(self._data))
        return self

    def decode(self, raw: bytes) -> bytes:
        """Turn the file bytes into disk bytes. Identity for raw images."""
        return raw

    @classmethod
    def from_file(cls, source, **kwargs) -> 'RawContainer':
        return cls(**kwargs).load(source)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._data)

    @property
    def size(self) -> int:
        return len(self._data)

    def _check(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > len(self._data):
            raise OutOfBoundsError(
                f"Read of {length} bytes at 0x{offset:x} exceeds "
                f"container size 0x{len(self._data):x}")

    def slice(self, offset: int, length: int) -> bytes:
        """Copy of length bytes starting at offset."""
        self._check(offset, length)
        return self._data[offset:offset + length]

    def byte_at(self, offset: int) -> int:
        self._check(offset, 1)
        return self._data[offset]

    def lsb16_at(self, offset: int) -> int:
        self._check(offset, 2)
        return struct.unpack_from('<H', self._data, offset)[0]

    def msb16_at(self, offset: int) -> int:
        self._check(offset, 2)
        return struct.unpack_from('>H', self._data, offset)[0]

    def ascii_at(self, offset: int, length: int) -> str:
        """ASCII text of a fixed-length field, cut at the first null byte."""
        return decode_ascii(self.slice(offset, length))

    def cursor(self, offset: int = 0) -> 'ContainerCursor':
        return ContainerCursor(self, offset)

    def dump(self, offset: int = 0, length: int | None = None) -> list[str]:
        """Hex dump of a region of the container."""
        if length is None:
            length = len(self._data) - offset
        self._check(offset, length)
        return hex_dump(self._data, offset, length)


def decode_ascii(data: bytes) -> str:
    """Decode a byte field as ASCII, discarding everything from the first NUL."""
    end = data.find(b'\x00')
    if end >= 0:
        data = data[:end]
    return data.decode('ascii', errors='replace')


class ContainerCursor:
    """Sequential typed reads over a container."""

    def __init__(self, container: RawContainer, offset: int = 0):
        self.container = container
        self.position = offset

    def seek(self, offset: int) -> int:
        """Move to offset and return the previous position."""
        previous = self.position
        self.position = offset
        return previous

    def read_byte(self) -> int:
        value = self.container.byte_at(self.position)
        self.position += 1
        return value

    def read_lsb16(self) -> int:
        value = self.container.lsb16_at(self.position)
        self.position += 2
        return value

    def read_msb16(self) -> int:
        value = self.container.msb16_at(self.position)
        self.position += 2
        return value

    def read_bytes(self, length: int) -> bytes:
        value = self.container.slice(self.position, length)
        self.position += length
        return value

    def read_ascii(self, length: int) -> str:
        value = self.container.ascii_at(self.position, length)
        self.position += length
        return value
