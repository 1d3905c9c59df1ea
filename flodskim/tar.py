"""
Unix tar archives written directly onto floppies, and the Sinix MX-2
variant which starts the archive at a fixed block.

There is no separate directory: every file is a 512 byte header record
followed by its content records. The walk reads headers straight from
the container and jumps over the content.
"""

from .constants import (
    SINIX_DIR_START_BLOCK,
    SINIX_MAX_SECTOR,
    SINIX_SECTOR_SIZE,
    TAR_LINK_TYPES,
    TAR_LINKNAME,
    TAR_MAGIC,
    TAR_NAME,
    TAR_PREFIX,
    TAR_RECORD_SIZE,
    TAR_SIZE,
    TAR_TYPE_DIRECTORY,
    TAR_TYPEFLAG,
)
from .container import decode_ascii
from .filesystem import BaseFilesystem
from .logging_config import get_logger
from .models import DirectoryEntry, Geometry

log = get_logger(__name__)


def parse_tar_size(field: bytes) -> int:
    """
    Decode the size field of a tar header.

    Plain headers hold octal digits; GNU tar marks larger values with the
    high bit of the first byte and stores them base-256. A leading 0xFF
    is a negative base-256 number, which no file size can be.

    Raises ValueError for anything else.
    """
    if field and field[0] == 0xFF:
        raise ValueError("negative size")
    if field and field[0] & 0x80:
        return int.from_bytes(bytes([field[0] & 0x7F]) + field[1:], 'big')
    text = decode_ascii(field).strip(' \x00')
    if not text:
        return 0
    return int(text, 8)


class TarFilesystem(BaseFilesystem):
    """Unix tar archive."""

    code = "tar"
    description = "Unix tar archive"

    dir_entry_size = TAR_RECORD_SIZE

    def disk_geometry(self) -> Geometry:
        return Geometry(block_size=TAR_RECORD_SIZE, independent_blocks=True)

    def fill_directory(self) -> None:
        # Headers are read from the container itself
        self.directory = b""
        self._reset_cursor(self.dir_start_block * self.block_size)

    def next_directory_entry(self, include_deleted: bool = False) -> DirectoryEntry | None:
        cursor = self.cursor
        if cursor.exhausted:
            return None

        offset = cursor.offset
        if offset + TAR_RECORD_SIZE > self.container.size:
            cursor.finish()
            return None
        header = self.container.slice(offset, TAR_RECORD_SIZE)

        name = decode_ascii(header[TAR_NAME[0]:TAR_NAME[0] + TAR_NAME[1]]).strip()
        if not name:
            cursor.finish()
            return None

        size_field = header[TAR_SIZE[0]:TAR_SIZE[0] + TAR_SIZE[1]]
        try:
            size = parse_tar_size(size_field)
        except ValueError:
            log.error("%s: bad size field %r for '%s' at 0x%x",
                      self.code, size_field, name, offset)
            cursor.finish()
            return None

        if decode_ascii(header[TAR_MAGIC[0]:TAR_MAGIC[0] + TAR_MAGIC[1]]) == "ustar":
            prefix = decode_ascii(header[TAR_PREFIX[0]:TAR_PREFIX[0] + TAR_PREFIX[1]]).strip()
            if prefix:
                name = f"{prefix}/{name}"

        typeflag = chr(header[TAR_TYPEFLAG]) if header[TAR_TYPEFLAG] else "0"
        link_name = ""
        if typeflag in TAR_LINK_TYPES:
            link_name = decode_ascii(header[TAR_LINKNAME[0]:TAR_LINKNAME[0] + TAR_LINKNAME[1]])
            size = 0

        available = self.container.size - offset - TAR_RECORD_SIZE
        truncated = size > available
        if truncated:
            # Only whole records can be read back
            log.warning("%s: '%s' declares %d bytes, only %d left in the image; truncated",
                        self.code, name, size, available)
            size = available // TAR_RECORD_SIZE * TAR_RECORD_SIZE

        record_count = (size + TAR_RECORD_SIZE - 1) // TAR_RECORD_SIZE
        first = offset // TAR_RECORD_SIZE + 1
        cursor.advance((1 + record_count) * TAR_RECORD_SIZE)
        cursor.found()
        if truncated:
            cursor.finish()

        return DirectoryEntry(
            base_file_name=name,
            file_size=size,
            blocks=tuple(range(first, first + record_count)),
            is_directory=typeflag == TAR_TYPE_DIRECTORY or name.endswith('/'),
            link_name=link_name,
        )


class SinixMx2Filesystem(TarFilesystem):
    """Sinix tar archive on MX-2 floppies, DS DD 80 tracks."""

    code = "sinix-mx2"
    description = "Sinix tar MX-2"

    dir_start_block = SINIX_DIR_START_BLOCK

    def disk_geometry(self) -> Geometry:
        return Geometry(
            max_sector=SINIX_MAX_SECTOR,
            sector_size=SINIX_SECTOR_SIZE,
            block_size=TAR_RECORD_SIZE,
            independent_blocks=True,
        )
