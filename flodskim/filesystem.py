"""
Base class for filesystem views on a disk image container.

A view knows the disk geometry, maps logical block numbers to container
offsets, and walks the directory. Subclasses override the pieces that
differ per format: geometry, block mapping, directory region and entry
layout.
"""

from typing import Iterator

from .constants import DIR_ENTRY_SIZE
from .container import RawContainer, hex_dump
from .exceptions import OutOfBoundsError
from .logging_config import get_logger
from .models import DirectoryCursor, DirectoryEntry, Geometry, WalkState

log = get_logger(__name__)


class BaseFilesystem:
    """Unstructured view: block n lives at n * block_size, no directory."""

    code = "base"
    description = "undefined filesystem"

    dir_entry_size = DIR_ENTRY_SIZE
    dir_start_block = 0
    max_dir_entries = 0

    def __init__(self, container: RawContainer):
        self.container = container
        self._geometry: Geometry | None = None
        self.char_table: tuple[str, ...] = ()
        self.directory = b""
        self.cursor = DirectoryCursor(state=WalkState.EXHAUSTED)

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    def initialize(self) -> 'BaseFilesystem':
        """Fix the geometry and build the character table. Idempotent."""
        if self._geometry is not None:
            return self

        geometry = self.disk_geometry()
        if self.container.max_cylinder is not None:
            narrowed = geometry.narrowed(self.container.max_cylinder)
            if narrowed is not geometry:
                log.info("%s: geometry limited to cylinder %d by container",
                         self.code, narrowed.max_cylinder)
            geometry = narrowed
        self._geometry = geometry
        self.char_table = tuple(self.build_char_table())
        return self

    def disk_geometry(self) -> Geometry:
        """Geometry of the format; overridden per variant."""
        return Geometry()

    def build_char_table(self) -> list[str]:
        """Map of the 256 byte values to display characters."""
        return [chr(i) for i in range(256)]

    @property
    def geometry(self) -> Geometry:
        if self._geometry is None:
            self.initialize()
        return self._geometry

    @property
    def block_size(self) -> int:
        return self.geometry.block_size

    @property
    def block_count(self) -> int:
        return self.geometry.block_count

    def translate(self, data: bytes) -> str:
        """Render raw filename bytes with the character table."""
        if not self.char_table:
            self.initialize()
        return ''.join(self.char_table[b] for b in data)

    # -------------------------------------------------------------------------
    # Block access
    # -------------------------------------------------------------------------

    def get_block(self, block_no: int) -> bytes:
        """Read one logical block."""
        if block_no < 0:
            raise OutOfBoundsError(f"Negative block number {block_no}")
        size = self.block_size
        return self.container.slice(block_no * size, size)

    def read_blocks(self, block_numbers) -> bytes:
        return b''.join(self.get_block(n) for n in block_numbers)

    def dump_block(self, block_no: int) -> list[str]:
        block = self.get_block(block_no)
        return hex_dump(block, 0, len(block))

    # -------------------------------------------------------------------------
    # Directory walk
    # -------------------------------------------------------------------------

    def fill_directory(self) -> None:
        """Load the directory region and restart the walk."""
        self.directory = b""
        self.cursor = DirectoryCursor(state=WalkState.EXHAUSTED)

    def _reset_cursor(self, offset: int = 0) -> None:
        self.cursor = DirectoryCursor(offset=offset)

    @property
    def directory_end(self) -> int:
        """Offset in the directory buffer behind the last entry slot."""
        limit = len(self.directory)
        if self.max_dir_entries:
            limit = min(limit, self.max_dir_entries * self.dir_entry_size)
        return limit

    def is_end_of_directory(self, record: bytes) -> bool:
        """Whether a record terminates the directory before its end."""
        return False

    def parse_entry(self, record: bytes, include_deleted: bool) -> DirectoryEntry | None:
        """Entry for a raw record, or None if the record is to be skipped."""
        return None

    def next_directory_entry(self, include_deleted: bool = False) -> DirectoryEntry | None:
        """
        Return the next usable directory entry, or None when exhausted.

        Deleted entries are skipped unless include_deleted is set.
        """
        cursor = self.cursor
        size = self.dir_entry_size
        while not cursor.exhausted:
            if cursor.offset + size > self.directory_end:
                cursor.finish()
                break
            record = self.directory[cursor.offset:cursor.offset + size]
            if self.is_end_of_directory(record):
                cursor.finish()
                break
            cursor.advance(size)
            entry = self.parse_entry(record, include_deleted)
            if entry is not None:
                cursor.found()
                return entry
        return None

    def entries(self, include_deleted: bool = False) -> Iterator[DirectoryEntry]:
        """Fill the directory and yield every entry in directory order."""
        self.fill_directory()
        while (entry := self.next_directory_entry(include_deleted)) is not None:
            yield entry

    def list_files(self, include_deleted: bool = False) -> list[DirectoryEntry]:
        return list(self.entries(include_deleted))

    def info(self) -> dict:
        """Summary of the view for the info command."""
        g = self.geometry
        return {
            "system": self.code,
            "description": self.description,
            "cylinders": f"{g.min_cylinder}-{g.max_cylinder}",
            "heads": f"{g.min_head}-{g.max_head}",
            "sectors": f"{g.min_sector}-{g.max_sector}",
            "sector_size": g.sector_size,
            "block_size": g.block_size,
            "blocks": self.block_count,
        }
