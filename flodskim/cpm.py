"""
CP/M filesystems (Digital Research) and the DEC Rainbow RX50 variant.

Directory entries are 32 bytes:

    +0x00  user number, 0xE5 if the entry is deleted
    +0x01  filename (8 bytes, space padded, high bits are attributes)
    +0x09  extension (3 bytes, high bits are attributes)
    +0x0C  extent number, low bits
    +0x0E  extent number, high bits
    +0x10  allocation block numbers (16 bytes, 0 = unused)
"""

from .constants import (
    CPM_BLOCKS_START,
    CPM_DELETED,
    CPM_DIR_BLOCKS,
    CPM_EXT,
    CPM_EXTENT_HIGH,
    CPM_EXTENT_LOW,
    CPM_MAX_DIR_ENTRIES,
    CPM_NAME,
    DEFAULT_SECTOR_SIZE,
    RX50_FIRST_TRACK,
    RX50_MAX_SECTOR,
    RX50_SKEW,
)
from .exceptions import OutOfBoundsError
from .filesystem import BaseFilesystem
from .logging_config import get_logger
from .models import DirectoryEntry, Geometry

log = get_logger(__name__)


class CpmFilesystem(BaseFilesystem):
    """CP/M directory on a linearly numbered disk."""

    code = "cpm"
    description = "CP/M (Digital Research)"

    max_dir_entries = CPM_MAX_DIR_ENTRIES
    dir_blocks = CPM_DIR_BLOCKS

    def fill_directory(self) -> None:
        first = self.dir_start_block
        self.directory = self.read_blocks(range(first, first + self.dir_blocks))
        self._reset_cursor()
        log.debug("%s: directory of %d bytes from block %d",
                  self.code, len(self.directory), first)

    def _decode_name(self, raw: bytes) -> str:
        # High bits carry the read-only / system attributes
        return self.translate(bytes(b & 0x7F for b in raw)).strip(' \x00')

    def parse_entry(self, record: bytes, include_deleted: bool) -> DirectoryEntry | None:
        if record[CPM_NAME.start] == CPM_DELETED:
            return None  # formatted but never used
        deleted = record[0] == CPM_DELETED
        if deleted and not include_deleted:
            return None

        name = self._decode_name(record[CPM_NAME])
        if not name:
            return None

        blocks = []
        for block in record[CPM_BLOCKS_START:self.dir_entry_size]:
            if block == 0:
                break
            blocks.append(block)

        return DirectoryEntry(
            base_file_name=name,
            extension=self._decode_name(record[CPM_EXT]),
            extent_number=record[CPM_EXTENT_LOW] | (record[CPM_EXTENT_HIGH] << 5),
            deleted=deleted,
            file_size=len(blocks) * self.block_size,
            blocks=tuple(blocks),
        )


class DecRx50Filesystem(CpmFilesystem):
    """
    DEC CP/M on RX50 floppies (Rainbow 100), SS DD 80 tracks.

    Logical sectors start at physical track 2 and are interleaved by a
    rotating skew table of 10 entries; blocks 0 and 1 hold the directory.
    """

    code = "dec-rx50"
    description = "DEC CP/M RX50 (Rainbow 100)"

    def disk_geometry(self) -> Geometry:
        return Geometry(
            max_head=0,
            max_sector=RX50_MAX_SECTOR,
            sector_size=DEFAULT_SECTOR_SIZE,
            block_size=4 * DEFAULT_SECTOR_SIZE,
        )

    @property
    def block_count(self) -> int:
        g = self.geometry
        usable_tracks = g.cylinders - RX50_FIRST_TRACK
        return usable_tracks * g.sectors_per_track * g.heads // g.sectors_per_block

    def sector_offset(self, logical_sector: int) -> int:
        """Container offset of a logical sector (0 = first sector of track 2)."""
        g = self.geometry
        per_track = g.sectors_per_track
        track = RX50_FIRST_TRACK + logical_sector // per_track
        physical = RX50_SKEW[logical_sector % len(RX50_SKEW)]
        return track * g.track_size + (physical - g.min_sector) * g.sector_size

    def get_block(self, block_no: int) -> bytes:
        if block_no < 0:
            raise OutOfBoundsError(f"Negative block number {block_no}")
        g = self.geometry
        count = g.sectors_per_block
        first = block_no * count
        return b''.join(
            self.container.slice(self.sector_offset(sector), g.sector_size)
            for sector in range(first, first + count)
        )
