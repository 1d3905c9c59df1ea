"""
Filesystem of the Triumph-Adler VS20 and BSM100 word processing systems.

The first two directory blocks hold a file allocation table and the
directory proper. Block numbers on the disk are always even and must be
halved to address a 4 KB block.

Directory entries are 32 bytes, starting at offset 0x400:

    +0x00  filename (16 bytes in the TA VS character set)
    +0x10  record type: "A" text, "I", "C" database, "Z" on BSM100
    +0x11  starting block (LSB2)
    +0x13  0 for a deleted file
    +0x14  3 unknown bytes

For each block the table holds a value which is either even (the next
block of the file) or odd (the file ends in this block with
(value - 1) / 2 bytes).
"""

import re
import struct
from typing import NamedTuple

from .constants import (
    TAVS_BLOCK_SIZE,
    TAVS_CHAIN_LIMIT,
    TAVS_DELETED_CHAIN,
    TAVS_DIR_BLOCKS,
    TAVS_DIR_OFFSET,
    TAVS_FAT_END,
    TAVS_FAT_SIGNATURE,
    TAVS_LIVE_FLAG,
    TAVS_MAX_SECTOR,
    TAVS_MIN_SECTOR,
    TAVS_NAME_LEN,
    TAVS_SAFE_NAME,
    TAVS_START_BLOCK,
    TAVS_TYPE,
)
from .exceptions import OutOfBoundsError, SignatureNotFoundError
from .filesystem import BaseFilesystem
from .logging_config import get_logger
from .models import DirectoryEntry, Geometry

log = get_logger(__name__)

SECTOR = 0x200


class SignatureCheck(NamedTuple):
    """One known placement of the allocation table."""
    name: str
    offsets: tuple[int, ...]   # where the signature must be present
    fat_offset: int            # table start after any fix-up
    swap_sectors: bool = False  # exchange directory sectors 1 and 2 first

    def matches(self, directory: bytes) -> bool:
        return all(
            directory[offset:offset + len(TAVS_FAT_SIGNATURE)] == TAVS_FAT_SIGNATURE
            for offset in self.offsets
        )


# Tried in order; firmware revisions differ in sector order
SIGNATURE_CHECKS = (
    SignatureCheck("standard", (0x202, 0x01E), 0x202),
    SignatureCheck("swapped", (0x402, 0x01E), 0x202, swap_sectors=True),
    SignatureCheck("legacy", (0x002,), 0x002),
)

# Deviations from Latin-1 for names written on VS20 and BSM100
TAVS_CHARACTERS = {
    0x80: 'Ä', 0x81: 'Ö', 0x82: 'Ü', 0x85: '-', 0x90: "'", 0x92: '°',
    0x93: '§', 0x94: 'ß', 0x96: '²', 0x97: 'µ', 0x98: '£', 0x9A: 'á',
    0x9B: 'à', 0x9D: 'é', 0x9E: 'è', 0xA0: 'ä', 0xA1: 'ö', 0xA2: 'ü',
    0xA3: 'Ý', 0xA9: 'ç', 0xBF: '½', 0xC1: '¼', 0xC8: '@',
    # BSM100
    0x01: 'Ü', 0x03: 'Ä', 0x04: 'ß', 0x12: 'ä', 0x13: 'ö', 0x14: 'ü',
    0x7E: '§',
}


def sanitize_name(name: str) -> str:
    """Replace characters that are unsafe in output filenames by '_'."""
    return re.sub(TAVS_SAFE_NAME, '_', name)


class TaVsFilesystem(BaseFilesystem):
    """Triumph-Adler VS20 / BSM100 floppy."""

    code = "ta-vs"
    description = "TA VS20, BSM100"

    def __init__(self, container):
        super().__init__(container)
        self.fat_offset = 0
        self.layout = ""

    def disk_geometry(self) -> Geometry:
        return Geometry(
            min_sector=TAVS_MIN_SECTOR,
            max_sector=TAVS_MAX_SECTOR,
            block_size=TAVS_BLOCK_SIZE,
        )

    def build_char_table(self) -> list[str]:
        table = super().build_char_table()
        for code, char in TAVS_CHARACTERS.items():
            table[code] = char
        return table

    def get_block(self, block_no: int) -> bytes:
        """Read a block given its on-disk (doubled) number."""
        return super().get_block(block_no // 2)

    @property
    def block_count(self) -> int:
        # Block numbers as they appear on the disk
        return 2 * super().block_count

    # -------------------------------------------------------------------------
    # Directory
    # -------------------------------------------------------------------------

    def fill_directory(self) -> None:
        directory = bytearray(self.read_blocks(TAVS_DIR_BLOCKS))

        for check in SIGNATURE_CHECKS:
            if check.matches(directory):
                break
        else:
            raise SignatureNotFoundError(
                "cannot find allocation table signature "
                + TAVS_FAT_SIGNATURE.hex(' '))

        if check.swap_sectors:
            first = directory[SECTOR:2 * SECTOR]
            directory[SECTOR:2 * SECTOR] = directory[2 * SECTOR:3 * SECTOR]
            directory[2 * SECTOR:3 * SECTOR] = first

        self.layout = check.name
        self.fat_offset = check.fat_offset
        self.directory = bytes(directory)
        self._reset_cursor(TAVS_DIR_OFFSET)
        log.debug("%s: %s table layout at 0x%x", self.code, self.layout, self.fat_offset)

    def is_end_of_directory(self, record: bytes) -> bool:
        return record[0] == 0

    def parse_entry(self, record: bytes, include_deleted: bool) -> DirectoryEntry | None:
        deleted = record[TAVS_LIVE_FLAG] == 0
        if deleted and not include_deleted:
            return None

        start = struct.unpack_from('<H', record, TAVS_START_BLOCK)[0]
        blocks, size = self.follow_chain(start)
        return DirectoryEntry(
            base_file_name=sanitize_name(self.translate(record[:TAVS_NAME_LEN]).strip()),
            extension=self.translate(record[TAVS_TYPE:TAVS_TYPE + 1]).strip(),
            deleted=deleted,
            file_size=size,
            blocks=tuple(blocks),
        )

    def fat_value(self, block_no: int) -> int:
        offset = self.fat_offset + block_no
        if offset + 2 > TAVS_FAT_END:
            raise OutOfBoundsError(
                f"block {block_no:#x} is outside the allocation table")
        return struct.unpack_from('<H', self.directory, offset)[0]

    def follow_chain(self, start: int) -> tuple[list[int], int]:
        """
        Collect the blocks of a file and its size from the allocation table.

        Broken chains (outside the table, or longer than the iteration
        limit) are cut short; what was collected so far is returned.
        """
        blocks = [start]
        size = 0
        block = start
        for _ in range(TAVS_CHAIN_LIMIT):
            try:
                value = self.fat_value(block)
            except OutOfBoundsError as e:
                log.warning("%s: %s", self.code, e)
                break
            if value % 2:
                size += (value - 1) // 2
                return blocks, size
            size += self.block_size
            if value >= TAVS_DELETED_CHAIN:
                value &= 0xFF  # BSM100 marks chains of deleted files
            block = value
            blocks.append(block)
        else:
            log.warning("%s: chain from block %#x exceeds %d blocks",
                        self.code, start, TAVS_CHAIN_LIMIT)
        return blocks, size
