"""
Data model classes for flodskim.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from .constants import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_MAX_CYLINDER,
    DEFAULT_MAX_HEAD,
    DEFAULT_MAX_SECTOR,
    DEFAULT_MIN_SECTOR,
    DEFAULT_SECTOR_SIZE,
)
from .exceptions import FormatMismatchError


@dataclass(frozen=True)
class Geometry:
    """Physical layout of a floppy and the logical block size on top of it."""
    min_cylinder: int = 0
    max_cylinder: int = DEFAULT_MAX_CYLINDER
    min_head: int = 0
    max_head: int = DEFAULT_MAX_HEAD
    min_sector: int = DEFAULT_MIN_SECTOR
    max_sector: int = DEFAULT_MAX_SECTOR
    sector_size: int = DEFAULT_SECTOR_SIZE
    block_size: int = DEFAULT_BLOCK_SIZE
    # Archive formats use a record size unrelated to the sectors
    independent_blocks: bool = False

    def __post_init__(self):
        if self.sector_size <= 0 or self.block_size <= 0:
            raise FormatMismatchError("Sector and block sizes must be positive")
        if not self.independent_blocks and self.block_size % self.sector_size:
            raise FormatMismatchError(
                f"Block size {self.block_size} is not a multiple of "
                f"sector size {self.sector_size}")

    @property
    def cylinders(self) -> int:
        return self.max_cylinder - self.min_cylinder + 1

    @property
    def heads(self) -> int:
        return self.max_head - self.min_head + 1

    @property
    def sectors_per_track(self) -> int:
        return self.max_sector - self.min_sector + 1

    @property
    def sectors_per_block(self) -> int:
        return max(1, self.block_size // self.sector_size)

    @property
    def track_size(self) -> int:
        """Bytes per cylinder, all heads included."""
        return self.sector_size * self.sectors_per_track * self.heads

    @property
    def disk_size(self) -> int:
        return self.track_size * self.cylinders

    @property
    def block_count(self) -> int:
        return self.disk_size // self.block_size

    def narrowed(self, max_cylinder: int) -> 'Geometry':
        """Copy limited to max_cylinder, if that is below the current limit."""
        if self.min_cylinder <= max_cylinder < self.max_cylinder:
            return replace(self, max_cylinder=max_cylinder)
        return self


@dataclass(frozen=True)
class DirectoryEntry:
    """One file (or CP/M extent) found in a directory."""
    base_file_name: str
    extension: str = ""
    extent_number: int = 0
    deleted: bool = False
    file_size: int = 0
    blocks: tuple[int, ...] = field(default_factory=tuple)
    is_directory: bool = False
    link_name: str = ""

    @property
    def full_name(self) -> str:
        """Return 'NAME.EXT' format."""
        if self.extension:
            return f"{self.base_file_name}.{self.extension}"
        return self.base_file_name

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    def __str__(self) -> str:
        line = f"{self.full_name:<18} {self.extent_number:2d} {self.file_size:6d}"
        if self.deleted:
            line += " deleted"
        return line + ''.join(f" {block:3x}" for block in self.blocks)

    def to_dict(self) -> dict:
        return {
            "name": self.full_name,
            "extent": self.extent_number,
            "size": self.file_size,
            "deleted": self.deleted,
            "is_directory": self.is_directory,
            "blocks": list(self.blocks),
        }


class WalkState(Enum):
    """Progress of a directory walk."""
    SCANNING = "scanning"
    FOUND = "found"
    EXHAUSTED = "exhausted"


@dataclass
class DirectoryCursor:
    """Position of a directory walk inside the directory region."""
    offset: int = 0
    state: WalkState = WalkState.SCANNING

    @property
    def exhausted(self) -> bool:
        return self.state is WalkState.EXHAUSTED

    def advance(self, length: int) -> None:
        self.offset += length
        self.state = WalkState.SCANNING

    def found(self) -> None:
        self.state = WalkState.FOUND

    def finish(self) -> None:
        self.state = WalkState.EXHAUSTED
