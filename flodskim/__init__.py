"""
flodskim - floppy disk image skimmer

Reads disk images of legacy computers (raw dumps and DSK containers),
lists the directories of CP/M, DEC RX50, Triumph-Adler VS, Sinix and
Unix tar floppies, and extracts their files.
"""

from .constants import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_SECTOR_SIZE,
    DIR_ENTRY_SIZE,
    TAR_RECORD_SIZE,
    TAVS_BLOCK_SIZE,
)
from .exceptions import (
    FlodskimError,
    FormatMismatchError,
    ImageReadError,
    OutOfBoundsError,
    SignatureNotFoundError,
    TruncatedError,
    UnsafePathError,
    UnsupportedFormatError,
)
from .container import ContainerCursor, RawContainer, decode_ascii, hex_dump
from .dsk import DskContainer
from .models import DirectoryCursor, DirectoryEntry, Geometry, WalkState
from .filesystem import BaseFilesystem
from .cpm import CpmFilesystem, DecRx50Filesystem
from .tar import SinixMx2Filesystem, TarFilesystem, parse_tar_size
from .tavs import SIGNATURE_CHECKS, SignatureCheck, TaVsFilesystem, sanitize_name
from .extract import FileExtractor
from .formatter import OutputFormatter
from .registry import (
    get_container_class,
    get_filesystem_class,
    open_container,
    open_filesystem,
    open_image,
)
from .utils import has_wildcards, match_entries, match_filename, target_name
from .commands import cmd_block, cmd_copy, cmd_dump, cmd_info, cmd_list

__version__ = "1.0.0"

__all__ = [
    # Containers
    "RawContainer",
    "ContainerCursor",
    "DskContainer",
    # Filesystems
    "BaseFilesystem",
    "CpmFilesystem",
    "DecRx50Filesystem",
    "TarFilesystem",
    "SinixMx2Filesystem",
    "TaVsFilesystem",
    "SignatureCheck",
    "SIGNATURE_CHECKS",
    # Data models
    "Geometry",
    "DirectoryEntry",
    "DirectoryCursor",
    "WalkState",
    # Extraction
    "FileExtractor",
    # Registry
    "open_container",
    "open_filesystem",
    "open_image",
    "get_container_class",
    "get_filesystem_class",
    # Exceptions
    "FlodskimError",
    "ImageReadError",
    "FormatMismatchError",
    "SignatureNotFoundError",
    "OutOfBoundsError",
    "TruncatedError",
    "UnsupportedFormatError",
    "UnsafePathError",
    # Utilities
    "hex_dump",
    "decode_ascii",
    "parse_tar_size",
    "sanitize_name",
    "target_name",
    "has_wildcards",
    "match_filename",
    "match_entries",
    # Commands
    "cmd_list",
    "cmd_copy",
    "cmd_dump",
    "cmd_block",
    "cmd_info",
    # Output
    "OutputFormatter",
    # Constants
    "DEFAULT_SECTOR_SIZE",
    "DEFAULT_BLOCK_SIZE",
    "DIR_ENTRY_SIZE",
    "TAR_RECORD_SIZE",
    "TAVS_BLOCK_SIZE",
]
