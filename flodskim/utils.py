"""
Utility functions for flodskim.
"""

import re
from pathlib import Path, PurePosixPath

from .exceptions import UnsafePathError
from .models import DirectoryEntry


def has_wildcards(pattern: str) -> bool:
    """Check if a string contains wildcard characters."""
    return '*' in pattern or '?' in pattern


def match_filename(pattern: str, filename: str) -> bool:
    """
    Match a DOS-style wildcard pattern against a filename.
    Supports * (any characters) and ? (single character), case-insensitive.
    """
    regex = ''.join(
        '.*' if char == '*' else '.' if char == '?' else re.escape(char)
        for char in pattern.upper()
    )
    return re.fullmatch(regex, filename.upper(), re.DOTALL) is not None


def match_entries(entries: list[DirectoryEntry], pattern: str) -> list[DirectoryEntry]:
    """
    Filter directory entries by wildcard pattern.
    Returns entries whose full_name matches the pattern.
    """
    if not has_wildcards(pattern):
        pattern_upper = pattern.upper()
        return [e for e in entries if e.full_name.upper() == pattern_upper]

    return [e for e in entries if match_filename(pattern, e.full_name)]


def parse_hex(text: str) -> int:
    """Parse a hexadecimal command line number, with or without 0x."""
    return int(text, 16)


def target_name(entry: DirectoryEntry) -> str:
    """
    Output filename for an entry.

    CP/M extents beyond the first are extracted as separate files with the
    extent number appended.
    """
    name = entry.full_name
    if entry.extent_number > 1:
        name += f".{entry.extent_number}"
    return name


def safe_target_path(dest_root: Path, name: str) -> Path:
    """
    Resolve an archive member name below dest_root.

    Leading slashes are dropped; '..' components are refused.
    """
    relative = PurePosixPath(name.lstrip('/'))
    if not relative.parts:
        raise UnsafePathError(f"Empty target name '{name}'")
    if '..' in relative.parts:
        raise UnsafePathError(f"Refusing to extract '{name}' outside the target directory")
    return dest_root.joinpath(*relative.parts)
