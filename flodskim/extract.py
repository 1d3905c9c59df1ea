"""
Extraction of files from a filesystem view to the local filesystem.
"""

import os
from pathlib import Path

from .exceptions import FlodskimError
from .filesystem import BaseFilesystem
from .logging_config import get_logger
from .models import DirectoryEntry
from .utils import match_entries, safe_target_path, target_name

log = get_logger(__name__)


class FileExtractor:
    """Write the contents of directory entries below a target directory."""

    def __init__(self, filesystem: BaseFilesystem):
        self.filesystem = filesystem

    def iter_content(self, entry: DirectoryEntry):
        """Yield the file content block by block, cut to the file size."""
        remaining = entry.file_size
        for block_no in entry.blocks:
            if remaining <= 0:
                break
            block = self.filesystem.get_block(block_no)
            yield block[:remaining]
            remaining -= len(block)

    def read_file(self, entry: DirectoryEntry) -> bytes:
        return b''.join(self.iter_content(entry))

    def copy_file(self, entry: DirectoryEntry, dest_root: str | os.PathLike) -> Path | None:
        """
        Extract one entry below dest_root.

        Returns the written path, or None for entries without content
        (links). The file only appears once all of its blocks were read.
        """
        target = safe_target_path(Path(dest_root), target_name(entry))

        if entry.is_directory:
            target.mkdir(parents=True, exist_ok=True)
            return target
        if entry.link_name:
            log.warning("'%s' is a link to '%s', not extracted",
                        entry.full_name, entry.link_name)
            return None

        target.parent.mkdir(parents=True, exist_ok=True)
        partial = target.with_name(target.name + '.part')
        try:
            with open(partial, 'wb') as f:
                for chunk in self.iter_content(entry):
                    f.write(chunk)
            os.replace(partial, target)
        except BaseException:
            partial.unlink(missing_ok=True)
            raise
        log.debug("'%s' -> '%s'", entry.full_name, target)
        return target

    def copy_files(
        self,
        dest_root: str | os.PathLike,
        pattern: str | None = None
    ) -> list[tuple[DirectoryEntry, Path]]:
        """
        Extract all live entries, optionally only those matching a wildcard
        pattern. Entries that cannot be read are reported and skipped.
        """
        entries = list(self.filesystem.entries(include_deleted=False))
        if pattern:
            entries = match_entries(entries, pattern)

        copied = []
        for entry in entries:
            try:
                path = self.copy_file(entry, dest_root)
            except FlodskimError as e:
                log.error("'%s' not extracted: %s", entry.full_name, e)
                continue
            if path is not None:
                copied.append((entry, path))
        return copied
