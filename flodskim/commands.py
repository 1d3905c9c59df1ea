"""
Command handlers for flodskim.
"""

from pathlib import Path

from .exceptions import FlodskimError
from .extract import FileExtractor
from .filesystem import BaseFilesystem
from .formatter import OutputFormatter
from .registry import DEFAULT_CONTAINER, DEFAULT_FILESYSTEM, open_container, open_filesystem
from .utils import parse_hex


def _open(args) -> BaseFilesystem:
    """Load the image named in args and attach the requested filesystem."""
    container = open_container(
        args.image,
        getattr(args, 'buffer', None) or DEFAULT_CONTAINER,
        strict=getattr(args, 'strict', False),
    )
    return open_filesystem(container, getattr(args, 'system', None) or DEFAULT_FILESYSTEM)


def cmd_list(args, formatter: OutputFormatter) -> int:
    """Handle the 'list' command."""
    try:
        fs = _open(args)
        entries = list(fs.entries(include_deleted=getattr(args, 'deleted', False)))
        formatter.list_entries(entries, args.image)
        return 0

    except FlodskimError as e:
        formatter.error(str(e))
        return 1


def cmd_copy(args, formatter: OutputFormatter) -> int:
    """Handle the 'copy' command: extract files into a directory."""
    dest = Path(args.dest)
    pattern = getattr(args, 'pattern', None)

    try:
        fs = _open(args)
        dest.mkdir(parents=True, exist_ok=True)
        copied = FileExtractor(fs).copy_files(dest, pattern)

        if not copied and pattern:
            formatter.error(f"No files matching '{pattern}'")
            return 1

        total_bytes = 0
        files = []
        for entry, path in copied:
            size = 0 if entry.is_directory else entry.file_size
            total_bytes += size
            files.append({"name": entry.full_name, "size": size, "dest": str(path)})
            if not formatter.json_mode:
                print(f"  '{entry.full_name}' -> '{path}'")

        formatter.success(
            f"Copied {len(files)} file(s), {total_bytes:,} bytes total",
            source=args.image,
            dest=str(dest),
            files=len(files),
            bytes=total_bytes,
            copied=files
        )
        return 0

    except FlodskimError as e:
        formatter.error(str(e))
        return 1
    except OSError as e:
        formatter.error(f"Filesystem error: {e}")
        return 1


def cmd_dump(args, formatter: OutputFormatter) -> int:
    """Handle the 'dump' command: hex dump of the decoded container."""
    try:
        offset = parse_hex(args.offset)
        length = parse_hex(args.length)
    except ValueError:
        formatter.error(f"Offset and length must be hexadecimal: {args.offset} {args.length}")
        return 1

    try:
        container = open_container(
            args.image,
            getattr(args, 'buffer', None) or DEFAULT_CONTAINER,
            strict=getattr(args, 'strict', False),
        )
        formatter.dump(container.dump(offset, length), offset, length)
        return 0

    except FlodskimError as e:
        formatter.error(str(e))
        return 1


def cmd_block(args, formatter: OutputFormatter) -> int:
    """Handle the 'block' command: hex dump of one logical block."""
    try:
        block_no = parse_hex(args.block)
    except ValueError:
        formatter.error(f"Block number must be hexadecimal: {args.block}")
        return 1

    try:
        fs = _open(args)
        lines = fs.dump_block(block_no)
        formatter.dump(lines, 0, fs.block_size)
        return 0

    except FlodskimError as e:
        formatter.error(str(e))
        return 1


def cmd_info(args, formatter: OutputFormatter) -> int:
    """Handle the 'info' command."""
    try:
        fs = _open(args)
        container = fs.container
        details = {
            "image": args.image,
            "container": container.code,
            "size": len(container),
        }
        if container.descriptor:
            details["descriptor"] = container.descriptor.strip()
        if container.sector_size:
            details["tracks"] = container.max_cylinder + 1
            details["sectors_per_track"] = container.max_sector
            details["container_sector_size"] = container.sector_size
        details.update(fs.info())
        formatter.info(details)
        return 0

    except FlodskimError as e:
        formatter.error(str(e))
        return 1
