"""
Entry point for flodskim.

Allows running as: python -m flodskim
"""

import argparse
import sys

from . import __version__
from .commands import cmd_block, cmd_copy, cmd_dump, cmd_info, cmd_list
from .formatter import OutputFormatter
from .logging_config import setup_logging, QUIET, NORMAL, VERBOSE
from .registry import DEFAULT_CONTAINER, DEFAULT_FILESYSTEM, container_codes, filesystem_codes


def _add_image_options(parser: argparse.ArgumentParser, with_system: bool = True) -> None:
    parser.add_argument('image', help='Disk image file')
    parser.add_argument('-b', '--buffer', default=DEFAULT_CONTAINER, choices=container_codes(),
                        help=f'Container format of the image (default: {DEFAULT_CONTAINER})')
    parser.add_argument('--strict', action='store_true',
                        help='Reject damaged DSK track maps instead of truncating')
    if with_system:
        parser.add_argument('-s', '--system', default=DEFAULT_FILESYSTEM, choices=filesystem_codes(),
                            help=f'Filesystem on the disk (default: {DEFAULT_FILESYSTEM})')


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog='flodskim',
        description='List and extract files from legacy floppy disk images',
    )

    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show decoding details')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Only show warnings and errors')
    parser.add_argument('--json', action='store_true', help='Output in JSON format')

    subparsers = parser.add_subparsers(dest='command', required=True)

    list_parser = subparsers.add_parser('list', help='Print the directory of an image')
    _add_image_options(list_parser)
    list_parser.add_argument('-d', '--deleted', action='store_true',
                             help='Include deleted entries')

    copy_parser = subparsers.add_parser('copy', help='Extract files into a directory')
    _add_image_options(copy_parser)
    copy_parser.add_argument('dest', help='Target directory')
    copy_parser.add_argument('pattern', nargs='?',
                             help='Only extract files matching this pattern (*.COM, ?X*.*)')

    dump_parser = subparsers.add_parser('dump', help='Hex dump of the decoded image')
    _add_image_options(dump_parser, with_system=False)
    dump_parser.add_argument('offset', help='Start offset (hex)')
    dump_parser.add_argument('length', help='Number of bytes (hex)')

    block_parser = subparsers.add_parser('block', help='Hex dump of one logical block')
    _add_image_options(block_parser)
    block_parser.add_argument('block', help='Block number (hex)')

    info_parser = subparsers.add_parser('info', help='Show container and geometry details')
    _add_image_options(info_parser)

    args = parser.parse_args(argv)

    if args.quiet:
        setup_logging(level=QUIET)
    elif args.verbose:
        setup_logging(level=VERBOSE)
    else:
        setup_logging(level=NORMAL)

    formatter = OutputFormatter(json_mode=args.json)

    match args.command:
        case 'list':
            return cmd_list(args, formatter)
        case 'copy':
            return cmd_copy(args, formatter)
        case 'dump':
            return cmd_dump(args, formatter)
        case 'block':
            return cmd_block(args, formatter)
        case 'info':
            return cmd_info(args, formatter)
        case _:
            formatter.error(f"Unknown command: {args.command}")
            return 1


if __name__ == '__main__':
    sys.exit(main())
