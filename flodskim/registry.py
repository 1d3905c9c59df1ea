"""
Lookup of container decoders and filesystem views by their codes.
"""

import os
from typing import BinaryIO

from .container import RawContainer
from .cpm import CpmFilesystem, DecRx50Filesystem
from .dsk import DskContainer
from .exceptions import UnsupportedFormatError
from .filesystem import BaseFilesystem
from .tar import SinixMx2Filesystem, TarFilesystem
from .tavs import TaVsFilesystem

CONTAINERS: dict[str, type[RawContainer]] = {
    "raw": RawContainer,
    "base": RawContainer,
    "dsk": DskContainer,
}

FILESYSTEMS: dict[str, type[BaseFilesystem]] = {
    cls.code: cls
    for cls in (
        BaseFilesystem,
        CpmFilesystem,
        DecRx50Filesystem,
        SinixMx2Filesystem,
        TaVsFilesystem,
        TarFilesystem,
    )
}

DEFAULT_CONTAINER = "raw"
DEFAULT_FILESYSTEM = "base"


def container_codes() -> list[str]:
    return sorted(CONTAINERS)


def filesystem_codes() -> list[str]:
    return sorted(FILESYSTEMS)


def get_container_class(code: str) -> type[RawContainer]:
    try:
        return CONTAINERS[code.lower()]
    except KeyError:
        raise UnsupportedFormatError(
            f"Unknown container format '{code}' "
            f"(known: {', '.join(container_codes())})") from None


def get_filesystem_class(code: str) -> type[BaseFilesystem]:
    try:
        return FILESYSTEMS[code.lower()]
    except KeyError:
        raise UnsupportedFormatError(
            f"Unknown filesystem '{code}' "
            f"(known: {', '.join(filesystem_codes())})") from None


def open_container(
    source: str | os.PathLike | BinaryIO,
    code: str = DEFAULT_CONTAINER,
    strict: bool = False
) -> RawContainer:
    """Load an image file with the decoder registered for code."""
    cls = get_container_class(code)
    if issubclass(cls, DskContainer):
        return cls.from_file(source, strict=strict)
    return cls.from_file(source)


def open_filesystem(container: RawContainer, code: str = DEFAULT_FILESYSTEM) -> BaseFilesystem:
    """Attach an initialized filesystem view to a loaded container."""
    return get_filesystem_class(code)(container).initialize()


def open_image(
    source: str | os.PathLike | BinaryIO,
    system: str = DEFAULT_FILESYSTEM,
    container: str = DEFAULT_CONTAINER,
    strict: bool = False
) -> BaseFilesystem:
    """Load an image and return its filesystem view in one step."""
    return open_filesystem(open_container(source, container, strict), system)
