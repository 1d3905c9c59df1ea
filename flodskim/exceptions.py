"""
Custom exceptions for the flodskim floppy image decoder.
"""


class FlodskimError(Exception):
    """Base exception for all image decoding errors."""
    pass


class ImageReadError(FlodskimError, OSError):
    """Image file could not be read."""
    pass


class FormatMismatchError(FlodskimError):
    """Image does not match the expected geometry or signature."""
    pass


class SignatureNotFoundError(FormatMismatchError):
    """No known on-disk signature was recognized."""
    pass


class OutOfBoundsError(FlodskimError):
    """Read past the end of the container or directory."""
    pass


class TruncatedError(FlodskimError):
    """Declared length exceeds the bytes available."""
    pass


class UnsupportedFormatError(FlodskimError):
    """No decoder is registered for a container or filesystem code."""
    pass


class UnsafePathError(FlodskimError):
    """Entry name would be extracted outside the target directory."""
    pass
