"""
Logging configuration for flodskim.

Decoders log anomalies (skipped tracks, broken chains, bad headers) to the
package logger; the command line decides how much of that reaches stderr.
"""

import logging
import sys
from typing import TextIO

# Log levels selected by -q / (default) / -v
QUIET = logging.WARNING
NORMAL = logging.INFO
VERBOSE = logging.DEBUG

logger = logging.getLogger('flodskim')


class ColorFormatter(logging.Formatter):
    """
    Formatter that colors the level on terminals.

    Plain text is emitted when the stream is not a tty.
    """

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str | None = None, stream: TextIO | None = None,
                 use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors and self._is_tty(stream or sys.stderr)

    @staticmethod
    def _is_tty(stream: TextIO) -> bool:
        isatty = getattr(stream, 'isatty', None)
        return bool(isatty and isatty())

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.COLORS.get(record.levelname)
        if self.use_colors and color:
            return f"{color}{message}{self.RESET}"
        return message


def setup_logging(
    level: int = NORMAL,
    stream: TextIO | None = None,
    use_colors: bool = True,
    format_string: str | None = None
) -> None:
    """
    Configure the package logger.

    Args:
        level: Logging level (QUIET, NORMAL, or VERBOSE)
        stream: Output stream (defaults to stderr)
        use_colors: Whether to color the output on terminals
        format_string: Custom format string (optional)
    """
    if stream is None:
        stream = sys.stderr

    if format_string is None:
        if level <= logging.DEBUG:
            format_string = '%(levelname)s: %(name)s: %(message)s'
        else:
            format_string = '%(levelname)s: %(message)s'

    logger.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColorFormatter(format_string, stream, use_colors))

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger for a module of the package.

    Args:
        name: Dotted module name; 'flodskim.cpm' and 'cpm' both give the
              child logger 'flodskim.cpm'

    Returns:
        Logger instance
    """
    if name is None:
        return logger
    if name.startswith(logger.name + '.'):
        name = name[len(logger.name) + 1:]
    return logger.getChild(name)


setup_logging()
