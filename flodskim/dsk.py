"""
DSK disk image container (CPCEMU format, standard and extended).

The file starts with a 0x100 byte disc information block, followed by one
track information block per (track, head) pair, each directly followed by
the sector payloads of that track. Only the sector payloads are kept, so
the loaded container is a flat sequence of tracks.
"""

from .constants import (
    DSK_BLOCK_SIZE,
    DSK_DESCRIPTOR_LEN,
    DSK_HEAD_COUNT,
    DSK_SIGNATURES,
    DSK_TIB_HEAD,
    DSK_TIB_SECTOR_CODE,
    DSK_TIB_SECTOR_COUNT,
    DSK_TIB_TRACK,
    DSK_TRACK_COUNT,
    DSK_TRACK_LEN,
)
from .container import RawContainer
from .exceptions import FormatMismatchError, OutOfBoundsError, TruncatedError
from .logging_config import get_logger

log = get_logger(__name__)


class DskContainer(RawContainer):
    """(Extended) DSK image as written by CPCEMU and SAMdisk."""

    code = "dsk"
    description = "(Extended) Disk Image"

    def __init__(self, data: bytes = b"", strict: bool = False):
        super().__init__(data)
        self.strict = strict
        self.track_count = 0
        self.head_count = 0
        self.track_length = 0

    def decode(self, raw: bytes) -> bytes:
        source = RawContainer(raw).cursor()
        try:
            header = source.read_bytes(DSK_BLOCK_SIZE)
        except OutOfBoundsError as e:
            raise TruncatedError(
                f"DSK image has only {len(raw)} bytes, no disc information block") from e

        self.descriptor = header[:DSK_DESCRIPTOR_LEN].rstrip(b'\x00').decode('ascii', errors='replace')
        if not header.startswith(DSK_SIGNATURES):
            if self.strict:
                raise FormatMismatchError(f"Not a DSK image: {self.descriptor!r}")
            log.warning("Unexpected DSK descriptor %r", self.descriptor)

        self.track_count = header[DSK_TRACK_COUNT]
        self.head_count = header[DSK_HEAD_COUNT]
        self.track_length = int.from_bytes(header[DSK_TRACK_LEN:DSK_TRACK_LEN + 2], 'little')
        self.max_cylinder = self.track_count - 1
        self.max_head = self.head_count - 1
        log.info("%s", self.descriptor.strip())
        log.info("%d tracks, %d heads", self.track_count, self.head_count)

        data = self._read_tracks(source)
        if self.max_cylinder < 0 or not data:
            raise TruncatedError("DSK image holds no complete track")
        return data

    def _read_tracks(self, source) -> bytes:
        data = bytearray()
        for track in range(self.track_count):
            for head in range(self.head_count):
                status = self._read_track(source, track, head, data)
                if status is not None:
                    self.max_cylinder = status
                    return bytes(data)
        return bytes(data)

    def _read_track(self, source, track: int, head: int, data: bytearray) -> int | None:
        """
        Append the sectors of one track to data.

        Returns None to continue, or the last usable cylinder number when
        decoding must stop.
        """
        start = source.position
        try:
            tib = source.read_bytes(DSK_BLOCK_SIZE)
        except OutOfBoundsError as e:
            return self._short_track(track, head, "track information block missing", e)

        tib_track = tib[DSK_TIB_TRACK]
        tib_head = tib[DSK_TIB_HEAD]

        if tib_track != track and self.strict:
            raise FormatMismatchError(
                f"track information block says track {tib_track}, expected {track}")
        if tib_track > track:
            # Sparse track map; the header is consumed, no sectors
            log.error("wrong track# %d for track %d, head %d", tib_track, track, head)
            return None
        if tib_track < track:
            # Trailing garbage after the last real track
            log.warning("track# %d at track %d, head %d: image ends at cylinder %d",
                        tib_track, track, head, track - 1)
            return track - 1

        if tib_head != head:
            log.error("wrong head# %d for track %d, head %d", tib_head, track, head)

        sector_size = 128 << tib[DSK_TIB_SECTOR_CODE]
        sector_count = tib[DSK_TIB_SECTOR_COUNT]
        self.sector_size = sector_size
        self.max_sector = sector_count
        log.debug("track %d, head %d: %d sectors of %d bytes",
                  tib_track, tib_head, sector_count, sector_size)

        try:
            payload = source.read_bytes(sector_count * sector_size)
        except OutOfBoundsError as e:
            source.seek(start)
            return self._short_track(track, head, "sector data truncated", e)
        data.extend(payload)
        return None

    def _short_track(self, track: int, head: int, reason: str, cause: Exception) -> int:
        if self.strict:
            raise TruncatedError(f"track {track}, head {head}: {reason}") from cause
        log.warning("track %d, head %d: %s; image ends at cylinder %d",
                    track, head, reason, track - 1)
        return track - 1
