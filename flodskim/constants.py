"""
Constants for the flodskim floppy image decoder.
"""

# Generic geometry defaults (80 cylinders, 2 heads, 9 x 512 byte sectors)
DEFAULT_MAX_CYLINDER = 79
DEFAULT_MAX_HEAD = 1
DEFAULT_MIN_SECTOR = 1
DEFAULT_MAX_SECTOR = 9
DEFAULT_SECTOR_SIZE = 512
DEFAULT_BLOCK_SIZE = 4 * DEFAULT_SECTOR_SIZE
DIR_ENTRY_SIZE = 32

# Hex dump layout
DUMP_LINE_LEN = 16
DUMP_PAGE_LEN = 0x100

# DSK container (CPCEMU "MV - CPC" and "EXTENDED CPC DSK" images)
DSK_BLOCK_SIZE = 0x100       # Disc and track information blocks
DSK_DESCRIPTOR_LEN = 0x30
DSK_TRACK_COUNT = 0x30
DSK_HEAD_COUNT = 0x31
DSK_TRACK_LEN = 0x32
DSK_TIB_TRACK = 0x10
DSK_TIB_HEAD = 0x11
DSK_TIB_SECTOR_CODE = 0x14
DSK_TIB_SECTOR_COUNT = 0x15
DSK_SIGNATURES = (b"MV - CPC", b"EXTENDED")

# CP/M filesystem
CPM_DELETED = 0xE5
CPM_DIR_BLOCKS = 2
CPM_MAX_DIR_ENTRIES = 128
CPM_NAME = slice(1, 9)
CPM_EXT = slice(9, 12)
CPM_EXTENT_LOW = 0x0C
CPM_EXTENT_HIGH = 0x0E
CPM_BLOCKS_START = 16

# DEC RX50 (Rainbow 100): one side, 80 tracks of 10 sectors
RX50_MAX_SECTOR = 10
RX50_FIRST_TRACK = 2
RX50_SKEW = (1, 3, 5, 7, 9, 2, 4, 6, 8, 10)

# Unix tar
TAR_RECORD_SIZE = 512
TAR_NAME = (0, 100)
TAR_SIZE = (124, 12)
TAR_TYPEFLAG = 156
TAR_LINKNAME = (157, 100)
TAR_MAGIC = (257, 5)
TAR_PREFIX = (345, 155)
TAR_TYPE_DIRECTORY = "5"
TAR_LINK_TYPES = ("1", "2")

# Sinix tar on MX-2 floppies: 16 x 256 byte sectors, archive at block 0x38
SINIX_MAX_SECTOR = 16
SINIX_SECTOR_SIZE = 256
SINIX_DIR_START_BLOCK = 0x38

# Triumph-Adler VS20 / BSM100
TAVS_MIN_SECTOR = 0
TAVS_MAX_SECTOR = 8
TAVS_BLOCK_SIZE = 8 * DEFAULT_SECTOR_SIZE
TAVS_DIR_BLOCKS = (0, 2)     # Wire block numbers of the directory
TAVS_DIR_OFFSET = 0x400
TAVS_FAT_END = 0x400
TAVS_FAT_SIGNATURE = b"\x02\x00\x01\x20"
TAVS_CHAIN_LIMIT = 32
TAVS_DELETED_CHAIN = 0xFF00
TAVS_NAME_LEN = 16
TAVS_TYPE = 0x10
TAVS_START_BLOCK = 0x11
TAVS_LIVE_FLAG = 0x13

# Characters kept in TA VS output filenames
TAVS_SAFE_NAME = r"[^A-Za-z0-9ÄÖÜäöüß.]"
