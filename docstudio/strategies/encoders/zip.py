"""Minimal ZIP archive writer using the stored (uncompressed) method.

Entries are described as records first and serialized in a single pass,
with every offset taken from the one output buffer being written.
"""

import struct
from dataclasses import dataclass

from docstudio.strategies.encoders.crc32 import crc32

_LOCAL_HEADER_SIGNATURE = 0x04034B50
_CENTRAL_HEADER_SIGNATURE = 0x02014B50
_END_OF_CENTRAL_DIR_SIGNATURE = 0x06054B50

_VERSION = 20
_METHOD_STORED = 0
# 1980-01-01 00:00, the earliest date a ZIP header can hold
_DOS_TIME = 0
_DOS_DATE = (0 << 9) | (1 << 5) | 1

# signature, version needed, flags, method, time, date, crc, sizes, name len, extra len
_LOCAL_HEADER = struct.Struct("<IHHHHHIIIHH")
# signature, made by, needed, flags, method, time, date, crc, sizes,
# name len, extra len, comment len, disk, internal attrs, external attrs, offset
_CENTRAL_HEADER = struct.Struct("<IHHHHHHIIIHHHHHII")
# signature, disk, cd disk, entries on disk, total entries, cd size, cd offset, comment len
_END_OF_CENTRAL_DIR = struct.Struct("<IHHHHIIH")


@dataclass(frozen=True)
class ZipEntry:
    """A file to store in the archive.

    Attributes:
        name: Path of the entry inside the archive.
        content: Raw entry bytes.
    """

    name: str
    content: bytes

    @property
    def encoded_name(self) -> bytes:
        return self.name.encode("utf-8")

    @property
    def crc(self) -> int:
        return crc32(self.content)


@dataclass(frozen=True)
class _Placed:
    entry: ZipEntry
    crc: int
    offset: int


def build_zip(entries: list[ZipEntry]) -> bytes:
    """Serialize entries into a stored ZIP archive.

    Local headers and data come first in entry order, then the central
    directory, then the end-of-central-directory record.

    Args:
        entries: Files to include, in archive order.

    Returns:
        The complete archive.
    """
    buffer = bytearray()
    placed: list[_Placed] = []

    for entry in entries:
        name = entry.encoded_name
        checksum = entry.crc
        size = len(entry.content)
        placed.append(_Placed(entry=entry, crc=checksum, offset=len(buffer)))

        buffer += _LOCAL_HEADER.pack(
            _LOCAL_HEADER_SIGNATURE,
            _VERSION,
            0,
            _METHOD_STORED,
            _DOS_TIME,
            _DOS_DATE,
            checksum,
            size,
            size,
            len(name),
            0,
        )
        buffer += name
        buffer += entry.content

    central_dir_offset = len(buffer)
    for record in placed:
        name = record.entry.encoded_name
        size = len(record.entry.content)
        buffer += _CENTRAL_HEADER.pack(
            _CENTRAL_HEADER_SIGNATURE,
            _VERSION,
            _VERSION,
            0,
            _METHOD_STORED,
            _DOS_TIME,
            _DOS_DATE,
            record.crc,
            size,
            size,
            len(name),
            0,
            0,
            0,
            0,
            0,
            record.offset,
        )
        buffer += name
    central_dir_size = len(buffer) - central_dir_offset

    buffer += _END_OF_CENTRAL_DIR.pack(
        _END_OF_CENTRAL_DIR_SIGNATURE,
        0,
        0,
        len(placed),
        len(placed),
        central_dir_size,
        central_dir_offset,
        0,
    )
    return bytes(buffer)
