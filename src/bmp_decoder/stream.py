"""Little-endian read and seek primitives over a seekable binary source."""

import io
import struct
from typing import BinaryIO

from .errors import BmpIOError, TruncatedDataError


def read_exact(source: BinaryIO, size: int) -> bytes:
    try:
        data = source.read(size)
    except OSError as e:
        raise BmpIOError(str(e)) from e
    if data is None or len(data) < size:
        raise TruncatedDataError(size, len(data or b""))
    return data


def read_u8(source: BinaryIO) -> int:
    return read_exact(source, 1)[0]


def read_u16(source: BinaryIO) -> int:
    return struct.unpack("<H", read_exact(source, 2))[0]


def read_u32(source: BinaryIO) -> int:
    return struct.unpack("<I", read_exact(source, 4))[0]


def read_i32(source: BinaryIO) -> int:
    return struct.unpack("<i", read_exact(source, 4))[0]


def tell(source: BinaryIO) -> int:
    try:
        return source.tell()
    except OSError as e:
        raise BmpIOError(str(e)) from e


def skip(source: BinaryIO, count: int) -> int:
    """Advance the source by count bytes, returning the new position."""
    try:
        return source.seek(count, io.SEEK_CUR)
    except OSError as e:
        raise BmpIOError(str(e)) from e


def seek_to(source: BinaryIO, position: int) -> int:
    try:
        return source.seek(position, io.SEEK_SET)
    except OSError as e:
        raise BmpIOError(str(e)) from e


def align_forward(source: BinaryIO, align: int, origin: int = 0) -> None:
    """
    Advance the source to the next multiple of align, counted from origin.

    No-op when the source already sits on a boundary.
    """
    if align <= 0:
        raise ValueError(f"Alignment must be positive, got {align}")
    remainder = (tell(source) - origin) % align
    if remainder:
        skip(source, align - remainder)
