"""Shared fixtures: synthetic BMP files built byte by byte."""

import io
import struct
from typing import List, Optional, Sequence, Tuple

import pytest


def _pad_row(row: bytes) -> bytes:
    return row + b"\x00" * (-len(row) % 4)


def build_bmp(
    width: int,
    height: int,
    bpp: int,
    rows: Sequence[bytes] = (),
    header_size: int = 40,
    compression: int = 0,
    masks: Optional[Tuple[int, ...]] = None,
    palette: Optional[List[Tuple[int, int, int]]] = None,
    n_colors: Optional[int] = None,
    planes: int = 1,
    pixel_offset: Optional[int] = None,
    gap_fill: int = 0xEE,
) -> bytes:
    """
    Assemble a BMP file.

    rows are raw pixel bytes in file order, without padding.
    palette entries are (r, g, b). pixel_offset larger than the natural
    offset inserts gap_fill bytes before the pixel array; smaller values
    are written as-is.
    """
    palette = palette or []
    if n_colors is None:
        n_colors = len(palette)

    if header_size == 12:
        dib = struct.pack("<IHHHH", 12, width, height, planes, bpp)
        palette_bytes = b"".join(bytes((b, g, r)) for r, g, b in palette)
    else:
        dib = struct.pack(
            "<IiiHHIIiiII",
            header_size, width, height, planes, bpp, compression,
            0, 2835, 2835, n_colors, 0,
        )
        if header_size == 40:
            if masks is not None:
                dib += struct.pack("<3I", *masks[:3])
        else:
            dib += struct.pack("<4I", *(tuple(masks or ()) + (0, 0, 0, 0))[:4])
            dib += b"\x00" * (header_size - len(dib))
        palette_bytes = b"".join(bytes((b, g, r, 0)) for r, g, b in palette)

    natural_offset = 14 + len(dib) + len(palette_bytes)
    if pixel_offset is None:
        pixel_offset = natural_offset
    gap = bytes([gap_fill]) * max(0, pixel_offset - natural_offset)

    pixel_data = b"".join(_pad_row(row) for row in rows)
    file_size = natural_offset + len(gap) + len(pixel_data)
    file_header = b"BM" + struct.pack("<IHHI", file_size, 0, 0, pixel_offset)
    return file_header + dib + palette_bytes + gap + pixel_data


GRAYSCALE_16 = [(i * 17, i * 17, i * 17) for i in range(16)]
BLACK_WHITE = [(0, 0, 0), (255, 255, 255)]


@pytest.fixture
def bmp_bytes():
    """Factory returning the bytes of a synthetic BMP."""
    return build_bmp


@pytest.fixture
def bmp_stream():
    """Factory returning a BytesIO positioned at the start of a synthetic BMP."""
    def _make(*args, **kwargs) -> io.BytesIO:
        return io.BytesIO(build_bmp(*args, **kwargs))
    return _make


@pytest.fixture
def black_white() -> List[Tuple[int, int, int]]:
    """Two-entry palette for 1-bit images."""
    return list(BLACK_WHITE)


@pytest.fixture
def grayscale_16() -> List[Tuple[int, int, int]]:
    return list(GRAYSCALE_16)


@pytest.fixture
def top_down_24bit_2x2() -> bytes:
    """2x2 24-bit top-down image; rows are 6 bytes and need 2 bytes of padding."""
    rows = [
        bytes([1, 2, 3, 4, 5, 6]),
        bytes([7, 8, 9, 10, 11, 12]),
    ]
    return build_bmp(2, -2, 24, rows)
