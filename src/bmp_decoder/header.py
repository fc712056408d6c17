"""
BMP file header and DIB header decoding.

Supports the four DIB header layouts by size:

    12  BITMAPCOREHEADER     (V2, OS/2 style, 16-bit dimensions)
    40  BITMAPINFOHEADER     (V3)
    108 BITMAPV4HEADER       (V4)
    124 BITMAPV5HEADER       (V5)

Color space, gamma and ICC profile fields of V4/V5 are skipped.

The pixel array offset is read as a 16-bit value (the low half of the
32-bit field). Files whose pixel data starts at or beyond 64 KiB are
therefore not decoded correctly; this limitation is kept as-is.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import BinaryIO, Tuple

from .errors import (
    BitfieldsNotContiguousError,
    BitfieldsOverlapError,
    BitfieldsUnsupportedError,
    InvalidHeightError,
    InvalidWidthError,
    MalformedSignatureError,
    UnsupportedBitDepthError,
    UnsupportedCompressionError,
    UnsupportedHeaderSizeError,
    UnsupportedPlaneCountError,
)
from .stream import read_exact, read_i32, read_u16, read_u32, skip

logger = logging.getLogger(__name__)

BMP_MAGIC = b"BM"

SUPPORTED_BIT_DEPTHS = (1, 2, 4, 8, 16, 24, 32)

BITFIELD32_RED = 0x00FF0000
BITFIELD32_GREEN = 0x0000FF00
BITFIELD32_BLUE = 0x000000FF
BITFIELD16_RED = 0b0111110000000000
BITFIELD16_GREEN = 0b0000001111100000
BITFIELD16_BLUE = 0b0000000000011111

DEFAULT_MASKS = {
    16: (BITFIELD16_RED, BITFIELD16_GREEN, BITFIELD16_BLUE, 0),
    32: (BITFIELD32_RED, BITFIELD32_GREEN, BITFIELD32_BLUE, 0),
}

# Bytes of the V3 layout consumed after the size field, up to and
# including ColorsImportant.
_INFO_FIELDS_SIZE = 36


class BmpVersion(Enum):
    """DIB header variant, keyed by header size in bytes."""
    V2 = 12
    V3 = 40
    V4 = 108
    V5 = 124

    @classmethod
    def from_dib_header_size(cls, size: int) -> "BmpVersion":
        try:
            return cls(size)
        except ValueError:
            raise UnsupportedHeaderSizeError(size) from None

    @property
    def header_size(self) -> int:
        return self.value


class CompressionType(Enum):
    RGB = 0
    BITFIELDS = 3
    ALPHA_BITFIELDS = 6

    @classmethod
    def from_value(cls, value: int) -> "CompressionType":
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedCompressionError(value) from None

    @property
    def has_masks(self) -> bool:
        return self is not CompressionType.RGB


def _trailing_zeros(value: int) -> int:
    return (value & -value).bit_length() - 1


def mask_is_contiguous(mask: int) -> bool:
    """
    True if the set bits of mask form one run (zero counts as contiguous).

    Shift out the trailing zeros, then the run of ones; anything left
    means a second run.
    """
    if mask == 0:
        return True
    mask >>= _trailing_zeros(mask)
    mask >>= _trailing_zeros(~mask)
    return mask == 0


def _masks_overlap(masks: Tuple[int, ...]) -> bool:
    for i, first in enumerate(masks):
        for second in masks[i + 1:]:
            if first & second:
                return True
    return False


@dataclass(frozen=True)
class BmpHeader:
    """
    Validated, normalized BMP header.

    ``width`` is always positive. ``height`` keeps the on-disk sign:
    negative means rows are stored top-down.
    """
    version: BmpVersion
    width: int
    height: int
    planes: int
    bpp: int
    n_colors: int
    pixel_offset: int
    compression: CompressionType = CompressionType.RGB
    red_mask: int = 0
    green_mask: int = 0
    blue_mask: int = 0
    alpha_mask: int = 0

    @classmethod
    def build(
        cls,
        version: BmpVersion,
        width: int,
        height: int,
        planes: int,
        bpp: int,
        n_colors: int,
        pixel_offset: int,
        compression: CompressionType = CompressionType.RGB,
    ) -> "BmpHeader":
        """Validate raw fields and apply per-depth defaults."""
        if width <= 0:
            raise InvalidWidthError(width)
        if height == 0:
            raise InvalidHeightError(height)
        if planes != 1:
            raise UnsupportedPlaneCountError(planes)
        if bpp not in SUPPORTED_BIT_DEPTHS:
            raise UnsupportedBitDepthError(bpp)

        if bpp < 16:
            if n_colors == 0 or n_colors > 1 << bpp:
                n_colors = 1 << bpp
        else:
            n_colors = 0

        red, green, blue, alpha = DEFAULT_MASKS.get(bpp, (0, 0, 0, 0))
        return cls(
            version=version,
            width=abs(width),
            height=height,
            planes=planes,
            bpp=bpp,
            n_colors=n_colors,
            pixel_offset=pixel_offset,
            compression=compression,
            red_mask=red,
            green_mask=green,
            blue_mask=blue,
            alpha_mask=alpha,
        )

    def with_masks(self, red: int, green: int, blue: int, alpha: int) -> "BmpHeader":
        """Return a copy carrying explicit bitfield masks, after validating them."""
        if self.bpp not in DEFAULT_MASKS:
            raise BitfieldsUnsupportedError(self.bpp)

        masks = (red, green, blue, alpha)
        if not all(mask_is_contiguous(m) for m in masks):
            raise BitfieldsNotContiguousError(*masks)
        if _masks_overlap(masks):
            raise BitfieldsOverlapError(*masks)

        return replace(
            self,
            red_mask=red,
            green_mask=green,
            blue_mask=blue,
            alpha_mask=alpha,
        )

    @property
    def top_down(self) -> bool:
        return self.height < 0

    @property
    def abs_height(self) -> int:
        return abs(self.height)

    @property
    def masks(self) -> Tuple[int, int, int, int]:
        return (self.red_mask, self.green_mask, self.blue_mask, self.alpha_mask)

    @property
    def row_stride(self) -> int:
        """Bytes per stored row including padding to a 4-byte multiple."""
        return ((self.bpp * self.width + 31) // 32) * 4

    @property
    def palette_entry_size(self) -> int:
        return 3 if self.version is BmpVersion.V2 else 4


def _read_core_header(source: BinaryIO, pixel_offset: int) -> BmpHeader:
    width = read_u16(source)
    height = read_u16(source)
    planes = read_u16(source)
    bpp = read_u16(source)
    return BmpHeader.build(BmpVersion.V2, width, height, planes, bpp, 0, pixel_offset)


def _read_info_header(source: BinaryIO, version: BmpVersion, pixel_offset: int) -> BmpHeader:
    width = read_i32(source)
    height = read_i32(source)
    planes = read_u16(source)
    bpp = read_u16(source)
    compression = CompressionType.from_value(read_u32(source))
    skip(source, 12)  # ImageSize, XPelsPerMeter, YPelsPerMeter
    n_colors = read_u32(source)
    skip(source, 4)  # ColorsImportant

    header = BmpHeader.build(
        version, width, height, planes, bpp, n_colors, pixel_offset, compression
    )
    remaining = version.header_size - 4 - _INFO_FIELDS_SIZE

    if version is BmpVersion.V3:
        if compression.has_masks:
            red, green, blue = read_u32(source), read_u32(source), read_u32(source)
            header = header.with_masks(red, green, blue, 0)
        return header

    if compression.has_masks:
        red, green, blue, alpha = (read_u32(source) for _ in range(4))
        header = header.with_masks(red, green, blue, alpha)
        remaining -= 16

    # Color space endpoints, gamma and (V5) ICC profile fields.
    skip(source, remaining)
    return header


def read_header(source: BinaryIO) -> BmpHeader:
    """
    Decode the file header and DIB header from the start of source.

    Leaves the source positioned right after the DIB header (and the V3
    bitfield masks, when present).

    Raises:
        BmpError subclass for any malformed or unsupported field.
    """
    magic = read_exact(source, 2)
    if magic != BMP_MAGIC:
        raise MalformedSignatureError(magic[0], magic[1])

    skip(source, 8)  # file size, reserved
    pixel_offset = read_u16(source)
    skip(source, 2)  # high half of the pixel offset, ignored
    version = BmpVersion.from_dib_header_size(read_u32(source))
    logger.debug(f"DIB header {version.name}, pixel offset {pixel_offset}")

    if version is BmpVersion.V2:
        header = _read_core_header(source, pixel_offset)
    else:
        header = _read_info_header(source, version, pixel_offset)

    logger.debug(
        f"Header: {header.width}x{header.height} {header.bpp}bpp "
        f"{header.compression.name} colors={header.n_colors}"
    )
    return header
