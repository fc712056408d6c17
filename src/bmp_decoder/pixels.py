"""
Palette loading and per-format pixel decoding.

Every channel of a decoded Pixel is widened to 32 bits by bit replication,
so an 8-bit 0xAB becomes 0xABABABAB and a 5-bit 0b10110 becomes
0b10110101101011010110101101011010 (the last two bits taken from the top
of the value).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Callable, Dict, Optional, Tuple

from .bitreader import BitReader
from .errors import HeaderTooLargeError, PaletteIndexError
from .header import BmpHeader, read_header
from .stream import align_forward, read_exact, read_u16, read_u32, seek_to, tell

logger = logging.getLogger(__name__)

CHANNEL_MAX = 0xFFFFFFFF


def upscale(value: int, bits: int) -> int:
    """Replicate a bits-wide value until it fills 32 bits."""
    result = value
    for _ in range(1, 32 // bits):
        result = (result << bits) | value

    remainder = 32 % bits
    if remainder:
        result = (result << remainder) | (value >> (bits - remainder))
    return result


def _mask_shift_and_width(mask: int) -> Tuple[int, int]:
    shift = (mask & -mask).bit_length() - 1
    return shift, (mask >> shift).bit_length()


def extract_channel(value: int, mask: int, default: int = 0) -> int:
    """
    Pull the masked bits out of value and widen them to 32 bits.

    A zero mask yields default: 0 for color channels, CHANNEL_MAX for alpha.
    """
    if mask == 0:
        return default
    shift, width = _mask_shift_and_width(mask)
    return upscale((value & mask) >> shift, width)


@dataclass(frozen=True)
class PaletteEntry:
    red: int
    green: int
    blue: int


@dataclass(frozen=True)
class Pixel:
    """RGBA pixel with each channel scaled to the full 32-bit range."""
    red: int
    green: int
    blue: int
    alpha: int

    @classmethod
    def from_palette_entry(cls, entry: PaletteEntry) -> "Pixel":
        return cls(
            red=upscale(entry.red, 8),
            green=upscale(entry.green, 8),
            blue=upscale(entry.blue, 8),
            alpha=CHANNEL_MAX,
        )

    @classmethod
    def from_bitfields(cls, value: int, red: int, green: int, blue: int, alpha: int) -> "Pixel":
        return cls(
            red=extract_channel(value, red),
            green=extract_channel(value, green),
            blue=extract_channel(value, blue),
            alpha=extract_channel(value, alpha, CHANNEL_MAX),
        )

    def to_rgba8(self) -> Tuple[int, int, int, int]:
        """Top 8 bits of each channel."""
        return (self.red >> 24, self.green >> 24, self.blue >> 24, self.alpha >> 24)


class PixelFormat(Enum):
    """Decoding strategy, one per supported bit depth."""
    INDEXED_1 = 1
    INDEXED_2 = 2
    INDEXED_4 = 4
    INDEXED_8 = 8
    BITFIELDS_16 = 16
    RGB_24 = 24
    BITFIELDS_32 = 32

    @property
    def uses_bit_reader(self) -> bool:
        return self.value < 8

    @property
    def uses_palette(self) -> bool:
        return self.value <= 8


def read_palette(source: BinaryIO, header: BmpHeader) -> Tuple[PaletteEntry, ...]:
    """Read n_colors entries stored as B, G, R (plus one pad byte after V2)."""
    entry_size = header.palette_entry_size
    entries = []
    for _ in range(header.n_colors):
        raw = read_exact(source, entry_size)
        entries.append(PaletteEntry(red=raw[2], green=raw[1], blue=raw[0]))
    return tuple(entries)


class PixelStream:
    """
    Sequential pixel decoder over the pixel array of one BMP image.

    Owns the header, the palette and the only handle on the source (or the
    BitReader wrapping it) for the duration of the decode.
    """

    def __init__(
        self,
        header: BmpHeader,
        palette: Tuple[PaletteEntry, ...],
        source: BinaryIO,
    ):
        self.header = header
        self.palette = palette
        self.format = PixelFormat(header.bpp)
        self.source = source
        self.bit_reader: Optional[BitReader] = None
        # 16-bit pixels only see the low half of each mask.
        self.masks_16 = tuple(mask & 0xFFFF for mask in header.masks)
        if self.format.uses_bit_reader:
            self.bit_reader = BitReader(source, header.bpp, origin=header.pixel_offset)

        decoders: Dict[PixelFormat, Callable[[], Pixel]] = {
            PixelFormat.INDEXED_1: self._next_indexed_bits,
            PixelFormat.INDEXED_2: self._next_indexed_bits,
            PixelFormat.INDEXED_4: self._next_indexed_bits,
            PixelFormat.INDEXED_8: self._next_indexed_byte,
            PixelFormat.BITFIELDS_16: self._next_bitfields_16,
            PixelFormat.RGB_24: self._next_rgb_24,
            PixelFormat.BITFIELDS_32: self._next_bitfields_32,
        }
        self._decode = decoders[self.format]

    @classmethod
    def open(cls, source: BinaryIO) -> "PixelStream":
        """
        Read header and palette, then position source at the pixel array.

        Raises:
            HeaderTooLargeError: Header and palette run past the pixel offset.
            BmpError: Any header validation or I/O failure.
        """
        header = read_header(source)
        palette = read_palette(source, header)
        logger.debug(f"Loaded {len(palette)} palette entries")

        position = tell(source)
        if position > header.pixel_offset:
            raise HeaderTooLargeError(position, header.pixel_offset)
        seek_to(source, header.pixel_offset)

        return cls(header, palette, source)

    def _lookup(self, index: int) -> Pixel:
        if index >= len(self.palette):
            raise PaletteIndexError(index, len(self.palette))
        return Pixel.from_palette_entry(self.palette[index])

    def _next_indexed_bits(self) -> Pixel:
        return self._lookup(self.bit_reader.read_bits())

    def _next_indexed_byte(self) -> Pixel:
        return self._lookup(read_exact(self.source, 1)[0])

    def _next_bitfields_16(self) -> Pixel:
        return Pixel.from_bitfields(read_u16(self.source), *self.masks_16)

    def _next_rgb_24(self) -> Pixel:
        blue, green, red = read_exact(self.source, 3)
        return Pixel.from_palette_entry(PaletteEntry(red=red, green=green, blue=blue))

    def _next_bitfields_32(self) -> Pixel:
        return Pixel.from_bitfields(read_u32(self.source), *self.header.masks)

    def next_pixel(self) -> Pixel:
        """Decode one pixel, consuming exactly its bits or bytes."""
        return self._decode()

    def seek_to_byte_boundary(self, align: int) -> None:
        """Skip row padding up to the next align-byte boundary of the pixel array."""
        if self.bit_reader is not None:
            self.bit_reader.seek_to_byte_boundary(align)
        else:
            align_forward(self.source, align, self.header.pixel_offset)
