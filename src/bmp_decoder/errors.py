"""
Error taxonomy for BMP decoding.

Every failure raised by the decoder derives from BmpError. Header errors
abort before any pixel is produced; per-pixel errors are delivered on the
failing ScanItem by the reader.
"""

from typing import Tuple


class BmpError(Exception):
    """Base class for all BMP decoding errors."""


class MalformedSignatureError(BmpError):
    """File does not start with the ASCII letters 'BM'."""

    def __init__(self, first: int, second: int):
        self.first = first
        self.second = second
        super().__init__(
            f"Wrong magic numbers: expected 'BM', got 0x{first:02X} 0x{second:02X}"
        )


class UnsupportedHeaderSizeError(BmpError):
    """DIB header size is not one of 12, 40, 108 or 124."""

    def __init__(self, size: int):
        self.size = size
        super().__init__(f"Unsupported DIB header size: {size}")


class UnsupportedPlaneCountError(BmpError):
    def __init__(self, planes: int):
        self.planes = planes
        super().__init__(f"Unsupported number of planes: {planes} (must be 1)")


class UnsupportedCompressionError(BmpError):
    """Compression type other than BI_RGB, BI_BITFIELDS or BI_ALPHABITFIELDS."""

    def __init__(self, compression: int):
        self.compression = compression
        super().__init__(f"Unsupported compression type: {compression}")


class UnsupportedBitDepthError(BmpError):
    def __init__(self, bpp: int):
        self.bpp = bpp
        super().__init__(f"Unsupported bits per pixel: {bpp}")


class BitfieldsUnsupportedError(BmpError):
    """Explicit bitfield masks on a depth other than 16 or 32."""

    def __init__(self, bpp: int):
        self.bpp = bpp
        super().__init__(f"Bitfields are not supported for {bpp} bits per pixel")


class _MaskError(BmpError):
    reason = ""

    def __init__(self, red: int, green: int, blue: int, alpha: int):
        self.red = red
        self.green = green
        self.blue = blue
        self.alpha = alpha
        super().__init__(
            f"Bitfields {self.reason}: red=0x{red:08X} green=0x{green:08X} "
            f"blue=0x{blue:08X} alpha=0x{alpha:08X}"
        )

    @property
    def masks(self) -> Tuple[int, int, int, int]:
        return (self.red, self.green, self.blue, self.alpha)


class BitfieldsNotContiguousError(_MaskError):
    """At least one channel mask has a gap in its set bits."""

    reason = "not contiguous"


class BitfieldsOverlapError(_MaskError):
    """Two channel masks share at least one set bit."""

    reason = "overlap"


class InvalidWidthError(BmpError):
    def __init__(self, width: int):
        self.width = width
        super().__init__(f"Invalid width: {width}")


class InvalidHeightError(BmpError):
    def __init__(self, height: int):
        self.height = height
        super().__init__(f"Invalid height: {height}")


class HeaderTooLargeError(BmpError):
    """Header and palette end past the declared pixel array offset."""

    def __init__(self, position: int, pixel_offset: int):
        self.position = position
        self.pixel_offset = pixel_offset
        super().__init__(
            f"Header ends at byte {position}, past the declared pixel "
            f"offset {pixel_offset}"
        )


class PaletteIndexError(BmpError):
    """Indexed pixel refers to an entry the palette does not have."""

    def __init__(self, index: int, n_colors: int):
        self.index = index
        self.n_colors = n_colors
        super().__init__(f"Palette index {index} out of range ({n_colors} colors)")


class BmpIOError(BmpError, OSError):
    """Underlying read or seek failure."""


class TruncatedDataError(BmpIOError):
    """Source ended before the requested bytes could be read."""

    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"Unexpected end of data: wanted {expected} bytes, got {got}")
