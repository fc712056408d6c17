"""
BMP Decoder - read Windows Bitmap files as a stream of RGBA pixels

Supports V2/V3/V4/V5 DIB headers, 1/2/4/8-bit indexed color, 16/32-bit
bitfields and 24-bit RGB.
"""

__version__ = "0.1.0"

from bmp_decoder.errors import (
    BmpError,
    MalformedSignatureError,
    UnsupportedHeaderSizeError,
    UnsupportedPlaneCountError,
    UnsupportedCompressionError,
    UnsupportedBitDepthError,
    BitfieldsUnsupportedError,
    BitfieldsNotContiguousError,
    BitfieldsOverlapError,
    InvalidWidthError,
    InvalidHeightError,
    HeaderTooLargeError,
    PaletteIndexError,
    BmpIOError,
    TruncatedDataError,
)
from bmp_decoder.bitreader import BitReader
from bmp_decoder.header import BmpHeader, BmpVersion, CompressionType, read_header, mask_is_contiguous
from bmp_decoder.pixels import Pixel, PaletteEntry, PixelFormat, PixelStream, upscale
from bmp_decoder.reader import BmpReader, ScanItem, open
from bmp_decoder.image import to_image, decode_image
from bmp_decoder.results import DecodeResult, scan_source

__all__ = [
    # Reader
    "open",
    "BmpReader",
    "ScanItem",
    # Header
    "BmpHeader",
    "BmpVersion",
    "CompressionType",
    "read_header",
    "mask_is_contiguous",
    # Pixels
    "Pixel",
    "PaletteEntry",
    "PixelFormat",
    "PixelStream",
    "BitReader",
    "upscale",
    # Pillow / results
    "to_image",
    "decode_image",
    "DecodeResult",
    "scan_source",
    # Errors
    "BmpError",
    "MalformedSignatureError",
    "UnsupportedHeaderSizeError",
    "UnsupportedPlaneCountError",
    "UnsupportedCompressionError",
    "UnsupportedBitDepthError",
    "BitfieldsUnsupportedError",
    "BitfieldsNotContiguousError",
    "BitfieldsOverlapError",
    "InvalidWidthError",
    "InvalidHeightError",
    "HeaderTooLargeError",
    "PaletteIndexError",
    "BmpIOError",
    "TruncatedDataError",
    "__version__",
]
