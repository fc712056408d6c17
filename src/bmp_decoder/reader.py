"""
Row-major pixel iteration over a BMP image.

Coordinates use a bottom-left origin: y == 0 is the bottom row of the
picture for both bottom-up and top-down files.
"""

import logging
from typing import BinaryIO, Iterator, NamedTuple, Optional, Tuple

from .errors import BmpError
from .header import BmpHeader
from .pixels import Pixel, PixelStream

logger = logging.getLogger(__name__)

ROW_ALIGNMENT = 4


class ScanItem(NamedTuple):
    """One iteration step: the pixel at (x, y), or the error that replaced it."""
    x: int
    y: int
    pixel: Optional[Pixel]
    error: Optional[BmpError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Pixel:
        if self.error is not None:
            raise self.error
        return self.pixel


class BmpReader:
    """
    Finite, non-restartable iterator of ScanItem over every pixel.

    Decode errors do not stop iteration; they are carried on the item for
    the coordinate that failed.
    """

    def __init__(self, pixels: PixelStream):
        self._pixels = pixels
        self.header: BmpHeader = pixels.header
        self._width = self.header.width
        self._height = self.header.abs_height
        self._bottom_up = not self.header.top_down
        self._x = 0
        self._row = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def _y(self) -> int:
        if self._bottom_up:
            return self._row
        return self._height - 1 - self._row

    def __iter__(self) -> "BmpReader":
        return self

    def __next__(self) -> ScanItem:
        if self._row >= self._height:
            raise StopIteration

        if self._x >= self._width:
            self._x = 0
            self._row += 1
            if self._row >= self._height:
                raise StopIteration
            try:
                self._pixels.seek_to_byte_boundary(ROW_ALIGNMENT)
            except BmpError as e:
                logger.debug(f"Row realignment failed at row {self._row}: {e}")
                item = ScanItem(self._x, self._y(), None, e)
                self._x += 1
                return item

        x, y = self._x, self._y()
        self._x += 1
        try:
            return ScanItem(x, y, self._pixels.next_pixel())
        except BmpError as e:
            return ScanItem(x, y, None, e)

    def pixels(self) -> Iterator[Tuple[int, int, Pixel]]:
        """Yield (x, y, pixel), raising the first decode error."""
        for item in self:
            yield item.x, item.y, item.unwrap()


def open(source: BinaryIO) -> BmpReader:
    """
    Start decoding a BMP from a seekable binary source at offset 0.

    The caller keeps ownership of the source and must not touch it while
    the reader is in use.

    Raises:
        BmpError: Header, palette or layout is invalid or unreadable.
    """
    reader = BmpReader(PixelStream.open(source))
    logger.debug(f"Opened {reader.width}x{reader.height} BMP")
    return reader
