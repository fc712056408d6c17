"""Pillow adapter: turn decoded pixels into an in-memory RGBA image."""

import logging
from typing import BinaryIO

from PIL import Image

from .reader import BmpReader, open as open_bmp

logger = logging.getLogger(__name__)


def to_image(reader: BmpReader) -> Image.Image:
    """
    Drain reader into an RGBA image with row 0 at the top.

    Raises:
        BmpError: First decode error encountered.
    """
    width, height = reader.width, reader.height
    img = Image.new("RGBA", (width, height))
    pixels = img.load()

    for x, y, pixel in reader.pixels():
        pixels[x, height - 1 - y] = pixel.to_rgba8()

    logger.debug(f"Built {img.mode} image {img.size}")
    return img


def decode_image(source: BinaryIO) -> Image.Image:
    """Open a BMP source and decode it into a Pillow image."""
    return to_image(open_bmp(source))
