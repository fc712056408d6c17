"""Sub-byte chunk reader used by the 1, 2 and 4-bit indexed formats."""

from typing import BinaryIO

from .stream import align_forward, read_u8

VALID_CHUNK_WIDTHS = (1, 2, 4, 8)


class BitReader:
    """
    Read fixed-width bit chunks from a byte source.

    Chunks come out low-order bits first within each byte. The partially
    consumed byte is kept in ``byte`` with ``bits_remaining`` bits left.
    """

    def __init__(self, source: BinaryIO, bits_per_chunk: int, origin: int = 0):
        if bits_per_chunk not in VALID_CHUNK_WIDTHS:
            raise ValueError(
                f"Chunk width must be one of {VALID_CHUNK_WIDTHS}, got {bits_per_chunk}"
            )
        self.source = source
        self.bits_per_chunk = bits_per_chunk
        self.origin = origin
        self.byte = 0
        self.bits_remaining = 0

    def read_bits(self) -> int:
        if self.bits_per_chunk == 8:
            return read_u8(self.source)

        if self.bits_remaining == 0:
            self.byte = read_u8(self.source)
            self.bits_remaining = 8

        result = self.byte & ((1 << self.bits_per_chunk) - 1)
        self.byte >>= self.bits_per_chunk
        self.bits_remaining -= self.bits_per_chunk
        return result

    def seek_to_byte_boundary(self, align: int) -> None:
        """Skip to the next align-byte boundary and drop any buffered bits."""
        align_forward(self.source, align, self.origin)
        self.byte = 0
        self.bits_remaining = 0
