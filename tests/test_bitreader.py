"""Tests for the sub-byte chunk reader."""

import io

import pytest

from bmp_decoder.bitreader import BitReader
from bmp_decoder.errors import TruncatedDataError


class TestReadBits:
    """Chunk extraction order and widths."""

    @pytest.mark.parametrize("width", [1, 2, 4, 8])
    def test_all_ones_pattern(self, width):
        """Every chunk of an all-ones byte is all ones."""
        reader = BitReader(io.BytesIO(b"\xff" * 128), width)
        for _ in range(8 // width):
            assert reader.read_bits() == (1 << width) - 1

    def test_single_bits_low_to_high(self):
        reader = BitReader(io.BytesIO(bytes([0b10110010])), 1)
        bits = [reader.read_bits() for _ in range(8)]
        assert bits == [0, 1, 0, 0, 1, 1, 0, 1]

    def test_two_bit_chunks(self):
        reader = BitReader(io.BytesIO(bytes([0b10110010])), 2)
        assert [reader.read_bits() for _ in range(4)] == [0b10, 0b00, 0b11, 0b10]

    def test_nibbles_low_first(self):
        reader = BitReader(io.BytesIO(b"\xb2\x7f"), 4)
        assert [reader.read_bits() for _ in range(4)] == [0x2, 0xB, 0xF, 0x7]

    def test_full_bytes(self):
        reader = BitReader(io.BytesIO(b"\x01\xfe"), 8)
        assert reader.read_bits() == 0x01
        assert reader.read_bits() == 0xFE

    def test_new_byte_only_when_buffer_empty(self):
        source = io.BytesIO(b"\x0f\xf0")
        reader = BitReader(source, 4)
        reader.read_bits()
        assert source.tell() == 1
        reader.read_bits()
        assert source.tell() == 1
        reader.read_bits()
        assert source.tell() == 2

    def test_end_of_data_raises(self):
        reader = BitReader(io.BytesIO(b""), 2)
        with pytest.raises(TruncatedDataError):
            reader.read_bits()

    @pytest.mark.parametrize("width", [0, 3, 5, 16])
    def test_invalid_chunk_width(self, width):
        with pytest.raises(ValueError):
            BitReader(io.BytesIO(b""), width)


class TestSeekToByteBoundary:
    """Realignment between rows."""

    def test_aligned_position_is_noop(self):
        source = io.BytesIO(bytes(16))
        source.seek(8)
        BitReader(source, 1).seek_to_byte_boundary(4)
        assert source.tell() == 8

    @pytest.mark.parametrize("start,expected", [(1, 4), (5, 8), (6, 8), (7, 8)])
    def test_advances_by_deficit(self, start, expected):
        source = io.BytesIO(bytes(16))
        source.seek(start)
        BitReader(source, 2).seek_to_byte_boundary(4)
        assert source.tell() == expected

    def test_discards_partial_byte(self):
        reader = BitReader(io.BytesIO(b"\x21\x43"), 4)
        assert reader.read_bits() == 0x1
        reader.seek_to_byte_boundary(1)
        assert reader.bits_remaining == 0
        assert reader.read_bits() == 0x3

    def test_alignment_counted_from_origin(self):
        source = io.BytesIO(bytes(16))
        source.seek(3)
        BitReader(source, 1, origin=2).seek_to_byte_boundary(4)
        assert source.tell() == 6

    @pytest.mark.parametrize("align", [0, -4])
    def test_non_positive_alignment_rejected(self, align):
        reader = BitReader(io.BytesIO(bytes(4)), 1)
        with pytest.raises(ValueError):
            reader.seek_to_byte_boundary(align)
