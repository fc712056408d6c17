"""
Whole-image decode results.

Provides a result structure the CLI can print as a summary or dump as
JSON after decoding every pixel of a file.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

from .errors import BmpError
from .header import BmpHeader
from .reader import open as open_bmp

logger = logging.getLogger(__name__)

# Per-pixel errors kept verbatim; the rest are only counted.
MAX_REPORTED_ERRORS = 10


@dataclass
class DecodeResult:
    """
    Outcome of decoding one BMP source end to end.

    Attributes:
        ok: Whether the header and every pixel decoded
        name: Label of the decoded source (usually a file name)
        header: Header fields (empty if the header was rejected)
        pixels_decoded: Number of pixels that decoded successfully
        pixel_errors: Number of pixels that failed
        first_error_at: (x, y) of the first failing pixel, if any
        warnings: Non-blocking observations
        errors: Error messages (header error, or the first pixel errors)
    """
    ok: bool
    name: str
    header: Dict[str, Any] = field(default_factory=dict)
    pixels_decoded: int = 0
    pixel_errors: int = 0
    first_error_at: Optional[Tuple[int, int]] = None
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_error(self, message: str) -> None:
        """Add an error message and mark result as failed."""
        self.errors.append(message)
        self.ok = False

    def to_summary(self) -> str:
        """Human-readable multi-line summary."""
        status = "OK" if self.ok else "FAILED"
        lines = [f"[{status}] {self.name}"]

        if self.header:
            lines.append(
                f"  {self.header['width']}x{self.header['height']} "
                f"{self.header['bpp']}bpp {self.header['version']} "
                f"{self.header['compression']}"
            )
        if self.pixels_decoded or self.pixel_errors:
            lines.append(f"  Pixels: {self.pixels_decoded:,} decoded, {self.pixel_errors:,} failed")
        if self.first_error_at is not None:
            lines.append(f"  First failure at x={self.first_error_at[0]} y={self.first_error_at[1]}")

        if self.warnings:
            lines.append("  Warnings:")
            for warn in self.warnings:
                lines.append(f"    - {warn}")

        if self.errors:
            lines.append("  Errors:")
            for err in self.errors:
                lines.append(f"    - {err}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "ok": self.ok,
            "name": self.name,
            "header": self.header,
            "pixels_decoded": self.pixels_decoded,
            "pixel_errors": self.pixel_errors,
            "first_error_at": list(self.first_error_at) if self.first_error_at else None,
            "warnings": self.warnings,
            "errors": self.errors,
        }

    @classmethod
    def success(cls, name: str, **kwargs) -> "DecodeResult":
        """Create a result for a source whose header was accepted."""
        return cls(ok=True, name=name, **kwargs)

    @classmethod
    def failure(cls, name: str, error: str, **kwargs) -> "DecodeResult":
        result = cls(ok=False, name=name, **kwargs)
        result.errors.append(error)
        return result


def header_to_dict(header: BmpHeader) -> Dict[str, Any]:
    return {
        "version": header.version.name,
        "width": header.width,
        "height": header.abs_height,
        "top_down": header.top_down,
        "bpp": header.bpp,
        "compression": header.compression.name,
        "colors": header.n_colors,
        "pixel_offset": header.pixel_offset,
        "row_stride": header.row_stride,
        "masks": [f"0x{m:08X}" for m in header.masks],
    }


def scan_source(source: BinaryIO, name: str = "<stream>") -> DecodeResult:
    """
    Decode every pixel of source and report what happened.

    Never raises for BMP errors; they are recorded on the result.
    """
    try:
        reader = open_bmp(source)
    except BmpError as e:
        logger.debug(f"{name}: header rejected: {e}")
        return DecodeResult.failure(name, f"{type(e).__name__}: {e}")

    result = DecodeResult.success(name, header=header_to_dict(reader.header))
    for item in reader:
        if item.ok:
            result.pixels_decoded += 1
            continue
        result.pixel_errors += 1
        if result.first_error_at is None:
            result.first_error_at = (item.x, item.y)
        if result.pixel_errors <= MAX_REPORTED_ERRORS:
            result.add_error(f"({item.x}, {item.y}) {type(item.error).__name__}: {item.error}")

    if result.pixel_errors > MAX_REPORTED_ERRORS:
        result.add_warning(f"{result.pixel_errors - MAX_REPORTED_ERRORS} further pixel errors not listed")
    return result
