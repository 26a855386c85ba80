# planar_raw/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import math
from dataclasses import dataclass, replace
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import InputError

# Basic aliases

U8Bytes = NDArray[np.uint8]  # (N,) raw bytes
U8Indices = NDArray[np.uint8]  # (H, W) palette indices
U8Intensity = NDArray[np.uint8]  # (H, W) 0..255 intensities
RGBAPalette = NDArray[np.uint8]  # (P, 4) RGBA

# Ranking preferences for otherwise tied candidates.
PREFERRED_WIDTH = 320
SECONDARY_WIDTH = 256

# Value objects


@dataclass(frozen=True)
class RawBuffer:
    """Immutable raw file bytes plus the number of header bytes to ignore."""

    data: bytes
    header_skip: int = 0

    def __post_init__(self) -> None:
        if self.header_skip < 0:
            raise InputError("Header skip cannot be negative.")
        if self.header_skip > len(self.data):
            raise InputError("Header skip exceeds file size.")

    def __len__(self) -> int:
        return len(self.data)

    @property
    def payload(self) -> U8Bytes:
        """Read-only uint8 view of the bytes after the header."""
        arr = np.frombuffer(self.data, dtype=np.uint8)[self.header_skip :]
        arr.flags.writeable = False
        return arr


@dataclass(frozen=True)
class GeometryCandidate:
    """One (width, height, planes) hypothesis; lower score is more plausible."""

    width: int
    height: int
    planes: int
    score: float = math.inf  # pending until scored

    @property
    def bytes_per_row_per_plane(self) -> int:
        return self.width // 8

    @property
    def bytes_per_row(self) -> int:
        return self.bytes_per_row_per_plane * self.planes

    @property
    def byte_count(self) -> int:
        return self.bytes_per_row * self.height

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}_p{self.planes}"

    def with_score(self, score: float) -> "GeometryCandidate":
        return replace(self, score=float(score))

    def rank_key(self) -> Tuple[float, int, int, int]:
        """Sort key: score, closeness to 320, closeness to 256, more planes first."""
        return (
            self.score,
            abs(self.width - PREFERRED_WIDTH),
            abs(self.width - SECONDARY_WIDTH),
            -self.planes,
        )


@dataclass(frozen=True)
class DecodedImage:
    """Dense row-major grid of palette indices for one geometry."""

    indices: U8Indices  # (H, W)
    planes: int

    @property
    def height(self) -> int:
        return int(self.indices.shape[0])

    @property
    def width(self) -> int:
        return int(self.indices.shape[1])


@dataclass(frozen=True)
class SearchBounds:
    """Geometry search space. Defaults match common planar screen modes."""

    min_planes: int = 3
    max_planes: int = 6
    min_width: int = 64
    max_width: int = 640
    min_height: int = 1
    max_height: int = 1024
    width_increment: int = 16

    def __post_init__(self) -> None:
        if self.width_increment < 1:
            raise InputError("Width increment must be at least 1.")
        if self.min_width < 1:
            raise InputError("Minimum width must be at least 1.")
        if self.min_height < 1:
            raise InputError("Minimum height must be at least 1.")
        if self.max_height < 1:
            raise InputError("Maximum height must be at least 1.")

    @property
    def plane_range(self) -> range:
        lo = max(1, self.min_planes)
        hi = max(lo, self.max_planes)
        return range(lo, hi + 1)

    @property
    def widths(self) -> range:
        return range(self.min_width, self.max_width + 1, self.width_increment)

    @property
    def grayscale_size(self) -> int:
        """Palette size that covers the largest plane count searched."""
        return 1 << max(1, max(self.min_planes, self.max_planes))


# Small helpers


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def assert_rgba_palette(palette: np.ndarray) -> RGBAPalette:
    """Validate a uint8 (P,4) palette with P a power of two >= 2."""
    if palette.dtype != np.uint8 or palette.ndim != 2 or palette.shape[1] != 4:
        raise TypeError("expected uint8 (P,4) palette")
    if palette.shape[0] < 2 or not is_power_of_two(int(palette.shape[0])):
        raise ValueError("palette length must be a power of two >= 2")
    return palette  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "U8Bytes",
    "U8Indices",
    "U8Intensity",
    "RGBAPalette",
    "PREFERRED_WIDTH",
    "SECONDARY_WIDTH",
    # value objects
    "RawBuffer",
    "GeometryCandidate",
    "DecodedImage",
    "SearchBounds",
    # helpers
    "is_power_of_two",
    "assert_rgba_palette",
]
