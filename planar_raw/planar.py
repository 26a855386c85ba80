# planar_raw/planar.py
from __future__ import annotations

"""
Planar (bitplane) <-> chunky index conversion.

Layout: `planes` consecutive blocks, each holding `height` rows of
`width // 8` bytes. Within a byte the leftmost pixel is the most significant
bit. Plane 0 supplies the least significant bit of every palette index.
"""

import numpy as np

from .core_types import DecodedImage, U8Bytes, U8Indices, U8Intensity
from .errors import GeometryMismatchError


def planar_byte_count(width: int, height: int, planes: int) -> int:
    return (width // 8) * height * planes


def _index_dtype(planes: int) -> type:
    return np.uint8 if planes <= 8 else np.uint16


def decode_planar(
    planar: U8Bytes | bytes, width: int, height: int, planes: int
) -> DecodedImage:
    """Reassemble palette indices from `planes` contiguous bitplanes."""
    if width % 8 != 0:
        raise GeometryMismatchError(f"Width {width} is not a multiple of 8.")
    data = np.frombuffer(planar, dtype=np.uint8)
    expected = planar_byte_count(width, height, planes)
    if data.size != expected:
        raise GeometryMismatchError(
            f"Planar data does not match geometry {width}x{height}x{planes}: "
            f"expected {expected} bytes, got {data.size}."
        )

    bytes_per_row = width // 8
    blocks = data.reshape(planes, height, bytes_per_row)
    # (planes, H, W) bits, MSB-first within each byte
    bits = np.unpackbits(blocks, axis=-1, bitorder="big")

    indices = np.zeros((height, width), dtype=np.uint16)
    for p in range(planes):
        indices |= bits[p].astype(np.uint16) << p
    return DecodedImage(indices=indices.astype(_index_dtype(planes)), planes=planes)


def encode_planar(indices: U8Indices, planes: int) -> bytes:
    """Split an index grid back into contiguous bitplanes (width multiple of 8)."""
    grid = np.asarray(indices)
    if grid.ndim != 2 or grid.shape[1] % 8 != 0:
        raise ValueError("expected (H,W) index grid with W a multiple of 8")
    out = [
        np.packbits(((grid >> p) & 1).astype(np.uint8), axis=-1, bitorder="big")
        for p in range(planes)
    ]
    return b"".join(block.tobytes() for block in out)


def intensity_grid(decoded: DecodedImage) -> U8Intensity:
    """
    Rescale indices to 0..255 as if the palette were a linear grey ramp.

    Only used for scoring; the real palette may carry colour.
    """
    max_colour = (1 << decoded.planes) - 1
    if max_colour == 0:
        return np.zeros(decoded.indices.shape, dtype=np.uint8)
    scaled = decoded.indices.astype(np.int64) * 255 // max_colour
    return scaled.astype(np.uint8)


__all__ = [
    "planar_byte_count",
    "decode_planar",
    "encode_planar",
    "intensity_grid",
]
