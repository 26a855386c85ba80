# planar_raw/image_io.py
from __future__ import annotations

"""
Raw input and PNG output helpers.

Decoded index grids are resolved through the palette to RGBA and written
with Pillow.
"""

from pathlib import Path

import numpy as np
from PIL import Image

from .core_types import DecodedImage, RawBuffer, RGBAPalette, assert_rgba_palette


def read_raw_buffer(path: Path, header_skip: int = 0) -> RawBuffer:
    """Read a whole raw dump; header skip is validated by RawBuffer."""
    return RawBuffer(data=Path(path).read_bytes(), header_skip=header_skip)


def indices_to_rgba(decoded: DecodedImage, palette: RGBAPalette) -> np.ndarray:
    """Look up every index in the palette. Returns uint8 (H,W,4)."""
    palette = assert_rgba_palette(palette)
    if decoded.indices.size and int(decoded.indices.max()) >= palette.shape[0]:
        raise ValueError(
            f"index {int(decoded.indices.max())} outside palette of {palette.shape[0]}"
        )
    return palette[decoded.indices]


def save_indexed_png(path: Path, decoded: DecodedImage, palette: RGBAPalette) -> Path:
    """Write decoded indices as an RGBA PNG. Returns the path written."""
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    rgba = np.ascontiguousarray(indices_to_rgba(decoded, palette))
    Image.fromarray(rgba).save(path)
    return path


__all__ = ["read_raw_buffer", "indices_to_rgba", "save_indexed_png"]
