# planar_raw/palette_data.py
from __future__ import annotations

"""
Palette definitions and builders.

Exports:
  PALETTE_BLOCK_SIZE: int  # bytes in the trailing palette footer (32)
  decode_palette_block(block) -> RGBAPalette  # 16 colours, 12-bit RGB words
  encode_palette_block(palette) -> bytes     # inverse, used for fixtures
  build_grayscale_palette(size) -> RGBAPalette
  resolve_palette(payload, require_palette, bounds)
    -> (palette: RGBAPalette, planar: U8Bytes)
"""

from typing import Tuple

import numpy as np

from .core_types import RGBAPalette, SearchBounds, U8Bytes
from .errors import FormatError

PALETTE_BLOCK_COLOURS = 16
PALETTE_BLOCK_SIZE = PALETTE_BLOCK_COLOURS * 2
NIBBLE_SCALE = 17  # 0xF * 17 == 255


def decode_palette_block(block: U8Bytes | bytes) -> RGBAPalette:
    """
    Decode 16 big-endian words into RGBA colours.

    Each word holds 0RGB nibbles; the top nibble is ignored and every channel
    nibble is scaled to 0..255 by multiplying by 17. Alpha is always opaque.
    """
    raw = np.frombuffer(bytes(block), dtype=np.uint8)
    if raw.size != PALETTE_BLOCK_SIZE:
        raise ValueError(f"Palette block must be {PALETTE_BLOCK_SIZE} bytes.")
    words = raw.astype(np.uint16).reshape(-1, 2)
    words = (words[:, 0] << 8) | words[:, 1]

    out = np.empty((PALETTE_BLOCK_COLOURS, 4), dtype=np.uint8)
    out[:, 0] = ((words >> 8) & 0xF) * NIBBLE_SCALE
    out[:, 1] = ((words >> 4) & 0xF) * NIBBLE_SCALE
    out[:, 2] = (words & 0xF) * NIBBLE_SCALE
    out[:, 3] = 255
    return out


def encode_palette_block(palette: RGBAPalette) -> bytes:
    """Pack the first 16 palette entries back into 12-bit big-endian words."""
    rgb = np.asarray(palette, dtype=np.uint16)[:PALETTE_BLOCK_COLOURS, :3]
    if rgb.shape[0] != PALETTE_BLOCK_COLOURS:
        raise ValueError(f"need {PALETTE_BLOCK_COLOURS} colours to encode")
    nibbles = rgb // NIBBLE_SCALE
    words = (nibbles[:, 0] << 8) | (nibbles[:, 1] << 4) | nibbles[:, 2]
    return words.astype(">u2").tobytes()


def build_grayscale_palette(size: int) -> RGBAPalette:
    """Linear grey ramp from black (index 0) to white (index size-1)."""
    if size < 1:
        raise ValueError("palette size must be positive")
    top = max(1, size - 1)
    ramp = (np.arange(size, dtype=np.int64) * 255 // top).astype(np.uint8)
    out = np.empty((size, 4), dtype=np.uint8)
    out[:, 0] = ramp
    out[:, 1] = ramp
    out[:, 2] = ramp
    out[:, 3] = 255
    return out


def resolve_palette(
    payload: U8Bytes, require_palette: bool, bounds: SearchBounds
) -> Tuple[RGBAPalette, U8Bytes]:
    """
    Split the post-header payload into (palette, planar data).

    With require_palette the last 32 bytes are the palette footer; otherwise
    the whole payload is planar and a grey ramp covering the largest plane
    count in bounds is synthesised.
    """
    if require_palette:
        if payload.size < PALETTE_BLOCK_SIZE:
            raise FormatError("File too small to contain palette.")
        cut = payload.size - PALETTE_BLOCK_SIZE
        return decode_palette_block(payload[cut:]), payload[:cut]

    return build_grayscale_palette(bounds.grayscale_size), payload


__all__ = [
    "PALETTE_BLOCK_COLOURS",
    "PALETTE_BLOCK_SIZE",
    "NIBBLE_SCALE",
    "decode_palette_block",
    "encode_palette_block",
    "build_grayscale_palette",
    "resolve_palette",
]
