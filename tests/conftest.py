"""Shared fixtures: synthetic planar dumps with known geometry."""

import numpy as np
import pytest

from planar_raw.palette_data import encode_palette_block
from planar_raw.planar import encode_planar


def band_indices(width, height, planes, band=20):
    """Every row identical: vertical colour bands `band` pixels wide."""
    colours = 1 << planes
    row = (np.arange(width) // band) % colours
    return np.tile(row, (height, 1)).astype(np.uint8)


@pytest.fixture
def band_planar():
    """320x100, 4 planes: 16,000 bytes of planar data."""
    return encode_planar(band_indices(320, 100, 4), 4)


@pytest.fixture
def footer_palette():
    """16 distinct colours as RGBA rows, multiples of 17 per channel."""
    pal = np.zeros((16, 4), dtype=np.uint8)
    for i in range(16):
        pal[i] = (i * 17, (15 - i) * 17, (i * 7 % 16) * 17, 255)
    return pal


@pytest.fixture
def footer_bytes(footer_palette):
    return encode_palette_block(footer_palette)
