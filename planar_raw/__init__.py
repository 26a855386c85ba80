# planar_raw/__init__.py
"""
planar_raw package.

Purpose:
  Recover width, height and bitplane count of raw planar bitmap dumps and
  export the best guesses as PNG. See raw_to_png.py for the CLI.

Public API:
  convert_file      : read one raw file, write ranked candidate PNGs.
  convert_buffer    : pure search + decode for an in-memory RawBuffer.
  find_candidates   : generate -> score -> rank geometries.
  decode_planar     : bitplanes to palette index grid.
  stripe_score      : row-coherence plausibility score (lower is better).
  resolve_palette   : palette footer or synthetic grey ramp.
  core_types        : RawBuffer, GeometryCandidate, DecodedImage, SearchBounds.
  errors            : ConversionError and its subclasses.

Quick start:
  from planar_raw import ConvertOptions, convert_file
  convert_file(Path("pic.raw"), Path("pic.png"), ConvertOptions())
"""

__version__ = "0.1.0"

from . import core_types
from . import errors
from . import palette_data
from . import planar
from . import scoring
from . import candidates
from . import utils

from .core_types import DecodedImage, GeometryCandidate, RawBuffer, SearchBounds
from .errors import (
    ConversionError,
    FormatError,
    GeometryMismatchError,
    InputError,
    NoCandidateError,
)
from .palette_data import resolve_palette
from .planar import decode_planar
from .scoring import stripe_score
from .candidates import find_candidates, generate_candidates, rank_candidates
from .convert import ConvertOptions, convert_buffer, convert_file

__all__ = [
    "__version__",
    "core_types",
    "errors",
    "palette_data",
    "planar",
    "scoring",
    "candidates",
    "utils",
    "DecodedImage",
    "GeometryCandidate",
    "RawBuffer",
    "SearchBounds",
    "ConversionError",
    "FormatError",
    "GeometryMismatchError",
    "InputError",
    "NoCandidateError",
    "resolve_palette",
    "decode_planar",
    "stripe_score",
    "find_candidates",
    "generate_candidates",
    "rank_candidates",
    "ConvertOptions",
    "convert_buffer",
    "convert_file",
]
