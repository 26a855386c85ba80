# planar_raw/convert.py
from __future__ import annotations

"""
Per-file conversion driver.

Pipeline for one raw dump:
  read -> palette footer / grey ramp -> enumerate geometries -> stripe score
  -> rank -> decode the kept candidates -> write one PNG per candidate.

convert_buffer() is pure and returns decoded candidates; convert_file() adds
the file reading, output naming and PNG writing around it.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .candidates import generate_candidates, rank_candidates
from .core_types import (
    DecodedImage,
    GeometryCandidate,
    RawBuffer,
    RGBAPalette,
    SearchBounds,
)
from .errors import InputError
from .image_io import read_raw_buffer, save_indexed_png
from .palette_data import resolve_palette
from .planar import decode_planar
from .scoring import score_candidates
from .utils import (
    debug_log,
    format_score,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
)


@dataclass
class ConvertOptions:
    """Conversion settings shared by every file in a run."""

    max_candidates: int = 5
    raw_file_pattern: str = "*.raw"
    require_palette: bool = True
    bounds: SearchBounds = field(default_factory=SearchBounds)
    header_skip: int = 0
    workers: int = 1  # scoring threads per file
    debug: bool = False

    def validate(self) -> "ConvertOptions":
        if self.header_skip < 0:
            raise InputError("Header skip cannot be negative.")
        if self.max_candidates < 1:
            self.max_candidates = 1
        if self.workers < 1:
            self.workers = 1
        return self


@dataclass
class ConversionResult:
    """Palette plus the ranked, decoded candidates for one input."""

    palette: RGBAPalette
    planar_length: int
    decoded: List[Tuple[GeometryCandidate, DecodedImage]]

    @property
    def candidates(self) -> List[GeometryCandidate]:
        return [c for c, _ in self.decoded]


def convert_buffer(raw: RawBuffer, options: ConvertOptions) -> ConversionResult:
    """Resolve palette, search geometries and decode the best candidates."""
    palette, planar = resolve_palette(
        raw.payload, options.require_palette, options.bounds
    )

    if options.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Bytes", len(raw)),
                    ("Header", raw.header_skip),
                    ("Planar", int(planar.size)),
                    ("Palette", "footer" if options.require_palette else "grey"),
                    ("Colours", int(palette.shape[0])),
                ]
            )
        )

    pending = generate_candidates(
        int(planar.size), int(palette.shape[0]), options.bounds
    )
    if options.debug:
        debug_log(f"geometries to score: {len(pending)}")
    scored = score_candidates(planar, pending, workers=options.workers)
    ranked = rank_candidates(scored, options.max_candidates)
    if options.debug:
        for rank, c in enumerate(ranked, start=1):
            debug_log(f"  #{rank:02d} {c.label}  score={format_score(c.score)}")

    decoded = [
        (c, decode_planar(planar, c.width, c.height, c.planes)) for c in ranked
    ]
    return ConversionResult(
        palette=palette, planar_length=int(planar.size), decoded=decoded
    )


def candidate_output_path(
    base: Path, rank: int, candidate: GeometryCandidate, suffix: Optional[str] = None
) -> Path:
    """<stem>_cand{NN}_{w}x{h}_p{planes}<suffix>, NN is the 1-based rank."""
    base = Path(base)
    ext = suffix if suffix is not None else (base.suffix or ".png")
    name = (
        f"{base.stem}_cand{rank:02d}_"
        f"{candidate.width}x{candidate.height}_p{candidate.planes}{ext}"
    )
    return base.with_name(name)


def convert_file(src: Path, dst: Path, options: ConvertOptions) -> List[Path]:
    """
    Convert one raw file, writing one PNG per kept candidate next to dst.

    Raises ConversionError subclasses; nothing is written when the search
    fails.
    """
    t_start = time.perf_counter()
    options.validate()
    raw = read_raw_buffer(Path(src), options.header_skip)
    result = convert_buffer(raw, options)

    Path(dst).parent.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for rank, (candidate, image) in enumerate(result.decoded, start=1):
        out = candidate_output_path(Path(dst), rank, candidate, suffix=".png")
        save_indexed_png(out, image, result.palette)
        written.append(out)
        log(
            f"OK {Path(src).name} -> {out} "
            f"({candidate.width}x{candidate.height}, {candidate.planes} planes, "
            f"score {format_score(candidate.score)})"
        )

    if options.debug:
        debug_log(f"Total {format_seconds_compact(time.perf_counter() - t_start)}")
    return written


__all__ = [
    "ConvertOptions",
    "ConversionResult",
    "convert_buffer",
    "candidate_output_path",
    "convert_file",
]
