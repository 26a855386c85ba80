# planar_raw/candidates.py
from __future__ import annotations

"""
Geometry candidate search.

Exports:
- generate_candidates(planar_length, palette_size, bounds) -> List[GeometryCandidate]
- rank_candidates(candidates, max_count) -> List[GeometryCandidate]
- find_candidates(planar, palette_size, bounds, max_count, workers=1) -> List[GeometryCandidate]

Notes:
- Generation is a plain enumeration over (planes, width); height comes from
  exact division of the planar length, so every candidate consumes the data
  exactly. Scoring happens separately (see scoring.py).
"""

from typing import List, Sequence

from .core_types import GeometryCandidate, SearchBounds, U8Bytes
from .errors import NoCandidateError
from .scoring import score_candidates


def generate_candidates(
    planar_length: int, palette_size: int, bounds: SearchBounds
) -> List[GeometryCandidate]:
    """All (width, height, planes) triples whose byte footprint equals planar_length."""
    out: List[GeometryCandidate] = []
    for planes in bounds.plane_range:
        if (1 << planes) > palette_size:
            # palette cannot represent that many indices
            continue
        for width in bounds.widths:
            if width % 8 != 0:
                continue
            bytes_per_row = (width // 8) * planes
            if bytes_per_row == 0:
                continue
            if planar_length % bytes_per_row != 0:
                continue
            height = planar_length // bytes_per_row
            if height < bounds.min_height or height > bounds.max_height:
                continue
            out.append(GeometryCandidate(width=width, height=height, planes=planes))
    return out


def rank_candidates(
    candidates: Sequence[GeometryCandidate], max_count: int
) -> List[GeometryCandidate]:
    """
    Best-first ordering with deterministic tie-breaks, truncated to max_count.

    Order: score asc, |w-320| asc, |w-256| asc, planes desc.
    """
    if not candidates:
        raise NoCandidateError("No geometry candidate consumed the planar data.")
    ranked = sorted(candidates, key=GeometryCandidate.rank_key)
    return ranked[: max(1, int(max_count))]


def find_candidates(
    planar: U8Bytes,
    palette_size: int,
    bounds: SearchBounds,
    max_count: int,
    workers: int = 1,
) -> List[GeometryCandidate]:
    """generate -> score -> rank."""
    pending = generate_candidates(int(planar.size), palette_size, bounds)
    scored = score_candidates(planar, pending, workers=workers)
    return rank_candidates(scored, max_count)


__all__ = ["generate_candidates", "rank_candidates", "find_candidates"]
