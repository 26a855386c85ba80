# planar_raw/scoring.py
from __future__ import annotations

"""
Stripe scoring for geometry hypotheses.

A correct stride keeps neighbouring scanlines similar; a wrong width shifts
every row against the previous one and shows up as noisy, uneven row-to-row
differences. The score is mean + population stddev of the per-row mean
absolute difference, so lower is more plausible.
"""

import sys
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

import numpy as np

from .core_types import GeometryCandidate, U8Bytes
from .planar import decode_planar, intensity_grid, planar_byte_count

WORST_SCORE = sys.float_info.max


def row_differences(intensity: np.ndarray) -> np.ndarray:
    """Mean absolute per-column difference for each vertically adjacent row pair."""
    grid = intensity.astype(np.int16, copy=False)
    return np.abs(grid[1:, :] - grid[:-1, :]).mean(axis=1)


def stripe_score(planar: U8Bytes | bytes, width: int, height: int, planes: int) -> float:
    """Score one geometry; WORST_SCORE when it cannot be evaluated."""
    data = np.frombuffer(planar, dtype=np.uint8)
    if width % 8 != 0 or data.size != planar_byte_count(width, height, planes):
        return WORST_SCORE
    if height < 2:
        return WORST_SCORE

    intensity = intensity_grid(decode_planar(data, width, height, planes))
    diffs = row_differences(intensity)
    return float(np.mean(diffs) + np.std(diffs))


def score_candidate(planar: U8Bytes, candidate: GeometryCandidate) -> GeometryCandidate:
    return candidate.with_score(
        stripe_score(planar, candidate.width, candidate.height, candidate.planes)
    )


def score_candidates(
    planar: U8Bytes,
    candidates: Sequence[GeometryCandidate],
    workers: int = 1,
) -> List[GeometryCandidate]:
    """
    Score every candidate against the shared read-only planar slice.

    Results keep the input order whatever the worker count, so ranking stays
    deterministic.
    """
    if workers <= 1 or len(candidates) < 2:
        return [score_candidate(planar, c) for c in candidates]
    with ThreadPoolExecutor(max_workers=workers) as ex:
        return list(ex.map(lambda c: score_candidate(planar, c), candidates))


__all__ = [
    "WORST_SCORE",
    "row_differences",
    "stripe_score",
    "score_candidate",
    "score_candidates",
]
