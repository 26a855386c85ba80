#!/usr/bin/env python3
"""
raw_to_png.py
Guess the geometry of raw planar bitmap dumps and export the best candidates as PNG.

Usage:
  python raw_to_png.py INPUT [OUTPUT] -n 5 --min-planes 3 --max-planes 6 --min-width 64 --max-width 640 --debug

Input:
  A single raw file, or a folder scanned (non-recursively) with --raw-file-pattern.
  By default the last 32 bytes hold a 16 colour palette (12-bit RGB words);
  --no-require-palette treats the whole file as bitplanes with a grey palette.

Output:
  One PNG per kept candidate, named <stem>_candNN_<W>x<H>_p<planes>.png.
  Single file: next to INPUT unless OUTPUT is given. Folder: INPUT/out unless
  OUTPUT is given.

Exit status:
  0 every file converted, 1 some file had no geometry candidate,
  2 some file failed outright or the input was not found.

Notes:
  CPU bound. Scoring can use threads (--workers); folders can convert several
  files in parallel processes (--jobs) with output printed in file order.
"""

from __future__ import annotations

import argparse
import io
import os
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from contextlib import redirect_stdout
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from planar_raw.convert import ConvertOptions, convert_file
from planar_raw.core_types import SearchBounds
from planar_raw.errors import ConversionError, InputError, NoCandidateError
from planar_raw.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

STATUS_OK = "ok"
STATUS_NO_CANDIDATE = "no-candidate"
STATUS_FAILED = "failed"

# CLI args & small helpers


def _default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for raw geometry guessing.

    Returns:
      argparse.Namespace with:
        input: Path to raw file or folder
        output: optional output file (single input) or folder (folder input)
        max_candidates: candidates written per file
        raw_file_pattern: glob used in folder mode
        require_palette: expect a 32-byte palette footer
        min/max planes, widths, heights, width_increment: search bounds
        header_skip: bytes ignored at the start of each file
        jobs: files processed in parallel
        workers: scoring threads per file
        debug: bool for verbose search details
    """
    parser = argparse.ArgumentParser(
        prog="raw_to_png",
        description="Guess geometry of raw planar bitmaps and write candidate PNGs.",
    )
    parser.add_argument("input", type=Path, help="Input raw file or folder of raw files")
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="Output file (single input) or folder (folder input)",
    )
    parser.add_argument(
        "-n",
        "--max-candidates",
        type=int,
        default=5,
        help="How many best geometry candidates to emit per file.",
    )
    parser.add_argument(
        "-p",
        "--raw-file-pattern",
        default="*.raw",
        help="Filename pattern for raw files in folder mode.",
    )
    parser.add_argument(
        "--require-palette",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Expect a 32-byte palette footer; otherwise use a grey palette.",
    )
    parser.add_argument("--min-planes", type=int, default=3, help="Minimum bitplanes.")
    parser.add_argument("--max-planes", type=int, default=6, help="Maximum bitplanes.")
    parser.add_argument("--min-width", type=int, default=64, help="Minimum width (px).")
    parser.add_argument("--max-width", type=int, default=640, help="Maximum width (px).")
    parser.add_argument("--min-height", type=int, default=1, help="Minimum height (px).")
    parser.add_argument(
        "--max-height", type=int, default=1024, help="Maximum height (px)."
    )
    parser.add_argument(
        "--width-increment",
        type=int,
        default=16,
        help="Step (px) between tested widths.",
    )
    parser.add_argument(
        "--header-skip",
        type=int,
        default=0,
        help="Bytes to ignore at the start of each file.",
    )
    parser.add_argument("--jobs", type=int, default=1, help="Files processed in parallel")
    parser.add_argument(
        "--workers", type=int, default=_default_workers(), help="Scoring threads"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose search details")
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> ConvertOptions:
    """Namespace -> validated ConvertOptions. Raises InputError on bad values."""
    bounds = SearchBounds(
        min_planes=args.min_planes,
        max_planes=args.max_planes,
        min_width=args.min_width,
        max_width=args.max_width,
        min_height=args.min_height,
        max_height=args.max_height,
        width_increment=args.width_increment,
    )
    options = ConvertOptions(
        max_candidates=args.max_candidates,
        raw_file_pattern=args.raw_file_pattern,
        require_palette=args.require_palette,
        bounds=bounds,
        header_skip=args.header_skip,
        workers=args.workers,
        debug=args.debug,
    )
    return options.validate()


def collect_jobs(
    src: Path, output: Optional[Path], pattern: str
) -> List[Tuple[Path, Path]]:
    """
    Resolve (input, output base) pairs.

    File: output defaults to INPUT with a .png extension.
    Folder: matching files go to OUTPUT or INPUT/out, which is created.
    """
    if src.is_file():
        dst = output if output is not None else src.with_suffix(".png")
        return [(src, dst)]
    if src.is_dir():
        out_dir = output if output is not None else src / "out"
        out_dir.mkdir(parents=True, exist_ok=True)
        files = sorted(
            (p for p in src.glob(pattern) if p.is_file()),
            key=lambda p: p.name.lower(),
        )
        return [(p, out_dir / f"{p.stem}.png") for p in files]
    raise InputError(f"Input not found: {src}")


# Per-file processing


def _process_one_live(src: Path, dst: Path, options: ConvertOptions) -> str:
    """Convert one file, report the outcome and return its status."""
    print_banner(src.name)
    try:
        convert_file(src, dst, options)
    except NoCandidateError as exc:
        log(f"FAIL {src.name}: {exc}")
        return STATUS_NO_CANDIDATE
    except (ConversionError, OSError) as exc:
        log(f"FAIL {src.name}: {exc}")
        return STATUS_FAILED
    return STATUS_OK


def _process_one_captured(
    src: Path, dst: Path, options: ConvertOptions
) -> Tuple[str, str]:
    """
    Convert one file with stdout capture.

    Runs in a worker process so output can be printed in file order.
    """
    buf = io.StringIO()
    with redirect_stdout(buf):
        status = _process_one_live(src, dst, options)
    return buf.getvalue(), status


def exit_code_for(statuses: Sequence[str]) -> int:
    if STATUS_FAILED in statuses:
        return 2
    if STATUS_NO_CANDIDATE in statuses:
        return 1
    return 0


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)
    t_start = time.perf_counter()

    try:
        options = build_options(args)
        jobs = collect_jobs(args.input, args.output, options.raw_file_pattern)
    except InputError as exc:
        error(str(exc))
        return 2

    b = options.bounds
    print_config_line(
        "search",
        [
            ("Planes", f"{b.plane_range.start}-{b.plane_range.stop - 1}"),
            ("Widths", f"{b.min_width}-{b.max_width}/{b.width_increment}"),
            ("Heights", f"{b.min_height}-{b.max_height}"),
            ("Palette", "footer" if options.require_palette else "grey"),
            ("Candidates", options.max_candidates),
        ],
        debug=False,
    )
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Files", len(jobs)),
                    ("Jobs", args.jobs),
                    ("Workers", options.workers),
                    ("Header skip", options.header_skip),
                ]
            )
        )

    statuses: List[str] = []
    if args.jobs <= 1 or len(jobs) < 2:
        for src, dst in jobs:
            statuses.append(_process_one_live(src, dst, options))
    else:
        with ProcessPoolExecutor(max_workers=args.jobs) as ex:
            futures = [
                ex.submit(_process_one_captured, src, dst, options) for src, dst in jobs
            ]
            results = [f.result() for f in futures]
        print("".join(text for text, _ in results), end="", flush=True)
        statuses = [status for _, status in results]

    ok = statuses.count(STATUS_OK)
    log(
        f"\nConverted {ok}/{len(statuses)} file(s) in "
        f"{format_total_duration_compact(time.perf_counter() - t_start)}"
    )
    return exit_code_for(statuses)


if __name__ == "__main__":
    sys.exit(main())
