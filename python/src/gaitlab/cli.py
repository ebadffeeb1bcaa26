"""
Command line entry point for gaitlab.

Examples
--------
gaitlab --input walk.csv --output out/sub01_trial1 --formats json,csv
gaitlab --synthetic --seed 7 --label-mode functional --dominant-side left
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import gaitlab
from gaitlab._export import normalize_formats
from gaitlab._types import FUNCTIONAL, LEFT, PHYSICAL, RIGHT

logger = logging.getLogger("gaitlab.cli")

_USER_ERRORS = (
    gaitlab.InsufficientDataError,
    gaitlab.InsufficientEventsError,
    ValueError,
    FileNotFoundError,
)


def _emit(payload: Dict[str, Any], path: Optional[Path] = None) -> None:
    text = json.dumps(payload, ensure_ascii=True, separators=(",", ":"))
    if path is None:
        sys.stdout.write(text + "\n")
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _parse_formats(value: str) -> List[str]:
    if not isinstance(value, str):
        raise ValueError("--formats must be a comma-separated string")
    return normalize_formats(value)


def _normalize_side(value: Any) -> str:
    side = "" if value is None else str(value).strip().lower()
    sides = {"left": LEFT, "right": RIGHT}
    if side not in sides:
        raise ValueError("side must be 'left' or 'right'")
    return sides[side]


def _normalize_label_mode(value: Any) -> str:
    mode = "" if value is None else str(value).strip().lower()
    if mode not in (PHYSICAL, FUNCTIONAL):
        raise ValueError(f"label mode must be '{PHYSICAL}' or '{FUNCTIONAL}'")
    return mode


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gaitlab",
        description="Analyse a tri-axial acceleration walking trial.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, help="CSV file with a header and time,ax,ay,az rows.")
    source.add_argument("--synthetic", action="store_true", help="Analyse a generated 40 s walk.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for --synthetic.")

    labels = parser.add_argument_group("labelling")
    labels.add_argument("--start-side", default="left", help="Side of the first event: left|right.")
    labels.add_argument("--label-mode", default=PHYSICAL, help="physical|functional.")
    labels.add_argument("--dominant-side", default="right", help="Dominant side: left|right.")

    pipeline = parser.add_argument_group("pipeline")
    pipeline.add_argument("--cutoff", type=float, default=None, help="Low-pass cutoff in Hz.")
    pipeline.add_argument("--window", type=float, nargs=2, metavar=("START", "END"),
                          default=None, help="Restrict event detection to this span (s).")

    out = parser.add_argument_group("output")
    out.add_argument("--output", type=Path, default=None,
                     help="JSON file, or file prefix when exporting csv/xlsx.")
    out.add_argument("--formats", default="json", help="Comma-separated subset of json,csv,xlsx.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress.")
    return parser


def _run(args: argparse.Namespace) -> gaitlab.AnalysisResult:
    config = gaitlab.AnalysisConfig()
    if args.cutoff is not None:
        config = gaitlab.AnalysisConfig(cutoff_hz=args.cutoff)
    options = {
        "start_with_left": _normalize_side(args.start_side) == LEFT,
        "label_mode": _normalize_label_mode(args.label_mode),
        "dominant_side": _normalize_side(args.dominant_side),
    }
    if args.synthetic:
        session = gaitlab.GaitSession.synthetic(config, seed=args.seed, **options)
    else:
        session = gaitlab.GaitSession.from_csv(args.input, config, **options)
    if args.window is not None:
        session.select(*args.window)
    events = session.detect_events()
    logger.info("Detected %d events (threshold %.3f)", len(events), session.threshold)
    return session.analyze()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        formats = _parse_formats(args.formats)
        if formats != ["json"] and args.output is None:
            raise ValueError("--output is required when exporting csv or xlsx")
        result = _run(args)
    except _USER_ERRORS as exc:
        print(f"gaitlab: error: {exc}", file=sys.stderr)
        return 2

    if formats == ["json"]:
        _emit(gaitlab.analysis_payload(result), args.output)
    else:
        _emit({"written": gaitlab.export_analysis(result, args.output, formats)})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
