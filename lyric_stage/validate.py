"""Argument validation helpers for the lyric_stage CLI."""
from __future__ import annotations

import os
from argparse import Namespace
from typing import List

from .presets import viewpoints_from_config

MAX_FPS = 240


def validate_args(args: Namespace) -> List[str]:
    """Validate parsed CLI arguments.

    Returns a list of human readable error messages. The caller should abort
    if the list is non-empty.
    """
    errors: List[str] = []
    if not os.path.isfile(args.lyrics):
        errors.append(f"lyrics file not found: {args.lyrics}")
    if args.audio and not os.path.isfile(args.audio):
        errors.append(f"--audio file not found: {args.audio}")
    if not (0 < args.fps <= MAX_FPS):
        errors.append(f"--fps must be within (0, {MAX_FPS}]")
    if args.slots < 1:
        errors.append("--slots must be >= 1")
    if args.start_ms < 0:
        errors.append("--start-ms must be >= 0")
    if args.end_ms is not None and args.end_ms <= args.start_ms:
        errors.append("--end-ms must be greater than --start-ms")
    if args.tour_ms < 0:
        errors.append("--tour-ms must be >= 0")
    try:
        viewpoints = viewpoints_from_config(getattr(args, "viewpoints", None))
    except ValueError as e:
        errors.append(f"preset viewpoints: {e}")
    else:
        names = [vp.name for vp in viewpoints]
        if args.viewpoint is not None and args.viewpoint not in names:
            errors.append(f"--viewpoint must be one of: {', '.join(names)}")
    return errors
