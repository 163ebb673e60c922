"""Command line interface for lyric_stage.

Runs the synchronizer offline over a song and writes one JSON snapshot per
frame, the same data a renderer would consume live.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import FPS, POLAROID_COUNT
from .lyrics import load_lyrics
from .playback import EnvelopePlayback
from .presets import load_presets, viewpoints_from_config
from .synchronizer import SceneSynchronizer
from .validate import validate_args

TAIL_MS = 1000.0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync a lyric scene to playback and dump frames")
    parser.add_argument("lyrics", help="YAML/JSON lyric file")
    parser.add_argument("--audio", help="Audio file for the vocal amplitude envelope")
    parser.add_argument("--preset", action="append", default=[], help="Path to YAML preset overriding defaults")
    parser.add_argument("--fps", type=float, default=FPS, help="Frames per second")
    parser.add_argument("--slots", type=int, default=POLAROID_COUNT, help="Number of polaroid slots")
    parser.add_argument("--start-ms", type=float, default=0.0, help="Playback start position")
    parser.add_argument("--end-ms", type=float, default=None, help="Playback end position")
    parser.add_argument("--viewpoint", default=None, help="Initial camera viewpoint name")
    parser.add_argument(
        "--tour-ms",
        type=float,
        default=0.0,
        help="Move the camera one viewpoint right every N ms (0 disables)",
    )
    parser.add_argument("--seed", type=int, default=0, help="Seed of the floating character layout")
    parser.add_argument("--hop-length", type=int, default=512, help="Envelope hop in samples")
    parser.add_argument("--output", default="frames.jsonl", help="JSONL output path")
    parser.add_argument("--validate", action="store_true", help="Validate arguments and exit")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging")

    prelim, _ = parser.parse_known_args(argv)
    parser.set_defaults(**load_presets(prelim.preset))
    return parser.parse_args(argv)


def _build_source(args: argparse.Namespace, lyrics) -> EnvelopePlayback:
    if args.audio:
        return EnvelopePlayback.from_audio_file(args.audio, hop_length=args.hop_length, mood=lyrics.mood)
    end = max((u.end_time for u in lyrics.chars), default=0.0)
    return EnvelopePlayback([], 1000.0 / args.fps, end + TAIL_MS, lyrics.mood)


def run(args: argparse.Namespace) -> int:
    """Play the song through the synchronizer; returns the frame count."""
    lyrics = load_lyrics(args.lyrics)
    source = _build_source(args, lyrics)
    viewpoints = viewpoints_from_config(getattr(args, "viewpoints", None))
    sync = SceneSynchronizer(
        source,
        viewpoints,
        slot_count=args.slots,
        seed=args.seed,
        initial_viewpoint=args.viewpoint if args.viewpoint is not None else 0,
    )
    sync.load(lyrics)

    end = args.end_ms if args.end_ms is not None else source.duration
    frame_ms = 1000.0 / args.fps
    source.ready()
    source.seek(args.start_ms)
    source.play()

    now = 0.0
    next_tour = args.tour_ms
    count = 0
    with open(args.output, "w", encoding="utf8") as f:
        while True:
            if args.tour_ms and now >= next_tour:
                if not sync.go_right(now):
                    sync.go_to_viewpoint(0, now)
                next_tour += args.tour_ms
            snap = sync.frame(now)
            f.write(json.dumps(snap.to_dict(), ensure_ascii=False) + "\n")
            count += 1
            if source.position >= end or not source.playing:
                break
            source.advance(frame_ms)
            now += frame_ms
    logging.info("wrote %d frames to %s", count, args.output)
    return count


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")

    if args.validate:
        errs = validate_args(args)
        if errs:
            for e in errs:
                print(f"validation error: {e}", file=sys.stderr)
            raise SystemExit(1)
        return
    run(args)


if __name__ == "__main__":  # pragma: no cover
    main()
