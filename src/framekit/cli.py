"""CLI for rendering a composition to mp4 and/or a PNG frame sequence.

Every frame is a pure function of its index, so frames can be rendered by
several worker processes in any order and stitched afterwards.

Usage:
    # Render a built-in composition to mp4 (single process, streamed)
    python -m framekit.cli --composition CountdownTimer --output /tmp/countdown.mp4

    # Parallel render: 4 workers write PNG frames, then encode
    python -m framekit.cli --composition CountdownTimer --output /tmp/countdown.mp4 \
        --workers 4 --frames-dir /tmp/countdown-frames

    # Render a composition from a YAML scene manifest, frames 30-90 only
    python -m framekit.cli --manifest scenes.yaml --composition Intro \
        --output /tmp/intro.mp4 --start 30 --end 90

    # Validate only (no rendering)
    python -m framekit.cli --manifest scenes.yaml --composition Intro --validate
"""

import argparse
import tempfile
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from functools import lru_cache
from pathlib import Path

from PIL import Image
from moviepy import ImageSequenceClip, VideoClip

from .errors import FramekitError, OutOfRangeError
from .manifest import load_registry
from .raster import render_composition_frame
from .scenes import build_registry


# ── Registry loading ──────────────────────────────────────────────


def load_source(manifest_path: str | None = None):
    """Registry from a YAML scene manifest, or the built-in scenes."""
    if manifest_path:
        return load_registry(manifest_path)
    return build_registry()


@lru_cache(maxsize=None)
def _worker_registry(manifest_path):
    # One registry per worker process, built on first use.
    return load_source(manifest_path)


# ── Rendering helpers ─────────────────────────────────────────────


def frame_filename(frame: int) -> str:
    return f"frame-{frame:05d}.png"


def resolve_frame_range(composition, start=None, end=None) -> range:
    """Validate [start, end) against the composition's duration.

    Raises:
        OutOfRangeError: Empty range or bounds outside [0, duration].
    """
    start = 0 if start is None else start
    end = composition.duration_frames if end is None else end
    if end <= start:
        raise OutOfRangeError(
            f"Composition '{composition.id}': empty frame range [{start}, {end})"
        )
    composition.check_frame(start)
    composition.check_frame(end - 1)
    return range(start, end)


def _render_and_save_frames(args):
    """Worker function for parallel rendering.

    Takes a single tuple so it works with ProcessPoolExecutor.submit().
    Each worker rebuilds the registry once and writes its frames to disk
    independently; no frame depends on another.
    """
    manifest_path, composition_id, frames, out_dir = args
    composition = _worker_registry(manifest_path).resolve(composition_id)
    for frame in frames:
        image = render_composition_frame(composition, frame)
        Image.fromarray(image).save(Path(out_dir) / frame_filename(frame))
    return len(frames)


def render_frames(
    manifest_path: str | None,
    composition_id: str,
    frames: range,
    out_dir: str | Path,
    workers: int = 1,
) -> list[Path]:
    """Render frames to numbered PNG files, optionally in parallel.

    Frames are dealt round-robin to workers (frames[i::workers]), so each
    worker jumps through the timeline out of order.

    Returns:
        PNG paths in frame order.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    frames = list(frames)

    effective_workers = max(1, min(workers, len(frames)))
    work = [
        (manifest_path, composition_id, frames[i::effective_workers], str(out_dir))
        for i in range(effective_workers)
    ]

    if effective_workers == 1:
        _render_and_save_frames(work[0])
    else:
        with ProcessPoolExecutor(max_workers=effective_workers) as pool:
            futures = [pool.submit(_render_and_save_frames, item) for item in work]
            for future in as_completed(futures):
                future.result()  # propagate exceptions

    return [out_dir / frame_filename(f) for f in frames]


def _export_clip(clip, output_path, fps, quiet=False):
    """Write a clip to mp4 with standard encoding settings."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    clip.write_videofile(
        str(output_path),
        fps=fps,
        codec="libx264",
        audio=False,
        preset="medium",
        ffmpeg_params=["-crf", "20", "-pix_fmt", "yuv420p"],
        logger=None if quiet else "bar",
    )


def streamed_clip(composition, frames: range) -> VideoClip:
    """A moviepy clip that rasterizes frames on demand.

    moviepy asks for times, not frames; the time is mapped back to a frame
    and clamped into the requested range here, since the engine itself
    rejects out-of-range frames rather than guessing.
    """
    fps = composition.fps
    first, count = frames.start, len(frames)

    def frame_function(t):
        index = min(count - 1, max(0, int(round(t * fps))))
        return render_composition_frame(composition, first + index)

    return VideoClip(frame_function, duration=count / fps)


# ── Main render ───────────────────────────────────────────────────


def render(
    composition_id: str,
    output_path: str | None = None,
    manifest_path: str | None = None,
    frames_dir: str | None = None,
    workers: int = 1,
    start: int | None = None,
    end: int | None = None,
    quiet: bool = False,
) -> None:
    """Render a composition to mp4 and/or a PNG frame directory.

    Two paths:
      - workers == 1 and no frames_dir: stream frames straight into the
        mp4 encoder.
      - otherwise: render PNG frames (in parallel when workers > 1) into
        frames_dir (or a temporary directory) and encode them in order.

    Args:
        composition_id: Composition to render.
        output_path: Output mp4 path (optional when frames_dir is set).
        manifest_path: YAML scene manifest; built-in scenes when None.
        frames_dir: Keep PNG frames in this directory.
        workers: Number of parallel worker processes for PNG rendering.
        start: First frame (inclusive), default 0.
        end: Last frame (exclusive), default the composition's duration.
        quiet: Suppress moviepy's progress bar.
    """
    registry = load_source(manifest_path)
    composition = registry.resolve(composition_id)
    frames = resolve_frame_range(composition, start, end)
    fps = composition.fps

    print(
        f"Rendering {composition.id}: frames {frames.start}-{frames.stop - 1} "
        f"({len(frames)} frames, {composition.width}x{composition.height}, {fps}fps)"
    )
    t0 = time.monotonic()

    if workers <= 1 and not frames_dir:
        print(f"Writing to: {output_path}")
        _export_clip(streamed_clip(composition, frames), output_path, fps, quiet=quiet)
        print(f"\nDone: {output_path} ({time.monotonic() - t0:.1f}s wall)")
        return

    with tempfile.TemporaryDirectory(prefix="framekit-") as tmp:
        target = frames_dir or tmp
        print(f"  START  {len(frames)} frames -> {target}/ ({max(1, workers)} workers)", flush=True)
        paths = render_frames(manifest_path, composition.id, frames, target, workers)
        print(f"  DONE   {len(paths)} frames, {time.monotonic() - t0:.1f}s wall", flush=True)

        if output_path:
            print(f"Writing to: {output_path}")
            clip = ImageSequenceClip([str(p) for p in paths], fps=fps)
            _export_clip(clip, output_path, fps, quiet=quiet)
            print(f"\nDone: {output_path} ({time.monotonic() - t0:.1f}s wall)")


# ── CLI entry point ───────────────────────────────────────────────


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Render a composition to mp4 and/or PNG frames.",
    )
    parser.add_argument(
        "--composition", required=True,
        help="Composition id (see `framekit list`)",
    )
    parser.add_argument(
        "--manifest", default=None,
        help="YAML scene manifest (default: built-in scenes)",
    )
    parser.add_argument(
        "--output",
        help="Output mp4 path (required unless --frames-dir or --validate)",
    )
    parser.add_argument(
        "--frames-dir", default=None,
        help="Write numbered PNG frames to this directory",
    )
    parser.add_argument(
        "--workers", type=int, default=1,
        help="Number of parallel workers for frame rendering (default: 1)",
    )
    parser.add_argument(
        "--start", type=int, default=None,
        help="First frame to render (inclusive, default 0)",
    )
    parser.add_argument(
        "--end", type=int, default=None,
        help="Frame to stop at (exclusive, default: composition duration)",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest and frame range only, don't render",
    )
    args = parser.parse_args(args)

    if args.workers < 1:
        parser.error("--workers must be >= 1")

    try:
        registry = load_source(args.manifest)
        composition = registry.resolve(args.composition)
        frames = resolve_frame_range(composition, args.start, args.end)
    except FramekitError as e:
        parser.error(str(e))

    if args.validate:
        c = composition
        print(f"Composition valid: {c.id} ({c.width}x{c.height}, {c.fps}fps)")
        print(f"  frames {frames.start}-{frames.stop - 1} of {c.duration_frames}")
        return

    if not args.output and not args.frames_dir:
        parser.error("--output or --frames-dir is required (unless using --validate)")

    render(
        args.composition,
        output_path=args.output,
        manifest_path=args.manifest,
        frames_dir=args.frames_dir,
        workers=args.workers,
        start=args.start,
        end=args.end,
    )


if __name__ == "__main__":
    main()
