"""CLI for rendering a single frame of a composition to an image.

Usage:
    python -m framekit.still_cli --composition CountdownTimer --frame 45 \
        --output /tmp/countdown-45.png
"""

import argparse
from pathlib import Path

from PIL import Image

from .cli import load_source
from .errors import FramekitError
from .raster import render_composition_frame


def render_still(
    composition_id: str,
    frame: int,
    output_path: str,
    manifest_path: str | None = None,
) -> Path:
    """Render one frame and save it (format from the file extension).

    Raises:
        NotFoundError: Unknown composition id.
        OutOfRangeError: frame outside [0, duration_frames).
    """
    registry = load_source(manifest_path)
    composition = registry.resolve(composition_id)
    image = render_composition_frame(composition, frame)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(image).save(output)
    return output


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Render one frame of a composition to an image file.",
    )
    parser.add_argument("--composition", required=True, help="Composition id")
    parser.add_argument("--frame", type=int, required=True, help="Frame number (0-based)")
    parser.add_argument("--output", required=True, help="Output image path (.png, .jpg)")
    parser.add_argument(
        "--manifest", default=None,
        help="YAML scene manifest (default: built-in scenes)",
    )
    args = parser.parse_args(args)

    try:
        output = render_still(args.composition, args.frame, args.output, args.manifest)
    except FramekitError as e:
        parser.error(str(e))

    print(f"Done: {output}")


if __name__ == "__main__":
    main()
