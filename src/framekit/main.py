"""Subcommand dispatcher for framekit.

Usage:
    framekit list     [--manifest scenes.yaml] [--json]
    framekit still    --composition ID --frame N --output frame.png
    framekit render   --composition ID --output video.mp4 [--workers 4]
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="framekit",
        description="Frame-driven animation: list, preview and render compositions.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("list", help="List compositions in the manifest")
    subparsers.add_parser("still", help="Render a single frame to an image")
    subparsers.add_parser("render", help="Render a composition to mp4 / PNG frames")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "list":
        from .list_cli import main as list_main
        list_main(remaining)
    elif parsed.command == "still":
        from .still_cli import main as still_main
        still_main(remaining)
    elif parsed.command == "render":
        from .cli import main as render_main
        render_main(remaining)


if __name__ == "__main__":
    main()
