"""CLI for listing the composition manifest.

Prints every registered composition with its duration, frame rate and
canvas size, grouped by folder. --json prints the raw manifest list that
external renderers consume.

Usage:
    python -m framekit.list_cli
    python -m framekit.list_cli --manifest scenes.yaml --json
"""

import argparse
import json

from .cli import load_source
from .errors import FramekitError


def format_manifest(entries: list[dict]) -> list[str]:
    """Human-readable lines, top-level compositions first, then folders."""
    lines = []
    folders: dict[str | None, list[dict]] = {}
    for entry in entries:
        folders.setdefault(entry["folder"], []).append(entry)

    for folder in sorted(folders, key=lambda f: (f is not None, f or "")):
        indent = "  "
        if folder is not None:
            lines.append(f"{folder}/")
            indent = "    "
        for e in folders[folder]:
            seconds = e["duration_frames"] / e["fps"]
            lines.append(
                f"{indent}{e['id']}  {e['duration_frames']} frames "
                f"({seconds:.1f}s @ {e['fps']}fps)  {e['width']}x{e['height']}"
            )
    return lines


def main(args=None):
    parser = argparse.ArgumentParser(
        description="List compositions (id, duration, fps, size).",
    )
    parser.add_argument(
        "--manifest", default=None,
        help="YAML scene manifest (default: built-in scenes)",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print the manifest as JSON",
    )
    args = parser.parse_args(args)

    try:
        registry = load_source(args.manifest)
    except FramekitError as e:
        parser.error(str(e))

    entries = registry.manifest()
    if args.json:
        print(json.dumps(entries, indent=2))
        return

    print(f"{len(entries)} compositions:")
    for line in format_manifest(entries):
        print(line)


if __name__ == "__main__":
    main()
