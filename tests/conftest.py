"""Shared test fixtures for framekit tests."""

import pytest
import yaml


@pytest.fixture
def tiny_manifest(tmp_path):
    """Write a small scene manifest (one 6-frame, 32x24 composition).

    Shared across test_cli.py and test_main.py. A white square fades in
    over the first 5 frames on a dark background.
    """
    manifest = {
        "compositions": [{
            "id": "Tiny",
            "duration": 6,
            "fps": 10,
            "width": 32,
            "height": 24,
            "background": "#101010",
            "folder": "Tests",
            "timeline": [{
                "name": "square",
                "layers": [{
                    "type": "rect", "x": 16, "y": 12, "w": 8, "h": 8,
                    "fill": "#ffffff",
                    "opacity": {"interpolate": {
                        "input": [0, 5], "output": [0, 1], "extrapolate": "clamp",
                    }},
                }],
            }],
        }],
    }
    path = tmp_path / "tiny.yaml"
    path.write_text(yaml.dump(manifest))
    return path
