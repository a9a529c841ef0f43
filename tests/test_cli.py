"""Tests for the render, still and list CLIs."""

import json

import numpy as np
import pytest
from PIL import Image

from framekit.cli import (
    frame_filename,
    load_source,
    main as render_main,
    render,
    render_frames,
    resolve_frame_range,
    streamed_clip,
)
from framekit.errors import NotFoundError, OutOfRangeError
from framekit.list_cli import format_manifest, main as list_main
from framekit.still_cli import main as still_main, render_still


class TestResolveFrameRange:
    def test_defaults_to_full_duration(self, tiny_manifest):
        comp = load_source(str(tiny_manifest)).resolve("Tiny")
        assert resolve_frame_range(comp) == range(0, 6)

    def test_partial_range(self, tiny_manifest):
        comp = load_source(str(tiny_manifest)).resolve("Tiny")
        assert resolve_frame_range(comp, 2, 4) == range(2, 4)

    @pytest.mark.parametrize("start, end", [(3, 3), (-1, 4), (0, 7)])
    def test_bad_range_raises(self, tiny_manifest, start, end):
        comp = load_source(str(tiny_manifest)).resolve("Tiny")
        with pytest.raises(OutOfRangeError):
            resolve_frame_range(comp, start, end)


class TestRenderFrames:
    def test_writes_numbered_pngs(self, tiny_manifest, tmp_path):
        out = tmp_path / "frames"
        paths = render_frames(str(tiny_manifest), "Tiny", range(6), out)
        assert [p.name for p in paths] == [frame_filename(f) for f in range(6)]
        assert all(p.exists() for p in paths)

    def test_frames_match_their_index(self, tiny_manifest, tmp_path):
        paths = render_frames(str(tiny_manifest), "Tiny", range(6), tmp_path / "f")
        first = np.array(Image.open(paths[0]))
        last = np.array(Image.open(paths[5]))
        assert first[12, 16].tolist() == [16, 16, 16]
        assert last[12, 16].tolist() == [255, 255, 255]

    def test_parallel_matches_serial(self, tiny_manifest, tmp_path):
        serial = render_frames(str(tiny_manifest), "Tiny", range(6), tmp_path / "s")
        parallel = render_frames(
            str(tiny_manifest), "Tiny", range(6), tmp_path / "p", workers=3,
        )
        for a, b in zip(serial, parallel):
            assert np.array_equal(np.array(Image.open(a)), np.array(Image.open(b)))


class TestStreamedClip:
    def test_time_maps_to_frame_and_clamps(self, tiny_manifest):
        comp = load_source(str(tiny_manifest)).resolve("Tiny")
        clip = streamed_clip(comp, range(0, 6))
        assert clip.duration == pytest.approx(0.6)
        assert clip.get_frame(0)[12, 16].tolist() == [16, 16, 16]
        assert clip.get_frame(0.5)[12, 16].tolist() == [255, 255, 255]
        assert clip.get_frame(0.59)[12, 16].tolist() == [255, 255, 255]


class TestRender:
    def test_frames_dir_only(self, tiny_manifest, tmp_path, capsys):
        out = tmp_path / "frames"
        render("Tiny", manifest_path=str(tiny_manifest), frames_dir=str(out), workers=2)
        assert len(list(out.glob("frame-*.png"))) == 6
        assert "DONE" in capsys.readouterr().out

    def test_mp4_output(self, tiny_manifest, tmp_path):
        out = tmp_path / "tiny.mp4"
        render("Tiny", output_path=str(out), manifest_path=str(tiny_manifest), quiet=True)
        assert out.exists()
        assert out.stat().st_size > 0

    def test_unknown_composition_raises(self, tiny_manifest):
        with pytest.raises(NotFoundError):
            render("Nope", manifest_path=str(tiny_manifest))


class TestRenderMain:
    def test_validate_only(self, tiny_manifest, capsys):
        render_main([
            "--manifest", str(tiny_manifest), "--composition", "Tiny", "--validate",
        ])
        out = capsys.readouterr().out
        assert "Composition valid: Tiny (32x24, 10fps)" in out
        assert "frames 0-5 of 6" in out

    def test_unknown_composition_errors(self, tiny_manifest):
        with pytest.raises(SystemExit):
            render_main(["--manifest", str(tiny_manifest), "--composition", "Nope"])

    def test_out_of_range_errors(self, tiny_manifest):
        with pytest.raises(SystemExit):
            render_main([
                "--manifest", str(tiny_manifest), "--composition", "Tiny",
                "--end", "60", "--validate",
            ])

    def test_output_required(self, tiny_manifest):
        with pytest.raises(SystemExit):
            render_main(["--manifest", str(tiny_manifest), "--composition", "Tiny"])


class TestStill:
    def test_render_still_writes_png(self, tiny_manifest, tmp_path):
        out = render_still("Tiny", 5, str(tmp_path / "nested" / "still.png"),
                           str(tiny_manifest))
        image = np.array(Image.open(out))
        assert image.shape == (24, 32, 3)
        assert image[12, 16].tolist() == [255, 255, 255]

    def test_render_still_out_of_range(self, tiny_manifest, tmp_path):
        with pytest.raises(OutOfRangeError):
            render_still("Tiny", 6, str(tmp_path / "x.png"), str(tiny_manifest))

    def test_main_reports_errors(self, tiny_manifest, tmp_path):
        with pytest.raises(SystemExit):
            still_main([
                "--manifest", str(tiny_manifest), "--composition", "Tiny",
                "--frame", "-1", "--output", str(tmp_path / "x.png"),
            ])

    def test_builtin_scene_still(self, tmp_path):
        out = render_still("CountdownTimer", 45, str(tmp_path / "c.png"))
        assert Image.open(out).size == (1920, 1080)


class TestList:
    def test_format_groups_by_folder(self):
        entries = [
            {"id": "B", "duration_frames": 60, "fps": 30, "width": 10, "height": 10,
             "folder": "Showcase"},
            {"id": "A", "duration_frames": 90, "fps": 30, "width": 10, "height": 10,
             "folder": None},
        ]
        lines = format_manifest(entries)
        assert lines[0].strip().startswith("A")
        assert "3.0s @ 30fps" in lines[0]
        assert lines[1] == "Showcase/"
        assert lines[2].startswith("    B")

    def test_main_prints_builtin_scenes(self, capsys):
        list_main([])
        out = capsys.readouterr().out
        assert out.startswith("3 compositions:")
        for cid in ("ClaudeCodeIntro", "CountdownTimer", "KineticTypography"):
            assert cid in out

    def test_main_json(self, tiny_manifest, capsys):
        list_main(["--manifest", str(tiny_manifest), "--json"])
        entries = json.loads(capsys.readouterr().out)
        assert entries == [{
            "id": "Tiny", "duration_frames": 6, "fps": 10,
            "width": 32, "height": 24, "folder": "Tests",
        }]
