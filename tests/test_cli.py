"""Tests for the command-line entry point.

Tests cover:
- Deriving the output path from the scene path
- Rendering to the default and an explicit output
- Reporting bad input on stderr with exit status 1 and no image written
"""

import json

import pytest
from PIL import Image

from spherecast.cli import main, resolve_output_path
from spherecast.errors import ConfigurationError

SCENE = [
    {"center": [0.0, 0.0, -3.0], "radius": 1.0, "color": "red"},
    {"center": [0.0, -101.0, -3.0], "radius": 100.0, "color": {"red": 0.5, "green": 0.5, "blue": 0.5}},
]

FAST = ["-w", "8", "-H", "6", "-s", "1", "-j", "1", "--seed", "1", "--quiet"]


@pytest.fixture
def scene_file(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(SCENE))
    return path


class TestResolveOutputPath:
    """Tests for output path derivation."""

    def test_default_replaces_extension(self):
        """Test the default output swaps .json for .png beside the scene."""
        assert str(resolve_output_path("scenes/demo.json", None)) == "scenes/demo.png"

    def test_explicit_output(self):
        """Test an explicit output path is used as given."""
        assert str(resolve_output_path("demo.json", "out/image.png")) == "out/image.png"

    def test_scene_must_be_json(self):
        """Test that the scene path must end in .json."""
        with pytest.raises(ConfigurationError, match=r"\.json"):
            resolve_output_path("demo.yaml", None)

    def test_output_must_be_png(self):
        """Test that the output path must end in .png."""
        with pytest.raises(ConfigurationError, match=r"\.png"):
            resolve_output_path("demo.json", "demo.jpg")


class TestMain:
    """Tests for main()."""

    def test_renders_default_output(self, scene_file):
        """Test rendering writes a PNG of the requested size next to the scene."""
        assert main([str(scene_file), *FAST]) == 0
        output = scene_file.with_suffix(".png")
        with Image.open(output) as img:
            assert img.size == (8, 6)

    def test_renders_explicit_output(self, scene_file, tmp_path):
        """Test rendering to an explicit output path."""
        output = tmp_path / "render.png"
        assert main([str(scene_file), "-o", str(output), "-b", "black", *FAST]) == 0
        assert output.exists()

    def test_progress_is_printed(self, scene_file, capsys):
        """Test progress and the saved path are printed unless quiet."""
        args = [str(scene_file), "-w", "4", "-H", "3", "-s", "1", "-j", "1"]
        assert main(args) == 0
        out = capsys.readouterr().out
        assert "Progress: 3/3 rows" in out
        assert "Saved to:" in out

    def test_bad_extension_reports_error(self, scene_file, capsys):
        """Test a non-PNG output path fails with exit status 1."""
        assert main([str(scene_file), "-o", "render.jpg", *FAST]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_bad_background_reports_error(self, scene_file, capsys):
        """Test an unknown background name is reported."""
        assert main([str(scene_file), "-b", "plaid", *FAST]) == 1
        assert "background" in capsys.readouterr().err

    def test_missing_scene_reports_error(self, tmp_path, capsys):
        """Test a missing scene file is reported."""
        assert main([str(tmp_path / "absent.json"), *FAST]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_malformed_scene_reports_error(self, tmp_path, capsys):
        """Test a scene record missing a key is reported by index."""
        path = tmp_path / "broken.json"
        path.write_text(json.dumps([{"center": [0, 0, 0], "radius": 1}]))
        assert main([str(path), *FAST]) == 1
        assert "sphere 0" in capsys.readouterr().err

    def test_non_utf8_scene_reports_error(self, tmp_path, capsys):
        """Test a scene file that is not UTF-8 text is reported."""
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe[\x00]\x00")
        assert main([str(path), *FAST]) == 1
        assert "Error:" in capsys.readouterr().err
        assert not path.with_suffix(".png").exists()

    def test_huge_radius_reports_error(self, tmp_path, capsys):
        """Test a radius literal beyond the float range is reported."""
        path = tmp_path / "huge.json"
        path.write_text(
            '[{"center": [0, 0, -1], "radius": 1' + "0" * 400 + ', "color": "red"}]'
        )
        assert main([str(path), *FAST]) == 1
        assert "Error:" in capsys.readouterr().err
        assert not path.with_suffix(".png").exists()

    def test_vertical_camera_reports_error(self, scene_file, capsys):
        """Test a camera looking straight up is reported."""
        assert main([str(scene_file), "-d", "(0,1,0)", *FAST]) == 1
        assert "vertical" in capsys.readouterr().err

    def test_nan_direction_reports_error(self, scene_file, capsys):
        """Test a NaN camera direction is reported before rendering."""
        assert main([str(scene_file), "-d", "(nan,0,-1)", *FAST]) == 1
        assert "Error:" in capsys.readouterr().err
        assert not scene_file.with_suffix(".png").exists()

    def test_nan_focal_length_reports_error(self, scene_file, capsys):
        """Test a NaN focal length is reported before rendering."""
        assert main([str(scene_file), "-f", "nan", *FAST]) == 1
        assert "focal length" in capsys.readouterr().err
        assert not scene_file.with_suffix(".png").exists()
