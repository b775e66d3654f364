"""Tests for render configuration defaults, validation and CLI mapping."""

import pytest

from spherecast.camera.viewport import Camera
from spherecast.cli import build_parser
from spherecast.config import RenderConfig
from spherecast.core.background import Background
from spherecast.core.vector import UnitDirection, Vector
from spherecast.errors import ConfigurationError


class TestRenderConfigDefaults:
    """Tests for default values."""

    def test_defaults(self):
        """Test the default resolution, sampling, camera and backend."""
        config = RenderConfig()
        assert (config.width, config.height) == (1920, 1080)
        assert config.multisampling == 100
        assert config.camera == Camera()
        assert config.background is Background.BLUE_GRADIENT
        assert config.seed is None
        assert config.workers == 1
        assert config.backend == "cpu"
        assert not config.full_sphere_scatter

    def test_defaults_validate(self):
        """Test the default configuration is valid."""
        RenderConfig().validate()


class TestRenderConfigValidation:
    """Tests for validate()."""

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"width": 0}, "dimensions"),
            ({"height": -2}, "dimensions"),
            ({"multisampling": 0}, "multisampling"),
            ({"workers": 0}, "workers"),
            ({"chunks_per_worker": 0}, "chunks_per_worker"),
            ({"seed": -1}, "seed"),
            ({"backend": "opengl"}, "backend"),
            ({"camera": Camera(fov_degrees=0.0)}, "field of view"),
            ({"camera": Camera(focal_length=float("nan"))}, "focal length"),
        ],
    )
    def test_invalid_values_raise(self, overrides, message):
        """Test each invalid field is named in the error."""
        with pytest.raises(ConfigurationError, match=message):
            RenderConfig(**overrides).validate()


class TestFromArgs:
    """Tests for building a configuration from parsed arguments."""

    def parse(self, *argv):
        return RenderConfig.from_args(build_parser().parse_args(["scene.json", *argv]))

    def test_no_options_gives_defaults(self):
        """Test that omitted options fall back to the defaults."""
        config = self.parse()
        defaults = RenderConfig()
        assert config.width == defaults.width
        assert config.height == defaults.height
        assert config.multisampling == defaults.multisampling
        assert config.camera == defaults.camera
        assert config.background is defaults.background

    def test_all_options(self):
        """Test every option reaches its configuration field."""
        config = self.parse(
            "-w", "320",
            "-H", "200",
            "-s", "8",
            "-l", "(1,2,3)",
            "-d", "(0,0,-4)",
            "-b", "black",
            "-f", "2.5",
            "--fov", "60",
            "--seed", "9",
            "-j", "3",
            "--backend", "taichi",
            "--full-sphere-scatter",
        )
        assert (config.width, config.height, config.multisampling) == (320, 200, 8)
        assert config.camera.location == Vector(1.0, 2.0, 3.0)
        assert config.camera.direction == UnitDirection(0.0, 0.0, -1.0)
        assert config.camera.focal_length == 2.5
        assert config.camera.fov_degrees == 60.0
        assert config.background is Background.BLACK
        assert config.seed == 9
        assert config.workers == 3
        assert config.backend == "taichi"
        assert config.full_sphere_scatter

    def test_bad_vector_raises(self):
        """Test a location with two components is rejected."""
        with pytest.raises(ConfigurationError):
            self.parse("-l", "(1,2)")

    def test_zero_direction_raises(self):
        """Test a zero camera direction is rejected."""
        with pytest.raises(ConfigurationError, match="zero or non-finite length"):
            self.parse("-d", "(0,0,0)")

    @pytest.mark.parametrize("option, value", [("-d", "(nan,0,-1)"), ("-l", "(0,inf,0)")])
    def test_non_finite_vector_raises(self, option, value):
        """Test NaN and infinite camera vectors are rejected."""
        with pytest.raises(ConfigurationError, match="non-finite"):
            self.parse(option, value)

    def test_bad_background_raises(self):
        """Test an unknown background name is rejected."""
        with pytest.raises(ConfigurationError, match="background"):
            self.parse("-b", "plaid")
