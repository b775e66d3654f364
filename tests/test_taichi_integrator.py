"""Tests for the Taichi rendering backend.

The kernel computes in 32-bit floats and draws its own random numbers, so
results are compared with the CPU renderer statistically or with a
tolerance rather than exactly. Skipped when Taichi is not installed.
"""

import numpy as np
import pytest

from spherecast.camera.viewport import Camera, build_viewport
from spherecast.config import RenderConfig
from spherecast.core.background import Background
from spherecast.core.renderer import Renderer
from spherecast.output.export import compute_rmse


@pytest.fixture
def viewport():
    return build_viewport(Camera(), 32, 24)


class TestTaichiKernel:
    """Tests for render_image_taichi()."""

    def test_empty_scene_black(self, taichi_runtime, viewport):
        """Test an empty scene on black renders zeros as float64."""
        from spherecast.core.taichi_integrator import render_image_taichi

        image = render_image_taichi(viewport, [], Background.BLACK, 32, 24, 2)
        assert image.shape == (24, 32, 3)
        assert image.dtype == np.float64
        assert not image.any()

    def test_empty_scene_gradient_matches_cpu(self, taichi_runtime, viewport):
        """Test the kernel shades the gradient like the CPU path."""
        from spherecast.core.taichi_integrator import render_image_taichi

        image = render_image_taichi(viewport, [], Background.BLUE_GRADIENT, 32, 24, 4)
        for x, y in [(0, 0), (16, 12), (31, 23)]:
            expected = Background.BLUE_GRADIENT.color(viewport.ray_direction(x + 0.5, y + 0.5))
            np.testing.assert_allclose(image[y, x], expected.to_tuple(), atol=0.02)

    def test_single_hit_on_black_background(self, taichi_runtime, viewport, red_sphere):
        """Test a hit on black gives a third of the surface color."""
        from spherecast.core.taichi_integrator import render_image_taichi

        image = render_image_taichi(viewport, [red_sphere], Background.BLACK, 32, 24, 4)
        np.testing.assert_allclose(image[12, 16], (1.0 / 3.0, 0.0, 0.0), atol=1e-5)

    def test_center_pixel_red_dominant(self, taichi_runtime, viewport, red_sphere):
        """Test the sphere shows red with unbiased scattering."""
        from spherecast.core.taichi_integrator import render_image_taichi

        image = render_image_taichi(
            viewport, [red_sphere], Background.BLUE_GRADIENT, 32, 24, 8, full_sphere=True
        )
        red, green, blue = image[12, 16]
        assert red > green and red > blue


class TestTaichiBackend:
    """Tests for selecting the backend through RenderConfig."""

    def test_renderer_uses_taichi_backend(self, taichi_runtime, red_sphere):
        """Test the renderer dispatches to the kernel and reports completion."""
        calls = []
        config = RenderConfig(width=16, height=12, multisampling=2, backend="taichi")
        renderer = Renderer(config, [red_sphere])
        renderer.render(callback=lambda done, total: calls.append((done, total)))
        assert renderer.is_complete
        assert renderer.get_image_uint8().shape == (12, 16, 3)
        assert calls == [(12, 12)]

    def test_close_to_cpu_render(self, taichi_runtime, red_sphere):
        """Test the mean color agrees with the CPU backend."""
        def mean_color(backend):
            config = RenderConfig(
                width=16, height=12, multisampling=16, seed=0, backend=backend
            )
            renderer = Renderer(config, [red_sphere])
            renderer.render()
            return renderer.get_image_numpy().mean(axis=(0, 1))

        np.testing.assert_allclose(mean_color("taichi"), mean_color("cpu"), atol=0.02)

    def test_pixelwise_difference_to_cpu_is_small(self, taichi_runtime, red_sphere):
        """Test the per-pixel RMSE between backends stays at noise level."""
        images = []
        for backend in ("cpu", "taichi"):
            config = RenderConfig(width=16, height=12, multisampling=16, seed=0, backend=backend)
            renderer = Renderer(config, [red_sphere])
            renderer.render()
            images.append(renderer.get_image_numpy())
        assert compute_rmse(*images) < 0.1
