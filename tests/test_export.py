"""Tests for quantization and PNG export."""

import numpy as np
import pytest
from PIL import Image

from spherecast.output.export import compute_rmse, image_to_uint8, save_png_from_array


class TestImageToUint8:
    """Tests for image_to_uint8()."""

    def test_matches_channel_quantization(self):
        """Test array quantization matches per-channel quantization."""
        image = np.array([[[0.0, 0.5, 1.0], [0.25, -1.0, 2.0]]])
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        assert result.tolist() == [[[0, 127, 255], [63, 0, 255]]]


class TestSavePng:
    """Tests for save_png_from_array()."""

    def test_uint8_image_written_unchanged(self, tmp_path):
        """Test 8-bit images are written pixel for pixel."""
        image = np.zeros((4, 6, 3), dtype=np.uint8)
        image[0, 0] = (255, 0, 0)
        image[3, 5] = (0, 0, 255)
        path = tmp_path / "test.png"
        save_png_from_array(image, str(path))

        with Image.open(path) as img:
            assert img.size == (6, 4)
            loaded = np.asarray(img.convert("RGB"))
        np.testing.assert_array_equal(loaded, image)

    def test_float_image_is_quantized(self, tmp_path):
        """Test float images are quantized before writing."""
        image = np.full((2, 2, 3), 0.5)
        path = tmp_path / "gray.png"
        save_png_from_array(image, str(path))
        with Image.open(path) as img:
            assert np.asarray(img.convert("RGB"))[0, 0].tolist() == [127, 127, 127]

    def test_wrong_shape_raises(self, tmp_path):
        """Test that only (H, W, 3) arrays are accepted."""
        with pytest.raises(ValueError, match="Expected an"):
            save_png_from_array(np.zeros((4, 4)), str(tmp_path / "bad.png"))


class TestComputeRmse:
    """Tests for compute_rmse()."""

    def test_identical_images(self):
        """Test identical images have zero error."""
        image = np.random.default_rng(0).random((4, 4, 3))
        assert compute_rmse(image, image) == 0.0

    def test_known_difference(self):
        """Test a uniform offset gives that offset as error."""
        a = np.zeros((2, 2, 3))
        b = np.full((2, 2, 3), 0.5)
        assert compute_rmse(a, b) == pytest.approx(0.5)

    def test_shape_mismatch_raises(self):
        """Test that images of different shape are rejected."""
        with pytest.raises(ValueError, match="shapes must match"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))

    def test_uint8_images_do_not_wrap(self):
        """Test 8-bit inputs are compared without unsigned wraparound."""
        a = np.zeros((2, 2, 3), dtype=np.uint8)
        b = np.full((2, 2, 3), 10, dtype=np.uint8)
        assert compute_rmse(a, b) == pytest.approx(10.0)
        assert compute_rmse(b, a) == pytest.approx(10.0)
