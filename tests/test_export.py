"""Tests for tone mapping and image export."""

import numpy as np
import pytest
from PIL import Image as PILImage


class TestToneMapping:
    """Tests for max-channel tone mapping."""

    def test_bright_pixel_scaled_by_peak(self):
        """Test a pixel over 1.0 is divided by its brightest channel."""
        from tinyraytracer.preview.export import tone_map_max

        image = np.array([[[2.0, 1.0, 0.0]]], dtype=np.float32)
        np.testing.assert_allclose(tone_map_max(image)[0, 0], (1.0, 0.5, 0.0))

    def test_in_range_pixel_unchanged(self):
        """Test pixels within [0, 1] pass through."""
        from tinyraytracer.preview.export import tone_map_max

        image = np.array([[[0.25, 1.0, 0.5], [0.0, 0.0, 0.0]]], dtype=np.float32)
        np.testing.assert_array_equal(tone_map_max(image), image)

    def test_pixels_scaled_independently(self):
        """Test one bright pixel does not dim its neighbours."""
        from tinyraytracer.preview.export import tone_map_max

        image = np.array([[[4.0, 2.0, 1.0], [0.5, 0.5, 0.5]]], dtype=np.float32)
        result = tone_map_max(image)
        np.testing.assert_allclose(result[0, 0], (1.0, 0.5, 0.25))
        np.testing.assert_allclose(result[0, 1], (0.5, 0.5, 0.5))

    def test_idempotent(self):
        """Test tone mapping a tone mapped image changes nothing."""
        from tinyraytracer.preview.export import tone_map_max

        rng = np.random.default_rng(42)
        image = rng.uniform(0.0, 5.0, size=(6, 5, 3)).astype(np.float32)
        once = tone_map_max(image)
        np.testing.assert_allclose(tone_map_max(once), once, rtol=1e-6)
        assert once.max() <= 1.0 + 1e-6


class TestImageToUint8:
    """Tests for 8-bit conversion."""

    def test_values_truncated(self):
        """Test 255 * value is truncated, not rounded."""
        from tinyraytracer.preview.export import image_to_uint8

        image = np.array([[[1.0, 0.5, 0.999]]], dtype=np.float32)
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        assert tuple(result[0, 0]) == (255, 127, 254)

    def test_negative_values_clamped(self):
        """Test negative values become zero."""
        from tinyraytracer.preview.export import image_to_uint8

        image = np.array([[[-0.5, 0.0, 0.2]]], dtype=np.float32)
        assert tuple(image_to_uint8(image)[0, 0]) == (0, 0, 51)

    def test_bright_pixel_tone_mapped_first(self):
        """Test over-range pixels keep their hue."""
        from tinyraytracer.preview.export import image_to_uint8

        image = np.array([[[2.0, 1.0, 0.0]]], dtype=np.float32)
        assert tuple(image_to_uint8(image)[0, 0]) == (255, 127, 0)


class TestPPM:
    """Tests for binary PPM encoding."""

    def test_header_and_layout(self):
        """Test the header and row-major RGB byte order."""
        from tinyraytracer.preview.export import encode_ppm

        image = np.zeros((2, 3, 3), dtype=np.float32)
        image[0, 0] = (1.0, 0.0, 0.0)
        image[1, 2] = (0.0, 0.0, 1.0)

        data = encode_ppm(image)
        header = b"P6\n3 2\n255\n"
        assert data.startswith(header)
        pixels = data[len(header):]
        assert len(pixels) == 2 * 3 * 3
        assert pixels[0:3] == bytes((255, 0, 0))
        assert pixels[-3:] == bytes((0, 0, 255))

    def test_invalid_shape_raises(self):
        """Test non-RGB arrays are rejected."""
        from tinyraytracer.preview.export import encode_ppm

        with pytest.raises(ValueError, match="shape"):
            encode_ppm(np.zeros((2, 3), dtype=np.float32))

    def test_save_ppm_readable_by_pillow(self, tmp_path):
        """Test a saved PPM decodes to the same 8-bit pixels."""
        from tinyraytracer.preview.export import image_to_uint8, save_ppm

        rng = np.random.default_rng(7)
        image = rng.uniform(0.0, 2.0, size=(5, 4, 3)).astype(np.float32)
        path = tmp_path / "out.ppm"
        save_ppm(image, path)

        with PILImage.open(path) as decoded:
            assert decoded.size == (4, 5)
            np.testing.assert_array_equal(np.asarray(decoded), image_to_uint8(image))


class TestSaveImage:
    """Tests for format dispatch and comparison helpers."""

    def test_png_by_extension(self, tmp_path):
        """Test a .png path is written through Pillow."""
        from tinyraytracer.preview.export import image_to_uint8, save_image

        image = np.full((3, 4, 3), 0.5, dtype=np.float32)
        path = tmp_path / "out.png"
        save_image(image, path)

        with PILImage.open(path) as decoded:
            assert decoded.format == "PNG"
            np.testing.assert_array_equal(np.asarray(decoded), image_to_uint8(image))

    @pytest.mark.parametrize("name", ["out.ppm", "out"])
    def test_ppm_by_default(self, tmp_path, name):
        """Test .ppm and extension-less paths are written as PPM."""
        from tinyraytracer.preview.export import save_image

        path = tmp_path / name
        save_image(np.zeros((2, 2, 3), dtype=np.float32), path)
        assert path.read_bytes().startswith(b"P6\n2 2\n255\n")

    def test_rmse(self):
        """Test RMSE of identical and offset images."""
        from tinyraytracer.preview.export import compute_rmse

        a = np.zeros((2, 2, 3), dtype=np.float32)
        b = np.full((2, 2, 3), 0.5, dtype=np.float32)
        assert compute_rmse(a, a) == 0.0
        assert compute_rmse(a, b) == pytest.approx(0.5)

    def test_rmse_shape_mismatch_raises(self):
        """Test comparing differently sized images is an error."""
        from tinyraytracer.preview.export import compute_rmse

        with pytest.raises(ValueError, match="shapes"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))


class TestDisplay:
    """Tests for preview processing."""

    def test_display_matches_export(self):
        """Test the preview applies the same tone mapping as the exporters."""
        from tinyraytracer.preview.display import process_image_for_display

        image = np.array([[[2.0, 1.0, 0.0], [-0.1, 0.3, 0.6]]], dtype=np.float32)
        result = process_image_for_display(image)
        assert result.dtype == np.float32
        np.testing.assert_allclose(result[0, 0], (1.0, 0.5, 0.0))
        np.testing.assert_allclose(result[0, 1], (0.0, 0.3, 0.6), rtol=1e-6)

    def test_show_preview_from_array(self, monkeypatch):
        """Test previewing an array draws it without blocking."""
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from tinyraytracer.preview.display import show_preview

        shown = []
        monkeypatch.setattr(plt, "show", lambda block=True: shown.append(block))
        show_preview(np.zeros((4, 6, 3), dtype=np.float32), block=False)

        assert shown == [False]
        assert plt.gca().get_title() == "Render Preview - 6x4"
        plt.close("all")
