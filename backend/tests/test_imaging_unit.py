"""
Unit tests for the pixel source: decoding, bounded resizing and flattening.
"""

import io

import numpy as np
import pytest
from PIL import Image

from dominant_colors.services.colors.options import build_image_options
from dominant_colors.services.imaging import (
    bounded_size, image_to_pixels, load_image, load_pixels, resize_bounded
)
from conftest import encode_png


class TestBoundedSize:

    @pytest.mark.parametrize("size,expected", [
        ((50, 50), (50, 50)),
        ((100, 100), (100, 100)),
        ((200, 100), (100, 50)),
        ((100, 300), (33, 100)),
        ((400, 300), (100, 75)),
        ((1000, 1), (100, 1)),
    ])
    def test_bounded_size(self, size, expected):
        assert bounded_size(*size, 100, 100) == expected

    def test_resize_bounded_keeps_small_images(self):
        img = np.zeros((20, 30, 3), dtype=np.uint8)
        assert resize_bounded(img, build_image_options()) is img

    def test_resize_bounded_downscales(self):
        img = np.full((300, 400, 3), 77, dtype=np.uint8)
        resized = resize_bounded(img, build_image_options(resize_width=40, resize_height=40))
        assert resized.shape == (30, 40, 3)
        assert np.all(resized == 77)


class TestImageToPixels:

    def test_column_major_order(self):
        img = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)
        pixels = image_to_pixels(img)

        assert pixels.shape == (6, 3)
        np.testing.assert_array_equal(pixels[0], img[0, 0])
        np.testing.assert_array_equal(pixels[1], img[1, 0])
        np.testing.assert_array_equal(pixels[2], img[0, 1])


class TestLoadPixels:

    def test_load_png_bytes(self):
        img = np.zeros((100, 200, 3), dtype=np.uint8)
        img[:] = (255, 0, 0)
        pixels = load_pixels(encode_png(img), filename="wide.png")

        assert pixels.shape == (100 * 50, 3)
        assert np.all(pixels == [255, 0, 0])

    def test_load_from_path(self, tmp_path):
        path = tmp_path / "small.png"
        path.write_bytes(encode_png(np.full((4, 5, 3), 9, dtype=np.uint8)))

        pixels = load_pixels(path)
        assert pixels.shape == (20, 3)

    def test_rgba_is_flattened_to_rgb(self):
        buffer = io.BytesIO()
        Image.new("RGBA", (3, 3), (10, 20, 30, 0)).save(buffer, format="PNG")

        pixels = load_pixels(buffer.getvalue(), filename="alpha.png")
        assert pixels.shape == (9, 3)
        assert np.all(pixels == [10, 20, 30])

    def test_gif_first_frame(self):
        buffer = io.BytesIO()
        frames = [Image.new("RGB", (4, 4), color) for color in ((255, 0, 0), (0, 0, 255))]
        frames[0].save(buffer, format="GIF", save_all=True, append_images=frames[1:])

        img = load_image(buffer.getvalue())
        assert img.shape == (4, 4, 3)
        assert tuple(img[0, 0]) == (255, 0, 0)

    def test_unsupported_extension_yields_no_pixels(self):
        pixels = load_pixels(encode_png(np.zeros((2, 2, 3), dtype=np.uint8)), filename="image.tiff")
        assert pixels.shape == (0, 3)

    def test_corrupt_data_yields_no_pixels(self):
        pixels = load_pixels(b"definitely not an image", filename="broken.png")
        assert pixels.shape == (0, 3)

    def test_missing_file_yields_no_pixels(self, tmp_path):
        pixels = load_pixels(tmp_path / "missing.jpg")
        assert pixels.shape == (0, 3)
