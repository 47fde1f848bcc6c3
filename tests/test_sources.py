"""Tests for loading local image files into pixel buffers."""

import io

import numpy as np
import pytest
from PIL import Image

from sources import load_pixel_buffer, scan_local_images


def _png_bytes(img: Image.Image) -> bytes:
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


class TestLoadPixelBuffer:

    def test_transparent_pixels_become_black(self):
        data = _png_bytes(Image.new("RGBA", (10, 10), (255, 255, 255, 0)))
        buf = load_pixel_buffer(data, size=None)
        rgba = buf.as_array()
        assert (buf.width, buf.height) == (10, 10)
        assert np.all(rgba[..., :3] == 0)
        assert np.all(rgba[..., 3] == 255)

    def test_opaque_pixels_are_kept(self):
        data = _png_bytes(Image.new("RGB", (4, 3), (200, 100, 50)))
        rgba = load_pixel_buffer(data, size=None).as_array()
        assert tuple(rgba[1, 2]) == (200, 100, 50, 255)

    def test_stretches_to_pad_size_by_default(self):
        data = _png_bytes(Image.new("L", (50, 20), 255))
        buf = load_pixel_buffer(data)
        assert (buf.width, buf.height) == (280, 280)
        assert len(buf) == 280 * 280 * 4

    def test_custom_size(self):
        data = _png_bytes(Image.new("L", (50, 20), 0))
        buf = load_pixel_buffer(data, size=(30, 40))
        assert (buf.width, buf.height) == (30, 40)

    def test_reads_from_path(self, tmp_path):
        path = tmp_path / "digit.png"
        Image.new("L", (8, 8), 255).save(path)
        buf = load_pixel_buffer(path, size=None)
        assert buf.as_array()[0, 0, 0] == 255

    def test_garbage_bytes_raise_value_error(self):
        with pytest.raises(ValueError, match="Cannot decode"):
            load_pixel_buffer(b"not an image")

    def test_non_positive_size_raises(self):
        data = _png_bytes(Image.new("L", (4, 4), 0))
        with pytest.raises(ValueError, match="positive"):
            load_pixel_buffer(data, size=(0, 10))


class TestScanLocalImages:

    def test_directory_is_sorted_and_filtered(self, tmp_path):
        for name in ("b.png", "a.JPG", "notes.txt"):
            (tmp_path / name).write_bytes(b"")
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "c.png").write_bytes(b"")
        found = scan_local_images(tmp_path)
        assert [p.name for p in found] == ["a.JPG", "b.png"]

    def test_single_file(self, tmp_path):
        path = tmp_path / "one.png"
        path.write_bytes(b"")
        assert scan_local_images(path) == [path.resolve()]

    def test_unsupported_file_raises(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hi")
        with pytest.raises(ValueError, match="not a supported image"):
            scan_local_images(path)

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(ValueError, match="not a valid file or directory"):
            scan_local_images(tmp_path / "missing")
