"""Tests for center-of-mass alignment."""

import numpy as np
import pytest

from digitprep import center_by_mass, compute_centroid, shift_image


class TestComputeCentroid:

    def test_symmetric_square_is_at_canvas_center(self):
        canvas = np.zeros((28, 28), dtype=np.float32)
        canvas[10:18, 10:18] = 1.0
        centroid = compute_centroid(canvas)
        assert centroid.cx == pytest.approx(13.5)
        assert centroid.cy == pytest.approx(13.5)
        assert centroid.mass == 64.0

    def test_intensity_weighting(self):
        img = np.zeros((1, 5), dtype=np.float32)
        img[0, 0] = 1.0
        img[0, 4] = 3.0
        assert compute_centroid(img).cx == pytest.approx(3.0)

    def test_empty_image_has_zero_mass(self):
        centroid = compute_centroid(np.zeros((28, 28), dtype=np.float32))
        assert centroid.mass == 0.0
        assert (centroid.cx, centroid.cy) == (14.0, 14.0)

    def test_non_2d_raises(self):
        with pytest.raises(ValueError, match="2D"):
            compute_centroid(np.zeros(5))


class TestShiftImage:

    def test_shift_right_and_down(self):
        img = np.zeros((5, 5), dtype=np.float32)
        img[1, 1] = 1.0
        out = shift_image(img, 2, 1)
        assert out[2, 3] == 1.0
        assert out.sum() == 1.0

    def test_pixels_shifted_off_canvas_vanish(self):
        img = np.zeros((5, 5), dtype=np.float32)
        img[0, 4] = 1.0
        img[2, 2] = 1.0
        out = shift_image(img, 1, 0)
        assert out.sum() == 1.0
        assert out[2, 3] == 1.0
        # No wraparound into column 0
        assert out[0, 0] == 0.0

    def test_shift_beyond_size_empties_image(self):
        img = np.ones((4, 4), dtype=np.float32)
        assert shift_image(img, -10, 0).sum() == 0.0
        assert shift_image(img, 0, 4).sum() == 0.0

    def test_does_not_mutate_input(self):
        img = np.eye(4, dtype=np.float32)
        before = img.copy()
        shift_image(img, 1, 1)
        assert np.array_equal(img, before)


class TestCenterByMass:

    def test_moves_off_center_blob_to_center(self):
        canvas = np.zeros((28, 28), dtype=np.float32)
        canvas[2:4, 2:4] = 1.0
        out, (dx, dy) = center_by_mass(canvas)
        assert (dx, dy) == (12, 12)
        centroid = compute_centroid(out)
        assert centroid.cx == pytest.approx(14.5)
        assert centroid.cy == pytest.approx(14.5)

    def test_half_pixel_offset_rounds_up(self):
        canvas = np.zeros((28, 28), dtype=np.float32)
        canvas[4:24, 4:24] = 1.0
        _, shift = center_by_mass(canvas)
        # centroid 13.5 -> round(14 - 13.5) = round(0.5) = 1
        assert shift == (1, 1)

    def test_empty_canvas_unchanged(self):
        canvas = np.zeros((28, 28), dtype=np.float32)
        out, shift = center_by_mass(canvas)
        assert shift == (0, 0)
        assert np.array_equal(out, canvas)
        assert out is not canvas

    def test_mass_is_preserved_when_content_fits(self):
        canvas = np.zeros((28, 28), dtype=np.float32)
        canvas[5:9, 18:22] = 0.5
        out, _ = center_by_mass(canvas)
        assert out.sum() == pytest.approx(canvas.sum())
