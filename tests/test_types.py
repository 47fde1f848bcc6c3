"""Tests for the typed pipeline containers."""

import numpy as np
import pytest

from digitprep import (
    BinaryMask,
    DebugTrace,
    GrayscaleImage,
    Kernel,
    NormalizedImage,
    PixelBuffer,
    RegionOfInterest,
)


class TestPixelBuffer:
    """Tests for PixelBuffer shape checking."""

    def test_accepts_exact_length(self):
        buf = PixelBuffer(bytes(2 * 3 * 4), 2, 3)
        assert len(buf) == 24
        assert buf.as_array().shape == (3, 2, 4)

    def test_wrong_length_raises_descriptive_error(self):
        with pytest.raises(ValueError, match="expected 24"):
            PixelBuffer(bytes(23), 2, 3)

    def test_non_positive_dimensions_raise(self):
        with pytest.raises(ValueError, match="positive"):
            PixelBuffer(b"", 0, 3)

    def test_float_dimension_raises(self):
        with pytest.raises(TypeError, match="width must be int"):
            PixelBuffer(bytes(4), 1.0, 1)

    def test_list_data_raises(self):
        with pytest.raises(TypeError, match="bytes-like"):
            PixelBuffer([0, 0, 0, 0], 1, 1)

    def test_bytearray_is_copied(self):
        raw = bytearray(4)
        buf = PixelBuffer(raw, 1, 1)
        raw[0] = 255
        assert buf.as_array()[0, 0, 0] == 0

    def test_from_array(self):
        rgba = np.zeros((5, 7, 4), dtype=np.uint8)
        rgba[1, 2] = (10, 20, 30, 255)
        buf = PixelBuffer.from_array(rgba)
        assert (buf.width, buf.height) == (7, 5)
        assert tuple(buf.as_array()[1, 2]) == (10, 20, 30, 255)

    def test_from_array_rejects_rgb(self):
        with pytest.raises(ValueError, match="RGBA"):
            PixelBuffer.from_array(np.zeros((5, 7, 3), dtype=np.uint8))

    def test_array_view_is_read_only(self):
        buf = PixelBuffer(bytes(4), 1, 1)
        with pytest.raises(ValueError):
            buf.as_array()[0, 0, 0] = 1


class TestGrayscaleImage:

    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError, match=r"\[0, 1\]"):
            GrayscaleImage(np.full((2, 2), 1.5, dtype=np.float32))

    def test_rejects_1d(self):
        with pytest.raises(ValueError, match="2D"):
            GrayscaleImage(np.zeros(4, dtype=np.float32))

    def test_dimensions(self):
        gray = GrayscaleImage(np.zeros((3, 5), dtype=np.float32))
        assert (gray.width, gray.height) == (5, 3)


class TestBinaryMask:

    def test_rejects_non_binary_values(self):
        with pytest.raises(ValueError, match="0 or 1"):
            BinaryMask(np.array([[0, 2]], dtype=np.uint8))

    def test_count(self):
        mask = BinaryMask(np.array([[0, 1], [1, 1]], dtype=np.uint8))
        assert mask.count() == 3


class TestRegionOfInterest:

    def test_full_covers_image(self):
        roi = RegionOfInterest.full(280, 140)
        assert roi.as_tuple() == (0, 0, 279, 139)
        assert (roi.width, roi.height) == (280, 140)

    def test_inclusive_size(self):
        roi = RegionOfInterest(10, 10, 13, 13)
        assert (roi.width, roi.height) == (4, 4)

    def test_inverted_corners_raise(self):
        with pytest.raises(ValueError, match="Degenerate"):
            RegionOfInterest(5, 0, 4, 0)

    def test_negative_origin_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            RegionOfInterest(-1, 0, 4, 0)

    def test_validate_within(self):
        roi = RegionOfInterest(0, 0, 10, 10)
        roi.validate_within(11, 11)
        with pytest.raises(ValueError, match="exceeds"):
            roi.validate_within(10, 11)

    def test_crop_returns_copy(self):
        img = np.arange(25, dtype=np.float32).reshape(5, 5)
        crop = RegionOfInterest(1, 2, 3, 3).crop(img)
        assert crop.shape == (2, 3)
        assert crop[0, 0] == img[2, 1]
        crop[0, 0] = -1
        assert img[2, 1] != -1


class TestKernel:

    def test_even_length_raises(self):
        with pytest.raises(ValueError, match="odd-length"):
            Kernel(np.array([0.5, 0.5]))

    def test_must_sum_to_one(self):
        with pytest.raises(ValueError, match="sum to 1"):
            Kernel(np.array([1.0, 1.0, 1.0]))

    def test_radius(self):
        assert Kernel(np.array([0.25, 0.5, 0.25])).radius == 1


class TestNormalizedImage:

    def test_wrong_shape_raises(self):
        with pytest.raises(ValueError, match="shape"):
            NormalizedImage(np.zeros((28, 27), dtype=np.float32))

    def test_nan_raises(self):
        pixels = np.zeros((28, 28), dtype=np.float32)
        pixels[0, 0] = np.nan
        with pytest.raises(ValueError, match="NaN"):
            NormalizedImage(pixels)

    def test_vector_is_row_major(self):
        pixels = np.zeros((28, 28), dtype=np.float32)
        pixels[1, 0] = 1.0
        vector = NormalizedImage(pixels).as_vector()
        assert vector.shape == (784,)
        assert vector.dtype == np.float32
        assert vector[28] == 1.0

    def test_model_input_shape(self):
        image = NormalizedImage(np.zeros((28, 28), dtype=np.float32))
        assert image.as_model_input().shape == (1, 784)


class TestDebugTrace:

    def test_exact_format(self):
        trace = DebugTrace(
            threshold=0.12345,
            invert=True,
            roi=RegionOfInterest(10, 11, 13, 15),
            width=4,
            height=5,
            scale=4.0,
        )
        assert str(trace) == "th=0.123 invert=true roi=[10,11..13,15] w×h=4×5 scale=4.000"

    def test_false_is_lowercase(self):
        trace = DebugTrace(0.0, False, RegionOfInterest(0, 0, 0, 0), 1, 1, 20.0)
        assert "invert=false" in str(trace)

    def test_exact_ties_round_up(self):
        # 20 / 64 = 0.3125 exactly
        trace = DebugTrace(0.0, False, RegionOfInterest(0, 0, 63, 63), 64, 64, 20 / 64)
        assert str(trace).endswith("scale=0.313")
