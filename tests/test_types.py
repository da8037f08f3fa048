"""Tests for core types and parameter validation."""
import dataclasses

import numpy as np
import pytest

from quixelart.types import (
    InvalidImageError,
    InvalidParamsError,
    LevelsParams,
    ModulateParams,
    PixelizationError,
    PixelizationParams,
    RasterImage,
)


class TestRasterImage:
    """Test cases for RasterImage."""

    def test_dimensions(self):
        image = RasterImage(np.zeros((3, 5, 3), dtype=np.uint8))

        assert image.width == 5
        assert image.height == 3
        assert image.size == (5, 3)
        assert image.channels == 3
        assert not image.has_alpha
        assert image.alpha is None

    def test_rgba(self):
        image = RasterImage(np.zeros((2, 2, 4), dtype=np.uint8))

        assert image.has_alpha
        assert image.color.shape == (2, 2, 3)
        assert image.alpha.shape == (2, 2)

    @pytest.mark.parametrize("shape", [(0, 4, 3), (4, 0, 3), (0, 0, 4)])
    def test_zero_size_rejected(self, shape):
        with pytest.raises(InvalidImageError):
            RasterImage(np.zeros(shape, dtype=np.uint8))

    def test_bad_channel_count(self):
        with pytest.raises(InvalidImageError, match="3 or 4 channels"):
            RasterImage(np.zeros((2, 2, 2), dtype=np.uint8))

    def test_bad_dtype(self):
        with pytest.raises(InvalidImageError, match="uint8"):
            RasterImage(np.zeros((2, 2, 3), dtype=np.float32))

    def test_bad_ndim(self):
        with pytest.raises(InvalidImageError):
            RasterImage(np.zeros((2, 2), dtype=np.uint8))

    def test_invalid_image_is_pixelization_error(self):
        with pytest.raises(PixelizationError):
            RasterImage(np.zeros((0, 0, 3), dtype=np.uint8))

    def test_buffer_is_copied_and_read_only(self):
        source = np.zeros((2, 2, 3), dtype=np.uint8)
        image = RasterImage(source)

        source[0, 0] = [9, 9, 9]
        assert image.pixels[0, 0].tolist() == [0, 0, 0]

        with pytest.raises(ValueError):
            image.pixels[0, 0] = [1, 1, 1]

    def test_with_color_keeps_alpha(self):
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        pixels[..., 3] = [[10, 20], [30, 40]]
        image = RasterImage(pixels)

        recolored = image.with_color(np.full((2, 2, 3), 300.4))

        assert recolored.color.tolist() == [[[255] * 3] * 2] * 2
        np.testing.assert_array_equal(recolored.alpha, pixels[..., 3])

    def test_equality(self):
        a = RasterImage(np.full((2, 2, 3), 7, dtype=np.uint8))
        b = RasterImage(np.full((2, 2, 3), 7, dtype=np.uint8))
        c = RasterImage(np.full((2, 2, 3), 8, dtype=np.uint8))

        assert a == b
        assert a != c

    def test_distinct_colors_ignores_alpha(self):
        pixels = np.zeros((1, 2, 4), dtype=np.uint8)
        pixels[0, 0, 3] = 0
        pixels[0, 1, 3] = 255

        assert RasterImage(pixels).distinct_colors() == 1


class TestParams:
    """Test cases for parameter value objects."""

    def test_defaults(self):
        params = PixelizationParams.default()

        assert params.pixelize == 80
        assert params.kcolors == 32
        assert params.levels == LevelsParams(10, 80)
        assert params.modulate is None

    @pytest.mark.parametrize("pixelize", [-1, 100])
    def test_pixelize_range(self, pixelize):
        with pytest.raises(InvalidParamsError):
            PixelizationParams(pixelize=pixelize)

    @pytest.mark.parametrize("kcolors", [0, 65])
    def test_kcolors_range(self, kcolors):
        with pytest.raises(InvalidParamsError):
            PixelizationParams(kcolors=kcolors)

    def test_params_error_is_value_error(self):
        with pytest.raises(ValueError):
            PixelizationParams(kcolors=0)

    def test_non_integer_rejected(self):
        with pytest.raises(InvalidParamsError):
            PixelizationParams(pixelize=12.5)

    def test_inverted_levels_allowed(self):
        levels = LevelsParams(black=90, white=10)
        assert levels.black > levels.white

    def test_equal_levels_allowed(self):
        levels = LevelsParams(black=50, white=50)
        assert levels.black == levels.white

    @pytest.mark.parametrize("black, white", [(-1, 50), (50, 101)])
    def test_levels_range(self, black, white):
        with pytest.raises(InvalidParamsError):
            LevelsParams(black, white)

    @pytest.mark.parametrize("values", [(201, 100, 100), (100, -1, 100), (100, 100, 250)])
    def test_modulate_range(self, values):
        with pytest.raises(InvalidParamsError):
            ModulateParams(*values)

    def test_modulate_identity(self):
        assert ModulateParams().is_identity
        assert not ModulateParams(hue=150).is_identity

    def test_frozen(self):
        params = PixelizationParams()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.kcolors = 5

    def test_wrong_levels_type(self):
        with pytest.raises(InvalidParamsError):
            PixelizationParams(levels=(10, 80))
