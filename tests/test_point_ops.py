"""
Tests for in-place pixel transformations.
"""

import numpy as np
import pytest

from graymap import ContractViolation, PixelBuffer, brighten, negative, threshold


class TestNegative:
    """Tests for negative()."""

    def test_uses_image_maxval(self, make_image):
        img = make_image([[0, 10, 100]], maxval=100)
        negative(img)
        assert img.pixels.tolist() == [[100, 90, 0]]

    def test_involution(self, noisy):
        original = noisy.copy()
        negative(noisy)
        assert noisy != original
        negative(noisy)
        assert noisy == original

    def test_shape_and_maxval_preserved(self, gradient):
        negative(gradient)
        assert (gradient.width, gradient.height, gradient.maxval) == (7, 5, 100)

    def test_empty_image(self):
        img = PixelBuffer.create(0, 0)
        negative(img)
        assert img.size == 0


class TestThreshold:
    """Tests for threshold()."""

    def test_below_threshold_black_rest_white(self, make_image):
        img = make_image([[0, 49, 50, 51, 80]], maxval=80)
        threshold(img, 50)
        assert img.pixels.tolist() == [[0, 0, 80, 80, 80]]

    def test_only_two_levels_remain(self, noisy):
        threshold(noisy, 120)
        assert set(np.unique(noisy.pixels)) <= {0, noisy.maxval}

    def test_zero_threshold_makes_everything_white(self, gradient):
        threshold(gradient, 0)
        assert np.all(gradient.pixels == 100)

    def test_threshold_above_range_makes_everything_black(self, gradient):
        threshold(gradient, 1000)
        assert not gradient.pixels.any()

    def test_fractional_threshold_rounds_up(self, make_image):
        img = make_image([[127, 128]], maxval=255)
        threshold(img, 127.5)
        assert img.pixels.tolist() == [[0, 255]]

    def test_infinite_threshold_makes_everything_black(self, gradient):
        threshold(gradient, float("inf"))
        assert not gradient.pixels.any()

    def test_nan_threshold_raises(self, gradient):
        with pytest.raises(ContractViolation):
            threshold(gradient, float("nan"))


class TestBrighten:
    """Tests for brighten()."""

    def test_identity(self, noisy):
        original = noisy.copy()
        brighten(noisy, 1.0)
        assert noisy == original

    def test_saturates_at_maxval(self, make_image):
        img = make_image([[10, 60, 90]], maxval=100)
        brighten(img, 2.0)
        assert img.pixels.tolist() == [[20, 100, 100]]

    def test_rounds_to_nearest(self, make_image):
        img = make_image([[1, 3, 5, 7]], maxval=255)
        brighten(img, 0.5)
        # 0.5 -> 1, 1.5 -> 2, 2.5 -> 3, 3.5 -> 4
        assert img.pixels.tolist() == [[1, 2, 3, 4]]

    def test_darkening(self, make_image):
        img = make_image([[200, 100]], maxval=255)
        brighten(img, 0.3)
        assert img.pixels.tolist() == [[60, 30]]

    def test_zero_factor_is_black(self, gradient):
        brighten(gradient, 0.0)
        assert not gradient.pixels.any()

    @pytest.mark.parametrize("factor", [float("inf"), float("nan")])
    def test_non_finite_factor_raises(self, gradient, factor):
        before = gradient.pixels.copy()
        with pytest.raises(ContractViolation, match="finite"):
            brighten(gradient, factor)
        assert np.array_equal(gradient.pixels, before)

    def test_negative_factor_raises_without_mutation(self, gradient):
        before = gradient.pixels.copy()
        with pytest.raises(ContractViolation, match="non-negative"):
            brighten(gradient, -0.5)
        assert np.array_equal(gradient.pixels, before)
